"""FastAPI application."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.tripdesk.api.routes.admin import router as admin_router
from backend.tripdesk.api.routes.health import router as health_router
from backend.tripdesk.api.routes.images import router as images_router
from backend.tripdesk.api.routes.metrics import router as metrics_router
from backend.tripdesk.api.routes.schema import router as schema_router
from backend.tripdesk.api.routes.submissions import router as submissions_router
from backend.tripdesk.config import get_settings
from backend.tripdesk.errors import TripDeskError
from backend.tripdesk.utils.logging import configure_logging

configure_logging(get_settings().log_level)

app = FastAPI(title="TripDesk API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(schema_router)
app.include_router(submissions_router)
app.include_router(admin_router)
app.include_router(images_router)


@app.exception_handler(TripDeskError)
async def tripdesk_error_handler(request: Request, exc: TripDeskError) -> JSONResponse:
    """Domain errors become ``{"error": message}`` with their status code."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies and parameters (422)."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=422, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework errors (401, 404 routes, 405) in the same envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "TripDesk API", "version": "0.1.0"}
