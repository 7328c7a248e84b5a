"""Submission endpoints for the authoring session."""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse, RedirectResponse

from backend.tripdesk.api.auth import get_current_context
from backend.tripdesk.api.deps import get_idempotency, get_workflow
from backend.tripdesk.config import Settings, get_settings
from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.errors import DocumentNotReady
from backend.tripdesk.middleware.idempotency import IdempotencyMiddleware
from backend.tripdesk.models.common import SubmissionStatus, WireModel
from backend.tripdesk.models.draft import SubmissionPayload
from backend.tripdesk.models.submission import Submission
from backend.tripdesk.workflow.service import SubmissionWorkflow

router = APIRouter(prefix="/api/submissions", tags=["submissions"])


class SubmitRequest(WireModel):
    """Request body for POST /api/submissions."""

    data: SubmissionPayload


@router.post("", response_model=Submission, status_code=status.HTTP_201_CREATED)
async def submit(
    request: SubmitRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    workflow: Annotated[SubmissionWorkflow, Depends(get_workflow)],
    idempotency: Annotated[IdempotencyMiddleware, Depends(get_idempotency)],
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key")] = None,
) -> JSONResponse:
    """Create a pending submission.

    A request repeated with the same ``Idempotency-Key`` replays the first
    response instead of creating another submission.
    """

    async def handler() -> tuple[int, dict[str, Any]]:
        submission = await workflow.submit(ctx, request.data)
        return (status.HTTP_201_CREATED, submission.model_dump(mode="json", by_alias=True))

    status_code, body, headers = await idempotency.run(handler, ctx.user_id, idempotency_key)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@router.get("/mine", response_model=list[Submission])
async def list_mine(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    workflow: Annotated[SubmissionWorkflow, Depends(get_workflow)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> list[Submission]:
    """Caller's submissions, newest first."""
    return await workflow.list_mine(ctx, limit=settings.submissions_list_limit)


@router.get("/{submission_id}", response_model=Submission)
async def get_submission(
    submission_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    workflow: Annotated[SubmissionWorkflow, Depends(get_workflow)],
) -> Submission:
    """One submission, visible to its owner and to admins."""
    return await workflow.get(ctx, submission_id)


@router.get("/{submission_id}/document", response_class=RedirectResponse)
async def download_document(
    submission_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    workflow: Annotated[SubmissionWorkflow, Depends(get_workflow)],
) -> RedirectResponse:
    """Redirect to the generated document.

    Raises:
        DocumentNotReady: If the submission is not approved or its document
            is still pending (409)
    """
    submission = await workflow.get(ctx, submission_id)

    if submission.status is not SubmissionStatus.approved:
        raise DocumentNotReady("Only approved submissions have a document")
    if submission.document_url is None:
        raise DocumentNotReady("Document is still being generated")

    return RedirectResponse(
        submission.document_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT
    )
