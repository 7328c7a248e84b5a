"""HTTP client for the TripDesk API.

Failure envelopes (``{"error": message}``) are turned back into the same
exception types the in-process workflow raises, so the authoring session
and the review board behave identically against either.
"""

import logging
from typing import Any
from uuid import UUID

import httpx

from backend.tripdesk.config import get_settings
from backend.tripdesk.errors import (
    DocumentNotReady,
    ImageUploadFailed,
    InvalidDecision,
    InvalidImage,
    InvalidTransition,
    PermissionDenied,
    RemoteError,
    SchemaUnavailable,
    SubmissionNotFound,
    TripDeskError,
    ValidationRejected,
)
from backend.tripdesk.models.common import DraftVariant, StatusFilter
from backend.tripdesk.models.draft import Payload
from backend.tripdesk.models.schema import FormSchema
from backend.tripdesk.models.submission import Submission, SubmissionDetail, SubmissionStats
from backend.tripdesk.workflow.state_machine import Decision, DecisionKind

logger = logging.getLogger(__name__)

ErrorMap = dict[int, type[TripDeskError]]

DEFAULT_ERRORS: ErrorMap = {
    401: PermissionDenied,
    403: PermissionDenied,
    404: SubmissionNotFound,
    409: InvalidTransition,
    422: ValidationRejected,
    503: SchemaUnavailable,
}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"HTTP {response.status_code}"


class TripDeskClient:
    """Async client playing the authoring and reviewing roles over HTTP."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout_s: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API base URL (defaults to settings.api_base_url)
            token: Bearer token identifying the session
            timeout_s: Request timeout when no client is supplied
            client: Optional httpx client (for testing with mocks)
        """
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._timeout_s = timeout_s or settings.collaborator_timeout_s
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "TripDeskClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout_s)
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        errors: ErrorMap | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and raise the mapped error on failure.

        Raises:
            RemoteError: On transport failure or an unmapped error status
            TripDeskError: The mapped subclass for known statuses
        """
        headers = {**self._headers, **kwargs.pop("headers", {})}
        url = f"{self._base_url}{path}"

        try:
            response = await self._http().request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(
                "Request failed",
                extra={"structured": {"method": method, "path": path, "error": type(e).__name__}},
            )
            raise RemoteError(f"Request failed: {type(e).__name__}") from e

        if response.status_code < 400:
            return response

        message = _error_message(response)
        error_type = {**DEFAULT_ERRORS, **(errors or {})}.get(response.status_code, RemoteError)
        raise error_type(message)

    # Schema

    async def load_schema(self, variant: DraftVariant) -> FormSchema:
        """Fetch the form schema (usable as a SchemaSource)."""
        try:
            response = await self._request("GET", f"/api/schema/{variant.value}")
            return FormSchema.model_validate(response.json())
        except SchemaUnavailable:
            raise
        except (TripDeskError, ValueError) as e:
            raise SchemaUnavailable("Failed to load form") from e

    # Authoring

    async def submit(self, payload: Payload, idempotency_key: str | None = None) -> Submission:
        """Create a pending submission."""
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else {}
        response = await self._request(
            "POST",
            "/api/submissions",
            json={"data": payload.model_dump(mode="json", by_alias=True)},
            headers=headers,
        )
        return Submission.model_validate(response.json())

    async def list_mine(self) -> list[Submission]:
        response = await self._request("GET", "/api/submissions/mine")
        return [Submission.model_validate(item) for item in response.json()]

    async def get(self, submission_id: UUID) -> Submission:
        response = await self._request("GET", f"/api/submissions/{submission_id}")
        return Submission.model_validate(response.json())

    async def document_url(self, submission_id: UUID) -> str:
        """Location of the generated document.

        Raises:
            DocumentNotReady: If not approved or still being generated
        """
        response = await self._request(
            "GET",
            f"/api/submissions/{submission_id}/document",
            errors={409: DocumentNotReady},
            follow_redirects=False,
        )
        location = response.headers.get("location")
        if not location:
            raise RemoteError("Document response carried no location")
        return location

    async def upload_image(self, data_url: str) -> str:
        """Upload a base64 data URL and return the hosted URL."""
        response = await self._request(
            "POST",
            "/api/images",
            json={"image": data_url},
            errors={422: InvalidImage, 502: ImageUploadFailed},
        )
        return str(response.json()["url"])

    # Review

    async def list_submissions(
        self,
        status_filter: StatusFilter = StatusFilter.all,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Submission]:
        params: dict[str, str | int] = {"status": status_filter.value, "offset": offset}
        if limit is not None:
            params["limit"] = limit
        response = await self._request("GET", "/api/admin/submissions", params=params)
        return [Submission.model_validate(item) for item in response.json()]

    async def get_detail(self, submission_id: UUID) -> SubmissionDetail:
        response = await self._request("GET", f"/api/admin/submissions/{submission_id}")
        return SubmissionDetail.model_validate(response.json())

    async def stats(self) -> SubmissionStats:
        response = await self._request("GET", "/api/admin/stats")
        return SubmissionStats.model_validate(response.json())

    async def decide(self, submission_id: UUID, decision: Decision) -> Submission:
        """Approve or reject a pending submission."""
        if decision.kind is DecisionKind.approve:
            response = await self._request(
                "POST", f"/api/admin/submissions/{submission_id}/approve"
            )
        else:
            response = await self._request(
                "POST",
                f"/api/admin/submissions/{submission_id}/reject",
                json={"message": decision.message or ""},
                errors={422: InvalidDecision},
            )
        return Submission.model_validate(response.json())

    async def regenerate_document(self, submission_id: UUID) -> Submission:
        response = await self._request(
            "POST",
            f"/api/admin/submissions/{submission_id}/document",
            errors={409: DocumentNotReady},
        )
        return Submission.model_validate(response.json())
