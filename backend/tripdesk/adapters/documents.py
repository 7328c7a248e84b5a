"""Document renderer collaborator.

The renderer turns an approved submission into a downloadable document and
answers with its location. The core never inspects the document itself.
"""

from typing import Protocol

import httpx

from backend.tripdesk.errors import DocumentGenerationFailed
from backend.tripdesk.models.submission import Submission


class DocumentGenerator(Protocol):
    """Produces a document for an approved submission."""

    async def render(self, submission: Submission) -> str:
        """Render the document.

        Returns:
            Opaque fetchable URL of the document

        Raises:
            DocumentGenerationFailed: If no document could be produced
        """
        ...


class HttpDocumentGenerator:
    """Posts the submission to a rendering service."""

    def __init__(
        self,
        renderer_url: str,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            renderer_url: Endpoint accepting ``POST`` of a submission
            timeout_s: Request timeout when no client is supplied
            client: Optional httpx client (for testing with mocks)
        """
        self._renderer_url = renderer_url
        self._timeout_s = timeout_s
        self._client = client

    async def render(self, submission: Submission) -> str:
        """Request a document and return its URL."""
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_s)
            close_client = True

        try:
            response = await client.post(
                self._renderer_url,
                json=submission.model_dump(mode="json", by_alias=True),
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise DocumentGenerationFailed(
                f"Document generation failed: {type(e).__name__}"
            ) from e
        finally:
            if close_client:
                await client.aclose()

        url = body.get("url") if isinstance(body, dict) else None
        if not isinstance(url, str) or not url:
            raise DocumentGenerationFailed("Document renderer returned no url")
        return url


class UnavailableDocumentGenerator:
    """Stands in when no renderer is configured; every render fails."""

    async def render(self, submission: Submission) -> str:
        raise DocumentGenerationFailed("Document renderer is not configured")
