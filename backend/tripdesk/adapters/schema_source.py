"""Schema sources - bundled fixtures or a remote schema service."""

import json
import logging
from pathlib import Path
from typing import Protocol

import httpx
from pydantic import ValidationError

from backend.tripdesk.errors import SchemaUnavailable
from backend.tripdesk.models.common import DraftVariant
from backend.tripdesk.models.schema import FormSchema

logger = logging.getLogger(__name__)

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"


class SchemaSource(Protocol):
    """Supplies the form schema for a draft variant."""

    async def load_schema(self, variant: DraftVariant) -> FormSchema:
        """Load the schema.

        Raises:
            SchemaUnavailable: If the schema cannot be supplied
        """
        ...


class FixtureSchemaSource:
    """Reads ``<variant>_schema.json`` from the fixtures directory."""

    def __init__(self, fixtures_dir: Path = FIXTURES_DIR) -> None:
        self._fixtures_dir = fixtures_dir

    async def load_schema(self, variant: DraftVariant) -> FormSchema:
        """Load and validate the bundled schema."""
        path = self._fixtures_dir / f"{variant.value}_schema.json"
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return FormSchema.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(
                "Schema fixture unusable",
                extra={"structured": {"path": str(path), "error": type(e).__name__}},
            )
            raise SchemaUnavailable("Failed to load form") from e


class HttpSchemaSource:
    """Fetches ``GET {base_url}/{variant}`` from a schema service."""

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            base_url: Schema service base URL
            timeout_s: Request timeout when no client is supplied
            client: Optional httpx client (for testing with mocks)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._client = client

    async def load_schema(self, variant: DraftVariant) -> FormSchema:
        """Fetch and validate the schema."""
        url = f"{self._base_url}/{variant.value}"

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_s)
            close_client = True

        try:
            response = await client.get(url)
            response.raise_for_status()
            return FormSchema.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers malformed JSON and pydantic ValidationError
            logger.warning(
                "Schema fetch failed",
                extra={"structured": {"url": url, "error": type(e).__name__}},
            )
            raise SchemaUnavailable("Failed to load form") from e
        finally:
            if close_client:
                await client.aclose()
