"""Form schema endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.tripdesk.adapters.schema_source import SchemaSource
from backend.tripdesk.api.deps import get_schema_source
from backend.tripdesk.models.common import DraftVariant
from backend.tripdesk.models.schema import FormSchema

router = APIRouter(prefix="/api/schema", tags=["schema"])


@router.get("/{variant}", response_model=FormSchema)
async def get_schema(
    variant: DraftVariant,
    source: Annotated[SchemaSource, Depends(get_schema_source)],
) -> FormSchema:
    """Form schema for a draft variant.

    Returns:
        Field descriptors plus catalog metadata

    Raises:
        SchemaUnavailable: If the source cannot supply it (503)
    """
    return await source.load_schema(variant)
