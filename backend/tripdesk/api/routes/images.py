"""Image upload endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from backend.tripdesk.adapters.images import ImageStore, decode_image_data_url
from backend.tripdesk.api.auth import get_current_context
from backend.tripdesk.api.deps import get_image_store
from backend.tripdesk.config import Settings, get_settings
from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.models.common import WireModel

router = APIRouter(prefix="/api/images", tags=["images"])


class ImageUploadRequest(WireModel):
    """Base64 data URL of the image."""

    image: str


class ImageUploadResponse(WireModel):
    url: str


@router.post("", response_model=ImageUploadResponse)
async def upload_image(
    request: ImageUploadRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    store: Annotated[ImageStore, Depends(get_image_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImageUploadResponse:
    """Forward an image to the image store and return its URL.

    Raises:
        InvalidImage: Not a base64 image, or over the size limit (422)
        ImageUploadFailed: The store refused or is unavailable (502)
    """
    image = decode_image_data_url(request.image, settings.max_image_bytes)
    url = await store.store(image)
    return ImageUploadResponse(url=url)
