"""Image upload collaborator.

Drafts never hold image bytes: an upload is forwarded to the image store and
only the URL it answers with is kept on the day, hotel night or cover.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Protocol

import httpx

from backend.tripdesk.errors import ImageUploadFailed, InvalidImage

DATA_URL_PATTERN = re.compile(r"^data:(image/[a-zA-Z0-9.+-]+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class DecodedImage:
    """Validated upload."""

    media_type: str
    content: bytes


def decode_image_data_url(data_url: str, max_bytes: int) -> DecodedImage:
    """Validate a ``data:image/...;base64,...`` string.

    Raises:
        InvalidImage: If it is not a base64 image or exceeds ``max_bytes``
    """
    match = DATA_URL_PATTERN.match(data_url.strip())
    if match is None:
        raise InvalidImage("Please select an image file")

    try:
        content = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImage("Image data is not valid base64") from e

    if len(content) > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise InvalidImage(f"Image size should be less than {limit_mb}MB")

    return DecodedImage(media_type=match.group(1), content=content)


class ImageStore(Protocol):
    """Stores an image and returns its public URL."""

    async def store(self, image: DecodedImage) -> str:
        """Store the image.

        Raises:
            ImageUploadFailed: If the store refuses or is unreachable
        """
        ...


class HttpImageStore:
    """Forwards uploads to an image hosting endpoint answering ``{url}``."""

    def __init__(
        self,
        upload_url: str,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._upload_url = upload_url
        self._timeout_s = timeout_s
        self._client = client

    async def store(self, image: DecodedImage) -> str:
        """Upload and return the hosted URL."""
        encoded = base64.b64encode(image.content).decode("ascii")

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_s)
            close_client = True

        try:
            response = await client.post(
                self._upload_url,
                json={"image": f"data:{image.media_type};base64,{encoded}"},
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ImageUploadFailed("Failed to upload image") from e
        finally:
            if close_client:
                await client.aclose()

        url = body.get("url") if isinstance(body, dict) else None
        if not isinstance(url, str) or not url:
            raise ImageUploadFailed("Image store returned no url")
        return url


class UnavailableImageStore:
    """Stands in when no image store is configured; every upload fails."""

    async def store(self, image: DecodedImage) -> str:
        raise ImageUploadFailed("Image upload is not configured")
