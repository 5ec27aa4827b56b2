"""Turn an image URI into a base64 payload for the vision model."""

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx
from PIL import Image, UnidentifiedImageError

from ..config import Settings
from .errors import ImageEncodingError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".heic": "image/heic",
}


def detect_mime_type(data: bytes, filename: Optional[str] = None) -> str:
    """Detect the MIME type from image bytes, then the file suffix."""
    try:
        with Image.open(BytesIO(data)) as img:
            mime_type = Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        mime_type = None

    if mime_type:
        return mime_type
    if filename:
        return MIME_TYPES.get(Path(filename).suffix.lower(), DEFAULT_MIME_TYPE)
    return DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class EncodedImage:
    """Base64 image payload ready to send inline."""

    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    @classmethod
    def from_bytes(
        cls,
        raw: bytes,
        mime_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> "EncodedImage":
        if not raw:
            raise ImageEncodingError("Image is empty")
        return cls(
            data=base64.b64encode(raw).decode("ascii"),
            mime_type=mime_type or detect_mime_type(raw, filename),
        )

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)


def is_remote(uri: str) -> bool:
    return uri.lower().startswith(("http://", "https://"))


def _write_file(target: Path, content: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)


class ImageEncoder:
    """Read local, remote or data URIs into base64."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    async def encode(self, uri: str) -> EncodedImage:
        """
        Encode the image behind a URI.

        Args:
            uri: http(s) URL, file:// URI, data: URI or plain filesystem path

        Returns:
            EncodedImage with base64 data and detected MIME type

        Raises:
            ImageEncodingError: the image could not be downloaded or read
        """
        if not uri:
            raise ImageEncodingError("No image URI given")

        if uri.startswith("data:"):
            return self._decode_data_uri(uri)

        if is_remote(uri):
            path = await self._download(uri)
        else:
            path = self._local_path(uri)

        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ImageEncodingError(f"Could not read image {path}: {e}") from e

        return EncodedImage.from_bytes(raw, filename=path.name)

    async def _download(self, url: str) -> Path:
        """Download a remote image to the staging path, replacing any prior file."""
        target = Path(self.settings.temp_image_path)
        logger.debug("Downloading remote image to %s", target)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.download_timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise ImageEncodingError(f"Could not download image: {e}") from e

        try:
            await asyncio.to_thread(_write_file, target, response.content)
        except OSError as e:
            raise ImageEncodingError(f"Could not stage image at {target}: {e}") from e

        return target

    @staticmethod
    def _local_path(uri: str) -> Path:
        if not uri.startswith("file://"):
            return Path(uri)

        parsed = urlparse(uri)
        # file://name.jpg puts a relative name in the host slot
        if parsed.netloc and parsed.netloc != "localhost":
            return Path(unquote(parsed.netloc + parsed.path))
        return Path(unquote(parsed.path))

    @staticmethod
    def _decode_data_uri(uri: str) -> EncodedImage:
        header, _, payload = uri.partition(",")
        if not payload or ";base64" not in header:
            raise ImageEncodingError("Only base64 data URIs are supported")

        mime_type = header[len("data:"):].split(";")[0] or None
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageEncodingError(f"Invalid base64 image data: {e}") from e

        return EncodedImage.from_bytes(raw, mime_type=mime_type)
