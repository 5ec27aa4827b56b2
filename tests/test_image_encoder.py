"""Tests for loading and encoding outfit images."""

import asyncio
import base64
from io import BytesIO
from pathlib import Path

import httpx
import pytest
from PIL import Image

from outfit_advisor.config import Settings
from outfit_advisor.core.errors import ImageEncodingError
from outfit_advisor.core.image_encoder import EncodedImage, ImageEncoder, detect_mime_type


def _png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (4, 4), color=(200, 10, 10)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_encode_local_path(settings: Settings, jpeg_file: Path) -> None:
    encoded = asyncio.run(ImageEncoder(settings).encode(str(jpeg_file)))

    assert encoded.mime_type == "image/jpeg"
    assert base64.b64decode(encoded.data) == jpeg_file.read_bytes()


def test_encode_file_uri(settings: Settings, jpeg_file: Path) -> None:
    encoded = asyncio.run(ImageEncoder(settings).encode(f"file://{jpeg_file}"))
    assert encoded.to_bytes() == jpeg_file.read_bytes()


def test_encode_percent_encoded_file_uri(settings: Settings, jpeg_file: Path, tmp_path: Path) -> None:
    spaced = tmp_path / "my look.jpg"
    spaced.write_bytes(jpeg_file.read_bytes())

    encoded = asyncio.run(ImageEncoder(settings).encode(spaced.as_uri()))

    assert "%20" in spaced.as_uri()
    assert encoded.to_bytes() == jpeg_file.read_bytes()


def test_file_reads_run_in_a_worker_thread(
    settings: Settings, jpeg_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    offloaded = []
    real_to_thread = asyncio.to_thread

    async def recording_to_thread(func, /, *args, **kwargs):
        offloaded.append(func.__name__)
        return await real_to_thread(func, *args, **kwargs)

    monkeypatch.setattr(asyncio, "to_thread", recording_to_thread)
    asyncio.run(ImageEncoder(settings).encode(str(jpeg_file)))

    assert offloaded == ["read_bytes"]


def test_missing_file_raises_io_error(settings: Settings, tmp_path: Path) -> None:
    encoder = ImageEncoder(settings)
    with pytest.raises(ImageEncodingError) as excinfo:
        asyncio.run(encoder.encode(str(tmp_path / "missing.jpg")))
    assert isinstance(excinfo.value, OSError)


def test_remote_image_is_staged_then_read(settings: Settings) -> None:
    png = _png_bytes()
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, content=png, headers={"content-type": "image/png"})

    settings.temp_image_path.parent.mkdir(parents=True)
    settings.temp_image_path.write_bytes(b"previous download")

    encoder = ImageEncoder(settings, transport=httpx.MockTransport(handler))
    encoded = asyncio.run(encoder.encode("https://example.com/look.png"))

    assert requested == ["https://example.com/look.png"]
    assert settings.temp_image_path.read_bytes() == png
    assert encoded.mime_type == "image/png"
    assert encoded.to_bytes() == png


def test_remote_download_failure(settings: Settings) -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(404))
    encoder = ImageEncoder(settings, transport=transport)

    with pytest.raises(ImageEncodingError):
        asyncio.run(encoder.encode("http://example.com/gone.jpg"))


def test_data_uri(settings: Settings) -> None:
    png = _png_bytes()
    uri = "data:image/png;base64," + base64.b64encode(png).decode()

    encoded = asyncio.run(ImageEncoder(settings).encode(uri))
    assert encoded.mime_type == "image/png"
    assert encoded.to_bytes() == png


def test_invalid_data_uri(settings: Settings) -> None:
    with pytest.raises(ImageEncodingError):
        asyncio.run(ImageEncoder(settings).encode("data:image/png;base64,not base64!"))


def test_mime_type_falls_back_to_suffix() -> None:
    assert detect_mime_type(b"not an image", "look.webp") == "image/webp"
    assert detect_mime_type(b"not an image") == "image/jpeg"
    assert detect_mime_type(_png_bytes(), "wrong.jpg") == "image/png"


def test_empty_upload_rejected() -> None:
    with pytest.raises(ImageEncodingError):
        EncodedImage.from_bytes(b"")
