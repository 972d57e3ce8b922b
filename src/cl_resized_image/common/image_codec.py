"""ImageCodec Protocol and the default Pillow-backed implementation."""

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Protocol, runtime_checkable

from typing_extensions import override
from urllib.parse import unquote_to_bytes

import httpx
from loguru import logger
from PIL import Image, ImageOps

from ..utils.media_types import SourceKind, get_pil_format, is_http_url, mime_for_format
from ..utils.profiling import timed
from .errors import ImageDecodeFailureError

_PNG_MODES = ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA")


@dataclass(frozen=True)
class DecodedImage:
    """A decoded source image together with the format it was stored in."""

    image: Image.Image
    format: str | None
    source: str

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


@runtime_checkable
class ImageCodec(Protocol):
    """Protocol for reading sources into pixels and writing data URIs."""

    def decode(self, source: str) -> DecodedImage:
        """Read a filesystem path, http(s) URL or data URI.

        Raises:
            ImageDecodeFailureError: If the source cannot be read or decoded
        """
        ...

    def encode_data_uri(self, image: Image.Image, image_format: str | None = None) -> str:
        """Encode image as ``data:<mime>;base64,<payload>``."""
        ...


class PillowImageCodec(ImageCodec):
    """Pillow codec; http(s) sources are fetched with httpx."""

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        http_timeout: float = 30.0,
        default_format: str = "PNG",
        jpeg_quality: int | None = None,
    ):
        self._http_client: httpx.Client | None = http_client
        self._http_timeout: float = http_timeout
        self.default_format: str = get_pil_format(default_format)
        self.jpeg_quality: int | None = jpeg_quality

    @override
    def decode(self, source: str) -> DecodedImage:
        try:
            data = self._read_bytes(source)
            with Image.open(BytesIO(data)) as img:
                image_format = img.format
                img.load()
                # Honour EXIF orientation so width/height match what viewers show
                image = ImageOps.exif_transpose(img)
        except ImageDecodeFailureError:
            raise
        except (
            OSError,
            ValueError,
            httpx.HTTPError,
            httpx.InvalidURL,
            Image.DecompressionBombError,
        ) as exc:
            logger.warning(f"Failed to decode image {source[:80]!r}: {exc}")
            raise ImageDecodeFailureError(source, str(exc)) from exc

        return DecodedImage(image=image, format=image_format, source=source)

    def _read_bytes(self, source: str) -> bytes:
        kind = SourceKind.from_source(source)

        if kind == SourceKind.DATA_URI:
            return decode_data_uri(source)

        if kind == SourceKind.URL:
            if not is_http_url(source):
                raise ImageDecodeFailureError(source, "unsupported URL scheme")
            return self._fetch(source)

        return Path(source).read_bytes()

    def _fetch(self, url: str) -> bytes:
        logger.debug(f"Fetching image from {url}")
        if self._http_client is not None:
            response = self._http_client.get(url, follow_redirects=True)
        else:
            response = httpx.get(url, follow_redirects=True, timeout=self._http_timeout)
        _ = response.raise_for_status()
        return response.content

    @override
    @timed
    def encode_data_uri(self, image: Image.Image, image_format: str | None = None) -> str:
        fmt = get_pil_format(image_format or image.format or self.default_format)

        Image.init()
        if fmt not in Image.SAVE:
            logger.debug(f"Pillow cannot write {fmt}, falling back to {self.default_format}")
            fmt = self.default_format

        # PNG has no CMYK or YCbCr
        if fmt == "PNG" and image.mode not in _PNG_MODES:
            image = image.convert("RGBA" if "A" in image.getbands() else "RGB")

        # JPEG does not support alpha channel
        if fmt == "JPEG" and image.mode not in ("RGB", "L", "CMYK"):
            image = image.convert("RGB")

        save_kwargs: dict[str, object] = {}
        if fmt in ("JPEG", "WEBP") and self.jpeg_quality is not None:
            save_kwargs["quality"] = self.jpeg_quality

        buffer = BytesIO()
        image.save(buffer, format=fmt, **save_kwargs)
        payload = base64.b64encode(buffer.getvalue()).decode("ascii")

        return f"data:{mime_for_format(fmt)};base64,{payload}"


def decode_data_uri(uri: str) -> bytes:
    """Return the bytes embedded in a ``data:`` URI.

    Raises:
        ValueError: If the URI has no payload separator or bad base64
    """
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ValueError("malformed data URI")

    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 payload: {exc}") from exc

    return unquote_to_bytes(payload)
