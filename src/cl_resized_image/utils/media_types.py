import re
from enum import StrEnum

from PIL import Image

DATA_URI_PREFIX = "data:"

_absolute_url_pattern = re.compile(
    r"^[a-zA-Z][a-zA-Z0-9+.\-]*:\/\/(?:[a-zA-Z0-9\-._~:/?#[\]@!$&\'()*+,;=]|%[0-9a-fA-F][0-9a-fA-F])+$"
)


class SourceKind(StrEnum):
    DATA_URI = "data_uri"
    URL = "url"
    FILE = "file"

    @classmethod
    def from_source(cls, source: str) -> "SourceKind":
        if is_data_uri(source):
            return SourceKind.DATA_URI
        elif is_absolute_url(source):
            return SourceKind.URL
        else:
            return SourceKind.FILE


def is_data_uri(text: str) -> bool:
    return text.startswith(DATA_URI_PREFIX)


def is_absolute_url(text: str) -> bool:
    """True for a single-line ``scheme://host...`` string."""
    if "\n" in text or "\r" in text:
        return False

    match = _absolute_url_pattern.match(text.strip())
    if not match:
        return False

    # scheme:// followed by at least a host
    authority = text.strip().split("://", 1)[1]
    return bool(authority) and not authority.startswith("/")


def is_http_url(text: str) -> bool:
    return is_absolute_url(text) and text.strip().lower().startswith(("http://", "https://"))


def mime_for_format(image_format: str) -> str:
    # MIME table is filled as Pillow plugins register
    Image.init()
    mime = Image.MIME.get(image_format.upper())
    if mime:
        return mime
    return f"image/{image_format.lower()}"


def get_pil_format(format_str: str) -> str:
    """Convert format string to PIL format name."""
    format_map = {
        "jpg": "JPEG",
        "jpeg": "JPEG",
        "png": "PNG",
        "webp": "WEBP",
        "gif": "GIF",
        "bmp": "BMP",
        "tiff": "TIFF",
    }
    return format_map.get(format_str.lower(), format_str.upper())
