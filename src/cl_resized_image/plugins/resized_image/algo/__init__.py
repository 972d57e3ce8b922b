"""Resize, render and cache-key algorithms."""

from .cache_key import derive_cache_key, serialize_request
from .image_resize import resize_image
from .render import UNKNOWN_RETURN_OUTPUT, OutputRenderer, build_html_tag

__all__ = [
    "OutputRenderer",
    "UNKNOWN_RETURN_OUTPUT",
    "build_html_tag",
    "derive_cache_key",
    "resize_image",
    "serialize_request",
]
