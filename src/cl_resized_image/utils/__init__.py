"""Utility helpers - source detection and profiling."""

from .media_types import SourceKind, is_absolute_url, is_data_uri, mime_for_format
from .profiling import timed

__all__ = [
    "SourceKind",
    "is_absolute_url",
    "is_data_uri",
    "mime_for_format",
    "timed",
]
