"""resized_image template function plugin."""

from .schema import FitMode, ResizeRequest, ReturnMode
from .task import ResizedImageFunction, render_resized_image

__all__ = [
    "FitMode",
    "ResizeRequest",
    "ResizedImageFunction",
    "ReturnMode",
    "render_resized_image",
]
