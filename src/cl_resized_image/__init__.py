"""cl_resized_image - Cached image resizing for HTML templates."""

from .common.cache import InMemoryCache, LocalFileCache, ResultCache
from .common.errors import (
    AttributeTypeMismatchError,
    EmptyAttributeError,
    ImageDecodeFailureError,
    ImageResizeFailureError,
    InvalidEnumValueError,
    MissingDimensionsError,
    MissingRequiredArgumentError,
    ResizedImageError,
)
from .common.image_codec import DecodedImage, ImageCodec, PillowImageCodec
from .config import ResizedImageSettings, get_settings
from .extension import ImageExtension
from .plugins.resized_image import (
    FitMode,
    ResizedImageFunction,
    ResizeRequest,
    ReturnMode,
    render_resized_image,
)

__version__ = "0.1.0"

__all__ = [
    "AttributeTypeMismatchError",
    "DecodedImage",
    "EmptyAttributeError",
    "FitMode",
    "ImageCodec",
    "ImageDecodeFailureError",
    "ImageResizeFailureError",
    "ImageExtension",
    "InMemoryCache",
    "InvalidEnumValueError",
    "LocalFileCache",
    "MissingDimensionsError",
    "MissingRequiredArgumentError",
    "PillowImageCodec",
    "ResizeRequest",
    "ResizedImageError",
    "ResizedImageFunction",
    "ResizedImageSettings",
    "ReturnMode",
    "ResultCache",
    "__version__",
    "get_settings",
    "render_resized_image",
]
