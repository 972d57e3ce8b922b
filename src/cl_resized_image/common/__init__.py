"""Common module - protocols, errors, and collaborator implementations."""

from .cache import InMemoryCache, LocalFileCache, ResultCache
from .errors import (
    AttributeTypeMismatchError,
    EmptyAttributeError,
    ImageDecodeFailureError,
    ImageResizeFailureError,
    InvalidEnumValueError,
    MissingDimensionsError,
    MissingRequiredArgumentError,
    ResizedImageError,
)
from .image_codec import DecodedImage, ImageCodec, PillowImageCodec

__all__ = [
    "AttributeTypeMismatchError",
    "DecodedImage",
    "EmptyAttributeError",
    "ImageCodec",
    "ImageDecodeFailureError",
    "ImageResizeFailureError",
    "InMemoryCache",
    "InvalidEnumValueError",
    "LocalFileCache",
    "MissingDimensionsError",
    "MissingRequiredArgumentError",
    "PillowImageCodec",
    "ResizedImageError",
    "ResultCache",
]
