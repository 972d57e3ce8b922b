"""Exception taxonomy for the resized_image function.

Validation errors are raised before any image I/O happens and point at a
call-site bug (usually a template authoring error). Their messages name the
offending parameter and are stable.
"""

from collections.abc import Iterable
from typing import Literal

from typing_extensions import override

FUNCTION_NAME = "resized_image"

ExpectedKind = Literal["string", "numeric"]


class ResizedImageError(Exception):
    """Base class for every error raised by the resized_image function."""

    def __init__(self, message: str, attribute: str | None = None):
        self.message: str = message
        self.attribute: str | None = attribute
        super().__init__(self.message)

    @override
    def __str__(self):
        return self.message


class MissingRequiredArgumentError(ResizedImageError):
    def __init__(self, attribute: str):
        super().__init__(f'{FUNCTION_NAME} requires "{attribute}" argument', attribute)


class EmptyAttributeError(ResizedImageError):
    def __init__(self, attribute: str):
        super().__init__(f'{FUNCTION_NAME} requires "{attribute}" to be not empty', attribute)


class AttributeTypeMismatchError(ResizedImageError):
    def __init__(self, attribute: str, expected: ExpectedKind):
        self.expected: ExpectedKind = expected
        super().__init__(f'{FUNCTION_NAME} requires "{attribute}" to be {expected}', attribute)


class InvalidEnumValueError(ResizedImageError):
    def __init__(self, attribute: str, allowed: Iterable[str]):
        self.allowed: tuple[str, ...] = tuple(allowed)
        quoted = [f'"{value}"' for value in self.allowed]
        if len(quoted) > 1:
            choices = ", ".join(quoted[:-1]) + " or " + quoted[-1]
        else:
            choices = "".join(quoted)
        super().__init__(
            f'{FUNCTION_NAME} "{attribute}" argument must have {choices} value', attribute
        )


class MissingDimensionsError(ResizedImageError):
    def __init__(self):
        super().__init__(
            f"{FUNCTION_NAME} needs width or height param to be specified (can be specified both)"
        )


class ImageDecodeFailureError(ResizedImageError):
    """The image codec could not read the resolved source.

    Never retried and never cached.
    """

    def __init__(self, source: str, reason: str | None = None):
        self.source: str = source
        self.reason: str | None = reason
        message = f'{FUNCTION_NAME} could not read image "{_abbreviate(source)}"'
        if reason:
            message += f": {reason}"
        super().__init__(message, "file")


class ImageResizeFailureError(ResizedImageError):
    """Pillow could not produce an image of the requested size.

    Width and height have no upper bound, so sizes beyond what Pillow can
    address or allocate end up here.
    """

    def __init__(self, width: int | None, height: int | None, reason: str | None = None):
        self.width: int | None = width
        self.height: int | None = height
        message = f"{FUNCTION_NAME} could not resize image to {width}x{height}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


def _abbreviate(source: str, limit: int = 64) -> str:
    # data URIs can be megabytes long
    if source.startswith("data:") and len(source) > limit:
        return source[:limit] + "..."
    return source
