"""Pure image resize computation logic (fill / inside / outside)."""

from loguru import logger
from PIL import Image, ImageOps

from ....common.errors import ImageResizeFailureError
from ....utils.profiling import timed
from ..schema import FitMode


def _scaled(length: int, numerator: int, denominator: int) -> int:
    return max(1, round(length * numerator / denominator))


def _scale(image: Image.Image, width: int | None = None, height: int | None = None) -> Image.Image:
    """Resize keeping aspect ratio, driven by whichever dimension is given."""
    original_width, original_height = image.size

    if width is not None:
        w = max(1, width)
        h = _scaled(original_height, w, original_width)
    elif height is not None:
        h = max(1, height)
        w = _scaled(original_width, h, original_height)
    else:
        return image

    return image.resize((w, h), Image.Resampling.LANCZOS)


def resize_fill(image: Image.Image, width: int | None, height: int | None) -> Image.Image:
    """Stretch to exactly width x height, ignoring aspect ratio."""
    w = max(1, width if width is not None else image.width)
    h = max(1, height if height is not None else image.height)
    return image.resize((w, h), Image.Resampling.LANCZOS)


def resize_inside(image: Image.Image, width: int | None, height: int | None) -> Image.Image:
    """Keep aspect ratio, bounded by the given box.

    With both dimensions, landscape sources are scaled to the target
    height and everything else to the target width.
    """
    if width is not None and height is not None:
        if image.width > image.height:
            return _scale(image, height=height)
        return _scale(image, width=width)

    return _scale(image, width=width, height=height)


def resize_outside(image: Image.Image, width: int | None, height: int | None) -> Image.Image:
    """Keep aspect ratio, cover the box and centre-crop the overflow.

    A missing dimension falls back to the source's own.
    """
    w = max(1, width if width is not None else image.width)
    h = max(1, height if height is not None else image.height)
    return ImageOps.fit(image, (w, h), Image.Resampling.LANCZOS, centering=(0.5, 0.5))


@timed
def resize_image(
    *,
    image: Image.Image,
    fit: FitMode | str,
    width: int | None = None,
    height: int | None = None,
) -> Image.Image:
    """
    Resize a decoded image according to a fit mode.

    Args:
        image: Decoded source image
        fit: "fill", "inside" or "outside"
        width: Target width (None = unconstrained)
        height: Target height (None = unconstrained)

    Returns:
        A new resized image; unknown fit values return the source unchanged

    Raises:
        ImageResizeFailureError: If Pillow cannot allocate or address the target size
    """
    try:
        match fit:
            case FitMode.FILL:
                return resize_fill(image, width, height)
            case FitMode.INSIDE:
                return resize_inside(image, width, height)
            case FitMode.OUTSIDE:
                return resize_outside(image, width, height)
            case _:
                logger.warning(f"Unknown fit {fit!r}, image left unresized")
                return image
    except (OverflowError, MemoryError, ValueError) as exc:
        logger.warning(f"Failed to resize to {width}x{height}: {exc}")
        raise ImageResizeFailureError(width, height, str(exc) or type(exc).__name__) from exc
