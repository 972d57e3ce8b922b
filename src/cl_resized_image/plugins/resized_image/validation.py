"""Parameter validation for the resized_image function.

Checks run in a fixed precedence order and the first failure wins. The
validator never raises: it returns a ``ValidationResult`` that the caller
turns into an exception.
"""

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from ...common.errors import (
    AttributeTypeMismatchError,
    EmptyAttributeError,
    InvalidEnumValueError,
    MissingDimensionsError,
    MissingRequiredArgumentError,
    ResizedImageError,
)
from .schema import DEFAULT_RETURN, NAMED_PARAMETERS, FitMode, ReturnMode

RawArgs = Mapping[str, object]

_numeric_pattern = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")


@dataclass(frozen=True)
class ValidationResult:
    error: ResizedImageError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


# ─────────────────────────────────────────────────────────────
# Coercion helpers
# ─────────────────────────────────────────────────────────────


def is_present(raw_args: RawArgs, key: str) -> bool:
    return raw_args.get(key) is not None


def is_numeric(value: object) -> bool:
    """True for ints, finite floats and decimal number strings (bool excluded).

    Values too large to represent as a float are not numeric.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, int) or (isinstance(value, str) and _numeric_pattern.match(value)):
        try:
            return math.isfinite(float(value))
        except OverflowError:
            return False
    return False


def _is_negative(value: int | float | str) -> bool:
    if isinstance(value, int):
        return value < 0
    return float(value) < 0


def coerce_dimension(value: object) -> int | None:
    """Coerce a validated width/height to an int, truncating toward zero."""
    if value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, str)):
        return int(float(value))
    raise TypeError(f"Cannot coerce {type(value).__name__} to a dimension")


def coerce_fit(value: object) -> FitMode:
    if value is None:
        return FitMode.OUTSIDE
    return FitMode(str(value).lower())


def coerce_return(value: object) -> str:
    """Lower-case the return mode; unknown values are kept as-is."""
    if value is None:
        return DEFAULT_RETURN.value
    return str(value).lower()


def extract_other_attributes(raw_args: RawArgs) -> dict[str, object]:
    """Collect pass-through attributes with lower-cased, trimmed keys.

    Values are left untouched so they can be type-checked before coercion.
    """
    other: dict[str, object] = {}
    for key, value in raw_args.items():
        normalized_key = str(key).strip().lower()
        if normalized_key in NAMED_PARAMETERS:
            continue
        other[normalized_key] = value
    return other


# ─────────────────────────────────────────────────────────────
# Checks, in precedence order
# ─────────────────────────────────────────────────────────────

Check = Callable[[RawArgs, Mapping[str, object]], ResizedImageError | None]


def _check_file(raw_args: RawArgs, _: Mapping[str, object]) -> ResizedImageError | None:
    if not is_present(raw_args, "file"):
        return MissingRequiredArgumentError("file")

    value = raw_args["file"]
    if not value:
        return EmptyAttributeError("file")
    if not isinstance(value, str):
        return AttributeTypeMismatchError("file", "string")
    return None


def _check_dimension(key: str) -> Check:
    def check(raw_args: RawArgs, _: Mapping[str, object]) -> ResizedImageError | None:
        if not is_present(raw_args, key):
            return None

        value = raw_args[key]
        if not is_numeric(value) or _is_negative(value):  # pyright: ignore[reportArgumentType]
            return AttributeTypeMismatchError(key, "numeric")
        return None

    return check


def _check_fit(raw_args: RawArgs, _: Mapping[str, object]) -> ResizedImageError | None:
    if not is_present(raw_args, "fit"):
        return None

    if str(raw_args["fit"]).lower() not in tuple(FitMode):
        return InvalidEnumValueError("fit", [mode.value for mode in FitMode])
    return None


def _check_other_attributes(
    raw_args: RawArgs, other_attributes: Mapping[str, object]
) -> ResizedImageError | None:
    # Only <img> output places these values into markup
    if coerce_return(raw_args.get("return")) != ReturnMode.IMAGE:
        return None

    for key, value in other_attributes.items():
        if value is None or isinstance(value, str):
            continue
        return AttributeTypeMismatchError(key, "string")
    return None


def _check_dimensions(raw_args: RawArgs, _: Mapping[str, object]) -> ResizedImageError | None:
    if not is_present(raw_args, "width") and not is_present(raw_args, "height"):
        return MissingDimensionsError()
    return None


CHECKS: tuple[Check, ...] = (
    _check_file,
    _check_dimension("width"),
    _check_dimension("height"),
    _check_fit,
    _check_other_attributes,
    _check_dimensions,
)


def validate_params(
    raw_args: RawArgs,
    other_attributes: Mapping[str, object] | None = None,
) -> ValidationResult:
    """Validate raw function arguments.

    Args:
        raw_args: Arguments as received from the host
        other_attributes: Pass-through attributes; derived from raw_args when omitted

    Returns:
        ValidationResult carrying the first failing check's error, if any
    """
    if other_attributes is None:
        other_attributes = extract_other_attributes(raw_args)

    for check in CHECKS:
        error = check(raw_args, other_attributes)
        if error is not None:
            return ValidationResult(error)

    return ValidationResult()
