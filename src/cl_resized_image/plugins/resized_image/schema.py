"""resized_image request schema."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FitMode(StrEnum):
    INSIDE = "inside"
    OUTSIDE = "outside"
    FILL = "fill"


class ReturnMode(StrEnum):
    IMAGE = "image"
    URL = "url"


# Named parameters never forwarded as HTML attributes
NAMED_PARAMETERS: tuple[str, ...] = ("fit", "width", "height", "return", "file", "src")

# Pass-through keys consumed by the renderer, never emitted on <img>
CONTROL_ATTRIBUTES: tuple[str, ...] = ("link", "href", "basedir")

DEFAULT_FIT = FitMode.OUTSIDE
DEFAULT_RETURN = ReturnMode.IMAGE


class ResizeRequest(BaseModel):
    """Validated, normalized input to one resize operation.

    Attributes:
        file: Resolved image source (path, absolute URL or data URI)
        width: Target width in pixels (None = not constrained)
        height: Target height in pixels (None = not constrained)
        fit: Resize policy
        return_mode: "image" or "url"; any other value renders "???"
        other_attributes: Pass-through HTML attributes, keys lower-cased,
                          "link" already folded into "href"
    """

    file: str = Field(..., min_length=1)
    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    fit: FitMode = DEFAULT_FIT
    return_mode: str = Field(default=DEFAULT_RETURN.value, alias="return")
    other_attributes: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    @model_validator(mode="after")
    def validate_dimensions(self) -> "ResizeRequest":
        """Ensure at least one target dimension is given."""
        if self.width is None and self.height is None:
            raise ValueError("At least one of width or height must be given")
        return self

    @property
    def href(self) -> str | None:
        return self.other_attributes.get("href")

    @property
    def basedir(self) -> str | None:
        return self.other_attributes.get("basedir")
