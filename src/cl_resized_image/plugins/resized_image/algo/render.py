"""Output rendering: <img> markup or a bare data URI."""

import html
import re
from collections.abc import Mapping

from loguru import logger
from PIL import Image

from ....common.image_codec import ImageCodec
from ..schema import CONTROL_ATTRIBUTES, ReturnMode

# Returned for unrecognized return modes instead of raising
UNKNOWN_RETURN_OUTPUT = "???"

_attribute_name_pattern = re.compile(r"[a-z0-9_:-]+")


def is_safe_attribute_name(name: str) -> bool:
    return _attribute_name_pattern.fullmatch(name) is not None


def build_html_tag(name: str, attributes: Mapping[str, str], self_closing: bool = False) -> str:
    """Build an opening (or self-closing) tag; values are HTML-escaped."""
    parts = [f"<{name}"]
    for attr_name, attr_value in attributes.items():
        parts.append(f' {attr_name}="{html.escape(attr_value, quote=True)}"')
    parts.append("/>" if self_closing else ">")
    return "".join(parts)


class OutputRenderer:
    """Renders a resized image in the requested return mode."""

    def __init__(self, codec: ImageCodec):
        self.codec: ImageCodec = codec

    def render(
        self,
        return_mode: str,
        image: Image.Image,
        other_attributes: Mapping[str, str],
        image_format: str | None = None,
    ) -> str:
        if return_mode == ReturnMode.IMAGE:
            return self.render_image_tag(image, other_attributes, image_format)

        if return_mode == ReturnMode.URL:
            return self.codec.encode_data_uri(image, image_format)

        return UNKNOWN_RETURN_OUTPUT

    def render_image_tag(
        self,
        image: Image.Image,
        other_attributes: Mapping[str, str],
        image_format: str | None = None,
    ) -> str:
        """
        Render ``<img .../>``, wrapped in ``<a href="...">`` when href is set.

        Caller attributes keep their order and win over the defaults; alt and
        src are appended after them. Names outside ``[a-z0-9_:-]`` are dropped.
        """
        href = other_attributes.get("href")

        attributes: dict[str, str] = {}
        for key, value in other_attributes.items():
            if key in CONTROL_ATTRIBUTES:
                continue
            if not is_safe_attribute_name(key):
                logger.warning(f"Dropping attribute with invalid name {key!r}")
                continue
            attributes[key] = value
        _ = attributes.setdefault("alt", "")
        _ = attributes.setdefault("src", self.codec.encode_data_uri(image, image_format))

        tag = build_html_tag("img", attributes, self_closing=True)

        if href is not None:
            return build_html_tag("a", {"href": href}) + tag + "</a>"
        return tag
