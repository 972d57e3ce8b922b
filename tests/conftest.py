"""Test configuration and fixtures for cl_resized_image.

This module provides:
- Generated fixture images written to tmp_path (no checked-in media)
- A fake in-memory codec that counts decodes and encodes sizes into the URI
- An HTML helper that collects tags and attributes from rendered output
"""

import base64
from html.parser import HTMLParser
from pathlib import Path
from typing_extensions import override

import pytest
from PIL import Image

from cl_resized_image.common.cache import InMemoryCache
from cl_resized_image.common.errors import ImageDecodeFailureError
from cl_resized_image.common.image_codec import DecodedImage, ImageCodec

LANDSCAPE_SIZE = (800, 600)
PORTRAIT_SIZE = (300, 600)


# ============================================================================
# Fake collaborators
# ============================================================================


class FakeImageCodec(ImageCodec):
    """In-memory codec.

    Sources are looked up by exact string. Encoded URIs carry the image
    size so tests can assert on resize results: ``data:image/fake;base64,<b64 "WxH">``.
    """

    def __init__(self, images: dict[str, Image.Image] | None = None) -> None:
        self.images: dict[str, Image.Image] = dict(images or {})
        self.decode_calls: list[str] = []
        self.encode_calls: int = 0

    def add(self, source: str, size: tuple[int, int]) -> None:
        self.images[source] = Image.new("RGB", size, (120, 80, 40))

    @override
    def decode(self, source: str) -> DecodedImage:
        self.decode_calls.append(source)
        if source not in self.images:
            raise ImageDecodeFailureError(source, "not in fake codec")
        return DecodedImage(image=self.images[source], format="PNG", source=source)

    @override
    def encode_data_uri(self, image: Image.Image, image_format: str | None = None) -> str:
        self.encode_calls += 1
        payload = base64.b64encode(f"{image.width}x{image.height}".encode()).decode("ascii")
        return f"data:image/fake;base64,{payload}"


def size_from_fake_uri(uri: str) -> tuple[int, int]:
    payload = uri.split(",", 1)[1]
    width, height = base64.b64decode(payload).decode().split("x")
    return int(width), int(height)


class TagCollector(HTMLParser):
    """Collects (tag, attrs, depth) for every start tag."""

    def __init__(self) -> None:
        super().__init__()
        self.tags: list[tuple[str, dict[str, str | None], int]] = []
        self._depth: int = 0

    @override
    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.tags.append((tag, dict(attrs), self._depth))
        if tag != "img":
            self._depth += 1

    @override
    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.tags.append((tag, dict(attrs), self._depth))

    @override
    def handle_endtag(self, tag: str) -> None:
        if tag != "img":
            self._depth -= 1


def parse_tags(markup: str) -> list[tuple[str, dict[str, str | None], int]]:
    collector = TagCollector()
    collector.feed(markup)
    collector.close()
    return collector.tags


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_codec() -> FakeImageCodec:
    codec = FakeImageCodec()
    codec.add("/docroot/photo.jpg", LANDSCAPE_SIZE)
    codec.add("/docroot/portrait.jpg", PORTRAIT_SIZE)
    return codec


@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Directory holding photo.jpg (landscape), portrait.png and alpha.png."""
    Image.new("RGB", LANDSCAPE_SIZE, (200, 120, 60)).save(tmp_path / "photo.jpg", format="JPEG")
    Image.new("RGB", PORTRAIT_SIZE, (60, 120, 200)).save(tmp_path / "portrait.png", format="PNG")
    Image.new("RGBA", (64, 32), (10, 20, 30, 128)).save(tmp_path / "alpha.png", format="PNG")
    return tmp_path


@pytest.fixture
def photo_bytes(image_dir: Path) -> bytes:
    return (image_dir / "photo.jpg").read_bytes()


@pytest.fixture
def photo_data_uri(photo_bytes: bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(photo_bytes).decode("ascii")
