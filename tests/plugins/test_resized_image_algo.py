"""Unit tests for resized_image algorithms: fit modes, rendering and cache keys."""

import pytest
from PIL import Image

from cl_resized_image.common.errors import ImageResizeFailureError
from cl_resized_image.plugins.resized_image.algo.cache_key import (
    derive_cache_key,
    serialize_request,
)
from cl_resized_image.plugins.resized_image.algo.image_resize import resize_image
from cl_resized_image.plugins.resized_image.algo.render import (
    UNKNOWN_RETURN_OUTPUT,
    OutputRenderer,
    build_html_tag,
    is_safe_attribute_name,
)
from cl_resized_image.plugins.resized_image.schema import FitMode, ResizeRequest
from conftest import FakeImageCodec, parse_tags, size_from_fake_uri


@pytest.fixture
def landscape() -> Image.Image:
    return Image.new("RGB", (800, 600), (10, 200, 30))


@pytest.fixture
def portrait() -> Image.Image:
    return Image.new("RGB", (300, 600), (10, 200, 30))


# ============================================================================
# Fit modes
# ============================================================================


class TestFill:
    def test_exact_dimensions(self, landscape: Image.Image) -> None:
        """Test fill ignores aspect ratio."""
        resized = resize_image(image=landscape, fit=FitMode.FILL, width=150, height=150)
        assert resized.size == (150, 150)

    def test_missing_dimension_uses_source(self, landscape: Image.Image) -> None:
        resized = resize_image(image=landscape, fit="fill", width=100)
        assert resized.size == (100, 600)


class TestInside:
    def test_landscape_scales_to_height(self, landscape: Image.Image) -> None:
        resized = resize_image(image=landscape, fit=FitMode.INSIDE, width=150, height=150)
        assert resized.height == 150
        assert resized.width == 200

    def test_portrait_scales_to_width(self, portrait: Image.Image) -> None:
        resized = resize_image(image=portrait, fit=FitMode.INSIDE, width=150, height=150)
        assert resized.size == (150, 300)

    def test_square_scales_to_width(self) -> None:
        square = Image.new("RGB", (400, 400))
        resized = resize_image(image=square, fit=FitMode.INSIDE, width=100, height=50)
        assert resized.size == (100, 100)

    def test_width_only(self, landscape: Image.Image) -> None:
        resized = resize_image(image=landscape, fit=FitMode.INSIDE, width=400)
        assert resized.size == (400, 300)

    def test_height_only(self, landscape: Image.Image) -> None:
        resized = resize_image(image=landscape, fit=FitMode.INSIDE, height=60)
        assert resized.size == (80, 60)


class TestOutside:
    def test_covers_and_crops(self, landscape: Image.Image) -> None:
        resized = resize_image(image=landscape, fit=FitMode.OUTSIDE, width=150, height=150)
        assert resized.size == (150, 150)

    def test_width_only_keeps_source_height(self, landscape: Image.Image) -> None:
        """Test a missing height defaults to the source height."""
        resized = resize_image(image=landscape, fit=FitMode.OUTSIDE, width=150)
        assert resized.size == (150, 600)

    def test_height_only_keeps_source_width(self, landscape: Image.Image) -> None:
        resized = resize_image(image=landscape, fit=FitMode.OUTSIDE, height=100)
        assert resized.size == (800, 100)

    def test_centre_crop(self) -> None:
        """Test the cropped overflow is taken evenly from both sides."""
        striped = Image.new("RGB", (300, 100), (255, 0, 0))
        striped.paste((0, 0, 255), (100, 0, 200, 100))

        resized = resize_image(image=striped, fit=FitMode.OUTSIDE, width=100, height=100)

        assert resized.size == (100, 100)
        assert resized.getpixel((50, 50)) == (0, 0, 255)


def test_zero_dimension_clamped(landscape: Image.Image):
    resized = resize_image(image=landscape, fit=FitMode.FILL, width=0, height=0)
    assert resized.size == (1, 1)


@pytest.mark.parametrize("fit", [FitMode.FILL, FitMode.INSIDE, FitMode.OUTSIDE])
def test_unaddressable_size_is_typed_failure(landscape: Image.Image, fit: FitMode):
    with pytest.raises(ImageResizeFailureError) as exc_info:
        _ = resize_image(image=landscape, fit=fit, width=10**30, height=10**30)

    assert exc_info.value.width == 10**30
    assert "could not resize image" in str(exc_info.value)


def test_unknown_fit_passes_image_through(landscape: Image.Image):
    assert resize_image(image=landscape, fit="stretch", width=10, height=10) is landscape


def test_resize_does_not_modify_source(landscape: Image.Image):
    _ = resize_image(image=landscape, fit=FitMode.OUTSIDE, width=10, height=10)
    assert landscape.size == (800, 600)


# ============================================================================
# Rendering
# ============================================================================


@pytest.fixture
def renderer() -> OutputRenderer:
    return OutputRenderer(FakeImageCodec())


def test_build_html_tag_escapes_values():
    tag = build_html_tag("img", {"title": 'a "quoted" <b> & \'x\''}, self_closing=True)
    assert tag == '<img title="a &quot;quoted&quot; &lt;b&gt; &amp; &#x27;x&#x27;"/>'


def test_build_html_tag_open():
    assert build_html_tag("a", {"href": "http://x"}) == '<a href="http://x">'


def test_render_url(renderer: OutputRenderer):
    output = renderer.render("url", Image.new("RGB", (12, 7)), {"class": "ignored"})

    assert output.startswith("data:")
    assert size_from_fake_uri(output) == (12, 7)


def test_render_unknown_return(renderer: OutputRenderer):
    assert renderer.render("bogus", Image.new("RGB", (1, 1)), {}) == UNKNOWN_RETURN_OUTPUT
    assert UNKNOWN_RETURN_OUTPUT == "???"


def test_render_unknown_return_does_not_encode():
    codec = FakeImageCodec()
    _ = OutputRenderer(codec).render("bogus", Image.new("RGB", (1, 1)), {})
    assert codec.encode_calls == 0


def test_render_image_attribute_order(renderer: OutputRenderer):
    """Test caller attributes come first, then alt and src."""
    output = renderer.render("image", Image.new("RGB", (5, 5)), {"class": "thumb", "id": "hero"})

    assert output.startswith('<img class="thumb" id="hero" alt="" src="data:image/fake;base64,')
    assert output.endswith('"/>')


def test_render_image_caller_alt_wins(renderer: OutputRenderer):
    output = renderer.render("image", Image.new("RGB", (5, 5)), {"alt": "A cat", "class": "c"})

    [(tag, attrs, _)] = parse_tags(output)
    assert tag == "img"
    assert attrs["alt"] == "A cat"
    assert output.startswith('<img alt="A cat" class="c" src=')


def test_render_image_strips_control_attributes(renderer: OutputRenderer):
    output = renderer.render(
        "image",
        Image.new("RGB", (5, 5)),
        {"basedir": "/srv", "link": "http://leftover", "title": "t"},
    )

    [(tag, attrs, _)] = parse_tags(output)
    assert tag == "img"
    assert "basedir" not in attrs
    assert "link" not in attrs
    assert "href" not in attrs
    assert attrs["title"] == "t"


def test_render_image_drops_invalid_attribute_names(renderer: OutputRenderer):
    output = renderer.render(
        "image",
        Image.new("RGB", (5, 5)),
        {'x" onload="alert(1)': "v", "data-id": "7", "xml:lang": "en", "a b": "c"},
    )

    [(tag, attrs, _)] = parse_tags(output)
    assert tag == "img"
    assert "onload" not in output
    assert set(attrs) == {"data-id", "xml:lang", "alt", "src"}


@pytest.mark.parametrize(
    ("name", "expected"),
    [("class", True), ("data-x_1", True), ("xml:lang", True), ("", False), ("on load", False),
     ('x"', False), ("x>", False), ("class\n", False), ("Class", False)],
)
def test_is_safe_attribute_name(name: str, expected: bool):
    assert is_safe_attribute_name(name) is expected


def test_render_image_wrapped_in_link(renderer: OutputRenderer):
    output = renderer.render("image", Image.new("RGB", (5, 5)), {"href": "http://x?a=1&b=2"})

    tags = parse_tags(output)
    assert [(tag, depth) for tag, _, depth in tags] == [("a", 0), ("img", 1)]
    assert tags[0][1] == {"href": "http://x?a=1&b=2"}
    assert "href" not in tags[1][1]
    assert output.startswith('<a href="http://x?a=1&amp;b=2"><img ')
    assert output.endswith("/></a>")


# ============================================================================
# Cache keys
# ============================================================================


def _request(**overrides: object) -> ResizeRequest:
    fields: dict[str, object] = {
        "file": "/var/www/photo.jpg",
        "width": 150,
        "fit": "outside",
        "return": "image",
        "other_attributes": {"class": "thumb", "id": "hero"},
    }
    fields.update(overrides)
    return ResizeRequest.model_validate(fields)


def test_cache_key_is_deterministic():
    assert derive_cache_key(_request()) == derive_cache_key(_request())


def test_cache_key_format():
    request = _request()
    key = derive_cache_key(request, prefix="p-")

    prefix, digest, length = key.split("-")
    assert prefix == "p"
    assert len(digest) == 32
    assert int(length) == len(serialize_request(request).encode("utf-8"))


@pytest.mark.parametrize(
    "overrides",
    [
        {"file": "/var/www/other.jpg"},
        {"width": 151},
        {"height": 150},
        {"fit": "inside"},
        {"return": "url"},
        {"other_attributes": {"class": "thumb"}},
        {"other_attributes": {"id": "hero", "class": "thumb"}},
        {"other_attributes": {"class": "thumb", "id": "hero", "href": "http://x"}},
    ],
)
def test_cache_key_changes_with_any_field(overrides: dict[str, object]):
    assert derive_cache_key(_request(**overrides)) != derive_cache_key(_request())


def test_cache_key_default_prefix():
    assert derive_cache_key(_request()).startswith("cl-resized-image-")
