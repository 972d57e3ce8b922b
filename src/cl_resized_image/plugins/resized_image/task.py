"""resized_image function implementation."""

import logging
from collections.abc import Mapping
from os import PathLike
from pathlib import Path

from ...common.cache import InMemoryCache, ResultCache
from ...common.image_codec import ImageCodec, PillowImageCodec
from ...config import ResizedImageSettings, get_settings
from .algo.cache_key import DEFAULT_KEY_PREFIX, derive_cache_key
from .algo.image_resize import resize_image
from .algo.render import OutputRenderer
from .normalize import normalize_params
from .schema import ResizeRequest
from .validation import extract_other_attributes, validate_params

logger = logging.getLogger(__name__)


class ResizedImageFunction:
    """
    Validates arguments, resizes the source and renders the output.

    Rendered strings are memoized in the injected ResultCache under a key
    derived from the normalized request. Identical concurrent requests
    may both render; the later write wins with an equal value.
    """

    name: str = "resized_image"

    def __init__(
        self,
        cache: ResultCache,
        document_root: str | PathLike[str],
        codec: ImageCodec | None = None,
        cache_key_prefix: str = DEFAULT_KEY_PREFIX,
    ):
        self.cache: ResultCache = cache
        self.document_root: Path = Path(document_root)
        self.codec: ImageCodec = codec if codec is not None else PillowImageCodec()
        self.renderer: OutputRenderer = OutputRenderer(self.codec)
        self.cache_key_prefix: str = cache_key_prefix

    @classmethod
    def from_settings(
        cls,
        cache: ResultCache,
        settings: ResizedImageSettings | None = None,
        codec: ImageCodec | None = None,
    ) -> "ResizedImageFunction":
        settings = settings or get_settings()
        if codec is None:
            codec = PillowImageCodec(
                http_timeout=settings.http_timeout,
                default_format=settings.default_image_format,
                jpeg_quality=settings.jpeg_quality,
            )
        return cls(
            cache=cache,
            document_root=settings.document_root,
            codec=codec,
            cache_key_prefix=settings.cache_key_prefix,
        )

    @property
    def is_cacheable(self) -> bool:
        """Host engines must not memoize this function's output themselves."""
        return False

    def build_request(self, raw_args: Mapping[str, object]) -> ResizeRequest:
        """Validate and normalize raw arguments.

        Raises:
            ResizedImageError: The first failing validation check
        """
        other_attributes = extract_other_attributes(raw_args)
        validate_params(raw_args, other_attributes).raise_for_error()
        return normalize_params(raw_args, self.document_root, other_attributes)

    def render_request(self, request: ResizeRequest) -> str:
        """Decode, resize and render without touching the cache."""
        decoded = self.codec.decode(request.file)
        resized = resize_image(
            image=decoded.image,
            fit=request.fit,
            width=request.width,
            height=request.height,
        )
        logger.info(
            f"Rendered {request.return_mode} for {request.file[:80]!r} "
            + f"(fit={request.fit}, {request.width}x{request.height} -> {resized.width}x{resized.height})"
        )
        return self.renderer.render(
            request.return_mode,
            resized,
            request.other_attributes,
            decoded.format,
        )

    def handle(self, raw_args: Mapping[str, object]) -> str:
        request = self.build_request(raw_args)
        cache_key = derive_cache_key(request, self.cache_key_prefix)

        cached, found = self.cache.get(cache_key)
        if found and cached is not None:
            logger.debug(f"Cache hit: {cache_key}")
            return cached

        logger.debug(f"Cache miss: {cache_key}")
        output = self.render_request(request)
        self.cache.set(cache_key, output)
        return output

    def __call__(self, raw_args: Mapping[str, object]) -> str:
        return self.handle(raw_args)


DEFAULT_CACHE_ENTRIES = 256

# Shared only by calls that use the default codec; keys do not cover the codec
_default_cache: ResultCache = InMemoryCache(max_entries=DEFAULT_CACHE_ENTRIES)


def render_resized_image(
    raw_args: Mapping[str, object],
    base_directory_default: str | PathLike[str],
    *,
    cache: ResultCache | None = None,
    codec: ImageCodec | None = None,
) -> str:
    """Render a resized image as ``<img>`` markup or a data URI.

    Args:
        raw_args: file, width, height, fit, return, basedir, link/href and
                  any pass-through HTML attributes
        base_directory_default: Base for relative files when no basedir is given
        cache: Result cache. When omitted, calls using the default codec share
               a process-wide LRU cache of DEFAULT_CACHE_ENTRIES outputs, and
               calls with a custom codec are not cached across calls
        codec: Image codec; Pillow when omitted

    Returns:
        HTML fragment, data URI, or "???" for an unknown return mode

    Raises:
        ResizedImageError: On invalid arguments or an unreadable source
    """
    if cache is None:
        cache = _default_cache if codec is None else InMemoryCache(max_entries=1)

    function = ResizedImageFunction(
        cache=cache,
        document_root=base_directory_default,
        codec=codec,
    )
    return function.handle(raw_args)
