"""Host-facing registry of template functions provided by this package."""

from .common.cache import ResultCache
from .common.image_codec import ImageCodec
from .config import ResizedImageSettings
from .plugins.resized_image.task import ResizedImageFunction


class ImageExtension:
    """Hands out function handlers by template function name.

    All handlers share one result cache.
    """

    def __init__(
        self,
        cache: ResultCache,
        settings: ResizedImageSettings | None = None,
        codec: ImageCodec | None = None,
    ):
        self.cache: ResultCache = cache
        self.settings: ResizedImageSettings | None = settings
        self.codec: ImageCodec | None = codec

    @property
    def function_names(self) -> tuple[str, ...]:
        return (ResizedImageFunction.name,)

    def get_function_handler(self, function_name: str) -> ResizedImageFunction | None:
        match function_name:
            case ResizedImageFunction.name:
                return ResizedImageFunction.from_settings(
                    self.cache, settings=self.settings, codec=self.codec
                )
            case _:
                return None
