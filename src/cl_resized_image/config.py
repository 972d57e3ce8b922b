"""
Library configuration. All settings from environment with sensible defaults.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_document_root() -> Path:
    # Web servers export DOCUMENT_ROOT; fall back to the working directory.
    return Path(os.environ.get("DOCUMENT_ROOT") or Path.cwd())


class ResizedImageSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RESIZED_IMAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
    )

    document_root: Path = Field(
        default_factory=_default_document_root,
        description="Base directory for relative file references",
    )
    cache_key_prefix: str = Field(default="cl-resized-image-")
    http_timeout: float = Field(default=30.0, gt=0, description="Seconds, for http(s) sources")
    default_image_format: str = Field(
        default="PNG", description="Encoding format when the source carries none"
    )
    jpeg_quality: int | None = Field(default=None, ge=1, le=100)


@lru_cache
def get_settings() -> ResizedImageSettings:
    return ResizedImageSettings()
