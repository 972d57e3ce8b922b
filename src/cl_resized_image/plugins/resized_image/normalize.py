"""Turn validated raw arguments into a canonical ResizeRequest."""

import os
from collections.abc import Mapping
from os import PathLike
from pathlib import Path

from ...utils.media_types import is_absolute_url, is_data_uri
from .schema import ResizeRequest
from .validation import (
    RawArgs,
    coerce_dimension,
    coerce_fit,
    coerce_return,
    extract_other_attributes,
)


def coerce_other_attributes(other_attributes: Mapping[str, object]) -> dict[str, str]:
    """Stringify pass-through values; None means absent and is dropped."""
    return {key: str(value) for key, value in other_attributes.items() if value is not None}


def resolve_aliases(other_attributes: dict[str, str]) -> dict[str, str]:
    """Fold "link" into "href". An explicit "href" is never overwritten."""
    attributes = dict(other_attributes)
    if "link" in attributes:
        link = attributes.pop("link")
        _ = attributes.setdefault("href", link)
    return attributes


def _path_exists(file: str) -> bool:
    try:
        return Path(file).exists()
    except (OSError, ValueError):
        return False


def resolve_file(file: str, base_directory: str | PathLike[str]) -> str:
    """Resolve a relative file reference against base_directory.

    Data URIs, absolute URLs and paths that already exist are returned
    unchanged; anything else is joined to base_directory with os.sep.
    """
    if is_data_uri(file) or is_absolute_url(file) or _path_exists(file):
        return file

    base = os.fspath(base_directory).rstrip(os.sep)
    return base + os.sep + file


def normalize_params(
    raw_args: RawArgs,
    base_directory_default: str | PathLike[str],
    other_attributes: Mapping[str, object] | None = None,
) -> ResizeRequest:
    """Build the canonical request from already validated arguments."""
    if other_attributes is None:
        other_attributes = extract_other_attributes(raw_args)

    attributes = resolve_aliases(coerce_other_attributes(other_attributes))
    base_directory = attributes.get("basedir") or base_directory_default

    return ResizeRequest(
        file=resolve_file(str(raw_args["file"]), base_directory),
        width=coerce_dimension(raw_args.get("width")),
        height=coerce_dimension(raw_args.get("height")),
        fit=coerce_fit(raw_args.get("fit")),
        return_mode=coerce_return(raw_args.get("return")),
        other_attributes=attributes,
    )
