"""Deterministic cache keys for normalized requests."""

import hashlib
import json

from ..schema import ResizeRequest

DEFAULT_KEY_PREFIX = "cl-resized-image-"


def serialize_request(request: ResizeRequest) -> str:
    """Canonical JSON for a request; attribute order is part of the payload."""
    payload = {
        "file": request.file,
        "width": request.width,
        "height": request.height,
        "fit": request.fit.value,
        "return": request.return_mode,
        "attributes": [[key, value] for key, value in request.other_attributes.items()],
    }
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def derive_cache_key(request: ResizeRequest, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Return ``<prefix><md5 hex>-<serialized length>``."""
    encoded = serialize_request(request).encode("utf-8")
    return f"{prefix}{hashlib.md5(encoded).hexdigest()}-{len(encoded)}"
