"""ResultCache Protocol - interface for rendered output storage, plus two backends."""

from __future__ import annotations

import os
import tempfile
import threading
from collections import OrderedDict
from os import PathLike
from pathlib import Path
from typing import Protocol, runtime_checkable

from typing_extensions import override


@runtime_checkable
class ResultCache(Protocol):
    """Protocol for the key-value store holding rendered outputs.

    Implementations must be safe for concurrent use and provide
    read-your-writes consistency for a single key. Errors raised by an
    implementation are propagated to the caller unchanged.
    """

    def get(self, key: str) -> tuple[str | None, bool]:
        """Look up a key.

        Returns:
            ``(value, True)`` on a hit, ``(None, False)`` on a miss
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...


class InMemoryCache(ResultCache):
    """Process-local dictionary cache guarded by a lock.

    With ``max_entries`` set, the least recently used entry is evicted once
    the cache grows past that size.
    """

    def __init__(self, max_entries: int | None = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries: int | None = max_entries
        self._items: OrderedDict[str, str] = OrderedDict()
        self._lock: threading.Lock = threading.Lock()

    @override
    def get(self, key: str) -> tuple[str | None, bool]:
        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
                return self._items[key], True
        return None, False

    @override
    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value
            self._items.move_to_end(key)
            if self.max_entries is not None:
                while len(self._items) > self.max_entries:
                    _ = self._items.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items


class LocalFileCache(ResultCache):
    """
    Local filesystem cache, one UTF-8 file per key.

    Layout:
        base_dir/
            <key>.cache
    """

    _SUFFIX: str = ".cache"

    def __init__(self, base_dir: str | PathLike[str]):
        self._base_dir: Path = Path(base_dir).expanduser().resolve()
        self._base_dir.mkdir(parents=True, exist_ok=True)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _safe_path(self, key: str) -> Path:
        """
        Resolve the file backing a key.
        Prevents path traversal.
        """
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"Invalid cache key: {key!r}")

        resolved = (self._base_dir / (key + self._SUFFIX)).resolve()
        if resolved.parent != self._base_dir:
            raise ValueError("Invalid cache key (path traversal detected)")

        return resolved

    @override
    def get(self, key: str) -> tuple[str | None, bool]:
        path = self._safe_path(key)
        try:
            return path.read_text(encoding="utf-8"), True
        except FileNotFoundError:
            return None, False

    @override
    def set(self, key: str, value: str) -> None:
        path = self._safe_path(key)

        # Write to a sibling temp file and rename so readers never see a partial value
        fd, tmp_name = tempfile.mkstemp(dir=self._base_dir, prefix=".tmp-", suffix=self._SUFFIX)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                _ = f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
