"""File-backed key/value cache with expiry encoded in each entry's filename."""

from typing import Any

from cacher.config.settings import settings
from cacher.core import CacheError, CacheOptions, FileKeyValueStore, InitializationError


def open_store(**overrides: Any) -> FileKeyValueStore:
    """Build a store from environment settings with ``overrides`` applied."""
    return FileKeyValueStore(settings.as_options(), **overrides)


__all__ = [
    "CacheError",
    "CacheOptions",
    "FileKeyValueStore",
    "InitializationError",
    "open_store",
]
