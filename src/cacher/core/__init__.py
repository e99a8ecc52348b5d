"""Cache internals: identifier grammar, codec, options and the store."""

from cacher.core.errors import CacheError, InitializationError
from cacher.core.schemas import CacheOptions
from cacher.core.store import FileKeyValueStore

__all__ = ["CacheError", "CacheOptions", "FileKeyValueStore", "InitializationError"]
