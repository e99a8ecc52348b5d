"""
File-backed key/value store with expiry encoded in each entry's filename.
Why: no index file to corrupt; expiry is read back from the directory listing.

Expired entries are removed lazily (on read, when enabled), explicitly
(``delete_if_expired``) or by the sweep that ``close()`` runs once.
"""

import os
import random
import tempfile
import time
from typing import Any, Callable, Dict, List, Optional

from . import codec
from .entry import (
    NEVER_EXPIRES,
    is_time_expired,
    make_identifier,
    matches_key,
    parse_expiry,
    sanitize_key,
)
from .errors import InitializationError
from .logging import get_logger
from .schemas import CacheOptions

_LOG = get_logger(__name__)

_TMP_PREFIX = ".tmp-"

# mkstemp creates 0600 files; entries get the usual umask-derived mode instead.
_UMASK = os.umask(0)
os.umask(_UMASK)
ENTRY_MODE = 0o666 & ~_UMASK


class FileKeyValueStore:
    def __init__(self, options: Optional[CacheOptions] = None, **overrides: Any) -> None:
        base = options or CacheOptions()
        self._options = base.merged(overrides) if overrides else base
        self._initialized = False
        self._sweep_armed = False
        self._closed = False

    # -- configuration -----------------------------------------------------

    @property
    def options(self) -> CacheOptions:
        return self._options

    @property
    def directory(self) -> str:
        return self._options.directory

    def configure(
        self, options: Optional[Dict[str, Any]] = None, **overrides: Any
    ) -> CacheOptions:
        """Merge options over the current configuration and initialize.

        With nothing to merge the current configuration is returned as is.
        """
        updates: Dict[str, Any] = dict(options or {})
        updates.update(overrides)
        if not updates:
            return self._options
        self._options = self._options.merged(updates)
        self._init()
        return self._options

    def _init(self) -> None:
        directory = os.path.abspath(self._options.directory)
        if directory != self._options.directory:
            self._options = self._options.merged({"directory": directory})
        if not os.path.isdir(directory):
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as exc:
                if not os.path.isdir(directory):
                    raise InitializationError(directory, str(exc)) from exc
            _LOG.info("cache directory created", extra={"path": directory})
        if not self._options.never_clear_all and not self._closed:
            self._sweep_armed = True
        self._initialized = True

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self._init()

    # -- lookup ------------------------------------------------------------

    def _search(self, sanitized_key: str) -> List[str]:
        # Listing order, not sorted; callers take the first match.
        return [
            name
            for name in os.listdir(self.directory)
            if matches_key(name, sanitized_key)
        ]

    def _path(self, identifier: str) -> str:
        return os.path.join(self.directory, identifier)

    def entries(self) -> List[str]:
        """Storage identifiers currently on disk."""
        self._ensure_initialized()
        return [
            name
            for name in os.listdir(self.directory)
            if parse_expiry(name) is not None
        ]

    # -- expiry ------------------------------------------------------------

    def _expiry_for(self, ttl_seconds: Optional[int]) -> int:
        if ttl_seconds == NEVER_EXPIRES:
            return NEVER_EXPIRES
        default = self._options.default_ttl_seconds
        if ttl_seconds is None and default == NEVER_EXPIRES:
            return NEVER_EXPIRES
        return int(time.time()) + (default if ttl_seconds is None else ttl_seconds)

    def get_expired_time(self, key: str) -> Optional[int]:
        self._ensure_initialized()
        found = self._search(sanitize_key(key))
        if not found:
            return None
        return parse_expiry(found[0])

    def is_expired(self, key: str) -> bool:
        """True when the entry's expiry has passed, or when there is no entry."""
        return is_time_expired(self.get_expired_time(key))

    def delete_if_expired(self, key: str) -> bool:
        if self.is_expired(key):
            self.delete(key)
            return True
        return False

    # -- read / write / delete ---------------------------------------------

    def write(
        self, key: str, value: Any, ttl_seconds: Optional[int] = None, encode: bool = False
    ) -> str:
        """Store ``value`` under ``key``, replacing any previous entry.

        Args:
            key: Caller key; characters outside [A-Za-z0-9._-] are dropped.
            value: JSON-representable value, or any picklable object with ``encode``.
            ttl_seconds: Lifetime in seconds, -1 for never, None for the default.
            encode: Pickle the value first and store it as an opaque string.

        Returns:
            The storage identifier the entry was written under.
        """
        self._ensure_initialized()
        self.delete(key)
        payload = codec.encode(value, serialize=encode)
        identifier = make_identifier(key, self._expiry_for(ttl_seconds))

        fd, tmp_path = tempfile.mkstemp(prefix=_TMP_PREFIX, dir=self.directory)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.chmod(tmp_path, ENTRY_MODE)
            os.replace(tmp_path, self._path(identifier))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        _LOG.debug("cache write", extra={"cache_id": identifier, "bytes": len(payload)})
        return identifier

    def read(
        self,
        key: str,
        decode: bool = False,
        producer: Optional[Callable[[], Any]] = None,
        store_producer_result: bool = True,
        ttl_seconds: Optional[int] = None,
        encode_producer_result: bool = False,
    ) -> Optional[Any]:
        """Return the cached value for ``key``, or None when absent.

        When absent and ``producer`` is given, its result is returned and,
        if truthy and ``store_producer_result`` is set, written back first.
        Producer exceptions propagate.
        """
        self._ensure_initialized()
        if self._options.delete_expired_on_read:
            self.delete_if_expired(key)

        found = self._search(sanitize_key(key))
        if found:
            try:
                with open(self._path(found[0]), "rb") as f:
                    payload = f.read()
            except FileNotFoundError:
                _LOG.debug("cache entry vanished", extra={"cache_id": found[0]})
            else:
                try:
                    return codec.decode(payload, deserialize=decode)
                except ValueError as exc:
                    _LOG.warning(
                        "cache entry unreadable", extra={"cache_id": found[0], "error": str(exc)}
                    )

        if producer is None:
            return None
        data = producer()
        if not data:
            return None
        if store_producer_result:
            self.write(key, data, ttl_seconds=ttl_seconds, encode=encode_producer_result)
        return data

    def _unlink(self, identifier: str) -> bool:
        try:
            os.unlink(self._path(identifier))
            return True
        except OSError as exc:
            _LOG.warning("cache delete failed", extra={"cache_id": identifier, "error": str(exc)})
            return False

    def delete(self, key: str) -> int:
        """Remove every entry for ``key``. Missing keys are a no-op."""
        self._ensure_initialized()
        return sum(self._unlink(name) for name in self._search(sanitize_key(key)))

    # -- sweep / lifecycle -------------------------------------------------

    def sweep(self, force: bool = False) -> int:
        """Delete all expired entries in the directory.

        Skipped when ``never_clear_all`` is set, and on ~99% of calls when
        ``clear_randomly`` is set, unless ``force`` is true.
        """
        self._ensure_initialized()
        if not force:
            if self._options.never_clear_all:
                return 0
            if self._options.clear_randomly and random.randint(1, 100) != 1:
                return 0

        now = time.time()
        removed = 0
        for name in os.listdir(self.directory):
            expiry = parse_expiry(name)
            if expiry is None:
                continue
            if is_time_expired(expiry, now) and self._unlink(name):
                removed += 1
        _LOG.debug("cache sweep", extra={"path": self.directory, "removed": removed})
        return removed

    def close(self) -> None:
        """Run the end-of-life sweep once, if armed. Never raises on I/O errors."""
        if self._closed:
            return
        self._closed = True
        if not self._sweep_armed:
            return
        self._sweep_armed = False
        try:
            self.sweep()
        except OSError as exc:
            _LOG.warning("cache sweep failed", extra={"path": self.directory, "error": str(exc)})

    def __enter__(self) -> "FileKeyValueStore":
        self._ensure_initialized()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
