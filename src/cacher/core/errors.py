"""Error types raised by the cache."""


class CacheError(Exception):
    """Base class for cache errors."""


class InitializationError(CacheError):
    """Cache directory could not be created and does not exist."""

    def __init__(self, directory: str, reason: str = "") -> None:
        self.directory = directory
        msg = f'Directory "{directory}" was not created'
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
