"""Configuration settings for the cache."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from cacher.core.schemas import DEFAULT_DIRECTORY, DEFAULT_TTL_SECONDS, CacheOptions

load_dotenv()


def _flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    directory: str = os.getenv("CACHER_DIR", DEFAULT_DIRECTORY)
    default_ttl_seconds: int = int(os.getenv("CACHER_DEFAULT_TTL", DEFAULT_TTL_SECONDS))
    clear_randomly: bool = _flag("CACHER_CLEAR_RANDOMLY")
    never_clear_all: bool = _flag("CACHER_NEVER_CLEAR_ALL")
    delete_expired_on_read: bool = _flag("CACHER_DELETE_EXPIRED_ON_READ")

    def as_options(self) -> CacheOptions:
        return CacheOptions(
            directory=self.directory,
            default_ttl_seconds=self.default_ttl_seconds,
            clear_randomly=self.clear_randomly,
            never_clear_all=self.never_clear_all,
            delete_expired_on_read=self.delete_expired_on_read,
        )

settings = Settings()
