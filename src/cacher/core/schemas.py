"""
Pydantic model for store configuration.
Why: validate options once; merging partial updates stays explicit.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_DIRECTORY = "cache"
DEFAULT_TTL_SECONDS = 3600


class CacheOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    directory: str = Field(default=DEFAULT_DIRECTORY, min_length=1)
    default_ttl_seconds: int = Field(default=DEFAULT_TTL_SECONDS, ge=-1)
    clear_randomly: bool = False
    never_clear_all: bool = False
    delete_expired_on_read: bool = False

    def merged(self, overrides: Dict[str, Any]) -> "CacheOptions":
        """Return a validated copy with ``overrides`` applied over current values."""
        data = self.model_dump()
        data.update(overrides)
        return CacheOptions(**data)
