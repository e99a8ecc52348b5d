"""Environment-driven defaults."""

from cacher.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
