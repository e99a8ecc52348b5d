"""
JSON logging for cache events.
Why: one machine-readable line per event; entry ids stay greppable fields.
"""

import json
import logging
from typing import Any, Dict, Optional

# Passed through ``extra=`` by the store.
_FIELDS = ("cache_id", "path", "removed", "bytes", "error")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": round(record.created, 3),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in _FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: int = logging.INFO, logger_name: Optional[str] = None) -> None:
    """Attach one JSON handler to ``logger_name`` (root by default). Idempotent."""
    target = logging.getLogger(logger_name)
    if any(isinstance(h.formatter, _JsonFormatter) for h in target.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    target.setLevel(level)
    target.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
