"""
Storage identifier grammar: cache.<sanitized_key>.<expiry_epoch>
Why: expiry lives in the filename, so no side index can drift or corrupt.
"""

import re
import time
from typing import Optional

PREFIX = "cache."
NEVER_EXPIRES = -1

_DISALLOWED = re.compile(r"[^A-Za-z0-9._-]")
_EXPIRY = re.compile(r"-?[0-9]+")
_IDENTIFIER = re.compile(r"cache\.[A-Za-z0-9._-]*\.(-?[0-9]+)")


def sanitize_key(key: str) -> str:
    # Distinct keys may collide here ("a#b" and "ab"); accepted.
    return _DISALLOWED.sub("", key)


def make_identifier(key: str, expiry_epoch: int) -> str:
    return f"{PREFIX}{sanitize_key(key)}.{int(expiry_epoch)}"


def key_prefix(sanitized_key: str) -> str:
    return f"{PREFIX}{sanitized_key}."


def parse_expiry(identifier: str) -> Optional[int]:
    """Return the expiry epoch encoded in an identifier, or None if malformed."""
    match = _IDENTIFIER.fullmatch(identifier)
    if match is None:
        return None
    return int(match.group(1))


def matches_key(identifier: str, sanitized_key: str) -> bool:
    prefix = key_prefix(sanitized_key)
    if not identifier.startswith(prefix):
        return False
    # "cache.a.b.10" belongs to key "a.b", not to key "a"
    return _EXPIRY.fullmatch(identifier[len(prefix):]) is not None


def is_time_expired(expiry_epoch: Optional[int], now: Optional[float] = None) -> bool:
    if expiry_epoch is None:
        return True
    if expiry_epoch == NEVER_EXPIRES:
        return False
    # Whole seconds: expiry was written as int(now) + ttl.
    return expiry_epoch < int(time.time() if now is None else now)
