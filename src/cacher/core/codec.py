"""
Payload codec: JSON for every stored value, optional pickle layer for objects.
Why: self-describing files on disk; objects survive as an opaque JSON string.
"""

import base64
import binascii
import json
import pickle
from typing import Any


def encode(value: Any, serialize: bool = False) -> bytes:
    if serialize:
        value = serialize_object(value)
    return json.dumps(value, ensure_ascii=False).encode("utf-8")


def decode(payload: bytes, deserialize: bool = False) -> Any:
    """Decode a stored payload. Raises ValueError for anything unreadable."""
    value = json.loads(payload.decode("utf-8"))
    if deserialize:
        if not isinstance(value, str):
            raise ValueError("Payload is not a serialized object")
        value = deserialize_object(value)
    return value


def serialize_object(value: Any) -> str:
    return base64.b64encode(pickle.dumps(value)).decode("ascii")


def deserialize_object(text: str) -> Any:
    # Only for payloads this cache wrote itself; pickle trusts its input.
    try:
        return pickle.loads(base64.b64decode(text.encode("ascii"), validate=True))
    except (pickle.UnpicklingError, binascii.Error, EOFError, AttributeError, ImportError) as exc:
        raise ValueError(f"Cannot deserialize object: {exc}") from exc
