from __future__ import annotations

from typing import Any

import orjson

ORJSON_OPTIONS = orjson.OPT_NON_STR_KEYS | orjson.OPT_UTC_Z


def encode(value: Any) -> bytes:
    """Serialize a value to the JSON bytes kept in the store."""
    return orjson.dumps(value, option=ORJSON_OPTIONS)


def decode(data: bytes) -> Any:
    """Deserialize stored JSON bytes."""
    return orjson.loads(data)
