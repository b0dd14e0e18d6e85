"""JSON codec helpers for record exchange and log lines."""

from __future__ import annotations

from typing import Any

import orjson


def dumps_bytes(payload: Any, *, pretty: bool = False, sort_keys: bool = False) -> bytes:
    """Serialize payload to UTF-8 JSON bytes."""
    options = 0
    if pretty:
        options |= orjson.OPT_INDENT_2
    if sort_keys:
        options |= orjson.OPT_SORT_KEYS
    return orjson.dumps(payload, option=options, default=_default)


def dumps_text(payload: Any, *, pretty: bool = False, sort_keys: bool = False) -> str:
    return dumps_bytes(payload, pretty=pretty, sort_keys=sort_keys).decode("utf-8")


def loads(data: bytes | bytearray | memoryview | str) -> Any:
    """Parse JSON text or bytes. Raises orjson.JSONDecodeError (a ValueError)."""
    return orjson.loads(data)


def _default(value: object) -> object:
    # Log records may carry arbitrary extras.
    return repr(value)


__all__ = ["dumps_bytes", "dumps_text", "loads"]
