"""orjson-backed JSON codec for diagnostics, logging and memory persistence."""

from __future__ import annotations

import dataclasses
from typing import Any

import orjson


def dumps_bytes(payload: Any, *, pretty: bool = False, sort_keys: bool = False) -> bytes:
    """Serialize payload to UTF-8 JSON bytes."""
    options = orjson.OPT_PASSTHROUGH_DATACLASS
    if pretty:
        options |= orjson.OPT_INDENT_2
    if sort_keys:
        options |= orjson.OPT_SORT_KEYS
    return orjson.dumps(payload, option=options, default=_fallback)


def dumps_text(payload: Any, *, pretty: bool = False, sort_keys: bool = False) -> str:
    return dumps_bytes(payload, pretty=pretty, sort_keys=sort_keys).decode("utf-8")


def loads(data: bytes | str) -> Any:
    """Parse JSON bytes or text."""
    return orjson.loads(data)


def _fallback(value: Any) -> Any:
    # Widget ids render as their hex form; other value objects shallowly as fields.
    hex_method = getattr(value, "hex", None)
    if callable(hex_method) and hasattr(value, "value"):
        return hex_method()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {field.name: getattr(value, field.name) for field in dataclasses.fields(value)}
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return repr(value)


__all__ = ["dumps_bytes", "dumps_text", "loads"]
