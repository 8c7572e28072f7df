"""Typed per-widget payloads kept in persistent memory.

Entries form a closed tagged union. Each kind maps to and from a plain dict
carrying a ``kind`` tag, which is what the persistence boundary serializes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from imcore.api.geometry import ZERO_VEC, Vec2


@dataclass(frozen=True, slots=True)
class CursorRange:
    """Text cursor with an anchored selection end, in character indices."""

    primary: int = 0
    secondary: int = 0

    @classmethod
    def one(cls, index: int) -> CursorRange:
        return cls(index, index)

    @property
    def is_empty(self) -> bool:
        return self.primary == self.secondary

    def sorted(self) -> tuple[int, int]:
        return (min(self.primary, self.secondary), max(self.primary, self.secondary))

    def clamp(self, length: int) -> CursorRange:
        return CursorRange(
            max(0, min(self.primary, length)),
            max(0, min(self.secondary, length)),
        )


@dataclass(frozen=True, slots=True)
class ScrollState:
    offset: Vec2 = ZERO_VEC
    content_size: Vec2 = ZERO_VEC
    viewport_size: Vec2 = ZERO_VEC
    kind: Literal["scroll"] = "scroll"

    @property
    def max_offset(self) -> Vec2:
        return Vec2(
            max(0.0, self.content_size.x - self.viewport_size.x),
            max(0.0, self.content_size.y - self.viewport_size.y),
        )

    def clamped(self, offset: Vec2) -> Vec2:
        limit = self.max_offset
        return Vec2(max(0.0, min(offset.x, limit.x)), max(0.0, min(offset.y, limit.y)))


@dataclass(frozen=True, slots=True)
class TextEditState:
    cursor: CursorRange | None = None
    kind: Literal["text_edit"] = "text_edit"


@dataclass(frozen=True, slots=True)
class CollapsedState:
    open: bool = False
    kind: Literal["collapsed"] = "collapsed"


@dataclass(frozen=True, slots=True)
class DragValueState:
    value: float = 0.0
    drag_start_value: float | None = None
    kind: Literal["drag_value"] = "drag_value"


MemoryEntry = ScrollState | TextEditState | CollapsedState | DragValueState
MEMORY_ENTRY_KINDS: tuple[type[MemoryEntry], ...] = (
    ScrollState,
    TextEditState,
    CollapsedState,
    DragValueState,
)


def _vec(raw: Any) -> Vec2:
    return Vec2(float(raw[0]), float(raw[1]))


def entry_to_dict(entry: MemoryEntry) -> dict[str, Any]:
    """Return a JSON-ready mapping for one entry."""
    if isinstance(entry, ScrollState):
        return {
            "kind": entry.kind,
            "offset": [entry.offset.x, entry.offset.y],
            "content_size": [entry.content_size.x, entry.content_size.y],
            "viewport_size": [entry.viewport_size.x, entry.viewport_size.y],
        }
    if isinstance(entry, TextEditState):
        cursor = None if entry.cursor is None else [entry.cursor.primary, entry.cursor.secondary]
        return {"kind": entry.kind, "cursor": cursor}
    if isinstance(entry, CollapsedState):
        return {"kind": entry.kind, "open": entry.open}
    if isinstance(entry, DragValueState):
        return {
            "kind": entry.kind,
            "value": entry.value,
            "drag_start_value": entry.drag_start_value,
        }
    raise TypeError(f"unsupported memory entry: {type(entry).__name__}")


def entry_from_dict(raw: dict[str, Any]) -> MemoryEntry:
    """Rebuild an entry from its tagged mapping."""
    kind = str(raw.get("kind", ""))
    if kind == "scroll":
        return ScrollState(
            offset=_vec(raw.get("offset", (0.0, 0.0))),
            content_size=_vec(raw.get("content_size", (0.0, 0.0))),
            viewport_size=_vec(raw.get("viewport_size", (0.0, 0.0))),
        )
    if kind == "text_edit":
        cursor_raw = raw.get("cursor")
        cursor = None if cursor_raw is None else CursorRange(int(cursor_raw[0]), int(cursor_raw[1]))
        return TextEditState(cursor=cursor)
    if kind == "collapsed":
        return CollapsedState(open=bool(raw.get("open", False)))
    if kind == "drag_value":
        start = raw.get("drag_start_value")
        return DragValueState(
            value=float(raw.get("value", 0.0)),
            drag_start_value=None if start is None else float(start),
        )
    raise ValueError(f"unknown memory entry kind: {kind!r}")


__all__ = [
    "CollapsedState",
    "CursorRange",
    "DragValueState",
    "MEMORY_ENTRY_KINDS",
    "MemoryEntry",
    "ScrollState",
    "TextEditState",
    "entry_from_dict",
    "entry_to_dict",
]
