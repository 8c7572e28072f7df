"""Persistent cross-frame memory keyed by widget id.

Each frame, widget calls read and overwrite their own entries. Entries that
are not touched for more than ``staleness_threshold`` consecutive frames are
dropped at end of frame, and the store never grows past ``max_entries``:
after staleness GC the least recently touched entries are evicted.

The global interaction singletons (focus owner, drag owner, active press)
live here too, as explicit fields owned by one frame controller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from imcore.api.geometry import Pos2, Rect
from imcore.api.ids import WidgetId
from imcore.api.memory_entries import MemoryEntry, entry_from_dict, entry_to_dict
from imcore.api.response import Sense
from imcore.diagnostics.json_codec import dumps_bytes, loads

_LOG = logging.getLogger("imcore.memory")
SCHEMA_VERSION = 1

TEntry = TypeVar("TEntry", bound=MemoryEntry)


@dataclass(frozen=True, slots=True)
class HitRecord:
    """Where one widget was placed, in paint order."""

    widget_id: WidgetId
    rect: Rect
    clip: Rect
    sense: Sense
    order: int

    def contains(self, pos: Pos2) -> bool:
        return self.rect.contains(pos.x, pos.y) and self.clip.contains(pos.x, pos.y)


@dataclass(slots=True)
class InteractionState:
    """Per-widget interaction bookkeeping."""

    is_hovered: bool = False
    drag_origin: Pos2 | None = None
    focus_requested: bool = False


@dataclass(slots=True)
class InteractionGlobals:
    """Single-owner interaction state shared by every widget of one context."""

    focused_id: WidgetId | None = None
    dragged_id: WidgetId | None = None
    pressed_id: WidgetId | None = None
    press_origin: Pos2 | None = None
    press_travel: float = 0.0
    gained_focus_id: WidgetId | None = None
    lost_focus_ids: set[WidgetId] = field(default_factory=set)
    # Frame on which the pending focus notifications were raised.
    focus_change_frame: int = -1


@dataclass(slots=True)
class _Slot:
    entry: MemoryEntry | None = None
    interaction: InteractionState | None = None
    last_touched_frame: int = 0
    staleness: int = 0
    touched: bool = False


@dataclass(frozen=True, slots=True)
class GcReport:
    dropped: tuple[WidgetId, ...] = ()
    evicted: tuple[WidgetId, ...] = ()

    @property
    def removed(self) -> int:
        return len(self.dropped) + len(self.evicted)


@dataclass(frozen=True, slots=True)
class MemoryStats:
    entries: int
    touched: int
    max_staleness: int
    focused_id: WidgetId | None = None
    dragged_id: WidgetId | None = None


class PersistentMemory:
    """Keyed store surviving across frames, with staleness GC."""

    def __init__(self, *, staleness_threshold: int = 120, max_entries: int = 10_000) -> None:
        if staleness_threshold < 0:
            raise ValueError("staleness_threshold must be >= 0")
        if max_entries <= 0:
            raise ValueError("max_entries must be > 0")
        self._staleness_threshold = int(staleness_threshold)
        self._max_entries = int(max_entries)
        self._slots: dict[WidgetId, _Slot] = {}
        self._frame_index = 0
        self.interaction_globals = InteractionGlobals()
        # Widgets placed by the last finished frame; gates hover in the next one.
        self.previous_hits: tuple[HitRecord, ...] = ()

    @property
    def staleness_threshold(self) -> int:
        return self._staleness_threshold

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def frame_index(self) -> int:
        return self._frame_index

    @property
    def focused_id(self) -> WidgetId | None:
        return self.interaction_globals.focused_id

    @property
    def dragged_id(self) -> WidgetId | None:
        return self.interaction_globals.dragged_id

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, widget_id: object) -> bool:
        return widget_id in self._slots

    def ids(self) -> tuple[WidgetId, ...]:
        return tuple(self._slots)

    def _touch_slot(self, widget_id: WidgetId) -> _Slot:
        slot = self._slots.get(widget_id)
        if slot is None:
            slot = _Slot()
            self._slots[widget_id] = slot
        slot.touched = True
        slot.staleness = 0
        slot.last_touched_frame = self._frame_index
        return slot

    def touch(self, widget_id: WidgetId) -> None:
        """Mark an existing entry as referenced this frame."""
        if widget_id in self._slots:
            self._touch_slot(widget_id)

    def get(self, widget_id: WidgetId) -> MemoryEntry | None:
        slot = self._slots.get(widget_id)
        if slot is None:
            return None
        self._touch_slot(widget_id)
        return slot.entry

    def get_typed(self, widget_id: WidgetId, kind: type[TEntry]) -> TEntry | None:
        entry = self.get(widget_id)
        if isinstance(entry, kind):
            return entry
        return None

    def get_or_insert(self, widget_id: WidgetId, factory: Callable[[], TEntry]) -> TEntry:
        """Return the stored entry of the factory's kind, creating it when absent or mismatched."""
        slot = self._touch_slot(widget_id)
        if slot.entry is None:
            created = factory()
            slot.entry = created
            return created
        fresh = factory()
        if isinstance(slot.entry, type(fresh)):
            return slot.entry
        _LOG.debug(
            "memory_entry_kind_replaced id=%s old=%s new=%s",
            widget_id.hex(),
            type(slot.entry).__name__,
            type(fresh).__name__,
        )
        slot.entry = fresh
        return fresh

    def set(self, widget_id: WidgetId, entry: MemoryEntry) -> None:
        slot = self._touch_slot(widget_id)
        slot.entry = entry

    def remove(self, widget_id: WidgetId) -> MemoryEntry | None:
        slot = self._slots.pop(widget_id, None)
        return None if slot is None else slot.entry

    def interaction(self, widget_id: WidgetId) -> InteractionState:
        slot = self._touch_slot(widget_id)
        if slot.interaction is None:
            slot.interaction = InteractionState()
        return slot.interaction

    def peek_interaction(self, widget_id: WidgetId) -> InteractionState | None:
        """Read interaction state without touching the entry."""
        slot = self._slots.get(widget_id)
        return None if slot is None else slot.interaction

    def staleness_of(self, widget_id: WidgetId) -> int | None:
        slot = self._slots.get(widget_id)
        return None if slot is None else slot.staleness

    def begin_frame(self, frame_index: int) -> None:
        """Clear per-frame touched flags and recomputed hover bits."""
        self._frame_index = int(frame_index)
        for slot in self._slots.values():
            slot.touched = False
            if slot.interaction is not None:
                slot.interaction.is_hovered = False

    def collect_garbage(self) -> GcReport:
        """Age untouched entries, drop stale ones, then evict oldest past capacity."""
        dropped: list[WidgetId] = []
        for widget_id, slot in self._slots.items():
            if slot.touched:
                continue
            slot.staleness += 1
            if slot.staleness > self._staleness_threshold:
                dropped.append(widget_id)
        for widget_id in dropped:
            del self._slots[widget_id]

        evicted: list[WidgetId] = []
        overflow = len(self._slots) - self._max_entries
        if overflow > 0:
            oldest = sorted(
                self._slots.items(),
                key=lambda item: (item[1].last_touched_frame, -item[1].staleness),
            )
            for widget_id, _ in oldest[:overflow]:
                del self._slots[widget_id]
                evicted.append(widget_id)
            _LOG.info(
                "memory_capacity_eviction evicted=%d capacity=%d", len(evicted), self._max_entries
            )
        if dropped:
            _LOG.debug("memory_gc dropped=%d remaining=%d", len(dropped), len(self._slots))
        self._forget_globals(set(dropped) | set(evicted))
        return GcReport(dropped=tuple(dropped), evicted=tuple(evicted))

    def _forget_globals(self, removed: set[WidgetId]) -> None:
        if not removed:
            return
        globals_ = self.interaction_globals
        if globals_.focused_id in removed:
            globals_.focused_id = None
        if globals_.dragged_id in removed:
            globals_.dragged_id = None
        if globals_.pressed_id in removed:
            globals_.pressed_id = None
            globals_.press_origin = None
            globals_.press_travel = 0.0
        if globals_.gained_focus_id in removed:
            globals_.gained_focus_id = None
        globals_.lost_focus_ids.difference_update(removed)

    def remember_hits(self, hits: tuple[HitRecord, ...]) -> None:
        self.previous_hits = tuple(hit for hit in hits if hit.widget_id in self._slots)

    def stats(self) -> MemoryStats:
        return MemoryStats(
            entries=len(self._slots),
            touched=sum(1 for slot in self._slots.values() if slot.touched),
            max_staleness=max((slot.staleness for slot in self._slots.values()), default=0),
            focused_id=self.focused_id,
            dragged_id=self.dragged_id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Session-boundary form: entries, per-widget state, focus owner and last hits."""
        widgets: dict[str, Any] = {}
        for widget_id, slot in self._slots.items():
            record: dict[str, Any] = {"staleness": slot.staleness}
            if slot.entry is not None:
                record["entry"] = entry_to_dict(slot.entry)
            if slot.interaction is not None:
                origin = slot.interaction.drag_origin
                record["interaction"] = {
                    "drag_origin": None if origin is None else [origin.x, origin.y],
                    "focus_requested": slot.interaction.focus_requested,
                }
            widgets[widget_id.hex()] = record
        focused = self.interaction_globals.focused_id
        return {
            "schema_version": SCHEMA_VERSION,
            "staleness_threshold": self._staleness_threshold,
            "max_entries": self._max_entries,
            "focused_id": None if focused is None else focused.hex(),
            "hits": [_hit_to_dict(hit) for hit in self.previous_hits],
            "widgets": widgets,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PersistentMemory:
        version = int(raw.get("schema_version", 0))
        if version != SCHEMA_VERSION:
            raise ValueError(f"unsupported memory schema version: {version}")
        memory = cls(
            staleness_threshold=int(raw.get("staleness_threshold", 120)),
            max_entries=int(raw.get("max_entries", 10_000)),
        )
        for key, record in dict(raw.get("widgets", {})).items():
            slot = _Slot(staleness=int(record.get("staleness", 0)))
            entry_raw = record.get("entry")
            if entry_raw is not None:
                slot.entry = entry_from_dict(entry_raw)
            interaction_raw = record.get("interaction")
            if interaction_raw is not None:
                origin = interaction_raw.get("drag_origin")
                slot.interaction = InteractionState(
                    drag_origin=None if origin is None else Pos2(float(origin[0]), float(origin[1])),
                    focus_requested=bool(interaction_raw.get("focus_requested", False)),
                )
            memory._slots[WidgetId.from_hex(key)] = slot
        focused = raw.get("focused_id")
        if focused is not None:
            memory.interaction_globals.focused_id = WidgetId.from_hex(str(focused))
        memory.previous_hits = tuple(_hit_from_dict(item) for item in raw.get("hits", ()))
        return memory

    def dumps(self) -> bytes:
        return dumps_bytes(self.to_dict(), sort_keys=True)

    @classmethod
    def loads(cls, data: bytes | str) -> PersistentMemory:
        raw = loads(data)
        if not isinstance(raw, dict):
            raise ValueError("memory payload must be a JSON object")
        return cls.from_dict(raw)


def _rect_to_list(rect: Rect) -> list[float]:
    return [rect.x, rect.y, rect.w, rect.h]


def _rect_from_list(raw: Any) -> Rect:
    x, y, w, h = (float(value) for value in raw)
    return Rect(x, y, w, h)


def _hit_to_dict(hit: HitRecord) -> dict[str, Any]:
    return {
        "id": hit.widget_id.hex(),
        "rect": _rect_to_list(hit.rect),
        "clip": _rect_to_list(hit.clip),
        "sense": [hit.sense.click, hit.sense.drag, hit.sense.focusable],
        "order": hit.order,
    }


def _hit_from_dict(raw: dict[str, Any]) -> HitRecord:
    click, drag, focusable = (bool(flag) for flag in raw["sense"])
    return HitRecord(
        widget_id=WidgetId.from_hex(str(raw["id"])),
        rect=_rect_from_list(raw["rect"]),
        clip=_rect_from_list(raw["clip"]),
        sense=Sense(click=click, drag=drag, focusable=focusable),
        order=int(raw["order"]),
    )
