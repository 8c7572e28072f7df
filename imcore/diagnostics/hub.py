"""Bounded in-process diagnostics hub owned by one frame controller."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from typing import Any

from imcore.api.ids import WidgetId
from imcore.diagnostics.event import DiagnosticEvent, utc_now_iso

Subscriber = Callable[[DiagnosticEvent], None]


class DiagnosticHub:
    """Central diagnostics event emission and snapshot facility."""

    def __init__(
        self,
        *,
        capacity: int = 2_000,
        enabled: bool = True,
        category_allowlist: tuple[str, ...] = (),
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._enabled = bool(enabled)
        self._events: deque[DiagnosticEvent] = deque(maxlen=int(capacity))
        self._subscribers: dict[int, Subscriber] = {}
        self._next_subscriber_id = 1
        self._category_allowlist = tuple(
            str(item).strip().lower() for item in category_allowlist if str(item).strip()
        )
        self._counts: dict[str, int] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    def emit(self, event: DiagnosticEvent) -> None:
        if not self._enabled:
            return
        if self._category_allowlist and event.category not in self._category_allowlist:
            return
        self._events.append(event)
        self._counts[event.category] = self._counts.get(event.category, 0) + 1
        for callback in tuple(self._subscribers.values()):
            callback(event)

    def report(
        self,
        *,
        category: str,
        name: str,
        frame_index: int,
        level: str = "info",
        widget_id: WidgetId | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        """Build and emit one event; no-op when disabled."""
        if not self._enabled:
            return
        self.emit(
            DiagnosticEvent(
                ts_utc=utc_now_iso(),
                frame_index=int(frame_index),
                category=str(category).strip().lower(),
                name=name,
                level=level,
                widget_id=None if widget_id is None else widget_id.hex(),
                payload=dict(payload or {}),
            )
        )

    def subscribe(self, callback: Subscriber) -> int:
        token = self._next_subscriber_id
        self._next_subscriber_id += 1
        self._subscribers[token] = callback
        return token

    def unsubscribe(self, token: int) -> None:
        self._subscribers.pop(token, None)

    def count(self, category: str) -> int:
        """Total events accepted for a category, including ones already dropped."""
        return self._counts.get(category, 0)

    def snapshot(
        self,
        *,
        limit: int | None = None,
        category: str | None = None,
        name: str | None = None,
    ) -> list[DiagnosticEvent]:
        events = list(self._events)
        if category is not None:
            events = [event for event in events if event.category == category]
        if name is not None:
            events = [event for event in events if event.name == name]
        if limit is None or limit >= len(events):
            return events
        return events[-max(0, int(limit)) :]

    def clear(self) -> None:
        self._events.clear()
