"""Raw pointer/key/wheel event queue turned into edge-based input snapshots."""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Callable, Iterable
from typing import Any

from imcore.api.geometry import ZERO_VEC, Pos2, Rect, Vec2
from imcore.api.input_events import (
    PRIMARY_BUTTON,
    InputEvent,
    KeyEvent,
    Modifiers,
    PointerEvent,
    WheelEvent,
)
from imcore.api.input_snapshot import InputSnapshot, KeyboardSnapshot, PointerSnapshot
from imcore.runtime.time import FrameClock

logger = logging.getLogger("imcore.input")

_MODIFIER_KEYS: dict[str, str] = {
    "shift": "shift",
    "control": "ctrl",
    "ctrl": "ctrl",
    "meta": "ctrl",
    "alt": "alt",
}


class InputController:
    """Collect raw events between frames and build one snapshot per frame."""

    def __init__(
        self,
        *,
        clock: FrameClock | None = None,
        on_event_queued: Callable[[], None] | None = None,
    ) -> None:
        self._clock = clock or FrameClock()
        self._pointer_events: deque[PointerEvent] = deque()
        self._key_events: deque[KeyEvent] = deque()
        self._wheel_events: deque[WheelEvent] = deque()
        self._down_keys: set[str] = set()
        self._down_buttons: set[int] = set()
        self._pointer: Pos2 | None = None
        self._prev_pointer: Pos2 | None = None
        self._debug = os.getenv("IMCORE_DEBUG_INPUT", "0") == "1"
        self._on_event_queued = on_event_queued

    @property
    def clock(self) -> FrameClock:
        return self._clock

    def bind(self, canvas: Any) -> None:
        """Attach listeners to a canvas exposing ``add_event_handler(callback, type)``."""
        if not hasattr(canvas, "add_event_handler"):
            raise RuntimeError("Canvas does not support event handlers.")
        canvas.add_event_handler(self._on_canvas_event, "pointer_down")
        canvas.add_event_handler(self._on_canvas_event, "pointer_move")
        canvas.add_event_handler(self._on_canvas_event, "pointer_up")
        canvas.add_event_handler(self._on_canvas_event, "key_down")
        canvas.add_event_handler(self._on_canvas_event, "key_up")
        canvas.add_event_handler(self._on_canvas_event, "char")
        canvas.add_event_handler(self._on_canvas_event, "wheel")

    def push(self, event: InputEvent) -> None:
        """Queue one normalized raw event for the next snapshot."""
        if isinstance(event, PointerEvent):
            self._pointer_events.append(event)
        elif isinstance(event, KeyEvent):
            self._key_events.append(event)
        elif isinstance(event, WheelEvent):
            self._wheel_events.append(event)
        else:
            raise TypeError(f"unsupported input event: {type(event).__name__}")
        if self._on_event_queued is not None:
            self._on_event_queued()

    def consume_events(self, events: Iterable[InputEvent]) -> None:
        """Ingest normalized raw input events produced by a window layer."""
        for raw in events:
            self.push(raw)

    def drain_pointer_events(self) -> list[PointerEvent]:
        """Return and clear queued pointer events."""
        items = list(self._pointer_events)
        self._pointer_events.clear()
        return items

    def drain_key_events(self) -> list[KeyEvent]:
        """Return and clear key/char events."""
        items = list(self._key_events)
        self._key_events.clear()
        return items

    def drain_wheel_events(self) -> list[WheelEvent]:
        """Return and clear wheel events."""
        items = list(self._wheel_events)
        self._wheel_events.clear()
        return items

    def build_input_snapshot(self, *, screen_rect: Rect | None = None) -> InputSnapshot:
        """Build one immutable per-frame snapshot and consume queued raw events."""
        timing = self._clock.next()
        pointer_events = tuple(self.drain_pointer_events())
        key_events = tuple(self.drain_key_events())
        wheel_events = tuple(self.drain_wheel_events())

        pressed_buttons: set[int] = set()
        released_buttons: set[int] = set()
        press_origin: Pos2 | None = None
        for pointer_event in pointer_events:
            if pointer_event.event_type == "pointer_gone":
                self._pointer = None
                continue
            self._pointer = Pos2(float(pointer_event.x), float(pointer_event.y))
            button = int(pointer_event.button)
            if pointer_event.event_type == "pointer_down" and button > 0:
                pressed_buttons.add(button)
                self._down_buttons.add(button)
                if button == PRIMARY_BUTTON and press_origin is None:
                    press_origin = self._pointer
            elif pointer_event.event_type == "pointer_up" and button > 0:
                released_buttons.add(button)
                self._down_buttons.discard(button)

        scroll_x = 0.0
        scroll_y = 0.0
        for wheel_event in wheel_events:
            scroll_x += float(wheel_event.dx)
            scroll_y += float(wheel_event.dy)

        pressed_keys: set[str] = set()
        released_keys: set[str] = set()
        text_input: list[str] = []
        for key_event in key_events:
            value = str(key_event.value)
            if key_event.event_type == "key_down":
                norm = value.strip().lower()
                if norm:
                    pressed_keys.add(norm)
                    self._down_keys.add(norm)
            elif key_event.event_type == "key_up":
                norm = value.strip().lower()
                if norm:
                    released_keys.add(norm)
                    self._down_keys.discard(norm)
            elif key_event.event_type == "char":
                text_input.append(value)

        delta = ZERO_VEC
        if self._pointer is not None and self._prev_pointer is not None:
            delta = Vec2(self._pointer.x - self._prev_pointer.x, self._pointer.y - self._prev_pointer.y)
        self._prev_pointer = self._pointer

        keyboard = KeyboardSnapshot(
            down_keys=frozenset(self._down_keys),
            pressed_keys=frozenset(pressed_keys),
            released_keys=frozenset(released_keys),
            text=tuple(text_input),
            modifiers=self._modifiers(),
            events=key_events,
        )
        pointer = PointerSnapshot(
            position=self._pointer,
            delta=delta,
            down_buttons=frozenset(self._down_buttons),
            pressed_buttons=frozenset(pressed_buttons),
            released_buttons=frozenset(released_buttons),
            press_origin=press_origin,
            events=pointer_events,
        )
        if self._debug and (pointer_events or key_events or wheel_events):
            logger.debug(
                "input_snapshot frame=%d pointer_events=%d key_events=%d wheel_events=%d",
                timing.frame_index,
                len(pointer_events),
                len(key_events),
                len(wheel_events),
            )
        return InputSnapshot(
            frame_index=timing.frame_index,
            time_seconds=timing.time_seconds,
            delta_seconds=timing.delta_seconds,
            screen_rect=screen_rect,
            pointer=pointer,
            keyboard=keyboard,
            scroll_delta=Vec2(scroll_x, scroll_y),
            wheel_events=wheel_events,
        )

    def _modifiers(self) -> Modifiers:
        held = {_MODIFIER_KEYS[key] for key in self._down_keys if key in _MODIFIER_KEYS}
        return Modifiers(shift="shift" in held, ctrl="ctrl" in held, alt="alt" in held)

    def _on_canvas_event(self, event: dict[str, Any]) -> None:
        event_type = event.get("event_type")
        if event_type in {"pointer_down", "pointer_move", "pointer_up"}:
            x = event.get("x")
            y = event.get("y")
            if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
                return
            button = event.get("button")
            if not isinstance(button, int):
                button = 0
            self.push(PointerEvent(event_type, float(x), float(y), button))
        elif event_type in {"key_down", "key_up"}:
            key = event.get("key")
            if isinstance(key, str):
                self.push(KeyEvent(event_type, key))
        elif event_type == "char":
            char = event.get("data")
            if isinstance(char, str):
                self.push(KeyEvent("char", char))
        elif event_type == "wheel":
            x = event.get("x")
            y = event.get("y")
            dy = event.get("dy")
            dx = event.get("dx", 0.0)
            if (
                not isinstance(x, (int, float))
                or not isinstance(y, (int, float))
                or not isinstance(dy, (int, float))
            ):
                return
            self.push(
                WheelEvent(float(x), float(y), float(dy), float(dx) if isinstance(dx, (int, float)) else 0.0)
            )
        elif self._debug:
            logger.debug("input_event_ignored type=%s", event_type)
