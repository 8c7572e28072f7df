"""Immutable per-frame input snapshot contracts."""

from __future__ import annotations

from dataclasses import dataclass, field

from imcore.api.geometry import ZERO_VEC, Pos2, Rect, Vec2
from imcore.api.input_events import (
    NO_MODIFIERS,
    PRIMARY_BUTTON,
    KeyEvent,
    Modifiers,
    PointerEvent,
    WheelEvent,
)


@dataclass(frozen=True, slots=True)
class PointerSnapshot:
    """Frame-stable pointer state with edges relative to the previous frame."""

    position: Pos2 | None = None
    delta: Vec2 = ZERO_VEC
    down_buttons: frozenset[int] = field(default_factory=frozenset)
    pressed_buttons: frozenset[int] = field(default_factory=frozenset)
    released_buttons: frozenset[int] = field(default_factory=frozenset)
    # Where the primary button went down, when that happened during this frame.
    press_origin: Pos2 | None = None
    events: tuple[PointerEvent, ...] = ()

    def is_down(self, button: int = PRIMARY_BUTTON) -> bool:
        return button in self.down_buttons

    def pressed(self, button: int = PRIMARY_BUTTON) -> bool:
        return button in self.pressed_buttons

    def released(self, button: int = PRIMARY_BUTTON) -> bool:
        return button in self.released_buttons


@dataclass(frozen=True, slots=True)
class KeyboardSnapshot:
    """Frame-stable keyboard state; key names are lower-case."""

    down_keys: frozenset[str] = field(default_factory=frozenset)
    pressed_keys: frozenset[str] = field(default_factory=frozenset)
    released_keys: frozenset[str] = field(default_factory=frozenset)
    text: tuple[str, ...] = ()
    modifiers: Modifiers = NO_MODIFIERS
    events: tuple[KeyEvent, ...] = ()

    def key_pressed(self, key: str) -> bool:
        return key.strip().lower() in self.pressed_keys

    def key_down(self, key: str) -> bool:
        return key.strip().lower() in self.down_keys


@dataclass(frozen=True, slots=True)
class InputSnapshot:
    """Immutable frame input consumed read-only by the core."""

    frame_index: int = 0
    time_seconds: float = 0.0
    delta_seconds: float = 0.0
    screen_rect: Rect | None = None
    pointer: PointerSnapshot = field(default_factory=PointerSnapshot)
    keyboard: KeyboardSnapshot = field(default_factory=KeyboardSnapshot)
    scroll_delta: Vec2 = ZERO_VEC
    wheel_events: tuple[WheelEvent, ...] = ()

    @property
    def pointer_pos(self) -> Pos2 | None:
        return self.pointer.position


def create_empty_input_snapshot(*, frame_index: int = 0, time_seconds: float = 0.0) -> InputSnapshot:
    """Create an input snapshot with no pointer and no events."""
    return InputSnapshot(frame_index=frame_index, time_seconds=time_seconds)


def create_pointer_snapshot(
    x: float,
    y: float,
    *,
    frame_index: int = 0,
    down: frozenset[int] = frozenset(),
    pressed: frozenset[int] = frozenset(),
    released: frozenset[int] = frozenset(),
    press_origin: Pos2 | None = None,
    delta: Vec2 = ZERO_VEC,
    scroll_delta: Vec2 = ZERO_VEC,
    keyboard: KeyboardSnapshot | None = None,
) -> InputSnapshot:
    """Build a snapshot directly from pointer state, for hosts without an event stream."""
    return InputSnapshot(
        frame_index=frame_index,
        pointer=PointerSnapshot(
            position=Pos2(float(x), float(y)),
            delta=delta,
            down_buttons=frozenset(down),
            pressed_buttons=frozenset(pressed),
            released_buttons=frozenset(released),
            press_origin=press_origin,
        ),
        keyboard=keyboard or KeyboardSnapshot(),
        scroll_delta=scroll_delta,
    )


__all__ = [
    "InputSnapshot",
    "KeyboardSnapshot",
    "PointerSnapshot",
    "create_empty_input_snapshot",
    "create_pointer_snapshot",
]
