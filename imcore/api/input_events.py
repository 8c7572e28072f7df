"""Public raw input event types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PRIMARY_BUTTON = 1
SECONDARY_BUTTON = 2
MIDDLE_BUTTON = 3

PointerEventType = Literal["pointer_down", "pointer_up", "pointer_move", "pointer_gone"]
KeyEventType = Literal["key_down", "key_up", "char"]


@dataclass(frozen=True, slots=True)
class Modifiers:
    """Keyboard modifier state."""

    shift: bool = False
    ctrl: bool = False
    alt: bool = False

    @property
    def any(self) -> bool:
        return self.shift or self.ctrl or self.alt


NO_MODIFIERS = Modifiers()


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """Raw pointer event in logical points."""

    event_type: PointerEventType
    x: float
    y: float
    button: int = 0


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """Raw key/char event."""

    event_type: KeyEventType
    value: str
    modifiers: Modifiers = NO_MODIFIERS


@dataclass(frozen=True, slots=True)
class WheelEvent:
    """Scroll wheel event; positive dy moves the viewport toward later content."""

    x: float
    y: float
    dy: float
    dx: float = 0.0


InputEvent = PointerEvent | KeyEvent | WheelEvent


__all__ = [
    "InputEvent",
    "KeyEvent",
    "KeyEventType",
    "MIDDLE_BUTTON",
    "Modifiers",
    "NO_MODIFIERS",
    "PRIMARY_BUTTON",
    "PointerEvent",
    "PointerEventType",
    "SECONDARY_BUTTON",
    "WheelEvent",
]
