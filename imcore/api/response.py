"""Per-widget interaction result returned to application code."""

from __future__ import annotations

from dataclasses import dataclass

from imcore.api.geometry import ZERO_VEC, Rect, Vec2
from imcore.api.ids import WidgetId


@dataclass(frozen=True, slots=True)
class Sense:
    """Which interactions a widget participates in."""

    click: bool = False
    drag: bool = False
    focusable: bool = False

    @property
    def interactive(self) -> bool:
        return self.click or self.drag

    def union(self, other: Sense) -> Sense:
        return Sense(
            click=self.click or other.click,
            drag=self.drag or other.drag,
            focusable=self.focusable or other.focusable,
        )


SENSE_HOVER = Sense()
SENSE_CLICK = Sense(click=True)
SENSE_DRAG = Sense(drag=True)
SENSE_CLICK_AND_DRAG = Sense(click=True, drag=True)
SENSE_FOCUSABLE_CLICK = Sense(click=True, focusable=True)


@dataclass(frozen=True, slots=True)
class Response:
    """One-frame interaction outcome for a widget."""

    id: WidgetId
    rect: Rect
    sense: Sense = SENSE_HOVER
    hovered: bool = False
    contains_pointer: bool = False
    pressed: bool = False
    is_pointer_button_down_on: bool = False
    clicked: bool = False
    secondary_clicked: bool = False
    drag_started: bool = False
    dragged: bool = False
    drag_stopped: bool = False
    drag_delta: Vec2 = ZERO_VEC
    has_focus: bool = False
    gained_focus: bool = False
    lost_focus: bool = False
    interaction_suppressed: bool = False

    @classmethod
    def suppressed(cls, widget_id: WidgetId, rect: Rect, sense: Sense) -> Response:
        """Inert response for a widget whose id collided this frame."""
        return cls(id=widget_id, rect=rect, sense=sense, interaction_suppressed=True)


__all__ = [
    "Response",
    "SENSE_CLICK",
    "SENSE_CLICK_AND_DRAG",
    "SENSE_DRAG",
    "SENSE_FOCUSABLE_CLICK",
    "SENSE_HOVER",
    "Sense",
]
