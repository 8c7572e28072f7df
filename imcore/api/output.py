"""Frame output contracts consumed by the presenter and the next frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from imcore.api.geometry import Rect, Vec2
from imcore.api.ids import WidgetId
from imcore.api.paint import PaintPrimitive

CursorIcon = Literal[
    "default",
    "pointer",
    "text",
    "grab",
    "grabbing",
    "move",
    "not_allowed",
    "resize_horizontal",
    "resize_vertical",
]
ScrollAlign = Literal["top", "center", "bottom", "nearest"]


@dataclass(frozen=True, slots=True)
class RequestFocus:
    target: WidgetId
    kind: Literal["request_focus"] = "request_focus"


@dataclass(frozen=True, slots=True)
class SurrenderFocus:
    kind: Literal["surrender_focus"] = "surrender_focus"


@dataclass(frozen=True, slots=True)
class ScrollToWidget:
    target: WidgetId
    align: ScrollAlign = "nearest"
    kind: Literal["scroll_to_widget"] = "scroll_to_widget"


StateMutation = RequestFocus | SurrenderFocus | ScrollToWidget


@dataclass(frozen=True, slots=True)
class IdCollision:
    """Two widgets declared with the same id in one frame."""

    widget_id: WidgetId
    first_rect: Rect
    second_rect: Rect
    frame_index: int


@dataclass(frozen=True, slots=True)
class LayoutOverflow:
    """Content placed in a region exceeded the region's bounds."""

    scope_id: WidgetId
    max_rect: Rect
    used_rect: Rect
    overflow: Vec2


@dataclass(frozen=True, slots=True)
class ProtocolIssue:
    """Recovered frame protocol violation."""

    name: str
    detail: str = ""


@dataclass(frozen=True, slots=True)
class FrameOutput:
    """Everything a frame hands to the presenter."""

    frame_index: int
    primitives: tuple[PaintPrimitive, ...] = ()
    cursor_icon: CursorIcon = "default"
    needs_repaint: bool = False
    repaint_reasons: tuple[str, ...] = ()
    mutations: tuple[StateMutation, ...] = ()
    collisions: tuple[IdCollision, ...] = ()
    overflows: tuple[LayoutOverflow, ...] = ()
    protocol_errors: tuple[ProtocolIssue, ...] = ()
    hovered_id: WidgetId | None = None
    focused_id: WidgetId | None = None
    dragged_id: WidgetId | None = None
    copied_text: str = ""
    partial: bool = False
    widget_count: int = field(default=0, compare=False)


__all__ = [
    "CursorIcon",
    "FrameOutput",
    "IdCollision",
    "LayoutOverflow",
    "ProtocolIssue",
    "RequestFocus",
    "ScrollAlign",
    "ScrollToWidget",
    "StateMutation",
    "SurrenderFocus",
]
