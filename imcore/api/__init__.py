"""Public imcore API contracts."""

from imcore.api.color import Color32, Hsva, adjust_value
from imcore.api.geometry import EVERYTHING, ZERO_VEC, Pos2, Rect, Vec2
from imcore.api.ids import Seed, WidgetId
from imcore.api.input_events import (
    MIDDLE_BUTTON,
    NO_MODIFIERS,
    PRIMARY_BUTTON,
    SECONDARY_BUTTON,
    InputEvent,
    KeyEvent,
    Modifiers,
    PointerEvent,
    WheelEvent,
)
from imcore.api.input_snapshot import (
    InputSnapshot,
    KeyboardSnapshot,
    PointerSnapshot,
    create_empty_input_snapshot,
    create_pointer_snapshot,
)
from imcore.api.memory_entries import (
    CollapsedState,
    CursorRange,
    DragValueState,
    MemoryEntry,
    ScrollState,
    TextEditState,
)
from imcore.api.output import (
    CursorIcon,
    FrameOutput,
    IdCollision,
    LayoutOverflow,
    ProtocolIssue,
    RequestFocus,
    ScrollAlign,
    ScrollToWidget,
    StateMutation,
    SurrenderFocus,
)
from imcore.api.paint import FilledRect, PaintPrimitive, StrokedPath, TextRun, TexturedQuad
from imcore.api.response import (
    SENSE_CLICK,
    SENSE_CLICK_AND_DRAG,
    SENSE_DRAG,
    SENSE_FOCUSABLE_CLICK,
    SENSE_HOVER,
    Response,
    Sense,
)

__all__ = [
    "Color32",
    "CollapsedState",
    "CursorIcon",
    "CursorRange",
    "DragValueState",
    "EVERYTHING",
    "FilledRect",
    "FrameOutput",
    "Hsva",
    "IdCollision",
    "InputEvent",
    "InputSnapshot",
    "KeyEvent",
    "KeyboardSnapshot",
    "LayoutOverflow",
    "MIDDLE_BUTTON",
    "MemoryEntry",
    "Modifiers",
    "NO_MODIFIERS",
    "PRIMARY_BUTTON",
    "PaintPrimitive",
    "PointerEvent",
    "PointerSnapshot",
    "Pos2",
    "ProtocolIssue",
    "Rect",
    "RequestFocus",
    "Response",
    "SECONDARY_BUTTON",
    "SENSE_CLICK",
    "SENSE_CLICK_AND_DRAG",
    "SENSE_DRAG",
    "SENSE_FOCUSABLE_CLICK",
    "SENSE_HOVER",
    "ScrollAlign",
    "ScrollState",
    "ScrollToWidget",
    "Seed",
    "Sense",
    "StateMutation",
    "StrokedPath",
    "SurrenderFocus",
    "TextEditState",
    "TextRun",
    "TexturedQuad",
    "Vec2",
    "WheelEvent",
    "WidgetId",
    "ZERO_VEC",
    "adjust_value",
    "create_empty_input_snapshot",
    "create_pointer_snapshot",
]
