"""Per-frame accumulation of paint primitives and deferred state mutations."""

from __future__ import annotations

from dataclasses import replace

from imcore.api.geometry import EVERYTHING, Pos2, Rect
from imcore.api.output import (
    CursorIcon,
    FrameOutput,
    IdCollision,
    LayoutOverflow,
    ProtocolIssue,
    StateMutation,
)
from imcore.api.ids import WidgetId
from imcore.api.paint import (
    UNIT_UV,
    FilledRect,
    PaintPrimitive,
    StrokedPath,
    TextRun,
    TexturedQuad,
    rect_outline,
)


class OutputAccumulator:
    """Collects primitives in call order; call order is z-order."""

    def __init__(self) -> None:
        self._slots: list[PaintPrimitive | None] = []
        self._mutations: list[StateMutation] = []
        self._cursor_icon: CursorIcon = "default"
        self._copied: list[str] = []
        self._repaint_reasons: list[str] = []

    def reset(self) -> None:
        self._slots = []
        self._mutations = []
        self._cursor_icon = "default"
        self._copied = []
        self._repaint_reasons = []

    def __len__(self) -> int:
        return sum(1 for item in self._slots if item is not None)

    @property
    def mutations(self) -> tuple[StateMutation, ...]:
        return tuple(self._mutations)

    def push(self, primitive: PaintPrimitive) -> PaintPrimitive:
        """Append a primitive, stamping its z from the call sequence."""
        stamped = replace(primitive, z=len(self._slots))
        self._slots.append(stamped)
        return stamped

    def reserve_slot(self) -> int:
        """Hold a z position to fill once later content has been measured."""
        self._slots.append(None)
        return len(self._slots) - 1

    def fill_slot(self, index: int, primitive: PaintPrimitive) -> PaintPrimitive:
        if not 0 <= index < len(self._slots):
            raise IndexError(f"no reserved paint slot at {index}")
        if self._slots[index] is not None:
            raise ValueError(f"paint slot {index} is already filled")
        stamped = replace(primitive, z=index)
        self._slots[index] = stamped
        return stamped

    def add_rect(
        self,
        rect: Rect,
        color: str,
        *,
        clip: Rect = EVERYTHING,
        corner_radius: float = 0.0,
    ) -> PaintPrimitive:
        return self.push(FilledRect(rect=rect, color=color, corner_radius=corner_radius, clip=clip))

    def add_path(
        self,
        points: tuple[Pos2, ...],
        color: str,
        *,
        clip: Rect = EVERYTHING,
        width: float = 1.0,
        closed: bool = False,
    ) -> PaintPrimitive:
        return self.push(
            StrokedPath(points=points, color=color, width=width, closed=closed, clip=clip)
        )

    def add_stroke(
        self,
        rect: Rect,
        color: str,
        *,
        clip: Rect = EVERYTHING,
        width: float = 1.0,
    ) -> PaintPrimitive:
        return self.add_path(rect_outline(rect), color, clip=clip, width=width, closed=True)

    def add_text(
        self,
        pos: Pos2,
        text: str,
        color: str,
        *,
        clip: Rect = EVERYTHING,
        font_size: float = 14.0,
    ) -> PaintPrimitive:
        return self.push(TextRun(pos=pos, text=text, color=color, font_size=font_size, clip=clip))

    def add_image(
        self,
        rect: Rect,
        texture_id: str,
        *,
        clip: Rect = EVERYTHING,
        uv: Rect = UNIT_UV,
        tint: str = "#ffffff",
    ) -> PaintPrimitive:
        return self.push(TexturedQuad(rect=rect, texture_id=texture_id, uv=uv, tint=tint, clip=clip))

    def queue_mutation(self, mutation: StateMutation) -> None:
        """Defer a state change to the next frame's begin step."""
        if mutation not in self._mutations:
            self._mutations.append(mutation)

    def set_cursor_icon(self, icon: CursorIcon) -> None:
        self._cursor_icon = icon

    def copy_text(self, text: str) -> None:
        if text:
            self._copied.append(text)

    def request_repaint(self, reason: str) -> None:
        if reason not in self._repaint_reasons:
            self._repaint_reasons.append(reason)

    def finish(
        self,
        *,
        frame_index: int,
        extra_mutations: tuple[StateMutation, ...] = (),
        extra_repaint_reasons: tuple[str, ...] = (),
        collisions: tuple[IdCollision, ...] = (),
        overflows: tuple[LayoutOverflow, ...] = (),
        protocol_errors: tuple[ProtocolIssue, ...] = (),
        hovered_id: WidgetId | None = None,
        focused_id: WidgetId | None = None,
        dragged_id: WidgetId | None = None,
        widget_count: int = 0,
        partial: bool = False,
    ) -> FrameOutput:
        """Hand the frame's primitives and queued state over by value."""
        for mutation in extra_mutations:
            self.queue_mutation(mutation)
        reasons = list(self._repaint_reasons)
        for reason in extra_repaint_reasons:
            if reason not in reasons:
                reasons.append(reason)
        if self._mutations and "mutations_queued" not in reasons:
            reasons.append("mutations_queued")
        output = FrameOutput(
            frame_index=frame_index,
            primitives=tuple(item for item in self._slots if item is not None),
            cursor_icon=self._cursor_icon,
            needs_repaint=bool(reasons),
            repaint_reasons=tuple(reasons),
            mutations=tuple(self._mutations),
            collisions=collisions,
            overflows=overflows,
            protocol_errors=protocol_errors,
            hovered_id=hovered_id,
            focused_id=focused_id,
            dragged_id=dragged_id,
            copied_text="\n".join(self._copied),
            partial=partial,
            widget_count=widget_count,
        )
        self.reset()
        return output
