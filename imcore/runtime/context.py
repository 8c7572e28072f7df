"""Per-frame widget-call facade handed to application code."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import TypeVar

from imcore.api.geometry import Pos2, Rect, Vec2
from imcore.api.ids import Seed, WidgetId
from imcore.api.input_snapshot import InputSnapshot
from imcore.api.memory_entries import MemoryEntry
from imcore.api.output import (
    CursorIcon,
    IdCollision,
    LayoutOverflow,
    ProtocolIssue,
    ScrollAlign,
    ScrollToWidget,
)
from imcore.api.paint import UNIT_UV, FilledRect, PaintPrimitive
from imcore.api.response import SENSE_HOVER, Response, Sense
from imcore.diagnostics.hub import DiagnosticHub
from imcore.runtime import containers
from imcore.runtime.arbiter import InteractionArbiter
from imcore.runtime.config import CoreConfig, LayoutDirection
from imcore.runtime.containers import (
    CollapsingHeader,
    DragNumberResult,
    ScrollArea,
    TextEditResult,
    Visuals,
)
from imcore.runtime.errors import UnbalancedScopeError
from imcore.runtime.id_hasher import IdStack, id_for
from imcore.runtime.layout import ClipStack, LayoutCursor, Region
from imcore.runtime.memory import PersistentMemory
from imcore.runtime.output import OutputAccumulator

_LOG = logging.getLogger("imcore.frame")
_IDENTITY_LOG = logging.getLogger("imcore.identity")
_COLLISION_OUTLINE = "#ff0000"

TEntry = TypeVar("TEntry", bound=MemoryEntry)


class Context:
    """Everything a widget call needs during one building frame."""

    def __init__(
        self,
        *,
        frame_index: int,
        input_snapshot: InputSnapshot,
        config: CoreConfig,
        memory: PersistentMemory,
        arbiter: InteractionArbiter,
        hub: DiagnosticHub,
        visuals: Visuals | None = None,
    ) -> None:
        screen = input_snapshot.screen_rect or config.screen_rect
        self._frame_index = frame_index
        self._input = input_snapshot
        self._config = config
        self._memory = memory
        self._arbiter = arbiter
        self._hub = hub
        self._screen_rect = screen
        self.visuals = visuals or Visuals()
        self._ids = IdStack()
        self._layout = LayoutCursor(
            screen,
            root_id=self._ids.top(),
            spacing=config.item_spacing,
            direction=config.default_direction,
        )
        self._clips = ClipStack(screen)
        self._output = OutputAccumulator()
        self._rects: dict[WidgetId, Rect] = {}
        self._collisions: list[IdCollision] = []
        self._issues: list[ProtocolIssue] = []
        self._scroll_stack: list[WidgetId] = []
        self._scroll_parents: dict[WidgetId, WidgetId] = {}
        self._scroll_viewports: dict[WidgetId, tuple[Rect, Vec2]] = {}
        self._wheel_consumed = False

    @property
    def frame_index(self) -> int:
        return self._frame_index

    @property
    def input(self) -> InputSnapshot:
        return self._input

    @property
    def config(self) -> CoreConfig:
        return self._config

    @property
    def memory(self) -> PersistentMemory:
        return self._memory

    @property
    def hub(self) -> DiagnosticHub:
        return self._hub

    @property
    def output(self) -> OutputAccumulator:
        return self._output

    @property
    def screen_rect(self) -> Rect:
        return self._screen_rect

    @property
    def clip_rect(self) -> Rect:
        return self._clips.current

    @property
    def region(self) -> Region:
        return self._layout.current

    @property
    def collisions(self) -> tuple[IdCollision, ...]:
        return tuple(self._collisions)

    @property
    def protocol_issues(self) -> tuple[ProtocolIssue, ...]:
        return tuple(self._issues)

    @property
    def widget_rects(self) -> dict[WidgetId, Rect]:
        return dict(self._rects)

    @property
    def scroll_parents(self) -> dict[WidgetId, WidgetId]:
        return dict(self._scroll_parents)

    @property
    def scroll_viewports(self) -> dict[WidgetId, tuple[Rect, Vec2]]:
        return dict(self._scroll_viewports)

    def id_for(self, seed: Seed) -> WidgetId:
        return id_for(seed, self._ids)

    def push_id(self, seed: Seed) -> WidgetId:
        return self._ids.push(seed)

    def pop_id(self) -> WidgetId | None:
        popped = self._ids.pop()
        if popped is None:
            self.report_protocol_issue("id_pop_on_empty", "pop_id without matching push_id")
        return popped

    @contextmanager
    def id_scope(self, seed: Seed) -> Iterator[WidgetId]:
        depth = self._ids.depth
        scope_id = self._ids.push(seed)
        try:
            yield scope_id
        finally:
            self._heal("id", self._ids.truncate(depth + 1))
            self._ids.truncate(depth)

    def push_clip(self, rect: Rect) -> Rect:
        return self._clips.push(rect)

    def pop_clip(self) -> Rect | None:
        popped = self._clips.pop()
        if popped is None:
            self.report_protocol_issue("clip_pop_on_empty", "pop_clip without matching push_clip")
        return popped

    @contextmanager
    def clip_scope(self, rect: Rect) -> Iterator[Rect]:
        depth = self._clips.depth
        clip = self._clips.push(rect)
        try:
            yield clip
        finally:
            self._heal("clip", self._clips.truncate(depth + 1))
            self._clips.truncate(depth)

    def reserve_space(self, size: Vec2) -> Rect:
        return self._layout.reserve_space(size)

    def add_space(self, amount: float) -> None:
        self._layout.add_space(amount)

    def available_rect(self) -> Rect:
        return self._layout.available_rect()

    def push_region(
        self,
        *,
        direction: LayoutDirection | None = None,
        rect: Rect | None = None,
    ) -> Region:
        return self._layout.push_region(self._ids.top(), direction=direction, max_rect=rect)

    def pop_region(self) -> Region | None:
        if self._layout.depth == 0:
            self.report_protocol_issue("layout_pop_on_root", "pop_region without matching push")
            return None
        return self._layout.pop_region()

    @contextmanager
    def layout_region(
        self,
        direction: LayoutDirection | None = None,
        *,
        rect: Rect | None = None,
        unbounded_x: bool = False,
        unbounded_y: bool = False,
        reserve_in_parent: bool | None = None,
    ) -> Iterator[Region]:
        """Nested layout region without an id scope."""
        depth = self._layout.depth
        region = self._layout.push_region(
            self._ids.top(),
            direction=direction,
            max_rect=rect,
            unbounded_x=unbounded_x,
            unbounded_y=unbounded_y,
        )
        reserve = rect is None if reserve_in_parent is None else reserve_in_parent
        try:
            yield region
        finally:
            self._heal("layout", self._layout.truncate(depth + 1))
            if self._layout.depth > depth:
                self._layout.pop_region(reserve_in_parent=reserve)

    def horizontal(self) -> AbstractContextManager[Region]:
        return self.layout_region("horizontal")

    def vertical(self) -> AbstractContextManager[Region]:
        return self.layout_region("vertical")

    def flow(self) -> AbstractContextManager[Region]:
        return self.layout_region("flow")

    @contextmanager
    def scope(
        self,
        seed: Seed,
        *,
        direction: LayoutDirection | None = None,
        rect: Rect | None = None,
        clip: bool = False,
        background: str | None = None,
    ) -> Iterator[Region]:
        """Pair an id scope, a layout region and optionally a clip rect.

        With ``background`` the region's used rect is filled behind its
        children, at the z position the scope opened with.
        """
        outer_clip = self._clips.current
        slot = self._output.reserve_slot() if background is not None else None
        with self.id_scope(seed):
            with self.layout_region(direction, rect=rect) as region:
                if clip:
                    with self.clip_scope(region.max_rect):
                        yield region
                else:
                    yield region
        if slot is not None and background is not None and region.used_rect is not None:
            self._output.fill_slot(
                slot, FilledRect(rect=region.used_rect, color=background, clip=outer_clip)
            )

    def interact(self, seed: Seed, rect: Rect, sense: Sense = SENSE_HOVER) -> Response:
        """Register a widget rect for this frame and return its interaction result."""
        return self.interact_id(self.id_for(seed), rect, sense)

    def interact_id(self, widget_id: WidgetId, rect: Rect, sense: Sense = SENSE_HOVER) -> Response:
        first_rect = self._rects.get(widget_id)
        if first_rect is not None:
            return self._collide(widget_id, first_rect, rect, sense)
        self._rects[widget_id] = rect
        if self._scroll_stack:
            self._scroll_parents[widget_id] = self._scroll_stack[-1]
        return self._arbiter.interact(widget_id, rect, self._clips.current, sense)

    def allocate(self, seed: Seed, size: Vec2, sense: Sense = SENSE_HOVER) -> Response:
        return self.interact(seed, self.reserve_space(size), sense)

    def _collide(self, widget_id: WidgetId, first_rect: Rect, rect: Rect, sense: Sense) -> Response:
        collision = IdCollision(
            widget_id=widget_id,
            first_rect=first_rect,
            second_rect=rect,
            frame_index=self._frame_index,
        )
        self._collisions.append(collision)
        _IDENTITY_LOG.warning(
            "id_collision id=%s first=(%.1f,%.1f,%.1f,%.1f) second=(%.1f,%.1f,%.1f,%.1f)",
            widget_id.hex(),
            first_rect.x,
            first_rect.y,
            first_rect.w,
            first_rect.h,
            rect.x,
            rect.y,
            rect.w,
            rect.h,
        )
        self._hub.report(
            category="identity",
            name="id_collision",
            frame_index=self._frame_index,
            level="warning",
            widget_id=widget_id,
            payload={
                "first_rect": [first_rect.x, first_rect.y, first_rect.w, first_rect.h],
                "second_rect": [rect.x, rect.y, rect.w, rect.h],
            },
        )
        if self._config.debug_id_collisions:
            self._output.add_stroke(rect, _COLLISION_OUTLINE, clip=self._clips.current, width=2.0)
            self._output.add_stroke(first_rect, _COLLISION_OUTLINE, clip=self._clips.current, width=2.0)
        return Response.suppressed(widget_id, rect, sense)

    @property
    def focused_id(self) -> WidgetId | None:
        return self._memory.focused_id

    def has_focus(self, widget_id: WidgetId) -> bool:
        return self._memory.focused_id == widget_id

    def request_focus(self, widget_id: WidgetId) -> None:
        self._arbiter.request_focus(widget_id)

    def surrender_focus(self, widget_id: WidgetId | None = None) -> None:
        self._arbiter.surrender_focus(widget_id)

    def state(self, widget_id: WidgetId, kind: type[TEntry]) -> TEntry | None:
        return self._memory.get_typed(widget_id, kind)

    def state_or_insert(self, widget_id: WidgetId, factory: Callable[[], TEntry]) -> TEntry:
        return self._memory.get_or_insert(widget_id, factory)

    def set_state(self, widget_id: WidgetId, entry: MemoryEntry) -> None:
        self._memory.set(widget_id, entry)

    def paint_rect(self, rect: Rect, color: str, *, corner_radius: float = 0.0) -> PaintPrimitive:
        return self._output.add_rect(
            rect, color, clip=self._clips.current, corner_radius=corner_radius
        )

    def paint_stroke(self, rect: Rect, color: str, *, width: float = 1.0) -> PaintPrimitive:
        return self._output.add_stroke(rect, color, clip=self._clips.current, width=width)

    def paint_path(
        self,
        points: tuple[Pos2, ...],
        color: str,
        *,
        width: float = 1.0,
        closed: bool = False,
    ) -> PaintPrimitive:
        return self._output.add_path(
            points, color, clip=self._clips.current, width=width, closed=closed
        )

    def paint_text(
        self,
        pos: Pos2,
        text: str,
        color: str,
        *,
        font_size: float = 14.0,
    ) -> PaintPrimitive:
        return self._output.add_text(
            pos, text, color, clip=self._clips.current, font_size=font_size
        )

    def paint_image(
        self,
        rect: Rect,
        texture_id: str,
        *,
        uv: Rect = UNIT_UV,
        tint: str = "#ffffff",
    ) -> PaintPrimitive:
        return self._output.add_image(rect, texture_id, clip=self._clips.current, uv=uv, tint=tint)

    def set_cursor_icon(self, icon: CursorIcon) -> None:
        self._output.set_cursor_icon(icon)

    def request_repaint(self, reason: str = "requested") -> None:
        self._output.request_repaint(reason)

    def copy_text(self, text: str) -> None:
        self._output.copy_text(text)

    def scroll_to(self, widget_id: WidgetId, align: ScrollAlign = "nearest") -> None:
        """Bring a widget into view inside its scroll area on the next frame."""
        self._output.queue_mutation(ScrollToWidget(widget_id, align))

    def report_protocol_issue(self, name: str, detail: str = "") -> None:
        self._issues.append(ProtocolIssue(name=name, detail=detail))
        _LOG.warning("protocol_issue name=%s detail=%s", name, detail)
        self._hub.report(
            category="protocol",
            name=name,
            frame_index=self._frame_index,
            level="warning",
            payload={"detail": detail},
        )

    def scroll_area(
        self,
        seed: Seed,
        size: Vec2,
        *,
        direction: LayoutDirection = "vertical",
    ) -> AbstractContextManager[ScrollArea]:
        return containers.scroll_area(self, seed, size, direction=direction)

    def collapsing(
        self,
        seed: Seed,
        label: str,
        *,
        default_open: bool = False,
    ) -> AbstractContextManager[CollapsingHeader]:
        return containers.collapsing(self, seed, label, default_open=default_open)

    def drag_number(
        self,
        seed: Seed,
        value: float,
        *,
        size: Vec2 | None = None,
        speed: float = 1.0,
    ) -> DragNumberResult:
        return containers.drag_number(self, seed, value, size=size, speed=speed)

    def edit_text(self, seed: Seed, text: str, *, size: Vec2 | None = None) -> TextEditResult:
        return containers.edit_text(self, seed, text, size=size)

    def enter_scroll_area(self, scroll_id: WidgetId) -> None:
        self._scroll_stack.append(scroll_id)

    def exit_scroll_area(self, area: ScrollArea) -> None:
        if self._scroll_stack and self._scroll_stack[-1] == area.id:
            self._scroll_stack.pop()
        self._scroll_viewports[area.id] = (area.viewport, area.offset)

    def consume_scroll_delta(self) -> Vec2 | None:
        """Hand the frame's scroll delta to the first (innermost) area that asks."""
        if self._wheel_consumed:
            return None
        delta = self._input.scroll_delta
        if delta.x == 0.0 and delta.y == 0.0:
            return None
        self._wheel_consumed = True
        return delta

    def _heal(self, stack: str, popped: int) -> None:
        if popped:
            self.report_protocol_issue(
                f"unbalanced_{stack}_scope",
                f"{popped} {stack} scope(s) left open inside a scoped block",
            )

    def require_balanced(self) -> None:
        """Raise if any id, layout or clip scope is still open."""
        open_scopes = {
            "id": self._ids.depth,
            "layout": self._layout.depth,
            "clip": self._clips.depth,
        }
        leftover = {stack: depth for stack, depth in open_scopes.items() if depth}
        if leftover:
            detail = ", ".join(f"{stack}={depth}" for stack, depth in leftover.items())
            raise UnbalancedScopeError(f"open scopes: {detail}")

    def close_open_scopes(self) -> None:
        """Force-pop everything left open at end of frame."""
        for stack, popped in (
            ("id", self._ids.truncate(0)),
            ("layout", self._layout.truncate(0)),
            ("clip", self._clips.truncate(0)),
        ):
            if popped:
                self.report_protocol_issue(
                    f"unbalanced_{stack}_scope",
                    f"{popped} {stack} scope(s) still open at end_frame",
                )
        self._scroll_stack.clear()

    def finish_layout(self) -> tuple[LayoutOverflow, ...]:
        return self._layout.finish()
