"""Built-in containers and editors backed by typed memory entries.

These are the minimal widgets exercising each memory entry kind. A widget
library builds on the same ``Context`` primitives they use.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from imcore.api.color import adjust_value
from imcore.api.geometry import ZERO_VEC, Pos2, Rect, Vec2
from imcore.api.ids import Seed, WidgetId
from imcore.api.memory_entries import (
    CollapsedState,
    CursorRange,
    DragValueState,
    ScrollState,
    TextEditState,
)
from imcore.api.output import ScrollAlign
from imcore.api.response import (
    SENSE_CLICK,
    SENSE_CLICK_AND_DRAG,
    SENSE_FOCUSABLE_CLICK,
    SENSE_HOVER,
    Response,
)
from imcore.runtime.config import LayoutDirection
from imcore.runtime.layout import Region
from imcore.runtime.text_cursor import apply_text_input

if TYPE_CHECKING:
    from imcore.runtime.context import Context

_INDENT = 16.0
_PADDING = 4.0
_SCROLLBAR_WIDTH = 6.0


@dataclass(frozen=True, slots=True)
class Visuals:
    """Default palette; hover and active fills are derived by HSV value."""

    fill: str = "#3c3c3c"
    text: str = "#dcdcdc"
    stroke: str = "#5a5a5a"
    selection: str = "#2d5a8c"
    scrollbar: str = "#6e6e6e"
    font_size: float = 14.0
    # Monospace advance estimate; glyph metrics belong to the text shaper.
    char_width: float = 7.0
    hover_factor: float = 1.3
    active_factor: float = 1.6

    def fill_for(self, response: Response) -> str:
        if response.is_pointer_button_down_on or response.dragged:
            return adjust_value(self.fill, self.active_factor)
        if response.hovered:
            return adjust_value(self.fill, self.hover_factor)
        return self.fill


@dataclass(slots=True)
class ScrollArea:
    id: WidgetId
    viewport: Rect
    offset: Vec2
    region: Region
    response: Response
    content_size: Vec2 = ZERO_VEC


@dataclass(frozen=True, slots=True)
class CollapsingHeader:
    response: Response
    open: bool
    region: Region


@dataclass(frozen=True, slots=True)
class DragNumberResult:
    response: Response
    value: float
    changed: bool = False


@dataclass(frozen=True, slots=True)
class TextEditResult:
    response: Response
    text: str
    cursor: CursorRange
    changed: bool = False


def scroll_offset_for_target(
    viewport: Rect,
    offset: Vec2,
    target: Rect,
    align: ScrollAlign = "nearest",
) -> Vec2:
    """Scroll offset that brings ``target`` (laid out at ``offset``) into the viewport."""
    left = target.left - viewport.left + offset.x
    top = target.top - viewport.top + offset.y

    def nearest(start: float, extent: float, current: float, visible: float) -> float:
        if start < current:
            return start
        if start + extent > current + visible:
            return start + extent - visible
        return current

    x = nearest(left, target.w, offset.x, viewport.w)
    if align == "top":
        y = top
    elif align == "bottom":
        y = top + target.h - viewport.h
    elif align == "center":
        y = top + target.h / 2.0 - viewport.h / 2.0
    else:
        y = nearest(top, target.h, offset.y, viewport.h)
    return Vec2(x, y)


@contextmanager
def scroll_area(
    ctx: Context,
    seed: Seed,
    size: Vec2,
    *,
    direction: LayoutDirection = "vertical",
) -> Iterator[ScrollArea]:
    """Clipped region scrolled by the wheel, unbounded along its scroll axis.

    The offset is clamped to last frame's content size. Wheel input is
    consumed after the children ran, so the innermost area under the
    pointer wins and the new offset shows on the next frame.
    """
    viewport = ctx.reserve_space(size)
    response = ctx.interact(seed, viewport, SENSE_HOVER)
    scroll_id = response.id
    state = ctx.state_or_insert(scroll_id, ScrollState)
    offset = state.clamped(state.offset)
    horizontal = direction == "horizontal"
    content_rect = viewport.translate(-offset)
    ctx.enter_scroll_area(scroll_id)
    area: ScrollArea | None = None
    try:
        with ctx.id_scope(seed), ctx.clip_scope(viewport):
            with ctx.layout_region(
                direction,
                rect=content_rect,
                unbounded_x=horizontal,
                unbounded_y=not horizontal,
                reserve_in_parent=False,
            ) as region:
                area = ScrollArea(
                    id=scroll_id,
                    viewport=viewport,
                    offset=offset,
                    region=region,
                    response=response,
                )
                yield area
    finally:
        if area is not None:
            ctx.exit_scroll_area(area)
    if area is None:
        return
    content = area.region.used_size
    area.content_size = content
    settled = ScrollState(offset=offset, content_size=content, viewport_size=viewport.size)
    new_offset = offset
    if response.contains_pointer and not response.interaction_suppressed:
        delta = ctx.consume_scroll_delta()
        if delta is not None:
            speed = ctx.config.scroll_speed
            new_offset = settled.clamped(
                Vec2(offset.x + delta.x * speed, offset.y + delta.y * speed)
            )
    new_offset = settled.clamped(new_offset)
    if new_offset != offset:
        ctx.request_repaint("scroll")
    ctx.set_state(
        scroll_id,
        ScrollState(offset=new_offset, content_size=content, viewport_size=viewport.size),
    )
    _paint_scrollbar(ctx, viewport, offset, content, horizontal=horizontal)


def _paint_scrollbar(
    ctx: Context,
    viewport: Rect,
    offset: Vec2,
    content: Vec2,
    *,
    horizontal: bool,
) -> None:
    length = viewport.w if horizontal else viewport.h
    extent = content.x if horizontal else content.y
    if extent <= length or length <= 0.0:
        return
    thumb = max(_SCROLLBAR_WIDTH, length * length / extent)
    travel = offset.x if horizontal else offset.y
    start = (length - thumb) * min(1.0, max(0.0, travel / (extent - length)))
    if horizontal:
        bar = Rect(viewport.x + start, viewport.bottom - _SCROLLBAR_WIDTH, thumb, _SCROLLBAR_WIDTH)
    else:
        bar = Rect(viewport.right - _SCROLLBAR_WIDTH, viewport.y + start, _SCROLLBAR_WIDTH, thumb)
    ctx.paint_rect(bar, ctx.visuals.scrollbar, corner_radius=_SCROLLBAR_WIDTH / 2.0)


@contextmanager
def collapsing(
    ctx: Context,
    seed: Seed,
    label: str,
    *,
    default_open: bool = False,
) -> Iterator[CollapsingHeader]:
    """Clickable header toggling a persisted open flag; children go in the indented body."""
    visuals = ctx.visuals
    available = ctx.available_rect()
    width = min(available.w, ctx.screen_rect.w)
    response = ctx.allocate(seed, Vec2(width, visuals.font_size + 2.0 * _PADDING), SENSE_CLICK)
    state = ctx.state_or_insert(response.id, lambda: CollapsedState(open=default_open))
    is_open = state.open
    if response.clicked:
        is_open = not is_open
        ctx.set_state(response.id, CollapsedState(open=is_open))
        ctx.request_repaint("collapsing_toggled")
    if response.hovered:
        ctx.set_cursor_icon("pointer")

    rect = response.rect
    ctx.paint_rect(rect, visuals.fill_for(response))
    mid_y = rect.center.y
    tip = rect.x + _PADDING
    if is_open:
        arrow = (Pos2(tip, mid_y - 3.0), Pos2(tip + 8.0, mid_y - 3.0), Pos2(tip + 4.0, mid_y + 3.0))
    else:
        arrow = (Pos2(tip, mid_y - 4.0), Pos2(tip + 6.0, mid_y), Pos2(tip, mid_y + 4.0))
    ctx.paint_path(arrow, visuals.text, closed=True)
    ctx.paint_text(Pos2(rect.x + _INDENT + _PADDING, rect.y + _PADDING), label, visuals.text)

    below = ctx.available_rect()
    body = Rect(below.x + _INDENT, below.y, max(0.0, below.w - _INDENT), below.h)
    with ctx.id_scope(seed), ctx.layout_region(rect=body, reserve_in_parent=True) as region:
        yield CollapsingHeader(response=response, open=is_open, region=region)


def drag_number(
    ctx: Context,
    seed: Seed,
    value: float,
    *,
    size: Vec2 | None = None,
    speed: float = 1.0,
) -> DragNumberResult:
    """Number edited by dragging horizontally; the drag start value is persisted."""
    visuals = ctx.visuals
    response = ctx.allocate(
        seed,
        size or Vec2(80.0, visuals.font_size + 2.0 * _PADDING),
        SENSE_CLICK_AND_DRAG,
    )
    state = ctx.state_or_insert(response.id, lambda: DragValueState(value=value))
    start = state.drag_start_value
    new_value = value
    if response.drag_started:
        start = value
    if response.dragged:
        new_value = value + response.drag_delta.x * speed
    if response.drag_stopped:
        start = None
    if response.hovered or response.dragged:
        ctx.set_cursor_icon("resize_horizontal")
    ctx.set_state(response.id, DragValueState(value=new_value, drag_start_value=start))

    rect = response.rect
    ctx.paint_rect(rect, visuals.fill_for(response), corner_radius=2.0)
    ctx.paint_text(Pos2(rect.x + _PADDING, rect.y + _PADDING), f"{new_value:g}", visuals.text)
    return DragNumberResult(response=response, value=new_value, changed=new_value != value)


def edit_text(
    ctx: Context,
    seed: Seed,
    text: str,
    *,
    size: Vec2 | None = None,
) -> TextEditResult:
    """Single-line editor: focus on click, edit while focused, cursor kept in memory."""
    visuals = ctx.visuals
    response = ctx.allocate(
        seed,
        size or Vec2(200.0, visuals.font_size + 2.0 * _PADDING),
        SENSE_FOCUSABLE_CLICK,
    )
    widget_id = response.id
    rect = response.rect
    text_x = rect.x + _PADDING
    state = ctx.state_or_insert(widget_id, TextEditState)
    cursor = (state.cursor or CursorRange.one(len(text))).clamp(len(text))

    if response.clicked:
        if not ctx.has_focus(widget_id):
            ctx.request_focus(widget_id)
        pos = ctx.input.pointer_pos
        if pos is not None:
            index = round((pos.x - text_x) / visuals.char_width)
            cursor = CursorRange.one(max(0, min(len(text), index)))
    if response.hovered:
        ctx.set_cursor_icon("text")

    new_text = text
    focused = ctx.has_focus(widget_id) and not response.interaction_suppressed
    if focused:
        outcome = apply_text_input(text, cursor, ctx.input.keyboard)
        new_text = outcome.text
        cursor = outcome.cursor
        if outcome.copied:
            ctx.copy_text(outcome.copied)
    ctx.set_state(widget_id, TextEditState(cursor=cursor))

    ctx.paint_rect(rect, visuals.fill_for(response), corner_radius=2.0)
    if focused:
        ctx.paint_stroke(rect, visuals.selection)
        if not cursor.is_empty:
            start, end = cursor.sorted()
            ctx.paint_rect(
                Rect(
                    text_x + start * visuals.char_width,
                    rect.y + 2.0,
                    (end - start) * visuals.char_width,
                    rect.h - 4.0,
                ),
                visuals.selection,
            )
    ctx.paint_text(Pos2(text_x, rect.y + _PADDING), new_text, visuals.text)
    if focused:
        caret_x = text_x + cursor.primary * visuals.char_width
        ctx.paint_path((Pos2(caret_x, rect.y + 2.0), Pos2(caret_x, rect.bottom - 2.0)), visuals.text)
    return TextEditResult(
        response=response,
        text=new_text,
        cursor=cursor,
        changed=new_text != text,
    )
