"""Layout cursor with nested regions, plus the clip-rect stack."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from imcore.api.geometry import EVERYTHING, Pos2, Rect, Vec2
from imcore.api.ids import WidgetId
from imcore.api.output import LayoutOverflow
from imcore.runtime.config import LayoutDirection

_LOG = logging.getLogger("imcore.layout")
_EPSILON = 1.0e-3
# Extent used for the unbounded axis of scrolling regions.
_UNBOUNDED = 1.0e9


@dataclass(slots=True)
class Region:
    """Placement state for one container scope."""

    scope_id: WidgetId
    max_rect: Rect
    direction: LayoutDirection
    spacing: Vec2
    cursor: Pos2
    unbounded_x: bool = False
    unbounded_y: bool = False
    used_rect: Rect | None = None
    row_height: float = 0.0
    item_count: int = 0
    overflow: Vec2 = field(default_factory=lambda: Vec2(0.0, 0.0))

    @property
    def overflowed(self) -> bool:
        return self.overflow.x > _EPSILON or self.overflow.y > _EPSILON

    @property
    def used_size(self) -> Vec2:
        if self.used_rect is None:
            return Vec2(0.0, 0.0)
        return Vec2(
            self.used_rect.right - self.max_rect.left,
            self.used_rect.bottom - self.max_rect.top,
        )

    def available_rect(self) -> Rect:
        """Space left from the cursor to the region's far edges."""
        return Rect.from_min_max(
            self.cursor.x,
            self.cursor.y,
            max(self.cursor.x, self.max_rect.right),
            max(self.cursor.y, self.max_rect.bottom),
        )

    def _record(self, rect: Rect) -> None:
        self.used_rect = rect if self.used_rect is None else self.used_rect.union(rect)
        self.item_count += 1
        over_x = 0.0 if self.unbounded_x else rect.right - self.max_rect.right
        over_y = 0.0 if self.unbounded_y else rect.bottom - self.max_rect.bottom
        self.overflow = Vec2(max(self.overflow.x, over_x), max(self.overflow.y, over_y))

    def place(self, size: Vec2) -> Rect:
        width = max(0.0, size.x)
        height = max(0.0, size.y)
        if self.direction == "flow":
            row_start = self.max_rect.left
            fits = self.cursor.x + width <= self.max_rect.right + _EPSILON
            if not fits and self.cursor.x > row_start + _EPSILON:
                self.cursor = Pos2(row_start, self.cursor.y + self.row_height + self.spacing.y)
                self.row_height = 0.0
            rect = Rect(self.cursor.x, self.cursor.y, width, height)
            self.row_height = max(self.row_height, height)
            self.cursor = Pos2(rect.right + self.spacing.x, self.cursor.y)
        elif self.direction == "horizontal":
            rect = Rect(self.cursor.x, self.cursor.y, width, height)
            self.cursor = Pos2(rect.right + self.spacing.x, self.cursor.y)
        else:
            rect = Rect(self.cursor.x, self.cursor.y, width, height)
            self.cursor = Pos2(self.cursor.x, rect.bottom + self.spacing.y)
        self._record(rect)
        return rect

    def advance(self, amount: float) -> None:
        if self.direction == "vertical":
            self.cursor = Pos2(self.cursor.x, self.cursor.y + amount)
        else:
            self.cursor = Pos2(self.cursor.x + amount, self.cursor.y)

    def to_overflow(self) -> LayoutOverflow | None:
        if not self.overflowed or self.used_rect is None:
            return None
        return LayoutOverflow(
            scope_id=self.scope_id,
            max_rect=self.max_rect,
            used_rect=self.used_rect,
            overflow=Vec2(max(0.0, self.overflow.x), max(0.0, self.overflow.y)),
        )


class LayoutCursor:
    """Stack of regions; widget calls reserve space from the innermost one."""

    def __init__(
        self,
        root_rect: Rect,
        *,
        root_id: WidgetId,
        spacing: Vec2,
        direction: LayoutDirection = "vertical",
    ) -> None:
        self._root_id = root_id
        self._spacing = spacing
        self._direction: LayoutDirection = direction
        self._regions: list[Region] = []
        self._overflows: list[LayoutOverflow] = []
        self.reset(root_rect)

    @property
    def current(self) -> Region:
        return self._regions[-1]

    @property
    def depth(self) -> int:
        """Number of nested regions above the root region."""
        return len(self._regions) - 1

    def reset(self, root_rect: Rect) -> None:
        self._regions = [
            Region(
                scope_id=self._root_id,
                max_rect=root_rect,
                direction=self._direction,
                spacing=self._spacing,
                cursor=root_rect.min,
            )
        ]
        self._overflows = []

    def available_rect(self) -> Rect:
        return self.current.available_rect()

    def reserve_space(self, size: Vec2) -> Rect:
        """Assign a rect of ``size`` at the cursor and advance past it."""
        return self.current.place(size)

    def add_space(self, amount: float) -> None:
        self.current.advance(max(0.0, amount))

    def push_region(
        self,
        scope_id: WidgetId,
        *,
        direction: LayoutDirection | None = None,
        max_rect: Rect | None = None,
        unbounded_x: bool = False,
        unbounded_y: bool = False,
    ) -> Region:
        """Open a child region starting at the parent's cursor."""
        bounds = max_rect if max_rect is not None else self.available_rect()
        if unbounded_x:
            bounds = Rect(bounds.x, bounds.y, _UNBOUNDED, bounds.h)
        if unbounded_y:
            bounds = Rect(bounds.x, bounds.y, bounds.w, _UNBOUNDED)
        region = Region(
            scope_id=scope_id,
            max_rect=bounds,
            direction=direction or self._direction,
            spacing=self._spacing,
            cursor=bounds.min,
            unbounded_x=unbounded_x,
            unbounded_y=unbounded_y,
        )
        self._regions.append(region)
        return region

    def pop_region(self, *, reserve_in_parent: bool = True, reserved_size: Vec2 | None = None) -> Region | None:
        """Close the innermost region and reserve its used size in the parent."""
        if len(self._regions) == 1:
            _LOG.warning("layout_pop_on_root")
            return None
        region = self._regions.pop()
        overflow = region.to_overflow()
        if overflow is not None:
            self._overflows.append(overflow)
            _LOG.debug(
                "layout_overflow scope=%s overflow=(%.1f,%.1f)",
                region.scope_id.hex(),
                overflow.overflow.x,
                overflow.overflow.y,
            )
        if not reserve_in_parent:
            return region
        if reserved_size is not None:
            self.reserve_space(reserved_size)
        elif region.used_rect is not None:
            self.reserve_space(region.used_size)
        return region

    def truncate(self, depth: int) -> int:
        """Pop regions until ``depth`` remain above the root; returns how many were popped."""
        popped = 0
        while self.depth > max(0, depth):
            self.pop_region()
            popped += 1
        return popped

    def finish(self) -> tuple[LayoutOverflow, ...]:
        """Close any open regions and report all overflows including the root's."""
        self.truncate(0)
        root_overflow = self._regions[0].to_overflow()
        if root_overflow is not None:
            self._overflows.append(root_overflow)
        return tuple(self._overflows)


class ClipStack:
    """Nested clip rects; each push intersects with the current clip."""

    def __init__(self, screen_rect: Rect = EVERYTHING) -> None:
        self._stack: list[Rect] = [screen_rect]

    @property
    def current(self) -> Rect:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    def reset(self, screen_rect: Rect) -> None:
        self._stack = [screen_rect]

    def push(self, rect: Rect) -> Rect:
        clip = self.current.intersect(rect)
        self._stack.append(clip)
        return clip

    def pop(self) -> Rect | None:
        if len(self._stack) == 1:
            _LOG.warning("clip_pop_on_root")
            return None
        return self._stack.pop()

    def truncate(self, depth: int) -> int:
        popped = 0
        while self.depth > max(0, depth):
            self._stack.pop()
            popped += 1
        return popped
