"""Logical-point geometry primitives."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Pos2:
    """Position in logical points."""

    x: float
    y: float

    def distance(self, other: Pos2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def offset(self, delta: Vec2) -> Pos2:
        return Pos2(self.x + delta.x, self.y + delta.y)


@dataclass(frozen=True, slots=True)
class Vec2:
    """Size or displacement in logical points."""

    x: float
    y: float

    @property
    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)


ZERO_VEC = Vec2(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned rectangle, origin top-left, Y down."""

    x: float
    y: float
    w: float
    h: float

    @classmethod
    def from_min_max(cls, left: float, top: float, right: float, bottom: float) -> Rect:
        return cls(left, top, max(0.0, right - left), max(0.0, bottom - top))

    @classmethod
    def from_pos_size(cls, pos: Pos2, size: Vec2) -> Rect:
        return cls(pos.x, pos.y, size.x, size.y)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def min(self) -> Pos2:
        return Pos2(self.x, self.y)

    @property
    def size(self) -> Vec2:
        return Vec2(self.w, self.h)

    @property
    def center(self) -> Pos2:
        return Pos2(self.x + self.w / 2.0, self.y + self.h / 2.0)

    @property
    def area(self) -> float:
        return self.w * self.h

    def is_empty(self) -> bool:
        return self.w <= 0.0 or self.h <= 0.0

    def contains(self, px: float, py: float) -> bool:
        """Return whether a point is inside the rectangle."""
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h

    def contains_pos(self, pos: Pos2) -> bool:
        return self.contains(pos.x, pos.y)

    def contains_rect(self, other: Rect) -> bool:
        return (
            self.left <= other.left
            and self.top <= other.top
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def intersects(self, other: Rect) -> bool:
        return (
            self.left <= other.right
            and other.left <= self.right
            and self.top <= other.bottom
            and other.top <= self.bottom
        )

    def intersect(self, other: Rect) -> Rect:
        """Return the overlap; an empty rect anchored at the clamped corner if disjoint."""
        left = max(self.left, other.left)
        top = max(self.top, other.top)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(left, top, max(0.0, right - left), max(0.0, bottom - top))

    def union(self, other: Rect) -> Rect:
        return Rect.from_min_max(
            min(self.left, other.left),
            min(self.top, other.top),
            max(self.right, other.right),
            max(self.bottom, other.bottom),
        )

    def translate(self, delta: Vec2) -> Rect:
        return Rect(self.x + delta.x, self.y + delta.y, self.w, self.h)

    def expand(self, amount: float) -> Rect:
        return Rect(
            self.x - amount,
            self.y - amount,
            max(0.0, self.w + 2.0 * amount),
            max(0.0, self.h + 2.0 * amount),
        )


EVERYTHING = Rect(-1.0e9, -1.0e9, 2.0e9, 2.0e9)


__all__ = ["EVERYTHING", "Pos2", "Rect", "Vec2", "ZERO_VEC"]
