"""Paint primitive contracts handed to the external rasterizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from imcore.api.geometry import EVERYTHING, Pos2, Rect

UNIT_UV = Rect(0.0, 0.0, 1.0, 1.0)


@dataclass(frozen=True, slots=True)
class FilledRect:
    rect: Rect
    color: str
    corner_radius: float = 0.0
    clip: Rect = EVERYTHING
    z: int = -1
    kind: Literal["filled_rect"] = field(default="filled_rect", init=False)


@dataclass(frozen=True, slots=True)
class StrokedPath:
    points: tuple[Pos2, ...]
    color: str
    width: float = 1.0
    closed: bool = False
    clip: Rect = EVERYTHING
    z: int = -1
    kind: Literal["stroked_path"] = field(default="stroked_path", init=False)


@dataclass(frozen=True, slots=True)
class TextRun:
    pos: Pos2
    text: str
    color: str
    font_size: float = 14.0
    clip: Rect = EVERYTHING
    z: int = -1
    kind: Literal["text_run"] = field(default="text_run", init=False)


@dataclass(frozen=True, slots=True)
class TexturedQuad:
    rect: Rect
    texture_id: str
    uv: Rect = UNIT_UV
    tint: str = "#ffffff"
    clip: Rect = EVERYTHING
    z: int = -1
    kind: Literal["textured_quad"] = field(default="textured_quad", init=False)


PaintPrimitive = FilledRect | StrokedPath | TextRun | TexturedQuad


def rect_outline(rect: Rect) -> tuple[Pos2, ...]:
    """Closed-path corner points for a rectangle outline."""
    return (
        Pos2(rect.left, rect.top),
        Pos2(rect.right, rect.top),
        Pos2(rect.right, rect.bottom),
        Pos2(rect.left, rect.bottom),
    )


__all__ = [
    "FilledRect",
    "PaintPrimitive",
    "StrokedPath",
    "TextRun",
    "TexturedQuad",
    "UNIT_UV",
    "rect_outline",
]
