from __future__ import annotations

from imcore.api.geometry import Rect
from imcore.api.ids import WidgetId
from imcore.api.paint import FilledRect, StrokedPath, rect_outline
from imcore.api.response import SENSE_CLICK, SENSE_DRAG, SENSE_HOVER, Response, Sense


def test_sense_union_and_interactive() -> None:
    assert not SENSE_HOVER.interactive
    combined = SENSE_CLICK.union(SENSE_DRAG).union(Sense(focusable=True))
    assert combined == Sense(click=True, drag=True, focusable=True)
    assert combined.interactive


def test_suppressed_response_has_no_event_flags() -> None:
    response = Response.suppressed(WidgetId(7), Rect(0, 0, 1, 1), SENSE_CLICK)
    assert response.interaction_suppressed
    assert not (response.hovered or response.clicked or response.pressed or response.dragged)


def test_paint_primitives_carry_kind_tags() -> None:
    rect = Rect(0, 0, 2, 3)
    assert FilledRect(rect, "#ffffff").kind == "filled_rect"
    path = StrokedPath(rect_outline(rect), "#000000", closed=True)
    assert path.kind == "stroked_path"
    assert len(path.points) == 4
