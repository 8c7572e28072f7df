from __future__ import annotations

from imcore.api.geometry import Pos2, Rect
from imcore.api.ids import WidgetId
from imcore.api.response import SENSE_CLICK, SENSE_CLICK_AND_DRAG, SENSE_HOVER
from imcore.runtime.arbiter import InteractionArbiter, resolve_hover
from imcore.runtime.config import CoreConfig
from imcore.runtime.memory import HitRecord, PersistentMemory
from tests.imcore.conftest import SCREEN, pointer_at

BIG = HitRecord(WidgetId(1), Rect(0, 0, 100, 100), SCREEN, SENSE_CLICK, order=0)
SMALL = HitRecord(WidgetId(2), Rect(10, 10, 20, 20), SCREEN, SENSE_CLICK, order=1)
COVER = HitRecord(WidgetId(3), Rect(0, 0, 100, 100), SCREEN, SENSE_CLICK, order=2)


def test_resolve_hover_topmost_prefers_latest_painted() -> None:
    assert resolve_hover([BIG, SMALL, COVER], Pos2(15, 15)) == WidgetId(3)
    assert resolve_hover([BIG, SMALL], Pos2(15, 15)) == WidgetId(2)
    assert resolve_hover([BIG, SMALL], Pos2(500, 500)) is None
    assert resolve_hover([BIG, SMALL], None) is None


def test_resolve_hover_smallest_prefers_area_then_paint_order() -> None:
    assert resolve_hover([BIG, SMALL, COVER], Pos2(15, 15), "smallest") == WidgetId(2)
    assert resolve_hover([BIG, COVER], Pos2(50, 50), "smallest") == WidgetId(3)


def test_resolve_hover_ignores_clipped_out_region() -> None:
    clipped = HitRecord(WidgetId(4), Rect(0, 0, 100, 100), Rect(0, 0, 10, 10), SENSE_HOVER, 3)
    assert resolve_hover([BIG, clipped], Pos2(50, 50)) == WidgetId(1)


def _arbiter(memory: PersistentMemory) -> InteractionArbiter:
    return InteractionArbiter(memory, CoreConfig(screen_rect=SCREEN))


def test_previous_top_hit_claims_press() -> None:
    memory = PersistentMemory()
    arbiter = _arbiter(memory)
    rect = Rect(0, 0, 50, 50)
    previous = (
        HitRecord(WidgetId(10), rect, SCREEN, SENSE_CLICK_AND_DRAG, order=0),
        HitRecord(WidgetId(11), rect, SCREEN, SENSE_CLICK_AND_DRAG, order=1),
    )
    arbiter.begin_frame(pointer_at(15, 15, pressed=True), previous, frame_index=2)
    below = arbiter.interact(WidgetId(10), rect, SCREEN, SENSE_CLICK_AND_DRAG)
    above = arbiter.interact(WidgetId(11), rect, SCREEN, SENSE_CLICK_AND_DRAG)
    assert not below.hovered and not below.pressed
    assert above.hovered and above.pressed
    assert memory.interaction_globals.pressed_id == WidgetId(11)


def test_press_without_history_goes_to_topmost_at_end_of_frame() -> None:
    memory = PersistentMemory()
    arbiter = _arbiter(memory)
    arbiter.begin_frame(pointer_at(15, 15, pressed=True), (), frame_index=1)
    rect = Rect(0, 0, 50, 50)
    first = arbiter.interact(WidgetId(10), rect, SCREEN, SENSE_CLICK_AND_DRAG)
    second = arbiter.interact(WidgetId(11), rect, SCREEN, SENSE_CLICK_AND_DRAG)
    assert not first.pressed
    assert not second.pressed
    assert memory.interaction_globals.pressed_id is None

    report = arbiter.end_frame()
    assert report.hovered_id == WidgetId(11)
    assert "hover_unsettled" in report.repaint_reasons
    assert memory.interaction_globals.pressed_id == WidgetId(11)
    assert memory.interaction_globals.press_origin == Pos2(15, 15)
    state = memory.peek_interaction(WidgetId(11))
    assert state is not None and state.drag_origin == Pos2(15, 15)


def test_hover_only_widget_on_top_takes_no_press() -> None:
    memory = PersistentMemory()
    arbiter = _arbiter(memory)
    rect = Rect(0, 0, 50, 50)
    previous = (
        HitRecord(WidgetId(21), rect, SCREEN, SENSE_CLICK, order=0),
        HitRecord(WidgetId(20), rect, SCREEN, SENSE_HOVER, order=1),
    )
    arbiter.begin_frame(pointer_at(15, 15, pressed=True), previous, frame_index=2)
    button = arbiter.interact(WidgetId(21), rect, SCREEN, SENSE_CLICK)
    label = arbiter.interact(WidgetId(20), rect, SCREEN, SENSE_HOVER)
    assert label.hovered and not label.pressed
    assert not button.hovered and not button.pressed

    report = arbiter.end_frame()
    assert report.hovered_id == WidgetId(20)
    assert memory.interaction_globals.pressed_id is None
