from __future__ import annotations

from imcore.api.geometry import Rect, Vec2
from imcore.api.memory_entries import ScrollState
from imcore.runtime.containers import scroll_offset_for_target

VIEWPORT = Rect(0.0, 0.0, 200.0, 100.0)


def test_nearest_keeps_visible_target_in_place() -> None:
    offset = Vec2(0.0, 40.0)
    target = Rect(0.0, 20.0, 100.0, 20.0)
    assert scroll_offset_for_target(VIEWPORT, offset, target, "nearest") == offset


def test_nearest_scrolls_down_to_bottom_edge() -> None:
    target = Rect(0.0, 300.0, 100.0, 20.0)
    assert scroll_offset_for_target(VIEWPORT, Vec2(0.0, 0.0), target, "nearest") == Vec2(0.0, 220.0)


def test_nearest_scrolls_up_to_top_edge() -> None:
    target = Rect(0.0, -50.0, 100.0, 20.0)
    assert scroll_offset_for_target(VIEWPORT, Vec2(0.0, 80.0), target, "nearest") == Vec2(0.0, 30.0)


def test_top_bottom_and_center_alignment() -> None:
    target = Rect(0.0, 300.0, 100.0, 20.0)
    assert scroll_offset_for_target(VIEWPORT, Vec2(0.0, 0.0), target, "top") == Vec2(0.0, 300.0)
    assert scroll_offset_for_target(VIEWPORT, Vec2(0.0, 0.0), target, "bottom") == Vec2(0.0, 220.0)
    assert scroll_offset_for_target(VIEWPORT, Vec2(0.0, 0.0), target, "center") == Vec2(0.0, 260.0)


def test_scroll_state_clamps_to_content() -> None:
    state = ScrollState(content_size=Vec2(200.0, 400.0), viewport_size=Vec2(200.0, 100.0))
    assert state.max_offset == Vec2(0.0, 300.0)
    assert state.clamped(Vec2(-5.0, 999.0)) == Vec2(0.0, 300.0)
