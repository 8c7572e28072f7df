from __future__ import annotations

import pytest

from imcore.api.geometry import Vec2
from imcore.api.memory_entries import (
    CollapsedState,
    CursorRange,
    DragValueState,
    ScrollState,
    TextEditState,
    entry_from_dict,
    entry_to_dict,
)


def test_entries_serialize_with_kind_tags() -> None:
    entries = [
        ScrollState(offset=Vec2(0, 12), content_size=Vec2(100, 400), viewport_size=Vec2(100, 80)),
        TextEditState(cursor=CursorRange(3, 1)),
        TextEditState(),
        CollapsedState(open=True),
        DragValueState(value=2.5, drag_start_value=1.0),
    ]
    kinds = [entry_to_dict(entry)["kind"] for entry in entries]
    assert kinds == ["scroll", "text_edit", "text_edit", "collapsed", "drag_value"]
    assert [entry_from_dict(entry_to_dict(entry)) for entry in entries] == entries


def test_unknown_entry_kind_is_rejected() -> None:
    with pytest.raises(ValueError):
        entry_from_dict({"kind": "window"})


def test_scroll_state_clamps_to_content_minus_viewport() -> None:
    state = ScrollState(content_size=Vec2(100, 400), viewport_size=Vec2(100, 80))
    assert state.max_offset == Vec2(0, 320)
    assert state.clamped(Vec2(10, 500)) == Vec2(0, 320)
    assert state.clamped(Vec2(-5, -5)) == Vec2(0, 0)


def test_cursor_range_helpers() -> None:
    cursor = CursorRange(5, 2)
    assert not cursor.is_empty
    assert cursor.sorted() == (2, 5)
    assert cursor.clamp(3) == CursorRange(3, 2)
    assert CursorRange.one(4).is_empty
