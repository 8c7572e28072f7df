from __future__ import annotations

from imcore.api.geometry import Rect
from imcore.api.input_events import Modifiers
from imcore.api.output import RequestFocus
from imcore.api.response import SENSE_FOCUSABLE_CLICK
from tests.imcore.conftest import Recorder, frame, idle, make_controller, pointer_at, typed


def _fields() -> Recorder:
    return Recorder(
        [
            ("a", Rect(0, 0, 50, 20)),
            ("b", Rect(0, 30, 50, 20)),
            ("c", Rect(0, 60, 50, 20)),
        ],
        sense=SENSE_FOCUSABLE_CLICK,
    )


def test_tab_cycles_focus_forward_and_shift_tab_backward() -> None:
    controller = make_controller()
    ui = _fields()

    out = frame(controller, typed("tab"), ui)
    assert out.mutations == (RequestFocus(ui.responses["a"].id),)
    assert "mutations_queued" in out.repaint_reasons

    out = frame(controller, idle(), ui)
    assert ui.responses["a"].gained_focus
    assert ui.responses["a"].has_focus
    assert out.focused_id == ui.responses["a"].id

    frame(controller, typed("tab"), ui)
    frame(controller, idle(), ui)
    assert ui.responses["b"].gained_focus
    assert ui.responses["a"].lost_focus
    assert not ui.responses["a"].has_focus

    frame(controller, typed("tab", modifiers=Modifiers(shift=True)), ui)
    out = frame(controller, idle(), ui)
    assert out.focused_id == ui.responses["a"].id


def test_tab_wraps_from_last_to_first() -> None:
    controller = make_controller()
    ui = _fields()
    for _ in range(3):
        frame(controller, typed("tab"), ui)
        frame(controller, idle(), ui)
    assert ui.responses["c"].has_focus
    frame(controller, typed("tab"), ui)
    out = frame(controller, idle(), ui)
    assert out.focused_id == ui.responses["a"].id


def test_focus_notifications_are_delivered_once() -> None:
    controller = make_controller()
    ui = _fields()
    frame(controller, typed("tab"), ui)
    frame(controller, idle(), ui)
    assert ui.responses["a"].gained_focus
    frame(controller, idle(), ui)
    assert ui.responses["a"].has_focus
    assert not ui.responses["a"].gained_focus


def test_escape_surrenders_focus() -> None:
    controller = make_controller()
    ui = _fields()
    frame(controller, typed("tab"), ui)
    frame(controller, idle(), ui)

    out = frame(controller, typed("escape"), ui)
    assert out.focused_id is None
    assert "focus_changed" in out.repaint_reasons
    frame(controller, idle(), ui)
    assert ui.responses["a"].lost_focus


def test_clicking_elsewhere_surrenders_focus_but_clicking_holder_keeps_it() -> None:
    controller = make_controller()
    ui = _fields()
    frame(controller, typed("tab"), ui)
    frame(controller, idle(), ui)

    out = frame(controller, pointer_at(10, 10, pressed=True, released=True), ui)
    assert out.focused_id == ui.responses["a"].id

    out = frame(controller, pointer_at(300, 250, pressed=True, released=True), ui)
    assert out.focused_id is None


def test_focus_is_released_when_focused_widget_disappears() -> None:
    controller = make_controller(staleness_threshold=0)
    ui = _fields()
    frame(controller, typed("tab"), ui)
    ui.widgets = []
    frame(controller, idle(), ui)
    out = frame(controller, idle(), ui)
    assert out.focused_id is None
    assert controller.memory.focused_id is None
    assert "focus_changed" in out.repaint_reasons


def test_output_focus_matches_memory_when_holder_is_collected() -> None:
    controller = make_controller(staleness_threshold=1)
    ui = _fields()
    frame(controller, typed("tab"), ui)
    frame(controller, idle(), ui)
    assert controller.memory.focused_id == ui.responses["a"].id

    ui.widgets = []
    for _ in range(3):
        out = frame(controller, idle(), ui)
        assert out.focused_id == controller.memory.focused_id
    assert out.focused_id is None
