from __future__ import annotations

import pytest

from imcore.api.geometry import Pos2, Rect, Vec2
from imcore.api.input_events import KeyEvent, PointerEvent, WheelEvent
from imcore.input.input_controller import InputController
from imcore.runtime.time import FrameClock


class FakeCanvas:
    def __init__(self) -> None:
        self.handlers: dict[str, list] = {}

    def add_event_handler(self, handler, event_type: str) -> None:
        self.handlers.setdefault(event_type, []).append(handler)

    def emit(self, event_type: str, **payload) -> None:
        event = {"event_type": event_type, **payload}
        for handler in self.handlers.get(event_type, []):
            handler(event)


def _controller() -> InputController:
    ticks = iter(float(i) / 60.0 for i in range(1000))
    return InputController(clock=FrameClock(time_source=lambda: next(ticks)))


def test_bind_registers_expected_handlers() -> None:
    canvas = FakeCanvas()
    controller = InputController()
    controller.bind(canvas)
    for event_name in (
        "pointer_down",
        "pointer_move",
        "pointer_up",
        "key_down",
        "key_up",
        "char",
        "wheel",
    ):
        assert event_name in canvas.handlers


def test_bind_requires_event_handler_support() -> None:
    with pytest.raises(RuntimeError):
        InputController().bind(object())


def test_push_rejects_unknown_event_and_notifies_on_queue() -> None:
    calls: list[str] = []
    controller = InputController(on_event_queued=lambda: calls.append("queued"))
    controller.push(PointerEvent("pointer_move", 1.0, 2.0))
    assert calls == ["queued"]
    with pytest.raises(TypeError):
        controller.push("click")  # type: ignore[arg-type]


def test_canvas_events_are_normalized_and_malformed_ones_dropped() -> None:
    canvas = FakeCanvas()
    controller = InputController()
    controller.bind(canvas)
    canvas.emit("pointer_move", x="bad", y=1)
    canvas.emit("pointer_down", button=1, x=10, y=20)
    canvas.emit("key_down", key="Tab")
    canvas.emit("char", data="a")
    canvas.emit("wheel", x=0, y=0, dy=30)
    assert controller.drain_pointer_events() == [PointerEvent("pointer_down", 10.0, 20.0, 1)]
    assert controller.drain_key_events() == [KeyEvent("key_down", "Tab"), KeyEvent("char", "a")]
    assert controller.drain_wheel_events() == [WheelEvent(0.0, 0.0, 30.0, 0.0)]
    assert controller.drain_pointer_events() == []


def test_snapshot_tracks_press_edges_and_held_buttons() -> None:
    controller = _controller()
    controller.consume_events(
        [
            PointerEvent("pointer_move", 5.0, 5.0),
            PointerEvent("pointer_down", 10.0, 10.0, 1),
            PointerEvent("pointer_move", 14.0, 10.0),
        ]
    )
    first = controller.build_input_snapshot(screen_rect=Rect(0, 0, 100, 100))
    assert first.frame_index == 1
    assert first.pointer.position == Pos2(14.0, 10.0)
    assert first.pointer.pressed()
    assert first.pointer.is_down()
    assert first.pointer.press_origin == Pos2(10.0, 10.0)
    assert first.screen_rect == Rect(0, 0, 100, 100)

    controller.push(PointerEvent("pointer_move", 20.0, 12.0))
    second = controller.build_input_snapshot()
    assert second.frame_index == 2
    assert not second.pointer.pressed()
    assert second.pointer.is_down()
    assert second.pointer.press_origin is None
    assert second.pointer.delta == Vec2(6.0, 2.0)
    assert second.delta_seconds == pytest.approx(1.0 / 60.0)

    controller.push(PointerEvent("pointer_up", 20.0, 12.0, 1))
    third = controller.build_input_snapshot()
    assert third.pointer.released()
    assert not third.pointer.is_down()


def test_pointer_gone_clears_position() -> None:
    controller = _controller()
    controller.push(PointerEvent("pointer_move", 5.0, 5.0))
    controller.build_input_snapshot()
    controller.push(PointerEvent("pointer_gone", 0.0, 0.0))
    snapshot = controller.build_input_snapshot()
    assert snapshot.pointer.position is None
    assert snapshot.pointer.delta == Vec2(0.0, 0.0)


def test_keys_text_modifiers_and_wheel_are_aggregated() -> None:
    controller = _controller()
    controller.consume_events(
        [
            KeyEvent("key_down", "Shift"),
            KeyEvent("key_down", "Tab"),
            KeyEvent("char", "x"),
            WheelEvent(0.0, 0.0, 20.0),
            WheelEvent(0.0, 0.0, 15.0, 5.0),
        ]
    )
    snapshot = controller.build_input_snapshot()
    assert snapshot.keyboard.key_pressed("tab")
    assert snapshot.keyboard.modifiers.shift
    assert snapshot.keyboard.text == ("x",)
    assert len(snapshot.keyboard.events) == 3
    assert snapshot.scroll_delta == Vec2(5.0, 35.0)

    controller.push(KeyEvent("key_up", "shift"))
    released = controller.build_input_snapshot()
    assert "shift" in released.keyboard.released_keys
    assert not released.keyboard.modifiers.shift
    assert released.keyboard.key_down("tab")
    assert not released.keyboard.key_pressed("tab")
