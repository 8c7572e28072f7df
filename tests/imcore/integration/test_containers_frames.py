from __future__ import annotations

from imcore.api.geometry import Rect, Vec2
from imcore.api.ids import WidgetId
from imcore.api.input_events import Modifiers
from imcore.api.memory_entries import CursorRange, DragValueState
from imcore.runtime.containers import CollapsingHeader, ScrollArea, TextEditResult
from imcore.runtime.context import Context
from tests.imcore.conftest import frame, idle, make_controller, pointer_at, typed

VIEWPORT = Vec2(200.0, 100.0)


class ScrollList:
    """Twenty 20-high rows in a 200x100 scroll area."""

    def __init__(self) -> None:
        self.area: ScrollArea | None = None
        self.rows: dict[int, WidgetId] = {}
        self.row_rects: dict[int, Rect] = {}
        self.scroll_to: int | None = None

    def __call__(self, ctx: Context) -> None:
        with ctx.scroll_area("list", VIEWPORT) as area:
            self.area = area
            for index in range(20):
                response = ctx.allocate(("row", index), Vec2(180.0, 20.0))
                self.rows[index] = response.id
                self.row_rects[index] = response.rect
        if self.scroll_to is not None:
            ctx.scroll_to(self.rows[self.scroll_to])
            self.scroll_to = None


def test_scroll_to_brings_row_into_view_on_next_frame() -> None:
    controller = make_controller()
    ui = ScrollList()
    ui.scroll_to = 15
    out = frame(controller, idle(), ui)
    assert ui.area is not None
    assert ui.area.offset == Vec2(0.0, 0.0)
    assert ui.area.content_size == Vec2(180.0, 476.0)
    assert len(out.mutations) == 1

    frame(controller, idle(), ui)
    assert ui.area.offset == Vec2(0.0, 280.0)
    assert ui.row_rects[15] == Rect(0.0, 80.0, 180.0, 20.0)


def test_wheel_scrolls_area_under_pointer_and_clamps() -> None:
    controller = make_controller()
    ui = ScrollList()
    out = frame(controller, pointer_at(50, 50, scroll=Vec2(0.0, 50.0)), ui)
    assert "scroll" in out.repaint_reasons
    frame(controller, idle(), ui)
    assert ui.area is not None
    assert ui.area.offset == Vec2(0.0, 50.0)

    frame(controller, pointer_at(50, 50, scroll=Vec2(0.0, 1000.0)), ui)
    frame(controller, idle(), ui)
    assert ui.area.offset == Vec2(0.0, 376.0)


def test_wheel_outside_viewport_is_ignored() -> None:
    controller = make_controller()
    ui = ScrollList()
    out = frame(controller, pointer_at(350, 250, scroll=Vec2(0.0, 50.0)), ui)
    assert "scroll" not in out.repaint_reasons
    frame(controller, idle(), ui)
    assert ui.area is not None
    assert ui.area.offset == Vec2(0.0, 0.0)


def test_scrolled_rows_are_clipped_to_viewport() -> None:
    controller = make_controller()

    def build(ctx: Context) -> None:
        with ctx.scroll_area("list", VIEWPORT):
            for index in range(20):
                row = ctx.allocate(("row", index), Vec2(180.0, 20.0))
                ctx.paint_rect(row.rect, "#404040")

    out = frame(controller, idle(), build)
    rows = [item for item in out.primitives if item.kind == "filled_rect" and item.color == "#404040"]
    assert len(rows) == 20
    assert all(item.clip == Rect(0.0, 0.0, 200.0, 100.0) for item in rows)


def test_collapsing_header_toggles_and_persists_open_state() -> None:
    controller = make_controller()
    headers: list[CollapsingHeader] = []
    children: list[Rect] = []

    def build(ctx: Context) -> None:
        with ctx.collapsing("details", "Details") as header:
            headers.append(header)
            if header.open:
                children.append(ctx.allocate("child", Vec2(50.0, 20.0)).rect)

    frame(controller, idle(), build)
    assert not headers[-1].open
    assert children == []

    out = frame(controller, pointer_at(10, 10, pressed=True, released=True), build)
    assert headers[-1].open
    assert "collapsing_toggled" in out.repaint_reasons
    assert children[-1] == Rect(16.0, 26.0, 50.0, 20.0)

    frame(controller, idle(), build)
    assert headers[-1].open


def test_drag_number_follows_horizontal_drag() -> None:
    controller = make_controller()
    model = {"value": 10.0}

    def build(ctx: Context) -> None:
        result = ctx.drag_number("amount", model["value"], speed=0.5)
        model["value"] = result.value

    frame(controller, pointer_at(10, 10, pressed=True), build)
    out = frame(controller, pointer_at(20, 10, down=True, delta=Vec2(10.0, 0.0)), build)
    assert model["value"] == 15.0
    assert out.cursor_icon == "resize_horizontal"

    stored: list[DragValueState | None] = []

    def build_and_inspect(ctx: Context) -> None:
        build(ctx)
        stored.append(ctx.state(ctx.id_for("amount"), DragValueState))

    frame(controller, pointer_at(20, 10, released=True), build_and_inspect)
    assert model["value"] == 15.0
    assert stored[-1] == DragValueState(value=15.0, drag_start_value=None)


def test_edit_text_focus_typing_and_copy() -> None:
    controller = make_controller()
    model = {"text": ""}
    results: list[TextEditResult] = []

    def build(ctx: Context) -> None:
        result = ctx.edit_text("name", model["text"])
        model["text"] = result.text
        results.append(result)

    frame(controller, typed(text=("x",)), build)
    assert model["text"] == ""

    out = frame(controller, pointer_at(20, 11, pressed=True, released=True), build)
    assert out.focused_id == results[-1].response.id

    frame(controller, typed(text=("h", "i")), build)
    assert model["text"] == "hi"
    assert results[-1].changed
    assert results[-1].cursor == CursorRange.one(2)
    assert results[-1].response.gained_focus

    frame(controller, typed("backspace"), build)
    assert model["text"] == "h"

    out = frame(controller, typed("a", "c", modifiers=Modifiers(ctrl=True)), build)
    assert out.copied_text == "h"
    assert model["text"] == "h"
    assert results[-1].cursor == CursorRange(1, 0)
