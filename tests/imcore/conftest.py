from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from imcore.api.geometry import ZERO_VEC, Pos2, Rect, Vec2
from imcore.api.input_events import NO_MODIFIERS, PRIMARY_BUTTON, KeyEvent, Modifiers
from imcore.api.input_snapshot import InputSnapshot, KeyboardSnapshot, PointerSnapshot
from imcore.api.output import FrameOutput
from imcore.api.response import SENSE_CLICK_AND_DRAG, Response, Sense
from imcore.runtime.config import CoreConfig
from imcore.runtime.context import Context
from imcore.runtime.frame import FrameController

SCREEN = Rect(0.0, 0.0, 400.0, 300.0)


def pointer_at(
    x: float | None,
    y: float | None = None,
    *,
    down: bool = False,
    pressed: bool = False,
    released: bool = False,
    secondary_released: bool = False,
    press_origin: Pos2 | None = None,
    delta: Vec2 = ZERO_VEC,
    scroll: Vec2 = ZERO_VEC,
    keyboard: KeyboardSnapshot | None = None,
) -> InputSnapshot:
    """Snapshot with the pointer at (x, y); ``x=None`` means no pointer."""
    position = None if x is None or y is None else Pos2(float(x), float(y))
    down_buttons = {PRIMARY_BUTTON} if down or (pressed and not released) else set()
    released_buttons = {PRIMARY_BUTTON} if released else set()
    if secondary_released:
        released_buttons.add(2)
    if pressed and press_origin is None:
        press_origin = position
    return InputSnapshot(
        screen_rect=SCREEN,
        pointer=PointerSnapshot(
            position=position,
            delta=delta,
            down_buttons=frozenset(down_buttons),
            pressed_buttons=frozenset({PRIMARY_BUTTON} if pressed else set()),
            released_buttons=frozenset(released_buttons),
            press_origin=press_origin if pressed else None,
        ),
        keyboard=keyboard or KeyboardSnapshot(),
        scroll_delta=scroll,
    )


def idle() -> InputSnapshot:
    return InputSnapshot(screen_rect=SCREEN)


def keys(
    *pressed: str,
    text: tuple[str, ...] = (),
    modifiers: Modifiers = NO_MODIFIERS,
) -> KeyboardSnapshot:
    """Keyboard snapshot with ordered key-down events followed by text."""
    events = [KeyEvent("key_down", key, modifiers) for key in pressed]
    events.extend(KeyEvent("char", value, modifiers) for value in text)
    return KeyboardSnapshot(
        down_keys=frozenset(key.lower() for key in pressed),
        pressed_keys=frozenset(key.lower() for key in pressed),
        text=text,
        modifiers=modifiers,
        events=tuple(events),
    )


def typed(
    *pressed: str, text: tuple[str, ...] = (), modifiers: Modifiers = NO_MODIFIERS
) -> InputSnapshot:
    return InputSnapshot(screen_rect=SCREEN, keyboard=keys(*pressed, text=text, modifiers=modifiers))


@dataclass
class Recorder:
    """Build callback that interacts each widget in order and keeps the responses."""

    widgets: list[tuple[str, Rect]] = field(default_factory=list)
    sense: Sense = SENSE_CLICK_AND_DRAG
    responses: dict[str, Response] = field(default_factory=dict)

    def __call__(self, ctx: Context) -> None:
        self.responses = {}
        for seed, rect in self.widgets:
            self.responses[seed] = ctx.interact(seed, rect, self.sense)


def make_controller(**overrides: object) -> FrameController:
    return FrameController(CoreConfig(screen_rect=SCREEN, **overrides))  # type: ignore[arg-type]


def frame(
    controller: FrameController,
    snapshot: InputSnapshot,
    build: Callable[[Context], None] | None = None,
) -> FrameOutput:
    return controller.run_frame(snapshot, build or (lambda ctx: None))
