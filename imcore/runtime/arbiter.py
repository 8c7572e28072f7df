"""Per-frame hover, press, click, drag and focus arbitration.

Widgets are evaluated in call order, which is also paint order. A widget
cannot know whether something drawn later will cover it, so hover is gated
by the previous frame's hit list: only the topmost previous-frame widget
under the pointer is hovered, and a widget with no previous-frame placement
is never hovered. The final hover owner of the current frame is resolved in
``end_frame``; if it disagrees with what widgets were told, another frame is
requested so the UI settles. A primary press nobody could claim goes to that
resolved owner there, so a covered widget never reacts first.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from imcore.api.geometry import ZERO_VEC, Pos2, Rect
from imcore.api.ids import WidgetId
from imcore.api.input_events import PRIMARY_BUTTON, SECONDARY_BUTTON
from imcore.api.input_snapshot import InputSnapshot, create_empty_input_snapshot
from imcore.api.output import RequestFocus, StateMutation
from imcore.api.response import Response, Sense
from imcore.runtime.config import CoreConfig, HoverTieBreak
from imcore.runtime.memory import HitRecord, PersistentMemory

_LOG = logging.getLogger("imcore.arbiter")


@dataclass(frozen=True, slots=True)
class ArbiterReport:
    hovered_id: WidgetId | None
    focused_id: WidgetId | None
    dragged_id: WidgetId | None
    hits: tuple[HitRecord, ...]
    mutations: tuple[StateMutation, ...] = ()
    repaint_reasons: tuple[str, ...] = ()


def resolve_hover(
    hits: Sequence[HitRecord],
    pos: Pos2 | None,
    tie_break: HoverTieBreak = "topmost",
) -> WidgetId | None:
    """Pick the single hovered widget among hits under the pointer."""
    if pos is None:
        return None
    candidates = [hit for hit in hits if hit.contains(pos)]
    if not candidates:
        return None
    if tie_break == "smallest":
        best = min(candidates, key=lambda hit: (hit.rect.area, -hit.order))
    else:
        best = max(candidates, key=lambda hit: hit.order)
    return best.widget_id


class InteractionArbiter:
    """Resolves interaction ownership for one frame controller."""

    def __init__(self, memory: PersistentMemory, config: CoreConfig) -> None:
        self._memory = memory
        self._config = config
        self._input = create_empty_input_snapshot()
        self._frame_index = 0
        self._hits: list[HitRecord] = []
        self._top_hit: WidgetId | None = None
        self._told_hovered: set[WidgetId] = set()
        self._press_claimed = False
        self._focusable: list[WidgetId] = []
        self._focus_at_begin: WidgetId | None = None
        self._focus_requested_this_frame = False

    @property
    def hits(self) -> tuple[HitRecord, ...]:
        return tuple(self._hits)

    @property
    def top_hit(self) -> WidgetId | None:
        """Previous-frame hover owner gating this frame's hover."""
        return self._top_hit

    def begin_frame(
        self,
        input_snapshot: InputSnapshot,
        previous_hits: Sequence[HitRecord],
        *,
        frame_index: int,
    ) -> None:
        self._input = input_snapshot
        self._frame_index = int(frame_index)
        self._hits = []
        self._told_hovered = set()
        self._press_claimed = False
        self._focusable = []
        self._focus_requested_this_frame = False
        self._top_hit = resolve_hover(
            previous_hits,
            input_snapshot.pointer.position,
            self._config.hover_tie_break,
        )
        globals_ = self._memory.interaction_globals
        self._focus_at_begin = globals_.focused_id
        if globals_.focus_change_frame < self._frame_index - 1:
            # Notifications are delivered once, within a frame of the change.
            globals_.gained_focus_id = None
            globals_.lost_focus_ids.clear()

    def interact(self, widget_id: WidgetId, rect: Rect, clip: Rect, sense: Sense) -> Response:
        """Evaluate one widget against this frame's input and the global owners."""
        pointer = self._input.pointer
        pos = pointer.position
        globals_ = self._memory.interaction_globals
        state = self._memory.interaction(widget_id)
        self._hits.append(
            HitRecord(widget_id=widget_id, rect=rect, clip=clip, sense=sense, order=len(self._hits))
        )
        if sense.focusable:
            self._focusable.append(widget_id)

        contains = pos is not None and rect.contains(pos.x, pos.y) and clip.contains(pos.x, pos.y)
        blocked = self._top_hit != widget_id
        dragging_other = globals_.dragged_id is not None and globals_.dragged_id != widget_id
        hovered = contains and not blocked and not dragging_other
        state.is_hovered = hovered
        if hovered:
            self._told_hovered.add(widget_id)

        pressed = False
        clicked = False
        drag_started = False
        drag_stopped = False
        if sense.interactive and hovered and pointer.pressed(PRIMARY_BUTTON) and not self._press_claimed:
            self._press_claimed = True
            origin = pointer.press_origin or pos
            globals_.pressed_id = widget_id
            globals_.press_origin = origin
            globals_.press_travel = 0.0
            state.drag_origin = origin
            pressed = True

        if globals_.pressed_id == widget_id:
            origin = globals_.press_origin
            if pos is not None and origin is not None:
                globals_.press_travel = max(globals_.press_travel, pos.distance(origin))
            travel = globals_.press_travel
            if sense.drag and travel > self._config.drag_deadzone and globals_.dragged_id != widget_id:
                if globals_.dragged_id is None:
                    globals_.dragged_id = widget_id
                    drag_started = True
                else:
                    _LOG.debug(
                        "drag_claim_refused id=%s owner=%s",
                        widget_id.hex(),
                        globals_.dragged_id.hex(),
                    )
            if pointer.released(PRIMARY_BUTTON):
                if globals_.dragged_id == widget_id:
                    drag_stopped = True
                elif sense.click and contains and travel <= self._config.drag_deadzone:
                    clicked = True

        dragged = globals_.dragged_id == widget_id
        secondary_clicked = sense.click and hovered and pointer.released(SECONDARY_BUTTON)

        gained_focus = False
        if globals_.gained_focus_id == widget_id:
            gained_focus = True
            globals_.gained_focus_id = None
            state.focus_requested = False
        lost_focus = False
        if widget_id in globals_.lost_focus_ids:
            lost_focus = True
            globals_.lost_focus_ids.discard(widget_id)

        return Response(
            id=widget_id,
            rect=rect,
            sense=sense,
            hovered=hovered,
            contains_pointer=contains,
            pressed=pressed,
            is_pointer_button_down_on=globals_.pressed_id == widget_id
            and pointer.is_down(PRIMARY_BUTTON),
            clicked=clicked,
            secondary_clicked=secondary_clicked,
            drag_started=drag_started,
            dragged=dragged,
            drag_stopped=drag_stopped,
            drag_delta=pointer.delta if dragged else ZERO_VEC,
            has_focus=globals_.focused_id == widget_id,
            gained_focus=gained_focus,
            lost_focus=lost_focus,
        )

    def request_focus(self, widget_id: WidgetId) -> None:
        """Give focus to ``widget_id``; the previous holder gets a lost-focus notice."""
        globals_ = self._memory.interaction_globals
        self._focus_requested_this_frame = True
        if globals_.focused_id == widget_id:
            return
        if globals_.focused_id is not None:
            globals_.lost_focus_ids.add(globals_.focused_id)
        globals_.lost_focus_ids.discard(widget_id)
        globals_.focused_id = widget_id
        globals_.gained_focus_id = widget_id
        globals_.focus_change_frame = self._frame_index
        self._memory.interaction(widget_id).focus_requested = True

    def surrender_focus(self, widget_id: WidgetId | None = None) -> None:
        """Drop focus; with an id, only if that widget holds it."""
        globals_ = self._memory.interaction_globals
        holder = globals_.focused_id
        if holder is None or (widget_id is not None and holder != widget_id):
            return
        globals_.lost_focus_ids.add(holder)
        globals_.focused_id = None
        if globals_.gained_focus_id == holder:
            globals_.gained_focus_id = None
        globals_.focus_change_frame = self._frame_index

    def end_frame(self) -> ArbiterReport:
        pointer = self._input.pointer
        keyboard = self._input.keyboard
        globals_ = self._memory.interaction_globals
        reasons: list[str] = []
        mutations: list[StateMutation] = []

        hovered_id = resolve_hover(self._hits, pointer.position, self._config.hover_tie_break)
        expected = set() if hovered_id is None else {hovered_id}
        if self._told_hovered != expected:
            reasons.append("hover_unsettled")
        if hovered_id is not None and pointer.pressed(PRIMARY_BUTTON) and not self._press_claimed:
            self._assign_press(hovered_id)

        if globals_.focused_id is not None and not self._focus_requested_this_frame:
            if keyboard.key_pressed("escape"):
                self.surrender_focus()
            elif pointer.pressed(PRIMARY_BUTTON) and globals_.pressed_id != globals_.focused_id:
                self.surrender_focus()

        if keyboard.key_pressed("tab") and self._focusable:
            target = self._next_focus_target(backwards=keyboard.modifiers.shift)
            if target is not None:
                mutations.append(RequestFocus(target))

        seen = {hit.widget_id for hit in self._hits}
        if globals_.dragged_id is not None and globals_.dragged_id not in seen:
            _LOG.debug("drag_target_vanished id=%s", globals_.dragged_id.hex())
            globals_.dragged_id = None
        if not pointer.is_down(PRIMARY_BUTTON):
            globals_.pressed_id = None
            globals_.press_origin = None
            globals_.press_travel = 0.0
            globals_.dragged_id = None
        if globals_.dragged_id is not None:
            reasons.append("dragging")
        elif globals_.pressed_id is not None:
            reasons.append("pointer_held")
        if globals_.focused_id != self._focus_at_begin:
            reasons.append("focus_changed")

        return ArbiterReport(
            hovered_id=hovered_id,
            focused_id=globals_.focused_id,
            dragged_id=globals_.dragged_id,
            hits=tuple(self._hits),
            mutations=tuple(mutations),
            repaint_reasons=tuple(reasons),
        )

    def _assign_press(self, widget_id: WidgetId) -> None:
        hit = next(hit for hit in reversed(self._hits) if hit.widget_id == widget_id)
        if not hit.sense.interactive:
            return
        pointer = self._input.pointer
        origin = pointer.press_origin or pointer.position
        globals_ = self._memory.interaction_globals
        globals_.pressed_id = widget_id
        globals_.press_origin = origin
        globals_.press_travel = 0.0
        if origin is not None and pointer.position is not None:
            globals_.press_travel = pointer.position.distance(origin)
        state = self._memory.peek_interaction(widget_id)
        if state is not None:
            state.drag_origin = origin
        self._press_claimed = True
        _LOG.debug("press_assigned_at_end id=%s", widget_id.hex())

    def _next_focus_target(self, *, backwards: bool) -> WidgetId | None:
        order = list(dict.fromkeys(self._focusable))
        current = self._memory.interaction_globals.focused_id
        if current not in order:
            return order[-1] if backwards else order[0]
        index = order.index(current)
        step = -1 if backwards else 1
        return order[(index + step) % len(order)]

