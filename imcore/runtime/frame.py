"""Frame lifecycle: begin, build through a Context, finalize output and memory."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Literal

from imcore.api.geometry import Rect, Vec2
from imcore.api.ids import WidgetId
from imcore.api.input_snapshot import InputSnapshot
from imcore.api.memory_entries import ScrollState
from imcore.api.output import (
    FrameOutput,
    ProtocolIssue,
    RequestFocus,
    ScrollToWidget,
    StateMutation,
    SurrenderFocus,
)
from imcore.diagnostics.hub import DiagnosticHub
from imcore.runtime.arbiter import InteractionArbiter
from imcore.runtime.config import CoreConfig
from imcore.runtime.containers import Visuals, scroll_offset_for_target
from imcore.runtime.context import Context
from imcore.runtime.errors import (
    RECOVERABLE_RUNTIME_ERRORS,
    InvalidFrameStateError,
    log_recoverable,
)
from imcore.runtime.memory import PersistentMemory

_LOG = logging.getLogger("imcore.frame")

FramePhase = Literal["idle", "building", "finalizing"]
FrameHook = Callable[[Context], None]
BuildCallback = Callable[[Context], None]


class FrameController:
    """Owns one UI's memory and drives its frames strictly in sequence."""

    def __init__(
        self,
        config: CoreConfig | None = None,
        *,
        memory: PersistentMemory | None = None,
        hub: DiagnosticHub | None = None,
        visuals: Visuals | None = None,
    ) -> None:
        self._config = config or CoreConfig()
        self._memory = memory or PersistentMemory(
            staleness_threshold=self._config.staleness_threshold,
            max_entries=self._config.max_memory_entries,
        )
        self._hub = hub or DiagnosticHub(
            capacity=self._config.diagnostics_capacity,
            enabled=self._config.diagnostics_enabled,
        )
        self._visuals = visuals or Visuals()
        self._arbiter = InteractionArbiter(self._memory, self._config)
        self._phase: FramePhase = "idle"
        self._context: Context | None = None
        self._frame_index = 0
        self._pending_mutations: tuple[StateMutation, ...] = ()
        self._carried_issues: list[ProtocolIssue] = []
        self._previous_rects: dict[WidgetId, Rect] = {}
        self._scroll_parents: dict[WidgetId, WidgetId] = {}
        self._scroll_viewports: dict[WidgetId, tuple[Rect, Vec2]] = {}
        self._begin_hooks: dict[str, FrameHook] = {}
        self._end_hooks: dict[str, FrameHook] = {}
        self._last_output: FrameOutput | None = None

    @property
    def phase(self) -> FramePhase:
        return self._phase

    @property
    def config(self) -> CoreConfig:
        return self._config

    @property
    def memory(self) -> PersistentMemory:
        return self._memory

    @property
    def hub(self) -> DiagnosticHub:
        return self._hub

    @property
    def frame_index(self) -> int:
        return self._frame_index

    @property
    def context(self) -> Context | None:
        return self._context

    @property
    def last_output(self) -> FrameOutput | None:
        return self._last_output

    def on_begin_frame(self, name: str, callback: FrameHook) -> None:
        """Run ``callback`` with the Context right after every begin_frame."""
        self._begin_hooks[self._hook_name(name, self._begin_hooks)] = callback

    def on_end_frame(self, name: str, callback: FrameHook) -> None:
        """Run ``callback`` with the Context before every frame is finalized."""
        self._end_hooks[self._hook_name(name, self._end_hooks)] = callback

    def remove_hook(self, name: str) -> bool:
        normalized = name.strip()
        removed_begin = self._begin_hooks.pop(normalized, None) is not None
        removed_end = self._end_hooks.pop(normalized, None) is not None
        return removed_begin or removed_end

    @staticmethod
    def _hook_name(name: str, hooks: dict[str, FrameHook]) -> str:
        normalized = name.strip()
        if not normalized:
            raise ValueError("hook name must not be empty")
        if normalized in hooks:
            raise ValueError(f"duplicate frame hook: {normalized}")
        return normalized

    def begin_frame(self, input_snapshot: InputSnapshot) -> Context:
        """Start a frame and return the Context widget calls go through."""
        if self._phase != "idle":
            phase = self._phase
            if phase == "building":
                self._finalize(partial=True)
            else:
                self._discard_frame()
            self._protocol_violation(
                f"begin_frame_while_{phase}",
                "in-flight frame finalized as partial; controller reset to idle",
            )
            raise InvalidFrameStateError("begin_frame", phase)

        self._frame_index = max(self._frame_index + 1, int(input_snapshot.frame_index))
        self._phase = "building"
        self._memory.begin_frame(self._frame_index)
        self._arbiter.begin_frame(
            input_snapshot,
            self._memory.previous_hits,
            frame_index=self._frame_index,
        )
        context = Context(
            frame_index=self._frame_index,
            input_snapshot=input_snapshot,
            config=self._config,
            memory=self._memory,
            arbiter=self._arbiter,
            hub=self._hub,
            visuals=self._visuals,
        )
        self._context = context
        mutations = self._pending_mutations
        self._pending_mutations = ()
        for mutation in mutations:
            self._apply_mutation(mutation)
        self._run_hooks("begin", self._begin_hooks, context)
        _LOG.debug("frame_begin index=%d mutations=%d", self._frame_index, len(mutations))
        return context

    def end_frame(self) -> FrameOutput:
        """Finalize the building frame into a FrameOutput."""
        if self._phase != "building":
            phase = self._phase
            self._protocol_violation(f"end_frame_while_{phase}", "no frame is being built")
            raise InvalidFrameStateError("end_frame", phase)
        return self._finalize(partial=False)

    def abort_frame(self) -> FrameOutput:
        """Finalize whatever the frame built so far, flagged partial."""
        if self._phase != "building":
            phase = self._phase
            self._protocol_violation(f"abort_frame_while_{phase}", "no frame is being built")
            raise InvalidFrameStateError("abort_frame", phase)
        return self._finalize(partial=True)

    def run_frame(self, input_snapshot: InputSnapshot, build: BuildCallback) -> FrameOutput:
        """begin_frame, ``build(context)``, end_frame; a failing build still finalizes."""
        context = self.begin_frame(input_snapshot)
        try:
            build(context)
        except Exception:
            if self._phase == "building":
                self._finalize(partial=True)
            raise
        return self.end_frame()

    def _finalize(self, *, partial: bool) -> FrameOutput:
        context = self._context
        if context is None:
            raise InvalidFrameStateError("finalize", self._phase)
        if not partial:
            self._run_hooks("end", self._end_hooks, context)
        self._phase = "finalizing"
        context.close_open_scopes()
        overflows = context.finish_layout()
        report = self._arbiter.end_frame()
        gc = self._memory.collect_garbage()
        if gc.removed:
            self._hub.report(
                category="memory",
                name="gc",
                frame_index=self._frame_index,
                payload={"dropped": len(gc.dropped), "evicted": len(gc.evicted)},
            )
        reasons = report.repaint_reasons
        focused_id = self._memory.focused_id
        if focused_id != report.focused_id and "focus_changed" not in reasons:
            reasons += ("focus_changed",)
        issues = tuple(self._carried_issues) + context.protocol_issues
        self._carried_issues = []
        output = context.output.finish(
            frame_index=self._frame_index,
            extra_mutations=report.mutations,
            extra_repaint_reasons=reasons,
            collisions=context.collisions,
            overflows=overflows,
            protocol_errors=issues,
            hovered_id=report.hovered_id,
            focused_id=focused_id,
            dragged_id=self._memory.dragged_id,
            widget_count=len(report.hits),
            partial=partial,
        )
        self._memory.remember_hits(report.hits)
        self._previous_rects = context.widget_rects
        self._scroll_parents = context.scroll_parents
        self._scroll_viewports = context.scroll_viewports
        self._pending_mutations = output.mutations
        self._last_output = output
        self._context = None
        self._phase = "idle"
        _LOG.debug(
            "frame_end index=%d primitives=%d widgets=%d repaint=%s partial=%s",
            output.frame_index,
            len(output.primitives),
            output.widget_count,
            ",".join(output.repaint_reasons) or "-",
            partial,
        )
        return output

    def _discard_frame(self) -> None:
        self._context = None
        self._phase = "idle"

    def _protocol_violation(self, name: str, detail: str) -> None:
        _LOG.warning("frame_protocol_violation name=%s detail=%s", name, detail)
        self._hub.report(
            category="protocol",
            name=name,
            frame_index=self._frame_index,
            level="warning",
            payload={"detail": detail},
        )
        self._carried_issues.append(ProtocolIssue(name=name, detail=detail))

    def _run_hooks(self, stage: str, hooks: dict[str, FrameHook], context: Context) -> None:
        for name, callback in tuple(hooks.items()):
            try:
                callback(context)
            except RECOVERABLE_RUNTIME_ERRORS:
                log_recoverable(
                    _LOG,
                    f"frame_hook_failed stage={stage} name={name}",
                    level=logging.WARNING,
                )
                self._hub.report(
                    category="hook",
                    name="frame_hook_failed",
                    frame_index=self._frame_index,
                    level="error",
                    payload={"stage": stage, "hook": name},
                )

    def _apply_mutation(self, mutation: StateMutation) -> None:
        if isinstance(mutation, RequestFocus):
            if mutation.target not in self._memory:
                _LOG.debug("focus_target_gone id=%s", mutation.target.hex())
                return
            self._arbiter.request_focus(mutation.target)
        elif isinstance(mutation, SurrenderFocus):
            self._arbiter.surrender_focus()
        elif isinstance(mutation, ScrollToWidget):
            self._apply_scroll_to(mutation)

    def _apply_scroll_to(self, mutation: ScrollToWidget) -> None:
        parent = self._scroll_parents.get(mutation.target)
        target = self._previous_rects.get(mutation.target)
        if parent is None or target is None or parent not in self._scroll_viewports:
            _LOG.debug("scroll_to_ignored id=%s reason=not_in_scroll_area", mutation.target.hex())
            return
        state = self._memory.get_typed(parent, ScrollState)
        if state is None:
            return
        viewport, offset = self._scroll_viewports[parent]
        wanted = scroll_offset_for_target(viewport, offset, target, mutation.align)
        self._memory.set(parent, replace(state, offset=state.clamped(wanted)))

