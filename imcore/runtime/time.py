"""Frame timing for input snapshots."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from time import monotonic


@dataclass(frozen=True, slots=True)
class FrameTiming:
    """Timestamp and bounded delta stamped onto one input snapshot."""

    frame_index: int
    time_seconds: float
    delta_seconds: float


class FrameClock:
    """Monotonic frame clock with bounded frame deltas."""

    def __init__(
        self,
        *,
        time_source: Callable[[], float] | None = None,
        max_delta_seconds: float = 0.25,
    ) -> None:
        if max_delta_seconds <= 0.0:
            raise ValueError("max_delta_seconds must be > 0")
        self._time_source = time_source or monotonic
        self._max_delta_seconds = max_delta_seconds
        self._start_seconds: float | None = None
        self._last_seconds: float | None = None
        self._frame_index = 0

    @property
    def frame_index(self) -> int:
        return self._frame_index

    def next(self) -> FrameTiming:
        """Advance the clock and return timing for the next frame."""
        now = self._time_source()
        if self._start_seconds is None or self._last_seconds is None:
            self._start_seconds = now
            delta = 0.0
        else:
            delta = min(max(0.0, now - self._last_seconds), self._max_delta_seconds)
        self._last_seconds = now
        self._frame_index += 1
        return FrameTiming(
            frame_index=self._frame_index,
            time_seconds=now - self._start_seconds,
            delta_seconds=delta,
        )
