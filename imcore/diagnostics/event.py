"""Structured diagnostics event schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

DiagnosticCategory = str


@dataclass(frozen=True, slots=True)
class DiagnosticEvent:
    """Single structured diagnostics event raised by the core."""

    ts_utc: str
    frame_index: int
    category: DiagnosticCategory
    name: str
    level: str = "info"
    widget_id: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ts_utc": self.ts_utc,
            "frame_index": self.frame_index,
            "category": self.category,
            "name": self.name,
            "level": self.level,
            "widget_id": self.widget_id,
            "payload": dict(self.payload),
        }


def utc_now_iso() -> str:
    """Return an RFC3339-like UTC timestamp with milliseconds."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds")
