"""Centralized core configuration sourced from defaults and environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Mapping

from imcore.api.geometry import Rect, Vec2

HoverTieBreak = Literal["topmost", "smallest"]
LayoutDirection = Literal["vertical", "horizontal", "flow"]

_DIRECTIONS: frozenset[str] = frozenset({"vertical", "horizontal", "flow"})
_TIE_BREAKS: frozenset[str] = frozenset({"topmost", "smallest"})


@dataclass(frozen=True, slots=True)
class CoreConfig:
    """Immutable reconciliation policy for one frame controller."""

    staleness_threshold: int = 120
    max_memory_entries: int = 10_000
    drag_deadzone: float = 4.0
    item_spacing: Vec2 = Vec2(8.0, 4.0)
    default_direction: LayoutDirection = "vertical"
    screen_rect: Rect = Rect(0.0, 0.0, 1280.0, 800.0)
    hover_tie_break: HoverTieBreak = "topmost"
    debug_id_collisions: bool = False
    scroll_speed: float = 1.0
    diagnostics_enabled: bool = True
    diagnostics_capacity: int = 2_000

    def __post_init__(self) -> None:
        if self.staleness_threshold < 0:
            raise ValueError("staleness_threshold must be >= 0")
        if self.max_memory_entries <= 0:
            raise ValueError("max_memory_entries must be > 0")
        if self.drag_deadzone < 0.0:
            raise ValueError("drag_deadzone must be >= 0")
        if self.default_direction not in _DIRECTIONS:
            raise ValueError(f"unknown layout direction: {self.default_direction!r}")
        if self.hover_tie_break not in _TIE_BREAKS:
            raise ValueError(f"unknown hover tie-break: {self.hover_tie_break!r}")


def _raw(name: str, *, env: Mapping[str, str] | None = None) -> str | None:
    value = os.getenv(name) if env is None else env.get(name)
    return None if value is None else str(value)


def _flag(name: str, default: bool, *, env: Mapping[str, str] | None = None) -> bool:
    raw = _raw(name, env=env)
    if raw is None:
        return bool(default)
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _int(
    name: str,
    default: int,
    *,
    minimum: int | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    raw = _raw(name, env=env)
    if raw is None:
        value = int(default)
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            value = int(default)
    if minimum is None:
        return value
    return max(int(minimum), value)


def _float(
    name: str,
    default: float,
    *,
    minimum: float | None = None,
    env: Mapping[str, str] | None = None,
) -> float:
    raw = _raw(name, env=env)
    if raw is None:
        value = float(default)
    else:
        try:
            value = float(raw.strip())
        except ValueError:
            value = float(default)
    if minimum is None:
        return value
    return max(float(minimum), value)


def _choice(name: str, default: str, allowed: frozenset[str], *, env: Mapping[str, str] | None) -> str:
    raw = _raw(name, env=env)
    if raw is None:
        return default
    value = raw.strip().lower()
    return value if value in allowed else default


def _screen(raw: str | None, fallback: Rect) -> Rect:
    if raw is None:
        return fallback
    normalized = raw.strip().lower().replace(" ", "")
    for sep in ("x", ",", ":"):
        if sep in normalized:
            left, right = normalized.split(sep, 1)
            try:
                width = max(1.0, float(left))
                height = max(1.0, float(right))
            except ValueError:
                return fallback
            return Rect(0.0, 0.0, width, height)
    return fallback


def load_core_config(*, env: Mapping[str, str] | None = None) -> CoreConfig:
    """Build a config from ``IMCORE_*`` variables, falling back to defaults."""
    defaults = CoreConfig()
    return CoreConfig(
        staleness_threshold=_int(
            "IMCORE_STALENESS_THRESHOLD", defaults.staleness_threshold, minimum=0, env=env
        ),
        max_memory_entries=_int(
            "IMCORE_MAX_MEMORY_ENTRIES", defaults.max_memory_entries, minimum=1, env=env
        ),
        drag_deadzone=_float("IMCORE_DRAG_DEADZONE", defaults.drag_deadzone, minimum=0.0, env=env),
        item_spacing=Vec2(
            _float("IMCORE_ITEM_SPACING_X", defaults.item_spacing.x, minimum=0.0, env=env),
            _float("IMCORE_ITEM_SPACING_Y", defaults.item_spacing.y, minimum=0.0, env=env),
        ),
        default_direction=_choice(  # type: ignore[arg-type]
            "IMCORE_LAYOUT_DIRECTION", defaults.default_direction, _DIRECTIONS, env=env
        ),
        screen_rect=_screen(_raw("IMCORE_SCREEN_SIZE", env=env), defaults.screen_rect),
        hover_tie_break=_choice(  # type: ignore[arg-type]
            "IMCORE_HOVER_TIE_BREAK", defaults.hover_tie_break, _TIE_BREAKS, env=env
        ),
        debug_id_collisions=_flag("IMCORE_DEBUG_ID_COLLISIONS", False, env=env),
        scroll_speed=_float("IMCORE_SCROLL_SPEED", defaults.scroll_speed, minimum=0.0, env=env),
        diagnostics_enabled=_flag("IMCORE_DIAGNOSTICS_ENABLED", True, env=env),
        diagnostics_capacity=_int(
            "IMCORE_DIAGNOSTICS_CAPACITY", defaults.diagnostics_capacity, minimum=10, env=env
        ),
    )


def resolve_log_level_name(default: str = "INFO", *, env: Mapping[str, str] | None = None) -> str:
    """Resolve log level with package-prefixed override."""
    value = _raw("IMCORE_LOG_LEVEL", env=env)
    if value is None:
        value = _raw("LOG_LEVEL", env=env) or default
    return value.strip().upper()


__all__ = [
    "CoreConfig",
    "HoverTieBreak",
    "LayoutDirection",
    "load_core_config",
    "resolve_log_level_name",
]
