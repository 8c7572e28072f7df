from __future__ import annotations

import pytest

from imcore.api.geometry import Rect, Vec2
from imcore.runtime.config import CoreConfig, load_core_config, resolve_log_level_name


def test_defaults_without_environment() -> None:
    config = load_core_config(env={})
    assert config == CoreConfig()
    assert config.staleness_threshold == 120
    assert config.drag_deadzone == 4.0
    assert config.hover_tie_break == "topmost"


def test_environment_overrides_are_parsed() -> None:
    config = load_core_config(
        env={
            "IMCORE_STALENESS_THRESHOLD": "4",
            "IMCORE_DRAG_DEADZONE": "2.5",
            "IMCORE_ITEM_SPACING_X": "3",
            "IMCORE_LAYOUT_DIRECTION": "Horizontal",
            "IMCORE_SCREEN_SIZE": "640x480",
            "IMCORE_HOVER_TIE_BREAK": "smallest",
            "IMCORE_DEBUG_ID_COLLISIONS": "yes",
        }
    )
    assert config.staleness_threshold == 4
    assert config.drag_deadzone == 2.5
    assert config.item_spacing == Vec2(3.0, 4.0)
    assert config.default_direction == "horizontal"
    assert config.screen_rect == Rect(0.0, 0.0, 640.0, 480.0)
    assert config.hover_tie_break == "smallest"
    assert config.debug_id_collisions


def test_invalid_environment_values_fall_back_or_clamp() -> None:
    config = load_core_config(
        env={
            "IMCORE_STALENESS_THRESHOLD": "-3",
            "IMCORE_DRAG_DEADZONE": "wide",
            "IMCORE_HOVER_TIE_BREAK": "random",
            "IMCORE_SCREEN_SIZE": "huge",
            "IMCORE_DEBUG_ID_COLLISIONS": "maybe",
        }
    )
    assert config.staleness_threshold == 0
    assert config.drag_deadzone == 4.0
    assert config.hover_tie_break == "topmost"
    assert config.screen_rect == CoreConfig().screen_rect
    assert not config.debug_id_collisions


def test_process_environment_is_read_when_no_mapping_given(monkeypatch) -> None:
    monkeypatch.setenv("IMCORE_MAX_MEMORY_ENTRIES", "32")
    assert load_core_config().max_memory_entries == 32


def test_direct_construction_validates_values() -> None:
    with pytest.raises(ValueError):
        CoreConfig(staleness_threshold=-1)
    with pytest.raises(ValueError):
        CoreConfig(max_memory_entries=0)
    with pytest.raises(ValueError):
        CoreConfig(hover_tie_break="largest")  # type: ignore[arg-type]


def test_log_level_prefers_package_variable() -> None:
    assert resolve_log_level_name(env={"IMCORE_LOG_LEVEL": "debug", "LOG_LEVEL": "ERROR"}) == "DEBUG"
    assert resolve_log_level_name(env={"LOG_LEVEL": "error"}) == "ERROR"
    assert resolve_log_level_name(env={}) == "INFO"
