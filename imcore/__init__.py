"""Immediate-mode GUI reconciliation core."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from imcore.runtime.config import CoreConfig
    from imcore.runtime.frame import FrameController


def create_frame_controller(config: "CoreConfig | None" = None) -> "FrameController":
    """Create a frame controller configured from ``config`` or the environment."""
    from imcore.runtime.config import load_core_config
    from imcore.runtime.frame import FrameController

    return FrameController(config if config is not None else load_core_config())


__all__ = ["create_frame_controller"]
