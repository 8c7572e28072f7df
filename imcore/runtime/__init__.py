"""imcore runtime modules."""

from imcore.runtime.arbiter import InteractionArbiter, resolve_hover
from imcore.runtime.config import CoreConfig, load_core_config
from imcore.runtime.containers import Visuals, scroll_offset_for_target
from imcore.runtime.context import Context
from imcore.runtime.errors import (
    ImcoreError,
    InvalidFrameStateError,
    ProtocolError,
    UnbalancedScopeError,
)
from imcore.runtime.frame import FrameController
from imcore.runtime.id_hasher import ROOT_ID, IdStack, id_for
from imcore.runtime.layout import ClipStack, LayoutCursor
from imcore.runtime.logging import setup_core_logging
from imcore.runtime.memory import GcReport, HitRecord, PersistentMemory
from imcore.runtime.output import OutputAccumulator
from imcore.runtime.text_cursor import TextEditOutcome, apply_text_input
from imcore.runtime.time import FrameClock, FrameTiming

__all__ = [
    "ClipStack",
    "Context",
    "CoreConfig",
    "FrameClock",
    "FrameController",
    "FrameTiming",
    "GcReport",
    "HitRecord",
    "IdStack",
    "ImcoreError",
    "InteractionArbiter",
    "InvalidFrameStateError",
    "LayoutCursor",
    "OutputAccumulator",
    "PersistentMemory",
    "ProtocolError",
    "ROOT_ID",
    "TextEditOutcome",
    "UnbalancedScopeError",
    "Visuals",
    "apply_text_input",
    "id_for",
    "load_core_config",
    "resolve_hover",
    "setup_core_logging",
]
