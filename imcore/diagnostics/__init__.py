"""Core diagnostics package."""

from imcore.diagnostics.event import DiagnosticEvent, utc_now_iso
from imcore.diagnostics.hub import DiagnosticHub
from imcore.diagnostics.json_codec import dumps_bytes, dumps_text, loads

__all__ = [
    "DiagnosticEvent",
    "DiagnosticHub",
    "dumps_bytes",
    "dumps_text",
    "loads",
    "utc_now_iso",
]
