"""Widget identity value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

_MASK_64 = (1 << 64) - 1


@dataclass(frozen=True, slots=True, order=True)
class WidgetId:
    """Opaque 64-bit widget identifier."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= _MASK_64:
            raise ValueError("WidgetId value must fit in 64 bits")

    def hex(self) -> str:
        return f"{self.value:016x}"

    @classmethod
    def from_hex(cls, text: str) -> WidgetId:
        return cls(int(text, 16))

    def short_debug_format(self) -> str:
        return self.hex()[:4]

    def __repr__(self) -> str:
        return f"WidgetId({self.hex()})"


Seed: TypeAlias = "str | int | bytes | WidgetId | tuple[Seed, ...]"


__all__ = ["Seed", "WidgetId"]
