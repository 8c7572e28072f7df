"""sRGBA and HSVA color values used by paint primitives and styles."""

from __future__ import annotations

import math
from dataclasses import dataclass


def linear_f32_from_gamma_u8(value: int) -> float:
    """Convert an sRGB gamma-encoded byte to linear [0, 1]."""
    s = float(value) / 255.0
    if s <= 0.04045:
        return s / 12.92
    return ((s + 0.055) / 1.055) ** 2.4


def gamma_u8_from_linear_f32(value: float) -> int:
    """Convert linear [0, 1] to an sRGB gamma-encoded byte."""
    if value <= 0.0:
        return 0
    if value <= 0.0031308:
        return int(round(3294.6 * value))
    if value <= 1.0:
        return int(round(269.025 * (value ** (1.0 / 2.4)) - 14.025))
    return 255


def linear_u8_from_linear_f32(value: float) -> int:
    return int(round(255.0 * min(1.0, max(0.0, value))))


@dataclass(frozen=True, slots=True)
class Color32:
    """sRGB color with unmultiplied alpha, one byte per channel."""

    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_hex(cls, text: str) -> Color32:
        value = text.strip().lstrip("#")
        if len(value) not in (6, 8):
            raise ValueError(f"invalid hex color: {text!r}")
        try:
            channels = [int(value[i : i + 2], 16) for i in range(0, len(value), 2)]
        except ValueError as exc:
            raise ValueError(f"invalid hex color: {text!r}") from exc
        if len(channels) == 3:
            channels.append(255)
        return cls(*channels)

    def to_hex(self) -> str:
        base = f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        if self.a == 255:
            return base
        return f"{base}{self.a:02x}"

    def with_alpha(self, alpha: int) -> Color32:
        return Color32(self.r, self.g, self.b, max(0, min(255, int(alpha))))


@dataclass(frozen=True, slots=True)
class Hsva:
    """Hue, saturation, value, alpha in [0, 1]; negative alpha marks an additive color."""

    h: float
    s: float
    v: float
    a: float = 1.0

    @classmethod
    def from_rgb(cls, rgb: tuple[float, float, float]) -> Hsva:
        h, s, v = hsv_from_rgb(rgb)
        return cls(h, s, v, 1.0)

    @classmethod
    def from_rgba_unmultiplied(cls, r: float, g: float, b: float, a: float) -> Hsva:
        h, s, v = hsv_from_rgb((r, g, b))
        return cls(h, s, v, a)

    @classmethod
    def from_rgba_premultiplied(cls, r: float, g: float, b: float, a: float) -> Hsva:
        if a <= 0.0:
            if r == 0.0 and g == 0.0 and b == 0.0 and a == 0.0:
                return cls(0.0, 0.0, 0.0, 0.0)
            return cls.from_additive_rgb((r, g, b))
        h, s, v = hsv_from_rgb((r / a, g / a, b / a))
        return cls(h, s, v, a)

    @classmethod
    def from_additive_rgb(cls, rgb: tuple[float, float, float]) -> Hsva:
        h, s, v = hsv_from_rgb(rgb)
        return cls(h, s, v, -0.5)

    @classmethod
    def from_color32(cls, color: Color32) -> Hsva:
        return cls.from_rgba_unmultiplied(
            linear_f32_from_gamma_u8(color.r),
            linear_f32_from_gamma_u8(color.g),
            linear_f32_from_gamma_u8(color.b),
            color.a / 255.0,
        )

    @property
    def is_additive(self) -> bool:
        return self.a < 0.0

    def to_opaque(self) -> Hsva:
        return Hsva(self.h, self.s, self.v, 1.0)

    def to_rgb(self) -> tuple[float, float, float]:
        return rgb_from_hsv((self.h, self.s, self.v))

    def to_color32(self) -> Color32:
        r, g, b = self.to_rgb()
        alpha = 0 if self.is_additive else linear_u8_from_linear_f32(self.a)
        return Color32(
            gamma_u8_from_linear_f32(r),
            gamma_u8_from_linear_f32(g),
            gamma_u8_from_linear_f32(b),
            alpha,
        )

    def with_value(self, value: float) -> Hsva:
        return Hsva(self.h, self.s, min(1.0, max(0.0, value)), self.a)


def hsv_from_rgb(rgb: tuple[float, float, float]) -> tuple[float, float, float]:
    """Linear RGB [0, 1] to HSV [0, 1]."""
    r, g, b = rgb
    cmax = max(r, g, b)
    cmin = min(r, g, b)
    spread = cmax - cmin
    if spread == 0.0:
        return 0.0, 0.0, cmax
    if cmax == r:
        h = ((g - b) / spread) % 6.0
    elif cmax == g:
        h = (b - r) / spread + 2.0
    else:
        h = (r - g) / spread + 4.0
    s = spread / cmax
    return h / 6.0, s, cmax


def rgb_from_hsv(hsv: tuple[float, float, float]) -> tuple[float, float, float]:
    """HSV [0, 1] to linear RGB [0, 1]."""
    h, s, v = hsv
    h = (h % 1.0) * 6.0
    sector = int(math.floor(h))
    f = h - sector
    p = v * (1.0 - s)
    q = v * (1.0 - f * s)
    t = v * (1.0 - (1.0 - f) * s)
    match sector % 6:
        case 0:
            return v, t, p
        case 1:
            return q, v, p
        case 2:
            return p, v, t
        case 3:
            return p, q, v
        case 4:
            return t, p, v
        case _:
            return v, p, q


def adjust_value(hex_color: str, factor: float) -> str:
    """Scale a hex color's HSV value, keeping hue, saturation and alpha."""
    color = Color32.from_hex(hex_color)
    hsva = Hsva.from_color32(color)
    adjusted = hsva.with_value(hsva.v * factor).to_color32()
    return adjusted.with_alpha(color.a).to_hex()


__all__ = [
    "Color32",
    "Hsva",
    "adjust_value",
    "gamma_u8_from_linear_f32",
    "hsv_from_rgb",
    "linear_f32_from_gamma_u8",
    "rgb_from_hsv",
]
