from __future__ import annotations

import pytest

from imcore.api.color import (
    Color32,
    Hsva,
    adjust_value,
    gamma_u8_from_linear_f32,
    hsv_from_rgb,
    linear_f32_from_gamma_u8,
    rgb_from_hsv,
)


def test_color32_hex_parsing_and_formatting() -> None:
    assert Color32.from_hex("#ff8000") == Color32(255, 128, 0, 255)
    assert Color32.from_hex("ff800080").a == 128
    assert Color32(255, 128, 0).to_hex() == "#ff8000"
    assert Color32(255, 128, 0, 16).to_hex() == "#ff800010"
    with pytest.raises(ValueError):
        Color32.from_hex("#12345")
    with pytest.raises(ValueError):
        Color32.from_hex("#zzzzzz")


@pytest.mark.parametrize("value", [0, 1, 10, 64, 128, 200, 254, 255])
def test_gamma_byte_roundtrips_through_linear(value: int) -> None:
    assert gamma_u8_from_linear_f32(linear_f32_from_gamma_u8(value)) == value


def test_hsv_conversions_for_primaries() -> None:
    assert hsv_from_rgb((1.0, 0.0, 0.0)) == pytest.approx((0.0, 1.0, 1.0))
    assert rgb_from_hsv((1.0 / 3.0, 1.0, 1.0)) == pytest.approx((0.0, 1.0, 0.0))
    h, s, v = hsv_from_rgb((0.0, 0.0, 1.0))
    assert rgb_from_hsv((h, s, v)) == pytest.approx((0.0, 0.0, 1.0))


def test_hsva_from_color32_roundtrip() -> None:
    color = Color32(60, 120, 200, 255)
    assert Hsva.from_color32(color).to_color32() == color


def test_hsva_additive_and_opaque() -> None:
    additive = Hsva.from_additive_rgb((1.0, 1.0, 1.0))
    assert additive.is_additive
    assert additive.to_color32().a == 0
    assert not additive.to_opaque().is_additive
    assert Hsva.from_rgba_premultiplied(0.0, 0.0, 0.0, 0.0) == Hsva(0.0, 0.0, 0.0, 0.0)


def test_adjust_value_brightens_and_keeps_alpha() -> None:
    base = "#3c3c3c80"
    brighter = Color32.from_hex(adjust_value(base, 1.5))
    assert brighter.r > 0x3C
    assert brighter.r == brighter.g == brighter.b
    assert brighter.a == 0x80
    assert adjust_value("#000000", 2.0) == "#000000"
