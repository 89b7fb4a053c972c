from __future__ import annotations

import pytest

from slate.errors import ColorParseError, InvalidColorFormat
from slate.lib.color import Color


@pytest.mark.parametrize("value", ["#5f87af", "5f87af", "#000000", "#ffffff", "#0a0B0F"])
def test_bare_hex_round_trips_lowercase(value: str) -> None:
    assert Color.from_hex(value).hex() == "#" + value.lstrip("#").lower()


def test_six_digits_default_to_opaque() -> None:
    assert Color.from_hex("#102030") == Color(0x10, 0x20, 0x30, 255)


def test_eight_digits_keep_alpha() -> None:
    c = Color.from_hex("#0a0b0f99")
    assert c.a == 0x99
    assert c.rofi() == "#0a0b0f99"
    assert c.rrggbbaa() == "0a0b0f99"


def test_conversions_are_bit_exact() -> None:
    c = Color.from_hex("#5F87AF")
    assert c.css_rgba() == "rgba(95, 135, 175, 1.00)"
    assert c.rofi() == "#5f87afff"
    assert c.plymouth() == "0x5f87af"
    assert c.hex() == "#5f87af"
    assert c.rrggbbaa() == "5f87afff"
    assert c.hyprland() == "rgba(5f87afff)"


def test_css_alpha_two_decimals() -> None:
    assert Color.from_hex("#00000080").css_rgba() == "rgba(0, 0, 0, 0.50)"
    assert Color.from_hex("#01020300").css_rgba() == "rgba(1, 2, 3, 0.00)"


def test_zero_padding() -> None:
    assert Color.from_hex("#010203").plymouth() == "0x010203"


@pytest.mark.parametrize("value", ["", "#", "#fff", "#ffff", "#fffffff", "#fffffffff", "12345"])
def test_wrong_length_is_invalid_format(value: str) -> None:
    with pytest.raises(InvalidColorFormat):
        Color.from_hex(value)


@pytest.mark.parametrize("value", ["#gggggg", "#12345z", "#+12345", "#1234567x", "# 12345"])
def test_non_hex_digits_fail_to_parse(value: str) -> None:
    with pytest.raises(ColorParseError):
        Color.from_hex(value)


def test_color_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        Color.from_hex("#xyz")
