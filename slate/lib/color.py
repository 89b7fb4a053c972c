from __future__ import annotations

import string
from dataclasses import dataclass

from ..errors import ColorParseError, InvalidColorFormat

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Color:
    r: int
    g: int
    b: int
    a: int = 255

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        """Parse ``#rrggbb`` or ``#rrggbbaa`` (the ``#`` is optional)."""

        digits = value.lstrip("#")
        if len(digits) not in (6, 8):
            raise InvalidColorFormat(f"Invalid color format {value!r} (expected #RRGGBB or #RRGGBBAA)")
        bad = [c for c in digits if c not in _HEX_DIGITS]
        if bad:
            raise ColorParseError(f"Failed to parse hex value {value!r}: invalid digit {bad[0]!r}")

        channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
        if len(channels) == 3:
            channels.append(255)
        return cls(*channels)

    def css_rgba(self) -> str:
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a / 255:.2f})"

    def rofi(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"

    def plymouth(self) -> str:
        return f"0x{self.r:02x}{self.g:02x}{self.b:02x}"

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def rrggbbaa(self) -> str:
        return f"{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"

    def hyprland(self) -> str:
        return f"rgba({self.rrggbbaa()})"


# Template filter name -> Color method name.
CONVERSIONS = ("css_rgba", "rofi", "plymouth", "hex", "rrggbbaa", "hyprland")
