"""Resolve user supplied color strings into PDF fill colors."""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

LOGGER = logging.getLogger("pdfeditx.colors")

_RGB_PATTERN = re.compile(r"^rgb\((.*)\)$")
_HEX_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$")


class RGBColor(NamedTuple):
    """A device RGB color with channels in ``[0, 1]``."""

    red: float
    green: float
    blue: float

    @classmethod
    def from_bytes(cls, red: int, green: int, blue: int) -> "RGBColor":
        return cls(red / 255.0, green / 255.0, blue / 255.0)

    def operands(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)


BLACK = RGBColor(0.0, 0.0, 0.0)
WHITE = RGBColor(1.0, 1.0, 1.0)

NAMED_COLORS: dict[str, RGBColor] = {
    "red": RGBColor.from_bytes(255, 0, 0),
    "blue": RGBColor.from_bytes(0, 0, 255),
    "green": RGBColor.from_bytes(0, 255, 0),
    "yellow": RGBColor.from_bytes(255, 255, 0),
    "white": WHITE,
    "black": BLACK,
    "gray": RGBColor.from_bytes(128, 128, 128),
    "grey": RGBColor.from_bytes(128, 128, 128),
    "orange": RGBColor.from_bytes(255, 200, 0),
    "pink": RGBColor.from_bytes(255, 175, 175),
    "cyan": RGBColor.from_bytes(0, 255, 255),
    "magenta": RGBColor.from_bytes(255, 0, 255),
    "darkgray": RGBColor.from_bytes(64, 64, 64),
    "darkgrey": RGBColor.from_bytes(64, 64, 64),
    "lightgray": RGBColor.from_bytes(192, 192, 192),
    "lightgrey": RGBColor.from_bytes(192, 192, 192),
}


def _clamp_channel(value: str) -> int:
    return max(0, min(255, int(value.strip())))


def _parse_hex(value: str) -> RGBColor | None:
    match = _HEX_PATTERN.match(value)
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(digit * 2 for digit in digits)
    channels = [int(digits[i : i + 2], 16) for i in range(0, 6, 2)]
    return RGBColor.from_bytes(*channels)


def _parse_rgb(value: str) -> RGBColor | None:
    match = _RGB_PATTERN.match(value)
    if match is None:
        return None
    parts = match.group(1).split(",")
    if len(parts) != 3:
        return None
    try:
        return RGBColor.from_bytes(*(_clamp_channel(part) for part in parts))
    except ValueError:
        return None


def resolve_color(value: str | None) -> RGBColor:
    """Return the :class:`RGBColor` described by ``value``.

    Accepted forms are ``#RGB``, ``#RRGGBB``, ``rgb(r, g, b)`` (channels are
    clamped to ``0..255``) and the names in :data:`NAMED_COLORS`. Anything
    else resolves to black and logs a warning; this function never raises.
    """

    if value is None or not str(value).strip():
        return BLACK

    color = str(value).strip().lower()
    if color.startswith("#"):
        parsed = _parse_hex(color)
    elif color.startswith("rgb("):
        parsed = _parse_rgb(color)
    else:
        parsed = NAMED_COLORS.get(color)

    if parsed is None:
        LOGGER.warning("Unknown color %r, using black", value)
        return BLACK
    return parsed


__all__ = ["RGBColor", "BLACK", "WHITE", "NAMED_COLORS", "resolve_color"]
