"""RGBA colours and their textual forms."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from PIL import ImageColor

# Names whose X11 value differs from the CSS one in the Pillow table.
_X11_OVERRIDES = {
    "gray": (0xBE, 0xBE, 0xBE),
    "grey": (0xBE, 0xBE, 0xBE),
    "green": (0x00, 0xFF, 0x00),
    "maroon": (0xB0, 0x30, 0x60),
    "purple": (0xA0, 0x20, 0xF0),
}

_NUMBER = r"\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*(%?)\s*"
_RGB_RE = re.compile(r"rgb\s*\(" + ",".join([_NUMBER] * 3) + r"\)\s*")
_RGBA_RE = re.compile(
    r"rgba\s*\(" + ",".join([_NUMBER] * 3)
    + r",\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*\)\s*"
)
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class Color:
    """A colour with components in the range 0.0 to 1.0."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0


BLACK = Color(0.0, 0.0, 0.0, 1.0)


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _channel(number: str, percent: str) -> float:
    value = float(number)
    return _clamp(value / 100.0 if percent else value / 255.0)


def _hex_channel(digits: str) -> int:
    bits = len(digits) * 4
    value = int(digits, 16) << (16 - bits)
    while bits < 16:
        value |= value >> bits
        bits *= 2
    return value


def _parse_hex(spec: str) -> Color:
    digits = spec[1:]
    if len(digits) not in (3, 6, 9, 12) or not set(digits) <= _HEX_DIGITS:
        raise ValueError(f"invalid colour: {spec!r}")
    size = len(digits) // 3
    red, green, blue = (
        _hex_channel(digits[i * size:(i + 1) * size]) / 65535.0 for i in range(3)
    )
    return Color(red, green, blue, 1.0)


def _parse_name(spec: str) -> Color:
    name = "".join(spec.split()).lower()
    rgb = _X11_OVERRIDES.get(name)
    if rgb is None:
        if not name or name not in ImageColor.colormap:
            raise ValueError(f"unknown colour name: {spec!r}")
        rgb = ImageColor.getrgb(name)[:3]
    red, green, blue = (channel / 255.0 for channel in rgb)
    return Color(red, green, blue, 1.0)


def parse_color(text: str) -> Color:
    """Parse '#rgb' style hex, 'rgb(...)', 'rgba(...)' or a colour name.

    Raises ValueError if the text is not a colour.
    """
    spec = text.strip()
    if spec.startswith("rgba"):
        match = _RGBA_RE.fullmatch(spec)
        if match is None:
            raise ValueError(f"invalid colour: {text!r}")
        groups = match.groups()
        return Color(
            _channel(groups[0], groups[1]),
            _channel(groups[2], groups[3]),
            _channel(groups[4], groups[5]),
            _clamp(float(groups[6])),
        )
    if spec.startswith("rgb"):
        match = _RGB_RE.fullmatch(spec)
        if match is None:
            raise ValueError(f"invalid colour: {text!r}")
        groups = match.groups()
        return Color(
            _channel(groups[0], groups[1]),
            _channel(groups[2], groups[3]),
            _channel(groups[4], groups[5]),
            1.0,
        )
    if spec.startswith("#"):
        return _parse_hex(spec)
    return _parse_name(spec)


def color_from_string(text: Optional[str]) -> Color:
    """Parse a colour, falling back to black for empty or invalid text."""
    if not text:
        return BLACK
    try:
        return parse_color(text)
    except ValueError:
        return BLACK


def color_to_string(color: Color) -> str:
    """Format a colour as '#rrggbb'."""
    return "#{:02x}{:02x}{:02x}".format(
        int(color.red * 65535) >> 8,
        int(color.green * 65535) >> 8,
        int(color.blue * 65535) >> 8,
    )