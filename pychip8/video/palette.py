"""Palette definitions for CHIP-8 rendering."""

from __future__ import annotations

from typing import Sequence, Tuple

RGBColor = Tuple[int, int, int]
Palette = Tuple[RGBColor, RGBColor, RGBColor, RGBColor]

# Index = plane1 | (plane2 << 1)
DEFAULT_COLORS: Tuple[str, str, str, str] = ("000000", "FF33CC", "33CCFF", "FFFFFF")


def parse_color(text: str) -> RGBColor:
    """Parse a six digit hex colour such as ``"FF33CC"`` (a leading ``#`` is allowed)."""

    value = text.strip()
    if value.startswith("#"):
        value = value[1:]
    if len(value) != 6:
        raise ValueError(f"colour {text!r} must be 6 hex digits long")
    try:
        packed = int(value, 16)
    except ValueError as exc:
        raise ValueError(f"colour {text!r} could not be decoded") from exc
    return ((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)


def validate_palette(palette: Sequence[RGBColor]) -> Palette:
    if len(palette) != 4:
        raise ValueError("palette must contain exactly four colours (one per bitplane combination)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    return tuple(tuple(int(channel) & 0xFF for channel in color) for color in palette)  # type: ignore[return-value]


DEFAULT_PALETTE: Palette = validate_palette([parse_color(color) for color in DEFAULT_COLORS])
