"""Built-in hexadecimal glyph tables."""

from __future__ import annotations

from pychip8.bus import Memory
from pychip8.utils import debug_log

SMALL_FONT_ADDRESS = 0x000
LARGE_FONT_ADDRESS = 0x0A0
SMALL_GLYPH_BYTES = 5
LARGE_GLYPH_BYTES = 10

# 4x5 glyphs 0-F
SMALL_FONT = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,
        0x20, 0x60, 0x20, 0x20, 0x70,
        0xF0, 0x10, 0xF0, 0x80, 0xF0,
        0xF0, 0x10, 0xF0, 0x10, 0xF0,
        0x90, 0x90, 0xF0, 0x10, 0x10,
        0xF0, 0x80, 0xF0, 0x10, 0xF0,
        0xF0, 0x80, 0xF0, 0x90, 0xF0,
        0xF0, 0x10, 0x20, 0x40, 0x40,
        0xF0, 0x90, 0xF0, 0x90, 0xF0,
        0xF0, 0x90, 0xF0, 0x10, 0xF0,
        0xF0, 0x90, 0xF0, 0x90, 0x90,
        0xE0, 0x90, 0xE0, 0x90, 0xE0,
        0xF0, 0x80, 0x80, 0x80, 0xF0,
        0xE0, 0x90, 0x90, 0x90, 0xE0,
        0xF0, 0x80, 0xF0, 0x80, 0xF0,
        0xF0, 0x80, 0xF0, 0x80, 0x80,
    ]
)

# 8x10 glyphs 0-F
LARGE_FONT = bytes(
    [
        0xFF, 0xFF, 0xC3, 0xC3, 0xC3, 0xC3, 0xC3, 0xC3, 0xFF, 0xFF,
        0x18, 0x78, 0x78, 0x18, 0x18, 0x18, 0x18, 0x18, 0xFF, 0xFF,
        0xFF, 0xFF, 0x03, 0x03, 0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF,
        0xFF, 0xFF, 0x03, 0x03, 0xFF, 0xFF, 0x03, 0x03, 0xFF, 0xFF,
        0xC3, 0xC3, 0xC3, 0xC3, 0xFF, 0xFF, 0x03, 0x03, 0x03, 0x03,
        0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF, 0x03, 0x03, 0xFF, 0xFF,
        0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF, 0xC3, 0xC3, 0xFF, 0xFF,
        0xFF, 0xFF, 0x03, 0x03, 0x06, 0x0C, 0x18, 0x18, 0x18, 0x18,
        0xFF, 0xFF, 0xC3, 0xC3, 0xFF, 0xFF, 0xC3, 0xC3, 0xFF, 0xFF,
        0xFF, 0xFF, 0xC3, 0xC3, 0xFF, 0xFF, 0x03, 0x03, 0xFF, 0xFF,
        0x7E, 0xFF, 0xC3, 0xC3, 0xC3, 0xFF, 0xFF, 0xC3, 0xC3, 0xC3,
        0xFC, 0xFC, 0xC3, 0xC3, 0xFC, 0xFC, 0xC3, 0xC3, 0xFC, 0xFC,
        0x3C, 0xFF, 0xC3, 0xC0, 0xC0, 0xC0, 0xC0, 0xC3, 0xFF, 0x3C,
        0xFC, 0xFE, 0xC3, 0xC3, 0xC3, 0xC3, 0xC3, 0xC3, 0xFE, 0xFC,
        0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF,
        0xFF, 0xFF, 0xC0, 0xC0, 0xFF, 0xFF, 0xC0, 0xC0, 0xC0, 0xC0,
    ]
)


def small_glyph_address(digit: int) -> int:
    return SMALL_FONT_ADDRESS + (digit & 0xF) * SMALL_GLYPH_BYTES


def large_glyph_address(digit: int) -> int:
    return LARGE_FONT_ADDRESS + (digit & 0xF) * LARGE_GLYPH_BYTES


def load_font(memory: Memory, small: bytes = SMALL_FONT, large: bytes = LARGE_FONT) -> None:
    """Write both glyph tables into ``memory`` below the program area."""

    if len(small) != 16 * SMALL_GLYPH_BYTES:
        raise ValueError(f"small font must be {16 * SMALL_GLYPH_BYTES} bytes, got {len(small)}")
    if len(large) != 16 * LARGE_GLYPH_BYTES:
        raise ValueError(f"large font must be {16 * LARGE_GLYPH_BYTES} bytes, got {len(large)}")
    memory.load_image(small, SMALL_FONT_ADDRESS)
    memory.load_image(large, LARGE_FONT_ADDRESS)
    debug_log("loader", "font tables written at %03x and %03x", SMALL_FONT_ADDRESS, LARGE_FONT_ADDRESS)
