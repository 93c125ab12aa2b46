"""Loaders for the font tables and ROM images."""

from .font import (
    LARGE_FONT,
    LARGE_FONT_ADDRESS,
    SMALL_FONT,
    SMALL_FONT_ADDRESS,
    large_glyph_address,
    load_font,
    small_glyph_address,
)
from .rom import PROGRAM_START, RomFormatError, RomImage, load_rom, load_rom_from_path

__all__ = [
    "LARGE_FONT",
    "LARGE_FONT_ADDRESS",
    "PROGRAM_START",
    "RomFormatError",
    "RomImage",
    "SMALL_FONT",
    "SMALL_FONT_ADDRESS",
    "large_glyph_address",
    "load_font",
    "load_rom",
    "load_rom_from_path",
    "small_glyph_address",
]
