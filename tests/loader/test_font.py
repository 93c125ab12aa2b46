"""Tests for the built-in font tables."""

from __future__ import annotations

import pytest

from pychip8.bus import Memory
from pychip8.loader import (
    LARGE_FONT,
    LARGE_FONT_ADDRESS,
    SMALL_FONT,
    SMALL_FONT_ADDRESS,
    large_glyph_address,
    load_font,
    small_glyph_address,
)


def test_font_tables_have_sixteen_glyphs() -> None:
    assert len(SMALL_FONT) == 16 * 5
    assert len(LARGE_FONT) == 16 * 10


def test_fonts_do_not_overlap_stack_or_program() -> None:
    assert SMALL_FONT_ADDRESS + len(SMALL_FONT) <= 0x52
    assert LARGE_FONT_ADDRESS + len(LARGE_FONT) <= 0x200


def test_load_font_writes_both_tables() -> None:
    memory = Memory()
    load_font(memory)
    assert memory.snapshot(SMALL_FONT_ADDRESS, len(SMALL_FONT)) == SMALL_FONT
    assert memory.snapshot(LARGE_FONT_ADDRESS, len(LARGE_FONT)) == LARGE_FONT


def test_glyph_addresses() -> None:
    assert small_glyph_address(0xF) == 75
    assert large_glyph_address(0x1) == LARGE_FONT_ADDRESS + 10
    assert small_glyph_address(0x12) == small_glyph_address(0x2)


def test_load_font_validates_size() -> None:
    with pytest.raises(ValueError):
        load_font(Memory(), small=b"\x00" * 79)
