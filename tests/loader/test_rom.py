"""Tests for the ROM loader."""

from __future__ import annotations

import io

import pytest

from pychip8.bus import Memory
from pychip8.loader import PROGRAM_START, RomFormatError, load_rom, load_rom_from_path


def test_load_rom_places_bytes_at_program_start() -> None:
    memory = Memory()
    image = load_rom(io.BytesIO(b"\x60\x05\x12\x02"), memory)

    assert image.start == PROGRAM_START
    assert image.length == 4
    assert image.end == 0x203
    assert memory.snapshot(0x200, 4) == b"\x60\x05\x12\x02"


def test_load_rom_with_custom_offset() -> None:
    memory = Memory()
    load_rom(io.BytesIO(b"\xAB"), memory, offset=0x600)
    assert memory.load8(0x600) == 0xAB


def test_empty_rom_is_rejected() -> None:
    with pytest.raises(RomFormatError):
        load_rom(io.BytesIO(b""), Memory())


def test_rom_too_large_for_memory_is_rejected() -> None:
    memory = Memory.create(memory_4k=True)
    with pytest.raises(RomFormatError):
        load_rom(io.BytesIO(bytes(0x1000 - 0x200 + 1)), memory)
    assert load_rom(io.BytesIO(bytes(0x1000 - 0x200)), memory).length == 0xE00


def test_load_rom_from_path(tmp_path) -> None:
    rom = tmp_path / "maze.ch8"
    rom.write_bytes(b"\x00\xE0\x12\x00")
    memory = Memory()

    image = load_rom_from_path(rom, memory)

    assert image.name == "maze.ch8"
    assert memory.load16(0x200) == 0x00E0
