"""Tests for CHIP-8 machine assembly."""

from __future__ import annotations

import pytest

from pychip8.cpu import ConfigurationError, Quirks
from pychip8.loader import LARGE_FONT, RomFormatError, SMALL_FONT
from pychip8.system import MachineConfig, create_machine


def test_default_machine_layout() -> None:
    machine = create_machine()

    assert machine.memory.capacity == 0x10000
    assert machine.memory.snapshot(0, len(SMALL_FONT)) == SMALL_FONT
    assert machine.memory.snapshot(0xA0, len(LARGE_FONT)) == LARGE_FONT
    assert machine.cpu.state.pc == 0x200
    assert machine.cpu.screen is machine.screen
    assert machine.cpu.keyboard is machine.keyboard
    assert machine.rom is None


def test_machine_with_small_memory_and_rom() -> None:
    machine = create_machine(MachineConfig(memory_4k=True, rom_image=b"\x60\x2A"))

    assert machine.memory.capacity == 0x1000
    assert machine.rom is not None and machine.rom.length == 2

    machine.cpu.fetch_increment_execute()
    assert machine.cpu.state.v[0] == 0x2A


def test_quirks_are_passed_to_cpu() -> None:
    machine = create_machine(MachineConfig(quirks=Quirks(clip=True)))
    assert machine.cpu.quirks.clip


def test_custom_small_font() -> None:
    font = bytes(range(80))
    machine = create_machine(MachineConfig(font_image=font))
    assert machine.memory.snapshot(0, 80) == font


@pytest.mark.parametrize(
    "config",
    [
        MachineConfig(quirks="shift"),  # type: ignore[arg-type]
        MachineConfig(memory_4k=1),  # type: ignore[arg-type]
        MachineConfig(font_image=b"\x00"),
        MachineConfig(rng_seed="seed"),  # type: ignore[arg-type]
    ],
)
def test_invalid_configuration_is_rejected(config: MachineConfig) -> None:
    with pytest.raises(ConfigurationError):
        create_machine(config)


def test_oversized_rom_is_rejected() -> None:
    with pytest.raises(RomFormatError):
        create_machine(MachineConfig(memory_4k=True, rom_image=bytes(0x1000)))


def test_rng_seed_makes_random_deterministic() -> None:
    results = []
    for _ in range(2):
        machine = create_machine(MachineConfig(rng_seed=99, rom_image=bytes([0xC0, 0xFF] * 8)))
        values = []
        for _ in range(8):
            machine.cpu.fetch_increment_execute()
            values.append(machine.cpu.state.v[0])
        results.append(values)
    assert results[0] == results[1]
