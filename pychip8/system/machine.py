"""CHIP-8 machine assembly."""

from __future__ import annotations

import io
import random
from dataclasses import dataclass, field
from typing import Optional

from pychip8.audio import ToneSink
from pychip8.bus import Memory
from pychip8.cpu import Chip8CPU, ConfigurationError, Quirks
from pychip8.io import Keyboard
from pychip8.loader import LARGE_FONT, SMALL_FONT, RomImage, load_font, load_rom
from pychip8.utils import debug_log
from pychip8.video import Screen


@dataclass
class MachineConfig:
    """Runtime configuration for a CHIP-8 machine."""

    quirks: Quirks = field(default_factory=Quirks)
    memory_4k: bool = False
    rom_image: Optional[bytes] = None
    font_image: Optional[bytes] = None
    tone: ToneSink | None = None
    rng_seed: int | None = None
    keyboard: Keyboard | None = None


@dataclass
class Machine:
    """Aggregates the components of one CHIP-8 machine."""

    memory: Memory
    cpu: Chip8CPU
    screen: Screen
    keyboard: Keyboard
    rom: RomImage | None = None


def _validate(config: MachineConfig) -> None:
    if not isinstance(config.quirks, Quirks):
        raise ConfigurationError(f"quirks must be a Quirks instance, got {type(config.quirks).__name__}")
    if not isinstance(config.memory_4k, bool):
        raise ConfigurationError(f"memory_4k must be a bool, got {config.memory_4k!r}")
    if config.font_image is not None and len(config.font_image) != len(SMALL_FONT):
        raise ConfigurationError(f"font image must be {len(SMALL_FONT)} bytes, got {len(config.font_image)}")
    if config.rng_seed is not None and not isinstance(config.rng_seed, int):
        raise ConfigurationError(f"rng_seed must be an int, got {config.rng_seed!r}")


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with fonts and, optionally, a ROM loaded."""

    config = config or MachineConfig()
    _validate(config)

    memory = Memory.create(config.memory_4k)
    load_font(memory, config.font_image or SMALL_FONT, LARGE_FONT)

    screen = Screen()
    keyboard = config.keyboard or Keyboard()
    cpu = Chip8CPU(
        memory,
        screen,
        keyboard,
        tone=config.tone,
        quirks=config.quirks,
        rng=random.Random(config.rng_seed),
    )
    cpu.reset()

    rom = None
    if config.rom_image:
        rom = load_rom(io.BytesIO(config.rom_image), memory, name="<image>")

    debug_log(
        "loader",
        "machine ready memory=%d quirks=%s",
        memory.capacity,
        ",".join(config.quirks.enabled_names()) or "none",
    )
    return Machine(memory=memory, cpu=cpu, screen=screen, keyboard=keyboard, rom=rom)
