"""Raw CHIP-8 ROM image loader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from pychip8.bus import Memory
from pychip8.utils import debug_log

PROGRAM_START = 0x200


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be placed into memory."""


@dataclass(frozen=True)
class RomImage:
    """Describes a ROM after it has been copied into memory."""

    name: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length - 1


def load_rom(stream: BinaryIO, memory: Memory, offset: int = PROGRAM_START, name: str = "") -> RomImage:
    """Copy every byte of ``stream`` into ``memory`` starting at ``offset``."""

    payload = stream.read()
    if not payload:
        raise RomFormatError(f"ROM image {name or '<stream>'} is empty")
    available = memory.capacity - offset
    if available <= 0 or len(payload) > available:
        raise RomFormatError(
            f"ROM image {name or '<stream>'} is {len(payload)} bytes; only {max(available, 0)} fit at {offset:#05x}"
        )
    memory.load_image(payload, offset)
    image = RomImage(name=name, start=offset, length=len(payload))
    debug_log("loader", "rom %s loaded at %04x-%04x", name or "<stream>", image.start, image.end)
    return image


def load_rom_from_path(path: Path, memory: Memory, offset: int = PROGRAM_START) -> RomImage:
    """Load a ROM image from the filesystem."""

    path = Path(path)
    with path.open("rb") as handle:
        return load_rom(handle, memory, offset, name=path.name)
