"""Bus-related helpers for the CHIP-8 emulator."""

from .memory import MEMORY_4K, MEMORY_64K, Memory, MemoryError, OutOfBoundsAccess

__all__ = [
    "MEMORY_4K",
    "MEMORY_64K",
    "Memory",
    "MemoryError",
    "OutOfBoundsAccess",
]
