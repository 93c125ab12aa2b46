"""Memory for the CHIP-8 interpreter.

The interpreter sees a single flat byte array. Fonts live at the bottom of the
address space, the call stack sits just above the small font and programs load
at ``0x200``. Every access is bounds checked: an address outside the allocated
capacity means a corrupt ROM or a configuration defect, so it is fatal.
"""

from __future__ import annotations

from typing import Iterable

MEMORY_4K = 0x1000
MEMORY_64K = 0x10000


class MemoryError(Exception):
    """Raised when the memory is misconfigured or used incorrectly."""


class OutOfBoundsAccess(MemoryError):
    """Raised when an address falls outside the allocated memory."""

    def __init__(self, address: int, capacity: int) -> None:
        super().__init__(f"address {address:#06x} outside memory 0x0000-{capacity - 1:#06x}")
        self.address = address
        self.capacity = capacity


class Memory:
    """Byte-addressable memory of either 4K or 64K."""

    def __init__(self, capacity: int = MEMORY_64K) -> None:
        if capacity not in (MEMORY_4K, MEMORY_64K):
            raise MemoryError(f"capacity {capacity} must be {MEMORY_4K} or {MEMORY_64K}")
        self._capacity = capacity
        self._data = bytearray(capacity)

    @classmethod
    def create(cls, memory_4k: bool = False) -> "Memory":
        return cls(MEMORY_4K if memory_4k else MEMORY_64K)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return self._capacity

    def _check(self, address: int) -> int:
        if not 0 <= address < self._capacity:
            raise OutOfBoundsAccess(address, self._capacity)
        return address

    def load8(self, address: int) -> int:
        return self._data[self._check(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[self._check(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def load_image(self, data: Iterable[int], offset: int = 0) -> int:
        """Copy ``data`` into memory starting at ``offset``; return the byte count."""

        payload = bytes(data)
        if not payload:
            return 0
        self._check(offset)
        self._check(offset + len(payload) - 1)
        self._data[offset : offset + len(payload)] = payload
        return len(payload)

    def clear(self) -> None:
        self._data[:] = bytes(self._capacity)

    def snapshot(self, start: int = 0, length: int | None = None) -> bytes:
        end = self._capacity if length is None else start + length
        if length is not None and length > 0:
            self._check(start)
            self._check(end - 1)
        return bytes(self._data[start:end])
