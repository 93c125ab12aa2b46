"""Bounded history of executed instructions for post-mortem dumps."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from itertools import islice
from typing import Deque, Iterable, Sequence

from .debug import debug_log


@dataclass(frozen=True)
class TraceEntry:
    pc: int
    operand: int | None
    mnemonic: str
    index: int
    sp: int
    delay: int
    sound: int
    registers: tuple[int, ...]
    awaiting_key: bool
    halted: bool
    note: str = ""

    def flags(self) -> str:
        flags = [name for name, active in (("KEYD", self.awaiting_key), ("HALT", self.halted)) if active]
        if self.note:
            flags.append(self.note)
        return ",".join(flags) or "-"

    def format(self) -> str:
        operand = "----" if self.operand is None else f"{self.operand:04X}"
        registers = " ".join(f"{value:02X}" for value in self.registers)
        return (
            f"pc={self.pc:04X} op={operand} {self.mnemonic or '?':<20} "
            f"I={self.index:04X} SP={self.sp:04X} DT={self.delay:02X} ST={self.sound:02X} "
            f"V=[{registers}] flags={self.flags()}"
        )


class TraceRecorder:
    """Keeps the most recent ``capacity`` interpreter snapshots."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._history: Deque[TraceEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._history)

    def record_step(
        self,
        cpu_state,
        operand: int | None,
        *,
        delay: int,
        sound: int,
        awaiting_key: bool,
        halted: bool,
        mnemonic: str = "",
        note: str = "",
        pc: int | None = None,
    ) -> None:
        """Append a snapshot; ``pc`` overrides the address taken from ``cpu_state``."""

        address = cpu_state.pc if pc is None else pc
        self._history.append(
            TraceEntry(
                pc=address & 0xFFFF,
                operand=None if operand is None else operand & 0xFFFF,
                mnemonic=mnemonic,
                index=cpu_state.index & 0xFFFF,
                sp=cpu_state.sp & 0xFFFF,
                delay=delay & 0xFF,
                sound=sound & 0xFF,
                registers=tuple(value & 0xFF for value in cpu_state.v),
                awaiting_key=awaiting_key,
                halted=halted,
                note=note,
            )
        )

    def entries(self, limit: int | None = None) -> Iterable[TraceEntry]:
        """Yield entries oldest first, restricted to the newest ``limit``."""

        size = len(self._history)
        skip = 0 if limit is None else size - min(size, max(limit, 0))
        return islice(self._history, skip, None)

    def last_entry(self) -> TraceEntry | None:
        return self._history[-1] if self._history else None

    def clear(self) -> None:
        self._history.clear()

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        return [entry.format() for entry in self.entries(limit)]

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)
