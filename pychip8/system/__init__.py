"""CHIP-8 system assembly and execution helpers."""

from __future__ import annotations

from pychip8.cpu import ConfigurationError

from .emulator import Emulator, EmulatorState
from .machine import Machine, MachineConfig, create_machine
from .timer import TIMER_FREQUENCY, TimerThread

__all__ = [
    "ConfigurationError",
    "Emulator",
    "EmulatorState",
    "Machine",
    "MachineConfig",
    "TIMER_FREQUENCY",
    "TimerThread",
    "create_machine",
]
