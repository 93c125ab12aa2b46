"""Baseline tests ensuring the package layout loads correctly."""

import pychip8


def test_package_exports() -> None:
    for name in ("audio", "bus", "cpu", "io", "loader", "system", "ui", "utils", "video"):
        assert hasattr(pychip8, name), f"missing submodule: {name}"


def test_cpu_exports() -> None:
    from pychip8 import cpu

    for name in ("Chip8CPU", "CPUState", "Quirks", "ConfigurationError", "DISPATCH_TABLE"):
        assert hasattr(cpu, name), f"cpu missing symbol: {name}"


def test_system_exports() -> None:
    from pychip8 import system

    for name in ("Emulator", "EmulatorState", "Machine", "MachineConfig", "TimerThread", "create_machine"):
        assert hasattr(system, name), f"system missing symbol: {name}"
