"""Interpreter core for the CHIP-8 instruction set family."""

from .core import CPUError, CPUState, Chip8CPU, playback_rate_for
from .opcodes import DISPATCH_TABLE, FAMILY_DISCRIMINATORS, Instruction, OpcodeTable, UNSUPPORTED, decode
from .quirks import ConfigurationError, Quirks

__all__ = [
    "CPUError",
    "CPUState",
    "Chip8CPU",
    "ConfigurationError",
    "DISPATCH_TABLE",
    "FAMILY_DISCRIMINATORS",
    "Instruction",
    "OpcodeTable",
    "Quirks",
    "UNSUPPORTED",
    "decode",
    "playback_rate_for",
]
