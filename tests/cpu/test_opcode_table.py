"""Tests for the two-level opcode dispatch table."""

from __future__ import annotations

import pytest

from pychip8.cpu import DISPATCH_TABLE, Chip8CPU, Instruction, OpcodeTable, UNSUPPORTED, decode
from pychip8.cpu.opcodes import DEFAULT_INSTRUCTIONS, dispatch_key


@pytest.mark.parametrize(
    "operand, key",
    [
        (0x00E0, (0x0, 0xE0)),
        (0x1234, (0x1, None)),
        (0x5AB2, (0x5, 0x2)),
        (0x8AB6, (0x8, 0x6)),
        (0xD123, (0xD, None)),
        (0xE59E, (0xE, 0x9E)),
        (0xF465, (0xF, 0x65)),
    ],
)
def test_dispatch_key_uses_family_discriminator(operand: int, key: tuple) -> None:
    assert dispatch_key(operand) == key


@pytest.mark.parametrize(
    "operand, mnemonic",
    [
        (0x00C4, "SCD"),
        (0x00DF, "SCU"),
        (0x00EE, "RTS"),
        (0x2456, "CALL"),
        (0x8ABE, "SHL"),
        (0xB123, "JUMP V0"),
        (0xF000, "LOADLONG"),
        (0xF301, "BITPLANE"),
        (0xF130, "LOADEXT I"),
    ],
)
def test_decode_known_operands(operand: int, mnemonic: str) -> None:
    assert decode(operand, DISPATCH_TABLE).mnemonic == mnemonic


def test_decode_unknown_operand_returns_default_entry() -> None:
    assert decode(0x5121, DISPATCH_TABLE) is UNSUPPORTED
    assert decode(0xE1FF, DISPATCH_TABLE) is UNSUPPORTED


def test_scroll_families_register_every_row_count() -> None:
    for rows in range(16):
        assert decode(0x00C0 | rows, DISPATCH_TABLE).handler == "op_scroll_down"
        assert decode(0x00D0 | rows, DISPATCH_TABLE).handler == "op_scroll_up"


def test_every_handler_exists_on_cpu() -> None:
    for instruction in (*DEFAULT_INSTRUCTIONS, UNSUPPORTED):
        assert callable(getattr(Chip8CPU, instruction.handler, None)), instruction.handler


def test_duplicate_registration_is_rejected() -> None:
    table = OpcodeTable()
    table.register(Instruction(0x1, None, "JUMP", "op_jump_to_address"))
    with pytest.raises(ValueError):
        table.register(Instruction(0x1, None, "JUMP", "op_jump_to_address"))


def test_discriminator_must_match_family() -> None:
    table = OpcodeTable()
    with pytest.raises(ValueError):
        table.register(Instruction(0x8, None, "ADD", "op_add_register_to_register"))
    with pytest.raises(ValueError):
        table.register(Instruction(0x6, 0x00, "LOAD", "op_move_value_to_register"))


def test_instruction_validates_ranges() -> None:
    with pytest.raises(ValueError):
        Instruction(0x10, None, "BAD", "op_bad")
    with pytest.raises(ValueError):
        Instruction(0x0, 0x100, "BAD", "op_bad")


def test_frozen_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        DISPATCH_TABLE[(0x1, None)] = UNSUPPORTED  # type: ignore[index]
