"""Opcode dispatch table for the CHIP-8 family of instruction sets.

Instructions are looked up by ``(family, discriminator)``: the family is the
high nibble of the operand, and for families that pack several instructions
together the discriminator is the operand masked with
``FAMILY_DISCRIMINATORS[family]``. Everything else maps to ``UNSUPPORTED``.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Sequence, Tuple

DispatchKey = Tuple[int, "int | None"]

FAMILY_DISCRIMINATORS: Mapping[int, int] = MappingProxyType(
    {
        0x0: 0x00FF,
        0x5: 0x000F,
        0x8: 0x000F,
        0xE: 0x00FF,
        0xF: 0x00FF,
    }
)


@dataclass(frozen=True)
class Instruction:
    """Metadata describing one CHIP-8 instruction."""

    family: int
    discriminator: int | None
    mnemonic: str
    handler: str
    pattern: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.family <= 0xF:
            raise ValueError(f"family out of range: {self.family}")
        if self.discriminator is not None and not 0 <= self.discriminator <= 0xFF:
            raise ValueError(f"discriminator out of range: {self.discriminator}")

    @property
    def key(self) -> DispatchKey:
        return (self.family, self.discriminator)


UNSUPPORTED = Instruction(0x0, None, "???", "op_unsupported")


def dispatch_key(operand: int) -> DispatchKey:
    family = (operand & 0xF000) >> 12
    mask = FAMILY_DISCRIMINATORS.get(family)
    return (family, None if mask is None else operand & mask)


class OpcodeTable:
    """Mutable builder for the dispatch table."""

    def __init__(self) -> None:
        self._table: Dict[DispatchKey, Instruction] = {}

    def register(self, instruction: Instruction) -> None:
        discriminated = instruction.family in FAMILY_DISCRIMINATORS
        if discriminated != (instruction.discriminator is not None):
            raise ValueError(
                f"family {instruction.family:X} {'requires' if discriminated else 'does not take'} a discriminator"
            )
        existing = self._table.get(instruction.key)
        if existing is not None:
            raise ValueError(f"{instruction.key} already registered as {existing.mnemonic}")
        self._table[instruction.key] = instruction

    def register_all(self, instructions: Iterable[Instruction]) -> None:
        for instruction in instructions:
            self.register(instruction)

    def freeze(self) -> Mapping[DispatchKey, Instruction]:
        return MappingProxyType(dict(self._table))


def build_dispatch_table(instructions: Iterable[Instruction]) -> Mapping[DispatchKey, Instruction]:
    table = OpcodeTable()
    table.register_all(instructions)
    return table.freeze()


def decode(operand: int, table: Mapping[DispatchKey, Instruction]) -> Instruction:
    return table.get(dispatch_key(operand), UNSUPPORTED)


DEFAULT_INSTRUCTIONS: Sequence[Instruction] = (
    # 0x0 family: screen and flow control
    *(Instruction(0x0, 0xC0 | n, "SCD", "op_scroll_down", "00Cn") for n in range(16)),
    *(Instruction(0x0, 0xD0 | n, "SCU", "op_scroll_up", "00Dn") for n in range(16)),
    Instruction(0x0, 0xE0, "CLS", "op_clear_screen", "00E0"),
    Instruction(0x0, 0xEE, "RTS", "op_return_from_subroutine", "00EE"),
    Instruction(0x0, 0xFB, "SCR", "op_scroll_right", "00FB"),
    Instruction(0x0, 0xFC, "SCL", "op_scroll_left", "00FC"),
    Instruction(0x0, 0xFD, "EXIT", "op_exit", "00FD"),
    Instruction(0x0, 0xFE, "LOW", "op_disable_extended_mode", "00FE"),
    Instruction(0x0, 0xFF, "HIGH", "op_enable_extended_mode", "00FF"),
    Instruction(0x1, None, "JUMP", "op_jump_to_address", "1nnn"),
    Instruction(0x2, None, "CALL", "op_jump_to_subroutine", "2nnn"),
    Instruction(0x3, None, "SKE", "op_skip_if_register_equal_value", "3xnn"),
    Instruction(0x4, None, "SKNE", "op_skip_if_register_not_equal_value", "4xnn"),
    Instruction(0x5, 0x0, "SKE", "op_skip_if_register_equal_register", "5xy0"),
    Instruction(0x5, 0x2, "STORSUB", "op_store_subset_of_registers", "5xy2"),
    Instruction(0x5, 0x3, "LOADSUB", "op_load_subset_of_registers", "5xy3"),
    Instruction(0x6, None, "LOAD", "op_move_value_to_register", "6xnn"),
    Instruction(0x7, None, "ADD", "op_add_value_to_register", "7xnn"),
    # 0x8 family: register arithmetic
    Instruction(0x8, 0x0, "LOAD", "op_move_register_into_register", "8xy0"),
    Instruction(0x8, 0x1, "OR", "op_logical_or", "8xy1"),
    Instruction(0x8, 0x2, "AND", "op_logical_and", "8xy2"),
    Instruction(0x8, 0x3, "XOR", "op_exclusive_or", "8xy3"),
    Instruction(0x8, 0x4, "ADD", "op_add_register_to_register", "8xy4"),
    Instruction(0x8, 0x5, "SUB", "op_subtract_register_from_register", "8xy5"),
    Instruction(0x8, 0x6, "SHR", "op_right_shift", "8xy6"),
    Instruction(0x8, 0x7, "SUBN", "op_subtract_register_from_register_reverse", "8xy7"),
    Instruction(0x8, 0xE, "SHL", "op_left_shift", "8xyE"),
    Instruction(0x9, None, "SKNE", "op_skip_if_register_not_equal_register", "9xy0"),
    Instruction(0xA, None, "LOAD I", "op_load_index_with_value", "Annn"),
    Instruction(0xB, None, "JUMP V0", "op_jump_to_register_plus_value", "Bnnn"),
    Instruction(0xC, None, "RAND", "op_generate_random_number", "Cxnn"),
    Instruction(0xD, None, "DRAW", "op_draw_sprite", "Dxyn"),
    Instruction(0xE, 0x9E, "SKPR", "op_skip_if_key_pressed", "Ex9E"),
    Instruction(0xE, 0xA1, "SKUP", "op_skip_if_key_not_pressed", "ExA1"),
    # 0xF family: timers, index and memory transfers
    Instruction(0xF, 0x00, "LOADLONG", "op_index_load_long", "F000"),
    Instruction(0xF, 0x01, "BITPLANE", "op_set_bitplane", "Fn01"),
    Instruction(0xF, 0x07, "LOAD DELAY", "op_move_delay_timer_into_register", "Fx07"),
    Instruction(0xF, 0x0A, "KEYD", "op_wait_for_keypress", "Fx0A"),
    Instruction(0xF, 0x15, "LOAD DELAY", "op_move_register_into_delay", "Fx15"),
    Instruction(0xF, 0x18, "LOAD SOUND", "op_move_register_into_sound", "Fx18"),
    Instruction(0xF, 0x1E, "ADD I", "op_add_register_into_index", "Fx1E"),
    Instruction(0xF, 0x29, "LOAD I", "op_load_index_with_sprite", "Fx29"),
    Instruction(0xF, 0x30, "LOADEXT I", "op_load_index_with_extended_sprite", "Fx30"),
    Instruction(0xF, 0x33, "BCD", "op_store_bcd_in_memory", "Fx33"),
    Instruction(0xF, 0x3A, "PITCH", "op_load_pitch", "Fx3A"),
    Instruction(0xF, 0x55, "STOR", "op_store_registers_in_memory", "Fx55"),
    Instruction(0xF, 0x65, "READ", "op_read_registers_from_memory", "Fx65"),
    Instruction(0xF, 0x75, "STORRPL", "op_store_registers_in_rpl", "Fx75"),
    Instruction(0xF, 0x85, "READRPL", "op_read_registers_from_rpl", "Fx85"),
)

DISPATCH_TABLE: Mapping[DispatchKey, Instruction] = build_dispatch_table(DEFAULT_INSTRUCTIONS)
