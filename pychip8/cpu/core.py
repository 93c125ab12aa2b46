"""CHIP-8 / SuperChip / XO-Chip interpreter core."""

from __future__ import annotations

import random
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, Dict, Mapping

from pychip8.audio import ToneSink
from pychip8.bus import Memory
from pychip8.io import NUM_KEYS, Keypad
from pychip8.loader.font import large_glyph_address, small_glyph_address
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import PLANE_1, PLANE_2, PLANE_BOTH, PLANE_NONE, Screen, ScreenMode

from .opcodes import DISPATCH_TABLE, UNSUPPORTED, DispatchKey, Instruction, decode
from .quirks import ConfigurationError, Quirks


class CPUError(Exception):
    """Raised when the dispatch table references a missing handler."""


PROGRAM_COUNTER_START = 0x200
STACK_POINTER_START = 0x52
NUM_REGISTERS = 16
DEFAULT_PITCH = 64
BASE_PLAYBACK_RATE = 4000.0
DIAGNOSTIC_HISTORY = 64
LONG_LOAD_OPERAND = 0xF000


def playback_rate_for(pitch: int) -> float:
    return BASE_PLAYBACK_RATE * 2 ** ((pitch - DEFAULT_PITCH) / 48)


@dataclass
class CPUState:
    """Snapshot of the interpreter register file."""

    v: list[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    rpl: list[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    index: int = 0x0000
    pc: int = PROGRAM_COUNTER_START
    sp: int = STACK_POINTER_START
    delay: int = 0
    sound: int = 0
    pitch: int = DEFAULT_PITCH
    playback_rate: float = BASE_PLAYBACK_RATE
    bitplane: int = PLANE_1
    mode: ScreenMode = ScreenMode.NORMAL

    @property
    def width(self) -> int:
        return self.mode.width

    @property
    def height(self) -> int:
        return self.mode.height

    def clone(self) -> "CPUState":
        return CPUState(
            list(self.v),
            list(self.rpl),
            self.index,
            self.pc,
            self.sp,
            self.delay,
            self.sound,
            self.pitch,
            self.playback_rate,
            self.bitplane,
            self.mode,
        )


def _x(operand: int) -> int:
    return (operand & 0x0F00) >> 8


def _y(operand: int) -> int:
    return (operand & 0x00F0) >> 4


@dataclass(eq=False)
class Chip8CPU:
    """Decode/execute engine driving memory, screen, keypad and tone.

    The register file lives in ``state``. Only ``delay`` and ``sound`` are
    touched from another thread (the 60 Hz timer), always under
    ``_timer_lock``.
    """

    memory: Memory
    screen: Screen
    keyboard: Keypad
    tone: ToneSink | None = None
    quirks: Quirks = field(default_factory=Quirks)
    rng: random.Random = field(default_factory=random.Random)
    instruction_table: Mapping[DispatchKey, Instruction] = field(default_factory=lambda: DISPATCH_TABLE)

    state: CPUState = field(default_factory=CPUState, init=False)
    operand: int = field(default=0, init=False)
    last_op_desc: str = field(default="", init=False)
    awaiting_keypress: bool = field(default=False, init=False)
    halted: bool = field(default=False, init=False)
    killed: bool = field(default=False, init=False)
    diagnostics: Deque[str] = field(default_factory=lambda: deque(maxlen=DIAGNOSTIC_HISTORY), init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.quirks, Quirks):
            raise ConfigurationError(f"quirks must be a Quirks instance, got {type(self.quirks).__name__}")
        self._timer_lock = threading.Lock()
        self._tone_playing = False
        self._tone_rate = 0.0
        self._key_register = 0
        self._keys_held: set[int] = set()
        self._handlers: Dict[str, Callable[[int], None]] = {}
        for instruction in (*self.instruction_table.values(), UNSUPPORTED):
            handler = getattr(self, instruction.handler, None)
            if handler is None:
                raise CPUError(f"handler '{instruction.handler}' not implemented")
            self._handlers[instruction.handler] = handler

    # ------------------------------------------------------------------
    # Lifecycle

    def reset(self, quirks: Quirks | None = None) -> None:
        """Restore the power-on register file and clear the display."""

        if quirks is not None:
            if not isinstance(quirks, Quirks):
                raise ConfigurationError(f"quirks must be a Quirks instance, got {type(quirks).__name__}")
            self.quirks = quirks
        with self._timer_lock:
            self.state = CPUState()
            playing = self._tone_playing
            self._tone_playing = False
        if playing and self.tone is not None:
            self.tone.tone_off()
        self.screen.set_normal_mode()
        self.operand = 0
        self.last_op_desc = ""
        self.awaiting_keypress = False
        self.halted = False
        self._keys_held = set()
        self.diagnostics.clear()

    def kill(self) -> None:
        """Stop producing sound and release the tone device.

        Safe to call from any thread; the device is torn down outside the
        timer lock.
        """

        with self._timer_lock:
            self.killed = True
            self._tone_playing = False
        self.halted = True
        if self.tone is None:
            return
        self.tone.tone_off()
        shutdown = getattr(self.tone, "shutdown", None)
        if shutdown is not None:
            shutdown()

    # ------------------------------------------------------------------
    # Execution

    def fetch_increment_execute(self) -> Instruction:
        """Execute the instruction at PC and return its metadata."""

        pc = self.state.pc
        operand = self.memory.load16(pc)
        self.operand = operand
        self.state.pc = (pc + 2) & 0xFFFF
        instruction = decode(operand, self.instruction_table)
        self._handlers[instruction.handler](operand)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%04x operand=%04x %s", pc, operand, self.last_op_desc)
        return instruction

    def decrement_timers(self) -> None:
        """Advance the delay and sound timers by one 60 Hz tick."""

        with self._timer_lock:
            state = self.state
            if state.delay > 0:
                state.delay -= 1
            sounding = state.sound > 0
            if sounding:
                state.sound -= 1
            finished = sounding and state.sound == 0
            rate = state.playback_rate
            if self.killed or self.tone is None:
                return
            start = sounding and (not self._tone_playing or rate != self._tone_rate)
            stop = finished or (not sounding and self._tone_playing)
            if start:
                self._tone_playing = True
                self._tone_rate = rate
            if stop:
                self._tone_playing = False
        if start:
            debug_log("timer", "tone on %.1fHz", rate)
            self.tone.tone_on(rate)
        if stop:
            debug_log("timer", "tone off")
            self.tone.tone_off()

    def timers(self) -> tuple[int, int]:
        with self._timer_lock:
            return self.state.delay, self.state.sound

    def decode_keypress_and_continue(self) -> bool:
        """Complete a pending Fx0A once a key transitions to pressed."""

        if not self.awaiting_keypress:
            return False
        pressed = {code for code in range(NUM_KEYS) if self.keyboard.is_key_pressed(code)}
        fresh = pressed - self._keys_held
        self._keys_held &= pressed
        if not fresh:
            return False
        current = self.keyboard.current_key()
        key = current if current in fresh else min(fresh)
        self.state.v[self._key_register] = key
        self.awaiting_keypress = False
        if debug_enabled("input"):
            debug_log("input", "key %x stored in v%x", key, self._key_register)
        return True

    def _skip(self) -> None:
        skipped = self.state.pc
        self.state.pc = (skipped + 2) & 0xFFFF
        if self.memory.load16(skipped) == LONG_LOAD_OPERAND:
            self.state.pc = (self.state.pc + 2) & 0xFFFF

    # ------------------------------------------------------------------
    # Status text

    def status_line_1(self) -> str:
        state = self.state
        return (
            f"I:{state.index:04X} DT:{state.delay:02X} ST:{state.sound:02X} "
            f"PC:{state.pc:04X} {self.operand:04X} {self.last_op_desc}"
        )

    def status_line_2(self) -> str:
        return " ".join(f"V{r:X}:{self.state.v[r]:02X}" for r in range(8))

    def status_line_3(self) -> str:
        return " ".join(f"V{r:X}:{self.state.v[r]:02X}" for r in range(8, 16))

    # ------------------------------------------------------------------
    # 0x0 family

    def op_scroll_down(self, operand: int) -> None:
        rows = operand & 0x000F
        self.screen.scroll_down(rows, self.state.bitplane)
        self.last_op_desc = f"SCRD {rows}"

    def op_scroll_up(self, operand: int) -> None:
        rows = operand & 0x000F
        self.screen.scroll_up(rows, self.state.bitplane)
        self.last_op_desc = f"SCRU {rows}"

    def op_clear_screen(self, operand: int) -> None:
        self.screen.clear_screen(self.state.bitplane)
        self.last_op_desc = "CLS"

    def op_return_from_subroutine(self, operand: int) -> None:
        state = self.state
        state.sp -= 1
        high = self.memory.load8(state.sp)
        state.sp -= 1
        state.pc = (high << 8) | self.memory.load8(state.sp)
        self.last_op_desc = "RTS"

    def op_scroll_right(self, operand: int) -> None:
        self.screen.scroll_right(self.state.bitplane)
        self.last_op_desc = "SCRR"

    def op_scroll_left(self, operand: int) -> None:
        self.screen.scroll_left(self.state.bitplane)
        self.last_op_desc = "SCRL"

    def op_exit(self, operand: int) -> None:
        self.halted = True
        self.last_op_desc = "EXIT"

    def op_disable_extended_mode(self, operand: int) -> None:
        self.screen.set_normal_mode()
        self.state.mode = ScreenMode.NORMAL
        self.last_op_desc = "SET NORMAL"

    def op_enable_extended_mode(self, operand: int) -> None:
        self.screen.set_extended_mode()
        self.state.mode = ScreenMode.EXTENDED
        self.last_op_desc = "SET EXTENDED"

    # ------------------------------------------------------------------
    # Flow control and immediates

    def op_jump_to_address(self, operand: int) -> None:
        self.state.pc = operand & 0x0FFF
        self.last_op_desc = f"JUMP {self.state.pc:03X}"

    def op_jump_to_subroutine(self, operand: int) -> None:
        state = self.state
        self.memory.store8(state.sp, state.pc & 0x00FF)
        state.sp += 1
        self.memory.store8(state.sp, (state.pc & 0xFF00) >> 8)
        state.sp += 1
        state.pc = operand & 0x0FFF
        self.last_op_desc = f"CALL {state.pc:03X}"

    def op_skip_if_register_equal_value(self, operand: int) -> None:
        x = _x(operand)
        if self.state.v[x] == operand & 0x00FF:
            self._skip()
        self.last_op_desc = f"SKE V{x:X}, {operand & 0x00FF:02X}"

    def op_skip_if_register_not_equal_value(self, operand: int) -> None:
        x = _x(operand)
        if self.state.v[x] != operand & 0x00FF:
            self._skip()
        self.last_op_desc = f"SKNE V{x:X}, {operand & 0x00FF:02X}"

    def op_skip_if_register_equal_register(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        if self.state.v[x] == self.state.v[y]:
            self._skip()
        self.last_op_desc = f"SKE V{x:X}, V{y:X}"

    def op_skip_if_register_not_equal_register(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        if self.state.v[x] != self.state.v[y]:
            self._skip()
        self.last_op_desc = f"SKNE V{x:X}, V{y:X}"

    def _register_range(self, operand: int) -> range:
        x, y = _x(operand), _y(operand)
        return range(x, y + 1) if x <= y else range(x, y - 1, -1)

    def op_store_subset_of_registers(self, operand: int) -> None:
        address = self.state.index
        for offset, register in enumerate(self._register_range(operand)):
            self.memory.store8(address + offset, self.state.v[register])
        self.last_op_desc = f"STORSUB [I], V{_x(operand):X}-V{_y(operand):X}"

    def op_load_subset_of_registers(self, operand: int) -> None:
        address = self.state.index
        for offset, register in enumerate(self._register_range(operand)):
            self.state.v[register] = self.memory.load8(address + offset)
        self.last_op_desc = f"LOADSUB V{_x(operand):X}-V{_y(operand):X}, [I]"

    def op_move_value_to_register(self, operand: int) -> None:
        x = _x(operand)
        self.state.v[x] = operand & 0x00FF
        self.last_op_desc = f"LOAD V{x:X}, {operand & 0x00FF:02X}"

    def op_add_value_to_register(self, operand: int) -> None:
        x = _x(operand)
        self.state.v[x] = (self.state.v[x] + (operand & 0x00FF)) & 0xFF
        self.last_op_desc = f"ADD V{x:X}, {operand & 0x00FF:02X}"

    # ------------------------------------------------------------------
    # 0x8 family

    def op_move_register_into_register(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        self.state.v[x] = self.state.v[y]
        self.last_op_desc = f"LOAD V{x:X}, V{y:X}"

    def _logic(self, operand: int, result: int, mnemonic: str) -> None:
        x, y = _x(operand), _y(operand)
        self.state.v[x] = result & 0xFF
        if self.quirks.logic:
            self.state.v[0xF] = 0
        self.last_op_desc = f"{mnemonic} V{x:X}, V{y:X}"

    def op_logical_or(self, operand: int) -> None:
        v = self.state.v
        self._logic(operand, v[_x(operand)] | v[_y(operand)], "OR")

    def op_logical_and(self, operand: int) -> None:
        v = self.state.v
        self._logic(operand, v[_x(operand)] & v[_y(operand)], "AND")

    def op_exclusive_or(self, operand: int) -> None:
        v = self.state.v
        self._logic(operand, v[_x(operand)] ^ v[_y(operand)], "XOR")

    def op_add_register_to_register(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        v = self.state.v
        total = v[x] + v[y]
        v[x] = total & 0xFF
        v[0xF] = 1 if total > 0xFF else 0
        self.last_op_desc = f"ADD V{x:X}, V{y:X}"

    def op_subtract_register_from_register(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        v = self.state.v
        no_borrow = v[x] >= v[y]
        v[x] = (v[x] - v[y]) & 0xFF
        v[0xF] = 1 if no_borrow else 0
        self.last_op_desc = f"SUB V{x:X}, V{y:X}"

    def op_subtract_register_from_register_reverse(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        v = self.state.v
        no_borrow = v[y] >= v[x]
        v[x] = (v[y] - v[x]) & 0xFF
        v[0xF] = 1 if no_borrow else 0
        self.last_op_desc = f"SUBN V{x:X}, V{y:X}"

    def op_right_shift(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        v = self.state.v
        source = v[x] if self.quirks.shift else v[y]
        v[x] = source >> 1
        v[0xF] = source & 0x01
        self.last_op_desc = f"SHR V{x:X}, V{y:X}"

    def op_left_shift(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        v = self.state.v
        source = v[x] if self.quirks.shift else v[y]
        v[x] = (source << 1) & 0xFF
        v[0xF] = (source & 0x80) >> 7
        self.last_op_desc = f"SHL V{x:X}, V{y:X}"

    # ------------------------------------------------------------------
    # Index, jumps, random, draw

    def op_load_index_with_value(self, operand: int) -> None:
        self.state.index = operand & 0x0FFF
        self.last_op_desc = f"LOAD I, {self.state.index:03X}"

    def op_jump_to_register_plus_value(self, operand: int) -> None:
        register = _x(operand) if self.quirks.jump else 0
        self.state.pc = ((operand & 0x0FFF) + self.state.v[register]) & 0xFFFF
        self.last_op_desc = f"JUMP V{register:X} + {operand & 0x0FFF:03X}"

    def op_generate_random_number(self, operand: int) -> None:
        x = _x(operand)
        self.state.v[x] = self.rng.randint(0, 255) & operand & 0x00FF
        self.last_op_desc = f"RAND V{x:X}, {operand & 0x00FF:02X}"

    def op_draw_sprite(self, operand: int) -> None:
        x, y = _x(operand), _y(operand)
        num_bytes = operand & 0x000F
        state = self.state
        x_pos, y_pos = state.v[x], state.v[y]
        if not self.quirks.clip:
            x_pos %= self.screen.width
            y_pos %= self.screen.height

        if num_bytes == 0:
            row_bytes, rows = 2, 16
            self.last_op_desc = f"DRAWEX V{x:X}, V{y:X}"
        else:
            row_bytes, rows = 1, num_bytes
            self.last_op_desc = f"DRAW V{x:X}, V{y:X}, {num_bytes:X}"
        sprite_length = row_bytes * rows

        if state.bitplane == PLANE_BOTH:
            planes: tuple[int, ...] = (PLANE_1, PLANE_2)
        elif state.bitplane == PLANE_NONE:
            planes = ()
        else:
            planes = (state.bitplane,)

        collision = False
        address = state.index
        for plane in planes:
            sprite = [self.memory.load8(address + offset) for offset in range(sprite_length)]
            if self._draw_sprite(x_pos, y_pos, sprite, row_bytes, plane):
                collision = True
            address += sprite_length
        state.v[0xF] = 1 if collision else 0

    def _draw_sprite(self, x_pos: int, y_pos: int, sprite: list[int], row_bytes: int, plane: int) -> bool:
        screen = self.screen
        width, height = screen.width, screen.height
        clip = self.quirks.clip
        collision = False
        for row in range(len(sprite) // row_bytes):
            y_coord = y_pos + row
            if y_coord >= height:
                if clip:
                    break
                y_coord %= height
            for column in range(row_bytes * 8):
                bits = sprite[row * row_bytes + column // 8]
                if not bits & (0x80 >> (column % 8)):
                    continue
                x_coord = x_pos + column
                if x_coord >= width:
                    if clip:
                        break
                    x_coord %= width
                # collision is sampled before the pixel is flipped
                if screen.get_pixel(x_coord, y_coord, plane):
                    collision = True
                    screen.draw_pixel(x_coord, y_coord, False, plane)
                else:
                    screen.draw_pixel(x_coord, y_coord, True, plane)
        return collision

    # ------------------------------------------------------------------
    # 0xE family

    def op_skip_if_key_pressed(self, operand: int) -> None:
        x = _x(operand)
        if self.keyboard.is_key_pressed(self.state.v[x] & 0xF):
            self._skip()
        self.last_op_desc = f"SKPR V{x:X}"

    def op_skip_if_key_not_pressed(self, operand: int) -> None:
        x = _x(operand)
        if not self.keyboard.is_key_pressed(self.state.v[x] & 0xF):
            self._skip()
        self.last_op_desc = f"SKUP V{x:X}"

    # ------------------------------------------------------------------
    # 0xF family

    def op_index_load_long(self, operand: int) -> None:
        state = self.state
        state.index = self.memory.load16(state.pc)
        state.pc = (state.pc + 2) & 0xFFFF
        self.last_op_desc = f"LOADLONG I, {state.index:04X}"

    def op_set_bitplane(self, operand: int) -> None:
        self.state.bitplane = _x(operand) & PLANE_BOTH
        self.last_op_desc = f"BITPLANE {self.state.bitplane:X}"

    def op_move_delay_timer_into_register(self, operand: int) -> None:
        x = _x(operand)
        with self._timer_lock:
            self.state.v[x] = self.state.delay
        self.last_op_desc = f"LOAD V{x:X}, DELAY"

    def op_wait_for_keypress(self, operand: int) -> None:
        x = _x(operand)
        self._key_register = x
        self._keys_held = {code for code in range(NUM_KEYS) if self.keyboard.is_key_pressed(code)}
        self.awaiting_keypress = True
        self.last_op_desc = f"KEYD V{x:X}"

    def op_move_register_into_delay(self, operand: int) -> None:
        x = _x(operand)
        with self._timer_lock:
            self.state.delay = self.state.v[x]
        self.last_op_desc = f"LOAD DELAY, V{x:X}"

    def op_move_register_into_sound(self, operand: int) -> None:
        x = _x(operand)
        with self._timer_lock:
            self.state.sound = self.state.v[x]
        self.last_op_desc = f"LOAD SOUND, V{x:X}"

    def op_add_register_into_index(self, operand: int) -> None:
        x = _x(operand)
        self.state.index = (self.state.index + self.state.v[x]) & 0xFFFF
        self.last_op_desc = f"ADD I, V{x:X}"

    def op_load_index_with_sprite(self, operand: int) -> None:
        x = _x(operand)
        self.state.index = small_glyph_address(self.state.v[x])
        self.last_op_desc = f"LOAD I, V{x:X}"

    def op_load_index_with_extended_sprite(self, operand: int) -> None:
        x = _x(operand)
        self.state.index = large_glyph_address(self.state.v[x])
        self.last_op_desc = f"LOADEXT I, V{x:X}"

    def op_store_bcd_in_memory(self, operand: int) -> None:
        x = _x(operand)
        value = self.state.v[x]
        address = self.state.index
        self.memory.store8(address, value // 100)
        self.memory.store8(address + 1, (value // 10) % 10)
        self.memory.store8(address + 2, value % 10)
        self.last_op_desc = f"BCD V{x:X} ({value:03d})"

    def op_load_pitch(self, operand: int) -> None:
        x = _x(operand)
        pitch = self.state.v[x]
        with self._timer_lock:
            self.state.pitch = pitch
            self.state.playback_rate = playback_rate_for(pitch)
        self.last_op_desc = f"PITCH V{x:X}"

    def op_store_registers_in_memory(self, operand: int) -> None:
        x = _x(operand)
        state = self.state
        for register in range(x + 1):
            self.memory.store8(state.index + register, state.v[register])
        if not self.quirks.index:
            state.index = (state.index + x + 1) & 0xFFFF
        self.last_op_desc = f"STOR {x:X}"

    def op_read_registers_from_memory(self, operand: int) -> None:
        x = _x(operand)
        state = self.state
        for register in range(x + 1):
            state.v[register] = self.memory.load8(state.index + register)
        if not self.quirks.index:
            state.index = (state.index + x + 1) & 0xFFFF
        self.last_op_desc = f"READ {x:X}"

    def op_store_registers_in_rpl(self, operand: int) -> None:
        x = _x(operand)
        self.state.rpl[: x + 1] = self.state.v[: x + 1]
        self.last_op_desc = f"STORRPL {x:X}"

    def op_read_registers_from_rpl(self, operand: int) -> None:
        x = _x(operand)
        self.state.v[: x + 1] = self.state.rpl[: x + 1]
        self.last_op_desc = f"READRPL {x:X}"

    # ------------------------------------------------------------------

    def op_unsupported(self, operand: int) -> None:
        self.last_op_desc = f"Operation {operand:04X} not supported"
        self.diagnostics.append(self.last_op_desc)
        if debug_enabled("cpu"):
            debug_log("cpu", "unsupported operand %04x at %04x", operand, (self.state.pc - 2) & 0xFFFF)
