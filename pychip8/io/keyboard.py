"""CHIP-8 hex keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Protocol

from pychip8.utils import debug_enabled, debug_log

NUM_KEYS = 16

# Host keys laid out like the COSMAC VIP keypad:
#   1 2 3 C      1 2 3 4
#   4 5 6 D      q w e r
#   7 8 9 E  ->  a s d f
#   A 0 B F      z x c v
KEY_MAP: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


class Keypad(Protocol):
    """What the interpreter needs from a keyboard."""

    def is_key_pressed(self, code: int) -> bool: ...

    def current_key(self) -> int | None: ...


@dataclass
class Keyboard:
    """16-key hex keypad fed by host key names."""

    key_map: Mapping[str, int] = field(default_factory=lambda: dict(KEY_MAP))
    _active: Dict[int, int] = field(default_factory=dict, init=False)
    _order: List[int] = field(default_factory=list, init=False)
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list, init=False)

    # ------------------------------------------------------------------
    # Host side

    def press(self, key_name: str) -> bool:
        """Press the keypad key mapped to ``key_name``; return ``False`` if unmapped."""

        code = self._lookup(key_name)
        if code is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.press_code(code)
        return True

    def release(self, key_name: str) -> bool:
        code = self._lookup(key_name)
        if code is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.release_code(code)
        return True

    def press_code(self, code: int) -> None:
        code = _validate_code(code)
        count = self._active.get(code, 0)
        self._active[code] = count + 1
        if count == 0:
            self._order.append(code)
            if debug_enabled("input"):
                debug_log("input", "key_down=%X", code)
            self._notify_listeners(code, True)

    def release_code(self, code: int) -> None:
        code = _validate_code(code)
        count = self._active.get(code, 0)
        if count == 0:
            return
        if count > 1:
            self._active[code] = count - 1
            return
        del self._active[code]
        self._order.remove(code)
        if debug_enabled("input"):
            debug_log("input", "key_up=%X", code)
        self._notify_listeners(code, False)

    def reset(self) -> None:
        self._active.clear()
        self._order.clear()

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Interpreter side

    def is_key_pressed(self, code: int) -> bool:
        return (code & 0xF) in self._active

    def current_key(self) -> int | None:
        """Return the most recently pressed key that is still held."""

        if not self._order:
            return None
        return self._order[-1]

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(code in self._active for code in range(NUM_KEYS))

    def _lookup(self, key_name: str) -> int | None:
        return self.key_map.get(key_name.lower())

    def _notify_listeners(self, code: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(code, pressed)


def _validate_code(code: int) -> int:
    if not 0 <= code < NUM_KEYS:
        raise ValueError(f"keypad code must be 0-15, got {code}")
    return code
