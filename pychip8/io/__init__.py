"""Input devices for the CHIP-8 emulator."""

from .keyboard import KEY_MAP, NUM_KEYS, Keyboard, Keypad

__all__ = ["KEY_MAP", "NUM_KEYS", "Keyboard", "Keypad"]
