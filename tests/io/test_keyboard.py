"""Tests for the hex keypad."""

from __future__ import annotations

import pytest

from pychip8.io import KEY_MAP, Keyboard


def test_mapping_covers_all_sixteen_keys() -> None:
    assert sorted(KEY_MAP.values()) == list(range(16))


def test_press_and_release_by_name() -> None:
    kb = Keyboard()

    assert kb.press("q")
    assert kb.is_key_pressed(0x4)
    assert kb.current_key() == 0x4

    assert kb.release("Q")
    assert not kb.is_key_pressed(0x4)
    assert kb.current_key() is None


def test_unmapped_keys_are_ignored() -> None:
    kb = Keyboard()
    assert not kb.press("space")
    assert kb.snapshot() == (False,) * 16


def test_current_key_is_most_recent_still_held() -> None:
    kb = Keyboard()
    kb.press_code(0x1)
    kb.press_code(0x2)
    assert kb.current_key() == 0x2
    kb.release_code(0x2)
    assert kb.current_key() == 0x1


def test_repeated_presses_need_matching_releases() -> None:
    kb = Keyboard()
    kb.press_code(0xF)
    kb.press_code(0xF)
    kb.release_code(0xF)
    assert kb.is_key_pressed(0xF)
    kb.release_code(0xF)
    assert not kb.is_key_pressed(0xF)


def test_is_key_pressed_masks_register_value() -> None:
    kb = Keyboard()
    kb.press_code(0xA)
    assert kb.is_key_pressed(0x1A)


def test_listeners_see_transitions() -> None:
    kb = Keyboard()
    events: list[tuple[int, bool]] = []
    kb.add_listener(lambda code, pressed: events.append((code, pressed)))
    kb.press("v")
    kb.release("v")
    assert events == [(0xF, True), (0xF, False)]


def test_reset_releases_everything() -> None:
    kb = Keyboard()
    kb.press("x")
    kb.reset()
    assert kb.current_key() is None
    assert not any(kb.snapshot())


def test_invalid_code_raises() -> None:
    with pytest.raises(ValueError):
        Keyboard().press_code(16)


def test_internal_state_is_not_a_constructor_argument() -> None:
    with pytest.raises(TypeError):
        Keyboard(_active={0x1: 1})
