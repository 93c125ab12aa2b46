"""Tests for the command-line entry point."""

from __future__ import annotations

import pytest

import run
from pychip8.bus import OutOfBoundsAccess
from pychip8.cpu import Quirks
from pychip8.ui.app import Chip8App


@pytest.fixture
def rom(tmp_path):
    path = tmp_path / "game.ch8"
    path.write_bytes(b"\x12\x00")
    return path


def test_parser_defaults(rom) -> None:
    args = run.build_arg_parser().parse_args([str(rom)])
    config = run.config_from_args(args)

    assert config.rom_path == rom
    assert config.scale == 5
    assert config.cycle_delay_ms == 1.0
    assert not config.memory_4k
    assert tuple(config.colors) == ("000000", "FF33CC", "33CCFF", "FFFFFF")
    assert config.quirks == Quirks()
    assert not config.trace


def test_parser_options(rom) -> None:
    args = run.build_arg_parser().parse_args(
        [
            str(rom),
            "--scale",
            "3",
            "--delay",
            "0.5",
            "--mem-size-4k",
            "--color-1",
            "112233",
            "--shift-quirks",
            "--clip-quirks",
            "--trace",
        ]
    )
    config = run.config_from_args(args)

    assert config.scale == 3
    assert config.cycle_delay_ms == 0.5
    assert config.memory_4k
    assert config.colors[1] == "112233"
    assert config.quirks == Quirks(shift=True, clip=True)
    assert config.trace


def test_missing_rom_is_a_usage_error(tmp_path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main([str(tmp_path / "nope.ch8")])
    assert excinfo.value.code == 2


def test_bad_colour_is_a_usage_error(rom) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run.main([str(rom), "--color-0", "nothex"])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("error", [RuntimeError("pygame is required"), OutOfBoundsAccess(0x1000, 0x1000)])
def test_runtime_failures_exit_with_status_one(monkeypatch, rom, error, capsys) -> None:
    def fail(self) -> None:
        raise error

    monkeypatch.setattr(Chip8App, "run", fail)

    with pytest.raises(SystemExit) as excinfo:
        run.main([str(rom)])

    assert excinfo.value.code == 1
    assert "run.py:" in capsys.readouterr().err


def test_successful_run_returns_zero(monkeypatch, rom) -> None:
    monkeypatch.setattr(Chip8App, "run", lambda self: None)
    assert run.main([str(rom)]) == 0
