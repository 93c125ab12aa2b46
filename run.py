"""Command-line entry point for the CHIP-8 emulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.bus import MemoryError as Chip8MemoryError
from pychip8.cpu import ConfigurationError, Quirks
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import DEFAULT_COLORS


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 / SuperChip / XO-Chip emulator",
    )
    parser.add_argument("rom", type=Path, help="Path to the ROM image to run")
    parser.add_argument(
        "--scale",
        type=int,
        default=5,
        help="Integer window scale factor (default: 5)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="Delay between instructions in milliseconds (default: 1)",
    )
    parser.add_argument(
        "--mem-size-4k",
        action="store_true",
        help="Use 4K of memory instead of 64K",
    )
    for index, color in enumerate(DEFAULT_COLORS):
        parser.add_argument(
            f"--color-{index}",
            default=color,
            metavar="RRGGBB",
            help=f"Hex colour for bitplane combination {index} (default: {color})",
        )
    for name, help_text in _QUIRK_HELP.items():
        parser.add_argument(f"--{name}-quirks", action="store_true", help=help_text)
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Record executed instructions and show the status overlay",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> AppConfig:
    quirks = Quirks.from_names(name for name in Quirks.names() if getattr(args, f"{name}_quirks"))
    return AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        cycle_delay_ms=args.delay,
        memory_4k=args.mem_size_4k,
        colors=tuple(getattr(args, f"color_{index}") for index in range(len(DEFAULT_COLORS))),
        quirks=quirks,
        trace=args.trace,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")

    try:
        app = Chip8App(config_from_args(args))
    except ConfigurationError as exc:
        parser.error(str(exc))
    try:
        app.run()
    except (RuntimeError, Chip8MemoryError) as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


_QUIRK_HELP = {
    "shift": "8xy6/8xyE shift Vx in place instead of Vy",
    "logic": "8xy1/8xy2/8xy3 clear VF",
    "jump": "Bnnn jumps to nnn + Vx instead of nnn + V0",
    "index": "Fx55/Fx65 leave I unchanged",
    "clip": "sprites are clipped at the screen edge instead of wrapping",
}


if __name__ == "__main__":
    sys.exit(main())
