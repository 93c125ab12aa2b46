"""CHIP-8, SuperChip and XO-Chip interpreter.

The interpreter core lives in :mod:`pychip8.cpu` and only talks to memory,
the bitplane screen, the keypad and the tone sink. :mod:`pychip8.system`
assembles those parts and paces execution; :mod:`pychip8.ui` is the pygame
frontend used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "audio",
    "bus",
    "cpu",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "video",
]

__version__ = "0.1.0"
