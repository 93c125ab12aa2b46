"""Video helpers for the CHIP-8 emulator."""

from __future__ import annotations

from .palette import DEFAULT_COLORS, DEFAULT_PALETTE, parse_color, validate_palette
from .renderer import RenderResult, Renderer
from .screen import PLANE_1, PLANE_2, PLANE_BOTH, PLANE_NONE, SCROLL_STEP, Screen, ScreenMode

__all__ = [
    "Screen",
    "ScreenMode",
    "PLANE_NONE",
    "PLANE_1",
    "PLANE_2",
    "PLANE_BOTH",
    "SCROLL_STEP",
    "Renderer",
    "RenderResult",
    "DEFAULT_COLORS",
    "DEFAULT_PALETTE",
    "parse_color",
    "validate_palette",
]
