"""Convert the bitplane framebuffer into RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .palette import DEFAULT_PALETTE, RGBColor, validate_palette
from .screen import Screen


@dataclass
class RenderResult:
    """An RGB frame stored row-major as packed ``bytes``."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale a :class:`Screen` into an RGB frame using a four colour palette."""

    def __init__(self, palette: Sequence[RGBColor] = DEFAULT_PALETTE) -> None:
        self._palette = validate_palette(palette)
        self._colors = tuple(bytes(color) for color in self._palette)

    @property
    def palette(self):
        return self._palette

    def render(self, screen: Screen, *, output_width: int | None = None, scale: int = 1) -> RenderResult:
        """Render ``screen`` so that it fills ``output_width`` pixels (or ``scale`` × width).

        The NORMAL mode screen is half the size of the EXTENDED one, so the app
        passes a fixed ``output_width`` to keep the window size constant.
        """

        if scale <= 0:
            raise ValueError("scale must be positive")
        width = screen.width
        height = screen.height
        if output_width is None:
            factor = scale
        else:
            if output_width % width:
                raise ValueError(f"output width {output_width} is not a multiple of {width}")
            factor = output_width // width

        indices = screen.snapshot()
        rows: list[bytes] = []
        for y in range(height):
            line = b"".join(self._colors[index] * factor for index in indices[y * width : (y + 1) * width])
            rows.extend([line] * factor)
        return RenderResult(width * factor, height * factor, b"".join(rows))
