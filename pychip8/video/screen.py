"""Bitplane framebuffer for the CHIP-8 display.

Each pixel is stored as a colour index built from the two bitplanes: bit 0 is
plane 1 and bit 1 is plane 2, so the four combinations select one of four
displayed colours. Drawing on one plane never disturbs the other.
"""

from __future__ import annotations

from enum import Enum

PLANE_NONE = 0
PLANE_1 = 1
PLANE_2 = 2
PLANE_BOTH = 3

SCROLL_STEP = 4


class ScreenMode(Enum):
    """Logical resolution of the display."""

    NORMAL = "normal"
    EXTENDED = "extended"

    @property
    def width(self) -> int:
        return 128 if self is ScreenMode.EXTENDED else 64

    @property
    def height(self) -> int:
        return 64 if self is ScreenMode.EXTENDED else 32


def _validate_plane(plane: int) -> int:
    if not PLANE_NONE <= plane <= PLANE_BOTH:
        raise ValueError(f"bitplane must be 0-3, got {plane}")
    return plane


class Screen:
    """Two-plane framebuffer addressed in logical (mode dependent) pixels."""

    def __init__(self, mode: ScreenMode = ScreenMode.NORMAL) -> None:
        self._mode = mode
        self._pixels = bytearray(mode.width * mode.height)

    # ------------------------------------------------------------------
    # Geometry

    @property
    def mode(self) -> ScreenMode:
        return self._mode

    @property
    def width(self) -> int:
        return self._mode.width

    @property
    def height(self) -> int:
        return self._mode.height

    def set_extended_mode(self) -> None:
        self._set_mode(ScreenMode.EXTENDED)

    def set_normal_mode(self) -> None:
        self._set_mode(ScreenMode.NORMAL)

    def _set_mode(self, mode: ScreenMode) -> None:
        self._mode = mode
        self._pixels = bytearray(mode.width * mode.height)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} screen")
        return y * self.width + x

    # ------------------------------------------------------------------
    # Pixel access

    def get_pixel(self, x: int, y: int, plane: int) -> bool:
        """Return ``True`` if the pixel is on in every plane selected by ``plane``."""

        if _validate_plane(plane) == PLANE_NONE:
            return False
        return (self._pixels[self._offset(x, y)] & plane) == plane

    def draw_pixel(self, x: int, y: int, turn_on: bool, plane: int) -> None:
        """Turn the pixel on or off in ``plane``, keeping the other plane's bit."""

        if _validate_plane(plane) == PLANE_NONE:
            return
        offset = self._offset(x, y)
        if turn_on:
            self._pixels[offset] |= plane
        else:
            self._pixels[offset] &= ~plane & PLANE_BOTH

    def color_index(self, x: int, y: int) -> int:
        return self._pixels[self._offset(x, y)]

    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    # ------------------------------------------------------------------
    # Whole-screen operations

    def clear_screen(self, plane: int) -> None:
        if _validate_plane(plane) == PLANE_NONE:
            return
        if plane == PLANE_BOTH:
            self._pixels = bytearray(len(self._pixels))
            return
        keep = ~plane & PLANE_BOTH
        table = bytes(value & keep for value in range(256))
        self._pixels = bytearray(self._pixels.translate(table))

    def scroll_left(self, plane: int) -> None:
        self._scroll(plane, -SCROLL_STEP, 0)

    def scroll_right(self, plane: int) -> None:
        self._scroll(plane, SCROLL_STEP, 0)

    def scroll_up(self, num_pixels: int, plane: int) -> None:
        self._scroll(plane, 0, -num_pixels)

    def scroll_down(self, num_pixels: int, plane: int) -> None:
        self._scroll(plane, 0, num_pixels)

    def _scroll(self, plane: int, dx: int, dy: int) -> None:
        if _validate_plane(plane) == PLANE_NONE or (dx == 0 and dy == 0):
            return
        if plane == PLANE_BOTH:
            self._scroll_all(dx, dy)
        else:
            self._scroll_plane(plane, dx, dy)

    def _scroll_all(self, dx: int, dy: int) -> None:
        # Every colour moves together, so whole rows can be copied.
        width = self.width
        height = self.height
        dx = max(-width, min(width, dx))
        shifted = bytearray(len(self._pixels))
        for y in range(height):
            source_y = y - dy
            if not 0 <= source_y < height:
                continue
            row = self._pixels[source_y * width : (source_y + 1) * width]
            if dx > 0:
                row = bytes(dx) + row[: width - dx]
            elif dx < 0:
                row = row[-dx:] + bytes(-dx)
            shifted[y * width : (y + 1) * width] = row
        self._pixels = shifted

    def _scroll_plane(self, plane: int, dx: int, dy: int) -> None:
        width = self.width
        height = self.height
        keep = ~plane & PLANE_BOTH
        source = bytes(self._pixels)
        for y in range(height):
            source_y = y - dy
            row_valid = 0 <= source_y < height
            for x in range(width):
                source_x = x - dx
                offset = y * width + x
                value = self._pixels[offset] & keep
                if row_valid and 0 <= source_x < width and source[source_y * width + source_x] & plane:
                    value |= plane
                self._pixels[offset] = value
