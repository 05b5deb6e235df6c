"""Monochrome 64x32 framebuffer with XOR sprite drawing."""

from __future__ import annotations

from typing import Iterable

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
PIXEL_COUNT = DISPLAY_WIDTH * DISPLAY_HEIGHT
SPRITE_WIDTH = 8
MAX_SPRITE_ROWS = 15


class Framebuffer:
    """One byte per pixel (0 or 1), stored row-major."""

    width = DISPLAY_WIDTH
    height = DISPLAY_HEIGHT

    def __init__(self) -> None:
        self._pixels = bytearray(PIXEL_COUNT)

    def clear(self) -> None:
        self._pixels[:] = bytes(PIXEL_COUNT)

    def get_pixel(self, x: int, y: int) -> int:
        return self._pixels[(y % DISPLAY_HEIGHT) * DISPLAY_WIDTH + (x % DISPLAY_WIDTH)]

    def draw_sprite(self, x: int, y: int, sprite: Iterable[int]) -> bool:
        """XOR ``sprite`` onto the grid at (``x``, ``y``) and report collision.

        Each sprite byte is one row, most significant bit on the left. The
        origin and every touched pixel wrap around both edges of the display;
        nothing is clipped. Returns True when at least one pixel that was
        already lit is touched by a set sprite bit.
        """

        origin_x = x % DISPLAY_WIDTH
        origin_y = y % DISPLAY_HEIGHT
        pixels = self._pixels
        collision = False
        for row, bits in enumerate(sprite):
            if row >= MAX_SPRITE_ROWS:
                break
            bits &= 0xFF
            if not bits:
                continue
            base = ((origin_y + row) % DISPLAY_HEIGHT) * DISPLAY_WIDTH
            for column in range(SPRITE_WIDTH):
                if bits & (0x80 >> column):
                    index = base + (origin_x + column) % DISPLAY_WIDTH
                    if pixels[index]:
                        collision = True
                    pixels[index] ^= 1
        return collision

    def snapshot(self) -> bytes:
        """Return an immutable copy of the grid, row-major, one byte per pixel."""

        return bytes(self._pixels)

    def rows(self) -> tuple[bytes, ...]:
        data = self.snapshot()
        return tuple(data[row * DISPLAY_WIDTH : (row + 1) * DISPLAY_WIDTH] for row in range(DISPLAY_HEIGHT))

    def lit_count(self) -> int:
        return sum(self._pixels)
