"""Turn framebuffer snapshots into scaled RGB frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .framebuffer import DISPLAY_HEIGHT, DISPLAY_WIDTH, PIXEL_COUNT
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """A rendered frame stored as one RGB tuple per output pixel."""

    width: int
    height: int
    pixels: list[RGBColor]

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return self.pixels[y * self.width + x]

    def to_bytes(self) -> bytes:
        """Packed RGB24 rows, as accepted by ``pygame.image.frombuffer``."""

        return bytes(channel for pixel in self.pixels for channel in pixel)

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build surfaces") from exc
        return pygame.image.frombuffer(self.to_bytes(), (self.width, self.height), "RGB")


class Renderer:
    """Scale a 64x32 one-bit snapshot into a ``RenderResult``."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, snapshot: bytes, *, scale: int = 1) -> RenderResult:
        if len(snapshot) != PIXEL_COUNT:
            raise ValueError(f"snapshot must hold {PIXEL_COUNT} pixels, got {len(snapshot)}")
        if scale <= 0:
            raise ValueError("scale must be positive")

        width = DISPLAY_WIDTH * scale
        height = DISPLAY_HEIGHT * scale
        pixels: list[RGBColor] = []
        for row in range(DISPLAY_HEIGHT):
            source = snapshot[row * DISPLAY_WIDTH : (row + 1) * DISPLAY_WIDTH]
            line: list[RGBColor] = []
            for value in source:
                color = self._foreground if value else self._background
                line.extend([color] * scale)
            for _ in range(scale):
                pixels.extend(line)
        return RenderResult(width, height, pixels)
