"""Framebuffer, font and rendering helpers for the CHIP-8 emulator."""

from __future__ import annotations

from .font import FONT_BASE, FONT_SPRITES, GLYPH_BYTES, glyph_address
from .framebuffer import DISPLAY_HEIGHT, DISPLAY_WIDTH, Framebuffer
from .palette import MONOCHROME, PALETTES, parse_color, resolve_palette, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Framebuffer",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "FONT_BASE",
    "FONT_SPRITES",
    "GLYPH_BYTES",
    "glyph_address",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "PALETTES",
    "parse_color",
    "resolve_palette",
    "validate_palette",
]
