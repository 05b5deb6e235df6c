"""Two-colour palettes for CHIP-8 rendering."""

from __future__ import annotations

from typing import Mapping, Sequence, Tuple

RGBColor = Tuple[int, int, int]
Palette = Tuple[RGBColor, RGBColor]


MONOCHROME: Palette = ((0, 0, 0), (0xFF, 0xFF, 0xFF))

PALETTES: Mapping[str, Palette] = {
    "mono": MONOCHROME,
    "amber": ((0x1A, 0x0E, 0x00), (0xFF, 0xB0, 0x00)),
    "green": ((0x00, 0x14, 0x00), (0x33, 0xFF, 0x33)),
}


def parse_color(text: str) -> RGBColor:
    """Parse ``#RRGGBB`` (the leading ``#`` is optional)."""

    value = text.strip().lstrip("#")
    if len(value) != 6:
        raise ValueError(f"colour must be six hex digits: {text!r}")
    try:
        packed = int(value, 16)
    except ValueError as exc:
        raise ValueError(f"colour must be six hex digits: {text!r}") from exc
    return ((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)


def resolve_palette(value: str) -> Palette:
    """Look up a preset name or parse ``background,foreground`` hex colours."""

    preset = PALETTES.get(value.strip().lower())
    if preset is not None:
        return preset
    parts = value.split(",")
    if len(parts) != 2:
        raise ValueError(f"unknown palette {value!r}; use one of {', '.join(PALETTES)} or 'RRGGBB,RRGGBB'")
    return (parse_color(parts[0]), parse_color(parts[1]))


def validate_palette(palette: Sequence[RGBColor]) -> Palette:
    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (background and foreground)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    return tuple(tuple(int(channel) & 0xFF for channel in color) for color in palette)  # type: ignore[return-value]
