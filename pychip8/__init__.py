"""Python CHIP-8 emulator.

The execution core lives in ``cpu`` (decode and execute), ``bus`` (memory),
``video`` (framebuffer and font), ``io`` (keypad and wait-for-key latch) and
``system`` (timers and machine assembly). ``loader`` reads program images and
``ui`` drives everything from a pygame window.
"""

from __future__ import annotations

from . import bus, cpu, io, loader, system, ui, utils, video
from .system import Machine, MachineConfig, create_machine

__all__: list[str] = [
    "bus",
    "cpu",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
    "video",
    "Machine",
    "MachineConfig",
    "create_machine",
]
