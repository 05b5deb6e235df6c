"""Loaders for CHIP-8 program images."""

from __future__ import annotations

from .program import (
    MAX_PROGRAM_LENGTH,
    ProgramImage,
    ProgramLoadError,
    load_program,
    load_program_from_path,
)

__all__ = [
    "ProgramImage",
    "ProgramLoadError",
    "MAX_PROGRAM_LENGTH",
    "load_program",
    "load_program_from_path",
]
