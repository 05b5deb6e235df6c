"""Memory bus for the CHIP-8 emulator."""

from .memory import ADDRESS_MASK, MEMORY_SIZE, PROGRAM_START, Memory, MemoryError

__all__ = [
    "Memory",
    "MemoryError",
    "MEMORY_SIZE",
    "ADDRESS_MASK",
    "PROGRAM_START",
]
