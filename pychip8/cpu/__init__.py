"""CPU package for the CHIP-8 emulator."""

from .core import (
    FLAG_REGISTER,
    STACK_DEPTH,
    Chip8CPU,
    CPUError,
    CPUState,
    IllegalOpcodeError,
    StackOverflowError,
    StackUnderflowError,
)
from .opcodes import Instruction, Kind, decode
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "StackOverflowError",
    "StackUnderflowError",
    "FLAG_REGISTER",
    "STACK_DEPTH",
    "Instruction",
    "Kind",
    "decode",
    "opcodes",
]
