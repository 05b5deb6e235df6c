"""Input handling for the CHIP-8 emulator."""

from .keypad import (
    KEY_COUNT,
    KEY_LAYOUT,
    RUNNING,
    Keypad,
    Running,
    RunState,
    WaitingForKey,
    key_code_for,
)

__all__ = [
    "Keypad",
    "KEY_COUNT",
    "KEY_LAYOUT",
    "key_code_for",
    "Running",
    "RUNNING",
    "RunState",
    "WaitingForKey",
]
