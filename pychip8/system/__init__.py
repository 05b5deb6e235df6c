"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import Machine, MachineConfig, create_machine
from .timers import TIMER_HZ, TimerClock

__all__ = [
    "MachineConfig",
    "Machine",
    "create_machine",
    "TimerClock",
    "TIMER_HZ",
]
