"""CHIP-8 hexadecimal keypad and the wait-for-key latch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


@dataclass(frozen=True)
class Running:
    """The CPU executes instructions normally."""


@dataclass(frozen=True)
class WaitingForKey:
    """Fx0A has retired; the next key-down is written to ``register``."""

    register: int

    def __post_init__(self) -> None:
        if not 0 <= self.register < 16:
            raise ValueError(f"register index out of range: {self.register}")


RunState = Union[Running, WaitingForKey]

RUNNING = Running()


# Physical key name -> CHIP-8 key code. The 4x4 block at the left of a QWERTY
# keyboard stands in for the COSMAC VIP hex keypad:
#
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  q w e r
#   7 8 9 E      a s d f
#   A 0 B F      z x c v
KEY_LAYOUT: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


def key_code_for(name: str) -> int | None:
    """Return the CHIP-8 key code for a physical key name, if it is mapped."""

    return KEY_LAYOUT.get(name.lower())


def _check_key(key: int) -> int:
    if not 0 <= key < KEY_COUNT:
        raise ValueError(f"key code out of range: {key}")
    return key


@dataclass
class Keypad:
    """Sixteen key states plus the run state of the CPU."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT, init=False, repr=False)
    state: RunState = RUNNING

    @property
    def waiting(self) -> bool:
        return isinstance(self.state, WaitingForKey)

    def is_pressed(self, key: int) -> bool:
        """Codes outside 0-F name no key and read as released."""

        return 0 <= key < KEY_COUNT and self._keys[key]

    def begin_wait(self, register: int) -> None:
        self.state = WaitingForKey(register)
        if debug_enabled("input"):
            debug_log("input", "wait_for_key register=V%X", register)

    def press(self, key: int) -> WaitingForKey | None:
        """Mark ``key`` as down.

        Returns the pending ``WaitingForKey`` state when this press satisfies
        it; the latch is back to ``RUNNING`` by the time the caller sees it.
        """

        _check_key(key)
        self._keys[key] = True
        if debug_enabled("input"):
            debug_log("input", "key_down=%X", key)
        state = self.state
        if isinstance(state, WaitingForKey):
            self.state = RUNNING
            if debug_enabled("input"):
                debug_log("input", "wait_satisfied register=V%X key=%X", state.register, key)
            return state
        return None

    def release(self, key: int) -> None:
        _check_key(key)
        self._keys[key] = False
        if debug_enabled("input"):
            debug_log("input", "key_up=%X", key)

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT
        self.state = RUNNING

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)
