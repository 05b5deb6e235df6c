"""60 Hz delay/sound timer clock."""

from __future__ import annotations

from dataclasses import dataclass

from pychip8.cpu import Chip8CPU
from pychip8.utils import debug_enabled, debug_log

TIMER_HZ = 60

# Cap on ticks run by a single ``advance`` call, so a stalled host (debugger,
# suspended laptop) does not replay minutes of timer ticks at once.
MAX_CATCH_UP_TICKS = 8


@dataclass
class TimerClock:
    """Counts the delay and sound timers down, independently of ``step``.

    The timers are read through ``cpu.state`` on every tick so a CPU reset,
    which replaces the state object, is picked up automatically.
    """

    cpu: Chip8CPU
    hz: int = TIMER_HZ
    tick_count: int = 0
    _pending: float = 0.0

    def __post_init__(self) -> None:
        if self.hz <= 0:
            raise ValueError("timer rate must be positive")

    @property
    def period(self) -> float:
        return 1.0 / self.hz

    def tick(self) -> bool:
        """Run one timer period. Returns True when the tone should sound."""

        state = self.cpu.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        tone = False
        if state.sound_timer > 0:
            state.sound_timer -= 1
            # The tick that reaches zero is silent.
            tone = state.sound_timer > 0
        self.tick_count += 1
        if tone and debug_enabled("timer"):
            debug_log("timer", "tone tick=%d st=%d", self.tick_count, state.sound_timer)
        return tone

    def advance(self, elapsed: float) -> list[bool]:
        """Account for ``elapsed`` seconds of wall time and run the ticks now due.

        Returns the tone signal of each tick that ran, oldest first.
        """

        if elapsed < 0:
            raise ValueError("elapsed time must not be negative")
        self._pending += elapsed
        due = int(self._pending * self.hz)
        if due <= 0:
            return []
        self._pending -= due / self.hz
        if due > MAX_CATCH_UP_TICKS:
            if debug_enabled("timer"):
                debug_log("timer", "dropping %d overdue ticks", due - MAX_CATCH_UP_TICKS)
            due = MAX_CATCH_UP_TICKS
            self._pending = 0.0
        return [self.tick() for _ in range(due)]

    def reset(self) -> None:
        self.tick_count = 0
        self._pending = 0.0
