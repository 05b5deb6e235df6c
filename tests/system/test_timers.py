"""Tests for the 60 Hz timer clock."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from pychip8.cpu import CPUState
from pychip8.system import TimerClock
from pychip8.system.timers import MAX_CATCH_UP_TICKS


def make_clock(delay: int = 0, sound: int = 0, hz: int = 60) -> TimerClock:
    state = CPUState(delay_timer=delay, sound_timer=sound)
    return TimerClock(SimpleNamespace(state=state), hz=hz)  # type: ignore[arg-type]


def test_delay_timer_counts_down_to_zero() -> None:
    clock = make_clock(delay=2)
    clock.tick()
    assert clock.cpu.state.delay_timer == 1
    clock.tick()
    clock.tick()
    assert clock.cpu.state.delay_timer == 0


def test_sound_timer_at_one_is_silent() -> None:
    clock = make_clock(sound=1)
    assert clock.tick() is False
    assert clock.cpu.state.sound_timer == 0


def test_sound_timer_at_two_sounds() -> None:
    clock = make_clock(sound=2)
    assert clock.tick() is True
    assert clock.cpu.state.sound_timer == 1
    assert clock.tick() is False
    assert clock.tick() is False


def test_idle_tick_is_silent() -> None:
    clock = make_clock()
    assert clock.tick() is False
    assert clock.tick_count == 1


def test_timers_are_independent() -> None:
    clock = make_clock(delay=5, sound=3)
    clock.tick()
    assert (clock.cpu.state.delay_timer, clock.cpu.state.sound_timer) == (4, 2)


def test_advance_runs_due_ticks() -> None:
    clock = make_clock(delay=10, sound=4)

    assert clock.advance(0.01) == []
    tones = clock.advance(0.01)

    assert tones == [True]
    assert clock.cpu.state.delay_timer == 9


def test_advance_multiple_ticks() -> None:
    clock = make_clock(sound=3)
    assert clock.advance(3 / 60) == [True, True, False]
    assert clock.cpu.state.sound_timer == 0


def test_advance_caps_catch_up() -> None:
    clock = make_clock(delay=200)
    tones = clock.advance(10.0)
    assert len(tones) == MAX_CATCH_UP_TICKS
    assert clock.cpu.state.delay_timer == 200 - MAX_CATCH_UP_TICKS
    assert clock.advance(0.001) == []


def test_custom_rate() -> None:
    clock = make_clock(delay=10, hz=30)
    assert clock.period == pytest.approx(1 / 30)
    assert len(clock.advance(1 / 30)) == 1


def test_invalid_rate_and_elapsed() -> None:
    with pytest.raises(ValueError):
        make_clock(hz=0)
    with pytest.raises(ValueError):
        make_clock().advance(-0.1)
