"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.bus import PROGRAM_START, Memory
from pychip8.cpu import Chip8CPU
from pychip8.io import Keypad
from pychip8.loader import ProgramImage, load_program, load_program_from_path
from pychip8.loader.program import ProgramSource
from pychip8.video import FONT_BASE, FONT_SPRITES, Framebuffer

from .timers import TIMER_HZ, TimerClock


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    seed: Optional[int] = None
    rng: Optional[random.Random] = None
    strict: bool = False
    timer_hz: int = TIMER_HZ

    def make_rng(self) -> random.Random:
        if self.rng is not None:
            return self.rng
        return random.Random(self.seed)


@dataclass
class Machine:
    """Aggregates the components of the CHIP-8 virtual machine."""

    memory: Memory
    cpu: Chip8CPU
    framebuffer: Framebuffer
    keypad: Keypad
    timers: TimerClock
    program: ProgramImage | None = None

    def reset(self) -> None:
        """Zero memory and registers, clear the display and reinstall the font."""

        self.memory.clear()
        self.memory.write_block(FONT_BASE, FONT_SPRITES)
        self.framebuffer.clear()
        self.cpu.reset()
        self.timers.reset()
        self.program = None

    def load_program(self, source: ProgramSource, *, name: str = "") -> ProgramImage:
        image = load_program(source, self.memory, name=name)
        return self._start_program(image)

    def load_program_from_path(self, path: Path) -> ProgramImage:
        image = load_program_from_path(path, self.memory)
        return self._start_program(image)

    def step(self) -> bool:
        return self.cpu.step()

    def run(self, count: int) -> bool:
        """Execute up to ``count`` instructions; True when any of them needs a redraw.

        Stops early while the CPU is waiting for a key.
        """

        redraw = False
        for _ in range(count):
            if self.keypad.waiting:
                break
            redraw = self.cpu.step() or redraw
        return redraw

    def tick(self) -> bool:
        return self.timers.tick()

    def key_down(self, key: int) -> None:
        self.cpu.key_down(key)

    def key_up(self, key: int) -> None:
        self.cpu.key_up(key)

    @property
    def waiting_for_key(self) -> bool:
        return self.keypad.waiting

    def _start_program(self, image: ProgramImage) -> ProgramImage:
        self.cpu.state.pc = PROGRAM_START
        self.program = image
        return image


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a reset CHIP-8 machine with the requested configuration."""

    config = config or MachineConfig()
    memory = Memory()
    framebuffer = Framebuffer()
    keypad = Keypad()
    cpu = Chip8CPU(
        memory,
        framebuffer,
        keypad,
        rng=config.make_rng(),
        strict=config.strict,
    )
    timers = TimerClock(cpu, hz=config.timer_hz)

    machine = Machine(
        memory=memory,
        cpu=cpu,
        framebuffer=framebuffer,
        keypad=keypad,
        timers=timers,
    )
    machine.reset()
    return machine
