"""Pygame frontend for the CHIP-8 emulator."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.cpu import CPUError
from pychip8.io import key_code_for
from pychip8.loader import ProgramLoadError
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, MONOCHROME, Renderer
from pychip8.video.palette import Palette

_FRAME_RATE = 60
_CYCLES_PER_FRAME = 10


@dataclass
class AppConfig:
    """Configuration for the pygame frontend."""

    rom_path: Optional[Path] = None
    scale: int = 12
    cycles_per_frame: int = _CYCLES_PER_FRAME
    frame_rate: int = _FRAME_RATE
    palette: Palette = MONOCHROME
    seed: Optional[int] = None
    strict: bool = False


class Chip8App:
    """Owns the event loop: input, instruction pacing, timers and drawing."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._renderer = Renderer(config.palette)
        self._pygame = None
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)
        self._frame_counter = 0
        self._tone_ticks = 0
        self._perf_enabled = debug_enabled("perf")

    @property
    def machine(self) -> Machine | None:
        return self._machine

    @property
    def tone_ticks(self) -> int:
        """Timer ticks so far on which the tone signal was raised."""

        return self._tone_ticks

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("a ROM image is required")
        machine = self._create_machine(self._config.rom_path)
        self._machine = machine

        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {self._config.rom_path.name}")
        self._pygame = pygame

        scale = self._config.scale
        screen = pygame.display.set_mode((DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale))
        self._present(screen, machine)

        clock = pygame.time.Clock()
        last_time = time.perf_counter()
        self._running = True
        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_name(pygame.key.name(event.key), pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_name(pygame.key.name(event.key), pressed=False)

                frame_start = time.perf_counter()
                redraw = self._run_frame(machine)

                now = time.perf_counter()
                self._advance_timers(machine, now - last_time)
                last_time = now

                if redraw:
                    self._present(screen, machine)

                if self._perf_enabled:
                    debug_log(
                        "perf",
                        "frame=%d instructions=%d frame_ms=%.3f",
                        self._frame_counter,
                        machine.cpu.instruction_count,
                        (time.perf_counter() - frame_start) * 1000.0,
                    )

                clock.tick(self._config.frame_rate)
                self._frame_counter += 1
        finally:
            pygame.quit()

    # ------------------------------------------------------------------
    # Frame pieces

    def _create_machine(self, rom_path: Path) -> Machine:
        machine = create_machine(MachineConfig(seed=self._config.seed, strict=self._config.strict))
        try:
            machine.load_program_from_path(rom_path)
        except ProgramLoadError as exc:
            raise RuntimeError(str(exc)) from exc
        return machine

    def _handle_key_name(self, name: str, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        code = key_code_for(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s code=%s pressed=%s", name, code, pressed)
        if code is None:
            return
        if pressed:
            machine.key_down(code)
        else:
            machine.key_up(code)

    def _run_frame(self, machine: Machine) -> bool:
        """Execute one frame's worth of instructions; True when the display changed."""

        cpu = machine.cpu
        trace = self._trace_recorder
        redraw = False
        try:
            for _ in range(self._config.cycles_per_frame):
                if machine.waiting_for_key:
                    break
                if trace is not None:
                    instruction = cpu.peek_instruction()
                    trace.record_step(
                        cpu.state,
                        instruction.raw,
                        waiting=False,
                        mnemonic=instruction.mnemonic,
                    )
                redraw = cpu.step() or redraw
        except CPUError as exc:
            self._running = False
            if trace is not None:
                trace.dump("trace", limit=32)
            raise RuntimeError(f"CPU fault: {exc}") from exc
        return redraw

    def _advance_timers(self, machine: Machine, elapsed: float) -> int:
        tones = machine.timers.advance(elapsed)
        sounding = sum(1 for tone in tones if tone)
        self._tone_ticks += sounding
        return sounding

    def _present(self, screen, machine: Machine) -> None:
        frame = self._renderer.render(machine.framebuffer.snapshot(), scale=self._config.scale)
        screen.blit(frame.to_surface(), (0, 0))
        self._pygame.display.flip()


__all__ = ["AppConfig", "Chip8App"]
