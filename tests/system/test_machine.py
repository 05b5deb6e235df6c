"""Tests for CHIP-8 machine assembly."""

from __future__ import annotations

import random

from pychip8.bus import PROGRAM_START
from pychip8.io import RUNNING
from pychip8.system import MachineConfig, create_machine
from pychip8.video import FONT_BASE, FONT_SPRITES


def test_create_machine_installs_font_and_resets_state() -> None:
    machine = create_machine()

    assert machine.memory.read_block(FONT_BASE, len(FONT_SPRITES)) == FONT_SPRITES
    assert machine.memory.load8(0x000) == 0
    assert machine.memory.load8(PROGRAM_START) == 0
    state = machine.cpu.state
    assert state.pc == PROGRAM_START
    assert state.sp == 0
    assert state.i == 0
    assert bytes(state.v) == bytes(16)
    assert machine.keypad.state is RUNNING
    assert machine.framebuffer.lit_count() == 0


def test_components_are_shared() -> None:
    machine = create_machine()
    assert machine.cpu.memory is machine.memory
    assert machine.cpu.framebuffer is machine.framebuffer
    assert machine.cpu.keypad is machine.keypad
    assert machine.timers.cpu is machine.cpu


def test_config_rng_and_strict() -> None:
    rng = random.Random(7)
    machine = create_machine(MachineConfig(rng=rng, strict=True, timer_hz=50))
    assert machine.cpu.rng is rng
    assert machine.cpu.strict is True
    assert machine.timers.hz == 50


def test_load_program_resets_pc_and_records_image() -> None:
    machine = create_machine()
    machine.cpu.state.pc = 0x300

    image = machine.load_program(b"\x60\x01", name="tiny")

    assert machine.cpu.state.pc == PROGRAM_START
    assert machine.program is image
    assert image.length == 2


def test_reset_restores_power_on_state() -> None:
    machine = create_machine()
    machine.load_program(bytes([0xA0, FONT_BASE, 0xD0, 0x05, 0xF0, 0x0A]))
    machine.run(3)
    machine.memory.store8(FONT_BASE, 0x00)
    assert machine.waiting_for_key

    machine.reset()

    assert machine.memory.read_block(FONT_BASE, len(FONT_SPRITES)) == FONT_SPRITES
    assert machine.memory.load8(PROGRAM_START) == 0
    assert machine.framebuffer.lit_count() == 0
    assert not machine.waiting_for_key
    assert machine.cpu.state.pc == PROGRAM_START
    assert machine.program is None


def test_run_reports_redraw_and_stops_when_waiting() -> None:
    machine = create_machine()
    # LD I,font; DRW V0,V0,5; LD V1,K; LD V2,0x22
    machine.load_program(bytes([0xA0, FONT_BASE, 0xD0, 0x05, 0xF1, 0x0A, 0x62, 0x22]))

    redraw = machine.run(10)

    assert redraw is True
    assert machine.waiting_for_key
    assert machine.cpu.instruction_count == 3
    assert machine.cpu.state.v[2] == 0

    machine.key_down(0x6)
    assert machine.run(10) is False
    assert machine.cpu.state.v[1] == 0x6
    assert machine.cpu.state.v[2] == 0x22


def test_tick_forwards_tone_signal() -> None:
    machine = create_machine()
    machine.cpu.state.sound_timer = 2
    assert machine.tick() is True
    assert machine.tick() is False
