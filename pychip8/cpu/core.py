"""CHIP-8 execution engine."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

from pychip8.bus import ADDRESS_MASK, PROGRAM_START, Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import Framebuffer, glyph_address

from .opcodes import OPCODE_TABLE, UNKNOWN_PATTERN, Instruction, Kind, OpcodePattern, decode


class CPUError(Exception):
    """Base error for CPU-related failures."""


class IllegalOpcodeError(CPUError):
    """Raised in strict mode when an opcode matches no known pattern."""


class StackOverflowError(CPUError):
    """Raised in strict mode when CALL finds the call stack full."""


class StackUnderflowError(CPUError):
    """Raised in strict mode when RET finds the call stack empty."""


REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF


@dataclass
class CPUState:
    """Register file, call stack and timers."""

    v: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    i: int = 0x0000
    pc: int = PROGRAM_START
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    sp: int = 0
    delay_timer: int = 0x00
    sound_timer: int = 0x00

    def clone(self) -> "CPUState":
        return CPUState(
            bytearray(self.v),
            self.i,
            self.pc,
            list(self.stack),
            self.sp,
            self.delay_timer,
            self.sound_timer,
        )

    def push(self, address: int) -> bool:
        """Push a return address; returns False when the stack is full."""

        if self.sp >= STACK_DEPTH:
            return False
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1
        return True

    def pop(self) -> int | None:
        if self.sp <= 0:
            return None
        self.sp -= 1
        return self.stack[self.sp]


Handler = Callable[[Instruction], bool]


@dataclass
class Chip8CPU:
    """Fetch/decode/execute loop over memory, framebuffer and keypad.

    ``step`` returns True when the framebuffer changed and should be
    redrawn. With ``strict`` unset, stack faults and unknown opcodes are
    logged under the ``cpu`` debug category and otherwise ignored; with it
    set they raise a ``CPUError`` subclass once the PC has moved past the
    offending opcode, so a caller can report the fault and keep stepping.
    """

    memory: Memory
    framebuffer: Framebuffer
    keypad: Keypad
    rng: random.Random = field(default_factory=random.Random)
    strict: bool = False
    opcode_table: Sequence[tuple[OpcodePattern, ...]] = field(default=OPCODE_TABLE)

    state: CPUState = field(default_factory=CPUState)
    instruction_count: int = 0

    def __post_init__(self) -> None:
        self._handlers = self._build_dispatch()

    def reset(self) -> None:
        """Reset registers, stack, timers and the wait-for-key latch."""

        self.state = CPUState()
        self.instruction_count = 0
        self.keypad.reset()

    def step(self) -> bool:
        """Execute a single instruction and report whether a redraw is needed."""

        if self.keypad.waiting:
            return False

        pc_before = self.state.pc
        word = self._fetch_word()
        instruction = decode(word, self.opcode_table)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x opcode=%04x %s", pc_before, word, instruction.mnemonic)

        self.instruction_count += 1
        return self._handlers[instruction.kind](instruction)

    def peek_instruction(self) -> Instruction:
        """Decode the instruction at PC without executing it."""

        pc = self.state.pc
        word = (self._read_byte(pc) << 8) | self._read_byte(pc + 1)
        return decode(word, self.opcode_table)

    def key_down(self, key: int) -> None:
        """Deliver a key press; completes a pending Fx0A."""

        pending = self.keypad.press(key)
        if pending is not None:
            self.state.v[pending.register] = key & 0xFF

    def key_up(self, key: int) -> None:
        self.keypad.release(key)

    # ------------------------------------------------------------------
    # Flow control

    def op_cls(self, _: Instruction) -> bool:
        self.framebuffer.clear()
        return True

    def op_ret(self, _: Instruction) -> bool:
        address = self.state.pop()
        if address is None:
            self._fault(StackUnderflowError(f"RET with empty stack at pc={self.state.pc - 2:#05x}"))
            return False
        self.state.pc = address
        return False

    def op_jp(self, instruction: Instruction) -> bool:
        self.state.pc = instruction.nnn
        return False

    def op_call(self, instruction: Instruction) -> bool:
        if not self.state.push(self.state.pc):
            self._fault(StackOverflowError(f"CALL {instruction.nnn:#05x} with full stack"))
            return False
        self.state.pc = instruction.nnn
        return False

    def op_jp_v0(self, instruction: Instruction) -> bool:
        self.state.pc = (instruction.nnn + self.state.v[0]) & 0xFFFF
        return False

    def op_se_imm(self, instruction: Instruction) -> bool:
        self._skip_if(self.state.v[instruction.x] == instruction.nn)
        return False

    def op_sne_imm(self, instruction: Instruction) -> bool:
        self._skip_if(self.state.v[instruction.x] != instruction.nn)
        return False

    def op_se_reg(self, instruction: Instruction) -> bool:
        v = self.state.v
        self._skip_if(v[instruction.x] == v[instruction.y])
        return False

    def op_sne_reg(self, instruction: Instruction) -> bool:
        v = self.state.v
        self._skip_if(v[instruction.x] != v[instruction.y])
        return False

    def op_skp(self, instruction: Instruction) -> bool:
        self._skip_if(self.keypad.is_pressed(self.state.v[instruction.x]))
        return False

    def op_sknp(self, instruction: Instruction) -> bool:
        self._skip_if(not self.keypad.is_pressed(self.state.v[instruction.x]))
        return False

    def op_unknown(self, instruction: Instruction) -> bool:
        self._fault(IllegalOpcodeError(f"illegal opcode {instruction.raw:#06x} at pc={self.state.pc - 2:#05x}"))
        return False

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_imm(self, instruction: Instruction) -> bool:
        self.state.v[instruction.x] = instruction.nn
        return False

    def op_add_imm(self, instruction: Instruction) -> bool:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.nn) & 0xFF
        return False

    def op_mov(self, instruction: Instruction) -> bool:
        v = self.state.v
        v[instruction.x] = v[instruction.y]
        return False

    def op_or(self, instruction: Instruction) -> bool:
        v = self.state.v
        v[instruction.x] |= v[instruction.y]
        return False

    def op_and(self, instruction: Instruction) -> bool:
        v = self.state.v
        v[instruction.x] &= v[instruction.y]
        return False

    def op_xor(self, instruction: Instruction) -> bool:
        v = self.state.v
        v[instruction.x] ^= v[instruction.y]
        return False

    def op_add_reg(self, instruction: Instruction) -> bool:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        self._set_with_flag(instruction.x, total & 0xFF, total > 0xFF)
        return False

    def op_sub(self, instruction: Instruction) -> bool:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        self._set_with_flag(instruction.x, (vx - vy) & 0xFF, vx > vy)
        return False

    def op_subn(self, instruction: Instruction) -> bool:
        v = self.state.v
        vx, vy = v[instruction.x], v[instruction.y]
        self._set_with_flag(instruction.x, (vy - vx) & 0xFF, vy > vx)
        return False

    def op_shr(self, instruction: Instruction) -> bool:
        value = self.state.v[instruction.x]
        self._set_with_flag(instruction.x, value >> 1, bool(value & 0x01))
        return False

    def op_shl(self, instruction: Instruction) -> bool:
        value = self.state.v[instruction.x]
        self._set_with_flag(instruction.x, (value << 1) & 0xFF, bool(value & 0x80))
        return False

    def op_rnd(self, instruction: Instruction) -> bool:
        self.state.v[instruction.x] = self.rng.randrange(0x100) & instruction.nn
        return False

    # ------------------------------------------------------------------
    # Index register, memory and display

    def op_ld_i(self, instruction: Instruction) -> bool:
        self.state.i = instruction.nnn
        return False

    def op_add_i(self, instruction: Instruction) -> bool:
        self.state.i = (self.state.i + self.state.v[instruction.x]) & 0xFFFF
        return False

    def op_ld_font(self, instruction: Instruction) -> bool:
        self.state.i = glyph_address(self.state.v[instruction.x])
        return False

    def op_bcd(self, instruction: Instruction) -> bool:
        value = self.state.v[instruction.x]
        base = self.state.i
        self._write_byte(base, value // 100)
        self._write_byte(base + 1, (value // 10) % 10)
        self._write_byte(base + 2, value % 10)
        return False

    def op_store(self, instruction: Instruction) -> bool:
        base = self.state.i
        for index in range(instruction.x + 1):
            self._write_byte(base + index, self.state.v[index])
        return False

    def op_load(self, instruction: Instruction) -> bool:
        base = self.state.i
        for index in range(instruction.x + 1):
            self.state.v[index] = self._read_byte(base + index)
        return False

    def op_drw(self, instruction: Instruction) -> bool:
        base = self.state.i
        sprite = [self._read_byte(base + row) for row in range(instruction.n)]
        v = self.state.v
        collision = self.framebuffer.draw_sprite(v[instruction.x], v[instruction.y], sprite)
        v[FLAG_REGISTER] = 1 if collision else 0
        return True

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_vx_dt(self, instruction: Instruction) -> bool:
        self.state.v[instruction.x] = self.state.delay_timer
        return False

    def op_ld_dt(self, instruction: Instruction) -> bool:
        self.state.delay_timer = self.state.v[instruction.x]
        return False

    def op_ld_st(self, instruction: Instruction) -> bool:
        self.state.sound_timer = self.state.v[instruction.x]
        return False

    def op_ld_key(self, instruction: Instruction) -> bool:
        self.keypad.begin_wait(instruction.x)
        return False

    # ------------------------------------------------------------------
    # Internal helpers

    def _build_dispatch(self) -> Dict[Kind, Handler]:
        patterns = [pattern for family in self.opcode_table for pattern in family]
        patterns.append(UNKNOWN_PATTERN)
        handlers: Dict[Kind, Handler] = {}
        for pattern in patterns:
            handler = getattr(self, pattern.handler, None)
            if handler is None:
                raise CPUError(f"handler '{pattern.handler}' not implemented")
            handlers[pattern.kind] = handler
        missing = [kind.name for kind in Kind if kind not in handlers]
        if missing:
            raise CPUError(f"no handler registered for {', '.join(missing)}")
        return handlers

    def _fetch_word(self) -> int:
        pc = self.state.pc
        word = (self._read_byte(pc) << 8) | self._read_byte(pc + 1)
        self.state.pc = (pc + 2) & 0xFFFF
        return word

    def _skip_if(self, condition: bool) -> None:
        if condition:
            self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _set_with_flag(self, register: int, value: int, flag: bool) -> None:
        # VF is written after the result, so 8Fy* leaves the flag in VF.
        self.state.v[register] = value
        self.state.v[FLAG_REGISTER] = 1 if flag else 0

    def _read_byte(self, address: int) -> int:
        return self.memory.load8(address & ADDRESS_MASK)

    def _write_byte(self, address: int, value: int) -> None:
        self.memory.store8(address & ADDRESS_MASK, value & 0xFF)

    def _fault(self, error: CPUError) -> None:
        if self.strict:
            raise error
        if debug_enabled("cpu"):
            debug_log("cpu", "ignored %s: %s", type(error).__name__, error)
