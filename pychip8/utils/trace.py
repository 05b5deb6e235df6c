"""Ring buffer of recent CHIP-8 steps, dumped when the CPU faults."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Sequence

from .debug import debug_log


@dataclass(frozen=True)
class TraceEntry:
    pc: int
    opcode: int | None
    mnemonic: str
    i: int
    sp: int
    delay_timer: int
    sound_timer: int
    registers: tuple[int, ...]
    stack: tuple[int, ...]
    waiting: bool
    note: str = ""

    @classmethod
    def capture(cls, cpu_state, opcode: int | None, *, waiting: bool, mnemonic: str, note: str) -> "TraceEntry":
        sp = cpu_state.sp
        stack = tuple(getattr(cpu_state, "stack", ())[:sp])
        return cls(
            pc=cpu_state.pc & 0xFFFF,
            opcode=None if opcode is None else opcode & 0xFFFF,
            mnemonic=mnemonic,
            i=cpu_state.i & 0xFFFF,
            sp=sp,
            delay_timer=cpu_state.delay_timer & 0xFF,
            sound_timer=cpu_state.sound_timer & 0xFF,
            registers=tuple(cpu_state.v),
            stack=stack,
            waiting=waiting,
            note=note,
        )

    def format(self) -> str:
        opcode = "----" if self.opcode is None else f"{self.opcode:04X}"
        markers = (["WAIT"] if self.waiting else []) + ([self.note] if self.note else [])
        registers = " ".join(f"{value:02X}" for value in self.registers)
        text = (
            f"pc={self.pc:04X} opcode={opcode} {self.mnemonic or '?':<5} "
            f"I={self.i:04X} SP={self.sp:02d} DT={self.delay_timer:02X} ST={self.sound_timer:02X} "
            f"V=[{registers}] flags={','.join(markers) or '-'}"
        )
        if self.stack:
            text += " stack=[" + " ".join(f"{addr:03X}" for addr in self.stack) + "]"
        return text


class TraceRecorder:
    """Keeps the last ``capacity`` CPU snapshots, oldest first."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._entries: Deque[TraceEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def record_step(
        self,
        cpu_state,
        opcode: int | None,
        *,
        waiting: bool,
        mnemonic: str = "",
        note: str = "",
    ) -> None:
        self._entries.append(
            TraceEntry.capture(cpu_state, opcode, waiting=waiting, mnemonic=mnemonic, note=note)
        )

    def entries(self, limit: int | None = None) -> Iterator[TraceEntry]:
        skip = 0 if limit is None else max(len(self._entries) - max(limit, 0), 0)
        for index, entry in enumerate(self._entries):
            if index >= skip:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        return self._entries[-1] if self._entries else None

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        return [entry.format() for entry in self.entries(limit)]

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)
