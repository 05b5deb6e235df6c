"""Opcode metadata and decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Final, Iterable, List, Sequence


class Kind(Enum):
    """Every instruction the interpreter understands, plus ``UNKNOWN``."""

    CLS = auto()
    RET = auto()
    JP = auto()
    CALL = auto()
    SE_IMM = auto()
    SNE_IMM = auto()
    SE_REG = auto()
    LD_IMM = auto()
    ADD_IMM = auto()
    MOV = auto()
    OR = auto()
    AND = auto()
    XOR = auto()
    ADD_REG = auto()
    SUB = auto()
    SHR = auto()
    SUBN = auto()
    SHL = auto()
    SNE_REG = auto()
    LD_I = auto()
    JP_V0 = auto()
    RND = auto()
    DRW = auto()
    SKP = auto()
    SKNP = auto()
    LD_VX_DT = auto()
    LD_KEY = auto()
    LD_DT = auto()
    LD_ST = auto()
    ADD_I = auto()
    LD_FONT = auto()
    BCD = auto()
    STORE = auto()
    LOAD = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class OpcodePattern:
    """One row of the instruction table: ``word & mask == match`` selects ``kind``."""

    mask: int
    match: int
    kind: Kind
    mnemonic: str
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF or not 0 <= self.match <= 0xFFFF:
            raise ValueError(f"pattern out of range: {self.match:#06x}/{self.mask:#06x}")
        if self.match & ~self.mask:
            raise ValueError(f"pattern {self.match:#06x} has bits outside mask {self.mask:#06x}")

    @property
    def family(self) -> int:
        return self.match >> 12

    def matches(self, word: int) -> bool:
        return word & self.mask == self.match


UNKNOWN_PATTERN: Final = OpcodePattern(0x0000, 0x0000, Kind.UNKNOWN, "???", "op_unknown")


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit opcode with its operand fields."""

    raw: int
    pattern: OpcodePattern

    @property
    def kind(self) -> Kind:
        return self.pattern.kind

    @property
    def mnemonic(self) -> str:
        return self.pattern.mnemonic

    @property
    def handler(self) -> str:
        return self.pattern.handler

    @property
    def x(self) -> int:
        return (self.raw >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.raw >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.raw & 0xF

    @property
    def nn(self) -> int:
        return self.raw & 0xFF

    @property
    def nnn(self) -> int:
        return self.raw & 0xFFF


class OpcodeTable:
    """Builder grouping patterns by their high nibble."""

    def __init__(self) -> None:
        self._families: Dict[int, List[OpcodePattern]] = {family: [] for family in range(16)}
        self._kinds: set[Kind] = set()

    def register(self, pattern: OpcodePattern) -> None:
        if pattern.mask & 0xF000 != 0xF000:
            raise ValueError(f"{pattern.mnemonic}: mask must cover the family nibble")
        if pattern.kind in self._kinds:
            raise ValueError(f"kind {pattern.kind.name} already registered")
        for existing in self._families[pattern.family]:
            overlap = existing.mask & pattern.mask
            if existing.match & overlap == pattern.match & overlap:
                raise ValueError(
                    f"pattern {pattern.match:#06x} ({pattern.mnemonic}) overlaps {existing.mnemonic}")
        self._families[pattern.family].append(pattern)
        self._kinds.add(pattern.kind)

    def register_all(self, patterns: Iterable[OpcodePattern]) -> None:
        for pattern in patterns:
            self.register(pattern)

    def freeze(self) -> Sequence[tuple[OpcodePattern, ...]]:
        return tuple(tuple(self._families[family]) for family in range(16))


def build_opcode_table(patterns: Iterable[OpcodePattern]) -> Sequence[tuple[OpcodePattern, ...]]:
    """Build a 16-entry lookup of patterns indexed by opcode family."""

    table = OpcodeTable()
    table.register_all(patterns)
    return table.freeze()


DEFAULT_PATTERNS: Sequence[OpcodePattern] = (
    OpcodePattern(0xFFFF, 0x00E0, Kind.CLS, "CLS", "op_cls"),
    OpcodePattern(0xFFFF, 0x00EE, Kind.RET, "RET", "op_ret"),
    OpcodePattern(0xF000, 0x1000, Kind.JP, "JP", "op_jp"),
    OpcodePattern(0xF000, 0x2000, Kind.CALL, "CALL", "op_call"),
    OpcodePattern(0xF000, 0x3000, Kind.SE_IMM, "SE", "op_se_imm"),
    OpcodePattern(0xF000, 0x4000, Kind.SNE_IMM, "SNE", "op_sne_imm"),
    OpcodePattern(0xF00F, 0x5000, Kind.SE_REG, "SE", "op_se_reg"),
    OpcodePattern(0xF000, 0x6000, Kind.LD_IMM, "LD", "op_ld_imm"),
    OpcodePattern(0xF000, 0x7000, Kind.ADD_IMM, "ADD", "op_add_imm"),
    # 8xy* register ALU
    OpcodePattern(0xF00F, 0x8000, Kind.MOV, "LD", "op_mov"),
    OpcodePattern(0xF00F, 0x8001, Kind.OR, "OR", "op_or"),
    OpcodePattern(0xF00F, 0x8002, Kind.AND, "AND", "op_and"),
    OpcodePattern(0xF00F, 0x8003, Kind.XOR, "XOR", "op_xor"),
    OpcodePattern(0xF00F, 0x8004, Kind.ADD_REG, "ADD", "op_add_reg"),
    OpcodePattern(0xF00F, 0x8005, Kind.SUB, "SUB", "op_sub"),
    OpcodePattern(0xF00F, 0x8006, Kind.SHR, "SHR", "op_shr"),
    OpcodePattern(0xF00F, 0x8007, Kind.SUBN, "SUBN", "op_subn"),
    OpcodePattern(0xF00F, 0x800E, Kind.SHL, "SHL", "op_shl"),
    OpcodePattern(0xF00F, 0x9000, Kind.SNE_REG, "SNE", "op_sne_reg"),
    OpcodePattern(0xF000, 0xA000, Kind.LD_I, "LD", "op_ld_i"),
    OpcodePattern(0xF000, 0xB000, Kind.JP_V0, "JP", "op_jp_v0"),
    OpcodePattern(0xF000, 0xC000, Kind.RND, "RND", "op_rnd"),
    OpcodePattern(0xF000, 0xD000, Kind.DRW, "DRW", "op_drw"),
    OpcodePattern(0xF0FF, 0xE09E, Kind.SKP, "SKP", "op_skp"),
    OpcodePattern(0xF0FF, 0xE0A1, Kind.SKNP, "SKNP", "op_sknp"),
    # Fx** timers, keypad and index register
    OpcodePattern(0xF0FF, 0xF007, Kind.LD_VX_DT, "LD", "op_ld_vx_dt"),
    OpcodePattern(0xF0FF, 0xF00A, Kind.LD_KEY, "LD", "op_ld_key"),
    OpcodePattern(0xF0FF, 0xF015, Kind.LD_DT, "LD", "op_ld_dt"),
    OpcodePattern(0xF0FF, 0xF018, Kind.LD_ST, "LD", "op_ld_st"),
    OpcodePattern(0xF0FF, 0xF01E, Kind.ADD_I, "ADD", "op_add_i"),
    OpcodePattern(0xF0FF, 0xF029, Kind.LD_FONT, "LD", "op_ld_font"),
    OpcodePattern(0xF0FF, 0xF033, Kind.BCD, "BCD", "op_bcd"),
    OpcodePattern(0xF0FF, 0xF055, Kind.STORE, "LD", "op_store"),
    OpcodePattern(0xF0FF, 0xF065, Kind.LOAD, "LD", "op_load"),
)

OPCODE_TABLE: Sequence[tuple[OpcodePattern, ...]] = build_opcode_table(DEFAULT_PATTERNS)


def decode(word: int, table: Sequence[tuple[OpcodePattern, ...]] = OPCODE_TABLE) -> Instruction:
    """Decode a 16-bit opcode. Unrecognised words decode to ``Kind.UNKNOWN``."""

    word &= 0xFFFF
    for pattern in table[word >> 12]:
        if pattern.matches(word):
            return Instruction(word, pattern)
    return Instruction(word, UNKNOWN_PATTERN)
