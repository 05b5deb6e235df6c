"""Raw CHIP-8 program image loading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

from pychip8.bus import MEMORY_SIZE, PROGRAM_START, Memory
from pychip8.utils import debug_enabled, debug_log

MAX_PROGRAM_LENGTH = MEMORY_SIZE - PROGRAM_START


class ProgramLoadError(RuntimeError):
    """Raised when a program image cannot be read or does not fit in memory."""


@dataclass
class ProgramImage:
    """Describes a program copied into memory."""

    name: str
    start: int
    length: int

    @property
    def end(self) -> int:
        """Last address occupied by the image (``start - 1`` when empty)."""

        return self.start + self.length - 1


ProgramSource = Union[bytes, bytearray, memoryview, BinaryIO]


def load_program(source: ProgramSource, memory: Memory, *, name: str = "") -> ProgramImage:
    """Copy a raw program image into ``memory`` at 0x200.

    Memory is left untouched when the image is larger than the 3584 bytes
    available above 0x200. The font area below 0x200 is never written.
    """

    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
    else:
        try:
            data = source.read()
        except OSError as exc:
            raise ProgramLoadError(f"failed to read program {name or '<stream>'}: {exc}") from exc
        if not isinstance(data, (bytes, bytearray)):
            raise ProgramLoadError("program stream must be opened in binary mode")
        data = bytes(data)

    if PROGRAM_START + len(data) > MEMORY_SIZE:
        raise ProgramLoadError(
            f"program {name or '<image>'} is {len(data)} bytes; at most {MAX_PROGRAM_LENGTH} fit above {PROGRAM_START:#05x}"
        )

    memory.write_block(PROGRAM_START, data)
    if debug_enabled("loader"):
        debug_log("loader", "loaded %s bytes=%d at %03x", name or "<image>", len(data), PROGRAM_START)
    return ProgramImage(name=name, start=PROGRAM_START, length=len(data))


def load_program_from_path(path: Path, memory: Memory) -> ProgramImage:
    """Load a program image from the filesystem."""

    path = Path(path)
    try:
        with path.open("rb") as handle:
            return load_program(handle, memory, name=path.name)
    except FileNotFoundError as exc:
        raise ProgramLoadError(f"program file not found: {path}") from exc
    except OSError as exc:
        raise ProgramLoadError(f"failed to open program {path}: {exc}") from exc
