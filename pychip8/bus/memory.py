"""Memory for the CHIP-8 virtual machine.

The machine exposes a flat 4 KiB address space. Layout::

    0x000-0x04F  reserved (interpreter area, unused)
    0x050-0x09F  built-in hexadecimal font glyphs
    0x0A0-0x1FF  reserved
    0x200-0xFFF  program image and working memory

``Memory`` is bounds checked: any access outside the block raises
``MemoryError``. The CPU masks the addresses it computes to 12 bits, so opcode
execution itself never trips the check.
"""

from __future__ import annotations

from dataclasses import dataclass

MEMORY_SIZE = 0x1000
ADDRESS_MASK = MEMORY_SIZE - 1
PROGRAM_START = 0x200


class MemoryError(Exception):
    """Raised when memory is misconfigured or accessed out of range."""


@dataclass
class Memory:
    """Byte-addressable memory block."""

    start: int = 0x000
    length: int = MEMORY_SIZE

    def __post_init__(self) -> None:
        if self.start < 0 or self.length <= 0:
            raise MemoryError("memory region must have a positive length and non-negative start")
        self._data = bytearray(self.length)

    def get_start_address(self) -> int:
        return self.start

    def get_end_address(self) -> int:
        return self.start + self.length - 1

    def _offset(self, address: int) -> int:
        offset = address - self.start
        if not 0 <= offset < self.length:
            raise MemoryError(f"address {address:#05x} outside region {self.start:#05x}-{self.get_end_address():#05x}")
        return offset

    def load8(self, address: int) -> int:
        return self._data[self._offset(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[self._offset(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        """Read a big-endian word."""

        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def read_block(self, address: int, length: int) -> bytes:
        if length < 0:
            raise MemoryError("block length must not be negative")
        if length == 0:
            return b""
        offset = self._offset(address)
        self._offset(address + length - 1)
        return bytes(self._data[offset : offset + length])

    def write_block(self, address: int, data: bytes) -> None:
        """Copy ``data`` starting at ``address``; nothing is written unless all of it fits."""

        if not data:
            return
        offset = self._offset(address)
        self._offset(address + len(data) - 1)
        self._data[offset : offset + len(data)] = data

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)
