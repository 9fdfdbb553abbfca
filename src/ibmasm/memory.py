"""
Memory Image
============

Byte-addressable store built by the layout pass and mutated by execution.

Each cell carries a tag:
    DATA         - 8-bit value written by DC/DS or a store instruction
    INSTRUCTION  - placeholder reserving space for an executable statement

The interpreter never decodes instructions from the image; it re-reads the
source statement. Instruction placeholders hold 0 and are never meant to
be read as data, but doing so is not an error.

Word Format:
    32-bit signed values, big-endian:
        byte[0] = bits 31-24
        byte[1] = bits 23-16
        byte[2] = bits 15-8
        byte[3] = bits 7-0

Copyright (c) 2026 ibmasm Contributors
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from ibmasm.errors import MemoryAccessError
from ibmasm.opcodes import WORD_SIZE


INT32_MIN = -0x80000000
INT32_MAX = 0x7FFFFFFF


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def encode_word(value: int) -> bytes:
    """Encode a signed 32-bit value as 4 big-endian bytes."""
    return to_int32(value).to_bytes(WORD_SIZE, "big", signed=True)


def decode_word(data: bytes) -> int:
    """Decode 4 big-endian bytes to a signed 32-bit value."""
    return int.from_bytes(bytes(data[:WORD_SIZE]), "big", signed=True)


class ByteKind(Enum):
    """Tag of a memory cell."""
    DATA = "DATA"
    INSTRUCTION = "INSTRUCTION"


@dataclass(frozen=True)
class Byte:
    """
    One memory cell as seen by readers.

    Attributes:
        value: Raw 8-bit value (0 for instruction placeholders)
        kind: DATA or INSTRUCTION
    """
    value: int
    kind: ByteKind

    @property
    def is_data(self) -> bool:
        return self.kind is ByteKind.DATA


class MemoryImage:
    """
    Growable byte store with per-byte tags.

    Values live in a bytearray and tags in a parallel list, so appending
    during layout is amortized O(1) and word access is a slice.

    Example:
        >>> mem = MemoryImage()
        >>> mem.append_words([10])
        >>> mem.read_word(0)
        10
        >>> mem[3]
        Byte(value=10, kind=<ByteKind.DATA: 'DATA'>)
    """

    def __init__(self) -> None:
        self._values = bytearray()
        self._kinds: list[ByteKind] = []

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, address: int) -> Byte:
        return Byte(self._values[address], self._kinds[address])

    def __iter__(self) -> Iterator[Byte]:
        for value, kind in zip(self._values, self._kinds):
            yield Byte(value, kind)

    def __repr__(self) -> str:
        return f"MemoryImage({len(self)} bytes)"

    # ========================================
    # Layout-time growth
    # ========================================

    def append_words(self, values: list[int]) -> None:
        """Append each value as a big-endian DATA word."""
        for value in values:
            self._values += encode_word(value)
            self._kinds.extend([ByteKind.DATA] * WORD_SIZE)

    def reserve_data(self, size: int) -> None:
        """Append size zero-valued DATA bytes."""
        self._values += bytes(size)
        self._kinds.extend([ByteKind.DATA] * size)

    def reserve_instruction(self, size: int) -> None:
        """Append size INSTRUCTION placeholder bytes."""
        self._values += bytes(size)
        self._kinds.extend([ByteKind.INSTRUCTION] * size)

    # ========================================
    # Word access
    # ========================================

    def _check(self, address: int, line: Optional[int]) -> None:
        if address < 0 or address + WORD_SIZE > len(self._values):
            raise MemoryAccessError(address, len(self._values), line)

    def read_word(self, address: int, line: Optional[int] = None) -> int:
        """
        Read the signed 32-bit word starting at address.

        Args:
            address: Byte address of the most significant byte
            line: Source line for error reporting

        Raises:
            MemoryAccessError: If the word is not fully inside the image
        """
        self._check(address, line)
        return decode_word(self._values[address:address + WORD_SIZE])

    def write_word(self, address: int, value: int, line: Optional[int] = None) -> None:
        """
        Write a signed 32-bit word at address, tagging the bytes DATA.

        Raises:
            MemoryAccessError: If the word is not fully inside the image
        """
        self._check(address, line)
        self._values[address:address + WORD_SIZE] = encode_word(value)
        self._kinds[address:address + WORD_SIZE] = [ByteKind.DATA] * WORD_SIZE

    def values(self) -> bytes:
        """Raw byte values as an immutable copy."""
        return bytes(self._values)

    def kinds(self) -> tuple[ByteKind, ...]:
        """Byte tags as an immutable copy."""
        return tuple(self._kinds)
