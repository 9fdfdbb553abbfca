"""
Register File and Condition Flags
=================================

Sixteen general-purpose 32-bit signed registers, all starting at zero,
plus a flags register with two defined bits.

Flag bit layout (same positions as the x86 EFLAGS ZF/SF bits):
    7  6  5  4  3  2  1  0
    SF ZF -  -  -  -  -  -

Flags are recomputed wholesale from a result value; no instruction ever
toggles a single bit.

Copyright (c) 2026 ibmasm Contributors
"""

from enum import IntFlag
from typing import Iterator

from ibmasm.memory import to_int32


REGISTER_COUNT = 16


class Flags(IntFlag):
    """Condition flags."""
    ZF = 1 << 6  # Zero: last result was 0
    SF = 1 << 7  # Sign: last result was negative


def flags_for(value: int) -> Flags:
    """
    Compute the flags describing a result value.

    Zero and Sign are mutually exclusive: a value cannot be both 0 and
    negative.
    """
    flags = Flags(0)
    if value == 0:
        flags |= Flags.ZF
    if value < 0:
        flags |= Flags.SF
    return flags


class RegisterFile:
    """
    Fixed-size bank of signed 32-bit registers.

    Every write wraps to 32 bits, matching the arithmetic of a real
    32-bit machine.

    Example:
        >>> regs = RegisterFile()
        >>> regs[1] = 0x7FFFFFFF
        >>> regs[1] += 1
        >>> regs[1]
        -2147483648
    """

    def __init__(self, count: int = REGISTER_COUNT):
        self._values = [0] * count
        self.flags = Flags(0)

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> int:
        return self._values[index]

    def __setitem__(self, index: int, value: int) -> None:
        self._values[index] = to_int32(value)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"RegisterFile({self._values!r}, flags={self.flags!r})"

    def is_valid(self, index: int) -> bool:
        """Return True if index names a register."""
        return 0 <= index < len(self._values)

    def update_flags(self, value: int) -> None:
        """Recompute Zero/Sign from a result value."""
        self.flags = flags_for(value)

    @property
    def zero(self) -> bool:
        return bool(self.flags & Flags.ZF)

    @property
    def sign(self) -> bool:
        return bool(self.flags & Flags.SF)

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(self._values)
