"""
Instruction Set Definition
==========================

This module defines the closed set of mnemonics understood by the
assembler and interpreter, their operand shapes and their footprint in the
memory image.

Instruction Kinds
-----------------
1. **REGISTER_REGISTER** (RR): ``AR r1, r2``
   - 2 bytes in the memory image
   - AR, SR, MR, DR, CR, LR

2. **REGISTER_MEMORY** (RM): ``A r1, address``
   - 4 bytes in the memory image
   - A, S, M, D, C, L, ST, LA

3. **JUMP**: ``J address``
   - 4 bytes in the memory image
   - J (always), JP (sign clear), JN (sign set), JZ (zero set)

4. **DATA**: ``LABEL DC INTEGER(5)`` / ``LABEL DS 3*INTEGER``
   - footprint depends on the repeat count, 4 bytes per cell
   - DC, DS

Address Expressions
-------------------
RM and jump operands accept:
- ``123``   absolute byte address
- ``0(r)``  the value held in register r
- ``NAME``  the address of a label

Copyright (c) 2026 ibmasm Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Instruction Kind Enumeration
# =============================================================================

class InstructionKind(Enum):
    """Operand shape of an instruction."""
    REGISTER_REGISTER = auto()
    REGISTER_MEMORY = auto()
    JUMP = auto()
    DATA = auto()


# =============================================================================
# Mnemonic Enumeration
# =============================================================================

class Mnemonic(Enum):
    """
    Every recognized instruction keyword.

    The value is the spelling used in source text. Mnemonics are case
    sensitive: ``ar`` is not ``AR``.
    """
    A = "A"
    AR = "AR"
    S = "S"
    SR = "SR"
    M = "M"
    MR = "MR"
    D = "D"
    DR = "DR"
    C = "C"
    CR = "CR"
    L = "L"
    LR = "LR"
    ST = "ST"
    LA = "LA"
    J = "J"
    JP = "JP"
    JZ = "JZ"
    JN = "JN"
    DC = "DC"
    DS = "DS"

    def __str__(self) -> str:
        return self.value

    @property
    def kind(self) -> InstructionKind:
        return INSTRUCTION_SET[self].kind


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Static information about one mnemonic.

    Attributes:
        mnemonic: The mnemonic
        kind: Operand shape
        size: Footprint in bytes (0 for data, which is sized by its operand)
    """
    mnemonic: Mnemonic
    kind: InstructionKind
    size: int


RR_SIZE = 2
RM_SIZE = 4
WORD_SIZE = 4


def _rr(m: Mnemonic) -> InstructionInfo:
    return InstructionInfo(m, InstructionKind.REGISTER_REGISTER, RR_SIZE)


def _rm(m: Mnemonic) -> InstructionInfo:
    return InstructionInfo(m, InstructionKind.REGISTER_MEMORY, RM_SIZE)


def _jump(m: Mnemonic) -> InstructionInfo:
    return InstructionInfo(m, InstructionKind.JUMP, RM_SIZE)


def _data(m: Mnemonic) -> InstructionInfo:
    return InstructionInfo(m, InstructionKind.DATA, 0)


INSTRUCTION_SET: dict[Mnemonic, InstructionInfo] = {
    Mnemonic.AR: _rr(Mnemonic.AR),
    Mnemonic.SR: _rr(Mnemonic.SR),
    Mnemonic.MR: _rr(Mnemonic.MR),
    Mnemonic.DR: _rr(Mnemonic.DR),
    Mnemonic.CR: _rr(Mnemonic.CR),
    Mnemonic.LR: _rr(Mnemonic.LR),
    Mnemonic.A: _rm(Mnemonic.A),
    Mnemonic.S: _rm(Mnemonic.S),
    Mnemonic.M: _rm(Mnemonic.M),
    Mnemonic.D: _rm(Mnemonic.D),
    Mnemonic.C: _rm(Mnemonic.C),
    Mnemonic.L: _rm(Mnemonic.L),
    Mnemonic.ST: _rm(Mnemonic.ST),
    Mnemonic.LA: _rm(Mnemonic.LA),
    Mnemonic.J: _jump(Mnemonic.J),
    Mnemonic.JP: _jump(Mnemonic.JP),
    Mnemonic.JZ: _jump(Mnemonic.JZ),
    Mnemonic.JN: _jump(Mnemonic.JN),
    Mnemonic.DC: _data(Mnemonic.DC),
    Mnemonic.DS: _data(Mnemonic.DS),
}

# Source spelling -> Mnemonic
_BY_NAME: dict[str, Mnemonic] = {m.value: m for m in Mnemonic}


# =============================================================================
# Lookup Functions
# =============================================================================

def is_mnemonic(text: str) -> bool:
    """Return True if text is a recognized mnemonic."""
    return text in _BY_NAME


def parse_mnemonic(text: str) -> Optional[Mnemonic]:
    """
    Look up a mnemonic by its source spelling.

    Returns:
        The Mnemonic, or None if text is not in the instruction set
    """
    return _BY_NAME.get(text)


def split_statement(tokens: list[str]) -> tuple[Optional[str], str, list[str]]:
    """
    Split a token list into (label, mnemonic text, operands).

    The first token is a label exactly when the second token is a
    recognized mnemonic. Otherwise the first token is the mnemonic,
    whether or not it is valid.

    Args:
        tokens: Non-empty token list from the lexer

    Returns:
        Tuple (label or None, mnemonic text, remaining operand tokens)

    Example:
        >>> split_statement(["LOOP", "AR", "1", ",", "2"])
        ('LOOP', 'AR', ['1', ',', '2'])
        >>> split_statement(["J", "LOOP"])
        (None, 'J', ['LOOP'])
    """
    if len(tokens) > 1 and is_mnemonic(tokens[1]):
        return tokens[0], tokens[1], tokens[2:]
    return None, tokens[0], tokens[1:]


def instruction_size(mnemonic: Mnemonic) -> int:
    """Footprint of an executable instruction (2 for RR, 4 otherwise)."""
    return INSTRUCTION_SET[mnemonic].size
