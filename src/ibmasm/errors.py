"""
ibmasm Error Hierarchy
======================

This module defines the exception hierarchy for the whole toolkit. All
domain exceptions inherit from AsmError, allowing callers to catch every
assembler or interpreter fault with a single except clause.

Exception Hierarchy
-------------------
AsmError (base)
├── PreprocessingError (found by the layout pass, before anything runs)
│   ├── DuplicateLabelError - label defined more than once
│   ├── InvalidLabelError - label name is not alphanumeric
│   ├── UnknownInstructionError - mnemonic not in the instruction set
│   ├── DataOrderError - DC/DS declared after executable code
│   └── LiteralError - malformed or missing DC/DS literal
└── RuntimeError (found while executing statements)
    ├── OperandError - wrong arity, missing comma, bad register number
    ├── InvalidInstructionError - unknown mnemonic met during execution
    ├── UndefinedLabelError - reference to an undefined label
    ├── InvalidJumpTargetError - jump address is not a statement boundary
    ├── MemoryAccessError - word access outside the memory image
    └── ExecutionLimitError - step ceiling reached (likely infinite loop)

Error messages follow this format:
    [Line 12] Label "LOOP" is defined more than once.

Anything that is not an AsmError is an internal fault and is never wrapped.

Note:
    RuntimeError here shadows the Python builtin of the same name inside
    this module. The package root re-exports it as AsmRuntimeError.

Copyright (c) 2026 ibmasm Contributors
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class AsmError(Exception):
    """
    Base exception for all ibmasm errors.

    Attributes:
        message: The error description, without the line prefix
        line: 1-based source line number (None when not tied to a line)
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Prefix the message with the line number when one is known."""
        if self.line is None:
            return self.message
        return f"[Line {self.line}] {self.message}"


# =============================================================================
# Preprocessing (Layout Pass) Exceptions
# =============================================================================

class PreprocessingError(AsmError):
    """
    Structural problem discovered by the layout pass.

    Raised before any instruction executes: bad or duplicate labels,
    unknown mnemonics, data declared after code, malformed literals.
    """
    pass


class DuplicateLabelError(PreprocessingError):
    """Label defined on more than one line."""

    def __init__(self, label: str, line: int, first_line: Optional[int] = None):
        self.label = label
        self.first_line = first_line
        super().__init__(f'Label "{label}" is defined more than once.', line)


class InvalidLabelError(PreprocessingError):
    """Label name contains characters other than ASCII letters and digits."""

    def __init__(self, label: str, line: int):
        self.label = label
        super().__init__(f'Label "{label}" name must be an alphanumeric name.', line)


class UnknownInstructionError(PreprocessingError):
    """Mnemonic is not part of the instruction set."""

    def __init__(self, mnemonic: str, line: int):
        self.mnemonic = mnemonic
        super().__init__(f'Unrecognized instruction name "{mnemonic}".', line)


class DataOrderError(PreprocessingError):
    """
    DC/DS declaration found after the first executable instruction.

    All data must be laid out before code, so the data section occupies
    the low addresses of the memory image.
    """

    def __init__(self, label: str, line: int):
        self.label = label
        super().__init__(
            "Data declarations (labels with DC/DS) must precede executable "
            f'instructions. Move label "{label}" at the top of the program.',
            line,
        )


class LiteralError(PreprocessingError):
    """
    Malformed numeric literal in a data declaration.

    Examples:
        - DC with no operand
        - DC INTEGER() (no number inside)
        - DC X*INTEGER(1) (non-numeric repeat count)
    """
    pass


# =============================================================================
# Runtime (Execution) Exceptions
# =============================================================================

class RuntimeError(AsmError):
    """
    Problem discovered only while executing a statement.

    Aborts the current step. State is left exactly as it was when the
    fault was detected; nothing is rolled back.
    """
    pass


class OperandError(RuntimeError):
    """
    Operands do not match the instruction shape.

    Raised when:
    - RR/RM instruction does not have exactly "r1 , operand"
    - Comma separator is missing
    - Jump has anything other than a single target
    - Register number is not 0-15
    """
    pass


class InvalidInstructionError(RuntimeError):
    """Unknown mnemonic met while executing (re-validated on every step)."""

    def __init__(self, mnemonic: str, line: int):
        self.mnemonic = mnemonic
        super().__init__(f'Unrecognized instruction name "{mnemonic}".', line)


class UndefinedLabelError(RuntimeError):
    """Operand names a label that the layout pass never defined."""

    def __init__(self, label: str, line: int):
        self.label = label
        super().__init__(f'There isn\'t defined label "{label}".', line)


class InvalidJumpTargetError(RuntimeError):
    """
    Jump address does not start an executable statement.

    The address must land exactly on the start of a statement with a
    non-zero footprint and must lie inside the program.
    """

    def __init__(self, address: int, line: int):
        self.address = address
        super().__init__(
            f"InvalidJumpTarget - attempted to jump to address 0x{address:08x}, "
            "which is not executable.",
            line,
        )


class MemoryAccessError(RuntimeError):
    """Word read or write falls outside the memory image."""

    def __init__(self, address: int, size: int, line: Optional[int] = None):
        self.address = address
        self.size = size
        super().__init__(
            f"Memory access at address {address} is outside the memory image "
            f"({size} bytes).",
            line,
        )


class ExecutionLimitError(RuntimeError):
    """
    Execution ceiling reached.

    Raised by a full run once the step counter reaches the configured
    maximum, which usually means the program loops forever. The line is
    the statement that would have run next, or None when the ceiling was
    reached exactly as the program ended.
    """

    def __init__(self, limit: int, line: Optional[int] = None):
        self.limit = limit
        super().__init__(
            f"Program halted after exceeding the execution limit of {limit} "
            "instructions. Possible infinite loop detected.",
            line,
        )
