"""
Layout Pass (Symbol Table and Memory Layout)
============================================

The first of the two stages. A single forward pass over the program that:

1. Records every label with the address it names
2. Validates labels (unique, alphanumeric) and mnemonics
3. Enforces that DC/DS declarations precede executable code
4. Computes each statement's footprint and fills the memory image

The result is a Layout: the resolved statement list, the symbol table and
the initial memory image. The execution engine takes it over from there;
the layout itself never changes once built.

Data Declarations
-----------------
    ONE   DC INTEGER(10)      4 bytes holding 10
    TAB   DC 3*INTEGER(-1)    12 bytes, three words of -1
    BUF   DS 5*INTEGER        20 zero bytes
    TMP   DS INTEGER          4 zero bytes

The value of a DC literal is the first (optionally signed) decimal integer
in the operand, so ``INTEGER(10)``, ``(10)`` and ``10`` are equivalent.

Footprints
----------
    RR instructions  2 bytes
    other code       4 bytes
    DC/DS            4 bytes per cell
    blank lines      0 bytes

Copyright (c) 2026 ibmasm Contributors
"""

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from ibmasm.errors import (
    DataOrderError,
    DuplicateLabelError,
    InvalidJumpTargetError,
    InvalidLabelError,
    LiteralError,
    UnknownInstructionError,
)
from ibmasm.lexer import tokenize
from ibmasm.memory import INT32_MAX, INT32_MIN, MemoryImage
from ibmasm.opcodes import (
    WORD_SIZE,
    InstructionKind,
    Mnemonic,
    instruction_size,
    parse_mnemonic,
    split_statement,
)


logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"-?\d+")
_REPEAT_SEPARATOR = "*"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Statement:
    """
    One source line and its place in the memory image.

    Attributes:
        text: The raw source line
        index: 0-based position in the program
        address: Layout-time start address (0 until laid out)
        byte_size: Footprint in bytes (0 until laid out, and for blank lines)
    """
    text: str
    index: int
    address: int = 0
    byte_size: int = 0

    @property
    def line(self) -> int:
        """1-based line number for messages."""
        return self.index + 1


@dataclass(frozen=True)
class Label:
    """
    A named address.

    Attributes:
        name: Label text as written
        line: 0-based index of the defining statement
        address: Address of the defining statement
    """
    name: str
    line: int
    address: int


class SymbolTable:
    """
    Label name to Label mapping, in definition order.

    Example:
        >>> table = SymbolTable()
        >>> table.define(Label("ONE", 0, 0))
        >>> table.address_of("ONE")
        0
    """

    def __init__(self) -> None:
        self._labels: dict[str, Label] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._labels

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[Label]:
        return iter(self._labels.values())

    def define(self, label: Label) -> None:
        """
        Add a label.

        Raises:
            DuplicateLabelError: If the name is already defined
        """
        existing = self._labels.get(label.name)
        if existing is not None:
            raise DuplicateLabelError(label.name, label.line + 1, existing.line + 1)
        self._labels[label.name] = label

    def get(self, name: str) -> Optional[Label]:
        return self._labels.get(name)

    def address_of(self, name: str) -> Optional[int]:
        """Address of a label, or None if it is not defined."""
        label = self._labels.get(name)
        return label.address if label else None


@dataclass(frozen=True)
class Layout:
    """
    Hand-off from the layout pass to the execution engine.

    Attributes:
        statements: Every source line, with address and footprint resolved
        symbols: All labels defined by the program
        memory: The initial memory image
    """
    statements: tuple[Statement, ...]
    symbols: SymbolTable
    memory: MemoryImage = field(repr=False)

    @property
    def size(self) -> int:
        """Total footprint of the program in bytes."""
        return sum(stmt.byte_size for stmt in self.statements)


# =============================================================================
# Helper Functions
# =============================================================================

def parse_statements(source: str) -> list[Statement]:
    """Create one unresolved Statement per newline-separated source line."""
    return [Statement(text, index) for index, text in enumerate(source.split("\n"))]


def is_valid_label(name: str) -> bool:
    """Labels are made of ASCII letters and digits only."""
    return name.isascii() and name.isalnum()


def _parse_literal(text: str, line: int) -> int:
    match = _NUMBER_RE.search(text)
    if match is None:
        raise LiteralError(f'Expected a number in "{text}".', line)
    value = int(match.group())
    if not INT32_MIN <= value <= INT32_MAX:
        raise LiteralError(f"Value {value} does not fit in 32 bits.", line)
    return value


def _parse_count(text: str, line: int) -> int:
    if not text.isdigit():
        raise LiteralError(f'Repeat count "{text}" must be a non-negative integer.', line)
    return int(text)


def statement_index_for_address(
    statements: Sequence[Statement], address: int, line: int
) -> int:
    """
    Map a jump target address back to a statement index.

    Walks the statements accumulating footprints. The address must equal
    the start of a statement with a non-zero footprint.

    Args:
        statements: Laid-out statements
        address: Target byte address
        line: 1-based line of the jump, for error reporting

    Returns:
        Index of the target statement

    Raises:
        InvalidJumpTargetError: If the address falls inside a statement
            or past the end of the program
    """
    boundary = 0
    for index, stmt in enumerate(statements):
        if stmt.byte_size > 0 and address == boundary:
            return index
        if address < boundary:
            raise InvalidJumpTargetError(address, line)
        boundary += stmt.byte_size
    raise InvalidJumpTargetError(address, line)


# =============================================================================
# Layout Builder
# =============================================================================

class LayoutBuilder:
    """
    Runs the layout pass over a list of statements.

    A builder is single use: call build() once and keep the Layout.

    Usage:
        layout = LayoutBuilder(parse_statements(source)).build()
    """

    def __init__(self, statements: Sequence[Statement]):
        self._source = list(statements)
        self._resolved: list[Statement] = []
        self._symbols = SymbolTable()
        self._memory = MemoryImage()
        self._address = 0
        self._in_data_section = True

    def build(self) -> Layout:
        """
        Lay out every statement.

        Raises:
            PreprocessingError: On the first structural problem found
        """
        for stmt in self._source:
            size = self._layout_statement(stmt)
            self._resolved.append(
                dataclasses.replace(stmt, address=self._address, byte_size=size)
            )
            self._address += size

        logger.info(
            f"Layout complete: {len(self._resolved)} statements, "
            f"{len(self._symbols)} labels, {len(self._memory)} bytes"
        )
        return Layout(tuple(self._resolved), self._symbols, self._memory)

    def _layout_statement(self, stmt: Statement) -> int:
        tokens = tokenize(stmt.text)
        if not tokens:
            return 0

        label, name, operands = split_statement(tokens)
        if label is not None:
            self._define_label(label, stmt)

        mnemonic = parse_mnemonic(name)
        if mnemonic is None:
            raise UnknownInstructionError(name, stmt.line)

        if mnemonic.kind is InstructionKind.DATA:
            if not self._in_data_section:
                raise DataOrderError(tokens[0], stmt.line)
            size = self._layout_data(mnemonic, operands, stmt.line)
        else:
            self._in_data_section = False
            size = instruction_size(mnemonic)
            self._memory.reserve_instruction(size)

        logger.debug(f"Line {stmt.line}: {mnemonic} at {self._address}, {size} bytes")
        return size

    def _define_label(self, name: str, stmt: Statement) -> None:
        label = Label(name, stmt.index, self._address)
        self._symbols.define(label)
        if not is_valid_label(name):
            raise InvalidLabelError(name, stmt.line)
        logger.debug(f'Label "{name}" = {self._address}')

    def _layout_data(self, mnemonic: Mnemonic, operands: list[str], line: int) -> int:
        operand = "".join(operands)
        parts = operand.split(_REPEAT_SEPARATOR) if operand else []
        if len(parts) > 2:
            raise LiteralError(f'Malformed operand "{operand}".', line)

        if mnemonic is Mnemonic.DC:
            if not parts:
                raise LiteralError("DC requires a value.", line)
            count = _parse_count(parts[0], line) if len(parts) == 2 else 1
            value = _parse_literal(parts[-1], line)
            self._memory.append_words([value] * count)
            return count * WORD_SIZE

        # DS: zero-filled, one cell unless an explicit repeat count is given
        count = _parse_count(parts[0], line) if len(parts) == 2 else 1
        self._memory.reserve_data(count * WORD_SIZE)
        return count * WORD_SIZE


def build_layout(statements: Sequence[Statement]) -> Layout:
    """Run the layout pass. See LayoutBuilder."""
    return LayoutBuilder(statements).build()
