"""
Execution Engine
================

Runs a laid-out program one statement at a time.

Each step re-tokenizes the current source statement, determines its
mnemonic (skipping an optional leading label) and dispatches on the
instruction kind:

- **Register-register** (AR, SR, MR, DR, CR, LR): ``r1 , r2``
- **Register-memory** (A, S, M, D, C, L, ST, LA): ``r1 , address``
- **Jump** (J, JP, JN, JZ): ``address``
- **Data** (DC, DS): no-op when executed

Flags
-----
Every instruction that writes a register (and ST) recomputes the Zero and
Sign flags from the register's new value. CR sets them from ``r1 - r2``
and writes nothing. C first sets them from ``r1 - memory`` and then
overwrites them from ``r1`` itself, so after C the flags describe the
register, not the difference.

D and DR round the quotient toward negative infinity. A zero divisor is
not an error: the register receives 0 (so Zero is set) and execution goes
on.

Jumps
-----
    J   always
    JP  Sign clear
    JN  Sign set
    JZ  Zero set

The target is resolved and validated before the condition is tested, so an
invalid target is an error even for a jump that would not be taken.

Example
-------
>>> from ibmasm import Interpreter
>>> interp = Interpreter("ONE DC INTEGER(10)\\n A 0, ONE")
>>> interp.interpret()
>>> interp.registers[0]
10

Copyright (c) 2026 ibmasm Contributors
"""

import logging
import operator
import re
from dataclasses import dataclass
from typing import Callable, Optional

from ibmasm.errors import (
    ExecutionLimitError,
    InvalidInstructionError,
    OperandError,
    UndefinedLabelError,
)
from ibmasm.layout import (
    Layout,
    Statement,
    SymbolTable,
    build_layout,
    parse_statements,
    statement_index_for_address,
)
from ibmasm.lexer import SEPARATOR, tokenize
from ibmasm.memory import ByteKind, MemoryImage
from ibmasm.opcodes import InstructionKind, Mnemonic, parse_mnemonic, split_statement
from ibmasm.registers import REGISTER_COUNT, Flags, RegisterFile


logger = logging.getLogger(__name__)

MAX_STEPS = 1000

_DIGITS_RE = re.compile(r"[0-9]+")
_INDIRECT_RE = re.compile(r"0\(([0-9]+)\)")

_ARITHMETIC: dict[Mnemonic, Callable[[int, int], int]] = {
    Mnemonic.AR: operator.add,
    Mnemonic.SR: operator.sub,
    Mnemonic.MR: operator.mul,
    Mnemonic.DR: operator.floordiv,
    Mnemonic.A: operator.add,
    Mnemonic.S: operator.sub,
    Mnemonic.M: operator.mul,
    Mnemonic.D: operator.floordiv,
}


@dataclass(frozen=True)
class InterpreterConfig:
    """
    Interpreter settings.

    Attributes:
        max_steps: Execution ceiling for a full run
        register_count: Number of general-purpose registers
    """
    max_steps: int = MAX_STEPS
    register_count: int = REGISTER_COUNT


@dataclass(frozen=True)
class MachineState:
    """
    Immutable snapshot of everything a display needs.

    Attributes:
        registers: Register values
        flags: Condition flags
        memory: Raw memory byte values
        memory_kinds: Tag of each memory byte
        current_line: 0-based index of the next statement to execute
        current_address: Address of the next statement
        executed_steps: Steps taken so far
        at_end: True once execution has passed the last statement
    """
    registers: tuple[int, ...]
    flags: Flags
    memory: bytes
    memory_kinds: tuple[ByteKind, ...]
    current_line: int
    current_address: int
    executed_steps: int
    at_end: bool


class Interpreter:
    """
    Two-stage interpreter: layout pass, then statement execution.

    One instance holds one program. To load another program, construct a
    new Interpreter rather than resetting this one.

    Attributes:
        config: Settings in effect
        registers: The register file (flags live on it)
        memory: The memory image (empty until preprocess())
        symbols: Labels (empty until preprocess())
        current_line: 0-based index of the next statement
        current_address: Start address of the next statement
        executed_steps: Steps taken, including no-op steps
    """

    def __init__(self, source: str, config: Optional[InterpreterConfig] = None):
        self.config = config or InterpreterConfig()
        self._source_statements = parse_statements(source)
        self._statements: tuple[Statement, ...] = tuple(self._source_statements)
        self._layout: Optional[Layout] = None

        self.registers = RegisterFile(self.config.register_count)
        self.memory = MemoryImage()
        self.symbols = SymbolTable()
        self.current_line = 0
        self.current_address = 0
        self.executed_steps = 0

        # on_step(statement) is called after each executed statement
        self.on_step: Optional[Callable[[Statement], None]] = None

    def __repr__(self) -> str:
        return (
            f"Interpreter(line={self.current_line}, address={self.current_address}, "
            f"steps={self.executed_steps}, statements={len(self._statements)})"
        )

    # ========================================
    # Readable state
    # ========================================

    @property
    def statements(self) -> tuple[Statement, ...]:
        return self._statements

    @property
    def flags(self) -> Flags:
        return self.registers.flags

    @property
    def layout(self) -> Optional[Layout]:
        """The layout built by the last preprocess(), if any."""
        return self._layout

    def is_at_end(self) -> bool:
        """True once position has passed the last statement."""
        return self.current_line >= len(self._statements)

    def snapshot(self) -> MachineState:
        """Capture the current machine state."""
        return MachineState(
            registers=self.registers.as_tuple(),
            flags=self.registers.flags,
            memory=self.memory.values(),
            memory_kinds=self.memory.kinds(),
            current_line=self.current_line,
            current_address=self.current_address,
            executed_steps=self.executed_steps,
            at_end=self.is_at_end(),
        )

    # ========================================
    # Public operations
    # ========================================

    def preprocess(self) -> Layout:
        """
        Run the layout pass and position execution at the first statement.

        Returns:
            The new Layout

        Raises:
            PreprocessingError: On the first structural problem found
        """
        layout = build_layout(self._source_statements)
        self._layout = layout
        self._statements = layout.statements
        self.symbols = layout.symbols
        self.memory = layout.memory
        self.current_line = 0
        self.current_address = 0
        return layout

    def interpret(self) -> None:
        """
        Lay out the program and run it to completion.

        Raises:
            PreprocessingError: If the layout pass fails
            RuntimeError: On any execution fault
            ExecutionLimitError: If the step ceiling is reached
        """
        self.preprocess()
        limit = self.config.max_steps
        while not self.is_at_end() and self.executed_steps < limit:
            self.interpret_next_line()

        if self.executed_steps >= limit:
            logger.warning(f"Execution ceiling of {limit} steps reached")
            line = None if self.is_at_end() else self.current_line + 1
            raise ExecutionLimitError(limit, line)
        logger.info(f"Program finished after {self.executed_steps} steps")

    def interpret_next_line(self) -> None:
        """
        Execute the current statement and advance.

        Runs the layout pass first if it has not been run. Past the end of
        the program this only counts the step.

        Raises:
            RuntimeError: On any execution fault in the current statement
        """
        if self._layout is None:
            self.preprocess()

        self.executed_steps += 1
        if self.is_at_end():
            return

        stmt = self._statements[self.current_line]
        self._execute(stmt)
        if self.on_step is not None:
            self.on_step(stmt)

    def _execute(self, stmt: Statement) -> None:
        tokens = tokenize(stmt.text)
        if not tokens:
            self._advance(stmt)
            return

        _, name, operands = split_statement(tokens)
        mnemonic = parse_mnemonic(name)
        if mnemonic is None:
            raise InvalidInstructionError(name, stmt.line)

        logger.debug(f"Line {stmt.line} @{self.current_address}: {mnemonic} {' '.join(operands)}")

        kind = mnemonic.kind
        if kind is InstructionKind.REGISTER_REGISTER:
            self._execute_rr(mnemonic, operands, stmt.line)
        elif kind is InstructionKind.REGISTER_MEMORY:
            self._execute_rm(mnemonic, operands, stmt.line)
        elif kind is InstructionKind.JUMP:
            if self._execute_jump(mnemonic, operands, stmt.line):
                return

        self._advance(stmt)

    # ========================================
    # Operand decoding
    # ========================================

    def _advance(self, stmt: Statement) -> None:
        self.current_address += stmt.byte_size
        self.current_line += 1

    def _register(self, token: str, line: int) -> int:
        if _DIGITS_RE.fullmatch(token) is None or not self.registers.is_valid(int(token)):
            raise OperandError(f'Invalid register "{token}".', line)
        return int(token)

    def _register_pair(self, mnemonic: Mnemonic, operands: list[str], line: int) -> tuple[int, str]:
        """Decode ``r1 , operand`` and return (r1, operand token)."""
        if len(operands) != 3:
            raise OperandError(
                f'Wrong number of arguments for instruction "{mnemonic}" '
                f'(expected "{mnemonic} r1, operand").',
                line,
            )
        first, separator, second = operands
        if separator != SEPARATOR:
            raise OperandError(
                f'Expected "," between arguments of instruction {mnemonic}.', line
            )
        return self._register(first, line), second

    def resolve_address(self, token: str, line: int) -> int:
        """
        Resolve an address expression.

        Forms:
            123    absolute address
            0(r)   value held in register r
            NAME   address of a label

        Raises:
            OperandError: If 0(r) names an invalid register
            UndefinedLabelError: If NAME is not a defined label
        """
        if _DIGITS_RE.fullmatch(token):
            return int(token)

        match = _INDIRECT_RE.fullmatch(token)
        if match:
            return self.registers[self._register(match.group(1), line)]

        address = self.symbols.address_of(token)
        if address is None:
            raise UndefinedLabelError(token, line)
        return address

    def _combine(self, mnemonic: Mnemonic, left: int, right: int) -> int:
        if mnemonic in (Mnemonic.DR, Mnemonic.D) and right == 0:
            # no quotient: the register gets 0 and execution goes on
            logger.debug(f'Division by zero in "{mnemonic}", result is 0')
            return 0
        return _ARITHMETIC[mnemonic](left, right)

    # ========================================
    # Instruction handlers
    # ========================================

    def _execute_rr(self, mnemonic: Mnemonic, operands: list[str], line: int) -> None:
        regs = self.registers
        r1, second = self._register_pair(mnemonic, operands, line)
        r2 = self._register(second, line)

        if mnemonic is Mnemonic.CR:
            regs.update_flags(regs[r1] - regs[r2])
            return

        if mnemonic is Mnemonic.LR:
            regs[r1] = regs[r2]
        else:
            regs[r1] = self._combine(mnemonic, regs[r1], regs[r2])
        regs.update_flags(regs[r1])

    def _execute_rm(self, mnemonic: Mnemonic, operands: list[str], line: int) -> None:
        regs = self.registers
        r1, second = self._register_pair(mnemonic, operands, line)
        address = self.resolve_address(second, line)

        if mnemonic is Mnemonic.LA:
            regs[r1] = address
        elif mnemonic is Mnemonic.ST:
            self.memory.write_word(address, regs[r1], line)
        elif mnemonic is Mnemonic.L:
            regs[r1] = self.memory.read_word(address, line)
        elif mnemonic is Mnemonic.C:
            regs.update_flags(regs[r1] - self.memory.read_word(address, line))
            # second write: flags end up describing r1 alone
            regs.update_flags(regs[r1])
            return
        else:
            word = self.memory.read_word(address, line)
            regs[r1] = self._combine(mnemonic, regs[r1], word)
        regs.update_flags(regs[r1])

    def _execute_jump(self, mnemonic: Mnemonic, operands: list[str], line: int) -> bool:
        """Returns True if the jump was taken."""
        if len(operands) != 1:
            raise OperandError(
                f'Instruction "{mnemonic}" accepts only one argument '
                f'"{mnemonic} <memory address>".',
                line,
            )
        address = self.resolve_address(operands[0], line)
        target = statement_index_for_address(self._statements, address, line)

        if not self._condition_holds(mnemonic):
            return False

        logger.debug(f"Line {line}: {mnemonic} taken to line {target + 1} @{address}")
        self.current_line = target
        self.current_address = address
        return True

    def _condition_holds(self, mnemonic: Mnemonic) -> bool:
        match mnemonic:
            case Mnemonic.J:
                return True
            case Mnemonic.JP:
                return not self.registers.sign
            case Mnemonic.JN:
                return self.registers.sign
            case Mnemonic.JZ:
                return self.registers.zero
            case _:
                return False
