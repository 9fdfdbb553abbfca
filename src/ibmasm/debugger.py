"""
Debugger Session
================

Line-by-line driver around an Interpreter, for editors and other front
ends that highlight the current line and redraw registers and memory
after every step.

The session supports:
- Single stepping (one statement per call)
- Running until a breakpoint line, the end of the program, or a step limit
- Reloading a new program (a fresh Interpreter replaces the old one)
- An execution history of the lines that ran, for highlighting

Example usage:
    >>> from ibmasm.debugger import Debugger, StopReason
    >>> dbg = Debugger(source)
    >>> dbg.add_breakpoint(4)
    >>> event = dbg.run()
    >>> if event.reason == StopReason.BREAKPOINT:
    ...     print(f"Stopped before line {event.line}")

Errors raised by a step propagate from step(); run() reports them as an
ERROR event instead, keeping the state exactly as it was when the fault
occurred.

Copyright (c) 2026 ibmasm Contributors
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ibmasm.errors import AsmError
from ibmasm.interpreter import Interpreter, InterpreterConfig, MachineState


logger = logging.getLogger(__name__)


class StopReason(Enum):
    """
    Why a step or run stopped.
    """
    STEP = auto()        # Single step finished
    BREAKPOINT = auto()  # Next statement is on a breakpoint line
    END = auto()         # Program ran past its last statement
    LIMIT = auto()       # Step budget or execution ceiling reached
    ERROR = auto()       # A step raised an AsmError


@dataclass
class StopEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        line: 1-based line of the next statement (or of the fault)
        address: Address of the next statement
        message: Human-readable description
        error: The exception, for ERROR events
    """
    reason: StopReason
    line: Optional[int] = None
    address: Optional[int] = None
    message: str = ""
    error: Optional[AsmError] = None

    def __str__(self) -> str:
        if self.message:
            return self.message
        match self.reason:
            case StopReason.STEP:
                return f"Step to line {self.line}"
            case StopReason.BREAKPOINT:
                return f"Breakpoint at line {self.line}"
            case StopReason.END:
                return "Program finished"
            case StopReason.LIMIT:
                return "Step limit reached"
            case StopReason.ERROR:
                return "Runtime error"
            case _:
                return "Unknown"


class Debugger:
    """
    Interactive execution session for one program at a time.

    The layout pass runs when a program is loaded, so preprocessing
    errors surface from the constructor and from reload().

    Attributes:
        config: Interpreter settings used for every loaded program
        interpreter: The current Interpreter
        history: 1-based lines executed since the program was loaded
    """

    def __init__(self, source: str, config: Optional[InterpreterConfig] = None):
        self.config = config or InterpreterConfig()
        self._breakpoints: set[int] = set()
        self.history: list[int] = []
        self.interpreter = self._load(source)

    def _load(self, source: str) -> Interpreter:
        interpreter = Interpreter(source, self.config)
        interpreter.preprocess()
        return interpreter

    def reload(self, source: str) -> None:
        """
        Replace the program with a new one.

        Breakpoints on lines that no longer exist are dropped.

        Raises:
            PreprocessingError: If the new program fails the layout pass
        """
        self.interpreter = self._load(source)
        self.history = []
        count = len(self.interpreter.statements)
        self._breakpoints = {line for line in self._breakpoints if line <= count}
        logger.debug(f"Reloaded program with {count} lines")

    # ========================================
    # State
    # ========================================

    @property
    def current_line(self) -> Optional[int]:
        """1-based line of the next statement, or None at the end."""
        if self.interpreter.is_at_end():
            return None
        return self.interpreter.current_line + 1

    @property
    def is_finished(self) -> bool:
        return self.interpreter.is_at_end()

    def snapshot(self) -> MachineState:
        return self.interpreter.snapshot()

    # ========================================
    # Breakpoints
    # ========================================

    @property
    def breakpoints(self) -> list[int]:
        """Breakpoint lines, sorted."""
        return sorted(self._breakpoints)

    def add_breakpoint(self, line: int) -> None:
        """
        Stop run() before executing the given 1-based line.

        Raises:
            ValueError: If the line is not part of the program
        """
        count = len(self.interpreter.statements)
        if not 1 <= line <= count:
            raise ValueError(f"Line {line} is outside the program (1-{count})")
        self._breakpoints.add(line)

    def remove_breakpoint(self, line: int) -> None:
        self._breakpoints.discard(line)

    def clear_breakpoints(self) -> None:
        self._breakpoints.clear()

    # ========================================
    # Execution control
    # ========================================

    def _event(self, reason: StopReason, message: str = "") -> StopEvent:
        interp = self.interpreter
        return StopEvent(
            reason,
            line=self.current_line,
            address=None if interp.is_at_end() else interp.current_address,
            message=message,
        )

    def step(self) -> StopEvent:
        """
        Execute exactly one statement.

        Returns:
            StopEvent with reason STEP, or END once the program is finished

        Raises:
            AsmError: If the statement faults
        """
        if self.interpreter.is_at_end():
            return self._event(StopReason.END)

        line = self.interpreter.current_line + 1
        self.interpreter.interpret_next_line()
        self.history.append(line)

        if self.interpreter.is_at_end():
            return self._event(StopReason.END)
        return self._event(StopReason.STEP)

    def run(self, max_steps: Optional[int] = None) -> StopEvent:
        """
        Run until a breakpoint, the end, a fault or the step limit.

        The statement under the current position is always executed, so
        calling run() again after a breakpoint makes progress.

        Args:
            max_steps: Step budget for this call (default: config.max_steps).
                The interpreter's overall execution ceiling also applies.

        Returns:
            StopEvent describing why execution stopped
        """
        budget = self.config.max_steps if max_steps is None else max_steps
        interp = self.interpreter
        taken = 0

        try:
            while not interp.is_at_end():
                if taken >= budget or interp.executed_steps >= self.config.max_steps:
                    return self._event(
                        StopReason.LIMIT,
                        f"Stopped after {taken} steps ({interp.executed_steps} in total)",
                    )
                line = interp.current_line + 1
                if taken > 0 and line in self._breakpoints:
                    return self._event(StopReason.BREAKPOINT)
                interp.interpret_next_line()
                self.history.append(line)
                taken += 1
        except AsmError as e:
            logger.info(f"Run stopped by error: {e}")
            return StopEvent(
                StopReason.ERROR,
                line=e.line,
                address=interp.current_address,
                message=str(e),
                error=e,
            )

        return self._event(StopReason.END)
