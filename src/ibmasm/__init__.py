"""
ibmasm - Assembler and Interpreter for a Small IBM-Style Instruction Set
========================================================================

This package lays out and runs programs written in a small subset of IBM
mainframe assembler: 16 signed 32-bit registers, a byte-addressable memory
image, Zero/Sign condition flags, and register-register, register-memory
and jump instructions.

Main Components
---------------
- **lexer**: splits a source line into tokens
- **layout**: the layout pass (labels, footprints, memory image)
- **interpreter**: the execution engine
- **debugger**: line-by-line session with breakpoints
- **listing**: text rendering of registers, memory and symbols

Quick Start
-----------
Run a program:
    >>> from ibmasm import Interpreter
    >>> interp = Interpreter('''
    ... TEN   DC INTEGER(10)
    ...       L  1, TEN
    ...       AR 1, 1
    ... ''')
    >>> interp.interpret()
    >>> interp.registers[1]
    20

Step through it:
    >>> interp = Interpreter(source)
    >>> interp.preprocess()
    >>> while not interp.is_at_end():
    ...     interp.interpret_next_line()

Or use the command-line tool:
    $ ibmasm run program.asm
    $ ibmasm layout program.asm

Version History
---------------
1.0.0 - Initial release with layout pass, interpreter, debugger and CLI

Copyright (c) 2026 ibmasm Contributors
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ibmasm.debugger import Debugger, StopEvent, StopReason
from ibmasm.errors import (
    AsmError,
    PreprocessingError,
    DuplicateLabelError,
    InvalidLabelError,
    UnknownInstructionError,
    DataOrderError,
    LiteralError,
    RuntimeError as AsmRuntimeError,  # Avoid collision with builtin
    OperandError,
    InvalidInstructionError,
    UndefinedLabelError,
    InvalidJumpTargetError,
    MemoryAccessError,
    ExecutionLimitError,
)
from ibmasm.interpreter import Interpreter, InterpreterConfig, MachineState, MAX_STEPS
from ibmasm.layout import (
    Label,
    Layout,
    LayoutBuilder,
    Statement,
    SymbolTable,
    build_layout,
    parse_statements,
    statement_index_for_address,
)
from ibmasm.lexer import strip_comment, tokenize
from ibmasm.memory import Byte, ByteKind, MemoryImage, decode_word, encode_word
from ibmasm.opcodes import InstructionKind, Mnemonic
from ibmasm.registers import Flags, RegisterFile

__all__ = [
    "__version__",
    # Interpreter
    "Interpreter",
    "InterpreterConfig",
    "MachineState",
    "MAX_STEPS",
    "Debugger",
    "StopEvent",
    "StopReason",
    # Layout
    "Label",
    "Layout",
    "LayoutBuilder",
    "Statement",
    "SymbolTable",
    "build_layout",
    "parse_statements",
    "statement_index_for_address",
    # Lexer / instruction set
    "strip_comment",
    "tokenize",
    "InstructionKind",
    "Mnemonic",
    # Machine state
    "Byte",
    "ByteKind",
    "MemoryImage",
    "decode_word",
    "encode_word",
    "Flags",
    "RegisterFile",
    # Exception hierarchy
    "AsmError",
    "PreprocessingError",
    "DuplicateLabelError",
    "InvalidLabelError",
    "UnknownInstructionError",
    "DataOrderError",
    "LiteralError",
    "AsmRuntimeError",
    "OperandError",
    "InvalidInstructionError",
    "UndefinedLabelError",
    "InvalidJumpTargetError",
    "MemoryAccessError",
    "ExecutionLimitError",
]
