"""
Text Rendering of Machine State
===============================

Plain-text views of the registers, flags, memory image, symbol table and
program listing. Used by the command-line tools; any front end can use
them as a reference layout.

Example output of format_memory():

    0000  00 00 00 0A  DDDD
    0004  .. .. .. ..  IIII
"""

from typing import Iterable, Optional, Sequence

from ibmasm.layout import Statement, SymbolTable
from ibmasm.memory import ByteKind, MemoryImage
from ibmasm.registers import Flags, RegisterFile


def format_flags(flags: Flags) -> str:
    """Format flags as 'ZF=1 SF=0'."""
    zf = 1 if flags & Flags.ZF else 0
    sf = 1 if flags & Flags.SF else 0
    return f"ZF={zf} SF={sf}"


def format_registers(registers: RegisterFile | Sequence[int]) -> str:
    """
    One row per register with signed decimal and 32-bit hex.

    Example:
        R0  =          10  0x0000000A
    """
    lines = []
    for index, value in enumerate(registers):
        lines.append(f"R{index:<2} = {value:>11}  0x{value & 0xFFFFFFFF:08X}")
    return "\n".join(lines)


def format_memory(memory: MemoryImage, width: int = 4) -> str:
    """
    Hex dump of the memory image.

    Each row shows the start address, the byte values and a tag string
    ('D' for data, 'I' for instruction). Instruction placeholders print
    as '..' since they hold no value.

    Args:
        memory: Memory image to dump
        width: Bytes per row
    """
    cells = list(memory)
    lines = []
    for start in range(0, len(cells), width):
        row = cells[start:start + width]
        values = " ".join(
            f"{cell.value:02X}" if cell.kind is ByteKind.DATA else ".."
            for cell in row
        )
        tags = "".join("D" if cell.kind is ByteKind.DATA else "I" for cell in row)
        lines.append(f"{start:04X}  {values:<{width * 3 - 1}}  {tags}")
    return "\n".join(lines)


def format_symbols(symbols: SymbolTable) -> str:
    """Label, address and defining line, in definition order."""
    lines = [f"{'LABEL':<12} {'ADDR':>6}  LINE"]
    for label in symbols:
        lines.append(f"{label.name:<12} {label.address:>6}  {label.line + 1}")
    return "\n".join(lines)


def format_listing(
    statements: Iterable[Statement], current_line: Optional[int] = None
) -> str:
    """
    Program listing: line, address, footprint and source text.

    Args:
        statements: Laid-out statements
        current_line: 0-based index to mark with '>'
    """
    lines = []
    for stmt in statements:
        marker = ">" if stmt.index == current_line else " "
        address = f"{stmt.address:04X}" if stmt.byte_size else "    "
        lines.append(f"{marker}{stmt.line:>4}  {address}  {stmt.byte_size:>3}  {stmt.text}")
    return "\n".join(lines)
