"""
ibmasm - Assembler/Interpreter Command-Line Interface
=====================================================

Usage Examples
--------------
Run a program and print the final registers:
    $ ibmasm run sum.asm

Trace every executed statement:
    $ ibmasm run --trace sum.asm

Show the memory layout without running anything:
    $ ibmasm layout sum.asm

Stop at breakpoints on lines 5 and 9:
    $ ibmasm debug -b 5 -b 9 sum.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ibmasm import __version__
from ibmasm.cli.errors import handle_cli_exception
from ibmasm.debugger import Debugger, StopReason
from ibmasm.errors import AsmError, ExecutionLimitError
from ibmasm.interpreter import MAX_STEPS, Interpreter, InterpreterConfig
from ibmasm.layout import Statement
from ibmasm.listing import (
    format_flags,
    format_listing,
    format_memory,
    format_registers,
    format_symbols,
)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores common options like verbosity.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def read_source(path: Path) -> str:
    """Read a program, normalizing line endings to '\\n'."""
    return path.read_text(encoding="utf-8").replace("\r\n", "\n")


def echo_state(interp: Interpreter, show_memory: bool = False) -> None:
    """Print registers and flags, and optionally the memory image."""
    click.echo(format_registers(interp.registers))
    click.echo(format_flags(interp.flags))
    if show_memory:
        click.echo()
        click.echo(format_memory(interp.memory))


source_argument = click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)

max_steps_option = click.option(
    "-n", "--max-steps",
    type=click.IntRange(min=1),
    default=MAX_STEPS,
    show_default=True,
    help="Execution ceiling (steps before the run is considered an infinite loop)",
)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="ibmasm")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Assemble and interpret programs for a small IBM-style instruction set.

    \b
    Instruction set:
        RR:   AR SR MR DR CR LR      (r1, r2)
        RM:   A S M D C L ST LA      (r1, address)
        Jump: J JP JN JZ             (address)
        Data: DC DS                  (INTEGER(v), n*INTEGER(v))
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Commands
# =============================================================================

@main.command()
@source_argument
@max_steps_option
@click.option("-t", "--trace", is_flag=True, help="Print each statement and the registers after it runs")
@click.option("-m", "--memory", is_flag=True, help="Also print the final memory image")
@pass_context
def run(
    ctx: Context,
    input_file: Path,
    max_steps: int,
    trace: bool,
    memory: bool,
) -> None:
    """
    Run INPUT_FILE to completion and print the final state.
    """
    interp: Optional[Interpreter] = None
    try:
        interp = Interpreter(read_source(input_file), InterpreterConfig(max_steps=max_steps))
        if trace:
            def on_step(stmt: Statement) -> None:
                click.echo(format_listing([stmt]))
                click.echo(format_flags(interp.flags) + "  " + " ".join(
                    f"R{i}={v}" for i, v in enumerate(interp.registers) if v
                ))
            interp.on_step = on_step

        interp.interpret()
        echo_state(interp, memory)
        if ctx.verbose:
            click.echo(f"Executed {interp.executed_steps} steps")

    except AsmError as e:
        if interp is not None and interp.layout is not None:
            echo_state(interp, memory)
        handle_cli_exception(e, verbose=ctx.verbose)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


@main.command()
@source_argument
@pass_context
def layout(ctx: Context, input_file: Path) -> None:
    """
    Run the layout pass on INPUT_FILE and print listing, symbols and memory.
    """
    try:
        interp = Interpreter(read_source(input_file))
        result = interp.preprocess()

        click.echo(format_listing(result.statements))
        click.echo()
        click.echo(format_symbols(result.symbols))
        click.echo()
        click.echo(format_memory(result.memory))
        if ctx.verbose:
            click.echo(f"Program size: {result.size} bytes")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


@main.command()
@source_argument
@max_steps_option
@click.option(
    "-b", "--break", "breaks",
    multiple=True,
    type=click.IntRange(min=1),
    help="Stop before executing this 1-based line (can be repeated)",
)
@pass_context
def debug(ctx: Context, input_file: Path, max_steps: int, breaks: tuple[int, ...]) -> None:
    """
    Run INPUT_FILE under the debugger, printing state at every breakpoint.
    """
    try:
        dbg = Debugger(read_source(input_file), InterpreterConfig(max_steps=max_steps))
        for line in breaks:
            dbg.add_breakpoint(line)

        while True:
            event = dbg.run()
            click.echo(f"-- {event}")
            if event.reason is StopReason.BREAKPOINT:
                click.echo(format_listing(dbg.interpreter.statements, dbg.interpreter.current_line))
                echo_state(dbg.interpreter)
                continue
            break

        echo_state(dbg.interpreter)
        if event.reason is StopReason.ERROR:
            handle_cli_exception(event.error, verbose=ctx.verbose)
        if event.reason is StopReason.LIMIT:
            handle_cli_exception(
                ExecutionLimitError(max_steps, dbg.current_line), verbose=ctx.verbose
            )

    except ValueError as e:
        handle_cli_exception(click.BadParameter(str(e)), verbose=ctx.verbose)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


if __name__ == "__main__":
    main()
