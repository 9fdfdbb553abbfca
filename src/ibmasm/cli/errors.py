"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes across all commands.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from ibmasm.errors import AsmError, PreprocessingError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    PROGRAM_ERROR = 1    # Preprocessing or runtime error in the program
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for all commands.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, AsmError):
        kind = "Preprocessing" if isinstance(error, PreprocessingError) else "Runtime"
        click.echo(f"{kind} error: {error}", err=True)
        sys.exit(ExitCode.PROGRAM_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
