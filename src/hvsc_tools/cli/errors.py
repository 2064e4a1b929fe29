"""
CLI Error Handling
==================

Maps library exceptions to messages and exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from hvsc_tools.errors import HVSCError, HVSCIOError


class ExitCode(IntEnum):
    """Exit codes of hvscinfo."""
    SUCCESS = 0
    DATA_ERROR = 1       # Entry not found, invalid SID file, malformed record
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def exit_code_for(error: Exception) -> ExitCode:
    """Get the exit code hvscinfo uses for an exception."""
    if isinstance(error, HVSCIOError) and isinstance(
        error.__cause__, (FileNotFoundError, PermissionError, IsADirectoryError)
    ):
        return ExitCode.INVALID_ARGS
    if isinstance(error, HVSCError):
        return ExitCode.DATA_ERROR
    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print the full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "STIL")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    code = exit_code_for(error)

    if code == ExitCode.INTERNAL_ERROR:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
    else:
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)

    sys.exit(code)
