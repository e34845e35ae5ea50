"""
CLI Error Handling
==================

Provides consistent error handling and exit codes for the command-line
tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    PARSE_ERROR = 1      # Syntax errors (strict mode)
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    from kaleidoscope.frontend.errors import OperatorDefinitionError, ParseFailedError

    if isinstance(error, OperatorDefinitionError):
        # Bad -O/--operator value
        click.echo(f"Error: {error.message}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, ParseFailedError):
        # Strict mode; each error was printed as it was recovered
        click.echo(error.summary, err=True)
        sys.exit(ExitCode.PARSE_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
