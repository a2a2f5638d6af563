"""
Unified CLI Error Handling
==========================

Provides consistent error handling and exit codes across all CLI tools.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from chip8_vm.errors import Chip8Error, ExecutionError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    EMULATION_ERROR = 1  # Fatal execution error or unusable program
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


def parse_address(value: str) -> int:
    """
    Parse an address given as 0x-prefixed hex, $-prefixed hex, or decimal.

    Raises:
        click.BadParameter: If the value is not a number in 0-4095
    """
    try:
        if value.lower().startswith("0x"):
            address = int(value, 16)
        elif value.startswith("$"):
            address = int(value[1:], 16)
        else:
            address = int(value)
    except ValueError:
        raise click.BadParameter(f"Invalid address '{value}'")

    if not 0 <= address <= 0xFFF:
        raise click.BadParameter("Address must be 0-4095 (0x000-0xFFF)")
    return address


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for all CLI tools.

    Formats the error message, optionally prints a traceback for internal
    errors in verbose mode, and exits with the matching exit code.

    Raises:
        SystemExit: Always
    """
    if isinstance(error, ExecutionError):
        click.echo(f"Emulation error: {error}", err=True)
        sys.exit(ExitCode.EMULATION_ERROR)

    elif isinstance(error, Chip8Error):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.EMULATION_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
