"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from spanops.cli.common.output import out

EXIT_MISMATCH = 1
EXIT_SETUP = 2
EXIT_PROVISIONING = 3


def die(msg: str, code: int = EXIT_SETUP) -> NoReturn:
    """Exit with an error message; setup errors are the default."""
    out.error(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Print an error message and exit, chaining the original exception."""
    out.error(message)
    raise typer.Exit(code) from exc
