"""Logging setup for spanops.

Core modules log through ``logging.getLogger(__name__)``; the CLI calls
``setup_logging`` once to render those records through Rich.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "spanops"

_handler: RichHandler | None = None


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """
    Attach a single RichHandler to the ``spanops`` logger.

    Calling this again only adjusts the level; it never stacks handlers.
    """
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    if _handler is None:
        _handler = RichHandler(
            console=console,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        logger.addHandler(_handler)
        logger.propagate = False

    _handler.setLevel(level)
    return logger


def reset_logging() -> None:
    """Remove the installed handler. Mainly for tests."""
    global _handler

    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
