"""Centralized logging configuration.

All modules should use `get_logger(__name__)` to obtain a logger instance.
Records go to stderr through rich so they never mix with command output.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER = "safespender"
_initialized = False


def configure_logging(level: str = "WARNING") -> None:
    """Attach the rich handler once and set the package log level."""
    global _initialized
    root = logging.getLogger(_ROOT_LOGGER)
    root.setLevel(level.upper())
    if _initialized:
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A logging.Logger under the package logger.
    """
    return logging.getLogger(name)
