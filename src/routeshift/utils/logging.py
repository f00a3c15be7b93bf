"""Logging setup for routeshift.

Analyzer results are written to stdout as JSON, so every log record goes to
stderr through a single rich handler attached to the ``routeshift`` logger.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "routeshift"

_handler: Optional[RichHandler] = None


def _build_handler(format_string: Optional[str]) -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(format_string or "%(message)s"))
    return handler


def configure_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
) -> None:
    """Configure logging for the command line.

    The handler is installed once; later calls only change the level, so
    repeated invocations in one process (tests, embedding) stay quiet.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Optional custom format string for the first call.
    """
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)

    if _handler is None:
        _handler = _build_handler(format_string)
        package_logger.addHandler(_handler)
        # Records stop here instead of reaching the root logger
        package_logger.propagate = False

    package_logger.setLevel(level.upper())


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance under the routeshift hierarchy.
    """
    return logging.getLogger(name)


def enable_debug_logging() -> None:
    """Switch every routeshift logger to DEBUG."""
    configure_logging("DEBUG")
