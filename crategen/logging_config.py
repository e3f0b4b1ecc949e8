"""Logging configuration for crategen.

All modules obtain their logger through :func:`get_logger` so that output
can be configured in one place. Console output goes through rich.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "crategen"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the crategen namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> None:
    """Install a rich handler on the crategen root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ...).
        console: Console to log to. Defaults to stderr.
    """
    global _configured

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level.upper())

    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    _configured = True
