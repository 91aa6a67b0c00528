"""Logging configuration for rem.

Library modules log through ``logging.getLogger(__name__)`` under the ``rem``
namespace and never configure handlers. The command surface calls
configure_logging() once to route those records to stderr through rich.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "rem-stderr"


def configure_logging(level: str | int = logging.WARNING, console: Console | None = None) -> logging.Handler:
    """Attach a RichHandler on stderr to the ``rem`` logger.

    Idempotent: a second call only adjusts the level.

    Args:
        level: Level name or number for the ``rem`` logger.
        console: Console to render to (defaults to a stderr console).

    Returns:
        The installed handler.
    """
    logger = logging.getLogger("rem")
    logger.setLevel(level)

    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)
            return handler

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="%H:%M:%S"))
    logger.addHandler(handler)
    return handler


def enable_debug_mode() -> None:
    """Shortcut for ``configure_logging(logging.DEBUG)``."""
    configure_logging(logging.DEBUG)
