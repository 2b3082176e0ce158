"""Logging configuration for pocketbook.

- ``configure_logging(level)``: attach a single ``RichHandler`` to the
  ``pocketbook`` package logger. The first call installs the handler; later
  calls only change the level, so ``--verbose`` still takes effect after
  logging was set up from config.
- ``get_logger(name)``: acquire a module logger; installs a ``NullHandler``
  on the package logger until ``configure_logging`` runs.

Modules never attach handlers of their own.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_PKG_LOGGER_NAME = "pocketbook"
_ENV_LEVEL = "POCKETBOOK_LOG_LEVEL"
_handler: RichHandler | None = None


def parse_level(level: int | str | None) -> int:
    """Resolve a level given as int, name or numeric string.

    Falls back to ``POCKETBOOK_LOG_LEVEL`` and then WARNING when ``level`` is
    None or unrecognised.
    """
    for candidate in (level, os.getenv(_ENV_LEVEL)):
        if isinstance(candidate, int):
            return candidate
        if isinstance(candidate, str):
            name = candidate.strip().upper()
            if name.isdigit():
                return int(name)
            numeric = getattr(logging, name, None)
            if isinstance(numeric, int):
                return numeric
    return logging.WARNING


def configure_logging(level: int | str | None = None) -> None:
    """Configure the package logger, or change its level if already configured.

    Args:
        level: Logging level as int or level name. If None, uses the
            POCKETBOOK_LOG_LEVEL environment variable, otherwise WARNING.
    """
    global _handler

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    resolved = parse_level(level)

    if _handler is None:
        for handler in list(logger.handlers):
            if isinstance(handler, logging.NullHandler):
                logger.removeHandler(handler)

        _handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
        _handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(_handler)
        logger.propagate = False

    _handler.setLevel(resolved)
    logger.setLevel(resolved)


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, silent until logging is configured."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
