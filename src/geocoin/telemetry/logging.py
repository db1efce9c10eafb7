"""Structured logging sink for game events."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_ROOT_LOGGER = "geocoin"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a rich console handler to the ``geocoin`` logger tree once."""
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level.upper())
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
