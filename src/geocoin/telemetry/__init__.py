"""Logging setup for the command-line surfaces."""

from .logging import configure_logging

__all__ = ["configure_logging"]
