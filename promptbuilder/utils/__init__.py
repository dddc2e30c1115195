"""Utility functions for One-Prompt Builder."""

from promptbuilder.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
