"""Minimal logging utilities for pugsrc.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from pugsrc.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Generating source")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "pugsrc." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'pugsrc.mymodule'
    """
    if not (name == "pugsrc" or name.startswith("pugsrc.")):
        name = f"pugsrc.{name}"
    return logging.getLogger(name)
