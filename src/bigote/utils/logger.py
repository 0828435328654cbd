"""Minimal logging utilities for bigote.

Provides a get_logger function that namespaces standard library loggers
under "bigote". Diagnostics are silent unless the application configures
a handler, or injects its own logger through ParseConfig.logger.

Example:
    >>> from bigote.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsing template")
"""

from __future__ import annotations

import logging

# Library convention: never emit output unless the application asks for it.
logging.getLogger("bigote").addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "bigote." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'bigote.mymodule'
    """
    if not (name == "bigote" or name.startswith("bigote.")):
        name = f"bigote.{name}"
    return logging.getLogger(name)
