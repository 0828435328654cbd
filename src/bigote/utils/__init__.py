"""Utility modules for bigote.

Provides:
- logger: get_logger for namespaced, silent-by-default logging
"""

from bigote.utils.logger import get_logger

__all__ = [
    "get_logger",
]
