"""Mode-specific scanner mixins for the bigote lexer."""

from bigote.lexer.scanners.delimiter import DelimiterScannerMixin
from bigote.lexer.scanners.tags import TagScannerMixin
from bigote.lexer.scanners.text import TextScannerMixin

__all__ = [
    "DelimiterScannerMixin",
    "TagScannerMixin",
    "TextScannerMixin",
]
