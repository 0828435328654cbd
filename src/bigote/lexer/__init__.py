"""Modular state-machine lexer for bigote templates.

This package provides a delimiter-aware lexer producing a lazy token
stream, plus the payload scanner used by the pipeline grammar.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, LexerMode, scan_body
├── core.py              # Lexer class (mixin composition + dispatch)
├── modes.py             # LexerMode enum, delimiters, tag marker table
├── body.py              # scan_body: tag payload -> pipeline tokens
└── scanners/            # Mode-specific scanners
    ├── text.py          # Text, spaces and line endings
    ├── tags.py          # Open markers, tag bodies, close tokens
    └── delimiter.py     # {{=<% %>=}} directives

Usage:
    >>> from bigote.lexer import Lexer
    >>> lexer = Lexer("{{=<% %>=}}<%foo%>")
    >>> [t.type.name for t in lexer.tokenize()]
    ['OPEN_DELIMITER', 'DISCARD', 'CLOSE_TAG', 'OPEN_ESCAPED', 'IDENTIFIER', 'CLOSE_TAG', 'EOF']

"""

from bigote.lexer.body import scan_body
from bigote.lexer.core import Lexer
from bigote.lexer.modes import CLOSE_DELIM, OPEN_DELIM, LexerMode

__all__ = ["CLOSE_DELIM", "Lexer", "LexerMode", "OPEN_DELIM", "scan_body"]
