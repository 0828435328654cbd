"""Lexer operating modes and constants.

This module defines the finite state machine modes for the lexer, the
default tag delimiters, and the table that classifies a tag by the
character following its open delimiter.
"""

from __future__ import annotations

from enum import Enum, auto

from bigote.tokens import TokenType


class LexerMode(Enum):
    """Lexer operating modes.

    The lexer switches between modes based on context:
    - TEXT: Between tags, scanning text, spaces and line endings
    - TAG_OPEN: At an open delimiter, classifying the tag
    - COMMENT / VARIABLE / UNESCAPED / SECTION / PARTIAL: Inside a tag body
    - DELIMITER: Inside a delimiter-change directive
    - CLOSE_TAG: At the close delimiter of the current tag
    - DONE: A terminal token has been emitted

    """

    TEXT = auto()
    TAG_OPEN = auto()
    COMMENT = auto()
    VARIABLE = auto()
    UNESCAPED = auto()
    SECTION = auto()
    PARTIAL = auto()
    DELIMITER = auto()
    CLOSE_TAG = auto()
    DONE = auto()


OPEN_DELIM = "{{"
CLOSE_DELIM = "}}"

# Characters that end a text run (besides the open delimiter)
SPACE_CHARS = frozenset(" \t")
CARRIAGE_RETURN = "\r"
NEWLINE = "\n"

# Marker character after the open delimiter -> (open token type, body mode)
TAG_MARKERS: dict[str, tuple[TokenType, LexerMode]] = {
    "!": (TokenType.OPEN_COMMENT, LexerMode.COMMENT),
    "{": (TokenType.OPEN_UNESCAPED, LexerMode.UNESCAPED),
    "&": (TokenType.OPEN_UNESCAPED, LexerMode.UNESCAPED),
    "#": (TokenType.OPEN_SECTION, LexerMode.SECTION),
    "/": (TokenType.OPEN_END_SECTION, LexerMode.SECTION),
    "^": (TokenType.OPEN_INVERTED, LexerMode.SECTION),
    ">": (TokenType.OPEN_PARTIAL, LexerMode.PARTIAL),
    "=": (TokenType.OPEN_DELIMITER, LexerMode.DELIMITER),
}

# Open token type -> words used in "unclosed <kind> tag" errors
TAG_KIND_NAMES: dict[TokenType, str] = {
    TokenType.OPEN_ESCAPED: "escaped variable",
    TokenType.OPEN_UNESCAPED: "unescaped variable",
    TokenType.OPEN_SECTION: "section",
    TokenType.OPEN_INVERTED: "inverted section",
    TokenType.OPEN_END_SECTION: "end section",
    TokenType.OPEN_COMMENT: "comment",
    TokenType.OPEN_PARTIAL: "partial",
    TokenType.OPEN_DELIMITER: "delimiter",
}
