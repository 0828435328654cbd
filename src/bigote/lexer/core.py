"""State-machine lexer for Mustache-family templates.

Scans text between tags character by character, and tag bodies with
``str.find`` on the active close delimiter. Every mode either advances the
position or emits a terminal token, so tokenization always terminates.

No regex in the hot path.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state, including the active delimiter pair, is instance-local.

"""

from __future__ import annotations

from collections.abc import Iterator

from bigote.lexer.modes import CLOSE_DELIM, OPEN_DELIM, LexerMode
from bigote.lexer.scanners import (
    DelimiterScannerMixin,
    TagScannerMixin,
    TextScannerMixin,
)
from bigote.tokens import Token, TokenType


class Lexer(
    TextScannerMixin,
    TagScannerMixin,
    DelimiterScannerMixin,
):
    """State-machine lexer producing a lazy, terminated token stream.

    The stream always ends in exactly one EOF or ERROR token. Joining the
    values of every other token reproduces the scanned input.

    Usage:
            >>> lexer = Lexer("I'm {{>partial}}")
            >>> for token in lexer.tokenize():
            ...     print(token)
        Token(TEXT, "I'm", 0)
        Token(SPACE, ' ', 3)
        Token(OPEN_PARTIAL, '{{>', 4)
        Token(IDENTIFIER, 'partial', 7)
        Token(CLOSE_TAG, '}}', 14)
        Token(EOF, '', 16)

    Thread Safety:
        Lexer instances are single-use. Create one per source string.

    """

    __slots__ = (
        "_source",
        "_source_len",  # Cached len(source)
        "_pos",
        "_start",  # Start of the token being built
        "_mode",
        "_open",  # Active open delimiter
        "_close",  # Active close delimiter
        "_tag_type",  # Open token type of the tag being scanned
        "_tag_marker",  # Character that classified the tag ("" for escaped)
        "_close_len",  # Length of the pending close token
    )

    def __init__(
        self,
        source: str,
        open_delim: str = OPEN_DELIM,
        close_delim: str = CLOSE_DELIM,
        *,
        start: int = 0,
    ) -> None:
        """Initialize lexer with source text and the starting delimiters.

        Args:
            source: Template source text
            open_delim: Open delimiter; empty means the default "{{"
            close_delim: Close delimiter; empty means the default "}}"
            start: Offset to start scanning from
        """
        self._source = source
        self._source_len = len(source)
        self._pos = start
        self._start = start
        self._mode = LexerMode.TEXT
        self._open = open_delim or OPEN_DELIM
        self._close = close_delim or CLOSE_DELIM
        self._tag_type = TokenType.OPEN_ESCAPED
        self._tag_marker = ""
        self._close_len = 0

    @property
    def delimiters(self) -> tuple[str, str]:
        """The active (open, close) delimiter pair."""
        return self._open, self._close

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into token stream.

        Yields:
            Token objects one at a time, ending with EOF or ERROR

        Complexity: O(n) where n = len(source)
        Memory: O(1) iterator (tokens yielded, not accumulated)
        """
        while self._mode is not LexerMode.DONE:
            yield from self._dispatch_mode()

    def _dispatch_mode(self) -> Iterator[Token]:
        """Dispatch to appropriate scanner based on current mode.

        Yields:
            Token objects from the mode-specific scanner.
        """
        mode = self._mode
        if mode is LexerMode.TEXT:
            yield from self._scan_text()
        elif mode is LexerMode.TAG_OPEN:
            yield from self._scan_tag_open()
        elif mode is LexerMode.DELIMITER:
            yield from self._scan_delimiter()
        elif mode is LexerMode.CLOSE_TAG:
            yield from self._scan_close_tag()
        else:
            yield from self._scan_tag_body()

    # =========================================================================
    # Token construction
    # =========================================================================

    def _emit(self, token_type: TokenType) -> Token:
        """Create a token spanning start..pos and move start up to pos."""
        token = Token(token_type, self._source[self._start : self._pos], self._start)
        self._start = self._pos
        return token

    def _error(self, message: str) -> Token:
        """Create the terminal ERROR token and stop the state machine."""
        self._mode = LexerMode.DONE
        return Token(TokenType.ERROR, message, self._start)
