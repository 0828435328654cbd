"""Text mode scanner mixin."""

from collections.abc import Iterator

from bigote.lexer.modes import CARRIAGE_RETURN, NEWLINE, SPACE_CHARS, LexerMode
from bigote.tokens import Token, TokenType


class TextScannerMixin:
    """Mixin providing text mode scanning logic.

    Text between tags is split into TEXT, SPACE, NEWLINE and
    CARRIAGE_RETURN tokens. Whitespace is kept separate from text so the
    parser can tell a whitespace-only line prefix from ordinary content.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _start: int
    _mode: LexerMode
    _open: str

    def _emit(self, token_type: TokenType) -> Token:
        """Create token spanning start..pos. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_text(self) -> Iterator[Token]:
        """Scan up to the next tag, whitespace token, or end of input.

        Yields:
            A pending TEXT token, then at most one whitespace or EOF token.
        """
        source = self._source
        source_len = self._source_len
        open_delim = self._open
        open_first = open_delim[0]
        pos = self._pos

        while pos < source_len:
            char = source[pos]
            if char == open_first and source.startswith(open_delim, pos):
                self._pos = pos
                if pos > self._start:
                    yield self._emit(TokenType.TEXT)
                self._mode = LexerMode.TAG_OPEN
                return
            if char in SPACE_CHARS or char == NEWLINE or char == CARRIAGE_RETURN:
                self._pos = pos
                if pos > self._start:
                    yield self._emit(TokenType.TEXT)
                yield self._scan_whitespace(char)
                return
            pos += 1

        # Correctly reached end of input
        self._pos = pos
        if pos > self._start:
            yield self._emit(TokenType.TEXT)
        yield self._emit(TokenType.EOF)
        self._mode = LexerMode.DONE

    def _scan_whitespace(self, char: str) -> Token:
        """Consume one line ending, or a whole run of spaces and tabs."""
        if char == NEWLINE:
            self._pos += 1
            return self._emit(TokenType.NEWLINE)
        if char == CARRIAGE_RETURN:
            self._pos += 1
            return self._emit(TokenType.CARRIAGE_RETURN)

        source = self._source
        pos = self._pos + 1
        while pos < self._source_len and source[pos] in SPACE_CHARS:
            pos += 1
        self._pos = pos
        return self._emit(TokenType.SPACE)
