"""Tag scanner mixin: open markers, tag bodies and close delimiters."""

from collections.abc import Iterator

from bigote.lexer.modes import TAG_KIND_NAMES, TAG_MARKERS, LexerMode
from bigote.tokens import Token, TokenType


class TagScannerMixin:
    """Mixin providing tag scanning logic.

    A tag is scanned in three steps: the open marker (which classifies the
    tag), the body up to the active close delimiter, and the close token.
    Delimiter-change directives take a separate path after the marker.

    """

    # These will be set by the Lexer class
    _source: str
    _pos: int
    _start: int
    _mode: LexerMode
    _open: str
    _close: str
    _tag_type: TokenType
    _tag_marker: str
    _close_len: int

    def _emit(self, token_type: TokenType) -> Token:
        """Create token spanning start..pos. Implemented by Lexer."""
        raise NotImplementedError

    def _error(self, message: str) -> Token:
        """Create terminal ERROR token. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_tag_open(self) -> Iterator[Token]:
        """Consume the open delimiter and the marker character, if any.

        An unmarked tag is an escaped variable; its open token is the bare
        delimiter and the body starts right after it.
        """
        self._pos += len(self._open)
        marker = self._source[self._pos : self._pos + 1]
        entry = TAG_MARKERS.get(marker)
        if entry is None:
            token_type, mode = TokenType.OPEN_ESCAPED, LexerMode.VARIABLE
            marker = ""
        else:
            token_type, mode = entry
            self._pos += 1

        self._tag_type = token_type
        self._tag_marker = marker
        yield self._emit(token_type)
        self._mode = mode

    def _scan_tag_body(self) -> Iterator[Token]:
        """Scan a tag body up to the close delimiter active at tag open.

        Comments emit their body as DISCARD; every other tag kind emits an
        IDENTIFIER payload. An empty body emits nothing.
        """
        source = self._source
        close = self._close
        pos = self._pos

        idx = source.find(close, pos)
        if idx < 0:
            yield self._error(f"unclosed {TAG_KIND_NAMES[self._tag_type]} tag")
            return

        body_end = idx
        close_len = len(close)
        if self._tag_marker == "{":
            # Triple mustache: the extra brace belongs to the close token.
            if source.startswith("}" + close, idx):
                close_len += 1
            elif idx > pos and source[idx - 1] == "}":
                body_end = idx - 1
                close_len += 1

        if body_end > pos:
            self._pos = body_end
            body_type = TokenType.DISCARD if self._mode is LexerMode.COMMENT else TokenType.IDENTIFIER
            yield self._emit(body_type)

        self._close_len = close_len
        self._mode = LexerMode.CLOSE_TAG

    def _scan_close_tag(self) -> Iterator[Token]:
        """Consume the close token whose length the body scanner recorded."""
        self._pos += self._close_len
        yield self._emit(TokenType.CLOSE_TAG)
        self._mode = LexerMode.TEXT
