"""Delimiter-change directive scanner mixin.

Handles ``{{=NEW_OPEN NEW_CLOSE=}}``. The directive is closed by the close
delimiter that was active when it opened; the new pair takes effect for
everything scanned after it.
"""

from collections.abc import Iterator

from bigote.lexer.modes import LexerMode
from bigote.tokens import Token, TokenType
from bigote.utils.logger import get_logger

logger = get_logger(__name__)


class DelimiterScannerMixin:
    """Mixin providing delimiter-change scanning logic.

    Accepts padding around both delimiters (``{{= | | =}}``) and ignores
    whitespace embedded in the new close delimiter.

    """

    # These will be set by the Lexer class
    _source: str
    _pos: int
    _start: int
    _mode: LexerMode
    _open: str
    _close: str
    _close_len: int

    def _emit(self, token_type: TokenType) -> Token:
        """Create token spanning start..pos. Implemented by Lexer."""
        raise NotImplementedError

    def _error(self, message: str) -> Token:
        """Create terminal ERROR token. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_delimiter(self) -> Iterator[Token]:
        """Parse the new delimiter pair and install it.

        Yields:
            DISCARD for the directive body (including its closing ``=``),
            or a terminal ERROR when the directive is malformed.
        """
        source = self._source
        close = self._close
        pos = self._pos

        # The first close delimiter ends the directive, and "=" must precede it
        end = source.find(close, pos)
        if end < 0:
            yield self._error("unclosed delimiter tag")
            return
        if end == pos or source[end - 1] != "=":
            yield self._error(f"expected '=' before {close!r} while changing delimiters")
            return

        parts = source[pos : end - 1].split(None, 1)
        if len(parts) < 2:
            yield self._error(
                "unable to find end of new open delimiter, "
                "check that there is a space following it"
            )
            return

        new_open = parts[0]
        new_close = "".join(parts[1].split())
        if "=" in new_open or "=" in new_close:
            yield self._error(
                f"invalid delimiters {new_open!r} {new_close!r}: '=' is not allowed"
            )
            return

        self._pos = end
        yield self._emit(TokenType.DISCARD)

        logger.debug(
            "delimiters changed from %r %r to %r %r at %d",
            self._open,
            close,
            new_open,
            new_close,
            pos,
        )
        self._open = new_open
        self._close = new_close
        self._close_len = len(close)
        self._mode = LexerMode.CLOSE_TAG
