"""Token navigation utilities for the bigote parser.

Provides a mixin for token stream navigation with bounded lookahead and
trailing history. The parser never re-reads input: lookahead tokens are
pushed back into a 3-slot array, and the 3-slot history remembers the
tokens that started the most recent items.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, cast

from bigote.errors import LexError, ParseError, TemplateError
from bigote.location import SourceLocation
from bigote.tokens import Token, TokenType

if TYPE_CHECKING:
    from bigote.channel import TokenChannel
    from bigote.nodes import Node

LOOKAHEAD_SIZE = 3
HISTORY_SIZE = 3


class TokenNavigationMixin:
    """Mixin providing token stream navigation methods.

    Required Host Attributes:
        - _channel: TokenChannel
        - _lookahead: list[Token | None] (LOOKAHEAD_SIZE slots)
        - _peek_count: int
        - _history: list[Token | None] (HISTORY_SIZE slots)
        - _history_count: int
        - _source: str
        - _name: str

    """

    _channel: TokenChannel | None
    _lookahead: list[Token | None]
    _peek_count: int
    _history: list[Token | None]
    _history_count: int
    _source: str
    _name: str

    # =========================================================================
    # Lookahead
    # =========================================================================

    def _receive(self) -> Token:
        """Pull one token from the channel, raising on lexical errors."""
        if self._channel is None:
            raise RuntimeError("no token stream is open; call parse()")
        token = self._channel.receive()
        if token.type is TokenType.ERROR:
            self._error(
                token.value,
                token,
                error_cls=LexError,
                context=self._source[token.pos :],
            )
        return token

    def _next(self) -> Token:
        """Consume and return the next token."""
        if self._peek_count > 0:
            self._peek_count -= 1
        else:
            self._lookahead[0] = self._receive()
        return cast(Token, self._lookahead[self._peek_count])

    def _peek(self) -> Token:
        """Return but do not consume the next token."""
        if self._peek_count > 0:
            return cast(Token, self._lookahead[self._peek_count - 1])
        self._peek_count = 1
        token = self._lookahead[0] = self._receive()
        return token

    def _backup(self) -> None:
        """Push the last consumed token back. Valid once per _next()."""
        self._peek_count += 1

    def _backup2(self, t1: Token) -> None:
        """Push back two tokens; the zeroth is already in place."""
        self._lookahead[1] = t1
        self._peek_count = 2

    def _backup3(self, t2: Token, t1: Token) -> None:
        """Push back three tokens; the zeroth is already in place.

        Arguments are in reverse order: t2 is returned first.
        """
        self._lookahead[1] = t1
        self._lookahead[2] = t2
        self._peek_count = 3

    def _next_non_space(self) -> Token:
        """Consume tokens up to and including the next non-space token."""
        token = self._next()
        while token.type is TokenType.SPACE:
            token = self._next()
        return token

    def _peek_non_space(self) -> Token:
        """Skip spaces and return, without consuming, the next other token."""
        token = self._next_non_space()
        self._backup()
        return token

    def _next_close_tag(self) -> Token:
        """Consume everything up to and including the next CLOSE_TAG."""
        while True:
            token = self._next()
            if token.type is TokenType.CLOSE_TAG:
                return token
            if token.type is TokenType.EOF:
                self._unexpected(token, "tag")

    # =========================================================================
    # History
    # =========================================================================

    def _add_history(self, token: Token) -> int:
        """Record a token as the current one, shifting older entries back.

        Returns:
            Number of tokens held in history (at most HISTORY_SIZE).
        """
        self._history[2] = self._history[1]
        self._history[1] = self._history[0]
        self._history[0] = token
        if self._history_count < HISTORY_SIZE:
            self._history_count += 1
        return self._history_count

    def _glance(self, back: int) -> Token | None:
        """Return the history entry ``back`` tokens before the current one."""
        if back >= self._history_count:
            return None
        return self._history[back]

    # =========================================================================
    # Expectations and errors
    # =========================================================================

    def _expect(self, expected: TokenType, context: str) -> Token:
        """Consume the next non-space token, requiring the given type."""
        token = self._next_non_space()
        if token.type is not expected:
            self._unexpected(token, context)
        return token

    def _expect_one_of(self, expected1: TokenType, expected2: TokenType, context: str) -> Token:
        """Consume the next non-space token, requiring one of two types."""
        token = self._next_non_space()
        if token.type is not expected1 and token.type is not expected2:
            self._unexpected(token, context)
        return token

    def _unexpected(self, token: Token, context: str) -> NoReturn:
        """Complain about a token and abort the parse."""
        self._error(f"unexpected {token} in {context}", token)

    def _error(
        self,
        message: str,
        at: Token | Node,
        *,
        error_cls: type[TemplateError] = ParseError,
        context: str | None = None,
    ) -> NoReturn:
        """Abort the parse with an error located at a token or node."""
        location = SourceLocation.from_offset(self._source, at.pos)
        raise error_cls(
            message,
            name=self._name,
            lineno=location.lineno,
            col_offset=location.col_offset,
            context=str(at) if context is None else context,
        )
