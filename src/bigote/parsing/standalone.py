"""Standalone-tag whitespace elision.

A comment or delimiter-change tag alone on its line takes the whole line
with it: the indentation before the tag and the line ending after it are
dropped from the tree.

    Hello
      {{! this line disappears }}
    World

parses exactly like ``Hello\\nWorld``. Variable, section and partial tags
never elide.
"""

from __future__ import annotations

import logging

from bigote.nodes import Node, Space
from bigote.tokens import Token, TokenType


class StandaloneMixin:
    """Mixin deciding whether a comment or delimiter tag stands alone.

    Required Host Attributes:
        - _history, _history_count (see TokenNavigationMixin)

    Required Host Methods:
        - _next, _backup, _backup2, _add_history, _glance, _next_close_tag
        - _log

    """

    _history_count: int

    def _next(self) -> Token:
        raise NotImplementedError

    def _backup(self) -> None:
        raise NotImplementedError

    def _backup2(self, t1: Token) -> None:
        raise NotImplementedError

    def _add_history(self, token: Token) -> int:
        raise NotImplementedError

    def _glance(self, back: int) -> Token | None:
        raise NotImplementedError

    def _next_close_tag(self) -> Token:
        raise NotImplementedError

    @property
    def _log(self) -> logging.Logger:
        raise NotImplementedError

    def _process_standalone(self, nodes: list[Node], open_token: Token) -> None:
        """Consume a comment or delimiter tag, eliding its line if standalone.

        The open token must already be the newest history entry.
        """
        leading, after_space = self._leading_standalone()
        self._next_close_tag()
        if not leading or not self._trailing_standalone():
            return

        if after_space and nodes and isinstance(nodes[-1], Space):
            nodes.pop()
        self._log.debug("elided standalone %s at offset %d", open_token.type.name, open_token.pos)

    def _leading_standalone(self) -> tuple[bool, bool]:
        """Check what precedes the tag on its line.

        Returns:
            ``(candidate, after_space)``: whether only whitespace precedes
            the tag on its line, and whether that whitespace is a Space run.
        """
        previous = self._glance(1)
        if previous is None or previous.type is TokenType.NEWLINE:
            return True, False
        if previous.type is TokenType.SPACE:
            before = self._glance(2)
            if before is None or before.type is TokenType.NEWLINE:
                return True, True
        return False, False

    def _trailing_standalone(self) -> bool:
        """Consume the rest of the line if nothing but whitespace remains.

        Consumed tokens are recorded in history so a following tag sees
        the start of a fresh line. Returns False with the stream untouched
        when the line carries more content.
        """
        token = self._next()
        kind = token.type

        if kind is TokenType.EOF:
            self._backup()
            return True
        if kind is TokenType.NEWLINE:
            self._add_history(token)
            return True
        if kind is TokenType.CARRIAGE_RETURN:
            self._add_history(token)
            self._consume_line_feed()
            return True
        if kind is TokenType.SPACE:
            following = self._next()
            if following.type is TokenType.NEWLINE:
                self._add_history(token)
                self._add_history(following)
                return True
            if following.type is TokenType.CARRIAGE_RETURN:
                self._add_history(token)
                self._add_history(following)
                self._consume_line_feed()
                return True
            self._backup2(token)
            return False

        self._backup()
        return False

    def _consume_line_feed(self) -> None:
        """Take the LF half of a CRLF pair, if present."""
        token = self._next()
        if token.type is TokenType.NEWLINE:
            self._add_history(token)
        else:
            self._backup()
