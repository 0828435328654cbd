"""Pipeline grammar for variable tags.

Grammar:
    pipeline := [IDENT ("," IDENT)* ":="] command ("|" command)*
    command  := operand (SPACE operand)*
    operand  := term FIELD*
    term     := IDENT | "."

The payload of a variable tag arrives as one IDENTIFIER token; scan_body
splits it and this mixin walks the pieces with a plain list cursor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

from bigote.lexer.body import scan_body
from bigote.nodes import Chain, Command, Node, Pipeline, Variable
from bigote.parsing.scope import IMPLICIT_ITERATOR, ScopeStack
from bigote.tokens import Token, TokenType

if TYPE_CHECKING:
    from bigote.config import ParseConfig


class PipelineParsingMixin:
    """Mixin parsing tag payloads into Variable or Pipeline nodes.

    Required Host Attributes:
        - _body: list[Token]
        - _body_pos: int
        - _scope: ScopeStack
        - _config: ParseConfig

    Required Host Methods:
        - _error, _unexpected

    """

    _body: list[Token]
    _body_pos: int
    _scope: ScopeStack
    _config: ParseConfig

    def _error(self, message: str, at: Token | Node, **kwargs: object) -> NoReturn:
        raise NotImplementedError

    def _unexpected(self, token: Token, context: str) -> NoReturn:
        raise NotImplementedError

    # =========================================================================
    # Body cursor
    # =========================================================================

    def _body_next(self) -> Token:
        token = self._body[self._body_pos]
        # EOF is sticky
        if token.type is not TokenType.EOF:
            self._body_pos += 1
        return token

    def _body_peek(self) -> Token:
        return self._body[self._body_pos]

    def _body_next_non_space(self) -> Token:
        token = self._body_next()
        while token.type is TokenType.SPACE:
            token = self._body_next()
        return token

    def _body_peek_non_space(self) -> Token:
        pos = self._body_pos
        token = self._body_next_non_space()
        self._body_pos = pos
        return token

    # =========================================================================
    # Grammar
    # =========================================================================

    def _pipeline(self, payload: Token, escaped: bool) -> Node:
        """Parse a tag payload.

        A payload with no declarations and a single one-operand command
        collapses to a Variable; anything else becomes a Pipeline.
        """
        self._body = scan_body(payload.value, payload.pos)
        self._body_pos = 0

        decls = self._declarations(escaped)
        if self._body_peek_non_space().type is TokenType.EOF:
            self._error("missing value for command", payload)

        cmds: list[Command] = []
        while True:
            cmds.append(self._command(escaped))
            token = self._body_next_non_space()
            if token.type is TokenType.EOF:
                break
            if token.type is not TokenType.PIPE:
                self._unexpected(token, "command")

        if not decls and len(cmds) == 1 and len(cmds[0].args) == 1:
            arg = cmds[0].args[0]
            if isinstance(arg, Variable):
                return Variable(arg.pos, escaped, arg.ident)
            if isinstance(arg, Chain) and isinstance(arg.node, Variable):
                return Variable(arg.pos, escaped, arg.node.ident + arg.fields)
        return Pipeline(payload.pos, escaped, decls, tuple(cmds))

    def _declarations(self, escaped: bool) -> tuple[Variable, ...]:
        """Parse an ``a, b :=`` prefix, or rewind if there is none.

        Declared names enter the innermost scope frame right away, so the
        commands of the same pipeline may already use them.
        """
        start = self._body_pos
        names: list[Token] = []

        token = self._body_next_non_space()
        while token.type is TokenType.IDENTIFIER:
            names.append(token)
            token = self._body_next_non_space()
            if token.type is TokenType.DECLARE:
                for name in names:
                    self._scope.declare(name.value)
                return tuple(Variable(name.pos, escaped, (name.value,)) for name in names)
            if token.type is not TokenType.COMMA:
                break
            token = self._body_next_non_space()

        self._body_pos = start
        return ()

    def _command(self, escaped: bool) -> Command:
        """Parse space-separated operands up to a pipe or the end."""
        start = self._body_peek_non_space()
        args: list[Node] = []
        while True:
            token = self._body_peek_non_space()
            if token.type is TokenType.PIPE or token.type is TokenType.EOF:
                break
            args.append(self._operand(escaped))

            token = self._body_peek()
            if token.type in (TokenType.SPACE, TokenType.PIPE, TokenType.EOF):
                continue
            self._unexpected(token, "operand")

        if not args:
            self._error("empty command", start)
        return Command(args[0].pos, tuple(args))

    def _operand(self, escaped: bool) -> Node:
        term = self._term(escaped)
        fields: list[str] = []
        while self._body_peek().type is TokenType.FIELD:
            fields.append(self._body_next().value[1:])
        if fields:
            return Chain(term.pos, term, tuple(fields))
        return term

    def _term(self, escaped: bool) -> Node:
        token = self._body_next_non_space()
        if token.type is TokenType.DOT:
            return Variable(token.pos, escaped, (IMPLICIT_ITERATOR,))
        if token.type is TokenType.IDENTIFIER:
            self._use_var(token)
            return Variable(token.pos, escaped, (token.value,))
        self._unexpected(token, "operand")

    def _use_var(self, token: Token) -> None:
        """Reject a reference to a name no enclosing pipeline declared."""
        if self._config.strict_variables and not self._scope.is_declared(token.value):
            self._error(f'undefined variable "{token.value}"', token)
