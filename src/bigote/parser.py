"""Recursive descent parser producing a typed parse tree.

Pulls tokens from a Lexer running behind a TokenChannel and builds frozen
dataclass nodes. Sections recurse; every section body is also registered
as a named tree in the template set.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `TokenNavigationMixin`: Lookahead, history and located errors
- `StandaloneMixin`: Whitespace elision for comment and delimiter tags
- `PipelineParsingMixin`: Variable tag payloads and scope checks

Thread Safety:
- Parser produces an immutable tree (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share trees across threads

"""

from __future__ import annotations

import logging
from collections import ChainMap
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, cast

from bigote.channel import TokenChannel
from bigote.config import ParseConfig, get_parse_config
from bigote.errors import ParseError, TemplateError
from bigote.lexer import CLOSE_DELIM, OPEN_DELIM, Lexer
from bigote.nodes import (
    CarriageReturn,
    Else,
    End,
    InvertedSection,
    List,
    Newline,
    Node,
    Partial,
    Section,
    Space,
    Text,
)
from bigote.parsing import (
    PipelineParsingMixin,
    ScopeStack,
    StandaloneMixin,
    TokenNavigationMixin,
)
from bigote.parsing.token_nav import HISTORY_SIZE, LOOKAHEAD_SIZE
from bigote.tokens import Token, TokenType
from bigote.tree import TemplateSet, Tree, add_tree
from bigote.utils.logger import get_logger

logger = get_logger(__name__)

#: Helper tables passed through to renderers; the parser never reads them.
FuncMap = Mapping[str, Callable[..., Any]]

_LEAF_NODES: dict[TokenType, type[Node]] = {
    TokenType.TEXT: Text,
    TokenType.SPACE: Space,
    TokenType.NEWLINE: Newline,
    TokenType.CARRIAGE_RETURN: CarriageReturn,
}


class Parser(
    TokenNavigationMixin,
    StandaloneMixin,
    PipelineParsingMixin,
):
    """Recursive descent parser for Mustache-family templates.

    Usage:
            >>> tree = Parser("Hi {{name}}", "greeting", variables=["name"]).parse()
            >>> tree.root.children
        (Text(pos=0, content='Hi'), Space(pos=2, content=' '),
         Variable(pos=5, escaped=True, ident=('name',)))

    Thread Safety:
        Parser instances are not thread-safe. Each parse() call starts from
        fresh state, so an instance may be reused sequentially. The lexer
        runs on its own thread only for the duration of parse().

    Configuration:
        Parser reads configuration from ContextVar instead of instance
        attributes. Use set_parse_config() or parse_config_context() before
        calling parse() if you need non-default configuration.

    """

    __slots__ = (
        # Per-call inputs
        "_source",
        "_name",
        "_open_delim",
        "_close_delim",
        "_variables",
        "_funcs",
        # Per-parse state
        "_channel",
        "_lookahead",
        "_peek_count",
        "_history",
        "_history_count",
        "_scope",
        "_template_set",
        "_pending",
        "_body",
        "_body_pos",
    )

    def __init__(
        self,
        source: str,
        name: str = "template",
        *,
        open_delim: str | None = None,
        close_delim: str | None = None,
        variables: Iterable[str] = (),
        funcs: Sequence[FuncMap] | None = None,
    ) -> None:
        """Initialize parser with source text.

        Args:
            source: Template source text
            name: Template name, used for the root tree and in errors
            open_delim: Initial open delimiter; None or empty means "{{"
            close_delim: Initial close delimiter; None or empty means "}}"
            variables: Names visible to every pipeline in the template
            funcs: Helper tables kept for renderers; not consulted here

        """
        self._source = source
        self._name = name
        self._open_delim = open_delim or OPEN_DELIM
        self._close_delim = close_delim or CLOSE_DELIM
        self._variables = tuple(variables)
        self._funcs: tuple[FuncMap, ...] = tuple(funcs or ())
        self._reset()

    def _reset(self) -> None:
        """Drop all per-parse state."""
        self._channel: TokenChannel | None = None
        self._lookahead: list[Token | None] = [None] * LOOKAHEAD_SIZE
        self._peek_count = 0
        self._history: list[Token | None] = [None] * HISTORY_SIZE
        self._history_count = 0
        self._scope = ScopeStack(self._variables)
        self._template_set: TemplateSet = {}
        self._pending: dict[str, Tree] = {}
        self._body: list[Token] = []
        self._body_pos = 0

    # =========================================================================
    # Configuration Properties (read from ContextVar)
    # =========================================================================

    @property
    def _config(self) -> ParseConfig:
        """Get current parse configuration (thread-local)."""
        return get_parse_config()

    @property
    def _log(self) -> logging.Logger:
        """Injected logger, or the module logger."""
        return self._config.logger or logger

    @property
    def name(self) -> str:
        """Name of the template being parsed."""
        return self._name

    @property
    def funcs(self) -> tuple[FuncMap, ...]:
        """Helper tables handed to the parser."""
        return self._funcs

    # =========================================================================
    # Entry point
    # =========================================================================

    def parse(self, template_set: TemplateSet | None = None) -> Tree:
        """Parse the source into a tree.

        Section bodies and the root tree are staged while parsing and merged
        into ``template_set`` only once the whole template parsed.

        Args:
            template_set: Name -> tree mapping to register trees in

        Returns:
            The root tree

        Raises:
            LexError: The template could not be tokenized
            ParseError: The template is not well formed
        """
        config = self._config
        if template_set is None:
            template_set = {}

        self._reset()
        self._template_set = template_set
        lexer = Lexer(self._source, self._open_delim, self._close_delim)
        self._channel = TokenChannel(
            lexer.tokenize(),
            config.channel_capacity,
            threaded=config.threaded_lexer,
        )

        try:
            nodes, _ = self._item_list(None)
            root = List(0, tuple(nodes))
            tree = Tree(self._name, root, self._source)
            self._register(tree, root)
        except TemplateError as exc:
            self._log.info("aborted parse of template %r: %s", self._name, exc)
            raise
        finally:
            self._channel.drain()
            pending = self._pending
            self._reset()

        template_set.update(pending)
        return tree

    def _register(self, tree: Tree, at: Token | Node) -> None:
        """Stage a tree, checking for duplicates against staged and known trees."""
        try:
            add_tree(ChainMap(self._pending, self._template_set), tree)
        except ParseError as exc:
            self._error(exc.message, at)
        self._log.debug("registered template %r", tree.name)

    # =========================================================================
    # Items
    # =========================================================================

    def _item_list(
        self,
        section: str | None,
        *,
        allow_else: bool = False,
    ) -> tuple[list[Node], End | Else | None]:
        """Parse items until EOF, or until the tag that ends a section body.

        Returns:
            The nodes, and the End or Else node that stopped the list (None
            at the top level).
        """
        nodes: list[Node] = []
        while True:
            token = self._peek()
            if token.type is TokenType.EOF:
                if section is not None:
                    self._error(f'missing end tag for section "{section}"', token)
                return nodes, None

            node = self._text_or_action(nodes)
            if node is None:
                continue
            if isinstance(node, End):
                if section is None:
                    self._error(f"unexpected {node}", node)
                return nodes, node
            if isinstance(node, Else):
                if not allow_else:
                    self._error(f"unexpected {node}", node)
                return nodes, node
            nodes.append(node)

    def _text_or_action(self, nodes: list[Node]) -> Node | None:
        """Parse one item starting at the next token.

        Returns None for tokens that produce no node.
        """
        token = self._next()
        self._add_history(token)
        self._log.debug("dispatch %r", token)

        leaf = _LEAF_NODES.get(token.type)
        if leaf is not None:
            return leaf(token.pos, token.value)

        match token.type:
            case TokenType.OPEN_COMMENT | TokenType.OPEN_DELIMITER:
                self._process_standalone(nodes, token)
                return None
            case TokenType.OPEN_SECTION | TokenType.OPEN_INVERTED:
                return self._section(token)
            case TokenType.OPEN_END_SECTION:
                return self._end_section(token)
            case TokenType.OPEN_PARTIAL:
                return self._partial(token)
            case TokenType.OPEN_ESCAPED | TokenType.OPEN_UNESCAPED:
                return self._action(token)
            case _:
                # Stray CLOSE_TAG / DISCARD / IDENTIFIER
                return None

    def _tag_name(self, context: str) -> str:
        """Read a tag's name payload and its close token.

        Returns:
            The stripped name, or "" for an empty tag.
        """
        if self._peek_non_space().type is TokenType.CLOSE_TAG:
            self._next_non_space()
            return ""
        token = self._expect_one_of(TokenType.IDENTIFIER, TokenType.DISCARD, context)
        self._expect(TokenType.CLOSE_TAG, context)

        name = token.value.strip()
        if len(name.split()) > 1:
            self._error(f"invalid {context} name {token}", token)
        return name

    # =========================================================================
    # Sections
    # =========================================================================

    def _section(self, open_token: Token) -> Node:
        """Parse a section or inverted section through its end tag.

        An empty ``{{^}}`` is not a section; it comes back as Else for the
        enclosing section to handle.
        """
        inverted = open_token.type is TokenType.OPEN_INVERTED
        name = self._tag_name("section")
        if not name:
            if inverted:
                return Else(open_token.pos)
            self._error("missing section name", open_token)

        body, end = self._section_body(name, allow_else=not inverted)
        else_body: List | None = None
        if isinstance(end, Else):
            else_body, end = self._section_body(name, allow_else=False)

        end = cast(End, end)
        if end.name != name:
            self._error(f"section name mismatch: {end} does not close {{{{#{name}}}}}", end)

        self._register(Tree(name, body, self._source), open_token)
        if inverted:
            return InvertedSection(open_token.pos, name, body)
        return Section(open_token.pos, name, body, else_body)

    def _section_body(self, name: str, *, allow_else: bool) -> tuple[List, End | Else | None]:
        """Parse one branch of a section in its own scope frame."""
        token = self._peek()
        # Depth is the root frame plus one per enclosing section
        if self._scope.depth > self._config.max_nesting:
            self._error(
                f'sections nested too deeply at "{name}" '
                f"(limit {self._config.max_nesting})",
                token,
            )
        pos = token.pos
        self._scope.push()
        nodes, end = self._item_list(name, allow_else=allow_else)
        self._scope.pop()
        return List(pos, tuple(nodes)), end

    def _end_section(self, open_token: Token) -> End:
        name = self._tag_name("end section")
        if not name:
            self._error("missing end section name", open_token)
        return End(open_token.pos, name)

    # =========================================================================
    # Leaf tags
    # =========================================================================

    def _partial(self, open_token: Token) -> Partial:
        name = self._tag_name("partial")
        if not name:
            self._error("missing partial name", open_token)
        return Partial(open_token.pos, name)

    def _action(self, open_token: Token) -> Node:
        """Parse a variable tag: {{...}}, {{{...}}} or {{&...}}."""
        escaped = open_token.type is TokenType.OPEN_ESCAPED
        token = self._next()
        if token.type is TokenType.CLOSE_TAG:
            self._error("missing value for command", open_token)
        if token.type is not TokenType.IDENTIFIER:
            self._unexpected(token, "command")
        self._expect(TokenType.CLOSE_TAG, "command")
        return self._pipeline(token, escaped)
