"""
Bigote: a parser for Mustache-family templates.

Turns template text into an immutable, validated parse tree for a renderer
to execute. Supports run-time delimiter changes, standalone-line elision
for comment and delimiter tags, and scoped variable declarations inside
pipelines.

Quick Start:
    >>> from bigote import parse
    >>> tree = parse("greeting", "Hi {{name}}!", variables=["name"])
    >>> [str(node) for node in tree.root.children]
    ['Hi', ' ', 'name', '!']

    >>> # Sections are also registered as named trees
    >>> templates = {}
    >>> tree = parse("page", "{{#items}}{{.}}{{/items}}", template_set=templates)
    >>> sorted(templates)
    ['items', 'page']

Custom Delimiters:
    >>> from bigote import parse_with_delimiters
    >>> tree = parse_with_delimiters("<% x := . %><%x%>", "<%", "%>")

Installation:
    pip install bigote              # Zero runtime dependencies
"""

from collections.abc import Iterable, Sequence

from bigote.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from bigote.errors import BigoteError, LexError, ParseError, TemplateError
from bigote.lexer import Lexer
from bigote.location import SourceLocation
from bigote.nodes import (
    CarriageReturn,
    Chain,
    Command,
    InvertedSection,
    List,
    Newline,
    Node,
    NodeType,
    Partial,
    Pipeline,
    Section,
    Space,
    Text,
    Variable,
)
from bigote.parser import FuncMap, Parser
from bigote.tokens import Token, TokenType
from bigote.tree import TemplateSet, Tree, add_tree, is_empty_tree
from bigote.visitor import BaseVisitor, transform

__version__ = "0.1.0"


def parse(
    name: str,
    text: str,
    *,
    template_set: TemplateSet | None = None,
    variables: Iterable[str] = (),
    funcs: Sequence[FuncMap] | None = None,
    config: ParseConfig | None = None,
) -> Tree:
    """Parse a template with the default delimiters.

    Args:
        name: Template name, used for the root tree and in error messages
        text: Template source text
        template_set: Mapping that receives the root tree and every section
            tree; left untouched when parsing fails
        variables: Names every pipeline may reference without declaring
        funcs: Helper tables kept for renderers
        config: Configuration for this call only (defaults to the active one)

    Returns:
        The root tree

    Raises:
        LexError: The template could not be tokenized
        ParseError: The template is not well formed

    Example:
        >>> tree = parse("t", "{{#a}}{{/b}}")
        Traceback (most recent call last):
        ...
        bigote.errors.ParseError: template: t:1:7: section name mismatch: ...
    """
    return parse_with_delimiters(
        text,
        None,
        None,
        template_set,
        name=name,
        variables=variables,
        funcs=funcs,
        config=config,
    )


def parse_with_delimiters(
    text: str,
    open_delim: str | None,
    close_delim: str | None,
    template_set: TemplateSet | None = None,
    *,
    name: str = "template",
    variables: Iterable[str] = (),
    funcs: Sequence[FuncMap] | None = None,
    config: ParseConfig | None = None,
) -> Tree:
    """Parse a template starting from the given delimiters.

    None or an empty string selects the default delimiter.

    Example:
        >>> tree = parse_with_delimiters("[[x := .]][[x]]", "[[", "]]")
        >>> str(tree.root.children[1])
        'x'
    """
    parser = Parser(
        text,
        name,
        open_delim=open_delim,
        close_delim=close_delim,
        variables=variables,
        funcs=funcs,
    )
    if config is None:
        return parser.parse(template_set)
    with parse_config_context(config):
        return parser.parse(template_set)


__all__ = [
    # Entry points
    "parse",
    "parse_with_delimiters",
    "Parser",
    "Lexer",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Errors
    "BigoteError",
    "TemplateError",
    "LexError",
    "ParseError",
    # Tokens
    "Token",
    "TokenType",
    "SourceLocation",
    # Trees
    "Tree",
    "TemplateSet",
    "FuncMap",
    "add_tree",
    "is_empty_tree",
    # Nodes
    "Node",
    "NodeType",
    "Text",
    "Newline",
    "CarriageReturn",
    "Space",
    "Variable",
    "Section",
    "InvertedSection",
    "Partial",
    "List",
    "Pipeline",
    "Command",
    "Chain",
    # Tree walking
    "BaseVisitor",
    "transform",
]
