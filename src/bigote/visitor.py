"""Tree visitor and transformer for bigote.

Provides a base visitor class with match-based dispatch and an immutable
transform function for rewriting frozen trees. Renderers and linters walk
parse trees with these.

Example: collect every partial a template pulls in:

    class PartialCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.names: list[str] = []

        def visit_partial(self, node: Partial) -> None:
            self.names.append(node.name)

    collector = PartialCollector()
    collector.visit(tree.root)

Example: drop whitespace-only runs:

    def strip_spaces(node: Node) -> Node | None:
        if isinstance(node, Space):
            return None
        return node

    new_root = transform(tree.root, strip_spaces)

Thread Safety:
    Visitors are NOT shared across threads by default (they may accumulate
    mutable state). Create a new visitor per thread. The transform function
    is pure, so it is safe to call from any thread.

"""

import dataclasses
from collections.abc import Callable
from typing import Generic, TypeVar

from bigote.nodes import (
    CarriageReturn,
    Chain,
    Command,
    InvertedSection,
    List,
    Newline,
    Node,
    Partial,
    Pipeline,
    Section,
    Space,
    Text,
    Variable,
)


T = TypeVar("T")
N = TypeVar("N", bound=Node)


class BaseVisitor(Generic[T]):
    """Base tree visitor with match-based dispatch.

    Subclass and override ``visit_*`` methods for node types you care about.
    Unhandled node types fall through to ``visit_default``. Children are
    walked automatically after the ``visit_*`` call.

    Type parameter ``T`` is the return type of visit methods (use ``None``
    for side-effect-only visitors).

    """

    def visit(self, node: Node) -> T:
        """Dispatch to the appropriate ``visit_*`` method.

        Walks children automatically after the visit method returns.

        """
        result = self._dispatch(node)
        self._walk_children(node)
        return result

    def visit_default(self, node: Node) -> T:
        """Called for node types without a specific ``visit_*`` method.

        Override this for catch-all behavior. Default returns None
        (suitable for ``BaseVisitor[None]``).

        """
        return None  # type: ignore[return-value]

    # -- Text visitors ---------------------------------------------------------

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_newline(self, node: Newline) -> T:
        return self.visit_default(node)

    def visit_carriage_return(self, node: CarriageReturn) -> T:
        return self.visit_default(node)

    def visit_space(self, node: Space) -> T:
        return self.visit_default(node)

    # -- Tag visitors ----------------------------------------------------------

    def visit_variable(self, node: Variable) -> T:
        return self.visit_default(node)

    def visit_section(self, node: Section) -> T:
        return self.visit_default(node)

    def visit_inverted_section(self, node: InvertedSection) -> T:
        return self.visit_default(node)

    def visit_partial(self, node: Partial) -> T:
        return self.visit_default(node)

    def visit_list(self, node: List) -> T:
        return self.visit_default(node)

    # -- Pipeline visitors -----------------------------------------------------

    def visit_pipeline(self, node: Pipeline) -> T:
        return self.visit_default(node)

    def visit_command(self, node: Command) -> T:
        return self.visit_default(node)

    def visit_chain(self, node: Chain) -> T:
        return self.visit_default(node)

    # -- Internal dispatch -----------------------------------------------------

    def _dispatch(self, node: Node) -> T:
        """Match-based dispatch to visit_* methods."""
        match node:
            case Text():
                return self.visit_text(node)
            case Newline():
                return self.visit_newline(node)
            case CarriageReturn():
                return self.visit_carriage_return(node)
            case Space():
                return self.visit_space(node)
            case Variable():
                return self.visit_variable(node)
            case Section():
                return self.visit_section(node)
            case InvertedSection():
                return self.visit_inverted_section(node)
            case Partial():
                return self.visit_partial(node)
            case List():
                return self.visit_list(node)
            case Pipeline():
                return self.visit_pipeline(node)
            case Command():
                return self.visit_command(node)
            case Chain():
                return self.visit_chain(node)
            case _:
                return self.visit_default(node)

    def _walk_children(self, node: Node) -> None:
        """Recursively visit child nodes."""
        match node:
            case List(children=children):
                for child in children:
                    self.visit(child)
            case Section(body=body, else_body=else_body):
                self.visit(body)
                if else_body is not None:
                    self.visit(else_body)
            case InvertedSection(body=body):
                self.visit(body)
            case Pipeline(decls=decls, cmds=cmds):
                for decl in decls:
                    self.visit(decl)
                for cmd in cmds:
                    self.visit(cmd)
            case Command(args=args):
                for arg in args:
                    self.visit(arg)
            case Chain(node=term):
                self.visit(term)
            case _:
                pass  # Leaf nodes: no children


def transform(root: List, fn: Callable[[Node], Node | None]) -> List:
    """Apply a function to every node in the tree, returning a new tree.

    The function ``fn`` is called bottom-up: children are transformed first,
    then the parent is transformed with its new children. This ensures ``fn``
    always receives nodes with already-transformed children.

    Return ``None`` from ``fn`` to remove a node from its parent's sequence.
    Section bodies and chain terms cannot be removed, and neither can the
    root List; returning None (or a non-List body) for them raises TypeError.

    Since all nodes are frozen dataclasses, this produces a new immutable tree.
    The original tree is untouched.

    Args:
        root: The root list to transform.
        fn: Function that receives a node and returns a (possibly new) node,
            or None to remove the node from the tree.

    Returns:
        A new List with the transformation applied.

    """
    result = _transform_node(root, fn)
    if result is None or not isinstance(result, List):
        msg = "transform fn must return a List for the root (cannot remove root)"
        raise TypeError(msg)
    return result


def _transform_node(node: Node, fn: Callable[[Node], Node | None]) -> Node | None:
    """Transform a single node bottom-up: children first, then self."""
    transformed = _transform_children(node, fn)
    return fn(transformed)


def _transform_body(body: List, fn: Callable[[Node], Node | None]) -> List:
    result = _transform_node(body, fn)
    if not isinstance(result, List):
        msg = "transform fn must return a List for a section body"
        raise TypeError(msg)
    return result


def _transform_children(node: Node, fn: Callable[[Node], Node | None]) -> Node:
    """Produce a new node with children transformed; filter out None (removed) nodes."""

    def _filtered(children: tuple[N, ...]) -> tuple[N, ...]:
        return tuple(
            result for c in children
            if (result := _transform_node(c, fn)) is not None
        )  # type: ignore[misc]

    match node:
        case List(children=children):
            new_children = _filtered(children)
            if new_children != children:
                return dataclasses.replace(node, children=new_children)
        case Section(body=body, else_body=else_body):
            new_body = _transform_body(body, fn)
            new_else = _transform_body(else_body, fn) if else_body is not None else None
            if new_body != body or new_else != else_body:
                return dataclasses.replace(node, body=new_body, else_body=new_else)
        case InvertedSection(body=body):
            new_body = _transform_body(body, fn)
            if new_body != body:
                return dataclasses.replace(node, body=new_body)
        case Pipeline(decls=decls, cmds=cmds):
            new_decls = _filtered(decls)
            new_cmds = _filtered(cmds)
            if new_decls != decls or new_cmds != cmds:
                return dataclasses.replace(node, decls=new_decls, cmds=new_cmds)
        case Command(args=args):
            new_args = _filtered(args)
            if new_args != args:
                return dataclasses.replace(node, args=new_args)
        case Chain(node=term):
            new_term = _transform_node(term, fn)
            if new_term is None:
                msg = "transform fn cannot remove the term of a chain"
                raise TypeError(msg)
            if new_term != term:
                return dataclasses.replace(node, node=new_term)
        case _:
            pass  # Leaf nodes: return as-is

    return node
