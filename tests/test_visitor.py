"""Tests for the tree visitor and transform utilities."""

import dataclasses

import pytest

from bigote import parse
from bigote.nodes import (
    Chain,
    InvertedSection,
    List,
    Node,
    Partial,
    Pipeline,
    Section,
    Space,
    Text,
    Variable,
)
from bigote.visitor import BaseVisitor, transform

TEMPLATE = (
    "Hi {{>header}}\n"
    "{{#people}}{{name := .}}{{name.first}} {{^}}nobody{{/people}}\n"
    "{{^admins}}{{x := . | count}}{{/admins}}"
)


def root() -> List:
    return parse("t", TEMPLATE, variables=["count"]).root


class TestBaseVisitor:
    def test_collects_partials(self) -> None:
        class PartialCollector(BaseVisitor[None]):
            def __init__(self) -> None:
                self.names: list[str] = []

            def visit_partial(self, node: Partial) -> None:
                self.names.append(node.name)

        collector = PartialCollector()
        collector.visit(root())
        assert collector.names == ["header"]

    def test_walks_into_sections_and_pipelines(self) -> None:
        class VariableCollector(BaseVisitor[None]):
            def __init__(self) -> None:
                self.names: list[str] = []

            def visit_variable(self, node: Variable) -> None:
                self.names.append(node.name)

        collector = VariableCollector()
        collector.visit(root())
        assert collector.names == ["name", ".", "name.first", "x", ".", "count"]

    def test_visits_else_body(self) -> None:
        class TextCollector(BaseVisitor[None]):
            def __init__(self) -> None:
                self.texts: list[str] = []

            def visit_text(self, node: Text) -> None:
                self.texts.append(node.content)

        collector = TextCollector()
        collector.visit(root())
        assert "nobody" in collector.texts

    def test_default_counts_every_node(self) -> None:
        class Counter(BaseVisitor[None]):
            def __init__(self) -> None:
                self.kinds: set[str] = set()

            def visit_default(self, node: Node) -> None:
                self.kinds.add(type(node).__name__)

        counter = Counter()
        counter.visit(root())
        assert {
            "List",
            "Text",
            "Space",
            "Newline",
            "Partial",
            "Section",
            "InvertedSection",
            "Pipeline",
            "Command",
            "Variable",
        } <= counter.kinds

    def test_chain_visited(self) -> None:
        class ChainCollector(BaseVisitor[str]):
            def visit_chain(self, node: Chain) -> str:
                return str(node)

        tree = parse("t", "{{a b.c}}", variables=["a", "b"])
        (pipeline,) = tree.root.children
        chain = pipeline.cmds[0].args[1]
        assert ChainCollector().visit(chain) == "b.c"

    def test_return_value(self) -> None:
        class Namer(BaseVisitor[str]):
            def visit_default(self, node: Node) -> str:
                return node.kind.name

        assert Namer().visit(Text(0, "x")) == "TEXT"


class TestTransform:
    def test_identity_returns_equal_tree(self) -> None:
        original = root()
        assert transform(original, lambda n: n) == original

    def test_remove_spaces(self) -> None:
        def strip_spaces(node: Node) -> Node | None:
            if isinstance(node, Space):
                return None
            return node

        original = root()
        result = transform(original, strip_spaces)
        assert not any(isinstance(n, Space) for n in result.children)
        assert any(isinstance(n, Space) for n in original.children)

    def test_rewrite_inside_section(self) -> None:
        def shout(node: Node) -> Node:
            if isinstance(node, Text):
                return dataclasses.replace(node, content=node.content.upper())
            return node

        result = transform(root(), shout)
        section = next(n for n in result.children if isinstance(n, Section))
        assert section.else_body is not None
        assert str(section.else_body) == "NOBODY"

    def test_rename_variables_in_pipeline(self) -> None:
        def rename(node: Node) -> Node:
            if isinstance(node, Variable) and node.ident[0] == "count":
                return dataclasses.replace(node, ident=("total",))
            return node

        result = transform(root(), rename)
        inverted = next(n for n in result.children if isinstance(n, InvertedSection))
        pipeline = inverted.body.children[0]
        assert isinstance(pipeline, Pipeline)
        assert str(pipeline) == "x := . | total"

    def test_cannot_remove_root(self) -> None:
        with pytest.raises(TypeError, match="root"):
            transform(List(0, ()), lambda n: None)

    def test_cannot_remove_section_body(self) -> None:
        def drop_lists(node: Node) -> Node | None:
            if isinstance(node, List) and node.pos != 0:
                return None
            return node

        with pytest.raises(TypeError, match="section body"):
            transform(parse("t", "{{#a}}x{{/a}}").root, drop_lists)

    def test_cannot_remove_chain_term(self) -> None:
        def drop_user(node: Node) -> Node | None:
            if isinstance(node, Variable) and node.ident == ("b",):
                return None
            return node

        tree = parse("t", "{{a b.c}}", variables=["a", "b"])
        with pytest.raises(TypeError, match="chain"):
            transform(tree.root, drop_user)

    def test_original_untouched(self) -> None:
        original = root()
        snapshot = original.copy()
        transform(original, lambda n: None if isinstance(n, Text) else n)
        assert original == snapshot
