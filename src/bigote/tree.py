"""Parse trees and template sets.

A Tree pairs a template name with the root List produced by the parser.
A template set is any mutable mapping from template name to Tree; the
parser registers every section body in it, alongside the top-level tree.

Thread Safety:
Trees are frozen. Template sets are plain mappings owned by the caller;
guard them yourself if several threads parse into the same set.

"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass

from bigote.errors import ParseError, truncate_context
from bigote.location import SourceLocation
from bigote.nodes import WHITESPACE_NODES, List, Node, Text

#: Name -> tree mapping that accumulates definitions across parse calls.
TemplateSet = MutableMapping[str, "Tree"]


@dataclass(frozen=True, slots=True)
class Tree:
    """A parsed template.

    Attributes:
        name: Template name (section name for section trees)
        root: Top-level node list
        text: Source text the tree was parsed from

    """

    name: str
    root: List
    text: str = ""

    @property
    def is_empty(self) -> bool:
        """Whether the tree holds nothing but whitespace."""
        return is_empty_tree(self.root)

    def copy(self) -> Tree:
        """Return a deep copy of the tree."""
        return Tree(self.name, self.root.copy(), self.text)

    def error_context(self, node: Node) -> tuple[str, str]:
        """Describe where a node sits in the source, for error reports.

        Returns:
            ``("<name>:<line>:<col>", context)``, where context is the node's
            string form cut to 20 characters plus an ellipsis.
        """
        location = SourceLocation.from_offset(self.text, node.pos, self.name)
        return f"{self.name}:{location.lineno}:{location.col_offset}", truncate_context(str(node))


def is_empty_tree(node: Node | None) -> bool:
    """Report whether a node contains nothing but whitespace.

    Example:
        >>> is_empty_tree(List(0, (Space(0, "  "), Newline(2))))
        True
    """
    if node is None:
        return True
    if isinstance(node, List):
        return all(is_empty_tree(child) for child in node.children)
    if isinstance(node, WHITESPACE_NODES):
        return True
    if isinstance(node, Text):
        return not node.content.strip()
    return False


def add_tree(template_set: TemplateSet, tree: Tree) -> None:
    """Register a tree under its name.

    An absent or empty existing definition is replaced. Redefining a
    non-empty template with an empty tree keeps the existing one.

    Raises:
        ParseError: Both the existing and the new definition are non-empty.
    """
    existing = template_set.get(tree.name)
    if existing is None or existing.is_empty:
        template_set[tree.name] = tree
        return
    if not tree.is_empty:
        raise ParseError(f'multiple definition of template "{tree.name}"', name=tree.name)
