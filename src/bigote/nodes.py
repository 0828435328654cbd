"""Typed AST nodes for bigote.

All AST nodes are frozen dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: A finished tree can be shared, never mutated
- Memory efficiency: __slots__ reduces memory footprint
- Pattern matching: Python 3.10+ match statements work naturally

Every node records ``pos``, the offset in the template source where it
starts, and exposes ``kind``, ``str()`` and ``copy()``.

Node Hierarchy:
Node (base)
├── Leaves
│   ├── Text
│   ├── Newline
│   ├── CarriageReturn
│   ├── Space
│   ├── Variable
│   └── Partial
├── Containers
│   ├── List
│   ├── Section
│   ├── InvertedSection
│   ├── Pipeline
│   ├── Command
│   └── Chain
└── Parser signals (never in a finished tree)
    ├── End
    └── Else

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Self


class NodeType(Enum):
    """Kind tag carried by every node class."""

    TEXT = auto()
    NEWLINE = auto()
    CARRIAGE_RETURN = auto()
    SPACE = auto()
    VARIABLE = auto()
    SECTION = auto()
    INVERTED_SECTION = auto()
    PARTIAL = auto()
    LIST = auto()
    PIPELINE = auto()
    COMMAND = auto()
    CHAIN = auto()
    END = auto()
    ELSE = auto()


# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source offset for error messages and debugging.

    """

    kind: ClassVar[NodeType]

    pos: int

    def copy(self) -> Self:
        """Return a deep copy sharing no container with this node."""
        raise NotImplementedError


# =============================================================================
# Leaf Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal template text with no whitespace or line endings."""

    kind: ClassVar[NodeType] = NodeType.TEXT

    content: str

    def __str__(self) -> str:
        return self.content

    def copy(self) -> Text:
        return Text(self.pos, self.content)


@dataclass(frozen=True, slots=True)
class Newline(Node):
    """A line feed."""

    kind: ClassVar[NodeType] = NodeType.NEWLINE

    content: str = "\n"

    def __str__(self) -> str:
        return self.content

    def copy(self) -> Newline:
        return Newline(self.pos, self.content)


@dataclass(frozen=True, slots=True)
class CarriageReturn(Node):
    """A carriage return, kept apart from Newline so CRLF survives intact."""

    kind: ClassVar[NodeType] = NodeType.CARRIAGE_RETURN

    content: str = "\r"

    def __str__(self) -> str:
        return self.content

    def copy(self) -> CarriageReturn:
        return CarriageReturn(self.pos, self.content)


@dataclass(frozen=True, slots=True)
class Space(Node):
    """A run of spaces and tabs.

    Separate from Text because standalone elision may remove it.

    """

    kind: ClassVar[NodeType] = NodeType.SPACE

    content: str

    def __str__(self) -> str:
        return self.content

    def copy(self) -> Space:
        return Space(self.pos, self.content)


@dataclass(frozen=True, slots=True)
class Variable(Node):
    """A variable reference or declaration.

    Template: {{name}}, {{name.field}}, {{{name}}}, {{&name}}

    ``ident`` holds the name followed by any field names, in lexical order.
    The implicit iterator ``{{.}}`` has ``ident == (".",)``.

    """

    kind: ClassVar[NodeType] = NodeType.VARIABLE

    escaped: bool
    ident: tuple[str, ...]

    @property
    def name(self) -> str:
        """The dotted path, e.g. ``"user.address.city"``."""
        return ".".join(self.ident)

    def __str__(self) -> str:
        return self.name

    def copy(self) -> Variable:
        return Variable(self.pos, self.escaped, tuple(self.ident))


@dataclass(frozen=True, slots=True)
class Partial(Node):
    """A reference to another template, resolved at render time.

    Template: {{>name}}

    """

    kind: ClassVar[NodeType] = NodeType.PARTIAL

    name: str

    def __str__(self) -> str:
        return "{{>" + self.name + "}}"

    def copy(self) -> Partial:
        return Partial(self.pos, self.name)


# =============================================================================
# Container Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class List(Node):
    """An ordered sequence of nodes; the root of every tree."""

    kind: ClassVar[NodeType] = NodeType.LIST

    children: tuple[Node, ...] = ()

    def __str__(self) -> str:
        return "".join(str(child) for child in self.children)

    def copy(self) -> List:
        return List(self.pos, tuple(child.copy() for child in self.children))


@dataclass(frozen=True, slots=True)
class Section(Node):
    """A block rendered when its value is truthy.

    Template: {{#name}} body {{^}} else body {{/name}}

    ``else_body`` is None unless the section contains an empty ``{{^}}`` tag.

    """

    kind: ClassVar[NodeType] = NodeType.SECTION

    name: str
    body: List
    else_body: List | None = None

    def __str__(self) -> str:
        text = "{{#" + self.name + "}}" + str(self.body)
        if self.else_body is not None:
            text += "{{^}}" + str(self.else_body)
        return text + "{{/" + self.name + "}}"

    def copy(self) -> Section:
        else_body = self.else_body.copy() if self.else_body is not None else None
        return Section(self.pos, self.name, self.body.copy(), else_body)


@dataclass(frozen=True, slots=True)
class InvertedSection(Node):
    """A block rendered when its value is falsy or empty.

    Template: {{^name}} body {{/name}}

    """

    kind: ClassVar[NodeType] = NodeType.INVERTED_SECTION

    name: str
    body: List

    def __str__(self) -> str:
        return "{{^" + self.name + "}}" + str(self.body) + "{{/" + self.name + "}}"

    def copy(self) -> InvertedSection:
        return InvertedSection(self.pos, self.name, self.body.copy())


@dataclass(frozen=True, slots=True)
class Chain(Node):
    """A term followed by field accesses.

    Template: {{x := user.address.city}} (the operand ``user.address.city``)

    """

    kind: ClassVar[NodeType] = NodeType.CHAIN

    node: Node
    fields: tuple[str, ...]

    def __str__(self) -> str:
        return ".".join((str(self.node), *self.fields))

    def copy(self) -> Chain:
        return Chain(self.pos, self.node.copy(), tuple(self.fields))


@dataclass(frozen=True, slots=True)
class Command(Node):
    """Space-separated operands evaluated together."""

    kind: ClassVar[NodeType] = NodeType.COMMAND

    args: tuple[Node, ...]

    def __str__(self) -> str:
        return " ".join(str(arg) for arg in self.args)

    def copy(self) -> Command:
        return Command(self.pos, tuple(arg.copy() for arg in self.args))


@dataclass(frozen=True, slots=True)
class Pipeline(Node):
    """Optional declarations followed by one or more piped commands.

    Template: {{total, count := order.items | summary}}

    """

    kind: ClassVar[NodeType] = NodeType.PIPELINE

    escaped: bool
    decls: tuple[Variable, ...]
    cmds: tuple[Command, ...]

    def __str__(self) -> str:
        text = " | ".join(str(cmd) for cmd in self.cmds)
        if self.decls:
            text = ", ".join(str(decl) for decl in self.decls) + " := " + text
        return text

    def copy(self) -> Pipeline:
        return Pipeline(
            self.pos,
            self.escaped,
            tuple(decl.copy() for decl in self.decls),
            tuple(cmd.copy() for cmd in self.cmds),
        )


# =============================================================================
# Parser Signals
# =============================================================================


@dataclass(frozen=True, slots=True)
class End(Node):
    """A section end tag. Consumed by the parser; never in a finished tree."""

    kind: ClassVar[NodeType] = NodeType.END

    name: str

    def __str__(self) -> str:
        return "{{/" + self.name + "}}"

    def copy(self) -> End:
        return End(self.pos, self.name)


@dataclass(frozen=True, slots=True)
class Else(Node):
    """An empty ``{{^}}`` splitting a section body. Never in a finished tree."""

    kind: ClassVar[NodeType] = NodeType.ELSE

    def __str__(self) -> str:
        return "{{^}}"

    def copy(self) -> Else:
        return Else(self.pos)


#: Leaf nodes that hold only whitespace.
WHITESPACE_NODES = (Space, Newline, CarriageReturn)
