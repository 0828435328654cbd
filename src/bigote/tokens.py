"""Token and TokenType definitions for the bigote lexer.

The lexer produces a stream of Token objects that the parser consumes.
Each Token has a type, the raw text it covers, and the offset of that text
in the template source.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Token types produced by the lexer.

    Organized by category for clarity:
    - Stream terminals (EOF, ERROR)
    - Text between tags (text, space and line-ending runs)
    - Tag open markers, one per tag kind
    - Tag parts (close delimiter, payload, discarded body)
    - Pipeline body pieces, produced only by ``scan_body``

    """

    # Stream terminals
    EOF = auto()
    ERROR = auto()

    # Text between tags
    TEXT = auto()
    SPACE = auto()  # run of spaces and tabs
    NEWLINE = auto()  # \n
    CARRIAGE_RETURN = auto()  # \r

    # Tag open markers
    OPEN_ESCAPED = auto()  # {{
    OPEN_UNESCAPED = auto()  # {{{ or {{&
    OPEN_SECTION = auto()  # {{#
    OPEN_INVERTED = auto()  # {{^
    OPEN_END_SECTION = auto()  # {{/
    OPEN_COMMENT = auto()  # {{!
    OPEN_PARTIAL = auto()  # {{>
    OPEN_DELIMITER = auto()  # {{=

    # Tag parts
    CLOSE_TAG = auto()  # }} (or }}} for the triple mustache)
    IDENTIFIER = auto()  # tag payload, or a name inside a pipeline body
    DISCARD = auto()  # comment body, delimiter directive body

    # Pipeline body
    FIELD = auto()  # .name
    DOT = auto()  # .
    PIPE = auto()  # |
    DECLARE = auto()  # :=
    COMMA = auto()  # ,


#: Kinds that end a token stream. Exactly one is emitted per stream.
TERMINAL_TYPES = frozenset({TokenType.EOF, TokenType.ERROR})

@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Tokens are the atomic units passed from lexer to parser. For ERROR
    tokens, ``value`` holds the error message instead of source text.

    Attributes:
        type: The token type (from TokenType enum)
        value: The raw string value from source
        pos: Absolute offset of the token in the source string

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    type: TokenType
    value: str
    pos: int

    @property
    def end(self) -> int:
        """Offset just past the token's text."""
        if self.type is TokenType.ERROR:
            return self.pos
        return self.pos + len(self.value)

    @property
    def is_terminal(self) -> bool:
        """Whether this token ends the stream."""
        return self.type in TERMINAL_TYPES

    def __str__(self) -> str:
        """Diagnostic form used in error messages."""
        if self.type is TokenType.EOF:
            return "EOF"
        if self.type is TokenType.ERROR:
            return self.value
        return repr(self.value)

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.pos})"
