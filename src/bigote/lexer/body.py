"""Tag payload scanner for the pipeline grammar.

The main lexer hands the parser each variable tag's payload as a single
IDENTIFIER token. scan_body splits that payload into the small vocabulary
the pipeline grammar works with. Positions stay absolute, so errors point
into the original template.

Example:
    >>> [t.type.name for t in scan_body("x := user.name | upper", 2)]
    ['IDENTIFIER', 'SPACE', 'DECLARE', 'SPACE', 'IDENTIFIER', 'FIELD',
     'SPACE', 'PIPE', 'SPACE', 'IDENTIFIER', 'EOF']

"""

from __future__ import annotations

from bigote.tokens import Token, TokenType

BODY_SPACE = frozenset(" \t\r\n")
_PUNCTUATION = {"|": TokenType.PIPE, ",": TokenType.COMMA}
_NAME_STOP = BODY_SPACE | frozenset(".|,")


def _name_end(payload: str, pos: int) -> int:
    """Return the offset just past the name starting at pos."""
    length = len(payload)
    while pos < length:
        char = payload[pos]
        if char in _NAME_STOP or payload.startswith(":=", pos):
            break
        pos += 1
    return pos


def scan_body(payload: str, offset: int = 0) -> list[Token]:
    """Split a tag payload into pipeline tokens.

    Args:
        payload: Text between a variable tag's open and close delimiters
        offset: Absolute position of the payload in the template source

    Returns:
        Tokens covering the whole payload, followed by one EOF token.
    """
    tokens: list[Token] = []
    length = len(payload)
    pos = 0

    while pos < length:
        char = payload[pos]
        start = pos

        if char in BODY_SPACE:
            while pos < length and payload[pos] in BODY_SPACE:
                pos += 1
            token_type = TokenType.SPACE
        elif char in _PUNCTUATION:
            pos += 1
            token_type = _PUNCTUATION[char]
        elif payload.startswith(":=", pos):
            pos += 2
            token_type = TokenType.DECLARE
        elif char == ".":
            pos = _name_end(payload, pos + 1)
            token_type = TokenType.FIELD if pos > start + 1 else TokenType.DOT
        else:
            pos = _name_end(payload, pos)
            token_type = TokenType.IDENTIFIER

        tokens.append(Token(token_type, payload[start:pos], offset + start))

    tokens.append(Token(TokenType.EOF, "", offset + length))
    return tokens
