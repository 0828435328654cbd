"""Tests for splitting variable tag payloads into pipeline tokens."""

import pytest

from bigote.lexer import scan_body
from bigote.tokens import Token, TokenType


def types(payload: str) -> list[TokenType]:
    return [t.type for t in scan_body(payload)]


class TestScanBody:
    def test_single_name(self) -> None:
        assert scan_body("name", 2) == [
            Token(TokenType.IDENTIFIER, "name", 2),
            Token(TokenType.EOF, "", 6),
        ]

    def test_dotted_chain(self) -> None:
        assert scan_body("user.address.city") == [
            Token(TokenType.IDENTIFIER, "user", 0),
            Token(TokenType.FIELD, ".address", 4),
            Token(TokenType.FIELD, ".city", 12),
            Token(TokenType.EOF, "", 17),
        ]

    def test_implicit_iterator(self) -> None:
        assert types(".") == [TokenType.DOT, TokenType.EOF]

    def test_declaration_and_pipe(self) -> None:
        assert types("x := user.name | upper") == [
            TokenType.IDENTIFIER,
            TokenType.SPACE,
            TokenType.DECLARE,
            TokenType.SPACE,
            TokenType.IDENTIFIER,
            TokenType.FIELD,
            TokenType.SPACE,
            TokenType.PIPE,
            TokenType.SPACE,
            TokenType.IDENTIFIER,
            TokenType.EOF,
        ]

    def test_declare_without_spaces(self) -> None:
        assert [t.value for t in scan_body("a,b:=c")] == ["a", ",", "b", ":=", "c", ""]

    def test_whitespace_run_includes_newlines(self) -> None:
        tokens = scan_body(" \t\n x")
        assert tokens[0] == Token(TokenType.SPACE, " \t\n ", 0)

    def test_lone_colon_is_part_of_name(self) -> None:
        assert scan_body("a:b")[0] == Token(TokenType.IDENTIFIER, "a:b", 0)

    def test_dot_before_field(self) -> None:
        assert types("..name") == [TokenType.DOT, TokenType.FIELD, TokenType.EOF]

    @pytest.mark.parametrize("payload", ["", "   "])
    def test_blank_payload(self, payload: str) -> None:
        assert types(payload)[-1] is TokenType.EOF
        assert TokenType.IDENTIFIER not in types(payload)
