"""Error-path and malformed input tests.

Covers error construction and formatting, the exception hierarchy, and
the guarantee that malformed templates only ever raise TemplateError.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from bigote import ParseConfig, parse
from bigote.errors import (
    BigoteError,
    LexError,
    ParseError,
    TemplateError,
    truncate_context,
)
from bigote.location import SourceLocation

# =========================================================================
# TemplateError construction and formatting
# =========================================================================


class TestTemplateErrorFormatting:
    """Verify TemplateError produces well-formatted messages."""

    def test_full_location(self) -> None:
        err = ParseError("empty command", name="main", lineno=3, col_offset=7)
        assert str(err) == "template: main:3:7: empty command"
        assert err.message == "empty command"

    def test_line_only(self) -> None:
        err = ParseError("bad", name="main", lineno=3)
        assert str(err) == "template: main:3: bad"

    def test_no_location(self) -> None:
        err = LexError("bad", name="main")
        assert str(err) == "template: main: bad"
        assert err.lineno is None
        assert err.col_offset is None

    def test_context_truncated(self) -> None:
        err = ParseError("x", context="b" * 40)
        assert err.context == "b" * 20 + "..."

    def test_short_context_kept(self) -> None:
        assert ParseError("x", context="short").context == "short"


class TestHierarchy:
    def test_parse_error(self) -> None:
        err = ParseError("x")
        assert isinstance(err, TemplateError)
        assert isinstance(err, BigoteError)

    def test_lex_error(self) -> None:
        err = LexError("x")
        assert isinstance(err, TemplateError)
        assert not isinstance(err, ParseError)


class TestTruncateContext:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", ""),
            ("a" * 20, "a" * 20),
            ("a" * 21, "a" * 20 + "..."),
        ],
    )
    def test_limit(self, text: str, expected: str) -> None:
        assert truncate_context(text) == expected

    def test_custom_limit(self) -> None:
        assert truncate_context("abcdef", 3) == "abc..."


# =========================================================================
# Source locations
# =========================================================================


class TestSourceLocation:
    @pytest.mark.parametrize(
        ("source", "offset", "line", "col"),
        [
            ("abc", 0, 1, 1),
            ("abc", 2, 1, 3),
            ("ab\ncd", 3, 2, 1),
            ("ab\ncd", 4, 2, 2),
            ("a\n\nb", 3, 3, 1),
            ("abc", 99, 1, 4),
        ],
    )
    def test_from_offset(self, source: str, offset: int, line: int, col: int) -> None:
        loc = SourceLocation.from_offset(source, offset)
        assert (loc.lineno, loc.col_offset) == (line, col)

    def test_str(self) -> None:
        assert str(SourceLocation.from_offset("ab\ncd", 4, "greeting")) == "greeting:2:2"
        assert str(SourceLocation(1, 5)) == "1:5"


# =========================================================================
# Malformed templates
# =========================================================================


class TestMalformedInput:
    """Malformed input raises TemplateError and nothing else."""

    @pytest.mark.parametrize(
        ("text", "error"),
        [
            ("{{", LexError),
            ("{{#", LexError),
            ("{{=", LexError),
            ("{{=<% %>=}}<%x", LexError),
            ("{{#a}}", ParseError),
            ("{{/a}}", ParseError),
            ("{{a|}}", ParseError),
        ],
    )
    def test_error_type(self, text: str, error: type[TemplateError]) -> None:
        with pytest.raises(error):
            parse("t", text, variables=["a"])

    def test_lex_error_after_delimiter_change_is_located(self) -> None:
        with pytest.raises(LexError) as exc_info:
            parse("t", "{{=<% %>=}}\n\n<%x")
        assert exc_info.value.lineno == 3
        assert exc_info.value.col_offset == 3

    @given(st.text(alphabet="{}!#^/&>=<%|.:, \nab", max_size=120))
    @settings(max_examples=200, deadline=None)
    def test_only_template_errors(self, text: str) -> None:
        try:
            tree = parse("t", text, config=ParseConfig(strict_variables=False))
        except TemplateError:
            return
        assert tree.name == "t"
