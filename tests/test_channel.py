"""Tests for the bounded lexer-to-parser token hand-off."""

import threading
import time
from collections.abc import Iterator

import pytest

from bigote.channel import TokenChannel
from bigote.lexer import Lexer
from bigote.tokens import Token, TokenType

EOF = Token(TokenType.EOF, "", 3)


def counted(produced: list[int], count: int) -> Iterator[Token]:
    """Yield ``count`` text tokens then EOF, recording each one produced."""
    for i in range(count):
        produced.append(i)
        yield Token(TokenType.TEXT, "x", i)
    produced.append(count)
    yield Token(TokenType.EOF, "", count)


@pytest.fixture(params=[True, False], ids=["threaded", "lazy"])
def threaded(request: pytest.FixtureRequest) -> bool:
    return request.param


class TestReceive:
    def test_tokens_in_order(self, threaded: bool) -> None:
        with TokenChannel(Lexer("a {{b}}").tokenize(), threaded=threaded) as channel:
            received = [channel.receive() for _ in range(6)]
        assert [t.type for t in received] == [
            TokenType.TEXT,
            TokenType.SPACE,
            TokenType.OPEN_ESCAPED,
            TokenType.IDENTIFIER,
            TokenType.CLOSE_TAG,
            TokenType.EOF,
        ]

    def test_terminal_repeats(self, threaded: bool) -> None:
        channel = TokenChannel(iter([EOF]), threaded=threaded)
        assert channel.receive() is EOF
        assert channel.receive() is EOF
        assert channel.finished

    def test_error_token_is_terminal(self, threaded: bool) -> None:
        channel = TokenChannel(Lexer("{{x").tokenize(), threaded=threaded)
        assert channel.drain() == Token(TokenType.ERROR, "unclosed escaped variable tag", 2)
        assert channel.receive().type is TokenType.ERROR

    def test_producer_exception_reraised(self, threaded: bool) -> None:
        def broken() -> Iterator[Token]:
            yield Token(TokenType.TEXT, "a", 0)
            raise ValueError("boom")

        channel = TokenChannel(broken(), threaded=threaded)
        assert channel.receive().value == "a"
        with pytest.raises(ValueError, match="boom"):
            channel.receive()
        with pytest.raises(ValueError, match="boom"):
            channel.receive()

    def test_stream_without_terminal(self, threaded: bool) -> None:
        channel = TokenChannel(iter([Token(TokenType.TEXT, "a", 0)]), threaded=threaded)
        channel.receive()
        with pytest.raises(RuntimeError, match="without EOF"):
            channel.receive()

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            TokenChannel(iter([EOF]), capacity=0)


class TestDrain:
    def test_drain_consumes_everything(self, threaded: bool) -> None:
        produced: list[int] = []
        channel = TokenChannel(counted(produced, 50), threaded=threaded)
        channel.receive()
        terminal = channel.drain()
        assert terminal is not None and terminal.type is TokenType.EOF
        assert len(produced) == 51

    def test_exit_drains(self, threaded: bool) -> None:
        produced: list[int] = []
        with TokenChannel(counted(produced, 20), threaded=threaded):
            pass
        assert len(produced) == 21

    def test_drain_after_failure(self, threaded: bool) -> None:
        def broken() -> Iterator[Token]:
            raise ValueError("boom")
            yield  # pragma: no cover

        channel = TokenChannel(broken(), threaded=threaded)
        assert channel.drain() is None
        assert channel.finished

    def test_producer_thread_finishes(self) -> None:
        before = {t for t in threading.enumerate() if t.name == "bigote-lexer"}
        with TokenChannel(Lexer("a " * 100).tokenize()):
            pass
        after = {t for t in threading.enumerate() if t.name == "bigote-lexer"}
        assert after <= before


class TestBackpressure:
    def test_producer_blocks_when_full(self) -> None:
        produced: list[int] = []
        channel = TokenChannel(counted(produced, 100), capacity=2)
        time.sleep(0.05)
        # Two tokens queued plus one waiting in put()
        assert len(produced) <= 3
        channel.drain()

    def test_lazy_mode_pulls_on_demand(self) -> None:
        produced: list[int] = []
        channel = TokenChannel(counted(produced, 100), threaded=False)
        assert produced == []
        channel.receive()
        assert produced == [0]
        channel.drain()
