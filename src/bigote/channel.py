"""Bounded hand-off between the lexer and the parser.

The lexer runs as an independent producer feeding a small queue; the parser
pulls tokens one at a time and blocks until one is available. The producer
blocks while the queue is full, so at most ``capacity`` tokens are ever
buffered ahead of the parser.

Thread Safety:
A TokenChannel has exactly one producer (its lexer thread) and one consumer
(the parser that created it). Do not share a channel between parsers.

"""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterator
from types import TracebackType
from typing import cast

from bigote.tokens import Token


class _ProducerFailure:
    """Carries an exception raised inside the producer to the consumer."""

    __slots__ = ("exc",)

    def __init__(self, exc: BaseException) -> None:
        self.exc = exc


class TokenChannel:
    """Single-producer/single-consumer token pipe with backpressure.

    The producer is expected to end its stream with exactly one terminal
    token (EOF or ERROR). Once the terminal token has been received, every
    later ``receive()`` returns it again without blocking.

    Usage:
        >>> with TokenChannel(Lexer("Hi {{name}}").tokenize()) as channel:
        ...     first = channel.receive()
        >>> first
        Token(TEXT, 'Hi', 0)

    Args:
        tokens: Token iterator to drain (typically ``Lexer.tokenize()``)
        capacity: Number of tokens the producer may run ahead
        threaded: Run the producer on a daemon thread. When False, tokens
            are pulled lazily from the iterator on the consumer's thread.

    """

    __slots__ = ("_failure", "_iterator", "_queue", "_terminal", "_thread")

    def __init__(
        self,
        tokens: Iterator[Token],
        capacity: int = 2,
        *,
        threaded: bool = True,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"channel capacity must be at least 1, got {capacity}")
        self._terminal: Token | None = None
        self._failure: BaseException | None = None
        self._queue: queue.Queue[Token | _ProducerFailure] | None = None
        self._thread: threading.Thread | None = None
        self._iterator: Iterator[Token] | None = None

        if threaded:
            self._queue = queue.Queue(maxsize=capacity)
            self._thread = threading.Thread(
                target=self._produce,
                args=(tokens, self._queue),
                name="bigote-lexer",
                daemon=True,
            )
            self._thread.start()
        else:
            self._iterator = iter(tokens)

    def _produce(
        self,
        tokens: Iterator[Token],
        sink: queue.Queue[Token | _ProducerFailure],
    ) -> None:
        """Producer loop: forward every token, or the exception that stopped it."""
        try:
            for token in tokens:
                sink.put(token)
                if token.is_terminal:
                    return
        except Exception as exc:
            sink.put(_ProducerFailure(exc))
            return
        sink.put(_ProducerFailure(RuntimeError("token stream ended without EOF")))

    @property
    def finished(self) -> bool:
        """Whether the terminal token has been received."""
        return self._terminal is not None or self._failure is not None

    def receive(self) -> Token:
        """Return the next token, blocking until the producer supplies it.

        Raises:
            Exception: Whatever the producer raised, re-raised here.
            RuntimeError: If the producer stopped without a terminal token.
        """
        if self._failure is not None:
            raise self._failure
        if self._terminal is not None:
            return self._terminal

        if self._queue is not None:
            item = self._queue.get()
        else:
            try:
                item = next(cast(Iterator[Token], self._iterator))
            except StopIteration:
                item = _ProducerFailure(RuntimeError("token stream ended without EOF"))
            except Exception as exc:
                item = _ProducerFailure(exc)

        if isinstance(item, _ProducerFailure):
            self._failure = item.exc
            self._join()
            raise item.exc

        if item.is_terminal:
            self._terminal = item
            self._join()
        return item

    def drain(self) -> Token | None:
        """Consume and discard tokens up to the terminal token.

        Returns:
            The terminal token, or None if the producer failed.
        """
        while not self.finished:
            try:
                self.receive()
            except Exception:
                # The failure stays recorded on the channel.
                break
        return self._terminal

    def _join(self) -> None:
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def __enter__(self) -> TokenChannel:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.drain()
