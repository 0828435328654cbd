"""ContextVar-based parse configuration for bigote.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per parse call, read by the parser in that context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Through the public API
    tree = bigote.parse("main", text, config=ParseConfig(strict_variables=False))

    # Direct parser usage (advanced)
    from bigote.config import set_parse_config, reset_parse_config, ParseConfig

    set_parse_config(ParseConfig(threaded_lexer=False))
    try:
        tree = Parser(text, "main").parse()
    finally:
        reset_parse_config()

    # Or use the context manager
    with parse_config_context(ParseConfig(strict_variables=False)):
        tree = Parser(text, "main").parse()

"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Frozen dataclass ensures thread-safety (immutable after creation).

    Note: the template name and delimiters are intentionally excluded; they
    are per-call arguments, not configuration.

    Attributes:
        strict_variables: Reject references to variables no pipeline declared
        channel_capacity: Tokens the lexer may run ahead of the parser
        threaded_lexer: Run the lexer on its own thread. When False the
            token stream is pulled lazily on the parsing thread.
        max_nesting: Deepest allowed section nesting. Sections recurse on
            the call stack, so the limit keeps deep input from exhausting it.
        logger: Logger receiving parser diagnostics. None uses the
            silent-by-default "bigote" loggers.

    """

    strict_variables: bool = True
    channel_capacity: int = 2
    threaded_lexer: bool = True
    max_nesting: int = 100
    logger: logging.Logger | None = None

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ParseConfig":
        """Create ParseConfig from dictionary.

        Only includes keys that are valid ParseConfig fields; unknown keys
        are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ParseConfig attribute names.

        Returns:
            New ParseConfig instance with values from dict.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "strict_variables": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.strict_variables
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

# Thread-local configuration via ContextVar
_parse_config: ContextVar[ParseConfig] = ContextVar(
    "parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local).

    Returns:
        The active ParseConfig for this thread/context.

    """
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for current context.

    Args:
        config: ParseConfig instance to use for this context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Useful for tests and isolated parsing operations.

    Args:
        config: ParseConfig to use within the context.

    Yields:
        None

    Example:
        >>> with parse_config_context(ParseConfig(strict_variables=False)):
        ...     tree = Parser("Hi {{name}}", "greeting").parse()
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
