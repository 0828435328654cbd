"""Parsing subsystem for the bigote parser.

Provides mixin classes for modular parsing functionality:
- `TokenNavigationMixin`: Lookahead, history and error reporting
- `StandaloneMixin`: Whitespace elision around standalone tags
- `PipelineParsingMixin`: Variable tag payloads (declarations, commands)

Example:
    >>> from bigote.parsing import (
    ...     TokenNavigationMixin,
    ...     StandaloneMixin,
    ...     PipelineParsingMixin,
    ... )
    >>> class Parser(TokenNavigationMixin, StandaloneMixin, PipelineParsingMixin):
    ...     pass

"""

from bigote.parsing.pipeline import PipelineParsingMixin
from bigote.parsing.scope import IMPLICIT_ITERATOR, ScopeStack
from bigote.parsing.standalone import StandaloneMixin
from bigote.parsing.token_nav import TokenNavigationMixin

__all__ = [
    "TokenNavigationMixin",
    "StandaloneMixin",
    "PipelineParsingMixin",
    "ScopeStack",
    "IMPLICIT_ITERATOR",
]
