"""Exception classes for bigote.

Provides standardized exceptions for error handling throughout bigote.

Hierarchy:
    BigoteError
    └── TemplateError
        ├── LexError      (unclosed tags, malformed delimiter changes)
        └── ParseError    (grammar, section matching, scope, duplicates)

"""

from __future__ import annotations

#: Longest offending-text excerpt carried by an error before truncation.
CONTEXT_LIMIT = 20


def truncate_context(text: str, limit: int = CONTEXT_LIMIT) -> str:
    """Shorten text for error messages, appending an ellipsis when cut.

    Example:
        >>> truncate_context("short")
        'short'
        >>> truncate_context("a" * 25)
        'aaaaaaaaaaaaaaaaaaaa...'
    """
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text


class BigoteError(Exception):
    """Base exception for all bigote errors.

    Subclass this for specific error categories.
    """

    pass


class TemplateError(BigoteError):
    """Error in a template's text, located by template name, line and column.

    Formats as ``template: <name>:<line>:<col>: <message>``.
    """

    def __init__(
        self,
        message: str,
        *,
        name: str = "",
        lineno: int | None = None,
        col_offset: int | None = None,
        context: str = "",
    ) -> None:
        """Initialize template error with optional location.

        Args:
            message: Error description
            name: Name of the template being parsed
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            context: Rendering of the offending token or node
        """
        self.message = message
        self.name = name
        self.lineno = lineno
        self.col_offset = col_offset
        self.context = truncate_context(context)

        location = f"{name}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"

        super().__init__(f"template: {location} {message}")


class LexError(TemplateError):
    """Error raised while tokenizing.

    Raised when a tag is never closed or a delimiter change is malformed.
    """

    pass


class ParseError(TemplateError):
    """Error raised while building the parse tree.

    Raised on unexpected tokens, mismatched or missing section end tags,
    empty commands and pipelines, undefined variables and duplicate
    template definitions.
    """

    pass
