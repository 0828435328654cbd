"""Source location tracking for error messages and debugging.

Tokens and nodes carry only an absolute offset into the template text.
SourceLocation turns that offset into a line and column on demand, which
keeps the hot lexing path free of line bookkeeping.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    All positions are 1-indexed (lineno and col_offset start at 1).

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column offset (1-indexed)
        offset: Absolute offset in the source string
        source_file: Template name (optional)

    Examples:
            >>> loc = SourceLocation.from_offset("ab\\ncd", 4, "greeting")
            >>> str(loc)
            'greeting:2:2'

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    lineno: int
    col_offset: int
    offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "main:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def from_offset(
        cls,
        source: str,
        offset: int,
        source_file: str | None = None,
    ) -> SourceLocation:
        """Compute the line and column of an offset in source.

        Offsets past the end of source are clamped to its length.
        """
        offset = max(0, min(offset, len(source)))
        head = source[:offset]
        last_nl = head.rfind("\n")
        return cls(
            lineno=head.count("\n") + 1,
            col_offset=offset - last_nl,
            offset=offset,
            source_file=source_file,
        )
