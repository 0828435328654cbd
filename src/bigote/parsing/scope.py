"""Lexical scope tracking for declared pipeline variables.

Each section body gets its own frame: names declared inside a section are
visible to the rest of that section (including nested sections) and
disappear when it closes.
"""

from __future__ import annotations

from collections.abc import Iterable

#: The implicit iterator is always in scope.
IMPLICIT_ITERATOR = "."


class ScopeStack:
    """Stack of frames holding declared variable names.

    Usage:
        >>> scope = ScopeStack(["list"])
        >>> scope.push()
        >>> scope.declare("item")
        >>> scope.is_declared("item"), scope.is_declared("list")
        (True, True)
        >>> scope.pop()
        >>> scope.is_declared("item")
        False

    """

    __slots__ = ("_frames",)

    def __init__(self, root_names: Iterable[str] = ()) -> None:
        self._frames: list[list[str]] = [list(root_names)]

    @property
    def depth(self) -> int:
        """Number of open frames, the root frame included."""
        return len(self._frames)

    def push(self) -> None:
        """Open a frame for a section body."""
        self._frames.append([])

    def pop(self) -> None:
        """Close the innermost frame. The root frame is never popped."""
        if len(self._frames) == 1:
            raise RuntimeError("cannot pop the root scope")
        self._frames.pop()

    def declare(self, name: str) -> None:
        """Add a name to the innermost frame."""
        self._frames[-1].append(name)

    def is_declared(self, name: str) -> bool:
        """Whether a name is visible from the innermost frame."""
        if name == IMPLICIT_ITERATOR:
            return True
        return any(name in frame for frame in reversed(self._frames))
