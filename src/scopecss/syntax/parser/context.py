"""Explicit parse context for the selector grammar.

Replaces thread-local state with explicit parameter passing for:
- Thread safety without global state
- Easier testing (no state reset needed)
- Clear dependency flow
"""

from dataclasses import dataclass

from scopecss.constants import MAX_DEPTH
from scopecss.syntax.cursor import Cursor, ParseError

__all__ = ["ParseContext"]


@dataclass(slots=True)
class ParseContext:
    """Mutable per-parse state shared by all grammar rules of one parse call.

    Grammar rules return None on failure after recording why via fail().
    Only the first failure is kept: it is the innermost one, since callers
    propagate None without recording anything themselves.

    Attributes:
        max_nesting_depth: Maximum nesting of selector-taking functional
            pseudo-classes (:is(:not(...)))
        current_depth: Current nesting depth (0 = top-level selector list)
        error: First recorded failure, if any
        depth_exceeded: The recorded failure is a nesting limit violation
    """

    max_nesting_depth: int = MAX_DEPTH
    current_depth: int = 0
    error: ParseError | None = None
    depth_exceeded: bool = False

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been reached."""
        return self.current_depth >= self.max_nesting_depth

    def fail(self, message: str, cursor: Cursor, expected: tuple[str, ...] = ()) -> None:
        """Record a failure at cursor unless an inner failure was already recorded."""
        if self.error is None:
            self.error = ParseError(message, cursor, expected)

    def fail_depth(self, cursor: Cursor) -> None:
        """Record a nesting limit violation at cursor."""
        if self.error is None:
            self.depth_exceeded = True
            self.error = ParseError(
                f"Selector nesting depth limit exceeded (max: {self.max_nesting_depth})",
                cursor,
            )
