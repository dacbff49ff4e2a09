"""Immutable cursor infrastructure for type-safe parsing.

Implements the immutable cursor pattern used by the selector grammar.
Python 3.13+. Zero external dependencies.

Design Philosophy:
    - Cursor is immutable (frozen dataclass)
    - EOF is a state (is_eof), not a return value
    - Every advance() returns NEW cursor (prevents infinite loops)
    - Line:column computed on-demand (O(n) only for errors)

Line Ending Support:
    CSS normalizes CR, FF and CRLF to LF before tokenizing; \\n is the line
    delimiter for line:column computation.
"""

from dataclasses import dataclass, field

from scopecss.diagnostics import ErrorTemplate

__all__ = ["CSS_WHITESPACE", "Cursor", "LineOffsetCache", "ParseError", "ParseResult"]

# CSS whitespace per CSS Syntax Level 3: space, tab, line feed, CR, form feed.
CSS_WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f")


@dataclass(frozen=True, slots=True)
class Cursor:
    """Immutable source position tracker.

    Example:
        >>> cursor = Cursor(".a", 0)
        >>> cursor.current
        '.'
        >>> cursor.advance().current
        'a'
        >>> cursor.current  # Original unchanged (immutability)
        '.'
        >>> Cursor(".a", 2).is_eof
        True
    """

    source: str
    pos: int

    @property
    def is_eof(self) -> bool:
        """Check if at end of input."""
        return self.pos >= len(self.source)

    @property
    def current(self) -> str:
        """Get current character.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            diagnostic = ErrorTemplate.unexpected_eof(self.pos)
            raise EOFError(diagnostic.message)
        return self.source[self.pos]

    def peek(self, offset: int = 0) -> str | None:
        """Peek at character with offset without advancing.

        Args:
            offset: Offset from current position (0 = current, 1 = next)

        Returns:
            Character at position + offset, or None if beyond EOF
        """
        target_pos = self.pos + offset
        if target_pos >= len(self.source):
            return None
        return self.source[target_pos]

    def advance(self, count: int = 1) -> "Cursor":
        """Return new cursor advanced by count positions (clamped to EOF)."""
        new_pos = min(self.pos + count, len(self.source))
        return Cursor(self.source, new_pos)

    def slice_from(self, start_pos: int) -> str:
        """Extract source text from start_pos up to the current position.

        Example:
            >>> start = Cursor("hover)", 0)
            >>> end = start.advance(5)
            >>> end.slice_from(start.pos)
            'hover'
        """
        return self.source[start_pos : self.pos]

    def slice_ahead(self, n: int) -> str:
        """Get next n characters without advancing cursor."""
        return self.source[self.pos : self.pos + n]

    def expect(self, char: str) -> "Cursor | None":
        """Consume character if it matches expected, return None otherwise."""
        if not self.is_eof and self.current == char:
            return self.advance()
        return None

    def skip_whitespace(self) -> "Cursor":
        """Skip CSS whitespace characters (space, tab, LF, CR, FF)."""
        c = self
        while not c.is_eof and c.current in CSS_WHITESPACE:
            c = c.advance()
        return c

    def compute_line_col(self) -> tuple[int, int]:
        """Compute line and column for current position.

        Returns:
            (line, column) tuple (1-indexed, like text editors)

        Example:
            >>> Cursor("a,\\nb", 3).compute_line_col()
            (2, 1)
        """
        line = self.source.count("\n", 0, self.pos) + 1
        last_newline = self.source.rfind("\n", 0, self.pos)
        col = self.pos - last_newline if last_newline >= 0 else self.pos + 1
        return (line, col)


class LineOffsetCache:
    """Cached line offsets for converting between offsets and line:column.

    Precomputes line start offsets in a single O(n) pass, then answers
    lookups in O(log n) (offset -> line:column) or O(1) (line:column -> offset).

    Example:
        >>> cache = LineOffsetCache(".a {}\\n.b {}")
        >>> cache.get_line_col(6)
        (2, 1)
        >>> cache.get_offset(2, 1)
        6

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        """Build line offset cache from source."""
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get 1-indexed (line, column) for a character offset."""
        pos = max(0, min(pos, self._source_len))

        left, right = 0, len(self._offsets) - 1
        while left < right:
            mid = (left + right + 1) // 2
            if self._offsets[mid] <= pos:
                left = mid
            else:
                right = mid - 1

        return (left + 1, pos - self._offsets[left] + 1)

    def get_offset(self, line: int, column: int) -> int:
        """Get character offset for a 1-indexed (line, column), clamped to the source."""
        line_index = max(0, min(line - 1, len(self._offsets) - 1))
        return max(0, min(self._offsets[line_index] + column - 1, self._source_len))


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Parser result containing parsed value and new cursor position.

    Every grammar rule has the signature:
        def parse_foo(cursor: Cursor, context: ParseContext) -> ParseResult[Foo] | None

    None signals failure; the failure details are recorded on the context.
    """

    value: T
    cursor: Cursor


@dataclass(frozen=True, slots=True)
class ParseError:
    """Parse error with location and context.

    Example:
        >>> error = ParseError("Expected ']'", Cursor("[href", 5), expected=("]",))
        >>> error.format_error()
        "1:6: Expected ']' (expected: ']')"
    """

    message: str
    cursor: Cursor
    expected: tuple[str, ...] = field(default_factory=tuple)

    def format_error(self) -> str:
        """Format error with line:column."""
        line, col = self.cursor.compute_line_col()
        error_msg = f"{line}:{col}: {self.message}"

        if self.expected:
            expected_str = ", ".join(f"'{e}'" for e in self.expected)
            error_msg += f" (expected: {expected_str})"

        return error_msg

    def format_with_context(self, context_lines: int = 2) -> str:
        """Format error with source context and a caret under the error position.

        Args:
            context_lines: Number of lines to show before/after error
        """
        line, col = self.cursor.compute_line_col()
        lines = self.cursor.source.split("\n")

        result_lines = [self.format_error(), ""]

        start_line = max(1, line - context_lines)
        end_line = min(len(lines), line + context_lines)

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i:4} | "
            result_lines.append(line_num_str + lines[i - 1])
            if i == line:
                pointer = " " * (len(line_num_str) + col - 1) + "^"
                result_lines.append(pointer)

        return "\n".join(result_lines)
