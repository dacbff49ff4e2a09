"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        2000-2999: Traversal errors (depth limits on programmatic ASTs)
        3000-3999: CSS syntax errors (stylesheet and selector parsing)
        4000-4999: HTML errors (fragment parsing)
    """

    # Traversal errors (2000-2999)
    MAX_DEPTH_EXCEEDED = 2010

    # CSS syntax errors (3000-3999)
    UNEXPECTED_EOF = 3001
    CSS_SYNTAX_ERROR = 3002  # Reported by the stylesheet tokenizer/grammar
    SELECTOR_SYNTAX_ERROR = 3003  # Reported by the selector grammar
    EMPTY_SELECTOR = 3004
    PARSE_NESTING_DEPTH_EXCEEDED = 3005

    # HTML errors (4000-4999)
    HTML_PARSE_FAILED = 4001


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, line is
                less than 1, or column is less than 1.
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Carries enough information for
    callers to tell which stage failed (CSS or HTML) and where.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for non-syntax errors)
        hint: Suggestion for fixing the error
        help_url: Documentation URL for this error
        excerpt: Offending source text (selector or at-rule), if known
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    help_url: str | None = None
    excerpt: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Example output:
            error[SELECTOR_SYNTAX_ERROR]: Expected identifier after '.'
              --> line 3, column 2
              = selector: ..button
              = help: Check the selector for stray or doubled punctuation

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
