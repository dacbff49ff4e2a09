"""scopecss exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.
The exception class tells callers which stage failed: CSS parsing,
HTML parsing, or tree traversal.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class ScopeCssError(Exception):
    """Base exception for all scopecss errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize ScopeCssError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class CssParseError(ScopeCssError):
    """CSS text is not syntactically valid.

    Fatal for the whole scoping operation: no partial output is produced.
    Line and column point into the original stylesheet when known.
    """

    @property
    def line(self) -> int | None:
        """1-indexed line of the syntax error, if known."""
        if self.diagnostic is None or self.diagnostic.span is None:
            return None
        return self.diagnostic.span.line

    @property
    def column(self) -> int | None:
        """1-indexed column of the syntax error, if known."""
        if self.diagnostic is None or self.diagnostic.span is None:
            return None
        return self.diagnostic.span.column


class HtmlParseError(ScopeCssError):
    """HTML fragment was rejected by the HTML parser.

    The parser is lenient; this is only raised for markup it refuses
    outright. The underlying library error is chained as __cause__.
    """
