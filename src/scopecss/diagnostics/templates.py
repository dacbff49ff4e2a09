"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    # Base documentation URL
    _DOCS_BASE = "https://developer.mozilla.org/en-US/docs/Web/CSS"

    @staticmethod
    def unexpected_eof(position: int) -> Diagnostic:
        """Unexpected end of input while reading a selector.

        Args:
            position: Character offset where input ended

        Returns:
            Diagnostic for UNEXPECTED_EOF
        """
        msg = f"Unexpected EOF at position {position}"
        return Diagnostic(
            code=DiagnosticCode.UNEXPECTED_EOF,
            message=msg,
            span=None,
            hint="Check for unclosed brackets, parentheses, or strings",
        )

    @staticmethod
    def css_syntax_error(kind: str, message: str, span: SourceSpan | None) -> Diagnostic:
        """Stylesheet-level syntax error reported by the CSS tokenizer.

        Args:
            kind: Short machine-readable error kind (e.g. "invalid")
            message: Tokenizer's native diagnostic text
            span: Location of the error in the stylesheet

        Returns:
            Diagnostic for CSS_SYNTAX_ERROR
        """
        msg = f"Invalid CSS ({kind}): {message}"
        return Diagnostic(
            code=DiagnosticCode.CSS_SYNTAX_ERROR,
            message=msg,
            span=span,
            hint="Check rule blocks, declarations, and at-rule syntax",
            help_url=f"{ErrorTemplate._DOCS_BASE}/Syntax",
        )

    @staticmethod
    def selector_syntax_error(
        message: str,
        span: SourceSpan | None,
        selector_text: str,
        expected: tuple[str, ...] = (),
    ) -> Diagnostic:
        """Selector grammar error.

        Args:
            message: What went wrong
            span: Location of the error in the stylesheet
            selector_text: Selector (list) that failed to parse
            expected: Tokens the grammar expected at the error position

        Returns:
            Diagnostic for SELECTOR_SYNTAX_ERROR
        """
        if expected:
            expected_str = ", ".join(f"'{e}'" for e in expected)
            hint = f"Expected one of: {expected_str}"
        else:
            hint = "Check the selector for stray or doubled punctuation"
        return Diagnostic(
            code=DiagnosticCode.SELECTOR_SYNTAX_ERROR,
            message=message,
            span=span,
            hint=hint,
            help_url=f"{ErrorTemplate._DOCS_BASE}/CSS_selectors",
            excerpt=selector_text,
        )

    @staticmethod
    def empty_selector(span: SourceSpan | None) -> Diagnostic:
        """Style rule without any selector before its block.

        Args:
            span: Location of the rule in the stylesheet

        Returns:
            Diagnostic for EMPTY_SELECTOR
        """
        return Diagnostic(
            code=DiagnosticCode.EMPTY_SELECTOR,
            message="Style rule has an empty selector list",
            span=span,
            hint="Every style rule needs at least one selector before '{'",
            help_url=f"{ErrorTemplate._DOCS_BASE}/CSS_selectors",
        )

    @staticmethod
    def nesting_depth_exceeded(max_depth: int, span: SourceSpan | None = None) -> Diagnostic:
        """Parser nesting limit exceeded (nested at-rules or selector functions).

        Args:
            max_depth: Configured maximum nesting depth

        Returns:
            Diagnostic for PARSE_NESTING_DEPTH_EXCEEDED
        """
        msg = f"Nesting depth limit exceeded (max: {max_depth})"
        return Diagnostic(
            code=DiagnosticCode.PARSE_NESTING_DEPTH_EXCEEDED,
            message=msg,
            span=span,
            hint="Reduce nesting of at-rules or functional pseudo-classes",
        )

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Traversal depth limit exceeded on an AST.

        Args:
            max_depth: Configured maximum traversal depth

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum traversal depth exceeded (max: {max_depth})"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            span=None,
            hint="The AST is nested too deeply; check programmatic construction",
        )

    @staticmethod
    def html_parse_failed(reason: str) -> Diagnostic:
        """HTML fragment rejected by the HTML parser.

        Args:
            reason: Parser's native diagnostic text

        Returns:
            Diagnostic for HTML_PARSE_FAILED
        """
        msg = f"HTML fragment could not be parsed: {reason}"
        return Diagnostic(
            code=DiagnosticCode.HTML_PARSE_FAILED,
            message=msg,
            span=None,
            hint="Check the fragment for unbalanced or truncated markup",
        )
