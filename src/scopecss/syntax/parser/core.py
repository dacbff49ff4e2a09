"""Core CSS parser implementation.

This module provides the CssParser class that turns stylesheet text into
the AST defined in :mod:`scopecss.syntax.ast`.

Architecture:
    Parsing happens in two layers:

    - Stylesheet grammar (rules, at-rules, blocks, declarations) comes from
      tinycss2, which implements CSS Syntax Level 3 tokenization and the
      rule/declaration list algorithms.
    - Selector grammar is the recursive-descent parser in
      :mod:`~scopecss.syntax.parser.rules`, running over an immutable
      :class:`~scopecss.syntax.cursor.Cursor`. Each rule returns either a
      :class:`~scopecss.syntax.cursor.ParseResult` or None on failure.

AST Types:
    The parser produces a :class:`~scopecss.syntax.ast.StyleSheet` whose rules are:

    - :class:`~scopecss.syntax.ast.StyleRule` - Selector list plus declarations
    - :class:`~scopecss.syntax.ast.AtRule` - @media, @import, @font-face, ...
    - :class:`~scopecss.syntax.ast.KeyframeRule` - Only inside @keyframes

Error Policy:
    Unlike browsers, the parser does not drop invalid rules: any syntax error
    raises :class:`~scopecss.diagnostics.CssParseError` carrying line and
    column, and no partial tree is produced.

Security:
    Includes configurable input size limit to prevent DoS attacks via
    unbounded memory allocation from extremely large stylesheets, and a
    nesting depth limit for at-rules and selector arguments.
"""

from collections.abc import Iterable
from typing import NoReturn

import tinycss2
import tinycss2.ast

from scopecss.constants import MAX_DEPTH, MAX_SOURCE_SIZE
from scopecss.core.depth_guard import depth_clamp
from scopecss.diagnostics import CssParseError, Diagnostic, ErrorTemplate, SourceSpan
from scopecss.syntax.ast import (
    AtRule,
    Declaration,
    DeclarationBlock,
    KeyframeRule,
    RawBlock,
    Rule,
    RuleBlock,
    Selector,
    SelectorList,
    SourceLocation,
    StyleRule,
    StyleSheet,
)
from scopecss.syntax.cursor import Cursor, LineOffsetCache
from scopecss.syntax.parser.context import ParseContext
from scopecss.syntax.parser.rules import parse_selector_list as parse_selector_list_rule
from scopecss.syntax.parser.whitespace import skip_blank

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # At-rule families
    "RULE_LIST_AT_RULES",
    "KEYFRAMES_AT_RULES",
    "DECLARATION_LIST_AT_RULES",
    # Parser
    "CssParser",
    "parse_selector",
    "parse_selector_list",
]

# At-rules whose block is a list of rules (conditional group rules and friends).
RULE_LIST_AT_RULES: frozenset[str] = frozenset(
    {
        "media",
        "supports",
        "document",
        "-moz-document",
        "layer",
        "container",
        "scope",
        "starting-style",
    }
)

# At-rules whose block is a list of keyframes.
KEYFRAMES_AT_RULES: frozenset[str] = frozenset(
    {"keyframes", "-webkit-keyframes", "-moz-keyframes", "-o-keyframes"}
)

# At-rules whose block is a list of descriptors (declarations).
DECLARATION_LIST_AT_RULES: frozenset[str] = frozenset(
    {
        "font-face",
        "page",
        "counter-style",
        "property",
        "font-palette-values",
        "font-feature-values",
        "viewport",
        "-ms-viewport",
        # @page margin boxes
        "top-left-corner",
        "top-left",
        "top-center",
        "top-right",
        "top-right-corner",
        "bottom-left-corner",
        "bottom-left",
        "bottom-center",
        "bottom-right",
        "bottom-right-corner",
        "left-top",
        "left-middle",
        "left-bottom",
        "right-top",
        "right-middle",
        "right-bottom",
        # @font-feature-values blocks
        "swash",
        "annotation",
        "ornaments",
        "stylistic",
        "styleset",
        "character-variant",
    }
)

# Token node types that carry nested token lists.
_NESTED_CONTENT_TYPES: frozenset[str] = frozenset({"() block", "[] block", "{} block"})


def _normalize_newlines(source: str) -> str:
    """Apply CSS input preprocessing: CRLF, CR and FF become LF."""
    return source.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")


def _find_parse_error(tokens: Iterable[tinycss2.ast.Node] | None) -> tinycss2.ast.ParseError | None:
    """Find the first tokenizer error in a component value list, at any depth."""
    if tokens is None:
        return None
    for token in tokens:
        if token.type == "error":
            return token  # type: ignore[return-value]
        if token.type in _NESTED_CONTENT_TYPES:
            nested = _find_parse_error(token.content)  # type: ignore[attr-defined]
        elif token.type == "function":
            nested = _find_parse_error(token.arguments)  # type: ignore[attr-defined]
        else:
            continue
        if nested is not None:
            return nested
    return None


def _selector_span(
    origin: SourceLocation | None,
    cursor: Cursor,
    cache: LineOffsetCache | None,
) -> SourceSpan:
    """Map a cursor inside selector text to a span in the enclosing stylesheet.

    Selector text starts where its rule starts, so the first line is offset
    by the rule's column and later lines by the rule's line.
    """
    line, column = cursor.compute_line_col()
    if origin is not None:
        if line == 1:
            column = origin.column + column - 1
        line = origin.line + line - 1
    offset = cache.get_offset(line, column) if cache is not None else cursor.pos
    return SourceSpan(start=offset, end=offset, line=line, column=column)


def _parse_selector_text(
    text: str,
    max_nesting_depth: int,
    origin: SourceLocation | None = None,
    cache: LineOffsetCache | None = None,
) -> SelectorList:
    """Parse a full selector list, requiring all input to be consumed.

    Raises:
        CssParseError: On any selector syntax error, with line and column
            relative to origin when given
    """
    context = ParseContext(max_nesting_depth=max_nesting_depth)
    cursor = Cursor(text, 0)
    result = parse_selector_list_rule(cursor, context)

    if result is not None:
        end = skip_blank(result.cursor)
        if end.is_eof:
            return result.value
        context.fail(f"Unexpected character {end.current!r} in selector", end)

    error = context.error
    assert error is not None  # Type narrowing: every failing rule records an error
    span = _selector_span(origin, error.cursor, cache)
    diagnostic: Diagnostic
    if context.depth_exceeded:
        diagnostic = ErrorTemplate.nesting_depth_exceeded(max_nesting_depth, span)
    else:
        diagnostic = ErrorTemplate.selector_syntax_error(error.message, span, text, error.expected)
    raise CssParseError(diagnostic)


def parse_selector_list(text: str, *, max_nesting_depth: int | None = None) -> SelectorList:
    """Parse a standalone selector list such as ".a, .b > p".

    Args:
        text: Selector list text
        max_nesting_depth: Maximum nesting of selector arguments (default: 100)

    Returns:
        Parsed SelectorList with one Selector per comma-separated entry

    Raises:
        CssParseError: If text is not a valid selector list
    """
    depth = depth_clamp(max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH)
    return _parse_selector_text(text, depth)


def parse_selector(text: str, *, max_nesting_depth: int | None = None) -> Selector:
    """Parse exactly one complex selector such as ":where(.x) > .a".

    Raises:
        CssParseError: If text is not a valid selector, or holds more than one
    """
    selectors = parse_selector_list(text, max_nesting_depth=max_nesting_depth).selectors
    if len(selectors) != 1:
        comma = text.find(",")
        cursor = Cursor(text, max(comma, 0))
        diagnostic = ErrorTemplate.selector_syntax_error(
            "Expected a single selector, found a selector list",
            _selector_span(None, cursor, None),
            text,
        )
        raise CssParseError(diagnostic)
    return selectors[0]


class CssParser:
    """CSS stylesheet parser.

    Design:
    - tinycss2 provides tokenization and the rule/declaration list grammar
    - Selectors are parsed into a full selector AST (never kept as text)
    - Fail-fast: the first syntax error raises CssParseError

    Security:
    - Configurable max_source_size prevents DoS via large inputs
    - Default limit: 10 MB (sufficient for any reasonable stylesheet)
    - Configurable max_nesting_depth bounds at-rule nesting and
      selector argument nesting

    Attributes:
        max_source_size: Maximum allowed source size in characters (default: 10 MB)
        max_nesting_depth: Maximum allowed nesting depth (default: 100)
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size")

    def __init__(
        self,
        *,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize parser with optional size and nesting depth limits.

        Args:
            max_source_size: Maximum source size in characters (default: 10 MB).
                            Set to 0 to disable size limit (not recommended).
            max_nesting_depth: Maximum nesting depth (default: 100), clamped
                              against the interpreter recursion limit.
        """
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = depth_clamp(
            max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH
        )

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed at-rule and selector nesting depth."""
        return self._max_nesting_depth

    def parse(self, source: str) -> StyleSheet:
        """Parse CSS source into a StyleSheet AST.

        Comments are discarded. Whitespace inside declaration values and
        at-rule preludes is kept as written (trimmed at both ends).

        Args:
            source: Stylesheet text

        Returns:
            :class:`~scopecss.syntax.ast.StyleSheet` with the top-level rules

        Raises:
            ValueError: If source exceeds max_source_size (DoS prevention)
            CssParseError: On the first syntax error in rules, declarations,
                or selectors

        Example:
            >>> sheet = CssParser().parse(".a, .b { color: red; }")
            >>> len(sheet.rules[0].prelude.selectors)
            2
        """
        # Validate input size (DoS prevention)
        if self._max_source_size > 0 and len(source) > self._max_source_size:
            msg = (
                f"Source size ({len(source):,} characters) exceeds maximum "
                f"({self._max_source_size:,} characters). "
                "Configure max_source_size in CssParser constructor to increase limit."
            )
            raise ValueError(msg)

        source = _normalize_newlines(source)
        cache = LineOffsetCache(source)
        nodes = tinycss2.parse_stylesheet(source, skip_comments=True, skip_whitespace=True)
        rules = self._convert_rules(nodes, cache, depth=0, keyframes=False)
        return StyleSheet(rules=rules)

    # ------------------------------------------------------------------
    # Error helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _span(line: int, column: int, cache: LineOffsetCache) -> SourceSpan:
        line, column = max(line, 1), max(column, 1)
        offset = cache.get_offset(line, column)
        return SourceSpan(start=offset, end=offset, line=line, column=column)

    def _raise_syntax_error(self, error: tinycss2.ast.ParseError, cache: LineOffsetCache) -> NoReturn:
        span = self._span(error.source_line, error.source_column, cache)
        raise CssParseError(ErrorTemplate.css_syntax_error(error.kind, error.message, span))

    def _check_tokens(self, tokens: Iterable[tinycss2.ast.Node] | None, cache: LineOffsetCache) -> None:
        error = _find_parse_error(tokens)
        if error is not None:
            self._raise_syntax_error(error, cache)

    @staticmethod
    def _location(node: tinycss2.ast.Node) -> SourceLocation:
        return SourceLocation(line=max(node.source_line, 1), column=max(node.source_column, 1))

    # ------------------------------------------------------------------
    # Rule conversion
    # ------------------------------------------------------------------

    def _convert_rules(
        self,
        nodes: Iterable[tinycss2.ast.Node],
        cache: LineOffsetCache,
        *,
        depth: int,
        keyframes: bool,
    ) -> tuple[Rule, ...]:
        """Convert tinycss2 rule nodes, raising on the first error node."""
        rules: list[Rule] = []
        for node in nodes:
            match node.type:
                case "error":
                    self._raise_syntax_error(node, cache)  # type: ignore[arg-type]
                case "qualified-rule":
                    if keyframes:
                        rules.append(self._convert_keyframe(node, cache))  # type: ignore[arg-type]
                    else:
                        rules.append(self._convert_style_rule(node, cache))  # type: ignore[arg-type]
                case "at-rule":
                    rules.append(self._convert_at_rule(node, cache, depth=depth))  # type: ignore[arg-type]
                case _:
                    # Comments and whitespace are skipped at parse time
                    continue
        return tuple(rules)

    def _convert_style_rule(self, node: tinycss2.ast.QualifiedRule, cache: LineOffsetCache) -> StyleRule:
        location = self._location(node)
        self._check_tokens(node.prelude, cache)

        selector_text = tinycss2.serialize(node.prelude).strip()
        if not selector_text:
            span = self._span(location.line, location.column, cache)
            raise CssParseError(ErrorTemplate.empty_selector(span))

        prelude = _parse_selector_text(selector_text, self._max_nesting_depth, location, cache)
        block = self._convert_declarations(node.content, cache)
        return StyleRule(prelude=prelude, block=block, location=location)

    def _convert_keyframe(self, node: tinycss2.ast.QualifiedRule, cache: LineOffsetCache) -> KeyframeRule:
        location = self._location(node)
        self._check_tokens(node.prelude, cache)

        selector = tinycss2.serialize(node.prelude).strip()
        if not selector:
            span = self._span(location.line, location.column, cache)
            raise CssParseError(ErrorTemplate.empty_selector(span))

        block = self._convert_declarations(node.content, cache)
        return KeyframeRule(selector=selector, block=block, location=location)

    def _convert_at_rule(self, node: tinycss2.ast.AtRule, cache: LineOffsetCache, *, depth: int) -> AtRule:
        """Convert an at-rule, choosing the block grammar from its name.

        Unknown at-rules with a block keep the block text verbatim.
        """
        location = self._location(node)
        self._check_tokens(node.prelude, cache)
        prelude = tinycss2.serialize(node.prelude).strip()
        name = node.lower_at_keyword

        block: RuleBlock | DeclarationBlock | RawBlock | None
        if node.content is None:
            block = None
        elif name in RULE_LIST_AT_RULES or name in KEYFRAMES_AT_RULES:
            # Nesting depth check (DoS prevention)
            if depth >= self._max_nesting_depth:
                span = self._span(location.line, location.column, cache)
                raise CssParseError(ErrorTemplate.nesting_depth_exceeded(self._max_nesting_depth, span))
            nested = tinycss2.parse_rule_list(node.content, skip_comments=True, skip_whitespace=True)
            rules = self._convert_rules(
                nested,
                cache,
                depth=depth + 1,
                keyframes=name in KEYFRAMES_AT_RULES,
            )
            block = RuleBlock(rules=rules)
        elif name in DECLARATION_LIST_AT_RULES:
            if depth >= self._max_nesting_depth:
                span = self._span(location.line, location.column, cache)
                raise CssParseError(ErrorTemplate.nesting_depth_exceeded(self._max_nesting_depth, span))
            block = self._convert_declarations(node.content, cache, depth=depth + 1)
        else:
            self._check_tokens(node.content, cache)
            block = RawBlock(text=tinycss2.serialize(node.content).strip())

        return AtRule(name=node.at_keyword, prelude=prelude, block=block, location=location)

    def _convert_declarations(
        self,
        content: list[tinycss2.ast.Node] | None,
        cache: LineOffsetCache,
        *,
        depth: int = 0,
    ) -> DeclarationBlock:
        """Convert a declaration list; nested at-rules (e.g. @top-left) are kept.

        Nested style rules (CSS nesting) are not supported and raise.
        """
        if not content:
            return DeclarationBlock(children=())

        children: list[Declaration | AtRule] = []
        nodes = tinycss2.parse_blocks_contents(content, skip_comments=True, skip_whitespace=True)
        for node in nodes:
            match node.type:
                case "error":
                    self._raise_syntax_error(node, cache)  # type: ignore[arg-type]
                case "declaration":
                    self._check_tokens(node.value, cache)  # type: ignore[attr-defined]
                    children.append(
                        Declaration(
                            name=node.name,  # type: ignore[attr-defined]
                            value=tinycss2.serialize(node.value).strip(),  # type: ignore[attr-defined]
                            important=node.important,  # type: ignore[attr-defined]
                        )
                    )
                case "at-rule":
                    children.append(self._convert_at_rule(node, cache, depth=depth))  # type: ignore[arg-type]
                case "qualified-rule":
                    span = self._span(node.source_line, node.source_column, cache)
                    raise CssParseError(
                        ErrorTemplate.css_syntax_error(
                            "nesting", "Nested style rules are not supported", span
                        )
                    )
                case _:
                    continue
        return DeclarationBlock(children=tuple(children))
