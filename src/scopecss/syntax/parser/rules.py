"""Grammar rules for the CSS selector parser.

This module provides the parsing rules for Selectors Level 4:
- Selector lists (comma-separated complex selectors)
- Complex selectors (compounds joined by combinators)
- Compound selectors (type/universal plus id, class, attribute, pseudo)
- Functional pseudo-class arguments (selector lists, An+B [of S], raw text)

All grammar rules are co-located in a single module because selector
lists recurse through pseudo-class arguments (:is(.a :not(.b))).

Lookahead Patterns:
    The parser uses character-based lookahead for disambiguation:
    - `#` starts an id, `.` a class, `[` an attribute selector
    - `:` starts a pseudo-class, `::` a pseudo-element
    - `|` after a name is a namespace separator unless followed by `|` or `=`
    - `>`, `+`, `~`, `||` are explicit combinators; bare whitespace between
      compounds is the descendant combinator

Security:
    Includes configurable nesting depth limit to prevent DoS attacks via
    deeply nested selector arguments (e.g., :is(:is(:is(...)))).
"""

import re

from scopecss.enums import AttributeMatcher, CombinatorKind
from scopecss.syntax.ast import (
    AttributeSelector,
    ClassSelector,
    Combinator,
    CompoundSelector,
    IdSelector,
    PseudoClassSelector,
    PseudoElementSelector,
    Selector,
    SelectorList,
    SimpleSelector,
    TypeSelector,
    UniversalSelector,
)
from scopecss.syntax.cursor import CSS_WHITESPACE, Cursor, ParseResult
from scopecss.syntax.parser.context import ParseContext
from scopecss.syntax.parser.primitives import (
    is_name_char,
    parse_identifier,
    parse_raw_argument,
    parse_string,
    starts_identifier,
)
from scopecss.syntax.parser.whitespace import skip_blank, skip_comment, skip_comments, skip_trivia

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Pseudo-class families
    "SELECTOR_LIST_PSEUDO_CLASSES",
    "SELECTOR_LIST_PSEUDO_ELEMENTS",
    "NTH_OF_PSEUDO_CLASSES",
    "NTH_PSEUDO_CLASSES",
    "LEGACY_PSEUDO_ELEMENTS",
    # Grammar rules
    "parse_selector_list",
    "parse_complex_selector",
    "parse_compound_selector",
]

# Pseudo-classes whose argument is a selector list.
SELECTOR_LIST_PSEUDO_CLASSES: frozenset[str] = frozenset(
    {
        "is",
        "where",
        "not",
        "has",
        "matches",
        "-webkit-any",
        "-moz-any",
        "host",
        "host-context",
    }
)

# Pseudo-elements whose argument is a selector list.
SELECTOR_LIST_PSEUDO_ELEMENTS: frozenset[str] = frozenset({"slotted"})

# Pseudo-classes taking "An+B [of S]".
NTH_OF_PSEUDO_CLASSES: frozenset[str] = frozenset({"nth-child", "nth-last-child"})

# Pseudo-classes taking a bare "An+B".
NTH_PSEUDO_CLASSES: frozenset[str] = frozenset(
    {"nth-of-type", "nth-last-of-type", "nth-col", "nth-last-col"}
)

# CSS2 pseudo-elements that may still be written with a single colon.
LEGACY_PSEUDO_ELEMENTS: frozenset[str] = frozenset(
    {"before", "after", "first-line", "first-letter"}
)

# Two-character attribute matchers; "=" is handled separately.
_TWO_CHAR_MATCHERS: frozenset[str] = frozenset({"~=", "|=", "^=", "$=", "*="})

_ATTRIBUTE_MODIFIERS: frozenset[str] = frozenset({"i", "s"})

# An+B microsyntax (CSS Syntax Level 3, section 6), whitespace-tolerant
# around the B sign. odd/even keywords are case-insensitive.
_ANB_PATTERN = re.compile(
    r"(?:[+-]?\d*n(?:\s*[+-]\s*\d+)?|[+-]?\d+|odd|even)",
    re.IGNORECASE,
)

# Comments the CSS tokenizer may put between An+B tokens ("2n/**/+1").
_COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)

# Characters that end a complex selector inside a list.
_SELECTOR_TERMINATORS: frozenset[str] = frozenset({",", ")"})


# =============================================================================
# Selector Lists
# =============================================================================


def parse_selector_list(cursor: Cursor, context: ParseContext) -> ParseResult[SelectorList] | None:
    """Parse comma-separated complex selectors.

    Stops at end of input or at a ")" closing an enclosing function; the
    caller decides whether that position is acceptable.

    Example:
        ".a, .b > p" -> SelectorList((Selector(.a), Selector(.b > p)))
    """
    selectors: list[Selector] = []
    while True:
        cursor = skip_blank(cursor)
        result = parse_complex_selector(cursor, context)
        if result is None:
            return None
        selectors.append(result.value)
        cursor = skip_blank(result.cursor)
        if not cursor.is_eof and cursor.current == ",":
            cursor = cursor.advance()
            continue
        return ParseResult(SelectorList(tuple(selectors)), cursor)


def _parse_explicit_combinator(cursor: Cursor) -> tuple[CombinatorKind, Cursor] | None:
    """Consume ">", "+", "~", or "||" at cursor."""
    if cursor.slice_ahead(2) == "||":
        return CombinatorKind.COLUMN, cursor.advance(2)
    match cursor.peek():
        case ">":
            return CombinatorKind.CHILD, cursor.advance()
        case "+":
            return CombinatorKind.NEXT_SIBLING, cursor.advance()
        case "~":
            return CombinatorKind.SUBSEQUENT_SIBLING, cursor.advance()
        case _:
            return None


def parse_complex_selector(cursor: Cursor, context: ParseContext) -> ParseResult[Selector] | None:
    """Parse compounds joined by combinators.

    A leading combinator is accepted (relative selector, as in :has(> img)).

    Examples:
        "nav a"       -> Compound(nav), Combinator( ), Compound(a)
        "ul > li + li" -> Compound(ul), Combinator(>), Compound(li), Combinator(+), Compound(li)
        "> .child"    -> Combinator(>), Compound(.child)

    Returns:
        ParseResult with the Selector and the cursor after trailing trivia,
        or None on parse error
    """
    cursor = skip_blank(cursor)
    children: list[CompoundSelector | Combinator] = []

    leading = _parse_explicit_combinator(cursor)
    if leading is not None:
        kind, cursor = leading
        children.append(Combinator(kind))
        cursor = skip_blank(cursor)

    while True:
        compound = parse_compound_selector(cursor, context)
        if compound is None:
            return None
        children.append(compound.value)

        cursor, saw_whitespace = skip_trivia(compound.cursor)
        if cursor.is_eof or cursor.current in _SELECTOR_TERMINATORS:
            break

        explicit = _parse_explicit_combinator(cursor)
        if explicit is not None:
            kind, cursor = explicit
            cursor = skip_blank(cursor)
        elif saw_whitespace:
            kind = CombinatorKind.DESCENDANT
        else:
            context.fail(f"Unexpected character {cursor.current!r} in selector", cursor)
            return None
        children.append(Combinator(kind))

    return ParseResult(Selector(tuple(children)), cursor)


# =============================================================================
# Compound Selectors
# =============================================================================


def _at_namespace_separator(cursor: Cursor) -> bool:
    """Check for "|" used as namespace separator (not "||" or "|=")."""
    return cursor.peek() == "|" and cursor.peek(1) not in ("|", "=")


def _parse_element_name(cursor: Cursor, context: ParseContext) -> ParseResult[str] | None:
    """Parse an element name or "*" after a namespace separator."""
    if cursor.peek() == "*":
        return ParseResult("*", cursor.advance())
    if not starts_identifier(cursor):
        context.fail("Expected element name after '|'", cursor, ("identifier", "*"))
        return None
    return parse_identifier(cursor, context)


def _build_element(name: str, namespace: str | None) -> TypeSelector | UniversalSelector:
    if name == "*":
        return UniversalSelector(namespace=namespace)
    return TypeSelector(name=name, namespace=namespace)


def _parse_element_prefix(
    cursor: Cursor, context: ParseContext
) -> ParseResult[TypeSelector | UniversalSelector | None] | None:
    """Parse the optional type or universal selector opening a compound.

    Examples:
        div    -> TypeSelector("div")
        svg|a  -> TypeSelector("a", namespace="svg")
        *|*    -> UniversalSelector(namespace="*")
        |p     -> TypeSelector("p", namespace="")
        .x     -> None (no element prefix)

    Returns:
        ParseResult whose value is None when the compound has no element
        prefix, or None on parse error
    """
    if _at_namespace_separator(cursor):
        name_result = _parse_element_name(cursor.advance(), context)
        if name_result is None:
            return None
        return ParseResult(_build_element(name_result.value, ""), name_result.cursor)

    if cursor.peek() == "*":
        first, cursor = "*", cursor.advance()
    elif starts_identifier(cursor):
        ident = parse_identifier(cursor, context)
        if ident is None:
            return None
        first, cursor = ident.value, ident.cursor
    else:
        return ParseResult(None, cursor)

    if _at_namespace_separator(cursor):
        name_result = _parse_element_name(cursor.advance(), context)
        if name_result is None:
            return None
        return ParseResult(_build_element(name_result.value, first), name_result.cursor)

    return ParseResult(_build_element(first, None), cursor)


def parse_compound_selector(cursor: Cursor, context: ParseContext) -> ParseResult[CompoundSelector] | None:
    """Parse a sequence of simple selectors with no combinator between them.

    Comments between simple selectors are skipped (".a/**/.b" is ".a.b");
    trailing comments are left for the caller.

    Example:
        'a.external[href^="http"]:hover' -> CompoundSelector with 4 components
    """
    components: list[SimpleSelector] = []

    prefix = _parse_element_prefix(cursor, context)
    if prefix is None:
        return None
    if prefix.value is not None:
        components.append(prefix.value)
    cursor = prefix.cursor

    while True:
        probe = skip_comments(cursor)
        if probe.is_eof:
            break
        result: ParseResult[SimpleSelector] | None
        match probe.current:
            case "#":
                result = _parse_id(probe, context)
            case ".":
                result = _parse_class(probe, context)
            case "[":
                result = _parse_attribute(probe, context)
            case ":":
                result = _parse_pseudo(probe, context)
            case _:
                break
        if result is None:
            return None
        components.append(result.value)
        cursor = result.cursor

    if not components:
        context.fail("Expected selector", cursor, ("selector",))
        return None

    return ParseResult(CompoundSelector(tuple(components)), cursor)


def _parse_id(cursor: Cursor, context: ParseContext) -> ParseResult[SimpleSelector] | None:
    """Parse #name (cursor at '#')."""
    cursor = cursor.advance()
    if not starts_identifier(cursor):
        context.fail("Expected identifier after '#'", cursor, ("identifier",))
        return None
    ident = parse_identifier(cursor, context)
    if ident is None:
        return None
    return ParseResult(IdSelector(ident.value), ident.cursor)


def _parse_class(cursor: Cursor, context: ParseContext) -> ParseResult[SimpleSelector] | None:
    """Parse .name (cursor at '.')."""
    cursor = cursor.advance()
    if not starts_identifier(cursor):
        context.fail("Expected identifier after '.'", cursor, ("identifier",))
        return None
    ident = parse_identifier(cursor, context)
    if ident is None:
        return None
    return ParseResult(ClassSelector(ident.value), ident.cursor)


# =============================================================================
# Attribute Selectors
# =============================================================================


def _parse_attribute_name(
    cursor: Cursor, context: ParseContext
) -> ParseResult[tuple[str | None, str]] | None:
    """Parse [ns|]name inside an attribute selector.

    Returns:
        ParseResult with (namespace, name), or None on parse error
    """
    namespace: str | None = None
    if cursor.peek() == "*" and _at_namespace_separator(cursor.advance()):
        namespace, cursor = "*", cursor.advance(2)
    elif _at_namespace_separator(cursor):
        namespace, cursor = "", cursor.advance()
    elif starts_identifier(cursor):
        first = parse_identifier(cursor, context)
        if first is None:
            return None
        if not _at_namespace_separator(first.cursor):
            return ParseResult((None, first.value), first.cursor)
        namespace, cursor = first.value, first.cursor.advance()

    if not starts_identifier(cursor):
        context.fail("Expected attribute name", cursor, ("identifier",))
        return None
    name = parse_identifier(cursor, context)
    if name is None:
        return None
    return ParseResult((namespace, name.value), name.cursor)


def _parse_attribute_matcher(cursor: Cursor) -> tuple[AttributeMatcher, Cursor] | None:
    two = cursor.slice_ahead(2)
    if two in _TWO_CHAR_MATCHERS:
        return AttributeMatcher(two), cursor.advance(2)
    if cursor.peek() == "=":
        return AttributeMatcher.EQUALS, cursor.advance()
    return None


def _parse_attribute(cursor: Cursor, context: ParseContext) -> ParseResult[SimpleSelector] | None:
    """Parse an attribute selector (cursor at '[').

    Examples:
        [disabled]
        [data-scope="abc123"]
        [lang|=en]
        [href$='.pdf' i]
    """
    cursor = skip_blank(cursor.advance())

    name_result = _parse_attribute_name(cursor, context)
    if name_result is None:
        return None
    namespace, name = name_result.value
    cursor = skip_blank(name_result.cursor)

    closed = cursor.expect("]")
    if closed is not None:
        return ParseResult(AttributeSelector(name=name, namespace=namespace), closed)

    matched = _parse_attribute_matcher(cursor)
    if matched is None:
        context.fail("Expected ']' or attribute matcher", cursor, ("]", "=", *sorted(_TWO_CHAR_MATCHERS)))
        return None
    matcher, cursor = matched
    cursor = skip_blank(cursor)

    quote: str | None = None
    if cursor.peek() in ('"', "'"):
        string_result = parse_string(cursor, context)
        if string_result is None:
            return None
        (value, quote), cursor = string_result.value, string_result.cursor
    elif starts_identifier(cursor):
        ident = parse_identifier(cursor, context)
        if ident is None:
            return None
        value, cursor = ident.value, ident.cursor
    else:
        context.fail("Expected attribute value", cursor, ("string", "identifier"))
        return None
    cursor = skip_blank(cursor)

    modifier: str | None = None
    if starts_identifier(cursor):
        ident = parse_identifier(cursor, context)
        if ident is None:
            return None
        if ident.value.lower() not in _ATTRIBUTE_MODIFIERS:
            context.fail(f"Unknown attribute modifier {ident.value!r}", cursor, ("i", "s"))
            return None
        modifier, cursor = ident.value, skip_blank(ident.cursor)

    closed = cursor.expect("]")
    if closed is None:
        context.fail("Expected ']' to close attribute selector", cursor, ("]",))
        return None

    selector = AttributeSelector(
        name=name,
        namespace=namespace,
        matcher=matcher,
        value=value,
        quote=quote,
        modifier=modifier,
    )
    return ParseResult(selector, closed)


# =============================================================================
# Pseudo-classes and Pseudo-elements
# =============================================================================


def _parse_nested_selector_list(
    cursor: Cursor, context: ParseContext
) -> ParseResult[SelectorList] | None:
    """Parse a selector list argument one nesting level deeper.

    Security:
        Enforces maximum nesting depth to prevent stack overflow from
        deeply nested :is(:not(:is(...))) arguments.
    """
    if context.is_depth_exceeded():
        context.fail_depth(cursor)
        return None
    context.current_depth += 1
    try:
        return parse_selector_list(cursor, context)
    finally:
        context.current_depth -= 1


def _is_of_keyword(cursor: Cursor) -> bool:
    """Check for the "of" keyword of :nth-child(An+B of S) at cursor."""
    if cursor.slice_ahead(2).lower() != "of":
        return False
    following = cursor.peek(2)
    return following is None or not is_name_char(following)


def _parse_nth_argument(
    cursor: Cursor, context: ParseContext, *, allow_of: bool
) -> ParseResult[tuple[str, SelectorList | None]] | None:
    """Parse "An+B" or "An+B of S" up to the closing ")".

    Comments inside the expression are dropped, so "2n/**/+1" reads as "2n+1".

    Examples:
        "2n+1"          -> ("2n+1", None)
        "odd of .item"  -> ("odd", SelectorList(.item))

    Returns:
        ParseResult with (An+B text, optional selector list), cursor at ")"
    """
    start_pos = cursor.pos
    scan = cursor
    selectors: SelectorList | None = None
    anb_end = cursor

    while True:
        if scan.is_eof:
            context.fail("Unclosed function argument", scan, (")",))
            return None
        ch = scan.current
        if ch == ")":
            anb_end = scan
            break
        if scan.slice_ahead(2) == "/*":
            scan = skip_comment(scan)
            continue
        if ch in CSS_WHITESPACE:
            after = scan.skip_whitespace()
            if allow_of and _is_of_keyword(after):
                anb_end = scan
                nested = _parse_nested_selector_list(after.advance(2), context)
                if nested is None:
                    return None
                selectors, scan = nested.value, nested.cursor
                break
            scan = after
            continue
        scan = scan.advance()

    anb = _COMMENT_PATTERN.sub("", anb_end.slice_from(start_pos)).strip(" \t\n\r\f")
    if _ANB_PATTERN.fullmatch(anb) is None:
        context.fail(f"Invalid An+B expression {anb!r}", cursor, ("An+B",))
        return None
    return ParseResult((anb, selectors), scan)


def _parse_pseudo(cursor: Cursor, context: ParseContext) -> ParseResult[SimpleSelector] | None:
    """Parse a pseudo-class or pseudo-element (cursor at ':').

    Examples:
        :hover
        ::before
        :before                   -> legacy pseudo-element
        :not(.a, .b)
        :nth-child(2n+1 of .item)
        ::part(label)
    """
    is_element = cursor.peek(1) == ":"
    cursor = cursor.advance(2 if is_element else 1)

    if not starts_identifier(cursor):
        what = "pseudo-element" if is_element else "pseudo-class"
        context.fail(f"Expected {what} name", cursor, ("identifier",))
        return None
    ident = parse_identifier(cursor, context)
    if ident is None:
        return None
    name, cursor = ident.value, ident.cursor
    lowered = name.lower()

    argument: str | None = None
    selectors: SelectorList | None = None

    if cursor.peek() == "(":
        cursor = skip_blank(cursor.advance())
        if is_element:
            takes_selectors = lowered in SELECTOR_LIST_PSEUDO_ELEMENTS
        else:
            takes_selectors = lowered in SELECTOR_LIST_PSEUDO_CLASSES

        if takes_selectors:
            nested = _parse_nested_selector_list(cursor, context)
            if nested is None:
                return None
            selectors, cursor = nested.value, nested.cursor
        elif not is_element and lowered in NTH_OF_PSEUDO_CLASSES | NTH_PSEUDO_CLASSES:
            nth = _parse_nth_argument(cursor, context, allow_of=lowered in NTH_OF_PSEUDO_CLASSES)
            if nth is None:
                return None
            (argument, selectors), cursor = nth.value, nth.cursor
        else:
            raw = parse_raw_argument(cursor, context)
            if raw is None:
                return None
            argument, cursor = raw.value, raw.cursor

        cursor = skip_blank(cursor)
        closed = cursor.expect(")")
        if closed is None:
            context.fail(f"Expected ')' to close :{name}(", cursor, (")",))
            return None
        cursor = closed

    if is_element:
        return ParseResult(PseudoElementSelector(name, argument, selectors), cursor)
    if lowered in LEGACY_PSEUDO_ELEMENTS and argument is None and selectors is None:
        return ParseResult(PseudoElementSelector(name, legacy=True), cursor)
    return ParseResult(PseudoClassSelector(name, argument, selectors), cursor)
