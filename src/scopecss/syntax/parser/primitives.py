"""Primitive parsing utilities for the selector grammar.

Low-level parsers for CSS identifiers, escapes, quoted strings, and
balanced raw arguments, per CSS Syntax Level 3 tokenization rules.

Identifiers and strings are returned in their source form, escapes
included, so serialization reproduces exactly what was written.
"""

from scopecss.syntax.cursor import CSS_WHITESPACE, Cursor, ParseResult
from scopecss.syntax.parser.context import ParseContext

__all__ = [
    "is_name_char",
    "is_name_start",
    "parse_identifier",
    "parse_raw_argument",
    "parse_string",
    "starts_identifier",
]

# Valid hexadecimal digit characters for escape parsing.
_HEX_DIGITS: frozenset[str] = frozenset("0123456789abcdefABCDEF")

# CSS escapes carry at most 6 hex digits (U+10FFFF fits in 6).
_MAX_ESCAPE_HEX_DIGITS: int = 6

# Closing bracket for each opening bracket tracked by parse_raw_argument.
_BRACKET_PAIRS: dict[str, str] = {"(": ")", "[": "]", "{": "}"}

_NEWLINES: frozenset[str] = frozenset("\n\r\f")


def is_name_start(ch: str) -> bool:
    """Check if character can start a CSS name (letter, underscore, or non-ASCII)."""
    return ch == "_" or ("a" <= ch.lower() <= "z") or ord(ch) >= 0x80


def is_name_char(ch: str) -> bool:
    """Check if character can continue a CSS name."""
    return is_name_start(ch) or ch == "-" or "0" <= ch <= "9"


def _is_valid_escape(first: str | None, second: str | None) -> bool:
    """Check if two characters start a valid escape (backslash, not newline)."""
    return first == "\\" and second is not None and second not in _NEWLINES


def starts_identifier(cursor: Cursor) -> bool:
    """Check if the next characters would start an identifier.

    Examples:
        "button" -> True
        "-webkit-box" -> True
        "--custom" -> True
        "\\31 0" -> True
        "-1" -> False
        "1a" -> False
    """
    first = cursor.peek(0)
    if first is None:
        return False
    second = cursor.peek(1)
    if first == "-":
        if second is None:
            return False
        return is_name_start(second) or second == "-" or _is_valid_escape(second, cursor.peek(2))
    if first == "\\":
        return _is_valid_escape(first, second)
    return is_name_start(first)


def _consume_escape(cursor: Cursor) -> Cursor:
    """Consume an escape whose backslash the cursor points at.

    Hex escapes take up to 6 hex digits plus one optional whitespace
    character (CRLF counts as one); any other escape takes one character.
    """
    cursor = cursor.advance()  # Skip backslash
    if cursor.current in _HEX_DIGITS:
        digits = 0
        while not cursor.is_eof and digits < _MAX_ESCAPE_HEX_DIGITS and cursor.current in _HEX_DIGITS:
            cursor = cursor.advance()
            digits += 1
        if not cursor.is_eof and cursor.current in CSS_WHITESPACE:
            if cursor.slice_ahead(2) == "\r\n":
                return cursor.advance(2)
            return cursor.advance()
        return cursor
    return cursor.advance()


def parse_identifier(cursor: Cursor, context: ParseContext) -> ParseResult[str] | None:
    """Parse a CSS identifier, keeping escapes as written.

    Examples:
        button -> "button"
        sm\\:p-4 -> "sm\\:p-4"
        --accent -> "--accent"

    Args:
        cursor: Current position in source
        context: Parse context for failure reporting

    Returns:
        ParseResult with the identifier source text, or None if no
        identifier starts at cursor
    """
    if not starts_identifier(cursor):
        context.fail("Expected identifier", cursor, ("identifier",))
        return None

    start_pos = cursor.pos
    while not cursor.is_eof:
        ch = cursor.current
        if is_name_char(ch):
            cursor = cursor.advance()
        elif _is_valid_escape(ch, cursor.peek(1)):
            cursor = _consume_escape(cursor)
        else:
            break

    return ParseResult(cursor.slice_from(start_pos), cursor)


def parse_string(cursor: Cursor, context: ParseContext) -> ParseResult[tuple[str, str]] | None:
    """Parse a quoted string: "value" or 'value'.

    Escapes (including escaped newlines) are kept as written. An unescaped
    newline or end of input before the closing quote is an error.

    Returns:
        ParseResult with (contents, quote character), or None on failure
    """
    if cursor.is_eof or cursor.current not in ('"', "'"):
        context.fail("Expected string", cursor, ('"', "'"))
        return None

    quote = cursor.current
    cursor = cursor.advance()
    start_pos = cursor.pos

    while True:
        if cursor.is_eof:
            context.fail("Unterminated string", cursor, (quote,))
            return None
        ch = cursor.current
        if ch == quote:
            contents = cursor.slice_from(start_pos)
            return ParseResult((contents, quote), cursor.advance())
        if ch in _NEWLINES:
            context.fail("Unescaped newline in string", cursor, (quote,))
            return None
        if ch == "\\":
            # Escaped character or line continuation; skip both characters
            cursor = cursor.advance(2) if cursor.slice_ahead(3) != "\\\r\n" else cursor.advance(3)
        else:
            cursor = cursor.advance()


def parse_raw_argument(cursor: Cursor, context: ParseContext) -> ParseResult[str] | None:
    """Parse the argument of a functional pseudo-class without interpreting it.

    Reads up to (not including) the ")" that closes the function, keeping
    nested brackets balanced and skipping over strings and escapes.

    Examples:
        :lang(en)         -> "en"
        :dir(rtl)         -> "rtl"
        ::part(label)     -> "label"

    Returns:
        ParseResult with the whitespace-trimmed argument text (cursor at ")"),
        or None on unbalanced brackets, unterminated strings, or an empty argument
    """
    start_pos = cursor.pos
    closers: list[str] = []

    while True:
        if cursor.is_eof:
            expected = closers[-1] if closers else ")"
            context.fail("Unclosed function argument", cursor, (expected,))
            return None
        ch = cursor.current
        if not closers and ch == ")":
            break
        if ch in _BRACKET_PAIRS:
            closers.append(_BRACKET_PAIRS[ch])
            cursor = cursor.advance()
        elif closers and ch == closers[-1]:
            closers.pop()
            cursor = cursor.advance()
        elif ch in (")", "]", "}"):
            context.fail(f"Unbalanced {ch!r} in function argument", cursor, (closers[-1],) if closers else (")",))
            return None
        elif ch in ('"', "'"):
            string_result = parse_string(cursor, context)
            if string_result is None:
                return None
            cursor = string_result.cursor
        elif ch == "\\" and not cursor.advance().is_eof:
            cursor = cursor.advance(2)
        else:
            cursor = cursor.advance()

    text = cursor.slice_from(start_pos).strip(" \t\n\r\f")
    if not text:
        context.fail("Expected function argument", cursor)
        return None
    return ParseResult(text, cursor)
