"""Whitespace and comment handling for the selector grammar.

Per CSS Syntax Level 3, comments are not whitespace: ".a/**/.b" is one
compound selector, while ".a /**/ .b" is a descendant selector. Callers
that need to tell the two apart use skip_trivia(), which reports whether
real whitespace was seen.
"""

from scopecss.syntax.cursor import CSS_WHITESPACE, Cursor

__all__ = ["skip_blank", "skip_comment", "skip_comments", "skip_trivia"]


def skip_comment(cursor: Cursor) -> Cursor:
    """Skip one /* ... */ comment starting at cursor.

    An unterminated comment runs to end of input, as in CSS tokenization.

    Returns:
        Cursor after the comment, or unchanged cursor if not at a comment
    """
    if cursor.slice_ahead(2) != "/*":
        return cursor
    end = cursor.source.find("*/", cursor.pos + 2)
    if end < 0:
        return Cursor(cursor.source, len(cursor.source))
    return Cursor(cursor.source, end + 2)


def skip_trivia(cursor: Cursor) -> tuple[Cursor, bool]:
    """Skip whitespace and comments.

    Returns:
        (new cursor, True if at least one whitespace character was skipped)
    """
    saw_whitespace = False
    while not cursor.is_eof:
        if cursor.current in CSS_WHITESPACE:
            saw_whitespace = True
            cursor = cursor.skip_whitespace()
        elif cursor.slice_ahead(2) == "/*":
            cursor = skip_comment(cursor)
        else:
            break
    return cursor, saw_whitespace


def skip_blank(cursor: Cursor) -> Cursor:
    """Skip whitespace and comments where their distinction does not matter."""
    return skip_trivia(cursor)[0]


def skip_comments(cursor: Cursor) -> Cursor:
    """Skip consecutive comments without consuming whitespace."""
    while cursor.slice_ahead(2) == "/*":
        cursor = skip_comment(cursor)
    return cursor
