"""Enumerations for scopecss type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so the serializer can emit them
directly.

Python 3.13+.
"""

from enum import StrEnum

__all__ = ["AttributeMatcher", "CombinatorKind"]


class CombinatorKind(StrEnum):
    """Relationship between two compound selectors.

    The value is the combinator's CSS token; the descendant combinator
    is plain whitespace.
    """

    DESCENDANT = " "
    """Descendant: .a .b"""

    CHILD = ">"
    """Child: .a > .b"""

    NEXT_SIBLING = "+"
    """Next sibling: .a + .b"""

    SUBSEQUENT_SIBLING = "~"
    """Subsequent sibling: .a ~ .b"""

    COLUMN = "||"
    """Column: col || td"""


class AttributeMatcher(StrEnum):
    """Attribute selector value matcher.

    StrEnum provides automatic string conversion: str(AttributeMatcher.EQUALS) == "="
    """

    EQUALS = "="
    INCLUDES = "~="
    DASH_MATCH = "|="
    PREFIX = "^="
    SUFFIX = "$="
    SUBSTRING = "*="
