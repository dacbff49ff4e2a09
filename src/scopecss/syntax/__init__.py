"""CSS syntax package.

Provides parser, AST definitions, visitor pattern, serialization, and
specificity computation. Separate from scoping so that tooling can work
on stylesheets without tagging any HTML.

Python 3.13+.
"""

from .ast import (
    ASTNode,
    AtRule,
    AttributeSelector,
    Block,
    ClassSelector,
    Combinator,
    CompoundSelector,
    Declaration,
    DeclarationBlock,
    IdSelector,
    KeyframeRule,
    PseudoClassSelector,
    PseudoElementSelector,
    RawBlock,
    Rule,
    RuleBlock,
    Selector,
    SelectorList,
    SimpleSelector,
    SourceLocation,
    StyleRule,
    StyleSheet,
    TypeSelector,
    UniversalSelector,
)
from .cursor import Cursor, ParseError, ParseResult
from .parser import CssParser, parse_selector, parse_selector_list
from .serializer import CssSerializer, SerializationValidationError, serialize
from .specificity import (
    ZERO_SPECIFICITY,
    Specificity,
    selector_list_specificity,
    selector_specificity,
)
from .visitor import ASTTransformer, ASTVisitor

__all__ = [
    "ASTNode",
    "ASTTransformer",
    "ASTVisitor",
    "AtRule",
    "AttributeSelector",
    "Block",
    "ClassSelector",
    "Combinator",
    "CompoundSelector",
    "CssParser",
    "CssSerializer",
    "Cursor",
    "Declaration",
    "DeclarationBlock",
    "IdSelector",
    "KeyframeRule",
    "ParseError",
    "ParseResult",
    "PseudoClassSelector",
    "PseudoElementSelector",
    "RawBlock",
    "Rule",
    "RuleBlock",
    "Selector",
    "SelectorList",
    "SerializationValidationError",
    "SimpleSelector",
    "SourceLocation",
    "Specificity",
    "StyleRule",
    "StyleSheet",
    "TypeSelector",
    "UniversalSelector",
    "ZERO_SPECIFICITY",
    "parse",
    "parse_selector",
    "parse_selector_list",
    "selector_list_specificity",
    "selector_specificity",
    "serialize",
]


def parse(source: str) -> StyleSheet:
    """Parse CSS source into AST.

    Convenience function for CssParser.parse().

    Args:
        source: CSS stylesheet text

    Returns:
        StyleSheet containing parsed rules

    Raises:
        CssParseError: On any syntax error

    Example:
        >>> from scopecss.syntax import parse
        >>> sheet = parse(".button { color: red; }")
        >>> sheet.rules[0].block.children[0].name
        'color'
    """
    parser = CssParser()
    return parser.parse(source)
