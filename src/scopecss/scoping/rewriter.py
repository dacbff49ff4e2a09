"""Selector rewriting: the core of scoping.

Every selector of every style rule is prefixed with the guard

    :where([data-scope="<key>"])

followed by a descendant combinator. :where() has zero specificity, so a
guarded selector matches only inside the tagged fragment while competing
in the cascade exactly as the original selector did.

Rewriting is per selector, not per rule: ".a, .b" becomes
":where(G) .a, :where(G) .b", never ":where(G) .a, .b".

Traversal Rules:
    - Style rules are rewritten wherever they appear, including inside
      @media, @supports, @layer, @container and other rule-list at-rules
    - At-rule preludes are never touched
    - Keyframes (from, to, 50%) are not element selectors and are skipped
    - Declaration-only at-rules (@font-face, @page, ...) are skipped
    - Already-guarded selectors are guarded again; no deduplication

Python 3.13+.
"""

import logging
from dataclasses import replace

from scopecss.constants import MAX_DEPTH, SCOPE_ATTRIBUTE
from scopecss.scoping.keys import validate_scope_attribute, validate_scope_key
from scopecss.syntax import (
    ASTTransformer,
    CssParser,
    KeyframeRule,
    StyleRule,
    StyleSheet,
    parse_selector,
    parse_selector_list,
    serialize,
)

__all__ = ["ScopeTransformer", "build_guard", "rewrite_css", "scope_stylesheet"]

logger = logging.getLogger(__name__)

# Traversal frames per stylesheet nesting level: the at-rule and its block.
_FRAMES_PER_LEVEL: int = 2


def build_guard(key: str, attribute: str = SCOPE_ATTRIBUTE) -> str:
    """Build the zero-specificity guard selector for a scope key.

    Raises:
        ValueError: If key or attribute is not valid for embedding

    Example:
        >>> build_guard("abc123")
        ':where([data-scope="abc123"])'
    """
    validate_scope_key(key)
    validate_scope_attribute(attribute)
    return f':where([{attribute}="{key}"])'


class ScopeTransformer(ASTTransformer):
    """Prefixes every style rule selector with the scope guard.

    Produces a new tree; the input stylesheet is not modified.

    Each selector is serialized from its own sub-tree, prefixed with the
    guard and a space, and re-parsed as a standalone selector. The
    rewritten selectors are then joined with ", " and re-parsed as the
    rule's new selector list, so the result is always a well-formed AST.

    Attributes:
        guard: Guard selector text
        max_nesting_depth: Stylesheet and selector nesting limit
        rules_rewritten: Number of style rules rewritten so far
        selectors_rewritten: Number of selectors rewritten so far

    Example:
        >>> transformer = ScopeTransformer("k")
        >>> scoped = transformer.transform(parse(".a, .b { color: red; }"))
        >>> serialize(scoped)
        ':where([data-scope="k"]) .a, :where([data-scope="k"]) .b { color: red; }'
    """

    __slots__ = ("guard", "max_nesting_depth", "rules_rewritten", "selectors_rewritten")

    def __init__(
        self,
        key: str,
        *,
        attribute: str = SCOPE_ATTRIBUTE,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize transformer for one scope key.

        Args:
            key: Scope key embedded in the guard
            attribute: Marker attribute name (default: "data-scope")
            max_nesting_depth: Maximum at-rule and selector nesting depth,
                              as for CssParser (default: MAX_DEPTH)

        Raises:
            ValueError: If key or attribute is not valid for embedding
        """
        depth = max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH
        super().__init__(max_depth=_FRAMES_PER_LEVEL * depth + 1)
        self.guard = build_guard(key, attribute)
        self.max_nesting_depth = depth
        self.rules_rewritten = 0
        self.selectors_rewritten = 0

    def visit_StyleRule(self, node: StyleRule) -> StyleRule:
        """Guard each selector of the rule's list, one by one."""
        guarded: list[str] = []
        for selector in node.prelude.selectors:
            text = f"{self.guard} {serialize(selector)}"
            rewritten = parse_selector(text, max_nesting_depth=self.max_nesting_depth)
            guarded.append(serialize(rewritten))

        prelude = parse_selector_list(", ".join(guarded), max_nesting_depth=self.max_nesting_depth)
        self.rules_rewritten += 1
        self.selectors_rewritten += len(prelude.selectors)
        return replace(node, prelude=prelude)

    def visit_KeyframeRule(self, node: KeyframeRule) -> KeyframeRule:
        """Keyframe selectors are not element selectors."""
        return node


def scope_stylesheet(
    stylesheet: StyleSheet,
    key: str,
    *,
    attribute: str = SCOPE_ATTRIBUTE,
    max_nesting_depth: int | None = None,
) -> StyleSheet:
    """Return a copy of stylesheet with every style rule selector guarded.

    Args:
        stylesheet: Parsed stylesheet
        key: Scope key
        attribute: Marker attribute name (default: "data-scope")
        max_nesting_depth: Maximum at-rule and selector nesting depth
                          (default: MAX_DEPTH)

    Returns:
        New StyleSheet; rule count, order and declarations are unchanged

    Raises:
        ValueError: If key or attribute is not valid for embedding
        DepthLimitExceededError: If the tree nests deeper than max_nesting_depth
    """
    transformer = ScopeTransformer(key, attribute=attribute, max_nesting_depth=max_nesting_depth)
    result = transformer.transform(stylesheet)
    # StyleSheet -> StyleSheet: no visit method removes or expands the root
    assert isinstance(result, StyleSheet)  # Type narrowing
    logger.debug(
        "Scoped %d rule(s), %d selector(s) with %s",
        transformer.rules_rewritten,
        transformer.selectors_rewritten,
        transformer.guard,
    )
    return result


def rewrite_css(
    css: str,
    key: str,
    *,
    attribute: str = SCOPE_ATTRIBUTE,
    parser: CssParser | None = None,
) -> str:
    """Scope a stylesheet to one key.

    Parses css, guards every style rule selector, and serializes the
    result. Nothing is returned on failure: a syntax error anywhere in the
    stylesheet aborts the whole rewrite.

    Args:
        css: Stylesheet text (may be empty)
        key: Scope key
        attribute: Marker attribute name (default: "data-scope")
        parser: Parser to use, for custom size or nesting limits

    Returns:
        Rewritten stylesheet text

    Raises:
        ValueError: If key or attribute is not valid, or css exceeds the
            parser's size limit
        CssParseError: If css is not valid CSS

    Example:
        >>> rewrite_css(".button { color: red; }", "abc123")
        ':where([data-scope="abc123"]) .button { color: red; }'
    """
    # Validate arguments before parsing so a bad key is reported first
    build_guard(key, attribute)
    parser = parser if parser is not None else CssParser()
    stylesheet = parser.parse(css)
    scoped = scope_stylesheet(
        stylesheet, key, attribute=attribute, max_nesting_depth=parser.max_nesting_depth
    )
    # At-rule blocks and selector arguments nest independently, plus one declaration block
    return serialize(scoped, max_depth=2 * parser.max_nesting_depth + 1)
