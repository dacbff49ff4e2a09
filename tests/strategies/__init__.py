"""Hypothesis strategies for scopecss property-based testing.

This package provides reusable strategies for generating test data
across multiple test modules. Strategies are organized by domain:

- css: selectors, declarations, stylesheets, scope keys and HTML fragments

Usage:
    from tests.strategies import selector_lists, stylesheets
    from tests.strategies.css import nested_selector_arguments

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - attribute_selectors, pseudo_class_selectors
    - complex_selectors, selector_lists, nested_selector_arguments
    - stylesheets, html_fragments, unclosed_fragments
"""

from .css import (
    # Constants
    COMBINATOR_TEXTS,
    CSS_IDENTIFIER_FIRST_CHARS,
    CSS_IDENTIFIER_REST_CHARS,
    ELEMENT_NAMES,
    # Identifier strategies
    attribute_values,
    css_identifiers,
    # Selector strategies
    attribute_selectors,
    complex_selectors,
    compound_selectors,
    nested_selector_arguments,
    pseudo_class_selectors,
    selector_lists,
    # Stylesheet strategies
    declaration_blocks,
    declarations,
    media_rules,
    style_rules,
    stylesheets,
    # Scoping strategies
    html_fragments,
    scope_keys,
    unclosed_fragments,
)

__all__ = [
    "COMBINATOR_TEXTS",
    "CSS_IDENTIFIER_FIRST_CHARS",
    "CSS_IDENTIFIER_REST_CHARS",
    "ELEMENT_NAMES",
    "attribute_selectors",
    "attribute_values",
    "complex_selectors",
    "compound_selectors",
    "css_identifiers",
    "declaration_blocks",
    "declarations",
    "html_fragments",
    "media_rules",
    "nested_selector_arguments",
    "pseudo_class_selectors",
    "scope_keys",
    "selector_lists",
    "style_rules",
    "stylesheets",
    "unclosed_fragments",
]
