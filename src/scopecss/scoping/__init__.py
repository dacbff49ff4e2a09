"""Scoping package: key generation, HTML tagging, selector rewriting.

Python 3.13+.
"""

from .composer import ScopeResult, scope, scope_css
from .keys import (
    RandomSource,
    generate_scope_key,
    is_valid_scope_key,
    validate_scope_attribute,
    validate_scope_key,
)
from .rewriter import ScopeTransformer, build_guard, rewrite_css, scope_stylesheet
from .tagger import tag_html, tag_soup

__all__ = [
    "RandomSource",
    "ScopeResult",
    "ScopeTransformer",
    "build_guard",
    "generate_scope_key",
    "is_valid_scope_key",
    "rewrite_css",
    "scope",
    "scope_css",
    "scope_stylesheet",
    "tag_html",
    "tag_soup",
    "validate_scope_attribute",
    "validate_scope_key",
]
