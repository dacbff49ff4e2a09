"""scopecss - Scope CSS rules to one HTML fragment.

Tags every element of an HTML fragment with a marker attribute
(data-scope="<key>") and rewrites every selector of a stylesheet so it only
matches elements carrying that marker. The guard selector
:where([data-scope="<key>"]) has zero specificity, so cascade order among
the scoped rules is unchanged.

Public API:
    scope_css - Scope a fragment and stylesheet, return "<html><style>css</style>"
    scope - Same pipeline, returning a ScopeResult (key, html, css)
    generate_scope_key - Random 6-character key (a-z, 0-9)
    tag_html - Add the marker attribute to every element
    rewrite_css - Guard every selector of a stylesheet
    parse_css - Parse CSS source to AST
    serialize_css - Serialize AST to CSS source

Exceptions:
    ScopeCssError - Base exception class
    CssParseError - Stylesheet or selector syntax errors (with line/column)
    HtmlParseError - HTML fragment rejected by the HTML parser

Submodules:
    scopecss.syntax - AST, parser, visitor/transformer, serializer, specificity
    scopecss.scoping - Key generation, tagging, rewriting, composition
    scopecss.diagnostics - Diagnostic codes, templates, and formatting
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import CssParseError, HtmlParseError, ScopeCssError
from .scoping import (
    ScopeResult,
    build_guard,
    generate_scope_key,
    rewrite_css,
    scope,
    scope_css,
    scope_stylesheet,
    tag_html,
)
from .syntax import parse as parse_css
from .syntax import parse_selector, parse_selector_list, selector_specificity
from .syntax import serialize as serialize_css

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    # This should never happen on Python 3.13+ (importlib.metadata is stdlib since 3.8)
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("scopecss")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CssParseError",
    "HtmlParseError",
    "ScopeCssError",
    "ScopeResult",
    "__version__",
    "build_guard",
    "generate_scope_key",
    "parse_css",
    "parse_selector",
    "parse_selector_list",
    "rewrite_css",
    "scope",
    "scope_css",
    "scope_stylesheet",
    "selector_specificity",
    "serialize_css",
    "tag_html",
]
