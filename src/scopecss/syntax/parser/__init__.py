"""CSS parser module.

This module provides the CssParser stylesheet parser and the selector
grammar, organized into focused submodules.

Module Organization:
- core.py: CssParser class and the standalone selector entry points
- context.py: ParseContext carrying depth and failure state
- primitives.py: Basic parsers (identifiers, escapes, strings, raw arguments)
- whitespace.py: Whitespace and comment handling
- rules.py: Selector grammar rules (lists, complex, compound, pseudo arguments)

Public API:
    CssParser: Stylesheet parser class
    parse_selector: Parse one complex selector
    parse_selector_list: Parse a comma-separated selector list
    ParseContext: Parse context for depth tracking (advanced usage)
"""

from scopecss.syntax.parser.context import ParseContext
from scopecss.syntax.parser.core import CssParser, parse_selector, parse_selector_list

__all__ = ["CssParser", "ParseContext", "parse_selector", "parse_selector_list"]
