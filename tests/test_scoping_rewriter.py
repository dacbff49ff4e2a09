"""Tests for scoping/rewriter.py: guarding every selector of a stylesheet.

Python 3.13+.
"""

import logging

import pytest
from hypothesis import given

from scopecss.diagnostics import CssParseError, DiagnosticCode
from scopecss.scoping.rewriter import ScopeTransformer, build_guard, rewrite_css, scope_stylesheet
from scopecss.syntax import (
    CssParser,
    StyleRule,
    parse,
    parse_selector,
    selector_list_specificity,
    serialize,
)
from tests.strategies import selector_lists, stylesheets

GUARD = ':where([data-scope="k"])'


class TestBuildGuard:
    """Test guard selector construction."""

    def test_default_attribute(self):
        """The guard wraps an attribute selector in :where()."""
        assert build_guard("abc123") == ':where([data-scope="abc123"])'

    def test_custom_attribute(self):
        """The attribute name is configurable."""
        assert build_guard("k", "data-v") == ':where([data-v="k"])'

    def test_guard_is_a_valid_selector(self):
        """The guard parses as a selector on its own."""
        assert serialize(parse_selector(build_guard("k"))) == GUARD

    @pytest.mark.parametrize("key", ["", 'a"b', "a b", "a]b", "ключ"])
    def test_invalid_key(self, key: str) -> None:
        """Keys that would need escaping are rejected."""
        with pytest.raises(ValueError, match="Invalid scope key"):
            build_guard(key)

    def test_invalid_attribute(self):
        """Attribute names must be plain identifiers."""
        with pytest.raises(ValueError, match="Invalid scope attribute"):
            build_guard("k", "data=x")


class TestRewriteCss:
    """Test rewrite_css() output."""

    def test_single_rule(self):
        """A single selector gets the guard and a descendant combinator."""
        result = rewrite_css(".button { color: red; }", "abc123")

        assert result == ':where([data-scope="abc123"]) .button { color: red; }'

    def test_each_selector_guarded(self):
        """Every selector of a list gets its own guard."""
        result = rewrite_css(".a, .b { color: red; }", "k")

        assert result == f"{GUARD} .a, {GUARD} .b {{ color: red; }}"

    def test_complex_selectors(self):
        """Combinators and pseudo-classes are kept after the guard."""
        result = rewrite_css("nav > a:hover, ul li::before { margin: 0; }", "k")

        assert result == f"{GUARD} nav > a:hover, {GUARD} ul li::before {{ margin: 0; }}"

    def test_empty_stylesheet(self):
        """Empty input yields empty output."""
        assert rewrite_css("", "k") == ""

    def test_comments_only(self):
        """A stylesheet with only comments has no rules."""
        assert rewrite_css("/* nothing */", "k") == ""

    def test_declarations_unchanged(self):
        """Declaration text and !important are preserved."""
        css = '.a { font-family: "Helvetica Neue", sans-serif; color: red !important; }'

        assert rewrite_css(css, "k") == (
            f'{GUARD} .a {{ font-family: "Helvetica Neue", sans-serif; color: red !important; }}'
        )

    def test_media_rules_rewritten(self):
        """Style rules inside @media are guarded; the prelude is untouched."""
        css = "@media (max-width: 600px) { .a { color: red; } }"

        assert rewrite_css(css, "k") == (
            f"@media (max-width: 600px) {{ {GUARD} .a {{ color: red; }} }}"
        )

    def test_nested_group_rules(self):
        """Group rules at any depth are traversed."""
        css = "@supports (display: grid) { @media print { .a {} } }"

        assert rewrite_css(css, "k") == (
            f"@supports (display: grid) {{ @media print {{ {GUARD} .a {{}} }} }}"
        )

    def test_keyframes_untouched(self):
        """Keyframe selectors are not element selectors."""
        css = "@keyframes spin { from { opacity: 0; } 50% { opacity: 1; } }"

        assert rewrite_css(css, "k") == css

    def test_descriptor_at_rules_untouched(self):
        """@font-face and @page carry no element selectors."""
        css = '@font-face { font-family: X; src: url("x.woff"); }\n@page :first { margin: 0; }'

        assert rewrite_css(css, "k") == css

    def test_statement_at_rules_untouched(self):
        """@import and @charset pass through."""
        css = '@import url("base.css") screen;\n.a {}'

        assert rewrite_css(css, "k") == f'@import url("base.css") screen;\n{GUARD} .a {{}}'

    def test_universal_and_root_not_special(self):
        """Every selector is guarded the same way."""
        result = rewrite_css("*, :root, html, body { margin: 0; }", "k")

        assert result == f"{GUARD} *, {GUARD} :root, {GUARD} html, {GUARD} body {{ margin: 0; }}"

    def test_already_guarded_guarded_again(self):
        """Guards are not deduplicated."""
        once = rewrite_css(".a {}", "k")

        assert rewrite_css(once, "k") == f"{GUARD} {GUARD} .a {{}}"

    def test_custom_attribute(self):
        """The guard uses the configured attribute."""
        assert rewrite_css(".a {}", "k", attribute="data-v") == ':where([data-v="k"]) .a {}'

    def test_escaped_identifiers_kept(self):
        """Escaped class names survive the rewrite."""
        assert rewrite_css(r".sm\:p-4 {}", "k") == rf"{GUARD} .sm\:p-4 {{}}"

    def test_nth_child_of_kept(self):
        """Selector arguments of :nth-child are kept, not guarded."""
        result = rewrite_css("li:nth-child(2n+1 of .item) {}", "k")

        assert result == f"{GUARD} li:nth-child(2n+1 of .item) {{}}"

    def test_input_tree_not_modified(self):
        """scope_stylesheet returns a new tree."""
        sheet = parse(".a {}")

        scope_stylesheet(sheet, "k")

        assert serialize(sheet) == ".a {}"

    def test_locations_preserved(self):
        """Rewritten rules keep their source location."""
        sheet = parse("\n  .a {}")

        scoped = scope_stylesheet(sheet, "k")

        rule = scoped.rules[0]
        assert isinstance(rule, StyleRule)
        assert rule.location is not None
        assert (rule.location.line, rule.location.column) == (2, 3)

    def test_logs_counts(self, caplog):
        """A debug record reports rule and selector counts."""
        with caplog.at_level(logging.DEBUG, logger="scopecss.scoping.rewriter"):
            rewrite_css(".a, .b {}\n.c {}", "k")

        assert "Scoped 2 rule(s), 3 selector(s)" in caplog.text


class TestRewriteCssErrors:
    """Test failure behavior: no partial output."""

    def test_invalid_key_checked_before_parsing(self):
        """A bad key is reported even when the CSS is also invalid."""
        with pytest.raises(ValueError, match="Invalid scope key"):
            rewrite_css(".a..b {}", 'bad"key')

    def test_css_syntax_error_propagates(self):
        """Stylesheet syntax errors abort the rewrite."""
        with pytest.raises(CssParseError) as exc_info:
            rewrite_css(".a { color: red; }\n.b", "k")

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.CSS_SYNTAX_ERROR

    def test_selector_error_propagates(self):
        """Selector syntax errors abort the rewrite with a position."""
        with pytest.raises(CssParseError) as exc_info:
            rewrite_css(".ok {}\n.a..b {}", "k")

        assert exc_info.value.line == 2

    def test_custom_parser_limits(self):
        """The parser argument controls size limits."""
        parser = CssParser(max_source_size=10)

        with pytest.raises(ValueError, match="exceeds maximum"):
            rewrite_css(".a { color: red; }", "k", parser=parser)


class TestScopeTransformer:
    """Test the transformer directly."""

    def test_counters(self):
        """Rules and selectors are counted separately."""
        transformer = ScopeTransformer("k")

        transformer.transform(parse(".a, .b {}\n@media print { .c {} }"))

        assert transformer.rules_rewritten == 2
        assert transformer.selectors_rewritten == 3

    def test_guard_attribute(self):
        """The transformer exposes its guard text."""
        assert ScopeTransformer("k", attribute="data-v").guard == ':where([data-v="k"])'

    def test_invalid_key(self):
        """Construction validates the key."""
        with pytest.raises(ValueError, match="Invalid scope key"):
            ScopeTransformer("")


class TestRewriteProperties:
    """Property-based tests for rewriting."""

    @given(selectors=selector_lists())
    def test_each_selector_prefixed(self, selectors: str) -> None:
        """PROPERTY: Each rewritten selector is the guard, a space, and the original."""
        original = parse(f"{selectors} {{}}").rules[0]
        scoped = parse(rewrite_css(f"{selectors} {{}}", "k")).rules[0]
        assert isinstance(original, StyleRule)
        assert isinstance(scoped, StyleRule)

        assert len(scoped.prelude.selectors) == len(original.prelude.selectors)
        for before, after in zip(original.prelude.selectors, scoped.prelude.selectors, strict=True):
            assert serialize(after) == f"{GUARD} {serialize(before)}"

    @given(selectors=selector_lists())
    def test_specificity_preserved(self, selectors: str) -> None:
        """PROPERTY: Guarding never changes any selector's specificity."""
        original = parse(f"{selectors} {{}}").rules[0]
        scoped = parse(rewrite_css(f"{selectors} {{}}", "k")).rules[0]
        assert isinstance(original, StyleRule)
        assert isinstance(scoped, StyleRule)

        assert selector_list_specificity(scoped.prelude) == selector_list_specificity(
            original.prelude
        )

    @given(css=stylesheets())
    def test_rule_structure_preserved(self, css: str) -> None:
        """PROPERTY: Rule count and declarations are unchanged."""
        original = parse(css)
        scoped = parse(rewrite_css(css, "k"))

        assert len(scoped.rules) == len(original.rules)
        for before, after in zip(original.rules, scoped.rules, strict=True):
            assert type(after) is type(before)
            if isinstance(before, StyleRule):
                assert isinstance(after, StyleRule)
                assert after.block == before.block
