"""Tests for scoping/composer.py: the full tag-and-rewrite pipeline.

Python 3.13+.
"""

import random

import pytest
from bs4 import BeautifulSoup
from hypothesis import given
from hypothesis import strategies as st

from scopecss.constants import SCOPE_KEY_ALPHABET, SCOPE_KEY_LENGTH
from scopecss.diagnostics import CssParseError, HtmlParseError, ScopeCssError
from scopecss.scoping import ScopeResult, scope, scope_css
from scopecss.syntax import CssParser, StyleRule, parse, serialize
from tests.strategies import html_fragments, stylesheets


class TestScopeCss:
    """Test scope_css() composed output."""

    def test_button_example(self, fixed_key_rng):
        """Fragment first, then the rewritten stylesheet in a <style> element."""
        result = scope_css(
            '<div class="button">Click me</div>',
            ".button { color: red; }",
            rng=fixed_key_rng,
        )

        assert result == (
            '<div class="button" data-scope="abc123">Click me</div>'
            '<style>:where([data-scope="abc123"]) .button { color: red; }</style>'
        )

    def test_empty_inputs(self, fixed_key_rng):
        """Empty html and css still produce a style element."""
        assert scope_css("", "", rng=fixed_key_rng) == "<style></style>"

    def test_custom_attribute(self, fixed_key_rng):
        """Both halves use the configured attribute."""
        result = scope_css("<p>x</p>", "p {}", rng=fixed_key_rng, attribute="data-v")

        assert result == '<p data-v="abc123">x</p><style>:where([data-v="abc123"]) p {}</style>'

    def test_seeded_rng_deterministic(self):
        """Equal seeds give equal output."""
        first = scope_css("<p>x</p>", "p {}", rng=random.Random(7))
        second = scope_css("<p>x</p>", "p {}", rng=random.Random(7))

        assert first == second


class TestScope:
    """Test scope() and ScopeResult."""

    def test_result_fields(self, fixed_key_rng):
        """The result carries the key shared by both outputs."""
        result = scope("<p>x</p>", ".a {}", rng=fixed_key_rng)

        assert result == ScopeResult(
            key="abc123",
            html='<p data-scope="abc123">x</p>',
            css=':where([data-scope="abc123"]) .a {}',
        )

    def test_render(self):
        """render() appends the stylesheet in a <style> element."""
        result = ScopeResult(key="k", html='<p data-scope="k">x</p>', css="p {}")

        assert result.render() == '<p data-scope="k">x</p><style>p {}</style>'

    def test_render_does_not_escape(self):
        """Stylesheet text is inserted as is."""
        result = ScopeResult(key="k", html="", css='.a::after { content: "</b>"; }')

        assert result.render() == '<style>.a::after { content: "</b>"; }</style>'

    def test_result_is_frozen(self):
        """ScopeResult is immutable."""
        result = ScopeResult(key="k", html="", css="")

        with pytest.raises(AttributeError):
            result.key = "other"  # type: ignore[misc]

    def test_fresh_key_per_call(self, seeded_rng):
        """Each call draws a new key from the random source."""
        first = scope("<p>x</p>", "", rng=seeded_rng)
        second = scope("<p>x</p>", "", rng=seeded_rng)

        assert first.key != second.key

    def test_default_key_format(self):
        """Keys default to six characters from a-z and 0-9."""
        result = scope("<p>x</p>", "p {}")

        assert len(result.key) == SCOPE_KEY_LENGTH
        assert set(result.key) <= set(SCOPE_KEY_ALPHABET)


class TestScopeErrors:
    """Test that the first failure aborts the whole call."""

    def test_css_error_raises(self, fixed_key_rng):
        """Invalid CSS raises CssParseError."""
        with pytest.raises(CssParseError):
            scope_css("<p>x</p>", ".a..b {}", rng=fixed_key_rng)

    def test_errors_share_base_class(self, fixed_key_rng):
        """Callers may catch every stage with ScopeCssError."""
        with pytest.raises(ScopeCssError):
            scope_css("<p>x</p>", ".a", rng=fixed_key_rng)

    def test_html_error_raises(self, monkeypatch, fixed_key_rng):
        """An HTML parser rejection stops the pipeline before the CSS is read."""
        from scopecss.diagnostics import ErrorTemplate  # noqa: PLC0415
        from scopecss.scoping import composer  # noqa: PLC0415

        def reject(_html: str, _key: str, *, attribute: str) -> str:
            raise HtmlParseError(ErrorTemplate.html_parse_failed(attribute))

        monkeypatch.setattr(composer, "tag_html", reject)

        with pytest.raises(HtmlParseError):
            scope_css("<p>x</p>", ".a..b {}", rng=fixed_key_rng)

    def test_invalid_attribute(self, fixed_key_rng):
        """Attribute names are validated."""
        with pytest.raises(ValueError, match="Invalid scope attribute"):
            scope_css("<p>x</p>", "p {}", rng=fixed_key_rng, attribute="a b")

    def test_parser_limits_apply(self, fixed_key_rng):
        """A custom parser's limits are honored."""
        with pytest.raises(ValueError, match="exceeds maximum"):
            scope_css(
                "<p>x</p>",
                "p { color: red; }",
                rng=fixed_key_rng,
                parser=CssParser(max_source_size=5),
            )


class TestScopeProperties:
    """Property-based tests for the composed pipeline."""

    @given(html=html_fragments(), css=stylesheets(), seed=st.integers(min_value=0))
    def test_key_shared_by_html_and_css(self, html: str, css: str, seed: int) -> None:
        """PROPERTY: Every tagged element carries the key the guards use."""
        result = scope(html, css, rng=random.Random(seed))

        for element in BeautifulSoup(result.html, "html.parser").find_all(True):
            assert element.get("data-scope") == result.key
        guard = f':where([data-scope="{result.key}"]) '
        for rule in parse(result.css).rules:
            if isinstance(rule, StyleRule):
                for selector in rule.prelude.selectors:
                    assert serialize(selector).startswith(guard)

    @given(html=html_fragments(), css=stylesheets(), seed=st.integers(min_value=0))
    def test_render_shape(self, html: str, css: str, seed: int) -> None:
        """PROPERTY: Output is the tagged html followed by one style element."""
        result = scope(html, css, rng=random.Random(seed))
        rendered = result.render()

        assert rendered.startswith(result.html)
        assert rendered.endswith("</style>")
        assert rendered[len(result.html):] == f"<style>{result.css}</style>"
