"""Scoping composition: one key, one tagged fragment, one scoped stylesheet.

scope() runs the whole pipeline:

1. Generate a fresh scope key
2. Tag every element of the HTML fragment with it
3. Rewrite every selector of the stylesheet with the matching guard

The first failure aborts the call; nothing is returned partially and no
key is ever reused between calls.

Python 3.13+.
"""

import logging
from dataclasses import dataclass

from scopecss.constants import SCOPE_ATTRIBUTE, STYLE_CLOSE_TAG, STYLE_OPEN_TAG
from scopecss.scoping.keys import RandomSource, generate_scope_key
from scopecss.scoping.rewriter import rewrite_css
from scopecss.scoping.tagger import tag_html
from scopecss.syntax import CssParser

__all__ = ["ScopeResult", "scope", "scope_css"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScopeResult:
    """Outcome of scoping one fragment.

    Attributes:
        key: Scope key shared by html and css
        html: Fragment with every element tagged
        css: Stylesheet with every selector guarded
    """

    key: str
    html: str
    css: str

    def render(self) -> str:
        """Return the fragment followed by its stylesheet in a <style> element.

        The stylesheet is inserted as is; it is not escaped against an
        embedded "</style>" sequence.

        Example:
            >>> ScopeResult("k", "<p data-scope=\\"k\\">x</p>", "").render()
            '<p data-scope="k">x</p><style></style>'
        """
        return f"{self.html}{STYLE_OPEN_TAG}{self.css}{STYLE_CLOSE_TAG}"


def scope(
    html: str,
    css: str,
    *,
    rng: RandomSource | None = None,
    attribute: str = SCOPE_ATTRIBUTE,
    parser: CssParser | None = None,
) -> ScopeResult:
    """Scope css to html under a newly generated key.

    Args:
        html: HTML fragment
        css: Stylesheet text
        rng: Random source for the key (default: the random module)
        attribute: Marker attribute name (default: "data-scope")
        parser: CSS parser, for custom size or nesting limits

    Returns:
        ScopeResult with the key, tagged html, and rewritten css

    Raises:
        HtmlParseError: If the HTML parser rejects the fragment
        CssParseError: If css is not valid CSS
        ValueError: If attribute is invalid or css exceeds the size limit
    """
    key = generate_scope_key(rng)
    scoped_html = tag_html(html, key, attribute=attribute)
    scoped_css = rewrite_css(css, key, attribute=attribute, parser=parser)
    logger.debug("Scoped fragment with key %r", key)
    return ScopeResult(key=key, html=scoped_html, css=scoped_css)


def scope_css(
    html: str,
    css: str,
    *,
    rng: RandomSource | None = None,
    attribute: str = SCOPE_ATTRIBUTE,
    parser: CssParser | None = None,
) -> str:
    """Scope css to html and return the fragment with an appended <style> element.

    Output shape: <tagged html><style><rewritten css></style>

    Example:
        >>> import random
        >>> out = scope_css('<div class="button">Click me</div>',
        ...                 ".button { color: red; }", rng=random.Random(0))
        >>> out.endswith("{ color: red; }</style>")
        True

    Raises:
        HtmlParseError: If the HTML parser rejects the fragment
        CssParseError: If css is not valid CSS
    """
    return scope(html, css, rng=rng, attribute=attribute, parser=parser).render()
