"""HTML fragment tagging.

Marks every element of an HTML fragment with the scope attribute so that
the guarded selectors of the rewritten stylesheet can match it.

The fragment is parsed with BeautifulSoup's "html.parser" builder, which
tolerates the same malformed-but-renderable markup browsers do and never
wraps a fragment in <html>/<body>. Multi-valued attribute splitting is
disabled so class="a  b" round-trips byte-for-byte.

Implied End Tags:
    html.parser nests an unclosed element inside the next one ("<p>a<p>b"
    becomes p > p). Browsers close the first element when the second
    opens, so a nested serialization would re-parse with a stray end tag
    and an extra, untagged element. After parsing, an element that
    implicitly closes its parent (HTML tree construction rules for p, li,
    dt/dd, headings, options, ruby text and table rows/cells) is moved out
    to follow the parent, together with its following siblings. Only the
    direct parent is considered.

Serialization Notes:
    Output is BeautifulSoup's serialization of the parsed tree:
    - Attributes keep their source order; the scope attribute comes last
    - Tag and attribute names are lowercased by the HTML parser, including
      camel-cased SVG names (viewBox -> viewbox, clipPath -> clippath);
      browsers restore their case when parsing foreign content
    - Void elements are written in self-closing form (<br/>)
    - Attribute values are re-quoted with double quotes
    - Elements already carrying the attribute keep their value, even ""
    - Markup inside <textarea> and <title> may be parsed as elements and
      tagged, depending on the interpreter's html.parser version

Python 3.13+.
"""

import logging
from collections.abc import Iterable
from typing import Any

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.exceptions import ParserRejectedMarkup
from bs4.formatter import HTMLFormatter

from scopecss.constants import SCOPE_ATTRIBUTE
from scopecss.diagnostics import ErrorTemplate, HtmlParseError
from scopecss.scoping.keys import validate_scope_attribute, validate_scope_key

__all__ = ["tag_html", "tag_soup"]

logger = logging.getLogger(__name__)

# Parser builder for fragments: stdlib-backed, no html/body wrapping.
_HTML_BUILDER = "html.parser"

_HEADINGS: frozenset[str] = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})

# Start tags that close an open <p>.
_P_CLOSERS: frozenset[str] = _HEADINGS | frozenset(
    {
        "address", "article", "aside", "blockquote", "center", "dd", "details",
        "dialog", "dir", "div", "dl", "dt", "fieldset", "figcaption", "figure",
        "footer", "form", "header", "hgroup", "hr", "li", "listing", "main",
        "menu", "nav", "ol", "p", "plaintext", "pre", "search", "section",
        "summary", "table", "ul", "xmp",
    }
)  # fmt: skip

# Open element name -> start tags that implicitly end it.
_IMPLIED_END_TAGS: dict[str, frozenset[str]] = {
    "p": _P_CLOSERS,
    "li": frozenset({"li"}),
    "dt": frozenset({"dt", "dd"}),
    "dd": frozenset({"dt", "dd"}),
    "option": frozenset({"option", "optgroup"}),
    "optgroup": frozenset({"optgroup"}),
    "rt": frozenset({"rt", "rp"}),
    "rp": frozenset({"rt", "rp"}),
    "td": frozenset({"td", "th", "tr"}),
    "th": frozenset({"td", "th", "tr"}),
    "tr": frozenset({"tr", "tbody", "thead", "tfoot"}),
    "tbody": frozenset({"tbody", "thead", "tfoot"}),
    "thead": frozenset({"tbody", "thead", "tfoot"}),
    "tfoot": frozenset({"tbody", "thead", "tfoot"}),
    **{heading: _HEADINGS for heading in _HEADINGS},
}


class _SourceOrderFormatter(HTMLFormatter):
    """Minimal HTML formatter that writes attributes in insertion order."""

    def attributes(self, tag: Tag) -> Iterable[tuple[str, Any]]:
        return list(tag.attrs.items())


_FORMATTER = _SourceOrderFormatter(entity_substitution=EntitySubstitution.substitute_xml)


def _apply_implied_end_tags(soup: BeautifulSoup) -> int:
    """Move elements that implicitly end their parent to follow it.

    Returns:
        Number of moves made
    """
    moved = 0
    for element in list(soup.find_all(True)):
        parent = element.parent
        while parent is not None and element.name in _IMPLIED_END_TAGS.get(
            parent.name, frozenset()
        ):
            anchor = parent
            for node in (element, *list(element.next_siblings)):
                anchor.insert_after(node.extract())
                anchor = node
            moved += 1
            parent = element.parent
    return moved


def tag_soup(soup: BeautifulSoup, key: str, *, attribute: str = SCOPE_ATTRIBUTE) -> int:
    """Set attribute=key on every element of a parsed document that lacks it.

    Mutates soup in place.

    Returns:
        Number of elements that received the attribute
    """
    tagged = 0
    for element in soup.find_all(True):
        if not element.has_attr(attribute):
            element[attribute] = key
            tagged += 1
    return tagged


def tag_html(html: str, key: str, *, attribute: str = SCOPE_ATTRIBUTE) -> str:
    """Add the scope attribute to every element of an HTML fragment.

    Elements that already have the attribute are left untouched, whatever
    its value. Text, comments, element order and existing attributes are
    preserved; the new attribute is appended after existing ones.

    Args:
        html: HTML fragment (may be empty or plain text)
        key: Scope key to write
        attribute: Marker attribute name (default: "data-scope")

    Returns:
        Serialized fragment with every element tagged

    Raises:
        ValueError: If key or attribute is not valid for embedding
        HtmlParseError: If the HTML parser rejects the markup outright

    Example:
        >>> tag_html('<a title="t" href="/x">link</a>', "abc123")
        '<a title="t" href="/x" data-scope="abc123">link</a>'
    """
    validate_scope_key(key)
    validate_scope_attribute(attribute)

    try:
        soup = BeautifulSoup(html, _HTML_BUILDER, multi_valued_attributes=None)
    except ParserRejectedMarkup as e:
        raise HtmlParseError(ErrorTemplate.html_parse_failed(str(e))) from e

    moved = _apply_implied_end_tags(soup)
    tagged = tag_soup(soup, key, attribute=attribute)
    logger.debug(
        "Tagged %d element(s) with %s=%r (%d implied end tag(s))", tagged, attribute, key, moved
    )
    return soup.decode(formatter=_FORMATTER)
