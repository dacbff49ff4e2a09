"""Hypothesis strategies for generating CSS syntax.

Every strategy here produces text in the serializer's canonical form
(single-spaced combinators, ", " between selectors, one-line blocks), so
that parse followed by serialize reproduces the input exactly.

Strategy Categories:
- Identifier strategies: class, id, element and attribute names
- Selector strategies: simple, compound, complex selectors and lists
- Stylesheet strategies: declarations, style rules, @media groups
- Edge case strategies: deeply nested selector arguments
"""

from __future__ import annotations

import string

from hypothesis import event
from hypothesis import strategies as st
from hypothesis.strategies import composite

# =============================================================================
# Constants
# =============================================================================

# Plain CSS identifiers: no escapes, no leading hyphen or digit.
CSS_IDENTIFIER_FIRST_CHARS: str = string.ascii_lowercase
CSS_IDENTIFIER_REST_CHARS: str = string.ascii_lowercase + string.digits + "-"

ELEMENT_NAMES = ("div", "p", "a", "span", "ul", "li", "button", "section", "h1", "img")

SIMPLE_PSEUDO_CLASSES = ("hover", "focus", "active", "first-child", "last-child", "checked")

SIMPLE_PSEUDO_ELEMENTS = ("before", "after", "placeholder", "marker")

NTH_ARGUMENTS = ("odd", "even", "3", "2n", "2n+1", "-n+3")

# Canonical combinator text, as the serializer writes it.
COMBINATOR_TEXTS = (" ", " > ", " + ", " ~ ")

DECLARATION_VALUES = ("red", "0", "1px", "bold", "#fff", "1px solid red", "auto")

PROPERTY_NAMES = ("color", "margin", "padding", "font-weight", "border", "display")

MEDIA_PRELUDES = ("screen", "print", "(min-width: 600px)", "screen and (max-width: 900px)")


# =============================================================================
# Identifier Strategies
# =============================================================================


@composite
def css_identifiers(draw: st.DrawFn) -> str:
    """Generate plain CSS identifiers such as "btn", "nav-item", "h2".

    Rejects "of" so identifiers never read as the :nth-child keyword.
    """
    first = draw(st.sampled_from(CSS_IDENTIFIER_FIRST_CHARS))
    rest = draw(st.text(alphabet=CSS_IDENTIFIER_REST_CHARS, max_size=8))
    identifier = first + rest
    if identifier == "of":
        identifier = "of-x"
    return identifier


@composite
def attribute_values(draw: st.DrawFn) -> str:
    """Generate attribute selector values safe inside a double-quoted string."""
    return draw(st.text(alphabet=string.ascii_letters + string.digits + "-_ ./", max_size=10))


# =============================================================================
# Selector Strategies (canonical text)
# =============================================================================


@composite
def attribute_selectors(draw: st.DrawFn) -> str:
    """Generate [name], [name="value"], [name^="value" i], [lang|=en]."""
    name = draw(css_identifiers())
    form = draw(st.sampled_from(["presence", "string", "ident", "modifier"]))
    event(f"attribute={form}")
    match form:
        case "presence":
            return f"[{name}]"
        case "string":
            matcher = draw(st.sampled_from(["=", "~=", "^=", "$=", "*="]))
            return f'[{name}{matcher}"{draw(attribute_values())}"]'
        case "ident":
            return f"[{name}|={draw(css_identifiers())}]"
        case _:
            return f'[{name}="{draw(attribute_values())}" i]'


@composite
def pseudo_class_selectors(draw: st.DrawFn, max_depth: int = 2) -> str:
    """Generate pseudo-classes, functional ones nesting up to max_depth."""
    kinds = ["simple", "nth", "lang"]
    if max_depth > 0:
        kinds += ["not", "is", "where", "has", "nth-of"]
    kind = draw(st.sampled_from(kinds))
    event(f"pseudo_class={kind}")
    match kind:
        case "simple":
            return f":{draw(st.sampled_from(SIMPLE_PSEUDO_CLASSES))}"
        case "nth":
            return f":nth-child({draw(st.sampled_from(NTH_ARGUMENTS))})"
        case "lang":
            return f":lang({draw(css_identifiers())})"
        case "nth-of":
            nth = draw(st.sampled_from(NTH_ARGUMENTS))
            return f":nth-child({nth} of {draw(selector_lists(max_depth=max_depth - 1))})"
        case "has":
            combinator = draw(st.sampled_from(["", "> ", "+ "]))
            return f":has({combinator}{draw(complex_selectors(max_depth=max_depth - 1))})"
        case _:
            return f":{kind}({draw(selector_lists(max_depth=max_depth - 1))})"


@composite
def compound_selectors(draw: st.DrawFn, max_depth: int = 2) -> str:
    """Generate compound selectors such as "a.btn#main[href]:hover::before"."""
    head = draw(st.sampled_from(["", "", "*", "element"]))
    if head == "element":
        head = draw(st.sampled_from(ELEMENT_NAMES))

    min_parts = 0 if head else 1
    parts = draw(
        st.lists(
            st.one_of(
                css_identifiers().map(lambda name: f".{name}"),
                css_identifiers().map(lambda name: f"#{name}"),
                attribute_selectors(),
                pseudo_class_selectors(max_depth=max_depth),
            ),
            min_size=min_parts,
            max_size=3,
        )
    )
    compound = head + "".join(parts)
    if draw(st.booleans()) and draw(st.booleans()):
        compound += f"::{draw(st.sampled_from(SIMPLE_PSEUDO_ELEMENTS))}"
    return compound


@composite
def complex_selectors(draw: st.DrawFn, max_depth: int = 2) -> str:
    """Generate compounds joined by combinators: "nav > ul li + li"."""
    compounds = draw(st.lists(compound_selectors(max_depth=max_depth), min_size=1, max_size=4))
    event(f"compounds={len(compounds)}")
    text = compounds[0]
    for compound in compounds[1:]:
        text += draw(st.sampled_from(COMBINATOR_TEXTS)) + compound
    return text


@composite
def selector_lists(draw: st.DrawFn, max_depth: int = 2) -> str:
    """Generate comma-separated selector lists: ".a, nav > .b"."""
    selectors = draw(st.lists(complex_selectors(max_depth=max_depth), min_size=1, max_size=3))
    event(f"selectors={len(selectors)}")
    return ", ".join(selectors)


@composite
def nested_selector_arguments(draw: st.DrawFn, depth: int) -> str:
    """Generate a selector with exactly depth levels of :is()/:not()/:where()."""
    selector = f".{draw(css_identifiers())}"
    for _ in range(depth):
        name = draw(st.sampled_from(["is", "not", "where"]))
        selector = f":{name}({selector})"
    event(f"depth={depth}")
    return selector


# =============================================================================
# Stylesheet Strategies (canonical text)
# =============================================================================


@composite
def declarations(draw: st.DrawFn) -> str:
    """Generate "name: value;" or "name: value !important;"."""
    name = draw(st.sampled_from(PROPERTY_NAMES))
    value = draw(st.sampled_from(DECLARATION_VALUES))
    important = " !important" if draw(st.booleans()) else ""
    return f"{name}: {value}{important};"


@composite
def declaration_blocks(draw: st.DrawFn) -> str:
    """Generate "{ a: b; c: d; }" or "{}"."""
    items = draw(st.lists(declarations(), max_size=3))
    if not items:
        return "{}"
    return "{ " + " ".join(items) + " }"


@composite
def style_rules(draw: st.DrawFn) -> str:
    """Generate one style rule in canonical form."""
    return f"{draw(selector_lists(max_depth=1))} {draw(declaration_blocks())}"


@composite
def media_rules(draw: st.DrawFn) -> str:
    """Generate an @media group holding one to three style rules."""
    prelude = draw(st.sampled_from(MEDIA_PRELUDES))
    rules = draw(st.lists(style_rules(), min_size=1, max_size=3))
    return f"@media {prelude} {{ " + " ".join(rules) + " }"


@composite
def stylesheets(draw: st.DrawFn) -> str:
    """Generate stylesheets of style rules and @media groups, one rule per line."""
    rules = draw(st.lists(st.one_of(style_rules(), style_rules(), media_rules()), max_size=5))
    event(f"rules={len(rules)}")
    return "\n".join(rules)


# =============================================================================
# Scoping Strategies
# =============================================================================


@composite
def scope_keys(draw: st.DrawFn) -> str:
    """Generate valid scope keys (letters, digits, "-" and "_")."""
    return draw(
        st.text(alphabet=string.ascii_letters + string.digits + "-_", min_size=1, max_size=12)
    )


@composite
def html_fragments(draw: st.DrawFn) -> str:
    """Generate small well-formed HTML fragments with nested elements."""
    count = draw(st.integers(min_value=0, max_value=4))
    parts: list[str] = []
    for _ in range(count):
        tag = draw(st.sampled_from(["div", "p", "span", "section", "em"]))
        text = draw(st.text(alphabet=string.ascii_letters + " ", max_size=8))
        if draw(st.booleans()):
            inner = f"<b>{text}</b>"
        else:
            inner = text
        if draw(st.booleans()):
            parts.append(f'<{tag} class="{draw(css_identifiers())}">{inner}</{tag}>')
        else:
            parts.append(f"<{tag}>{inner}</{tag}>")
    event(f"elements={count}")
    return "".join(parts)


@composite
def unclosed_fragments(draw: st.DrawFn) -> str:
    """Generate fragments that rely on omitted end tags ("<p>a<p>b", "<li>x<li>y")."""
    container, item = draw(st.sampled_from([("div", "p"), ("ul", "li"), ("dl", "dt")]))
    count = draw(st.integers(min_value=1, max_value=5))
    items = [
        f"<{item}>{draw(st.text(alphabet=string.ascii_letters, min_size=1, max_size=6))}"
        for _ in range(count)
    ]
    event(f"item={item}")
    return f"<{container}>{''.join(items)}</{container}>"
