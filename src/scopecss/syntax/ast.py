"""CSS AST (Abstract Syntax Tree) node definitions.

Two layers share one node family:

- Stylesheet structure: StyleSheet, StyleRule, AtRule, blocks, declarations.
- Selector structure: SelectorList, Selector, CompoundSelector, combinators
  and simple selectors.

All nodes are frozen, slotted dataclasses with children stored in tuples,
so trees are transformed by building new nodes, never by mutation.
Identifiers and string contents keep their source (escaped) form so that
serialization never changes their meaning.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from typing import TypeIs

from scopecss.enums import AttributeMatcher, CombinatorKind

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "SourceLocation",
    # Simple selectors
    "TypeSelector",
    "UniversalSelector",
    "IdSelector",
    "ClassSelector",
    "AttributeSelector",
    "PseudoClassSelector",
    "PseudoElementSelector",
    # Selector structure
    "CompoundSelector",
    "Combinator",
    "Selector",
    "SelectorList",
    # Stylesheet structure
    "StyleSheet",
    "StyleRule",
    "AtRule",
    "KeyframeRule",
    "RuleBlock",
    "DeclarationBlock",
    "Declaration",
    "RawBlock",
    # Type aliases
    "SimpleSelector",
    "Rule",
    "Block",
    "ASTNode",
]

# ============================================================================
# BASE TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Where a rule starts in the stylesheet.

    The CSS tokenizer reports start positions only, so rules carry the
    line and column of their first token rather than a full span.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate location invariants."""
        if self.line < 1:
            msg = f"SourceLocation line must be >= 1, got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceLocation column must be >= 1, got {self.column}"
            raise ValueError(msg)


# ============================================================================
# SIMPLE SELECTORS
# ============================================================================


@dataclass(frozen=True, slots=True)
class TypeSelector:
    """Element type selector: div, svg|rect, *|p, |p.

    Attributes:
        name: Element name as written
        namespace: Namespace prefix; "" for the explicit no-namespace form
            (|p), "*" for any namespace, None when absent
    """

    name: str
    namespace: str | None = None


@dataclass(frozen=True, slots=True)
class UniversalSelector:
    """Universal selector: *, ns|*"""

    namespace: str | None = None


@dataclass(frozen=True, slots=True)
class IdSelector:
    """ID selector: #main"""

    name: str


@dataclass(frozen=True, slots=True)
class ClassSelector:
    """Class selector: .button"""

    name: str


@dataclass(frozen=True, slots=True)
class AttributeSelector:
    """Attribute selector.

    Examples:
        [disabled]
        [data-scope="abc123"]
        [lang|=en]
        [href$=".pdf" i]

    Attributes:
        name: Attribute name as written
        namespace: Namespace prefix (same convention as TypeSelector)
        matcher: Value matcher, None for presence-only selectors
        value: Value as written (string contents without quotes, or ident)
        quote: Quote character used for a string value, None for idents
        modifier: Case-sensitivity modifier ("i" or "s") as written
    """

    name: str
    namespace: str | None = None
    matcher: AttributeMatcher | None = None
    value: str | None = None
    quote: str | None = None
    modifier: str | None = None

    def __post_init__(self) -> None:
        """Validate matcher/value pairing."""
        if (self.matcher is None) != (self.value is None):
            msg = "AttributeSelector matcher and value must be given together"
            raise ValueError(msg)
        if self.quote not in (None, '"', "'"):
            msg = f"AttributeSelector quote must be ' or \", got {self.quote!r}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class PseudoClassSelector:
    """Pseudo-class: :hover, :nth-child(2n+1), :is(.a, .b), :where(...).

    Attributes:
        name: Pseudo-class name as written (without colon)
        argument: Raw argument text of functional pseudo-classes that do not
            take selectors (e.g. "2n+1" or "en"), or the An+B part of
            :nth-child(An+B of S)
        selectors: Parsed selector argument (:is, :where, :not, :has, ...)
    """

    name: str
    argument: str | None = None
    selectors: "SelectorList | None" = None

    @property
    def is_functional(self) -> bool:
        """True when the pseudo-class carries a parenthesized argument."""
        return self.argument is not None or self.selectors is not None


@dataclass(frozen=True, slots=True)
class PseudoElementSelector:
    """Pseudo-element: ::before, ::part(label), ::slotted(span).

    Attributes:
        name: Pseudo-element name as written (without colons)
        argument: Raw argument text for functional pseudo-elements
        selectors: Parsed selector argument (::slotted)
        legacy: Written with a single colon (:before, :after,
            :first-line, :first-letter)
    """

    name: str
    argument: str | None = None
    selectors: "SelectorList | None" = None
    legacy: bool = False

    @property
    def is_functional(self) -> bool:
        """True when the pseudo-element carries a parenthesized argument."""
        return self.argument is not None or self.selectors is not None


# ============================================================================
# SELECTOR STRUCTURE
# ============================================================================


@dataclass(frozen=True, slots=True)
class CompoundSelector:
    """Sequence of simple selectors with no combinator between them.

    Example:
        a.external[href]:hover -> (TypeSelector, ClassSelector,
                                   AttributeSelector, PseudoClassSelector)
    """

    components: tuple["SimpleSelector", ...]


@dataclass(frozen=True, slots=True)
class Combinator:
    """Combinator between two compound selectors."""

    kind: CombinatorKind


@dataclass(frozen=True, slots=True)
class Selector:
    """Complex selector: compounds separated by combinators.

    A well-formed selector alternates CompoundSelector and Combinator
    children, ends with a CompoundSelector, and may start with a Combinator
    (relative selector, e.g. "> .child").

    Example:
        nav > a.active -> (Compound(nav), Combinator(>), Compound(a.active))
    """

    children: tuple["CompoundSelector | Combinator", ...]

    @property
    def compounds(self) -> tuple[CompoundSelector, ...]:
        """Compound selectors in source order."""
        return tuple(c for c in self.children if isinstance(c, CompoundSelector))

    @property
    def leading_combinator(self) -> Combinator | None:
        """Combinator the selector starts with (relative selectors only)."""
        if self.children and isinstance(self.children[0], Combinator):
            return self.children[0]
        return None


@dataclass(frozen=True, slots=True)
class SelectorList:
    """Comma-separated selector group attached to one style rule."""

    selectors: tuple[Selector, ...]


# ============================================================================
# STYLESHEET STRUCTURE
# ============================================================================


@dataclass(frozen=True, slots=True)
class Declaration:
    """Property declaration: color: red !important

    Attributes:
        name: Property name as written
        value: Value text (whitespace-trimmed, without !important)
        important: Declaration carries !important
    """

    name: str
    value: str
    important: bool = False


@dataclass(frozen=True, slots=True)
class DeclarationBlock:
    """Declarations of a style rule, keyframe, or descriptor at-rule.

    Declaration lists may also hold nested at-rules (e.g. @page margin
    boxes such as @top-left { ... }).
    """

    children: tuple["Declaration | AtRule", ...]


@dataclass(frozen=True, slots=True)
class RawBlock:
    """Block content of an at-rule whose grammar is not interpreted.

    Serialized verbatim between braces.
    """

    text: str


@dataclass(frozen=True, slots=True)
class KeyframeRule:
    """Keyframe inside @keyframes: from { ... }, 50% { ... }.

    Keyframe selectors are not element selectors; scoping never touches them.
    """

    selector: str
    block: DeclarationBlock
    location: SourceLocation | None = None


@dataclass(frozen=True, slots=True)
class RuleBlock:
    """Nested rule list of @media, @supports, @layer, @keyframes, ..."""

    rules: tuple["Rule", ...]


@dataclass(frozen=True, slots=True)
class AtRule:
    """At-rule: @media, @import, @font-face, @keyframes, ...

    Attributes:
        name: At-keyword without "@", as written
        prelude: Prelude text (media condition, import URL, ...), kept as is
        block: Block content, None for statement at-rules ending with ";"
        location: Where the at-keyword appears in the source
    """

    name: str
    prelude: str
    block: "RuleBlock | DeclarationBlock | RawBlock | None" = None
    location: SourceLocation | None = None

    @staticmethod
    def guard(rule: object) -> TypeIs["AtRule"]:
        """Type guard for AtRule (used in rule filtering)."""
        return isinstance(rule, AtRule)


@dataclass(frozen=True, slots=True)
class StyleRule:
    """Style rule: selector list paired with a declaration block.

    Example:
        .a, .b { color: red; }
    """

    prelude: SelectorList
    block: DeclarationBlock
    location: SourceLocation | None = None

    @staticmethod
    def guard(rule: object) -> TypeIs["StyleRule"]:
        """Type guard for StyleRule (used in rule filtering)."""
        return isinstance(rule, StyleRule)


@dataclass(frozen=True, slots=True)
class StyleSheet:
    """Root AST node containing all top-level rules."""

    rules: tuple["Rule", ...]


# ============================================================================
# TYPE ALIASES
# ============================================================================

type SimpleSelector = (
    TypeSelector
    | UniversalSelector
    | IdSelector
    | ClassSelector
    | AttributeSelector
    | PseudoClassSelector
    | PseudoElementSelector
)

type Rule = StyleRule | AtRule | KeyframeRule

type Block = RuleBlock | DeclarationBlock | RawBlock

type ASTNode = (
    StyleSheet
    | StyleRule
    | AtRule
    | KeyframeRule
    | RuleBlock
    | DeclarationBlock
    | Declaration
    | RawBlock
    | SelectorList
    | Selector
    | Combinator
    | CompoundSelector
    | TypeSelector
    | UniversalSelector
    | IdSelector
    | ClassSelector
    | AttributeSelector
    | PseudoClassSelector
    | PseudoElementSelector
    | SourceLocation
)
