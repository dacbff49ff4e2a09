"""Selector specificity per Selectors Level 4.

Specificity is the (a, b, c) triple browsers use to order competing rules:

- a: ID selectors
- b: class selectors, attribute selectors, and pseudo-classes
- c: type selectors and pseudo-elements

The universal selector contributes nothing. Selector-taking pseudo-classes
follow their own rules:

- :where(S) contributes nothing at all
- :is(S), :not(S), :has(S) contribute the most specific selector in S
- :nth-child(An+B of S) contributes one pseudo-class plus the most specific S
- :host(S), :host-context(S) contribute one pseudo-class plus S
- ::slotted(S) contributes one pseudo-element plus S

The zero specificity of :where() is what lets a scope guard restrict
matching without changing cascade order.

Python 3.13+.
"""

from dataclasses import dataclass

from scopecss.constants import MAX_DEPTH
from scopecss.core.depth_guard import DepthGuard

from .ast import (
    AttributeSelector,
    ClassSelector,
    CompoundSelector,
    IdSelector,
    PseudoClassSelector,
    PseudoElementSelector,
    Selector,
    SelectorList,
    SimpleSelector,
    TypeSelector,
    UniversalSelector,
)

__all__ = ["ZERO_SPECIFICITY", "Specificity", "selector_list_specificity", "selector_specificity"]

# Pseudo-classes taking the specificity of their most specific argument.
_MAX_ARGUMENT_PSEUDO_CLASSES: frozenset[str] = frozenset(
    {"is", "not", "has", "matches", "-webkit-any", "-moz-any"}
)

# Pseudo-classes counting as one pseudo-class plus their selector argument.
_COUNTED_ARGUMENT_PSEUDO_CLASSES: frozenset[str] = frozenset(
    {"nth-child", "nth-last-child", "host", "host-context"}
)


@dataclass(frozen=True, slots=True, order=True)
class Specificity:
    """Selector specificity triple, ordered lexicographically.

    Example:
        >>> Specificity(0, 1, 0) < Specificity(0, 1, 1) < Specificity(1, 0, 0)
        True
        >>> Specificity(0, 1, 0) + Specificity(0, 0, 1)
        Specificity(ids=0, classes=1, types=1)
    """

    ids: int = 0
    classes: int = 0
    types: int = 0

    def __add__(self, other: "Specificity") -> "Specificity":
        """Component-wise sum."""
        return Specificity(
            self.ids + other.ids,
            self.classes + other.classes,
            self.types + other.types,
        )

    def as_tuple(self) -> tuple[int, int, int]:
        """Return (a, b, c)."""
        return (self.ids, self.classes, self.types)


ZERO_SPECIFICITY = Specificity()
_ID = Specificity(ids=1)
_CLASS = Specificity(classes=1)
_TYPE = Specificity(types=1)


class _SpecificityCalculator:
    """Walks one selector with depth protection for nested arguments."""

    __slots__ = ("_depth_guard",)

    def __init__(self, max_depth: int) -> None:
        self._depth_guard = DepthGuard(max_depth=max_depth)

    def of_list(self, selectors: SelectorList | None) -> Specificity:
        """Specificity of the most specific selector in the list."""
        if selectors is None or not selectors.selectors:
            return ZERO_SPECIFICITY
        with self._depth_guard:
            return max(self.of_selector(selector) for selector in selectors.selectors)

    def of_selector(self, selector: Selector) -> Specificity:
        total = ZERO_SPECIFICITY
        for compound in selector.children:
            if isinstance(compound, CompoundSelector):
                for component in compound.components:
                    total += self.of_simple(component)
        return total

    def of_simple(self, node: SimpleSelector) -> Specificity:
        match node:
            case IdSelector():
                return _ID
            case ClassSelector() | AttributeSelector():
                return _CLASS
            case TypeSelector():
                return _TYPE
            case UniversalSelector():
                return ZERO_SPECIFICITY
            case PseudoElementSelector(name=name, selectors=selectors):
                if name.lower() == "slotted":
                    return _TYPE + self.of_list(selectors)
                return _TYPE
            case PseudoClassSelector(name=name, selectors=selectors):
                lowered = name.lower()
                if lowered == "where":
                    return ZERO_SPECIFICITY
                if lowered in _MAX_ARGUMENT_PSEUDO_CLASSES:
                    return self.of_list(selectors)
                if lowered in _COUNTED_ARGUMENT_PSEUDO_CLASSES:
                    return _CLASS + self.of_list(selectors)
                return _CLASS
            case _:
                msg = f"Not a simple selector: {type(node).__name__}"
                raise TypeError(msg)


def selector_specificity(selector: Selector, *, max_depth: int | None = None) -> Specificity:
    """Compute the specificity of one complex selector.

    Args:
        selector: Parsed selector
        max_depth: Maximum nesting of selector arguments (default: MAX_DEPTH)

    Returns:
        Specificity triple

    Raises:
        DepthLimitExceededError: If selector arguments nest deeper than max_depth

    Example:
        >>> from scopecss.syntax import parse_selector
        >>> selector_specificity(parse_selector("#nav a.active:hover")).as_tuple()
        (1, 2, 1)
        >>> selector_specificity(parse_selector(':where([data-scope="k"]) .a')).as_tuple()
        (0, 1, 0)
    """
    calculator = _SpecificityCalculator(max_depth if max_depth is not None else MAX_DEPTH)
    return calculator.of_selector(selector)


def selector_list_specificity(
    selectors: SelectorList, *, max_depth: int | None = None
) -> tuple[Specificity, ...]:
    """Compute the specificity of each selector in a list, in order.

    Each selector of a rule competes in the cascade on its own, so a list
    has no single specificity.
    """
    calculator = _SpecificityCalculator(max_depth if max_depth is not None else MAX_DEPTH)
    return tuple(calculator.of_selector(selector) for selector in selectors.selectors)
