"""CSS Transformer Example - Demonstrating AST Modification API.

This example shows how to use scopecss's ASTTransformer and ASTVisitor to
inspect and modify stylesheets programmatically:

- Rename a class everywhere, including inside :is() and :not()
- Drop @import rules
- Split multi-selector rules into one rule per selector
- Report selector specificity

Leverages Python 3.13+ features:
- Pattern matching in ASTTransformer
- Type-safe AST node construction
- Immutable transformations (original unchanged)

Python 3.13+.
"""

from __future__ import annotations

from scopecss import parse_css, serialize_css
from scopecss.syntax import (
    ASTNode,
    ASTTransformer,
    ASTVisitor,
    AtRule,
    ClassSelector,
    SelectorList,
    StyleRule,
    StyleSheet,
    selector_list_specificity,
)


class RenameClassTransformer(ASTTransformer):
    """Rename one class selector wherever it appears."""

    def __init__(self, old: str, new: str) -> None:
        super().__init__()
        self.old = old
        self.new = new

    def visit_ClassSelector(self, node: ClassSelector) -> ClassSelector:  # pylint: disable=invalid-name
        """Replace matching class names.

        Visitor pattern: visit_* methods follow stdlib ast.NodeVisitor convention.
        """
        if node.name == self.old:
            return ClassSelector(self.new)
        return node


class DropImportsTransformer(ASTTransformer):
    """Remove @import rules."""

    def visit_AtRule(self, node: AtRule) -> ASTNode | None:  # pylint: disable=invalid-name
        """Return None for @import, keep traversing everything else."""
        if node.name.lower() == "import":
            return None
        return self.generic_visit(node)  # type: ignore[return-value]


class SplitSelectorsTransformer(ASTTransformer):
    """Turn ".a, .b { ... }" into ".a { ... }" and ".b { ... }"."""

    def visit_StyleRule(self, node: StyleRule) -> list[ASTNode]:  # pylint: disable=invalid-name
        """Expand one rule into several by returning a list."""
        return [
            StyleRule(prelude=SelectorList((selector,)), block=node.block, location=node.location)
            for selector in node.prelude.selectors
        ]


class SpecificityReport(ASTVisitor[None]):
    """Collect (selector, specificity) pairs for every style rule."""

    def __init__(self) -> None:
        super().__init__()
        self.rows: list[tuple[str, tuple[int, int, int]]] = []

    def visit_StyleRule(self, node: StyleRule) -> None:  # pylint: disable=invalid-name
        """Record each selector of the rule separately."""
        for selector, specificity in zip(
            node.prelude.selectors, selector_list_specificity(node.prelude), strict=True
        ):
            self.rows.append((serialize_css(selector), specificity.as_tuple()))


# Example usage
if __name__ == "__main__":
    # pylint: disable=invalid-name  # Example data strings - not module constants
    source = """
@import url("theme.css");
.btn, .btn:not(.btn-primary) { padding: 4px; }
@media (min-width: 40em) { #nav .btn:hover { padding: 8px; } }
"""

    # Example 1: Rename a class
    print("=" * 60)
    print("Example 1: Rename .btn to .button")
    print("=" * 60)

    stylesheet = parse_css(source)
    renamed = RenameClassTransformer("btn", "button").transform(stylesheet)
    assert isinstance(renamed, StyleSheet), f"Expected StyleSheet, got {type(renamed)}"
    print(serialize_css(renamed))

    # Example 2: Drop @import
    print("\n" + "=" * 60)
    print("Example 2: Drop @import Rules")
    print("=" * 60)

    without_imports = DropImportsTransformer().transform(stylesheet)
    assert isinstance(without_imports, StyleSheet)
    print(serialize_css(without_imports))

    # Example 3: Split selector lists
    print("\n" + "=" * 60)
    print("Example 3: One Rule per Selector")
    print("=" * 60)

    split = SplitSelectorsTransformer().transform(without_imports)
    assert isinstance(split, StyleSheet)
    print(serialize_css(split))

    # Example 4: Specificity report
    print("\n" + "=" * 60)
    print("Example 4: Specificity Report")
    print("=" * 60)

    report = SpecificityReport()
    report.visit(stylesheet)
    for selector_text, (a, b, c) in report.rows:
        print(f"({a},{b},{c})  {selector_text}")

    print("\nOriginal stylesheet is unchanged:")
    print(serialize_css(stylesheet))
