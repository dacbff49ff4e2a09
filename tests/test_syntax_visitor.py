"""Tests for syntax/visitor.py: ASTVisitor and ASTTransformer.

Python 3.13+.
"""

import pytest

from scopecss.core.depth_guard import DepthLimitExceededError
from scopecss.syntax import (
    ASTNode,
    ASTTransformer,
    ASTVisitor,
    AtRule,
    ClassSelector,
    Declaration,
    DeclarationBlock,
    PseudoClassSelector,
    RuleBlock,
    StyleRule,
    TypeSelector,
    parse,
    serialize,
)


class _ClassCounter(ASTVisitor):
    """Counts class selectors, including those inside pseudo-class arguments."""

    def __init__(self) -> None:
        super().__init__()
        self.names: list[str] = []

    def visit_ClassSelector(self, node: ClassSelector) -> ASTNode:
        self.names.append(node.name)
        return self.generic_visit(node)


class _DeclarationCollector(ASTVisitor[None]):
    """Collects property names in document order."""

    def __init__(self) -> None:
        super().__init__()
        self.properties: list[str] = []

    def visit_Declaration(self, node: Declaration) -> None:
        self.properties.append(node.name)


class TestASTVisitor:
    """Test ASTVisitor traversal."""

    def test_visits_nested_selectors(self):
        """Selector arguments and at-rule blocks are traversed."""
        sheet = parse(".a, :not(.b) { color: red; }\n@media print { .c :is(.d, .e) {} }")
        counter = _ClassCounter()

        counter.visit(sheet)

        assert counter.names == ["a", "b", "c", "d", "e"]

    def test_visits_declarations_in_order(self):
        """Declarations in rules and descriptor at-rules are visited."""
        sheet = parse(".a { color: red; margin: 0; }\n@font-face { font-family: X; }")
        collector = _DeclarationCollector()

        collector.visit(sheet)

        assert collector.properties == ["color", "margin", "font-family"]

    def test_generic_visit_returns_node(self):
        """Without overrides, visit() is the identity."""
        sheet = parse(".a {}")

        assert ASTVisitor().visit(sheet) is sheet

    def test_dispatch_table_per_class(self):
        """Each subclass gets its own dispatch table."""
        assert "ClassSelector" in _ClassCounter._class_visit_methods
        assert "ClassSelector" not in _DeclarationCollector._class_visit_methods

    def test_depth_limit(self):
        """Deep trees exceed a small traversal limit."""
        sheet = parse("@media a { @media b { @media c { .x {} } } }")

        with pytest.raises(DepthLimitExceededError):
            ASTVisitor(max_depth=3).visit(sheet)


class _RenameClass(ASTTransformer):
    def __init__(self, old: str, new: str) -> None:
        super().__init__()
        self.old = old
        self.new = new

    def visit_ClassSelector(self, node: ClassSelector) -> ClassSelector:
        return ClassSelector(self.new) if node.name == self.old else node


class _DropPrint(ASTTransformer):
    def visit_AtRule(self, node: AtRule) -> AtRule | None:
        if node.name == "media" and node.prelude == "print":
            return None
        return self.generic_visit(node)  # type: ignore[return-value]


class _SplitRule(ASTTransformer):
    """Replaces each multi-selector rule with one rule per selector."""

    def visit_StyleRule(self, node: StyleRule) -> list[ASTNode]:
        return [
            StyleRule(type(node.prelude)((selector,)), node.block)
            for selector in node.prelude.selectors
        ]


class _DropColor(ASTTransformer):
    def visit_Declaration(self, node: Declaration) -> Declaration | None:
        return None if node.name == "color" else node


class TestASTTransformer:
    """Test ASTTransformer rebuilding."""

    def test_rename_everywhere(self):
        """Leaf replacement reaches selector arguments and group rules."""
        sheet = parse(".btn :not(.btn) {}\n@media print { .btn {} }")

        renamed = _RenameClass("btn", "button").transform(sheet)

        assert serialize(renamed) == ".button :not(.button) {}\n@media print { .button {} }"

    def test_input_not_modified(self):
        """Transformation builds a new tree."""
        sheet = parse(".btn {}")

        _RenameClass("btn", "button").transform(sheet)

        assert serialize(sheet) == ".btn {}"

    def test_remove_nodes(self):
        """Returning None removes a node from its parent."""
        sheet = parse(".a {}\n@media print { .b {} }\n@media screen { .c {} }")

        assert serialize(_DropPrint().transform(sheet)) == ".a {}\n@media screen { .c {} }"

    def test_expand_nodes(self):
        """Returning a list splices several nodes in."""
        sheet = parse(".a, .b { color: red; }")

        result = _SplitRule().transform(sheet)

        assert serialize(result) == ".a { color: red; }\n.b { color: red; }"

    def test_remove_declarations(self):
        """Declaration blocks are rebuilt without removed children."""
        sheet = parse(".a { color: red; margin: 0; }")

        assert serialize(_DropColor().transform(sheet)) == ".a { margin: 0; }"

    def test_untouched_leaves_are_reused(self):
        """Leaf nodes that are not replaced keep their identity."""
        sheet = parse("div.a {}")
        rule = sheet.rules[0]
        assert isinstance(rule, StyleRule)
        compound = rule.prelude.selectors[0].children[0]

        result = _RenameClass("a", "b").transform(sheet)

        assert isinstance(result.rules[0], StyleRule)  # type: ignore[union-attr]
        new_compound = result.rules[0].prelude.selectors[0].children[0]  # type: ignore[union-attr]
        assert new_compound.components[0] is compound.components[0]  # type: ignore[union-attr]
        assert new_compound.components[0] == TypeSelector("div")  # type: ignore[union-attr]

    def test_pseudo_without_selectors(self):
        """Pseudo-classes without selector arguments pass through."""
        node = PseudoClassSelector("hover")

        assert ASTTransformer().transform(node) is node

    def test_empty_blocks(self):
        """Empty rule and declaration blocks survive transformation."""
        block = RuleBlock(())
        declarations = DeclarationBlock(())

        assert ASTTransformer().transform(block) == block
        assert ASTTransformer().transform(declarations) == declarations
