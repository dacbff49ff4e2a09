"""Serialize the CSS AST back to CSS text.

Converts AST nodes to CSS source. Useful for:
- Emitting rewritten stylesheets
- Rendering a single selector sub-tree
- Property-based testing (roundtrip: parse → serialize → parse)

Output format is normalized rather than source-preserving: comments are
gone, combinators get single spaces, blocks are written on one line.

Python 3.13+.
"""

from scopecss.enums import CombinatorKind

from .ast import (
    ASTNode,
    AtRule,
    AttributeSelector,
    ClassSelector,
    Combinator,
    CompoundSelector,
    Declaration,
    DeclarationBlock,
    IdSelector,
    KeyframeRule,
    PseudoClassSelector,
    PseudoElementSelector,
    RawBlock,
    RuleBlock,
    Selector,
    SelectorList,
    SourceLocation,
    StyleRule,
    StyleSheet,
    TypeSelector,
    UniversalSelector,
)
from .visitor import ASTVisitor

__all__ = ["CssSerializer", "SerializationValidationError", "serialize"]


class SerializationValidationError(ValueError):
    """Raised when AST validation fails during serialization.

    This error indicates the AST structure would produce invalid CSS.
    Common causes:
    - Empty selector list, selector, or compound selector
    - Two adjacent combinators, or a selector ending with a combinator
    - Type or universal selector not in first position of a compound
    - Malformed AST nodes from programmatic construction
    """


class _StructureValidator(ASTVisitor[None]):
    """Checks selector structure invariants over a whole tree."""

    def visit_StyleRule(self, node: StyleRule) -> None:
        if not node.prelude.selectors:
            msg = "StyleRule has an empty selector list"
            raise SerializationValidationError(msg)
        self.generic_visit(node)

    def visit_SelectorList(self, node: SelectorList) -> None:
        if not node.selectors:
            msg = "SelectorList must contain at least one Selector"
            raise SerializationValidationError(msg)
        self.generic_visit(node)

    def visit_Selector(self, node: Selector) -> None:
        if not node.children:
            msg = "Selector must contain at least one CompoundSelector"
            raise SerializationValidationError(msg)
        if not isinstance(node.children[-1], CompoundSelector):
            msg = "Selector must end with a CompoundSelector, not a Combinator"
            raise SerializationValidationError(msg)
        for index, (previous, current) in enumerate(zip(node.children, node.children[1:], strict=False)):
            if isinstance(previous, Combinator) and isinstance(current, Combinator):
                msg = f"Selector has adjacent combinators at position {index}"
                raise SerializationValidationError(msg)
            if isinstance(previous, CompoundSelector) and isinstance(current, CompoundSelector):
                msg = f"Selector has compounds without a combinator at position {index}"
                raise SerializationValidationError(msg)
        self.generic_visit(node)

    def visit_CompoundSelector(self, node: CompoundSelector) -> None:
        if not node.components:
            msg = "CompoundSelector must contain at least one simple selector"
            raise SerializationValidationError(msg)
        for index, component in enumerate(node.components):
            if index > 0 and isinstance(component, (TypeSelector, UniversalSelector)):
                msg = "Type and universal selectors must come first in a CompoundSelector"
                raise SerializationValidationError(msg)
        self.generic_visit(node)

    def visit_Declaration(self, node: Declaration) -> None:
        if not node.name:
            msg = "Declaration must have a property name"
            raise SerializationValidationError(msg)


class CssSerializer(ASTVisitor):
    """Converts AST back to a CSS string.

    Each serialize() call builds its output locally; the only instance
    state is the depth guard, which is balanced on return.

    Usage:
        >>> from scopecss.syntax import parse, CssSerializer
        >>> sheet = parse(".a>.b{color:red}")
        >>> CssSerializer().serialize(sheet)
        '.a > .b { color: red; }'
    """

    def serialize(self, node: ASTNode, *, validate: bool = False) -> str:
        """Serialize any AST node to CSS text.

        Args:
            node: AST node (StyleSheet, rule, block, selector, or simple selector)
            validate: If True, validate selector structure before serialization
                     (default: False)

        Returns:
            CSS source text

        Raises:
            SerializationValidationError: If validate=True and AST is invalid
            DepthLimitExceededError: If the tree nests deeper than max_depth
        """
        if validate:
            _StructureValidator(max_depth=self._depth_guard.max_depth).visit(node)

        output: list[str] = []
        self._serialize_node(node, output)
        return "".join(output)

    def _serialize_node(self, node: ASTNode, output: list[str]) -> None:  # noqa: PLR0912
        """Dispatch on node type."""
        match node:
            case StyleSheet():
                self._serialize_stylesheet(node, output)
            case StyleRule():
                self._serialize_style_rule(node, output)
            case AtRule():
                self._serialize_at_rule(node, output)
            case KeyframeRule():
                output.append(node.selector)
                output.append(" ")
                self._serialize_declaration_block(node.block, output)
            case RuleBlock():
                self._serialize_rule_block(node, output)
            case DeclarationBlock():
                self._serialize_declaration_block(node, output)
            case Declaration():
                self._serialize_declaration(node, output)
            case RawBlock():
                output.append("{")
                output.append(node.text)
                output.append("}")
            case SelectorList():
                self._serialize_selector_list(node, output)
            case Selector():
                self._serialize_selector(node, output)
            case Combinator():
                output.append(self._combinator_text(node.kind, leading=False))
            case CompoundSelector():
                self._serialize_compound(node, output)
            case SourceLocation():
                output.append(f"{node.line}:{node.column}")
            case _:
                self._serialize_simple(node, output)

    # ------------------------------------------------------------------
    # Stylesheet structure
    # ------------------------------------------------------------------

    def _serialize_stylesheet(self, node: StyleSheet, output: list[str]) -> None:
        """Serialize top-level rules, one per line."""
        for i, rule in enumerate(node.rules):
            if i > 0:
                output.append("\n")
            self._serialize_node(rule, output)

    def _serialize_style_rule(self, node: StyleRule, output: list[str]) -> None:
        self._serialize_selector_list(node.prelude, output)
        output.append(" ")
        self._serialize_declaration_block(node.block, output)

    def _serialize_at_rule(self, node: AtRule, output: list[str]) -> None:
        """Serialize at-rule: @name prelude { ... } or @name prelude;"""
        output.append("@")
        output.append(node.name)
        if node.prelude:
            output.append(" ")
            output.append(node.prelude)
        if node.block is None:
            output.append(";")
            return
        output.append(" ")
        self._serialize_node(node.block, output)

    def _serialize_rule_block(self, node: RuleBlock, output: list[str]) -> None:
        if not node.rules:
            output.append("{}")
            return
        with self._depth_guard:
            output.append("{ ")
            for i, rule in enumerate(node.rules):
                if i > 0:
                    output.append(" ")
                self._serialize_node(rule, output)
            output.append(" }")

    def _serialize_declaration_block(self, node: DeclarationBlock, output: list[str]) -> None:
        if not node.children:
            output.append("{}")
            return
        with self._depth_guard:
            output.append("{ ")
            for i, child in enumerate(node.children):
                if i > 0:
                    output.append(" ")
                self._serialize_node(child, output)
            output.append(" }")

    def _serialize_declaration(self, node: Declaration, output: list[str]) -> None:
        output.append(node.name)
        output.append(": ")
        output.append(node.value)
        if node.important:
            output.append(" !important")
        output.append(";")

    # ------------------------------------------------------------------
    # Selectors
    # ------------------------------------------------------------------

    def _serialize_selector_list(self, node: SelectorList, output: list[str]) -> None:
        """Serialize selectors separated by ", "."""
        for i, selector in enumerate(node.selectors):
            if i > 0:
                output.append(", ")
            self._serialize_selector(selector, output)

    @staticmethod
    def _combinator_text(kind: CombinatorKind, *, leading: bool) -> str:
        """Combinator text: descendant is one space, others are padded.

        A leading combinator (relative selector) has no space before it.
        """
        if kind is CombinatorKind.DESCENDANT:
            return " "
        if leading:
            return f"{kind} "
        return f" {kind} "

    def _serialize_selector(self, node: Selector, output: list[str]) -> None:
        for i, child in enumerate(node.children):
            match child:
                case Combinator(kind=kind):
                    if i == 0 and kind is CombinatorKind.DESCENDANT:
                        # Leading descendant combinator has no textual form
                        continue
                    output.append(self._combinator_text(kind, leading=i == 0))
                case CompoundSelector():
                    self._serialize_compound(child, output)

    def _serialize_compound(self, node: CompoundSelector, output: list[str]) -> None:
        for component in node.components:
            self._serialize_simple(component, output)

    @staticmethod
    def _namespace_prefix(namespace: str | None) -> str:
        return "" if namespace is None else f"{namespace}|"

    def _serialize_simple(self, node: ASTNode, output: list[str]) -> None:
        """Serialize a simple selector."""
        match node:
            case TypeSelector(name=name, namespace=namespace):
                output.append(self._namespace_prefix(namespace))
                output.append(name)
            case UniversalSelector(namespace=namespace):
                output.append(self._namespace_prefix(namespace))
                output.append("*")
            case IdSelector(name=name):
                output.append("#")
                output.append(name)
            case ClassSelector(name=name):
                output.append(".")
                output.append(name)
            case AttributeSelector():
                self._serialize_attribute(node, output)
            case PseudoClassSelector():
                output.append(":")
                self._serialize_pseudo(node.name, node.argument, node.selectors, output)
            case PseudoElementSelector():
                output.append(":" if node.legacy else "::")
                self._serialize_pseudo(node.name, node.argument, node.selectors, output)
            case _:
                msg = f"Cannot serialize node of type {type(node).__name__}"
                raise TypeError(msg)

    def _serialize_attribute(self, node: AttributeSelector, output: list[str]) -> None:
        """Serialize attribute selector, keeping the value's original quoting."""
        output.append("[")
        output.append(self._namespace_prefix(node.namespace))
        output.append(node.name)
        if node.matcher is not None and node.value is not None:
            output.append(node.matcher)
            if node.quote is not None:
                output.append(f"{node.quote}{node.value}{node.quote}")
            else:
                output.append(node.value)
        if node.modifier is not None:
            output.append(" ")
            output.append(node.modifier)
        output.append("]")

    def _serialize_pseudo(
        self,
        name: str,
        argument: str | None,
        selectors: SelectorList | None,
        output: list[str],
    ) -> None:
        """Serialize pseudo name and argument: name, name(arg), name(S), name(An+B of S)."""
        output.append(name)
        if argument is None and selectors is None:
            return
        output.append("(")
        if argument is not None:
            output.append(argument)
            if selectors is not None:
                output.append(" of ")
        if selectors is not None:
            with self._depth_guard:
                self._serialize_selector_list(selectors, output)
        output.append(")")


def serialize(node: ASTNode, *, validate: bool = False, max_depth: int | None = None) -> str:
    """Serialize an AST node to CSS text.

    Convenience function for CssSerializer.serialize().

    Args:
        node: Any AST node; a StyleSheet yields a full stylesheet, a
              Selector yields just that selector
        validate: If True, validate selector structure before serialization
                 (default: False)
        max_depth: Maximum nesting depth (default: MAX_DEPTH)

    Returns:
        CSS source text

    Raises:
        SerializationValidationError: If validate=True and AST is invalid

    Example:
        >>> from scopecss.syntax import parse, serialize
        >>> sheet = parse(".a, .b { color: red; }")
        >>> serialize(sheet.rules[0].prelude.selectors[1])
        '.b'
    """
    serializer = CssSerializer(max_depth=max_depth)
    return serializer.serialize(node, validate=validate)
