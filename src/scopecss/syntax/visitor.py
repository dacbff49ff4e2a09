"""Visitor pattern for AST traversal.

Enables tools to traverse and transform the CSS AST without modifying node classes.

NOTE: This module follows Python stdlib ast.NodeVisitor naming convention.
Methods are named visit_NodeName (PascalCase) rather than visit_node_name (snake_case),
matching the AST class names (visit_StyleRule, visit_ClassSelector, ...).
See: https://docs.python.org/3/library/ast.html#ast.NodeVisitor

Type Parameters:
- ASTVisitor[T] is generic over return type T
- ASTVisitor (no type param) defaults to T=ASTNode
- ASTTransformer uses extended return type: ASTNode | None | list[ASTNode]

Python 3.13+.
"""

from collections.abc import Callable
from dataclasses import Field, fields, replace
from typing import ClassVar

from scopecss.constants import MAX_DEPTH
from scopecss.core.depth_guard import DepthGuard

from .ast import (
    ASTNode,
    AtRule,
    CompoundSelector,
    DeclarationBlock,
    KeyframeRule,
    PseudoClassSelector,
    PseudoElementSelector,
    RuleBlock,
    Selector,
    SelectorList,
    StyleRule,
    StyleSheet,
)

__all__ = ["ASTTransformer", "ASTVisitor"]

# Type aliases for visitor return types
type VisitorResult = ASTNode
type TransformerResult = ASTNode | None | list[ASTNode]


class ASTVisitor[T = ASTNode]:
    """Base visitor for traversing the CSS AST.

    Follows stdlib ast.NodeVisitor convention: generic_visit() automatically
    traverses all child nodes. Override visit_NodeType methods to add custom
    behavior.

    Uses class-level dispatch table for performance:
    - Dispatch table built once per class definition via __init_subclass__
    - Avoids per-instance cache warmup overhead
    - Falls back to instance-level cache for dynamically added methods

    Use this to create:
    - Selector statistics (counts, specificity reports)
    - Linters
    - Serializers

    Example:
        >>> class CountClassesVisitor(ASTVisitor):
        ...     def __init__(self):
        ...         super().__init__()
        ...         self.count = 0
        ...
        ...     def visit_ClassSelector(self, node: ClassSelector) -> ASTNode:
        ...         self.count += 1
        ...         return self.generic_visit(node)
        ...
        >>> visitor = CountClassesVisitor()
        >>> visitor.visit(stylesheet)
        >>> print(visitor.count)
    """

    __slots__ = ("_depth_guard", "_instance_dispatch_cache")

    # Class-level dispatch table (method names only, not bound methods)
    # Built once per class definition via __init_subclass__
    _class_visit_methods: ClassVar[dict[str, str]] = {}

    # Class-level cache for dataclass fields per node type
    _fields_cache: ClassVar[dict[type[ASTNode], tuple[Field[object], ...]]] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Build class-level dispatch table when subclass is defined."""
        super().__init_subclass__(**kwargs)
        cls._class_visit_methods = {}
        for name in dir(cls):
            if name.startswith("visit_") and name != "visit":
                # "visit_StyleRule" -> "StyleRule"
                node_type_name = name[6:]
                cls._class_visit_methods[node_type_name] = name

    def __init__(self, *, max_depth: int | None = None) -> None:
        """Initialize visitor with depth guard and dispatch cache.

        Subclasses MUST call super().__init__() to ensure depth protection
        is properly initialized. Failure to do so will raise AttributeError
        on first visit() call.

        Args:
            max_depth: Maximum traversal depth (default: MAX_DEPTH from constants).
                      Controls depth protection against deeply nested ASTs.
        """
        effective_max_depth = max_depth if max_depth is not None else MAX_DEPTH
        self._depth_guard = DepthGuard(max_depth=effective_max_depth)
        # Instance cache for bound method references (faster than getattr each time)
        self._instance_dispatch_cache: dict[type[ASTNode], Callable[[ASTNode], T]] = {}

    def visit(self, node: ASTNode) -> T:
        """Visit a node (dispatcher with class-level + instance-level caching).

        Args:
            node: AST node to visit

        Returns:
            Result of visiting the node
        """
        node_type = type(node)

        if node_type in self._instance_dispatch_cache:
            return self._instance_dispatch_cache[node_type](node)

        node_type_name = node_type.__name__
        if node_type_name in self._class_visit_methods:
            method_name = self._class_visit_methods[node_type_name]
            method = getattr(self, method_name)
        else:
            method = self.generic_visit

        self._instance_dispatch_cache[node_type] = method
        return method(node)  # type: ignore[no-any-return]  # getattr returns Any

    def _get_node_fields(self, node_type: type[ASTNode]) -> tuple[Field[object], ...]:
        """Get cached dataclass fields for a node type.

        Thread-safe: dict operations are atomic in CPython.
        """
        if node_type not in ASTVisitor._fields_cache:
            ASTVisitor._fields_cache[node_type] = fields(node_type)
        return ASTVisitor._fields_cache[node_type]

    def generic_visit(self, node: ASTNode) -> T:
        """Default visitor (traverses children with depth protection).

        Depth Protection:
            Uses DepthGuard to prevent stack overflow from deeply nested or
            adversarial ASTs. Raises DepthLimitExceededError if MAX_DEPTH (100)
            is exceeded. This protects against programmatically constructed
            ASTs that bypass parser limits.

        Args:
            node: AST node to visit

        Returns:
            The node itself (identity)

        Raises:
            DepthLimitExceededError: If traversal depth exceeds MAX_DEPTH
        """
        with self._depth_guard:
            for field in self._get_node_fields(type(node)):
                value = getattr(node, field.name)

                # Skip None values and non-node fields (str, int, bool, enums)
                if value is None or isinstance(value, (str, int, float, bool)):
                    continue

                if isinstance(value, tuple):
                    for item in value:
                        if hasattr(item, "__dataclass_fields__"):
                            self.visit(item)
                elif hasattr(value, "__dataclass_fields__"):
                    self.visit(value)

        return node  # type: ignore[return-value]  # T defaults to ASTNode


class ASTTransformer(ASTVisitor[TransformerResult]):
    """AST transformer producing new trees using Python 3.13+ features.

    Extends ASTVisitor to rebuild AST nodes. Each visit method can return:
    - The modified node (replaces original)
    - None (removes node from parent)
    - A list of nodes (replaces single node with multiple)

    Nodes are frozen, so transformation always yields a new tree and the
    input tree is left untouched.

    Example - Drop all @import rules:
        >>> class DropImportsTransformer(ASTTransformer):
        ...     def visit_AtRule(self, node: AtRule) -> AtRule | None:
        ...         if node.name.lower() == "import":
        ...             return None
        ...         return self.generic_visit(node)
        ...
        >>> cleaned = DropImportsTransformer().transform(stylesheet)

    Example - Rename a class everywhere:
        >>> class RenameClassTransformer(ASTTransformer):
        ...     def __init__(self, old: str, new: str):
        ...         super().__init__()
        ...         self.old, self.new = old, new
        ...
        ...     def visit_ClassSelector(self, node: ClassSelector) -> ClassSelector:
        ...         return ClassSelector(self.new) if node.name == self.old else node
        ...
        >>> renamed = RenameClassTransformer("btn", "button").transform(stylesheet)
    """

    def transform(self, node: ASTNode) -> TransformerResult:
        """Transform an AST node or tree.

        This is the main entry point for transformations.

        Args:
            node: AST node to transform

        Returns:
            Transformed node (may be different type, None, or list)
        """
        return self.visit(node)

    def generic_visit(self, node: ASTNode) -> TransformerResult:
        """Transform node children (default behavior with depth protection).

        Recursively transforms all child nodes. Uses dataclasses.replace()
        to create new immutable nodes (AST nodes are frozen).

        Args:
            node: AST node to transform

        Returns:
            New node with transformed children

        Raises:
            DepthLimitExceededError: If traversal depth exceeds MAX_DEPTH
        """
        with self._depth_guard:
            match node:
                case StyleSheet(rules=rules):
                    return replace(node, rules=self._transform_list(rules))
                case StyleRule(prelude=prelude, block=block):
                    return replace(node, prelude=self.visit(prelude), block=self.visit(block))
                case AtRule(block=block):
                    return replace(node, block=self.visit(block) if block else None)
                case KeyframeRule(block=block):
                    return replace(node, block=self.visit(block))
                case RuleBlock(rules=rules):
                    return replace(node, rules=self._transform_list(rules))
                case DeclarationBlock(children=children):
                    return replace(node, children=self._transform_list(children))
                case SelectorList(selectors=selectors):
                    return replace(node, selectors=self._transform_list(selectors))
                case Selector(children=children):
                    return replace(node, children=self._transform_list(children))
                case CompoundSelector(components=components):
                    return replace(node, components=self._transform_list(components))
                case PseudoClassSelector(selectors=selectors) | PseudoElementSelector(
                    selectors=selectors
                ):
                    return replace(
                        node,
                        selectors=self.visit(selectors) if selectors else None,
                    )
                case _:
                    # Leaf nodes: Declaration, RawBlock, Combinator, TypeSelector,
                    # UniversalSelector, IdSelector, ClassSelector,
                    # AttributeSelector, SourceLocation. Return as-is (immutable).
                    return node

    def _transform_list(self, nodes: tuple[ASTNode, ...]) -> tuple[ASTNode, ...]:
        """Transform a tuple of nodes.

        Handles node removal (None) and expansion (lists).

        Args:
            nodes: Tuple of AST nodes

        Returns:
            Transformed tuple (flattened, with None removed)
        """
        result: list[ASTNode] = []
        for node in nodes:
            transformed = self.visit(node)

            match transformed:
                case None:
                    continue
                case list():
                    result.extend(transformed)
                case _:
                    result.append(transformed)

        return tuple(result)
