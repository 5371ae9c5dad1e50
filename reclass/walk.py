"""Tree walking with ancestor tracking, parameterized by a base table.

A *base* maps every node type to the names of the fields that hold child
nodes, in source order.  Callers pass it through untouched; only this module
reads it.
"""

from __future__ import annotations

from typing import Callable, Iterator, Mapping, Optional

from .estree import Node, NodeType

WalkBase = Mapping[NodeType, tuple[str, ...]]

Visitor = Callable[[Node, list[Node]], None]
Transformer = Callable[[Node, list[Node]], Optional[Node]]

DEFAULT_BASE: dict[NodeType, tuple[str, ...]] = {
    NodeType.PROGRAM: ("body",),
    NodeType.EXPRESSION_STATEMENT: ("expression",),
    NodeType.BLOCK_STATEMENT: ("body",),
    NodeType.EMPTY_STATEMENT: (),
    NodeType.VARIABLE_DECLARATION: ("declarations",),
    NodeType.VARIABLE_DECLARATOR: ("id", "init"),
    NodeType.FUNCTION_DECLARATION: ("id", "params", "body"),
    NodeType.RETURN_STATEMENT: ("argument",),
    NodeType.IF_STATEMENT: ("test", "consequent", "alternate"),
    NodeType.FOR_STATEMENT: ("init", "test", "update", "body"),
    NodeType.FOR_IN_STATEMENT: ("left", "right", "body"),
    NodeType.FOR_OF_STATEMENT: ("left", "right", "body"),
    NodeType.WHILE_STATEMENT: ("test", "body"),
    NodeType.DO_WHILE_STATEMENT: ("body", "test"),
    NodeType.BREAK_STATEMENT: (),
    NodeType.CONTINUE_STATEMENT: (),
    NodeType.THROW_STATEMENT: ("argument",),
    NodeType.TRY_STATEMENT: ("block", "handler", "finalizer"),
    NodeType.CATCH_CLAUSE: ("param", "body"),
    NodeType.LABELED_STATEMENT: ("body",),
    NodeType.CLASS_DECLARATION: ("id", "super_class", "body"),
    NodeType.CLASS_EXPRESSION: ("id", "super_class", "body"),
    NodeType.CLASS_BODY: ("body",),
    NodeType.METHOD_DEFINITION: ("key", "value"),
    NodeType.IDENTIFIER: (),
    NodeType.LITERAL: (),
    NodeType.THIS_EXPRESSION: (),
    NodeType.SUPER: (),
    NodeType.ARRAY_EXPRESSION: ("elements",),
    NodeType.OBJECT_EXPRESSION: ("properties",),
    NodeType.PROPERTY: ("key", "value"),
    NodeType.FUNCTION_EXPRESSION: ("id", "params", "body"),
    NodeType.ARROW_FUNCTION_EXPRESSION: ("params", "body"),
    NodeType.UNARY_EXPRESSION: ("argument",),
    NodeType.UPDATE_EXPRESSION: ("argument",),
    NodeType.BINARY_EXPRESSION: ("left", "right"),
    NodeType.LOGICAL_EXPRESSION: ("left", "right"),
    NodeType.ASSIGNMENT_EXPRESSION: ("left", "right"),
    NodeType.CONDITIONAL_EXPRESSION: ("test", "consequent", "alternate"),
    NodeType.CALL_EXPRESSION: ("callee", "arguments"),
    NodeType.NEW_EXPRESSION: ("callee", "arguments"),
    NodeType.MEMBER_EXPRESSION: ("object", "property"),
    NodeType.SEQUENCE_EXPRESSION: ("expressions",),
    NodeType.SPREAD_ELEMENT: ("argument",),
    NodeType.PARENTHESIZED_EXPRESSION: ("expression",),
    NodeType.REST_ELEMENT: ("argument",),
    NodeType.ASSIGNMENT_PATTERN: ("left", "right"),
    NodeType.OPAQUE: (),
}

# Name slots that are only references when the owning node is ``computed``
_KEY_FIELDS: dict[NodeType, str] = {
    NodeType.MEMBER_EXPRESSION: "property",
    NodeType.PROPERTY: "key",
    NodeType.METHOD_DEFINITION: "key",
}


def child_fields(node: Node, base: WalkBase) -> tuple[str, ...]:
    fields = base.get(node.type, ())
    key_field = _KEY_FIELDS.get(node.type)
    if key_field and not getattr(node, "computed", False):
        return tuple(f for f in fields if f != key_field)
    return fields


def iter_children(node: Node, base: WalkBase) -> Iterator[Node]:
    for field_name in child_fields(node, base):
        value = getattr(node, field_name, None)
        if isinstance(value, list):
            yield from (item for item in value if isinstance(item, Node))
        elif isinstance(value, Node):
            yield value


def ancestor(
    node: Node,
    visitors: Mapping[NodeType, Visitor],
    base: WalkBase | None = None,
) -> None:
    """Post-order walk calling ``visitors[node.type](node, ancestors)``.

    ``ancestors`` runs from the walk root down to and including ``node``.
    """
    base = DEFAULT_BASE if base is None else base

    def _visit(current: Node, ancestors: list[Node]) -> None:
        ancestors.append(current)
        for child in iter_children(current, base):
            _visit(child, ancestors)
        visitor = visitors.get(current.type)
        if visitor is not None:
            visitor(current, list(ancestors))
        ancestors.pop()

    _visit(node, [])


def transform(
    node: Node,
    visitors: Mapping[NodeType, Transformer],
    base: WalkBase | None = None,
) -> Node:
    """Post-order rewriting walk.

    A visitor may return a replacement node, which is written back into the
    parent's slot; returning ``None`` keeps the node.  Children are rewritten
    in place, so callers hand in trees they own.  Returns the (possibly
    replaced) root.
    """
    base = DEFAULT_BASE if base is None else base

    def _visit(current: Node, ancestors: list[Node]) -> Node:
        ancestors.append(current)
        for field_name in child_fields(current, base):
            value = getattr(current, field_name, None)
            if isinstance(value, list):
                setattr(
                    current,
                    field_name,
                    [
                        _visit(item, ancestors) if isinstance(item, Node) else item
                        for item in value
                    ],
                )
            elif isinstance(value, Node):
                setattr(current, field_name, _visit(value, ancestors))
        visitor = visitors.get(current.type)
        replacement = visitor(current, list(ancestors)) if visitor else None
        ancestors.pop()
        return current if replacement is None else replacement

    return _visit(node, [])


def find_all(
    node: Node, node_type: NodeType, base: WalkBase | None = None
) -> list[Node]:
    """Collect every node of *node_type* under (and including) *node*."""
    found: list[Node] = []
    ancestor(node, {node_type: lambda n, _ancestors: found.append(n)}, base)
    return found
