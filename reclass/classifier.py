"""Shape classifier: recognizes compiled-class factory declarations."""

from __future__ import annotations

from enum import Enum

from .estree import (
    CallExpression,
    FunctionExpression,
    NewExpression,
    Node,
    ParenthesizedExpression,
    VariableDeclaration,
    VariableDeclarator,
    unwrap_parens,
)


class ShapeKind(str, Enum):
    """The two recognized compiled-class idioms."""

    # var Foo = (function () { ...; return Foo; })();
    DIRECT_FACTORY = "DirectFactory"
    # var foo = new ((function () { ...; return Foo; })(Base))();
    WRAPPED_FACTORY = "WrappedFactory"


def find_class_type(node: Node | None, parent: Node | None) -> ShapeKind | None:
    """Classify *node* (a declarator) inside *parent* (its declaration).

    Pure; returns ``None`` when neither idiom matches.
    """
    if not isinstance(parent, VariableDeclaration):
        return None
    if not isinstance(node, VariableDeclarator):
        return None

    init = unwrap_parens(node.init)
    if isinstance(init, CallExpression) and isinstance(
        unwrap_parens(init.callee), FunctionExpression
    ):
        return ShapeKind.DIRECT_FACTORY

    if isinstance(init, NewExpression) and isinstance(
        init.callee, ParenthesizedExpression
    ):
        return ShapeKind.WRAPPED_FACTORY

    return None
