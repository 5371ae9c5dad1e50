"""Minimal lexical-scope checks for name-based renaming.

Renaming is still driven by name matching over a whole sub-tree; the only
scope rule applied is that a nested function which re-declares the name (as
a parameter, its own name, or a top-level ``var``/function) shadows it for
everything inside that function.
"""

from __future__ import annotations

from .estree import (
    FUNCTION_NODES,
    ArrowFunctionExpression,
    AssignmentPattern,
    BlockStatement,
    FunctionDeclaration,
    Node,
    RestElement,
    VariableDeclaration,
    is_identifier,
)


def _binds(pattern: Node | None, name: str) -> bool:
    if isinstance(pattern, RestElement):
        return _binds(pattern.argument, name)
    if isinstance(pattern, AssignmentPattern):
        return _binds(pattern.left, name)
    return is_identifier(pattern, name)


def declares_name(function: Node, name: str) -> bool:
    """Does *function* introduce its own binding for *name*?"""
    if not isinstance(function, FUNCTION_NODES):
        return False
    if any(_binds(param, name) for param in function.params):
        return True
    if not isinstance(function, ArrowFunctionExpression) and is_identifier(
        function.id, name
    ):
        return True
    body = function.body
    if not isinstance(body, BlockStatement):
        return False
    for statement in body.body:
        if isinstance(statement, VariableDeclaration) and any(
            is_identifier(d.id, name) for d in statement.declarations
        ):
            return True
        if isinstance(statement, FunctionDeclaration) and is_identifier(
            statement.id, name
        ):
            return True
    return False


def is_shadowed(ancestors: list[Node], name: str) -> bool:
    """True if a function strictly below the walk root re-declares *name*."""
    return any(declares_name(node, name) for node in ancestors[1:])
