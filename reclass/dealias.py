"""Body de-aliaser and nested function recurser.

Compiled output often captures ``this`` (or ``this.props`` /
``this.constructor``) in a local before using it::

    var _this = this;
    var props = this.props;
    _this.x = props.x;

De-aliasing drops those declarations and rewrites member accesses through
the alias back to the canonical receiver::

    this.x = this.props.x;
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from . import constants
from .estree import (
    Identifier,
    MemberExpression,
    Node,
    NodeType,
    ThisExpression,
    VariableDeclaration,
    is_identifier,
    is_this_member,
)
from .scope import is_shadowed
from .walk import WalkBase, transform

logger = logging.getLogger(__name__)


class AliasTarget(str, Enum):
    THIS = "this"
    PROPS = "this.props"
    CONSTRUCTOR = "this.constructor"


@dataclass
class AliasMap:
    """Local names standing in for a canonical receiver, one per target."""

    names: dict[AliasTarget, str] = field(default_factory=dict)

    def record(self, target: AliasTarget, name: str) -> bool:
        # First declaration wins
        if target in self.names:
            return False
        self.names[target] = name
        return True

    def target_of(self, name: str) -> AliasTarget | None:
        return next(
            (target for target, alias in self.names.items() if alias == name), None
        )

    def is_recorded(self, target: AliasTarget | None, name: str) -> bool:
        return target is not None and self.names.get(target) == name

    def __bool__(self) -> bool:
        return bool(self.names)


def alias_target(init: Node | None) -> AliasTarget | None:
    """Which canonical receiver, if any, an initializer denotes."""
    if isinstance(init, ThisExpression):
        return AliasTarget.THIS
    if is_this_member(init, constants.PROPS_PROPERTY):
        return AliasTarget.PROPS
    if is_this_member(init, constants.CONSTRUCTOR_PROPERTY):
        return AliasTarget.CONSTRUCTOR
    return None


def collect_aliases(statements: list[Node]) -> AliasMap:
    """Scan top-level ``var`` declarations for ``this``-style aliases."""
    aliases = AliasMap()
    for statement in statements:
        if not isinstance(statement, VariableDeclaration):
            continue
        for declarator in statement.declarations:
            target = alias_target(declarator.init)
            if target is not None and is_identifier(declarator.id):
                aliases.record(target, declarator.id.name)
    return aliases


def remove_alias_declarations(statements: list[Node], aliases: AliasMap) -> list[Node]:
    """Drop recorded alias declarators, and declarations left empty by that."""
    if not aliases:
        return list(statements)
    cleaned: list[Node] = []
    for statement in statements:
        if not isinstance(statement, VariableDeclaration):
            cleaned.append(statement)
            continue
        kept = [
            d
            for d in statement.declarations
            if not (
                is_identifier(d.id)
                and aliases.is_recorded(alias_target(d.init), d.id.name)
            )
        ]
        if kept:
            cleaned.append(statement.model_copy(update={"declarations": kept}))
    return cleaned


def _this_props() -> MemberExpression:
    return MemberExpression(
        object=ThisExpression(), property=Identifier(name=constants.PROPS_PROPERTY)
    )


def rewrite_alias_uses(function: Node, aliases: AliasMap, base: WalkBase) -> Node:
    """Point member accesses through an alias back at the canonical receiver.

    Independently of any alias, a literal ``this.constructor`` collapses to
    ``this``.
    """

    def _rewrite_member(node: MemberExpression, ancestors: list[Node]) -> Node | None:
        receiver = node.object
        if isinstance(receiver, Identifier) and not is_shadowed(
            ancestors, receiver.name
        ):
            target = aliases.target_of(receiver.name)
            if target is AliasTarget.PROPS:
                node.object = _this_props()
            elif target is not None:
                node.object = ThisExpression()
        if is_this_member(node, constants.CONSTRUCTOR_PROPERTY):
            return ThisExpression()
        return None

    return transform(function, {NodeType.MEMBER_EXPRESSION: _rewrite_member}, base)


def dealias_function(function: Node, base: WalkBase) -> Node:
    """De-alias one function's body; returns the rewritten function."""
    statements = function.body.body
    aliases = collect_aliases(statements)
    if aliases:
        logger.debug("De-aliasing %s", dict(aliases.names))
    body = function.body.model_copy(
        update={"body": remove_alias_declarations(statements, aliases)}
    )
    return rewrite_alias_uses(
        function.model_copy(update={"body": body}), aliases, base
    )


def dealias_nested_functions(function: Node, base: WalkBase) -> Node:
    """De-alias every function expression nested anywhere inside *function*."""

    def _visit(node: Node, ancestors: list[Node]) -> Node | None:
        if len(ancestors) == 1:
            return None
        return dealias_function(node, base)

    return transform(function, {NodeType.FUNCTION_EXPRESSION: _visit}, base)


def dealias_recursively(function: Node, base: WalkBase) -> Node:
    return dealias_nested_functions(dealias_function(function, base), base)
