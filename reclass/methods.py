"""Method extractor: prototype and constructor assignments become methods."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import constants
from .context import ParsingContext
from .dealias import dealias_recursively
from .estree import (
    AssignmentExpression,
    ExpressionStatement,
    FunctionExpression,
    MemberExpression,
    Node,
    is_identifier,
)
from .walk import WalkBase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    is_static: bool
    function: FunctionExpression


def _owner_is_static(owner: Node, context: ParsingContext) -> bool | None:
    """``True`` for ``Ctor``, ``False`` for the prototype, ``None`` otherwise."""
    constructor_name = context.constructor_name
    if context.prototype_alias is not None and is_identifier(
        owner, context.prototype_alias
    ):
        return False
    if constructor_name is not None and is_identifier(owner, constructor_name):
        return True
    # Ctor.prototype.name = function () {}
    if (
        constructor_name is not None
        and isinstance(owner, MemberExpression)
        and not owner.computed
        and is_identifier(owner.object, constructor_name)
        and is_identifier(owner.property, constants.PROTOTYPE_PROPERTY)
    ):
        return False
    return None


def match_method_assignment(
    statement: Node, context: ParsingContext
) -> MethodDescriptor | None:
    """Match ``Owner.name = function () {...};``."""
    if not isinstance(statement, ExpressionStatement):
        return None
    assignment = statement.expression
    if not (
        isinstance(assignment, AssignmentExpression)
        and assignment.operator == "="
        and isinstance(assignment.left, MemberExpression)
        and isinstance(assignment.right, FunctionExpression)
    ):
        return None
    target = assignment.left
    if target.computed or not is_identifier(target.property):
        return None
    is_static = _owner_is_static(target.object, context)
    if is_static is None:
        return None
    return MethodDescriptor(
        name=target.property.name, is_static=is_static, function=assignment.right
    )


def extract_methods(context: ParsingContext, base: WalkBase) -> list[MethodDescriptor]:
    """Methods in source order, each with a de-aliased, anonymous function."""
    methods: list[MethodDescriptor] = []
    for index, statement in enumerate(context.statements):
        if index == context.constructor_index:
            continue
        descriptor = match_method_assignment(statement, context)
        if descriptor is None:
            continue
        function = descriptor.function.model_copy(update={"id": None})
        methods.append(
            MethodDescriptor(
                name=descriptor.name,
                is_static=descriptor.is_static,
                function=dealias_recursively(function, base),
            )
        )
    logger.debug("Extracted %d methods from %s", len(methods), context.name)
    return methods
