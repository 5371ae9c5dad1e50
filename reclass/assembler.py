"""Class assembler: builds the class and puts it where the factory was."""

from __future__ import annotations

from . import constants
from .classifier import ShapeKind
from .constructor import reconstruct_constructor
from .context import ParsingContext
from .estree import (
    ClassBody,
    ClassDeclaration,
    ClassExpression,
    FunctionExpression,
    Identifier,
    MethodDefinition,
    NewExpression,
    Node,
    ReturnStatement,
    VariableDeclaration,
    unwrap_parens,
)
from .methods import extract_methods
from .walk import WalkBase


def _has_real_constructor(context: ParsingContext) -> bool:
    # A body that opens with ``return`` is a factory helper, not a constructor
    body = context.constructor.body.body
    return not (body and isinstance(body[0], ReturnStatement))


def create_constructor_method(context: ParsingContext, base: WalkBase) -> MethodDefinition:
    constructor = context.constructor
    function = FunctionExpression(
        params=list(constructor.params),
        body=constructor.body,
        is_async=constructor.is_async,
        generator=constructor.generator,
    )
    return MethodDefinition(
        key=Identifier(name=constants.CONSTRUCTOR_METHOD_NAME),
        value=reconstruct_constructor(function, context.super_class, base),
        kind=constants.CONSTRUCTOR_KIND,
    )


def build_class_body(context: ParsingContext, base: WalkBase) -> ClassBody:
    members: list[Node] = []
    if _has_real_constructor(context):
        members.append(create_constructor_method(context, base))
    members.extend(
        MethodDefinition(
            key=Identifier(name=method.name),
            value=method.function,
            kind=constants.METHOD_KIND,
            static=method.is_static,
        )
        for method in extract_methods(context, base)
    )
    return ClassBody(body=members)


def assemble_class_declaration(context: ParsingContext, base: WalkBase) -> ClassDeclaration:
    return ClassDeclaration(
        id=Identifier(name=context.name),
        super_class=context.super_class,
        body=build_class_body(context, base),
    )


def assemble_wrapped_declaration(
    context: ParsingContext, base: WalkBase
) -> VariableDeclaration:
    """Swap the ``new`` callee for a class; siblings keep their place."""
    declarator = context.declarator
    new_expression = unwrap_parens(declarator.init)
    cls = ClassExpression(
        id=Identifier(name=context.name),
        super_class=context.super_class,
        body=build_class_body(context, base),
    )
    rewritten = declarator.model_copy(
        update={"init": NewExpression(callee=cls, arguments=new_expression.arguments)}
    )
    declarations = list(context.declaration.declarations)
    declarations[context.declarator_index] = rewritten
    return context.declaration.model_copy(update={"declarations": declarations})


def assemble(context: ParsingContext, base: WalkBase) -> Node:
    if context.kind is ShapeKind.WRAPPED_FACTORY:
        return assemble_wrapped_declaration(context, base)
    return assemble_class_declaration(context, base)
