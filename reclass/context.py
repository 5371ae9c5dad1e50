"""Context builder: pulls the named parts out of a matched factory."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import constants
from .classifier import ShapeKind
from .estree import (
    CallExpression,
    ExpressionStatement,
    FunctionDeclaration,
    FunctionExpression,
    MemberExpression,
    NewExpression,
    Node,
    VariableDeclaration,
    VariableDeclarator,
    is_identifier,
    unwrap_parens,
)
from .printer import same_source

logger = logging.getLogger(__name__)


class ContextExtractionError(Exception):
    """The factory body does not have the expected statement layout."""

    pass


class MissingIdentifierError(ContextExtractionError):
    """The declarator has no plain identifier to name the class after."""

    pass


@dataclass(frozen=True)
class ParsingContext:
    """Everything downstream components need from one matched declarator.

    ``declaration`` is a private deep copy of the caller's declaration, so
    the rewrite can take its parts apart freely.
    """

    kind: ShapeKind
    name: str
    super_class: Node | None
    prototype_alias: str | None
    constructor: FunctionDeclaration
    constructor_index: int
    statements: tuple[Node, ...]
    declaration: VariableDeclaration
    declarator_index: int

    @property
    def constructor_name(self) -> str | None:
        ctor_id = self.constructor.id
        return ctor_id.name if is_identifier(ctor_id) else None

    @property
    def declarator(self) -> VariableDeclarator:
        return self.declaration.declarations[self.declarator_index]


def build_parsing_context(
    node: Node, parent: Node, kind: ShapeKind
) -> ParsingContext | None:
    """Build the context for a classified declarator, or ``None`` on failure.

    Never raises: every extraction problem degrades to "no match".
    """
    try:
        return _extract_context(node, parent, kind)
    except MissingIdentifierError as exc:
        logger.debug("Skipping %s candidate: %s", kind.value, exc)
        return None
    except ContextExtractionError as exc:
        logger.debug("No class layout in %s candidate: %s", kind.value, exc)
        return None
    except (AttributeError, IndexError, TypeError, ValueError) as exc:
        logger.warning("Failed to build parsing context: %s", exc)
        return None


def _extract_context(node: Node, parent: Node, kind: ShapeKind) -> ParsingContext:
    declarator_index = _declarator_index(parent, node)
    declaration = parent.model_copy(deep=True)
    declarator = declaration.declarations[declarator_index]

    if not is_identifier(declarator.id):
        raise MissingIdentifierError("declarator is not a plain identifier")
    if kind is ShapeKind.DIRECT_FACTORY and len(declaration.declarations) != 1:
        raise ContextExtractionError("declaration has sibling declarators")

    factory, outer_arguments = _locate_factory(declarator, kind)
    statements = tuple(factory.body.body)
    constructor_index = _constructor_index(statements)
    constructor = statements[constructor_index]

    return ParsingContext(
        kind=kind,
        name=declarator.id.name,
        super_class=_find_super_class(
            statements, constructor_index, constructor, outer_arguments
        ),
        prototype_alias=_find_prototype_alias(statements, constructor_index, constructor),
        constructor=constructor,
        constructor_index=constructor_index,
        statements=statements,
        declaration=declaration,
        declarator_index=declarator_index,
    )


def _declarator_index(parent: VariableDeclaration, node: Node) -> int:
    declarations = parent.declarations
    for i, declarator in enumerate(declarations):
        if declarator is node:
            return i
    for i, declarator in enumerate(declarations):
        if declarator == node:
            return i
    raise ContextExtractionError("candidate is not a declarator of its parent")


def _locate_factory(
    declarator: VariableDeclarator, kind: ShapeKind
) -> tuple[FunctionExpression, list[Node]]:
    """Return the factory function and the arguments it is invoked with."""
    init = unwrap_parens(declarator.init)
    if kind is ShapeKind.WRAPPED_FACTORY:
        if not isinstance(init, NewExpression):
            raise ContextExtractionError("initializer is not a new expression")
        init = unwrap_parens(init.callee)

    if not isinstance(init, CallExpression):
        raise ContextExtractionError("factory is not invoked")
    factory = unwrap_parens(init.callee)
    if not isinstance(factory, FunctionExpression):
        raise ContextExtractionError("factory is not a function expression")
    return factory, init.arguments


def _constructor_index(statements: tuple[Node, ...]) -> int:
    # Without an inheritance helper the constructor leads the factory body
    if statements and isinstance(statements[0], FunctionDeclaration):
        return 0
    if len(statements) > 1 and isinstance(statements[1], FunctionDeclaration):
        return 1
    raise ContextExtractionError("no constructor function declaration")


def _find_super_class(
    statements: tuple[Node, ...],
    constructor_index: int,
    constructor: FunctionDeclaration,
    outer_arguments: list[Node],
) -> Node | None:
    """Superclass from the ``helper(Ctor, Base)`` idiom, read off the outer call."""
    if constructor_index != 1 or constructor.id is None:
        return None
    first = statements[0]
    if not isinstance(first, ExpressionStatement):
        return None
    call = first.expression
    if not isinstance(call, CallExpression):
        return None
    if len(call.arguments) != constants.INHERITANCE_HELPER_ARITY:
        return None
    if not same_source(call.arguments[0], constructor.id):
        return None
    if not outer_arguments:
        logger.debug("Inheritance helper found but factory receives no superclass")
        return None
    return outer_arguments[0]


def _find_prototype_alias(
    statements: tuple[Node, ...],
    constructor_index: int,
    constructor: FunctionDeclaration,
) -> str | None:
    """Name bound by ``var _proto = Ctor.prototype`` right after the constructor."""
    index = constructor_index + 1
    if index >= len(statements):
        return None
    statement = statements[index]
    if not isinstance(statement, VariableDeclaration) or not statement.declarations:
        return None
    declarator = statement.declarations[0]
    init = declarator.init
    if not is_identifier(declarator.id):
        return None
    if not (
        isinstance(init, MemberExpression)
        and not init.computed
        and is_identifier(init.property, constants.PROTOTYPE_PROPERTY)
        and same_source(init.object, constructor.id)
    ):
        return None
    return declarator.id.name
