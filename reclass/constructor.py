"""Constructor reconstructor: turns compiled super-call idioms into ``super()``.

Two shapes are recognized at the head of a derived constructor (checked in
this order)::

    // spread arguments
    function Bar() {
      var _this;
      for (var _len = arguments.length, args = new Array(_len), _key = 0; ...) { ... }
      _this = _Foo.call.apply(_Foo, [this].concat(args)) || this;
      ...
      return _this;
    }

    // regular
    function Bar(a, b) {
      var _this;
      _this = _Foo.call(this, a, b) || this;
      ...
      return _this;
    }

Both become ``super(...)`` followed by the remaining statements, with every
reference to the temporary renamed to ``this``.
"""

from __future__ import annotations

import logging
import re

from . import constants
from .dealias import dealias_recursively
from .estree import (
    AssignmentExpression,
    BlockStatement,
    CallExpression,
    ExpressionStatement,
    ForStatement,
    FunctionExpression,
    Identifier,
    LogicalExpression,
    MemberExpression,
    Node,
    NodeType,
    RestElement,
    ReturnStatement,
    SpreadElement,
    Super,
    ThisExpression,
    VariableDeclaration,
    is_identifier,
)
from .scope import is_shadowed
from .walk import WalkBase, find_all, transform

logger = logging.getLogger(__name__)


def _temporary_name(statement: Node) -> str | None:
    """Name declared by the first declarator of a leading ``var`` statement."""
    if not isinstance(statement, VariableDeclaration) or not statement.declarations:
        return None
    declarator_id = statement.declarations[0].id
    return declarator_id.name if is_identifier(declarator_id) else None


def _super_fallback_call(statement: Node) -> CallExpression | None:
    """The call in ``x = <call> || this``, if *statement* has that shape."""
    if not isinstance(statement, ExpressionStatement):
        return None
    assignment = statement.expression
    if not isinstance(assignment, AssignmentExpression):
        return None
    fallback = assignment.right
    if not (
        isinstance(fallback, LogicalExpression)
        and fallback.operator == constants.SUPER_FALLBACK_OPERATOR
        and isinstance(fallback.left, CallExpression)
        and isinstance(fallback.right, ThisExpression)
    ):
        return None
    return fallback.left


def _returns(statement: Node, name: str | None) -> bool:
    return (
        name is not None
        and isinstance(statement, ReturnStatement)
        and is_identifier(statement.argument, name)
    )


def is_spread_super_call(
    function: FunctionExpression, super_class: Node | None
) -> bool:
    body = function.body.body
    if super_class is None or function.params or len(body) < 3:
        return False
    first, second, third = body[:3]
    return (
        isinstance(second, ForStatement)
        and _super_fallback_call(third) is not None
        and _returns(body[-1], _temporary_name(first))
    )


def is_regular_super_call(
    function: FunctionExpression, super_class: Node | None
) -> bool:
    body = function.body.body
    if super_class is None or len(body) < 2:
        return False
    first, second = body[:2]
    call = _super_fallback_call(second)
    return (
        call is not None
        and isinstance(call.callee, MemberExpression)
        and _returns(body[-1], _temporary_name(first))
    )


def _super_statement(arguments: list[Node]) -> ExpressionStatement:
    return ExpressionStatement(
        expression=CallExpression(callee=Super(), arguments=arguments)
    )


def rename_to_this(function: Node, name: str, base: WalkBase) -> Node:
    """Replace every reference to *name* with ``this``, by name alone."""

    def _rename(node: Identifier, ancestors: list[Node]) -> Node | None:
        if node.name != name or is_shadowed(ancestors, name):
            return None
        return ThisExpression()

    renamed = transform(function, {NodeType.IDENTIFIER: _rename}, base)
    _log_verbatim_references(renamed, name, base)
    return renamed


def _log_verbatim_references(function: Node, name: str, base: WalkBase) -> None:
    """Template literals and opaque syntax are not renamed; say so if *name* is in them."""
    pattern = re.compile(rf"(?<![\w$]){re.escape(name)}(?![\w$])")
    verbatim = [
        *(n.raw for n in find_all(function, NodeType.LITERAL, base)),
        *(n.source_text for n in find_all(function, NodeType.OPAQUE, base)),
    ]
    if any(pattern.search(text) for text in verbatim):
        logger.debug("%s survives inside verbatim source and is not renamed", name)


def _rebuild(
    function: FunctionExpression,
    statements: list[Node],
    params: list[Node] | None = None,
) -> FunctionExpression:
    update: dict = {"body": BlockStatement(body=statements)}
    if params is not None:
        update["params"] = params
    return function.model_copy(update=update)


def handle_spread_arguments(function: FunctionExpression, base: WalkBase) -> Node:
    body = function.body.body
    temporary = _temporary_name(body[0])
    rest_name = constants.REST_PARAM_NAME
    statements = [
        _super_statement([SpreadElement(argument=Identifier(name=rest_name))]),
        *body[3:-1],
    ]
    rebuilt = _rebuild(
        function,
        statements,
        params=[RestElement(argument=Identifier(name=rest_name))],
    )
    return rename_to_this(rebuilt, temporary, base)


def handle_regular_super_call(function: FunctionExpression, base: WalkBase) -> Node:
    body = function.body.body
    temporary = _temporary_name(body[0])
    # Drop the explicit receiver passed to .call
    super_arguments = list(_super_fallback_call(body[1]).arguments[1:])
    statements = [_super_statement(super_arguments), *body[2:-1]]
    return rename_to_this(_rebuild(function, statements), temporary, base)


def reconstruct_constructor(
    function: FunctionExpression, super_class: Node | None, base: WalkBase
) -> Node:
    """Rewrite a constructor's super-call idiom, then de-alias the result."""
    if not function.body.body:
        return function

    if is_spread_super_call(function, super_class):
        logger.debug("Constructor forwards arguments to super via spread")
        function = handle_spread_arguments(function, base)
    elif is_regular_super_call(function, super_class):
        logger.debug("Constructor calls super with explicit arguments")
        function = handle_regular_super_call(function, base)

    return dealias_recursively(function, base)
