"""JavaScriptFrontend — tree-sitter JavaScript CST → ESTree model lowering."""

from __future__ import annotations

import logging
from typing import Callable

from . import constants
from .estree import (
    ArrayExpression,
    ArrowFunctionExpression,
    AssignmentExpression,
    AssignmentPattern,
    BinaryExpression,
    BlockStatement,
    BreakStatement,
    CallExpression,
    CatchClause,
    ClassBody,
    ClassDeclaration,
    ClassExpression,
    ConditionalExpression,
    ContinueStatement,
    DoWhileStatement,
    EmptyStatement,
    ExpressionStatement,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    IfStatement,
    LabeledStatement,
    Literal,
    LogicalExpression,
    MemberExpression,
    MethodDefinition,
    NewExpression,
    Node,
    ObjectExpression,
    Opaque,
    ParenthesizedExpression,
    Program,
    Property,
    RestElement,
    ReturnStatement,
    SequenceExpression,
    SpreadElement,
    Super,
    ThisExpression,
    ThrowStatement,
    TryStatement,
    UnaryExpression,
    UpdateExpression,
    VariableDeclaration,
    VariableDeclarator,
    WhileStatement,
)

logger = logging.getLogger(__name__)


class JavaScriptFrontend:
    """Lowers a JavaScript tree-sitter tree into the ESTree node model.

    Statement and expression handlers are looked up by tree-sitter node type
    in ``_STMT_DISPATCH`` / ``_EXPR_DISPATCH``.  Anything without a handler
    becomes an ``Opaque`` node carrying its verbatim source text.
    """

    COMMENT_TYPES: frozenset[str] = frozenset({"comment", "html_comment"})
    NOISE_TYPES: frozenset[str] = frozenset({"\n", ";", "hash_bang_line"})

    FUNCTION_EXPR_TYPES: frozenset[str] = frozenset(
        {"function", "function_expression", "generator_function"}
    )
    FUNCTION_DECL_TYPES: frozenset[str] = frozenset(
        {"function_declaration", "generator_function_declaration"}
    )

    def __init__(self):
        self._source: bytes = b""
        self._EXPR_DISPATCH: dict[str, Callable[..., Node]] = {
            "identifier": self._lower_identifier,
            "property_identifier": self._lower_identifier,
            "shorthand_property_identifier": self._lower_identifier,
            "statement_identifier": self._lower_identifier,
            "private_property_identifier": self._lower_identifier,
            "this": lambda _: ThisExpression(),
            "super": lambda _: Super(),
            "number": self._lower_literal,
            "string": self._lower_literal,
            "template_string": self._lower_literal,
            "regex": self._lower_literal,
            "true": self._lower_literal,
            "false": self._lower_literal,
            "null": self._lower_literal,
            "undefined": self._lower_identifier,
            "array": self._lower_array,
            "object": self._lower_object,
            "binary_expression": self._lower_binary,
            "unary_expression": self._lower_unary,
            "update_expression": self._lower_update,
            "assignment_expression": self._lower_assignment,
            "augmented_assignment_expression": self._lower_assignment,
            "ternary_expression": self._lower_ternary,
            "call_expression": self._lower_call,
            "new_expression": self._lower_new,
            "member_expression": self._lower_member,
            "subscript_expression": self._lower_subscript,
            "parenthesized_expression": self._lower_paren,
            "sequence_expression": self._lower_sequence,
            "spread_element": self._lower_spread,
            "rest_pattern": self._lower_rest,
            "assignment_pattern": self._lower_assignment_pattern,
            "arrow_function": self._lower_arrow_function,
            "class": self._lower_class,
            **{t: self._lower_function_expression for t in self.FUNCTION_EXPR_TYPES},
        }
        self._STMT_DISPATCH: dict[str, Callable[..., Node]] = {
            "expression_statement": self._lower_expression_statement,
            "variable_declaration": self._lower_var_declaration,
            "lexical_declaration": self._lower_var_declaration,
            "statement_block": self._lower_block,
            "empty_statement": lambda _: EmptyStatement(),
            "return_statement": self._lower_return,
            "if_statement": self._lower_if,
            "for_statement": self._lower_for,
            "for_in_statement": self._lower_for_in,
            "while_statement": self._lower_while,
            "do_statement": self._lower_do,
            "break_statement": self._lower_break,
            "continue_statement": self._lower_continue,
            "throw_statement": self._lower_throw,
            "try_statement": self._lower_try,
            "labeled_statement": self._lower_labeled,
            "class_declaration": self._lower_class,
            **{t: self._lower_function_declaration for t in self.FUNCTION_DECL_TYPES},
        }

    # ── helpers ──────────────────────────────────────────────────

    def _node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _named_children(self, node) -> list:
        return [
            c for c in node.named_children if c.type not in self.COMMENT_TYPES
        ]

    def _has_token(self, node, token: str) -> bool:
        return any(not c.is_named and c.type == token for c in node.children)

    def _opaque(self, node) -> Opaque:
        logger.debug("Keeping unsupported %s verbatim", node.type)
        return Opaque(syntax_type=node.type, source_text=self._node_text(node))

    # ── entry point ──────────────────────────────────────────────

    def lower(self, tree, source: bytes) -> Program:
        self._source = source
        root = tree.root_node
        return Program(body=self._lower_statements(root))

    # ── dispatchers ──────────────────────────────────────────────

    def _lower_statements(self, node) -> list[Node]:
        return [
            self._lower_stmt(child)
            for child in node.children
            if child.is_named
            and child.type not in self.COMMENT_TYPES
            and child.type not in self.NOISE_TYPES
        ]

    def _lower_stmt(self, node) -> Node:
        handler = self._STMT_DISPATCH.get(node.type)
        if handler:
            return handler(node)
        if node.type in self._EXPR_DISPATCH:
            return ExpressionStatement(expression=self._lower_expr(node))
        return self._opaque(node)

    def _lower_expr(self, node) -> Node:
        handler = self._EXPR_DISPATCH.get(node.type)
        if handler:
            return handler(node)
        return self._opaque(node)

    def _lower_optional_expr(self, node) -> Node | None:
        return self._lower_expr(node) if node is not None else None

    # ── statements ───────────────────────────────────────────────

    def _lower_expression_statement(self, node) -> Node:
        children = self._named_children(node)
        expression = (
            self._lower_expr(children[0])
            if len(children) == 1
            else SequenceExpression(expressions=[self._lower_expr(c) for c in children])
        )
        return ExpressionStatement(expression=expression)

    def _lower_var_declaration(self, node) -> VariableDeclaration:
        kind_node = node.child_by_field_name("kind")
        kind = self._node_text(kind_node) if kind_node else node.children[0].type
        declarations = [
            VariableDeclarator(
                id=self._lower_pattern(child.child_by_field_name("name")),
                init=self._lower_optional_expr(child.child_by_field_name("value")),
            )
            for child in node.children
            if child.type == "variable_declarator"
        ]
        return VariableDeclaration(kind=kind, declarations=declarations)

    def _lower_pattern(self, node) -> Node:
        """Binding targets: identifiers are modelled, destructuring stays verbatim."""
        if node.type == "identifier":
            return self._lower_identifier(node)
        if node.type in ("rest_pattern", "assignment_pattern"):
            return self._lower_expr(node)
        return self._opaque(node)

    def _lower_block(self, node) -> BlockStatement:
        return BlockStatement(body=self._lower_statements(node))

    def _lower_return(self, node) -> ReturnStatement:
        children = self._named_children(node)
        return ReturnStatement(
            argument=self._lower_expr(children[0]) if children else None
        )

    def _lower_condition(self, node) -> Node:
        """``if (x)`` / ``while (x)`` conditions arrive as parenthesized_expression."""
        if node.type == "parenthesized_expression":
            return self._lower_expr(self._named_children(node)[0])
        return self._lower_expr(node)

    def _lower_if(self, node) -> IfStatement:
        alternative = node.child_by_field_name("alternative")
        alternate = None
        if alternative is not None:
            alternate = self._lower_stmt(self._named_children(alternative)[0])
        return IfStatement(
            test=self._lower_condition(node.child_by_field_name("condition")),
            consequent=self._lower_stmt(node.child_by_field_name("consequence")),
            alternate=alternate,
        )

    def _lower_for_part(self, node) -> Node | None:
        if node is None or node.type in (";", "empty_statement"):
            return None
        if node.type in ("variable_declaration", "lexical_declaration"):
            return self._lower_var_declaration(node)
        if node.type == "expression_statement":
            return self._lower_expression_statement(node).expression
        return self._lower_expr(node)

    def _lower_for(self, node) -> ForStatement:
        return ForStatement(
            init=self._lower_for_part(node.child_by_field_name("initializer")),
            test=self._lower_for_part(node.child_by_field_name("condition")),
            update=self._lower_for_part(node.child_by_field_name("increment")),
            body=self._lower_stmt(node.child_by_field_name("body")),
        )

    def _lower_for_in(self, node) -> ForInStatement | ForOfStatement:
        operator_node = node.child_by_field_name("operator")
        is_for_of = operator_node is not None and self._node_text(operator_node) == "of"
        kind_node = node.child_by_field_name("kind")
        left = self._lower_pattern(node.child_by_field_name("left"))
        if kind_node is not None:
            left = VariableDeclaration(
                kind=self._node_text(kind_node),
                declarations=[VariableDeclarator(id=left)],
            )
        right = self._lower_expr(node.child_by_field_name("right"))
        body = self._lower_stmt(node.child_by_field_name("body"))
        if is_for_of:
            return ForOfStatement(left=left, right=right, body=body)
        return ForInStatement(left=left, right=right, body=body)

    def _lower_while(self, node) -> WhileStatement:
        return WhileStatement(
            test=self._lower_condition(node.child_by_field_name("condition")),
            body=self._lower_stmt(node.child_by_field_name("body")),
        )

    def _lower_do(self, node) -> DoWhileStatement:
        return DoWhileStatement(
            body=self._lower_stmt(node.child_by_field_name("body")),
            test=self._lower_condition(node.child_by_field_name("condition")),
        )

    def _lower_jump_label(self, node) -> Node | None:
        label = node.child_by_field_name("label")
        return self._lower_identifier(label) if label is not None else None

    def _lower_break(self, node) -> BreakStatement:
        return BreakStatement(label=self._lower_jump_label(node))

    def _lower_continue(self, node) -> ContinueStatement:
        return ContinueStatement(label=self._lower_jump_label(node))

    def _lower_throw(self, node) -> ThrowStatement:
        return ThrowStatement(argument=self._lower_expr(self._named_children(node)[0]))

    def _lower_try(self, node) -> TryStatement:
        handler_node = node.child_by_field_name("handler")
        finalizer_node = node.child_by_field_name("finalizer")
        handler = None
        if handler_node is not None:
            param_node = handler_node.child_by_field_name("parameter")
            handler = CatchClause(
                param=self._lower_pattern(param_node) if param_node else None,
                body=self._lower_block(handler_node.child_by_field_name("body")),
            )
        finalizer = None
        if finalizer_node is not None:
            finalizer = self._lower_block(finalizer_node.child_by_field_name("body"))
        return TryStatement(
            block=self._lower_block(node.child_by_field_name("body")),
            handler=handler,
            finalizer=finalizer,
        )

    def _lower_labeled(self, node) -> LabeledStatement:
        return LabeledStatement(
            label=self._lower_identifier(node.child_by_field_name("label")),
            body=self._lower_stmt(node.child_by_field_name("body")),
        )

    # ── functions & classes ──────────────────────────────────────

    def _lower_params(self, params_node) -> list[Node]:
        if params_node is None:
            return []
        if params_node.type == "identifier":
            return [self._lower_identifier(params_node)]
        return [self._lower_pattern(c) for c in self._named_children(params_node)]

    def _function_parts(self, node) -> dict:
        name_node = node.child_by_field_name("name")
        return dict(
            id=self._lower_identifier(name_node) if name_node else None,
            params=self._lower_params(node.child_by_field_name("parameters")),
            body=self._lower_block(node.child_by_field_name("body")),
            is_async=self._has_token(node, "async"),
            generator=self._has_token(node, "*"),
        )

    def _lower_function_declaration(self, node) -> FunctionDeclaration:
        return FunctionDeclaration(**self._function_parts(node))

    def _lower_function_expression(self, node) -> FunctionExpression:
        return FunctionExpression(**self._function_parts(node))

    def _lower_arrow_function(self, node) -> ArrowFunctionExpression:
        params_node = node.child_by_field_name(
            "parameters"
        ) or node.child_by_field_name("parameter")
        body_node = node.child_by_field_name("body")
        body = (
            self._lower_block(body_node)
            if body_node.type == "statement_block"
            else self._lower_expr(body_node)
        )
        return ArrowFunctionExpression(
            params=self._lower_params(params_node),
            body=body,
            is_async=self._has_token(node, "async"),
        )

    def _lower_class(self, node) -> ClassDeclaration | ClassExpression:
        name_node = node.child_by_field_name("name")
        super_class = None
        for child in self._named_children(node):
            if child.type == "class_heritage":
                super_class = self._lower_expr(self._named_children(child)[0])
        members = [
            self._lower_class_member(member)
            for member in self._named_children(node.child_by_field_name("body"))
        ]
        cls = ClassDeclaration if node.type == "class_declaration" else ClassExpression
        return cls(
            id=self._lower_identifier(name_node) if name_node else None,
            super_class=super_class,
            body=ClassBody(body=members),
        )

    def _lower_class_member(self, node) -> Node:
        if node.type != "method_definition":
            return self._opaque(node)
        key, computed = self._lower_property_key(node.child_by_field_name("name"))
        kind = constants.METHOD_KIND
        if self._has_token(node, "get"):
            kind = "get"
        elif self._has_token(node, "set"):
            kind = "set"
        elif is_constructor_key(key, computed):
            kind = constants.CONSTRUCTOR_KIND
        value = FunctionExpression(
            params=self._lower_params(node.child_by_field_name("parameters")),
            body=self._lower_block(node.child_by_field_name("body")),
            is_async=self._has_token(node, "async"),
            generator=self._has_token(node, "*"),
        )
        return MethodDefinition(
            key=key,
            value=value,
            kind=kind,
            static=self._has_token(node, "static"),
            computed=computed,
        )

    # ── expressions ──────────────────────────────────────────────

    def _lower_identifier(self, node) -> Identifier:
        return Identifier(name=self._node_text(node))

    def _lower_literal(self, node) -> Literal:
        return Literal(raw=self._node_text(node))

    def _lower_array(self, node) -> ArrayExpression:
        return ArrayExpression(
            elements=[self._lower_expr(c) for c in self._named_children(node)]
        )

    def _lower_property_key(self, node) -> tuple[Node, bool]:
        if node.type == "computed_property_name":
            return self._lower_expr(self._named_children(node)[0]), True
        return self._lower_expr(node), False

    def _lower_object(self, node) -> ObjectExpression:
        properties: list[Node] = []
        for child in self._named_children(node):
            if child.type == "pair":
                key, computed = self._lower_property_key(child.child_by_field_name("key"))
                properties.append(
                    Property(
                        key=key,
                        value=self._lower_expr(child.child_by_field_name("value")),
                        computed=computed,
                    )
                )
            elif child.type == "shorthand_property_identifier":
                properties.append(
                    Property(
                        key=self._lower_identifier(child),
                        value=self._lower_identifier(child),
                        shorthand=True,
                    )
                )
            elif child.type == "method_definition":
                method = self._lower_class_member(child)
                properties.append(
                    Property(
                        key=method.key,
                        value=method.value,
                        kind=method.kind if method.kind in ("get", "set") else "init",
                        computed=method.computed,
                        method=method.kind not in ("get", "set"),
                    )
                )
            else:
                properties.append(self._lower_expr(child))
        return ObjectExpression(properties=properties)

    def _lower_binary(self, node) -> BinaryExpression | LogicalExpression:
        operator = self._node_text(node.child_by_field_name("operator"))
        left = self._lower_expr(node.child_by_field_name("left"))
        right = self._lower_expr(node.child_by_field_name("right"))
        if operator in constants.LOGICAL_OPERATORS:
            return LogicalExpression(operator=operator, left=left, right=right)
        return BinaryExpression(operator=operator, left=left, right=right)

    def _lower_unary(self, node) -> UnaryExpression:
        return UnaryExpression(
            operator=self._node_text(node.child_by_field_name("operator")),
            argument=self._lower_expr(node.child_by_field_name("argument")),
        )

    def _lower_update(self, node) -> UpdateExpression:
        operator_node = node.child_by_field_name("operator")
        argument_node = node.child_by_field_name("argument")
        return UpdateExpression(
            operator=self._node_text(operator_node),
            argument=self._lower_expr(argument_node),
            prefix=operator_node.start_byte < argument_node.start_byte,
        )

    def _lower_assignment(self, node) -> AssignmentExpression:
        operator_node = node.child_by_field_name("operator")
        left_node = node.child_by_field_name("left")
        left = (
            self._lower_expr(left_node)
            if left_node.type in self._EXPR_DISPATCH
            else self._lower_pattern(left_node)
        )
        return AssignmentExpression(
            operator=self._node_text(operator_node) if operator_node else "=",
            left=left,
            right=self._lower_expr(node.child_by_field_name("right")),
        )

    def _lower_ternary(self, node) -> ConditionalExpression:
        return ConditionalExpression(
            test=self._lower_expr(node.child_by_field_name("condition")),
            consequent=self._lower_expr(node.child_by_field_name("consequence")),
            alternate=self._lower_expr(node.child_by_field_name("alternative")),
        )

    def _lower_arguments(self, args_node) -> list[Node]:
        if args_node is None:
            return []
        return [self._lower_expr(c) for c in self._named_children(args_node)]

    def _lower_call(self, node) -> Node:
        args_node = node.child_by_field_name("arguments")
        if args_node is not None and args_node.type == "template_string":
            return self._opaque(node)
        return CallExpression(
            callee=self._lower_expr(node.child_by_field_name("function")),
            arguments=self._lower_arguments(args_node),
            optional=node.child_by_field_name("optional_chain") is not None,
        )

    def _lower_new(self, node) -> NewExpression:
        return NewExpression(
            callee=self._lower_expr(node.child_by_field_name("constructor")),
            arguments=self._lower_arguments(node.child_by_field_name("arguments")),
        )

    def _lower_member(self, node) -> MemberExpression:
        return MemberExpression(
            object=self._lower_expr(node.child_by_field_name("object")),
            property=self._lower_identifier(node.child_by_field_name("property")),
            optional=node.child_by_field_name("optional_chain") is not None,
        )

    def _lower_subscript(self, node) -> MemberExpression:
        return MemberExpression(
            object=self._lower_expr(node.child_by_field_name("object")),
            property=self._lower_expr(node.child_by_field_name("index")),
            computed=True,
            optional=node.child_by_field_name("optional_chain") is not None,
        )

    def _lower_paren(self, node) -> ParenthesizedExpression:
        children = self._named_children(node)
        inner = (
            self._lower_expr(children[0])
            if len(children) == 1
            else SequenceExpression(expressions=[self._lower_expr(c) for c in children])
        )
        return ParenthesizedExpression(expression=inner)

    def _lower_sequence(self, node) -> SequenceExpression:
        expressions: list[Node] = []
        for child in self._named_children(node):
            lowered = self._lower_expr(child)
            if isinstance(lowered, SequenceExpression):
                expressions.extend(lowered.expressions)
            else:
                expressions.append(lowered)
        return SequenceExpression(expressions=expressions)

    def _lower_spread(self, node) -> SpreadElement:
        return SpreadElement(argument=self._lower_expr(self._named_children(node)[0]))

    def _lower_rest(self, node) -> RestElement:
        return RestElement(argument=self._lower_pattern(self._named_children(node)[0]))

    def _lower_assignment_pattern(self, node) -> AssignmentPattern:
        return AssignmentPattern(
            left=self._lower_pattern(node.child_by_field_name("left")),
            right=self._lower_expr(node.child_by_field_name("right")),
        )


def is_constructor_key(key: Node, computed: bool) -> bool:
    return (
        not computed
        and isinstance(key, Identifier)
        and key.name == constants.CONSTRUCTOR_METHOD_NAME
    )
