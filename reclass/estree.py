"""ESTree Node Model — a closed set of JavaScript syntax-tree node kinds."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class NodeType(str, Enum):
    # Program structure
    PROGRAM = "Program"
    # Statements
    EXPRESSION_STATEMENT = "ExpressionStatement"
    BLOCK_STATEMENT = "BlockStatement"
    EMPTY_STATEMENT = "EmptyStatement"
    VARIABLE_DECLARATION = "VariableDeclaration"
    VARIABLE_DECLARATOR = "VariableDeclarator"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    RETURN_STATEMENT = "ReturnStatement"
    IF_STATEMENT = "IfStatement"
    FOR_STATEMENT = "ForStatement"
    FOR_IN_STATEMENT = "ForInStatement"
    FOR_OF_STATEMENT = "ForOfStatement"
    WHILE_STATEMENT = "WhileStatement"
    DO_WHILE_STATEMENT = "DoWhileStatement"
    BREAK_STATEMENT = "BreakStatement"
    CONTINUE_STATEMENT = "ContinueStatement"
    THROW_STATEMENT = "ThrowStatement"
    TRY_STATEMENT = "TryStatement"
    CATCH_CLAUSE = "CatchClause"
    LABELED_STATEMENT = "LabeledStatement"
    # Classes
    CLASS_DECLARATION = "ClassDeclaration"
    CLASS_EXPRESSION = "ClassExpression"
    CLASS_BODY = "ClassBody"
    METHOD_DEFINITION = "MethodDefinition"
    # Expressions
    IDENTIFIER = "Identifier"
    LITERAL = "Literal"
    THIS_EXPRESSION = "ThisExpression"
    SUPER = "Super"
    ARRAY_EXPRESSION = "ArrayExpression"
    OBJECT_EXPRESSION = "ObjectExpression"
    PROPERTY = "Property"
    FUNCTION_EXPRESSION = "FunctionExpression"
    ARROW_FUNCTION_EXPRESSION = "ArrowFunctionExpression"
    UNARY_EXPRESSION = "UnaryExpression"
    UPDATE_EXPRESSION = "UpdateExpression"
    BINARY_EXPRESSION = "BinaryExpression"
    LOGICAL_EXPRESSION = "LogicalExpression"
    ASSIGNMENT_EXPRESSION = "AssignmentExpression"
    CONDITIONAL_EXPRESSION = "ConditionalExpression"
    CALL_EXPRESSION = "CallExpression"
    NEW_EXPRESSION = "NewExpression"
    MEMBER_EXPRESSION = "MemberExpression"
    SEQUENCE_EXPRESSION = "SequenceExpression"
    SPREAD_ELEMENT = "SpreadElement"
    PARENTHESIZED_EXPRESSION = "ParenthesizedExpression"
    # Patterns
    REST_ELEMENT = "RestElement"
    ASSIGNMENT_PATTERN = "AssignmentPattern"
    # Verbatim source the model does not cover
    OPAQUE = "Opaque"


class Node(BaseModel):
    type: NodeType


# ── program & statements ─────────────────────────────────────────


class Program(Node):
    type: NodeType = NodeType.PROGRAM
    body: list[Node] = []


class ExpressionStatement(Node):
    type: NodeType = NodeType.EXPRESSION_STATEMENT
    expression: Node


class BlockStatement(Node):
    type: NodeType = NodeType.BLOCK_STATEMENT
    body: list[Node] = []


class EmptyStatement(Node):
    type: NodeType = NodeType.EMPTY_STATEMENT


class VariableDeclarator(Node):
    type: NodeType = NodeType.VARIABLE_DECLARATOR
    id: Node
    init: Node | None = None


class VariableDeclaration(Node):
    type: NodeType = NodeType.VARIABLE_DECLARATION
    kind: str = "var"
    declarations: list[Node] = []


class FunctionDeclaration(Node):
    type: NodeType = NodeType.FUNCTION_DECLARATION
    id: Node | None = None
    params: list[Node] = []
    body: BlockStatement
    is_async: bool = False
    generator: bool = False


class ReturnStatement(Node):
    type: NodeType = NodeType.RETURN_STATEMENT
    argument: Node | None = None


class IfStatement(Node):
    type: NodeType = NodeType.IF_STATEMENT
    test: Node
    consequent: Node
    alternate: Node | None = None


class ForStatement(Node):
    type: NodeType = NodeType.FOR_STATEMENT
    init: Node | None = None
    test: Node | None = None
    update: Node | None = None
    body: Node


class ForInStatement(Node):
    type: NodeType = NodeType.FOR_IN_STATEMENT
    left: Node
    right: Node
    body: Node


class ForOfStatement(Node):
    type: NodeType = NodeType.FOR_OF_STATEMENT
    left: Node
    right: Node
    body: Node


class WhileStatement(Node):
    type: NodeType = NodeType.WHILE_STATEMENT
    test: Node
    body: Node


class DoWhileStatement(Node):
    type: NodeType = NodeType.DO_WHILE_STATEMENT
    body: Node
    test: Node


class BreakStatement(Node):
    type: NodeType = NodeType.BREAK_STATEMENT
    label: Node | None = None


class ContinueStatement(Node):
    type: NodeType = NodeType.CONTINUE_STATEMENT
    label: Node | None = None


class ThrowStatement(Node):
    type: NodeType = NodeType.THROW_STATEMENT
    argument: Node


class CatchClause(Node):
    type: NodeType = NodeType.CATCH_CLAUSE
    param: Node | None = None
    body: BlockStatement


class TryStatement(Node):
    type: NodeType = NodeType.TRY_STATEMENT
    block: BlockStatement
    handler: CatchClause | None = None
    finalizer: BlockStatement | None = None


class LabeledStatement(Node):
    type: NodeType = NodeType.LABELED_STATEMENT
    label: Node
    body: Node


# ── classes ──────────────────────────────────────────────────────


class MethodDefinition(Node):
    type: NodeType = NodeType.METHOD_DEFINITION
    key: Node
    value: Node
    kind: str = "method"  # constructor / method / get / set
    static: bool = False
    computed: bool = False


class ClassBody(Node):
    type: NodeType = NodeType.CLASS_BODY
    body: list[Node] = []


class ClassDeclaration(Node):
    type: NodeType = NodeType.CLASS_DECLARATION
    id: Node | None = None
    super_class: Node | None = None
    body: ClassBody


class ClassExpression(Node):
    type: NodeType = NodeType.CLASS_EXPRESSION
    id: Node | None = None
    super_class: Node | None = None
    body: ClassBody


# ── expressions ──────────────────────────────────────────────────


class Identifier(Node):
    type: NodeType = NodeType.IDENTIFIER
    name: str


class Literal(Node):
    """Any literal, kept as its raw source spelling (numbers, strings, regexes, …)."""

    type: NodeType = NodeType.LITERAL
    raw: str


class ThisExpression(Node):
    type: NodeType = NodeType.THIS_EXPRESSION


class Super(Node):
    type: NodeType = NodeType.SUPER


class ArrayExpression(Node):
    type: NodeType = NodeType.ARRAY_EXPRESSION
    elements: list[Node] = []


class Property(Node):
    type: NodeType = NodeType.PROPERTY
    key: Node
    value: Node
    kind: str = "init"  # init / get / set
    computed: bool = False
    shorthand: bool = False
    method: bool = False


class ObjectExpression(Node):
    type: NodeType = NodeType.OBJECT_EXPRESSION
    properties: list[Node] = []


class FunctionExpression(Node):
    type: NodeType = NodeType.FUNCTION_EXPRESSION
    id: Node | None = None
    params: list[Node] = []
    body: BlockStatement
    is_async: bool = False
    generator: bool = False


class ArrowFunctionExpression(Node):
    type: NodeType = NodeType.ARROW_FUNCTION_EXPRESSION
    params: list[Node] = []
    body: Node
    is_async: bool = False


class UnaryExpression(Node):
    type: NodeType = NodeType.UNARY_EXPRESSION
    operator: str
    argument: Node


class UpdateExpression(Node):
    type: NodeType = NodeType.UPDATE_EXPRESSION
    operator: str
    argument: Node
    prefix: bool = False


class BinaryExpression(Node):
    type: NodeType = NodeType.BINARY_EXPRESSION
    operator: str
    left: Node
    right: Node


class LogicalExpression(Node):
    type: NodeType = NodeType.LOGICAL_EXPRESSION
    operator: str
    left: Node
    right: Node


class AssignmentExpression(Node):
    type: NodeType = NodeType.ASSIGNMENT_EXPRESSION
    operator: str = "="
    left: Node
    right: Node


class ConditionalExpression(Node):
    type: NodeType = NodeType.CONDITIONAL_EXPRESSION
    test: Node
    consequent: Node
    alternate: Node


class CallExpression(Node):
    type: NodeType = NodeType.CALL_EXPRESSION
    callee: Node
    arguments: list[Node] = []
    optional: bool = False


class NewExpression(Node):
    type: NodeType = NodeType.NEW_EXPRESSION
    callee: Node
    arguments: list[Node] = []


class MemberExpression(Node):
    type: NodeType = NodeType.MEMBER_EXPRESSION
    object: Node
    property: Node
    computed: bool = False
    optional: bool = False


class SequenceExpression(Node):
    type: NodeType = NodeType.SEQUENCE_EXPRESSION
    expressions: list[Node] = []


class SpreadElement(Node):
    type: NodeType = NodeType.SPREAD_ELEMENT
    argument: Node


class ParenthesizedExpression(Node):
    type: NodeType = NodeType.PARENTHESIZED_EXPRESSION
    expression: Node


class RestElement(Node):
    type: NodeType = NodeType.REST_ELEMENT
    argument: Node


class AssignmentPattern(Node):
    type: NodeType = NodeType.ASSIGNMENT_PATTERN
    left: Node
    right: Node


class Opaque(Node):
    """Verbatim source for syntax outside the model (destructuring, switch, …)."""

    type: NodeType = NodeType.OPAQUE
    syntax_type: str
    source_text: str


FUNCTION_NODES: tuple[type[Node], ...] = (
    FunctionDeclaration,
    FunctionExpression,
    ArrowFunctionExpression,
)


def unwrap_parens(node: Node | None) -> Node | None:
    """Strip any number of ``ParenthesizedExpression`` layers."""
    while isinstance(node, ParenthesizedExpression):
        node = node.expression
    return node


def is_identifier(node: Node | None, name: str | None = None) -> bool:
    if not isinstance(node, Identifier):
        return False
    return name is None or node.name == name


def is_this_member(node: Node | None, property_name: str) -> bool:
    """True for the literal, non-computed form ``this.<property_name>``."""
    return (
        isinstance(node, MemberExpression)
        and not node.computed
        and isinstance(node.object, ThisExpression)
        and is_identifier(node.property, property_name)
    )
