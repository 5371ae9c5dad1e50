"""Source printer: renders the ESTree model back to JavaScript text.

The rewrite engine uses it as an equality oracle: two sub-trees are
considered the same when they print to the same string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from . import constants
from .estree import (
    ArrayExpression,
    ArrowFunctionExpression,
    AssignmentExpression,
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
    ExpressionStatement,
    ForInStatement,
    ForOfStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    IfStatement,
    LabeledStatement,
    LogicalExpression,
    MemberExpression,
    MethodDefinition,
    NewExpression,
    Node,
    NodeType,
    ObjectExpression,
    Program,
    Property,
    ReturnStatement,
    SequenceExpression,
    ThrowStatement,
    TryStatement,
    UnaryExpression,
    UpdateExpression,
    VariableDeclaration,
    VariableDeclarator,
    WhileStatement,
    is_identifier,
)

_WORD_OPERATORS: frozenset[str] = frozenset({"typeof", "void", "delete"})

# Callee kinds that can be printed after ``new`` / before ``(`` without parens
_SIMPLE_CALLEES: frozenset[NodeType] = frozenset(
    {
        NodeType.IDENTIFIER,
        NodeType.MEMBER_EXPRESSION,
        NodeType.THIS_EXPRESSION,
        NodeType.SUPER,
        NodeType.PARENTHESIZED_EXPRESSION,
        NodeType.CALL_EXPRESSION,
        NodeType.OPAQUE,
    }
)


@dataclass(frozen=True)
class PrinterConfig:
    indent: str = constants.PRINTER_INDENT


class JsPrinter:
    """Prints statements one per line, nested blocks indented by ``config.indent``."""

    def __init__(self, config: PrinterConfig = PrinterConfig()):
        self._config = config
        self._level = 0
        self._DISPATCH: dict[NodeType, Callable[[Node], str]] = {
            NodeType.PROGRAM: self._print_program,
            NodeType.EXPRESSION_STATEMENT: self._print_expression_statement,
            NodeType.BLOCK_STATEMENT: self._print_block,
            NodeType.EMPTY_STATEMENT: lambda _: ";",
            NodeType.VARIABLE_DECLARATION: self._print_var_declaration,
            NodeType.VARIABLE_DECLARATOR: self._print_declarator,
            NodeType.FUNCTION_DECLARATION: self._print_function,
            NodeType.RETURN_STATEMENT: self._print_return,
            NodeType.IF_STATEMENT: self._print_if,
            NodeType.FOR_STATEMENT: self._print_for,
            NodeType.FOR_IN_STATEMENT: self._print_for_in,
            NodeType.FOR_OF_STATEMENT: self._print_for_in,
            NodeType.WHILE_STATEMENT: self._print_while,
            NodeType.DO_WHILE_STATEMENT: self._print_do_while,
            NodeType.BREAK_STATEMENT: self._print_jump,
            NodeType.CONTINUE_STATEMENT: self._print_jump,
            NodeType.THROW_STATEMENT: self._print_throw,
            NodeType.TRY_STATEMENT: self._print_try,
            NodeType.CATCH_CLAUSE: self._print_catch,
            NodeType.LABELED_STATEMENT: self._print_labeled,
            NodeType.CLASS_DECLARATION: self._print_class,
            NodeType.CLASS_EXPRESSION: self._print_class,
            NodeType.CLASS_BODY: self._print_class_body,
            NodeType.METHOD_DEFINITION: self._print_method_definition,
            NodeType.IDENTIFIER: lambda n: n.name,
            NodeType.LITERAL: lambda n: n.raw,
            NodeType.THIS_EXPRESSION: lambda _: "this",
            NodeType.SUPER: lambda _: "super",
            NodeType.ARRAY_EXPRESSION: self._print_array,
            NodeType.OBJECT_EXPRESSION: self._print_object,
            NodeType.PROPERTY: self._print_property,
            NodeType.FUNCTION_EXPRESSION: self._print_function,
            NodeType.ARROW_FUNCTION_EXPRESSION: self._print_arrow,
            NodeType.UNARY_EXPRESSION: self._print_unary,
            NodeType.UPDATE_EXPRESSION: self._print_update,
            NodeType.BINARY_EXPRESSION: self._print_binary,
            NodeType.LOGICAL_EXPRESSION: self._print_binary,
            NodeType.ASSIGNMENT_EXPRESSION: self._print_binary,
            NodeType.CONDITIONAL_EXPRESSION: self._print_conditional,
            NodeType.CALL_EXPRESSION: self._print_call,
            NodeType.NEW_EXPRESSION: self._print_new,
            NodeType.MEMBER_EXPRESSION: self._print_member,
            NodeType.SEQUENCE_EXPRESSION: self._print_sequence,
            NodeType.SPREAD_ELEMENT: lambda n: f"...{self.print(n.argument)}",
            NodeType.REST_ELEMENT: lambda n: f"...{self.print(n.argument)}",
            NodeType.ASSIGNMENT_PATTERN: lambda n: (
                f"{self.print(n.left)} = {self.print(n.right)}"
            ),
            NodeType.PARENTHESIZED_EXPRESSION: lambda n: (
                f"({self.print(n.expression)})"
            ),
            NodeType.OPAQUE: lambda n: n.source_text,
        }

    # ── entry point ──────────────────────────────────────────────

    def print(self, node: Node | None) -> str:
        if node is None:
            return ""
        handler = self._DISPATCH.get(node.type)
        if handler is None:
            raise ValueError(f"No printer for node type {node.type}")
        return handler(node)

    # ── helpers ──────────────────────────────────────────────────

    def _pad(self) -> str:
        return self._config.indent * self._level

    def _print_statements(self, statements: list[Node]) -> str:
        return "\n".join(self._pad() + self.print(stmt) for stmt in statements)

    def _print_nested(self, statements: list[Node]) -> str:
        self._level += 1
        try:
            return self._print_statements(statements)
        finally:
            self._level -= 1

    def _print_list(self, nodes: list[Node]) -> str:
        return ", ".join(self.print(n) for n in nodes)

    def _print_clause_body(self, node: Node) -> str:
        """Body of if/for/while: blocks stay on the same line, others are indented."""
        if isinstance(node, BlockStatement):
            return " " + self._print_block(node)
        return "\n" + self._print_nested([node])

    def _print_callee(self, node: Node) -> str:
        text = self.print(node)
        if node.type in _SIMPLE_CALLEES:
            return text
        return f"({text})"

    # ── statements ───────────────────────────────────────────────

    def _print_program(self, node: Program) -> str:
        return self._print_statements(node.body)

    def _print_expression_statement(self, node: ExpressionStatement) -> str:
        return f"{self.print(node.expression)};"

    def _print_block(self, node: BlockStatement) -> str:
        if not node.body:
            return "{}"
        return "{\n" + self._print_nested(node.body) + "\n" + self._pad() + "}"

    def _print_var_declaration(self, node: VariableDeclaration) -> str:
        return f"{self._print_var_head(node)};"

    def _print_var_head(self, node: VariableDeclaration) -> str:
        return f"{node.kind} {self._print_list(node.declarations)}"

    def _print_declarator(self, node: VariableDeclarator) -> str:
        if node.init is None:
            return self.print(node.id)
        return f"{self.print(node.id)} = {self.print(node.init)}"

    def _print_function(self, node: FunctionDeclaration | FunctionExpression) -> str:
        prefix = "async " if node.is_async else ""
        star = "*" if node.generator else ""
        name = f" {self.print(node.id)}" if node.id is not None else ""
        return (
            f"{prefix}function{star}{name}({self._print_list(node.params)}) "
            f"{self._print_block(node.body)}"
        )

    def _print_return(self, node: ReturnStatement) -> str:
        if node.argument is None:
            return "return;"
        return f"return {self.print(node.argument)};"

    def _print_if(self, node: IfStatement) -> str:
        text = f"if ({self.print(node.test)}){self._print_clause_body(node.consequent)}"
        if node.alternate is None:
            return text
        separator = " " if isinstance(node.consequent, BlockStatement) else "\n" + self._pad()
        alternate = node.alternate
        if isinstance(alternate, IfStatement):
            return f"{text}{separator}else {self.print(alternate)}"
        return f"{text}{separator}else{self._print_clause_body(alternate)}"

    def _print_for_part(self, node: Node | None) -> str:
        if isinstance(node, VariableDeclaration):
            return self._print_var_head(node)
        return self.print(node)

    def _print_for(self, node: ForStatement) -> str:
        init = self._print_for_part(node.init)
        test = self.print(node.test)
        update = self.print(node.update)
        head = init + ";" + (f" {test}" if test else "") + ";" + (f" {update}" if update else "")
        return f"for ({head}){self._print_clause_body(node.body)}"

    def _print_for_in(self, node: ForInStatement | ForOfStatement) -> str:
        keyword = "of" if isinstance(node, ForOfStatement) else "in"
        return (
            f"for ({self._print_for_part(node.left)} {keyword} {self.print(node.right)})"
            f"{self._print_clause_body(node.body)}"
        )

    def _print_while(self, node: WhileStatement) -> str:
        return f"while ({self.print(node.test)}){self._print_clause_body(node.body)}"

    def _print_do_while(self, node: DoWhileStatement) -> str:
        body = self._print_clause_body(node.body)
        separator = " " if isinstance(node.body, BlockStatement) else "\n" + self._pad()
        return f"do{body}{separator}while ({self.print(node.test)});"

    def _print_jump(self, node: BreakStatement | ContinueStatement) -> str:
        keyword = "break" if isinstance(node, BreakStatement) else "continue"
        if node.label is None:
            return f"{keyword};"
        return f"{keyword} {self.print(node.label)};"

    def _print_throw(self, node: ThrowStatement) -> str:
        return f"throw {self.print(node.argument)};"

    def _print_try(self, node: TryStatement) -> str:
        text = f"try {self._print_block(node.block)}"
        if node.handler is not None:
            text += " " + self._print_catch(node.handler)
        if node.finalizer is not None:
            text += f" finally {self._print_block(node.finalizer)}"
        return text

    def _print_catch(self, node: CatchClause) -> str:
        if node.param is None:
            return f"catch {self._print_block(node.body)}"
        return f"catch ({self.print(node.param)}) {self._print_block(node.body)}"

    def _print_labeled(self, node: LabeledStatement) -> str:
        return f"{self.print(node.label)}: {self.print(node.body)}"

    # ── classes ──────────────────────────────────────────────────

    def _print_class(self, node: ClassDeclaration | ClassExpression) -> str:
        text = "class"
        if node.id is not None:
            text += f" {self.print(node.id)}"
        if node.super_class is not None:
            text += f" extends {self.print(node.super_class)}"
        return f"{text} {self._print_class_body(node.body)}"

    def _print_class_body(self, node: ClassBody) -> str:
        if not node.body:
            return "{}"
        return "{\n" + self._print_nested(node.body) + "\n" + self._pad() + "}"

    def _print_method_key(self, key: Node, computed: bool) -> str:
        return f"[{self.print(key)}]" if computed else self.print(key)

    def _print_method_definition(self, node: MethodDefinition) -> str:
        value = node.value
        parts = []
        if node.static:
            parts.append("static ")
        if node.kind in ("get", "set"):
            parts.append(f"{node.kind} ")
        if getattr(value, "is_async", False):
            parts.append("async ")
        if getattr(value, "generator", False):
            parts.append("*")
        parts.append(self._print_method_key(node.key, node.computed))
        parts.append(self._print_method_tail(value))
        return "".join(parts)

    def _print_method_tail(self, value: Node) -> str:
        if isinstance(value, FunctionExpression):
            return f"({self._print_list(value.params)}) {self._print_block(value.body)}"
        return f" = {self.print(value)}"

    # ── expressions ──────────────────────────────────────────────

    def _print_array(self, node: ArrayExpression) -> str:
        return f"[{self._print_list(node.elements)}]"

    def _print_object(self, node: ObjectExpression) -> str:
        if not node.properties:
            return "{}"
        return "{ " + self._print_list(node.properties) + " }"

    def _print_property(self, node: Property) -> str:
        key = self._print_method_key(node.key, node.computed)
        # A rewritten value no longer matches its key
        key_name = getattr(node.key, "name", None)
        if node.shorthand and is_identifier(node.value, key_name):
            return key
        if node.method or node.kind in ("get", "set"):
            prefix = f"{node.kind} " if node.kind in ("get", "set") else ""
            return prefix + key + self._print_method_tail(node.value)
        return f"{key}: {self.print(node.value)}"

    def _print_arrow(self, node: ArrowFunctionExpression) -> str:
        prefix = "async " if node.is_async else ""
        params = f"({self._print_list(node.params)})"
        if isinstance(node.body, BlockStatement):
            body = self._print_block(node.body)
        elif isinstance(node.body, ObjectExpression):
            body = f"({self.print(node.body)})"
        else:
            body = self.print(node.body)
        return f"{prefix}{params} => {body}"

    def _print_unary(self, node: UnaryExpression) -> str:
        if node.operator in _WORD_OPERATORS:
            return f"{node.operator} {self.print(node.argument)}"
        return f"{node.operator}{self.print(node.argument)}"

    def _print_update(self, node: UpdateExpression) -> str:
        if node.prefix:
            return f"{node.operator}{self.print(node.argument)}"
        return f"{self.print(node.argument)}{node.operator}"

    def _print_binary(
        self, node: BinaryExpression | LogicalExpression | AssignmentExpression
    ) -> str:
        return f"{self.print(node.left)} {node.operator} {self.print(node.right)}"

    def _print_conditional(self, node: ConditionalExpression) -> str:
        return (
            f"{self.print(node.test)} ? {self.print(node.consequent)}"
            f" : {self.print(node.alternate)}"
        )

    def _print_call(self, node: CallExpression) -> str:
        optional = "?." if node.optional else ""
        return f"{self._print_callee(node.callee)}{optional}({self._print_list(node.arguments)})"

    def _print_new(self, node: NewExpression) -> str:
        return f"new {self._print_callee(node.callee)}({self._print_list(node.arguments)})"

    def _print_member(self, node: MemberExpression) -> str:
        obj = self.print(node.object)
        if node.computed:
            accessor = "?.[" if node.optional else "["
            return f"{obj}{accessor}{self.print(node.property)}]"
        dot = "?." if node.optional else "."
        return f"{obj}{dot}{self.print(node.property)}"

    def _print_sequence(self, node: SequenceExpression) -> str:
        return self._print_list(node.expressions)


def print_node(node: Node, config: PrinterConfig = PrinterConfig()) -> str:
    """Render *node* as JavaScript source."""
    return JsPrinter(config).print(node)


def same_source(left: Node | None, right: Node | None) -> bool:
    """Equality oracle: do *left* and *right* print to the same text?"""
    if left is None or right is None:
        return left is right
    return print_node(left) == print_node(right)
