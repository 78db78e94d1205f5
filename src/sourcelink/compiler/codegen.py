"""
Source code generation

Prints an AST (typically a linked program) back to Source text.
Parentheses are emitted only where operator precedence requires them.
"""

import json
from typing import List

from ..shared.ast_visitor import ASTVisitor
from ..shared.nodes import (
    ArrowFunctionExpression, AssignmentExpression, ASTNode, BinaryExpression, BlockStatement,
    CallExpression, ConditionalExpression, Expression, FunctionDeclaration, IfStatement,
    ImportDefaultSpecifier, ImportNamespaceSpecifier, LogicalExpression, Statement, UnaryExpression,
)

INDENT = "  "

_BINARY_PRECEDENCE = {
    "||": 3,
    "&&": 4,
    "===": 5, "!==": 5,
    "<": 6, "<=": 6, ">": 6, ">=": 6,
    "+": 7, "-": 7,
    "*": 8, "/": 8, "%": 8,
}
_ASSIGNMENT_PRECEDENCE = 1
_CONDITIONAL_PRECEDENCE = 2
_UNARY_PRECEDENCE = 9
_CALL_PRECEDENCE = 10
_PRIMARY_PRECEDENCE = 11


def precedence(node: Expression) -> int:
    if isinstance(node, (ArrowFunctionExpression, AssignmentExpression)):
        return _ASSIGNMENT_PRECEDENCE
    if isinstance(node, ConditionalExpression):
        return _CONDITIONAL_PRECEDENCE
    if isinstance(node, (BinaryExpression, LogicalExpression)):
        return _BINARY_PRECEDENCE[node.operator]
    if isinstance(node, UnaryExpression):
        return _UNARY_PRECEDENCE
    if isinstance(node, CallExpression):
        return _CALL_PRECEDENCE
    return _PRIMARY_PRECEDENCE


def _indent(text: str) -> str:
    return "\n".join(INDENT + line if line else line for line in text.split("\n"))


class SourceGenerator(ASTVisitor[str]):
    """Visitor producing Source text for every node type"""

    def generate(self, node: ASTNode) -> str:
        return node.accept(self)

    def _wrap(self, node: Expression, min_precedence: int) -> str:
        text = node.accept(self)
        return f"({text})" if precedence(node) < min_precedence else text

    def _block(self, statements: List[Statement]) -> str:
        if not statements:
            return "{}"
        inner = "\n".join(stmt.accept(self) for stmt in statements)
        return "{\n" + _indent(inner) + "\n}"

    # Expressions
    def visit_literal(self, node) -> str:
        value = node.value
        if value is None:
            return "null"
        if value is True:
            return "true"
        if value is False:
            return "false"
        if isinstance(value, str):
            return json.dumps(value)
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return repr(value)

    def visit_identifier(self, node) -> str:
        return node.name

    def visit_call_expression(self, node) -> str:
        callee = self._wrap(node.callee, _CALL_PRECEDENCE)
        args = ", ".join(self._wrap(arg, _ASSIGNMENT_PRECEDENCE) for arg in node.arguments)
        return f"{callee}({args})"

    def visit_binary_expression(self, node) -> str:
        op_precedence = _BINARY_PRECEDENCE[node.operator]
        left = self._wrap(node.left, op_precedence)
        right = self._wrap(node.right, op_precedence + 1)
        return f"{left} {node.operator} {right}"

    visit_logical_expression = visit_binary_expression

    def visit_unary_expression(self, node) -> str:
        argument = self._wrap(node.argument, _UNARY_PRECEDENCE)
        if isinstance(node.argument, UnaryExpression) and node.argument.operator == node.operator == "-":
            argument = f"({argument})"
        return f"{node.operator}{argument}"

    def visit_conditional_expression(self, node) -> str:
        test = self._wrap(node.test, _CONDITIONAL_PRECEDENCE + 1)
        consequent = self._wrap(node.consequent, _ASSIGNMENT_PRECEDENCE)
        alternate = self._wrap(node.alternate, _ASSIGNMENT_PRECEDENCE)
        return f"{test} ? {consequent} : {alternate}"

    def visit_arrow_function_expression(self, node) -> str:
        if len(node.params) == 1:
            params = node.params[0].name
        else:
            params = "(" + ", ".join(p.name for p in node.params) + ")"
        if isinstance(node.body, BlockStatement):
            body = self._block(node.body.body)
        else:
            body = self._wrap(node.body, _ASSIGNMENT_PRECEDENCE)
        return f"{params} => {body}"

    def visit_assignment_expression(self, node) -> str:
        return f"{node.target.name} = {self._wrap(node.value, _ASSIGNMENT_PRECEDENCE)}"

    # Statements
    def visit_program(self, node) -> str:
        return "\n".join(stmt.accept(self) for stmt in node.body)

    def visit_variable_declaration(self, node) -> str:
        return f"{node.kind} {node.id.name} = {self._wrap(node.init, _ASSIGNMENT_PRECEDENCE)};"

    def visit_function_declaration(self, node) -> str:
        params = ", ".join(p.name for p in node.params)
        return f"function {node.id.name}({params}) {self._block(node.body.body)}"

    def visit_block_statement(self, node) -> str:
        return self._block(node.body)

    def visit_return_statement(self, node) -> str:
        if node.argument is None:
            return "return;"
        return f"return {node.argument.accept(self)};"

    def visit_if_statement(self, node) -> str:
        text = f"if ({node.test.accept(self)}) {self._block(node.consequent.body)}"
        if isinstance(node.alternate, IfStatement):
            text += f" else {node.alternate.accept(self)}"
        elif node.alternate is not None:
            text += f" else {self._block(node.alternate.body)}"
        return text

    def visit_while_statement(self, node) -> str:
        return f"while ({node.test.accept(self)}) {self._block(node.body.body)}"

    def visit_expression_statement(self, node) -> str:
        return f"{node.expression.accept(self)};"

    # Module declarations
    def visit_import_declaration(self, node) -> str:
        source = json.dumps(node.source.value)
        if not node.specifiers:
            return f"import {source};"
        clauses: List[str] = []
        named: List[str] = []
        for spec in node.specifiers:
            if isinstance(spec, ImportDefaultSpecifier):
                clauses.append(spec.local.name)
            elif isinstance(spec, ImportNamespaceSpecifier):
                clauses.append(f"* as {spec.local.name}")
            else:
                named.append(spec.accept(self))
        if named:
            clauses.append("{ " + ", ".join(named) + " }")
        return f"import {', '.join(clauses)} from {source};"

    def visit_import_specifier(self, node) -> str:
        if node.imported.name == node.local.name:
            return node.local.name
        return f"{node.imported.name} as {node.local.name}"

    def visit_export_named_declaration(self, node) -> str:
        if node.declaration is not None:
            return f"export {node.declaration.accept(self)}"
        specifiers = "{ " + ", ".join(spec.accept(self) for spec in node.specifiers) + " }"
        if not node.specifiers:
            specifiers = "{}"
        if node.source is not None:
            return f"export {specifiers} from {json.dumps(node.source.value)};"
        return f"export {specifiers};"

    def visit_export_specifier(self, node) -> str:
        if node.local.name == node.exported.name:
            return node.local.name
        return f"{node.local.name} as {node.exported.name}"

    def visit_export_default_declaration(self, node) -> str:
        if isinstance(node.declaration, FunctionDeclaration):
            return f"export default {node.declaration.accept(self)}"
        return f"export default {self._wrap(node.declaration, _ASSIGNMENT_PRECEDENCE)};"

    def visit_export_all_declaration(self, node) -> str:
        source = json.dumps(node.source.value)
        if node.exported is not None:
            return f"export * as {node.exported.name} from {source};"
        return f"export * from {source};"


def generate(node: ASTNode) -> str:
    """Source text for `node`"""
    return SourceGenerator().generate(node)
