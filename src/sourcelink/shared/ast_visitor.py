"""
AST Visitor Pattern

Design:
- Abstract base class with visit_* methods for each AST node type
- Default traversal for non-leaf nodes (children are visited automatically)
- Leaf nodes (Literal, Identifier) must be implemented by subclasses
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .nodes import Identifier, Literal

T = TypeVar('T')


class ASTVisitor(ABC, Generic[T]):
    """
    Base AST visitor with default traversal for all nodes.

    Usage:
        class Printer(ASTVisitor[str]):
            def visit_literal(self, node) -> str:
                return repr(node.value)

            def visit_identifier(self, node) -> str:
                return node.name
    """

    # Leaf nodes - NO DEFAULT IMPLEMENTATION
    @abstractmethod
    def visit_literal(self, node: 'Literal') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_literal()")

    @abstractmethod
    def visit_identifier(self, node: 'Identifier') -> T:
        raise NotImplementedError(f"{self.__class__.__name__} must implement visit_identifier()")

    # Expressions with children
    def visit_call_expression(self, node) -> T:
        node.callee.accept(self)
        for arg in node.arguments:
            arg.accept(self)

    def visit_binary_expression(self, node) -> T:
        node.left.accept(self)
        node.right.accept(self)

    def visit_logical_expression(self, node) -> T:
        node.left.accept(self)
        node.right.accept(self)

    def visit_unary_expression(self, node) -> T:
        node.argument.accept(self)

    def visit_conditional_expression(self, node) -> T:
        node.test.accept(self)
        node.consequent.accept(self)
        node.alternate.accept(self)

    def visit_arrow_function_expression(self, node) -> T:
        node.body.accept(self)

    def visit_assignment_expression(self, node) -> T:
        node.target.accept(self)
        node.value.accept(self)

    # Statements
    def visit_program(self, node) -> T:
        for stmt in node.body:
            stmt.accept(self)

    def visit_variable_declaration(self, node) -> T:
        node.init.accept(self)

    def visit_function_declaration(self, node) -> T:
        node.body.accept(self)

    def visit_block_statement(self, node) -> T:
        for stmt in node.body:
            stmt.accept(self)

    def visit_return_statement(self, node) -> T:
        if node.argument is not None:
            node.argument.accept(self)

    def visit_if_statement(self, node) -> T:
        node.test.accept(self)
        node.consequent.accept(self)
        if node.alternate is not None:
            node.alternate.accept(self)

    def visit_while_statement(self, node) -> T:
        node.test.accept(self)
        node.body.accept(self)

    def visit_expression_statement(self, node) -> T:
        node.expression.accept(self)

    # Module declarations
    def visit_import_declaration(self, node) -> T:
        for spec in node.specifiers:
            spec.accept(self)

    def visit_import_specifier(self, node) -> T:
        pass

    def visit_import_default_specifier(self, node) -> T:
        pass

    def visit_import_namespace_specifier(self, node) -> T:
        pass

    def visit_export_named_declaration(self, node) -> T:
        if node.declaration is not None:
            node.declaration.accept(self)
        for spec in node.specifiers:
            spec.accept(self)

    def visit_export_specifier(self, node) -> T:
        pass

    def visit_export_default_declaration(self, node) -> T:
        node.declaration.accept(self)

    def visit_export_all_declaration(self, node) -> T:
        pass
