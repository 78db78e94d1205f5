"""
Source AST (Abstract Syntax Tree) Definitions

Node names follow ESTree, since Source is a JavaScript subset.

Visitor Pattern Support:
- All AST nodes have accept() methods for polymorphic dispatch
- Equality compares the annotated fields only, so two trees parsed from
  differently laid out text compare equal (locations are ignored)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Union, TYPE_CHECKING, TypeVar

from .source_location import SourceLocation

if TYPE_CHECKING:
    from .ast_visitor import ASTVisitor

T = TypeVar('T')


class NodeType(Enum):
    """AST node types"""
    PROGRAM = "Program"
    IMPORT_DECL = "ImportDeclaration"
    IMPORT_SPECIFIER = "ImportSpecifier"
    IMPORT_DEFAULT_SPECIFIER = "ImportDefaultSpecifier"
    IMPORT_NAMESPACE_SPECIFIER = "ImportNamespaceSpecifier"
    EXPORT_NAMED_DECL = "ExportNamedDeclaration"
    EXPORT_SPECIFIER = "ExportSpecifier"
    EXPORT_DEFAULT_DECL = "ExportDefaultDeclaration"
    EXPORT_ALL_DECL = "ExportAllDeclaration"
    VARIABLE_DECL = "VariableDeclaration"
    FUNCTION_DECL = "FunctionDeclaration"
    RETURN_STMT = "ReturnStatement"
    IF_STMT = "IfStatement"
    WHILE_STMT = "WhileStatement"
    BLOCK_STMT = "BlockStatement"
    EXPR_STMT = "ExpressionStatement"
    IDENTIFIER = "Identifier"
    LITERAL = "Literal"
    CALL_EXPR = "CallExpression"
    BINARY_EXPR = "BinaryExpression"
    LOGICAL_EXPR = "LogicalExpression"
    UNARY_EXPR = "UnaryExpression"
    CONDITIONAL_EXPR = "ConditionalExpression"
    ARROW_FUNCTION = "ArrowFunctionExpression"
    ASSIGNMENT_EXPR = "AssignmentExpression"


class ASTNode:
    """
    Base class for all AST nodes

    Visitor Pattern Support (LLVM-style):
    - Subclasses implement accept() to call the matching visit_* method
    """
    __slots__ = ('node_type', 'location')

    def __init__(self, node_type: NodeType, location: Optional[SourceLocation] = None):
        self.node_type = node_type
        self.location = location

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")


class Expression(ASTNode):
    """Base class for expressions"""
    __slots__ = ()


class Statement(ASTNode):
    """Base class for statements"""
    __slots__ = ()


class ModuleDeclaration(Statement):
    """Base class for import/export declarations (only valid at the top level)"""
    __slots__ = ()


# =============================================================================
# Expressions
# =============================================================================

@dataclass
class Identifier(Expression):
    name: str

    def __init__(self, name: str, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IDENTIFIER, location)
        self.name = name

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_identifier(self)


@dataclass
class Literal(Expression):
    """Number, string, boolean or null literal (null is value None)"""
    value: Union[int, float, str, bool, None]

    def __init__(self, value: Union[int, float, str, bool, None], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.LITERAL, location)
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_literal(self)


@dataclass
class CallExpression(Expression):
    callee: Expression
    arguments: List[Expression]

    def __init__(self, callee: Expression, arguments: List[Expression], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.CALL_EXPR, location)
        self.callee = callee
        self.arguments = arguments

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_call_expression(self)


@dataclass
class BinaryExpression(Expression):
    operator: str
    left: Expression
    right: Expression

    def __init__(self, operator: str, left: Expression, right: Expression, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.BINARY_EXPR, location)
        self.operator = operator
        self.left = left
        self.right = right

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_binary_expression(self)


@dataclass
class LogicalExpression(Expression):
    """'&&' / '||' with short-circuit evaluation"""
    operator: str
    left: Expression
    right: Expression

    def __init__(self, operator: str, left: Expression, right: Expression, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.LOGICAL_EXPR, location)
        self.operator = operator
        self.left = left
        self.right = right

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_logical_expression(self)


@dataclass
class UnaryExpression(Expression):
    operator: str
    argument: Expression

    def __init__(self, operator: str, argument: Expression, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.UNARY_EXPR, location)
        self.operator = operator
        self.argument = argument

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_unary_expression(self)


@dataclass
class ConditionalExpression(Expression):
    test: Expression
    consequent: Expression
    alternate: Expression

    def __init__(self, test: Expression, consequent: Expression, alternate: Expression,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.CONDITIONAL_EXPR, location)
        self.test = test
        self.consequent = consequent
        self.alternate = alternate

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_conditional_expression(self)


@dataclass
class ArrowFunctionExpression(Expression):
    """x => expr, (a, b) => { ... }; body is a BlockStatement or an Expression"""
    params: List[Identifier]
    body: Union['BlockStatement', Expression]

    def __init__(self, params: List[Identifier], body: Union['BlockStatement', Expression],
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.ARROW_FUNCTION, location)
        self.params = params
        self.body = body

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_arrow_function_expression(self)


@dataclass
class AssignmentExpression(Expression):
    target: Identifier
    value: Expression

    def __init__(self, target: Identifier, value: Expression, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.ASSIGNMENT_EXPR, location)
        self.target = target
        self.value = value

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_assignment_expression(self)


# =============================================================================
# Statements
# =============================================================================

@dataclass
class Program(ASTNode):
    """Program root node"""
    body: List[Statement]

    def __init__(self, body: List[Statement], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.PROGRAM, location)
        self.body = body

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_program(self)


@dataclass
class VariableDeclaration(Statement):
    """const/let with exactly one declarator"""
    kind: str
    id: Identifier
    init: Expression

    def __init__(self, kind: str, id: Identifier, init: Expression, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.VARIABLE_DECL, location)
        self.kind = kind
        self.id = id
        self.init = init

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_variable_declaration(self)


@dataclass
class BlockStatement(Statement):
    body: List[Statement]

    def __init__(self, body: List[Statement], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.BLOCK_STMT, location)
        self.body = body

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_block_statement(self)


@dataclass
class FunctionDeclaration(Statement):
    id: Identifier
    params: List[Identifier]
    body: BlockStatement

    def __init__(self, id: Identifier, params: List[Identifier], body: BlockStatement,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.FUNCTION_DECL, location)
        self.id = id
        self.params = params
        self.body = body

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_function_declaration(self)


@dataclass
class ReturnStatement(Statement):
    argument: Optional[Expression]

    def __init__(self, argument: Optional[Expression] = None, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.RETURN_STMT, location)
        self.argument = argument

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_return_statement(self)


@dataclass
class IfStatement(Statement):
    test: Expression
    consequent: BlockStatement
    alternate: Optional[Statement]

    def __init__(self, test: Expression, consequent: BlockStatement, alternate: Optional[Statement] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IF_STMT, location)
        self.test = test
        self.consequent = consequent
        self.alternate = alternate

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_if_statement(self)


@dataclass
class WhileStatement(Statement):
    test: Expression
    body: BlockStatement

    def __init__(self, test: Expression, body: BlockStatement, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.WHILE_STMT, location)
        self.test = test
        self.body = body

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_while_statement(self)


@dataclass
class ExpressionStatement(Statement):
    """Expression used as a statement (evaluates expression, value kept as program result)"""
    expression: Expression

    def __init__(self, expression: Expression, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.EXPR_STMT, location or expression.location)
        self.expression = expression

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_expression_statement(self)


# =============================================================================
# Module declarations
# =============================================================================

@dataclass
class ImportSpecifier(ASTNode):
    """import { imported as local } from "..." """
    imported: Identifier
    local: Identifier

    def __init__(self, imported: Identifier, local: Identifier, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IMPORT_SPECIFIER, location)
        self.imported = imported
        self.local = local

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_import_specifier(self)


@dataclass
class ImportDefaultSpecifier(ASTNode):
    local: Identifier

    def __init__(self, local: Identifier, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IMPORT_DEFAULT_SPECIFIER, location)
        self.local = local

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_import_default_specifier(self)


@dataclass
class ImportNamespaceSpecifier(ASTNode):
    local: Identifier

    def __init__(self, local: Identifier, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IMPORT_NAMESPACE_SPECIFIER, location)
        self.local = local

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_import_namespace_specifier(self)


AnyImportSpecifier = Union[ImportSpecifier, ImportDefaultSpecifier, ImportNamespaceSpecifier]


@dataclass
class ImportDeclaration(ModuleDeclaration):
    specifiers: List[AnyImportSpecifier]
    source: Literal

    def __init__(self, specifiers: List[AnyImportSpecifier], source: Literal,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.IMPORT_DECL, location)
        self.specifiers = specifiers
        self.source = source

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_import_declaration(self)


@dataclass
class ExportSpecifier(ASTNode):
    """export { local as exported }"""
    local: Identifier
    exported: Identifier

    def __init__(self, local: Identifier, exported: Identifier, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.EXPORT_SPECIFIER, location)
        self.local = local
        self.exported = exported

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_export_specifier(self)


@dataclass
class ExportNamedDeclaration(ModuleDeclaration):
    """
    Either `export <declaration>`, `export { a, b as c }` or
    `export { a, b as c } from "..."` (re-export, source is set).
    """
    declaration: Optional[Union[VariableDeclaration, FunctionDeclaration]]
    specifiers: List[ExportSpecifier]
    source: Optional[Literal]

    def __init__(self, declaration: Optional[Union[VariableDeclaration, FunctionDeclaration]] = None,
                 specifiers: Optional[List[ExportSpecifier]] = None, source: Optional[Literal] = None,
                 location: Optional[SourceLocation] = None):
        super().__init__(NodeType.EXPORT_NAMED_DECL, location)
        self.declaration = declaration
        self.specifiers = specifiers if specifiers is not None else []
        self.source = source

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_export_named_declaration(self)


@dataclass
class ExportDefaultDeclaration(ModuleDeclaration):
    declaration: Union[FunctionDeclaration, Expression]

    def __init__(self, declaration: Union[FunctionDeclaration, Expression], location: Optional[SourceLocation] = None):
        super().__init__(NodeType.EXPORT_DEFAULT_DECL, location)
        self.declaration = declaration

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_export_default_declaration(self)


@dataclass
class ExportAllDeclaration(ModuleDeclaration):
    """export * from "..." or export * as name from "..." """
    source: Literal
    exported: Optional[Identifier]

    def __init__(self, source: Literal, exported: Optional[Identifier] = None, location: Optional[SourceLocation] = None):
        super().__init__(NodeType.EXPORT_ALL_DECL, location)
        self.source = source
        self.exported = exported

    def accept(self, visitor: 'ASTVisitor[T]') -> 'T':
        return visitor.visit_export_all_declaration(self)


ModuleDeclarationWithSource = Union[ImportDeclaration, ExportNamedDeclaration, ExportAllDeclaration]


def get_module_declaration_source(node: ModuleDeclaration) -> Optional[str]:
    """Source string of an import/re-export declaration, None for other declarations"""
    source = getattr(node, "source", None)
    if source is None:
        return None
    return source.value


def is_module_declaration_with_source(node: Any) -> bool:
    return isinstance(node, (ImportDeclaration, ExportAllDeclaration)) or (
        isinstance(node, ExportNamedDeclaration) and node.source is not None
    )
