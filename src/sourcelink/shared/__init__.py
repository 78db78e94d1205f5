"""
Shared components: AST nodes, source spans and diagnostics.
"""

from .source_location import SourceLocation, UNKNOWN_LOCATION
from .errors import (
    Error, ErrorReporter, Label,
    SourceLinkError, SourceLinkSourceError, SourceLinkImplementationError,
)
from .nodes import (
    ASTNode, Expression, Statement, ModuleDeclaration, NodeType, Program,
    ImportDeclaration, ImportSpecifier, ImportDefaultSpecifier, ImportNamespaceSpecifier,
    ExportNamedDeclaration, ExportSpecifier, ExportDefaultDeclaration, ExportAllDeclaration,
    VariableDeclaration, FunctionDeclaration, ReturnStatement, IfStatement, WhileStatement,
    BlockStatement, ExpressionStatement,
    Identifier, Literal, CallExpression, BinaryExpression, LogicalExpression,
    UnaryExpression, ConditionalExpression, ArrowFunctionExpression, AssignmentExpression,
    is_module_declaration_with_source, get_module_declaration_source,
)
from .ast_visitor import ASTVisitor
