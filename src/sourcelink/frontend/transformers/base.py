"""
Source AST Transformer
Converts Lark parse tree to Source AST nodes
"""

import logging
from typing import Any, List, Optional, Union

from lark import Transformer, v_args
from lark.lexer import Token
from typing_extensions import TypeAlias

from ...shared.nodes import (
    AnyImportSpecifier, ASTNode, AssignmentExpression, BlockStatement, CallExpression,
    ConditionalExpression, ExportAllDeclaration, ExportDefaultDeclaration,
    ExportNamedDeclaration, ExportSpecifier, Expression, ExpressionStatement,
    FunctionDeclaration, Identifier, IfStatement, ImportDeclaration,
    ImportDefaultSpecifier, ImportNamespaceSpecifier, ImportSpecifier, Literal,
    Program, ReturnStatement, Statement, VariableDeclaration, WhileStatement,
)
from ...shared.source_location import SourceLocation
from ...utils.config import DEFAULT_EXPORT_LOOKUP_NAME
from .expressions import ArrowFunctionParser, BinaryExpressionParser, ParenGroup
from .literals import LiteralParser

# Lark Meta object contains location information
LarkMeta: TypeAlias = Union[None, object]
Declaration: TypeAlias = Union[VariableDeclaration, FunctionDeclaration]

logger: logging.Logger = logging.getLogger(__name__)


@v_args(inline=True, meta=True)
class SourceTransformer(Transformer):
    """
    Source AST Transformer

    One method per grammar rule (or alias); tokens that the grammar keeps
    (NAME, STRING, NUMBER and the operator terminals) arrive as lark Tokens.
    """

    def __init__(self) -> None:
        super().__init__()
        self.expression_parser = BinaryExpressionParser(self._extract_location)
        self.arrow_parser = ArrowFunctionParser(self._extract_location)
        self.current_file: str = ""  # Must be set by parser before use

    def _extract_location(self, meta: LarkMeta) -> SourceLocation:
        """Extract location from Lark meta object"""
        # Fast fail: current_file must be set by parser
        if not self.current_file:
            raise RuntimeError(
                "Parser bug: current_file not set. "
                "Parser must set current_file before transforming."
            )
        if meta is None or getattr(meta, "empty", True):
            return SourceLocation(file=self.current_file, line=0, column=0)
        return SourceLocation(
            file=self.current_file,
            line=meta.line,
            column=meta.column,
            end_line=getattr(meta, "end_line", 0) or 0,
            end_column=getattr(meta, "end_column", 0) or 0,
        )

    def _token_location(self, token: Token) -> SourceLocation:
        return SourceLocation(
            file=self.current_file,
            line=token.line or 0,
            column=token.column or 0,
            end_line=token.end_line or 0,
            end_column=token.end_column or 0,
        )

    def _name(self, token: Token) -> Identifier:
        return Identifier(name=str(token), location=self._token_location(token))

    def _default_name(self, meta: LarkMeta) -> Identifier:
        return Identifier(name=DEFAULT_EXPORT_LOOKUP_NAME, location=self._extract_location(meta))

    def _source(self, token: Token) -> Literal:
        return LiteralParser.parse_string(token, self._token_location(token))

    # =========================================================================
    # PROGRAM STRUCTURE
    # =========================================================================

    def program(self, meta: LarkMeta, *statements: Statement) -> Program:
        location = self._extract_location(meta)
        logger.debug(f"Parsed {self.current_file}: {len(statements)} top-level statements")
        return Program(body=list(statements), location=location)

    # =========================================================================
    # IMPORTS
    # =========================================================================

    def import_decl(self, meta: LarkMeta, *args: Any) -> ImportDeclaration:
        """Grammar: "import" _import_clause "from" STRING ";" (clause parts are spliced in)"""
        *clause, source = args
        specifiers: List[AnyImportSpecifier] = []
        for part in clause:
            if isinstance(part, list):
                specifiers.extend(part)
            else:
                specifiers.append(part)
        return ImportDeclaration(specifiers=specifiers, source=self._source(source),
                                 location=self._extract_location(meta))

    def import_side_effect(self, meta: LarkMeta, source: Token) -> ImportDeclaration:
        return ImportDeclaration(specifiers=[], source=self._source(source), location=self._extract_location(meta))

    def import_default(self, meta: LarkMeta, name: Token) -> ImportDefaultSpecifier:
        return ImportDefaultSpecifier(local=self._name(name), location=self._extract_location(meta))

    def import_namespace(self, meta: LarkMeta, star: Token, name: Token) -> ImportNamespaceSpecifier:
        return ImportNamespaceSpecifier(local=self._name(name), location=self._extract_location(meta))

    def named_imports(self, meta: LarkMeta, *specifiers: ImportSpecifier) -> List[ImportSpecifier]:
        return list(specifiers)

    def import_named(self, meta: LarkMeta, name: Token) -> ImportSpecifier:
        return ImportSpecifier(imported=self._name(name), local=self._name(name),
                               location=self._extract_location(meta))

    def import_named_as(self, meta: LarkMeta, imported: Token, local: Token) -> ImportSpecifier:
        return ImportSpecifier(imported=self._name(imported), local=self._name(local),
                               location=self._extract_location(meta))

    def import_default_as(self, meta: LarkMeta, local: Token) -> ImportSpecifier:
        """import { default as x } from "..." """
        return ImportSpecifier(imported=self._default_name(meta), local=self._name(local),
                               location=self._extract_location(meta))

    # =========================================================================
    # EXPORTS
    # =========================================================================

    def export_declaration(self, meta: LarkMeta, declaration: Declaration) -> ExportNamedDeclaration:
        return ExportNamedDeclaration(declaration=declaration, location=self._extract_location(meta))

    def export_default_function(self, meta: LarkMeta, declaration: FunctionDeclaration) -> ExportDefaultDeclaration:
        return ExportDefaultDeclaration(declaration=declaration, location=self._extract_location(meta))

    def export_default_expr(self, meta: LarkMeta, expression: Expression) -> ExportDefaultDeclaration:
        return ExportDefaultDeclaration(declaration=expression, location=self._extract_location(meta))

    def export_list_decl(self, meta: LarkMeta, specifiers: List[ExportSpecifier]) -> ExportNamedDeclaration:
        return ExportNamedDeclaration(specifiers=specifiers, location=self._extract_location(meta))

    def export_from(self, meta: LarkMeta, specifiers: List[ExportSpecifier], source: Token) -> ExportNamedDeclaration:
        return ExportNamedDeclaration(specifiers=specifiers, source=self._source(source),
                                      location=self._extract_location(meta))

    def export_all(self, meta: LarkMeta, star: Token, source: Token) -> ExportAllDeclaration:
        return ExportAllDeclaration(source=self._source(source), location=self._extract_location(meta))

    def export_all_as(self, meta: LarkMeta, star: Token, name: Token, source: Token) -> ExportAllDeclaration:
        return ExportAllDeclaration(source=self._source(source), exported=self._name(name),
                                    location=self._extract_location(meta))

    def export_list(self, meta: LarkMeta, *specifiers: ExportSpecifier) -> List[ExportSpecifier]:
        return list(specifiers)

    def export_named(self, meta: LarkMeta, name: Token) -> ExportSpecifier:
        return ExportSpecifier(local=self._name(name), exported=self._name(name),
                               location=self._extract_location(meta))

    def export_named_as(self, meta: LarkMeta, local: Token, exported: Token) -> ExportSpecifier:
        return ExportSpecifier(local=self._name(local), exported=self._name(exported),
                               location=self._extract_location(meta))

    def export_as_default(self, meta: LarkMeta, local: Token) -> ExportSpecifier:
        """export { x as default }"""
        return ExportSpecifier(local=self._name(local), exported=self._default_name(meta),
                               location=self._extract_location(meta))

    def export_default_as(self, meta: LarkMeta, exported: Token) -> ExportSpecifier:
        """export { default as x } from "..." """
        return ExportSpecifier(local=self._default_name(meta), exported=self._name(exported),
                               location=self._extract_location(meta))

    # =========================================================================
    # DECLARATIONS AND STATEMENTS
    # =========================================================================

    def const_decl(self, meta: LarkMeta, name: Token, init: Expression) -> VariableDeclaration:
        return VariableDeclaration(kind="const", id=self._name(name), init=init, location=self._extract_location(meta))

    def let_decl(self, meta: LarkMeta, name: Token, init: Expression) -> VariableDeclaration:
        return VariableDeclaration(kind="let", id=self._name(name), init=init, location=self._extract_location(meta))

    def function_decl(self, meta: LarkMeta, name: Token, *args: Any) -> FunctionDeclaration:
        """Grammar: "function" NAME "(" [params] ")" block"""
        if len(args) == 2:
            params, body = args
        else:
            params, body = [], args[0]
        return FunctionDeclaration(id=self._name(name), params=params, body=body,
                                   location=self._extract_location(meta))

    def params(self, meta: LarkMeta, *names: Token) -> List[Identifier]:
        return [self._name(n) for n in names]

    def return_stmt(self, meta: LarkMeta, argument: Optional[Expression] = None) -> ReturnStatement:
        return ReturnStatement(argument=argument, location=self._extract_location(meta))

    def if_stmt(self, meta: LarkMeta, test: Expression, consequent: BlockStatement,
                alternate: Optional[Statement] = None) -> IfStatement:
        return IfStatement(test=test, consequent=consequent, alternate=alternate,
                           location=self._extract_location(meta))

    def while_stmt(self, meta: LarkMeta, test: Expression, body: BlockStatement) -> WhileStatement:
        return WhileStatement(test=test, body=body, location=self._extract_location(meta))

    def block(self, meta: LarkMeta, *statements: Statement) -> BlockStatement:
        return BlockStatement(body=list(statements), location=self._extract_location(meta))

    def expr_stmt(self, meta: LarkMeta, expression: Expression) -> ExpressionStatement:
        return ExpressionStatement(expression=expression, location=self._extract_location(meta))

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def assign(self, meta: LarkMeta, name: Token, value: Expression) -> AssignmentExpression:
        return AssignmentExpression(target=self._name(name), value=value, location=self._extract_location(meta))

    def arrow_single(self, meta: LarkMeta, param: Token, body: ASTNode):
        return self.arrow_parser.parse_single(meta, self._name(param), body)

    def arrow_params(self, meta: LarkMeta, group: ParenGroup, body: ASTNode):
        return self.arrow_parser.parse_group(meta, group, body)

    def cond_expr(self, meta: LarkMeta, test: Expression, consequent: Expression,
                  alternate: Expression) -> ConditionalExpression:
        return ConditionalExpression(test=test, consequent=consequent, alternate=alternate,
                                     location=self._extract_location(meta))

    def logical(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression):
        return self.expression_parser.parse_logical(meta, left, operator, right)

    def binary(self, meta: LarkMeta, left: Expression, operator: Token, right: Expression):
        return self.expression_parser.parse_binary(meta, left, operator, right)

    def unary_expr(self, meta: LarkMeta, operator: Token, argument: Expression):
        return self.expression_parser.parse_unary(meta, operator, argument)

    def call_expr(self, meta: LarkMeta, callee: Expression, arguments: Optional[List[Expression]] = None) -> CallExpression:
        return CallExpression(callee=callee, arguments=arguments or [], location=self._extract_location(meta))

    def args(self, meta: LarkMeta, *arguments: Expression) -> List[Expression]:
        return list(arguments)

    def paren_group(self, meta: LarkMeta, *items: Expression) -> ParenGroup:
        return ParenGroup(items=list(items), location=self._extract_location(meta))

    def paren_expr(self, meta: LarkMeta, group: ParenGroup) -> Expression:
        """A parenthesized expression: exactly one item and not followed by '=>'"""
        if len(group.items) != 1:
            from ..parser import ParseError
            raise ParseError("Expected a single expression inside parentheses", group.location)
        return group.items[0]

    # =========================================================================
    # LITERALS
    # =========================================================================

    def number(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse_number(token, self._token_location(token))

    def string(self, meta: LarkMeta, token: Token) -> Literal:
        return LiteralParser.parse_string(token, self._token_location(token))

    def true_literal(self, meta: LarkMeta) -> Literal:
        return Literal(value=True, location=self._extract_location(meta))

    def false_literal(self, meta: LarkMeta) -> Literal:
        return Literal(value=False, location=self._extract_location(meta))

    def null_literal(self, meta: LarkMeta) -> Literal:
        return Literal(value=None, location=self._extract_location(meta))

    def identifier(self, meta: LarkMeta, token: Token) -> Identifier:
        return self._name(token)
