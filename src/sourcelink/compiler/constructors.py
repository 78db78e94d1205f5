"""
AST constructors for linker-generated code.
Synthesized nodes carry no source location.
"""

from typing import List, Optional, Sequence

from ..shared.nodes import (
    BlockStatement, CallExpression, Expression, FunctionDeclaration, Identifier,
    ImportDeclaration, ImportDefaultSpecifier, ImportNamespaceSpecifier, ImportSpecifier,
    Literal, ReturnStatement, Statement, VariableDeclaration,
)
from ..utils.config import ACCESS_EXPORT_FUNCTION_NAME, LIST_FUNCTION_NAME, PAIR_FUNCTION_NAME


def create_call(callee: str, arguments: Sequence[Expression]) -> CallExpression:
    return CallExpression(callee=Identifier(callee), arguments=list(arguments))


def create_const(name: str, init: Expression) -> VariableDeclaration:
    return VariableDeclaration(kind="const", id=Identifier(name), init=init)


def create_pair_call(head: Expression, tail: Expression) -> CallExpression:
    """pair(head, tail)"""
    return create_call(PAIR_FUNCTION_NAME, [head, tail])


def create_list_call(elements: Sequence[Expression]) -> CallExpression:
    """list(e1, e2, ...)"""
    return create_call(LIST_FUNCTION_NAME, elements)


def create_access_export_call(result_variable: str, lookup_name: str) -> CallExpression:
    """__access_export__(result_variable, "lookup_name")"""
    return create_call(ACCESS_EXPORT_FUNCTION_NAME, [Identifier(result_variable), Literal(lookup_name)])


def create_imported_name_declaration(result_variable: str, local_name: str, lookup_name: str) -> VariableDeclaration:
    """const local_name = __access_export__(result_variable, "lookup_name");"""
    return create_const(local_name, create_access_export_call(result_variable, lookup_name))


def create_invoked_function_result_declaration(function_name: str, variable_name: str,
                                               arguments: Sequence[str]) -> VariableDeclaration:
    """const variable_name = function_name(arg1, arg2, ...);"""
    return create_const(variable_name, create_call(function_name, [Identifier(a) for a in arguments]))


def create_function_declaration(name: str, params: Sequence[str], body: List[Statement]) -> FunctionDeclaration:
    return FunctionDeclaration(
        id=Identifier(name),
        params=[Identifier(p) for p in params],
        body=BlockStatement(body=body),
    )


def create_return(argument: Optional[Expression]) -> ReturnStatement:
    return ReturnStatement(argument=argument)


def create_import_declaration(source: str, specifiers) -> ImportDeclaration:
    return ImportDeclaration(specifiers=list(specifiers), source=Literal(source))


def create_import_specifier(imported: str, local: str) -> ImportSpecifier:
    return ImportSpecifier(imported=Identifier(imported), local=Identifier(local))


def create_import_default_specifier(local: str) -> ImportDefaultSpecifier:
    return ImportDefaultSpecifier(local=Identifier(local))


def create_import_namespace_specifier(local: str) -> ImportNamespaceSpecifier:
    return ImportNamespaceSpecifier(local=Identifier(local))
