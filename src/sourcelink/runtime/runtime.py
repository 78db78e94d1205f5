"""
Runtime

Tree-walking evaluator for Source programs, used to execute linked output.

Rust Pattern: Minimal runtime, errors carry source locations
"""

import logging
import math
from typing import Any, Dict, List, Optional

from ..analysis.module_system.library_registry import LibraryRegistry, default_registry
from ..analysis.module_system.path_resolver import is_local_specifier
from ..shared.ast_visitor import ASTVisitor
from ..shared.errors import SourceLinkSourceError
from ..shared.nodes import (
    ArrowFunctionExpression, BlockStatement, ExportAllDeclaration, ExportDefaultDeclaration,
    ExportNamedDeclaration, ExpressionStatement, FunctionDeclaration, ImportDeclaration,
    ImportDefaultSpecifier, ImportNamespaceSpecifier, Program, Statement,
)
from ..utils.base import ExecutionFlow, StatementResult
from ..utils.config import DEFAULT_EXPORT_LOOKUP_NAME
from .environment import UNDEFINED, Environment, FunctionValue, SourceRuntimeError
from .prelude import build_prelude, stringify

logger = logging.getLogger(__name__)


class ExecutionResult:
    """
    Execution result.

    `value` is the value of the last top-level expression statement,
    `displayed` the lines produced by display().
    """
    def __init__(
        self,
        value: Any = UNDEFINED,
        outputs: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
        displayed: Optional[List[str]] = None,
    ):
        self.value = value
        self.outputs = outputs if outputs is not None else {}
        self.error = error
        self.displayed = displayed if displayed is not None else []

    @property
    def success(self) -> bool:
        """Whether execution succeeded (no error)"""
        return self.error is None


def is_truthy(value: Any) -> bool:
    if value is None or value is UNDEFINED or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equals(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return left is right


def _divide(left: Any, right: Any) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _remainder(left: Any, right: Any) -> Any:
    if right == 0:
        return math.nan
    result = math.fmod(left, right)
    if isinstance(left, int) and isinstance(right, int):
        return int(result)
    return result


_ARITHMETIC = {
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "%": _remainder,
}

_COMPARISON = {
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
}


class SourceRuntime(ASTVisitor[Any]):
    """
    Evaluates a Program.

    Library imports are bound from the registry; a program still importing
    local modules has not been linked and is rejected.
    """

    def __init__(self, registry: Optional[LibraryRegistry] = None):
        self.registry = registry if registry is not None else default_registry()
        self.env: Environment = Environment(name="global")
        self.displayed: List[str] = []

    def execute(self, program: Program) -> ExecutionResult:
        self.displayed = []
        globals_env = Environment(name="global")
        for name, value in build_prelude(self.displayed).items():
            globals_env.define(name, value)
        self.env = globals_env.child("program")
        try:
            value = self.visit_program(program)
        except SourceLinkSourceError as e:
            logger.debug(f"Runtime error: {e}")
            return ExecutionResult(error=e, displayed=list(self.displayed))
        except RecursionError:
            error = SourceRuntimeError("Maximum call stack size exceeded")
            return ExecutionResult(error=error, displayed=list(self.displayed))
        return ExecutionResult(value=value, outputs=self.env.local_values(), displayed=list(self.displayed))

    # Statements
    def visit_program(self, node: Program) -> Any:
        for stmt in node.body:
            if isinstance(stmt, ImportDeclaration):
                self._bind_import(stmt)
        flow = self._run_statements([stmt for stmt in node.body if not isinstance(stmt, ImportDeclaration)])
        return flow.get_value()

    def _bind_import(self, node: ImportDeclaration) -> None:
        source = node.source.value
        if is_local_specifier(source):
            raise SourceRuntimeError(f"Cannot import local module '{source}' in an unlinked program", node.location)
        exports = self.registry.get_library(source).exports
        for spec in node.specifiers:
            if isinstance(spec, ImportNamespaceSpecifier):
                value: Any = dict(exports)
            elif isinstance(spec, ImportDefaultSpecifier):
                value = exports.get(DEFAULT_EXPORT_LOOKUP_NAME, UNDEFINED)
            else:
                value = exports.get(spec.imported.name, UNDEFINED)
            self.env.define(spec.local.name, value, location=spec.location)

    def _run_statements(self, statements: List[Statement]) -> StatementResult:
        # Function declarations are hoisted to the top of their block
        for stmt in statements:
            declaration = self._declared_function(stmt)
            if declaration is not None:
                self.env.define(declaration.id.name, self._make_function(declaration), constant=False,
                                location=declaration.location)
        last: Any = UNDEFINED
        for stmt in statements:
            flow = self._execute_statement(stmt)
            if flow.is_return():
                return flow
            if isinstance(stmt, ExpressionStatement):
                last = flow.get_value()
        return ExecutionFlow.continue_execution(last)

    def _declared_function(self, stmt: Statement) -> Optional[FunctionDeclaration]:
        if isinstance(stmt, FunctionDeclaration):
            return stmt
        if isinstance(stmt, (ExportNamedDeclaration, ExportDefaultDeclaration)):
            declaration = stmt.declaration
            if isinstance(declaration, FunctionDeclaration):
                return declaration
        return None

    def _execute_statement(self, stmt: Statement) -> StatementResult:
        if isinstance(stmt, FunctionDeclaration):
            return ExecutionFlow.continue_execution()
        if isinstance(stmt, ExportNamedDeclaration):
            if stmt.declaration is None or isinstance(stmt.declaration, FunctionDeclaration):
                return ExecutionFlow.continue_execution()
            return stmt.declaration.accept(self)
        if isinstance(stmt, ExportDefaultDeclaration):
            if not isinstance(stmt.declaration, FunctionDeclaration):
                stmt.declaration.accept(self)
            return ExecutionFlow.continue_execution()
        if isinstance(stmt, (ImportDeclaration, ExportAllDeclaration)):
            raise SourceRuntimeError("Import and export declarations are only allowed at the top level", stmt.location)
        return stmt.accept(self)

    def _run_block(self, block: BlockStatement, env: Environment) -> StatementResult:
        saved = self.env
        self.env = env
        try:
            return self._run_statements(block.body)
        finally:
            self.env = saved

    def visit_block_statement(self, node: BlockStatement) -> StatementResult:
        return self._run_block(node, self.env.child())

    def visit_variable_declaration(self, node) -> StatementResult:
        value = node.init.accept(self)
        self.env.define(node.id.name, value, constant=(node.kind == "const"), location=node.id.location)
        return ExecutionFlow.continue_execution()

    def visit_function_declaration(self, node) -> StatementResult:
        return ExecutionFlow.continue_execution()

    def visit_return_statement(self, node) -> StatementResult:
        value = node.argument.accept(self) if node.argument is not None else UNDEFINED
        return ExecutionFlow.return_value(value)

    def visit_if_statement(self, node) -> StatementResult:
        if is_truthy(node.test.accept(self)):
            return node.consequent.accept(self)
        if node.alternate is not None:
            return node.alternate.accept(self)
        return ExecutionFlow.continue_execution()

    def visit_while_statement(self, node) -> StatementResult:
        while is_truthy(node.test.accept(self)):
            flow = node.body.accept(self)
            if flow.is_return():
                return flow
        return ExecutionFlow.continue_execution()

    def visit_expression_statement(self, node) -> StatementResult:
        return ExecutionFlow.continue_execution(node.expression.accept(self))

    # Expressions
    def visit_literal(self, node) -> Any:
        return node.value

    def visit_identifier(self, node) -> Any:
        return self.env.lookup(node.name, node.location)

    def visit_assignment_expression(self, node) -> Any:
        value = node.value.accept(self)
        self.env.assign(node.target.name, value, node.target.location)
        return value

    def visit_conditional_expression(self, node) -> Any:
        if is_truthy(node.test.accept(self)):
            return node.consequent.accept(self)
        return node.alternate.accept(self)

    def visit_logical_expression(self, node) -> Any:
        left = node.left.accept(self)
        if node.operator == "&&":
            return node.right.accept(self) if is_truthy(left) else left
        return left if is_truthy(left) else node.right.accept(self)

    def visit_unary_expression(self, node) -> Any:
        value = node.argument.accept(self)
        if node.operator == "!":
            return not is_truthy(value)
        if not _is_number(value):
            raise SourceRuntimeError(f"Expected number on right hand side of operation, got {stringify(value)}.",
                                     node.location)
        return -value

    def visit_binary_expression(self, node) -> Any:
        left = node.left.accept(self)
        right = node.right.accept(self)
        op = node.operator
        if op == "===":
            return strict_equals(left, right)
        if op == "!==":
            return not strict_equals(left, right)
        if op == "+":
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            self._check_numbers(op, left, right, node)
            return left + right
        if op in _COMPARISON:
            if not (isinstance(left, str) and isinstance(right, str)):
                self._check_numbers(op, left, right, node)
            return _COMPARISON[op](left, right)
        self._check_numbers(op, left, right, node)
        return _ARITHMETIC[op](left, right)

    def _check_numbers(self, op: str, left: Any, right: Any, node) -> None:
        if not _is_number(left):
            raise SourceRuntimeError(f"Expected number on left hand side of operation '{op}', got {stringify(left)}.",
                                     node.location)
        if not _is_number(right):
            raise SourceRuntimeError(f"Expected number on right hand side of operation '{op}', got {stringify(right)}.",
                                     node.location)

    def visit_arrow_function_expression(self, node: ArrowFunctionExpression) -> FunctionValue:
        return FunctionValue(name="anonymous", params=node.params, body=node.body, closure_env=self.env)

    def _make_function(self, node: FunctionDeclaration) -> FunctionValue:
        return FunctionValue(name=node.id.name, params=node.params, body=node.body, closure_env=self.env)

    def visit_call_expression(self, node) -> Any:
        callee = node.callee.accept(self)
        args = [arg.accept(self) for arg in node.arguments]
        if isinstance(callee, FunctionValue):
            return self.call_function(callee, args, node)
        if callable(callee):
            try:
                return callee(*args)
            except SourceRuntimeError as e:
                if e.location is None:
                    e.location = node.location
                raise
            except (TypeError, ValueError, OverflowError) as e:
                raise SourceRuntimeError(f"Error in builtin call: {e}", node.location) from e
        raise SourceRuntimeError(f"Calling non-function value {stringify(callee)}.", node.location)

    def call_function(self, function: FunctionValue, args: List[Any], node=None) -> Any:
        if len(args) != len(function.params):
            raise SourceRuntimeError(
                f"Expected {len(function.params)} arguments, but got {len(args)}.",
                node.location if node is not None else None,
            )
        frame = function.closure_env.child(function.name)
        for param, arg in zip(function.params, args):
            frame.define(param.name, arg, constant=False, location=param.location)
        if not isinstance(function.body, BlockStatement):
            saved = self.env
            self.env = frame
            try:
                return function.body.accept(self)
            finally:
                self.env = saved
        flow = self._run_block(function.body, frame)
        return flow.get_value() if flow.is_return() else UNDEFINED
