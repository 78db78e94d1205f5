"""
Runtime for linked Source programs
"""

from .environment import UNDEFINED, Environment, FunctionValue, SourceRuntimeError
from .prelude import access_export, access_named_export, build_prelude, stringify
from .runtime import ExecutionResult, SourceRuntime, is_truthy, strict_equals

__all__ = [
    "UNDEFINED",
    "Environment",
    "FunctionValue",
    "SourceRuntimeError",
    "access_export",
    "access_named_export",
    "build_prelude",
    "stringify",
    "ExecutionResult",
    "SourceRuntime",
    "is_truthy",
    "strict_equals",
]
