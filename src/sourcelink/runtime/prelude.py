"""
Source prelude: list primitives, display/error, and the export accessors
used by linked programs.

Pairs are two-element Python lists [head, tail]; the empty list is null (None).
"""

import math
from typing import Any, Callable, Dict, List

from ..utils.config import (
    ACCESS_EXPORT_FUNCTION_NAME, ACCESS_NAMED_EXPORT_FUNCTION_NAME, DEFAULT_EXPORT_LOOKUP_NAME,
    LIST_FUNCTION_NAME, PAIR_FUNCTION_NAME,
)
from .environment import UNDEFINED, FunctionValue, SourceRuntimeError


def is_pair(value: Any) -> bool:
    return isinstance(value, list) and len(value) == 2


def stringify(value: Any) -> str:
    """Source's textual representation of a value (as shown by display)"""
    if value is None:
        return "null"
    if value is UNDEFINED:
        return "undefined"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if is_pair(value):
        return f"[{_stringify_nested(value[0])}, {_stringify_nested(value[1])}]"
    if isinstance(value, FunctionValue):
        return f"function {value.name}"
    if callable(value):
        return f"function {getattr(value, '__name__', 'builtin')}"
    return str(value)


def _stringify_nested(value: Any) -> str:
    # Strings inside data structures are shown quoted
    if isinstance(value, str):
        return f'"{value}"'
    return stringify(value)


def _expect_pair(function: str, value: Any) -> List[Any]:
    if not is_pair(value):
        raise SourceRuntimeError(f"{function}(xs) expects a pair as argument xs, but encountered {stringify(value)}")
    return value


def pair(head: Any, tail: Any) -> List[Any]:
    return [head, tail]


def head(xs: Any) -> Any:
    return _expect_pair("head", xs)[0]


def tail(xs: Any) -> Any:
    return _expect_pair("tail", xs)[1]


def is_null(value: Any) -> bool:
    return value is None


def make_list(*elements: Any) -> Any:
    result = None
    for element in reversed(elements):
        result = [element, result]
    return result


def length(xs: Any) -> int:
    count = 0
    while xs is not None:
        xs = tail(xs)
        count += 1
    return count


def access_named_export(named_exports: Any, lookup_name: str) -> Any:
    """Value paired with `lookup_name` in a list of (name, value) pairs, undefined if absent"""
    while named_exports is not None:
        entry = head(named_exports)
        if head(entry) == lookup_name:
            return tail(entry)
        named_exports = tail(named_exports)
    return UNDEFINED


def access_export(exports: Any, lookup_name: str) -> Any:
    """
    Look up an export in a unit result pair(default, list(pair(name, value), ...)).
    The name "default" selects the head.
    """
    if lookup_name == DEFAULT_EXPORT_LOOKUP_NAME:
        return head(exports)
    return access_named_export(tail(exports), lookup_name)


def build_prelude(displayed: List[str]) -> Dict[str, Any]:
    """
    Global bindings for one program run.

    `display` appends to `displayed` instead of printing.
    """

    def display(value: Any, prefix: Any = UNDEFINED) -> Any:
        text = stringify(value)
        if prefix is not UNDEFINED:
            text = f"{stringify(prefix)} {text}"
        displayed.append(text)
        return value

    def error(value: Any, prefix: Any = UNDEFINED) -> Any:
        text = stringify(value)
        if prefix is not UNDEFINED:
            text = f"{stringify(prefix)} {text}"
        raise SourceRuntimeError(f"Error: {text}")

    functions: Dict[str, Callable[..., Any]] = {
        PAIR_FUNCTION_NAME: pair,
        "head": head,
        "tail": tail,
        "is_pair": is_pair,
        "is_null": is_null,
        LIST_FUNCTION_NAME: make_list,
        "length": length,
        "display": display,
        "error": error,
        "stringify": stringify,
        "is_number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
        "is_string": lambda v: isinstance(v, str),
        "is_boolean": lambda v: isinstance(v, bool),
        "is_undefined": lambda v: v is UNDEFINED,
        "is_function": lambda v: isinstance(v, FunctionValue) or callable(v),
        ACCESS_EXPORT_FUNCTION_NAME: access_export,
        ACCESS_NAMED_EXPORT_FUNCTION_NAME: access_named_export,
    }
    prelude: Dict[str, Any] = dict(functions)
    prelude["undefined"] = UNDEFINED
    prelude["NaN"] = math.nan
    prelude["Infinity"] = math.inf
    return prelude
