"""sourcelink: links Source (JavaScript subset) modules into a single program."""

from .compiler.driver import LinkerDriver, LinkOptions, LinkResult, link
from .frontend.parser import Parser, ParseError
from .runtime.runtime import ExecutionResult, SourceRuntime

__all__ = [
    "LinkerDriver",
    "LinkOptions",
    "LinkResult",
    "link",
    "Parser",
    "ParseError",
    "ExecutionResult",
    "SourceRuntime",
]
