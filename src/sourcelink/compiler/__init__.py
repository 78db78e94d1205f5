"""
Compiler: module linking, import hoisting and code generation
"""

from .codegen import SourceGenerator, generate
from .driver import LinkerDriver, LinkOptions, LinkResult, link
from .file_paths import (
    transform_file_path_to_valid_function_name,
    transform_function_name_to_invoked_function_result_variable_name,
)
from .hoist_imports import hoist_and_merge_imports
from .module_linker import ModuleLinker, UnsupportedImportError

__all__ = [
    "SourceGenerator",
    "generate",
    "LinkerDriver",
    "LinkOptions",
    "LinkResult",
    "link",
    "transform_file_path_to_valid_function_name",
    "transform_function_name_to_invoked_function_result_variable_name",
    "hoist_and_merge_imports",
    "ModuleLinker",
    "UnsupportedImportError",
]
