"""Module system: path resolution, graph building, sorting, export validation."""

from .path_resolver import (
    PathResolver, ModuleNotFoundError, IllegalCharInFilePathError,
    ConsecutiveSlashesInFilePathError, is_local_specifier, normalize_module_path,
)
from .module_info import LocalModule, LibraryModule, ModuleRecord, ModuleTable, ResolvedModule, ResolvedModuleTable
from .library_registry import LibraryRegistry, LibraryNotFoundError, default_registry
from .dependency_graph import CircularImportError, topological_sort, find_cycle
from .symbol_linker import (
    SymbolLinker, UndefinedImportError, UndefinedDefaultImportError,
    UndefinedNamespaceImportError, ReexportSymbolError,
)
from .module_loader import ModuleLoader

__all__ = [
    'PathResolver',
    'ModuleNotFoundError',
    'IllegalCharInFilePathError',
    'ConsecutiveSlashesInFilePathError',
    'is_local_specifier',
    'normalize_module_path',
    'LocalModule',
    'LibraryModule',
    'ModuleRecord',
    'ModuleTable',
    'ResolvedModule',
    'ResolvedModuleTable',
    'LibraryRegistry',
    'LibraryNotFoundError',
    'default_registry',
    'CircularImportError',
    'topological_sort',
    'find_cycle',
    'SymbolLinker',
    'UndefinedImportError',
    'UndefinedDefaultImportError',
    'UndefinedNamespaceImportError',
    'ReexportSymbolError',
    'ModuleLoader',
]
