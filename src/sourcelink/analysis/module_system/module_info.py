"""
Module System Types

Module system types - shared between the graph builder, validator and linker.
These types are pure data structures with no business logic.

Rust Pattern: rustc_resolve::module::Module
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Union

from typing_extensions import TypeAlias

from ...shared.nodes import Program, is_module_declaration_with_source
from ...shared.source_location import SourceLocation


@dataclass
class LocalModule:
    """
    A module whose source text is part of the link input.

    - key: canonical absolute path ('/dir/file.js')
    - program: parsed AST, owned by this record; import/re-export sources
      are rewritten in place to canonical module keys
    - dependencies: module keys imported from, in first-reference order
    - indegree: number of modules importing this one
    """
    key: str
    program: Program
    dependencies: List[str] = field(default_factory=list)
    indegree: int = 0

    @property
    def is_library(self) -> bool:
        return False

    def import_location(self, dependency: str) -> Optional[SourceLocation]:
        """Location of the first source literal naming `dependency`"""
        for node in self.program.body:
            if is_module_declaration_with_source(node) and node.source.value == dependency:
                return node.source.location
        return None

    def __str__(self) -> str:
        return f"LocalModule({self.key}, {len(self.dependencies)} dependencies)"


@dataclass
class LibraryModule:
    """
    A pre-compiled module supplied by the library registry.

    Library modules never import local modules, so their indegree stays 0
    and they have no dependencies.
    """
    key: str
    exported_names: FrozenSet[str]
    bundle: str = ""

    @property
    def is_library(self) -> bool:
        return True

    @property
    def indegree(self) -> int:
        return 0

    @property
    def dependencies(self) -> List[str]:
        return []

    def __str__(self) -> str:
        return f"LibraryModule({self.key}, {len(self.exported_names)} exports)"


ModuleRecord: TypeAlias = Union[LocalModule, LibraryModule]
ModuleTable: TypeAlias = Dict[str, ModuleRecord]


@dataclass
class ResolvedModule:
    """A module record together with its computed export set"""
    record: ModuleRecord
    exports: FrozenSet[str]

    @property
    def key(self) -> str:
        return self.record.key

    @property
    def is_library(self) -> bool:
        return self.record.is_library


ResolvedModuleTable: TypeAlias = Dict[str, ResolvedModule]
