"""
Linker Driver

Rust Pattern: rustc_driver::driver

Phases:
1. Graph building (entry → module table, async)
2. Cycle detection / topological sort
3. Export validation
4. Linking (module table → single Program)
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..analysis.module_system import (
    LibraryRegistry, ModuleLoader, PathResolver, ResolvedModuleTable, SymbolLinker,
    default_registry, normalize_module_path, topological_sort,
)
from ..frontend.parser import Parser
from ..shared.errors import ErrorReporter, SourceLinkSourceError
from ..shared.nodes import Program
from ..utils.config import ROOT_PATH
from .codegen import generate
from .module_linker import ModuleLinker

logger = logging.getLogger(__name__)


@dataclass
class LinkOptions:
    """
    Per-link options.

    allow_undefined_imports: skip import existence checks (duplicate
        exports are still reported)
    resolve_extensions: suffixes tried for local specifiers that name no file
    resolve_directories: also try '<specifier>/index.js'
    """
    allow_undefined_imports: bool = False
    resolve_extensions: Tuple[str, ...] = ()
    resolve_directories: bool = False


@dataclass
class LinkResult:
    """Link result: the linked program on success, reported errors otherwise"""
    program: Optional[Program] = None
    order: List[str] = field(default_factory=list)
    modules: ResolvedModuleTable = field(default_factory=dict)
    reporter: Optional[ErrorReporter] = None
    success: bool = False

    def has_errors(self) -> bool:
        if self.reporter is not None:
            return self.reporter.has_errors()
        return not self.success

    def get_errors(self) -> List[str]:
        """Formatted errors, empty on success"""
        if self.reporter is not None and self.reporter.has_errors():
            return [self.reporter.format_all_errors(color=False)]
        return []

    @property
    def errors(self) -> List[SourceLinkSourceError]:
        """Raised errors recorded by the reporter"""
        if self.reporter is None:
            return []
        return list(self.reporter.exceptions)

    def to_source(self) -> str:
        if self.program is None:
            return ""
        return generate(self.program)


class LinkerDriver:
    """
    Linker driver (Rust naming: rustc_driver::driver).

    Orchestrates the link phases and turns every user-caused error into a
    diagnostic in the result's ErrorReporter.

    Args:
        parser: parse(text, source_file) → Program; defaults to the lark Parser
        registry: library registry; defaults to one holding the 'math' library
    """

    def __init__(self, parser: Optional[Callable[[str, str], Program]] = None,
                 registry: Optional[LibraryRegistry] = None):
        self.parser = parser if parser is not None else Parser()
        self.registry = registry if registry is not None else default_registry()

    def link(self, files: Dict[str, str], entry: str, options: Optional[LinkOptions] = None) -> LinkResult:
        """Synchronous wrapper around link_async()"""
        return asyncio.run(self.link_async(files, entry, options))

    async def link_async(self, files: Dict[str, str], entry: str,
                         options: Optional[LinkOptions] = None) -> LinkResult:
        """
        Link `entry` and everything it imports from `files` into one Program.

        Rust Pattern: rustc_driver::driver::compile_input()
        """
        options = options if options is not None else LinkOptions()
        reporter = ErrorReporter(files)
        entry_key = normalize_module_path(ROOT_PATH, entry)

        try:
            # Phase 1: graph building
            loader = ModuleLoader(
                files,
                self.parser,
                self.registry.get_library_exports,
                path_resolver=PathResolver(files, options.resolve_extensions, options.resolve_directories),
                get_library_bundle=self.registry.get_bundle,
            )
            table = await loader.build(entry)

            # Phase 2: evaluation order
            order = topological_sort(table)

            # Phase 3: export validation
            modules = SymbolLinker().validate(table, order, strict=not options.allow_undefined_imports)

            # Phase 4: linking
            program = ModuleLinker().link(modules, order, entry_key)
        except SourceLinkSourceError as e:
            logger.debug(f"Link of {entry_key} failed: {e.message}")
            reporter.report_exception(e)
            return LinkResult(reporter=reporter, success=False)

        logger.debug(f"Linked {entry_key}: {len(order)} modules")
        return LinkResult(program=program, order=order, modules=modules, reporter=reporter, success=True)


def link(files: Dict[str, str], entry: str, allow_undefined_imports: bool = False,
         resolve_extensions: Sequence[str] = ()) -> LinkResult:
    """Link with a default driver"""
    options = LinkOptions(allow_undefined_imports=allow_undefined_imports,
                          resolve_extensions=tuple(resolve_extensions))
    return LinkerDriver().link(files, entry, options)
