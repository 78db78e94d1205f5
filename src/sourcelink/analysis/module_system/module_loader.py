"""
Module Loader (Graph Builder)

Discovers every module transitively reachable from the entry file.

Rust Pattern: rustc_metadata::loader

This class handles:
- Parsing local modules from the in-memory file table
- Resolving import/re-export specifiers to canonical module keys
- Fetching export names of library modules
- Counting importers of each module (indegree) for the sorter

Each module key is claimed exactly once: the claim inserts a future into
`_claims` synchronously, before any suspension point, so concurrent
discoverers of the same module share one record and one parse.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, FrozenSet, List, Optional, Set

from typing_extensions import TypeAlias

from ...shared.nodes import Program, is_module_declaration_with_source
from ...shared.source_location import SourceLocation
from .dependency_graph import CircularImportError
from .library_registry import LibraryNotFoundError
from .module_info import LibraryModule, LocalModule, ModuleRecord, ModuleTable
from .path_resolver import ModuleNotFoundError, PathResolver, is_local_specifier, normalize_module_path
from ...utils.config import ROOT_PATH

logger = logging.getLogger(__name__)

ParseFunction: TypeAlias = Callable[[str, str], Program]
LibraryExportsLookup: TypeAlias = Callable[[str], Awaitable[Optional[FrozenSet[str]]]]
LibraryBundleLookup: TypeAlias = Callable[[str], str]


class ModuleLoader:
    """
    Builds the module table for one link.

    Args:
        files: absolute path → source text
        parse: parse(text, source_file) → Program, raises ParseError
        get_library_exports: async lookup of a library module's export names
        path_resolver: resolver for specifiers (defaults to one over `files`)
        get_library_bundle: optional lookup of a library's opaque bundle text
    """

    def __init__(
        self,
        files: Dict[str, str],
        parse: ParseFunction,
        get_library_exports: LibraryExportsLookup,
        path_resolver: Optional[PathResolver] = None,
        get_library_bundle: Optional[LibraryBundleLookup] = None,
    ):
        self.files = files
        self.parse = parse
        self.get_library_exports = get_library_exports
        self.get_library_bundle = get_library_bundle
        self.path_resolver = path_resolver or PathResolver(files)
        self.modules: ModuleTable = {}
        self.parse_count: Dict[str, int] = {}
        self._claims: Dict[str, "asyncio.Future[ModuleRecord]"] = {}
        self._tasks: Dict[str, "asyncio.Task[None]"] = {}
        self._locations: Dict[str, Optional[SourceLocation]] = {}

    async def build(self, entry: str) -> ModuleTable:
        """
        Load the entry module and everything it transitively imports.

        Returns the module table (key → record) once every claimed module
        has been processed. On the first failure all outstanding work is
        cancelled and the error propagates.

        Raises:
            ModuleNotFoundError, LibraryNotFoundError, IllegalCharInFilePathError,
            ConsecutiveSlashesInFilePathError, ParseError, CircularImportError
        """
        entry_key = normalize_module_path(ROOT_PATH, entry)
        if entry_key not in self.files:
            raise ModuleNotFoundError(entry)

        logger.debug(f"ModuleLoader: building module graph from {entry_key}")
        self._claim(entry_key, None)
        awaited: Set[str] = set()
        try:
            while len(awaited) < len(self._tasks):
                batch = [key for key in self._tasks if key not in awaited]
                awaited.update(batch)
                await asyncio.gather(*(self._tasks[key] for key in batch))
        except BaseException:
            await self._cancel_outstanding()
            raise

        logger.debug(f"ModuleLoader: {len(self.modules)} modules loaded")
        return self.modules

    def _claim(self, key: str, location: Optional[SourceLocation]) -> "asyncio.Future[ModuleRecord]":
        """Return the record future for `key`, starting its processing on first claim"""
        future = self._claims.get(key)
        if future is None:
            future = asyncio.get_running_loop().create_future()
            self._claims[key] = future
            self._locations[key] = location
            self._tasks[key] = asyncio.ensure_future(self._process(key, future))
            logger.debug(f"ModuleLoader: claimed {key}")
        return future

    async def _process(self, key: str, future: "asyncio.Future[ModuleRecord]") -> None:
        try:
            if is_local_specifier(key):
                record: ModuleRecord = self._load_local(key)
            else:
                record = await self._load_library(key)
            self.modules[key] = record
            future.set_result(record)

            if record.dependencies:
                # Wait on dependency records only, not their sub-graphs: cycles must not deadlock
                dependency_futures = [self._claim(dep, self._dependency_location(record, dep))
                                      for dep in record.dependencies]
                for dependency in await asyncio.gather(*dependency_futures):
                    if isinstance(dependency, LocalModule):
                        dependency.indegree += 1
        except Exception as e:
            if not future.done():
                future.set_exception(e)
            raise

    def _load_local(self, key: str) -> LocalModule:
        program = self.parse(self.files[key], key)
        self.parse_count[key] = self.parse_count.get(key, 0) + 1

        dependencies: List[str] = []
        for node in program.body:
            if not is_module_declaration_with_source(node):
                continue
            source = node.source
            dependency = self.path_resolver.resolve(key, source.value, source.location)
            if dependency == key:
                raise CircularImportError([key], location=source.location)
            # Later phases only ever see canonical keys
            source.value = dependency
            if dependency not in dependencies:
                dependencies.append(dependency)

        logger.debug(f"ModuleLoader: {key} depends on {dependencies}")
        return LocalModule(key=key, program=program, dependencies=dependencies)

    async def _load_library(self, key: str) -> LibraryModule:
        logger.debug(f"ModuleLoader: fetching library '{key}'")
        names = await self.get_library_exports(key)
        if names is None:
            raise LibraryNotFoundError(key, self._locations.get(key))
        bundle = self.get_library_bundle(key) if self.get_library_bundle is not None else ""
        return LibraryModule(key=key, exported_names=frozenset(names), bundle=bundle)

    @staticmethod
    def _dependency_location(record: ModuleRecord, dependency: str) -> Optional[SourceLocation]:
        if not isinstance(record, LocalModule):
            return None
        return record.import_location(dependency)

    async def _cancel_outstanding(self) -> None:
        for task in self._tasks.values():
            if not task.done():
                task.cancel()
        await asyncio.gather(*self._tasks.values(), return_exceptions=True)
        # Mark failures nobody awaited as retrieved
        for future in self._claims.values():
            if future.done() and not future.cancelled():
                future.exception()
