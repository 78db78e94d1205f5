"""
Export Validation and Import Checking

Computes the export set of every local module and checks every import
against the export set of the module it names.

Rust Pattern: rustc_resolve::UseTree resolution

This class is stateless and can be shared/reused.
"""

import logging
from typing import Dict, FrozenSet, List, Optional, Sequence, Union

from ...shared.errors import Label, SourceLinkSourceError
from ...shared.nodes import (
    ASTNode, ExportAllDeclaration, ExportDefaultDeclaration, ExportNamedDeclaration,
    ExportSpecifier, ImportDeclaration, ImportDefaultSpecifier, ImportNamespaceSpecifier,
    ImportSpecifier,
)
from ...shared.source_location import SourceLocation
from ...utils.config import DEFAULT_EXPORT_LOOKUP_NAME
from .module_info import LocalModule, ModuleTable, ResolvedModule, ResolvedModuleTable

logger = logging.getLogger(__name__)


class UndefinedImportError(SourceLinkSourceError):
    """Imported (or re-exported) name is not exported by its source module"""
    error_code = "E0412"
    category = "binding"
    help_text = "check that the name is exported by the imported module"

    def __init__(self, symbol: str, module: str, location: Optional[SourceLocation] = None):
        super().__init__(f"'{module}' does not contain a definition for '{symbol}'", location)
        self.symbol = symbol
        self.module = module


class UndefinedDefaultImportError(SourceLinkSourceError):
    error_code = "E0413"
    category = "binding"
    help_text = "import a named export instead, or add `export default` to the module"

    def __init__(self, module: str, location: Optional[SourceLocation] = None):
        super().__init__(f"'{module}' does not contain a default export", location)
        self.module = module


class UndefinedNamespaceImportError(SourceLinkSourceError):
    error_code = "E0414"
    category = "binding"

    def __init__(self, module: str, location: Optional[SourceLocation] = None):
        super().__init__(f"'{module}' does not export any symbols", location)
        self.module = module


class ReexportSymbolError(SourceLinkSourceError):
    """The same name is exported by more than one declaration of a module"""
    error_code = "E0255"
    category = "structural"
    help_text = "check that you are not exporting the same symbol more than once"

    def __init__(self, module: str, symbol: str, nodes: Sequence[ASTNode]):
        self.module = module
        self.symbol = symbol
        self.nodes = list(nodes)
        positions = ", ".join(
            f"({n.location.line}:{n.location.column})" if n.location is not None else "(?)"
            for n in self.nodes
        )
        labels = [Label(n.location, "also exported here") for n in self.nodes[1:] if n.location is not None]
        super().__init__(
            f"Multiple export definitions for the symbol '{symbol}' at ({positions})",
            self.nodes[0].location if self.nodes else None,
            label="first exported here",
            labels=labels,
        )


ExportingNode = Union[ExportSpecifier, ExportNamedDeclaration, ExportDefaultDeclaration, ExportAllDeclaration]


class SymbolLinker:
    """
    Export validator.

    Walks modules in topological order so the export set of every imported
    module is known before its importers are checked.
    """

    def validate(self, table: ModuleTable, order: Sequence[str], strict: bool = True) -> ResolvedModuleTable:
        """
        Compute export sets and check imports.

        Args:
            table: module table from the graph builder
            order: topological order (dependencies first)
            strict: check that imported names exist; duplicate exports are
                    reported regardless

        Raises:
            UndefinedImportError, UndefinedDefaultImportError,
            UndefinedNamespaceImportError, ReexportSymbolError
        """
        resolved: ResolvedModuleTable = {}
        for key in order:
            record = table[key]
            if isinstance(record, LocalModule):
                exports = self._collect_exports(record, resolved, strict)
            else:
                exports = record.exported_names
            resolved[key] = ResolvedModule(record=record, exports=exports)
            logger.debug(f"SymbolLinker: {key} exports {sorted(exports)}")
        return resolved

    def _collect_exports(self, module: LocalModule, resolved: ResolvedModuleTable, strict: bool) -> FrozenSet[str]:
        exported: Dict[str, List[ExportingNode]] = {}

        def add(symbol: str, node: ExportingNode) -> None:
            exported.setdefault(symbol, []).append(node)

        for node in module.program.body:
            if isinstance(node, ImportDeclaration):
                if strict:
                    self._check_import_declaration(node, resolved[node.source.value].exports)
            elif isinstance(node, ExportDefaultDeclaration):
                add(DEFAULT_EXPORT_LOOKUP_NAME, node)
            elif isinstance(node, ExportNamedDeclaration):
                if node.declaration is not None:
                    add(node.declaration.id.name, node)
                    continue
                if node.source is not None and strict:
                    source_exports = resolved[node.source.value].exports
                    for spec in node.specifiers:
                        self._check_named(spec.local.name, node.source.value, source_exports, spec.location)
                for spec in node.specifiers:
                    add(spec.exported.name, spec)
            elif isinstance(node, ExportAllDeclaration):
                source = node.source.value
                source_exports = resolved[source].exports
                if strict:
                    self._check_namespace(source, source_exports, node.location)
                if node.exported is not None:
                    add(node.exported.name, node)
                else:
                    for symbol in sorted(source_exports):
                        add(symbol, node)

        for symbol, nodes in exported.items():
            if len(nodes) > 1:
                raise ReexportSymbolError(module.key, symbol, nodes)
        return frozenset(exported)

    def _check_import_declaration(self, node: ImportDeclaration, exports: FrozenSet[str]) -> None:
        source = node.source.value
        for spec in node.specifiers:
            if isinstance(spec, ImportSpecifier):
                self._check_named(spec.imported.name, source, exports, spec.location)
            elif isinstance(spec, ImportDefaultSpecifier):
                self._check_default(source, exports, spec.location)
            elif isinstance(spec, ImportNamespaceSpecifier):
                self._check_namespace(source, exports, spec.location)

    def _check_named(self, symbol: str, source: str, exports: FrozenSet[str],
                     location: Optional[SourceLocation]) -> None:
        if symbol == DEFAULT_EXPORT_LOOKUP_NAME:
            self._check_default(source, exports, location)
        elif symbol not in exports:
            raise UndefinedImportError(symbol, source, location)

    @staticmethod
    def _check_default(source: str, exports: FrozenSet[str], location: Optional[SourceLocation]) -> None:
        if DEFAULT_EXPORT_LOOKUP_NAME not in exports:
            raise UndefinedDefaultImportError(source, location)

    @staticmethod
    def _check_namespace(source: str, exports: FrozenSet[str], location: Optional[SourceLocation]) -> None:
        if not exports:
            raise UndefinedNamespaceImportError(source, location)
