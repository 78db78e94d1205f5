"""
Module Linker

Rewrites a validated module graph into one program:

    <merged library imports>
    function __$b$$dot$$js__(___$c$$dot$$js___) { ...; return pair(default, list(pair("x", x))); }
    const ___$b$$dot$$js___ = __$b$$dot$$js__(___$c$$dot$$js___);
    ...
    const x = __access_export__(___$b$$dot$$js___, "x");
    <entry statements>

Every local module other than the entry becomes a unit (a function
declaration) invoked exactly once, in topological order, so each module's
body is evaluated once and all importers share its result.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..analysis.module_system.module_info import LocalModule, ResolvedModule, ResolvedModuleTable
from ..shared.errors import SourceLinkImplementationError, SourceLinkSourceError
from ..shared.nodes import (
    ExportAllDeclaration, ExportDefaultDeclaration, ExportNamedDeclaration, Expression,
    ExpressionStatement, FunctionDeclaration, Identifier, ImportDeclaration, ImportDefaultSpecifier,
    ImportNamespaceSpecifier, ImportSpecifier, Literal, Program, Statement,
)
from ..shared.source_location import SourceLocation
from ..utils.config import DEFAULT_EXPORT_LOOKUP_NAME
from .constructors import (
    create_access_export_call, create_const, create_function_declaration, create_import_declaration,
    create_import_default_specifier, create_import_namespace_specifier, create_import_specifier,
    create_imported_name_declaration, create_invoked_function_result_declaration, create_list_call,
    create_pair_call, create_return,
)
from .file_paths import (
    library_import_alias, library_namespace_alias, transform_file_path_to_valid_function_name,
    transform_function_name_to_invoked_function_result_variable_name, unit_result_variable_name,
)
from .hoist_imports import hoist_and_merge_imports

logger = logging.getLogger(__name__)


class UnsupportedImportError(SourceLinkSourceError):
    """Namespace imports of local modules need objects, which Source does not have"""
    error_code = "E0415"
    category = "structural"
    help_text = "import the names you need individually"

    def __init__(self, module: str, location: Optional[SourceLocation] = None):
        super().__init__(f"Namespace imports of local module '{module}' are not supported.", location)
        self.module = module


@dataclass
class _ModuleParts:
    """A local module split into the pieces a unit (or the entry) is built from"""
    params: List[str] = field(default_factory=list)
    library_bindings: List[Statement] = field(default_factory=list)
    accessors: Dict[str, List[Statement]] = field(default_factory=dict)
    statements: List[Statement] = field(default_factory=list)
    exports: Dict[str, Expression] = field(default_factory=dict)

    def accessor_statements(self) -> List[Statement]:
        return self.library_bindings + [stmt for param in self.params for stmt in self.accessors[param]]


class ModuleLinker:
    """
    Links modules into a single program.

    Input must be acyclic and validated: `modules` comes from the export
    validator and `order` from the topological sorter.
    """

    def __init__(self) -> None:
        self.library_imports: List[ImportDeclaration] = []

    def link(self, modules: ResolvedModuleTable, order: Sequence[str], entry: str) -> Program:
        self.library_imports = []
        body: List[Statement] = []
        for key in order:
            module = modules[key]
            if module.is_library or key == entry:
                continue
            unit = self.link_unit(module, modules)
            result_variable = transform_function_name_to_invoked_function_result_variable_name(unit.id.name)
            body.append(unit)
            body.append(create_invoked_function_result_declaration(
                unit.id.name, result_variable, [param.name for param in unit.params]
            ))
            logger.debug(f"ModuleLinker: emitted unit {unit.id.name} for {key}")

        entry_parts = self._split_module(modules[entry], modules, is_entry=True)
        body.extend(entry_parts.accessor_statements())
        body.extend(entry_parts.statements)

        program = Program(body=list(self.library_imports) + body)
        return hoist_and_merge_imports(program)

    def link_unit(self, module: ResolvedModule, modules: ResolvedModuleTable) -> FunctionDeclaration:
        """Turn one local module into its unit function declaration"""
        parts = self._split_module(module, modules)
        default = parts.exports.pop(DEFAULT_EXPORT_LOOKUP_NAME, None)
        named = create_list_call([
            create_pair_call(Literal(name), expression) for name, expression in parts.exports.items()
        ])
        return_statement = create_return(create_pair_call(default if default is not None else Literal(None), named))
        return create_function_declaration(
            transform_file_path_to_valid_function_name(module.key),
            parts.params,
            parts.accessor_statements() + parts.statements + [return_statement],
        )

    def _split_module(self, module: ResolvedModule, modules: ResolvedModuleTable,
                      is_entry: bool = False) -> _ModuleParts:
        record = module.record
        if not isinstance(record, LocalModule):
            raise SourceLinkImplementationError(f"Cannot link library module '{module.key}' as a unit")

        parts = _ModuleParts()
        for dependency in record.dependencies:
            if not modules[dependency].is_library:
                param = unit_result_variable_name(dependency)
                parts.params.append(param)
                parts.accessors[param] = []

        for node in record.program.body:
            if isinstance(node, ImportDeclaration):
                self._link_import(node, modules, parts, is_entry)
            elif isinstance(node, ExportNamedDeclaration):
                self._link_export_named(node, modules, parts)
            elif isinstance(node, ExportDefaultDeclaration):
                if isinstance(node.declaration, FunctionDeclaration):
                    parts.statements.append(node.declaration)
                    parts.exports[DEFAULT_EXPORT_LOOKUP_NAME] = Identifier(node.declaration.id.name)
                elif is_entry:
                    # Nothing consumes entry exports; the expression still runs in place
                    parts.statements.append(ExpressionStatement(node.declaration, node.location))
                else:
                    # Evaluated when the unit returns, not where it was written
                    parts.exports[DEFAULT_EXPORT_LOOKUP_NAME] = node.declaration
            elif isinstance(node, ExportAllDeclaration):
                self._link_export_all(node, modules, parts)
            else:
                parts.statements.append(node)
        return parts

    def _link_import(self, node: ImportDeclaration, modules: ResolvedModuleTable, parts: _ModuleParts,
                     is_entry: bool) -> None:
        source = node.source.value
        if modules[source].is_library:
            if is_entry:
                self.library_imports.append(node)
            else:
                self._link_library_import(node, parts)
            return
        param = unit_result_variable_name(source)
        for spec in node.specifiers:
            if isinstance(spec, ImportNamespaceSpecifier):
                raise UnsupportedImportError(source, spec.location)
            if isinstance(spec, ImportDefaultSpecifier):
                lookup = DEFAULT_EXPORT_LOOKUP_NAME
            elif isinstance(spec, ImportSpecifier):
                lookup = spec.imported.name
            else:
                raise SourceLinkImplementationError(f"Unknown import specifier {type(spec).__name__}")
            parts.accessors[param].append(create_imported_name_declaration(param, spec.local.name, lookup))

    def _link_library_import(self, node: ImportDeclaration, parts: _ModuleParts) -> None:
        """
        Import library names under reserved aliases and bind the module's own
        names inside the unit, so units never share a library binding's name.
        """
        source = node.source.value
        specifiers = []
        for spec in node.specifiers:
            if isinstance(spec, ImportNamespaceSpecifier):
                alias = library_namespace_alias(source)
                specifiers.append(create_import_namespace_specifier(alias))
            elif isinstance(spec, ImportDefaultSpecifier):
                alias = library_import_alias(source, DEFAULT_EXPORT_LOOKUP_NAME)
                specifiers.append(create_import_default_specifier(alias))
            elif isinstance(spec, ImportSpecifier):
                alias = library_import_alias(source, spec.imported.name)
                specifiers.append(create_import_specifier(spec.imported.name, alias))
            else:
                raise SourceLinkImplementationError(f"Unknown import specifier {type(spec).__name__}")
            parts.library_bindings.append(create_const(spec.local.name, Identifier(alias)))
        self.library_imports.append(create_import_declaration(source, specifiers))

    def _link_export_named(self, node: ExportNamedDeclaration, modules: ResolvedModuleTable,
                           parts: _ModuleParts) -> None:
        if node.declaration is not None:
            parts.statements.append(node.declaration)
            name = node.declaration.id.name
            parts.exports[name] = Identifier(name)
            return
        if node.source is None:
            for spec in node.specifiers:
                parts.exports[spec.exported.name] = Identifier(spec.local.name)
            return

        source = node.source.value
        for spec in node.specifiers:
            parts.exports[spec.exported.name] = self._reexported_value(source, spec.local.name, modules)

    def _link_export_all(self, node: ExportAllDeclaration, modules: ResolvedModuleTable, parts: _ModuleParts) -> None:
        source = node.source.value
        if node.exported is not None:
            if not modules[source].is_library:
                raise UnsupportedImportError(source, node.location)
            alias = library_namespace_alias(source)
            self.library_imports.append(create_import_declaration(source, [create_import_namespace_specifier(alias)]))
            parts.exports[node.exported.name] = Identifier(alias)
            return
        for name in sorted(modules[source].exports):
            parts.exports[name] = self._reexported_value(source, name, modules)

    def _reexported_value(self, source: str, name: str, modules: ResolvedModuleTable) -> Expression:
        """Expression for export `name` of module `source`, as seen by a re-exporting module"""
        if not modules[source].is_library:
            return create_access_export_call(unit_result_variable_name(source), name)
        alias = library_import_alias(source, name)
        self.library_imports.append(create_import_declaration(source, [create_import_specifier(name, alias)]))
        return Identifier(alias)
