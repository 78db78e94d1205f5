"""
Hoist and merge library imports.

Combines every import declaration naming the same library module and moves
the combined declarations to the top of the program. Imports of local
modules are dropped: by the time this pass runs they have been replaced by
accessor bindings.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from ..analysis.module_system.path_resolver import is_local_specifier
from ..shared.nodes import (
    ImportDeclaration, ImportDefaultSpecifier, ImportNamespaceSpecifier, ImportSpecifier, Program,
)
from .constructors import (
    create_import_declaration, create_import_default_specifier,
    create_import_namespace_specifier, create_import_specifier,
)

logger = logging.getLogger(__name__)


@dataclass
class _ImportRecord:
    # imported name → local names (dict keys keep first-seen order)
    regular: Dict[str, Dict[str, None]] = field(default_factory=dict)
    defaults: Dict[str, None] = field(default_factory=dict)
    namespaces: Dict[str, None] = field(default_factory=dict)


def hoist_and_merge_imports(program: Program) -> Program:
    """
    Rewrite `program.body` in place so that it starts with one merged import
    per library module; returns the same program.

    - Namespace specifiers each get their own declaration
    - Only one default specifier can share a declaration with named specifiers;
      further defaults get declarations of their own
    - A module imported only for side effects keeps a bare declaration
    """
    records: Dict[str, _ImportRecord] = {}
    rest = []
    for node in program.body:
        if not isinstance(node, ImportDeclaration):
            rest.append(node)
            continue
        source = node.source.value
        if is_local_specifier(source):
            continue
        record = records.setdefault(source, _ImportRecord())
        for spec in node.specifiers:
            declared = spec.local.name
            if isinstance(spec, ImportNamespaceSpecifier):
                record.namespaces[declared] = None
            elif isinstance(spec, ImportDefaultSpecifier):
                record.defaults[declared] = None
            elif isinstance(spec, ImportSpecifier):
                record.regular.setdefault(spec.imported.name, {})[declared] = None

    combined: List[ImportDeclaration] = []
    for source, record in records.items():
        declarations: List[ImportDeclaration] = [
            create_import_declaration(source, [create_import_namespace_specifier(name)])
            for name in record.namespaces
        ]
        specifiers = [
            create_import_specifier(imported, local)
            for imported, locals_ in record.regular.items()
            for local in locals_
        ]
        if record.defaults:
            first, *others = record.defaults
            specifiers.insert(0, create_import_default_specifier(first))
            declarations.extend(
                create_import_declaration(source, [create_import_default_specifier(name)]) for name in others
            )
        if specifiers or not declarations:
            declarations.append(create_import_declaration(source, specifiers))
        combined.extend(declarations)

    logger.debug(f"Hoisted {len(combined)} import declarations for {len(records)} library modules")
    program.body = combined + rest
    return program
