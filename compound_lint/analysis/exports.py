"""Declaration registry and export table.

One pass over a :class:`ModuleSyntax` records which identifiers are
components, which of them are exported and under what public names, and
which capitalized object literals are exported in place of components.
Nothing here raises: shapes that don't apply are skipped.
"""

import logging
from dataclasses import dataclass, field

from .names import is_component_name
from .syntax import (
    DefaultExportDeclaration,
    DefaultExportIdentifier,
    ExportList,
    FunctionDeclaration,
    ModuleSyntax,
    NamedExportDeclaration,
    Span,
    VariableDeclarator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalComponent:
    name: str
    site: Span


@dataclass(frozen=True)
class ExportRecord:
    """``local_name`` exported publicly as ``public_name``."""

    local_name: str
    public_name: str
    site: Span


@dataclass(frozen=True)
class ObjectExportRecord:
    """A capitalized object literal exported as a runtime namespace."""

    name: str
    site: Span
    keys: tuple[str, ...] = ()


@dataclass
class ExportTable:
    """The collected model of one file.

    ``components`` keeps registration order; a later declaration with the
    same name replaces the earlier one's site in place.
    """

    components: dict[str, LocalComponent] = field(default_factory=dict)
    exports: list[ExportRecord] = field(default_factory=list)
    object_exports: list[ObjectExportRecord] = field(default_factory=list)


@dataclass(frozen=True)
class _Candidate:
    """An export whose local may only be resolvable after collection."""

    local_name: str
    public_name: str
    site: Span


class ExportCollector:
    """Build an :class:`ExportTable` from a lowered module.

    Specifier and default-identifier exports are kept as candidates in
    document order and resolved against the registry only once every
    declaration has been seen, so ``export { Foo }`` may precede ``Foo``.
    """

    def collect(self, module: ModuleSyntax) -> ExportTable:
        table = ExportTable()
        object_bindings: dict[str, VariableDeclarator] = {}

        for declaration in module.declarations:
            if not is_component_name(declaration.name):
                continue
            if isinstance(declaration, FunctionDeclaration) or declaration.is_function_like:
                table.components[declaration.name] = LocalComponent(
                    name=declaration.name, site=declaration.name_span
                )
            elif declaration.is_object_literal:
                object_bindings[declaration.name] = declaration

        entries: list[_Candidate | ExportRecord | ObjectExportRecord] = []
        for export in module.exports:
            if isinstance(export, NamedExportDeclaration):
                for declaration in export.declarations:
                    entry = self._declaration_export(declaration, table)
                    if entry is not None:
                        entries.append(entry)
            elif isinstance(export, DefaultExportDeclaration):
                entry = self._declaration_export(export.declaration, table)
                if entry is not None:
                    entries.append(entry)
            elif isinstance(export, DefaultExportIdentifier):
                entries.append(_Candidate(export.name, export.name, export.span))
            elif isinstance(export, ExportList):
                if export.source is not None:
                    continue
                for specifier in export.specifiers:
                    entries.append(
                        _Candidate(specifier.local, specifier.exported, specifier.span)
                    )

        for entry in entries:
            if isinstance(entry, ExportRecord):
                table.exports.append(entry)
            elif isinstance(entry, ObjectExportRecord):
                table.object_exports.append(entry)
            elif entry.local_name in table.components:
                table.exports.append(
                    ExportRecord(entry.local_name, entry.public_name, entry.site)
                )
            elif entry.local_name in object_bindings:
                binding = object_bindings[entry.local_name]
                keys = binding.init.keys if binding.is_object_literal else ()
                table.object_exports.append(
                    ObjectExportRecord(entry.local_name, entry.site, keys)
                )

        logger.debug(
            f"{module.path}: {len(table.components)} component(s), "
            f"{len(table.exports)} export(s), "
            f"{len(table.object_exports)} object export(s)"
        )
        return table

    def _declaration_export(
        self,
        declaration: FunctionDeclaration | VariableDeclarator,
        table: ExportTable,
    ) -> ExportRecord | ObjectExportRecord | None:
        name = declaration.name
        if not is_component_name(name):
            return None

        if isinstance(declaration, VariableDeclarator):
            if declaration.is_object_literal:
                return ObjectExportRecord(
                    name, declaration.name_span, declaration.init.keys
                )
            if not declaration.is_function_like:
                return None

        if name not in table.components:
            table.components[name] = LocalComponent(name, declaration.name_span)
        return ExportRecord(name, name, declaration.name_span)


def collect_exports(module: ModuleSyntax) -> ExportTable:
    """Convenience wrapper around :class:`ExportCollector`."""
    return ExportCollector().collect(module)
