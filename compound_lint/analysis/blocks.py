"""Block resolution and Part/Root export validation.

A compound file is named after its Block (``dialog.tsx`` defines ``Dialog``)
and exports the Block as ``Root`` next to its Parts, each Part under the
alias left after stripping the Block prefix::

    export { Dialog as Root, DialogTrigger as Trigger };
"""

import logging
from collections.abc import Iterable

from .diagnostics import DiagnosticKind, DiagnosticSet
from .exports import ExportRecord, ExportTable, LocalComponent, ObjectExportRecord
from .names import is_aggregator_stem, normalize_name, strip_block_prefix

logger = logging.getLogger(__name__)

ROOT_ALIAS = "Root"


def resolve_block(
    file_stem: str,
    components: Iterable[str] | dict[str, LocalComponent],
    object_exports: Iterable[ObjectExportRecord] = (),
) -> str | None:
    """Infer the Block name of a file from its stem.

    Args:
        file_stem: File base name without extension.
        components: Registered component names, in registration order.
        object_exports: Exported runtime objects; their names are candidates
            after the components.

    Returns:
        The first candidate whose normalized name equals the normalized
        stem, or None for aggregator files and when nothing matches.
    """
    stem = normalize_name(file_stem)
    if not stem or is_aggregator_stem(file_stem):
        return None

    candidates = list(components)
    candidates.extend(record.name for record in object_exports)

    for name in candidates:
        if normalize_name(name) == stem:
            return name
    return None


class PartRootValidator:
    """Check the export surface of a resolved Block."""

    def validate(
        self,
        block: str,
        exports: list[ExportRecord],
        object_exports: list[ObjectExportRecord],
    ) -> DiagnosticSet:
        diagnostics = DiagnosticSet()

        for record in object_exports:
            if record.name == block:
                diagnostics.add(
                    record.site, DiagnosticKind.NO_RUNTIME_OBJECT_EXPORT, name=record.name
                )

        block_exports: list[ExportRecord] = []
        part_exports: dict[str, list[ExportRecord]] = {}
        for record in exports:
            if record.local_name == block:
                block_exports.append(record)
            elif record.local_name.startswith(block):
                part_exports.setdefault(record.local_name, []).append(record)

        # A Block exported on its own, or unrelated components, is fine; a
        # single aliased Part still needs its Root.
        if not part_exports:
            return diagnostics

        for local_name, records in part_exports.items():
            alias = strip_block_prefix(local_name, block)
            if not alias:
                continue
            if any(record.public_name == alias for record in records):
                continue
            diagnostics.add(
                records[0].site,
                DiagnosticKind.REQUIRE_PART_ALIAS,
                local=local_name,
                part=alias,
                block=block,
            )

        if not block_exports:
            first_part = next(iter(part_exports.values()))[0]
            diagnostics.add(first_part.site, DiagnosticKind.REQUIRE_ROOT_EXPORT, block=block)
        elif not any(record.public_name == ROOT_ALIAS for record in block_exports):
            diagnostics.add(
                block_exports[0].site, DiagnosticKind.REQUIRE_ROOT_ALIAS, block=block
            )

        return diagnostics


def check_compound_exports(file_stem: str, table: ExportTable) -> DiagnosticSet:
    """Resolve the Block of a file and validate its exports.

    Returns an empty set when no Block can be resolved.
    """
    block = resolve_block(file_stem, table.components, table.object_exports)
    if block is None:
        logger.debug(f"No compound block resolved for '{file_stem}'")
        return DiagnosticSet()

    logger.debug(f"Resolved compound block '{block}' for '{file_stem}'")
    return PartRootValidator().validate(block, table.exports, table.object_exports)
