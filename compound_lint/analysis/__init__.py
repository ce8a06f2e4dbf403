"""Structural analysis of compound component files.

Parsing lowers a source file into :class:`ModuleSyntax`; from there two
independent passes run: the export collector feeding Block resolution and
Part/Root validation, and the delegation graph feeding the depth analyzer.
"""

from .bem import COMMON_PART_NAMES, check_bem_naming, split_compound_name
from .blocks import PartRootValidator, check_compound_exports, resolve_block
from .delegation import (
    DelegationGraph,
    DepthAnalyzer,
    check_delegation_depth,
    compute_depths,
)
from .diagnostics import Diagnostic, DiagnosticKind, DiagnosticSet
from .exports import (
    ExportCollector,
    ExportRecord,
    ExportTable,
    LocalComponent,
    ObjectExportRecord,
    collect_exports,
)
from .parser import ComponentParser
from .syntax import ModuleSyntax, Span

__all__ = [
    "COMMON_PART_NAMES",
    "ComponentParser",
    "DelegationGraph",
    "DepthAnalyzer",
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSet",
    "ExportCollector",
    "ExportRecord",
    "ExportTable",
    "LocalComponent",
    "ModuleSyntax",
    "ObjectExportRecord",
    "PartRootValidator",
    "Span",
    "check_bem_naming",
    "check_compound_exports",
    "check_delegation_depth",
    "collect_exports",
    "compute_depths",
    "resolve_block",
    "split_compound_name",
]
