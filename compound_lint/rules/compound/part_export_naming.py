"""
Compound part export naming rule.

A file named after its Block exports each Part under the name left after
stripping the Block prefix, and the Block itself as ``Root``::

    export { Dialog as Root, DialogTrigger as Trigger };

Exporting a runtime namespace object (``export const Dialog = {...}``)
instead is rejected.
"""

from ...analysis.blocks import ROOT_ALIAS, check_compound_exports
from ...analysis.diagnostics import Diagnostic, DiagnosticKind
from ...analysis.exports import collect_exports
from ...analysis.syntax import Span
from ..base import BaseRule, Finding, RuleContext, Severity

HINTS: dict[DiagnosticKind, str] = {
    DiagnosticKind.NO_RUNTIME_OBJECT_EXPORT: (
        "Replace the namespace object with aliased part exports"
    ),
    DiagnosticKind.REQUIRE_PART_ALIAS: (
        "Alias the part with the block prefix stripped so consumers write "
        "<Block.Part />"
    ),
    DiagnosticKind.REQUIRE_ROOT_EXPORT: f"Export the block component as {ROOT_ALIAS}",
    DiagnosticKind.REQUIRE_ROOT_ALIAS: f"Export the block component as {ROOT_ALIAS}",
}


class PartExportNamingRule(BaseRule):
    """Enforce aliased Part exports and a Root alias for the Block."""

    @property
    def rule_id(self) -> str:
        return "COMPOUND.PART_EXPORT_NAMING"

    @property
    def name(self) -> str:
        return "Compound Part Export Naming"

    @property
    def category(self) -> str:
        return "compound"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    @property
    def description(self) -> str:
        return (
            "Requires compound parts to be exported under aliases with the "
            "block prefix stripped, the block itself to be exported as Root, "
            "and forbids runtime namespace objects as compound exports."
        )

    def check(self, context: RuleContext) -> list[Finding]:
        module = context.syntax
        table = collect_exports(module)
        object_keys = {record.site: record.keys for record in table.object_exports}
        return [
            self._finding_from_diagnostic(
                diagnostic,
                context,
                remediation_hints=[self._hint(diagnostic, object_keys)],
            )
            for diagnostic in check_compound_exports(module.stem, table)
        ]

    def _hint(
        self, diagnostic: Diagnostic, object_keys: dict[Span, tuple[str, ...]]
    ) -> str:
        hint = HINTS[diagnostic.kind]
        keys = object_keys.get(diagnostic.site)
        if diagnostic.kind is DiagnosticKind.NO_RUNTIME_OBJECT_EXPORT and keys:
            hint = f"{hint}: {', '.join(keys)}"
        return hint
