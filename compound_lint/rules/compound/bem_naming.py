"""
BEM compound naming rule.

Parts rendered in markup carry their Block as a prefix
(``<ButtonGroupItem />``, not ``<Item />``), and that Block must be a
known component in the file.
"""

from ...analysis.bem import check_bem_naming
from ...analysis.diagnostics import DiagnosticKind
from ..base import BaseRule, Finding, RuleContext, Severity


class BemNamingRule(BaseRule):
    """Enforce Block-prefixed part names in markup."""

    @property
    def rule_id(self) -> str:
        return "COMPOUND.BEM_NAMING"

    @property
    def name(self) -> str:
        return "BEM Compound Naming"

    @property
    def category(self) -> str:
        return "compound"

    @property
    def default_severity(self) -> Severity:
        return Severity.LOW

    @property
    def supported_languages(self) -> list[str] | None:
        # Plain .ts files can't contain markup
        return ["javascript", "tsx"]

    @property
    def description(self) -> str:
        return (
            "Enforces BEM-style compound component naming such as "
            "ButtonGroupItem: bare part names are too generic and a "
            "prefixed part needs its block in scope."
        )

    def check(self, context: RuleContext) -> list[Finding]:
        findings = []
        for diagnostic in check_bem_naming(context.syntax):
            if diagnostic.kind is DiagnosticKind.GENERIC_PART_NAME:
                hint = f"Rename to {diagnostic.data['example']} or similar"
            else:
                hint = (
                    f"Define or import '{diagnostic.data['block']}' alongside "
                    f"'{diagnostic.data['name']}'"
                )
            findings.append(
                self._finding_from_diagnostic(
                    diagnostic, context, remediation_hints=[hint]
                )
            )
        return findings
