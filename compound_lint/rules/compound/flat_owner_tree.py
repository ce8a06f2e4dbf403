"""
Flat owner tree rule.

Flags components at the top of long chains of single self-closing
handoffs (``<Page />`` renders ``<Layout />`` renders ``<Header />``...),
where each relay component only forwards to the next one.
"""

from pydantic import BaseModel, ConfigDict, Field

from ...analysis.delegation import DEFAULT_THRESHOLD, check_delegation_depth
from ..base import BaseRule, Finding, RuleContext, Severity


class FlatOwnerTreeOptions(BaseModel):
    """Parameters for COMPOUND.FLAT_OWNER_TREE."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    min_reported_depth: int = Field(
        default=DEFAULT_THRESHOLD, ge=1, alias="minReportedDepth"
    )
    # Longest chain still accepted; takes precedence over min_reported_depth
    allowed_chain_depth: int | None = Field(
        default=None, ge=0, alias="allowedChainDepth"
    )

    @property
    def threshold(self) -> int:
        if self.allowed_chain_depth is not None:
            return self.allowed_chain_depth + 1
        return self.min_reported_depth


class FlatOwnerTreeRule(BaseRule):
    """Report deep chains of self-closing component delegation."""

    options_model = FlatOwnerTreeOptions

    @property
    def rule_id(self) -> str:
        return "COMPOUND.FLAT_OWNER_TREE"

    @property
    def name(self) -> str:
        return "Flat Owner Tree"

    @property
    def category(self) -> str:
        return "compound"

    @property
    def default_severity(self) -> Severity:
        return Severity.LOW

    @property
    def description(self) -> str:
        return (
            "Reports components whose returned markup starts a chain of "
            "self-closing custom-component handoffs at least "
            f"minReportedDepth (default {DEFAULT_THRESHOLD}) deep."
        )

    def check(self, context: RuleContext) -> list[Finding]:
        options = self.get_options(context)
        diagnostics = check_delegation_depth(context.syntax, threshold=options.threshold)
        return [
            self._finding_from_diagnostic(
                diagnostic,
                context,
                remediation_hints=[
                    "Render the parts directly from the parent and pass children "
                    "instead of relaying through single-child components"
                ],
            )
            for diagnostic in diagnostics
        ]
