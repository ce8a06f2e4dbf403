"""Unit tests for compound_lint.rules.base module."""

from pathlib import Path

import pytest
from pydantic import BaseModel, ConfigDict, Field

from compound_lint.analysis.diagnostics import Diagnostic, DiagnosticKind
from compound_lint.analysis.syntax import Span
from compound_lint.errors import ConfigurationError, UnsupportedFileError
from compound_lint.rules.base import (
    BaseRule,
    Evidence,
    Finding,
    RuleContext,
    Severity,
)
from compound_lint.rules.config import RuleConfig, RuleEngineConfig


class LimitOptions(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    max_count: int = Field(default=2, ge=0, alias="maxCount")


class SampleRule(BaseRule):
    """Minimal concrete rule for exercising BaseRule helpers."""

    options_model = LimitOptions

    @property
    def rule_id(self) -> str:
        return "TEST.SAMPLE"

    @property
    def name(self) -> str:
        return "Sample Rule"

    @property
    def category(self) -> str:
        return "test"

    @property
    def default_severity(self) -> Severity:
        return Severity.MEDIUM

    def check(self, context: RuleContext) -> list[Finding]:
        return []


class TestSeverity:
    """Tests for Severity ordering."""

    def test_ordering(self):
        """Test that severities order from LOW to CRITICAL."""
        assert Severity.LOW < Severity.MEDIUM < Severity.HIGH < Severity.CRITICAL
        assert Severity.CRITICAL > Severity.LOW
        assert Severity.MEDIUM >= Severity.MEDIUM
        assert Severity.MEDIUM <= Severity.HIGH
        assert not Severity.HIGH < Severity.HIGH

    def test_values(self):
        """Test serialized values."""
        assert [s.value for s in Severity] == ["critical", "high", "medium", "low"]

    def test_sorting(self):
        severities = [Severity.HIGH, Severity.LOW, Severity.CRITICAL, Severity.MEDIUM]
        assert sorted(severities) == [
            Severity.LOW,
            Severity.MEDIUM,
            Severity.HIGH,
            Severity.CRITICAL,
        ]


class TestFinding:
    """Tests for Finding dataclass."""

    def test_location(self):
        """Test the display location uses a 1-based column."""
        finding = Finding(
            rule_id="TEST.SAMPLE",
            severity=Severity.LOW,
            summary="x",
            file_path="src/dialog.tsx",
            line_number=3,
            column=0,
        )
        assert finding.location == "src/dialog.tsx:3:1"

    def test_location_without_line(self):
        finding = Finding(
            rule_id="TEST.SAMPLE",
            severity=Severity.LOW,
            summary="x",
            file_path="src/dialog.tsx",
        )
        assert finding.location == "src/dialog.tsx"

    def test_to_dict(self):
        """Test Finding serialization for JSON output."""
        finding = Finding(
            rule_id="TEST.SAMPLE",
            severity=Severity.HIGH,
            summary="Something is off",
            file_path="a.tsx",
            line_number=10,
            column=4,
            end_line=12,
            kind="require-root-alias",
            evidence=[Evidence("why", line_number=10, data={"block": "Dialog"})],
            remediation_hints=["fix it"],
        )
        data = finding.to_dict()
        assert data["severity"] == "high"
        assert data["evidence"][0]["data"] == {"block": "Dialog"}
        assert data["kind"] == "require-root-alias"
        assert data["column"] == 4
        assert data["remediation_hints"] == ["fix it"]
        assert data["created_at"] == finding.created_at


class TestRuleContext:
    """Tests for RuleContext."""

    def test_from_source(self, parser):
        context = RuleContext.from_source(
            "const Dialog = () => null;\n", "src/dialog.tsx", parser=parser
        )
        assert context.language == "tsx"
        assert context.file_path == Path("src/dialog.tsx")
        assert context.syntax.declarations[0].name == "Dialog"

    def test_syntax_is_parsed_once(self, parser):
        """Test that the lowered syntax is cached on the context."""
        context = RuleContext.from_source("const A = 1;\n", "a.ts", parser=parser)
        assert context.syntax is context.syntax

    def test_from_file(self, tmp_path, parser):
        path = tmp_path / "menu.jsx"
        path.write_text("export const Menu = () => <div />;\n")
        context = RuleContext.from_file(path, parser=parser)
        assert context.language == "javascript"
        assert context.content.startswith("export const Menu")

    def test_from_file_unsupported(self, tmp_path):
        path = tmp_path / "styles.css"
        path.write_text("a {}\n")
        with pytest.raises(UnsupportedFileError):
            RuleContext.from_file(path)

    def test_line_content(self, parser):
        context = RuleContext.from_source("line1\nline2\n", "a.ts", parser=parser)
        assert context.get_line_content(2) == "line2"
        assert context.get_line_content(0) is None
        assert context.get_line_content(10) is None

    def test_rule_config_lookup(self, parser):
        config = RuleEngineConfig(rules={"TEST.SAMPLE": RuleConfig(enabled=False)})
        context = RuleContext.from_source("", "a.ts", config=config, parser=parser)
        assert context.get_rule_config("TEST.SAMPLE").enabled is False

        bare = RuleContext.from_source("", "a.ts", parser=parser)
        assert bare.get_rule_config("TEST.SAMPLE") is None


class TestBaseRule:
    """Tests for BaseRule helpers."""

    def test_abstract(self):
        """Test that BaseRule can't be instantiated."""
        with pytest.raises(TypeError):
            BaseRule()

    def test_defaults(self):
        rule = SampleRule()
        assert rule.supported_languages is None
        assert rule.description == "Rule TEST.SAMPLE: Sample Rule"

    def test_parse_options_defaults(self):
        assert SampleRule().parse_options(None).max_count == 2

    def test_parse_options_alias(self):
        assert SampleRule().parse_options({"maxCount": 5}).max_count == 5

    @pytest.mark.parametrize("parameters", [{"maxCount": -1}, {"unknown": 1}])
    def test_parse_options_invalid(self, parameters):
        """Test that bad parameters raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            SampleRule().parse_options(parameters)
        assert "TEST.SAMPLE" in exc_info.value.message
        assert exc_info.value.exit_code == 2

    def test_severity_override(self):
        rule = SampleRule()
        assert rule.get_severity(None) == Severity.MEDIUM
        assert rule.get_severity(RuleConfig(severity_override="high")) == Severity.HIGH

    def test_finding_from_diagnostic(self, make_context):
        """Test conversion of an analysis diagnostic into a Finding."""
        context = make_context(
            """
            const Dialog = () => null;
            export { Dialog };
            """
        )
        diagnostic = Diagnostic(
            site=Span(3, 9, 3, 15),
            kind=DiagnosticKind.REQUIRE_ROOT_ALIAS,
            data={"block": "Dialog"},
        )
        finding = SampleRule()._finding_from_diagnostic(
            diagnostic, context, remediation_hints=["Export as Root"]
        )
        assert finding.rule_id == "TEST.SAMPLE"
        assert finding.severity == Severity.MEDIUM
        assert finding.kind == "require-root-alias"
        assert (finding.line_number, finding.column, finding.end_line) == (3, 9, 3)
        assert finding.summary == diagnostic.message
        assert finding.evidence[0].code_snippet == "export { Dialog };"
        assert finding.evidence[0].data == {"block": "Dialog"}
        assert finding.remediation_hints == ["Export as Root"]
