"""
Base classes and types for the compound component rule engine.

This module provides the foundational abstractions for creating rules:
severities, findings with their evidence, the per-file rule context and
the abstract rule every check derives from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..analysis.diagnostics import Diagnostic
from ..analysis.parser import ComponentParser
from ..analysis.syntax import ModuleSyntax
from ..errors import ConfigurationError

if TYPE_CHECKING:
    from .config import RuleConfig, RuleEngineConfig


class Severity(Enum):
    """Severity levels for findings."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"  # Convention violations that hurt discoverability
    LOW = "low"  # Structural smells, informational

    def __lt__(self, other: "Severity") -> bool:
        order = [Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL]
        return order.index(self) < order.index(other)

    def __le__(self, other: "Severity") -> bool:
        return self == other or self < other

    def __gt__(self, other: "Severity") -> bool:
        return not self <= other

    def __ge__(self, other: "Severity") -> bool:
        return not self < other


@dataclass
class Evidence:
    """Evidence supporting a finding."""

    description: str
    line_number: int | None = None
    code_snippet: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "description": self.description,
            "line_number": self.line_number,
            "code_snippet": self.code_snippet,
            "data": self.data,
        }


@dataclass
class Finding:
    """A rule finding in one file."""

    rule_id: str
    severity: Severity
    summary: str
    file_path: str
    line_number: int | None = None
    column: int | None = None
    end_line: int | None = None
    kind: str | None = None
    evidence: list[Evidence] = field(default_factory=list)
    remediation_hints: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def location(self) -> str:
        """``path:line:column`` (1-based column) for display."""
        if self.line_number is None:
            return self.file_path
        column = (self.column or 0) + 1
        return f"{self.file_path}:{self.line_number}:{column}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "summary": self.summary,
            "file_path": self.file_path,
            "line_number": self.line_number,
            "column": self.column,
            "end_line": self.end_line,
            "kind": self.kind,
            "evidence": [e.to_dict() for e in self.evidence],
            "remediation_hints": self.remediation_hints,
            "created_at": self.created_at,
        }


@dataclass
class RuleContext:
    """Context passed to rules for evaluation of one file."""

    file_path: Path
    content: str
    language: str

    # Syntax (lazy-loaded, shared by every rule run on this file)
    _syntax: ModuleSyntax | None = field(default=None, repr=False)
    _parser: ComponentParser | None = field(default=None, repr=False)

    config: "RuleEngineConfig | None" = field(default=None, repr=False)

    @property
    def syntax(self) -> ModuleSyntax:
        """Lazy-parse the file into its lowered syntax."""
        if self._syntax is None:
            if self._parser is None:
                self._parser = ComponentParser()
            self._syntax = self._parser.parse(
                self.content, self.file_path, language=self.language
            )
        return self._syntax

    @property
    def lines(self) -> list[str]:
        """Get content as list of lines."""
        return self.content.split("\n")

    def get_line_content(self, line_number: int) -> str | None:
        """Get content of a specific line (1-indexed)."""
        lines = self.lines
        if 1 <= line_number <= len(lines):
            return lines[line_number - 1]
        return None

    def get_rule_config(self, rule_id: str) -> "RuleConfig | None":
        if self.config is None:
            return None
        return self.config.get_rule_config(rule_id)

    @classmethod
    def from_file(
        cls,
        file_path: Path,
        config: "RuleEngineConfig | None" = None,
        parser: ComponentParser | None = None,
    ) -> "RuleContext":
        """Create context from a file path."""
        parser = parser or ComponentParser()
        language = parser.language_for(file_path)
        with open(file_path, encoding="utf-8") as f:
            content = f.read()

        return cls(
            file_path=file_path,
            content=content,
            language=language,
            _parser=parser,
            config=config,
        )

    @classmethod
    def from_source(
        cls,
        content: str,
        file_path: Path | str,
        config: "RuleEngineConfig | None" = None,
        parser: ComponentParser | None = None,
    ) -> "RuleContext":
        """Create context for in-memory source attributed to ``file_path``."""
        file_path = Path(file_path)
        parser = parser or ComponentParser()
        return cls(
            file_path=file_path,
            content=content,
            language=parser.language_for(file_path),
            _parser=parser,
            config=config,
        )


class BaseRule(ABC):
    """Abstract base class for all rules."""

    # Pydantic model validating the rule's "parameters" config block
    options_model: type[BaseModel] | None = None

    @property
    @abstractmethod
    def rule_id(self) -> str:
        """Unique rule identifier (e.g., 'COMPOUND.PART_EXPORT_NAMING').

        Format: CATEGORY.RULE_NAME where CATEGORY is uppercase and
        RULE_NAME uses UPPER_SNAKE_CASE.
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable rule name."""

    @property
    @abstractmethod
    def category(self) -> str:
        """Rule category, matching its package under ``rules/``."""

    @property
    @abstractmethod
    def default_severity(self) -> Severity:
        """Default severity level for findings from this rule."""

    @property
    def supported_languages(self) -> list[str] | None:
        """Languages this rule supports. None = all languages."""
        return None

    @property
    def description(self) -> str:
        """Detailed description of what this rule checks."""
        return f"Rule {self.rule_id}: {self.name}"

    @abstractmethod
    def check(self, context: RuleContext) -> list[Finding]:
        """Run the rule check and return findings.

        Args:
            context: RuleContext with file content and lazily parsed syntax.

        Returns:
            List of Finding objects for any issues detected.
        """

    def parse_options(self, parameters: dict[str, Any] | None) -> BaseModel | None:
        """Validate configured parameters against ``options_model``.

        Raises:
            ConfigurationError: If the parameters don't match the model.
        """
        if self.options_model is None:
            return None
        try:
            return self.options_model.model_validate(parameters or {})
        except PydanticValidationError as e:
            raise ConfigurationError(
                f"Invalid parameters for rule {self.rule_id}: {e}",
                suggestion=f"Fix rules.{self.rule_id}.parameters in your config",
            ) from e

    def get_options(self, context: RuleContext) -> BaseModel | None:
        """Options for this rule from the context's config (or defaults)."""
        rule_config = context.get_rule_config(self.rule_id)
        return self.parse_options(rule_config.parameters if rule_config else None)

    def get_severity(self, config: "RuleConfig | None") -> Severity:
        """Get severity from config or use default.

        Args:
            config: Optional rule-specific configuration

        Returns:
            Severity level to use for findings
        """
        if config and config.severity_override:
            return Severity(config.severity_override)
        return self.default_severity

    def _create_finding(
        self,
        summary: str,
        file_path: str,
        line_number: int | None = None,
        column: int | None = None,
        end_line: int | None = None,
        kind: str | None = None,
        evidence: list[Evidence] | None = None,
        remediation_hints: list[str] | None = None,
        config: "RuleConfig | None" = None,
    ) -> Finding:
        """Helper to create a Finding with this rule's ID and severity."""
        return Finding(
            rule_id=self.rule_id,
            severity=self.get_severity(config),
            summary=summary,
            file_path=file_path,
            line_number=line_number,
            column=column,
            end_line=end_line,
            kind=kind,
            evidence=evidence or [],
            remediation_hints=remediation_hints or [],
        )

    def _finding_from_diagnostic(
        self,
        diagnostic: Diagnostic,
        context: RuleContext,
        remediation_hints: list[str] | None = None,
    ) -> Finding:
        """Turn an analysis diagnostic into a Finding at its site."""
        line = diagnostic.site.start_line
        snippet = context.get_line_content(line)
        return self._create_finding(
            summary=diagnostic.message,
            file_path=str(context.file_path),
            line_number=line,
            column=diagnostic.site.start_column,
            end_line=diagnostic.site.end_line,
            kind=diagnostic.kind.value,
            evidence=[
                Evidence(
                    description=diagnostic.message,
                    line_number=line,
                    code_snippet=snippet.strip() if snippet else None,
                    data=dict(diagnostic.data),
                )
            ],
            remediation_hints=remediation_hints,
            config=context.get_rule_config(self.rule_id),
        )
