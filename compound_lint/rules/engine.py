"""
Rule engine coordinator for executing compound lint rules.

This module provides the RuleEngine class that orchestrates rule
execution over one or many files, result aggregation, and filtering by
category and language.

Files are independent units of work, so ``run_files`` fans them out over
a ThreadPoolExecutor when parallel execution is enabled.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError
from dataclasses import dataclass, field
from pathlib import Path

from ..analysis.parser import ComponentParser
from .base import BaseRule, Finding, RuleContext, Severity
from .config import RuleEngineConfig, RuleEngineConfigLoader
from .discovery import RuleDiscovery

logger = logging.getLogger(__name__)


@dataclass
class RuleError:
    """Error that occurred while checking a file."""

    rule_id: str | None
    error_message: str
    exception_type: str | None = None
    file_path: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rule_id": self.rule_id,
            "error_message": self.error_message,
            "exception_type": self.exception_type,
            "file_path": self.file_path,
        }


@dataclass
class RuleExecutionResult:
    """Result of executing a single rule on a single file."""

    rule_id: str
    findings: list[Finding] = field(default_factory=list)
    execution_time_ms: float = 0.0
    error: RuleError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def finding_count(self) -> int:
        return len(self.findings)


@dataclass
class RuleEngineResult:
    """Result of rule engine execution."""

    findings: list[Finding] = field(default_factory=list)
    errors: list[RuleError] = field(default_factory=list)
    execution_time_ms: float = 0.0
    rules_executed: int = 0
    files_analyzed: int = 0

    def should_fail(self, severity_threshold: Severity = Severity.MEDIUM) -> bool:
        """Check if any finding meets or exceeds ``severity_threshold``."""
        return any(finding.severity >= severity_threshold for finding in self.findings)

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    @property
    def critical_count(self) -> int:
        return self.count(Severity.CRITICAL)

    @property
    def high_count(self) -> int:
        return self.count(Severity.HIGH)

    @property
    def medium_count(self) -> int:
        return self.count(Severity.MEDIUM)

    @property
    def low_count(self) -> int:
        return self.count(Severity.LOW)

    def get_findings_by_severity(self, severity: Severity) -> list[Finding]:
        return [f for f in self.findings if f.severity == severity]

    def get_findings_by_rule(self, rule_id: str) -> list[Finding]:
        return [f for f in self.findings if f.rule_id == rule_id]

    def extend(self, other: "RuleEngineResult") -> None:
        """Fold another (per-file) result into this one."""
        self.findings.extend(other.findings)
        self.errors.extend(other.errors)
        self.rules_executed += other.rules_executed
        self.files_analyzed += other.files_analyzed

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "findings": [f.to_dict() for f in self.findings],
            "errors": [e.to_dict() for e in self.errors],
            "execution_time_ms": self.execution_time_ms,
            "rules_executed": self.rules_executed,
            "files_analyzed": self.files_analyzed,
            "summary": {
                "total_findings": len(self.findings),
                "critical": self.critical_count,
                "high": self.high_count,
                "medium": self.medium_count,
                "low": self.low_count,
            },
        }


class RuleEngine:
    """Engine for executing compound lint rules.

    The RuleEngine orchestrates rule discovery, registration, and execution.
    Every registered rule sees the same :class:`RuleContext` for a file, so
    the file is parsed once no matter how many rules run on it.

    Example usage:
        engine = RuleEngine()
        engine.load_rules()  # Auto-discover rules

        result = engine.run_files([Path("src/dialog.tsx")])
        if result.should_fail(engine.config.fail_on_severity):
            ...
    """

    def __init__(
        self,
        config: RuleEngineConfig | None = None,
        config_loader: RuleEngineConfigLoader | None = None,
        parser: ComponentParser | None = None,
    ):
        """Initialize the rule engine.

        Args:
            config: Optional pre-loaded configuration
            config_loader: Optional config loader for loading from files
            parser: Shared parser (created on demand)
        """
        if config:
            self.config = config
        elif config_loader:
            self.config = config_loader.load()
        else:
            self.config = RuleEngineConfig()

        self.parser = parser or ComponentParser()
        self._rules: dict[str, BaseRule] = {}
        self._rules_by_category: dict[str, list[BaseRule]] = {}

    def load_rules(self, discovery: RuleDiscovery | None = None) -> int:
        """Load rules using discovery.

        Returns:
            Number of rules loaded

        Raises:
            ConfigurationError: If a rule's configured parameters are invalid.
        """
        if discovery is None:
            discovery = RuleDiscovery()

        loaded = 0
        for rule_class in discovery.discover_all().values():
            if self.register(rule_class()):
                loaded += 1

        logger.info(f"Loaded {loaded} rules")
        return loaded

    def register(self, rule: BaseRule) -> bool:
        """Register a rule with the engine.

        The rule's configured parameters are validated here so bad options
        surface before any file is checked.

        Returns:
            True if registered, False if the rule is disabled in config

        Raises:
            ConfigurationError: If the rule's parameters are invalid.
        """
        rule_id = rule.rule_id

        if not self.config.is_rule_enabled(rule_id, rule.category):
            logger.debug(f"Rule {rule_id} is disabled in config, skipping")
            return False

        rule.parse_options(self.config.get_rule_config(rule_id).parameters)

        if rule_id in self._rules:
            self.unregister(rule_id)
        self._rules[rule_id] = rule
        self._rules_by_category.setdefault(rule.category, []).append(rule)

        logger.debug(f"Registered rule: {rule_id}")
        return True

    def unregister(self, rule_id: str) -> bool:
        """Unregister a rule from the engine.

        Returns:
            True if rule was found and removed, False otherwise
        """
        rule = self._rules.pop(rule_id, None)
        if rule is None:
            return False

        category = rule.category
        if category in self._rules_by_category:
            self._rules_by_category[category] = [
                r for r in self._rules_by_category[category] if r.rule_id != rule_id
            ]
        return True

    def get_rule(self, rule_id: str) -> BaseRule | None:
        return self._rules.get(rule_id)

    def get_rules_by_category(self, category: str) -> list[BaseRule]:
        return self._rules_by_category.get(category, []).copy()

    def get_all_rules(self) -> list[BaseRule]:
        return list(self._rules.values())

    def select_rules(
        self,
        rule_ids: list[str] | None = None,
        categories: list[str] | None = None,
    ) -> list[BaseRule]:
        """Registered rules narrowed by id and/or category."""
        rules = self.get_all_rules()
        if rule_ids:
            rules = [r for r in rules if r.rule_id in rule_ids]
        if categories:
            rules = [r for r in rules if r.category in categories]
        return rules

    def run(
        self,
        context: RuleContext,
        rule_ids: list[str] | None = None,
        categories: list[str] | None = None,
    ) -> RuleEngineResult:
        """Run rules on one file and collect findings.

        Args:
            context: RuleContext with file content
            rule_ids: Optional list of specific rule IDs to run
            categories: Optional list of categories to run

        Returns:
            RuleEngineResult with findings and execution info
        """
        start_time = time.time()
        rules = self._filter_by_language(
            self.select_rules(rule_ids, categories), context.language
        )

        findings: list[Finding] = []
        errors: list[RuleError] = []
        rules_executed = 0

        for rule in rules:
            result = self._execute_rule(rule, context)
            rules_executed += 1

            if result.error:
                errors.append(result.error)
                if not self.config.continue_on_error:
                    break
            else:
                findings.extend(result.findings)

        findings.sort(key=lambda f: (f.line_number or 0, f.column or 0, f.rule_id))

        return RuleEngineResult(
            findings=findings,
            errors=errors,
            execution_time_ms=(time.time() - start_time) * 1000,
            rules_executed=rules_executed,
            files_analyzed=1,
        )

    def run_source(
        self,
        content: str,
        file_path: Path | str,
        rule_ids: list[str] | None = None,
    ) -> RuleEngineResult:
        """Run rules on in-memory source attributed to ``file_path``."""
        context = RuleContext.from_source(
            content, file_path, config=self.config, parser=self.parser
        )
        return self.run(context, rule_ids=rule_ids)

    def run_file(
        self, file_path: Path, rule_ids: list[str] | None = None
    ) -> RuleEngineResult:
        """Read, parse and check one file.

        Unreadable files become a RuleError instead of raising.
        """
        try:
            context = RuleContext.from_file(
                file_path, config=self.config, parser=self.parser
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {file_path}: {e}")
            return RuleEngineResult(
                errors=[
                    RuleError(
                        rule_id=None,
                        error_message=f"Could not read file: {e}",
                        exception_type=type(e).__name__,
                        file_path=str(file_path),
                    )
                ]
            )
        return self.run(context, rule_ids=rule_ids)

    def run_files(
        self,
        file_paths: list[Path],
        rule_ids: list[str] | None = None,
        parallel: bool | None = None,
    ) -> RuleEngineResult:
        """Check many files and aggregate results in input order.

        Args:
            file_paths: Files to check
            rule_ids: Optional list of specific rule IDs to run
            parallel: Override parallel execution (None = use config)
        """
        start_time = time.time()
        use_parallel = (
            parallel
            if parallel is not None
            else self.config.performance.parallel_execution
        )

        if use_parallel and len(file_paths) > 1:
            result = self._run_files_parallel(file_paths, rule_ids)
        else:
            result = self._run_files_sequential(file_paths, rule_ids)

        result.execution_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Checked {result.files_analyzed} file(s) with {len(self._rules)} rule(s): "
            f"{len(result.findings)} finding(s), {len(result.errors)} error(s)",
            extra={
                "duration_ms": round(result.execution_time_ms, 1),
                "finding_count": len(result.findings),
            },
        )
        return result

    def _run_files_sequential(
        self, file_paths: list[Path], rule_ids: list[str] | None
    ) -> RuleEngineResult:
        total = RuleEngineResult()
        for file_path in file_paths:
            result = self.run_file(file_path, rule_ids)
            total.extend(result)
            if result.errors and not self.config.continue_on_error:
                break
        return total

    def _run_files_parallel(
        self, file_paths: list[Path], rule_ids: list[str] | None
    ) -> RuleEngineResult:
        """Check files concurrently; results are folded in submission order."""
        total = RuleEngineResult()
        max_workers = min(self.config.performance.max_parallel_workers, len(file_paths))
        timeout_seconds = self.config.performance.file_timeout_ms / 1000.0

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                (file_path, executor.submit(self.run_file, file_path, rule_ids))
                for file_path in file_paths
            ]

            for index, (file_path, future) in enumerate(futures):
                try:
                    result = future.result(timeout=timeout_seconds)
                except TimeoutError:
                    logger.warning(f"Checking {file_path} timed out")
                    result = RuleEngineResult(
                        errors=[
                            RuleError(
                                rule_id=None,
                                error_message=f"Timed out after {timeout_seconds}s",
                                exception_type="TimeoutError",
                                file_path=str(file_path),
                            )
                        ]
                    )

                total.extend(result)
                if result.errors and not self.config.continue_on_error:
                    for _, pending in futures[index + 1 :]:
                        pending.cancel()
                    break

        return total

    def _execute_rule(self, rule: BaseRule, context: RuleContext) -> RuleExecutionResult:
        """Execute a single rule, turning any exception into a RuleError."""
        start_time = time.time()

        try:
            findings = rule.check(context)
        except Exception as e:
            logger.warning(f"Rule {rule.rule_id} failed on {context.file_path}: {e}")
            return RuleExecutionResult(
                rule_id=rule.rule_id,
                execution_time_ms=(time.time() - start_time) * 1000,
                error=RuleError(
                    rule_id=rule.rule_id,
                    error_message=str(e),
                    exception_type=type(e).__name__,
                    file_path=str(context.file_path),
                ),
            )

        execution_time_ms = (time.time() - start_time) * 1000
        logger.debug(
            f"{rule.rule_id}: {len(findings)} finding(s) in {execution_time_ms:.1f}ms",
            extra={
                "rule_id": rule.rule_id,
                "file_path": str(context.file_path),
                "duration_ms": round(execution_time_ms, 1),
            },
        )
        return RuleExecutionResult(
            rule_id=rule.rule_id,
            findings=findings,
            execution_time_ms=execution_time_ms,
        )

    def _filter_by_language(
        self, rules: list[BaseRule], language: str
    ) -> list[BaseRule]:
        return [
            rule
            for rule in rules
            if rule.supported_languages is None or language in rule.supported_languages
        ]


def create_rule_engine(
    config: RuleEngineConfig | None = None,
    project_path: Path | None = None,
    auto_load: bool = True,
) -> RuleEngine:
    """Factory function to create and configure a rule engine.

    Args:
        config: Optional pre-loaded configuration
        project_path: Optional project path for config loading
        auto_load: Whether to auto-load rules

    Returns:
        Configured RuleEngine instance
    """
    if config is None and project_path:
        engine = RuleEngine(config_loader=RuleEngineConfigLoader(project_path))
    else:
        engine = RuleEngine(config=config)

    if auto_load:
        engine.load_rules()

    return engine
