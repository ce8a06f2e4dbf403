"""
Configuration system for the compound lint rule engine.

This module provides configuration dataclasses and loaders for
managing rule engine settings, including per-rule overrides,
category settings, ignore patterns and hierarchical configuration merging.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError
from .base import Severity

logger = logging.getLogger(__name__)


def _parse_severity(value: Any, where: str) -> Severity:
    try:
        return Severity(str(value).lower())
    except ValueError as e:
        choices = ", ".join(s.value for s in Severity)
        raise ConfigurationError(
            f"Invalid severity '{value}' for {where}",
            suggestion=f"Use one of: {choices}",
        ) from e


@dataclass
class RuleConfig:
    """Configuration for a single rule."""

    enabled: bool = True
    severity_override: str | None = None
    parameters: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleConfig":
        """Create RuleConfig from dictionary."""
        severity = data.get("severity")
        if severity is not None:
            severity = _parse_severity(severity, "rule severity").value
        return cls(
            enabled=data.get("enabled", True),
            severity_override=severity,
            parameters=data.get("parameters", {}),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"enabled": self.enabled}
        if self.severity_override:
            result["severity"] = self.severity_override
        if self.parameters:
            result["parameters"] = self.parameters
        return result


@dataclass
class CategoryConfig:
    """Configuration for a rule category."""

    enabled: bool = True
    default_severity: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryConfig":
        """Create CategoryConfig from dictionary."""
        return cls(
            enabled=data.get("enabled", True),
            default_severity=data.get("defaultSeverity"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"enabled": self.enabled}
        if self.default_severity:
            result["defaultSeverity"] = self.default_severity
        return result


@dataclass
class PerformanceConfig:
    """Performance configuration for the rule engine."""

    parallel_execution: bool = True
    max_parallel_workers: int = 4
    file_timeout_ms: float = 30000.0  # per file when running in parallel

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PerformanceConfig":
        """Create PerformanceConfig from dictionary."""
        workers = data.get("maxParallelWorkers", 4)
        if not isinstance(workers, int) or workers < 1:
            raise ConfigurationError(
                f"Invalid maxParallelWorkers: {workers!r}",
                suggestion="Use a positive integer",
            )
        return cls(
            parallel_execution=data.get("parallelExecution", True),
            max_parallel_workers=workers,
            file_timeout_ms=data.get("fileTimeoutMs", 30000.0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "parallelExecution": self.parallel_execution,
            "maxParallelWorkers": self.max_parallel_workers,
            "fileTimeoutMs": self.file_timeout_ms,
        }


@dataclass
class RuleEngineConfig:
    """Configuration for the rule engine."""

    # Global settings
    enabled: bool = True
    fail_on_severity: Severity = field(default=Severity.MEDIUM)
    continue_on_error: bool = True

    # Performance settings
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)

    # Per-category settings
    categories: dict[str, CategoryConfig] = field(default_factory=dict)

    # Per-rule settings
    rules: dict[str, RuleConfig] = field(default_factory=dict)

    # Extra gitignore-style patterns excluded from linting
    ignore: list[str] = field(default_factory=list)

    def is_rule_enabled(self, rule_id: str, category: str | None = None) -> bool:
        """Check if a rule is enabled.

        Args:
            rule_id: The rule identifier
            category: The rule's category (optional)

        Returns:
            True if the rule is enabled, False otherwise
        """
        if not self.enabled:
            return False

        if category and category in self.categories:
            if not self.categories[category].enabled:
                return False

        if rule_id in self.rules:
            return self.rules[rule_id].enabled

        return True

    def get_rule_config(self, rule_id: str) -> RuleConfig:
        """Get configuration for a specific rule (default if not configured)."""
        return self.rules.get(rule_id, RuleConfig())

    def get_rule_parameter(
        self, rule_id: str, param_name: str, default: Any = None
    ) -> Any:
        """Get a specific raw parameter for a rule."""
        config = self.get_rule_config(rule_id)
        return config.parameters.get(param_name, default)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuleEngineConfig":
        """Create RuleEngineConfig from dictionary.

        Raises:
            ConfigurationError: If a value has the wrong shape.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a JSON object")

        config = cls(
            enabled=data.get("enabled", True),
            continue_on_error=data.get("continueOnError", True),
        )

        config.fail_on_severity = _parse_severity(
            data.get("failOnSeverity", Severity.MEDIUM.value), "failOnSeverity"
        )

        if "performance" in data:
            config.performance = PerformanceConfig.from_dict(data["performance"])

        for cat_name, cat_data in data.get("categories", {}).items():
            config.categories[cat_name] = CategoryConfig.from_dict(cat_data)

        for rule_id, rule_data in data.get("rules", {}).items():
            config.rules[rule_id] = RuleConfig.from_dict(rule_data)

        ignore = data.get("ignore", [])
        if not isinstance(ignore, list) or not all(isinstance(p, str) for p in ignore):
            raise ConfigurationError(
                "'ignore' must be a list of patterns",
                suggestion='Example: "ignore": ["legacy/", "*.stories.tsx"]',
            )
        config.ignore = list(ignore)

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "enabled": self.enabled,
            "failOnSeverity": self.fail_on_severity.value,
            "continueOnError": self.continue_on_error,
            "performance": self.performance.to_dict(),
            "categories": {k: v.to_dict() for k, v in self.categories.items()},
            "rules": {k: v.to_dict() for k, v in self.rules.items()},
            "ignore": list(self.ignore),
        }

    def merge(self, other: "RuleEngineConfig") -> "RuleEngineConfig":
        """Merge another config into this one (other takes precedence).

        Categories and rules merge per key; ignore patterns accumulate.
        """
        result = RuleEngineConfig(
            enabled=other.enabled,
            fail_on_severity=other.fail_on_severity,
            continue_on_error=other.continue_on_error,
            performance=PerformanceConfig(
                parallel_execution=other.performance.parallel_execution,
                max_parallel_workers=other.performance.max_parallel_workers,
                file_timeout_ms=other.performance.file_timeout_ms,
            ),
        )

        result.categories = dict(self.categories)
        result.categories.update(other.categories)

        result.rules = dict(self.rules)
        result.rules.update(other.rules)

        result.ignore = list(dict.fromkeys(self.ignore + other.ignore))

        return result


class RuleEngineConfigLoader:
    """Loads rule engine configuration from compound-lint.config.json."""

    CONFIG_FILENAME = "compound-lint.config.json"
    LOCAL_CONFIG_FILENAME = "compound-lint.config.local.json"
    GLOBAL_CONFIG_DIR = Path.home() / ".compound-lint"

    def __init__(self, project_path: Path | None = None):
        """Initialize the config loader.

        Args:
            project_path: Path to the project root (defaults to CWD)
        """
        self.project_path = project_path or Path.cwd()

    def load(self, explicit_path: Path | None = None) -> RuleEngineConfig:
        """Load configuration with hierarchical merging.

        Load order (later overrides earlier):
        1. Built-in defaults
        2. Global config (~/.compound-lint/compound-lint.config.json)
        3. Project config (<project>/compound-lint.config.json)
        4. Local config (<project>/compound-lint.config.local.json)
        5. ``explicit_path`` when given (must exist and be valid)

        Returns:
            Merged RuleEngineConfig
        """
        config = get_default_config()

        for path in (
            self.GLOBAL_CONFIG_DIR / self.CONFIG_FILENAME,
            self.project_path / self.CONFIG_FILENAME,
            self.project_path / self.LOCAL_CONFIG_FILENAME,
        ):
            if not path.exists():
                continue
            loaded = self._load_file(path)
            if loaded:
                logger.debug(f"Loaded config from {path}")
                config = config.merge(loaded)

        if explicit_path is not None:
            config = config.merge(self.load_file(explicit_path))

        return config

    def load_file(self, path: Path) -> RuleEngineConfig:
        """Load one configuration file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Config file not found: {path}", config_file=str(path)
            ) from e
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigurationError(
                f"Could not read config from {path}: {e}", config_file=str(path)
            ) from e
        return RuleEngineConfig.from_dict(data)

    def _load_file(self, path: Path) -> RuleEngineConfig | None:
        """Load a discovered config file, skipping it when unreadable."""
        try:
            return self.load_file(path)
        except ConfigurationError as e:
            logger.warning(f"Could not load config from {path}: {e.message}")
            return None

    def save(self, config: RuleEngineConfig, local: bool = False) -> Path:
        """Save configuration to file.

        Args:
            config: Configuration to save
            local: If True, save to local config (git-ignored)

        Returns:
            Path to the saved config file
        """
        filename = self.LOCAL_CONFIG_FILENAME if local else self.CONFIG_FILENAME
        config_path = self.project_path / filename

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
            f.write("\n")

        return config_path


def get_default_config() -> RuleEngineConfig:
    """Get the default rule engine configuration.

    Returns:
        RuleEngineConfig with sensible defaults
    """
    return RuleEngineConfig(
        enabled=True,
        fail_on_severity=Severity.MEDIUM,
        continue_on_error=True,
        performance=PerformanceConfig(),
        categories={
            "compound": CategoryConfig(enabled=True, default_severity="medium"),
        },
    )
