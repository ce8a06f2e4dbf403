"""
Rule engine for compound component linting.

Rules live in category packages (currently ``compound``) and are
auto-discovered; the engine runs them over parsed source files and
aggregates findings.
"""

from .base import BaseRule, Evidence, Finding, RuleContext, Severity
from .config import (
    CategoryConfig,
    PerformanceConfig,
    RuleConfig,
    RuleEngineConfig,
    RuleEngineConfigLoader,
    get_default_config,
)
from .discovery import RuleDiscovery, discover_rules
from .engine import (
    RuleEngine,
    RuleEngineResult,
    RuleError,
    RuleExecutionResult,
    create_rule_engine,
)

__all__ = [
    "BaseRule",
    "CategoryConfig",
    "Evidence",
    "Finding",
    "PerformanceConfig",
    "RuleConfig",
    "RuleContext",
    "RuleDiscovery",
    "RuleEngine",
    "RuleEngineConfig",
    "RuleEngineConfigLoader",
    "RuleEngineResult",
    "RuleError",
    "RuleExecutionResult",
    "Severity",
    "create_rule_engine",
    "discover_rules",
    "get_default_config",
]
