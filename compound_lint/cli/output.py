"""Centralized output manager for the CLI with color and quiet mode support.

Findings, summaries and messages all go through :class:`OutputManager` so
``--no-color``, ``NO_COLOR``/``FORCE_COLOR`` and ``--quiet`` behave the same
for every command.

Following the NO_COLOR standard: https://no-color.org/
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

import click

if TYPE_CHECKING:
    from ..rules.base import Finding, Severity
    from ..rules.engine import RuleEngineResult


def should_use_color(
    explicit_flag: bool | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Determine if color output should be used.

    Priority order:
    1. Explicit --no-color flag (if passed)
    2. NO_COLOR environment variable (standard convention)
    3. FORCE_COLOR environment variable
    4. TTY detection (only colorize if output is a terminal)
    """
    if explicit_flag is not None:
        return explicit_flag

    # Any value (including empty) means "no color"
    if "NO_COLOR" in os.environ:
        return False

    if "FORCE_COLOR" in os.environ:
        return True

    if stream is None:
        stream = sys.stdout
    if hasattr(stream, "isatty") and not stream.isatty():
        return False

    return True


@dataclass
class OutputConfig:
    """Configuration for CLI output behavior.

    Attributes:
        use_color: Whether to use ANSI color codes in output.
        quiet: Print findings and errors only.
        verbose: Enable detailed debug output.
        stream: Output stream (None = click's stdout).
        err_stream: Error stream (None = click's stderr).
    """

    use_color: bool = True
    quiet: bool = False
    verbose: bool = False
    stream: TextIO | None = None
    err_stream: TextIO | None = None

    @classmethod
    def from_flags(
        cls,
        verbose: bool = False,
        quiet: bool = False,
        no_color: bool = False,
    ) -> OutputConfig:
        """Create OutputConfig from CLI flags."""
        use_color = should_use_color(explicit_flag=False if no_color else None)
        return cls(use_color=use_color, quiet=quiet, verbose=verbose)


class OutputManager:
    """Centralized output handler for the CLI.

    Example:
        >>> output = OutputManager(OutputConfig(use_color=False))
        >>> output.error("Something went wrong")
        [FAIL] Something went wrong
    """

    COLORS = {
        "green": "\033[92m",
        "red": "\033[91m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "cyan": "\033[96m",
        "bold": "\033[1m",
        "dim": "\033[2m",
        "reset": "\033[0m",
    }

    SEVERITY_COLORS = {
        "critical": "red",
        "high": "red",
        "medium": "yellow",
        "low": "cyan",
    }

    # Accessible symbols with color/no-color variants
    SYMBOLS = {
        "success": {"color": "\033[92m✓\033[0m", "plain": "[OK]"},
        "error": {"color": "\033[91m✗\033[0m", "plain": "[FAIL]"},
        "warning": {"color": "\033[93m⚠\033[0m", "plain": "[WARN]"},
        "info": {"color": "\033[94mℹ\033[0m", "plain": "[INFO]"},
    }

    def __init__(self, config: OutputConfig | None = None):
        self.config = config or OutputConfig()

    def _get_symbol(self, symbol_type: str) -> str:
        symbol_data = self.SYMBOLS.get(symbol_type, self.SYMBOLS["info"])
        return symbol_data["color"] if self.config.use_color else symbol_data["plain"]

    def _colorize(self, text: str, color: str) -> str:
        if not self.config.use_color:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def _output(
        self,
        message: str,
        symbol_type: str | None = None,
        err: bool = False,
        force: bool = False,
    ) -> None:
        """Output a message with optional symbol prefix.

        Args:
            message: Message to output.
            symbol_type: Type of symbol to prefix (or None for no symbol).
            err: Output to stderr instead of stdout.
            force: Output even in quiet mode.
        """
        if self.config.quiet and not err and not force:
            return

        stream = self.config.err_stream if err else self.config.stream
        line = f"{self._get_symbol(symbol_type)} {message}" if symbol_type else message
        # use_color already accounts for the TTY, so don't let click strip codes
        click.echo(
            line, file=stream, err=err and stream is None, color=self.config.use_color
        )

    def success(self, message: str, force: bool = False) -> None:
        self._output(message, symbol_type="success", force=force)

    def error(self, message: str) -> None:
        """Output an error message (always shown, even in quiet mode)."""
        self._output(message, symbol_type="error", err=True, force=True)

    def raw_error(self, message: str) -> None:
        """Output preformatted error text to stderr without a symbol."""
        self._output(message, err=True, force=True)

    def warning(self, message: str, force: bool = False) -> None:
        self._output(message, symbol_type="warning", force=force)

    def info(self, message: str) -> None:
        self._output(message, symbol_type="info")

    def debug(self, message: str) -> None:
        """Output a debug message (only in verbose mode)."""
        if not self.config.verbose:
            return
        self._output(f"DEBUG: {self._colorize(message, 'dim')}")

    def plain(self, message: str, force: bool = False) -> None:
        self._output(message, force=force)

    def finding(self, finding: Finding) -> None:
        """Output one finding as ``path:line:col  severity  rule  message``.

        Findings are the command's result, so quiet mode still shows them.
        """
        severity = finding.severity.value
        label = self._colorize(
            severity.ljust(8), self.SEVERITY_COLORS.get(severity, "reset")
        )
        rule_id = self._colorize(finding.rule_id, "dim")
        self._output(
            f"{finding.location}  {label}  {rule_id}  {finding.summary}", force=True
        )
        if self.config.verbose:
            for hint in finding.remediation_hints:
                self._output(f"    {self._colorize('hint:', 'cyan')} {hint}", force=True)

    def check_summary(self, result: RuleEngineResult, fail_on: Severity) -> None:
        """Output a summary line with counts (always shown)."""
        parts = [f"{result.files_analyzed} file(s) checked"]
        total = len(result.findings)
        parts.append(f"{total} finding(s)")
        for label, count in (
            ("critical", result.critical_count),
            ("high", result.high_count),
            ("medium", result.medium_count),
            ("low", result.low_count),
        ):
            if count:
                parts.append(f"{count} {label}")
        if result.errors:
            parts.append(f"{len(result.errors)} error(s)")

        duration_ms = result.execution_time_ms
        if duration_ms < 1000:
            parts.append(f"{duration_ms:.0f}ms")
        else:
            parts.append(f"{duration_ms / 1000:.1f}s")

        summary_text = " | ".join(parts)

        if result.should_fail(fail_on):
            self._output(summary_text, symbol_type="error", force=True)
        elif total or result.errors:
            self._output(summary_text, symbol_type="warning", force=True)
        else:
            self._output(summary_text, symbol_type="success", force=True)
