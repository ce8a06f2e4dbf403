"""Click-based CLI interface for compound-lint."""

import json
import sys
from pathlib import Path
from typing import Any

import click

from .. import __version__
from ..errors import LintError, ValidationError, handle_exception
from ..lint_logging import get_logger, setup_logging
from ..rules.base import Severity
from ..rules.config import RuleEngineConfigLoader, get_default_config
from ..rules.discovery import RuleDiscovery
from ..rules.engine import RuleEngine
from ..utils.ignore_parser import IgnoreMatcher, collect_source_files
from .output import OutputConfig, OutputManager

SEVERITY_CHOICES = [severity.value for severity in Severity]


def common_options(f: Any) -> Any:
    """Output options shared by every command."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Only print findings and errors")(
        f
    )
    f = click.option("--no-color", is_flag=True, help="Disable colored output")(f)
    return f


def project_option(f: Any) -> Any:
    return click.option(
        "--project",
        "-p",
        "project_path",
        default=None,
        type=click.Path(exists=True, file_okay=False),
        help="Project root holding compound-lint.config.json (default: CWD)",
    )(f)


def _fail(output: OutputManager, error: Exception, verbose: bool) -> None:
    message, exit_code = handle_exception(
        error, use_color=output.config.use_color, verbose=verbose
    )
    output.raw_error(message)
    sys.exit(exit_code)


@click.group()
@click.version_option(version=__version__, prog_name="compound-lint")
def cli() -> None:
    """compound-lint - naming and structure checks for compound UI components."""


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@project_option
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Extra config file applied on top of the discovered ones",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)
@click.option(
    "--rule",
    "rule_ids",
    multiple=True,
    help="Only run this rule (repeatable)",
)
@click.option(
    "--fail-on",
    type=click.Choice(SEVERITY_CHOICES),
    default=None,
    help="Lowest severity that makes the run fail (default: failOnSeverity)",
)
@click.option("--no-parallel", is_flag=True, help="Check files one at a time")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Also write a debug log to this file",
)
@common_options
def check(
    paths: tuple[str, ...],
    project_path: str | None,
    config_path: str | None,
    output_format: str,
    rule_ids: tuple[str, ...],
    fail_on: str | None,
    no_parallel: bool,
    log_file: str | None,
    verbose: bool,
    quiet: bool,
    no_color: bool,
) -> None:
    """Check compound component files.

    PATHS may be files or directories; directories are searched for
    .js, .jsx, .mjs, .cjs, .ts and .tsx files.

    Exit codes: 0 = clean, 1 = findings at or above the fail severity,
    2 = usage or configuration error.

    Examples:
        compound-lint check src/
        compound-lint check src/dialog.tsx --format json
        compound-lint check src --rule COMPOUND.FLAT_OWNER_TREE --fail-on low
    """
    setup_logging(
        quiet=quiet,
        verbose=verbose,
        log_file=Path(log_file) if log_file else None,
    )
    logger = get_logger()
    output = OutputManager(
        OutputConfig.from_flags(verbose=verbose, quiet=quiet, no_color=no_color)
    )

    try:
        project = Path(project_path).resolve() if project_path else Path.cwd()
        config = RuleEngineConfigLoader(project).load(
            Path(config_path) if config_path else None
        )

        engine = RuleEngine(config=config)
        engine.load_rules()

        unknown = [rule_id for rule_id in rule_ids if engine.get_rule(rule_id) is None]
        if unknown:
            raise ValidationError(
                f"Unknown or disabled rule(s): {', '.join(unknown)}",
                suggestion="Run 'compound-lint rules' to list available rules",
            )

        matcher = IgnoreMatcher.for_project(project, config.ignore)
        files = collect_source_files(
            paths, matcher, engine.parser.get_supported_extensions()
        )
        logger.debug(f"Checking {len(files)} file(s) under {project}")

        result = engine.run_files(
            files,
            rule_ids=list(rule_ids) or None,
            parallel=False if no_parallel else None,
        )
    except LintError as e:
        _fail(output, e, verbose)
        return

    threshold = Severity(fail_on) if fail_on else config.fail_on_severity
    failed = result.should_fail(threshold)

    if output_format == "json":
        document = result.to_dict()
        document["fail_on"] = threshold.value
        document["failed"] = failed
        click.echo(json.dumps(document, indent=2))
    else:
        for finding in result.findings:
            output.finding(finding)
        for error in result.errors:
            location = error.file_path or "<unknown>"
            rule = f" [{error.rule_id}]" if error.rule_id else ""
            output.warning(f"{location}{rule}: {error.error_message}", force=True)
        output.check_summary(result, threshold)

    sys.exit(1 if failed else 0)


@cli.command()
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
)
@common_options
def rules(output_format: str, verbose: bool, quiet: bool, no_color: bool) -> None:
    """List available rules."""
    setup_logging(quiet=quiet, verbose=verbose)
    output = OutputManager(
        OutputConfig.from_flags(verbose=verbose, quiet=quiet, no_color=no_color)
    )

    instances = [rule_class() for rule_class in RuleDiscovery().discover_all().values()]

    if output_format == "json":
        click.echo(
            json.dumps(
                [
                    {
                        "rule_id": rule.rule_id,
                        "name": rule.name,
                        "category": rule.category,
                        "default_severity": rule.default_severity.value,
                        "description": rule.description,
                    }
                    for rule in instances
                ],
                indent=2,
            )
        )
        return

    for rule in instances:
        output.plain(
            f"{rule.rule_id:<30} {rule.default_severity.value:<8} {rule.name}",
            force=True,
        )
        if verbose:
            output.plain(f"    {rule.description}", force=True)


@cli.command("init-config")
@project_option
@click.option(
    "--local",
    is_flag=True,
    help="Write compound-lint.config.local.json (personal overrides)",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@common_options
def init_config(
    project_path: str | None,
    local: bool,
    force: bool,
    verbose: bool,
    quiet: bool,
    no_color: bool,
) -> None:
    """Write the default configuration file."""
    setup_logging(quiet=quiet, verbose=verbose)
    output = OutputManager(
        OutputConfig.from_flags(verbose=verbose, quiet=quiet, no_color=no_color)
    )

    loader = RuleEngineConfigLoader(
        Path(project_path).resolve() if project_path else Path.cwd()
    )
    filename = loader.LOCAL_CONFIG_FILENAME if local else loader.CONFIG_FILENAME
    target = loader.project_path / filename

    try:
        if target.exists() and not force:
            raise ValidationError(
                f"{target} already exists",
                suggestion="Pass --force to overwrite it",
            )
        written = loader.save(get_default_config(), local=local)
    except (LintError, OSError) as e:
        _fail(output, e, verbose)
        return

    output.success(f"Wrote {written}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
