"""
Shared fixtures for the compound-lint test suite.

Provides test fixtures for:
- Parsing inline sources into ModuleSyntax
- Rule contexts for in-memory sources
- Temporary projects with component files
- Isolation from the user's global config
"""

import logging
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from compound_lint.analysis.parser import ComponentParser
from compound_lint.lint_logging import LOGGER_NAME
from compound_lint.analysis.syntax import ModuleSyntax
from compound_lint.rules.base import RuleContext
from compound_lint.rules.config import RuleEngineConfig, RuleEngineConfigLoader


@pytest.fixture(autouse=True)
def isolated_global_config(tmp_path_factory, monkeypatch) -> Path:
    """Point the global config directory at an empty temp dir."""
    global_dir = tmp_path_factory.mktemp("global_config")
    monkeypatch.setattr(RuleEngineConfigLoader, "GLOBAL_CONFIG_DIR", global_dir)
    return global_dir


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog sees package records in every test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def parser() -> ComponentParser:
    """One parser for the whole session (grammars load once)."""
    return ComponentParser()


@pytest.fixture()
def parse(parser) -> Callable[..., ModuleSyntax]:
    """Parse dedented inline source as if it lived in ``filename``."""

    def _parse(source: str, filename: str = "dialog.tsx") -> ModuleSyntax:
        return parser.parse(textwrap.dedent(source), Path(filename))

    return _parse


@pytest.fixture()
def make_context(parser) -> Callable[..., RuleContext]:
    """Build a RuleContext for inline source."""

    def _make(
        source: str,
        filename: str = "dialog.tsx",
        config: RuleEngineConfig | None = None,
    ) -> RuleContext:
        return RuleContext.from_source(
            textwrap.dedent(source), filename, config=config, parser=parser
        )

    return _make


# ---------------------------------------------------------------------------
# Temporary project fixture
# ---------------------------------------------------------------------------

DIALOG_OK = """\
const Dialog = () => null;
const DialogTrigger = () => null;
export { Dialog as Root, DialogTrigger as Trigger };
"""

DIALOG_MISSING_ALIAS = """\
const Dialog = () => null;
const DialogTrigger = () => null;
export { Dialog as Root, DialogTrigger };
"""

RELAY_CHAIN = """\
function Root() {
  return <Page />;
}

function Page() {
  return <Header />;
}

function Header() {
  return <div>Header</div>;
}
"""


@pytest.fixture()
def temp_project(tmp_path_factory) -> Path:
    """Create a temporary project with compound component files."""
    project = tmp_path_factory.mktemp("project")
    src = project / "src"
    src.mkdir()

    (src / "dialog.tsx").write_text(DIALOG_OK)
    (src / "tooltip.tsx").write_text(
        DIALOG_MISSING_ALIAS.replace("Dialog", "Tooltip").replace("Trigger", "Content")
    )
    (src / "layout.jsx").write_text(RELAY_CHAIN)
    (src / "notes.md").write_text("# not source\n")

    node_modules = project / "node_modules" / "lib"
    node_modules.mkdir(parents=True)
    (node_modules / "menu.tsx").write_text(DIALOG_MISSING_ALIAS.replace("Dialog", "Menu"))

    (src / "types.d.ts").write_text("export declare const x: number;\n")
    return project
