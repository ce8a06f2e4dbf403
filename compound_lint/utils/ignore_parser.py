"""Gitignore-compatible ignore matching and source file collection.

Patterns come from three places, in order: the built-in defaults, the
project's ``.compoundlintignore`` and the ``ignore`` list of the config.
Later patterns win, so a ``!dist/keep.tsx`` negation can re-include a
default-ignored file.

Example usage:
    matcher = IgnoreMatcher(project_root)
    matcher.load_file(Path(".compoundlintignore"))

    files = collect_source_files([Path("src")], matcher)
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

import pathspec

from ..analysis.parser import ComponentParser
from ..errors import PathNotFoundError, UnsupportedFileError

logger = logging.getLogger(__name__)

IGNORE_FILENAME = ".compoundlintignore"

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    "node_modules/",
    "dist/",
    "build/",
    "coverage/",
    ".next/",
    "*.d.ts",
)


class IgnoreMatcher:
    """Gitignore-compatible pattern matcher using pathspec library.

    Paths are matched relative to ``project_root``. A path outside it is
    matched relative to the ``base`` passed to :meth:`matches`, usually the
    directory being walked, and never matches without one.
    """

    def __init__(self, project_root: Path | str, use_defaults: bool = True):
        self.project_root = Path(project_root).resolve()
        self._patterns: list[str] = []
        self._spec: pathspec.PathSpec | None = None
        if use_defaults:
            self.add_patterns(DEFAULT_IGNORE_PATTERNS)

    @classmethod
    def for_project(
        cls, project_root: Path | str, extra_patterns: Iterable[str] = ()
    ) -> "IgnoreMatcher":
        """Defaults, then ``.compoundlintignore``, then ``extra_patterns``."""
        matcher = cls(project_root)
        loaded = matcher.load_file(IGNORE_FILENAME)
        if loaded:
            logger.debug(f"Loaded {loaded} pattern(s) from {IGNORE_FILENAME}")
        matcher.add_patterns(extra_patterns)
        return matcher

    def load_file(self, ignore_file: Path | str) -> int:
        """Load patterns from an ignore file.

        Args:
            ignore_file: Path to the ignore file (absolute or relative to
                project root).

        Returns:
            Number of patterns loaded from the file.
        """
        ignore_path = Path(ignore_file)
        if not ignore_path.is_absolute():
            ignore_path = self.project_root / ignore_path

        if not ignore_path.exists():
            return 0

        try:
            with open(ignore_path, encoding="utf-8") as f:
                lines = f.read().splitlines()
        except OSError as e:
            logger.warning(f"Could not read {ignore_path}: {e}")
            return 0

        count_before = len(self._patterns)
        self.add_patterns(lines)
        return len(self._patterns) - count_before

    def add_patterns(self, patterns: Iterable[str]) -> None:
        """Add gitignore-style patterns; blanks and comments are skipped."""
        for pattern in patterns:
            pattern = pattern.strip()
            if pattern and not pattern.startswith("#"):
                self._patterns.append(pattern)

        self._rebuild_spec()

    def _rebuild_spec(self) -> None:
        if not self._patterns:
            self._spec = None
            return

        self._spec = pathspec.GitIgnoreSpec.from_lines(self._patterns)

    def _relative(self, path: Path | str, base: Path | None = None) -> str | None:
        path = Path(path)
        if not path.is_absolute():
            return path.as_posix()

        resolved = path.resolve()
        for root in (self.project_root, base):
            if root is None:
                continue
            try:
                return resolved.relative_to(root).as_posix()
            except ValueError:
                continue
        return None

    def matches(
        self, path: Path | str, is_dir: bool = False, base: Path | str | None = None
    ) -> bool:
        """Check if a path should be ignored.

        Args:
            path: Path to check (absolute or relative to project root).
            is_dir: Match as a directory so ``dir/`` patterns apply.
            base: Fallback root for absolute paths outside the project.
        """
        if self._spec is None:
            return False

        rel = self._relative(path, Path(base).resolve() if base is not None else None)
        if rel is None or rel in ("", "."):
            return False
        if is_dir:
            rel = rel.rstrip("/") + "/"
        return self._spec.match_file(rel)

    def filter_paths(self, paths: Iterable[Path | str]) -> list[Path]:
        """Paths from ``paths`` that are NOT ignored."""
        return [Path(path) for path in paths if not self.matches(path)]

    @property
    def patterns(self) -> list[str]:
        return self._patterns.copy()


def collect_source_files(
    paths: Iterable[Path | str],
    matcher: IgnoreMatcher | None = None,
    extensions: Iterable[str] | None = None,
) -> list[Path]:
    """Expand ``paths`` into the source files to lint.

    Directories are walked recursively, skipping ignored directories and
    files and keeping only supported extensions. Files named explicitly are
    always kept.

    Returns:
        Sorted, de-duplicated list of files.

    Raises:
        PathNotFoundError: If a path does not exist.
        UnsupportedFileError: If an explicit file has an unsupported suffix.
    """
    suffixes = {
        suffix.lower()
        for suffix in (extensions or ComponentParser.SUPPORTED_EXTENSIONS)
    }
    found: dict[Path, Path] = {}

    for raw in paths:
        path = Path(raw)
        if not path.exists():
            raise PathNotFoundError(str(path))

        if path.is_file():
            if path.suffix.lower() not in suffixes:
                raise UnsupportedFileError(str(path), path.suffix)
            found.setdefault(path.resolve(), path)
            continue

        base = path.resolve()
        for dirpath, dirnames, filenames in os.walk(path):
            current = Path(dirpath)
            if matcher is not None:
                dirnames[:] = [
                    d
                    for d in dirnames
                    if not matcher.matches(
                        (current / d).absolute(), is_dir=True, base=base
                    )
                ]
            for filename in filenames:
                file_path = current / filename
                if file_path.suffix.lower() not in suffixes:
                    continue
                if matcher is not None and matcher.matches(file_path.absolute(), base=base):
                    continue
                found.setdefault(file_path.resolve(), file_path)

    files = sorted(found.values(), key=lambda p: p.as_posix())
    logger.debug(f"Collected {len(files)} source file(s)")
    return files
