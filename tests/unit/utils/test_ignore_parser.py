"""Unit tests for compound_lint.utils.ignore_parser module."""

from pathlib import Path

import pytest

from compound_lint.errors import PathNotFoundError, UnsupportedFileError
from compound_lint.utils.ignore_parser import (
    DEFAULT_IGNORE_PATTERNS,
    IGNORE_FILENAME,
    IgnoreMatcher,
    collect_source_files,
)


class TestIgnoreMatcher:
    """Test the IgnoreMatcher class."""

    @pytest.fixture
    def matcher(self, tmp_path):
        return IgnoreMatcher(tmp_path, use_defaults=False)

    def test_defaults(self, tmp_path):
        """Test the built-in patterns."""
        matcher = IgnoreMatcher(tmp_path)
        assert matcher.patterns == list(DEFAULT_IGNORE_PATTERNS)
        assert matcher.matches("node_modules/react/index.js")
        assert matcher.matches("packages/ui/dist/index.js")
        assert matcher.matches("src/types.d.ts")
        assert not matcher.matches("src/dialog.tsx")
        assert not matcher.matches("src/dist.tsx")

    def test_no_patterns(self, matcher):
        assert not matcher.matches("anything.tsx")

    def test_basic_glob_pattern(self, matcher, tmp_path):
        """Test that *.stories.tsx matches at any depth."""
        ignore_file = tmp_path / IGNORE_FILENAME
        ignore_file.write_text("*.stories.tsx\n")

        assert matcher.load_file(ignore_file) == 1
        assert matcher.matches("button.stories.tsx")
        assert matcher.matches("src/button.stories.tsx")
        assert not matcher.matches("src/button.tsx")

    def test_comments_and_blank_lines(self, matcher, tmp_path):
        (tmp_path / IGNORE_FILENAME).write_text("# generated\n\nlegacy/\n  \n")
        assert matcher.load_file(IGNORE_FILENAME) == 1
        assert matcher.patterns == ["legacy/"]

    def test_missing_file(self, matcher):
        assert matcher.load_file("nope") == 0

    def test_directory_pattern(self, matcher):
        """Test that dir/ patterns match directories and their contents."""
        matcher.add_patterns(["legacy/"])
        assert matcher.matches("legacy", is_dir=True)
        assert not matcher.matches("legacy")
        assert matcher.matches("src/legacy/old.tsx")

    def test_negation(self, tmp_path):
        """Test that a later negation re-includes a default-ignored file."""
        matcher = IgnoreMatcher(tmp_path)
        matcher.add_patterns(["!keep.d.ts"])
        assert matcher.matches("types.d.ts")
        assert not matcher.matches("keep.d.ts")

    def test_absolute_paths(self, matcher, tmp_path):
        matcher.add_patterns(["generated/"])
        assert matcher.matches(tmp_path / "generated" / "a.tsx")
        assert not matcher.matches(tmp_path / "src" / "a.tsx")

    def test_outside_root_never_matches(self, tmp_path):
        root = tmp_path / "project"
        root.mkdir()
        matcher = IgnoreMatcher(root)
        assert not matcher.matches(tmp_path / "node_modules" / "x.js")
        assert not matcher.matches(root)

    def test_outside_root_matches_relative_to_base(self, tmp_path):
        root = tmp_path / "project"
        lib = tmp_path / "lib"
        root.mkdir()
        matcher = IgnoreMatcher(root)
        assert matcher.matches(lib / "node_modules", is_dir=True, base=lib)
        assert matcher.matches(lib / "types.d.ts", base=lib)
        assert not matcher.matches(lib / "button.tsx", base=lib)
        assert not matcher.matches(lib, is_dir=True, base=lib)

    def test_filter_paths(self, tmp_path):
        matcher = IgnoreMatcher(tmp_path)
        kept = matcher.filter_paths(["src/a.tsx", "dist/a.js", "src/a.d.ts"])
        assert kept == [Path("src/a.tsx")]

    def test_for_project(self, tmp_path):
        """Test defaults, then the ignore file, then extra patterns."""
        (tmp_path / IGNORE_FILENAME).write_text("legacy/\n")
        matcher = IgnoreMatcher.for_project(tmp_path, ["*.stories.tsx"])
        assert matcher.patterns == [
            *DEFAULT_IGNORE_PATTERNS,
            "legacy/",
            "*.stories.tsx",
        ]


class TestCollectSourceFiles:
    """Tests for expanding paths into source files."""

    def test_directory_walk(self, temp_project):
        matcher = IgnoreMatcher.for_project(temp_project)
        files = collect_source_files([temp_project], matcher)
        assert [f.relative_to(temp_project).as_posix() for f in files] == [
            "src/dialog.tsx",
            "src/layout.jsx",
            "src/tooltip.tsx",
        ]

    def test_without_matcher(self, temp_project):
        files = collect_source_files([temp_project / "src"])
        assert [f.name for f in files] == [
            "dialog.tsx",
            "layout.jsx",
            "tooltip.tsx",
            "types.d.ts",
        ]

    def test_explicit_files_bypass_ignores(self, temp_project):
        """Test that files named explicitly are always linted."""
        matcher = IgnoreMatcher.for_project(temp_project)
        menu = temp_project / "node_modules" / "lib" / "menu.tsx"
        assert collect_source_files([menu], matcher) == [menu]

    def test_deduplicated_and_sorted(self, temp_project):
        src = temp_project / "src"
        files = collect_source_files([src / "tooltip.tsx", src, src / "dialog.tsx"])
        names = [f.name for f in files]
        assert names == sorted(names)
        assert len(names) == len(set(names))

    def test_extensions(self, temp_project):
        files = collect_source_files([temp_project / "src"], extensions=[".JSX"])
        assert [f.name for f in files] == ["layout.jsx"]

    def test_missing_path(self, tmp_path):
        with pytest.raises(PathNotFoundError):
            collect_source_files([tmp_path / "missing"])

    def test_unsupported_explicit_file(self, temp_project):
        with pytest.raises(UnsupportedFileError):
            collect_source_files([temp_project / "src" / "notes.md"])

    def test_directory_outside_project(self, tmp_path):
        """Test that ignores still apply when walking a sibling directory."""
        project = tmp_path / "proj"
        project.mkdir()
        (project / IGNORE_FILENAME).write_text("*.stories.tsx\n")
        lib = tmp_path / "lib"
        (lib / "node_modules" / "pkg").mkdir(parents=True)
        (lib / "node_modules" / "pkg" / "x.tsx").write_text("")
        (lib / "a.d.ts").write_text("")
        (lib / "b.tsx").write_text("")
        (lib / "b.stories.tsx").write_text("")

        matcher = IgnoreMatcher.for_project(project)
        files = collect_source_files([lib], matcher)
        assert [f.relative_to(tmp_path).as_posix() for f in files] == ["lib/b.tsx"]

    def test_ignore_file_in_project(self, temp_project):
        (temp_project / IGNORE_FILENAME).write_text("src/tooltip.tsx\n")
        matcher = IgnoreMatcher.for_project(temp_project)
        files = collect_source_files([temp_project], matcher)
        assert "tooltip.tsx" not in [f.name for f in files]
