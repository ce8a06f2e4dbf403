"""Utility helpers for compound-lint."""

from .ignore_parser import DEFAULT_IGNORE_PATTERNS, IgnoreMatcher, collect_source_files

__all__ = ["DEFAULT_IGNORE_PATTERNS", "IgnoreMatcher", "collect_source_files"]
