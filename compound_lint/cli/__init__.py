"""Command line interface for compound-lint."""
