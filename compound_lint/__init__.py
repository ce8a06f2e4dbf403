"""Static analysis for compound UI component files.

compound-lint inspects the declaration and export structure of JS/TS files
that define compound components (a Block composed of named Parts) and reports
naming, aliasing and delegation-depth problems.
"""

__version__ = "0.3.0"
