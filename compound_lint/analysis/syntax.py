"""Typed syntax variants consumed by the compound analysis.

The tree-sitter tree is lowered once into this closed set of frozen
dataclasses. Every analysis stage reads these variants only, so a source
shape that has no variant here is simply invisible to the engine.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class Span:
    """Source location of a node (lines 1-based, columns 0-based)."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_byte: int = 0
    end_byte: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "start_line": self.start_line,
            "start_column": self.start_column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MarkupElement:
    """A JSX element.

    ``component_name`` is set when the tag references a custom component:
    a capitalized identifier, or a member tag whose object identifier is
    capitalized (``<Dialog.Trigger />`` -> ``Dialog``).
    """

    tag: str
    component_name: str | None
    self_closing: bool
    children: tuple["Markup", ...]
    span: Span


@dataclass(frozen=True)
class MarkupFragment:
    """A JSX fragment (``<>...</>``)."""

    children: tuple["Markup", ...]
    span: Span


Markup = Union[MarkupElement, MarkupFragment]


@dataclass(frozen=True)
class MarkupTag:
    """An opening or self-closing tag with a plain identifier name."""

    name: str
    span: Span


# ---------------------------------------------------------------------------
# Functions and bindings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BlockBody:
    """A function body block, reduced to what its direct returns hand back.

    ``returns`` holds one entry per ``return`` statement directly inside the
    block: the markup it returns, or None when the argument is not markup.
    """

    returns: tuple[Markup | None, ...] = ()


FunctionBody = Union[MarkupElement, MarkupFragment, BlockBody, None]


@dataclass(frozen=True)
class FunctionExpression:
    """An arrow function or function expression."""

    body: FunctionBody


@dataclass(frozen=True)
class ObjectLiteral:
    """A plain object literal; keys are the non-computed property names."""

    keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class FunctionDeclaration:
    name: str
    name_span: Span
    body: FunctionBody
    span: Span


@dataclass(frozen=True)
class VariableDeclarator:
    """``name = init`` with a plain identifier target.

    ``init`` is None when the initializer is neither function-like nor an
    object literal.
    """

    name: str
    name_span: Span
    init: FunctionExpression | ObjectLiteral | None
    span: Span

    @property
    def is_function_like(self) -> bool:
        return isinstance(self.init, FunctionExpression)

    @property
    def is_object_literal(self) -> bool:
        return isinstance(self.init, ObjectLiteral)


Declaration = Union[FunctionDeclaration, VariableDeclarator]


@dataclass(frozen=True)
class ImportBinding:
    """A local binding introduced by an import (default or named)."""

    local: str
    imported: str
    source: str
    span: Span


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NamedExportDeclaration:
    """``export function X() {}`` / ``export const X = ...``."""

    declarations: tuple[Declaration, ...]
    span: Span


@dataclass(frozen=True)
class DefaultExportDeclaration:
    """``export default function X() {}``."""

    declaration: FunctionDeclaration
    span: Span


@dataclass(frozen=True)
class ExportSpecifier:
    local: str
    exported: str
    span: Span


@dataclass(frozen=True)
class ExportList:
    """``export { a, b as c }``, optionally re-exported ``from`` a module."""

    specifiers: tuple[ExportSpecifier, ...]
    source: str | None
    span: Span


@dataclass(frozen=True)
class DefaultExportIdentifier:
    """``export default X;``."""

    name: str
    span: Span


ExportNode = Union[
    NamedExportDeclaration,
    DefaultExportDeclaration,
    ExportList,
    DefaultExportIdentifier,
]


@dataclass
class ModuleSyntax:
    """The lowered view of one source file.

    ``declarations`` holds every function declaration and variable
    declarator at any nesting depth, in document order. ``exports`` holds
    the top-level export statements in document order.
    """

    path: Path
    language: str
    declarations: list[Declaration] = field(default_factory=list)
    exports: list[ExportNode] = field(default_factory=list)
    imports: list[ImportBinding] = field(default_factory=list)
    markup_tags: list[MarkupTag] = field(default_factory=list)
    errors: list[Span] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def stem(self) -> str:
        """File base name with its extension stripped."""
        return self.path.stem
