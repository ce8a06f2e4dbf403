"""Diagnostics produced by the compound analysis."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .syntax import Span


class DiagnosticKind(Enum):
    """Every finding the analysis can produce."""

    NO_RUNTIME_OBJECT_EXPORT = "no-runtime-object-export"
    REQUIRE_PART_ALIAS = "require-part-alias"
    REQUIRE_ROOT_EXPORT = "require-root-export"
    REQUIRE_ROOT_ALIAS = "require-root-alias"
    DEEP_DELEGATION_CHAIN = "deep-delegation-chain"
    GENERIC_PART_NAME = "generic-part-name"
    MISSING_BLOCK_COMPONENT = "missing-block-component"


MESSAGES: dict[DiagnosticKind, str] = {
    DiagnosticKind.NO_RUNTIME_OBJECT_EXPORT: (
        "Avoid exporting runtime object '{name}' for compound APIs. Export parts "
        "with aliases instead (for example export {{ {name}Trigger as Trigger }})."
    ),
    DiagnosticKind.REQUIRE_PART_ALIAS: (
        "Export compound part '{local}' as '{part}' (export {{ {local} as {part} }})."
    ),
    DiagnosticKind.REQUIRE_ROOT_EXPORT: (
        "Compound block '{block}' exports parts. Also export its root namespace "
        "as `export {{ {block} as Root }}`."
    ),
    DiagnosticKind.REQUIRE_ROOT_ALIAS: (
        "Compound block '{block}' is exported without a Root alias. Export it "
        "as `export {{ {block} as Root }}`."
    ),
    DiagnosticKind.DEEP_DELEGATION_CHAIN: (
        "Component '{component}' is part of a {depth}-deep parent-component chain "
        "of self-closing custom-component handoffs. Flatten the chain by reducing "
        "intermediate relay components."
    ),
    DiagnosticKind.GENERIC_PART_NAME: (
        "Component '{name}' is too generic. Prefix part names with a compound "
        "block (for example '{example}')."
    ),
    DiagnosticKind.MISSING_BLOCK_COMPONENT: (
        "Compound part '{name}' requires matching block '{block}' in scope to "
        "keep naming consistent."
    ),
}


@dataclass(frozen=True)
class Diagnostic:
    """A finding at a source site, with message parameters as strings."""

    site: Span
    kind: DiagnosticKind
    data: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @property
    def key(self) -> tuple[DiagnosticKind, Span]:
        return self.kind, self.site

    @property
    def message(self) -> str:
        return MESSAGES[self.kind].format(**self.data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "site": self.site.to_dict(),
            "data": dict(self.data),
            "message": self.message,
        }


class DiagnosticSet:
    """Ordered diagnostics that never holds the same site+kind twice."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []
        self._seen: set[tuple[DiagnosticKind, Span]] = set()

    def add(self, site: Span, kind: DiagnosticKind, **data: str) -> bool:
        diagnostic = Diagnostic(site=site, kind=kind, data=data)
        if diagnostic.key in self._seen:
            return False
        self._seen.add(diagnostic.key)
        self._items.append(diagnostic)
        return True

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> list[Diagnostic]:
        return list(self._items)
