"""Delegation graph and relay-chain depth analysis.

A component "delegates" to another when its returned markup renders that
component as a self-closing element. Long chains of such handoffs
(``Root -> <Page /> -> <Header /> -> ...``) hide the real tree behind
relay components; this module measures them.
"""

import logging
from dataclasses import dataclass, field

from .diagnostics import DiagnosticKind, DiagnosticSet
from .names import is_component_name
from .syntax import (
    BlockBody,
    FunctionBody,
    FunctionDeclaration,
    FunctionExpression,
    Markup,
    MarkupElement,
    ModuleSyntax,
    Span,
)

logger = logging.getLogger(__name__)

# Depth contributed by a component reached again while it is still being
# measured; also the default reporting threshold.
CYCLE_DEPTH = 3
DEFAULT_THRESHOLD = 3


@dataclass
class DelegationNode:
    name: str
    site: Span
    delegates: tuple[str, ...] = ()


@dataclass
class DelegationGraph:
    """Components and the components their markup hands off to."""

    nodes: dict[str, DelegationNode] = field(default_factory=dict)

    @classmethod
    def from_module(cls, module: ModuleSyntax) -> "DelegationGraph":
        graph = cls()
        for declaration in module.declarations:
            if not is_component_name(declaration.name):
                continue
            if isinstance(declaration, FunctionDeclaration):
                body = declaration.body
                site = declaration.span
            elif isinstance(declaration.init, FunctionExpression):
                body = declaration.init.body
                site = declaration.name_span
            else:
                continue
            graph.nodes[declaration.name] = DelegationNode(
                name=declaration.name,
                site=site,
                delegates=returned_self_closing_components(body),
            )
        return graph

    def children(self, name: str) -> list[str]:
        """Registered components ``name`` delegates to."""
        node = self.nodes.get(name)
        if node is None:
            return []
        return [child for child in node.delegates if child in self.nodes]


def returned_self_closing_components(body: FunctionBody) -> tuple[str, ...]:
    """Names of self-closing custom elements in a function's returned markup.

    Only the body expression itself, or the arguments of ``return``
    statements directly inside the body block, count as returned markup.
    """
    names: dict[str, None] = {}
    if isinstance(body, BlockBody):
        for markup in body.returns:
            if markup is not None:
                _collect_self_closing(markup, names)
    elif body is not None:
        _collect_self_closing(body, names)
    return tuple(names)


def _collect_self_closing(markup: Markup, names: dict[str, None]) -> None:
    stack = [markup]
    while stack:
        current = stack.pop()
        if isinstance(current, MarkupElement) and current.self_closing:
            if current.component_name:
                names.setdefault(current.component_name, None)
        # reversed keeps document order
        stack.extend(reversed(current.children))


@dataclass
class _Frame:
    name: str
    pending: list[str]
    depth: int = 1


class DepthAnalyzer:
    """Compute the longest self-closing relay chain from each component.

    depth(X) is 1 when X delegates to no registered component, otherwise
    1 + the deepest registered delegate. Finished depths are memoized for
    the whole run. A component met again while still on the walk stack
    contributes ``cycle_depth`` instead of being re-entered, so cyclic
    graphs terminate.
    """

    def __init__(self, graph: DelegationGraph, cycle_depth: int = CYCLE_DEPTH):
        self.graph = graph
        self.cycle_depth = cycle_depth
        self._memo: dict[str, int] = {}

    def compute_depths(self) -> dict[str, int]:
        return {name: self.depth_of(name) for name in self.graph.nodes}

    def depth_of(self, name: str) -> int:
        if name in self._memo:
            return self._memo[name]
        if name not in self.graph.nodes:
            return 0

        visiting = {name}
        stack = [_Frame(name, list(reversed(self.graph.children(name))))]
        result = 1

        while stack:
            frame = stack[-1]
            if not frame.pending:
                stack.pop()
                visiting.discard(frame.name)
                self._memo[frame.name] = frame.depth
                if stack:
                    stack[-1].depth = max(stack[-1].depth, 1 + frame.depth)
                else:
                    result = frame.depth
                continue

            child = frame.pending.pop()
            if child in self._memo:
                child_depth = self._memo[child]
            elif child in visiting:
                child_depth = self.cycle_depth
            else:
                visiting.add(child)
                stack.append(_Frame(child, list(reversed(self.graph.children(child)))))
                continue
            frame.depth = max(frame.depth, 1 + child_depth)

        return result


def compute_depths(graph: DelegationGraph, cycle_depth: int = CYCLE_DEPTH) -> dict[str, int]:
    """Depth of every component in ``graph``, in registration order."""
    return DepthAnalyzer(graph, cycle_depth).compute_depths()


def check_delegation_depth(
    module: ModuleSyntax, threshold: int = DEFAULT_THRESHOLD
) -> DiagnosticSet:
    """Report every component whose relay chain depth reaches ``threshold``."""
    graph = DelegationGraph.from_module(module)
    diagnostics = DiagnosticSet()

    for name, depth in compute_depths(graph).items():
        if depth < threshold:
            continue
        diagnostics.add(
            graph.nodes[name].site,
            DiagnosticKind.DEEP_DELEGATION_CHAIN,
            component=name,
            depth=str(depth),
        )

    logger.debug(
        f"{module.path}: {len(graph.nodes)} component(s) in delegation graph, "
        f"{len(diagnostics)} deep chain(s) at threshold {threshold}"
    )
    return diagnostics
