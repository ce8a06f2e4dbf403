"""BEM-style naming of compound parts used in markup.

A part rendered as ``<ButtonGroupItem />`` is named Block + Part. Bare part
names (``<Item />``) are too generic, and a prefixed part whose Block is
nowhere in scope breaks the naming scheme.
"""

import logging

from .diagnostics import DiagnosticKind, DiagnosticSet
from .names import is_component_name
from .syntax import FunctionDeclaration, ModuleSyntax

logger = logging.getLogger(__name__)

# Suffix matching walks this order; the first usable suffix wins.
COMMON_PART_NAMES: tuple[str, ...] = (
    "Trigger",
    "Content",
    "Title",
    "Description",
    "Header",
    "Footer",
    "Body",
    "Item",
    "Label",
    "Input",
    "Control",
    "Indicator",
    "Icon",
    "Arrow",
    "Portal",
    "Overlay",
)

EXAMPLE_BLOCK = "ButtonGroup"


def split_compound_name(name: str) -> tuple[str, str] | None:
    """Split ``name`` into ``(block, part)`` on a common part suffix.

    The block must be non-empty and start with an uppercase letter.
    """
    for part in COMMON_PART_NAMES:
        if not name.endswith(part):
            continue
        block = name[: len(name) - len(part)]
        if not is_component_name(block):
            continue
        return block, part
    return None


def known_component_names(module: ModuleSyntax) -> set[str]:
    """Capitalized functions, function-valued variables and imports."""
    names: set[str] = set()
    for declaration in module.declarations:
        if not is_component_name(declaration.name):
            continue
        if isinstance(declaration, FunctionDeclaration) or declaration.is_function_like:
            names.add(declaration.name)
    for binding in module.imports:
        if is_component_name(binding.local):
            names.add(binding.local)
    return names


def check_bem_naming(module: ModuleSyntax) -> DiagnosticSet:
    known = known_component_names(module)
    diagnostics = DiagnosticSet()

    for tag in module.markup_tags:
        name = tag.name
        if not is_component_name(name):
            continue

        if name in COMMON_PART_NAMES:
            diagnostics.add(
                tag.span,
                DiagnosticKind.GENERIC_PART_NAME,
                name=name,
                example=f"{EXAMPLE_BLOCK}{name}",
            )
            continue

        parts = split_compound_name(name)
        if parts is None or parts[0] in known:
            continue
        diagnostics.add(
            tag.span, DiagnosticKind.MISSING_BLOCK_COMPONENT, name=name, block=parts[0]
        )

    logger.debug(f"{module.path}: {len(diagnostics)} BEM naming issue(s)")
    return diagnostics
