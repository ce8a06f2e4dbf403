"""Name helpers shared by the compound analysis stages."""

import re

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")

# Aggregator files re-export many blocks and never define one themselves.
AGGREGATOR_STEMS = frozenset({"index"})


def is_component_name(name: str | None) -> bool:
    """Check whether ``name`` follows the component convention.

    A component name starts with an uppercase ASCII letter; this is the
    only structural test separating components from ordinary values.
    """
    if not name:
        return False
    first = name[0]
    return "A" <= first <= "Z"


def normalize_name(name: str) -> str:
    """Case-fold ``name`` and drop everything but ASCII letters and digits.

    ``date-picker``, ``date_picker``, ``DatePicker`` and ``datePicker`` all
    normalize to ``datepicker``.
    """
    return _NON_ALPHANUMERIC.sub("", name.lower())


def is_aggregator_stem(stem: str) -> bool:
    """Check whether a file stem denotes an aggregator (index) file."""
    return normalize_name(stem) in AGGREGATOR_STEMS


def strip_block_prefix(name: str, block: str) -> str | None:
    """Return ``name`` minus the literal ``block`` prefix.

    Returns None when ``name`` does not start with ``block``. The match is
    a plain character prefix: ``ButtonGroup`` is not a prefix of
    ``GroupItemIcon`` and no nested blocks are inferred.
    """
    if not name.startswith(block):
        return None
    return name[len(block) :]
