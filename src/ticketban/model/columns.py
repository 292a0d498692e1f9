"""Fixed board lanes, their order and their backend status strings."""

from __future__ import annotations

import re
from collections.abc import Sequence

COLUMN_KEYS = ("todo", "inProgress", "review", "testing", "done")

COLUMN_TITLES = {
    "todo": "To Do",
    "inProgress": "In Progress",
    "review": "Review",
    "testing": "Testing",
    "done": "Done",
}

ORDER_INDEX = {key: i for i, key in enumerate(COLUMN_KEYS)}

STATUS_MAP = {
    "todo": "open",
    "inProgress": "in_progress",
    "review": "code_review",
    "testing": "testing",
    "done": "done",
}

FORWARD_ONLY_MESSAGE = "Tickets can only be moved forward to later columns."

# Squashed (lowercase, alphanumerics only) spellings seen in backend payloads.
_ALIASES = {
    "todo": "todo",
    "open": "todo",
    "backlog": "todo",
    "inprogress": "inProgress",
    "doing": "inProgress",
    "review": "review",
    "codereview": "review",
    "testing": "testing",
    "test": "testing",
    "qa": "testing",
    "done": "done",
    "closed": "done",
    "completed": "done",
}


def squash(text: str) -> str:
    """Lowercase and strip everything but letters and digits."""
    return re.sub(r"[^a-z0-9]", "", str(text).lower())


def canonical_key(name: str | None) -> str | None:
    """Map a column name, title or status string to a fixed key, or None."""
    if not name:
        return None
    if name in ORDER_INDEX:
        return name
    return _ALIASES.get(squash(name))


def column_title(key: str) -> str:
    return COLUMN_TITLES.get(key, key)


def order_index(key: str, columns_order: Sequence[str] = COLUMN_KEYS) -> int:
    """Position of key in the fixed workflow, falling back to columns_order.

    Returns -1 for keys that appear in neither.
    """
    if key in ORDER_INDEX:
        return ORDER_INDEX[key]
    try:
        return list(columns_order).index(key)
    except ValueError:
        return -1


def is_forward_move(from_key: str, to_key: str, columns_order: Sequence[str] = COLUMN_KEYS) -> bool:
    """True unless both keys are known and to_key is not strictly later."""
    from_idx = order_index(from_key, columns_order)
    to_idx = order_index(to_key, columns_order)
    if from_idx == -1 or to_idx == -1:
        return True
    return to_idx > from_idx
