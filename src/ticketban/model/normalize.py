"""Normalize board payloads into the fixed lane mapping.

Backends answer with several envelope and column shapes. The envelope is
unwrapped first, then the ``columns`` field is classified as one of a
closed set of shapes, each with its own normalizer:

- ``LIST``: ``[{"name": "To Do", "tickets": [...]}, ...]``
- ``ARRAYS``: ``{"todo": [...], "done": [...]}``
- ``GROUPS``: ``{"todo": {"id": "todo", "tickets": [...]}, ...}``
- ``EMPTY``: anything else

Every result carries each fixed key (possibly empty) and nothing else.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ticketban.model.columns import COLUMN_KEYS, canonical_key

Ticket = Mapping[str, Any]
Columns = dict[str, list]
ColumnsNormalizer = Callable[[Any], Mapping[str, Any]]


class ColumnsShape(Enum):
    LIST = "list"
    ARRAYS = "arrays"
    GROUPS = "groups"
    EMPTY = "empty"


@dataclass
class NormalizedBoard:
    """A fetched board reduced to fixed lanes plus whatever else came with it."""

    columns: Columns
    column_ids: dict[str, str] = field(default_factory=dict)
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def project_id(self) -> str | None:
        pid = self.meta.get("projectId")
        return str(pid) if pid else None

    @property
    def available_projects(self) -> list:
        projects = self.meta.get("availableProjects")
        return list(projects) if isinstance(projects, list) else []


def unwrap_envelope(raw: Any) -> dict[str, Any]:
    """Return the board body from ``data.board``, ``data``, ``board`` or the bare object."""
    if not isinstance(raw, Mapping):
        return {}
    data = raw.get("data")
    if isinstance(data, Mapping):
        board = data.get("board")
        return dict(board) if isinstance(board, Mapping) else dict(data)
    board = raw.get("board")
    if isinstance(board, Mapping):
        return dict(board)
    return dict(raw)


def extract_columns(raw: Any, data: Mapping[str, Any]) -> Any:
    """Find the raw columns field in the unwrapped body, then on the envelope."""
    cols = data.get("columns")
    if not cols and isinstance(raw, Mapping):
        cols = raw.get("columns")
    return cols or {}


def classify_columns(cols: Any) -> ColumnsShape:
    if isinstance(cols, list):
        return ColumnsShape.LIST
    if isinstance(cols, Mapping) and cols:
        if any(isinstance(v, Mapping) for v in cols.values()):
            return ColumnsShape.GROUPS
        return ColumnsShape.ARRAYS
    return ColumnsShape.EMPTY


def _resolve(name: Any, known: Sequence[str]) -> str | None:
    if isinstance(name, str) and name in known:
        return name
    key = canonical_key(name) if isinstance(name, str) else None
    return key if key in known else None


def _ticket_list(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def _add(columns: Columns, key: str | None, tickets: list) -> None:
    if key is None:
        return
    columns.setdefault(key, []).extend(tickets)


def _from_list(cols: list, known: Sequence[str]) -> Columns:
    columns: Columns = {}
    for col in cols:
        if not isinstance(col, Mapping):
            continue
        key = _resolve(col.get("name") or col.get("title"), known)
        if key is None:
            key = _resolve(col.get("statusMapping") or col.get("key"), known)
        _add(columns, key, _ticket_list(col.get("tickets")))
    return columns


def _from_arrays(cols: Mapping, known: Sequence[str]) -> Columns:
    columns: Columns = {}
    for name, value in cols.items():
        _add(columns, _resolve(name, known), _ticket_list(value))
    return columns


def _from_groups(cols: Mapping, known: Sequence[str]) -> Columns:
    columns: Columns = {}
    for name, value in cols.items():
        tickets = _ticket_list(value.get("tickets")) if isinstance(value, Mapping) else _ticket_list(value)
        _add(columns, _resolve(name, known), tickets)
    return columns


NORMALIZERS = {
    ColumnsShape.LIST: _from_list,
    ColumnsShape.ARRAYS: _from_arrays,
    ColumnsShape.GROUPS: _from_groups,
    ColumnsShape.EMPTY: lambda cols, known: {},
}


def _known_keys(columns_order: Iterable[str]) -> tuple[str, ...]:
    extra = tuple(k for k in columns_order if k and k not in COLUMN_KEYS)
    return COLUMN_KEYS + extra


def complete_columns(columns: Mapping[str, list], columns_order: Iterable[str] = COLUMN_KEYS) -> Columns:
    """Fill in every known key, dropping anything unknown."""
    return {key: list(columns.get(key) or []) for key in _known_keys(columns_order)}


def normalize_columns(cols: Any, columns_order: Iterable[str] = COLUMN_KEYS) -> Columns:
    """Normalize a raw columns field of any supported shape."""
    known = _known_keys(columns_order)
    shape = classify_columns(cols)
    return complete_columns(NORMALIZERS[shape](cols, known), known)


def column_ids(cols: Any, columns_order: Iterable[str] = COLUMN_KEYS) -> dict[str, str]:
    """Backend column identifiers per lane, where the payload carries them."""
    known = _known_keys(columns_order)
    ids: dict[str, str] = {}
    shape = classify_columns(cols)
    if shape is ColumnsShape.LIST:
        for col in cols:
            if not isinstance(col, Mapping):
                continue
            key = _resolve(col.get("name") or col.get("title"), known) or _resolve(col.get("statusMapping"), known)
            col_id = col.get("_id") or col.get("id")
            if key and col_id and key not in ids:
                ids[key] = str(col_id)
    elif shape is ColumnsShape.GROUPS:
        for name, value in cols.items():
            key = _resolve(name, known)
            if key and isinstance(value, Mapping) and (value.get("_id") or value.get("id")):
                ids[key] = str(value.get("_id") or value.get("id"))
    return ids


def normalize_board(
    raw: Any,
    normalizer: ColumnsNormalizer | None = None,
    columns_order: Iterable[str] = COLUMN_KEYS,
) -> NormalizedBoard:
    """Turn a fetch_board response into a NormalizedBoard.

    A custom normalizer sees the raw columns field; its output is still
    restricted to the known lanes.
    """
    columns_order = tuple(columns_order)
    data = unwrap_envelope(raw)
    cols = extract_columns(raw, data)
    if normalizer is not None:
        columns = normalize_columns(normalizer(cols) or {}, columns_order)
    else:
        columns = normalize_columns(cols, columns_order)
    meta = {k: v for k, v in data.items() if k != "columns"}
    return NormalizedBoard(columns=columns, column_ids=column_ids(cols, columns_order), meta=meta)


def ticket_id(ticket: Ticket) -> str | None:
    """Return a ticket's identifier as a string."""
    tid = ticket.get("_id") or ticket.get("id") or ticket.get("ticketId")
    return str(tid) if tid else None
