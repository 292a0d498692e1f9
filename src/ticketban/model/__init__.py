"""Board model: fixed lanes, payload normalization and reactive state."""

from ticketban.model.columns import (
    COLUMN_KEYS,
    FORWARD_ONLY_MESSAGE,
    STATUS_MAP,
    column_title,
    is_forward_move,
    order_index,
)
from ticketban.model.normalize import NormalizedBoard, normalize_board, normalize_columns, ticket_id
from ticketban.model.projects import merge_projects, project_id
from ticketban.model.state import DragContext, State, new_board_state

__all__ = [
    "COLUMN_KEYS",
    "DragContext",
    "FORWARD_ONLY_MESSAGE",
    "NormalizedBoard",
    "STATUS_MAP",
    "State",
    "column_title",
    "is_forward_move",
    "merge_projects",
    "new_board_state",
    "normalize_board",
    "normalize_columns",
    "order_index",
    "project_id",
    "ticket_id",
]
