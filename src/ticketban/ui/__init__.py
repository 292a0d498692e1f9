"""Textual UI for ticketban."""

from ticketban.ui.app import TicketbanApp
from ticketban.ui.board import BoardScreen, KanbanBoard
from ticketban.ui.card import TicketCard
from ticketban.ui.column import ColumnWidget

__all__ = [
    "BoardScreen",
    "ColumnWidget",
    "KanbanBoard",
    "TicketCard",
    "TicketbanApp",
]
