"""Ticket card widget."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from textual.message import Message
from textual.widgets import Static

from ticketban.model.normalize import ticket_id
from ticketban.ui.drag import DraggableMixin, DragGhost
from ticketban.ui.ticket_text import build_card_text

TicketRenderer = Callable[[Mapping[str, Any]], Any]


class TicketCard(DraggableMixin, Static, can_focus=True):
    """A single ticket in a lane. Knows its ticket, not its lane."""

    BINDINGS = [
        ("shift+right", "move(1)", "Move forward"),
        ("shift+left", "move(-1)", "Move back"),
    ]

    class DragStarted(Message):
        """Posted when the card starts flying."""

        def __init__(self, card: "TicketCard") -> None:
            super().__init__()
            self.card = card

    class DragCancelled(Message):
        """Posted when the card was released without a drop."""

        def __init__(self, card: "TicketCard") -> None:
            super().__init__()
            self.card = card

    class MoveRequested(Message):
        """Posted when the keyboard asks to shift the card one lane."""

        def __init__(self, card: "TicketCard", direction: int) -> None:
            super().__init__()
            self.card = card
            self.direction = direction

    DEFAULT_CSS = """
    TicketCard {
        width: 100%;
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        background: $surface;
    }
    TicketCard:focus {
        background: $primary-darken-2;
    }
    TicketCard.dragging {
        display: none;
    }
    """

    def __init__(
        self,
        ticket: Mapping[str, Any],
        render_ticket: TicketRenderer | None = None,
        draggable: bool = True,
    ) -> None:
        self.ticket = ticket
        self.render_ticket = render_ticket
        super().__init__(self._content())
        self._init_draggable(enabled=draggable)

    @property
    def ticket_id(self) -> str | None:
        return ticket_id(self.ticket)

    def _content(self) -> Any:
        if self.render_ticket is not None:
            return self.render_ticket(self.ticket)
        return build_card_text(self.ticket)

    def draggable_make_ghost(self) -> DragGhost:
        return DragGhost(self._content())

    def draggable_started(self) -> None:
        self.post_message(self.DragStarted(self))

    def draggable_cancelled(self) -> None:
        self.post_message(self.DragCancelled(self))

    def action_move(self, direction: int) -> None:
        if self.drag_enabled:
            self.post_message(self.MoveRequested(self, direction))
