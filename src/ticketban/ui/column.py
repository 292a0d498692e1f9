"""Lane widget: a passive list of ticket cards that accepts drops."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import Rule, Static

from ticketban.ui.card import TicketCard, TicketRenderer
from ticketban.ui.constants import EMPTY_COLUMN_TEXT
from ticketban.ui.drag import DropTarget
from ticketban.ui.ticket_text import build_lane_header


class ColumnWidget(DropTarget, Vertical):
    """One status lane.

    Holds no board state: it renders the tickets it is given and forwards
    drag start, drop and keyboard moves to the board, tagged with its lane.
    """

    DEFAULT_CSS = """
    ColumnWidget {
        width: 1fr;
        min-width: 32;
        height: 100%;
        padding: 0 1;
        border-right: tall $surface-lighten-1;
    }
    ColumnWidget.drop-hover {
        background: $boost;
    }
    ColumnWidget > .lane-header {
        width: 100%;
        text-align: center;
    }
    ColumnWidget > Rule.-horizontal {
        margin: 0;
    }
    ColumnWidget .lane-empty {
        color: $text-muted;
        text-align: center;
    }
    """

    class DragStarted(Message):
        """A card in this lane started dragging."""

        def __init__(self, ticket: Mapping[str, Any], from_key: str, from_id: str | None) -> None:
            super().__init__()
            self.ticket = ticket
            self.from_key = from_key
            self.from_id = from_id

    class Dropped(Message):
        """A card was released over this lane."""

        def __init__(self, key: str, column_id: str | None) -> None:
            super().__init__()
            self.key = key
            self.column_id = column_id

    class MoveRequested(Message):
        """Keyboard request to shift a ticket one lane left or right."""

        def __init__(self, ticket: Mapping[str, Any], from_key: str, direction: int) -> None:
            super().__init__()
            self.ticket = ticket
            self.from_key = from_key
            self.direction = direction

    def __init__(
        self,
        key: str,
        title: str,
        tickets: Sequence[Mapping[str, Any]] = (),
        column_id: str | None = None,
        render_ticket: TicketRenderer | None = None,
        draggable: bool = True,
    ) -> None:
        super().__init__(id=f"lane-{key}")
        self.key = key
        self.lane_title = title
        self.tickets = list(tickets)
        self.column_id = column_id
        self.render_ticket = render_ticket
        self.draggable = draggable

    def compose(self) -> ComposeResult:
        yield Static(build_lane_header(self.key, self.lane_title, len(self.tickets)), classes="lane-header")
        yield Rule()
        with VerticalScroll(classes="lane-tickets"):
            yield from self._ticket_widgets()

    def _ticket_widgets(self) -> list[Static]:
        if not self.tickets:
            return [Static(EMPTY_COLUMN_TEXT, classes="lane-empty")]
        return [TicketCard(t, self.render_ticket, draggable=self.draggable) for t in self.tickets]

    def set_tickets(self, tickets: Sequence[Mapping[str, Any]], column_id: str | None = None) -> None:
        """Replace every card with the given tickets."""
        self.tickets = list(tickets)
        if column_id is not None:
            self.column_id = column_id
        self.query_one(".lane-header", Static).update(build_lane_header(self.key, self.lane_title, len(self.tickets)))
        self.call_later(self._rebuild)

    async def _rebuild(self) -> None:
        container = self.query_one(".lane-tickets", VerticalScroll)
        await container.remove_children()
        await container.mount_all(self._ticket_widgets())

    @property
    def cards(self) -> list[TicketCard]:
        return list(self.query(TicketCard))

    # -- forwarding card events, tagged with this lane --

    def on_ticket_card_drag_started(self, event: TicketCard.DragStarted) -> None:
        event.stop()
        self.post_message(self.DragStarted(event.card.ticket, self.key, self.column_id))

    def on_ticket_card_move_requested(self, event: TicketCard.MoveRequested) -> None:
        event.stop()
        self.post_message(self.MoveRequested(event.card.ticket, self.key, event.direction))

    # -- DropTarget --

    def drag_over(self, draggable) -> bool:
        if not isinstance(draggable, TicketCard):
            return False
        self.add_class("drop-hover")
        return True

    def drag_away(self, draggable) -> None:
        self.remove_class("drop-hover")

    def try_drop(self, draggable) -> bool:
        if not isinstance(draggable, TicketCard):
            return False
        self.remove_class("drop-hover")
        self.post_message(self.Dropped(self.key, self.column_id))
        return True
