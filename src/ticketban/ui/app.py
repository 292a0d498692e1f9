"""Main Textual application for ticketban."""

from __future__ import annotations

from textual.app import App

from ticketban.adapters import adapters_for
from ticketban.api import ApiClient
from ticketban.config import Config
from ticketban.controller import BoardController
from ticketban.events import subscribe_to_events
from ticketban.session import READ_ONLY_ROLES, Session
from ticketban.ui.board import BoardScreen, KanbanBoard, marshalled


class TicketbanApp(App):
    """Ticket kanban board TUI."""

    CSS = """
    Tooltip {
        padding: 0 1;
        margin: 0;
    }
    """

    TITLE = "ticketban"
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(
        self,
        config: Config,
        session: Session,
        client: ApiClient | None = None,
        role: str | None = None,
        project_id: str = "",
        developer_id: str | None = None,
    ):
        super().__init__()
        self.config = config
        self.session = session
        self.client = client or ApiClient(config.api_url, session.token, config.timeout)
        self.role = role or session.role
        self.project_id = project_id
        self.developer_id = developer_id

    def build_board(self) -> KanbanBoard:
        adapters = adapters_for(self.client, self.session, self.role, self.developer_id)

        def subscribe(params, on_event):
            return subscribe_to_events(self.client, params, on_event)

        controller = BoardController(
            fetch_board=adapters.fetch_board,
            move_ticket=adapters.move_ticket,
            load_projects=adapters.load_projects,
            columns_order=adapters.columns_order,
            normalize_columns=adapters.normalize_columns,
            sse_params=adapters.sse_params,
            subscribe=marshalled(subscribe, self.call_from_thread),
            initial_project_id=self.project_id,
            read_only=self.role in READ_ONLY_ROLES,
            status_map=adapters.status_map,
            on_ticket_updated=self._on_ticket_updated,
        )
        return KanbanBoard(
            controller,
            title=adapters.title,
            description=adapters.description,
            show_project_selector=adapters.show_project_selector,
        )

    def on_mount(self) -> None:
        if not self.session.authenticated:
            self.notify("Not signed in. Run 'ticketban login' first.", severity="warning")
        self.sub_title = self.session.user.get("name") or self.role
        self.push_screen(BoardScreen(self.build_board()))

    def _on_ticket_updated(self, event: dict) -> None:
        self.notify(event.get("message") or f"Board updated ({event.get('type')})", timeout=3)
