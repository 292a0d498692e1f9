"""Kanban board widget and the screen that hosts it."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, HorizontalScroll, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, LoadingIndicator, Select, Static

from ticketban.controller import BoardController, Subscribe
from ticketban.model.projects import project_id, project_name
from ticketban.ui.card import TicketRenderer
from ticketban.ui.column import ColumnWidget
from ticketban.ui.constants import ICON_ERROR
from ticketban.ui.watcher import StateWatcherMixin

ProjectCallback = Callable[[str], Any]

# (button id, label, constructor argument holding the callback)
ACTIONS = (
    ("create-board", "Create Board", "on_create_board"),
    ("add-module", "Add Module", "on_add_module"),
    ("add-ticket", "Add Ticket", "on_add_ticket"),
    ("column-settings", "Column Settings", "on_column_settings"),
)


class KanbanBoard(StateWatcherMixin, Vertical):
    """A five-lane ticket board driven by a BoardController.

    Renders the header toolbar, a loading indicator, an error panel and one
    ColumnWidget per lane. Drags and drops from the lanes go to the
    controller; state changes from the controller repaint the widgets.
    """

    DEFAULT_CSS = """
    KanbanBoard {
        height: 1fr;
    }
    KanbanBoard #board-header {
        height: auto;
        padding: 0 1;
        background: $panel;
    }
    KanbanBoard #board-heading {
        width: 1fr;
        height: auto;
    }
    KanbanBoard #board-title {
        text-style: bold;
    }
    KanbanBoard #board-description {
        color: $text-muted;
    }
    KanbanBoard #board-header Button {
        margin: 0 0 0 1;
        min-width: 10;
    }
    KanbanBoard #project-select {
        width: 30;
    }
    KanbanBoard #loading {
        height: 1;
    }
    KanbanBoard #board-error {
        padding: 0 1;
        border: round $error;
        color: $error;
    }
    KanbanBoard #lanes {
        height: 1fr;
    }
    """

    def __init__(
        self,
        controller: BoardController,
        title: str = "Kanban",
        description: str = "",
        show_project_selector: bool = False,
        render_ticket: TicketRenderer | None = None,
        on_create_board: ProjectCallback | None = None,
        on_add_module: ProjectCallback | None = None,
        on_add_ticket: ProjectCallback | None = None,
        on_column_settings: ProjectCallback | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._init_watcher()
        self.controller = controller
        self.board_title = title
        self.board_description = description
        self.show_project_selector = show_project_selector
        self.render_ticket = render_ticket
        self._action_callbacks = {
            "on_create_board": on_create_board,
            "on_add_module": on_add_module,
            "on_add_ticket": on_add_ticket,
            "on_column_settings": on_column_settings,
        }

    @property
    def state(self):
        return self.controller.state

    def compose(self) -> ComposeResult:
        with Horizontal(id="board-header"):
            with Vertical(id="board-heading"):
                yield Static(self.board_title, id="board-title")
                if self.board_description:
                    yield Static(self.board_description, id="board-description")
            if self.show_project_selector:
                yield Select([], prompt="Select Project", id="project-select")
            for button_id, label, arg in ACTIONS:
                if self._action_callbacks[arg] is not None:
                    yield Button(label, id=button_id, classes="board-action")
            yield Button("Refresh", id="refresh", classes="board-action")
        yield LoadingIndicator(id="loading")
        yield Static(id="board-error")
        with HorizontalScroll(id="lanes"):
            for view in self.controller.column_views():
                yield ColumnWidget(
                    view.key,
                    view.title,
                    view.tickets,
                    view.column_id,
                    render_ticket=self.render_ticket,
                    draggable=not self.controller.read_only,
                )

    def on_mount(self) -> None:
        self.state_watch(self.state, "columns", self._on_columns_changed)
        self.state_watch(self.state, "loading", self._on_loading_changed)
        self.state_watch(self.state, "error", self._on_error_changed)
        self.state_watch(self.state, "projects", self._on_projects_changed)
        self.state_watch(self.state, "project_id", self._on_project_id_changed)
        self._show_loading(bool(self.state.loading))
        self._show_error(self.state.error)
        self.run_worker(self.controller.start(), group="board")

    def on_unmount(self) -> None:
        self.controller.close()

    # -- state → widgets --

    def _on_columns_changed(self, state, key, old, new) -> None:
        ids = self.state.column_ids or {}
        for lane in self.query(ColumnWidget):
            lane.set_tickets((new or {}).get(lane.key) or [], ids.get(lane.key))

    def _on_loading_changed(self, state, key, old, new) -> None:
        self._show_loading(bool(new))

    def _show_loading(self, loading: bool) -> None:
        self.query_one("#loading", LoadingIndicator).display = loading
        for button in self.query(".board-action").results(Button):
            button.disabled = loading

    def _on_error_changed(self, state, key, old, new) -> None:
        self._show_error(new)

    def _show_error(self, error: str | None) -> None:
        panel = self.query_one("#board-error", Static)
        panel.update(f"{ICON_ERROR} {error}" if error else "")
        panel.display = bool(error)

    def _on_projects_changed(self, state, key, old, new) -> None:
        if not self.show_project_selector:
            return
        select = self.query_one("#project-select", Select)
        options = [(project_name(p), project_id(p)) for p in new or [] if project_id(p)]
        select.set_options(options)
        self._sync_select(select)

    def _on_project_id_changed(self, state, key, old, new) -> None:
        if self.show_project_selector:
            self._sync_select(self.query_one("#project-select", Select))

    def _sync_select(self, select: Select) -> None:
        pid = self.controller.project_id
        known = {project_id(p) for p in self.state.projects or []}
        if pid and pid in known and select.value != pid:
            select.value = pid

    # -- widgets → controller --

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id != "project-select":
            return
        event.stop()
        if event.value is Select.BLANK or event.value == self.controller.project_id:
            return
        self.run_worker(self.controller.select_project(str(event.value)), group="board")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.id == "refresh":
            self.refresh_board()
            return
        for button_id, _label, arg in ACTIONS:
            callback = self._action_callbacks[arg]
            if event.button.id == button_id and callback is not None:
                callback(self.controller.project_id)

    def refresh_board(self) -> None:
        self.run_worker(self.controller.refresh(), group="board")

    def set_refresh_key(self, key: Any) -> None:
        """Refetch when key differs from the previous one."""
        self.run_worker(self.controller.set_refresh_key(key), group="board")

    def on_column_widget_drag_started(self, event: ColumnWidget.DragStarted) -> None:
        event.stop()
        self.controller.start_drag(event.ticket, event.from_key, event.from_id)

    def on_ticket_card_drag_cancelled(self, event) -> None:
        event.stop()
        self.controller.cancel_drag()

    def on_column_widget_dropped(self, event: ColumnWidget.Dropped) -> None:
        event.stop()
        self.run_worker(self.controller.drop(event.key, event.column_id), group="board")

    def on_column_widget_move_requested(self, event: ColumnWidget.MoveRequested) -> None:
        event.stop()
        order = self.controller.columns_order
        if event.from_key not in order:
            return
        index = order.index(event.from_key) + event.direction
        if 0 <= index < len(order):
            self.run_worker(self.controller.move(event.ticket, event.from_key, order[index]), group="board")


def marshalled(subscribe: Subscribe, call_from_thread: Callable) -> Subscribe:
    """Wrap a subscribe collaborator so events are delivered on the app's loop."""

    def wrapped(params: Mapping[str, Any], on_event: Callable[[dict], Any]):
        return subscribe(params, lambda event: call_from_thread(on_event, event))

    return wrapped


class BoardScreen(Screen):
    """Full-screen host for one KanbanBoard."""

    DEFAULT_CSS = """
    BoardScreen {
        layers: base overlay;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        ("r", "refresh", "Refresh"),
    ]

    def __init__(self, board: KanbanBoard) -> None:
        super().__init__()
        self.board = board
        self._active_draggable = None

    def compose(self) -> ComposeResult:
        yield self.board
        yield Footer()

    def action_refresh(self) -> None:
        self.board.refresh_board()

    # -- thin delegation: screen routes mouse events to active draggable --

    def on_mouse_move(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_move(event.screen_x, event.screen_y)

    def on_mouse_up(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_finish(event.screen_x, event.screen_y)

    def action_cancel_drag(self) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_cancel()
