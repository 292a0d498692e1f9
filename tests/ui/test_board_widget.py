"""Tests for the KanbanBoard and ColumnWidget widgets."""

import pytest
from textual.app import App, ComposeResult
from textual.widgets import Button, Select, Static

from ticketban.controller import BoardController
from ticketban.model.columns import FORWARD_ONLY_MESSAGE
from ticketban.ui.board import BoardScreen, KanbanBoard, marshalled
from ticketban.ui.card import TicketCard
from ticketban.ui.column import ColumnWidget
from ticketban.ui.constants import EMPTY_COLUMN_TEXT

TICKET = {"_id": "t1", "title": "Fix login", "projectId": "p1"}


class Backend:
    def __init__(self, columns=None, error=None, projects=None):
        self.columns = columns if columns is not None else {"todo": [TICKET]}
        self.error = error
        self.projects = projects
        self.fetches = []
        self.moves = []

    async def fetch_board(self, pid):
        self.fetches.append(pid)
        if self.error:
            raise RuntimeError(self.error)
        return {"columns": self.columns}

    async def move_ticket(self, move):
        self.moves.append(move)

    async def load_projects(self):
        return self.projects


class BoardApp(App):
    """Minimal app hosting one board."""

    def __init__(self, controller, **board_kwargs):
        super().__init__()
        self.controller = controller
        self.board_kwargs = board_kwargs

    def compose(self) -> ComposeResult:
        yield KanbanBoard(self.controller, **self.board_kwargs)


def make_app(backend, **kwargs):
    board_kwargs = {k: kwargs.pop(k) for k in list(kwargs) if k in ("show_project_selector", "on_add_ticket")}
    controller = BoardController(
        fetch_board=backend.fetch_board,
        move_ticket=backend.move_ticket,
        **kwargs,
    )
    return BoardApp(controller, **board_kwargs)


async def settle(app, pilot):
    await app.workers.wait_for_complete()
    await pilot.pause()
    await pilot.pause()


# --- ColumnWidget ---


@pytest.mark.asyncio
async def test_empty_column_placeholder():
    app = App()
    app.compose = lambda: [ColumnWidget("todo", "To Do")]
    async with app.run_test():
        lane = app.query_one(ColumnWidget)
        placeholder = lane.query_one(".lane-empty", Static)
        assert str(placeholder.content) == EMPTY_COLUMN_TEXT
        assert lane.cards == []


@pytest.mark.asyncio
async def test_column_renders_cards():
    app = App()
    app.compose = lambda: [ColumnWidget("review", "Review", [TICKET, {"_id": "t2"}], column_id="c3")]
    async with app.run_test():
        lane = app.query_one(ColumnWidget)
        assert lane.id == "lane-review"
        assert [card.ticket_id for card in lane.cards] == ["t1", "t2"]
        assert not lane.query(".lane-empty")


@pytest.mark.asyncio
async def test_custom_renderer():
    app = App()
    app.compose = lambda: [ColumnWidget("todo", "To Do", [TICKET], render_ticket=lambda t: f"<<{t['title']}>>")]
    async with app.run_test():
        card = app.query_one(TicketCard)
        assert str(card.content) == "<<Fix login>>"


# --- KanbanBoard ---


@pytest.mark.asyncio
async def test_board_renders_lanes_in_order():
    backend = Backend()
    app = make_app(backend, columns_order=("review", "testing", "done"))
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert [lane.key for lane in app.query(ColumnWidget)] == ["review", "testing", "done"]


@pytest.mark.asyncio
async def test_board_shows_fetched_tickets():
    backend = Backend()
    app = make_app(backend)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert backend.fetches == [None]
        todo = app.query_one("#lane-todo", ColumnWidget)
        assert [card.ticket_id for card in todo.cards] == ["t1"]
        assert app.query_one("#lane-done", ColumnWidget).cards == []


@pytest.mark.asyncio
async def test_board_shows_error():
    backend = Backend(error="Server down")
    app = make_app(backend)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        panel = app.query_one("#board-error", Static)
        assert panel.display
        assert "Server down" in str(panel.content)


@pytest.mark.asyncio
async def test_keyboard_move_forward():
    backend = Backend()
    app = make_app(backend)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.query_one(TicketCard).focus()
        await pilot.press("shift+right")
        await settle(app, pilot)
        assert len(backend.moves) == 1
        assert backend.moves[0].to_key == "inProgress"
        assert backend.fetches == [None, None]


@pytest.mark.asyncio
async def test_keyboard_move_backward_rejected():
    backend = Backend(columns={"done": [TICKET]})
    app = make_app(backend)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.query_one(TicketCard).focus()
        await pilot.press("shift+left")
        await settle(app, pilot)
        assert backend.moves == []
        assert FORWARD_ONLY_MESSAGE in str(app.query_one("#board-error", Static).content)


@pytest.mark.asyncio
async def test_read_only_board_cards_not_draggable():
    backend = Backend()
    app = make_app(backend, read_only=True)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        card = app.query_one(TicketCard)
        assert not card.drag_enabled
        card.focus()
        await pilot.press("shift+right")
        await settle(app, pilot)
        assert backend.moves == []


@pytest.mark.asyncio
async def test_drop_message_moves_ticket():
    backend = Backend()
    app = make_app(backend)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        todo = app.query_one("#lane-todo", ColumnWidget)
        testing = app.query_one("#lane-testing", ColumnWidget)
        todo.post_message(ColumnWidget.DragStarted(TICKET, "todo", None))
        await pilot.pause()
        assert app.controller.state.drag is not None
        testing.try_drop(todo.cards[0])
        await settle(app, pilot)
        assert [m.to_key for m in backend.moves] == ["testing"]


@pytest.mark.asyncio
async def test_project_selector_options():
    backend = Backend(projects=[{"_id": "p1", "name": "Alpha"}, {"_id": "p2", "name": "Beta"}])
    controller = BoardController(
        fetch_board=backend.fetch_board,
        move_ticket=backend.move_ticket,
        load_projects=backend.load_projects,
    )
    app = BoardApp(controller, show_project_selector=True)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        select = app.query_one("#project-select", Select)
        assert select.value == "p1"
        assert backend.fetches == ["p1"]


@pytest.mark.asyncio
async def test_action_button_callback():
    backend = Backend()
    pressed = []
    app = make_app(backend, initial_project_id="p4", on_add_ticket=pressed.append)
    async with app.run_test() as pilot:
        await settle(app, pilot)
        app.query_one("#add-ticket", Button).press()
        await pilot.pause()
        assert pressed == ["p4"]


@pytest.mark.asyncio
async def test_board_screen_hosts_board():
    backend = Backend()
    controller = BoardController(fetch_board=backend.fetch_board)

    class ScreenApp(App):
        def on_mount(self) -> None:
            self.push_screen(BoardScreen(KanbanBoard(controller)))

    app = ScreenApp()
    async with app.run_test() as pilot:
        await settle(app, pilot)
        assert isinstance(app.screen, BoardScreen)
        assert app.screen.query_one(KanbanBoard).controller is controller


def test_marshalled_subscribe():
    delivered = []
    captured = {}

    def subscribe(params, on_event):
        captured["params"] = params
        captured["on_event"] = on_event
        return lambda: None

    def call_from_thread(callback, *args):
        delivered.append(args)
        return callback(*args)

    handled = []
    wrapped = marshalled(subscribe, call_from_thread)
    wrapped({"userId": "u1"}, handled.append)
    captured["on_event"]({"type": "ticket.updated"})

    assert captured["params"] == {"userId": "u1"}
    assert delivered == [({"type": "ticket.updated"},)]
    assert handled == [{"type": "ticket.updated"}]


@pytest.mark.asyncio
async def test_mouse_drag_moves_ticket_forward():
    backend = Backend()
    controller = BoardController(fetch_board=backend.fetch_board, move_ticket=backend.move_ticket)

    class ScreenApp(App):
        def on_mount(self) -> None:
            self.push_screen(BoardScreen(KanbanBoard(controller)))

    app = ScreenApp()
    async with app.run_test(size=(180, 40)) as pilot:
        await settle(app, pilot)
        card = app.screen.query_one(TicketCard)

        await pilot.mouse_down(card)
        await pilot.hover(card, offset=(6, 0))
        await pilot.hover("#lane-review", offset=(2, 2))
        await pilot.mouse_up("#lane-review", offset=(2, 2))
        await settle(app, pilot)

        assert [(m.from_key, m.to_key) for m in backend.moves] == [("todo", "review")]
        assert controller.state.drag is None
        assert app.screen._active_draggable is None
