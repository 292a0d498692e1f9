"""Board orchestration: project selection, fetches, push updates and moves.

BoardController owns the board state and talks to the outside world only
through the adapter callables it is given. It never raises adapter
failures to its caller: they become ``state.error``.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ticketban.events import is_board_event
from ticketban.model.columns import COLUMN_KEYS, FORWARD_ONLY_MESSAGE, STATUS_MAP, column_title, is_forward_move
from ticketban.model.normalize import ColumnsNormalizer, normalize_board, ticket_id
from ticketban.model.projects import merge_projects, project_id
from ticketban.model.state import DragContext, State, new_board_state

logger = logging.getLogger(__name__)

SseParams = Mapping[str, Any] | Callable[[str], Mapping[str, Any] | None] | None
Subscribe = Callable[[Mapping[str, Any], Callable[[dict], Any]], Callable[[], None]]

_CURRENT = object()


@dataclass
class TicketMove:
    """Everything a move_ticket adapter needs to persist a drop."""

    ticket: Mapping[str, Any]
    from_key: str
    to_key: str
    project_id: str
    context: dict[str, Any] = field(default_factory=dict)
    status_map: Mapping[str, str] = field(default_factory=lambda: dict(STATUS_MAP))

    @property
    def status(self) -> str | None:
        """Backend status string for the destination lane."""
        return self.status_map.get(self.to_key)


@dataclass
class ColumnView:
    key: str
    title: str
    tickets: list
    column_id: str | None = None


async def _call(fn: Callable, *args: Any) -> Any:
    """Call an adapter that may be sync or async."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _message(exc: BaseException, fallback: str) -> str:
    return str(exc) or fallback


class BoardController:
    """Owns one board's state and mediates every change to it."""

    def __init__(
        self,
        fetch_board: Callable,
        move_ticket: Callable | None = None,
        load_projects: Callable | None = None,
        columns_order: Sequence[str] = COLUMN_KEYS,
        normalize_columns: ColumnsNormalizer | None = None,
        sse_params: SseParams = None,
        subscribe: Subscribe | None = None,
        initial_project_id: str = "",
        read_only: bool = False,
        status_map: Mapping[str, str] = STATUS_MAP,
        refresh_key: Any = None,
        on_project_change: Callable[[str], Any] | None = None,
        on_ticket_updated: Callable[[dict], Any] | None = None,
    ) -> None:
        self.columns_order = tuple(k for k in columns_order if k)
        self.state: State = new_board_state(initial_project_id, self.columns_order)
        self.read_only = read_only
        self.status_map = dict(status_map)
        self._fetch_board = fetch_board
        self._move_ticket = move_ticket
        self._load_projects = load_projects
        self._normalize_columns = normalize_columns
        self._sse_params = sse_params
        self._subscribe = subscribe
        self._refresh_key = refresh_key
        self._on_project_change = on_project_change
        self._on_ticket_updated = on_ticket_updated
        self._unsubscribe: Callable[[], None] | None = None
        self._sse_key: str | None = None

    @property
    def project_id(self) -> str:
        return self.state.project_id or ""

    # -- lifecycle --

    async def start(self) -> bool:
        """Load projects, fetch the board and open the push subscription.

        Returns False if either load failed. A project-list error outlives
        the board fetch so it stays on screen.
        """
        before = self.project_id
        await self.load_projects()
        projects_error = self.state.error
        if self.project_id and self.project_id == before and self._on_project_change is not None:
            self._on_project_change(self.project_id)
        fetched = await self.fetch_board()
        if projects_error and not self.state.error:
            self.state.error = projects_error
        self.resubscribe()
        return fetched and not projects_error

    def close(self) -> None:
        """Tear down the subscription and drop any drag in progress."""
        self._teardown_subscription()
        self._sse_key = None
        self.state.drag = None

    # -- projects --

    async def load_projects(self) -> None:
        if self._load_projects is None:
            return
        try:
            projects = await _call(self._load_projects)
        except Exception as exc:
            logger.warning("loading projects failed: %s", exc)
            self.state.error = _message(exc, "Failed to load projects")
            return
        if not isinstance(projects, list):
            return
        self.state.projects = list(projects)
        if not self.project_id and projects:
            pid = project_id(projects[0])
            if pid:
                self._set_project(pid)

    async def select_project(self, pid: str | None) -> None:
        """Switch to another project and fetch its board."""
        pid = str(pid or "")
        if pid == self.project_id:
            return
        self._set_project(pid)
        await self.fetch_board()

    def _set_project(self, pid: str) -> None:
        self.state.project_id = pid
        if self._on_project_change is not None:
            self._on_project_change(pid)
        self.resubscribe()

    # -- fetching --

    async def fetch_board(self, pid: Any = _CURRENT) -> bool:
        """Fetch and replace the board. Returns False if the fetch failed.

        On failure the previous lanes are kept and ``state.error`` is set.
        """
        state = self.state
        if pid is _CURRENT:
            pid = self.project_id
        state.loading = True
        state.error = None
        try:
            raw = await _call(self._fetch_board, pid or None)
            board = normalize_board(raw, self._normalize_columns, self.columns_order)
        except Exception as exc:
            logger.warning("fetching board %s failed: %s", pid or "(default)", exc)
            state.error = _message(exc, "Failed to load board")
            return False
        else:
            state.meta = board.meta
            state.column_ids = board.column_ids
            state.columns = board.columns
            if board.available_projects:
                state.projects = merge_projects(state.projects or [], board.available_projects)
            incoming = board.project_id
            if not self.project_id and incoming and incoming != pid:
                self._set_project(str(incoming))
                return await self.fetch_board(str(incoming))
            if not self.project_id and pid:
                self._set_project(str(pid))
            return True
        finally:
            state.loading = False

    async def refresh(self) -> bool:
        return await self.fetch_board()

    async def set_refresh_key(self, key: Any) -> bool:
        """Refetch when key differs from the last one seen."""
        if key == self._refresh_key:
            return False
        self._refresh_key = key
        return await self.fetch_board()

    # -- push updates --

    def resolved_sse_params(self) -> Mapping[str, Any] | None:
        params = self._sse_params
        if callable(params):
            params = params(self.project_id)
        return params or None

    def resubscribe(self) -> None:
        """Replace the subscription when its parameters changed."""
        if self._subscribe is None:
            return
        params = self.resolved_sse_params()
        key = json.dumps(dict(params or {}), sort_keys=True, default=str)
        if key == self._sse_key:
            return
        self._teardown_subscription()
        self._sse_key = key
        if params:
            self._unsubscribe = self._subscribe(params, self.receive_event)

    def _teardown_subscription(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    async def receive_event(self, event: dict) -> bool:
        """Refetch for ticket, kanban and bug events. Returns True if handled."""
        if not is_board_event(event):
            return False
        await self.fetch_board()
        if self._on_ticket_updated is not None:
            self._on_ticket_updated(event)
        return True

    # -- drag and drop --

    def start_drag(self, ticket: Mapping[str, Any], from_key: str, from_id: str | None = None) -> bool:
        """Begin dragging ticket. Replaces any uncommitted drag."""
        if self.read_only:
            return False
        self.state.drag = DragContext(ticket=ticket, from_key=from_key, from_id=from_id)
        return True

    def cancel_drag(self) -> None:
        self.state.drag = None

    async def drop(self, to_key: str, to_id: str | None = None) -> bool:
        """Commit the current drag onto to_key. Returns True if the move was saved."""
        if self.read_only:
            return False
        drag = self.state.drag
        if drag is None:
            return False
        self.state.drag = None
        if to_key == drag.from_key:
            return False
        if not is_forward_move(drag.from_key, to_key, self.columns_order):
            self.state.error = FORWARD_ONLY_MESSAGE
            return False
        if self._move_ticket is None:
            logger.warning("dropped on %s but the board has no move_ticket adapter", to_key)
            return False

        move = TicketMove(
            ticket=drag.ticket,
            from_key=drag.from_key,
            to_key=to_key,
            project_id=self.project_id,
            context={"from_id": drag.from_id, "to_id": to_id},
            status_map=self.status_map,
        )
        try:
            await _call(self._move_ticket, move)
        except Exception as exc:
            logger.warning("moving ticket to %s failed: %s", to_key, exc)
            self.state.error = _message(exc, "Failed to move ticket")
            return False
        self.state.error = None
        await self.fetch_board()
        return True

    async def move(self, ticket: Mapping[str, Any], from_key: str, to_key: str) -> bool:
        """Drag and drop in one step, for keyboard and CLI moves."""
        ids = self.state.column_ids or {}
        if not self.start_drag(ticket, from_key, ids.get(from_key)):
            return False
        return await self.drop(to_key, ids.get(to_key))

    # -- view --

    def column_views(self) -> list[ColumnView]:
        """One view per entry in columns_order, in that order."""
        columns = self.state.columns or {}
        ids = self.state.column_ids or {}
        return [
            ColumnView(key=key, title=column_title(key), tickets=list(columns.get(key) or []), column_id=ids.get(key))
            for key in self.columns_order
        ]

    def find_ticket(self, tid: str) -> tuple[str, Mapping[str, Any]] | None:
        """Locate a ticket by id. Returns (column key, ticket)."""
        for key, tickets in (self.state.columns or {}).items():
            for ticket in tickets:
                if isinstance(ticket, Mapping) and ticket_id(ticket) == str(tid):
                    return key, ticket
        return None
