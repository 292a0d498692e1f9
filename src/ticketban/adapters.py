"""Per-role data adapters for the board.

Each builder returns a BoardAdapters bundle: how to list projects, fetch a
board, persist a move and scope push updates for one kind of user.
Client calls block, so they run through ``asyncio.to_thread``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ticketban.api import ApiClient
from ticketban.controller import SseParams, TicketMove
from ticketban.model.columns import COLUMN_KEYS, STATUS_MAP
from ticketban.model.normalize import ColumnsNormalizer, ticket_id
from ticketban.model.projects import project_id
from ticketban.session import Session

TESTER_COLUMNS = ("review", "testing", "done")
TESTER_STATUS_MAP = {"review": "code_review", "testing": "testing", "done": "done"}

# Backend spellings folded into each lane on the manager's project board.
MANAGER_COLUMN_ALIASES = {
    "todo": ("todo", "To Do", "toDo", "open"),
    "inProgress": ("inProgress", "In Progress", "in_progress"),
    "review": ("review", "Code Review", "Testing", "testing", "code_review"),
    "done": ("done", "Done", "closed"),
}


@dataclass
class BoardAdapters:
    title: str
    fetch_board: Callable
    move_ticket: Callable | None = None
    load_projects: Callable | None = None
    description: str = ""
    columns_order: Sequence[str] = COLUMN_KEYS
    normalize_columns: ColumnsNormalizer | None = None
    sse_params: SseParams = None
    show_project_selector: bool = False
    status_map: Mapping[str, str] = field(default_factory=lambda: dict(STATUS_MAP))


def _unwrap_list(response: Any, *keys: str) -> list:
    """Pick the first list out of response, response.data or response.data.<key>."""
    if isinstance(response, list):
        return response
    if not isinstance(response, Mapping):
        return []
    for key in keys:
        if isinstance(response.get(key), list):
            return response[key]
    data = response.get("data")
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        for key in keys:
            if isinstance(data.get(key), list):
                return data[key]
    return []


def ticket_project_id(ticket: Mapping[str, Any]) -> str:
    pid = ticket.get("projectId") or ticket.get("project")
    if isinstance(pid, Mapping):
        return project_id(pid)
    return str(pid) if pid else ""


def normalize_manager_columns(columns: Any) -> dict[str, list]:
    """Collect the manager board's columns by alias into fixed lanes."""
    if isinstance(columns, list):
        columns = {c.get("name") or c.get("title"): c for c in columns if isinstance(c, Mapping)}
    if not isinstance(columns, Mapping):
        return {}

    def pick(names: Sequence[str]) -> list:
        for name in names:
            value = columns.get(name)
            if isinstance(value, list):
                return value
            if isinstance(value, Mapping) and isinstance(value.get("tickets"), list):
                return value["tickets"]
        return []

    return {key: pick(names) for key, names in MANAGER_COLUMN_ALIASES.items()}


def status_mover(client: ApiClient, scoped_to_board: bool = False) -> Callable:
    """A move_ticket adapter that updates the ticket's status field.

    With scoped_to_board the board's project id is used, otherwise the
    ticket's own projectId. Moves to lanes without a status are skipped.
    """

    async def move_ticket(move: TicketMove) -> None:
        status = move.status
        pid = move.project_id if scoped_to_board else ticket_project_id(move.ticket)
        tid = ticket_id(move.ticket)
        if status and pid and tid:
            await asyncio.to_thread(client.update_ticket_status, pid, tid, status)

    return move_ticket


def manager_adapters(client: ApiClient, session: Session | None = None) -> BoardAdapters:
    async def load_projects() -> list:
        response = await asyncio.to_thread(client.manager_projects)
        return _unwrap_list(response, "projects")

    async def fetch_board(pid: str | None) -> Any:
        if not pid:
            return {}
        response = await asyncio.to_thread(client.project_kanban, pid)
        if not isinstance(response, Mapping):
            return {}
        raw = response.get("data") or response.get("kanban") or response
        if not isinstance(raw, Mapping):
            return {}
        return {"columns": raw.get("columns") or raw}

    return BoardAdapters(
        title="Project Kanban",
        description="Select a project and manage its tickets.",
        fetch_board=fetch_board,
        move_ticket=status_mover(client, scoped_to_board=True),
        load_projects=load_projects,
        normalize_columns=normalize_manager_columns,
        sse_params=lambda pid: {"projectId": pid} if pid else None,
        show_project_selector=True,
    )


def developer_adapters(client: ApiClient, session: Session | None = None) -> BoardAdapters:
    user_id = session.user_id if session else None

    async def fetch_board(pid: str | None) -> Any:
        return await asyncio.to_thread(client.developer_board, pid)

    return BoardAdapters(
        title="My Kanban",
        description="Drag tickets across columns to update status.",
        fetch_board=fetch_board,
        move_ticket=status_mover(client),
        sse_params={"userId": user_id} if user_id else None,
    )


def tester_adapters(client: ApiClient, session: Session | None = None) -> BoardAdapters:
    user_id = session.user_id if session else None

    async def fetch_board(pid: str | None) -> Any:
        return await asyncio.to_thread(client.tester_board, pid)

    return BoardAdapters(
        title="Testing Kanban",
        description="Move tickets through testing workflow.",
        fetch_board=fetch_board,
        move_ticket=status_mover(client),
        columns_order=TESTER_COLUMNS,
        sse_params={"userId": user_id} if user_id else None,
        status_map=TESTER_STATUS_MAP,
    )


def developer_board_adapters(client: ApiClient, developer_id: str) -> BoardAdapters:
    """One developer's board, opened by id rather than as the signed-in user."""

    async def fetch_board(pid: str | None) -> Any:
        if not developer_id:
            return {"columns": {}}
        return await asyncio.to_thread(client.developer_board_by_id, developer_id)

    return BoardAdapters(
        title="Developer Kanban",
        description=f"Viewing developer board for {developer_id}",
        fetch_board=fetch_board,
        move_ticket=status_mover(client),
        sse_params={"userId": developer_id} if developer_id else None,
    )


ROLE_ADAPTERS = {
    "manager": manager_adapters,
    "admin": manager_adapters,
    "developer": developer_adapters,
    "intern": developer_adapters,
    "tester": tester_adapters,
}


def adapters_for(
    client: ApiClient,
    session: Session,
    role: str | None = None,
    developer_id: str | None = None,
) -> BoardAdapters:
    """Adapters for role (defaults to the session's), falling back to developer.

    A developer_id opens that developer's board whatever the role.
    """
    if developer_id:
        return developer_board_adapters(client, developer_id)
    builder = ROLE_ADAPTERS.get(role or session.role, developer_adapters)
    return builder(client, session)
