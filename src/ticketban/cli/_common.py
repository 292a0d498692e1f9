"""Shared helpers for CLI command handlers."""

import asyncio
import json
import sys

from ticketban.adapters import adapters_for
from ticketban.api import ApiClient
from ticketban.config import Config, load_config
from ticketban.controller import BoardController
from ticketban.model.columns import canonical_key
from ticketban.model.normalize import ticket_id
from ticketban.session import READ_ONLY_ROLES, Session
from ticketban.ui.ticket_text import resolve_name, ticket_code, ticket_title


def load_context(args) -> tuple[Config, Session, ApiClient]:
    """Config, session and client for one CLI invocation."""
    config = load_config(api_url=getattr(args, "api", None))
    session = Session.from_config(config, role=getattr(args, "role", None))
    client = ApiClient(config.api_url, session.token, config.timeout)
    return config, session, client


def require_login(session: Session, json_mode: bool) -> None:
    """Exit 1 unless a token is stored."""
    if not session.authenticated:
        error("Not signed in. Run 'ticketban login' first.", json_mode)


def build_controller(
    client: ApiClient,
    session: Session,
    role: str | None,
    project_id: str = "",
    developer_id: str | None = None,
) -> BoardController:
    """A headless controller wired to the role's adapters, without push updates."""
    role = role or session.role
    adapters = adapters_for(client, session, role, developer_id)
    return BoardController(
        fetch_board=adapters.fetch_board,
        move_ticket=adapters.move_ticket,
        load_projects=adapters.load_projects,
        columns_order=adapters.columns_order,
        normalize_columns=adapters.normalize_columns,
        initial_project_id=project_id or "",
        read_only=role in READ_ONLY_ROLES,
        status_map=adapters.status_map,
    )


def load_board_or_die(controller: BoardController, json_mode: bool) -> BoardController:
    """Load projects and the board. Exit 1 with the board error on failure."""
    if not asyncio.run(controller.start()):
        error(controller.state.error or "Failed to load board", json_mode)
    return controller


def resolve_column(name: str, controller: BoardController, json_mode: bool) -> str:
    """Map a lane name or alias to a key on this board. Exit 1 listing lanes if unknown."""
    key = canonical_key(name) or name
    if key in controller.columns_order:
        return key
    available = ", ".join(controller.columns_order)
    error(f"Column '{name}' not found. Available: {available}", json_mode)


def ticket_summary(ticket: dict) -> dict:
    """Compact dict for one ticket."""
    return {
        "id": ticket_id(ticket),
        "code": ticket_code(ticket),
        "title": ticket_title(ticket),
        "priority": ticket.get("priority"),
        "developer": resolve_name(ticket.get("assignedDeveloper")),
        "tester": resolve_name(ticket.get("tester")),
    }


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)
