"""Handlers for 'ticketban ticket' commands."""

import asyncio

from ticketban.cli._common import (
    build_controller,
    error,
    load_board_or_die,
    load_context,
    output_result,
    require_login,
    resolve_column,
)
from ticketban.model.columns import column_title
from ticketban.model.normalize import ticket_id
from ticketban.ui.ticket_text import ticket_code


def ticket_move(args) -> int:
    """Move a ticket to a later lane and persist its new status."""
    _config, session, client = load_context(args)
    require_login(session, args.json)
    controller = build_controller(client, session, args.role, args.project, args.developer)
    if controller.read_only:
        error(f"The {session.role or args.role} board is read-only.", args.json)
    load_board_or_die(controller, args.json)

    found = controller.find_ticket(args.id)
    if found is None:
        for key, tickets in (controller.state.columns or {}).items():
            match = next((t for t in tickets if ticket_code(t) == args.id), None)
            if match is not None:
                found = key, match
                break
    if found is None:
        error(f"Ticket '{args.id}' not found.", args.json)
    current, ticket = found

    from_key = resolve_column(args.from_column, controller, args.json) if args.from_column else current
    if from_key != current:
        error(f"Ticket '{args.id}' is in {column_title(current)}, not {column_title(from_key)}.", args.json)
    to_key = resolve_column(args.to_column, controller, args.json)
    if to_key == from_key:
        error(f"Ticket '{args.id}' is already in {column_title(to_key)}.", args.json)

    if not asyncio.run(controller.move(ticket, from_key, to_key)):
        error(controller.state.error or "Failed to move ticket", args.json)

    tid = ticket_id(ticket)
    output_result(
        {"id": tid, "from": from_key, "to": to_key, "status": controller.status_map.get(to_key)},
        f"Moved #{ticket_code(ticket)} {column_title(from_key)} -> {column_title(to_key)}",
        args.json,
    )
    return 0
