"""Handlers for 'ticketban board' commands."""

from ticketban.cli._common import (
    build_controller,
    load_board_or_die,
    load_context,
    output_json,
    require_login,
    ticket_summary,
)
from ticketban.model.projects import project_id, project_name


def board_summary(args) -> int:
    """Show the normalized board: lanes, ticket counts and tickets."""
    _config, session, client = load_context(args)
    require_login(session, args.json)
    controller = build_controller(client, session, args.role, args.project, args.developer)
    load_board_or_die(controller, args.json)

    columns = [
        {
            "key": view.key,
            "title": view.title,
            "id": view.column_id,
            "tickets": [ticket_summary(t) for t in view.tickets],
        }
        for view in controller.column_views()
    ]

    if args.json:
        output_json(
            {
                "project": controller.project_id or None,
                "projects": [{"id": project_id(p), "name": project_name(p)} for p in controller.state.projects or []],
                "columns": columns,
            }
        )
        return 0

    if controller.project_id:
        names = {project_id(p): project_name(p) for p in controller.state.projects or []}
        print(names.get(controller.project_id) or controller.project_id)
    for c in columns:
        count = len(c["tickets"])
        tickets = "ticket" if count == 1 else "tickets"
        print(f"  {c['title']:<12} {count} {tickets}")
        for t in c["tickets"]:
            print(f"    #{t['code']:<8} {t['title']}")
    return 0
