"""Handler for running the board TUI (no noun given)."""

from ticketban.cli._common import load_context


def tui(args) -> int:
    from ticketban.ui import TicketbanApp

    config, session, client = load_context(args)
    app = TicketbanApp(
        config, session, client, role=args.role, project_id=args.project or "", developer_id=args.developer
    )
    app.run()
    return 0
