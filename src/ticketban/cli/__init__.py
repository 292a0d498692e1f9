"""CLI argument parser and dispatch for ticketban."""

import argparse

from ticketban.cli.auth import login, logout
from ticketban.cli.board import board_summary
from ticketban.cli.events import events
from ticketban.cli.ticket import ticket_move
from ticketban.cli.tui import tui
from ticketban.cli.web import web

ROLES = ("manager", "admin", "developer", "intern", "tester")


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--api", help="API base URL (overrides config and TICKETBAN_API_URL)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")

    board_opts = argparse.ArgumentParser(add_help=False)
    board_opts.add_argument("--role", choices=ROLES, help="Board to show (default: signed-in user's role)")
    board_opts.add_argument("--project", help="Project ID")
    board_opts.add_argument("--developer", help="Developer ID whose board to show")

    parser = argparse.ArgumentParser(
        prog="ticketban",
        description="Ticket kanban board for the terminal",
        parents=[common, board_opts],
    )
    # no noun = TUI
    parser.set_defaults(func=tui)

    nouns = parser.add_subparsers(dest="noun")

    # --- login / logout ---
    login_p = nouns.add_parser("login", help="Sign in and store the token", parents=[common])
    login_p.add_argument("--email", required=True, help="Account email")
    login_p.add_argument("--password", help="Password (prompted when omitted)")
    login_p.set_defaults(func=login)

    logout_p = nouns.add_parser("logout", help="Forget the stored token", parents=[common])
    logout_p.set_defaults(func=logout)

    # --- board ---
    board_p = nouns.add_parser("board", help="Show board summary", parents=[common, board_opts])
    board_p.set_defaults(func=board_summary)

    # --- ticket ---
    ticket_p = nouns.add_parser("ticket", help="Ticket operations", parents=[common, board_opts])
    ticket_verbs = ticket_p.add_subparsers(dest="verb", required=True)

    ticket_move_p = ticket_verbs.add_parser("move", help="Move a ticket forward", parents=[common, board_opts])
    ticket_move_p.add_argument("id", help="Ticket ID or code")
    ticket_move_p.add_argument("--from", dest="from_column", help="Current column (checked when given)")
    ticket_move_p.add_argument("--to", dest="to_column", required=True, help="Target column")
    ticket_move_p.set_defaults(func=ticket_move)

    # --- events ---
    events_p = nouns.add_parser("events", help="Tail board push events", parents=[common])
    scope = events_p.add_mutually_exclusive_group()
    scope.add_argument("--project", help="Project ID")
    scope.add_argument("--user", help="User ID (default: signed-in user)")
    events_p.add_argument("--all", action="store_true", help="Include non-board events")
    events_p.set_defaults(func=events)

    # --- web ---
    web_p = nouns.add_parser("web", help="Serve the TUI in a browser", parents=[common, board_opts])
    web_p.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    web_p.add_argument("--port", type=int, default=8617, help="Port (default: 8617)")
    web_p.set_defaults(func=web)

    return parser
