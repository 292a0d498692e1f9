"""Tests for CLI argument parsing."""

from ticketban.cli import build_parser
from ticketban.cli.board import board_summary
from ticketban.cli.events import events
from ticketban.cli.ticket import ticket_move
from ticketban.cli.tui import tui


def test_no_noun_runs_tui():
    args = build_parser().parse_args(["--role", "manager", "--project", "p1"])
    assert args.func is tui
    assert args.role == "manager"
    assert args.project == "p1"


def test_board_noun():
    args = build_parser().parse_args(["board", "--json", "--project", "p2"])
    assert args.func is board_summary
    assert args.json
    assert args.project == "p2"


def test_developer_option():
    args = build_parser().parse_args(["board", "--developer", "d1"])
    assert args.func is board_summary
    assert args.developer == "d1"

    args = build_parser().parse_args(["--developer", "d2"])
    assert args.func is tui
    assert args.developer == "d2"


def test_ticket_move():
    args = build_parser().parse_args(["ticket", "move", "t1", "--from", "todo", "--to", "done"])
    assert args.func is ticket_move
    assert (args.id, args.from_column, args.to_column) == ("t1", "todo", "done")


def test_events_scope():
    args = build_parser().parse_args(["events", "--user", "u1"])
    assert args.func is events
    assert args.user == "u1"
    assert args.project is None
