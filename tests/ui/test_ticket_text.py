"""Tests for ticket card and lane header text."""

from ticketban.ui.constants import DEFAULT_PRIORITY_COLOR, UNTITLED_TICKET
from ticketban.ui.ticket_text import (
    build_card_text,
    build_lane_header,
    priority_color,
    resolve_name,
    ticket_code,
    ticket_title,
)


def test_resolve_name():
    assert resolve_name("ada") == "ada"
    assert resolve_name({"firstName": "Ada", "lastName": "Lovelace"}) == "Ada Lovelace"
    assert resolve_name({"email": "ada@example.com"}) == "ada@example.com"
    assert resolve_name(None) == ""
    assert resolve_name(42) == ""


def test_ticket_code_falls_back_to_id_tail():
    assert ticket_code({"code": "TK-7"}) == "TK-7"
    assert ticket_code({"_id": "64f0c0ffee123456"}) == "123456"
    assert ticket_code({}) == ""


def test_ticket_title_default():
    assert ticket_title({}) == UNTITLED_TICKET


def test_priority_color_unknown():
    assert priority_color("whatever") == DEFAULT_PRIORITY_COLOR
    assert priority_color(None) == DEFAULT_PRIORITY_COLOR


def test_card_text():
    ticket = {
        "_id": "abc123456",
        "title": "Fix login",
        "priority": "high",
        "type": "bug",
        "assignedDeveloper": {"firstName": "Ada"},
        "tester": "Grace",
    }
    text = build_card_text(ticket).plain
    assert "Fix login" in text
    assert "#123456" in text
    assert " high " in text
    assert " bug " in text
    assert "Dev: Ada" in text
    assert "Tester: Grace" in text


def test_card_text_minimal():
    text = build_card_text({"title": "Bare"}).plain
    assert "Bare" in text
    assert "Dev:" not in text


def test_lane_header():
    assert build_lane_header("todo", "To Do", 3).plain.endswith("To Do 3")
