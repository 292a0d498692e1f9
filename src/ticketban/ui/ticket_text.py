"""Pure functions for building ticket card and lane header text."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rich.text import Text

from ticketban.model.normalize import ticket_id
from ticketban.ui.constants import (
    DEFAULT_LANE_COLOR,
    DEFAULT_PRIORITY_COLOR,
    ICON_LANE,
    LANE_COLORS,
    PRIORITY_COLORS,
    UNTITLED_TICKET,
)


def resolve_name(user: Any) -> str:
    """Display name for a user given as a string or a user object."""
    if not user:
        return ""
    if isinstance(user, str):
        return user
    if isinstance(user, Mapping):
        first = str(user.get("firstName") or user.get("name") or user.get("username") or "").strip()
        last = str(user.get("lastName") or "").strip()
        combined = " ".join(part for part in (first, last) if part)
        if combined:
            return combined
        return str(user.get("email") or "")
    return ""


def priority_color(priority: Any) -> str:
    return PRIORITY_COLORS.get(str(priority or "").lower(), DEFAULT_PRIORITY_COLOR)


def lane_color(key: str) -> str:
    return LANE_COLORS.get(key, DEFAULT_LANE_COLOR)


def ticket_title(ticket: Mapping[str, Any]) -> str:
    return str(ticket.get("title") or ticket.get("name") or UNTITLED_TICKET)


def ticket_code(ticket: Mapping[str, Any]) -> str:
    """Short code: explicit code or key, else the last 6 characters of the id."""
    code = ticket.get("code") or ticket.get("key")
    if code:
        return str(code)
    tid = ticket_id(ticket)
    return tid[-6:] if tid else ""


def build_card_text(ticket: Mapping[str, Any]) -> Text:
    """Default card body: title, code with priority and type, then people.

    The priority colors the leading bar.
    """
    bar = Text("▍", style=priority_color(ticket.get("priority")))
    result = bar + Text(ticket_title(ticket), style="bold")

    details = Text()
    code = ticket_code(ticket)
    if code:
        details.append(f"#{code}", style="dim")
    for tag in (ticket.get("priority"), ticket.get("type")):
        if tag:
            details.append(" ")
            details.append(f" {tag} ", style="reverse")
    if details:
        result.append("\n")
        result.append(details)

    developer = resolve_name(ticket.get("assignedDeveloper") or ticket.get("assignee") or ticket.get("assignedTo"))
    tester = resolve_name(ticket.get("tester"))
    people = [label for label in (f"Dev: {developer}" if developer else "", f"Tester: {tester}" if tester else "") if label]
    if people:
        result.append("\n")
        result.append("  ".join(people), style="italic")
    return result


def build_lane_header(key: str, title: str, count: int) -> Text:
    """Colored dot, bold title and ticket count."""
    result = Text(f"{ICON_LANE} ", style=lane_color(key))
    result.append(title, style="bold")
    result.append(f" {count}", style="dim")
    return result
