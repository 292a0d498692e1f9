"""Display constants for the board UI."""

ICON_LANE = "●"
ICON_ERROR = "⚠"

EMPTY_COLUMN_TEXT = "No tickets"
UNTITLED_TICKET = "Untitled Ticket"

LANE_COLORS = {
    "todo": "#0ea5e9",
    "inProgress": "#f59e0b",
    "review": "#8b5cf6",
    "testing": "#22c55e",
    "done": "#10b981",
}
DEFAULT_LANE_COLOR = "#64748b"

PRIORITY_COLORS = {
    "urgent": "#ef4444",
    "high": "#ef4444",
    "medium": "#f59e0b",
    "low": "#10b981",
}
DEFAULT_PRIORITY_COLOR = "#3b82f6"
