"""Tests for lane keys, aliases and the forward-only rule."""

from ticketban.model.columns import (
    COLUMN_KEYS,
    STATUS_MAP,
    canonical_key,
    column_title,
    is_forward_move,
    order_index,
)


def test_fixed_lane_order():
    assert COLUMN_KEYS == ("todo", "inProgress", "review", "testing", "done")


def test_every_lane_has_a_status():
    assert set(STATUS_MAP) == set(COLUMN_KEYS)
    assert STATUS_MAP["review"] == "code_review"


def test_canonical_key_accepts_titles_and_statuses():
    assert canonical_key("To Do") == "todo"
    assert canonical_key("in_progress") == "inProgress"
    assert canonical_key("In Progress") == "inProgress"
    assert canonical_key("Code Review") == "review"
    assert canonical_key("QA") == "testing"
    assert canonical_key("closed") == "done"


def test_canonical_key_unknown():
    assert canonical_key("Blocked") is None
    assert canonical_key("") is None
    assert canonical_key(None) is None


def test_column_title():
    assert column_title("inProgress") == "In Progress"
    assert column_title("custom") == "custom"


def test_order_index_falls_back_to_columns_order():
    assert order_index("review") == 2
    assert order_index("blocked", ("todo", "blocked")) == 1
    assert order_index("nowhere") == -1


# --- forward-only ---


def test_forward_moves_allowed():
    assert is_forward_move("todo", "inProgress")
    assert is_forward_move("todo", "done")
    assert is_forward_move("review", "testing")


def test_backward_and_same_rejected():
    assert not is_forward_move("done", "todo")
    assert not is_forward_move("testing", "review")
    assert not is_forward_move("review", "review")


def test_unknown_key_is_allowed():
    """The rule only applies when both lanes are known."""
    assert is_forward_move("mystery", "todo")
    assert is_forward_move("done", "mystery")
