"""Tests for server-sent event parsing and subscription."""

from unittest.mock import MagicMock

from ticketban.events import EventSubscription, is_board_event, iter_sse_payloads, subscribe_to_events


def test_board_event_prefixes():
    assert is_board_event({"type": "ticket.created"})
    assert is_board_event({"type": "kanban.moved"})
    assert is_board_event({"type": "bug.reported"})


def test_other_events_ignored():
    assert not is_board_event({"type": "user.login"})
    assert not is_board_event({"type": "tickets"})
    assert not is_board_event({})
    assert not is_board_event("ticket.created")
    assert not is_board_event({"type": 3})


# --- stream parsing ---


def test_single_event():
    lines = ['data: {"type": "ticket.updated"}', ""]
    assert list(iter_sse_payloads(lines)) == [{"type": "ticket.updated"}]


def test_multiline_data_joined():
    lines = ['data: {"type":', 'data: "kanban.moved"}', ""]
    assert list(iter_sse_payloads(lines)) == [{"type": "kanban.moved"}]


def test_comments_and_other_fields_skipped():
    lines = [": keepalive", "event: message", "id: 4", 'data: {"type": "bug.new"}', ""]
    assert list(iter_sse_payloads(lines)) == [{"type": "bug.new"}]


def test_non_json_heartbeat_dropped():
    lines = ["data: ping", "", "data: [1, 2]", "", 'data: {"a": 1}', ""]
    assert list(iter_sse_payloads(lines)) == [{"a": 1}]


def test_event_cut_off_before_blank_line_dropped():
    assert list(iter_sse_payloads(['data: {"a": 1}'])) == []


# --- subscription ---


def test_dispatch_swallows_handler_errors(caplog):
    def boom(event):
        raise RuntimeError("handler bug")

    subscription = EventSubscription(MagicMock(), {"userId": "u1"}, boom)
    subscription.dispatch({"type": "ticket.updated"})

    assert "event handler failed" in caplog.text


def test_close_stops_thread():
    client = MagicMock()
    client.headers.return_value = {}
    response = MagicMock()
    response.ok = True
    response.iter_lines.return_value = iter([])
    client.http.get.return_value.__enter__.return_value = response

    subscription = EventSubscription(client, {"userId": "u1"}, lambda e: None, reconnect_delay=0.01).start()
    subscription.close()
    subscription._thread.join(timeout=2)

    assert subscription.closed
    assert not subscription._thread.is_alive()


def test_subscribe_returns_close():
    client = MagicMock()
    client.http.get.side_effect = OSError("offline")

    close = subscribe_to_events(client, {"userId": "u1"}, lambda e: None, reconnect_delay=0.01)

    assert callable(close)
    close()


def test_read_stream_dispatches_payloads():
    client = MagicMock()
    client.headers.return_value = {}
    response = MagicMock()
    response.ok = True
    response.iter_lines.return_value = iter(['data: {"type": "ticket.updated"}', "", "data: ping", ""])
    client.http.get.return_value.__enter__.return_value = response
    received = []

    subscription = EventSubscription(client, {"projectId": "p1"}, received.append)
    subscription._read_stream()

    assert received == [{"type": "ticket.updated"}]
    _args, kwargs = client.http.get.call_args
    assert kwargs["stream"] is True
    assert kwargs["headers"]["Accept"] == "text/event-stream"
