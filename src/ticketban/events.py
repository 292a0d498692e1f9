"""Server-sent event subscription for live board updates.

The stream is read with requests on a daemon thread. Callbacks run on that
thread; UI callers marshal them back onto their event loop.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

from ticketban.api import ApiClient

logger = logging.getLogger(__name__)

BOARD_EVENT_PREFIXES = ("ticket.", "kanban.", "bug.")
RECONNECT_DELAY = 3.0
CONNECT_TIMEOUT = 10.0

EventCallback = Callable[[dict], Any]
Unsubscribe = Callable[[], None]


def is_board_event(event: Any) -> bool:
    """True for events that change what a board shows."""
    if not isinstance(event, Mapping):
        return False
    event_type = event.get("type")
    return isinstance(event_type, str) and event_type.startswith(BOARD_EVENT_PREFIXES)


def _decode(data_lines: list[str]) -> dict | None:
    try:
        payload = json.loads("\n".join(data_lines))
    except ValueError:
        return None  # heartbeat or other non-JSON data
    return payload if isinstance(payload, dict) else None


def iter_sse_payloads(lines: Iterable[str]) -> Iterator[dict]:
    """Yield decoded JSON objects from the lines of an event stream.

    Multi-line ``data:`` fields are joined and comments and other fields are
    skipped. Payloads that are not JSON objects are dropped, as is an event
    cut off before its terminating blank line.
    """
    data_lines: list[str] = []
    for line in lines:
        if line is None:
            continue
        if line == "":
            if data_lines:
                payload = _decode(data_lines)
                data_lines = []
                if payload is not None:
                    yield payload
            continue
        if line.startswith(":"):
            continue
        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if name == "data":
            data_lines.append(value)


class EventSubscription:
    """One live event stream. Reconnects until closed."""

    def __init__(
        self,
        client: ApiClient,
        params: Mapping[str, Any] | None,
        on_event: EventCallback,
        reconnect_delay: float = RECONNECT_DELAY,
    ) -> None:
        self.client = client
        self.params = dict(params or {})
        self.on_event = on_event
        self.reconnect_delay = reconnect_delay
        self._stop = threading.Event()
        self._response = None
        self._thread: threading.Thread | None = None

    @property
    def url(self) -> str:
        return self.client.events_url(self.params)

    @property
    def closed(self) -> bool:
        return self._stop.is_set()

    def start(self) -> "EventSubscription":
        self._thread = threading.Thread(target=self._run, name="ticketban-events", daemon=True)
        self._thread.start()
        return self

    def close(self) -> None:
        self._stop.set()
        response = self._response
        if response is not None:
            response.close()

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self._read_stream()
            except Exception as exc:
                if self._stop.is_set():
                    break
                logger.warning("event stream %s dropped: %s", self.url, exc)
            self._stop.wait(self.reconnect_delay)

    def _read_stream(self) -> None:
        headers = self.client.headers()
        headers["Accept"] = "text/event-stream"
        with self.client.http.get(
            self.url,
            headers=headers,
            stream=True,
            timeout=(CONNECT_TIMEOUT, None),
        ) as response:
            self._response = response
            if not response.ok:
                logger.warning("event stream %s -> %s", self.url, response.status_code)
                return
            response.encoding = response.encoding or "utf-8"
            lines = response.iter_lines(chunk_size=None, decode_unicode=True)
            for payload in iter_sse_payloads(lines):
                if self._stop.is_set():
                    return
                self.dispatch(payload)
        self._response = None

    def dispatch(self, payload: dict) -> None:
        try:
            self.on_event(payload)
        except Exception:
            logger.exception("event handler failed for %s", payload.get("type"))


def subscribe_to_events(
    client: ApiClient,
    params: Mapping[str, Any] | None,
    on_event: EventCallback,
    reconnect_delay: float = RECONNECT_DELAY,
) -> Unsubscribe:
    """Start streaming events for params; returns a callable that stops it."""
    subscription = EventSubscription(client, params, on_event, reconnect_delay).start()
    return subscription.close
