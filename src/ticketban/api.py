"""Blocking REST client for the project tracking backend.

All calls are synchronous; async callers wrap them in ``asyncio.to_thread``.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urlencode

import requests

from ticketban.config import DEFAULT_API_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error - please check your connection"


class ApiError(Exception):
    """A failed request. ``status`` is None for network failures."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AuthError(ApiError):
    """Login rejected."""


def _query(**params: Any) -> str:
    pairs = {k: v for k, v in params.items() if v}
    return f"?{urlencode(pairs)}" if pairs else ""


def _error_message(response: requests.Response) -> str:
    fallback = f"HTTP error! status: {response.status_code}"
    try:
        data = response.json()
    except ValueError:
        return response.reason or fallback
    if isinstance(data, dict):
        return data.get("message") or data.get("error") or fallback
    return fallback


class ApiClient:
    """Thin wrapper over a requests session with bearer auth and error mapping."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.http = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def headers(self, include_auth: bool = True) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if include_auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, json: Any = None, include_auth: bool = True) -> Any:
        """Send a request and return the decoded JSON body.

        Raises ApiError on network failure or a non-2xx status.
        """
        url = self.url(path)
        try:
            response = self.http.request(
                method,
                url,
                json=json,
                headers=self.headers(include_auth),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(NETWORK_ERROR) from exc

        if not response.ok:
            message = _error_message(response)
            logger.warning("%s %s -> %s: %s", method, url, response.status_code, message)
            raise ApiError(message, response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(f"Invalid JSON from {path}", response.status_code) from exc

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, json: Any = None, include_auth: bool = True) -> Any:
        return self.request("POST", path, json=json, include_auth=include_auth)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    # -- auth --

    def login(self, email: str, password: str) -> Any:
        return self.post("/auth/login", {"email": email, "password": password}, include_auth=False)

    def logout(self) -> Any:
        return self.post("/auth/logout")

    # -- projects --

    def manager_projects(self) -> Any:
        return self.get("/manager/projects")

    # -- boards --

    def project_kanban(self, project_id: str) -> Any:
        return self.get(f"/manager/kanban/{quote(str(project_id))}")

    def developer_board(self, project_id: str | None = None) -> Any:
        return self.get(f"/kanbanboard/developer/personal{_query(projectId=project_id)}")

    def tester_board(self, project_id: str | None = None) -> Any:
        return self.get(f"/kanbanboard/tester/personal{_query(projectId=project_id)}")

    def developer_board_by_id(self, developer_id: str) -> Any:
        return self.get(f"/kanbanboard/developer/{quote(str(developer_id))}")

    def update_ticket_status(self, project_id: str, ticket_id: str, status: str, comment: str | None = None) -> Any:
        payload: dict[str, Any] = {"status": status}
        if comment:
            payload["comment"] = comment
        return self.put(f"/kanbanboard/tickets/{quote(str(project_id))}/{quote(str(ticket_id))}/status", payload)

    def events_url(self, params: dict[str, Any] | None = None) -> str:
        """Server-sent events URL. Only the first of userId, projectId, role is sent."""
        params = params or {}
        for key in ("userId", "projectId", "role"):
            if params.get(key):
                return f"{self.url('/events')}{_query(**{key: params[key]})}"
        return self.url("/events")
