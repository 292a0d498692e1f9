"""Signed-in user and token, passed explicitly to the client and UI."""

from __future__ import annotations

from typing import Any

from ticketban.api import ApiClient, ApiError, AuthError
from ticketban.config import Config

READ_ONLY_ROLES = frozenset({"manager"})


class Session:
    """Application state for the signed-in user.

    Created once at startup from the config; ``login`` fills it in and
    ``logout`` tears it down.
    """

    def __init__(self, token: str | None = None, user: dict[str, Any] | None = None) -> None:
        self.token = token
        self.user: dict[str, Any] = dict(user or {})

    @classmethod
    def from_config(cls, config: Config, role: str | None = None) -> "Session":
        session = cls(config.token, config.user)
        if role:
            session.user["role"] = role
        return session

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    @property
    def role(self) -> str:
        return str(self.user.get("role") or "")

    @property
    def user_id(self) -> str | None:
        uid = self.user.get("_id") or self.user.get("id")
        return str(uid) if uid else None

    @property
    def read_only(self) -> bool:
        """Board drag-and-drop is disabled for these roles."""
        return self.role in READ_ONLY_ROLES

    def login(self, client: ApiClient, email: str, password: str) -> dict[str, Any]:
        """Authenticate and store the token on both session and client."""
        try:
            response = client.login(email, password)
        except ApiError as exc:
            raise AuthError(str(exc) or "Login failed", exc.status) from exc
        if not isinstance(response, dict) or not response.get("success"):
            message = response.get("message") if isinstance(response, dict) else None
            raise AuthError(message or "Login failed")
        data = response.get("data") or {}
        self.token = data.get("token")
        self.user = dict(data.get("user") or {})
        client.token = self.token
        return data

    def logout(self, client: ApiClient | None = None) -> None:
        if client is not None:
            client.token = None
        self.token = None
        self.user = {}

    def apply(self, config: Config) -> None:
        """Copy session state into config for persisting."""
        config.token = self.token
        config.user = dict(self.user)
