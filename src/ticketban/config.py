"""Settings file and environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT = 10.0


def default_config_path() -> Path:
    env = os.environ.get("TICKETBAN_CONFIG")
    if env:
        return Path(env).expanduser()
    return Path("~/.config/ticketban/config.yaml").expanduser()


@dataclass
class Config:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    token: str | None = None
    user: dict[str, Any] = field(default_factory=dict)
    path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"api_url": self.api_url, "timeout": self.timeout}
        if self.token:
            data["token"] = self.token
        if self.user:
            data["user"] = dict(self.user)
        return data


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text()
    except FileNotFoundError:
        return {}
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        logger.warning("ignoring malformed config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: expected a mapping", path)
        return {}
    return data


def load_config(path: Path | None = None, api_url: str | None = None) -> Config:
    """Load the config file, then apply env vars, then an explicit api_url."""
    path = path or default_config_path()
    data = _read_yaml(path)

    config = Config(path=path)
    config.api_url = str(data.get("api_url") or DEFAULT_API_URL)
    try:
        config.timeout = float(data.get("timeout") or DEFAULT_TIMEOUT)
    except (TypeError, ValueError):
        logger.warning("invalid timeout %r, using %s", data.get("timeout"), DEFAULT_TIMEOUT)
    config.token = data.get("token") or None
    user = data.get("user")
    config.user = dict(user) if isinstance(user, dict) else {}

    config.api_url = os.environ.get("TICKETBAN_API_URL") or config.api_url
    config.token = os.environ.get("TICKETBAN_TOKEN") or config.token
    if api_url:
        config.api_url = api_url
    return config


def save_config(config: Config) -> Path:
    """Write config back to its file, creating parent directories."""
    path = config.path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False))
    return path
