"""Shared fixtures for CLI tests."""

import pytest
import yaml

BASE = "http://api.test/api"

DEV_BOARD = {
    "success": True,
    "data": {
        "columns": [
            {"_id": "c1", "name": "To Do", "tickets": [{"_id": "t1", "code": "TK-1", "title": "Login page", "projectId": "p1"}]},
            {"_id": "c2", "name": "In Progress", "tickets": []},
            {"_id": "c5", "name": "Done", "tickets": [{"_id": "t2", "code": "TK-2", "title": "Logo", "projectId": "p1"}]},
        ]
    },
}


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    """Point the CLI at a config file signed in as a developer."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({"api_url": BASE, "token": "tok", "user": {"_id": "u1", "name": "Dev", "role": "developer"}})
    )
    monkeypatch.setenv("TICKETBAN_CONFIG", str(path))
    monkeypatch.delenv("TICKETBAN_API_URL", raising=False)
    monkeypatch.delenv("TICKETBAN_TOKEN", raising=False)
    return path


@pytest.fixture
def signed_out(config_path):
    config_path.write_text(yaml.safe_dump({"api_url": BASE}))
    return config_path


@pytest.fixture
def dev_board(requests_mock):
    requests_mock.get(f"{BASE}/kanbanboard/developer/personal", json=DEV_BOARD)
    return requests_mock
