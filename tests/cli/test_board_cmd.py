"""Tests for 'ticketban board'."""

import json
from argparse import Namespace

import pytest

from ticketban.cli.board import board_summary

BASE = "http://api.test/api"


def _args(**kwargs):
    return Namespace(**{"api": None, "json": False, "role": None, "project": None, "developer": None, **kwargs})


def test_board_summary(config_path, dev_board, capsys):
    assert board_summary(_args()) == 0

    out = capsys.readouterr().out
    assert "To Do" in out
    assert "1 ticket" in out
    assert "#TK-1" in out
    assert "Testing      0 tickets" in out


def test_board_summary_json(config_path, dev_board, capsys):
    assert board_summary(_args(json=True)) == 0

    data = json.loads(capsys.readouterr().out)
    assert [c["key"] for c in data["columns"]] == ["todo", "inProgress", "review", "testing", "done"]
    assert data["columns"][0]["id"] == "c1"
    assert data["columns"][0]["tickets"][0]["code"] == "TK-1"
    assert data["columns"][4]["tickets"][0]["title"] == "Logo"


def test_board_summary_tester_lanes(config_path, requests_mock, capsys):
    requests_mock.get(f"{BASE}/kanbanboard/tester/personal", json={"data": {"columns": {}}})

    assert board_summary(_args(json=True, role="tester")) == 0

    data = json.loads(capsys.readouterr().out)
    assert [c["key"] for c in data["columns"]] == ["review", "testing", "done"]


def test_board_summary_error(config_path, requests_mock, capsys):
    requests_mock.get(f"{BASE}/kanbanboard/developer/personal", status_code=500, json={"message": "Boom"})

    with pytest.raises(SystemExit) as exc:
        board_summary(_args(json=True))

    assert exc.value.code == 1
    assert json.loads(capsys.readouterr().err) == {"error": "Boom"}


def test_board_requires_login(signed_out, capsys):
    with pytest.raises(SystemExit):
        board_summary(_args())

    assert "error: Not signed in" in capsys.readouterr().err


def test_board_summary_project_load_error(config_path, requests_mock, capsys):
    requests_mock.get(f"{BASE}/manager/projects", status_code=500, json={"message": "Projects unavailable"})

    with pytest.raises(SystemExit) as exc:
        board_summary(_args(role="manager"))

    assert exc.value.code == 1
    assert "error: Projects unavailable" in capsys.readouterr().err


def test_board_summary_developer_by_id(config_path, requests_mock, capsys):
    requests_mock.get(
        f"{BASE}/kanbanboard/developer/d1",
        json={"data": {"columns": {"review": [{"_id": "t7", "code": "TK-7", "title": "Audit"}]}}},
    )

    assert board_summary(_args(json=True, developer="d1")) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["columns"][2]["key"] == "review"
    assert data["columns"][2]["tickets"][0]["code"] == "TK-7"
    assert requests_mock.last_request.path == "/api/kanbanboard/developer/d1"
