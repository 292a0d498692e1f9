"""Project list helpers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

Project = Mapping[str, Any]


def project_id(project: Project) -> str:
    """Return the project's id as a string, or "" if it has none."""
    pid = project.get("_id") or project.get("id") or ""
    return str(pid)


def project_name(project: Project) -> str:
    return str(project.get("name") or project.get("title") or project_id(project))


def merge_projects(existing: Iterable[Project], incoming: Iterable[Project]) -> list[dict]:
    """Union two project lists by id, keeping first-seen order.

    Incoming entries replace existing ones with the same id and are
    reduced to ``_id``, ``id`` and ``name``. Entries without an id are dropped.
    """
    merged: dict[str, dict] = {}
    for project in existing:
        pid = project_id(project)
        if pid:
            merged[pid] = dict(project)
    for project in incoming:
        pid = project_id(project)
        if not pid:
            continue
        raw_id = project.get("_id") or project.get("id")
        merged[pid] = {"_id": raw_id, "id": raw_id, "name": project.get("name")}
    return list(merged.values())
