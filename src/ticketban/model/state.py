"""Reactive board state with change notification."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ticketban.model.normalize import complete_columns

Callback = Callable[["State", str, Any, Any], None]


@dataclass
class DragContext:
    """The ticket being dragged and the lane it came from."""

    ticket: Mapping[str, Any]
    from_key: str
    from_id: str | None = None


class State:
    """Attribute bag that fires watchers when a value changes.

    Values are read and written as attributes. Watchers are registered per
    key and receive ``(state, key, old, new)``. Writing an equal value is
    silent.
    """

    def __init__(self, **data: Any) -> None:
        object.__setattr__(self, "_values", {})
        object.__setattr__(self, "_watchers", {})
        for key, value in data.items():
            setattr(self, key, value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._values.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        old = self._values.get(name)
        self._values[name] = value
        if old != value:
            for callback in list(self._watchers.get(name, ())):
                callback(self, name, old, value)

    def watch(self, key: str, callback: Callback) -> Callable[[], None]:
        """Watch a key for changes. Returns an unwatch callable."""
        self._watchers.setdefault(key, []).append(callback)

        def unwatch() -> None:
            callbacks = self._watchers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unwatch

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"<State [{', '.join(self._values)}]>"


def new_board_state(project_id: str = "", columns_order=None) -> State:
    """Fresh state for a board: no projects, empty lanes, idle."""
    columns = complete_columns({}, columns_order) if columns_order else complete_columns({})
    return State(
        projects=[],
        project_id=project_id or "",
        columns=columns,
        column_ids={},
        meta={},
        loading=False,
        error=None,
        drag=None,
    )
