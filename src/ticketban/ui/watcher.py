"""Mixin that manages State watches with auto-cleanup."""

from __future__ import annotations

from typing import Any

from ticketban.model.state import Callback, State


class StateWatcherMixin:
    """Mixin for widgets that watch board State keys.

    Subclasses should:
    - Call ``_init_watcher()`` in ``__init__``
    - Use ``self.state_watch(state, key, callback)`` instead of ``state.watch(...)``
    - Skip calling ``super().on_unmount()``: Textual runs the mixin handler too
    """

    def _init_watcher(self) -> None:
        self._unwatchers: list = []

    def state_watch(self, state: State, key: str, callback: Callback) -> None:
        """Register a watch that is removed on unmount."""

        def guarded(source: State, key: str, old: Any, new: Any) -> None:
            if self._unwatchers:
                callback(source, key, old, new)

        self._unwatchers.append(state.watch(key, guarded))

    def on_unmount(self) -> None:
        for unwatch in self._unwatchers:
            unwatch()
        self._unwatchers.clear()
