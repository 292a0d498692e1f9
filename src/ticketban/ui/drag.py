"""Mouse drag-and-drop for ticket cards.

Two mixins:
- DraggableMixin: on dragged widgets, owns the "flying" phase
- DropTarget: on containers, owns the "landing" phase

The screen hosting the board routes mouse moves and releases to the
active draggable through its ``_active_draggable`` attribute.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from textual.geometry import Offset
from textual.widgets import Static

if TYPE_CHECKING:
    from textual.widget import Widget


class DropTarget:
    """Mixin for widgets that can accept drops."""

    def drag_over(self, draggable: DraggableMixin) -> bool:
        """Called while a draggable hovers over this target. Return True to accept."""
        return False

    def drag_away(self, draggable: DraggableMixin) -> None:
        """Called when a draggable leaves this target."""

    def try_drop(self, draggable: DraggableMixin) -> bool:
        """Called on mouse-up. Return True if the drop was taken."""
        return False


class DraggableMixin:
    """Mixin for widgets that can be dragged.

    Subclasses should:
    - Call _init_draggable() in __init__
    - Implement draggable_make_ghost() to return the ghost widget
    - Optionally override draggable_clicked(), draggable_started()
      and draggable_cancelled()
    """

    DRAG_THRESHOLD = 2

    def _init_draggable(self, enabled: bool = True) -> None:
        self.drag_enabled = enabled
        self._drag_start_pos: Offset | None = None
        self._dragging = False
        self._ghost: Widget | None = None
        self._drag_offset = Offset(0, 0)
        self._current_target: DropTarget | None = None

    @property
    def is_dragging(self) -> bool:
        return self._dragging

    def on_mouse_down(self, event) -> None:
        if event.button != 1 or not self.drag_enabled:
            return
        event.stop()
        event.prevent_default()
        self._drag_start_pos = Offset(event.screen_x, event.screen_y)
        self.capture_mouse()

    def on_mouse_move(self, event) -> None:
        if self._drag_start_pos is None:
            return
        event.stop()
        dx = abs(event.screen_x - self._drag_start_pos.x)
        dy = abs(event.screen_y - self._drag_start_pos.y)
        if dx > self.DRAG_THRESHOLD or dy > self.DRAG_THRESHOLD:
            self.release_mouse()
            start, self._drag_start_pos = self._drag_start_pos, None
            self._drag_start(start)

    def on_mouse_up(self, event) -> None:
        if self._drag_start_pos is None:
            return
        event.stop()
        self.release_mouse()
        self._drag_start_pos = None
        self.draggable_clicked()

    def _drag_start(self, mouse_pos: Offset) -> None:
        """Mount the ghost, hide the original and register with the screen."""
        self._dragging = True
        region = self.region
        self._drag_offset = Offset(mouse_pos.x - region.x, mouse_pos.y - region.y)
        self._ghost = self.draggable_make_ghost()
        self._ghost.styles.width = region.width
        self._ghost.styles.offset = (region.x, region.y)
        self.screen.mount(self._ghost)
        self.add_class("dragging")
        self.screen._active_draggable = self
        self.screen.capture_mouse()
        self.draggable_started()

    def _drag_move(self, x: int, y: int) -> None:
        """Called by the screen on mouse move during a drag."""
        if self._ghost is not None:
            self._ghost.styles.offset = (x - self._drag_offset.x, y - self._drag_offset.y)
        target = next(self._targets_at(x, y), None)
        if target is None or target is self._current_target:
            return
        if self._current_target is not None:
            self._current_target.drag_away(self)
        self._current_target = target
        target.drag_over(self)

    def _drag_finish(self, x: int, y: int) -> None:
        """Called by the screen on mouse-up. Offer the drop innermost-out."""
        self.screen.release_mouse()
        dropped = any(target.try_drop(self) for target in self._targets_at(x, y))
        if not dropped and self._current_target is not None:
            dropped = self._current_target.try_drop(self)
        if not dropped:
            self._drag_cancel()
            return
        if self._current_target is not None:
            self._current_target.drag_away(self)
            self._current_target = None
        self._drag_cleanup()

    def _drag_cancel(self) -> None:
        self.screen.release_mouse()
        if self._current_target is not None:
            self._current_target.drag_away(self)
            self._current_target = None
        self._drag_cleanup()
        self.draggable_cancelled()

    def _drag_cleanup(self) -> None:
        if self._ghost is not None:
            self._ghost.remove()
        self._ghost = None
        self._dragging = False
        self._drag_offset = Offset(0, 0)
        self.remove_class("dragging")
        if getattr(self.screen, "_active_draggable", None) is self:
            self.screen._active_draggable = None

    def _targets_at(self, x: int, y: int) -> Iterator[DropTarget]:
        """DropTargets under the point, innermost first, skipping the ghost."""
        try:
            widgets = self.screen.get_widgets_at(x, y)
        except Exception:
            return
        seen: set[int] = set()
        for widget, _region in widgets:
            if self._ghost is not None and (widget is self._ghost or self._ghost in widget.ancestors):
                continue
            candidate = widget
            while candidate is not None:
                if isinstance(candidate, DropTarget) and candidate is not self and id(candidate) not in seen:
                    seen.add(id(candidate))
                    yield candidate
                candidate = candidate.parent

    def draggable_make_ghost(self) -> Widget:
        raise NotImplementedError

    def draggable_clicked(self) -> None:
        """Mouse released without dragging."""

    def draggable_started(self) -> None:
        """The drag passed the threshold and is now flying."""

    def draggable_cancelled(self) -> None:
        """The drag ended without a drop."""


class DragGhost(Static):
    """Floating copy of the dragged card."""

    DEFAULT_CSS = """
    DragGhost {
        layer: overlay;
        height: auto;
        padding: 0 1;
        border: round $primary;
        background: $surface;
    }
    """
