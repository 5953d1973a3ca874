"""Logic for translating Qt input events into drawing requests."""

from __future__ import annotations

import math
from typing import Callable, Optional

from PySide6.QtCore import QObject, QPointF, Qt, Signal

from ..config import CLICK_SLOP_PX
from ..geometry.measure import Vertex
from .state_machine import DrawingController


class DrawingInputHandler(QObject):
    """Route map widget events to a :class:`DrawingController`.

    Each ``handle_*`` method returns ``True`` when the event was consumed by
    the drawing tool, in which case the host widget must not run its own
    pan/zoom handling for it.
    """

    cursor_changed = Signal(Qt.CursorShape)
    cursor_reset = Signal()

    def __init__(
        self,
        controller: DrawingController,
        unproject: Callable[[QPointF], Optional[Vertex]],
        *,
        click_slop: float = CLICK_SLOP_PX,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._unproject = unproject
        self._click_slop = float(click_slop)
        self._press_pos: Optional[QPointF] = None
        self._controller.modeChanged.connect(self._handle_mode_changed)

    # ------------------------------------------------------------------
    def handle_mouse_press(self, event) -> bool:
        """Remember where a click starts; right clicks cancel the shape."""

        if not self._controller.is_collecting:
            return False
        button = event.button()
        if button == Qt.MouseButton.RightButton:
            self._press_pos = None
            self._controller.cancel()
            return True
        if button == Qt.MouseButton.LeftButton:
            self._press_pos = QPointF(event.position())
        # Left presses still reach the map so the user can pan between clicks.
        return False

    # ------------------------------------------------------------------
    def handle_mouse_move(self, event) -> bool:
        """Feed the live cursor position to the preview."""

        if not self._controller.mode.collects_vertices:
            return False
        self._controller.handle_cursor_moved(self._unproject(event.position()))
        return False

    # ------------------------------------------------------------------
    def handle_mouse_release(self, event) -> bool:
        """Turn a stationary press/release pair into a drawing click."""

        if event.button() != Qt.MouseButton.LeftButton or self._press_pos is None:
            return False
        start = self._press_pos
        self._press_pos = None
        position = event.position()
        moved = math.hypot(position.x() - start.x(), position.y() - start.y())
        if moved > self._click_slop:
            return False
        vertex = self._unproject(position)
        if vertex is None:
            return False
        return self._controller.handle_click(vertex)

    # ------------------------------------------------------------------
    def handle_mouse_double_click(self, event) -> bool:
        """Finalize the shape and swallow the map's double-click zoom."""

        if event.button() != Qt.MouseButton.LeftButton:
            return False
        self._press_pos = None
        return self._controller.handle_double_click()

    # ------------------------------------------------------------------
    def handle_key_press(self, event) -> bool:
        key = event.key()
        if key == Qt.Key.Key_Escape:
            return self._controller.cancel()
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            return self._controller.finish()
        return False

    # ------------------------------------------------------------------
    def _handle_mode_changed(self, mode) -> None:
        self._press_pos = None
        if mode.is_active:
            self.cursor_changed.emit(Qt.CursorShape.CrossCursor)
        else:
            self.cursor_reset.emit()


__all__ = ["DrawingInputHandler"]
