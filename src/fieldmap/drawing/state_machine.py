"""Finite-state drawing protocol turning map input into drawn features."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject, Signal

from ..config import DEFAULT_DRAWING_COLOR
from ..errors import GeometryError
from ..geometry.measure import Vertex
from ..geometry.shapes import (
    Geometry,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
    measure_geometry,
)
from .feature import DrawingPreview, DrawnFeature, FeatureProperties
from .feature_store import FeatureStore
from .modes import DrawingMode

LOGGER = logging.getLogger(__name__)

RenderFactory = Callable[[Geometry, FeatureProperties], Any]


class DrawingController(QObject):
    """Own the active tool and the in-progress vertex buffer.

    The controller is ``Idle`` while the mode is :attr:`DrawingMode.NONE` and
    ``Collecting`` otherwise.  Changing the mode always empties the buffer so
    vertices never leak between shape kinds.  Finalizing with fewer vertices
    than the shape needs does nothing at all; the toolbar's own gating is the
    only guard the user sees.
    """

    modeChanged = Signal(object)
    previewChanged = Signal(object)
    """Emitted with a :class:`DrawingPreview` snapshot, or ``None`` to clear it."""

    featureAdded = Signal(object)

    def __init__(
        self,
        store: FeatureStore,
        *,
        color: str = DEFAULT_DRAWING_COLOR,
        category: Optional[str] = None,
        render_factory: Optional[RenderFactory] = None,
        clock: Callable[[], float] = time.time,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._mode = DrawingMode.NONE
        self._buffer: list[Vertex] = []
        self._cursor: Optional[Vertex] = None
        self._color = color
        self._category = category or None
        self._render_factory = render_factory
        self._clock = clock
        self._last_stamp = 0

    # ------------------------------------------------------------------
    # Tool configuration
    # ------------------------------------------------------------------
    @property
    def mode(self) -> DrawingMode:
        return self._mode

    @property
    def is_collecting(self) -> bool:
        return self._mode.is_active

    @property
    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self._buffer)

    @property
    def color(self) -> str:
        return self._color

    @property
    def category(self) -> Optional[str]:
        return self._category

    def set_color(self, color: str) -> None:
        self._color = color
        if self._buffer:
            self._emit_preview()

    def set_category(self, category: Optional[str]) -> None:
        self._category = category or None

    def activate(self, mode: DrawingMode) -> None:
        """Select *mode*, discarding any half-drawn shape."""

        if mode is DrawingMode.NONE:
            self.deactivate()
            return
        self._reset_buffer()
        if mode is not self._mode:
            self._mode = mode
            LOGGER.debug("Drawing mode activated: %s", mode.value)
            self.modeChanged.emit(mode)

    def deactivate(self) -> None:
        """Return to ``Idle`` without finalizing the current buffer."""

        self._reset_buffer()
        if self._mode is not DrawingMode.NONE:
            self._mode = DrawingMode.NONE
            LOGGER.debug("Drawing mode deactivated")
            self.modeChanged.emit(DrawingMode.NONE)

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------
    def handle_click(self, vertex: Vertex) -> bool:
        """Consume a primary click at *vertex*; return whether it was used."""

        if not self._mode.is_active:
            return False
        vertex = Vertex(float(vertex[0]), float(vertex[1]))
        if self._mode is DrawingMode.POINT:
            self._finalize([vertex])
            return True
        self._buffer.append(vertex)
        self._emit_preview()
        return True

    def handle_double_click(self) -> bool:
        """Finalize the buffered shape.

        Returns ``True`` whenever a vertex collecting tool is active so the
        host map can suppress its native double-click zoom, even if the
        buffer is still too short to finalize.
        """

        if not self._mode.collects_vertices:
            return False
        self._finalize(list(self._buffer))
        return True

    def finish(self) -> bool:
        """Keyboard finalize (Enter); needs at least two buffered vertices."""

        if not self._mode.collects_vertices or len(self._buffer) < 2:
            return False
        self._finalize(list(self._buffer))
        return True

    def cancel(self) -> bool:
        """Drop the buffered vertices but keep the tool active."""

        if not self._mode.is_active:
            return False
        self._reset_buffer()
        return True

    def handle_cursor_moved(self, vertex: Optional[Vertex]) -> None:
        if not self._mode.collects_vertices:
            return
        self._cursor = vertex
        if self._buffer:
            self._emit_preview()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _finalize(self, vertices: list[Vertex]) -> Optional[DrawnFeature]:
        mode = self._mode
        if len(vertices) < mode.min_vertices:
            LOGGER.debug(
                "Ignoring finalize for %s with %d vertices", mode.value, len(vertices)
            )
            return None

        try:
            geometry = self._build_geometry(mode, vertices)
        except GeometryError as exc:
            LOGGER.debug("Ignoring finalize for %s: %s", mode.value, exc)
            return None
        properties = FeatureProperties(
            measurement=measure_geometry(geometry),
            color=self._color,
            category=self._category,
        )
        handle = None
        if self._render_factory is not None:
            handle = self._render_factory(geometry, properties)
        feature = DrawnFeature(
            id=self._next_feature_id(),
            geometry=geometry,
            properties=properties,
            render_handle=handle,
        )
        self._store.append(feature)
        self._reset_buffer()
        self.featureAdded.emit(feature)
        return feature

    @staticmethod
    def _build_geometry(mode: DrawingMode, vertices: list[Vertex]) -> Geometry:
        if mode is DrawingMode.POINT:
            return PointGeometry(vertices[0])
        if mode is DrawingMode.LINE_STRING:
            return LineStringGeometry(tuple(vertices))
        return PolygonGeometry.from_vertices(vertices)

    def _next_feature_id(self) -> str:
        stamp = int(self._clock() * 1000)
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return f"feature_{stamp}"

    def _reset_buffer(self) -> None:
        had_preview = bool(self._buffer)
        self._buffer = []
        self._cursor = None
        if had_preview:
            self.previewChanged.emit(None)

    def _emit_preview(self) -> None:
        self.previewChanged.emit(
            DrawingPreview(
                mode=self._mode,
                vertices=tuple(self._buffer),
                cursor=self._cursor,
                color=self._color,
            )
        )


__all__ = ["DrawingController", "RenderFactory"]
