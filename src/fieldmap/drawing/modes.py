"""Drawing tool modes."""

from __future__ import annotations

from enum import Enum


class DrawingMode(Enum):
    """Tool selected in the drawing toolbar."""

    NONE = "none"
    POINT = "Point"
    LINE_STRING = "LineString"
    POLYGON = "Polygon"
    # Presentation alias; finalizes as a polygon.
    RECTANGLE = "Rectangle"

    @property
    def is_active(self) -> bool:
        return self is not DrawingMode.NONE

    @property
    def collects_vertices(self) -> bool:
        """Return ``True`` for tools that buffer clicks before finalizing."""

        return self in (DrawingMode.LINE_STRING, DrawingMode.POLYGON, DrawingMode.RECTANGLE)

    @property
    def geometry_kind(self) -> str | None:
        if self is DrawingMode.NONE:
            return None
        if self is DrawingMode.RECTANGLE:
            return "Polygon"
        return self.value

    @property
    def min_vertices(self) -> int:
        return _MIN_VERTICES[self]


_MIN_VERTICES = {
    DrawingMode.NONE: 0,
    DrawingMode.POINT: 1,
    DrawingMode.LINE_STRING: 2,
    DrawingMode.POLYGON: 3,
    DrawingMode.RECTANGLE: 3,
}


__all__ = ["DrawingMode"]
