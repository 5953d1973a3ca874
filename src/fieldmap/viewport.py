"""Viewport computation helpers and the headless viewport implementation."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Optional, Protocol

from PySide6.QtCore import QObject, QPointF, Signal

from .config import INITIAL_POSITION, MAX_ZOOM, MIN_ZOOM, TILE_SIZE
from .geometry.measure import Vertex

MERCATOR_LAT_BOUND = 85.05112878


@dataclass(frozen=True)
class BoundingBox:
    """Geographic rectangle expressed as west, south, east, north degrees."""

    west: float
    south: float
    east: float
    north: float

    def as_param(self) -> str:
        """Return the ``west,south,east,north`` query parameter."""

        return f"{self.west},{self.south},{self.east},{self.north}"

    def contains(self, vertex: Vertex) -> bool:
        return self.south <= vertex.lat <= self.north and self.west <= vertex.lng <= self.east


def world_size(zoom: float, tile_size: int = TILE_SIZE) -> float:
    return float(tile_size * (2.0 ** float(zoom)))


def lonlat_to_world(lon: float, lat: float, size: float) -> tuple[float, float]:
    """Project *lon*/*lat* into Web-Mercator world pixels."""

    lat = max(min(float(lat), MERCATOR_LAT_BOUND), -MERCATOR_LAT_BOUND)
    x = (float(lon) + 180.0) / 360.0 * size
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * size
    return x, y


def world_to_lonlat(x: float, y: float, size: float) -> tuple[float, float]:
    """Invert :func:`lonlat_to_world`."""

    lon = x / size * 360.0 - 180.0
    n = math.pi - 2.0 * math.pi * y / size
    lat = math.degrees(math.atan(math.sinh(n)))
    return lon, lat


@dataclass(frozen=True)
class ViewState:
    """Describe the camera used to map geographic positions to widget pixels."""

    center_lat: float
    center_lng: float
    zoom: float
    width: int
    height: int

    @property
    def world_size(self) -> float:
        return world_size(self.zoom)

    def _top_left(self) -> tuple[float, float]:
        center_px, center_py = lonlat_to_world(self.center_lng, self.center_lat, self.world_size)
        return center_px - self.width / 2.0, center_py - self.height / 2.0

    def project(self, lat: float, lng: float) -> Optional[QPointF]:
        """Convert a geographic coordinate into widget-relative screen space."""

        try:
            lat = float(lat)
            lng = float(lng)
        except (TypeError, ValueError):
            return None
        if math.isnan(lat) or math.isnan(lng):
            return None
        top_left_x, top_left_y = self._top_left()
        world_x, world_y = lonlat_to_world(lng, lat, self.world_size)
        return QPointF(world_x - top_left_x, world_y - top_left_y)

    def unproject(self, point: QPointF) -> Vertex:
        """Convert a widget-relative point back into a geographic coordinate."""

        top_left_x, top_left_y = self._top_left()
        lon, lat = world_to_lonlat(
            point.x() + top_left_x, point.y() + top_left_y, self.world_size
        )
        return Vertex(lat, lon)

    def bounds(self) -> BoundingBox:
        north_west = self.unproject(QPointF(0.0, 0.0))
        south_east = self.unproject(QPointF(float(self.width), float(self.height)))
        return BoundingBox(
            west=north_west.lng,
            south=south_east.lat,
            east=south_east.lng,
            north=north_west.lat,
        )


class MapViewport(Protocol):
    """Interface the core expects from the live map viewport."""

    viewChanged: Signal

    @property
    def zoom(self) -> float:  # pragma: no cover - interface definition only
        ...

    def bounds(self) -> BoundingBox:  # pragma: no cover - interface definition only
        ...

    def project(self, lat: float, lng: float) -> Optional[QPointF]:  # pragma: no cover
        ...

    def unproject(self, point: QPointF) -> Optional[Vertex]:  # pragma: no cover
        ...

    def focus_on(self, lon: float, lat: float, zoom_delta: float = 1.0) -> None:  # pragma: no cover
        ...


class StaticViewport(QObject):
    """Headless viewport driven programmatically instead of by a map widget."""

    viewChanged = Signal(float, float, float)
    """Signal emitted with centre latitude, longitude and zoom after each change."""

    def __init__(
        self,
        *,
        center_lat: float = INITIAL_POSITION["lat"],
        center_lng: float = INITIAL_POSITION["lng"],
        zoom: float = INITIAL_POSITION["zoom"],
        width: int = 1024,
        height: int = 768,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._state = ViewState(
            float(center_lat), float(center_lng), self._clamp_zoom(zoom), int(width), int(height)
        )

    @staticmethod
    def _clamp_zoom(zoom: float) -> float:
        return max(MIN_ZOOM, min(MAX_ZOOM, float(zoom)))

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def state(self) -> ViewState:
        return self._state

    def set_view(self, lat: float, lng: float, zoom: float | None = None) -> None:
        """Move the camera and notify listeners."""

        new_zoom = self._state.zoom if zoom is None else self._clamp_zoom(zoom)
        self._state = replace(
            self._state, center_lat=float(lat), center_lng=float(lng), zoom=new_zoom
        )
        self._emit_view_change()

    def set_size(self, width: int, height: int) -> None:
        self._state = replace(self._state, width=int(width), height=int(height))
        self._emit_view_change()

    def focus_on(self, lon: float, lat: float, zoom_delta: float = 1.0) -> None:
        """Centre the viewport on *lon*/*lat* and zoom by *zoom_delta*."""

        self.set_view(lat, lon, self._state.zoom + zoom_delta)

    def bounds(self) -> BoundingBox:
        return self._state.bounds()

    def project(self, lat: float, lng: float) -> Optional[QPointF]:
        return self._state.project(lat, lng)

    def unproject(self, point: QPointF) -> Optional[Vertex]:
        return self._state.unproject(point)

    def _emit_view_change(self) -> None:
        state = self._state
        self.viewChanged.emit(state.center_lat, state.center_lng, state.zoom)


__all__ = [
    "BoundingBox",
    "MERCATOR_LAT_BOUND",
    "MapViewport",
    "StaticViewport",
    "ViewState",
    "lonlat_to_world",
    "world_size",
    "world_to_lonlat",
]
