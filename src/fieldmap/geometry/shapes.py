"""Tagged geometry variants for drawn features.

Each variant validates its own invariant on construction, so a geometry that
exists is always well formed: line strings hold at least two vertices and
polygon rings are closed with at least three distinct positions.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from ..errors import GeometryError
from .extract import is_number_pair
from .measure import (
    Vertex,
    format_area,
    format_length,
    format_position,
    polygon_area,
    polyline_length,
)


def _as_vertex(value: Sequence[float]) -> Vertex:
    return Vertex(float(value[0]), float(value[1]))


def _lonlat(vertex: Vertex) -> list[float]:
    return [vertex.lng, vertex.lat]


@dataclass(frozen=True)
class PointGeometry:
    """A single drawn position."""

    kind: ClassVar[str] = "Point"

    position: Vertex

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vertex(self.position))

    def coordinates(self) -> list[float]:
        return _lonlat(self.position)

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": self.coordinates()}


@dataclass(frozen=True)
class LineStringGeometry:
    """An open path through two or more positions."""

    kind: ClassVar[str] = "LineString"
    min_vertices: ClassVar[int] = 2

    vertices: tuple[Vertex, ...]

    def __post_init__(self) -> None:
        vertices = tuple(_as_vertex(vertex) for vertex in self.vertices)
        if len(vertices) < self.min_vertices:
            raise GeometryError(
                f"LineString needs at least {self.min_vertices} vertices, got {len(vertices)}"
            )
        object.__setattr__(self, "vertices", vertices)

    def length(self) -> float:
        return polyline_length(self.vertices)

    def coordinates(self) -> list[list[float]]:
        return [_lonlat(vertex) for vertex in self.vertices]

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": self.coordinates()}


@dataclass(frozen=True)
class PolygonGeometry:
    """A polygon made of closed rings; the first ring is the exterior."""

    kind: ClassVar[str] = "Polygon"
    min_vertices: ClassVar[int] = 3

    rings: tuple[tuple[Vertex, ...], ...]

    def __post_init__(self) -> None:
        rings = tuple(tuple(_as_vertex(vertex) for vertex in ring) for ring in self.rings)
        if not rings:
            raise GeometryError("Polygon needs an exterior ring")
        for ring in rings:
            if len(ring) < self.min_vertices + 1:
                raise GeometryError(
                    f"Polygon ring needs at least {self.min_vertices} vertices plus closure"
                )
            if ring[0] != ring[-1]:
                raise GeometryError("Polygon ring is not closed")
        object.__setattr__(self, "rings", rings)

    @classmethod
    def from_vertices(cls, vertices: Iterable[Sequence[float]]) -> "PolygonGeometry":
        """Build a single-ring polygon from an open ring of vertices.

        The first vertex is always appended, even when the last one repeats it.
        """

        ring = [_as_vertex(vertex) for vertex in vertices]
        if ring:
            ring.append(ring[0])
        return cls((tuple(ring),))

    @property
    def exterior(self) -> tuple[Vertex, ...]:
        return self.rings[0]

    def area(self) -> float:
        return polygon_area(self.exterior)

    def coordinates(self) -> list[list[list[float]]]:
        return [[_lonlat(vertex) for vertex in ring] for ring in self.rings]

    def to_geojson(self) -> dict[str, Any]:
        return {"type": self.kind, "coordinates": self.coordinates()}


Geometry = Union[PointGeometry, LineStringGeometry, PolygonGeometry]


def measure_geometry(geometry: Geometry) -> str:
    """Return the human readable measurement shown next to *geometry*."""

    if isinstance(geometry, PointGeometry):
        return format_position(geometry.position)
    if isinstance(geometry, LineStringGeometry):
        return format_length(geometry.length())
    if isinstance(geometry, PolygonGeometry):
        return format_area(geometry.area())
    raise GeometryError(f"Unsupported geometry {geometry!r}")


def _lonlat_to_vertex(value: object) -> Vertex:
    if not isinstance(value, (list, tuple)) or not is_number_pair(value):
        raise GeometryError(f"Invalid coordinate {value!r}")
    return Vertex(float(value[1]), float(value[0]))


def geometry_from_geojson(payload: Mapping[str, Any]) -> Geometry:
    """Rebuild a geometry from a GeoJSON geometry mapping."""

    geom_type = payload.get("type")
    coordinates = payload.get("coordinates")
    if not isinstance(coordinates, (list, tuple)):
        raise GeometryError(f"Geometry {geom_type!r} has no coordinates")
    if geom_type == "Point":
        return PointGeometry(_lonlat_to_vertex(coordinates))
    if geom_type == "LineString":
        return LineStringGeometry(tuple(_lonlat_to_vertex(item) for item in coordinates))
    if geom_type == "Polygon":
        rings = []
        for ring in coordinates:
            if not isinstance(ring, (list, tuple)):
                raise GeometryError("Polygon ring must be a list of positions")
            rings.append(tuple(_lonlat_to_vertex(item) for item in ring))
        return PolygonGeometry(tuple(rings))
    raise GeometryError(f"Unsupported geometry type {geom_type!r}")


__all__ = [
    "Geometry",
    "LineStringGeometry",
    "PointGeometry",
    "PolygonGeometry",
    "geometry_from_geojson",
    "measure_geometry",
]
