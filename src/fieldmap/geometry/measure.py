"""Measurements over geographic vertices.

Areas use an equirectangular local-metre approximation followed by the planar
Shoelace formula.  The approximation is accurate for facility-scale shapes
(well under a kilometre across) and degrades as the latitude span grows; it
must not be used for regional polygons.  Lengths use the haversine formula.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import NamedTuple

from ..config import (
    EARTH_RADIUS_M,
    HECTARE_THRESHOLD_M2,
    KILOMETER_THRESHOLD_M,
    METERS_PER_DEGREE,
)


class Vertex(NamedTuple):
    """A geographic coordinate in degrees."""

    lat: float
    lng: float


def _local_meters(vertex: Vertex) -> tuple[float, float]:
    lat = float(vertex[0])
    lng = float(vertex[1])
    x = lng * METERS_PER_DEGREE * math.cos(math.radians(lat))
    y = lat * METERS_PER_DEGREE
    return x, y


def polygon_area(vertices: Sequence[Vertex]) -> float:
    """Return the area in square metres enclosed by *vertices*.

    The ring may be open or closed; a repeated closing vertex contributes a
    zero term.  Fewer than three vertices enclose nothing and yield ``0.0``.
    """

    count = len(vertices)
    if count < 3:
        return 0.0

    projected = [_local_meters(vertex) for vertex in vertices]
    total = 0.0
    for index in range(count):
        x1, y1 = projected[index]
        x2, y2 = projected[(index + 1) % count]
        total += x1 * y2 - x2 * y1
    return abs(total) / 2.0


def haversine_distance(a: Vertex, b: Vertex) -> float:
    """Return the great-circle distance in metres between *a* and *b*."""

    lat1 = math.radians(a[0])
    lat2 = math.radians(b[0])
    d_lat = lat2 - lat1
    d_lng = math.radians(b[1] - a[1])
    h = math.sin(d_lat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2.0) ** 2
    return 2.0 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def polyline_length(vertices: Sequence[Vertex]) -> float:
    """Return the length in metres of the path through *vertices*."""

    if len(vertices) < 2:
        return 0.0
    return sum(
        haversine_distance(vertices[index], vertices[index + 1])
        for index in range(len(vertices) - 1)
    )


def format_area(m2: float) -> str:
    if m2 >= HECTARE_THRESHOLD_M2:
        return f"{m2 / HECTARE_THRESHOLD_M2:.2f} ha"
    return f"{m2:.2f} m²"


def format_length(m: float) -> str:
    if m >= KILOMETER_THRESHOLD_M:
        return f"{m / KILOMETER_THRESHOLD_M:.2f} km"
    return f"{m:.2f} m"


def format_position(vertex: Vertex) -> str:
    """Return the ``Lon/Lat`` label attached to drawn points."""

    return f"Lon: {vertex[1]:.6f}, Lat: {vertex[0]:.6f}"


def ring_centroid(ring: Sequence[Vertex]) -> Vertex | None:
    """Return the arithmetic mean of *ring*.

    This is not the area-weighted centroid; it is a cheap marker anchor for
    shapes that arrive without a precomputed centre.
    """

    if not ring:
        return None
    count = float(len(ring))
    lat = sum(float(vertex[0]) for vertex in ring) / count
    lng = sum(float(vertex[1]) for vertex in ring) / count
    return Vertex(lat, lng)


__all__ = [
    "Vertex",
    "format_area",
    "format_length",
    "format_position",
    "haversine_distance",
    "polygon_area",
    "polyline_length",
    "ring_centroid",
]
