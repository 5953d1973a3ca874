"""Utility helpers for reading loosely typed GeoJSON geometry data."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .measure import Vertex, ring_centroid


def sequence_depth(value: object) -> int:
    """Return how many list/tuple levels ``value`` contains before scalars."""

    depth = 0
    current = value
    while isinstance(current, (list, tuple)) and current:
        depth += 1
        current = current[0]
    return depth


def normalize_geometry_type(raw_type: object) -> str | None:
    """Translate geometry identifiers into canonical GeoJSON-style strings."""

    if isinstance(raw_type, str):
        return raw_type
    if raw_type == 1:
        return "Point"
    if raw_type == 2:
        return "LineString"
    if raw_type == 3:
        return "Polygon"
    return None


def is_number_pair(value: Sequence[object]) -> bool:
    """Return ``True`` when ``value`` looks like an ``(x, y)`` tuple."""

    if len(value) < 2:
        return False
    return all(
        isinstance(component, (int, float)) and not isinstance(component, bool)
        for component in value[:2]
    )


def lonlat_vertex(value: object) -> Vertex | None:
    """Return the :class:`Vertex` for a GeoJSON ``[lon, lat]`` pair."""

    if not isinstance(value, (list, tuple)) or not is_number_pair(value):
        return None
    return Vertex(float(value[1]), float(value[0]))


def center_vertex(center: object) -> Vertex | None:
    """Read a precomputed ``{"lat": .., "lng": ..}`` centre if it is usable."""

    if not isinstance(center, Mapping):
        return None
    lat = center.get("lat")
    lng = center.get("lng")
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return None
    return Vertex(float(lat), float(lng))


def representative_point(
    geom_type: object,
    coordinates: object,
    center: object = None,
) -> Vertex | None:
    """Return the position a marker for this geometry is anchored to.

    Points use their coordinate.  Polygons prefer the backend supplied
    ``center`` and otherwise average the exterior ring.  Line strings use the
    vertex at ``floor(len / 2)``, which is the historical marker placement
    rather than the midpoint by distance.  Unknown types and malformed
    coordinates return ``None``.
    """

    normalized = normalize_geometry_type(geom_type)
    if not isinstance(coordinates, (list, tuple)):
        return None

    if normalized == "Point":
        return lonlat_vertex(coordinates)

    if normalized == "Polygon":
        precomputed = center_vertex(center)
        if precomputed is not None:
            return precomputed
        if sequence_depth(coordinates) != 3:
            return None
        ring = coordinates[0]
        vertices = [lonlat_vertex(item) for item in ring]
        if not vertices or any(vertex is None for vertex in vertices):
            return None
        return ring_centroid(vertices)  # type: ignore[arg-type]

    if normalized == "LineString":
        if sequence_depth(coordinates) != 2:
            return None
        return lonlat_vertex(coordinates[len(coordinates) // 2])

    return None


__all__ = [
    "center_vertex",
    "is_number_pair",
    "lonlat_vertex",
    "normalize_geometry_type",
    "representative_point",
    "sequence_depth",
]
