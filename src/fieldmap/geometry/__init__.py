"""Geometry math, tagged geometry variants and marker anchoring helpers."""

from .extract import representative_point
from .measure import (
    Vertex,
    format_area,
    format_length,
    format_position,
    polygon_area,
    polyline_length,
    ring_centroid,
)
from .shapes import (
    Geometry,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
    geometry_from_geojson,
    measure_geometry,
)

__all__ = [
    "Geometry",
    "LineStringGeometry",
    "PointGeometry",
    "PolygonGeometry",
    "Vertex",
    "format_area",
    "format_length",
    "format_position",
    "geometry_from_geojson",
    "measure_geometry",
    "polygon_area",
    "polyline_length",
    "representative_point",
    "ring_centroid",
]
