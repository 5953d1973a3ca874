"""Backend-owned map objects."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Optional

from ..config import FALLBACK_OBJECT_COLOR, OBJECT_COLORS
from ..errors import MalformedObjectError
from ..geometry.extract import center_vertex, normalize_geometry_type, representative_point
from ..geometry.measure import Vertex

LOGGER = logging.getLogger(__name__)

_NAME_FIELDS = ("nom", "nom_site", "marque")


def object_color(object_type: str) -> str:
    """Return the legend colour for *object_type*."""

    return OBJECT_COLORS.get(object_type, FALLBACK_OBJECT_COLOR)


@dataclass(frozen=True)
class MapObject:
    """Read-only view of one entity returned by the object query."""

    id: int
    object_type: str
    geometry_type: str
    coordinates: Any
    display_name: str
    properties: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)
    center: Optional[Vertex] = None

    @property
    def key(self) -> tuple[str, int]:
        """Identity of the object; ids are only unique per object type."""

        return (self.object_type, self.id)

    @property
    def color(self) -> str:
        return object_color(self.object_type)

    def representative_point(self) -> Optional[Vertex]:
        if self.center is not None and self.geometry_type == "Polygon":
            return self.center
        return representative_point(self.geometry_type, self.coordinates)

    def __hash__(self) -> int:
        return hash(self.key)


def display_name_for(properties: Mapping[str, Any], object_type: str, object_id: int) -> str:
    for name_field in _NAME_FIELDS:
        value = properties.get(name_field)
        if isinstance(value, str) and value.strip():
            return value
    return f"{object_type} #{object_id}"


def map_object_from_feature(feature: Mapping[str, Any]) -> MapObject:
    """Build a :class:`MapObject` from one GeoJSON feature of the query response."""

    if not isinstance(feature, Mapping):
        raise MalformedObjectError(f"Feature must be a mapping, got {type(feature).__name__}")
    properties = feature.get("properties")
    if not isinstance(properties, Mapping):
        raise MalformedObjectError("Feature has no properties")

    raw_id = properties.get("id", feature.get("id"))
    if isinstance(raw_id, bool):
        raise MalformedObjectError(f"Invalid object id {raw_id!r}")
    try:
        object_id = int(raw_id)
    except (TypeError, ValueError, OverflowError) as exc:
        raise MalformedObjectError(f"Invalid object id {raw_id!r}") from exc

    object_type = properties.get("object_type")
    if not isinstance(object_type, str) or not object_type:
        raise MalformedObjectError(f"Object {object_id} has no object_type")

    geometry = feature.get("geometry")
    if not isinstance(geometry, Mapping):
        raise MalformedObjectError(f"Object {object_type} #{object_id} has no geometry")
    geometry_type = normalize_geometry_type(geometry.get("type"))
    if geometry_type is None:
        raise MalformedObjectError(f"Object {object_type} #{object_id} has an unknown geometry type")

    return MapObject(
        id=object_id,
        object_type=object_type,
        geometry_type=geometry_type,
        coordinates=geometry.get("coordinates"),
        display_name=display_name_for(properties, object_type, object_id),
        properties=MappingProxyType(dict(properties)),
        center=center_vertex(properties.get("center")),
    )


def parse_feature_collection(payload: Any) -> list[MapObject]:
    """Return the map objects in a query response, skipping malformed entries."""

    if isinstance(payload, Mapping):
        features: Iterable[Any] = payload.get("features") or []
        if not isinstance(features, list):
            raise MalformedObjectError("Response features must be a list")
    elif isinstance(payload, list):
        features = payload
    else:
        raise MalformedObjectError("Response is not a feature collection")

    objects: list[MapObject] = []
    for feature in features:
        try:
            objects.append(map_object_from_feature(feature))
        except MalformedObjectError as exc:
            LOGGER.warning("Skipping map object: %s", exc)
    return objects


__all__ = [
    "MapObject",
    "display_name_for",
    "map_object_from_feature",
    "object_color",
    "parse_feature_collection",
]
