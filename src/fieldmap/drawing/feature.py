"""Value objects produced by the drawing tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..geometry.measure import Vertex
from ..geometry.shapes import Geometry
from .modes import DrawingMode


@dataclass(frozen=True)
class FeatureProperties:
    """Derived and user supplied attributes of a drawn feature."""

    measurement: str
    color: str
    category: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"measurement": self.measurement, "color": self.color}
        if self.category:
            payload["category"] = self.category
        return payload


@dataclass(frozen=True)
class DrawnFeature:
    """A finalized drawing; never mutated once it reaches the feature store."""

    id: str
    geometry: Geometry
    properties: FeatureProperties
    # Opaque object owned by the presentation layer, used to remove the
    # overlay again on delete/clear.
    render_handle: Any = field(default=None, compare=False, repr=False)

    @property
    def kind(self) -> str:
        return self.geometry.kind

    def coordinates(self) -> list:
        return self.geometry.coordinates()

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "id": self.id,
            "geometry": self.geometry.to_geojson(),
            "properties": self.properties.to_dict(),
        }


@dataclass(frozen=True)
class DrawingPreview:
    """Snapshot of an unfinalized shape for the dashed live preview."""

    mode: DrawingMode
    vertices: tuple[Vertex, ...]
    cursor: Optional[Vertex]
    color: str

    @property
    def outline(self) -> tuple[Vertex, ...]:
        """Vertices of the dashed outline including the live cursor."""

        if self.cursor is None:
            return self.vertices
        return self.vertices + (self.cursor,)


__all__ = ["DrawingPreview", "DrawnFeature", "FeatureProperties"]
