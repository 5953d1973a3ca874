"""Greedy screen-space clustering of map objects."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from PySide6.QtCore import QPointF

from ..config import (
    CLUSTER_BASE_DISTANCE_PX,
    CLUSTER_DISTANCE_PER_ZOOM_PX,
    CLUSTER_MIN_DISTANCE_PX,
)
from ..geometry.measure import Vertex
from ..objects.models import MapObject, object_color

LOGGER = logging.getLogger(__name__)

Projector = Callable[[float, float], Optional[QPointF]]
"""Project ``(lat, lng)`` to widget pixels at the current zoom."""


def cluster_threshold(zoom: float) -> float:
    """Return the pixel distance below which two objects share a cluster."""

    return max(
        CLUSTER_MIN_DISTANCE_PX,
        CLUSTER_BASE_DISTANCE_PX - float(zoom) * CLUSTER_DISTANCE_PER_ZOOM_PX,
    )


def distance(a: QPointF, b: QPointF) -> float:
    """Return the Euclidean distance between two screen positions."""

    return math.hypot(a.x() - b.x(), a.y() - b.y())


def dominant_type(objects: Sequence[MapObject]) -> str:
    """Return the most frequent object type; ties go to the first seen."""

    counts: dict[str, int] = {}
    for obj in objects:
        counts[obj.object_type] = counts.get(obj.object_type, 0) + 1
    return max(counts, key=counts.__getitem__)


@dataclass(frozen=True)
class ClusterGroup:
    """Aggregate of nearby map objects rendered as a single marker."""

    members: tuple[MapObject, ...]
    center: Vertex
    dominant_type: str
    color: str

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def latitude(self) -> float:
        return self.center.lat

    @property
    def longitude(self) -> float:
        return self.center.lng


@dataclass(frozen=True)
class ClusterResult:
    """Partition of the object set into clusters and single markers."""

    clusters: list[ClusterGroup] = field(default_factory=list)
    singles: list[MapObject] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.clusters) + len(self.singles)

    @property
    def is_empty(self) -> bool:
        return not self.clusters and not self.singles


def build_group(members: Sequence[tuple[MapObject, Vertex]]) -> ClusterGroup:
    """Aggregate ``(object, representative point)`` pairs into a group."""

    count = float(len(members))
    latitude_sum = sum(point.lat for _, point in members)
    longitude_sum = sum(point.lng for _, point in members)
    objects = tuple(obj for obj, _ in members)
    kind = dominant_type(objects)
    return ClusterGroup(
        members=objects,
        center=Vertex(latitude_sum / count, longitude_sum / count),
        dominant_type=kind,
        color=object_color(kind),
    )


def cluster_objects(
    objects: Sequence[MapObject],
    to_pixel: Projector,
    zoom: float,
    *,
    enabled: bool = True,
) -> ClusterResult:
    """Partition *objects* into clusters for the view described by *to_pixel*.

    Objects are visited in input order.  Each unclaimed object claims every
    later unclaimed object closer than :func:`cluster_threshold` pixels, so
    membership depends on iteration order.  Objects whose anchor cannot be
    derived or projected are skipped without affecting the rest.
    """

    threshold = cluster_threshold(zoom)
    candidates: list[tuple[MapObject, Vertex, QPointF]] = []
    for obj in objects:
        point = obj.representative_point()
        if point is None:
            LOGGER.warning(
                "Skipping %s #%s: unusable %s geometry", obj.object_type, obj.id, obj.geometry_type
            )
            continue
        pixel = to_pixel(point.lat, point.lng)
        if pixel is None:
            continue
        candidates.append((obj, point, pixel))

    if not enabled:
        return ClusterResult(clusters=[], singles=[obj for obj, _, _ in candidates])

    claimed: set[tuple[str, int]] = set()
    clusters: list[ClusterGroup] = []
    singles: list[MapObject] = []

    for index, (obj, point, pixel) in enumerate(candidates):
        if obj.key in claimed:
            continue
        claimed.add(obj.key)
        nearby: list[tuple[MapObject, Vertex]] = [(obj, point)]

        for other, other_point, other_pixel in candidates[index + 1 :]:
            if other.key in claimed:
                continue
            if distance(pixel, other_pixel) < threshold:
                claimed.add(other.key)
                nearby.append((other, other_point))

        if len(nearby) > 1:
            clusters.append(build_group(nearby))
        else:
            singles.append(obj)

    return ClusterResult(clusters=clusters, singles=singles)


__all__ = [
    "ClusterGroup",
    "ClusterResult",
    "Projector",
    "build_group",
    "cluster_objects",
    "cluster_threshold",
    "distance",
    "dominant_type",
]
