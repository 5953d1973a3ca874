"""Viewport-driven clustering of map objects."""

from .controller import ClusterController
from .engine import (
    ClusterGroup,
    ClusterResult,
    cluster_objects,
    cluster_threshold,
    dominant_type,
)

__all__ = [
    "ClusterController",
    "ClusterGroup",
    "ClusterResult",
    "cluster_objects",
    "cluster_threshold",
    "dominant_type",
]
