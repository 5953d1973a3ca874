"""Controller that keeps cluster markers in step with objects and viewport."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from PySide6.QtCore import QObject, Signal

from ..config import CLUSTER_ZOOM_CEILING, CLUSTER_ZOOM_STEP
from ..events import ClustersUpdatedEvent, EventBus
from ..objects.models import MapObject
from ..viewport import MapViewport
from .engine import ClusterGroup, ClusterResult, cluster_objects

LOGGER = logging.getLogger(__name__)


class ClusterController(QObject):
    """Encapsulates the object set, clustering passes and marker clicks."""

    clustersUpdated = Signal(object)
    """Emitted with a :class:`ClusterResult` after every clustering pass."""

    objectActivated = Signal(object)

    def __init__(
        self,
        viewport: MapViewport,
        *,
        enabled: bool = True,
        zoom_ceiling: int = CLUSTER_ZOOM_CEILING,
        zoom_step: int = CLUSTER_ZOOM_STEP,
        event_bus: Optional[EventBus] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._viewport = viewport
        self._enabled = bool(enabled)
        self._zoom_ceiling = zoom_ceiling
        self._zoom_step = zoom_step
        self._events = event_bus
        self._objects: list[MapObject] = []
        self._result = ClusterResult()

    @property
    def objects(self) -> list[MapObject]:
        return list(self._objects)

    @property
    def result(self) -> ClusterResult:
        return self._result

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._enabled:
            return
        self._enabled = enabled
        self.recluster()

    def set_objects(self, objects: Iterable[MapObject]) -> None:
        """Replace the object set wholesale and re-cluster."""

        self._objects = [obj for obj in objects if isinstance(obj, MapObject)]
        self.recluster()

    def clear(self) -> None:
        self._objects = []
        self.recluster()

    def handle_view_changed(
        self, center_lat: float = 0.0, center_lng: float = 0.0, zoom: float = 0.0
    ) -> None:
        """Re-partition the current objects for the new projection."""

        self.recluster()

    def recluster(self) -> ClusterResult:
        zoom = self._viewport.zoom
        self._result = cluster_objects(
            self._objects,
            self._viewport.project,
            zoom,
            enabled=self._enabled,
        )
        LOGGER.debug(
            "Clustered %d objects into %d clusters and %d singles at zoom %.2f",
            len(self._objects),
            len(self._result.clusters),
            len(self._result.singles),
            zoom,
        )
        self.clustersUpdated.emit(self._result)
        if self._events is not None:
            self._events.publish(ClustersUpdatedEvent(result=self._result, zoom=zoom))
        return self._result

    def handle_cluster_click(self, cluster: ClusterGroup) -> bool:
        """Zoom in on *cluster*; returns ``False`` once the ceiling is reached."""

        if self._viewport.zoom >= self._zoom_ceiling:
            return False
        self._viewport.focus_on(cluster.center.lng, cluster.center.lat, self._zoom_step)
        return True

    def handle_object_click(self, obj: MapObject) -> None:
        self.objectActivated.emit(obj)


__all__ = ["ClusterController"]
