"""Ordered collection of finalized drawings."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from PySide6.QtCore import QObject, Signal

from ..errors import DuplicateFeatureError
from ..events import EventBus, FeatureAddedEvent, FeaturesReplacedEvent
from .feature import DrawnFeature

LOGGER = logging.getLogger(__name__)


class FeatureStore(QObject):
    """Own the identity and order of every drawn feature.

    Features live in an append-only arena.  ``_length`` marks how much of the
    arena is live, so removing the newest feature or clearing the store only
    moves that index; a later append discards the dead tail first.
    """

    featureAdded = Signal(object)
    featuresReplaced = Signal(list)
    """Emitted with the full live snapshot after a bulk change."""

    featuresRemoved = Signal(list)
    """Emitted with the features that left the store so overlays can be removed."""

    nothingToExport = Signal()

    def __init__(
        self,
        *,
        event_bus: Optional[EventBus] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._arena: list[DrawnFeature] = []
        self._length = 0
        self._events = event_bus

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[DrawnFeature]:
        return iter(self.list())

    def __contains__(self, feature_id: object) -> bool:
        return any(feature.id == feature_id for feature in self._live())

    def _live(self) -> list[DrawnFeature]:
        return self._arena[: self._length]

    def list(self) -> list[DrawnFeature]:
        """Return a snapshot of the live features in insertion order."""

        return list(self._live())

    def last(self) -> Optional[DrawnFeature]:
        if not self._length:
            return None
        return self._arena[self._length - 1]

    def append(self, feature: DrawnFeature) -> None:
        if feature.id in self:
            raise DuplicateFeatureError(f"Feature {feature.id!r} already exists")
        if len(self._arena) > self._length:
            del self._arena[self._length :]
        self._arena.append(feature)
        self._length += 1
        LOGGER.debug("Stored %s feature %s", feature.kind, feature.id)
        self.featureAdded.emit(feature)
        if self._events is not None:
            self._events.publish(FeatureAddedEvent(feature=feature))

    def delete_last(self) -> Optional[DrawnFeature]:
        """Remove the most recently appended feature; no-op when empty."""

        if not self._length:
            return None
        self._length -= 1
        removed = self._arena[self._length]
        self._notify_bulk_change([removed])
        return removed

    def clear_all(self) -> list[DrawnFeature]:
        """Remove every feature and return them in insertion order."""

        removed = self.list()
        self._length = 0
        if removed:
            self._notify_bulk_change(removed)
        return removed

    def export_feature_collection(self) -> Optional[dict[str, Any]]:
        """Return a GeoJSON FeatureCollection, or ``None`` when nothing is drawn."""

        if not self._length:
            LOGGER.info("Nothing to export: no drawn features")
            self.nothingToExport.emit()
            return None
        return {
            "type": "FeatureCollection",
            "features": [feature.to_geojson() for feature in self._live()],
        }

    def _notify_bulk_change(self, removed: list[DrawnFeature]) -> None:
        snapshot = self.list()
        self.featuresRemoved.emit(removed)
        self.featuresReplaced.emit(snapshot)
        if self._events is not None:
            self._events.publish(FeaturesReplacedEvent(features=snapshot))


__all__ = ["FeatureStore"]
