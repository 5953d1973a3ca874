"""Keep the object set in sync with the map viewport."""

from __future__ import annotations

import logging
import math
from functools import partial
from typing import Iterable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from ..config import FETCH_DEBOUNCE_MS
from ..errors.handler import ErrorContext, ErrorHandler, ErrorSeverity
from ..events import EventBus, ObjectSetUpdatedEvent
from ..viewport import MapViewport
from .models import MapObject
from .query import ObjectQuery, ObjectQueryService, translate_type_filter

LOGGER = logging.getLogger(__name__)


class FetchController(QObject):
    """Query the backend for the objects inside the current viewport.

    Viewport changes are debounced so a fast pan issues one request.  Every
    request carries a sequence number and only the response to the most
    recently issued request is applied; slower answers to superseded requests
    are dropped so stale data never overwrites fresh data.  A failed request
    leaves the previous object set in place.
    """

    objectsUpdated = Signal(list)
    fetchFailed = Signal(str)
    loadingChanged = Signal(bool)

    def __init__(
        self,
        viewport: MapViewport,
        service: ObjectQueryService,
        *,
        debounce_ms: int = FETCH_DEBOUNCE_MS,
        error_handler: Optional[ErrorHandler] = None,
        event_bus: Optional[EventBus] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._viewport = viewport
        self._service = service
        self._error_handler = error_handler
        self._events = event_bus
        self._objects: list[MapObject] = []
        self._type_filter: tuple[str, ...] = ()
        self._latest_request = 0
        self._loading = False
        self._last_query: Optional[ObjectQuery] = None

        self._fetch_timer = QTimer(self)
        self._fetch_timer.setSingleShot(True)
        self._fetch_timer.setInterval(max(0, int(debounce_ms)))
        self._fetch_timer.timeout.connect(self.refresh)

    # ------------------------------------------------------------------
    @property
    def objects(self) -> list[MapObject]:
        return list(self._objects)

    @property
    def type_filter(self) -> tuple[str, ...]:
        return self._type_filter

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def latest_request(self) -> int:
        return self._latest_request

    @property
    def last_query(self) -> Optional[ObjectQuery]:
        return self._last_query

    def set_debounce_interval(self, debounce_ms: int) -> None:
        self._fetch_timer.setInterval(max(0, int(debounce_ms)))

    # ------------------------------------------------------------------
    def start(self) -> None:
        """Perform the initial fetch for the mounted map."""

        self.refresh()

    def shutdown(self) -> None:
        """Stop pending work and ignore any response still in flight."""

        self._fetch_timer.stop()
        self._latest_request += 1
        self._set_loading(False)

    def set_type_filter(self, labels: Iterable[str]) -> None:
        """Restrict the query to the given UI category labels and refetch."""

        types = tuple(translate_type_filter(labels))
        if types == self._type_filter:
            return
        self._type_filter = types
        self.refresh()

    def handle_view_changed(
        self, center_lat: float = 0.0, center_lng: float = 0.0, zoom: float = 0.0
    ) -> None:
        """Schedule a fetch once the viewport settles."""

        self._fetch_timer.start()

    def refresh(self) -> None:
        """Issue a query for the current viewport immediately."""

        self._fetch_timer.stop()
        query = ObjectQuery(
            bbox=self._viewport.bounds(),
            zoom=int(math.floor(self._viewport.zoom)),
            types=self._type_filter,
        )
        self._latest_request += 1
        request_id = self._latest_request
        self._last_query = query
        self._set_loading(True)
        LOGGER.debug("Fetching objects #%d bbox=%s zoom=%d", request_id, query.bbox.as_param(), query.zoom)
        self._service.request_objects(
            query,
            partial(self._handle_success, request_id, query),
            partial(self._handle_failure, request_id, query),
        )

    # ------------------------------------------------------------------
    def _handle_success(
        self, request_id: int, query: ObjectQuery, objects: list[MapObject]
    ) -> None:
        if request_id != self._latest_request:
            LOGGER.debug("Dropping stale object response #%d", request_id)
            return
        self._objects = list(objects)
        self._set_loading(False)
        LOGGER.info("Loaded %d objects for zoom %d", len(self._objects), query.zoom)
        self.objectsUpdated.emit(list(self._objects))
        if self._events is not None:
            self._events.publish(
                ObjectSetUpdatedEvent(objects=list(self._objects), bbox=query.bbox, zoom=query.zoom)
            )

    def _handle_failure(self, request_id: int, query: ObjectQuery, error: Exception) -> None:
        if request_id != self._latest_request:
            LOGGER.debug("Ignoring failure of stale object request #%d", request_id)
            return
        self._set_loading(False)
        if self._error_handler is not None:
            self._error_handler.handle(
                error,
                ErrorSeverity.WARNING,
                ErrorContext(
                    operation="object query",
                    bbox=query.bbox.as_param(),
                    zoom=query.zoom,
                    types=query.types,
                ),
            )
        else:
            LOGGER.warning("Error loading map objects: %s", error)
        self.fetchFailed.emit(str(error))

    def _set_loading(self, loading: bool) -> None:
        if loading == self._loading:
            return
        self._loading = loading
        self.loadingChanged.emit(loading)


__all__ = ["FetchController"]
