"""Wire the drawing, fetch and clustering components around one map viewport."""

from __future__ import annotations

import logging
from typing import Any, Optional

from PySide6.QtCore import QObject

from .clustering.controller import ClusterController
from .drawing.feature_store import FeatureStore
from .drawing.state_machine import DrawingController, RenderFactory
from .errors.handler import ErrorHandler
from .events import EventBus
from .objects.fetch_controller import FetchController
from .objects.query import HttpObjectQueryService, ObjectQueryService
from .settings.manager import SettingsManager
from .settings.schema import DEFAULT_SETTINGS
from .viewport import MapViewport

LOGGER = logging.getLogger(__name__)


class MapSession(QObject):
    """Own the core map components and the connections between them.

    The presentation layer receives typed references through the properties
    below instead of reaching for process-wide handles.
    """

    def __init__(
        self,
        viewport: MapViewport,
        service: ObjectQueryService,
        *,
        settings: Optional[SettingsManager] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
        render_factory: Optional[RenderFactory] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._viewport = viewport
        self._service = service
        self._settings = settings
        self._events = event_bus or EventBus()
        self._error_handler = error_handler or ErrorHandler(
            logging.getLogger("fieldmap.errors"), self._events
        )

        self._store = FeatureStore(event_bus=self._events, parent=self)
        self._drawing = DrawingController(
            self._store,
            color=self._setting("drawing.color"),
            category=self._setting("drawing.category"),
            render_factory=render_factory,
            parent=self,
        )
        self._fetch = FetchController(
            viewport,
            service,
            debounce_ms=self._setting("map.fetch_debounce_ms"),
            error_handler=self._error_handler,
            event_bus=self._events,
            parent=self,
        )
        self._clusters = ClusterController(
            viewport,
            enabled=self._setting("map.clustering_enabled"),
            event_bus=self._events,
            parent=self,
        )

        viewport.viewChanged.connect(self._fetch.handle_view_changed)
        viewport.viewChanged.connect(self._clusters.handle_view_changed)
        self._fetch.objectsUpdated.connect(self._clusters.set_objects)
        if settings is not None:
            settings.settingsChanged.connect(self._handle_setting_changed)

    # ------------------------------------------------------------------
    @property
    def viewport(self) -> MapViewport:
        return self._viewport

    @property
    def event_bus(self) -> EventBus:
        return self._events

    @property
    def error_handler(self) -> ErrorHandler:
        return self._error_handler

    @property
    def feature_store(self) -> FeatureStore:
        return self._store

    @property
    def drawing(self) -> DrawingController:
        return self._drawing

    @property
    def fetcher(self) -> FetchController:
        return self._fetch

    @property
    def clusters(self) -> ClusterController:
        return self._clusters

    # ------------------------------------------------------------------
    def start(self) -> None:
        """Load the objects for the initial viewport."""

        self._fetch.start()

    def shutdown(self) -> None:
        self._drawing.deactivate()
        self._fetch.shutdown()

    # ------------------------------------------------------------------
    def _setting(self, key: str) -> Any:
        if self._settings is not None:
            value = self._settings.get(key)
            if value is not None:
                return value
        target: Any = DEFAULT_SETTINGS
        for part in key.split("."):
            target = target[part]
        return target

    def _handle_setting_changed(self, key: str, _value: object) -> None:
        if key.startswith("drawing"):
            self._drawing.set_color(self._setting("drawing.color"))
            self._drawing.set_category(self._setting("drawing.category"))
        elif key.startswith("api") and isinstance(self._service, HttpObjectQueryService):
            self._service.set_base_url(self._setting("api.base_url"))
            self._service.set_timeout_ms(self._setting("api.timeout_ms"))
        elif key.startswith("map"):
            self._clusters.set_enabled(self._setting("map.clustering_enabled"))
            self._fetch.set_debounce_interval(self._setting("map.fetch_debounce_ms"))
        LOGGER.debug("Applied setting change %s", key)


__all__ = ["MapSession"]
