from __future__ import annotations

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for cluster controller tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtTest", reason="Qt test helpers not available", exc_type=ImportError)

from PySide6.QtTest import QSignalSpy

from fieldmap.clustering.controller import ClusterController
from fieldmap.clustering.engine import ClusterResult
from fieldmap.events import ClustersUpdatedEvent, EventBus
from fieldmap.objects.models import MapObject
from fieldmap.viewport import StaticViewport


def _obj(object_id: int, lng: float, lat: float = 45.0) -> MapObject:
    return MapObject(
        id=object_id,
        object_type="Arbre",
        geometry_type="Point",
        coordinates=[lng, lat],
        display_name=f"Arbre #{object_id}",
    )


# Two trees a few metres apart and one a kilometre away.
NEARBY = [_obj(1, 5.0), _obj(2, 5.00005), _obj(3, 5.02)]


@pytest.fixture
def viewport(qapp) -> StaticViewport:
    return StaticViewport(center_lat=45.0, center_lng=5.0, zoom=12.0, width=800, height=600)


def test_set_objects_clusters_and_emits(viewport: StaticViewport) -> None:
    controller = ClusterController(viewport)
    spy = QSignalSpy(controller.clustersUpdated)

    controller.set_objects(NEARBY)

    assert spy.count() == 1
    result = controller.result
    assert isinstance(result, ClusterResult)
    assert [[obj.id for obj in group.members] for group in result.clusters] == [[1, 2]]
    assert [obj.id for obj in result.singles] == [3]


def test_view_change_reclusters(viewport: StaticViewport) -> None:
    controller = ClusterController(viewport)
    viewport.viewChanged.connect(controller.handle_view_changed)
    controller.set_objects(NEARBY)
    spy = QSignalSpy(controller.clustersUpdated)

    # At street level the two nearby trees separate.
    viewport.set_view(45.0, 5.0, 21.0)

    assert spy.count() == 1
    assert controller.result.clusters == []
    assert [obj.id for obj in controller.result.singles] == [1, 2, 3]


def test_disabling_clustering_renders_singles(viewport: StaticViewport) -> None:
    controller = ClusterController(viewport)
    controller.set_objects(NEARBY)
    controller.set_enabled(False)
    assert controller.result.clusters == []
    assert len(controller.result.singles) == 3


def test_cluster_click_zooms_towards_centre(viewport: StaticViewport) -> None:
    controller = ClusterController(viewport)
    controller.set_objects(NEARBY)
    group = controller.result.clusters[0]
    spy = QSignalSpy(viewport.viewChanged)

    assert controller.handle_cluster_click(group) is True

    assert spy.count() == 1
    assert viewport.zoom == 14.0
    assert viewport.state.center_lat == pytest.approx(group.latitude)
    assert viewport.state.center_lng == pytest.approx(group.longitude)


def test_cluster_click_stops_at_zoom_ceiling(viewport: StaticViewport) -> None:
    controller = ClusterController(viewport)
    viewport.set_view(45.0, 5.0, 18.0)
    controller.set_objects([_obj(1, 5.0), _obj(2, 5.0000001)])
    group = controller.result.clusters[0]
    spy = QSignalSpy(viewport.viewChanged)

    assert controller.handle_cluster_click(group) is False
    assert spy.count() == 0
    assert viewport.zoom == 18.0


def test_object_click_is_forwarded(viewport: StaticViewport) -> None:
    controller = ClusterController(viewport)
    activated: list = []
    controller.objectActivated.connect(activated.append)
    controller.handle_object_click(NEARBY[0])
    assert activated == [NEARBY[0]]


def test_clusters_updated_event_is_published(viewport: StaticViewport) -> None:
    bus = EventBus()
    events: list = []
    bus.subscribe(ClustersUpdatedEvent, events.append)
    controller = ClusterController(viewport, event_bus=bus)

    controller.set_objects(NEARBY)
    controller.clear()

    assert len(events) == 2
    assert events[-1].result.is_empty
    assert events[-1].zoom == 12.0
