from __future__ import annotations

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for viewport tests", exc_type=ImportError)
pytest.importorskip("PySide6.QtTest", reason="Qt test helpers not available", exc_type=ImportError)

from PySide6.QtCore import QPointF
from PySide6.QtTest import QSignalSpy

from fieldmap.config import MAX_ZOOM
from fieldmap.geometry.measure import Vertex
from fieldmap.viewport import BoundingBox, StaticViewport, ViewState, lonlat_to_world, world_size


def test_world_size_doubles_per_zoom_level() -> None:
    assert world_size(0) == 256.0
    assert world_size(3) == 2048.0


def test_lonlat_to_world_origin_is_world_centre() -> None:
    assert lonlat_to_world(0.0, 0.0, 512.0) == pytest.approx((256.0, 256.0))


def test_project_centre_lands_in_widget_centre() -> None:
    view = ViewState(46.2276, 2.2137, 6.0, 800, 600)
    point = view.project(46.2276, 2.2137)
    assert point is not None
    assert point.x() == pytest.approx(400.0)
    assert point.y() == pytest.approx(300.0)


def test_unproject_inverts_project() -> None:
    view = ViewState(45.0, 5.0, 14.0, 1024, 768)
    point = view.project(45.001, 5.002)
    vertex = view.unproject(point)
    assert vertex.lat == pytest.approx(45.001)
    assert vertex.lng == pytest.approx(5.002)


def test_project_rejects_nan() -> None:
    view = ViewState(0.0, 0.0, 3.0, 100, 100)
    assert view.project(float("nan"), 0.0) is None


def test_bounds_surround_the_centre() -> None:
    view = ViewState(45.0, 5.0, 12.0, 1024, 768)
    bbox = view.bounds()
    assert bbox.west < 5.0 < bbox.east
    assert bbox.south < 45.0 < bbox.north
    assert bbox.contains(Vertex(45.0, 5.0))
    assert not bbox.contains(Vertex(46.0, 5.0))


def test_bbox_param_order() -> None:
    bbox = BoundingBox(west=1.5, south=43.0, east=2.5, north=44.0)
    assert bbox.as_param() == "1.5,43.0,2.5,44.0"


def test_static_viewport_focus_on_emits_view_change(qapp) -> None:
    viewport = StaticViewport(center_lat=45.0, center_lng=5.0, zoom=10.0)
    spy = QSignalSpy(viewport.viewChanged)
    viewport.focus_on(6.0, 46.0, 2)
    assert spy.count() == 1
    assert viewport.zoom == 12.0
    assert viewport.state.center_lat == 46.0
    assert viewport.state.center_lng == 6.0


def test_static_viewport_clamps_zoom(qapp) -> None:
    viewport = StaticViewport(zoom=MAX_ZOOM - 1)
    viewport.focus_on(0.0, 0.0, 5)
    assert viewport.zoom == MAX_ZOOM


def test_static_viewport_unproject_matches_state(qapp) -> None:
    viewport = StaticViewport(center_lat=10.0, center_lng=20.0, zoom=8.0, width=200, height=100)
    vertex = viewport.unproject(QPointF(100.0, 50.0))
    assert vertex.lat == pytest.approx(10.0)
    assert vertex.lng == pytest.approx(20.0)
