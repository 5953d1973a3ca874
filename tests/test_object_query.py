from __future__ import annotations

import json

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for object query tests", exc_type=ImportError)

from PySide6.QtCore import QByteArray, QUrlQuery
from PySide6.QtNetwork import QNetworkReply, QNetworkRequest

from fieldmap.errors import MalformedObjectError, ObjectQueryError
from fieldmap.geometry.measure import Vertex
from fieldmap.objects.models import (
    display_name_for,
    map_object_from_feature,
    object_color,
    parse_feature_collection,
)
from fieldmap.objects.query import (
    HttpObjectQueryService,
    ObjectQuery,
    build_query_url,
    decode_response,
    translate_type_filter,
)
from fieldmap.viewport import BoundingBox

BBOX = BoundingBox(west=1.0, south=43.0, east=2.0, north=44.0)


def _feature(object_id=1, object_type="Arbre", geometry=None, **properties) -> dict:
    props = {"id": object_id, "object_type": object_type}
    props.update(properties)
    return {
        "type": "Feature",
        "geometry": geometry or {"type": "Point", "coordinates": [1.5, 43.5]},
        "properties": props,
    }


def test_translate_type_filter() -> None:
    assert translate_type_filter(["Arbre", "Puit", "Site"]) == ["arbres", "puits", "sites"]
    assert translate_type_filter(["Unknown", "", "unknown"]) == ["unknown"]


def test_query_params_omit_empty_types() -> None:
    assert ObjectQuery(BBOX, 12).params() == [("bbox", "1.0,43.0,2.0,44.0"), ("zoom", "12")]
    typed = ObjectQuery(BBOX, 12, ("arbres", "puits")).params()
    assert typed[-1] == ("types", "arbres,puits")


def test_build_query_url() -> None:
    url = build_query_url("http://127.0.0.1:8000/api/", ObjectQuery(BBOX, 9, ("arbres",)))
    assert url.path() == "/api/map/"
    query = QUrlQuery(url)
    assert query.queryItemValue("bbox") == "1.0,43.0,2.0,44.0"
    assert query.queryItemValue("zoom") == "9"
    assert query.queryItemValue("types") == "arbres"


def test_map_object_from_feature() -> None:
    obj = map_object_from_feature(
        _feature(7, "Site", nom_site="Parc Est", center={"lat": 43.5, "lng": 1.5})
    )
    assert obj.key == ("Site", 7)
    assert obj.display_name == "Parc Est"
    assert obj.center == Vertex(43.5, 1.5)
    assert obj.properties["nom_site"] == "Parc Est"
    with pytest.raises(TypeError):
        obj.properties["nom_site"] = "changed"  # type: ignore[index]


def test_polygon_center_takes_precedence() -> None:
    ring = {"type": "Polygon", "coordinates": [[[0, 0], [4, 0], [4, 4], [0, 0]]]}
    obj = map_object_from_feature(_feature(2, "Gazon", ring, center={"lat": 10, "lng": 20}))
    assert obj.representative_point() == Vertex(10.0, 20.0)


def test_display_name_fallback_chain() -> None:
    assert display_name_for({"nom": "Chêne", "marque": "X"}, "Arbre", 1) == "Chêne"
    assert display_name_for({"marque": "Rain Bird"}, "Aspersion", 3) == "Rain Bird"
    assert display_name_for({"nom": "  "}, "Arbre", 4) == "Arbre #4"


def test_object_color_lookup() -> None:
    assert object_color("Site") == "#3b82f6"
    assert object_color("Unknown") == "#6b7280"


@pytest.mark.parametrize(
    "feature",
    [
        None,
        {"geometry": {"type": "Point", "coordinates": [0, 0]}},
        _feature(object_id=None),
        _feature(object_id=True),
        _feature(object_type=""),
        {"properties": {"id": 1, "object_type": "Arbre"}},
        _feature(geometry={"type": 9, "coordinates": []}),
    ],
)
def test_map_object_from_feature_rejects_malformed(feature) -> None:
    with pytest.raises(MalformedObjectError):
        map_object_from_feature(feature)


def test_parse_feature_collection_skips_bad_entries() -> None:
    payload = {"type": "FeatureCollection", "features": [_feature(1), {"bad": True}, _feature(2)]}
    assert [obj.id for obj in parse_feature_collection(payload)] == [1, 2]
    assert parse_feature_collection({"type": "FeatureCollection"}) == []
    with pytest.raises(MalformedObjectError):
        parse_feature_collection("nope")


def test_decode_response() -> None:
    raw = json.dumps({"type": "FeatureCollection", "features": [_feature(5)]}).encode("utf-8")
    assert [obj.id for obj in decode_response(raw)] == [5]
    with pytest.raises(ObjectQueryError):
        decode_response(b"<html>")
    with pytest.raises(ObjectQueryError):
        decode_response(b'"text"')


def test_infinite_id_skips_only_that_object() -> None:
    payload = {"type": "FeatureCollection", "features": [_feature(float("inf")), _feature(2)]}
    raw = json.dumps(payload).encode("utf-8")
    assert b"Infinity" in raw
    assert [obj.id for obj in decode_response(raw)] == [2]


def test_non_list_features_is_a_query_error() -> None:
    with pytest.raises(MalformedObjectError):
        parse_feature_collection({"type": "FeatureCollection", "features": 5})
    with pytest.raises(ObjectQueryError):
        decode_response(b'{"features": 5}')
    with pytest.raises(ObjectQueryError):
        decode_response(b'{"features": {"id": 1}}')


class StubReply:
    """Stand-in for a finished ``QNetworkReply``."""

    def __init__(
        self,
        body: bytes = b"",
        status=200,
        error=QNetworkReply.NetworkError.NoError,
        error_string: str = "",
    ) -> None:
        self._body = body
        self._status = status
        self._error = error
        self._error_string = error_string
        self.deleted = False

    def error(self):
        return self._error

    def errorString(self) -> str:
        return self._error_string

    def attribute(self, attribute):
        if attribute == QNetworkRequest.Attribute.HttpStatusCodeAttribute:
            return self._status
        return None

    def readAll(self) -> QByteArray:
        return QByteArray(self._body)

    def deleteLater(self) -> None:
        self.deleted = True


@pytest.fixture
def http_service(qapp) -> HttpObjectQueryService:
    return HttpObjectQueryService("http://127.0.0.1:8000/api")


def _deliver(service: HttpObjectQueryService, reply: StubReply):
    successes: list = []
    failures: list = []
    service._handle_reply(reply, successes.append, failures.append)
    assert reply.deleted
    return successes, failures


def test_reply_with_feature_collection_succeeds(http_service: HttpObjectQueryService) -> None:
    body = json.dumps({"type": "FeatureCollection", "features": [_feature(4)]}).encode("utf-8")
    successes, failures = _deliver(http_service, StubReply(body))
    assert failures == []
    assert [[obj.id for obj in objects] for objects in successes] == [[4]]


def test_reply_with_server_error_status_fails(http_service: HttpObjectQueryService) -> None:
    successes, failures = _deliver(http_service, StubReply(b"{}", status=500))
    assert successes == []
    assert len(failures) == 1
    assert isinstance(failures[0], ObjectQueryError)
    assert failures[0].status == 500
    assert str(failures[0]) == "HTTP error! status: 500"


def test_reply_with_http_error_reports_status(http_service: HttpObjectQueryService) -> None:
    reply = StubReply(
        status=404,
        error=QNetworkReply.NetworkError.ContentNotFoundError,
        error_string="Not Found",
    )
    successes, failures = _deliver(http_service, reply)
    assert successes == []
    assert failures[0].status == 404
    assert "Not Found" in str(failures[0])


def test_reply_with_transport_error_fails(http_service: HttpObjectQueryService) -> None:
    reply = StubReply(
        status=None,
        error=QNetworkReply.NetworkError.ConnectionRefusedError,
        error_string="Connection refused",
    )
    successes, failures = _deliver(http_service, reply)
    assert successes == []
    assert isinstance(failures[0], ObjectQueryError)
    assert failures[0].status is None
    assert "Connection refused" in str(failures[0])


@pytest.mark.parametrize("body", [b"<html>oops</html>", b'{"features": 5}'])
def test_reply_with_unusable_body_fails(http_service: HttpObjectQueryService, body: bytes) -> None:
    successes, failures = _deliver(http_service, StubReply(body))
    assert successes == []
    assert isinstance(failures[0], ObjectQueryError)
    assert failures[0].status is None


def test_timeout_can_be_changed(http_service: HttpObjectQueryService) -> None:
    http_service.set_timeout_ms(0)
    assert http_service.timeout_ms == 0
