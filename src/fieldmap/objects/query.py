"""Client side of the backend object query endpoint."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Protocol

from PySide6.QtCore import QObject, QUrl, QUrlQuery
from PySide6.QtNetwork import QNetworkAccessManager, QNetworkReply, QNetworkRequest

from ..config import (
    CATEGORY_TO_BACKEND_KEY,
    DEFAULT_API_BASE_URL,
    DEFAULT_API_TIMEOUT_MS,
    OBJECT_QUERY_PATH,
)
from ..errors import MalformedObjectError, ObjectQueryError
from ..viewport import BoundingBox
from .models import MapObject, parse_feature_collection

LOGGER = logging.getLogger(__name__)

SuccessCallback = Callable[[list[MapObject]], None]
FailureCallback = Callable[[Exception], None]


def translate_type_filter(labels: Iterable[str]) -> list[str]:
    """Map UI category labels onto backend type keys.

    Labels missing from the lookup table fall back to their lower-cased form.
    Duplicates are dropped while keeping the first occurrence.
    """

    keys: list[str] = []
    for label in labels:
        if not label:
            continue
        key = CATEGORY_TO_BACKEND_KEY.get(label, label.lower())
        if key not in keys:
            keys.append(key)
    return keys


@dataclass(frozen=True)
class ObjectQuery:
    """Parameters of one object query."""

    bbox: BoundingBox
    zoom: int
    types: tuple[str, ...] = field(default_factory=tuple)

    def params(self) -> list[tuple[str, str]]:
        items = [("bbox", self.bbox.as_param()), ("zoom", str(int(self.zoom)))]
        if self.types:
            items.append(("types", ",".join(self.types)))
        return items


class ObjectQueryService(Protocol):
    """Asynchronous source of map objects for a viewport."""

    def request_objects(
        self,
        query: ObjectQuery,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:  # pragma: no cover - interface definition only
        ...


def build_query_url(base_url: str, query: ObjectQuery) -> QUrl:
    """Return the ``GET`` URL for *query* against *base_url*."""

    url = QUrl(base_url.rstrip("/") + OBJECT_QUERY_PATH)
    url_query = QUrlQuery()
    for key, value in query.params():
        url_query.addQueryItem(key, value)
    url.setQuery(url_query)
    return url


def decode_response(payload: bytes) -> list[MapObject]:
    """Decode a JSON feature collection into map objects."""

    try:
        document = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ObjectQueryError(f"Invalid JSON from object query: {exc}") from exc
    try:
        return parse_feature_collection(document)
    except MalformedObjectError as exc:
        raise ObjectQueryError(str(exc)) from exc


class HttpObjectQueryService(QObject):
    """Fetch map objects with ``QNetworkAccessManager`` on the GUI event loop."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        *,
        timeout_ms: int = DEFAULT_API_TIMEOUT_MS,
        manager: Optional[QNetworkAccessManager] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._base_url = base_url
        self._timeout_ms = int(timeout_ms)
        self._manager = manager or QNetworkAccessManager(self)

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_base_url(self, base_url: str) -> None:
        self._base_url = base_url

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def set_timeout_ms(self, timeout_ms: int) -> None:
        """Apply *timeout_ms* to requests issued from now on; 0 disables it."""

        self._timeout_ms = int(timeout_ms)

    def request_objects(
        self,
        query: ObjectQuery,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        url = build_query_url(self._base_url, query)
        request = QNetworkRequest(url)
        request.setRawHeader(b"Accept", b"application/json")
        if self._timeout_ms > 0:
            request.setTransferTimeout(self._timeout_ms)
        LOGGER.debug("GET %s", url.toString())
        reply = self._manager.get(request)
        reply.finished.connect(
            lambda: self._handle_reply(reply, on_success, on_failure)
        )

    def _handle_reply(
        self,
        reply: QNetworkReply,
        on_success: SuccessCallback,
        on_failure: FailureCallback,
    ) -> None:
        try:
            status = reply.attribute(QNetworkRequest.Attribute.HttpStatusCodeAttribute)
            if reply.error() != QNetworkReply.NetworkError.NoError:
                on_failure(
                    ObjectQueryError(
                        f"Object query failed: {reply.errorString()}",
                        status=int(status) if status is not None else None,
                    )
                )
                return
            if status is not None and not 200 <= int(status) < 300:
                on_failure(ObjectQueryError(f"HTTP error! status: {status}", status=int(status)))
                return
            try:
                objects = decode_response(bytes(reply.readAll().data()))
            except ObjectQueryError as exc:
                on_failure(exc)
                return
            on_success(objects)
        finally:
            reply.deleteLater()


__all__ = [
    "HttpObjectQueryService",
    "ObjectQuery",
    "ObjectQueryService",
    "build_query_url",
    "decode_response",
    "translate_type_filter",
]
