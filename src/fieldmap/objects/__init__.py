"""Backend map objects, the object query client and the viewport fetch loop."""

from .fetch_controller import FetchController
from .models import MapObject, map_object_from_feature, object_color, parse_feature_collection
from .query import (
    HttpObjectQueryService,
    ObjectQuery,
    ObjectQueryService,
    build_query_url,
    translate_type_filter,
)

__all__ = [
    "FetchController",
    "HttpObjectQueryService",
    "MapObject",
    "ObjectQuery",
    "ObjectQueryService",
    "build_query_url",
    "map_object_from_feature",
    "object_color",
    "parse_feature_collection",
    "translate_type_filter",
]
