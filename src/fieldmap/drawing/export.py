"""Write drawn features to a GeoJSON file."""

from __future__ import annotations

from pathlib import Path

from ..errors import ExportError
from ..utils.jsonio import write_json
from ..utils.logging import get_logger
from .feature_store import FeatureStore

logger = get_logger(__name__)

DEFAULT_EXPORT_NAME = "dessins_export.geojson"


def write_feature_collection(store: FeatureStore, path: Path) -> bool:
    """Export *store* to *path*.

    Returns ``False`` without touching the filesystem when the store is
    empty.  A directory target receives :data:`DEFAULT_EXPORT_NAME`.
    """

    collection = store.export_feature_collection()
    if collection is None:
        return False
    target = Path(path)
    if target.is_dir():
        target = target / DEFAULT_EXPORT_NAME
    try:
        write_json(target, collection)
    except OSError as exc:
        raise ExportError(f"Could not write {target}: {exc}") from exc
    logger.info("Exported %d drawn features to %s", len(collection["features"]), target)
    return True


__all__ = ["DEFAULT_EXPORT_NAME", "write_feature_collection"]
