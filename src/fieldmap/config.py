"""Default configuration values for fieldmap."""

from __future__ import annotations

from typing import Final

# ---------------------------------------------------------------------------
# Legends
# ---------------------------------------------------------------------------

# The legend tables mirror the categories stored by the backend.  Cluster
# markers and single objects are coloured from the merged lookup below.
VEGETATION_LEGEND: Final[dict[str, str]] = {
    "Arbre": "#059669",
    "Gazon": "#84cc16",
    "Palmier": "#f97316",
    "Arbuste": "#10b981",
    "Vivace": "#ec4899",
    "Cactus": "#06b6d4",
    "Graminee": "#eab308",
}
HYDRAULIC_LEGEND: Final[dict[str, str]] = {
    "Puit": "#0ea5e9",
    "Pompe": "#06b6d4",
    "Vanne": "#14b8a6",
    "Clapet": "#0891b2",
    "Canalisation": "#0284c7",
    "Aspersion": "#38bdf8",
    "Goutte": "#7dd3fc",
    "Ballon": "#0369a1",
}
SITE_LEGEND: Final[dict[str, str]] = {"Site": "#3b82f6"}

OBJECT_COLORS: Final[dict[str, str]] = {
    **VEGETATION_LEGEND,
    **HYDRAULIC_LEGEND,
    **SITE_LEGEND,
}
FALLBACK_OBJECT_COLOR: Final[str] = "#6b7280"

# Category labels shown in the UI map onto the plural, lower-case keys the
# object query endpoint understands.  Labels missing from this table are sent
# lower-cased.
CATEGORY_TO_BACKEND_KEY: Final[dict[str, str]] = {
    "Site": "sites",
    "Arbre": "arbres",
    "Gazon": "gazons",
    "Palmier": "palmiers",
    "Arbuste": "arbustes",
    "Vivace": "vivaces",
    "Cactus": "cactus",
    "Graminee": "graminees",
    "Puit": "puits",
    "Pompe": "pompes",
    "Vanne": "vannes",
    "Clapet": "clapets",
    "Canalisation": "canalisations",
    "Aspersion": "aspersions",
    "Goutte": "gouttes",
    "Ballon": "ballons",
}

# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

DEFAULT_DRAWING_COLOR: Final[str] = "#ff6600"

# A press/release pair that moved further than this many pixels is a drag,
# not a click, and therefore never adds a vertex.
CLICK_SLOP_PX: Final[float] = 4.0

# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------

METERS_PER_DEGREE: Final[float] = 111320.0
EARTH_RADIUS_M: Final[float] = 6371000.0
HECTARE_THRESHOLD_M2: Final[float] = 10000.0
KILOMETER_THRESHOLD_M: Final[float] = 1000.0

# ---------------------------------------------------------------------------
# Viewport and clustering
# ---------------------------------------------------------------------------

TILE_SIZE: Final[int] = 256
MIN_ZOOM: Final[float] = 0.0
MAX_ZOOM: Final[float] = 22.0
INITIAL_POSITION: Final[dict[str, float]] = {"lat": 46.2276, "lng": 2.2137, "zoom": 6}

CLUSTER_MIN_DISTANCE_PX: Final[float] = 30.0
CLUSTER_BASE_DISTANCE_PX: Final[float] = 100.0
CLUSTER_DISTANCE_PER_ZOOM_PX: Final[float] = 5.0
CLUSTER_ZOOM_CEILING: Final[int] = 18
CLUSTER_ZOOM_STEP: Final[int] = 2

# ---------------------------------------------------------------------------
# Object query
# ---------------------------------------------------------------------------

DEFAULT_API_BASE_URL: Final[str] = "http://127.0.0.1:8000/api"
OBJECT_QUERY_PATH: Final[str] = "/map/"
DEFAULT_API_TIMEOUT_MS: Final[int] = 15000
FETCH_DEBOUNCE_MS: Final[int] = 250
