"""Interactive geometry capture: tool modes, drawing controller and feature store."""

from .export import write_feature_collection
from .feature import DrawingPreview, DrawnFeature, FeatureProperties
from .feature_store import FeatureStore
from .input_handler import DrawingInputHandler
from .modes import DrawingMode
from .state_machine import DrawingController

__all__ = [
    "DrawingController",
    "DrawingInputHandler",
    "DrawingMode",
    "DrawingPreview",
    "DrawnFeature",
    "FeatureProperties",
    "FeatureStore",
    "write_feature_collection",
]
