from dataclasses import dataclass, field
from typing import Any

from .bus import Event


@dataclass(kw_only=True)
class FeatureAddedEvent(Event):
    feature: Any = None


@dataclass(kw_only=True)
class FeaturesReplacedEvent(Event):
    features: list = field(default_factory=list)


@dataclass(kw_only=True)
class ObjectSetUpdatedEvent(Event):
    objects: list = field(default_factory=list)
    bbox: Any = None
    zoom: int = 0


@dataclass(kw_only=True)
class ClustersUpdatedEvent(Event):
    result: Any = None
    zoom: float = 0.0
