from .bus import Event, EventBus, Subscription
from .map_events import (
    ClustersUpdatedEvent,
    FeatureAddedEvent,
    FeaturesReplacedEvent,
    ObjectSetUpdatedEvent,
)

__all__ = [
    "ClustersUpdatedEvent",
    "Event",
    "EventBus",
    "FeatureAddedEvent",
    "FeaturesReplacedEvent",
    "ObjectSetUpdatedEvent",
    "Subscription",
]
