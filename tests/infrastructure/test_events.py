from dataclasses import dataclass
from unittest.mock import Mock

from fieldmap.events.bus import Event, EventBus


@dataclass(kw_only=True)
class SimpleEvent(Event):
    payload: str = ""


@dataclass(kw_only=True)
class OtherEvent(Event):
    pass


def test_sync_subscribe_publish():
    bus = EventBus()
    received = []

    def handler(event: SimpleEvent):
        received.append(event.payload)

    bus.subscribe(SimpleEvent, handler)
    bus.publish(SimpleEvent(payload="hello"))

    assert received == ["hello"]


def test_multiple_handlers_run_in_subscription_order():
    bus = EventBus()
    calls = []

    bus.subscribe(SimpleEvent, lambda event: calls.append("first"))
    bus.subscribe(SimpleEvent, lambda event: calls.append("second"))

    bus.publish(SimpleEvent())

    assert calls == ["first", "second"]


def test_events_are_routed_by_type():
    bus = EventBus()
    received = []
    bus.subscribe(OtherEvent, received.append)

    bus.publish(SimpleEvent(payload="ignored"))

    assert received == []


def test_unsubscribe():
    bus = EventBus()
    received = []
    subscription = bus.subscribe(SimpleEvent, received.append)
    assert bus.subscriber_count(SimpleEvent) == 1

    bus.unsubscribe(subscription)
    bus.publish(SimpleEvent())

    assert received == []
    assert bus.subscriber_count(SimpleEvent) == 0


def test_cancelled_subscription_is_skipped():
    bus = EventBus()
    received = []
    subscription = bus.subscribe(SimpleEvent, received.append)
    subscription.cancel()

    bus.publish(SimpleEvent())

    assert received == []


def test_failing_handler_does_not_stop_others():
    logger = Mock()
    bus = EventBus(logger)
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(SimpleEvent, broken)
    bus.subscribe(SimpleEvent, received.append)
    bus.publish(SimpleEvent(payload="still delivered"))

    assert [event.payload for event in received] == ["still delivered"]
    logger.error.assert_called_once()


def test_events_carry_identity():
    first, second = SimpleEvent(), SimpleEvent()
    assert first.event_id != second.event_id
    assert first.timestamp is not None
