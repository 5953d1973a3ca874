import logging
from unittest.mock import Mock

from fieldmap.errors import ObjectQueryError
from fieldmap.errors.handler import (
    ErrorContext,
    ErrorHandler,
    ErrorOccurredEvent,
    ErrorSeverity,
)
from fieldmap.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = ObjectQueryError("HTTP error! status: 502", status=502)
    context = ErrorContext(operation="object query", bbox="1.0,43.0,2.0,44.0", zoom=12)
    handler.handle(error, ErrorSeverity.ERROR, context)

    # Check logging
    logger.error.assert_called()
    message = logger.error.call_args[0][0]
    assert message.startswith("object query failed: ObjectQueryError")
    expected = {"operation": "object query", "bbox": "1.0,43.0,2.0,44.0", "zoom": 12, "status": 502}
    assert logger.error.call_args[1]["extra"] == {"fieldmap_context": expected}

    # Check event publishing
    event_bus.publish.assert_called()
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity == ErrorSeverity.ERROR
    assert event.context == expected


def test_context_omits_unset_fields():
    context = ErrorContext(operation="export")
    assert context.as_dict() == {"operation": "export"}

    typed = ErrorContext(operation="object query", types=("arbres", "puits"))
    assert typed.as_dict()["types"] == ["arbres", "puits"]


def test_plain_mapping_context_is_accepted():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    data = handler.handle(ValueError("bad"), ErrorSeverity.INFO, {"zoom": 3})
    assert data == {"zoom": 3}


def test_warning_uses_warning_log_level():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))

    handler.handle(ObjectQueryError("timeout"), ErrorSeverity.WARNING)

    logger.warning.assert_called()
    logger.error.assert_not_called()


def test_ui_callback():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    callback = Mock()
    handler.register_ui_callback(callback)

    error = RuntimeError("ui error")
    handler.handle(error, ErrorSeverity.CRITICAL)

    callback.assert_called_with("ui error", ErrorSeverity.CRITICAL)


def test_ignore_warning_severity_in_ui():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(Exception("fetch failed"), ErrorSeverity.WARNING)
    handler.handle(Exception("info"), ErrorSeverity.INFO)

    callback.assert_not_called()


def test_handler_publishes_on_real_bus():
    bus = EventBus()
    received = []
    bus.subscribe(ErrorOccurredEvent, received.append)
    handler = ErrorHandler(logging.getLogger("fieldmap.test"), bus)

    handler.handle(ValueError("bad"), ErrorSeverity.INFO)

    assert len(received) == 1
    assert received[0].context == {}
