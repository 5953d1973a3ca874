"""Route recoverable failures to the log, the event bus and the status bar."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Union

from ..events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ErrorContext:
    """Where a failure happened.

    ``bbox``, ``zoom`` and ``types`` describe the object query in flight, if
    any.  Unset fields are left out of :meth:`as_dict`.
    """

    operation: str
    bbox: Optional[str] = None
    zoom: Optional[int] = None
    types: tuple[str, ...] = ()
    status: Optional[int] = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"operation": self.operation}
        if self.bbox is not None:
            data["bbox"] = self.bbox
        if self.zoom is not None:
            data["zoom"] = self.zoom
        if self.types:
            data["types"] = list(self.types)
        if self.status is not None:
            data["status"] = self.status
        return data


ContextLike = Union[ErrorContext, Mapping[str, Any], None]


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


def _context_dict(error: Exception, context: ContextLike) -> dict[str, Any]:
    if isinstance(context, ErrorContext):
        data = context.as_dict()
    else:
        data = dict(context or {})
    # Object query errors carry the HTTP status of the failed reply.
    status = getattr(error, "status", None)
    if status is not None:
        data.setdefault("status", status)
    return data


class ErrorHandler:
    """Funnel recoverable failures into the log, the event bus and the UI.

    Only ``ERROR`` and ``CRITICAL`` reach the UI callback; failed object
    fetches are reported as warnings and keep the previous markers on screen.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]) -> None:
        self._ui_callback = callback

    def handle(
        self,
        error: Exception,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ContextLike = None,
    ) -> dict[str, Any]:
        """Report *error* and return the context dict that was attached to it."""

        data = _context_dict(error, context)
        operation = data.get("operation")
        prefix = f"{operation} failed: " if operation else ""
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method(f"{prefix}{error.__class__.__name__}: {error}", extra={"fieldmap_context": data})

        self._events.publish(ErrorOccurredEvent(error=error, severity=severity, context=data))

        if self._ui_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._ui_callback(str(error), severity)
        return data
