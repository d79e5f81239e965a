"""
DI Diagnostics - event tracking for DI containers.
"""

import time
from typing import Any, Dict, List, Optional, Protocol
from enum import Enum
import dataclasses
import logging

from ..faults import qualname

logger = logging.getLogger("strix.di.diagnostics")


class DIEventType(Enum):
    """Types of DI events."""
    REGISTRATION = "registration"
    RESOLUTION_START = "resolution_start"
    RESOLUTION_SUCCESS = "resolution_success"
    RESOLUTION_FAILURE = "resolution_failure"


@dataclasses.dataclass
class DIEvent:
    """A diagnostic event in the DI system."""
    type: DIEventType
    timestamp: float = dataclasses.field(default_factory=time.time)
    token: Optional[Any] = None
    duration: Optional[float] = None
    error: Optional[BaseException] = None
    metadata: Dict[str, Any] = dataclasses.field(default_factory=dict)


class DiagnosticListener(Protocol):
    """Interface for DI diagnostic listeners."""
    def on_event(self, event: DIEvent) -> None:
        """Called when a DI event occurs."""
        ...


class LoggingDiagnosticListener:
    """Listener that writes DI events to the ``strix.di.diagnostics`` logger."""

    def __init__(self, log_level: int = logging.DEBUG):
        self.log_level = log_level

    def on_event(self, event: DIEvent) -> None:
        name = qualname(event.token)
        if event.type == DIEventType.REGISTRATION:
            logger.log(self.log_level, "Registered provider %s", name)
        elif event.type == DIEventType.RESOLUTION_START:
            logger.log(self.log_level, "Resolving %s...", name)
        elif event.type == DIEventType.RESOLUTION_SUCCESS:
            logger.log(self.log_level, "Resolved %s in %.4fs", name, event.duration)
        elif event.type == DIEventType.RESOLUTION_FAILURE:
            logger.error("Failed to resolve %s: %s", name, event.error)


class RecordingDiagnosticListener:
    """Listener that keeps every event, for inspection in tests and tooling."""

    def __init__(self):
        self.events: List[DIEvent] = []

    def on_event(self, event: DIEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: DIEventType) -> List[DIEvent]:
        return [event for event in self.events if event.type == event_type]


class DIDiagnostics:
    """Coordinator for DI diagnostic listeners."""

    def __init__(self):
        self._listeners: List[DiagnosticListener] = []

    def add_listener(self, listener: DiagnosticListener) -> None:
        """Add a diagnostic listener."""
        self._listeners.append(listener)

    def emit(self, event_type: DIEventType, **kwargs) -> None:
        """Emit a diagnostic event to all listeners."""
        if not self._listeners:
            return
        event = DIEvent(type=event_type, **kwargs)
        for listener in self._listeners:
            listener.on_event(event)

    def measure(self, token: Any) -> "_DiagnosticMeasure":
        """Context manager timing the resolution of ``token``."""
        return _DiagnosticMeasure(self, token)


class _DiagnosticMeasure:
    def __init__(self, diagnostics: DIDiagnostics, token: Any):
        self.diagnostics = diagnostics
        self.token = token
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.diagnostics.emit(DIEventType.RESOLUTION_START, token=self.token)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = time.perf_counter() - self.start_time
        if exc_type:
            self.diagnostics.emit(
                DIEventType.RESOLUTION_FAILURE,
                token=self.token,
                duration=duration,
                error=exc_val,
            )
        else:
            self.diagnostics.emit(
                DIEventType.RESOLUTION_SUCCESS,
                token=self.token,
                duration=duration,
            )
        return False
