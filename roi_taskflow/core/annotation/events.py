"""
Event system for the annotation and task workflow.

Provides a decoupled way for the core to notify UI components
about state changes without depending on specific UI frameworks.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur while authoring and running tasks."""

    # Stroke events
    STROKE_STARTED = "stroke_started"
    STROKE_EXTENDED = "stroke_extended"
    STROKE_DISCARDED = "stroke_discarded"

    # Primitive events
    PRIMITIVE_COMMITTED = "primitive_committed"
    PRIMITIVE_UNDONE = "primitive_undone"
    CANVAS_CLEARED = "canvas_cleared"

    # Task events
    TASK_CREATED = "task_created"
    TASK_DELETED = "task_deleted"
    STATUS_CHANGED = "status_changed"
    SAMPLE_COUNT_UPDATED = "sample_count_updated"

    # Curation events
    SAMPLE_LABELED = "sample_labeled"


@dataclass
class TaskflowEvent:
    """Event that occurs during authoring or task execution."""

    event_type: EventType
    data: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if self.data is None:
            self.data = {}


class EventEmitter:
    """
    Simple event emitter for pub/sub pattern.

    Allows components to subscribe to events without tight coupling.
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[Callable]] = {}

    def on(self, event_type: EventType, callback: Callable[[TaskflowEvent], None]):
        """Subscribe to an event type."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(callback)

    def off(self, event_type: EventType, callback: Callable[[TaskflowEvent], None]):
        """Unsubscribe from an event type."""
        if event_type in self._listeners:
            self._listeners[event_type].remove(callback)

    def emit(self, event: TaskflowEvent):
        """Emit an event to all subscribers."""
        for callback in list(self._listeners.get(event.event_type, [])):
            try:
                callback(event)
            except Exception:
                # Log but don't crash on listener errors
                logger.exception(f"Error in listener for {event.event_type.value}")

    def clear(self):
        """Clear all event listeners."""
        self._listeners.clear()
