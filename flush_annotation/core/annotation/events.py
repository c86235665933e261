"""
Event system for the annotation workflow.

Provides a decoupled way for the annotation core to notify UI components
(drawing colour, feedback, re-rendering) about state changes without
depending on specific UI frameworks.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur during annotation."""

    # Content events
    CONTENT_LOADED = "content_loaded"

    # Stroke events
    STROKE_STARTED = "stroke_started"
    STROKE_DISCARDED = "stroke_discarded"
    STROKE_COMMITTED = "stroke_committed"

    # Gesture events
    SHAPE_DETECTED = "shape_detected"
    MODE_CHANGED = "mode_changed"

    # Annotation events
    ANNOTATION_ADDED = "annotation_added"
    ANNOTATIONS_REMOVED = "annotations_removed"
    ANNOTATION_UPDATED = "annotation_updated"
    ANNOTATIONS_CLEARED = "annotations_cleared"

    # History events
    HISTORY_UNDONE = "history_undone"
    HISTORY_REDONE = "history_redone"


@dataclass
class AnnotationEvent:
    """Event that occurs during annotation."""

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

    def on(self, event_type: EventType, callback: Callable[[AnnotationEvent], None]):
        """Subscribe to an event type."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(callback)

    def on_many(self, event_types, callback: Callable[[AnnotationEvent], None]):
        """Subscribe the same callback to several event types."""
        for event_type in event_types:
            self.on(event_type, callback)

    def off(self, event_type: EventType, callback: Callable[[AnnotationEvent], None]):
        """Unsubscribe from an event type."""
        if event_type in self._listeners:
            self._listeners[event_type].remove(callback)

    def emit(self, event: AnnotationEvent):
        """Emit an event to all subscribers."""
        for callback in list(self._listeners.get(event.event_type, [])):
            try:
                callback(event)
            except Exception:
                # Log but don't crash on listener errors
                logger.exception(
                    "Error in listener for %s", event.event_type.value
                )

    def clear(self):
        """Clear all event listeners."""
        self._listeners.clear()
