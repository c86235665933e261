"""
Core annotation module - UI-agnostic annotation data model.

This module provides the annotation records, the store that resolves
overlapping annotations, undo/redo history and the event system, usable
from any UI framework (Qt, Web, CLI, etc).
"""

from .state import (
    Annotation,
    AnnotationKind,
    BoundingBox,
    InvalidRange,
    Point,
    Relevance,
    Span,
)
from .events import AnnotationEvent, EventType, EventEmitter
from .store import AnnotationSet, Run
from .history import HistoryManager

__all__ = [
    "Annotation",
    "AnnotationKind",
    "BoundingBox",
    "InvalidRange",
    "Point",
    "Relevance",
    "Span",
    "AnnotationEvent",
    "EventType",
    "EventEmitter",
    "AnnotationSet",
    "Run",
    "HistoryManager",
]
