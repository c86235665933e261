"""
Core gesture module - stroke capture and shape recognition.

Turns freehand pointer strokes into shape categories that select an
annotation label without explicit UI controls.
"""

from .stroke import StrokeBuffer
from .classifier import (
    ShapeClassifier,
    ShapeResult,
    ShapeType,
    classify,
    shape_to_relevance,
)
from .mode import Mode, ModeStateMachine, drawing_color

__all__ = [
    "StrokeBuffer",
    "ShapeClassifier",
    "ShapeResult",
    "ShapeType",
    "classify",
    "shape_to_relevance",
    "Mode",
    "ModeStateMachine",
    "drawing_color",
]
