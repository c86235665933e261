"""
Annotation engine core.

Gesture recognition (``core.gesture``), the annotation data model
(``core.annotation``) and the session tying both to pointer events.
"""

from .session import AnnotationSession, Tool

__all__ = ["AnnotationSession", "Tool"]
