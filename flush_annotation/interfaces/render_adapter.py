"""
Render adapter for annotation sessions.

Bridges the AnnotationSession with whatever draws the highlighted text
and the live stroke colour.
"""

from typing import Callable, Dict, List, Optional

from ..core.annotation import AnnotationEvent, EventType
from ..core.annotation.utils import primary_annotation
from ..core.session import AnnotationSession

_REDRAW_EVENTS = (
    EventType.CONTENT_LOADED,
    EventType.ANNOTATION_ADDED,
    EventType.ANNOTATIONS_REMOVED,
    EventType.ANNOTATION_UPDATED,
    EventType.ANNOTATIONS_CLEARED,
    EventType.HISTORY_UNDONE,
    EventType.HISTORY_REDONE,
)


class RenderAdapter:
    """
    Adapter turning session state into drawable segments.

    Provides a thin layer that:
    - Translates session events to a single redraw callback
    - Tracks the colour of the stroke being drawn
    - Projects flattened runs into styled text segments
    """

    def __init__(
        self,
        session: AnnotationSession,
        update_callback: Optional[Callable] = None,
    ):
        """
        Initialize adapter.

        Args:
            session: Core annotation session
            update_callback: Called without arguments whenever the
                rendered output may have changed
        """
        self.session = session
        self.update_callback = update_callback
        self.stroke_color: Optional[str] = None

        # Subscribe to session events
        self._setup_event_handlers()

    def _setup_event_handlers(self):
        """Setup event handlers for session events."""
        self.session.events.on_many(_REDRAW_EVENTS, self._on_annotations_changed)
        self.session.events.on(EventType.STROKE_STARTED, self._on_stroke_color)
        self.session.events.on(EventType.MODE_CHANGED, self._on_stroke_color)

    def _on_annotations_changed(self, event: AnnotationEvent):
        if self.update_callback:
            self.update_callback()

    def _on_stroke_color(self, event: AnnotationEvent):
        self.stroke_color = event.data.get("color")

    def get_segments(self) -> List[Dict]:
        """
        Get the loaded content as styled segments.

        Returns:
            One dict per run with ``text``, ``annotation_ids``, and the
            ``relevance``/``tooltip`` of its primary annotation (None for
            plain text)
        """
        segments = []
        for run in self.session.resolve_runs():
            annotations = [self.session.annotations.get(i) for i in run.annotation_ids]
            primary = primary_annotation(annotations)
            segments.append(
                {
                    "text": run.text,
                    "annotation_ids": list(run.annotation_ids),
                    "relevance": primary.relevance.value if primary else None,
                    "tooltip": (
                        (primary.comment or primary.relevance.description)
                        if primary
                        else None
                    ),
                }
            )
        return segments
