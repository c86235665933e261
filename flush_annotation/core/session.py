"""
Annotation session management.

Core logic for an interactive relevance-annotation session: pointer
stroke lifecycle, gesture-driven labeling, text selection, and undo/redo.
UI-agnostic - can be used with any interface (GUI, Web, CLI).
"""

import logging
from enum import Enum
from typing import List, Optional, Union

from easydict import EasyDict as edict

from ..config import default_config
from .annotation.events import AnnotationEvent, EventEmitter, EventType
from .annotation.history import HistoryManager
from .annotation.state import (
    Annotation,
    BoundingBox,
    InvalidRange,
    Point,
    Relevance,
    Span,
)
from .annotation.store import AnnotationSet, Run
from .annotation.utils import (
    compute_relevance_statistics,
    recover_selection,
)
from .gesture.classifier import ShapeClassifier, ShapeResult
from .gesture.mode import Mode, ModeStateMachine, drawing_color
from .gesture.stroke import StrokeBuffer

logger = logging.getLogger(__name__)


class Tool(Enum):
    """Drawing tools available to the user."""

    ADAPTIVE = "adaptive"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NEUTRAL = "neutral"
    ERASER = "eraser"
    PAN = "pan"

    @property
    def relevance(self) -> Optional[Relevance]:
        """Explicit label of the tool, None for adaptive/eraser/pan."""
        try:
            return Relevance(self.value)
        except ValueError:
            return None

    @property
    def removes(self) -> bool:
        """Whether strokes of this tool delete regions instead of adding."""
        return self in (Tool.NEUTRAL, Tool.ERASER)

    @classmethod
    def parse(cls, value) -> "Tool":
        if isinstance(value, cls):
            return value
        if isinstance(value, Relevance):
            return cls(value.value)
        key = str(value).strip().lower()
        try:
            return cls(key)
        except ValueError:
            pass
        try:
            return cls(Relevance.parse(key).value)
        except ValueError:
            raise ValueError(f"Unknown tool: {value!r}") from None


SpanLike = Union[Span, tuple]


class AnnotationSession:
    """
    Manages the state and logic of an annotation session.

    This class handles:
    - Stroke capture and incremental shape classification
    - The adaptive tool's mode state machine
    - Annotation creation, erasing and deselection
    - State history for undo/redo
    - Event emission for UI updates

    Each session owns its own state, so several canvases can coexist.
    The session is the only writer of its annotation set.
    """

    def __init__(self, config: Optional[edict] = None, tool=None):
        """
        Initialize annotation session.

        Args:
            config: Configuration tree, see ``flush_annotation.config``
            tool: Initial tool, defaults to ``session.default_tool``
        """
        self.cfg = config if config is not None else default_config()

        self.content = ""
        self.annotations = AnnotationSet()
        self.history = HistoryManager(max_size=self.cfg.session.max_history)

        # Event emitter for UI notifications
        self.events = EventEmitter()

        self.stroke = StrokeBuffer(
            time_epsilon=self.cfg.stroke.time_epsilon,
            distance_epsilon=self.cfg.stroke.distance_epsilon,
        )
        self.classifier = ShapeClassifier(self.cfg.classifier)
        self.mode = ModeStateMachine()
        self.mode.add_listener(self._on_mode_changed)

        if tool is None:
            tool = self.cfg.session.default_tool
        self.tool = Tool.parse(tool)

        # Samples considered by the classifier since the last mode change
        self._window: List[Point] = []
        self._stroke_tool: Optional[Tool] = None

    # Content and tools

    def load_content(self, content: str):
        """
        Load a new text for annotation, dropping annotations and history.

        Args:
            content: Plain text being annotated
        """
        self.content = content
        self.annotations = AnnotationSet()
        self.history.clear()
        self.stroke.reset()
        self._window = []

        self.events.emit(
            AnnotationEvent(EventType.CONTENT_LOADED, {"length": len(content)})
        )

    def set_tool(self, tool):
        self.tool = Tool.parse(tool)

    def current_color(self) -> Optional[str]:
        """Colour of the stroke being drawn, None for tools without one."""
        if self.tool == Tool.ADAPTIVE:
            mode = self.mode.state
        elif self.tool in (Tool.HIGH, Tool.MEDIUM, Tool.LOW):
            mode = Mode.for_relevance(self.tool.relevance)
        else:
            return None
        last = self.stroke.last_point
        return drawing_color(mode, last.pressure if last else 1.0)

    # Pointer lifecycle

    def on_pointer_down(self, point: Point):
        """Start a stroke at ``point``."""
        if self.tool == Tool.PAN:
            return

        if self.stroke.active:
            self.events.emit(
                AnnotationEvent(
                    EventType.STROKE_DISCARDED, {"num_points": len(self.stroke)}
                )
            )

        self.stroke.begin(point)
        self._window = [point]
        self._stroke_tool = self.tool
        if self.tool == Tool.ADAPTIVE:
            self.mode.reset()

        self.events.emit(
            AnnotationEvent(
                EventType.STROKE_STARTED,
                {"tool": self.tool.value, "color": self.current_color()},
            )
        )

    def on_pointer_move(self, point: Point) -> Optional[ShapeResult]:
        """
        Add a sample to the active stroke.

        Under the adaptive tool the samples considered since the last mode
        change are re-classified; a recognized shape switches the mode and
        restarts the window at this sample.

        Returns:
            The classification, or None if the sample was not analysed
        """
        if not self.stroke.active or not self.stroke.append(point):
            return None
        if self._stroke_tool != Tool.ADAPTIVE:
            return None

        self._window.append(point)
        if len(self._window) > self.cfg.session.max_window:
            del self._window[0]
        result = self.classifier.classify(self._window)
        if result.detected:
            self.events.emit(
                AnnotationEvent(EventType.SHAPE_DETECTED, result.to_dict())
            )
            if self.mode.feed(result.shape):
                self._window = [point]
        return result

    def on_pointer_up(self, point: Optional[Point] = None) -> Optional[Annotation]:
        """
        Finish the active stroke.

        Returns:
            The annotation created from the stroke, if any
        """
        if not self.stroke.active:
            return None
        if point is not None:
            self.on_pointer_move(point)
        return self._commit_stroke()

    def on_pointer_leave(self) -> Optional[Annotation]:
        """Pointer left the surface: finish with the last known sample."""
        if not self.stroke.active:
            return None
        logger.debug("Pointer left the surface, committing stroke")
        return self.on_pointer_up()

    on_pointer_cancel = on_pointer_leave

    def _commit_stroke(self) -> Optional[Annotation]:
        path = list(self.stroke.points())
        tool = self._stroke_tool
        self.stroke.reset()
        self._window = []
        self._stroke_tool = None

        if tool.removes:
            removed = self._remove_regions(BoundingBox.from_points(path))
            self.events.emit(
                AnnotationEvent(
                    EventType.STROKE_COMMITTED,
                    {"tool": tool.value, "removed": [ann.id for ann in removed]},
                )
            )
            return None

        if tool == Tool.ADAPTIVE:
            relevance = self.mode.committed_relevance()
        else:
            relevance = tool.relevance

        annotation = self.add_annotation(Annotation.region(path, relevance))
        self.events.emit(
            AnnotationEvent(
                EventType.STROKE_COMMITTED,
                {
                    "tool": tool.value,
                    "annotation_id": annotation.id,
                    "relevance": relevance.value,
                    "num_points": len(path),
                },
            )
        )
        return annotation

    def _on_mode_changed(self, previous: Mode, current: Mode):
        last = self.stroke.last_point
        self.events.emit(
            AnnotationEvent(
                EventType.MODE_CHANGED,
                {
                    "previous": previous.value,
                    "mode": current.value,
                    "color": drawing_color(current, last.pressure if last else 1.0),
                },
            )
        )

    # Text selection

    def select_text(
        self,
        start: int,
        end: int,
        selected_text: Optional[str] = None,
        relevance=None,
    ) -> Optional[Annotation]:
        """
        Apply a relevance label to a text selection.

        A neutral label deselects: every annotation overlapping the
        selection is deleted.

        Args:
            start: Selection start offset
            end: Selection end offset (exclusive)
            selected_text: Text the UI reports as selected, used to recover
                offsets when they do not match the content
            relevance: Label to apply, defaults to the current tool's label

        Returns:
            The created annotation, or None for deselection or an
            unlocatable selection
        """
        if relevance is not None:
            relevance = Relevance.parse(relevance)
        elif self.tool == Tool.ERASER:
            relevance = Relevance.NEUTRAL
        else:
            relevance = self.tool.relevance
            if relevance is None:
                raise ValueError(
                    f"Tool {self.tool.value!r} has no relevance level, pass one"
                )

        span = recover_selection(self.content, start, end, selected_text)
        if span is None:
            logger.debug("Ignoring selection [%d, %d)", start, end)
            return None

        if relevance == Relevance.NEUTRAL:
            self.remove_overlapping(span)
            return None

        annotation = Annotation.text_span(
            span.start,
            span.end,
            relevance,
            text=self.content[span.start:span.end],
        )
        return self.add_annotation(annotation)

    # Annotation store operations

    def add_annotation(self, annotation: Annotation) -> Annotation:
        """
        Add an annotation with undo support.

        Raises:
            InvalidRange: If the annotation boundaries are malformed
        """
        annotation.validate()
        if annotation.id in self.annotations:
            raise ValueError(f"Duplicate annotation id: {annotation.id}")

        # Save state before adding
        self.snapshot()
        self.annotations.add(annotation)

        self.events.emit(
            AnnotationEvent(
                EventType.ANNOTATION_ADDED,
                {"annotation": annotation.to_dict(), "count": len(self.annotations)},
            )
        )
        return annotation

    def remove_annotation(self, annotation_id: str) -> bool:
        """Erase a single annotation with undo support."""
        if annotation_id not in self.annotations:
            return False

        self.snapshot()
        self.annotations.remove(annotation_id)
        self._emit_removed([annotation_id])
        return True

    def remove_overlapping(self, span: SpanLike) -> List[Annotation]:
        """
        Delete every text annotation overlapping ``span``.

        Returns:
            The removed annotations
        """
        if not isinstance(span, Span):
            span = Span(*span)

        if span.start >= span.end:
            raise InvalidRange(f"Empty range [{span.start}, {span.end})")
        if not any(
            ann.span.overlaps(span) for ann in self.annotations.text_annotations()
        ):
            return []

        self.snapshot()
        removed = self.annotations.remove_overlapping(span)
        self._emit_removed([ann.id for ann in removed])
        return removed

    def _remove_regions(self, bbox: BoundingBox) -> List[Annotation]:
        if not any(
            ann.bbox.intersects(bbox) for ann in self.annotations.region_annotations()
        ):
            return []

        self.snapshot()
        removed = self.annotations.remove_overlapping_region(bbox)
        self._emit_removed([ann.id for ann in removed])
        return removed

    def _emit_removed(self, ids: List[str]):
        self.events.emit(
            AnnotationEvent(
                EventType.ANNOTATIONS_REMOVED,
                {"annotation_ids": ids, "count": len(self.annotations)},
            )
        )

    def set_comment(self, annotation_id: str, comment: Optional[str]) -> bool:
        """Attach a comment to an annotation with undo support."""
        if annotation_id not in self.annotations:
            return False

        self.snapshot()
        self.annotations.set_comment(annotation_id, comment)
        self.events.emit(
            AnnotationEvent(
                EventType.ANNOTATION_UPDATED,
                {"annotation_id": annotation_id, "comment": comment},
            )
        )
        return True

    def clear_annotations(self):
        """Remove all annotations; undoable."""
        if not len(self.annotations):
            return

        self.snapshot()
        self.annotations.clear()
        self.events.emit(AnnotationEvent(EventType.ANNOTATIONS_CLEARED))

    # Queries

    def list_annotations(self) -> List[Annotation]:
        return list(self.annotations)

    def resolve_runs(self, content: Optional[str] = None) -> List[Run]:
        """Flatten ``content`` (default: the loaded content) into runs."""
        if content is None:
            content = self.content
        return self.annotations.resolve_runs(content)

    def resolve_at(self, position: int) -> List[Annotation]:
        return self.annotations.resolve_at(position)

    def primary_at(self, position: int) -> Optional[Annotation]:
        return self.annotations.primary_at(position)

    def classify(self, points) -> ShapeResult:
        return self.classifier.classify(points)

    def statistics(self) -> dict:
        return compute_relevance_statistics(self.list_annotations())

    def export(self) -> List[dict]:
        """JSON-friendly serialization of the annotations."""
        return self.annotations.to_list()

    # History

    def snapshot(self):
        """Save the current annotations to history."""
        self.history.snapshot(self.annotations)

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def undo(self) -> bool:
        """
        Undo the last change.

        Returns:
            True if undo was successful, False if no history
        """
        restored = self.history.undo(self.annotations)
        if restored is None:
            return False

        self.annotations = restored
        self.events.emit(
            AnnotationEvent(EventType.HISTORY_UNDONE, {"count": len(restored)})
        )
        return True

    def redo(self) -> bool:
        """
        Redo the last undone change.

        Returns:
            True if redo was successful, False if nothing to redo
        """
        restored = self.history.redo(self.annotations)
        if restored is None:
            return False

        self.annotations = restored
        self.events.emit(
            AnnotationEvent(EventType.HISTORY_REDONE, {"count": len(restored)})
        )
        return True
