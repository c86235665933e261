"""
Ordered store of annotations with query-time overlap resolution.

Overlapping annotations are kept as separate records; conflicts are only
resolved when querying a position or flattening content into runs.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .state import (
    Annotation,
    BoundingBox,
    HistorySnapshot,
    InvalidRange,
    Span,
)
from .utils import flatten_intervals, primary_annotation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Run:
    """Maximal piece of content sharing one set of covering annotations."""

    text: str
    start: int
    end: int
    annotation_ids: Tuple[str, ...] = ()

    @property
    def is_annotated(self) -> bool:
        return bool(self.annotation_ids)

    def to_dict(self):
        return {
            "text": self.text,
            "start": self.start,
            "end": self.end,
            "annotation_ids": list(self.annotation_ids),
        }


class AnnotationSet:
    """
    Insertion-ordered collection of text and region annotations.

    Records are kept in a list for ordering and indexed by id for lookups.
    """

    def __init__(self, annotations=None):
        self._annotations: List[Annotation] = []
        self._by_id: Dict[str, Annotation] = {}
        for annotation in annotations or []:
            self.add(annotation)

    def __len__(self):
        return len(self._annotations)

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self._annotations)

    def __contains__(self, annotation_id) -> bool:
        return annotation_id in self._by_id

    def get(self, annotation_id: str) -> Optional[Annotation]:
        return self._by_id.get(annotation_id)

    def add(self, annotation: Annotation) -> Annotation:
        """
        Append an annotation.

        Raises:
            InvalidRange: If the annotation boundaries are malformed
            ValueError: If an annotation with the same id is present
        """
        annotation.validate()
        if annotation.id in self:
            raise ValueError(f"Duplicate annotation id: {annotation.id}")
        self._annotations.append(annotation)
        self._by_id[annotation.id] = annotation
        return annotation

    def remove(self, annotation_id: str) -> bool:
        """Remove one annotation by id."""
        annotation = self._by_id.pop(annotation_id, None)
        if annotation is None:
            return False
        self._annotations.remove(annotation)
        return True

    def remove_overlapping(self, span: Span) -> List[Annotation]:
        """
        Delete every text annotation intersecting ``span``.

        Records are removed whole, never trimmed.

        Returns:
            The removed annotations
        """
        if span.start >= span.end:
            raise InvalidRange(f"Empty range [{span.start}, {span.end})")
        return self._remove_where(
            lambda ann: ann.is_text and ann.span.overlaps(span)
        )

    def remove_overlapping_region(self, bbox: BoundingBox) -> List[Annotation]:
        """Delete every region annotation whose bounds intersect ``bbox``."""
        return self._remove_where(
            lambda ann: not ann.is_text and ann.bbox.intersects(bbox)
        )

    def _remove_where(self, predicate) -> List[Annotation]:
        removed = [ann for ann in self._annotations if predicate(ann)]
        if removed:
            self._annotations = [
                ann for ann in self._annotations if not predicate(ann)
            ]
            for ann in removed:
                del self._by_id[ann.id]
        return removed

    def set_comment(self, annotation_id: str, comment: Optional[str]) -> bool:
        """Attach a comment; a blank comment clears it."""
        annotation = self.get(annotation_id)
        if annotation is None:
            return False
        comment = comment.strip() if comment else ""
        annotation.comment = comment or None
        return True

    def clear(self):
        self._annotations.clear()
        self._by_id.clear()

    def text_annotations(self) -> List[Annotation]:
        return [ann for ann in self._annotations if ann.is_text]

    def region_annotations(self) -> List[Annotation]:
        return [ann for ann in self._annotations if not ann.is_text]

    def resolve_at(self, position: int) -> List[Annotation]:
        """All text annotations covering ``position``, in insertion order."""
        return [
            ann
            for ann in self._annotations
            if ann.is_text and ann.span.contains(position)
        ]

    def primary_at(self, position: int) -> Optional[Annotation]:
        return primary_annotation(self.resolve_at(position))

    def regions_at(self, x: float, y: float) -> List[Annotation]:
        """All region annotations whose bounds contain the point."""
        return [
            ann
            for ann in self._annotations
            if not ann.is_text and ann.bbox.contains(x, y)
        ]

    def primary_region_at(self, x: float, y: float) -> Optional[Annotation]:
        return primary_annotation(self.regions_at(x, y))

    def resolve_runs(self, content: str) -> List[Run]:
        """
        Partition ``content`` into runs for rendering.

        A new run starts wherever the set of covering annotation ids
        changes. Concatenating the run texts reproduces ``content``.
        """
        intervals = (
            (ann.span.start, ann.span.end, ann.id)
            for ann in self._annotations
            if ann.is_text
        )
        return [
            Run(text=content[start:end], start=start, end=end, annotation_ids=ids)
            for start, end, ids in flatten_intervals(len(content), intervals)
        ]

    def snapshot(self) -> HistorySnapshot:
        """Deep copy of the current annotations, see ``HistorySnapshot``."""
        return tuple(copy.deepcopy(self._annotations))

    @classmethod
    def from_snapshot(cls, snapshot: HistorySnapshot) -> "AnnotationSet":
        return cls(copy.deepcopy(snapshot))

    def copy(self) -> "AnnotationSet":
        return self.from_snapshot(self.snapshot())

    def to_list(self) -> List[dict]:
        """Convert to a JSON-friendly list."""
        return [ann.to_dict() for ann in self._annotations]

    @classmethod
    def from_list(cls, data: List[dict]) -> "AnnotationSet":
        """Create from a list of annotation dictionaries."""
        annotations = cls()
        for item in data:
            annotations.add(Annotation.from_dict(item))
        logger.debug("Loaded %d annotations", len(annotations))
        return annotations
