"""
Data model for relevance annotations.

Contains the data classes shared by the gesture pipeline and the
annotation store: pointer samples, spans, bounding boxes and the
annotation records themselves.
"""

import math
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class InvalidRange(ValueError):
    """Raised when an annotation has malformed boundaries."""


class Relevance(Enum):
    """Relevance label assigned to a passage or region."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NEUTRAL = "neutral"

    @property
    def priority(self) -> int:
        """Rank used to pick the primary annotation among overlapping ones."""
        return _PRIORITY[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value) -> "Relevance":
        """
        Parse a relevance label, accepting legacy aliases.

        Raises:
            ValueError: If the label is unknown
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown relevance level: {value!r}") from None


_PRIORITY = {
    Relevance.HIGH: 4,
    Relevance.MEDIUM: 3,
    Relevance.NEUTRAL: 2,
    Relevance.LOW: 1,
}

_DESCRIPTIONS = {
    Relevance.HIGH: "Most relevant",
    Relevance.MEDIUM: "Somewhat relevant",
    Relevance.LOW: "Least relevant",
    Relevance.NEUTRAL: "Neutral or Deselect",
}

_ALIASES = {
    "hot": "high",
    "flush": "low",
}


class AnnotationKind(Enum):
    TEXT_SPAN = "text_span"
    SPATIAL_REGION = "spatial_region"


@dataclass
class Point:
    """A single pointer sample."""

    x: float
    y: float
    t: float = 0.0
    pressure: float = 0.5

    def __post_init__(self):
        self.pressure = min(1.0, max(0.0, float(self.pressure)))

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_dict(self):
        """Convert to dictionary for serialization."""
        return {"x": self.x, "y": self.y, "t": self.t, "pressure": self.pressure}

    @classmethod
    def from_dict(cls, data):
        """Create from a dictionary or an ``[x, y]`` pair."""
        if isinstance(data, (list, tuple)):
            return cls(x=float(data[0]), y=float(data[1]))
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            t=float(data.get("t", 0.0)),
            pressure=float(data.get("pressure", 0.5)),
        )


@dataclass(frozen=True)
class Span:
    """Half-open range of text offsets ``[start, end)``."""

    start: int
    end: int

    def overlaps(self, other: "Span") -> bool:
        return not (self.end <= other.start or other.end <= self.start)

    def contains(self, position: int) -> bool:
        return self.start <= position < self.end

    def __len__(self):
        return max(0, self.end - self.start)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box in canvas coordinates."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    @property
    def aspect_ratio(self) -> float:
        """min(w, h) / max(w, h), or 0 for a degenerate box."""
        longest = max(self.width, self.height)
        if longest <= 0:
            return 0.0
        return min(self.width, self.height) / longest

    def is_degenerate(self) -> bool:
        """True when the box has zero area."""
        return self.width <= 0 or self.height <= 0

    def intersects(self, other: "BoundingBox") -> bool:
        return not (
            self.max_x < other.min_x
            or other.max_x < self.min_x
            or self.max_y < other.min_y
            or other.max_y < self.min_y
        )

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def to_dict(self):
        return {
            "x": self.min_x,
            "y": self.min_y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict):
        x, y = float(data["x"]), float(data["y"])
        return cls(x, y, x + float(data["width"]), y + float(data["height"]))

    @classmethod
    def from_points(cls, points: List[Point]) -> "BoundingBox":
        if not points:
            raise InvalidRange("Cannot bound an empty point list")
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Annotation:
    """
    A labeled text span or canvas region.

    Text annotations carry a ``span``; spatial annotations carry a
    ``bbox`` and the raw stroke ``path``.
    """

    kind: AnnotationKind
    relevance: Relevance
    span: Optional[Span] = None
    bbox: Optional[BoundingBox] = None
    path: List[Point] = field(default_factory=list)
    text: Optional[str] = None
    comment: Optional[str] = None
    pressure: Optional[float] = None
    id: str = field(default_factory=_new_id)
    created_at: float = field(default_factory=time.time)

    def __post_init__(self):
        self.relevance = Relevance.parse(self.relevance)
        self.validate()

    def validate(self):
        """
        Check the boundary invariants.

        Raises:
            InvalidRange: If the span is empty/inverted or the bbox is negative
        """
        if self.kind == AnnotationKind.TEXT_SPAN:
            if self.span is None:
                raise InvalidRange("Text annotation requires a span")
            if self.span.start >= self.span.end:
                raise InvalidRange(
                    f"Span start must be before end, got "
                    f"[{self.span.start}, {self.span.end})"
                )
        else:
            if self.bbox is None:
                raise InvalidRange("Region annotation requires a bounding box")
            if self.bbox.width < 0 or self.bbox.height < 0:
                raise InvalidRange(
                    f"Bounding box has negative size "
                    f"({self.bbox.width} x {self.bbox.height})"
                )

    @property
    def is_text(self) -> bool:
        return self.kind == AnnotationKind.TEXT_SPAN

    @property
    def start(self) -> Optional[int]:
        return self.span.start if self.span is not None else None

    @property
    def end(self) -> Optional[int]:
        return self.span.end if self.span is not None else None

    @classmethod
    def text_span(
        cls,
        start: int,
        end: int,
        relevance,
        text: Optional[str] = None,
        comment: Optional[str] = None,
    ) -> "Annotation":
        return cls(
            kind=AnnotationKind.TEXT_SPAN,
            relevance=relevance,
            span=Span(int(start), int(end)),
            text=text,
            comment=comment,
        )

    @classmethod
    def region(
        cls, path: List[Point], relevance, comment: Optional[str] = None
    ) -> "Annotation":
        path = list(path)
        pressure = sum(p.pressure for p in path) / len(path) if path else None
        return cls(
            kind=AnnotationKind.SPATIAL_REGION,
            relevance=relevance,
            bbox=BoundingBox.from_points(path),
            path=path,
            comment=comment,
            pressure=pressure,
        )

    def to_dict(self):
        """Convert to dictionary for serialization."""
        data = {
            "id": self.id,
            "kind": self.kind.value,
            "relevance": self.relevance.value,
            "comment": self.comment,
            "created_at": self.created_at,
        }
        if self.is_text:
            data.update(start=self.span.start, end=self.span.end, text=self.text)
        else:
            data.update(
                bounds=self.bbox.to_dict(),
                path=[p.to_dict() for p in self.path],
                pressure=self.pressure,
            )
        return data

    @classmethod
    def from_dict(cls, data: dict):
        """Create from dictionary."""
        kind = AnnotationKind(data.get("kind", AnnotationKind.TEXT_SPAN.value))
        kwargs = dict(
            kind=kind,
            relevance=data["relevance"],
            comment=data.get("comment"),
            id=data.get("id") or _new_id(),
            created_at=data.get("created_at", time.time()),
        )
        if kind == AnnotationKind.TEXT_SPAN:
            kwargs.update(
                span=Span(int(data["start"]), int(data["end"])),
                text=data.get("text"),
            )
        else:
            path = [Point.from_dict(p) for p in data.get("path", [])]
            if "bounds" in data:
                bbox = BoundingBox.from_dict(data["bounds"])
            else:
                bbox = BoundingBox.from_points(path)
            kwargs.update(bbox=bbox, path=path, pressure=data.get("pressure"))
        return cls(**kwargs)


HistorySnapshot = Tuple[Annotation, ...]
"""
Deep copy of an annotation list at one point in history.

The records inside stay mutable dataclasses; ``AnnotationSet.from_snapshot``
deep-copies them again, so a restored set never shares records with the
stored snapshot.
"""
