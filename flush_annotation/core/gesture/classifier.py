"""
Shape classification of freehand strokes.

Deterministic geometric heuristics decide whether the samples of a stroke
look like a zigzag, a circle or a square. The heuristics are evaluated in
a fixed priority (zigzag, then circle, then square) and the first match
wins.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from easydict import EasyDict as edict

from ...config import default_config
from ..annotation.state import Relevance
from . import geometry

logger = logging.getLogger(__name__)


class ShapeType(Enum):
    NONE = "none"
    ZIGZAG = "zigzag"
    CIRCLE = "circle"
    SQUARE = "square"


SHAPE_RELEVANCE = {
    ShapeType.ZIGZAG: Relevance.LOW,
    ShapeType.CIRCLE: Relevance.HIGH,
    ShapeType.SQUARE: Relevance.MEDIUM,
}


def shape_to_relevance(shape: ShapeType) -> Optional[Relevance]:
    """Relevance label a recognized shape selects, None for no shape."""
    return SHAPE_RELEVANCE.get(shape)


@dataclass
class ShapeResult:
    """Outcome of classifying a window of samples."""

    shape: ShapeType = ShapeType.NONE
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def detected(self) -> bool:
        return self.shape != ShapeType.NONE

    @property
    def relevance(self) -> Optional[Relevance]:
        return shape_to_relevance(self.shape)

    def to_dict(self):
        relevance = self.relevance
        return {
            "shape": self.shape.value,
            "relevance": relevance.value if relevance else None,
            "metrics": dict(self.metrics),
        }


class ShapeClassifier:
    """
    Classifies stroke samples using thresholds from the ``classifier``
    section of the configuration.
    """

    def __init__(self, cfg: Optional[edict] = None):
        if cfg is None:
            cfg = default_config().classifier
        self.cfg = cfg

    def classify(self, points) -> ShapeResult:
        """
        Classify a sequence of samples.

        Under-sampled or degenerate input yields ``ShapeType.NONE``.
        """
        coords = geometry.as_array(points)
        metrics: Dict[str, Any] = {"points": len(coords)}

        for shape, detector in (
            (ShapeType.ZIGZAG, self.detect_zigzag),
            (ShapeType.CIRCLE, self.detect_circle),
            (ShapeType.SQUARE, self.detect_square),
        ):
            matched, details = detector(coords)
            metrics.update(details)
            if matched:
                logger.debug("%s detected with %d points", shape.value, len(coords))
                return ShapeResult(shape, metrics)

        return ShapeResult(ShapeType.NONE, metrics)

    def detect_zigzag(self, coords) -> Tuple[bool, Dict[str, Any]]:
        cfg = self.cfg.zigzag
        if len(coords) < cfg.min_points:
            return False, {}

        flips = geometry.count_vertical_flips(coords, cfg.noise_threshold)
        matched = flips >= cfg.min_flips
        logger.debug("Zigzag analysis: %d flips, result: %s", flips, matched)
        return matched, {"flips": flips}

    def detect_circle(self, coords) -> Tuple[bool, Dict[str, Any]]:
        cfg = self.cfg.circle
        if len(coords) < cfg.min_points:
            return False, {}

        bbox = geometry.bounding_box(coords)
        if bbox.is_degenerate():
            return False, {}

        aspect = bbox.aspect_ratio
        avg_radius = (bbox.width + bbox.height) / 4
        closure = geometry.closure_distance(coords) / avg_radius
        details = {"aspect": aspect, "closure": closure}

        matched = aspect >= cfg.min_aspect and closure < cfg.max_closure
        if cfg.strict:
            consistency = geometry.radial_consistency(coords, bbox.center)
            quadrants = geometry.quadrant_coverage(coords, bbox.center)
            details.update(consistency=consistency, quadrants=quadrants)
            matched = (
                matched
                and consistency > cfg.min_consistency
                and quadrants >= cfg.min_quadrants
            )

        logger.debug(
            "Circle analysis: %.1fx%.1f, %s, result: %s",
            bbox.width,
            bbox.height,
            ", ".join(f"{k}: {v:.2f}" for k, v in details.items()),
            matched,
        )
        return matched, details

    def detect_square(self, coords) -> Tuple[bool, Dict[str, Any]]:
        cfg = self.cfg.square
        if len(coords) < cfg.min_points:
            return False, {}

        bbox = geometry.bounding_box(coords)
        if bbox.is_degenerate():
            return False, {}

        aspect = bbox.aspect_ratio
        corners = geometry.count_corners(coords, cfg.corner_step, cfg.corner_angle)
        closure = geometry.closure_distance(coords) / bbox.diagonal

        matched = (
            aspect >= cfg.min_aspect
            and corners >= cfg.min_corners
            and closure < cfg.max_closure
        )
        logger.debug(
            "Square analysis: %.1fx%.1f, aspect: %.2f, corners: %d, "
            "closure: %.2f, result: %s",
            bbox.width,
            bbox.height,
            aspect,
            corners,
            closure,
            matched,
        )
        return matched, {"aspect": aspect, "corners": corners, "closure": closure}


def classify(points, cfg: Optional[edict] = None) -> ShapeResult:
    """Classify samples with a one-off classifier."""
    return ShapeClassifier(cfg).classify(points)
