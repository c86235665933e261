"""
Buffer for the samples of the stroke being drawn.
"""

import logging
from typing import List, Optional, Tuple

from ..annotation.state import Point

logger = logging.getLogger(__name__)


class StrokeBuffer:
    """
    Accumulates the samples of one in-progress gesture.

    Samples that are neither newer than the previous one by more than
    ``time_epsilon`` nor farther away than ``distance_epsilon`` are
    treated as duplicate (coalesced) pointer events and dropped.
    """

    def __init__(self, time_epsilon: float = 0.0, distance_epsilon: float = 0.5):
        self.time_epsilon = time_epsilon
        self.distance_epsilon = distance_epsilon
        self._points: List[Point] = []
        self._active = False

    @property
    def active(self) -> bool:
        """Whether a stroke has begun and not been reset."""
        return self._active

    @property
    def last_point(self) -> Optional[Point]:
        return self._points[-1] if self._points else None

    def __len__(self):
        return len(self._points)

    def begin(self, point: Point):
        """Start a new stroke, dropping any unfinished one."""
        if self._active and self._points:
            logger.debug("Discarding unfinished stroke of %d points", len(self._points))
        self._points = [point]
        self._active = True

    def append(self, point: Point) -> bool:
        """
        Add a sample to the active stroke.

        Returns:
            True if the sample was kept
        """
        if not self._active:
            return False

        last = self.last_point
        if last is not None:
            moved = point.distance_to(last) > self.distance_epsilon
            newer = point.t - last.t > self.time_epsilon
            if not (moved or newer):
                return False

        self._points.append(point)
        return True

    def points(self) -> Tuple[Point, ...]:
        """Read-only view of the buffered samples."""
        return tuple(self._points)

    def reset(self):
        self._points = []
        self._active = False
