"""
Drawing mode of the adaptive tool.

Every stroke drawn with the adaptive tool starts ``idle``; recognized
shapes move it to the relevance they stand for. The mode present when
the pointer is released labels the resulting annotation.
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from ..annotation.state import Relevance
from .classifier import ShapeType, shape_to_relevance

logger = logging.getLogger(__name__)


class Mode(Enum):
    IDLE = "idle"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def relevance(self) -> Optional[Relevance]:
        if self == Mode.IDLE:
            return None
        return Relevance(self.value)

    @classmethod
    def for_relevance(cls, relevance: Relevance) -> "Mode":
        return cls(relevance.value)


# (r, g, b, alpha scale) per mode
_MODE_RGB = {
    Mode.IDLE: (100, 116, 139, 0.7),
    Mode.HIGH: (239, 68, 68, 1.0),
    Mode.MEDIUM: (249, 115, 22, 0.9),
    Mode.LOW: (59, 130, 246, 0.8),
}


def drawing_color(mode: Mode, pressure: float = 1.0) -> str:
    """Stroke colour for ``mode``; harder presses are more opaque."""
    intensity = max(0.2, min(1.0, pressure))
    r, g, b, scale = _MODE_RGB[mode]
    alpha = (0.3 + intensity * 0.5) * scale
    return f"rgba({r}, {g}, {b}, {alpha:.2f})"


ModeListener = Callable[[Mode, Mode], None]


class ModeStateMachine:
    """Finite-state machine for the adaptive tool's current mode."""

    def __init__(self):
        self.state = Mode.IDLE
        self._listeners: List[ModeListener] = []

    def add_listener(self, listener: ModeListener):
        """Register ``listener(previous, current)`` for transitions."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ModeListener):
        self._listeners.remove(listener)

    def reset(self):
        """Return to ``idle`` at the start of a stroke, without notifying."""
        self.state = Mode.IDLE

    def feed(self, shape: ShapeType) -> bool:
        """
        Apply a classifier result.

        Returns:
            True if the mode changed
        """
        relevance = shape_to_relevance(shape)
        if relevance is None:
            return False

        new_state = Mode.for_relevance(relevance)
        if new_state == self.state:
            return False

        previous, self.state = self.state, new_state
        logger.debug("Mode %s -> %s", previous.value, new_state.value)
        for listener in list(self._listeners):
            listener(previous, new_state)
        return True

    def committed_relevance(self) -> Relevance:
        """Label for a stroke released in the current mode."""
        return self.state.relevance or Relevance.MEDIUM
