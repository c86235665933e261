"""
Linear undo/redo history for annotation sets.
"""

import logging
from typing import List, Optional

from .state import HistorySnapshot
from .store import AnnotationSet

logger = logging.getLogger(__name__)


class HistoryManager:
    """
    Keeps undo and redo stacks of annotation set snapshots.

    Any new snapshot invalidates the redo stack (linear undo).
    """

    def __init__(self, max_size: int = 100):
        """
        Initialize the history.

        Args:
            max_size: Maximum number of undo states to keep
        """
        self.undo_stack: List[HistorySnapshot] = []
        self.redo_stack: List[HistorySnapshot] = []
        self.max_size = max_size

    def snapshot(self, annotations: AnnotationSet) -> None:
        """
        Push a copy of the current state, taken before a mutation.

        Args:
            annotations: Annotation set about to be changed
        """
        self._push_undo(annotations.snapshot())
        self.redo_stack.clear()

    def _push_undo(self, snapshot: HistorySnapshot) -> None:
        self.undo_stack.append(snapshot)

        # Limit history size
        if len(self.undo_stack) > self.max_size:
            self.undo_stack.pop(0)

    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    def undo(self, current: AnnotationSet) -> Optional[AnnotationSet]:
        """
        Step back one state.

        Args:
            current: Annotation set before the undo

        Returns:
            The restored annotation set, or None if there is no history
        """
        if not self.can_undo():
            return None

        self.redo_stack.append(current.snapshot())
        return AnnotationSet.from_snapshot(self.undo_stack.pop())

    def redo(self, current: AnnotationSet) -> Optional[AnnotationSet]:
        """
        Step forward one state.

        Args:
            current: Annotation set before the redo

        Returns:
            The restored annotation set, or None if nothing was undone
        """
        if not self.can_redo():
            return None

        self._push_undo(current.snapshot())
        return AnnotationSet.from_snapshot(self.redo_stack.pop())

    def clear(self) -> None:
        """Clear both stacks."""
        self.undo_stack.clear()
        self.redo_stack.clear()
