"""
Pure utility functions for annotation logic.

These functions have no side effects and can be tested in isolation.
"""

import logging
from collections import Counter, defaultdict
from typing import Hashable, Iterable, List, Optional, Sequence, Tuple

from .state import Annotation, Relevance, Span

logger = logging.getLogger(__name__)


def flatten_intervals(
    length: int, intervals: Iterable[Tuple[int, int, Hashable]]
) -> List[Tuple[int, int, Tuple[Hashable, ...]]]:
    """
    Partition ``[0, length)`` into runs with a constant covering set.

    Sweeps the sorted interval boundaries once, so the cost depends on the
    number of intervals rather than on ``length``. Adjacent pieces whose
    covering sets are equal (by key-set equality) are merged.

    Args:
        length: Size of the content being partitioned
        intervals: ``(start, end, key)`` triples; clipped to the content

    Returns:
        List of ``(start, end, keys)`` covering ``[0, length)`` exactly,
        with keys in order of first appearance in ``intervals``
    """
    if length <= 0:
        return []

    order = {}
    opening = defaultdict(list)
    closing = defaultdict(list)
    boundaries = {0, length}

    for start, end, key in intervals:
        start, end = max(0, start), min(length, end)
        if start >= end:
            continue
        order.setdefault(key, len(order))
        opening[start].append(key)
        closing[end].append(key)
        boundaries.add(start)
        boundaries.add(end)

    positions = sorted(boundaries)
    active = Counter()
    runs = []

    for position, next_position in zip(positions, positions[1:]):
        for key in closing.get(position, ()):
            active[key] -= 1
            if active[key] == 0:
                del active[key]
        for key in opening.get(position, ()):
            active[key] += 1

        keys = tuple(sorted(active, key=order.__getitem__))
        if runs and set(runs[-1][2]) == set(keys):
            runs[-1] = (runs[-1][0], next_position, runs[-1][2])
        else:
            runs.append((position, next_position, keys))

    return runs


def primary_annotation(annotations: Sequence[Annotation]) -> Optional[Annotation]:
    """
    Pick the annotation used for styling among overlapping ones.

    Highest relevance priority wins; ties go to the earliest inserted.
    """
    if not annotations:
        return None
    return max(annotations, key=lambda ann: ann.relevance.priority)


def recover_selection(
    content: str, start: int, end: int, selected_text: Optional[str] = None
) -> Optional[Span]:
    """
    Map a UI selection onto content offsets.

    When the offsets do not reproduce ``selected_text`` (the UI counted
    characters differently), the text is searched for in the content.

    Returns:
        The span, or None if the selection cannot be located
    """
    if selected_text is None:
        start, end = max(0, start), min(len(content), end)
        return Span(start, end) if start < end else None

    text = selected_text.strip()
    if not text:
        return None

    if 0 <= start < end <= len(content) and content[start:end] == text:
        return Span(start, end)

    logger.warning("Text selection mismatch, falling back to search")
    fallback_start = content.find(text)
    if fallback_start == -1:
        return None
    return Span(fallback_start, fallback_start + len(text))


def compute_relevance_statistics(annotations: Sequence[Annotation]) -> dict:
    """
    Compute per-relevance counts about annotations.

    Args:
        annotations: List of Annotation objects

    Returns:
        Dictionary with statistics
    """
    counts = Counter(ann.relevance for ann in annotations)
    total = len(annotations)

    stats = {"num_total": total}
    for relevance in Relevance:
        stats[relevance.value] = counts.get(relevance, 0)
    stats["num_with_comments"] = sum(1 for ann in annotations if ann.comment)
    stats["ratio_high"] = stats["high"] / total if total else 0.0

    return stats
