"""
End-to-end integration tests.

Tests complete workflows from start to finish.
"""

import json

import pytest

from flush_annotation.config import load_config
from flush_annotation.core import AnnotationSession
from flush_annotation.core.annotation import AnnotationSet, Relevance
from flush_annotation.interfaces import RenderAdapter

pytestmark = pytest.mark.integration


class TestAnnotationWorkflow:
    """Test complete annotation workflow."""

    def test_annotate_export_and_reload(
        self, sample_text, circle_stroke, zigzag_stroke, draw
    ):
        """Draw, select, comment, export to JSON and render again elsewhere."""
        session = AnnotationSession(load_config({}))
        session.load_content(sample_text)

        assert draw(session, circle_stroke).relevance == Relevance.HIGH
        assert draw(session, zigzag_stroke).relevance == Relevance.LOW

        session.set_tool("hot")
        quick = session.select_text(4, 9, "quick")
        session.set_tool("medium")
        session.select_text(4, 19, "quick brown fox")
        session.set_comment(quick.id, "speed")

        # Deselect "fox" only: the overlapping medium span goes with it
        session.select_text(16, 19, relevance="neutral")
        assert [ann.id for ann in session.annotations.text_annotations()] == [
            quick.id
        ]

        exported = json.loads(json.dumps(session.export()))

        other = AnnotationSession()
        other.load_content(sample_text)
        other.annotations = AnnotationSet.from_list(exported)
        segments = RenderAdapter(other).get_segments()

        assert [s["relevance"] for s in segments] == [None, "high", None]
        assert segments[1]["tooltip"] == "speed"
        assert other.statistics() == session.statistics()
        assert len(other.annotations.region_annotations()) == 2

    def test_undo_whole_session(self, sample_text, line_stroke, draw):
        session = AnnotationSession()
        session.load_content(sample_text)

        draw(session, line_stroke)
        session.select_text(0, 3, relevance="low")
        session.clear_annotations()

        while session.undo():
            pass
        assert len(session.annotations) == 0

        while session.redo():
            pass
        assert len(session.annotations) == 0
        assert not session.can_redo()
