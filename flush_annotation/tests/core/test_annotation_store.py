"""
Tests for AnnotationSet: overlap removal, resolution and flattening.
"""

import pytest

from flush_annotation.core.annotation import (
    Annotation,
    AnnotationSet,
    BoundingBox,
    InvalidRange,
    Point,
    Relevance,
    Span,
)
from flush_annotation.core.annotation.utils import flatten_intervals


@pytest.fixture
def overlapping_set():
    """[0, 6) high, [9, 15) low, [20, 25) medium."""
    return AnnotationSet(
        [
            Annotation.text_span(0, 6, "high"),
            Annotation.text_span(9, 15, "low"),
            Annotation.text_span(20, 25, "medium"),
        ]
    )


class TestMutation:
    def test_add_keeps_insertion_order(self, overlapping_set):
        relevances = [ann.relevance for ann in overlapping_set]
        assert relevances == [Relevance.HIGH, Relevance.LOW, Relevance.MEDIUM]

    def test_duplicate_id(self, overlapping_set):
        existing = next(iter(overlapping_set))
        with pytest.raises(ValueError, match="Duplicate"):
            overlapping_set.add(existing)

    def test_remove(self, overlapping_set):
        first = next(iter(overlapping_set))

        assert overlapping_set.remove(first.id)
        assert first.id not in overlapping_set
        assert not overlapping_set.remove(first.id)

    def test_remove_overlapping(self, overlapping_set):
        """Every record touching the range goes, whole; others stay."""
        removed = overlapping_set.remove_overlapping(Span(5, 10))

        assert [(ann.start, ann.end) for ann in removed] == [(0, 6), (9, 15)]
        assert [(ann.start, ann.end) for ann in overlapping_set] == [(20, 25)]

    def test_remove_overlapping_touching_is_not_overlap(self, overlapping_set):
        assert overlapping_set.remove_overlapping(Span(15, 20)) == []
        assert len(overlapping_set) == 3

    def test_remove_overlapping_empty_range(self, overlapping_set):
        with pytest.raises(InvalidRange):
            overlapping_set.remove_overlapping(Span(7, 7))

    def test_remove_overlapping_region(self):
        annotations = AnnotationSet()
        near = annotations.add(Annotation.region([Point(0, 0), Point(10, 10)], "high"))
        far = annotations.add(
            Annotation.region([Point(100, 100), Point(110, 110)], "low")
        )

        removed = annotations.remove_overlapping_region(BoundingBox(5, 5, 20, 20))
        assert removed == [near]
        assert list(annotations) == [far]

    def test_set_comment(self, overlapping_set):
        first = next(iter(overlapping_set))

        assert overlapping_set.set_comment(first.id, "  key claim ")
        assert first.comment == "key claim"
        overlapping_set.set_comment(first.id, "   ")
        assert first.comment is None
        assert not overlapping_set.set_comment("missing", "x")


class TestLookup:
    def test_get_follows_every_mutation(self, overlapping_set):
        ids = [ann.id for ann in overlapping_set]
        assert all(overlapping_set.get(i).id == i for i in ids)

        overlapping_set.remove(ids[0])
        overlapping_set.remove_overlapping(Span(9, 10))
        assert overlapping_set.get(ids[0]) is None
        assert ids[1] not in overlapping_set
        assert ids[2] in overlapping_set

        overlapping_set.clear()
        assert overlapping_set.get(ids[2]) is None

    def test_removed_id_can_be_added_again(self, overlapping_set):
        first = next(iter(overlapping_set))
        overlapping_set.remove(first.id)

        overlapping_set.add(first)
        assert overlapping_set.get(first.id) is first
        assert list(overlapping_set)[-1] is first

    def test_restored_set_is_indexed(self, overlapping_set):
        restored = AnnotationSet.from_snapshot(overlapping_set.snapshot())
        for annotation in overlapping_set:
            assert restored.get(annotation.id) == annotation

        with pytest.raises(ValueError, match="Duplicate"):
            restored.add(restored.get(annotation.id))


class TestResolution:
    def test_resolve_at(self, overlapping_set):
        overlapping_set.add(Annotation.text_span(3, 12, "medium"))

        assert [ann.relevance for ann in overlapping_set.resolve_at(4)] == [
            Relevance.HIGH,
            Relevance.MEDIUM,
        ]
        assert overlapping_set.resolve_at(17) == []

    def test_primary_is_highest_priority(self):
        annotations = AnnotationSet(
            [
                Annotation.text_span(0, 10, "low"),
                Annotation.text_span(2, 8, "neutral"),
                Annotation.text_span(4, 6, "high"),
            ]
        )
        assert annotations.primary_at(5).relevance == Relevance.HIGH
        assert annotations.primary_at(3).relevance == Relevance.NEUTRAL
        assert annotations.primary_at(1).relevance == Relevance.LOW
        assert annotations.primary_at(11) is None

    def test_primary_tie_goes_to_earliest(self):
        first = Annotation.text_span(0, 10, "medium")
        second = Annotation.text_span(5, 15, "medium")
        annotations = AnnotationSet([first, second])

        assert annotations.primary_at(7) is first

    def test_region_resolution(self):
        annotations = AnnotationSet()
        low = annotations.add(Annotation.region([Point(0, 0), Point(50, 50)], "low"))
        high = annotations.add(
            Annotation.region([Point(20, 20), Point(40, 40)], "high")
        )

        assert annotations.regions_at(30, 30) == [low, high]
        assert annotations.primary_region_at(30, 30) is high
        assert annotations.primary_region_at(10, 10) is low
        assert annotations.primary_region_at(90, 90) is None


class TestRuns:
    CONTENT = "abcdefghijklmnopqrstuvwxyz0123"

    def test_runs_cover_content(self, overlapping_set):
        runs = overlapping_set.resolve_runs(self.CONTENT)

        assert "".join(run.text for run in runs) == self.CONTENT
        assert runs[0].start == 0
        assert runs[-1].end == len(self.CONTENT)
        for previous, current in zip(runs, runs[1:]):
            assert previous.end == current.start

    def test_runs_split_on_overlap(self):
        first = Annotation.text_span(0, 6, "high")
        second = Annotation.text_span(4, 10, "low")
        annotations = AnnotationSet([first, second])

        runs = annotations.resolve_runs("0123456789ab")
        assert [(run.start, run.end, run.annotation_ids) for run in runs] == [
            (0, 4, (first.id,)),
            (4, 6, (first.id, second.id)),
            (6, 10, (second.id,)),
            (10, 12, ()),
        ]
        assert not runs[-1].is_annotated

    def test_regions_do_not_split_text(self):
        annotations = AnnotationSet(
            [Annotation.region([Point(0, 0), Point(5, 5)], "high")]
        )
        runs = annotations.resolve_runs("hello")
        assert [run.to_dict() for run in runs] == [
            {"text": "hello", "start": 0, "end": 5, "annotation_ids": []}
        ]

    def test_empty_content(self, overlapping_set):
        assert overlapping_set.resolve_runs("") == []

    def test_annotations_past_the_end_are_clipped(self):
        annotations = AnnotationSet([Annotation.text_span(3, 40, "high")])
        runs = annotations.resolve_runs("hello")

        assert [(run.start, run.end) for run in runs] == [(0, 3), (3, 5)]
        assert runs[1].text == "lo"

    def test_flattening_is_idempotent(self, overlapping_set):
        """Re-flattening the runs yields the same partition."""
        overlapping_set.add(Annotation.text_span(3, 12, "medium"))
        overlapping_set.add(Annotation.text_span(4, 5, "high"))
        runs = overlapping_set.resolve_runs(self.CONTENT)

        intervals = [
            (run.start, run.end, ann_id)
            for run in runs
            for ann_id in run.annotation_ids
        ]
        again = flatten_intervals(len(self.CONTENT), intervals)

        assert [(s, e, frozenset(ids)) for s, e, ids in again] == [
            (run.start, run.end, frozenset(run.annotation_ids)) for run in runs
        ]


class TestSnapshots:
    def test_snapshot_is_independent(self, overlapping_set):
        snapshot = overlapping_set.snapshot()
        first = next(iter(overlapping_set))
        first.comment = "changed later"

        assert snapshot[0].comment is None
        assert AnnotationSet.from_snapshot(snapshot).get(first.id).comment is None

    def test_restoring_twice_gives_independent_sets(self, overlapping_set):
        snapshot = overlapping_set.snapshot()
        first = AnnotationSet.from_snapshot(snapshot)
        second = AnnotationSet.from_snapshot(snapshot)

        annotation_id = snapshot[0].id
        first.set_comment(annotation_id, "edited")

        assert second.get(annotation_id).comment is None
        assert snapshot[0].comment is None

    def test_list_conversion(self, overlapping_set):
        restored = AnnotationSet.from_list(overlapping_set.to_list())
        assert list(restored) == list(overlapping_set)
