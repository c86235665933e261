from flush_annotation.core.annotation import Point
from flush_annotation.core.gesture import StrokeBuffer


class TestStrokeBuffer:
    def test_inactive_until_begin(self):
        buffer = StrokeBuffer()

        assert not buffer.active
        assert not buffer.append(Point(1, 1))
        assert len(buffer) == 0
        assert buffer.last_point is None

    def test_begin_and_append(self):
        buffer = StrokeBuffer()
        buffer.begin(Point(0, 0))

        assert buffer.active
        assert buffer.append(Point(10, 0, t=0.01))
        assert len(buffer) == 2
        assert buffer.last_point == Point(10, 0, t=0.01)

    def test_coalesced_samples_are_dropped(self):
        """Same instant and (almost) same place is a duplicate event."""
        buffer = StrokeBuffer(time_epsilon=0.0, distance_epsilon=0.5)
        buffer.begin(Point(0, 0, t=1.0))

        assert not buffer.append(Point(0.1, 0, t=1.0))
        assert buffer.append(Point(0.1, 0, t=1.01))
        assert buffer.append(Point(5, 0, t=1.01))
        assert len(buffer) == 3

    def test_begin_discards_unfinished_stroke(self):
        buffer = StrokeBuffer()
        buffer.begin(Point(0, 0))
        buffer.append(Point(10, 10))

        buffer.begin(Point(50, 50))
        assert buffer.points() == (Point(50, 50),)

    def test_reset(self):
        buffer = StrokeBuffer()
        buffer.begin(Point(0, 0))
        buffer.reset()

        assert not buffer.active
        assert buffer.points() == ()
