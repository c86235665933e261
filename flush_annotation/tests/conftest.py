"""
Test fixtures and utilities for flush_annotation tests.

Provides reusable strokes, sessions and annotated text.
"""

import math
from types import SimpleNamespace

import pytest

from flush_annotation.config import default_config
from flush_annotation.core import AnnotationSession
from flush_annotation.core.annotation import Point


def make_circle(n=72, radius=50.0, center=(100.0, 100.0), y_scale=1.0):
    """Closed circle sampled every 360/n degrees, starting at angle 0."""
    cx, cy = center
    return [
        Point(
            cx + radius * math.cos(2 * math.pi * i / n),
            cy + radius * y_scale * math.sin(2 * math.pi * i / n),
            t=i * 0.01,
        )
        for i in range(n)
    ]


def make_zigzag(n=12, step=10.0, amplitude=10.0):
    return [
        Point(i * step, amplitude if i % 2 else 0.0, t=i * 0.01) for i in range(n)
    ]


def make_rectangle():
    """
    100x80 rectangle traced clockwise at 10px spacing, ending 30px short
    of the starting corner.
    """
    coords = [(x, 0) for x in range(0, 101, 10)]
    coords += [(100, y) for y in range(10, 81, 10)]
    coords += [(x, 80) for x in range(90, -1, -10)]
    coords += [(0, y) for y in range(70, 29, -10)]
    return [Point(float(x), float(y), t=i * 0.01) for i, (x, y) in enumerate(coords)]


def make_square(size=50, spacing=10, gap=20):
    """
    Square traced clockwise from the top-left corner, stopping ``gap``
    pixels short of it on the left edge.
    """
    coords = [(x, 0) for x in range(0, size + 1, spacing)]
    coords += [(size, y) for y in range(spacing, size + 1, spacing)]
    coords += [(x, size) for x in range(size - spacing, -1, -spacing)]
    coords += [(0, y) for y in range(size - spacing, gap - 1, -spacing)]
    return [Point(float(x), float(y), t=i * 0.01) for i, (x, y) in enumerate(coords)]


def make_line(n=5, start=(0.0, 0.0), step=10.0):
    x0, y0 = start
    return [Point(x0 + i * step, y0, t=i * 0.01) for i in range(n)]


@pytest.fixture
def shapes():
    """Stroke factories, for tests that need other sizes or samplings."""
    return SimpleNamespace(
        circle=make_circle,
        zigzag=make_zigzag,
        rectangle=make_rectangle,
        square=make_square,
        line=make_line,
    )


@pytest.fixture
def circle_stroke():
    return make_circle()


@pytest.fixture
def flat_ellipse_stroke():
    """Circle squashed to 30% height: too elongated for any shape."""
    return make_circle(y_scale=0.3)


@pytest.fixture
def zigzag_stroke():
    return make_zigzag()


@pytest.fixture
def rectangle_stroke():
    return make_rectangle()


@pytest.fixture
def line_stroke():
    return make_line()


@pytest.fixture
def sample_text():
    return "The quick brown fox jumps over the lazy dog"


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def session(config, sample_text):
    """Session with sample text loaded and the adaptive tool selected."""
    session = AnnotationSession(config)
    session.load_content(sample_text)
    return session


@pytest.fixture
def draw():
    """Feed a whole stroke through the pointer lifecycle."""

    def _draw(session, points):
        session.on_pointer_down(points[0])
        for point in points[1:]:
            session.on_pointer_move(point)
        return session.on_pointer_up()

    return _draw

def pytest_configure(config):
    config.addinivalue_line("markers", "integration: full workflow tests")
