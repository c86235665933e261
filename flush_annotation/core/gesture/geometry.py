"""
Pure geometry helpers over stroke samples.

Points are converted once into an ``(N, 2)`` float array; every helper
below works on that array and has no side effects.
"""

from typing import Sequence

import numpy as np

from ..annotation.state import BoundingBox


def as_array(points) -> np.ndarray:
    """
    Convert samples to an ``(N, 2)`` array of x, y coordinates.

    Accepts Point-like objects (with ``x``/``y``), ``(x, y)`` pairs or an
    existing array.
    """
    if isinstance(points, np.ndarray):
        return points.astype(np.float64).reshape(-1, 2)
    coords = [(p.x, p.y) if hasattr(p, "x") else (p[0], p[1]) for p in points]
    return np.asarray(coords, dtype=np.float64).reshape(-1, 2)


def bounding_box(coords: np.ndarray) -> BoundingBox:
    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    return BoundingBox(float(min_x), float(min_y), float(max_x), float(max_y))


def closure_distance(coords: np.ndarray) -> float:
    """Distance between the first and the last sample."""
    return float(np.linalg.norm(coords[-1] - coords[0]))


def count_vertical_flips(coords: np.ndarray, noise_threshold: float) -> int:
    """
    Count up/down direction reversals.

    Vertical steps no larger than ``noise_threshold`` are ignored, and do
    not reset the last known direction.
    """
    dy = np.diff(coords[:, 1])
    signs = np.sign(dy[np.abs(dy) > noise_threshold])
    if len(signs) < 2:
        return 0
    return int(np.count_nonzero(signs[1:] != signs[:-1]))


def radial_consistency(coords: np.ndarray, center: Sequence[float]) -> float:
    """
    ``1 - std(r) / mean(r)`` of the distances to ``center``.

    1.0 for a perfect circle; lower for ellipses and scribbles.
    """
    distances = np.linalg.norm(coords - np.asarray(center, dtype=np.float64), axis=1)
    mean = distances.mean()
    if mean <= 0:
        return 0.0
    return float(1.0 - distances.std() / mean)


def quadrant_coverage(coords: np.ndarray, center: Sequence[float]) -> int:
    """Number of the four quadrants around ``center`` that contain a sample."""
    cx, cy = center
    x, y = coords[:, 0], coords[:, 1]
    right, top = x >= cx, y <= cy
    quadrants = (
        right & top,
        ~right & top,
        ~right & ~top,
        right & ~top,
    )
    return int(sum(bool(q.any()) for q in quadrants))


def turning_angles(coords: np.ndarray, step: int) -> np.ndarray:
    """
    Direction change at each interior sample, in degrees within [0, 180].

    Compares the direction from ``i - step`` to ``i`` with the direction
    from ``i`` to ``i + step``. Samples where either direction vector has
    zero length are left out.
    """
    if step <= 0 or len(coords) <= 2 * step:
        return np.empty(0)

    incoming = coords[step:-step] - coords[: -2 * step]
    outgoing = coords[2 * step:] - coords[step:-step]

    valid = (np.linalg.norm(incoming, axis=1) > 0) & (
        np.linalg.norm(outgoing, axis=1) > 0
    )
    incoming, outgoing = incoming[valid], outgoing[valid]

    angle_in = np.arctan2(incoming[:, 1], incoming[:, 0])
    angle_out = np.arctan2(outgoing[:, 1], outgoing[:, 0])
    diff = np.abs(angle_out - angle_in)
    diff = np.where(diff > np.pi, 2 * np.pi - diff, diff)
    return np.degrees(diff)


def count_corners(coords: np.ndarray, step: int, min_angle: float) -> int:
    """Number of interior samples turning sharper than ``min_angle`` degrees."""
    return int(np.count_nonzero(turning_angles(coords, step) > min_angle))
