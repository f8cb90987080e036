import math

import numpy as np
import pytest

from ellipse_construct.assembler import (
    assemble_contour,
    centroid,
    deduplicate_points,
    order_by_angle,
)
from ellipse_construct.types import InsufficientPoints, Point2D


def _ellipse_points(count, a=200.0, b=120.0, center=Point2D(50, -30)):
    return [
        center + Point2D(a * math.cos(t), b * math.sin(t))
        for t in np.linspace(0.05, 0.05 + 2.0 * math.pi, count, endpoint=False)
    ]


def test_deduplicate_keeps_first_occurrence():
    points = [Point2D(0, 0), Point2D(0.5, 0), Point2D(10, 0), Point2D(10.2, 0.2)]

    assert deduplicate_points(points, 1.0) == [Point2D(0, 0), Point2D(10, 0)]


def test_deduplicate_short_inputs_pass_through():
    assert deduplicate_points([], 1.0) == []
    assert deduplicate_points([Point2D(1, 2)], 1.0) == [Point2D(1, 2)]


def test_assemble_contour_is_unique_and_angle_sorted():
    rng = np.random.default_rng(7)
    base = _ellipse_points(30)
    jittered = [p + Point2D(0.3, -0.2) for p in base[::3]]
    points = base + jittered
    order = rng.permutation(len(points))
    shuffled = [points[int(i)] for i in order]

    contour = assemble_contour(shuffled, epsilon=1.0)

    assert len(contour) == 30
    for i, p in enumerate(contour):
        for q in contour[i + 1:]:
            assert p.distance_to(q) >= 1.0
    pivot = centroid(contour)
    angles = [math.atan2(p.y - pivot.y, p.x - pivot.x) for p in contour]
    assert all(later > earlier for earlier, later in zip(angles, angles[1:]))


def test_assemble_contour_uses_explicit_center():
    center = Point2D(100, 100)
    points = [center + Point2D(10 * math.cos(t), 10 * math.sin(t)) for t in (0.5, 2.0, -2.5, -1.0, 3.0)]

    contour = assemble_contour(points, center)

    assert contour[0] == points[2]
    assert contour[-1] == points[4]


def test_assemble_contour_rejects_too_few_points():
    with pytest.raises(InsufficientPoints) as excinfo:
        assemble_contour([Point2D(0, 0), Point2D(10, 0), Point2D(0, 10)])

    assert excinfo.value.count == 3
    assert excinfo.value.required == 4


def test_assemble_contour_counts_points_after_dedup():
    points = [Point2D(0, 0), Point2D(0.1, 0), Point2D(10, 0), Point2D(10, 0.1), Point2D(0, 10)]

    with pytest.raises(InsufficientPoints, match="got 3"):
        assemble_contour(points, epsilon=1.0)


def test_order_by_angle_is_stable_for_empty_input():
    assert order_by_angle([], Point2D(0, 0)) == []
