import math

import numpy as np
import pytest

from ellipse_construct.fitter import CubicSegment, fit_closed_curve, sample_closed_curve
from ellipse_construct.types import InsufficientPoints, Point2D


SQUARE = [Point2D(1, 0), Point2D(0, 1), Point2D(-1, 0), Point2D(0, -1)]


def _ellipse_contour(count=12):
    return [
        Point2D(150 * math.cos(2 * math.pi * i / count), 90 * math.sin(2 * math.pi * i / count))
        for i in range(count)
    ]


def test_fit_closed_curve_one_segment_per_point():
    contour = _ellipse_contour()
    segments = fit_closed_curve(contour)

    assert len(segments) == len(contour)
    for idx, seg in enumerate(segments):
        assert seg.start == contour[idx]
        assert seg.end == contour[(idx + 1) % len(contour)]


def test_fit_closed_curve_is_closed():
    segments = fit_closed_curve(_ellipse_contour(9))

    for current, following in zip(segments, segments[1:] + segments[:1]):
        assert current.end == following.start


def test_fit_closed_curve_control_points():
    first = fit_closed_curve(SQUARE)[0]

    assert first.control1.as_tuple() == pytest.approx((1.0, 1.0 / 3.0))
    assert first.control2.as_tuple() == pytest.approx((1.0 / 3.0, 1.0))


def test_fit_closed_curve_tangents_are_continuous():
    segments = fit_closed_curve(_ellipse_contour(10))

    for current, following in zip(segments, segments[1:] + segments[:1]):
        outgoing = current.end - current.control2
        incoming = following.control1 - following.start
        assert outgoing.as_tuple() == pytest.approx(incoming.as_tuple())


def test_fit_closed_curve_rejects_three_points():
    with pytest.raises(InsufficientPoints):
        fit_closed_curve(SQUARE[:3])


def test_cubic_segment_endpoints():
    seg = CubicSegment(Point2D(0, 0), Point2D(1, 2), Point2D(3, 2), Point2D(4, 0))

    assert seg.point_at(0.0) == Point2D(0, 0)
    assert seg.point_at(1.0) == Point2D(4, 0)
    assert seg.point_at(0.5).as_tuple() == pytest.approx((2.0, 1.5))


def test_sample_closed_curve_shape_and_closure():
    segments = fit_closed_curve(SQUARE)
    samples = sample_closed_curve(segments, samples_per_segment=8)

    assert samples.shape == (4 * 8 + 1, 2)
    np.testing.assert_allclose(samples[0], samples[-1])
    np.testing.assert_allclose(samples[8], SQUARE[1].as_tuple())


def test_sample_closed_curve_empty():
    assert sample_closed_curve([]).shape == (0, 2)


def test_fit_closed_curve_counts_distinct_points():
    with pytest.raises(InsufficientPoints, match="got 1"):
        fit_closed_curve([Point2D(3, 4)] * 4)
    with pytest.raises(InsufficientPoints, match="got 3"):
        fit_closed_curve(SQUARE[:3] + [SQUARE[0]])
