import math

import pytest

from ellipse_construct.locator import (
    circle_circle_intersections,
    circle_line_intersections,
    divide_segment,
    polar_directions,
    ratio_locus_point,
    trilaterate,
)
from ellipse_construct.types import LocusNotFound, Point2D, Unsatisfiable


FOCUS = Point2D(65 * 3.77, 0.0)
E = 2.0 / 3.0


def test_trilaterate_reference_triangle():
    c = trilaterate(Point2D(0, 0), Point2D(100, 0), 75, 60)

    assert c.x == pytest.approx(60.125)
    assert c.y == pytest.approx(44.833, abs=1e-3)


def test_trilaterate_mirror_is_reflected():
    c = trilaterate(Point2D(0, 0), Point2D(100, 0), 75, 60, mirror=True)

    assert c.x == pytest.approx(60.125)
    assert c.y == pytest.approx(-44.833, abs=1e-3)


@pytest.mark.parametrize(
    'a, b, r1, r2',
    [
        (Point2D(0, 0), Point2D(100, 0), 75, 60),
        (Point2D(10, -5), Point2D(-20, 40), 30, 45),
        (Point2D(1, 1), Point2D(4, 5), 2.5, 2.5),
        (Point2D(0, 0), Point2D(10, 0), 3, 7),
        (Point2D(0, 0), Point2D(0, 10), 8, 8),
    ],
)
def test_trilaterate_hits_both_radii(a, b, r1, r2):
    for mirror in (False, True):
        c = trilaterate(a, b, r1, r2, mirror=mirror)
        assert abs(c.distance_to(a) - r1) < 1e-6
        assert abs(c.distance_to(b) - r2) < 1e-6


@pytest.mark.parametrize(
    'r1, r2, d',
    [(1, 1, 10), (5, 1, 1), (1, 5, 1)],
)
def test_trilaterate_rejects_disjoint_circles(r1, r2, d):
    with pytest.raises(Unsatisfiable):
        trilaterate(Point2D(0, 0), Point2D(d, 0), r1, r2)


def test_trilaterate_rejects_coincident_references():
    with pytest.raises(Unsatisfiable):
        trilaterate(Point2D(2, 2), Point2D(2, 2), 1, 1)


def test_circle_circle_clamps_disjoint_circles_to_midline():
    points = circle_circle_intersections(Point2D(0, 0), 1, Point2D(10, 0), 1)

    assert points == [Point2D(5, 0)]


def test_circle_circle_two_points_upper_first():
    points = circle_circle_intersections(Point2D(0, 0), 5, Point2D(8, 0), 5)

    assert len(points) == 2
    assert points[0].as_tuple() == pytest.approx((4.0, 3.0))
    assert points[1].as_tuple() == pytest.approx((4.0, -3.0))


def test_circle_circle_concentric_is_empty():
    assert circle_circle_intersections(Point2D(1, 1), 2, Point2D(1, 1), 3) == []


def test_circle_line_intersections_ordered_along_direction():
    points = circle_line_intersections(Point2D(0, 0), 5, Point2D(-10, 3), Point2D(1, 0))

    assert [p.as_tuple() for p in points] == [pytest.approx((-4.0, 3.0)), pytest.approx((4.0, 3.0))]


def test_circle_line_tangent_and_miss():
    tangent = circle_line_intersections(Point2D(0, 0), 5, Point2D(-10, 5), Point2D(2, 0))
    miss = circle_line_intersections(Point2D(0, 0), 5, Point2D(-10, 6), Point2D(1, 0))

    assert len(tangent) == 1
    assert tangent[0].as_tuple() == pytest.approx((0.0, 5.0))
    assert miss == []


def test_ratio_locus_vertices_match_polar_form():
    gap = FOCUS.x
    far = ratio_locus_point(FOCUS, 0.0, E, Point2D(1, 0), 600.0)
    near = ratio_locus_point(FOCUS, 0.0, E, Point2D(-1, 0), 600.0)

    assert far.x == pytest.approx(gap + E * gap / (1 - E))
    assert near.x == pytest.approx(gap - E * gap / (1 + E))
    assert far.y == pytest.approx(0.0) and near.y == pytest.approx(0.0)


def test_ratio_locus_points_satisfy_ratio():
    for direction in polar_directions(24):
        p = ratio_locus_point(FOCUS, 0.0, E, direction, 600.0)
        assert p.distance_to(FOCUS) / abs(p.x) == pytest.approx(E, abs=1e-9)


def test_ratio_locus_bracket_matches_closed_form_within_tolerance():
    for direction in polar_directions(24, phase=0.1):
        exact = ratio_locus_point(FOCUS, 0.0, E, direction, 600.0)
        searched = ratio_locus_point(FOCUS, 0.0, E, direction, 600.0, 0.01, strategy='bracket')
        assert exact.distance_to(searched) < 0.01


def test_ratio_locus_directrix_on_the_right():
    focus = Point2D(-50.0, 10.0)
    p = ratio_locus_point(focus, 0.0, 0.5, Point2D(1, 0), 500.0)

    assert p.distance_to(focus) / abs(p.x) == pytest.approx(0.5)
    assert p.x < 0.0


def test_ratio_locus_not_found_inside_bound():
    with pytest.raises(LocusNotFound):
        ratio_locus_point(FOCUS, 0.0, E, Point2D(1, 0), 350.0)
    with pytest.raises(LocusNotFound):
        ratio_locus_point(FOCUS, 0.0, E, Point2D(1, 0), 350.0, strategy='bracket')


def test_ratio_locus_degenerate_inputs():
    with pytest.raises(LocusNotFound):
        ratio_locus_point(Point2D(0, 0), 0.0, E, Point2D(1, 0), 100.0)
    with pytest.raises(LocusNotFound):
        ratio_locus_point(FOCUS, 0.0, E, Point2D(0, 0), 100.0)
    with pytest.raises(ValueError):
        ratio_locus_point(FOCUS, 0.0, E, Point2D(1, 0), 600.0, strategy='newton')


def test_polar_directions_are_unit_and_evenly_spaced():
    directions = polar_directions(8)

    assert len(directions) == 8
    for idx, d in enumerate(directions):
        assert d.norm() == pytest.approx(1.0)
        assert math.atan2(d.y, d.x) % (2 * math.pi) == pytest.approx(idx * math.pi / 4)


def test_divide_segment_marks_fixed_spacing():
    marks = divide_segment(Point2D(0, 0), Point2D(50, 0), 10, 4)

    assert [m.x for m in marks] == pytest.approx([10, 20, 30, 40])
