"""Analytic compass-and-straightedge primitives.

Every routine here is a pure function of its arguments.  Circle/circle
intersection comes in two flavours: :func:`trilaterate` refuses circles
that do not meet, while :func:`circle_circle_intersections` clamps the
offset from the radical line to zero so that radii measured off noisy
construction lines still yield a usable point.  The focus-directrix locus
is solved in closed form by default; a bracketing search refined with
:func:`scipy.optimize.brentq` is available for cross-checking.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

import numpy as np
from scipy.optimize import brentq

from .logging_utils import apply_debug_logging
from .types import LocusNotFound, Point2D, Unsatisfiable

logger = logging.getLogger(__name__)

_EPS = 1e-9
_BRACKET_SAMPLES = 64


def _unit(vec: Point2D) -> Optional[Point2D]:
    norm = vec.norm()
    if norm <= _EPS:
        return None
    return vec / norm


def _perp(vec: Point2D) -> Point2D:
    return Point2D(-vec.y, vec.x)


def _radical_offsets(d: float, radius_a: float, radius_b: float) -> tuple:
    a = (radius_a * radius_a - radius_b * radius_b + d * d) / (2.0 * d)
    return a, radius_a * radius_a - a * a


def trilaterate(
    a: Point2D,
    b: Point2D,
    r1: float,
    r2: float,
    *,
    mirror: bool = False,
) -> Point2D:
    """Return the point at distance ``r1`` from ``a`` and ``r2`` from ``b``.

    The solution on the left of the directed line ``a -> b`` is returned
    (above ``AB`` when ``AB`` points along +x); ``mirror=True`` selects the
    reflected one.  Raises :class:`Unsatisfiable` when the circles miss.
    """

    u = _unit(b - a)
    if u is None:
        raise Unsatisfiable("reference points coincide")
    d = a.distance_to(b)
    along, h_sq = _radical_offsets(d, r1, r2)
    if h_sq < -_EPS * max(1.0, r1 * r1):
        raise Unsatisfiable(
            f"circles r1={r1:.6g} and r2={r2:.6g} do not meet at distance {d:.6g}"
        )
    h = math.sqrt(max(h_sq, 0.0))
    if mirror:
        h = -h
    return a + u * along + _perp(u) * h


def circle_circle_intersections(
    center_a: Point2D,
    radius_a: float,
    center_b: Point2D,
    radius_b: float,
) -> List[Point2D]:
    """Return up to two intersections, clamping near misses onto the centre line.

    Concentric circles yield no point.  When the circles miss (or touch)
    the single foot on the radical line is returned; otherwise the point on
    the left of ``center_a -> center_b`` comes first.
    """

    u = _unit(center_b - center_a)
    if u is None:
        return []
    d = center_a.distance_to(center_b)
    along, h_sq = _radical_offsets(d, radius_a, radius_b)
    h = math.sqrt(max(0.0, h_sq))
    base = center_a + u * along
    if h <= _EPS:
        return [base]
    n = _perp(u)
    return [base + n * h, base - n * h]


def circle_line_intersections(
    center: Point2D,
    radius: float,
    anchor: Point2D,
    direction: Point2D,
) -> List[Point2D]:
    """Return the intersections of a circle with the line ``anchor + t * direction``.

    Points are ordered by increasing ``t``; a tangent line yields one point.
    """

    d = _unit(direction)
    if d is None:
        return []
    rel = anchor - center
    b = rel.x * d.x + rel.y * d.y
    c = rel.x * rel.x + rel.y * rel.y - radius * radius
    disc = b * b - c
    if disc < -_EPS * max(1.0, radius * radius):
        return []
    if disc <= _EPS * max(1.0, radius * radius):
        return [anchor + d * (-b)]
    root = math.sqrt(disc)
    return [anchor + d * (-b - root), anchor + d * (-b + root)]


def _closed_form_locus_radius(
    gap: float, eccentricity: float, ux: float, search_bound: float
) -> Optional[float]:
    side = 1.0 if gap > 0 else -1.0
    dist = abs(gap)
    candidates: List[float] = []
    near = 1.0 - eccentricity * side * ux
    if near > _EPS:
        r = eccentricity * dist / near
        if side * (gap + r * ux) >= -_EPS:
            candidates.append(r)
    far = 1.0 + eccentricity * side * ux
    if far < -_EPS:
        r = -eccentricity * dist / far
        if side * (gap + r * ux) <= _EPS:
            candidates.append(r)
    valid = [r for r in candidates if _EPS < r <= search_bound]
    return min(valid) if valid else None


def _bracketed_locus_radius(
    gap: float, eccentricity: float, ux: float, search_bound: float, tolerance: float
) -> Optional[float]:
    def residual(r: float) -> float:
        return r - eccentricity * abs(gap + r * ux)

    grid = np.linspace(0.0, search_bound, _BRACKET_SAMPLES + 1)
    values = [residual(float(r)) for r in grid]
    for lo, hi, f_lo, f_hi in zip(grid[:-1], grid[1:], values[:-1], values[1:]):
        if f_lo == 0.0 and lo > 0.0:
            return float(lo)
        if f_lo * f_hi < 0.0:
            return float(brentq(residual, float(lo), float(hi), xtol=tolerance))
    if values[-1] == 0.0:
        return float(grid[-1])
    return None


def ratio_locus_point(
    focus: Point2D,
    directrix_offset: float,
    eccentricity: float,
    direction: Point2D,
    search_bound: float,
    tolerance: float = 0.01,
    *,
    strategy: str = "closed-form",
) -> Point2D:
    """Return ``P`` on the ray ``focus + r * direction`` with ``|PF| / dist(P, directrix) = e``.

    The directrix is the vertical line ``x = directrix_offset``.  Only
    ``0 < r <= search_bound`` is considered and the nearest root wins.
    Raises :class:`LocusNotFound` when no root lies inside the bound.
    """

    u = _unit(direction)
    if u is None:
        raise LocusNotFound("ray direction is degenerate")
    gap = focus.x - directrix_offset
    if abs(gap) <= _EPS:
        raise LocusNotFound("focus lies on the directrix")

    if strategy == "closed-form":
        radius = _closed_form_locus_radius(gap, eccentricity, u.x, search_bound)
    elif strategy == "bracket":
        radius = _bracketed_locus_radius(gap, eccentricity, u.x, search_bound, tolerance)
    else:
        raise ValueError(f"unknown locus strategy {strategy!r}")

    if radius is None:
        raise LocusNotFound(
            f"no ratio-{eccentricity:.4g} point within {search_bound:.6g} "
            f"along ({u.x:.4f}, {u.y:.4f})"
        )
    return focus + u * radius


def polar_directions(count: int, *, phase: float = 0.0) -> List[Point2D]:
    """Return ``count`` unit vectors evenly spaced around the full turn."""

    step = 2.0 * math.pi / count
    return [
        Point2D(math.cos(phase + idx * step), math.sin(phase + idx * step))
        for idx in range(count)
    ]


def divide_segment(start: Point2D, end: Point2D, spacing: float, count: int) -> List[Point2D]:
    """Mark ``count`` points from ``start`` towards ``end`` at fixed ``spacing``."""

    u = _unit(end - start)
    if u is None:
        return []
    return [start + u * (spacing * idx) for idx in range(1, count + 1)]


def angle_of(center: Point2D, point: Point2D) -> float:
    return math.atan2(point.y - center.y, point.x - center.x)


def arc_window(center: Point2D, through: Sequence[Point2D], span: float) -> tuple:
    """Return ``(start, end)`` angles of a short arc about ``center`` covering ``through``.

    Each target is widened by ``span / 2`` on both sides; targets on opposite
    sides of the centre are not merged, callers pass one target per arc.
    """

    angles = [angle_of(center, pt) for pt in through]
    mid = math.atan2(
        sum(math.sin(a) for a in angles), sum(math.cos(a) for a in angles)
    )
    spread = max((abs(math.remainder(a - mid, 2.0 * math.pi)) for a in angles), default=0.0)
    half = spread + 0.5 * span
    return mid - half, mid + half


apply_debug_logging(globals(), logger=logger)
