"""Periodic Catmull-Rom fitting expressed as cubic Bezier segments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .config import get_engine_config
from .types import InsufficientPoints, Point2D

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CubicSegment:
    """Cubic Bezier from ``start`` to ``end`` with two inner control points."""

    start: Point2D
    control1: Point2D
    control2: Point2D
    end: Point2D

    def point_at(self, t: float) -> Point2D:
        s = 1.0 - t
        return (
            self.start * (s * s * s)
            + self.control1 * (3.0 * s * s * t)
            + self.control2 * (3.0 * s * t * t)
            + self.end * (t * t * t)
        )

    def controls(self) -> List[Point2D]:
        return [self.start, self.control1, self.control2, self.end]


def fit_closed_curve(contour: Sequence[Point2D]) -> List[CubicSegment]:
    """Return one C1-continuous cubic per contour edge, wrapping at the ends.

    Segment ``i`` runs from ``contour[i]`` to ``contour[i + 1]`` (mod N), so
    the end of each segment is exactly the start of the next.
    """

    required = get_engine_config().min_contour_points
    n = len(contour)
    distinct = len(set(contour))
    if distinct < required:
        raise InsufficientPoints(distinct, required)
    if distinct < n:
        logger.warning("Contour repeats %d point(s); segments through them are degenerate", n - distinct)

    segments: List[CubicSegment] = []
    for i in range(n):
        p0 = contour[(i - 1) % n]
        p1 = contour[i]
        p2 = contour[(i + 1) % n]
        p3 = contour[(i + 2) % n]
        c1 = p1 + (p2 - p0) / 6.0
        c2 = p2 - (p3 - p1) / 6.0
        segments.append(CubicSegment(p1, c1, c2, p2))
    logger.info("Fitted closed curve with %d cubic segment(s)", len(segments))
    return segments


def sample_closed_curve(segments: Sequence[CubicSegment], samples_per_segment: int = 16) -> np.ndarray:
    """Flatten ``segments`` into an ``(M, 2)`` closed polyline (first point repeated last)."""

    if not segments:
        return np.zeros((0, 2), dtype=float)
    ts = np.linspace(0.0, 1.0, max(2, samples_per_segment), endpoint=False)
    basis = np.stack(
        [(1 - ts) ** 3, 3 * (1 - ts) ** 2 * ts, 3 * (1 - ts) * ts**2, ts**3], axis=1
    )
    chunks = []
    for segment in segments:
        ctrl = np.array([pt.as_tuple() for pt in segment.controls()], dtype=float)
        chunks.append(basis @ ctrl)
    chunks.append(np.array([segments[0].start.as_tuple()], dtype=float))
    return np.vstack(chunks)


__all__ = ["CubicSegment", "fit_closed_curve", "sample_closed_curve"]
