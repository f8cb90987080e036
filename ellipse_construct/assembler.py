"""Turn scattered construction points into one closed contour."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import numpy as np
from scipy.spatial import cKDTree

from .config import get_engine_config
from .types import InsufficientPoints, Point2D

logger = logging.getLogger(__name__)


def _as_array(points: Sequence[Point2D]) -> np.ndarray:
    return np.array([(pt.x, pt.y) for pt in points], dtype=float).reshape(-1, 2)


def deduplicate_points(points: Sequence[Point2D], epsilon: float) -> List[Point2D]:
    """Drop points within ``epsilon`` of an earlier kept point.

    The first occurrence wins, so the output keeps input order and no two
    survivors are closer than ``epsilon``.
    """

    if len(points) < 2:
        return list(points)
    coords = _as_array(points)
    tree = cKDTree(coords)
    dropped = np.zeros(len(points), dtype=bool)
    kept: List[Point2D] = []
    for idx, point in enumerate(points):
        if dropped[idx]:
            continue
        kept.append(point)
        for other in tree.query_ball_point(coords[idx], r=epsilon):
            if other > idx:
                dropped[other] = True
    if len(kept) != len(points):
        logger.debug("Merged %d near-duplicate point(s)", len(points) - len(kept))
    return kept


def centroid(points: Sequence[Point2D]) -> Point2D:
    mean = _as_array(points).mean(axis=0)
    return Point2D(float(mean[0]), float(mean[1]))


def order_by_angle(points: Sequence[Point2D], center: Point2D) -> List[Point2D]:
    """Sort ``points`` counter-clockwise by their polar angle about ``center``."""

    if not points:
        return []
    coords = _as_array(points)
    angles = np.arctan2(coords[:, 1] - center.y, coords[:, 0] - center.x)
    order = np.argsort(angles, kind="stable")
    return [points[int(idx)] for idx in order]


def assemble_contour(
    points: Sequence[Point2D],
    center: Optional[Point2D] = None,
    *,
    epsilon: Optional[float] = None,
    min_points: Optional[int] = None,
) -> List[Point2D]:
    """Deduplicate, angle-sort and return the cyclic contour through ``points``.

    ``center`` defaults to the mean of the deduplicated points.  The last
    point implicitly connects back to the first.  Raises
    :class:`InsufficientPoints` when fewer than ``min_points`` survive.
    """

    config = get_engine_config()
    eps = config.dedup_epsilon if epsilon is None else epsilon
    required = config.min_contour_points if min_points is None else min_points

    unique = deduplicate_points(points, eps)
    if len(unique) < required:
        raise InsufficientPoints(len(unique), required)
    pivot = center if center is not None else centroid(unique)
    contour = order_by_angle(unique, pivot)
    logger.info("Assembled contour of %d point(s) from %d raw", len(contour), len(points))
    return contour


__all__ = ["assemble_contour", "centroid", "deduplicate_points", "order_by_angle"]
