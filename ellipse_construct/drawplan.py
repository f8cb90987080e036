"""Renderer-neutral drawing instructions produced by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from .fitter import CubicSegment
from .types import FeatureId, Point2D


@dataclass(frozen=True)
class Style:
    """Stroke and fill hints; renderers may map ``role`` to their own look."""

    role: str
    color: str = "#000000"
    line_width: float = 1.0
    dashed: bool = False
    radius: float = 3.0
    font_size: float = 12.0
    bold: bool = False


STYLES: Dict[str, Style] = {
    "construction": Style("construction", "#4f46e5", line_width=2.0),
    "guide": Style("guide", "#94a3b8", line_width=1.0, dashed=True),
    "ray": Style("ray", "#cbd5e1", line_width=0.5),
    "arc": Style("arc", "#c4b5fd", line_width=0.5, dashed=True),
    "key-point": Style("key-point", "#dc2626", radius=5.0),
    "division": Style("division", "#8b5cf6", radius=4.0, font_size=12.0),
    "ellipse-point": Style("ellipse-point", "#dc2626", radius=3.0),
    "curve": Style("curve", "#7c3aed", line_width=3.0),
    "label": Style("label", "#334155", font_size=14.0),
    "title": Style("title", "#7c3aed", font_size=16.0, bold=True),
}


@dataclass(frozen=True)
class PointOp:
    position: Point2D
    label: Optional[str]
    style: Style
    feature: FeatureId = ""


@dataclass(frozen=True)
class SegmentOp:
    start: Point2D
    end: Point2D
    style: Style
    feature: FeatureId = ""


@dataclass(frozen=True)
class ArcOp:
    """Arc about ``center``; angles in radians, counter-clockwise from +x."""

    center: Point2D
    radius: float
    start_angle: float
    end_angle: float
    style: Style
    feature: FeatureId = ""


@dataclass(frozen=True)
class ClosedCurveOp:
    segments: Tuple[CubicSegment, ...]
    style: Style
    feature: FeatureId = ""


@dataclass(frozen=True)
class TextOp:
    position: Point2D
    text: str
    style: Style
    feature: FeatureId = ""


DrawOp = Union[PointOp, SegmentOp, ArcOp, ClosedCurveOp, TextOp]


@dataclass
class DrawPlan:
    """Ordered primitives for one (method, step, reveal mode) combination."""

    title: str
    step_index: int
    reveal_all: bool
    ops: List[DrawOp] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def of_type(self, kind: type) -> List[DrawOp]:
        return [op for op in self.ops if isinstance(op, kind)]

    def has_curve(self) -> bool:
        return any(isinstance(op, ClosedCurveOp) for op in self.ops)

    def features(self) -> List[FeatureId]:
        seen: List[FeatureId] = []
        for op in self.ops:
            if op.feature and op.feature not in seen:
                seen.append(op.feature)
        return seen

    def bounds(self) -> Tuple[float, float, float, float]:
        """Return ``(min_x, min_y, max_x, max_y)`` over every placed coordinate."""

        xs: List[float] = []
        ys: List[float] = []
        for op in self.ops:
            if isinstance(op, (PointOp, TextOp)):
                pts = [op.position]
            elif isinstance(op, SegmentOp):
                pts = [op.start, op.end]
            elif isinstance(op, ArcOp):
                pts = [op.center + Point2D(dx, dy) for dx, dy in
                       ((op.radius, 0.0), (-op.radius, 0.0), (0.0, op.radius), (0.0, -op.radius))]
            else:
                pts = [pt for seg in op.segments for pt in seg.controls()]
            for pt in pts:
                xs.append(pt.x)
                ys.append(pt.y)
        if not xs:
            return (0.0, 0.0, 0.0, 0.0)
        return (min(xs), min(ys), max(xs), max(ys))


__all__ = [
    "Style",
    "STYLES",
    "PointOp",
    "SegmentOp",
    "ArcOp",
    "ClosedCurveOp",
    "TextOp",
    "DrawOp",
    "DrawPlan",
]
