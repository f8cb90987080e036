"""Locate -> assemble -> fit pipeline and draw-plan emission."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .assembler import assemble_contour
from .config import EngineConfig, get_engine_config
from .drawplan import STYLES, ArcOp, ClosedCurveOp, DrawPlan, PointOp, SegmentOp, Style, TextOp
from .fitter import CubicSegment, fit_closed_curve
from .methods import CURVE_FEATURE, CURVE_LABEL_FEATURE
from .plan import ConstructionPlan
from .types import ConstructionSketch, FeatureId, InsufficientPoints, Point2D

logger = logging.getLogger(__name__)

_CONSTRUCTION_LINES = {"directrix", "baseline", "axis.major"}
_FAINT_LINES = {"rays", "perpendiculars"}


@dataclass
class PipelineResult:
    sketch: ConstructionSketch
    raw_points: List[Point2D]
    contour: List[Point2D] = field(default_factory=list)
    segments: List[CubicSegment] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    @property
    def has_curve(self) -> bool:
        return bool(self.segments)


def locate_points(plan: ConstructionPlan, config: Optional[EngineConfig] = None) -> ConstructionSketch:
    """Run the method's builder, producing every construction point."""

    config = config or get_engine_config()
    sketch = plan.definition.build(plan.params, config)
    logger.info(
        "Located %d ellipse point(s) for %s (%d named, %d arc(s))",
        len(sketch.raw_points()),
        plan.method.value,
        len(sketch.named_points),
        len(sketch.arcs),
    )
    return sketch


def run_pipeline(plan: ConstructionPlan, config: Optional[EngineConfig] = None) -> PipelineResult:
    """Locate, assemble and fit; a missing curve is recorded, never raised."""

    config = config or get_engine_config()
    sketch = locate_points(plan, config)
    raw = sketch.raw_points()
    result = PipelineResult(sketch=sketch, raw_points=raw, notes=list(sketch.notes))
    try:
        result.contour = assemble_contour(
            raw,
            sketch.center,
            epsilon=config.dedup_epsilon,
            min_points=config.min_contour_points,
        )
        result.segments = fit_closed_curve(result.contour)
    except InsufficientPoints as exc:
        result.contour = []
        result.segments = []
        result.notes.append(f"curve omitted: {exc}")
        logger.warning("Curve omitted for %s: %s", plan.method.value, exc)
    return result


def _segment_style(feature: FeatureId) -> Style:
    if feature in _CONSTRUCTION_LINES:
        return STYLES["construction"]
    if feature in _FAINT_LINES:
        return STYLES["ray"]
    return STYLES["guide"]


def _point_style(feature: FeatureId) -> Style:
    if feature == "divisions":
        return STYLES["division"]
    return STYLES["key-point"]


def build_draw_plan(
    plan: ConstructionPlan,
    step_index: int = 0,
    reveal_all: bool = False,
    *,
    config: Optional[EngineConfig] = None,
    result: Optional[PipelineResult] = None,
) -> DrawPlan:
    """Return the primitives visible at ``step_index`` (or all of them).

    ``result`` reuses an earlier :func:`run_pipeline` output for ``plan``
    instead of recomputing it.
    """

    step = plan.clamp_step(step_index)
    if result is None:
        result = run_pipeline(plan, config)
    sketch = result.sketch

    def visible(feature: FeatureId) -> bool:
        return plan.is_visible(feature, step, reveal_all)

    draw = DrawPlan(title=plan.title, step_index=step, reveal_all=reveal_all, notes=list(result.notes))

    for seg in sketch.segments:
        if visible(seg.feature):
            draw.ops.append(SegmentOp(seg.start, seg.end, _segment_style(seg.feature), seg.feature))
    for arc in sketch.arcs:
        if visible(arc.feature):
            draw.ops.append(
                ArcOp(arc.center, arc.radius, arc.start_angle, arc.end_angle, STYLES["arc"], arc.feature)
            )
    if result.has_curve and visible(CURVE_FEATURE):
        draw.ops.append(ClosedCurveOp(tuple(result.segments), STYLES["curve"], CURVE_FEATURE))
    for feature, points in sketch.point_groups.items():
        if visible(feature):
            for point in points:
                draw.ops.append(PointOp(point, None, STYLES["ellipse-point"], feature))
    for label, named in sketch.named_points.items():
        feature = sketch.point_features[label]
        if visible(feature):
            draw.ops.append(PointOp(named.position, label, _point_style(feature), feature))
    for text in sketch.texts:
        if text.feature == CURVE_LABEL_FEATURE and not result.has_curve:
            continue
        if visible(text.feature):
            style = STYLES["title"] if text.emphasis else STYLES["label"]
            draw.ops.append(TextOp(text.position, text.text, style, text.feature))

    logger.debug(
        "Draw plan for %s step=%d reveal_all=%s: %d op(s)",
        plan.method.value,
        step,
        reveal_all,
        len(draw.ops),
    )
    return draw


__all__ = ["PipelineResult", "build_draw_plan", "locate_points", "run_pipeline"]
