"""Geometry builders and step tables for each construction method.

A builder turns :class:`ConstructionParameters` into a
:class:`ConstructionSketch`: named points, compass arcs, straight
construction lines and the grouped ellipse points.  Builders only place
geometry; every intersection goes through :mod:`ellipse_construct.locator`
and the assembly, fitting and step gating downstream are shared.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import EngineConfig
from .locator import (
    arc_window,
    circle_circle_intersections,
    circle_line_intersections,
    divide_segment,
    polar_directions,
    ratio_locus_point,
    trilaterate,
)
from .parameters import ConstructionParameters, FeatureRule, Method, from_step, only_at
from .types import (
    ConstructionArc,
    ConstructionSegment,
    ConstructionSketch,
    ConstructionText,
    FeatureId,
    LocusNotFound,
    Point2D,
    Unsatisfiable,
)

logger = logging.getLogger(__name__)

CURVE_FEATURE: FeatureId = "curve"
CURVE_LABEL_FEATURE: FeatureId = "label.curve"
SMOOTH_CURVE_NOTE = "(Smooth curve)"

Layout = Tuple[List[str], Dict[FeatureId, FeatureRule]]
Builder = Callable[[ConstructionParameters, EngineConfig], ConstructionSketch]


@dataclass(frozen=True)
class MethodDefinition:
    """Registry entry binding a method to its title, step layout and builder."""

    method: Method
    title: str
    layout: Callable[[ConstructionParameters], Layout]
    build: Builder


def _fmt_mm(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text}mm"


def _fmt_ratio(value: float) -> str:
    frac = Fraction(value).limit_denominator(12)
    if abs(float(frac) - value) > 1e-9:
        return f"{value:.3g}"
    return f"{frac.numerator}/{frac.denominator}"


def _add_arcs(
    sketch: ConstructionSketch,
    feature: FeatureId,
    center: Point2D,
    radius: float,
    targets: Sequence[Point2D],
    span: float,
) -> None:
    for target in targets:
        start, end = arc_window(center, [target], span)
        sketch.arcs.append(ConstructionArc(feature, center, radius, start, end))


def _arc_pair(
    sketch: ConstructionSketch,
    arcs_feature: FeatureId,
    points_feature: FeatureId,
    center_a: Point2D,
    radius_a: float,
    center_b: Point2D,
    radius_b: float,
    span: float,
) -> List[Point2D]:
    """Swing one arc about each centre and record where they cross."""

    points = circle_circle_intersections(center_a, radius_a, center_b, radius_b)
    if not points:
        sketch.notes.append(f"{points_feature}: arcs about coincident centres never cross")
        logger.warning("No intersection for %s (coincident centres)", points_feature)
        return []
    _add_arcs(sketch, arcs_feature, center_a, radius_a, points, span)
    _add_arcs(sketch, arcs_feature, center_b, radius_b, points, span)
    sketch.add_ellipse_points(points_feature, points)
    return points


def _label_above(
    sketch: ConstructionSketch,
    center: Point2D,
    semi_minor: float,
    text: str,
    subtitle: Optional[str] = None,
) -> None:
    at = center + Point2D(0.0, semi_minor * 1.15)
    sketch.texts.append(ConstructionText(CURVE_LABEL_FEATURE, at, text, emphasis=True))
    if subtitle:
        below = at - Point2D(0.0, 20.0)
        sketch.texts.append(ConstructionText(CURVE_LABEL_FEATURE, below, subtitle))


# ---------------------------------------------------------------------------
# Focus and directrix
# ---------------------------------------------------------------------------


def _focus_directrix_layout(params: ConstructionParameters) -> Layout:
    e = _fmt_ratio(params.eccentricity)
    steps = [
        "Draw the directrix line AB of any length",
        f"Mark focus point F at {_fmt_mm(params.focus_distance)} from AB",
        f"From F, draw lines at various angles ({params.sample_count} rays)",
        f"For each line, locate point P such that PF/PM = {e}",
        "Mark all points P that satisfy the ratio condition",
        "Join all points with a smooth curve",
        f"The curve formed is an ELLIPSE (since e = {e} < 1)",
    ]
    features = {
        "directrix": from_step(0),
        "focus": from_step(1),
        "focus.dimension": from_step(1),
        "rays": from_step(2),
        "perpendiculars": from_step(3),
        "points.locus": from_step(4),
        CURVE_FEATURE: from_step(5),
        CURVE_LABEL_FEATURE: from_step(6),
    }
    return steps, features


def build_focus_directrix(params: ConstructionParameters, config: EngineConfig) -> ConstructionSketch:
    sketch = ConstructionSketch()
    e = params.eccentricity
    directrix_x = 0.0
    half = params.mm(params.directrix_length) / 2.0
    gap = params.mm(params.focus_distance)

    top = sketch.add_point("directrix", "A", Point2D(directrix_x, half))
    bottom = sketch.add_point("directrix", "B", Point2D(directrix_x, -half))
    sketch.segments.append(ConstructionSegment("directrix", top, bottom))
    sketch.texts.append(
        ConstructionText("directrix", top + Point2D(-0.25 * gap, 0.08 * half), "Directrix AB")
    )

    focus = sketch.add_point("focus", "F", Point2D(directrix_x + gap, 0.0))
    sketch.segments.append(ConstructionSegment("focus.dimension", Point2D(directrix_x, 0.0), focus))

    toward = e * gap / (1.0 + e)
    away = e * gap / (1.0 - e)
    semi_major = 0.5 * (toward + away)
    sketch.center = focus + Point2D(0.5 * (away - toward), 0.0)

    points: List[Point2D] = []
    for idx, direction in enumerate(polar_directions(params.sample_count)):
        try:
            point = ratio_locus_point(
                focus,
                directrix_x,
                e,
                direction,
                params.mm(params.search_bound),
                config.locus_tolerance,
            )
        except LocusNotFound as exc:
            sketch.notes.append(f"ray {idx}: {exc}")
            logger.warning("Skipping locus sample %d: %s", idx, exc)
            continue
        points.append(point)
    sketch.add_ellipse_points("points.locus", points)

    ray_stride = max(1, len(points) // 12)
    perp_stride = max(1, len(points) // 8)
    for idx, point in enumerate(points):
        if idx % ray_stride == 0:
            sketch.segments.append(ConstructionSegment("rays", focus, point))
        if idx % perp_stride == 0:
            sketch.segments.append(
                ConstructionSegment("perpendiculars", point, Point2D(directrix_x, point.y))
            )

    semi_minor = semi_major * math.sqrt(max(0.0, 1.0 - e * e))
    _label_above(sketch, sketch.center, semi_minor, f"ELLIPSE (e = {_fmt_ratio(e)} < 1)")
    return sketch


# ---------------------------------------------------------------------------
# Arc of circle on a baseline with extensions (triangle and mirrored forms)
# ---------------------------------------------------------------------------


def _baseline_frame(params: ConstructionParameters) -> Dict[str, Point2D]:
    length = params.mm(params.baseline_length)
    ext = params.mm(params.extension_length)
    return {
        "A": Point2D(0.0, 0.0),
        "B": Point2D(length, 0.0),
        "O": Point2D(length / 2.0, 0.0),
        "A'": Point2D(-ext, 0.0),
        "B'": Point2D(length + ext, 0.0),
    }


def _build_baseline_arcs(
    params: ConstructionParameters,
    config: EngineConfig,
    sketch: ConstructionSketch,
    *,
    mirrored: bool,
) -> None:
    frame = _baseline_frame(params)
    a, b, o = frame["A"], frame["B"], frame["O"]
    a_ext, b_ext = frame["A'"], frame["B'"]
    span = math.radians(config.arc_span_degrees)
    perp = params.mm(params.perpendicular_length)

    sketch.add_point("baseline", "A", a)
    sketch.add_point("baseline", "B", b)
    sketch.segments.append(ConstructionSegment("baseline", a, b))

    sketch.add_point("axis.minor", "O", o)
    sketch.segments.append(
        ConstructionSegment("axis.minor", o + Point2D(0.0, perp), o - Point2D(0.0, perp))
    )

    sketch.add_point("extensions", "A'", a_ext)
    sketch.add_point("extensions", "B'", b_ext)
    sketch.center = o

    divisions = divide_segment(a, o, params.mm(params.division_spacing), params.division_count)
    mirrored_divisions = divide_segment(b, o, params.mm(params.division_spacing), params.division_count)
    for idx, point in enumerate(divisions, start=1):
        sketch.add_point("divisions", str(idx), point)
        if mirrored:
            sketch.add_point("divisions", f"{idx}'", mirrored_divisions[idx - 1])

    for idx, point in enumerate(divisions, start=1):
        near = a_ext.distance_to(point)
        far = b_ext.distance_to(point)
        _arc_pair(sketch, f"arcs.{idx}", f"points.division.{idx}", a, near, b, far, span)
        if mirrored:
            _arc_pair(sketch, f"arcs.{idx}", f"points.division.{idx}", a, far, b, near, span)

    _arc_pair(
        sketch, "arcs.minor", "points.minor",
        a, a_ext.distance_to(o), b, b_ext.distance_to(o), span,
    )
    _arc_pair(
        sketch, "arcs.vertex", "points.vertex",
        a, a_ext.distance_to(a), b, b_ext.distance_to(a), span,
    )
    _arc_pair(
        sketch, "arcs.vertex", "points.vertex",
        a, a_ext.distance_to(b), b, b_ext.distance_to(b), span,
    )

    semi_major = 0.5 * a_ext.distance_to(b_ext)
    focal = 0.5 * a.distance_to(b)
    semi_minor = math.sqrt(max(0.0, semi_major * semi_major - focal * focal))
    _label_above(sketch, o, max(semi_minor, perp), "ELLIPSE", SMOOTH_CURVE_NOTE)


def _triangle_layout(params: ConstructionParameters) -> Layout:
    n = params.division_count
    steps = [
        f"Construct horizontal line AB of {_fmt_mm(params.baseline_length)}",
        f"Mark point C above AB such that AC={_fmt_mm(params.radius_ac)} and "
        f"BC={_fmt_mm(params.radius_bc)}, connect to form triangle ABC",
        f"Draw perpendicular from midpoint O of AB: {_fmt_mm(params.perpendicular_length)} "
        f"upwards and {_fmt_mm(params.perpendicular_length)} downwards",
        f"From O, extend AO and BO by {_fmt_mm(params.extension_length)} to mark endpoints A' and B'",
        f"From A to O, mark {n} points at {_fmt_mm(params.division_spacing)} intervals, "
        f"number them 1 to {n}",
    ]
    features: Dict[FeatureId, FeatureRule] = {
        "baseline": from_step(0),
        "triangle": from_step(1),
        "axis.minor": from_step(2),
        "extensions": from_step(3),
        "divisions": from_step(4),
    }
    for idx in range(1, n + 1):
        step = len(steps)
        steps.append(
            f"Compass: radius A'-{idx} centered at A (arcs up/down), "
            f"radius B'-{idx} at B (intersecting arcs)"
        )
        features[f"arcs.{idx}"] = only_at(step)
        features[f"points.division.{idx}"] = from_step(step)
    step = len(steps)
    steps.append("Radius A'-O from A (arcs on vertical), radius B'-O from B (forming minor axis)")
    features["arcs.minor"] = only_at(step)
    features["points.minor"] = from_step(step)
    step = len(steps)
    steps.append("Radius A'-A from both A and B, radius B'-A from both A and B (corner arcs)")
    features["arcs.vertex"] = only_at(step)
    features["points.vertex"] = from_step(step)
    step = len(steps)
    steps.append("Connect all intersection points with smooth curve to form complete ellipse")
    features[CURVE_FEATURE] = from_step(step)
    features[CURVE_LABEL_FEATURE] = from_step(step)
    return steps, features


def build_arc_circle_triangle(params: ConstructionParameters, config: EngineConfig) -> ConstructionSketch:
    sketch = ConstructionSketch()
    frame = _baseline_frame(params)
    try:
        apex = trilaterate(frame["A"], frame["B"], params.mm(params.radius_ac), params.mm(params.radius_bc))
    except Unsatisfiable as exc:
        sketch.notes.append(f"point C: {exc}")
        logger.warning("Point C abandoned: %s", exc)
    else:
        sketch.add_point("triangle", "C", apex)
        sketch.segments.append(ConstructionSegment("triangle", frame["A"], apex))
        sketch.segments.append(ConstructionSegment("triangle", apex, frame["B"]))
    _build_baseline_arcs(params, config, sketch, mirrored=False)
    return sketch


def _mirrored_layout(params: ConstructionParameters) -> Layout:
    n = params.division_count
    steps = [
        f"Construct horizontal line AB of {_fmt_mm(params.baseline_length)}",
        f"Draw perpendicular from midpoint O of AB: {_fmt_mm(params.perpendicular_length)} each way",
        f"Extend AB by {_fmt_mm(params.extension_length)} at both ends to mark A' and B'",
        f"Mark {n} points at {_fmt_mm(params.division_spacing)} intervals from A towards O "
        f"and mirror them from B towards O",
    ]
    features: Dict[FeatureId, FeatureRule] = {
        "baseline": from_step(0),
        "axis.minor": from_step(1),
        "extensions": from_step(2),
        "divisions": from_step(3),
    }
    for idx in range(1, n + 1):
        step = len(steps)
        steps.append(
            f"Compass: radii A'-{idx} and B'-{idx} swung from A and from B, "
            f"crossing in all four quadrants"
        )
        features[f"arcs.{idx}"] = only_at(step)
        features[f"points.division.{idx}"] = from_step(step)
    step = len(steps)
    steps.append("Radius A'-O from A and B'-O from B to cut the minor axis")
    features["arcs.minor"] = only_at(step)
    features["points.minor"] = from_step(step)
    step = len(steps)
    steps.append("Radius A'-A and B'-A (and their mirrors) to locate the vertices A' and B'")
    features["arcs.vertex"] = only_at(step)
    features["points.vertex"] = from_step(step)
    step = len(steps)
    steps.append("Connect all intersection points with smooth curve to form complete ellipse")
    features[CURVE_FEATURE] = from_step(step)
    features[CURVE_LABEL_FEATURE] = from_step(step)
    return steps, features


def build_arc_circle_mirrored(params: ConstructionParameters, config: EngineConfig) -> ConstructionSketch:
    sketch = ConstructionSketch()
    _build_baseline_arcs(params, config, sketch, mirrored=True)
    return sketch


# ---------------------------------------------------------------------------
# Arc of circle from the major and minor axes
# ---------------------------------------------------------------------------


def _axes_layout(params: ConstructionParameters) -> Layout:
    n = params.division_count
    steps = [
        f"Draw major axis AB of {_fmt_mm(params.major_axis)} and mark its midpoint O",
        f"Draw minor axis CD of {_fmt_mm(params.minor_axis)} perpendicular to AB through O",
        "With centre C and radius AO, cut AB at the foci F1 and F2",
        f"Divide F1-O into {n + 1} equal parts, numbering the points 1 to {n}",
    ]
    features: Dict[FeatureId, FeatureRule] = {
        "axis.major": from_step(0),
        "axis.minor": from_step(1),
        "arcs.foci": only_at(2),
        "foci": from_step(2),
        "divisions": from_step(3),
    }
    for idx in range(1, n + 1):
        step = len(steps)
        steps.append(
            f"Radii A-{idx} and B-{idx}: swing both from F1 and from F2 to cut four points"
        )
        features[f"arcs.{idx}"] = only_at(step)
        features[f"points.division.{idx}"] = from_step(step)
    step = len(steps)
    steps.append("The axis endpoints A, B, C and D also lie on the ellipse")
    features["points.axes"] = from_step(step)
    step = len(steps)
    steps.append("Join all points with a smooth curve to complete the ellipse")
    features[CURVE_FEATURE] = from_step(step)
    features[CURVE_LABEL_FEATURE] = from_step(step)
    return steps, features


def build_arc_circle_axes(params: ConstructionParameters, config: EngineConfig) -> ConstructionSketch:
    sketch = ConstructionSketch()
    semi_major = params.mm(params.major_axis) / 2.0
    semi_minor = params.mm(params.minor_axis) / 2.0
    span = math.radians(config.arc_span_degrees)

    o = sketch.add_point("axis.major", "O", Point2D(0.0, 0.0))
    a = sketch.add_point("axis.major", "A", Point2D(-semi_major, 0.0))
    b = sketch.add_point("axis.major", "B", Point2D(semi_major, 0.0))
    sketch.segments.append(ConstructionSegment("axis.major", a, b))
    c = sketch.add_point("axis.minor", "C", Point2D(0.0, semi_minor))
    d = sketch.add_point("axis.minor", "D", Point2D(0.0, -semi_minor))
    sketch.segments.append(ConstructionSegment("axis.minor", c, d))
    sketch.center = o

    foci = circle_line_intersections(c, semi_major, a, b - a)
    if len(foci) != 2:
        sketch.notes.append("foci: circle about C does not cut the major axis twice")
        logger.warning("Foci construction failed for %s", params)
        return sketch
    f1, f2 = foci
    sketch.add_point("foci", "F1", f1)
    sketch.add_point("foci", "F2", f2)
    _add_arcs(sketch, "arcs.foci", c, semi_major, foci, span)

    n = params.division_count
    for idx in range(1, n + 1):
        point = f1 + (o - f1) * (idx / (n + 1))
        sketch.add_point("divisions", str(idx), point)
        near = a.distance_to(point)
        far = b.distance_to(point)
        _arc_pair(sketch, f"arcs.{idx}", f"points.division.{idx}", f1, near, f2, far, span)
        _arc_pair(sketch, f"arcs.{idx}", f"points.division.{idx}", f1, far, f2, near, span)

    sketch.add_ellipse_points("points.axes", [a, c, b, d])
    _label_above(sketch, o, semi_minor, "ELLIPSE", SMOOTH_CURVE_NOTE)
    return sketch


METHOD_DEFINITIONS: Dict[Method, MethodDefinition] = {
    Method.FOCUS_DIRECTRIX: MethodDefinition(
        Method.FOCUS_DIRECTRIX,
        "Focus and Directrix Method",
        _focus_directrix_layout,
        build_focus_directrix,
    ),
    Method.ARC_CIRCLE_FROM_AXES: MethodDefinition(
        Method.ARC_CIRCLE_FROM_AXES,
        "Arc of Circle Method (from axes)",
        _axes_layout,
        build_arc_circle_axes,
    ),
    Method.ARC_CIRCLE_FROM_TRIANGLE: MethodDefinition(
        Method.ARC_CIRCLE_FROM_TRIANGLE,
        "Arc of Circle Method (triangle ABC)",
        _triangle_layout,
        build_arc_circle_triangle,
    ),
    Method.ARC_CIRCLE_MIRRORED: MethodDefinition(
        Method.ARC_CIRCLE_MIRRORED,
        "Arc of Circle Method (mirrored divisions)",
        _mirrored_layout,
        build_arc_circle_mirrored,
    ),
}


__all__ = [
    "CURVE_FEATURE",
    "CURVE_LABEL_FEATURE",
    "METHOD_DEFINITIONS",
    "SMOOTH_CURVE_NOTE",
    "MethodDefinition",
    "build_arc_circle_axes",
    "build_arc_circle_mirrored",
    "build_arc_circle_triangle",
    "build_focus_directrix",
]
