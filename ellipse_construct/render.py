"""Matplotlib preview of draw plans."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Union

import matplotlib.patheffects as pe
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Arc, Circle, PathPatch
from matplotlib.path import Path as MplPath

from .drawplan import ArcOp, ClosedCurveOp, DrawPlan, PointOp, SegmentOp, TextOp
from .types import Point2D

logger = logging.getLogger(__name__)

DPI = 150
BACKGROUND = "#ffffff"
LABEL_OFFSET = 8.0


def _curve_path(op: ClosedCurveOp) -> MplPath:
    vertices = [op.segments[0].start.as_tuple()]
    codes = [MplPath.MOVETO]
    for seg in op.segments:
        vertices.extend([seg.control1.as_tuple(), seg.control2.as_tuple(), seg.end.as_tuple()])
        codes.extend([MplPath.CURVE4] * 3)
    vertices.append(vertices[0])
    codes.append(MplPath.CLOSEPOLY)
    return MplPath(vertices, codes)


def _label_offset(position: Point2D, center: Point2D) -> Point2D:
    direction = position - center
    norm = direction.norm()
    if norm <= 1e-9:
        return Point2D(0.0, LABEL_OFFSET)
    return direction * (LABEL_OFFSET / norm)


def render_draw_plan(draw_plan: DrawPlan, ax: Optional[Axes] = None) -> Axes:
    """Draw every primitive of ``draw_plan`` onto ``ax`` (a new figure when omitted)."""

    if ax is None:
        fig = Figure(figsize=(10, 7), facecolor=BACKGROUND)
        ax = fig.add_subplot(1, 1, 1)
    min_x, min_y, max_x, max_y = draw_plan.bounds()
    center = Point2D(0.5 * (min_x + max_x), 0.5 * (min_y + max_y))
    stroke = [pe.withStroke(linewidth=3, foreground=BACKGROUND)]

    for op in draw_plan.ops:
        style = op.style
        linestyle = "--" if style.dashed else "-"
        if isinstance(op, SegmentOp):
            ax.plot(
                [op.start.x, op.end.x],
                [op.start.y, op.end.y],
                color=style.color,
                linewidth=style.line_width,
                linestyle=linestyle,
            )
        elif isinstance(op, ArcOp):
            ax.add_patch(
                Arc(
                    op.center.as_tuple(),
                    2.0 * op.radius,
                    2.0 * op.radius,
                    theta1=math.degrees(op.start_angle),
                    theta2=math.degrees(op.end_angle),
                    color=style.color,
                    linewidth=style.line_width,
                    linestyle=linestyle,
                )
            )
        elif isinstance(op, ClosedCurveOp):
            ax.add_patch(
                PathPatch(_curve_path(op), facecolor="none", edgecolor=style.color, linewidth=style.line_width)
            )
        elif isinstance(op, PointOp):
            ax.add_patch(Circle(op.position.as_tuple(), style.radius, color=style.color, zorder=3))
            if op.label:
                at = op.position + _label_offset(op.position, center) * 1.6
                ax.text(
                    at.x, at.y, op.label,
                    color=style.color,
                    fontsize=style.font_size * 0.8,
                    ha="center",
                    va="center",
                    path_effects=stroke,
                    zorder=4,
                )
        elif isinstance(op, TextOp):
            ax.text(
                op.position.x, op.position.y, op.text,
                color=style.color,
                fontsize=style.font_size * 0.8,
                fontweight="bold" if style.bold else "normal",
                ha="center",
                va="center",
                path_effects=stroke,
                zorder=4,
            )

    pad = 0.06 * max(max_x - min_x, max_y - min_y, 1.0)
    ax.set_xlim(min_x - pad, max_x + pad)
    ax.set_ylim(min_y - pad, max_y + pad)
    ax.set_aspect("equal")
    ax.set_axis_off()
    ax.set_title(draw_plan.title)
    return ax


def save_figure(draw_plan: DrawPlan, path: Union[str, Path], *, dpi: int = DPI) -> Path:
    """Render ``draw_plan`` to an image file and return its path."""

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    ax = render_draw_plan(draw_plan)
    ax.figure.savefig(out, dpi=dpi, bbox_inches="tight", facecolor=BACKGROUND, pad_inches=0.2)
    logger.info("Wrote preview to %s", out)
    return out


__all__ = ["render_draw_plan", "save_figure"]
