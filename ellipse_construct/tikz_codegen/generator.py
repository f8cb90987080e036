"""TikZ renderer for engine draw plans."""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Sequence, Tuple

from .utils import format_point_label, latex_escape_text
from ..drawplan import ArcOp, ClosedCurveOp, DrawPlan, PointOp, SegmentOp, Style, TextOp
from ..types import Point2D


TARGET_SPAN_CM = 12.0
DOT_RADIUS_PT = 1.4
PT_PER_DISPLAY_RADIUS = 0.45

ROLE_STYLES: Dict[str, str] = {
    "construction": "construction",
    "guide": "guide",
    "ray": "ray",
    "arc": "arc",
    "curve": "curve",
}

standalone_tpl = r"""\documentclass[border=4pt]{standalone}
\usepackage[utf8]{inputenc}
\usepackage[T1]{fontenc}
\usepackage{tikz}
\tikzset{
  ec/line width/.store in=\ecLW,   ec/line width=0.8pt,
  ec/aux width/.store in=\ecLWaux, ec/aux width=0.4pt,
  construction/.style={line width=\ecLW},
  guide/.style={line width=\ecLWaux, dash pattern=on 3pt off 2pt},
  ray/.style={line width=\ecLWaux},
  arc/.style={line width=\ecLWaux, dash pattern=on 2pt off 2pt},
  curve/.style={line width=1.4pt},
  ptlabel/.style={font=\footnotesize, inner sep=1pt},
  textlabel/.style={font=\small, inner sep=1pt},
}
\begin{document}
\begin{minipage}[t]{%scm}
%s
%s
\end{minipage}
\end{document}
"""


def generate_tikz_document(
    draw_plan: DrawPlan,
    *,
    step_labels: Optional[Sequence[str]] = None,
    normalize: bool = True,
) -> str:
    """Render a standalone document; ``step_labels`` adds a caption for the current step."""

    header = "\\noindent\\textbf{" + latex_escape_text(draw_plan.title) + "}\\par\\vspace{4pt}\n"
    if step_labels and not draw_plan.reveal_all and 0 <= draw_plan.step_index < len(step_labels):
        header += (
            "\\noindent Step "
            + str(draw_plan.step_index + 1)
            + ": "
            + latex_escape_text(step_labels[draw_plan.step_index])
            + "\\par\\vspace{4pt}\n"
        )
    tikz_code = generate_tikz_code(draw_plan, normalize=normalize)
    width = _format_float(TARGET_SPAN_CM + 1.0)
    return standalone_tpl % (width, header, tikz_code)


def generate_tikz_code(draw_plan: DrawPlan, *, normalize: bool = True) -> str:
    """Emit a ``tikzpicture`` containing every primitive of ``draw_plan`` in order."""

    if not isinstance(draw_plan, DrawPlan):
        raise TypeError("draw_plan must be an instance of DrawPlan")
    origin, factor = _coordinate_transform(draw_plan, normalize=normalize)

    def pt(p: Point2D) -> str:
        return f"({_format_float((p.x - origin.x) * factor)}, {_format_float((p.y - origin.y) * factor)})"

    colors = _collect_colors(draw_plan)
    lines: List[str] = ["\\begin{tikzpicture}"]
    for hex_code, name in colors.items():
        lines.append(f"  \\definecolor{{{name}}}{{HTML}}{{{hex_code}}}")
    if colors:
        lines.append("")

    for op in draw_plan.ops:
        color = colors[_hex(op.style)]
        if isinstance(op, SegmentOp):
            lines.append(f"  \\draw[{_stroke(op.style, color)}] {pt(op.start)} -- {pt(op.end)};")
        elif isinstance(op, ArcOp):
            start = math.degrees(op.start_angle)
            end = math.degrees(op.end_angle)
            radius = _format_float(op.radius * factor)
            lines.append(
                "  \\draw[{style}] {center} ++({s}:{r}) arc[start angle={s}, end angle={e}, radius={r}];".format(
                    style=_stroke(op.style, color),
                    center=pt(op.center),
                    s=_format_float(start),
                    e=_format_float(end),
                    r=radius,
                )
            )
        elif isinstance(op, ClosedCurveOp):
            lines.append(f"  \\draw[{_stroke(op.style, color)}] {_curve_path(op, pt)};")
        elif isinstance(op, PointOp):
            radius_pt = max(DOT_RADIUS_PT, op.style.radius * PT_PER_DISPLAY_RADIUS)
            lines.append(f"  \\fill[{color}] {pt(op.position)} circle ({_format_float(radius_pt)}pt);")
            if op.label:
                anchor = _label_anchor(op.position, origin)
                lines.append(
                    f"  \\node[ptlabel, {anchor}, text={color}] at {pt(op.position)} "
                    f"{{{format_point_label(op.label)}}};"
                )
        elif isinstance(op, TextOp):
            weight = ", font=\\small\\bfseries" if op.style.bold else ""
            lines.append(
                f"  \\node[textlabel, text={color}{weight}] at {pt(op.position)} "
                f"{{{latex_escape_text(op.text)}}};"
            )
    lines.append("\\end{tikzpicture}")
    return "\n".join(lines)


def _coordinate_transform(draw_plan: DrawPlan, *, normalize: bool) -> Tuple[Point2D, float]:
    min_x, min_y, max_x, max_y = draw_plan.bounds()
    if not normalize:
        return Point2D(0.0, 0.0), 1.0
    span = max(max_x - min_x, max_y - min_y, 1e-9)
    center = Point2D(0.5 * (min_x + max_x), 0.5 * (min_y + max_y))
    return center, TARGET_SPAN_CM / span


def _curve_path(op: ClosedCurveOp, pt) -> str:
    parts = [pt(op.segments[0].start)]
    last = len(op.segments) - 1
    for idx, seg in enumerate(op.segments):
        target = "cycle" if idx == last else pt(seg.end)
        parts.append(f".. controls {pt(seg.control1)} and {pt(seg.control2)} .. {target}")
    return " ".join(parts)


def _stroke(style: Style, color: str) -> str:
    tokens = [ROLE_STYLES.get(style.role, "construction"), f"draw={color}"]
    if style.dashed and style.role not in ("guide", "arc"):
        tokens.append("dashed")
    return ", ".join(tokens)


def _hex(style: Style) -> str:
    return style.color.lstrip("#").upper()


def _collect_colors(draw_plan: DrawPlan) -> Dict[str, str]:
    colors: Dict[str, str] = {}
    for op in draw_plan.ops:
        code = _hex(op.style)
        if code not in colors:
            colors[code] = f"ec{len(colors)}"
    return colors


def _label_anchor(position: Point2D, origin: Point2D) -> str:
    dx = position.x - origin.x
    dy = position.y - origin.y
    vertical = "above" if dy >= 0 else "below"
    if abs(dx) < 1e-9:
        return vertical
    return f"{vertical} {'right' if dx > 0 else 'left'}"


def _format_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite float for TikZ output")
    formatted = f"{value:.4f}"
    formatted = formatted.rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted


__all__ = ["generate_tikz_code", "generate_tikz_document", "latex_escape_text"]
