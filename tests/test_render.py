import matplotlib

matplotlib.use("Agg")

from matplotlib.patches import Arc, Circle, PathPatch  # noqa: E402

from ellipse_construct import ArcOp, ClosedCurveOp, ConstructionPlan, Method, PointOp, SegmentOp, build_draw_plan  # noqa: E402
from ellipse_construct.render import render_draw_plan, save_figure  # noqa: E402


def test_render_draw_plan_adds_one_artist_per_primitive():
    draw = build_draw_plan(ConstructionPlan(Method.ARC_CIRCLE_FROM_AXES), reveal_all=True)

    ax = render_draw_plan(draw)

    patches = ax.patches
    assert len(ax.lines) == len(draw.of_type(SegmentOp))
    assert sum(isinstance(p, Arc) for p in patches) == len(draw.of_type(ArcOp))
    assert sum(isinstance(p, Circle) for p in patches) == len(draw.of_type(PointOp))
    assert sum(isinstance(p, PathPatch) for p in patches) == len(draw.of_type(ClosedCurveOp)) == 1
    assert ax.get_title() == draw.title


def test_render_draw_plan_reuses_given_axes():
    from matplotlib.figure import Figure

    fig = Figure()
    ax = fig.add_subplot(1, 1, 1)
    draw = build_draw_plan(ConstructionPlan(Method.FOCUS_DIRECTRIX), 0)

    assert render_draw_plan(draw, ax) is ax


def test_save_figure_writes_png(tmp_path):
    draw = build_draw_plan(ConstructionPlan(Method.ARC_CIRCLE_MIRRORED), reveal_all=True)

    written = save_figure(draw, tmp_path / "out" / "mirrored.png", dpi=40)

    assert written.exists()
    assert written.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
