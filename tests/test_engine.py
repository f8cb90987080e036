import dataclasses
import logging
import math

import pytest

from ellipse_construct import (
    ArcOp,
    ClosedCurveOp,
    ConstructionParameters,
    ConstructionPlan,
    EngineConfig,
    Method,
    PointOp,
    SegmentOp,
    TextOp,
    build_draw_plan,
    get_engine_config,
    run_pipeline,
    set_engine_config,
)


_OP_RANK = {SegmentOp: 0, ArcOp: 1, ClosedCurveOp: 2, PointOp: 3, TextOp: 4}


def _sparse_focus_plan():
    params = dataclasses.replace(
        ConstructionParameters.for_method(Method.FOCUS_DIRECTRIX),
        sample_count=4,
        search_bound=120.0,
    )
    return ConstructionPlan(Method.FOCUS_DIRECTRIX, params)


@pytest.mark.parametrize('method', list(Method))
def test_pipeline_fits_closed_curve_for_every_method(method):
    result = run_pipeline(ConstructionPlan(method))

    assert result.has_curve
    assert len(result.segments) == len(result.contour)
    assert result.segments[-1].end == result.segments[0].start


def test_pipeline_is_deterministic():
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)
    first = run_pipeline(plan)
    second = run_pipeline(plan)

    assert first.contour == second.contour
    assert first.segments == second.segments


def test_pipeline_contour_has_no_duplicates():
    result = run_pipeline(ConstructionPlan(Method.ARC_CIRCLE_MIRRORED))

    assert len(result.contour) < len(result.raw_points)
    for i, p in enumerate(result.contour):
        for q in result.contour[i + 1:]:
            assert p.distance_to(q) >= 1.0


def test_pipeline_records_missing_curve(caplog):
    with caplog.at_level(logging.WARNING, logger='ellipse_construct'):
        result = run_pipeline(_sparse_focus_plan())

    assert not result.has_curve
    assert result.contour == []
    assert len(result.raw_points) == 3
    assert any(note.startswith('curve omitted:') for note in result.notes)
    assert 'Curve omitted' in caplog.text


def test_pipeline_honours_explicit_config():
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)

    result = run_pipeline(plan, EngineConfig(min_contour_points=40))

    assert not result.has_curve


def test_engine_config_is_copied(monkeypatch):
    config = get_engine_config()
    config.dedup_epsilon = 99.0

    assert get_engine_config().dedup_epsilon == 1.0

    monkeypatch.setattr('ellipse_construct.config._ENGINE_CONFIG', EngineConfig())
    set_engine_config(EngineConfig(dedup_epsilon=2.5))
    assert get_engine_config().dedup_epsilon == 2.5


def test_draw_plan_first_step_shows_only_baseline():
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)
    draw = build_draw_plan(plan, 0)

    assert draw.features() == ['baseline']
    assert len(draw.of_type(SegmentOp)) == 1
    assert {op.label for op in draw.of_type(PointOp)} == {'A', 'B'}


def test_draw_plan_shows_only_current_compass_arcs():
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)
    draw = build_draw_plan(plan, 5)

    arcs = draw.of_type(ArcOp)
    assert arcs
    assert {op.feature for op in arcs} == {'arcs.1'}
    assert not draw.has_curve()


def test_draw_plan_last_step_has_curve_and_title():
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)
    draw = build_draw_plan(plan, plan.step_count - 1)

    assert draw.has_curve()
    assert not draw.of_type(ArcOp)
    assert any(op.text == 'ELLIPSE' for op in draw.of_type(TextOp))


def test_draw_plan_reveal_all_includes_every_arc():
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)
    draw = build_draw_plan(plan, 0, reveal_all=True)

    arc_features = {op.feature for op in draw.of_type(ArcOp)}
    assert arc_features == {'arcs.1', 'arcs.2', 'arcs.3', 'arcs.4', 'arcs.minor', 'arcs.vertex'}
    assert draw.has_curve()
    assert draw.reveal_all


def test_draw_plan_orders_primitives_by_layer():
    draw = build_draw_plan(ConstructionPlan(Method.ARC_CIRCLE_FROM_AXES), reveal_all=True)
    ranks = [_OP_RANK[type(op)] for op in draw.ops]

    assert ranks == sorted(ranks)


def test_draw_plan_clamps_step_index():
    plan = ConstructionPlan(Method.FOCUS_DIRECTRIX)

    assert build_draw_plan(plan, 42).step_index == plan.step_count - 1
    assert build_draw_plan(plan, -1).step_index == 0


def test_draw_plan_without_curve_keeps_points():
    plan = _sparse_focus_plan()
    draw = build_draw_plan(plan, plan.step_count - 1)

    assert not draw.has_curve()
    assert len([op for op in draw.of_type(PointOp) if op.feature == 'points.locus']) == 3
    assert not any(op.feature == 'label.curve' for op in draw.of_type(TextOp))
    assert any(note.startswith('curve omitted:') for note in draw.notes)


def test_draw_plan_bounds_are_finite():
    draw = build_draw_plan(ConstructionPlan(Method.FOCUS_DIRECTRIX), reveal_all=True)
    bounds = draw.bounds()

    assert all(math.isfinite(value) for value in bounds)
    assert bounds[0] <= 0.0 < bounds[2]


def test_draw_plan_reuses_pipeline_result(monkeypatch):
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_AXES)
    result = run_pipeline(plan)

    def _no_recompute(*args, **kwargs):
        raise AssertionError("pipeline recomputed")

    monkeypatch.setattr("ellipse_construct.engine.run_pipeline", _no_recompute)
    draw = build_draw_plan(plan, plan.step_count - 1, result=result)

    assert draw.has_curve()
    assert draw.of_type(ClosedCurveOp)[0].segments == tuple(result.segments)


@pytest.mark.parametrize(
    'method',
    [Method.ARC_CIRCLE_FROM_AXES, Method.ARC_CIRCLE_FROM_TRIANGLE, Method.ARC_CIRCLE_MIRRORED],
)
def test_arc_methods_label_curve_with_subtitle(method):
    plan = ConstructionPlan(method)
    draw = build_draw_plan(plan, plan.step_count - 1)

    labels = [op for op in draw.of_type(TextOp) if op.feature == 'label.curve']
    assert [op.text for op in labels] == ['ELLIPSE', '(Smooth curve)']
    assert labels[0].style.bold and not labels[1].style.bold
    assert labels[1].position.y < labels[0].position.y


def test_curve_subtitle_hidden_without_curve():
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)
    result = run_pipeline(plan, EngineConfig(min_contour_points=40))
    draw = build_draw_plan(plan, plan.step_count - 1, result=result)

    assert not any(op.text == '(Smooth curve)' for op in draw.of_type(TextOp))
