"""Example pipeline: build the triangle construction and inspect each step."""

from ellipse_construct import (
    ArcOp,
    ConstructionPlan,
    Method,
    build_draw_plan,
    generate_tikz_document,
    run_pipeline,
)


def main() -> None:
    plan = ConstructionPlan(Method.ARC_CIRCLE_FROM_TRIANGLE)
    print(f"{plan.title} ({plan.step_count} steps)")

    result = run_pipeline(plan)
    print("Pipeline:")
    print(f"  Named points: {sorted(result.sketch.named_points)}")
    print(f"  Raw points: {len(result.raw_points)}")
    print(f"  Contour points: {len(result.contour)}")
    print(f"  Segments: {len(result.segments)}")

    for step in plan.steps:
        draw = build_draw_plan(plan, step.index)
        arcs = len(draw.of_type(ArcOp))
        print(f"  [{step.index + 1:2d}] {step.label}")
        print(f"       ops={len(draw.ops)} arcs={arcs} curve={draw.has_curve()}")

    final = build_draw_plan(plan, reveal_all=True)
    document = generate_tikz_document(final)
    print(f"\nTikZ document: {len(document.splitlines())} lines")


if __name__ == "__main__":
    main()
