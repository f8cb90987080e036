import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ellipse_construct import (
    ConfigurationError,
    ConstructionParameters,
    ConstructionPlan,
    Method,
    build_draw_plan,
    generate_tikz_document,
    run_pipeline,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _build_plan(args: argparse.Namespace) -> ConstructionPlan:
    method = Method.parse(args.method)
    params = ConstructionParameters.for_method(method)
    overrides = {}
    if args.scale is not None:
        overrides["scale"] = args.scale
    if args.eccentricity is not None:
        overrides["eccentricity"] = args.eccentricity
    if overrides:
        params = dataclasses.replace(params, **overrides)
    return ConstructionPlan(method, params)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Render compass constructions of an ellipse")
    parser.add_argument(
        "method",
        nargs="?",
        help="Construction method (see --list-methods)",
    )
    parser.add_argument(
        "--list-methods",
        action="store_true",
        help="List the available construction methods and exit",
    )
    parser.add_argument(
        "--list-steps",
        action="store_true",
        help="Print the numbered step list of the method",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--step",
        type=int,
        help="Zero-based step to reveal (default: the last step)",
    )
    mode.add_argument(
        "--all",
        action="store_true",
        help="Reveal every feature, including the compass arcs of earlier steps",
    )
    parser.add_argument("--scale", type=float, help="Display units per millimetre")
    parser.add_argument("--eccentricity", type=float, help="Eccentricity (focus-directrix only)")
    parser.add_argument(
        "--tikz-output-path",
        help="Write a standalone TikZ document of the draw plan to the given path",
    )
    parser.add_argument(
        "--png-output-path",
        help="Write a matplotlib preview image to the given path",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    if args.list_methods:
        for method in Method:
            print(method.value)
        return
    if not args.method:
        parser.error("a construction method is required")

    try:
        plan = _build_plan(args)
    except (ConfigurationError, ValueError) as exc:
        logger.error("Invalid construction: %s", exc)
        raise SystemExit(2)

    logger.info("Built %s with %d step(s)", plan.title, plan.step_count)

    print(f"Method: {plan.method.value}")
    print(f"Title: {plan.title}")
    if args.list_steps:
        print("Steps:")
        for step in plan.steps:
            print(f"  {step.index + 1}. {step.label}")

    step_index = plan.clamp_step(args.step) if args.step is not None else plan.step_count - 1
    result = run_pipeline(plan)
    draw_plan = build_draw_plan(plan, step_index, args.all, result=result)

    print("Named points:")
    for label, named in result.sketch.named_points.items():
        print(f"  {label}: ({named.position.x:.3f}, {named.position.y:.3f})")
    print(f"Raw points: {len(result.raw_points)}")
    print(f"Contour points: {len(result.contour)}")
    print(f"Curve segments: {len(result.segments)}")
    print(f"Draw ops: {len(draw_plan.ops)}")
    print("Notes:")
    if draw_plan.notes:
        for note in draw_plan.notes:
            print(f"  - {note}")
    else:
        print("  (none)")

    if args.tikz_output_path:
        output_path = Path(args.tikz_output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing TikZ document to %s", output_path)
        document = generate_tikz_document(
            draw_plan,
            step_labels=[step.label for step in plan.steps],
        )
        output_path.write_text(document, encoding="utf-8")
        print(f"TikZ document written to {output_path}")

    if args.png_output_path:
        from ellipse_construct.render import save_figure

        written = save_figure(draw_plan, args.png_output_path)
        print(f"Preview written to {written}")


if __name__ == "__main__":
    main(sys.argv[1:])
