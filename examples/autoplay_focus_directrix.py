"""Example: drive the focus-directrix steps with the asyncio-backed sequencer."""

import asyncio

from ellipse_construct import ConstructionPlan, Method, StepSequencer, build_draw_plan


async def autoplay(interval: float = 0.2) -> None:
    plan = ConstructionPlan(Method.FOCUS_DIRECTRIX)
    sequencer = StepSequencer(plan.step_count, interval=interval)
    done = asyncio.Event()

    def on_change(state) -> None:
        draw = build_draw_plan(plan, state.step_index, sequencer.reveal_all)
        label = "all steps" if draw.reveal_all else plan.steps[draw.step_index].label
        print(f"{state}: {label} ({len(draw.ops)} ops)")
        if str(state) == f"Showing({plan.step_count - 1})":
            done.set()

    sequencer.subscribe(on_change)
    sequencer.enable_stepping()
    sequencer.play()
    await done.wait()
    sequencer.disable_stepping()


def main() -> None:
    asyncio.run(autoplay())


if __name__ == "__main__":
    main()
