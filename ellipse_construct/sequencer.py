"""Step-reveal state machine with a cancellable auto-advance timer.

The sequencer never reads a clock itself.  It asks a *scheduler* for a
one-shot callback via ``call_later(delay, callback)`` and keeps the
returned handle so it can ``cancel()`` it; an :mod:`asyncio` event loop
fits this contract as-is.  Without an injected scheduler the loop running
at each ``play`` is looked up afresh, never remembered.  Each tick
schedules the next one, so at most one handle is ever pending.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol

from .config import get_engine_config

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> Any: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class Mode(enum.Enum):
    IDLE = "idle"
    SHOWING = "showing"
    PLAYING = "playing"


@dataclass(frozen=True)
class SequencerState:
    mode: Mode
    step_index: int = 0

    @property
    def stepping(self) -> bool:
        return self.mode is not Mode.IDLE

    def __str__(self) -> str:
        if self.mode is Mode.IDLE:
            return "Idle"
        return f"{self.mode.value.capitalize()}({self.step_index})"


IDLE = SequencerState(Mode.IDLE)

Listener = Callable[[SequencerState], None]


class StepSequencer:
    """Tracks which construction step is revealed.

    ``Idle`` shows the whole construction; ``Showing(i)`` is static and
    navigable; ``Playing(i)`` advances every ``interval`` until the last
    step, then settles in ``Showing(step_count - 1)``.
    """

    def __init__(
        self,
        step_count: int,
        scheduler: Optional[Scheduler] = None,
        *,
        interval: Optional[float] = None,
    ) -> None:
        if step_count < 1:
            raise ValueError("step_count must be positive")
        self._step_count = step_count
        self._scheduler = scheduler
        self._interval = get_engine_config().tick_interval if interval is None else interval
        self._state = IDLE
        self._pending: Optional[TimerHandle] = None
        self._listeners: List[Listener] = []

    @property
    def state(self) -> SequencerState:
        return self._state

    @property
    def step_count(self) -> int:
        return self._step_count

    @property
    def has_pending_tick(self) -> bool:
        return self._pending is not None

    @property
    def reveal_all(self) -> bool:
        return self._state.mode is Mode.IDLE

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -- events ---------------------------------------------------------

    def enable_stepping(self) -> SequencerState:
        self._cancel_tick()
        return self._transition(SequencerState(Mode.SHOWING, 0))

    def disable_stepping(self) -> SequencerState:
        self._cancel_tick()
        return self._transition(IDLE)

    def toggle_stepping(self) -> SequencerState:
        if self._state.stepping:
            return self.disable_stepping()
        return self.enable_stepping()

    def next(self) -> SequencerState:
        return self._navigate(+1)

    def prev(self) -> SequencerState:
        return self._navigate(-1)

    def play(self) -> SequencerState:
        """Start auto-advance from step 0, or pause when already playing."""

        mode = self._state.mode
        if mode is Mode.PLAYING:
            self._cancel_tick()
            return self._transition(SequencerState(Mode.SHOWING, self._state.step_index))
        if mode is Mode.IDLE:
            logger.debug("play ignored while stepping is disabled")
            return self._state
        self._cancel_tick()
        if self._step_count == 1:
            return self._transition(SequencerState(Mode.SHOWING, 0))
        # Tick is pending before listeners see Playing.
        self._schedule_tick()
        return self._transition(SequencerState(Mode.PLAYING, 0))

    def reset(self) -> SequencerState:
        self._cancel_tick()
        return self._transition(SequencerState(Mode.SHOWING, 0))

    # -- internals ------------------------------------------------------

    def _navigate(self, delta: int) -> SequencerState:
        if self._state.mode is not Mode.SHOWING:
            logger.debug("Navigation ignored in state %s", self._state)
            return self._state
        target = min(max(self._state.step_index + delta, 0), self._step_count - 1)
        if target == self._state.step_index:
            return self._state
        return self._transition(SequencerState(Mode.SHOWING, target))

    def _tick(self) -> None:
        self._pending = None
        if self._state.mode is not Mode.PLAYING:
            logger.debug("Stale tick ignored in state %s", self._state)
            return
        target = self._state.step_index + 1
        if target >= self._step_count - 1:
            self._transition(SequencerState(Mode.SHOWING, self._step_count - 1))
            return
        self._schedule_tick()
        self._transition(SequencerState(Mode.PLAYING, target))

    def _current_scheduler(self) -> Scheduler:
        if self._scheduler is not None:
            return self._scheduler
        return asyncio.get_running_loop()

    def _schedule_tick(self) -> None:
        self._cancel_tick()
        self._pending = self._current_scheduler().call_later(self._interval, self._tick)

    def _cancel_tick(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _transition(self, state: SequencerState) -> SequencerState:
        if state != self._state:
            logger.debug("Sequencer %s -> %s", self._state, state)
            self._state = state
            for listener in list(self._listeners):
                listener(state)
        return self._state


__all__ = [
    "IDLE",
    "Mode",
    "Scheduler",
    "SequencerState",
    "StepSequencer",
    "TimerHandle",
]
