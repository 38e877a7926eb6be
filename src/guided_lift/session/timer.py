"""Rest countdown and session clock.

Both timers are driven by a single asyncio task each. Starting a timer
always cancels the task it owned before, so at most one countdown loop
and one clock loop are alive per owner.

The countdown keeps a monotonic deadline while running, so time spent
with the process suspended is caught up on the next step or ``sync()``.
"""

import asyncio
import logging
import math
import time
from typing import Callable

logger = logging.getLogger(__name__)


def _cancel_task(task: asyncio.Task | None) -> None:
    if task is None or task.done():
        return
    try:
        current = asyncio.current_task()
    except RuntimeError:
        current = None
    # Never cancel ourselves from inside a tick callback
    if task is not current:
        task.cancel()


class CountdownTimer:
    """Counts down whole seconds and reports ticks and completion.

    Args:
        on_complete: Called once when the countdown reaches zero or is skipped
        on_tick: Called with the remaining seconds after each step above zero
        interval: Seconds between steps
        clock: Monotonic time source for the deadline
    """

    def __init__(
        self,
        on_complete: Callable[[], None] | None = None,
        on_tick: Callable[[int], None] | None = None,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.on_complete = on_complete
        self.on_tick = on_tick
        self.interval = interval
        self.time_remaining = 0
        self.total_time = 0
        self.is_running = False
        self._clock = clock
        self._deadline: float | None = None
        self._task: asyncio.Task | None = None

    @property
    def progress(self) -> float:
        """Fraction of the countdown already elapsed (0-1)."""
        if self.total_time <= 0:
            return 0.0
        return (self.total_time - self.time_remaining) / self.total_time

    def start(self, duration: int) -> None:
        """Start a new countdown, replacing any running one."""
        if duration < 0:
            raise ValueError("Countdown duration cannot be negative")

        self._stop()
        self.total_time = duration
        self.time_remaining = duration

        if duration == 0:
            self._fire_complete()
            return

        self._run()

    def tick(self) -> None:
        """Advance the countdown by one step."""
        if self.time_remaining <= 0:
            return
        if self._deadline is not None:
            self._deadline -= self.interval
        self._advance_to(self.time_remaining - 1)

    def sync(self) -> None:
        """Catch the remaining time up with the deadline.

        Missed steps are collapsed: ``on_tick`` fires once with the new
        remaining time, or ``on_complete`` fires if the deadline has passed.
        """
        if self._deadline is None or self.time_remaining <= 0:
            return
        # Rounding absorbs float noise right at a step boundary
        left = math.ceil(round((self._deadline - self._clock()) / self.interval, 6))
        if left < self.time_remaining:
            self._advance_to(max(left, 0))

    def pause(self) -> None:
        """Stop counting, keeping the remaining time."""
        self._stop()

    def resume(self) -> None:
        """Continue a paused countdown from where it stopped."""
        if self.time_remaining > 0 and not self.is_running:
            self._run()

    def reset(self) -> None:
        """Stop counting and restore the last started duration."""
        self._stop()
        self.time_remaining = self.total_time

    def skip(self) -> None:
        """Finish the countdown now, as if the time had run out."""
        self._stop()
        self.time_remaining = 0
        self._fire_complete()

    def cancel(self) -> None:
        """Abandon the countdown without reporting completion."""
        self._stop()
        self.time_remaining = 0

    def _run(self) -> None:
        self.is_running = True
        self._deadline = self._clock() + self.time_remaining * self.interval
        self._task = asyncio.get_running_loop().create_task(self._loop())

    def _stop(self) -> None:
        self.is_running = False
        self._deadline = None
        task, self._task = self._task, None
        _cancel_task(task)

    def _advance_to(self, remaining: int) -> None:
        self.time_remaining = remaining
        if remaining > 0:
            if self.on_tick is not None:
                self.on_tick(remaining)
            return

        self._stop()
        self._fire_complete()

    def _fire_complete(self) -> None:
        if self.on_complete is not None:
            self.on_complete()

    async def _loop(self) -> None:
        # A callback may start a fresh countdown; the loop then belongs to
        # a task that is no longer ours and must exit.
        me = asyncio.current_task()
        while self._task is me:
            next_step = self._deadline - (self.time_remaining - 1) * self.interval
            await asyncio.sleep(max(0.0, next_step - self._clock()))
            if self._task is not me:
                break
            try:
                self.sync()
            except Exception:
                logger.exception("Countdown callback failed")


class SessionClock:
    """Accumulates elapsed session time, excluding paused stretches.

    Args:
        on_tick: Called with whole elapsed seconds once per interval
        interval: Seconds between ticks
        clock: Monotonic time source
    """

    def __init__(
        self,
        on_tick: Callable[[int], None] | None = None,
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.on_tick = on_tick
        self.interval = interval
        self._clock = clock
        self._accumulated = 0.0
        self._segment_start: float | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._segment_start is not None

    @property
    def elapsed(self) -> int:
        """Elapsed seconds, rounded down."""
        total = self._accumulated
        if self._segment_start is not None:
            total += self._clock() - self._segment_start
        return int(total)

    def start(self) -> None:
        """Reset to zero and start counting."""
        self.stop()
        self._accumulated = 0.0
        self.resume()

    def pause(self) -> None:
        """Freeze the elapsed time."""
        if self._segment_start is not None:
            self._accumulated += self._clock() - self._segment_start
            self._segment_start = None
        task, self._task = self._task, None
        _cancel_task(task)

    def resume(self) -> None:
        """Continue counting after a pause."""
        if self._segment_start is not None:
            return
        self._segment_start = self._clock()
        if self.on_tick is not None:
            self._task = asyncio.get_running_loop().create_task(self._loop())

    def stop(self) -> None:
        """Stop counting for good (the elapsed value is kept)."""
        self.pause()

    async def _loop(self) -> None:
        me = asyncio.current_task()
        while self._task is me:
            await asyncio.sleep(self.interval)
            if self._task is not me:
                break
            try:
                self.on_tick(self.elapsed)
            except Exception:
                logger.exception("Session clock callback failed")
