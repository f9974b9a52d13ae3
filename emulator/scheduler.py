"""
Single-threaded task scheduler with an injectable clock.

The grading session never sleeps itself: it hands delayed work (the
simulated compile phase, the post-success notification) to a Scheduler.
The host drives the scheduler, either in real time with MonotonicClock
or deterministically in tests with VirtualClock.

Tasks are one-shot and cannot be cancelled. They run in due-time order,
ties broken by scheduling order, on whichever thread drives the scheduler.
"""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class Clock(Protocol):
    """Protocol for time sources used by the Scheduler."""

    def now(self) -> float:
        """Current time in seconds."""
        ...


class MonotonicClock:
    """Wall-clock time source."""

    def now(self) -> float:
        return time.monotonic()


class VirtualClock:
    """Manually advanced time source for deterministic tests."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"Cannot move a clock backwards ({seconds}s)")
        self._now += seconds

    def advance_to(self, timestamp: float) -> None:
        if timestamp > self._now:
            self._now = timestamp


@dataclass(order=True)
class ScheduledTask:
    """A one-shot callback due at a point in time."""

    due: float
    sequence: int
    callback: Callable[[], None] = field(compare=False)
    name: str = field(default="", compare=False)


class Scheduler:
    """Cooperative scheduler for delayed, one-shot callbacks.

    Example:
        clock = VirtualClock()
        scheduler = Scheduler(clock)
        scheduler.schedule(1.2, lambda: print("compiled"), name="compile")
        scheduler.advance(1.2)  # prints "compiled"
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or MonotonicClock()
        self._queue: List[ScheduledTask] = []
        self._sequence = itertools.count()

    @property
    def pending(self) -> int:
        """Number of tasks not yet run."""
        return len(self._queue)

    def schedule(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """Schedule `callback` to run `delay` seconds from now."""
        if delay < 0:
            raise ValueError(f"Delay must be non-negative, got {delay}")
        task = ScheduledTask(self.clock.now() + delay, next(self._sequence), callback, name)
        heapq.heappush(self._queue, task)
        logger.debug(f"Scheduled {name or 'task'} in {delay:.2f}s")
        return task

    def next_due(self) -> Optional[float]:
        """Due time of the earliest pending task, or None."""
        return self._queue[0].due if self._queue else None

    def run_due(self) -> int:
        """Run every task that is due now.

        Returns:
            Number of tasks run
        """
        ran = 0
        while self._queue and self._queue[0].due <= self.clock.now():
            self._run(heapq.heappop(self._queue))
            ran += 1
        return ran

    def advance(self, seconds: float) -> int:
        """Move a VirtualClock forward, running tasks as their time comes.

        The clock steps to each task's due time before running it, so
        tasks scheduled by earlier callbacks run too if they fall inside
        the window.

        Returns:
            Number of tasks run
        """
        if not isinstance(self.clock, VirtualClock):
            raise TypeError("advance() requires a VirtualClock")

        target = self.clock.now() + seconds
        ran = 0
        while self._queue and self._queue[0].due <= target:
            task = heapq.heappop(self._queue)
            self.clock.advance_to(task.due)
            self._run(task)
            ran += 1
        self.clock.advance_to(target)
        return ran

    def run_until_idle(self, sleep: Callable[[float], None] = time.sleep) -> int:
        """Drive the scheduler until no task is pending.

        With a MonotonicClock this sleeps between tasks; with a
        VirtualClock time jumps straight to the next due task.

        Returns:
            Number of tasks run
        """
        ran = 0
        while self._queue:
            ran += self.run_next(sleep)
        return ran

    def run_next(self, sleep: Callable[[float], None] = time.sleep) -> int:
        """Wait for the earliest pending task, then run everything due.

        Returns:
            Number of tasks run (0 if nothing was pending)
        """
        if not self._queue:
            return 0

        wait = self._queue[0].due - self.clock.now()
        if wait > 0:
            if isinstance(self.clock, VirtualClock):
                self.clock.advance_to(self._queue[0].due)
            else:
                sleep(wait)
        return self.run_due()

    def _run(self, task: ScheduledTask) -> None:
        logger.debug(f"Running {task.name or 'task'} (due {task.due:.2f})")
        task.callback()
