"""Cancelable delayed tasks for pacing the shadow's turn.

After the player acts, the shadow answers after a short pause. The pause is
a scheduled task carrying a CancellationToken; the callback runs only if
the token is still live when the delay elapses. Ending an encounter cancels
the token, so a late enemy turn is discarded without touching state.

Two schedulers implement the same protocol:

* ``AsyncioScheduler`` uses ``loop.call_later`` on a running event loop.
* ``ManualScheduler`` keeps a virtual clock advanced explicitly, which
  makes turn sequencing deterministic in tests and headless simulations.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from luminari.core.logging import get_logger


logger = get_logger(__name__)


class CancellationToken:
    """One-way flag checked by a task before it applies any effect."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


@dataclass
class ScheduledTask:
    """Handle to a pending delayed callback.

    Attributes:
        name: Label used in log events.
        due_at: Scheduler time at which the callback fires.
        token: Cancellation token passed to the callback.
    """

    name: str
    due_at: float
    token: CancellationToken = field(default_factory=CancellationToken)
    _timer: asyncio.TimerHandle | None = field(default=None, repr=False)
    _done: bool = field(default=False, repr=False)

    @property
    def is_pending(self) -> bool:
        return not self._done and not self.token.is_cancelled

    def cancel(self) -> None:
        """Cancel the task; a no-op once it has run."""
        if self._done:
            return
        self.token.cancel()
        if self._timer is not None:
            self._timer.cancel()
        logger.debug("Scheduled task cancelled", task=self.name)


TaskCallback = Callable[[CancellationToken], None]


class Scheduler(Protocol):
    """Anything able to run a callback after a delay."""

    def schedule(self, delay: float, callback: TaskCallback, *, name: str = "task") -> ScheduledTask:
        """Run ``callback(token)`` after ``delay`` seconds unless cancelled."""
        ...


def _run(task: ScheduledTask, callback: TaskCallback) -> None:
    if task.token.is_cancelled:
        logger.debug("Discarding cancelled task", task=task.name)
        task._done = True
        return
    task._done = True
    callback(task.token)


# =============================================================================
# Manual (virtual clock) scheduler
# =============================================================================


class ManualScheduler:
    """Scheduler driven by an explicit virtual clock.

    Example:
        >>> scheduler = ManualScheduler()
        >>> fired = []
        >>> _ = scheduler.schedule(2.5, lambda token: fired.append(token))
        >>> scheduler.advance(2.0)
        0
        >>> scheduler.advance(0.5)
        1
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._counter = itertools.count()
        self._queue: list[tuple[float, int, ScheduledTask, TaskCallback]] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> list[ScheduledTask]:
        """Live tasks in firing order."""
        return [task for _, _, task, _ in sorted(self._queue) if task.is_pending]

    def schedule(self, delay: float, callback: TaskCallback, *, name: str = "task") -> ScheduledTask:
        task = ScheduledTask(name=name, due_at=self._now + max(0.0, delay))
        heapq.heappush(self._queue, (task.due_at, next(self._counter), task, callback))
        logger.debug("Task scheduled", task=name, due_at=task.due_at)
        return task

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire every task that comes due.

        Tasks scheduled by a firing callback also run if they fall inside
        the window.

        Returns:
            Number of callbacks actually invoked.
        """
        target = self._now + max(0.0, seconds)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due_at, _, task, callback = heapq.heappop(self._queue)
            self._now = due_at
            live = not task.token.is_cancelled
            _run(task, callback)
            fired += int(live)
        self._now = target
        return fired

    def run_all(self, *, limit: int = 1000) -> int:
        """Fire tasks until the queue is empty, jumping the clock as needed.

        Args:
            limit: Safety cap on the number of tasks processed.

        Returns:
            Number of callbacks actually invoked.
        """
        fired = 0
        processed = 0
        while self._queue and processed < limit:
            fired += self.advance(self._queue[0][0] - self._now)
            processed += 1
        return fired


# =============================================================================
# Asyncio scheduler
# =============================================================================


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop's ``call_later``."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize the scheduler.

        Args:
            loop: Loop to schedule on; the running loop when omitted.
        """
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def schedule(self, delay: float, callback: TaskCallback, *, name: str = "task") -> ScheduledTask:
        loop = self._get_loop()
        task = ScheduledTask(name=name, due_at=loop.time() + max(0.0, delay))
        task._timer = loop.call_later(max(0.0, delay), _run, task, callback)
        logger.debug("Task scheduled", task=name, delay=delay)
        return task


# =============================================================================
# Enemy turn slot
# =============================================================================


class EnemyTurnScheduler:
    """Holds at most one pending enemy turn.

    Scheduling a new turn cancels any turn still pending, so rapid input
    can never queue two shadow actions.
    """

    def __init__(self, scheduler: Scheduler, delay_seconds: float) -> None:
        self._scheduler = scheduler
        self._delay = delay_seconds
        self._pending: ScheduledTask | None = None

    @property
    def pending(self) -> ScheduledTask | None:
        if self._pending is not None and not self._pending.is_pending:
            self._pending = None
        return self._pending

    def schedule(self, callback: TaskCallback) -> ScheduledTask:
        self.cancel()
        self._pending = self._scheduler.schedule(self._delay, callback, name="enemy_turn")
        return self._pending

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None


__all__ = [
    "CancellationToken",
    "ScheduledTask",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
    "EnemyTurnScheduler",
]
