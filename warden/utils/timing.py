"""
Scheduled tasks for overlay timers.

Overlays never start raw timers. They ask a Scheduler for a cancellable
task, so tests can drive time with ManualScheduler instead of waiting.
"""

import logging
import time
from typing import Callable, List, Optional


class ScheduledTask:
    """Handle for a callback scheduled to run once after a delay."""

    def __init__(self, callback: Callable[[], None], deadline: float, name: str = ""):
        self._callback = callback
        self.deadline = deadline
        self.name = name
        self._cancelled = False
        self._fired = False

    def cancel(self):
        """Cancel the task. Safe to call multiple times or after firing."""
        self._cancelled = True

    def fire(self):
        """Run the callback unless cancelled or already run."""
        if self._cancelled or self._fired:
            return
        self._fired = True
        self._callback()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        """True while the task may still fire."""
        return not (self._cancelled or self._fired)

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "fired" if self._fired else "pending"
        return f"ScheduledTask({self.name or self._callback!r}, {state})"


class Scheduler:
    """Base scheduler. Subclasses decide how time passes."""

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        """
        Schedule callback to run once after delay seconds.

        Returns:
            ScheduledTask handle that can be cancelled
        """
        raise NotImplementedError

    def now(self) -> float:
        """Current time in seconds."""
        return time.monotonic()


class ManualScheduler(Scheduler):
    """
    Scheduler driven by explicit advance() calls.

    Time starts at zero and only moves when advanced.
    """

    def __init__(self):
        self._now = 0.0
        self._tasks: List[ScheduledTask] = []

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        task = ScheduledTask(callback, self._now + max(0.0, delay), name)
        self._tasks.append(task)
        return task

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> int:
        """
        Move time forward, firing due tasks in deadline order.

        Tasks scheduled by callbacks fire in the same call if they fall
        due within the advanced window.

        Returns:
            Number of tasks fired
        """
        target = self._now + seconds
        fired = 0

        while True:
            due = self._next_due(target)
            if due is None:
                break
            self._now = due.deadline
            self._tasks.remove(due)
            due.fire()
            fired += 1

        self._now = target
        self._tasks = [t for t in self._tasks if t.pending]
        return fired

    def _next_due(self, target: float) -> Optional[ScheduledTask]:
        candidates = [t for t in self._tasks if t.pending and t.deadline <= target]
        if not candidates:
            return None
        return min(candidates, key=lambda t: t.deadline)

    @property
    def pending_tasks(self) -> List[ScheduledTask]:
        """Tasks that may still fire."""
        return [t for t in self._tasks if t.pending]


class Timer:
    """
    Measures one block of work and logs how long it took.

    Usage:
        with Timer("face mesh load", logger):
            detector.load()
    """

    def __init__(self, name: str = "", log: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.name = name
        self._log = log
        self._level = level
        self._started: Optional[float] = None
        self.elapsed: float = 0.0

    def __enter__(self):
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._started is None:
            return
        self.elapsed = time.perf_counter() - self._started
        if self._log is not None:
            outcome = "failed after" if exc_type is not None else "took"
            self._log.log(self._level, f"{self.name or 'block'} {outcome} {self.elapsed_ms:.0f}ms")

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000
