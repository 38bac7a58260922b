"""
Timer scheduling for the fit controller.

The controller never sleeps; it asks a Scheduler to call it back later and
cancels handles it no longer needs. Two implementations:

- AsyncioScheduler: timers on an asyncio event loop (live editors)
- ManualScheduler: virtual clock advanced explicitly (CLI runs, tests)
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """Cancelable handle for a callback scheduled on a ManualScheduler."""

    def __init__(self, when: float, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class Scheduler(ABC):
    """Runs callbacks after a delay on the caller's (single) thread."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]):
        """
        Schedule callback after delay seconds.

        Returns:
            Handle with cancel() and cancelled()
        """

    @abstractmethod
    def time(self) -> float:
        """Current scheduler time in seconds."""


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.

    Args:
        loop: Event loop to schedule on (default: the running loop, looked up
            on first use)
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)

    def time(self) -> float:
        return self.loop.time()


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler with a virtual clock.

    Nothing runs until advance() or run_all() is called. Callbacks run in due
    order (ties in scheduling order) and may schedule further callbacks.

    Example:
        >>> scheduler = ManualScheduler()
        >>> fired = []
        >>> _ = scheduler.call_later(0.5, lambda: fired.append(scheduler.time()))
        >>> scheduler.advance(0.4); fired
        []
        >>> scheduler.advance(0.1); fired
        [0.5]
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.when, next(self._sequence), handle))
        return handle

    def time(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of scheduled, not cancelled callbacks."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled())

    def _pop_due(self, deadline: float) -> Optional[TimerHandle]:
        while self._queue and self._queue[0][0] <= deadline:
            _, _, handle = heapq.heappop(self._queue)
            if not handle.cancelled():
                return handle
        return None

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that falls due."""
        deadline = self._now + seconds
        handle = self._pop_due(deadline)
        while handle is not None:
            self._now = handle.when
            handle.callback()
            handle = self._pop_due(deadline)
        self._now = deadline

    def run_all(self, max_callbacks: int = 10_000) -> int:
        """
        Run callbacks until the queue is empty.

        Returns:
            Number of callbacks run

        Raises:
            RuntimeError: If callbacks keep rescheduling past max_callbacks
        """
        count = 0
        handle = self._pop_due(float("inf"))
        while handle is not None:
            if count >= max_callbacks:
                raise RuntimeError(
                    f"Scheduler did not go idle after {max_callbacks} callbacks"
                )
            self._now = handle.when
            handle.callback()
            count += 1
            handle = self._pop_due(float("inf"))
        return count
