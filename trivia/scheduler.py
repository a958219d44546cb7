"""
Timer scheduling for the turn engine.

The engine never sleeps; it asks a scheduler to call it back later. The
server runs it on the asyncio event loop, tests and headless simulations
drive a virtual clock.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Protocol, Tuple

Callback = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Runs callbacks after a delay, one at a time, on a single thread."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        """Schedule callback to run after delay seconds."""


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        # Unpinned schedulers follow whichever loop is running the engine.
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)


class ManualHandle:
    def __init__(self, due: float):
        self.due = due
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """
    Virtual clock scheduler.

    Nothing runs until ``advance`` or ``run_until_idle`` is called. Callbacks
    fire in due-time order; ties keep scheduling order.
    """

    def __init__(self):
        self.now = 0.0
        self._queue: List[Tuple[float, int, ManualHandle, Callback]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> ManualHandle:
        handle = ManualHandle(self.now + max(0.0, delay))
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def _pop_due(self, until: float) -> Optional[Callback]:
        while self._queue and self._queue[0][0] <= until:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, due)
            return callback
        return None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running everything that falls due. Returns callbacks run."""
        target = self.now + seconds
        ran = 0
        callback = self._pop_due(target)
        while callback is not None:
            callback()
            ran += 1
            callback = self._pop_due(target)
        self.now = target
        return ran

    def run_until_idle(self, max_callbacks: int = 100_000) -> int:
        """Run callbacks until the queue is empty. Returns callbacks run."""
        ran = 0
        while ran < max_callbacks:
            callback = self._pop_due(float("inf"))
            if callback is None:
                break
            callback()
            ran += 1
        return ran

    def run_until(self, predicate: Callable[[], bool], max_callbacks: int = 100_000) -> bool:
        """Run callbacks one by one until predicate holds. Returns whether it did."""
        ran = 0
        while not predicate():
            if ran >= max_callbacks:
                return False
            callback = self._pop_due(float("inf"))
            if callback is None:
                return predicate()
            callback()
            ran += 1
        return True
