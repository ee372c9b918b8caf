"""
Cancellable, time-scheduled callbacks.

The lifecycle manager never blocks: provisioning and training completion
are scheduled here and cancelled when their task is deleted.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle returned by ``ManualScheduler.call_later``."""

    def __init__(self, when: float, callback: Callable, args: Tuple[Any, ...]):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class Scheduler:
    """Interface shared by the schedulers."""

    def call_later(self, delay: float, callback: Callable, *args):
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """
    Virtual-clock scheduler.

    Nothing runs until ``advance`` moves the clock; due callbacks then fire
    in time order, ties broken by scheduling order.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue: List[Tuple[float, int, ScheduledCall]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable, *args) -> ScheduledCall:
        call = ScheduledCall(self.now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (call.when, next(self._seq), call))
        return call

    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def next_due(self) -> Optional[float]:
        for when, _, call in sorted(self._queue):
            if not call.cancelled:
                return when
        return None

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that becomes due.

        Returns:
            Number of callbacks run
        """
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, call = heapq.heappop(self._queue)
            self.now = when
            if call.cancelled:
                continue
            call.callback(*call.args)
            ran += 1
        self.now = target
        return ran

    def run_all(self) -> int:
        """Advance until no callback is left."""
        ran = 0
        while True:
            due = self.next_due()
            if due is None:
                return ran
            ran += self.advance(due - self.now)


class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable, *args) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback, *args)
