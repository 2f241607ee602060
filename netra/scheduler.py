"""Cancellable deferred callbacks on a single worker thread.

Timers are heap entries, not threads: one daemon thread sleeps on a
condition until the earliest task is due, runs it, and goes back to sleep.
Callbacks therefore never run on the thread that scheduled them."""

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, List, Optional, Tuple

from netra.errors import SchedulerClosedError

logger = logging.getLogger(__name__)


class TaskHandle:
    """Reference to one scheduled callback."""

    __slots__ = ("key", "due", "fn", "cancelled")

    def __init__(self, key: str, due: float, fn: Callable[[], None]) -> None:
        self.key = key
        self.due = due
        self.fn = fn
        self.cancelled = False

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "pending"
        return f"TaskHandle(key={self.key!r}, due={self.due:.3f}, {state})"


class TaskScheduler:
    """Runs callbacks after a delay on one background thread.

    ``cancel`` is safe from any thread; a cancelled task never runs. After
    ``shutdown`` nothing runs and ``schedule`` raises SchedulerClosedError.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        name: str = "netra-scheduler",
    ) -> None:
        self._clock = clock
        self._heap: List[Tuple[float, int, TaskHandle]] = []
        self._seq = itertools.count()
        self._cond = threading.Condition()
        self._closed = False
        self._thread = threading.Thread(target=self._loop, name=name, daemon=True)
        self._thread.start()

    def schedule(self, key: str, delay: float, fn: Callable[[], None]) -> TaskHandle:
        """Run ``fn`` once, ``delay`` seconds from now."""
        with self._cond:
            if self._closed:
                raise SchedulerClosedError("Scheduler is shut down")
            handle = TaskHandle(key, self._clock() + max(delay, 0.0), fn)
            heapq.heappush(self._heap, (handle.due, next(self._seq), handle))
            self._cond.notify()
            return handle

    def cancel(self, handle: Optional[TaskHandle]) -> None:
        if handle is None:
            return
        with self._cond:
            handle.cancelled = True
            self._cond.notify()

    def pending(self) -> int:
        """Number of tasks still waiting to run."""
        with self._cond:
            return sum(1 for _, _, h in self._heap if not h.cancelled)

    @property
    def closed(self) -> bool:
        return self._closed

    def shutdown(self, timeout: Optional[float] = 2.0) -> None:
        """Drop every pending task and stop the worker thread."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            for _, _, handle in self._heap:
                handle.cancelled = True
            self._heap.clear()
            self._cond.notify_all()
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _loop(self) -> None:
        while True:
            with self._cond:
                handle = self._next_due()
                if handle is None:
                    return
            try:
                handle.fn()
            except Exception as exc:
                logger.error(f"Scheduled task {handle.key!r} failed: {exc}", exc_info=True)

    def _next_due(self) -> Optional[TaskHandle]:
        """Block until a live task is due; None once shut down. Holds the lock."""
        while not self._closed:
            while self._heap and self._heap[0][2].cancelled:
                heapq.heappop(self._heap)
            if not self._heap:
                self._cond.wait()
                continue
            wait = self._heap[0][0] - self._clock()
            if wait > 0:
                self._cond.wait(wait)
                continue
            _, _, handle = heapq.heappop(self._heap)
            return handle
        return None
