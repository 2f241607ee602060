"""Debounce scheduler: one classification per source per quiet period.

UI trees and notifications change in bursts. Every event overwrites the
source's pending text and restarts its timer; only when a source has been
quiet for the full delay does the latest text get checked."""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from netra.errors import SchedulerClosedError
from netra.locks import KeyedLocks
from netra.scheduler import TaskHandle

logger = logging.getLogger(__name__)

CheckFn = Callable[[str, str], object]


@dataclass
class PendingCheck:
    """Latest text seen for a source since its last check fired."""
    source_id: str
    text: str
    handle: Optional[TaskHandle] = None
    # renewed on every event; a timer only fires for the generation it was armed for
    generation: int = 0


class DebounceScheduler:
    """Coalesces events per source and hands the last one to ``check``.

    ``scheduler`` is anything with ``schedule(key, delay, fn)`` and
    ``cancel(handle)``. ``check`` is called as ``check(text, source_id)`` on
    the scheduler's thread.
    """

    def __init__(self, scheduler, check: CheckFn, delay: float = 1.5) -> None:
        self._scheduler = scheduler
        self._check = check
        self.delay = delay
        self._pending: Dict[str, PendingCheck] = {}
        self._locks = KeyedLocks()
        self._generations = itertools.count(1)
        self._closed = False

    def on_event(self, source_id: str, text: str) -> bool:
        """Record ``text`` as the latest for ``source_id`` and restart its timer.

        Returns False if the debouncer has been shut down.
        """
        if self._closed:
            logger.debug(f"[{source_id}] Event ignored, debouncer is shut down")
            return False
        with self._locks.get(source_id):
            if self._closed:
                return False
            pending = self._pending.get(source_id)
            if pending is None:
                pending = PendingCheck(source_id=source_id, text=text)
                self._pending[source_id] = pending
            else:
                pending.text = text
                self._scheduler.cancel(pending.handle)

            generation = next(self._generations)
            pending.generation = generation
            try:
                pending.handle = self._scheduler.schedule(
                    source_id, self.delay, lambda: self._fire(source_id, generation)
                )
            except SchedulerClosedError:
                self._pending.pop(source_id, None)
                return False
        return True

    def pending_text(self, source_id: str) -> Optional[str]:
        with self._locks.get(source_id):
            pending = self._pending.get(source_id)
            return pending.text if pending else None

    def shutdown(self) -> None:
        """Cancel every outstanding timer.

        No check starts after this returns. A check already running on the
        scheduler thread is not interrupted; stopping that thread waits for it.
        """
        self._closed = True
        for source_id in list(self._pending):
            with self._locks.get(source_id):
                pending = self._pending.pop(source_id, None)
                if pending is not None:
                    self._scheduler.cancel(pending.handle)
        logger.info("Debouncer shut down, pending checks cancelled")

    def _fire(self, source_id: str, generation: int) -> None:
        with self._locks.get(source_id):
            if self._closed:
                return
            pending = self._pending.get(source_id)
            if pending is None or pending.generation != generation:
                return
            del self._pending[source_id]
        # shutdown may have landed after the lock was released
        if self._closed:
            return
        try:
            self._check(pending.text, pending.source_id)
        except Exception as exc:
            logger.error(f"[{source_id}] Error during debounced check: {exc}", exc_info=True)
