"""Per-source alert cooldown.

A sliding suppression window, not a token bucket: once the cooldown has
passed the next alert goes through immediately."""

import logging
from typing import Dict, Optional

from netra.locks import KeyedLocks

logger = logging.getLogger(__name__)


class AlertRateLimiter:
    """Tracks the last alert time per source and gates new alerts.

    ``should_alert`` is a check-and-set under the source's lock, so two
    near-simultaneous calls for the same source cannot both return True.
    """

    def __init__(self, cooldown_ms: int = 5000) -> None:
        self.cooldown_ms = cooldown_ms
        self._history: Dict[str, int] = {}
        self._locks = KeyedLocks()

    def should_alert(self, source_id: str, now: int) -> bool:
        """Return True and record ``now`` if ``source_id`` may alert at ``now``."""
        with self._locks.get(source_id):
            last = self._history.get(source_id)
            if last is not None and now - last < self.cooldown_ms:
                logger.debug(
                    f"[{source_id}] Alert suppressed, cooldown "
                    f"{self.cooldown_ms - (now - last)}ms left"
                )
                return False
            self._history[source_id] = now
            return True

    def last_alert_at(self, source_id: str) -> Optional[int]:
        with self._locks.get(source_id):
            return self._history.get(source_id)

    def reset(self, source_id: Optional[str] = None) -> None:
        """Forget alert history for one source, or for all of them."""
        if source_id is not None:
            with self._locks.get(source_id):
                self._history.pop(source_id, None)
            return
        for key in list(self._history):
            with self._locks.get(key):
                self._history.pop(key, None)
