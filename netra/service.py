"""Pipeline lifecycle owned by the host application.

``init`` loads the vocabulary and the model (both fatal on failure) and
wires the components; ``shutdown`` stops every timer. Nothing here is a
module-level singleton: each handle is a complete, independent pipeline."""

import logging
import threading
from typing import Mapping, Optional

from netra.classifier import load_classifier
from netra.config import DetectorConfig
from netra.debounce import DebounceScheduler
from netra.extractor import is_candidate
from netra.models import RawTextEvent
from netra.orchestrator import ClassificationOrchestrator
from netra.rate_limiter import AlertRateLimiter
from netra.scheduler import TaskScheduler
from netra.sinks import build_sink
from netra.vocabulary import load_vocabulary_file

logger = logging.getLogger(__name__)


class MonitorHandle:
    """A running pipeline: event intake, debouncer, orchestrator."""

    def __init__(
        self,
        config: DetectorConfig,
        orchestrator: ClassificationOrchestrator,
        debouncer: DebounceScheduler,
        scheduler,
        classifier,
    ) -> None:
        self.config = config
        self.orchestrator = orchestrator
        self.debouncer = debouncer
        self.scheduler = scheduler
        self.classifier = classifier
        self._active = True
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        return self._active

    def submit(self, event: RawTextEvent) -> bool:
        """Feed one raw event. Returns True if it was queued for a check.

        Events from unmonitored sources, and blank or short text, are
        dropped here and never reach the debouncer.
        """
        if not self._active:
            return False
        if event.source_id not in self.config.monitored_sources:
            logger.debug(f"[{event.source_id}] Source not monitored, ignoring")
            return False
        if not is_candidate(event.text, self.config.min_text_length):
            logger.debug(f"[{event.source_id}] Text too short, not scheduled")
            return False
        return self.debouncer.on_event(event.source_id, event.text)

    def close(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
        self.debouncer.shutdown()
        if hasattr(self.scheduler, "shutdown"):
            self.scheduler.shutdown()
        if hasattr(self.classifier, "close"):
            self.classifier.close()
        logger.info("Monitoring stopped")


def init(
    config: DetectorConfig,
    vocabulary: Optional[Mapping[str, int]] = None,
    classifier=None,
    sink=None,
    scheduler=None,
) -> MonitorHandle:
    """Build a running pipeline from ``config``.

    Components passed in explicitly are used as-is; the rest are built from
    the config. Raises VocabularyFormatError or ModelLoadError when the
    vocabulary or model cannot be loaded; no partial pipeline is returned.
    """
    logger.info("Starting scam monitor...")
    if vocabulary is None:
        vocabulary = load_vocabulary_file(config.vocab_path)
    if classifier is None:
        classifier = load_classifier(config.model_path, config.max_length, config.num_threads)
    if sink is None:
        sink = build_sink(config.webhook_url)
    if scheduler is None:
        scheduler = TaskScheduler()

    orchestrator = ClassificationOrchestrator(
        vocabulary=vocabulary,
        classifier=classifier,
        rate_limiter=AlertRateLimiter(config.cooldown_ms),
        sink=sink,
        threshold=config.threshold,
        max_length=config.max_length,
        min_text_length=config.min_text_length,
        num_words=config.num_words,
    )
    debouncer = DebounceScheduler(scheduler, orchestrator.evaluate, config.debounce_delay)

    logger.info(
        f"Monitoring active | sources={sorted(config.monitored_sources)} "
        f"threshold={config.threshold} debounce={config.debounce_delay_ms}ms "
        f"cooldown={config.cooldown_ms}ms"
    )
    return MonitorHandle(config, orchestrator, debouncer, scheduler, classifier)


def shutdown(handle: Optional[MonitorHandle]) -> None:
    """Stop ``handle``; safe to call more than once or with None."""
    if handle is not None:
        handle.close()
