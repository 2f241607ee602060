"""Classification orchestrator: text in, decision (and maybe an alert) out.

Pipeline per check:
1. Length gate - texts shorter than the minimum are skipped
2. Tokenize - fixed-length id sequence from the shared vocabulary
3. Inference - synchronous classifier call; failures count as no detection
4. Threshold - strictly greater than the configured threshold
5. Rate limit - per-source cooldown decides whether the alert goes out
6. Emit - the alert sink gets the full text and the score
"""

import logging
from typing import Callable, Mapping, Optional

from netra.classifier import InferenceAdapter
from netra.models import Alert, Decision, Outcome, PredictionResult, monotonic_ms, now_ms
from netra.rate_limiter import AlertRateLimiter
from netra.tokenizer import tokenize

logger = logging.getLogger(__name__)


class ClassificationOrchestrator:
    """Wires tokenizer, classifier, rate limiter and sink together.

    Holds no per-event state of its own; the vocabulary and classifier are
    shared read-only and the rate limiter does its own locking, so
    ``evaluate`` may run for several sources at once.
    """

    def __init__(
        self,
        vocabulary: Mapping[str, int],
        classifier: InferenceAdapter,
        rate_limiter: AlertRateLimiter,
        sink,
        threshold: float = 0.5,
        max_length: int = 100,
        min_text_length: int = 10,
        num_words: Optional[int] = None,
        clock: Callable[[], int] = now_ms,
        cooldown_clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self.vocabulary = vocabulary
        self.classifier = classifier
        self.rate_limiter = rate_limiter
        self.sink = sink
        self.threshold = threshold
        self.max_length = max_length
        self.min_text_length = min_text_length
        self.num_words = num_words
        self._clock = clock
        self._cooldown_clock = cooldown_clock

    def evaluate(self, text: str, source_id: str) -> Decision:
        if len(text) < self.min_text_length:
            logger.debug(f"[{source_id}] Text too short, skipping")
            return Decision(outcome=Outcome.SKIPPED, source_id=source_id)

        try:
            score = self.predict(text).score
        except Exception as exc:
            logger.error(f"[{source_id}] Error in prediction: {exc}", exc_info=True)
            return Decision(outcome=Outcome.ERROR, source_id=source_id)

        logger.debug(
            f"[{source_id}] Prediction score={score:.4f} threshold={self.threshold} "
            f"text={text[:50]!r}"
        )

        if not score > self.threshold:
            return Decision(outcome=Outcome.BENIGN, source_id=source_id, score=score)

        if not self.rate_limiter.should_alert(source_id, self._cooldown_clock()):
            logger.info(f"[{source_id}] Scam detected (score={score:.2f}), alert in cooldown")
            return Decision(outcome=Outcome.SUPPRESSED, source_id=source_id, score=score)

        logger.warning(f"[{source_id}] SCAM DETECTED score={score:.2f}")
        alert = Alert(
            source_id=source_id,
            text_excerpt=text,
            confidence=score,
            timestamp=self._clock(),
        )
        try:
            self.sink.emit(alert)
        except Exception as exc:
            # cooldown entry is kept even when emit fails
            logger.error(f"[{source_id}] Alert sink error: {exc}", exc_info=True)
        return Decision(outcome=Outcome.ALERTED, source_id=source_id, score=score)

    def predict(self, text: str) -> PredictionResult:
        """Tokenize ``text`` and score it. A score outside [0, 1] raises."""
        sequence = tokenize(text, self.vocabulary, self.max_length, self.num_words)
        return PredictionResult(score=float(self.classifier.run(sequence)))

    def __call__(self, text: str, source_id: str) -> Decision:
        return self.evaluate(text, source_id)
