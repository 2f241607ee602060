"""Alert sinks: where detections go once the rate limiter lets them through.

LogAlertSink renders the user-facing warning text; WebhookAlertSink POSTs
the alert to a configured endpoint on a background thread with retry."""

import logging
import threading
import time
from typing import Dict, Iterable, List, Optional

import requests

from netra.models import Alert

logger = logging.getLogger(__name__)

# Retry configuration (non-blocking background)
MAX_RETRIES: int = 3
RETRY_DELAYS: tuple = (1, 2, 4)

EXCERPT_CHARS: int = 400

SOURCE_LABELS: Dict[str, str] = {
    "com.whatsapp": "WhatsApp",
    "com.android.mms": "SMS",
}


def app_label(source_id: str) -> str:
    return SOURCE_LABELS.get(source_id, "Aplikasi")


def format_alert(alert: Alert) -> Dict[str, str]:
    """Build the title, summary and body a notification would show."""
    percent = int(alert.confidence * 100)
    excerpt = alert.text_excerpt[:EXCERPT_CHARS]
    return {
        "title": "PERINGATAN SCAM TERDETEKSI",
        "summary": f"Kemungkinan penipuan {percent}% di {app_label(alert.source_id)}",
        "body": (
            f"Pesan mencurigakan terdeteksi:\n\n\"{excerpt}\"\n\n"
            f"Tingkat kecurigaan: {percent}%\n"
            "JANGAN berikan data pribadi, OTP, atau transfer uang!"
        ),
    }


class LogAlertSink:
    """Writes each alert to the log at warning level."""

    def emit(self, alert: Alert) -> None:
        rendered = format_alert(alert)
        logger.warning(
            f"[{alert.source_id}] {rendered['title']} | {rendered['summary']}\n"
            f"{rendered['body']}"
        )


class WebhookAlertSink:
    """POSTs alerts as JSON to ``url``.

    Delivery runs in a daemon thread with exponential backoff (1s, 2s, 4s)
    so the pipeline thread never waits on the network. Failures are logged.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15,
        background: bool = True,
        retry_delays: tuple = RETRY_DELAYS,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.background = background
        self.retry_delays = retry_delays

    def emit(self, alert: Alert) -> None:
        payload = alert.to_payload()
        if not self.background:
            self._send_with_retry(alert.source_id, payload)
            return
        thread = threading.Thread(
            target=self._send_with_retry,
            args=(alert.source_id, payload),
            daemon=True,
        )
        thread.start()

    def _send_with_retry(self, source_id: str, payload: dict) -> bool:
        attempts = len(self.retry_delays) or 1
        for attempt in range(attempts):
            if self._do_send(source_id, payload):
                return True
            if attempt < attempts - 1:
                delay = self.retry_delays[attempt]
                logger.info(f"[{source_id}] Webhook retry {attempt + 1} in {delay}s")
                time.sleep(delay)

        logger.error(f"[{source_id}] Webhook delivery failed after {attempts} attempts")
        return False

    def _do_send(self, source_id: str, payload: dict) -> bool:
        """Single POST. Returns True on 2xx."""
        try:
            response = requests.post(
                self.url,
                json=payload,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        except requests.exceptions.Timeout:
            logger.error(f"[{source_id}] Webhook timed out")
            return False
        except requests.exceptions.RequestException as exc:
            logger.error(f"[{source_id}] Webhook network error: {exc}")
            return False

        if 200 <= response.status_code < 300:
            logger.info(f"[{source_id}] Webhook accepted ({response.status_code})")
            return True
        logger.warning(
            f"[{source_id}] Webhook rejected: "
            f"{response.status_code} {response.text[:200]}"
        )
        return False


class MultiSink:
    """Fans an alert out to several sinks; one failure does not stop the rest."""

    def __init__(self, sinks: Iterable) -> None:
        self.sinks: List = list(sinks)

    def emit(self, alert: Alert) -> None:
        for sink in self.sinks:
            try:
                sink.emit(alert)
            except Exception as exc:
                logger.error(
                    f"[{alert.source_id}] Sink {type(sink).__name__} failed: {exc}"
                )


def build_sink(webhook_url: Optional[str] = None):
    """Log sink, plus a webhook sink when a URL is configured."""
    sinks: List = [LogAlertSink()]
    if webhook_url:
        sinks.append(WebhookAlertSink(webhook_url))
    return MultiSink(sinks)
