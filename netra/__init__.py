"""
Netra: scam-message monitor
===========================

Watches text from monitored messaging apps, classifies it with a pre-trained
text CNN and raises throttled alerts.

Modules:
    - config.py       : DetectorConfig, settings from NETRA_* env vars
    - models.py       : pydantic events, alerts, decisions, HTTP payloads
    - vocabulary.py   : tokenizer JSON loader (immutable word -> id table)
    - tokenizer.py    : text -> fixed-length id sequence
    - classifier.py   : LiteRT-backed inference adapter
    - scheduler.py    : cancellable deferred callbacks on one worker thread
    - debounce.py     : per-source event coalescing
    - rate_limiter.py : per-source alert cooldown
    - orchestrator.py : tokenize -> infer -> threshold -> rate limit -> sink
    - sinks.py        : log and webhook alert sinks
    - extractor.py    : window-tree / notification text extraction
    - service.py      : init() / shutdown() lifecycle
    - main.py         : FastAPI intake and health endpoints
"""

__version__ = "1.0.0"
