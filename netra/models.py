"""Pydantic models for pipeline events, alerts and the HTTP payloads."""

import time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def now_ms() -> int:
    return int(time.time() * 1000)


def monotonic_ms() -> int:
    """Milliseconds on a clock that never steps backwards; for intervals only."""
    return int(time.monotonic() * 1000)


class RawTextEvent(BaseModel):
    """Text observed for a monitored source. Not kept past the debounce window."""

    model_config = ConfigDict(frozen=True)

    source_id: str = Field(...)
    text: str = Field(...)
    observed_at: int = Field(default_factory=now_ms)


class PredictionResult(BaseModel):
    """Classifier fraud probability."""

    score: float = Field(..., ge=0.0, le=1.0, allow_inf_nan=False)


class Alert(BaseModel):
    """Payload handed to an alert sink. Carries the full checked text."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    text_excerpt: str
    confidence: float
    timestamp: int

    def to_payload(self) -> dict:
        """camelCase JSON body used by the webhook sink."""
        return {
            "sourceId": self.source_id,
            "textExcerpt": self.text_excerpt,
            "confidence": self.confidence,
            "timestamp": self.timestamp,
        }


class Outcome(str, Enum):
    SKIPPED = "skipped"
    ERROR = "error"
    BENIGN = "benign"
    ALERTED = "alerted"
    SUPPRESSED = "suppressed"


class Decision(BaseModel):
    """Result of one orchestrator evaluation."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    source_id: str
    score: Optional[float] = None

    @property
    def detected(self) -> bool:
        """True when the score crossed the threshold, alerted or not."""
        return self.outcome in (Outcome.ALERTED, Outcome.SUPPRESSED)


# HTTP payloads (event source adapter)

class WindowNode(BaseModel):
    """One node of a UI window tree as reported by the device agent."""

    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = Field(default=None)
    contentDescription: Optional[str] = Field(default=None)
    children: List["WindowNode"] = Field(default_factory=list)


class EventKind(str, Enum):
    TEXT = "text"
    NOTIFICATION = "notification"
    WINDOW = "window"


class EventRequest(BaseModel):
    """Incoming payload on POST /events."""

    model_config = ConfigDict(extra="ignore")

    sourceId: str = Field(...)
    kind: EventKind = Field(default=EventKind.TEXT)
    text: Optional[str] = Field(default=None)
    title: Optional[str] = Field(default=None)
    body: Optional[str] = Field(default=None)
    window: Optional[WindowNode] = Field(default=None)
    observedAt: Optional[int] = Field(default=None)

    @field_validator("observedAt", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value):
        """Some agents send epoch strings; normalize to int milliseconds."""
        if isinstance(value, str) and value.strip().isdigit():
            return int(value.strip())
        return value


class EventResponse(BaseModel):
    status: str = Field(...)


WindowNode.model_rebuild()
