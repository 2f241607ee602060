"""Detector settings, loaded from the environment (and a .env file if present)."""

import os
from typing import FrozenSet, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from netra.errors import ConfigError

load_dotenv()

DEFAULT_SOURCES: FrozenSet[str] = frozenset({"com.whatsapp", "com.android.mms"})


class DetectorConfig(BaseModel):
    """Tunables for one monitoring pipeline.

    Timing values are in milliseconds. Debounce delay, cooldown and the
    minimum text length are plain settings rather than fixed constants.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", protected_namespaces=())

    vocab_path: str = Field(default="assets/tokenizer_cnn.json")
    model_path: str = Field(default="assets/scam_detector_cnn.tflite")
    max_length: int = Field(default=100, gt=0)
    num_words: Optional[int] = Field(default=None, gt=0)
    threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    debounce_delay_ms: int = Field(default=1500, ge=0)
    cooldown_ms: int = Field(default=5000, ge=0)
    min_text_length: int = Field(default=10, ge=0)
    monitored_sources: FrozenSet[str] = Field(default=DEFAULT_SOURCES)
    num_threads: int = Field(default=4, gt=0)
    webhook_url: Optional[str] = Field(default=None)

    @field_validator("monitored_sources", mode="before")
    @classmethod
    def _split_sources(cls, value):
        """Accept a comma-separated string as well as any iterable."""
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",")]
        return frozenset(v for v in value if v)

    @field_validator("webhook_url", mode="before")
    @classmethod
    def _blank_url_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_env(cls) -> "DetectorConfig":
        """Build a config from NETRA_* environment variables.

        Unset variables fall back to the field defaults. Raises ConfigError
        when a value fails validation.
        """
        env_map = {
            "vocab_path": "NETRA_VOCAB_PATH",
            "model_path": "NETRA_MODEL_PATH",
            "max_length": "NETRA_MAX_LENGTH",
            "num_words": "NETRA_NUM_WORDS",
            "threshold": "NETRA_THRESHOLD",
            "debounce_delay_ms": "NETRA_DEBOUNCE_MS",
            "cooldown_ms": "NETRA_COOLDOWN_MS",
            "min_text_length": "NETRA_MIN_TEXT_LENGTH",
            "monitored_sources": "NETRA_SOURCES",
            "num_threads": "NETRA_NUM_THREADS",
            "webhook_url": "NETRA_WEBHOOK_URL",
        }
        values = {}
        for field_name, var in env_map.items():
            raw = os.getenv(var)
            if raw is not None and raw.strip() != "":
                values[field_name] = raw.strip()
        return cls.build(**values)

    @classmethod
    def build(cls, **values) -> "DetectorConfig":
        """Validate keyword settings, surfacing failures as ConfigError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid detector settings: {exc}") from exc

    @property
    def debounce_delay(self) -> float:
        """Debounce delay in seconds, as the scheduler expects."""
        return self.debounce_delay_ms / 1000.0
