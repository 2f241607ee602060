"""Exception hierarchy for the monitoring pipeline.

Fatal startup errors (vocabulary, model, config) propagate out of init();
per-event errors are caught by the orchestrator and logged."""


class NetraError(Exception):
    """Base class for all pipeline errors."""


class ConfigError(NetraError):
    """Settings are missing or out of range."""


class VocabularyFormatError(NetraError):
    """Vocabulary document is unreadable or has the wrong shape."""


class ModelLoadError(NetraError):
    """Classifier model could not be loaded."""


class InferenceError(NetraError):
    """A single classifier invocation failed."""


class SchedulerClosedError(NetraError):
    """Task scheduled on a scheduler that was already shut down."""
