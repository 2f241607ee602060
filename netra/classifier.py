"""Inference adapter: token sequence -> fraud probability.

The pipeline only needs something with ``run(sequence) -> float``. The
production implementation wraps a LiteRT (TensorFlow Lite) interpreter
loaded from the CNN model file shipped next to the tokenizer."""

import logging
import threading
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

import numpy as np

from netra.errors import InferenceError, ModelLoadError

logger = logging.getLogger(__name__)


class InferenceAdapter(Protocol):
    def run(self, sequence: Sequence[int]) -> float:
        ...


def make_interpreter(model_bytes: bytes, num_threads: int):
    from ai_edge_litert.interpreter import Interpreter

    return Interpreter(model_content=model_bytes, num_threads=num_threads)


class LiteRTClassifier:
    """Scalar classifier backed by a LiteRT interpreter.

    The interpreter keeps its tensors as mutable state, so ``run`` is
    serialized with a lock. Input is float32 ``[1, max_length]``, output
    ``[1, 1]``.
    """

    def __init__(self, interpreter, max_length: int) -> None:
        self._interpreter = interpreter
        self._max_length = max_length
        self._lock = threading.Lock()
        self._closed = False
        self._input_index = interpreter.get_input_details()[0]["index"]
        self._output_index = interpreter.get_output_details()[0]["index"]

    @classmethod
    def load(
        cls,
        model_path: Union[str, Path],
        max_length: int,
        num_threads: int = 4,
    ) -> "LiteRTClassifier":
        """Load and warm up the model. Raises ModelLoadError on any failure."""
        try:
            model_bytes = Path(model_path).read_bytes()
            interpreter = make_interpreter(model_bytes, num_threads)
            interpreter.allocate_tensors()
            classifier = cls(interpreter, max_length)
            classifier.run([0] * max_length)
        except Exception as exc:
            raise ModelLoadError(f"Cannot load model {model_path}: {exc}") from exc
        logger.info(f"Model loaded from {model_path} (threads={num_threads})")
        return classifier

    def run(self, sequence: Sequence[int]) -> float:
        if len(sequence) != self._max_length:
            raise InferenceError(
                f"Expected {self._max_length} tokens, got {len(sequence)}"
            )
        batch = np.asarray([sequence], dtype=np.float32)
        with self._lock:
            if self._closed:
                raise InferenceError("Classifier is closed")
            self._interpreter.set_tensor(self._input_index, batch)
            self._interpreter.invoke()
            output = self._interpreter.get_tensor(self._output_index)
        return float(np.asarray(output).reshape(-1)[0])

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._interpreter = None


def load_classifier(
    model_path: Union[str, Path],
    max_length: int,
    num_threads: Optional[int] = None,
) -> LiteRTClassifier:
    return LiteRTClassifier.load(model_path, max_length, num_threads or 4)
