"""Shared fixtures: a manual-clock scheduler, a stub classifier and a
recording sink, so pipeline timing can be tested without sleeping."""

import heapq
import itertools
import json

import pytest

from netra.scheduler import TaskHandle
from netra.vocabulary import Vocabulary


class ManualScheduler:
    """Same interface as TaskScheduler, but time only moves on advance()."""

    def __init__(self) -> None:
        self.now = 0.0
        self._heap = []
        self._seq = itertools.count()
        self.closed = False

    def schedule(self, key, delay, fn):
        handle = TaskHandle(key, self.now + delay, fn)
        heapq.heappush(self._heap, (handle.due, next(self._seq), handle))
        return handle

    def cancel(self, handle):
        if handle is not None:
            handle.cancelled = True

    def pending(self):
        return sum(1 for _, _, h in self._heap if not h.cancelled)

    def advance(self, seconds):
        """Move the clock forward, running every task that falls due."""
        target = self.now + seconds
        while self._heap and self._heap[0][0] <= target:
            due, _, handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self.now = due
            handle.fn()
        self.now = target

    def shutdown(self):
        self.closed = True
        for _, _, handle in self._heap:
            handle.cancelled = True
        self._heap.clear()


class StubClassifier:
    """Returns a fixed score (or raises) and records every sequence it saw."""

    def __init__(self, score=0.82, error=None):
        self.score = score
        self.error = error
        self.calls = []
        self.closed = False

    def run(self, sequence):
        self.calls.append(tuple(sequence))
        if self.error is not None:
            raise self.error
        return self.score

    def close(self):
        self.closed = True


class RecordingSink:
    def __init__(self):
        self.alerts = []

    def emit(self, alert):
        self.alerts.append(alert)


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def stub_classifier():
    return StubClassifier()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def small_vocab():
    return Vocabulary({"menang": 3, "undian": 7, "klik": 12})


@pytest.fixture
def tokenizer_file(tmp_path):
    """Keras-style tokenizer export with a string-encoded word_index."""
    document = {
        "class_name": "Tokenizer",
        "config": {
            "num_words": 5000,
            "filters": '!"#$%&()*+,-./:;<=>?@[\\]^_`{|}~\t\n',
            "lower": True,
            "split": " ",
            "char_level": False,
            "oov_token": None,
            "word_index": json.dumps({"menang": 3, "undian": 7, "klik": 12, "hadiah": 21}),
        },
    }
    path = tmp_path / "tokenizer_cnn.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path
