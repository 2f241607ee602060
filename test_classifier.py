"""LiteRT adapter against a fake interpreter: tensor shape, output, load."""

import numpy as np
import pytest

from netra import classifier as classifier_module
from netra.classifier import LiteRTClassifier, load_classifier
from netra.errors import InferenceError, ModelLoadError

INPUT_INDEX = 0
OUTPUT_INDEX = 7


class FakeInterpreter:
    """Records what the adapter feeds in and returns a canned [1, 1] output."""

    def __init__(self, score=0.82):
        self.output = np.array([[score]], dtype=np.float32)
        self.inputs = []
        self.invocations = 0
        self.allocated = False

    def get_input_details(self):
        return [{"index": INPUT_INDEX, "shape": np.array([1, 5])}]

    def get_output_details(self):
        return [{"index": OUTPUT_INDEX, "shape": np.array([1, 1])}]

    def allocate_tensors(self):
        self.allocated = True

    def set_tensor(self, index, value):
        self.inputs.append((index, np.array(value)))

    def invoke(self):
        self.invocations += 1

    def get_tensor(self, index):
        assert index == OUTPUT_INDEX
        return self.output


@pytest.fixture
def interpreter():
    return FakeInterpreter()


@pytest.fixture
def model_file(tmp_path):
    path = tmp_path / "scam_detector_cnn.tflite"
    path.write_bytes(b"TFL3-model")
    return path


def test_run_feeds_float32_batch_of_one(interpreter):
    clf = LiteRTClassifier(interpreter, max_length=5)

    clf.run((3, 7, 12, 0, 0))

    assert interpreter.invocations == 1
    index, tensor = interpreter.inputs[0]
    assert index == INPUT_INDEX
    assert tensor.dtype == np.float32
    assert tensor.shape == (1, 5)
    assert tensor.tolist() == [[3.0, 7.0, 12.0, 0.0, 0.0]]


def test_run_returns_plain_float(interpreter):
    score = LiteRTClassifier(interpreter, max_length=5).run((3, 7, 12, 0, 0))
    assert type(score) is float
    assert score == pytest.approx(0.82)


def test_wrong_length_raises_without_invoking(interpreter):
    clf = LiteRTClassifier(interpreter, max_length=5)
    with pytest.raises(InferenceError):
        clf.run((3, 7, 12))
    assert interpreter.inputs == []
    assert interpreter.invocations == 0


def test_run_after_close_raises(interpreter):
    clf = LiteRTClassifier(interpreter, max_length=5)
    clf.close()
    with pytest.raises(InferenceError, match="closed"):
        clf.run((0, 0, 0, 0, 0))


def test_load_allocates_and_warms_up(monkeypatch, interpreter, model_file):
    seen = {}

    def factory(model_bytes, num_threads):
        seen["bytes"] = model_bytes
        seen["threads"] = num_threads
        return interpreter

    monkeypatch.setattr(classifier_module, "make_interpreter", factory)

    clf = LiteRTClassifier.load(model_file, max_length=5, num_threads=2)

    assert isinstance(clf, LiteRTClassifier)
    assert seen == {"bytes": b"TFL3-model", "threads": 2}
    assert interpreter.allocated
    assert interpreter.invocations == 1
    _, warmup = interpreter.inputs[0]
    assert warmup.tolist() == [[0.0] * 5]


def test_load_classifier_defaults_to_four_threads(monkeypatch, interpreter, model_file):
    threads = []

    def factory(model_bytes, num_threads):
        threads.append(num_threads)
        return interpreter

    monkeypatch.setattr(classifier_module, "make_interpreter", factory)
    load_classifier(model_file, max_length=5)
    assert threads == [4]


def test_load_wraps_interpreter_failure(monkeypatch, model_file):
    def factory(model_bytes, num_threads):
        raise ValueError("Could not open model buffer")

    monkeypatch.setattr(classifier_module, "make_interpreter", factory)

    with pytest.raises(ModelLoadError) as excinfo:
        LiteRTClassifier.load(model_file, max_length=5)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_load_wraps_failed_warmup(monkeypatch, model_file):
    broken = FakeInterpreter()
    broken.output = np.array([], dtype=np.float32)
    monkeypatch.setattr(classifier_module, "make_interpreter", lambda b, n: broken)

    with pytest.raises(ModelLoadError):
        LiteRTClassifier.load(model_file, max_length=5)


def test_load_missing_file(tmp_path):
    with pytest.raises(ModelLoadError, match="Cannot load model"):
        LiteRTClassifier.load(tmp_path / "missing.tflite", max_length=5)
