"""Tokenizer document loading: both word_index shapes, and the fatal errors."""

import json

import pytest

from netra.errors import VocabularyFormatError
from netra.vocabulary import DEFAULT_FILTERS, load_vocabulary, load_vocabulary_file


def _doc(word_index, **config):
    config["word_index"] = word_index
    return json.dumps({"config": config})


def test_direct_object_word_index():
    vocab = load_vocabulary(_doc({"menang": 3, "undian": 7}))
    assert vocab["menang"] == 3
    assert len(vocab) == 2
    assert vocab.filters == DEFAULT_FILTERS
    assert vocab.lower is True


def test_string_encoded_word_index():
    vocab = load_vocabulary(_doc(json.dumps({"klik": 12})).encode("utf-8"))
    assert dict(vocab) == {"klik": 12}


def test_string_encoded_config():
    inner = json.dumps({"word_index": {"klik": 12}})
    vocab = load_vocabulary(json.dumps({"config": inner}))
    assert vocab.get("klik") == 12


def test_filters_and_lower_are_read_from_config():
    vocab = load_vocabulary(_doc({"a": 1}, filters="!?", lower=False))
    assert vocab.filters == "!?"
    assert vocab.lower is False


def test_vocabulary_is_read_only():
    vocab = load_vocabulary(_doc({"a": 1}))
    with pytest.raises(TypeError):
        vocab["b"] = 2


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        json.dumps([1, 2, 3]),
        json.dumps({"word_index": {"a": 1}}),
        json.dumps({"config": {}}),
        json.dumps({"config": {"word_index": "{broken"}}),
        json.dumps({"config": {"word_index": 42}}),
        _doc({"pad": 0}),
        _doc({"neg": -4}),
        _doc({"flag": True}),
        _doc({"half": 1.5}),
    ],
)
def test_malformed_documents_raise(raw):
    with pytest.raises(VocabularyFormatError):
        load_vocabulary(raw)


def test_load_from_file(tokenizer_file):
    vocab = load_vocabulary_file(tokenizer_file)
    assert vocab["hadiah"] == 21


def test_missing_file_is_format_error(tmp_path):
    with pytest.raises(VocabularyFormatError):
        load_vocabulary_file(tmp_path / "absent.json")
