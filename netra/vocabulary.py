"""Vocabulary store: the word -> id table the classifier was trained with.

Reads the JSON document a Keras text tokenizer exports. Its ``config`` object
holds ``word_index`` either as a nested object or as a JSON-encoded string of
one; both shapes occur in the wild and both are accepted. The loaded table is
immutable and safe to share across threads without locking."""

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, Mapping, Union

from netra.errors import VocabularyFormatError

logger = logging.getLogger(__name__)

# Characters the Keras tokenizer strips before splitting (its default `filters`)
DEFAULT_FILTERS: str = '!"#$%&()*+,-./:;<=>?@[\\]^_`{|}~\t\n'


class Vocabulary(Mapping):
    """Read-only word -> positive id mapping plus the preprocessing flags
    that have to match training time. Id 0 is never assigned."""

    __slots__ = ("_index", "_filters", "_lower")

    def __init__(
        self,
        word_index: Mapping[str, int],
        filters: str = DEFAULT_FILTERS,
        lower: bool = True,
    ) -> None:
        self._index: Dict[str, int] = dict(word_index)
        self._filters = filters
        self._lower = lower

    @property
    def filters(self) -> str:
        return self._filters

    @property
    def lower(self) -> bool:
        return self._lower

    def __getitem__(self, word: str) -> int:
        return self._index[word]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"Vocabulary(words={len(self._index)}, lower={self._lower})"


def load_vocabulary(raw: Union[bytes, str]) -> Vocabulary:
    """Parse a tokenizer document into a Vocabulary.

    Raises VocabularyFormatError on invalid JSON, missing ``config`` or
    ``word_index`` keys, or ids that are not positive integers.
    """
    try:
        document = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as exc:
        raise VocabularyFormatError(f"Tokenizer document is not valid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise VocabularyFormatError("Tokenizer document must be a JSON object")

    config = _as_object(document.get("config"), "config")
    if "word_index" not in config:
        raise VocabularyFormatError("Tokenizer config has no 'word_index'")
    word_index = _as_object(config["word_index"], "word_index")

    table: Dict[str, int] = {}
    for word, idx in word_index.items():
        # bool is an int subclass; reject it explicitly
        if isinstance(idx, bool) or not isinstance(idx, int) or idx <= 0:
            raise VocabularyFormatError(f"Invalid id {idx!r} for word {word!r}")
        table[word] = idx

    filters = config.get("filters", DEFAULT_FILTERS)
    if filters is None:
        filters = ""
    if not isinstance(filters, str):
        raise VocabularyFormatError("Tokenizer 'filters' must be a string")

    lower = config.get("lower", True)
    if not isinstance(lower, bool):
        raise VocabularyFormatError("Tokenizer 'lower' must be a boolean")

    return Vocabulary(table, filters=filters, lower=lower)


def load_vocabulary_file(path: Union[str, Path]) -> Vocabulary:
    """Read and parse the tokenizer document at ``path``."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise VocabularyFormatError(f"Cannot read tokenizer file {path}: {exc}") from exc
    vocab = load_vocabulary(raw)
    logger.info(f"Tokenizer loaded: {len(vocab)} words from {path}")
    return vocab


def _as_object(value, name: str) -> dict:
    """Return ``value`` as a dict, decoding it first if it is a JSON string."""
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError as exc:
            raise VocabularyFormatError(f"'{name}' string is not valid JSON: {exc}") from exc
        if isinstance(decoded, dict):
            return decoded
    if value is None:
        raise VocabularyFormatError(f"Tokenizer document has no '{name}'")
    raise VocabularyFormatError(f"'{name}' must be an object or a JSON-encoded object")
