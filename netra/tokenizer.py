"""Text -> fixed-length id sequence, matching the training-time preprocessing.

The step order is lowercase, strip filter characters, split on whitespace,
look up, truncate, pad. Changing it changes the numbers the model sees, so
keep it byte-for-byte in step with the tokenizer the model was trained on."""

from typing import Mapping, Optional, Tuple

from netra.vocabulary import DEFAULT_FILTERS

PAD_ID: int = 0

TokenSequence = Tuple[int, ...]


def split_words(text: str, filters: str = DEFAULT_FILTERS, lower: bool = True) -> list:
    """Normalize ``text`` into words, before any vocabulary lookup."""
    if lower:
        text = text.lower()
    if filters:
        text = text.translate(str.maketrans(filters, " " * len(filters)))
    return text.split()


def tokenize(
    text: str,
    vocabulary: Mapping[str, int],
    max_length: int,
    num_words: Optional[int] = None,
) -> TokenSequence:
    """Encode ``text`` as exactly ``max_length`` ids.

    Words missing from the vocabulary are dropped, as are ids at or above
    ``num_words`` when a cap is given. The first ``max_length`` resolved ids
    are kept and the rest of the sequence is filled with PAD_ID.
    """
    if max_length <= 0:
        raise ValueError("max_length must be positive")

    filters = getattr(vocabulary, "filters", DEFAULT_FILTERS)
    lower = getattr(vocabulary, "lower", True)

    ids = []
    for word in split_words(text, filters, lower):
        idx = vocabulary.get(word)
        if idx is None:
            continue
        if num_words is not None and idx >= num_words:
            continue
        ids.append(idx)
        if len(ids) == max_length:
            break

    return tuple(ids) + (PAD_ID,) * (max_length - len(ids))
