from typing import List

from differ import tokenize
from edit_distance import is_similar
from schemas import MisspelledWord, MistakeCategory


def _unique(words: List[str]) -> List[str]:
    return list(dict.fromkeys(words))


def classify(original: str, user_input: str) -> MistakeCategory:
    """Missing and extra words by set membership, misspellings by position.

    The two passes do not exclude each other: a misspelled word is usually
    also reported as missing (and its typo as extra).
    """
    original_words = tokenize(original)
    input_words = tokenize(user_input)
    original_set = set(original_words)
    input_set = set(input_words)

    missing = _unique([w for w in original_words if w not in input_set])
    extra = _unique([w for w in input_words if w not in original_set])

    misspelled = [
        MisspelledWord(original=o, typed=t)
        for o, t in zip(original_words, input_words)
        if o != t and is_similar(o, t)
    ]

    return MistakeCategory(
        missing_words=missing,
        extra_words=extra,
        misspelled_words=misspelled,
    )
