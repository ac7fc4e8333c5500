"""Word-level comparison of a normalized reference against normalized input.

Alignment is positional: word ``i`` of the input is compared with word ``i``
of the reference. One missing word early in a sentence therefore shifts every
later pair and shows up as a run of ``replace`` spans.
"""
import re
from typing import List, Optional

from edit_distance import edit_operations
from normalizer import normalize
from schemas import CharSpan, TextDifference

_WORD_RE = re.compile(r"\S+")


def tokenize(text: str) -> List[str]:
    return text.split()


def diff(original: str, user_input: str) -> List[TextDifference]:
    original_words = tokenize(original)
    input_words = tokenize(user_input)

    differences: List[TextDifference] = []
    original_offset = 0
    input_offset = 0

    for i in range(max(len(original_words), len(input_words))):
        original_word = original_words[i] if i < len(original_words) else ""
        input_word = input_words[i] if i < len(input_words) else ""

        if original_word == input_word:
            kind = "match"
        elif not input_word:
            kind = "delete"
        elif not original_word:
            kind = "insert"
        else:
            kind = "replace"

        # inserted words only exist in the input stream
        if kind == "insert":
            start, end = input_offset, input_offset + len(input_word)
        else:
            start, end = original_offset, original_offset + len(original_word)

        differences.append(TextDifference(
            type=kind,
            original_text=original_word,
            user_text=input_word,
            start_index=start,
            end_index=end,
        ))

        original_offset += len(original_word) + 1
        input_offset += len(input_word) + 1

    return differences


def word_accuracy(original: str, user_input: str) -> float:
    """Share of reference words typed correctly at their position.

    The denominator is the reference length only, so the measure is not
    symmetric in its arguments.
    """
    original_words = tokenize(original)
    input_words = tokenize(user_input)
    if not original_words:
        return 100.0

    correct = sum(1 for o, t in zip(original_words, input_words) if o == t)
    return correct / len(original_words) * 100


def first_mismatch_offset(original: str, user_input: str) -> Optional[int]:
    """Offset in the raw ``user_input`` where the first wrong word begins.

    Both texts are compared word by word after normalizing each word. When the
    input runs out before the reference does, the end of the input is
    returned; ``None`` means every reference word was matched.
    """
    typed = list(_WORD_RE.finditer(user_input))
    for i, word in enumerate(tokenize(original)):
        if i >= len(typed):
            return len(user_input)
        if normalize(word) != normalize(typed[i].group()):
            return typed[i].start()
    return None


def character_diff(original_word: str, typed_word: str) -> List[CharSpan]:
    """Group the character edit script of two words into runs of one kind."""
    spans: List[CharSpan] = []
    for op, i, j in edit_operations(original_word, typed_word):
        original_char = original_word[i] if op in ("equal", "delete", "replace") else ""
        typed_char = typed_word[j] if op in ("equal", "insert", "replace") else ""
        if spans and spans[-1].op == op:
            spans[-1].original_text += original_char
            spans[-1].user_text += typed_char
        else:
            spans.append(CharSpan(op=op, original_text=original_char, user_text=typed_char))
    return spans
