import re
from typing import List

from schemas import DictationSentence

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")


def segment(text: str) -> List[str]:
    # Terminators stay attached to their sentence.
    sentences = [s.strip() for s in _SENTENCE_RE.findall(text)]
    sentences = [s for s in sentences if s]
    if not sentences:
        # no terminator anywhere: the whole text is one dictation unit
        return [text.strip()]
    return sentences


def build_sentences(text: str) -> List[DictationSentence]:
    """Fresh practice units for a text, ready for a new session."""
    return [DictationSentence(original=s) for s in segment(text)]
