import logging
from typing import Dict, List

from differ import character_diff, diff, word_accuracy
from edit_distance import character_accuracy
from mistakes import classify
from normalizer import normalize
from schemas import CharSpan, DictationFeedback

logger = logging.getLogger(__name__)


def score(original: str, user_input: str) -> DictationFeedback:
    """Grade one submission against its reference sentence.

    A pure function of its two arguments; callers may cache on the pair.
    """
    expected = normalize(original)
    typed = normalize(user_input)

    feedback = DictationFeedback(
        character_accuracy=character_accuracy(expected, typed),
        word_accuracy=word_accuracy(expected, typed),
        differences=diff(expected, typed),
        mistakes=classify(expected, typed),
    )
    logger.debug(
        "scored %r against %r: chars=%.2f words=%.2f",
        typed, expected, feedback.character_accuracy, feedback.word_accuracy,
    )
    return feedback


def display_score(feedback: DictationFeedback) -> float:
    # unrounded; see present_score
    return (feedback.character_accuracy + feedback.word_accuracy) / 2


def present_score(value: float, ndigits: int = 2) -> float:
    return round(value, ndigits)


def replace_highlights(feedback: DictationFeedback) -> Dict[int, List[CharSpan]]:
    return {
        i: character_diff(d.original_text, d.user_text)
        for i, d in enumerate(feedback.differences)
        if d.type == "replace"
    }
