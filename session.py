"""Caller-side state around the grading engine.

Nothing here touches storage: a session is built from a text or from
previously saved sentences, mutated by submissions, and finally summarized
into a ``DictationPracticeAttempt`` that the caller may persist.
"""
import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

import grading
from config import Config
from differ import first_mismatch_offset
from schemas import DictationFeedback, DictationPracticeAttempt, DictationSentence
from segmenter import build_sentences

logger = logging.getLogger(__name__)


class DictationError(Exception):
    """Base class for rejected session operations."""


class EmptySubmissionError(DictationError):
    pass


class SentenceIndexError(DictationError, IndexError):
    pass


class FeedbackCache:
    """Bounded LRU of feedback keyed by the literal (original, user_input) pair.

    Safe only because ``grading.score`` is deterministic. Every call hands
    out its own copy, so callers may mutate what they get back.
    """

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = Config.FEEDBACK_CACHE_SIZE if max_entries is None else max_entries
        if self.max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._cache: "OrderedDict[Tuple[str, str], DictationFeedback]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get_or_score(self, original: str, user_input: str) -> DictationFeedback:
        key = (original, user_input)
        if key in self._cache:
            self.hits += 1
            self._cache.move_to_end(key)
            return self._cache[key].model_copy(deep=True)

        self.misses += 1
        feedback = grading.score(original, user_input)
        self._cache[key] = feedback
        while len(self._cache) > self.max_entries:
            # least recently used sits first
            self._cache.popitem(last=False)
        return feedback.model_copy(deep=True)

    def clear(self) -> None:
        self._cache.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> Dict[str, int]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": len(self._cache),
            "max_entries": self.max_entries,
        }

    def __len__(self) -> int:
        return len(self._cache)


def apply_submission(
    sentence: DictationSentence,
    user_input: str,
    passing_score: float,
    cache: Optional[FeedbackCache] = None,
) -> DictationSentence:
    """Return ``sentence`` updated with a graded submission.

    Raises EmptySubmissionError for blank input: "nothing typed" must not be
    confused with a perfect score against an empty reference.
    """
    typed = user_input.strip()
    if not typed:
        raise EmptySubmissionError("Submission is empty.")

    if cache is not None:
        feedback = cache.get_or_score(sentence.original, typed)
    else:
        feedback = grading.score(sentence.original, typed)

    accuracy = grading.display_score(feedback)
    return sentence.model_copy(update={
        "user_input": typed,
        "accuracy_score": accuracy,
        "attempts": sentence.attempts + 1,
        "feedback": feedback,
        "is_completed": accuracy >= passing_score,
    })


def cursor_offset(sentence: DictationSentence, passing_score: float) -> Optional[int]:
    """Offset in ``user_input`` where the caret should go for another try.

    None before the first submission and once the sentence passes.
    """
    if sentence.feedback is None or sentence.accuracy_score >= passing_score:
        return None
    return first_mismatch_offset(sentence.original, sentence.user_input)


def summarize_attempt(
    sentences: List[DictationSentence],
    exercise_id: str,
    translated_text: str,
    time_spent: int,
    attempt_number: int = 1,
    playback_speed: float = 1.0,
) -> DictationPracticeAttempt:
    overall = sum(s.accuracy_score for s in sentences) / len(sentences) if sentences else 0.0
    return DictationPracticeAttempt(
        exercise_id=exercise_id,
        translated_text=translated_text,
        attempt_number=attempt_number,
        sentence_attempts=list(sentences),
        overall_accuracy=overall,
        time_spent=time_spent,
        timestamp=datetime.now(timezone.utc),
        playback_speed=playback_speed,
    )


class DictationSession:
    def __init__(
        self,
        sentences: Iterable[DictationSentence],
        passing_score: Optional[float] = None,
        cache: Optional[FeedbackCache] = None,
        current_index: int = 0,
    ):
        self.sentences: List[DictationSentence] = list(sentences)
        self.passing_score = Config.PASSING_SCORE if passing_score is None else passing_score
        self.cache = cache if cache is not None else FeedbackCache()
        self.current_index = 0
        self.attempt_count = 0
        self.cursor_offset: Optional[int] = None
        if self.sentences:
            self.go_to(current_index)
        elif current_index != 0:
            raise SentenceIndexError(f"No sentence at index {current_index}.")

    @classmethod
    def from_text(cls, text: str, **kwargs) -> "DictationSession":
        return cls(build_sentences(text), **kwargs)

    @classmethod
    def from_sentences(cls, sentences: Iterable[DictationSentence], **kwargs) -> "DictationSession":
        """Resume from saved state; sentences are taken as they are."""
        return cls(sentences, **kwargs)

    @property
    def current(self) -> Optional[DictationSentence]:
        if not self.sentences:
            return None
        return self.sentences[self.current_index]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.sentences):
            raise SentenceIndexError(f"No sentence at index {index}.")

    def submit(self, user_input: str, index: Optional[int] = None) -> DictationSentence:
        index = self.current_index if index is None else index
        self._check_index(index)
        updated = apply_submission(self.sentences[index], user_input, self.passing_score, self.cache)
        self.sentences[index] = updated
        self.cursor_offset = cursor_offset(updated, self.passing_score)
        logger.info(
            "sentence %d attempt %d scored %.2f",
            index, updated.attempts, updated.accuracy_score,
        )
        return updated

    def skip(self) -> DictationSentence:
        """Give up on the current sentence and move to the next one, if any."""
        self._check_index(self.current_index)
        sentence = self.sentences[self.current_index]
        skipped = sentence.model_copy(update={
            "is_completed": True,
            "accuracy_score": 0.0,
            "attempts": sentence.attempts + 1,
        })
        self.sentences[self.current_index] = skipped
        if self.current_index < len(self.sentences) - 1:
            self.current_index += 1
        return skipped

    @property
    def can_go_next(self) -> bool:
        has_next = self.current_index < len(self.sentences) - 1
        current = self.current
        if current is None:
            return has_next
        return has_next and current.is_completed and current.accuracy_score >= self.passing_score

    @property
    def can_go_previous(self) -> bool:
        return self.current_index > 0

    def next_sentence(self) -> bool:
        if not self.can_go_next:
            return False
        self.current_index += 1
        return True

    def previous_sentence(self) -> bool:
        if not self.can_go_previous:
            return False
        self.current_index -= 1
        return True

    def go_to(self, index: int) -> DictationSentence:
        self._check_index(index)
        self.current_index = index
        return self.sentences[index]

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.sentences if s.is_completed)

    @property
    def all_complete(self) -> bool:
        return bool(self.sentences) and all(s.is_completed for s in self.sentences)

    @property
    def progress_percentage(self) -> float:
        if not self.sentences:
            return 0.0
        return self.completed_count / len(self.sentences) * 100

    @property
    def overall_accuracy(self) -> float:
        if not self.sentences:
            return 0.0
        return sum(s.accuracy_score for s in self.sentences) / len(self.sentences)

    def retry(self) -> None:
        """Start over: every sentence back to its untouched state."""
        self.sentences = [
            s.model_copy(update={
                "user_input": "",
                "is_completed": False,
                "accuracy_score": 0.0,
                "attempts": 0,
                "feedback": None,
            })
            for s in self.sentences
        ]
        self.current_index = 0
        self.cursor_offset = None

    def complete(
        self,
        exercise_id: str,
        translated_text: str,
        time_spent: int,
        playback_speed: float = 1.0,
    ) -> DictationPracticeAttempt:
        self.attempt_count += 1
        attempt = summarize_attempt(
            self.sentences,
            exercise_id=exercise_id,
            translated_text=translated_text,
            time_spent=time_spent,
            attempt_number=self.attempt_count,
            playback_speed=playback_speed,
        )
        logger.info(
            "dictation %s attempt %d finished: %.2f%% over %d sentences",
            exercise_id, attempt.attempt_number, attempt.overall_accuracy, len(self.sentences),
        )
        return attempt
