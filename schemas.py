from datetime import datetime
from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

DiffType = Literal["match", "insert", "delete", "replace"]


class TextDifference(BaseModel):
    type: DiffType
    original_text: str
    user_text: str
    # offsets into the space-joined normalized words of one stream
    start_index: int
    end_index: int


class MisspelledWord(BaseModel):
    original: str
    typed: str


class MistakeCategory(BaseModel):
    missing_words: List[str] = Field(default_factory=list)
    extra_words: List[str] = Field(default_factory=list)
    misspelled_words: List[MisspelledWord] = Field(default_factory=list)


class DictationFeedback(BaseModel):
    character_accuracy: float = Field(ge=0, le=100)
    word_accuracy: float = Field(ge=0, le=100)
    differences: List[TextDifference]
    mistakes: MistakeCategory


class DictationSentence(BaseModel):
    original: str
    user_input: str = ""
    is_completed: bool = False
    accuracy_score: float = Field(default=0.0, ge=0, le=100)
    attempts: int = Field(default=0, ge=0)
    feedback: Optional[DictationFeedback] = None


class DictationPracticeAttempt(BaseModel):
    exercise_id: str
    translated_text: str
    attempt_number: int = Field(ge=1)
    sentence_attempts: List[DictationSentence]
    overall_accuracy: float = Field(ge=0, le=100)
    time_spent: int = Field(ge=0)  # seconds
    timestamp: datetime
    playback_speed: float = 1.0


class SegmentRequest(BaseModel):
    text: str


class SegmentOut(BaseModel):
    count: int
    sentences: List[DictationSentence]


class DictationSubmit(BaseModel):
    expected: str
    text: str
    passing_score: Optional[float] = Field(default=None, ge=0, le=100)


class CharSpan(BaseModel):
    op: Literal["equal", "delete", "insert", "replace"]
    original_text: str
    user_text: str


class DictationScoreOut(BaseModel):
    score: float
    feedback: DictationFeedback
    # character runs for each replace span, keyed by its index in differences
    highlights: Dict[int, List[CharSpan]] = Field(default_factory=dict)
    # where the caret goes for another try; None once the score passes
    cursor_offset: Optional[int] = None


class SentenceSubmit(BaseModel):
    sentence: DictationSentence
    text: str
    passing_score: Optional[float] = Field(default=None, ge=0, le=100)


class SentenceSubmitOut(BaseModel):
    sentence: DictationSentence
    cursor_offset: Optional[int] = None


class AttemptCreate(BaseModel):
    exercise_id: str
    translated_text: str
    sentences: List[DictationSentence]
    time_spent: int = Field(ge=0)
    playback_speed: float = Field(default=1.0, gt=0)
    attempt_number: int = Field(default=1, ge=1)

