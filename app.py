from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging

from config import Config
from differ import first_mismatch_offset
from grading import display_score, present_score, replace_highlights
from schemas import *
from segmenter import build_sentences
from session import (
    DictationError,
    EmptySubmissionError,
    FeedbackCache,
    apply_submission,
    cursor_offset,
    summarize_attempt,
)

logging.basicConfig(level=Config.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Dictation Grading Backend", version="0.2.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Shared across requests; grading is deterministic so entries never go stale.
feedback_cache = FeedbackCache(Config.FEEDBACK_CACHE_SIZE)


def _bad_submission(exc: DictationError) -> HTTPException:
    return HTTPException(400, str(exc))


# -----------------------------
#  ✂️ SEGMENT TEXT
# -----------------------------
@app.post("/dictation/segment", response_model=SegmentOut)
def segment_text(req: SegmentRequest):
    sentences = build_sentences(req.text)
    return SegmentOut(count=len(sentences), sentences=sentences)


# -----------------------------
#  📝 SUBMIT DICTATION
# -----------------------------
@app.post("/submit/dictation", response_model=DictationScoreOut)
def submit_dictation(payload: DictationSubmit):
    typed = payload.text.strip()
    if not typed:
        raise _bad_submission(EmptySubmissionError("Submission is empty."))

    passing = Config.PASSING_SCORE if payload.passing_score is None else payload.passing_score
    feedback = feedback_cache.get_or_score(payload.expected, typed)
    accuracy = display_score(feedback)
    offset = first_mismatch_offset(payload.expected, typed) if accuracy < passing else None
    return DictationScoreOut(
        score=present_score(accuracy),
        feedback=feedback,
        highlights=replace_highlights(feedback),
        cursor_offset=offset,
    )


# -----------------------------
#  🔁 SUBMIT AGAINST SENTENCE STATE
# -----------------------------
@app.post("/dictation/sentences/submit", response_model=SentenceSubmitOut)
def submit_sentence(payload: SentenceSubmit):
    passing = Config.PASSING_SCORE if payload.passing_score is None else payload.passing_score
    try:
        updated = apply_submission(payload.sentence, payload.text, passing, feedback_cache)
    except DictationError as exc:
        raise _bad_submission(exc)

    logger.info("sentence attempt %d scored %.2f", updated.attempts, updated.accuracy_score)
    return SentenceSubmitOut(sentence=updated, cursor_offset=cursor_offset(updated, passing))


# -----------------------------
#  📊 ATTEMPT SUMMARY
# -----------------------------
@app.post("/dictation/attempts", response_model=DictationPracticeAttempt)
def create_attempt(payload: AttemptCreate):
    return summarize_attempt(
        payload.sentences,
        exercise_id=payload.exercise_id,
        translated_text=payload.translated_text,
        time_spent=payload.time_spent,
        attempt_number=payload.attempt_number,
        playback_speed=payload.playback_speed,
    )


# ============================
# 🏠 Home (root) endpoint
# ============================
@app.get("/")
def home():
    return {
        "status": "Backend running",
        "version": app.version,
        "passing_score": Config.PASSING_SCORE,
        "cache": feedback_cache.stats(),
    }
