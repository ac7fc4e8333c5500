import pytest
from fastapi.testclient import TestClient

from app import app, feedback_cache


@pytest.fixture
def client():
    feedback_cache.clear()
    return TestClient(app)


def test_home(client):
    rv = client.get("/")
    assert rv.status_code == 200
    data = rv.json()
    assert data["status"] == "Backend running"
    assert "passing_score" in data


def test_segment(client):
    rv = client.post("/dictation/segment", json={"text": "I like tea. Do you?"})
    assert rv.status_code == 200
    data = rv.json()
    assert data["count"] == 2
    assert [s["original"] for s in data["sentences"]] == ["I like tea.", "Do you?"]
    assert all(s["attempts"] == 0 and s["feedback"] is None for s in data["sentences"])


def test_segment_without_terminator(client):
    rv = client.post("/dictation/segment", json={"text": "Hello world"})
    assert rv.json()["count"] == 1


def test_submit_dictation(client):
    rv = client.post("/submit/dictation", json={"expected": "I like apples.", "text": "I like oranges."})
    assert rv.status_code == 200
    data = rv.json()
    assert 0 < data["score"] < 100
    feedback = data["feedback"]
    assert [d["type"] for d in feedback["differences"]] == ["match", "match", "replace"]
    assert feedback["mistakes"]["missing_words"] == ["apples"]
    assert feedback["mistakes"]["extra_words"] == ["oranges"]
    assert "2" in data["highlights"]
    assert data["cursor_offset"] == 7


def test_submit_dictation_perfect(client):
    rv = client.post("/submit/dictation", json={"expected": "I don't know.", "text": "i do not know"})
    assert rv.json()["score"] == 100
    assert rv.json()["highlights"] == {}
    assert rv.json()["cursor_offset"] is None


def test_submit_dictation_rejects_blank(client):
    rv = client.post("/submit/dictation", json={"expected": "Hi.", "text": "   "})
    assert rv.status_code == 400


def test_submit_dictation_uses_cache(client):
    payload = {"expected": "The cat sat.", "text": "the cat sat"}
    client.post("/submit/dictation", json=payload)
    client.post("/submit/dictation", json=payload)
    assert feedback_cache.stats()["hits"] == 1


def test_submit_sentence_state(client):
    sentence = {"original": "The cat sat.", "user_input": "the bat", "attempts": 2, "accuracy_score": 40}
    rv = client.post("/dictation/sentences/submit", json={"sentence": sentence, "text": "the cat sat"})
    assert rv.status_code == 200
    assert rv.json()["cursor_offset"] is None
    data = rv.json()["sentence"]
    assert data["attempts"] == 3
    assert data["accuracy_score"] == 100
    assert data["is_completed"] is True
    assert data["user_input"] == "the cat sat"


def test_submit_sentence_with_custom_passing_score(client):
    sentence = {"original": "The cat sat."}
    rv = client.post(
        "/dictation/sentences/submit",
        json={"sentence": sentence, "text": "the cat sit", "passing_score": 50},
    )
    assert rv.json()["sentence"]["is_completed"] is True


def test_submit_sentence_rejects_blank(client):
    rv = client.post("/dictation/sentences/submit", json={"sentence": {"original": "Hi."}, "text": ""})
    assert rv.status_code == 400


def test_create_attempt(client):
    sentences = [
        {"original": "One.", "accuracy_score": 100, "is_completed": True, "attempts": 1},
        {"original": "Two.", "accuracy_score": 50, "attempts": 2},
    ]
    rv = client.post("/dictation/attempts", json={
        "exercise_id": "ex-7",
        "translated_text": "One. Two.",
        "sentences": sentences,
        "time_spent": 30,
        "attempt_number": 2,
    })
    assert rv.status_code == 200
    data = rv.json()
    assert data["overall_accuracy"] == 75
    assert data["attempt_number"] == 2
    assert data["playback_speed"] == 1.0
    assert len(data["sentence_attempts"]) == 2
    assert "timestamp" in data


def test_create_attempt_validates(client):
    rv = client.post("/dictation/attempts", json={
        "exercise_id": "ex-7",
        "translated_text": "",
        "sentences": [],
        "time_spent": -1,
    })
    assert rv.status_code == 422


def test_imperfect_sentence_submission_points_at_first_wrong_word(client):
    rv = client.post(
        "/dictation/sentences/submit",
        json={"sentence": {"original": "The cat sat on the mat."}, "text": "the cat sit on the mat"},
    )
    data = rv.json()
    assert data["sentence"]["is_completed"] is False
    assert data["cursor_offset"] == 8


def test_short_submission_points_at_end_of_input(client):
    rv = client.post("/submit/dictation", json={"expected": "The cat sat.", "text": "the cat"})
    assert rv.json()["cursor_offset"] == 7


def test_cursor_offset_respects_passing_score(client):
    rv = client.post(
        "/submit/dictation",
        json={"expected": "The cat sat.", "text": "the cat sit", "passing_score": 50},
    )
    assert rv.json()["cursor_offset"] is None
