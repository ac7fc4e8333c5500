import pytest

from grading import display_score, present_score, replace_highlights, score
from normalizer import normalize

PAIRS = [
    ("The cat sat.", "The cat sat."),
    ("I like apples.", "I like oranges."),
    ("I don't know.", "i do not know"),
    ("cat", "cta"),
    ("A quick brown fox.", "quick brown fox"),
    ("Short.", "a much much longer answer than expected"),
    ("Hello there, friend!", ""),
    ("", "something"),
]


def test_identical_sentences_score_perfectly():
    feedback = score("The cat sat.", "The cat sat.")
    assert feedback.character_accuracy == 100
    assert feedback.word_accuracy == 100
    assert all(d.type == "match" for d in feedback.differences)
    assert feedback.mistakes.missing_words == []
    assert feedback.mistakes.extra_words == []
    assert feedback.mistakes.misspelled_words == []


def test_substituted_word():
    feedback = score("I like apples.", "I like oranges.")
    replaced = [d for d in feedback.differences if d.type == "replace"]
    assert len(replaced) == 1
    assert (replaced[0].original_text, replaced[0].user_text) == ("apples", "oranges")
    assert feedback.mistakes.missing_words == ["apples"]
    assert feedback.mistakes.extra_words == ["oranges"]
    assert feedback.mistakes.misspelled_words == []


def test_contractions_are_expanded_before_comparison():
    feedback = score("I don't know.", "i do not know")
    assert feedback.character_accuracy == 100
    assert feedback.word_accuracy == 100


def test_transposed_short_word():
    feedback = score("cat", "cta")
    assert feedback.mistakes.misspelled_words == []
    assert feedback.mistakes.missing_words == ["cat"]
    assert feedback.mistakes.extra_words == ["cta"]
    assert feedback.character_accuracy == pytest.approx(100 / 3)
    assert feedback.word_accuracy == 0


@pytest.mark.parametrize("original, typed", PAIRS)
def test_score_is_deterministic(original, typed):
    assert score(original, typed) == score(original, typed)


@pytest.mark.parametrize("text", ["The cat sat.", "Hello, world!", "It's fine", "x"])
def test_identity(text):
    feedback = score(text, text)
    assert feedback.character_accuracy == 100
    assert feedback.word_accuracy == 100


@pytest.mark.parametrize("original, typed", PAIRS)
def test_bounds_and_diff_length(original, typed):
    feedback = score(original, typed)
    assert 0 <= feedback.character_accuracy <= 100
    assert 0 <= feedback.word_accuracy <= 100
    assert 0 <= display_score(feedback) <= 100

    expected = len(normalize(original).split()), len(normalize(typed).split())
    assert len(feedback.differences) == max(expected)


def test_word_accuracy_depends_on_reference_length():
    forward = score("one two three four", "one two")
    backward = score("one two", "one two three four")
    assert forward.word_accuracy == 50
    assert backward.word_accuracy == 100
    assert forward.character_accuracy == backward.character_accuracy


def test_empty_input_is_low_but_defined():
    feedback = score("Hello there, friend!", "")
    assert feedback.character_accuracy == 0
    assert feedback.word_accuracy == 0
    assert [d.type for d in feedback.differences] == ["delete"] * 3


def test_empty_reference_counts_as_perfect():
    feedback = score("", "")
    assert feedback.character_accuracy == 100
    assert feedback.word_accuracy == 100
    assert feedback.differences == []


def test_display_score_is_unrounded_average():
    feedback = score("cat", "cta")
    assert display_score(feedback) == pytest.approx(100 / 6)
    assert present_score(display_score(feedback)) == 16.67
    assert present_score(display_score(feedback), 0) == 17


def test_replace_highlights_only_cover_replacements():
    feedback = score("I like apples and pears.", "I like apples or pears and plums.")
    highlights = replace_highlights(feedback)
    replaced = [i for i, d in enumerate(feedback.differences) if d.type == "replace"]
    assert sorted(highlights) == replaced
    for i, spans in highlights.items():
        d = feedback.differences[i]
        assert "".join(s.original_text for s in spans) == d.original_text
        assert "".join(s.user_text for s in spans) == d.user_text
