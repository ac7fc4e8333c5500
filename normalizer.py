import re
from types import MappingProxyType

# Lowercase keys; matched whole-word and case-insensitively.
CONTRACTIONS = MappingProxyType({
    "i'm": "i am",
    "you're": "you are",
    "he's": "he is",
    "she's": "she is",
    "it's": "it is",
    "we're": "we are",
    "they're": "they are",
    "i've": "i have",
    "you've": "you have",
    "we've": "we have",
    "they've": "they have",
    "i'll": "i will",
    "you'll": "you will",
    "he'll": "he will",
    "she'll": "she will",
    "it'll": "it will",
    "we'll": "we will",
    "they'll": "they will",
    "i'd": "i would",
    "you'd": "you would",
    "he'd": "he would",
    "she'd": "she would",
    "it'd": "it would",
    "we'd": "we would",
    "they'd": "they would",
    "isn't": "is not",
    "aren't": "are not",
    "wasn't": "was not",
    "weren't": "were not",
    "hasn't": "has not",
    "haven't": "have not",
    "hadn't": "had not",
    "doesn't": "does not",
    "don't": "do not",
    "didn't": "did not",
    "won't": "will not",
    "wouldn't": "would not",
    "shouldn't": "should not",
    "couldn't": "could not",
    "can't": "cannot",
    "mustn't": "must not",
    "mightn't": "might not",
    "needn't": "need not",
    "let's": "let us",
    "that's": "that is",
    "who's": "who is",
    "what's": "what is",
    "where's": "where is",
    "when's": "when is",
    "why's": "why is",
    "how's": "how is",
    "there's": "there is",
    "here's": "here is",
})

_APOSTROPHES = re.compile(r"[‘’ʼ]")
_CONTRACTION_RE = re.compile(
    r"\b(" + "|".join(re.escape(c) for c in sorted(CONTRACTIONS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
# periods, commas, ! ? ; :, straight and curly double quotes, brackets, dashes
_PUNCTUATION = re.compile(r"[.,!?;:\"“”()\[\]{}—–-]")
# an apostrophe survives only between two word characters (o'clock, john's)
_LOOSE_APOSTROPHE = re.compile(r"(?<!\w)'|'(?!\w)")
_WHITESPACE = re.compile(r"\s+")


def expand_contractions(text: str) -> str:
    return _CONTRACTION_RE.sub(lambda m: CONTRACTIONS[m.group(1).lower()], text)


def normalize(text: str) -> str:
    """Canonical comparison form: lowercase, contractions expanded,
    punctuation stripped, whitespace collapsed. Never raises."""
    normalized = text.strip().lower()
    normalized = _APOSTROPHES.sub("'", normalized)
    # must run before punctuation stripping, the table keys carry apostrophes
    normalized = expand_contractions(normalized)
    normalized = _PUNCTUATION.sub("", normalized)
    normalized = _LOOSE_APOSTROPHE.sub("", normalized)
    return _WHITESPACE.sub(" ", normalized).strip()
