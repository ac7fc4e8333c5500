"""Levenshtein distance and the accuracy measures built on it.

Every caller goes through ``distance_table`` so the cost model (unit cost for
insertion, deletion and substitution) is identical for character accuracy,
word similarity and character-level highlighting.
"""
from typing import List, Tuple

SIMILARITY_RATIO = 0.3


def distance_table(a: str, b: str) -> List[List[int]]:
    """Full (len(a)+1) x (len(b)+1) dynamic-programming table."""
    rows, cols = len(a) + 1, len(b) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,         # deletion
                table[i][j - 1] + 1,         # insertion
                table[i - 1][j - 1] + cost,  # substitution
            )
    return table


def edit_distance(a: str, b: str) -> int:
    return distance_table(a, b)[len(a)][len(b)]


def character_accuracy(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 100.0
    accuracy = (1 - edit_distance(a, b) / longest) * 100
    return max(0.0, min(100.0, accuracy))


def is_similar(word1: str, word2: str) -> bool:
    """True when the words are close enough to count as a misspelling."""
    return edit_distance(word1, word2) < max(len(word1), len(word2)) * SIMILARITY_RATIO


def edit_operations(a: str, b: str) -> List[Tuple[str, int, int]]:
    """Walk the table back from the corner into (op, i, j) steps.

    ``op`` is one of equal, delete, insert, replace; ``i``/``j`` index into
    ``a``/``b`` (for insert ``i`` is the position in ``a`` where the character
    goes, for delete ``j`` likewise). A free match is taken whenever it is
    optimal; otherwise deletion wins over insertion and insertion over
    substitution.
    """
    table = distance_table(a, b)
    i, j = len(a), len(b)
    ops: List[Tuple[str, int, int]] = []

    while i > 0 or j > 0:
        current = table[i][j]
        if i > 0 and j > 0 and a[i - 1] == b[j - 1] and current == table[i - 1][j - 1]:
            ops.append(("equal", i - 1, j - 1))
            i, j = i - 1, j - 1
        elif i > 0 and current == table[i - 1][j] + 1:
            ops.append(("delete", i - 1, j))
            i -= 1
        elif j > 0 and current == table[i][j - 1] + 1:
            ops.append(("insert", i, j - 1))
            j -= 1
        else:
            ops.append(("replace", i - 1, j - 1))
            i, j = i - 1, j - 1

    ops.reverse()
    return ops
