"""Edit-distance based string similarity for typo-tolerant matching."""

from typing import List


def edit_distance(a: str, b: str) -> int:
    """Return the Levenshtein distance between two strings.

    Minimum number of single-character insertions, deletions and
    substitutions that turn ``a`` into ``b``.
    """
    rows = len(a) + 1
    cols = len(b) + 1
    table: List[List[int]] = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if a[i - 1] == b[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],  # substitution
                    table[i][j - 1],  # insertion
                    table[i - 1][j],  # deletion
                )

    return table[-1][-1]


def similarity_ratio(a: str, b: str) -> float:
    """Return similarity in [0, 1]: ``1 - distance / longer length``.

    Two empty strings are identical (1.0).
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - edit_distance(a, b) / longest
