"""Query tokenization for recipe search.

Turns a raw query string into the significant search tokens the scorer
matches against titles, descriptions, ingredients and tags.
"""

import re
from typing import AbstractSet, List, Optional

# ASCII word characters only: accented letters are stripped like punctuation,
# while any Unicode whitespace (e.g. a non-breaking space) still separates words
_NON_WORD_RE = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE_RE = re.compile(r"\s+")

MIN_TOKEN_LENGTH = 3

STOP_WORDS: frozenset = frozenset(
    {
        # articles and auxiliaries
        "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "should",
        "can", "could", "may", "might", "must",
        # prepositions and conjunctions
        "with", "for", "and", "or", "but", "in", "on", "at", "to", "from", "by", "of",
        # search filler
        "recipe", "food", "dish", "make", "how", "what", "where", "when",
    }
)


def extract_keywords(query: str, stop_words: Optional[AbstractSet[str]] = None) -> List[str]:
    """Extract significant search tokens from a query.

    Lower-cases the query, strips punctuation, splits on whitespace and drops
    stop words and tokens shorter than three characters. Word order is kept and
    duplicates are not removed.

    Args:
        query: Raw user query.
        stop_words: Stop-word set to drop. Defaults to ``STOP_WORDS``.

    Returns:
        Ordered list of tokens, possibly empty.

    Raises:
        TypeError: If query is not a string.
    """
    if not isinstance(query, str):
        raise TypeError(f"query must be a string, got {type(query).__name__}")

    excluded = STOP_WORDS if stop_words is None else stop_words
    cleaned = _NON_WORD_RE.sub("", query.lower())
    return [
        word
        for word in _WHITESPACE_RE.split(cleaned)
        if len(word) >= MIN_TOKEN_LENGTH and word not in excluded
    ]
