"""Lexical keyword scoring for chunk text.

Scores are occurrences per 100 characters plus a flat presence bonus per
matched keyword.
Matching is literal substring matching on lowercased text: "search" also
matches inside "researched".
"""

import re

DEFAULT_PRESENCE_BONUS = 0.5
MIN_KEYWORD_LENGTH = 3

STOP_WORDS = frozenset({
    "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
    "has", "he", "in", "is", "it", "its", "of", "on", "that", "the",
    "to", "was", "will", "with", "what", "when", "where", "who", "why",
    "how", "can", "could", "should", "would", "may", "might", "must",
})

_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_keywords(query: str) -> list[str]:
    """Return the significant terms of a query, in query order.

    Lowercases, replaces punctuation with spaces, splits on whitespace, and
    drops short tokens and stop words. Repeated terms are kept and each
    copy contributes to the score.
    """
    words = _PUNCTUATION.sub(" ", query.lower()).split()
    return [
        word for word in words
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]


def keyword_score(
    text: str,
    keywords: list[str],
    presence_bonus: float = DEFAULT_PRESENCE_BONUS,
) -> float:
    """Score chunk text against pre-extracted keywords.

    Each keyword contributes its occurrence count plus ``presence_bonus``
    when it occurs at least once. The sum is divided by ``len(text) / 100``.
    Returns exactly 0.0 when no keyword occurs.
    """
    lowered = text.lower()
    if not lowered or not keywords:
        return 0.0

    score = 0.0
    for keyword in keywords:
        occurrences = lowered.count(keyword)
        if occurrences:
            score += occurrences + presence_bonus

    if score == 0.0:
        return 0.0
    return score / (len(lowered) / 100)


class KeywordScorer:
    """Keyword scorer bound to a presence bonus."""

    def __init__(self, presence_bonus: float = DEFAULT_PRESENCE_BONUS):
        self.presence_bonus = presence_bonus

    def extract_keywords(self, query: str) -> list[str]:
        return extract_keywords(query)

    def score(self, text: str, keywords: list[str]) -> float:
        return keyword_score(text, keywords, presence_bonus=self.presence_bonus)
