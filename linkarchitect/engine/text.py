"""Shared text utilities and keyword extraction."""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable, List

_NON_WORD_RE = re.compile(r"[^\w\s]|_")

STOPWORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
        "be", "have", "has", "had", "do", "does", "did", "will", "would",
        "should", "could", "may", "might", "must", "can", "this", "that",
        "these", "those", "what", "which", "who", "when", "where", "why", "how",
    }
)

MIN_KEYWORD_LENGTH = 4


def tokenize(text: str) -> List[str]:
    """Return lower-cased tokens with punctuation treated as whitespace."""

    return _NON_WORD_RE.sub(" ", text.lower()).split()


def term_frequencies(tokens: Iterable[str]) -> Counter[str]:
    """Return term frequencies for the tokens."""

    return Counter(tokens)


def extract_keywords(text: str, limit: int = 20) -> List[str]:
    """Return up to ``limit`` salient tokens of ``text``, most frequent first.

    Tokens shorter than four characters and stop words are dropped. Equal
    counts keep the order in which the tokens first appear, so the result is
    reproducible for a given input.
    """

    if not text:
        return []
    tokens = [
        token
        for token in tokenize(text)
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOPWORDS
    ]
    counts = term_frequencies(tokens)
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [token for token, _ in ranked[: max(limit, 0)]]
