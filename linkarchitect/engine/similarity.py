"""Set-overlap and URL structure similarity scores."""

from __future__ import annotations

import re
from typing import Iterable, List, Sequence
from urllib.parse import urlparse

_SLUG_SPLIT_RE = re.compile(r"[\s\-_]+")


def jaccard(set_a: Iterable[str], set_b: Iterable[str]) -> float:
    """Return Jaccard similarity for two iterables."""

    set_a = set(set_a)
    set_b = set(set_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def slug_tokens(slug: str) -> List[str]:
    return [token for token in _SLUG_SPLIT_RE.split(slug.lower()) if token]


def slug_similarity(slug_a: str, slug_b: str) -> float:
    """Jaccard similarity of the words in two URL slugs."""

    return jaccard(slug_tokens(slug_a), slug_tokens(slug_b))


def keyword_overlap(keywords_a: Sequence[str], keywords_b: Sequence[str]) -> float:
    """Jaccard similarity of two keyword lists, ignoring their rank."""

    return jaccard(keywords_a, keywords_b)


def path_segments(url: str) -> List[str] | None:
    """Return the non-empty path segments of an absolute URL.

    ``None`` signals a URL that could not be parsed or has no scheme/host.
    """

    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return [segment for segment in parsed.path.split("/") if segment]


def url_structure_similarity(url_a: str, url_b: str) -> float:
    """Share of leading path segments (slug excluded) the two URLs have in common."""

    segments_a = path_segments(url_a)
    segments_b = path_segments(url_b)
    if segments_a is None or segments_b is None:
        return 0.0

    depth = min(len(segments_a), len(segments_b))
    if depth <= 1:
        return 0.0
    matches = sum(1 for index in range(depth - 1) if segments_a[index] == segments_b[index])
    return matches / (depth - 1)
