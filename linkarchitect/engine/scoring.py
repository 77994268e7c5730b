"""Relevance scoring of candidate URLs against the article."""

from __future__ import annotations

import re
from typing import Dict, List, Sequence

from .config import EngineConfig, load_config
from .similarity import keyword_overlap, path_segments, slug_similarity, url_structure_similarity
from .text import extract_keywords
from .types import ArticleContent, CandidateUrl, ScoredCandidate

SIGNALS = ("slug", "keywords", "url_structure")

_SEPARATOR_RE = re.compile(r"[-_]")
_PAGE_EXTENSION_RE = re.compile(r"\.(html|htm|php|asp|aspx)$", re.IGNORECASE)


def extract_slug(url: str) -> str:
    """Return the final non-empty path segment of ``url``."""

    segments = path_segments(url)
    if not segments:
        return ""
    return segments[-1]


def slug_to_title(slug: str) -> str:
    """Turn ``best-running-shoes.html`` into ``best running shoes``."""

    return _PAGE_EXTENSION_RE.sub("", _SEPARATOR_RE.sub(" ", slug)).strip()


def score_candidates(
    article: ArticleContent,
    candidates: Sequence[CandidateUrl],
    config: EngineConfig | None = None,
) -> List[ScoredCandidate]:
    """Return every candidate scored against the article, best first.

    The order is stable, so candidates with equal scores keep the order in
    which they were discovered.
    """

    engine_config = config or load_config(None)
    limit = int(engine_config.get("max_keywords", 20))
    article_slug = extract_slug(article.url)
    article_keywords = extract_keywords(article.text, limit)

    scored: List[ScoredCandidate] = []
    for url in candidates:
        slug = extract_slug(url)
        title = slug_to_title(slug)
        features = {
            "slug": slug_similarity(article_slug, slug),
            "keywords": keyword_overlap(article_keywords, extract_keywords(title, limit)),
            "url_structure": url_structure_similarity(article.url, url),
        }
        total = sum(engine_config.weight(name) * value for name, value in features.items())
        scored.append(ScoredCandidate(url=url, title=title, score=total, features=features))

    scored.sort(key=lambda item: item.score, reverse=True)
    return scored


def score_reason(features: Dict[str, float], config: EngineConfig, top_k: int = 2) -> str:
    """Return a human-friendly reason summary based on top weighted features."""

    weighted = []
    for name, value in features.items():
        weight = config.weight(name)
        if weight > 0 and value > 0:
            weighted.append((weight * value, name, value))
    weighted.sort(reverse=True)

    fragments = []
    for _, name, value in weighted[:top_k]:
        fragments.append(_reason_fragment(name, value))
    return "; ".join(fragment for fragment in fragments if fragment)


def _reason_fragment(name: str, value: float) -> str:
    mapping = {
        "slug": "slug match",
        "keywords": "keyword overlap",
        "url_structure": "same site section",
    }
    descriptor = mapping.get(name)
    if not descriptor:
        return ""
    if value >= 0.85:
        qualifier = "excellent"
    elif value >= 0.5:
        qualifier = "strong"
    else:
        qualifier = "partial"
    return f"{qualifier} {descriptor}"
