"""Typed data structures used by the link architect pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

CandidateUrl = str
InsertionPlan = List[int]


@dataclass(frozen=True)
class ArticleContent:
    """Cleaned body of the source article after boilerplate removal."""

    url: str
    title: str
    html: str
    text: str
    word_count: int


@dataclass(frozen=True)
class ScoredCandidate:
    """Candidate URL with its relevance score against the article."""

    url: str
    title: str
    score: float
    features: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class LinkInsertion:
    """A link paragraph that was spliced into the article."""

    url: str
    title: str
    anchor_text: str
    paragraph_index: int


@dataclass(frozen=True)
class PipelineResult:
    """Output markup of a run together with the stats shown to the user.

    ``ranked`` holds the linked candidates only, in the order of ``inserted``.
    """

    html: str
    inserted: List[LinkInsertion]
    ranked: List[ScoredCandidate]
    candidates_analyzed: int
    word_count: int
    article_title: str
