"""Coordinator for the link architect pipeline."""

from __future__ import annotations

import logging
import random

from .config import EngineConfig, load_config
from .content import fetch_article
from .injector import interlink_article
from .scoring import score_candidates
from .sitemap import resolve_sitemap
from .transport import Fetch, fetch_for
from .types import PipelineResult

logger = logging.getLogger(__name__)


def run_pipeline(
    sitemap_url: str,
    article_url: str,
    num_links: int,
    config: EngineConfig | None = None,
    fetch: Fetch | None = None,
    rng: random.Random | None = None,
) -> PipelineResult:
    """Resolve the sitemap, rank its pages against the article and link the best ones."""

    engine_config = config or load_config(None)
    fetch = fetch or fetch_for(engine_config)

    candidate_urls = resolve_sitemap(sitemap_url, article_url, fetch=fetch, config=engine_config)
    article = fetch_article(article_url, fetch=fetch, config=engine_config)

    ranked = score_candidates(article, candidate_urls, engine_config)
    top = ranked[: max(num_links, 0)]
    logger.info(
        "Scored %d candidates for %s; best score %.3f",
        len(ranked),
        article_url,
        top[0].score if top else 0.0,
    )

    linked_html, inserted = interlink_article(
        article.html,
        top,
        num_links,
        rng=rng,
        anchor_max_length=int(engine_config.get("anchor_max_length", 60)),
    )

    return PipelineResult(
        html=linked_html,
        inserted=inserted,
        ranked=top[: len(inserted)],
        candidates_analyzed=len(candidate_urls),
        word_count=article.word_count,
        article_title=article.title,
    )
