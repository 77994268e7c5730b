"""Glue between Django and the link architect engine.

The view and the ``inject_links`` management command both run the
pipeline through :func:`run_link_injection`, so configuration loading and
error reporting behave the same on the web and in the shell.
"""

from __future__ import annotations

import random
from typing import List, Tuple

from django.conf import settings

from .engine.config import EngineConfig, load_config
from .engine.errors import LinkArchitectError
from .engine.index import run_pipeline
from .engine.scoring import score_reason
from .engine.types import PipelineResult

REMEDIATION_HINTS: Tuple[str, ...] = (
    'Both URLs are correct and publicly reachable.',
    'The site accepts requests from this server (no bot or firewall block).',
    'The sitemap is valid XML (a <urlset> or a <sitemapindex>).',
)


def load_engine_config(path: str | None = None) -> EngineConfig:
    """Return the engine configuration, preferring ``path`` over settings."""

    return load_config(path or getattr(settings, 'LINKARCHITECT_ENGINE_CONFIG', None))


def run_link_injection(
    sitemap_url: str,
    article_url: str,
    num_links: int,
    *,
    config: EngineConfig | None = None,
    seed: int | None = None,
) -> PipelineResult:
    """Run the full pipeline; engine errors propagate unchanged."""

    rng = random.Random(seed) if seed is not None else None
    return run_pipeline(
        sitemap_url,
        article_url,
        num_links,
        config=config or load_engine_config(),
        rng=rng,
    )


def describe_error(exc: LinkArchitectError) -> str:
    """Return the error message followed by the standard remediation hints."""

    hints = '\n'.join(f'- {hint}' for hint in REMEDIATION_HINTS)
    return f'{exc}\n\nPlease check:\n{hints}'


def ranked_rows(result: PipelineResult, config: EngineConfig) -> List[dict[str, object]]:
    """Flatten the linked candidates into rows for display."""

    return [
        {
            'url': candidate.url,
            'title': candidate.title,
            'score': round(candidate.score, 3),
            'reason': score_reason(candidate.features, config) or 'no shared signal',
        }
        for candidate in result.ranked
    ]
