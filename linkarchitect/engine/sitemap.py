"""Recursive sitemap resolution into a flat list of candidate URLs.

A sitemap is either a ``<urlset>`` listing content pages or a
``<sitemapindex>`` pointing at further sitemaps. :func:`resolve_sitemap`
walks that tree with a bounded fan-out and a visited set owned by the call,
so cycles and oversized trees cannot run away. Only the top-level sitemap is
allowed to fail the run: a broken or empty child sitemap is logged and
contributes nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Set
from xml.etree import ElementTree

from .config import EngineConfig, load_config
from .errors import EmptyIndexError, LinkArchitectError, ParseError
from .transport import Fetch, fetch_for
from .types import CandidateUrl

logger = logging.getLogger(__name__)

INDEX_EXTENSION = ".xml"


@dataclass
class SitemapResolution:
    """State shared by every branch of one top-level resolution."""

    exclude_url: str
    fetch: Fetch
    max_sitemaps: int = 20
    max_children: int = 10
    skip_keywords: Sequence[str] = ("category", "tag", "author", "image")
    visited: Set[str] = field(default_factory=set)

    def should_visit(self, url: str) -> bool:
        return url not in self.visited and len(self.visited) < self.max_sitemaps

    def is_candidate(self, url: str) -> bool:
        if not url:
            return False
        exclude = self.exclude_url
        if url == exclude or url == exclude + "/" or url + "/" == exclude:
            return False
        return not url.lower().endswith(INDEX_EXTENSION)

    def wants_child(self, url: str) -> bool:
        return bool(url) and not any(keyword in url for keyword in self.skip_keywords)


def resolve_sitemap(
    index_url: str,
    exclude_url: str,
    fetch: Fetch | None = None,
    config: EngineConfig | None = None,
) -> List[CandidateUrl]:
    """Return the deduplicated content URLs reachable from ``index_url``.

    Parameters
    ----------
    index_url:
        URL of the sitemap or sitemap index to start from.
    exclude_url:
        The article being linked; it and its trailing-slash variant never
        appear in the result.
    fetch:
        Transport callable, defaults to :func:`fetch_text` with the
        configured timeout.
    config:
        Engine configuration supplying the visit and fan-out limits.

    Returns
    -------
    list of str
        Candidate URLs in discovery order.

    Raises
    ------
    FetchError, ParseError
        When the top-level sitemap cannot be fetched or parsed.
    EmptyIndexError
        When the whole tree yields no usable URL.
    """

    engine_config = config or load_config(None)
    resolution = SitemapResolution(
        exclude_url=exclude_url,
        fetch=fetch or fetch_for(engine_config),
        max_sitemaps=int(engine_config.get("max_sitemaps", 20)),
        max_children=int(engine_config.get("max_child_sitemaps", 10)),
        skip_keywords=tuple(engine_config.get("skip_sitemap_keywords", ())),
    )

    urls = _collect(index_url, resolution)
    if not urls:
        raise EmptyIndexError(f"No URLs found in the sitemap structure at {index_url}.", url=index_url)

    logger.info(
        "Resolved %d candidate URLs from %s (%d sitemaps fetched)",
        len(urls),
        index_url,
        len(resolution.visited),
    )
    return urls


def _resolve_branch(url: str, resolution: SitemapResolution) -> List[CandidateUrl]:
    if not resolution.should_visit(url):
        logger.debug("Not visiting sitemap %s: already seen or limit reached", url)
        return []
    try:
        urls = _collect(url, resolution)
    except LinkArchitectError as exc:
        logger.warning("Skipping sitemap %s: %s", url, exc)
        return []
    if not urls:
        logger.warning("Skipping sitemap %s: no URLs found", url)
    return urls


def _collect(url: str, resolution: SitemapResolution) -> List[CandidateUrl]:
    resolution.visited.add(url)
    root = parse_sitemap_xml(resolution.fetch(url), url)

    urls: List[CandidateUrl] = []

    children = _loc_values(root, "sitemap")
    if children:
        selected = [child for child in children if resolution.wants_child(child)]
        selected = selected[: resolution.max_children]
        logger.debug("Sitemap index %s: following %d of %d children", url, len(selected), len(children))
        for child in selected:
            urls.extend(_resolve_branch(child, resolution))

    urls.extend(loc for loc in _loc_values(root, "url") if resolution.is_candidate(loc))

    return list(dict.fromkeys(urls))


def parse_sitemap_xml(xml_text: str, url: str | None = None) -> ElementTree.Element:
    """Parse sitemap XML, raising :class:`ParseError` for malformed documents."""

    try:
        return ElementTree.fromstring(xml_text.strip())
    except ElementTree.ParseError as exc:
        raise ParseError(f"Invalid XML in sitemap {url or ''}: {exc}".strip(), url=url) from exc


def _loc_values(root: ElementTree.Element, parent: str) -> List[str]:
    # {*} matches both namespaced and bare sitemap documents.
    pattern = f".//{{*}}{parent}/{{*}}loc"
    return [(loc.text or "").strip() for loc in root.findall(pattern)]

