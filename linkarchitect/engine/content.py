"""Article fetching and boilerplate removal."""

from __future__ import annotations

import copy
import logging
from typing import Sequence

from bs4 import BeautifulSoup, Tag  # type: ignore

from .config import EngineConfig, load_config
from .errors import FetchError, ParseError
from .transport import Fetch, fetch_for
from .types import ArticleContent

logger = logging.getLogger(__name__)


def make_soup(markup: str) -> BeautifulSoup:
    """Parse HTML with lxml, falling back to the stdlib parser."""

    try:
        return BeautifulSoup(markup, "lxml")
    except Exception:
        # Fallback to html.parser if lxml isn't installed
        return BeautifulSoup(markup, "html.parser")


def fetch_article(
    url: str,
    fetch: Fetch | None = None,
    config: EngineConfig | None = None,
) -> ArticleContent:
    """Fetch ``url`` and return its cleaned article body.

    Any failure is re-raised as the same error type with the article URL in
    the message.
    """

    engine_config = config or load_config(None)
    fetch = fetch or fetch_for(engine_config)
    try:
        html = fetch(url)
        article = extract_article(
            html,
            url,
            content_selectors=engine_config.selectors("content_selectors"),
            strip_selectors=engine_config.selectors("strip_selectors"),
        )
    except FetchError as exc:
        raise FetchError(f"Article error: {exc}", url=url, status=exc.status) from exc
    except ParseError as exc:
        raise ParseError(f"Article error: {exc}", url=url) from exc

    logger.info("Fetched article %s (%d words)", url, article.word_count)
    return article


def extract_article(
    html: str,
    url: str,
    *,
    content_selectors: Sequence[str],
    strip_selectors: Sequence[str],
) -> ArticleContent:
    """Locate the main content region of ``html`` and strip non-content nodes.

    ``text`` is the concatenated text of the region, so inline markup such as
    ``e<em>x</em>ample`` stays one word and only whitespace in the markup
    separates words.
    """

    soup = make_soup(html)
    if soup.find() is None:
        raise ParseError(f"No HTML elements found in {url}", url=url)

    title = _text_of(soup.find("title")) or _text_of(soup.find("h1"))

    region = _select_region(soup, content_selectors)
    # Work on a copy so the parsed document stays intact.
    cleaned = copy.copy(region)
    for selector in strip_selectors:
        for node in cleaned.select(selector):
            node.extract()

    text = cleaned.get_text()
    return ArticleContent(
        url=url,
        title=title,
        html=cleaned.decode_contents(),
        text=text,
        word_count=len(text.split()),
    )


def _select_region(soup: BeautifulSoup, selectors: Sequence[str]) -> Tag:
    for selector in selectors:
        match = soup.select_one(selector)
        if match is not None:
            logger.debug("Content region matched %r", selector)
            return match
    return soup.body or soup


def _text_of(node: Tag | None) -> str:
    if node is None:
        return ""
    return node.get_text().strip()
