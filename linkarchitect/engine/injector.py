"""Splicing link paragraphs into article markup."""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Sequence, Tuple

from bs4 import BeautifulSoup, Tag  # type: ignore

from .anchors import choose_transition, format_anchor_text
from .content import make_soup
from .errors import NoParagraphsError
from .placement import calculate_insertion_points
from .types import LinkInsertion, ScoredCandidate

logger = logging.getLogger(__name__)


def interlink_article(
    html: str,
    candidates: Sequence[ScoredCandidate],
    num_links: int,
    *,
    rng: random.Random | None = None,
    anchor_max_length: int = 60,
) -> Tuple[str, List[LinkInsertion]]:
    """Insert one link paragraph per candidate at evenly spaced paragraphs.

    Parameters
    ----------
    html:
        Article body markup.
    candidates:
        Ranked candidates; the first ``num_links`` are used in rank order.
    num_links:
        Number of links requested.
    rng:
        Source of randomness for the transition sentences. Pass a seeded
        ``random.Random`` for reproducible output.
    anchor_max_length:
        Maximum length of the visible link text.

    Returns
    -------
    tuple
        ``(html, inserted)`` where ``html`` is the ``<body>`` contents and
        ``inserted`` describes each link paragraph added.

    Raises
    ------
    NoParagraphsError
        If the markup contains no ``<p>`` element.
    """

    rng = rng or random.Random()
    soup = make_soup(html)
    paragraphs = soup.find_all("p")
    if not paragraphs:
        raise NoParagraphsError("No paragraphs found in the article body")

    points = calculate_insertion_points(len(paragraphs), num_links)
    # Last node placed after each target paragraph, so links that share a
    # target stay in rank order.
    tails: Dict[int, Tag] = {}
    inserted: List[LinkInsertion] = []

    for index, candidate in zip(points, candidates):
        anchor_text = format_anchor_text(candidate.title, anchor_max_length)
        link_paragraph = _build_link_paragraph(soup, candidate.url, anchor_text, rng)
        tails.get(index, paragraphs[index]).insert_after(link_paragraph)
        tails[index] = link_paragraph
        inserted.append(
            LinkInsertion(
                url=candidate.url,
                title=candidate.title,
                anchor_text=anchor_text,
                paragraph_index=index,
            )
        )

    logger.info("Inserted %d links across %d paragraphs", len(inserted), len(paragraphs))
    return _body_markup(soup), inserted


def inject_links(
    html: str,
    candidates: Sequence[ScoredCandidate],
    num_links: int,
    rng: random.Random | None = None,
) -> str:
    """Return ``html`` with link paragraphs spliced in; see :func:`interlink_article`."""

    linked_html, _ = interlink_article(html, candidates, num_links, rng=rng)
    return linked_html


def _build_link_paragraph(soup: BeautifulSoup, url: str, anchor_text: str, rng: random.Random) -> Tag:
    transition = choose_transition(rng)
    paragraph = soup.new_tag("p")
    anchor = soup.new_tag("a", href=url)
    anchor.string = anchor_text
    paragraph.append(f"{transition.intro} ")
    paragraph.append(anchor)
    paragraph.append(transition.outro)
    return paragraph


def _body_markup(soup: BeautifulSoup) -> str:
    if soup.body is not None:
        return soup.body.decode_contents()
    return soup.decode_contents()
