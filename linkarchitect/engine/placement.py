"""Placement logic for selecting where to insert links."""

from __future__ import annotations

from .types import InsertionPlan


def calculate_insertion_points(total_paragraphs: int, num_links: int) -> InsertionPlan:
    """Return paragraph indices spreading ``num_links`` links through the body.

    ``step = total_paragraphs // (num_links + 1)`` and the ``i``-th point is
    ``step * i`` clamped to the last paragraph. No more points than
    paragraphs are returned; when ``step`` is zero several points land on the
    same paragraph.
    """

    if total_paragraphs <= 0 or num_links <= 0:
        return []

    step = total_paragraphs // (num_links + 1)
    count = min(num_links, total_paragraphs)
    return [min(step * i, total_paragraphs - 1) for i in range(1, count + 1)]
