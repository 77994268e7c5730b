"""Transition sentences and anchor text for injected links."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Transition:
    """Sentence wrapped around a link: ``intro <a>anchor</a>outro``."""

    intro: str
    outro: str


TRANSITIONS: Tuple[Transition, ...] = (
    Transition(
        intro="When exploring this topic further, consider checking out our guide on",
        outro=" to see how it compares and what might work best for your needs.",
    ),
    Transition(
        intro="For those interested in related solutions, our comprehensive review of",
        outro=" provides valuable insights that might help inform your decision.",
    ),
    Transition(
        intro="If you're weighing your options, it's worth exploring",
        outro=" for a detailed comparison of features and capabilities.",
    ),
    Transition(
        intro="To deepen your understanding of this subject, take a look at our analysis on",
        outro=" which covers key aspects in more detail.",
    ),
    Transition(
        intro="Building on these concepts, you might find our guide to",
        outro=" particularly helpful for understanding the broader context.",
    ),
    Transition(
        intro="For additional perspective on similar tools and platforms, check out",
        outro=" to see alternative approaches and solutions.",
    ),
    Transition(
        intro="If you're evaluating different options, our detailed comparison of",
        outro=" offers insights that can guide your selection process.",
    ),
    Transition(
        intro="To explore related features and functionality, review our post on",
        outro=" for a comprehensive overview of what's available.",
    ),
    Transition(
        intro="For those considering alternatives, investigating",
        outro=" can provide clarity on different strengths and use cases.",
    ),
    Transition(
        intro="Understanding the full landscape requires looking at",
        outro=" to see how various solutions stack up against each other.",
    ),
)


def choose_transition(rng: random.Random) -> Transition:
    return rng.choice(TRANSITIONS)


def format_anchor_text(title: str, max_length: int = 60) -> str:
    """Capitalise each word of ``title`` and cut it to ``max_length`` characters."""

    words = title.split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)[:max_length]
