"""
Feed item deduplication.

Two independent filters:
1. Exact-key: drop items whose link is already persisted or was seen
   earlier in the same run. Cheap, applied before any network work.
2. Near-duplicate: drop candidates whose title overlaps too much with a
   recently persisted title or an earlier accepted candidate. Applied after
   translation so titles are compared in one language.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .types import RawFeedItem

logger = logging.getLogger(__name__)

# Titles at or above this overlap are treated as the same story.
SIMILARITY_THRESHOLD = 0.90
MIN_TOKEN_LENGTH = 3


def filter_known_links(items: list[RawFeedItem], known_links: Iterable[str]) -> list[RawFeedItem]:
    """Remove items whose link is already known.

    Args:
        items: Feed items in arrival order
        known_links: Source URLs already present in the store

    Returns:
        Items with new links only; for repeated links the first item wins
    """
    seen = set(known_links)
    kept: list[RawFeedItem] = []
    for item in items:
        if item.link in seen:
            continue
        seen.add(item.link)
        kept.append(item)
    return kept


def tokenize_title(title: str) -> list[str]:
    """Lowercase, split on whitespace and drop tokens of two chars or less."""
    return [token for token in title.lower().split() if len(token) >= MIN_TOKEN_LENGTH]


def title_similarity(first: str, second: str) -> float:
    """Dice-style token overlap between two titles.

    The intersection is taken over distinct tokens while the denominator
    counts every token, so repeated words lower the score.

    Examples:
        >>> title_similarity("Solar tender opens today", "Solar tender opens today")
        1.0
        >>> title_similarity("a b", "Solar farm")
        0.0
    """
    tokens_a = tokenize_title(first)
    tokens_b = tokenize_title(second)
    if not tokens_a or not tokens_b:
        return 0.0
    common = set(tokens_a) & set(tokens_b)
    return (2 * len(common)) / (len(tokens_a) + len(tokens_b))


class NearDuplicateFilter:
    """Stateful title filter for one run.

    Seeded with the persisted titles of the trailing window; every accepted
    candidate is added so later candidates are compared against it too.
    """

    def __init__(self, persisted_titles: Iterable[str], threshold: float = SIMILARITY_THRESHOLD):
        self.threshold = threshold
        self._titles: list[str] = [t for t in persisted_titles if t]

    def find_match(self, title: str) -> tuple[str, float] | None:
        """Return the first known title at or above the threshold, with its score."""
        for existing in self._titles:
            score = title_similarity(title, existing)
            if score >= self.threshold:
                return existing, score
        return None

    def is_duplicate(self, title: str) -> bool:
        return self.find_match(title) is not None

    def accept(self, title: str) -> bool:
        """Accept the title unless it duplicates a known one.

        Returns:
            True if the title was accepted and remembered, False if dropped
        """
        match = self.find_match(title)
        if match is not None:
            existing, score = match
            logger.info("Similar title found (%.0f%%): %r ~ %r", score * 100, title, existing)
            return False
        self._titles.append(title)
        return True
