"""
Duplicate detection for regulatory feed items.

Items are duplicates when they share a GUID or a link, or when their titles
are near-identical by word-set (Jaccard) similarity.
"""

import logging
from typing import Iterable, List

from regradar.models import FeedItem

logger = logging.getLogger(__name__)

# Similarity threshold for title-based dedup
TITLE_SIMILARITY_THRESHOLD = 0.9


def jaccard_similarity(first: str, second: str) -> float:
    """Jaccard similarity of the whitespace-separated word sets of two strings."""
    words1 = set(first.split())
    words2 = set(second.split())
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


def titles_similar(title1: str, title2: str) -> bool:
    """Check if two titles are similar enough to be duplicates."""
    return jaccard_similarity(title1.lower(), title2.lower()) >= TITLE_SIMILARITY_THRESHOLD


def is_duplicate_regulation(item: FeedItem, existing: Iterable[FeedItem]) -> bool:
    """Check a new item against already-known items."""
    existing = list(existing)

    if item.guid and any(other.guid == item.guid for other in existing):
        return True

    if any(other.link == item.link for other in existing):
        return True

    return any(titles_similar(other.title, item.title) for other in existing)


def deduplicate_items(items: List[FeedItem]) -> List[FeedItem]:
    """Remove duplicates within a batch. The first occurrence wins."""
    unique: List[FeedItem] = []
    for item in items:
        if not is_duplicate_regulation(item, unique):
            unique.append(item)

    dedup_count = len(items) - len(unique)
    if dedup_count > 0:
        logger.info("Deduplicated %d items (from %d to %d)", dedup_count, len(items), len(unique))

    return unique
