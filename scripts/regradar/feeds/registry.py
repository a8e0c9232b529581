"""
Source registry: builds the configured adapters, fetches from all of them and deduplicates.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

import requests

from regradar.config import Config
from regradar.feeds.base import FetchResult, SourceAdapter
from regradar.feeds.dedup import deduplicate_items, is_duplicate_regulation
from regradar.feeds.sec_rss import SEC_FEEDS, SECFeedAdapter
from regradar.models import FeedItem

logger = logging.getLogger(__name__)


def get_all_adapters(config: Config) -> List[SourceAdapter]:
    """Get instances of all enabled feed adapters, sharing one HTTP session."""
    session = requests.Session()
    adapters: List[SourceAdapter] = []

    for feed_name in config.enabled_feeds:
        if feed_name not in SEC_FEEDS:
            logger.warning("Unknown feed '%s' in configuration, skipping", feed_name)
            continue
        adapters.append(
            SECFeedAdapter(
                feed_name,
                session=session,
                timeout=config.get("feeds.request_timeout", 15),
                user_agent=config.get("feeds.user_agent", "RegulatorRadar/1.0"),
                max_items=config.get("feeds.max_items_per_feed", 50),
                fintech_only=config.get("feeds.fintech_only", True),
            )
        )

    return [a for a in adapters if a.enabled]


def fetch_all_sources(
    adapters: List[SourceAdapter],
    existing: Optional[Iterable[FeedItem]] = None,
    days: Optional[int] = None,
) -> FetchResult:
    """Fetch from all adapters, merge, and deduplicate.

    Args:
        adapters: Adapters to fetch from.
        existing: Already-stored items; new items duplicating them are dropped.
        days: Number of days to look back.

    Returns:
        Merged FetchResult with deduplicated entries.
    """
    all_entries: List[FeedItem] = []
    all_errors: List[str] = []
    sources_fetched = 0

    for adapter in adapters:
        try:
            logger.info("Fetching from %s...", adapter.name)
            result = adapter.fetch(days=days)
            all_entries.extend(result.entries)
            all_errors.extend(result.errors)
            sources_fetched += result.sources_fetched
            logger.info("  %s: %d entries", adapter.name, len(result.entries))
        except Exception as e:
            logger.error("Source %s failed: %s", adapter.name, e)
            all_errors.append(f"{adapter.name}: {e}")

    unique_entries = deduplicate_items(all_entries)
    known = list(existing or [])
    if known:
        unique_entries = [e for e in unique_entries if not is_duplicate_regulation(e, known)]

    logger.info(
        "Fetched %d entries from %d sources (%d new after dedup)",
        len(all_entries),
        sources_fetched,
        len(unique_entries),
    )

    return FetchResult(
        total_entries=len(unique_entries),
        entries=unique_entries,
        sources_fetched=sources_fetched,
        errors=all_errors,
        fetch_time=datetime.now(),
    )
