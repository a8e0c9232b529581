"""
Regulatory feed ingestion.

Each feed implements the SourceAdapter interface and outputs a standard
FetchResult with validated FeedItem entries.
"""

from regradar.feeds.base import FetchResult, SourceAdapter
from regradar.feeds.dedup import deduplicate_items, is_duplicate_regulation, jaccard_similarity
from regradar.feeds.registry import fetch_all_sources, get_all_adapters
from regradar.feeds.sec_rss import SEC_FEEDS, SECFeedAdapter
from regradar.feeds.validation import is_relevant_to_fintech, validate_raw_item

__all__ = [
    "FetchResult",
    "SourceAdapter",
    "SECFeedAdapter",
    "SEC_FEEDS",
    "validate_raw_item",
    "is_relevant_to_fintech",
    "jaccard_similarity",
    "is_duplicate_regulation",
    "deduplicate_items",
    "get_all_adapters",
    "fetch_all_sources",
]
