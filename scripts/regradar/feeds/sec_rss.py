"""
SEC RSS feed adapter: press releases, final and proposed rules, litigation releases.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

import feedparser
import requests

from regradar.feeds.base import FetchResult, SourceAdapter
from regradar.feeds.validation import is_relevant_to_fintech, validate_raw_item
from regradar.models import FeedItem

logger = logging.getLogger(__name__)

# SEC RSS feeds
SEC_FEEDS = {
    "pressReleases": "https://www.sec.gov/news/pressreleases.rss",
    "rules": "https://www.sec.gov/rules/final.rss",
    "proposedRules": "https://www.sec.gov/rules/proposed.rss",
    "enforcementActions": "https://www.sec.gov/litigation/litreleases.rss",
}

USER_AGENT = "RegulatorRadar/1.0"


class SECFeedAdapter(SourceAdapter):
    """Fetch regulatory updates from a single SEC RSS feed."""

    def __init__(
        self,
        feed_name: str,
        url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
        user_agent: str = USER_AGENT,
        max_items: int = 50,
        fintech_only: bool = True,
        enabled: bool = True,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            feed_name: Key of the feed, e.g. 'rules'.
            url: Feed URL. Looked up in SEC_FEEDS if not provided.
            session: HTTP session to reuse across feeds.
            timeout: Request timeout in seconds.
            user_agent: User-Agent header sent with requests.
            max_items: Maximum entries taken from the feed.
            fintech_only: Drop entries that mention no fintech topic.
            enabled: Whether the registry should use this adapter.
        """
        if url is None and feed_name not in SEC_FEEDS:
            raise ValueError(f"Unknown SEC feed: {feed_name}")

        self.feed_name = feed_name
        self.url = url or SEC_FEEDS[feed_name]
        self.timeout = timeout
        self.max_items = max_items
        self.fintech_only = fintech_only
        self._enabled = enabled
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    @property
    def name(self) -> str:
        return f"SEC {self.feed_name}"

    @property
    def source_id(self) -> str:
        return f"sec_{self.feed_name.lower()}"

    @property
    def enabled(self) -> bool:
        return self._enabled

    def fetch(self, days: Optional[int] = None) -> FetchResult:
        cutoff = datetime.now() - timedelta(days=days) if days else None
        entries: List[FeedItem] = []
        errors: List[str] = []

        try:
            entries = self._parse_feed(self._download(), cutoff)
        except requests.RequestException as e:
            logger.error("%s feed download failed: %s", self.name, e)
            errors.append(f"{self.name}: {e}")
        except Exception as e:
            logger.error("%s feed failed: %s", self.name, e)
            errors.append(f"{self.name}: {e}")

        return FetchResult(
            total_entries=len(entries),
            entries=entries,
            sources_fetched=0 if errors else 1,
            errors=errors,
            fetch_time=datetime.now(),
        )

    def _download(self) -> bytes:
        response = self.session.get(self.url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def _parse_feed(self, content: bytes, cutoff: Optional[datetime]) -> List[FeedItem]:
        """Parse feed content and return validated, relevant entries after cutoff."""
        feed = feedparser.parse(content)
        if feed.get("bozo") and not feed.entries:
            raise ValueError(f"Unparseable feed: {feed.get('bozo_exception')}")

        items = []
        skipped = 0
        for raw in feed.entries[: self.max_items]:
            item = validate_raw_item(raw)
            if item is None:
                skipped += 1
                continue
            if cutoff and item.published_at and item.published_at < cutoff:
                continue
            if self.fintech_only and not is_relevant_to_fintech(item):
                continue
            items.append(item)

        if skipped:
            logger.debug("%s: skipped %d invalid entries", self.name, skipped)
        logger.debug("%s: %d of %d entries kept", self.name, len(items), len(feed.entries))
        return items
