"""
Validation and relevance filtering for raw feed entries.
"""

import html
import logging
import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from time import mktime
from typing import Any, Mapping, Optional

from regradar.analysis.keywords import FINTECH_RELEVANCE_KEYWORDS, contains_any
from regradar.models import FeedItem

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"<[^>]+>")


def strip_html(text: str) -> str:
    """Remove markup and entities, collapsing whitespace."""
    if not text:
        return ""
    text = html.unescape(TAG_PATTERN.sub(" ", text))
    return re.sub(r"\s+", " ", text).strip()


def _parse_published(raw: Mapping[str, Any]) -> Optional[datetime]:
    """Publication date from a feedparser entry or a plain dict."""
    for key in ("published_parsed", "updated_parsed"):
        parsed = raw.get(key)
        if parsed:
            try:
                return datetime.fromtimestamp(mktime(parsed))
            except (TypeError, ValueError, OverflowError):
                pass

    value = raw.get("published") or raw.get("pubDate") or raw.get("updated")
    if isinstance(value, datetime):
        return value
    if not value:
        return None

    value = str(value).strip()
    try:
        return parsedate_to_datetime(value).replace(tzinfo=None)
    except (TypeError, ValueError, IndexError):
        pass
    try:
        return datetime.fromisoformat(value).replace(tzinfo=None)
    except ValueError:
        logger.warning("Invalid publication date in feed entry: %s", value)
        return None


def validate_raw_item(raw: Mapping[str, Any]) -> Optional[FeedItem]:
    """
    Convert a raw feed entry into a FeedItem.

    Args:
        raw: A feedparser entry or any mapping with RSS fields.

    Returns:
        FeedItem, or None if the entry has no title or link. A missing or
        unparseable date falls back to the current time; a missing guid
        falls back to the entry id, then to the link.
    """
    try:
        title = str(raw.get("title") or "").strip()
        link = str(raw.get("link") or "").strip()
        if not title or not link:
            logger.warning("Feed entry missing required fields: %s", title or link or "<empty>")
            return None

        guid = str(raw.get("guid") or raw.get("id") or link).strip()
        description = strip_html(str(raw.get("summary") or raw.get("description") or ""))
        published = _parse_published(raw) or datetime.now()

        return FeedItem(
            title=title,
            link=link,
            published_at=published,
            description=description,
            guid=guid,
        )
    except (AttributeError, TypeError) as e:
        logger.error("Error validating feed entry: %s", e)
        return None


def is_relevant_to_fintech(item: FeedItem) -> bool:
    """Whether the item mentions any fintech topic."""
    return contains_any(item.content.lower(), FINTECH_RELEVANCE_KEYWORDS)
