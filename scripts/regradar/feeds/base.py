"""
Base class for regulatory feed source adapters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from regradar.models import FeedItem


@dataclass
class FetchResult:
    """Results from a feed fetch operation."""

    total_entries: int = 0
    entries: List[FeedItem] = field(default_factory=list)
    sources_fetched: int = 0
    errors: List[str] = field(default_factory=list)
    fetch_time: Optional[datetime] = None

    def __str__(self) -> str:
        return (
            f"Fetched {self.total_entries} entries from {self.sources_fetched} sources"
            f"{f' ({len(self.errors)} errors)' if self.errors else ''}"
        )


class SourceAdapter(ABC):
    """Abstract base class for regulatory update sources.

    Each adapter fetches updates from a single source and returns
    a standard FetchResult with FeedItem entries.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source name."""
        ...

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Unique identifier for this source."""
        ...

    @property
    def enabled(self) -> bool:
        """Whether this source is enabled. Override to check config."""
        return True

    @abstractmethod
    def fetch(self, days: Optional[int] = None) -> FetchResult:
        """Fetch regulatory updates from this source.

        Args:
            days: Number of days to look back. None keeps every entry.

        Returns:
            FetchResult with entries and metadata.
        """
        ...
