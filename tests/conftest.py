"""Shared test fixtures for the RegulatorRadar test suite."""

from datetime import datetime

import pytest
from regradar.config import Config
from regradar.database import RegulationStore
from regradar.models import FeedItem

REFERENCE_TIME = datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def fresh_config(tmp_path, monkeypatch):
    """Create a Config instance pointed at a temp directory."""
    monkeypatch.setenv("REGRADAR_BASE_DIR", str(tmp_path))
    return Config()


@pytest.fixture
def tmp_store(tmp_path):
    """Create a RegulationStore using a temp-dir SQLite file."""
    return RegulationStore(tmp_path / "test.db")


@pytest.fixture
def now():
    return REFERENCE_TIME


@pytest.fixture
def enforcement_item():
    return FeedItem(
        title="SEC Charges Fintech Company with AML Violations",
        link="https://www.sec.gov/litigation/litreleases/2024/lr12345.htm",
        published_at=datetime(2024, 1, 15),
        description=(
            "The Securities and Exchange Commission today charged XYZ Fintech Inc. with "
            "failing to maintain adequate anti-money laundering procedures. The company "
            "agreed to pay a $500,000 civil penalty and must implement remedial measures "
            "within 90 days."
        ),
        guid="lr-12345",
    )


@pytest.fixture
def final_rule_item():
    return FeedItem(
        title="SEC Adopts Final Rule on Digital Asset Custody",
        link="https://www.sec.gov/rules/final/2024/33-11234.pdf",
        published_at=datetime(2024, 1, 10),
        description="Final rule with new requirements and compliance dates",
        guid="33-11234",
    )


@pytest.fixture
def proposed_rule_item():
    return FeedItem(
        title="SEC Proposes New Rules for Investment Advisers",
        link="https://www.sec.gov/rules/proposed/2024/ia-6543.pdf",
        published_at=datetime(2024, 1, 5),
        description="Proposed rule in comment period",
        guid="ia-6543",
    )


@pytest.fixture
def make_item():
    """Factory for feed items with sensible defaults."""

    def _make(
        title="SEC Update",
        description="An update from the Commission.",
        link="https://www.sec.gov/news/update",
        published_at=datetime(2024, 1, 1),
        guid="",
    ):
        return FeedItem(
            title=title,
            link=link,
            published_at=published_at,
            description=description,
            guid=guid,
        )

    return _make
