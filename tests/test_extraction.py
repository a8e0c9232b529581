"""Tests for plain-English conversion, amount extraction and timeline estimation."""

from datetime import datetime

import pytest
from regradar.analysis.extraction import (
    extract_amounts_in_millions,
    extract_dollar_amounts,
    extract_penalty,
    estimate_timeline,
    parse_absolute_date,
    round_half_up,
    timeframe_to_days,
    to_plain_english,
)
from regradar.models import RegulationType


class TestPlainEnglish:
    def test_replaces_legal_terms(self):
        result = to_plain_english("The Commission shall file the report pursuant to Rule 17a-4.")
        assert "SEC must file" in result
        assert "according to Rule 17a-4" in result

    def test_removes_qualifiers(self):
        result = to_plain_english("Firms must keep records, including but not limited to emails.")
        assert "including but not limited to" not in result
        assert "emails" in result

    def test_splits_which_clauses(self):
        result = to_plain_english("The rule applies to brokers, which must register.")
        assert ". This must register" in result

    def test_matches_whole_words_only(self):
        assert to_plain_english("marshall plan") == "marshall plan"

    def test_empty_text(self):
        assert to_plain_english("") == ""


class TestDollarAmounts:
    def test_plain_and_suffixed_amounts(self):
        assert extract_dollar_amounts("$2.5 million and $300,000") == [2_500_000.0, 300_000.0]

    def test_billion_suffix(self):
        assert extract_dollar_amounts("a $1 billion settlement") == [1_000_000_000.0]

    def test_suffix_letter_must_be_whole_word(self):
        assert extract_dollar_amounts("pay $500,000 by March") == [500_000.0]

    def test_amounts_in_millions(self):
        assert extract_amounts_in_millions("$15 million penalty and $5m fine") == [15.0, 5.0]

    def test_plain_amounts_are_not_millions(self):
        assert extract_amounts_in_millions("$500,000 civil penalty") == []

    def test_penalty_is_largest_amount(self, make_item):
        item = make_item(description="Disgorgement of $250,000 and a $1.2 million penalty.")
        assert extract_penalty(item) == 1_200_000.0

    def test_no_amount_means_no_penalty(self, make_item):
        assert extract_penalty(make_item(description="No money involved.")) == 0.0


class TestDates:
    @pytest.mark.parametrize("text", ["March 1, 2024", "Mar 1, 2024", "03/01/2024", "2024-03-01"])
    def test_supported_formats(self, text):
        assert parse_absolute_date(text) == datetime(2024, 3, 1)

    def test_unparseable(self):
        assert parse_absolute_date("sometime soon") is None

    def test_timeframe_units(self):
        assert timeframe_to_days(2, "weeks") == 14
        assert timeframe_to_days(6, "months") == 180
        assert timeframe_to_days(1, "year") == 365
        assert timeframe_to_days(3, "fortnights") == 0

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(7.5) == 8
        assert round_half_up(3.2) == 3


class TestEstimateTimeline:
    def test_explicit_future_date(self, make_item, now):
        item = make_item(description="The compliance date is June 1, 2024.")
        assert estimate_timeline(RegulationType.FINAL_RULE, item, now) == 138

    def test_past_date_falls_through_to_relative(self, make_item, now):
        item = make_item(
            description="The effective date was January 1, 2020, and firms have 60 days to adapt."
        )
        assert estimate_timeline(RegulationType.FINAL_RULE, item, now) == 60

    def test_shortest_relative_timeframe(self, make_item, now):
        item = make_item(description="Report within 90 days and finish within 6 months.")
        assert estimate_timeline(RegulationType.FINAL_RULE, item, now) == 90

    @pytest.mark.parametrize(
        "regulation_type, expected",
        [
            (RegulationType.ENFORCEMENT, 30),
            (RegulationType.FINAL_RULE, 180),
            (RegulationType.PROPOSED_RULE, 365),
        ],
    )
    def test_type_defaults(self, make_item, now, regulation_type, expected):
        item = make_item(description="Nothing about timing here.")
        assert estimate_timeline(regulation_type, item, now) == expected
