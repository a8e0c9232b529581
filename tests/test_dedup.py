"""Tests for feed item deduplication."""

from regradar.feeds.dedup import (
    deduplicate_items,
    is_duplicate_regulation,
    jaccard_similarity,
    titles_similar,
)


class TestJaccardSimilarity:
    def test_identical(self):
        assert jaccard_similarity("sec adopts rule", "sec adopts rule") == 1.0

    def test_disjoint(self):
        assert jaccard_similarity("sec adopts", "new custody") == 0.0

    def test_partial(self):
        assert jaccard_similarity("a b c", "a b d") == 0.5

    def test_empty(self):
        assert jaccard_similarity("", "") == 0.0


class TestTitlesSimilar:
    def test_case_insensitive(self):
        assert titles_similar("SEC Adopts Custody Rule", "sec adopts custody rule")

    def test_one_word_different_is_not_duplicate(self):
        assert not titles_similar(
            "SEC Charges Adviser With Fraud", "SEC Charges Broker With Fraud"
        )


class TestIsDuplicate:
    def test_guid_match(self, make_item):
        new = make_item(title="Completely Different", link="https://sec.gov/a", guid="g-1")
        old = make_item(title="Original", link="https://sec.gov/b", guid="g-1")
        assert is_duplicate_regulation(new, [old])

    def test_link_match(self, make_item):
        new = make_item(title="Completely Different", link="https://sec.gov/a")
        old = make_item(title="Original", link="https://sec.gov/a")
        assert is_duplicate_regulation(new, [old])

    def test_title_match(self, make_item):
        new = make_item(title="SEC Adopts Custody Rule", link="https://sec.gov/a")
        old = make_item(title="SEC adopts custody rule", link="https://sec.gov/b")
        assert is_duplicate_regulation(new, [old])

    def test_distinct(self, make_item):
        new = make_item(title="SEC Adopts Custody Rule", link="https://sec.gov/a", guid="1")
        old = make_item(title="SEC Charges Adviser", link="https://sec.gov/b", guid="2")
        assert not is_duplicate_regulation(new, [old])

    def test_empty_existing(self, make_item):
        assert not is_duplicate_regulation(make_item(), [])


class TestDeduplicateItems:
    def test_first_occurrence_wins(self, make_item):
        first = make_item(title="SEC Adopts Custody Rule", link="https://sec.gov/a")
        repeat = make_item(title="SEC adopts custody rule", link="https://sec.gov/b")
        other = make_item(title="SEC Charges Adviser", link="https://sec.gov/c")
        assert deduplicate_items([first, repeat, other]) == [first, other]

    def test_empty(self):
        assert deduplicate_items([]) == []
