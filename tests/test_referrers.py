"""Tests for referrer aggregation."""

from collections import Counter

import pytest

from athenalogs.athena.models import ReferrerCount
from athenalogs.facets.referrers import NO_REFERRER, ReferrerEntry, aggregate, top


class TestAggregate:
    """Tests for aggregate function."""

    def test_sums_duplicate_referrers(self) -> None:
        result = aggregate([("bing.com/", 2), ("bing.com/", 8), ("-", 100)])
        assert result == [ReferrerEntry("bing.com/", 10)]

    def test_drops_no_referrer_marker(self) -> None:
        result = aggregate([(NO_REFERRER, 45575)])
        assert result == []

    def test_matches_exact_strings_only(self) -> None:
        result = aggregate([("google.com/", 5), ("GOOGLE.COM/", 3)])
        assert Counter(result) == Counter(
            [ReferrerEntry("google.com/", 5), ReferrerEntry("GOOGLE.COM/", 3)]
        )

    def test_sorted_by_count_descending(self) -> None:
        result = aggregate([("a/", 3), ("b/", 10), ("c/", 1)])
        assert [entry.count for entry in result] == [10, 3, 1]
        assert [entry.referrer for entry in result] == ["b/", "a/", "c/"]

    def test_ties_keep_all_entries(self) -> None:
        result = aggregate([("a/", 4), ("b/", 4), ("c/", 9)])
        assert result[0] == ReferrerEntry("c/", 9)
        assert Counter(result[1:]) == Counter([ReferrerEntry("a/", 4), ReferrerEntry("b/", 4)])

    def test_accepts_referrer_count_rows(self) -> None:
        rows = [
            ReferrerCount("google.com/", 25709),
            ReferrerCount("google.com/", 2559),
            ReferrerCount("google.co.uk/", 1996),
        ]
        assert aggregate(rows) == [
            ReferrerEntry("google.com/", 28268),
            ReferrerEntry("google.co.uk/", 1996),
        ]

    def test_one_entry_per_referrer(self) -> None:
        rows = [("x/", 1), ("y/", 2), ("x/", 3), ("y/", 4), ("z/", 5)]
        result = aggregate(rows)
        assert len(result) == len({entry.referrer for entry in result}) == 3
        assert sum(entry.count for entry in result) == 15

    def test_empty_input(self) -> None:
        assert aggregate([]) == []

    def test_none_referrer_raises(self) -> None:
        with pytest.raises(ValueError):
            aggregate([(None, 1)])  # type: ignore[list-item]


class TestTop:
    """Tests for top function."""

    def test_limits_entries(self) -> None:
        entries = aggregate([(f"site{i}.com/", i) for i in range(1, 16)])
        result = top(entries, 10)
        assert len(result) == 10
        assert result[0] == ReferrerEntry("site15.com/", 15)

    def test_fewer_entries_than_limit(self) -> None:
        entries = [ReferrerEntry("a/", 1)]
        assert top(entries, 10) == entries

    def test_negative_limit_raises(self) -> None:
        with pytest.raises(ValueError):
            top([], -1)
