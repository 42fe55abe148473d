"""Referrer aggregation and ranking."""

from collections.abc import Iterable
from dataclasses import dataclass

from athenalogs.athena.models import ReferrerCount

# Log marker for a request without a referrer
NO_REFERRER = "-"


@dataclass(frozen=True)
class ReferrerEntry:
    """A referrer and its total request count."""

    referrer: str
    count: int


def aggregate(rows: Iterable[ReferrerCount | tuple[str, int]]) -> list[ReferrerEntry]:
    """Sum counts per referrer and rank the referrers by count.

    Referrers are matched on exact string equality. Normalization (scheme and
    www. stripping, quote removal) is the query's job, so differently cased
    strings stay separate entries.

    Args:
        rows: ReferrerCount rows or plain (referrer, count) tuples.

    Returns:
        One entry per distinct referrer, highest count first. The sort is
        stable, but the order among equal counts is not significant.
    """
    totals: dict[str, int] = {}
    for row in rows:
        referrer, count = _unpack(row)
        if referrer is None:
            raise ValueError("Referrer must not be None")
        if referrer == NO_REFERRER:
            continue
        totals[referrer] = totals.get(referrer, 0) + count

    entries = [ReferrerEntry(referrer, count) for referrer, count in totals.items()]
    return sorted(entries, key=lambda e: e.count, reverse=True)


def _unpack(row: ReferrerCount | tuple[str, int]) -> tuple[str, int]:
    if isinstance(row, ReferrerCount):
        return row.referrer, row.count
    referrer, count = row
    return referrer, count


def top(entries: list[ReferrerEntry], n: int) -> list[ReferrerEntry]:
    """Return the first n entries of a ranked list."""
    if n < 0:
        raise ValueError(f"n must not be negative, got {n}")
    return entries[:n]
