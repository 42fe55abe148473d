"""Row types returned by log queries."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PathCount:
    """A page path key and the number of successful requests for it."""

    path: str
    count: int


@dataclass(frozen=True)
class ReferrerCount:
    """A normalized referrer string and the number of requests it sent."""

    referrer: str
    count: int
