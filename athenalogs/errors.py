"""Exceptions shared by log query services and the report driver."""


class QueryFailure(Exception):
    """Raised when a log query cannot be run or does not succeed."""
