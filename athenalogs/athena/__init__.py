"""Athena access for athenalogs."""

from .connection import AthenaConnection, QueryFailure
from .models import PathCount, ReferrerCount
from .schema import build_database_and_table, has_table, log_table_ddl

__all__ = [
    "AthenaConnection",
    "QueryFailure",
    "PathCount",
    "ReferrerCount",
    "build_database_and_table",
    "has_table",
    "log_table_ddl",
]
