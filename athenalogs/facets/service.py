"""Log queries against the Athena web log table.

The queries assume a single table holding S3 server access log records,
converted to ORC, for one or more web domains. Each domain is served from an
S3 bucket of the same name, so bucket_name identifies the domain.
"""

import logging
from typing import Protocol

from athenalogs.athena.connection import AthenaConnection
from athenalogs.athena.models import PathCount, ReferrerCount
from athenalogs.athena.schema import validate_identifier
from athenalogs.errors import QueryFailure

logger = logging.getLogger(__name__)

# Requests from inside the S3 network show up with this address prefix
INTERNAL_IP_PATTERN = "%52.219.%"

DOMAINS_SQL = "select distinct bucket_name as domain from {table}"

# Only HTTP 200 responses are counted, so requests for pages that do not exist
# (e.g. /backup/bitcoin.html) stay out of the tree.
PATHS_SQL = """
select key as path, count(key) as count from {table}
where bucket_name = ? and http_status = 200 and (key like '%.html' or key like '%.htm')
group by key
order by count desc
"""

# Grouping is on the raw referrer column, so http:// and https:// variants of
# one site come back as separate rows with the same normalized text.
REFERRERS_SQL = """
select replace(replace(replace(replace(referrer, 'http://', ''), 'https://', ''), 'www.', ''), '"', '')
    as normalized_referrer,
    count(referrer) as count
from {table}
where bucket_name = ? and http_status = 200
    and referrer not like ? and referrer not like '%search%'
    and referrer not like ?
    and (key like '%.html' or key like '%.htm')
group by referrer
order by count desc
"""


class LogQueryService(Protocol):
    """Protocol for the log queries the report is built from.

    Implementations report any failure to produce a result (network, auth,
    malformed query or data) by raising athenalogs.errors.QueryFailure,
    chaining the underlying exception.
    """

    def list_domains(self) -> list[str]:
        """Return the distinct domains present in the log store."""

    def get_path_counts(self, domain: str) -> list[PathCount]:
        """Return successful page request counts per path key for a domain."""

    def get_referrer_counts(self, domain: str) -> list[ReferrerCount]:
        """Return request counts per normalized referrer for a domain."""


class AthenaLogQueryService:
    """Runs the log queries with SQL over an Athena connection."""

    def __init__(self, connection: AthenaConnection, database: str, table: str) -> None:
        self.connection = connection
        self.database = validate_identifier(database)
        self.table = validate_identifier(table)

    @property
    def qualified_table(self) -> str:
        return f"{self.database}.{self.table}"

    def list_domains(self) -> list[str]:
        query = DOMAINS_SQL.format(table=self.qualified_table)
        rows = self.connection.execute(query, database=self.database)
        domains = [row[0] for row in rows if row and row[0]]
        logger.info("Found %d domains in %s", len(domains), self.qualified_table)
        return domains

    def get_path_counts(self, domain: str) -> list[PathCount]:
        query = PATHS_SQL.format(table=self.qualified_table)
        rows = self.connection.execute(query, [domain], database=self.database)
        paths = [PathCount(_value(row, 0), _count(row)) for row in rows]
        logger.info("Found %d page paths for %s", len(paths), domain)
        return paths

    def get_referrer_counts(self, domain: str) -> list[ReferrerCount]:
        query = REFERRERS_SQL.format(table=self.qualified_table)
        parameters = [domain, INTERNAL_IP_PATTERN, f"%{domain}%"]
        rows = self.connection.execute(query, parameters, database=self.database)
        referrers = [ReferrerCount(_value(row, 0), _count(row)) for row in rows]
        logger.info("Found %d referrer rows for %s", len(referrers), domain)
        return referrers


def _value(row: list[str | None], index: int) -> str:
    if len(row) <= index or row[index] is None:
        raise QueryFailure(f"Malformed result row: {row!r}")
    return row[index]


def _count(row: list[str | None]) -> int:
    value = _value(row, 1)
    try:
        return int(value)
    except ValueError as e:
        raise QueryFailure(f"Malformed count in result row: {row!r}") from e
