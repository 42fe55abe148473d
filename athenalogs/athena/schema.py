"""Log table definition and database bootstrap."""

import logging
import re

from .connection import AthenaConnection

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")

# S3 server access log fields as written to the ORC files
LOG_COLUMNS: list[tuple[str, str]] = [
    ("bucket_name", "string"),
    ("request_date", "timestamp"),
    ("remote_ip", "string"),
    ("operation", "string"),
    ("key", "string"),
    ("request_uri", "string"),
    ("http_status", "int"),
    ("total_time", "int"),
    ("referrer", "string"),
    ("user_agent", "string"),
    ("version_id", "string"),
    ("end_point", "string"),
]

INDENT = " " * 4


def validate_identifier(name: str) -> str:
    """Return name unchanged if it is a safe database or table identifier."""
    if not name or not IDENTIFIER_PATTERN.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def _quote(name: str) -> str:
    return f"`{name}`"


def log_table_ddl(database: str, table: str, orc_location: str) -> str:
    """Build the CREATE EXTERNAL TABLE statement for the log table.

    Args:
        database: Database name.
        table: Log table name.
        orc_location: S3 bucket and prefix of the ORC files, with or without
            the s3:// scheme. Example: my-logs.orc/user/http_logs

    Returns:
        DDL statement text.
    """
    validate_identifier(database)
    validate_identifier(table)
    location = orc_location.removeprefix("s3://").strip("/")
    if not location:
        raise ValueError("ORC location must not be empty")

    columns = ",\n".join(f"{INDENT}{_quote(name)} {col_type}" for name, col_type in LOG_COLUMNS)
    return (
        f"create external table {_quote(database)}.{_quote(table)} (\n"
        f"{columns}\n"
        ")\n"
        "stored as ORC\n"
        f"location 's3://{location}/'\n"
        'tblproperties ("orc.compress"="ZLIB")'
    )


def has_table(conn: AthenaConnection, database: str, table: str) -> bool:
    """Check whether the table exists in the database."""
    validate_identifier(database)
    rows = conn.execute(f"show tables in {database}", header=False)
    return any(row and row[0] == table for row in rows)


def build_database_and_table(
    conn: AthenaConnection,
    database: str,
    table: str,
    orc_location: str,
) -> bool:
    """Create the database and log table if they do not exist.

    Returns:
        True if the table was created, False if it already existed.
    """
    validate_identifier(database)
    conn.execute_statement(f"create database if not exists {database}")

    if has_table(conn, database, table):
        logger.debug("Table %s.%s already exists", database, table)
        return False

    logger.info("Creating log table %s.%s over %s", database, table, orc_location)
    conn.execute_statement(log_table_ddl(database, table, orc_location))
    return True
