"""Athena connection management."""

import logging
import time
from typing import Any, Self

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from athenalogs.config import AthenaSettings
from athenalogs.errors import QueryFailure

logger = logging.getLogger(__name__)

TERMINAL_FAILURE_STATES = frozenset({"FAILED", "CANCELLED"})
PENDING_STATES = frozenset({"QUEUED", "RUNNING"})


def quote_literal(value: str) -> str:
    """Quote a string as an Athena SQL literal for use as an execution parameter."""
    return "'" + value.replace("'", "''") + "'"


class AthenaConnection:
    """boto3 Athena client wrapper with context manager support."""

    def __init__(self, settings: AthenaSettings, client: Any | None = None):
        self.settings = settings
        self._client = client

    def connect(self) -> Any:
        if self._client is None:
            self.settings.validate()
            try:
                self._client = boto3.client(
                    "athena",
                    region_name=self.settings.region,
                    aws_access_key_id=self.settings.access_key_id,
                    aws_secret_access_key=self.settings.secret_access_key,
                )
            except BotoCoreError as e:
                raise QueryFailure(f"Failed to create Athena client: {e}") from e
            logger.debug("Athena client created for region %s", self.settings.region)
        return self._client

    @property
    def client(self) -> Any:
        return self.connect()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def execute(
        self,
        query: str,
        parameters: list[str] | None = None,
        database: str | None = None,
        header: bool = True,
    ) -> list[list[str | None]]:
        """Run a query and return its rows as lists of column values.

        Parameters are plain strings bound to the `?` placeholders of the
        query in order. SELECT results carry a header row which is dropped;
        SHOW statements do not, so callers pass header=False for those.
        """
        query_id = self._start(query, parameters, database)
        self._wait_for_completion(query_id)
        return self._fetch_rows(query_id, header)

    def execute_statement(self, query: str, database: str | None = None) -> None:
        """Run a DDL statement and wait for it to finish."""
        query_id = self._start(query, None, database)
        self._wait_for_completion(query_id)

    def _start(self, query: str, parameters: list[str] | None, database: str | None) -> str:
        request: dict[str, Any] = {
            "QueryString": query,
            "ResultConfiguration": {"OutputLocation": self.settings.output_location},
            "WorkGroup": self.settings.work_group,
        }
        if database:
            request["QueryExecutionContext"] = {"Database": database}
        if parameters:
            request["ExecutionParameters"] = [quote_literal(p) for p in parameters]

        logger.debug("Starting Athena query: %s", query)
        try:
            response = self.client.start_query_execution(**request)
        except (BotoCoreError, ClientError) as e:
            raise QueryFailure(f"Could not start query: {e}") from e
        return response["QueryExecutionId"]

    def _wait_for_completion(self, query_id: str) -> None:
        start_time = time.monotonic()

        while True:
            try:
                response = self.client.get_query_execution(QueryExecutionId=query_id)
            except (BotoCoreError, ClientError) as e:
                raise QueryFailure(f"Could not get status of query {query_id}: {e}") from e

            status = response["QueryExecution"]["Status"]
            state = status["State"]

            if state == "SUCCEEDED":
                logger.debug("Query %s succeeded", query_id)
                return
            if state in TERMINAL_FAILURE_STATES:
                reason = status.get("StateChangeReason", "Unknown error")
                raise QueryFailure(f"Query {query_id} {state.lower()}: {reason}")
            if state not in PENDING_STATES:
                raise QueryFailure(f"Query {query_id} has unknown state: {state}")

            timeout = self.settings.timeout_seconds
            if timeout is not None and time.monotonic() - start_time > timeout:
                self._stop(query_id)
                raise QueryFailure(f"Query {query_id} timed out after {timeout} seconds")

            time.sleep(self.settings.poll_interval)

    def _stop(self, query_id: str) -> None:
        try:
            self.client.stop_query_execution(QueryExecutionId=query_id)
        except (BotoCoreError, ClientError) as e:
            logger.warning("Could not stop query %s: %s", query_id, e)

    def _fetch_rows(self, query_id: str, header: bool) -> list[list[str | None]]:
        rows: list[list[str | None]] = []
        paginator = self.client.get_paginator("get_query_results")

        try:
            for page_number, page in enumerate(paginator.paginate(QueryExecutionId=query_id)):
                page_rows = page["ResultSet"]["Rows"]
                if header and page_number == 0:
                    page_rows = page_rows[1:]
                for row in page_rows:
                    rows.append([datum.get("VarCharValue") for datum in row["Data"]])
        except (BotoCoreError, ClientError) as e:
            raise QueryFailure(f"Could not read results of query {query_id}: {e}") from e

        logger.debug("Query %s returned %d rows", query_id, len(rows))
        return rows
