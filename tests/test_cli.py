"""Tests for the command line interface."""

# pylint: disable=redefined-outer-name

import json
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from athenalogs.athena.connection import QueryFailure
from athenalogs.athena.models import PathCount, ReferrerCount
from athenalogs.cli import cli

REPORT_ARGS = [
    "report",
    "--orc-path",
    "my-logs.orc/user/http_logs",
    "--db-name",
    "orclogdb",
    "--table-name",
    "httplogs",
    "--domain",
    "bearcave.com",
]


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("AWS_REGION", "AWS_ATHENA_KEY_ID", "AWS_ATHENA_ACCESS_KEY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def service() -> Iterator[MagicMock]:
    """Patch the Athena connection, bootstrap and query service used by the CLI."""
    with (
        patch("athenalogs.cli.AthenaConnection") as conn_cls,
        patch("athenalogs.cli.build_database_and_table") as bootstrap,
        patch("athenalogs.cli.AthenaLogQueryService") as service_cls,
    ):
        conn_cls.return_value.__enter__.return_value = MagicMock()
        instance = service_cls.return_value
        instance.bootstrap = bootstrap
        instance.list_domains.return_value = ["bearcave.com"]
        instance.get_path_counts.return_value = [
            PathCount("a/b.html", 3),
            PathCount("a/c.html", 7),
        ]
        instance.get_referrer_counts.return_value = [
            ReferrerCount("google.com/", 5),
            ReferrerCount("-", 100),
        ]
        yield instance


class TestReportCommand:
    """Tests for the report command."""

    def test_text_report(self, runner: CliRunner, service: MagicMock) -> None:
        result = runner.invoke(cli, REPORT_ARGS)

        assert result.exit_code == 0, result.output
        assert "Domains:\nbearcave.com\n" in result.output
        assert "Path tree for bearcave.com" in result.output
        assert "        a 10" in result.output
        assert "Referrer sites:\ngoogle.com/, 5\n" in result.output
        service.bootstrap.assert_called_once()

    def test_json_report(self, runner: CliRunner, service: MagicMock) -> None:
        result = runner.invoke(cli, REPORT_ARGS + ["--format", "json"])

        assert result.exit_code == 0, result.output
        document = json.loads(result.output)
        assert document["domain"] == "bearcave.com"
        assert document["path_tree"]["count"] == 10
        assert document["referrers"] == [{"referrer": "google.com/", "count": 5}]

    def test_skip_setup(self, runner: CliRunner, service: MagicMock) -> None:
        result = runner.invoke(cli, REPORT_ARGS + ["--skip-setup"])
        assert result.exit_code == 0, result.output
        service.bootstrap.assert_not_called()

    def test_empty_results_exit_zero(self, runner: CliRunner, service: MagicMock) -> None:
        service.list_domains.return_value = []
        service.get_path_counts.return_value = []
        service.get_referrer_counts.return_value = []

        result = runner.invoke(cli, REPORT_ARGS)

        assert result.exit_code == 0, result.output
        assert "No domains found" in result.output

    def test_query_failure_exits_nonzero(self, runner: CliRunner, service: MagicMock) -> None:
        service.get_path_counts.side_effect = QueryFailure("Query qid failed: denied")

        result = runner.invoke(cli, REPORT_ARGS)

        assert result.exit_code == 1
        assert "Domains:" in result.output
        assert "Path tree" not in result.output
        assert "denied" in result.output

    def test_missing_argument_is_usage_error(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, REPORT_ARGS[:-2])
        assert result.exit_code == 2
        assert "--domain" in result.output

    def test_missing_credentials(self, runner: CliRunner, clean_env: None) -> None:
        result = runner.invoke(cli, REPORT_ARGS)
        assert result.exit_code == 1
        assert "AWS_ATHENA_KEY_ID" in result.output

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["report", "--help"])
        assert result.exit_code == 0
        assert "--orc-path" in result.output


class TestDomainsCommand:
    """Tests for the domains command."""

    def test_lists_domains(self, runner: CliRunner, service: MagicMock) -> None:
        result = runner.invoke(cli, ["domains", "--db-name", "orclogdb", "--table-name", "t"])
        assert result.exit_code == 0, result.output
        assert result.output == "Domains:\nbearcave.com\n"


class TestDDLCommand:
    """Tests for the ddl command."""

    def test_prints_ddl(self, runner: CliRunner) -> None:
        result = runner.invoke(
            cli, ["ddl", "--orc-path", "bucket/logs", "--db-name", "db", "--table-name", "logs"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.startswith("create external table `db`.`logs` (")

    def test_invalid_identifier(self, runner: CliRunner) -> None:
        result = runner.invoke(
            cli, ["ddl", "--orc-path", "bucket/logs", "--db-name", "d-b", "--table-name", "logs"]
        )
        assert result.exit_code == 1
        assert "Invalid identifier" in result.output
