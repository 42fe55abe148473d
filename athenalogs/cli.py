"""CLI interface for athenalogs.

Credentials are read from the environment:

    AWS_REGION="us-west-1"
    AWS_ATHENA_KEY_ID="key id for the Athena user"
    AWS_ATHENA_ACCESS_KEY="secret key for the Athena user"
    ATHENA_OUTPUT_LOCATION="s3://my-athena-scratch"   (optional)

Example:

    athenalogs report --orc-path my-logs.orc/user/http_logs \\
        --db-name orclogdb --table-name httplogs --domain example.com
"""

import logging
import sys

import click

from athenalogs.athena import AthenaConnection, QueryFailure, build_database_and_table
from athenalogs.athena.schema import log_table_ddl
from athenalogs.config import Config, ConfigurationError
from athenalogs.facets import AthenaLogQueryService
from athenalogs.report import ReportConfig, ReportDriver, render_domains, report_to_json

logger = logging.getLogger(__name__)

orc_path_option = click.option(
    "--orc-path",
    required=True,
    help="S3 bucket and prefix of the ORC log files. Example: my-logs.orc/user/http_logs",
)
db_name_option = click.option("--db-name", required=True, help="The database name")
table_name_option = click.option("--table-name", required=True, help="The database table name")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = Config()


@cli.command()
@orc_path_option
@db_name_option
@table_name_option
@click.option("--domain", required=True, help="The domain name to report on (e.g., example.com)")
@click.option("--top-n", type=click.IntRange(min=0), default=None, help="Number of referrers to show")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("--skip-setup", is_flag=True, help="Do not create the database and table")
@click.option("--timeout", type=float, default=None, help="Per-query timeout in seconds")
@click.pass_context
def report(
    ctx: click.Context,
    orc_path: str,
    db_name: str,
    table_name: str,
    domain: str,
    top_n: int | None,
    output_format: str,
    skip_setup: bool,
    timeout: float | None,
) -> None:
    """Print the domain list, page tree and top referrers for a domain."""
    config: Config = ctx.obj["config"]
    config.athena.timeout_seconds = timeout
    report_config = ReportConfig(domain=domain, top_n=config.top_n if top_n is None else top_n)

    try:
        with AthenaConnection(config.athena) as conn:
            if not skip_setup:
                build_database_and_table(conn, db_name, table_name, orc_path)

            service = AthenaLogQueryService(conn, db_name, table_name)
            echo = click.echo if output_format == "text" else None
            driver = ReportDriver(service, report_config, echo=echo, log=logger)
            result = driver.run()
    except (ConfigurationError, QueryFailure, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(
            report_to_json(domain, result.domains, result.tree, result.referrers, result.error)
        )

    if not result.completed:
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)


@cli.command()
@db_name_option
@table_name_option
@click.pass_context
def domains(ctx: click.Context, db_name: str, table_name: str) -> None:
    """List the domains present in the log table."""
    config: Config = ctx.obj["config"]

    try:
        with AthenaConnection(config.athena) as conn:
            service = AthenaLogQueryService(conn, db_name, table_name)
            domain_list = service.list_domains()
    except (ConfigurationError, QueryFailure, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for line in render_domains(domain_list):
        click.echo(line)


@cli.command()
@orc_path_option
@db_name_option
@table_name_option
def ddl(orc_path: str, db_name: str, table_name: str) -> None:
    """Print the CREATE TABLE statement for the log table."""
    try:
        click.echo(log_table_ddl(db_name, table_name, orc_path))
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli(standalone_mode=True)  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
