"""Athena Logs - page and referrer reports from S3 web logs queried with AWS Athena."""

__version__ = "0.1.0"

from athenalogs.athena import AthenaConnection
from athenalogs.report import ReportDriver

__all__ = ["AthenaConnection", "ReportDriver"]
