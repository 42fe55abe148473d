"""Report driver: runs the log queries and renders each report section."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from athenalogs.errors import QueryFailure
from athenalogs.facets.referrers import ReferrerEntry, aggregate, top
from athenalogs.facets.service import LogQueryService
from athenalogs.facets.tree import PathTreeNode, TreeStats, build_tree
from athenalogs.report.render import render_domains, render_referrers, render_tree

logger = logging.getLogger(__name__)


@dataclass
class ReportConfig:
    """Configuration for report output."""

    domain: str
    top_n: int = 10


@dataclass
class ReportResult:
    """Sections produced by a report run. Sections not reached are None."""

    domain: str
    domains: list[str] | None = None
    tree: PathTreeNode | None = None
    tree_stats: TreeStats = field(default_factory=TreeStats)
    referrers: list[ReferrerEntry] | None = None
    error: str | None = None

    @property
    def completed(self) -> bool:
        return self.error is None


class ReportDriver:
    """Builds the domain list, path tree and referrer ranking for one domain.

    Sections are rendered through echo as soon as each one is ready, so a
    query failure part way through leaves the earlier sections visible.
    Pass echo=None to collect the result without rendering.
    """

    def __init__(
        self,
        service: LogQueryService,
        config: ReportConfig,
        echo: Callable[[str], None] | None = print,
        log: logging.Logger | None = None,
    ) -> None:
        self.service = service
        self.config = config
        self.echo = echo
        self.log = log or logger

    def run(self) -> ReportResult:
        result = ReportResult(domain=self.config.domain)
        try:
            self._run_stages(result)
        except QueryFailure as e:
            self.log.error("Report for %s aborted: %s", self.config.domain, e)
            result.error = str(e)
        return result

    def _run_stages(self, result: ReportResult) -> None:
        domain = self.config.domain

        result.domains = self.service.list_domains()
        self._emit(render_domains(result.domains))

        path_counts = self.service.get_path_counts(domain)
        result.tree = build_tree(path_counts, result.tree_stats)
        if result.tree_stats.missing_counts:
            self.log.warning(
                "%d paths in the tree for %s had no reference count",
                len(result.tree_stats.missing_counts),
                domain,
            )
        self._emit(render_tree(result.tree, domain))

        referrer_counts = self.service.get_referrer_counts(domain)
        result.referrers = top(aggregate(referrer_counts), self.config.top_n)
        self._emit(render_referrers(result.referrers))

    def _emit(self, lines: list[str]) -> None:
        if self.echo is None:
            return
        for line in lines:
            self.echo(line)
