import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from sitecheck.domain import CrawlConfiguration, CrawlStatistics, FetchOutcome, IterationResult
from sitecheck.exceptions import CrawlIterationError
from sitecheck.services.cancellation import is_stopped
from sitecheck.services.fetch_scheduler import FetchScheduler
from sitecheck.services.link_processor import LinkProcessor
from sitecheck.services.stats_aggregator import StatsAggregator

logger = logging.getLogger(__name__)


class CrawlExecutor:
    """Executes one crawl iteration given configured collaborators.

    This class owns the iteration control-flow (sitemap pass, one-hop link
    pass, cancellation checks, folding outcomes into statistics). It does NOT
    construct its dependencies; that stays in the container.
    """

    def __init__(
        self,
        *,
        scheduler: FetchScheduler,
        link_processor: Optional[LinkProcessor] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.scheduler = scheduler
        self.link_processor = link_processor or LinkProcessor()
        self.logger = log or logger

    def crawl(self, urls: Iterable[str], config: CrawlConfiguration, stop_event=None) -> IterationResult:
        config = config.with_valid_throttle()
        seed_urls = list(urls)
        follow_links = config.links.enabled
        aggregator = StatsAggregator()

        pages_with_links: List[FetchOutcome] = []
        seed_config = config.with_link_parsing(follow_links)
        for outcome in self.scheduler.schedule(seed_urls, seed_config, config.throttle, stop_event):
            aggregator.fold(outcome)
            if follow_links and outcome.links:
                pages_with_links.append(outcome)

        stopped = is_stopped(stop_event)
        if follow_links and pages_with_links and not stopped:
            self._crawl_links(aggregator, pages_with_links, seed_urls, config, stop_event)
            stopped = is_stopped(stop_event)

        stats = aggregator.result()
        return IterationResult(stats=stats, stopped=stopped, error=self.iteration_error(stats))

    def _crawl_links(
        self,
        aggregator: StatsAggregator,
        pages_with_links: List[FetchOutcome],
        seed_urls: List[str],
        config: CrawlConfiguration,
        stop_event,
    ) -> None:
        targets = self.link_processor.follow_up_targets(pages_with_links, seed_urls, config.links)
        if not targets:
            return
        link_config = config.with_link_parsing(False)
        outcomes = self.scheduler.schedule(list(targets), link_config, config.throttle, stop_event)
        aggregator.fold_all(replace(o, linking_urls=tuple(targets.get(o.url, ()))) for o in outcomes)

    @staticmethod
    def iteration_error(stats: CrawlStatistics) -> Optional[CrawlIterationError]:
        if stats.total == 0:
            return CrawlIterationError("No URL crawled")
        if stats.total != stats.count_200:
            return CrawlIterationError("Some URLs had a different status code than 200")
        return None
