import logging
import time
from typing import Iterable, Optional

from sitecheck.domain import CrawlConfiguration, CrawlStatistics
from sitecheck.services.cancellation import is_stopped
from sitecheck.services.crawl_executor import CrawlExecutor
from sitecheck.services.stats_aggregator import merge_crawl_stats
from sitecheck.utils.url_utils import rewrite_url_host

logger = logging.getLogger(__name__)


class IterationController:
    """Repeat the sitemap crawl for a number of iterations, or forever.

    Statistics of every iteration are merged into a running total, which is
    returned when the iterations are done or cancellation is observed.
    """

    def __init__(self, executor: CrawlExecutor, log: Optional[logging.Logger] = None):
        self.executor = executor
        self.logger = log or logger

    def run(
        self,
        seed_urls: Iterable[str],
        config: CrawlConfiguration,
        max_iterations: Optional[int] = 1,
        wait_interval: float = 0,
        stop_event=None,
    ) -> CrawlStatistics:
        """Run the iterations. `max_iterations=None` means until cancelled.

        Seed URLs get their host replaced by `config.host` when it is set. The
        wait between iterations returns early when `stop_event` is set.
        """
        urls = list(seed_urls)
        if config.host:
            urls = rewrite_url_host(urls, config.host)
        forever = max_iterations is None
        if not forever and max_iterations < 1:
            self.logger.warning("Invalid iteration count %s, running once.", max_iterations)
            max_iterations = 1

        stats = CrawlStatistics()
        iteration = 0
        while forever or iteration < max_iterations:
            if iteration > 0:
                if self._wait(wait_interval, stop_event):
                    self.logger.info("Stopped while waiting for the next iteration")
                    break

            iteration += 1
            self.logger.info("Starting iteration %d (%d URL(s))", iteration, len(urls))
            result = self.executor.crawl(urls, config, stop_event)
            stats = merge_crawl_stats(stats, result.stats)

            if result.error is not None:
                self.logger.warning("Iteration %d: %s", iteration, result.error)

            if result.stopped or is_stopped(stop_event):
                self.logger.info("Stopped after iteration %d", iteration)
                break

        return stats

    def _wait(self, wait_interval: float, stop_event) -> bool:
        """Sleep between iterations; True if cancellation was observed."""
        if is_stopped(stop_event):
            return True
        if wait_interval <= 0:
            return False
        if stop_event is not None and hasattr(stop_event, "wait"):
            return bool(stop_event.wait(wait_interval))
        time.sleep(wait_interval)
        return False
