from typing import Iterable, Optional

from sitecheck.domain import CrawlResult, CrawlStatistics, FetchOutcome


class StatsAggregator:
    """Folds fetch outcomes into one CrawlStatistics record.

    Not thread-safe: the record belongs to the single loop draining the
    scheduler's outcome stream.
    """

    def __init__(self, stats: Optional[CrawlStatistics] = None):
        self.stats = stats if stats is not None else CrawlStatistics()
        self._time_sum_200 = self.stats.average_200_time * self.stats.count_200

    def fold(self, outcome: FetchOutcome) -> None:
        stats = self.stats
        stats.total += 1
        stats.status_codes[outcome.status_code] = stats.status_codes.get(outcome.status_code, 0) + 1

        elapsed = outcome.total_time
        if outcome.status_code == 200:
            self._time_sum_200 += elapsed
            if elapsed > stats.max_200_time:
                stats.max_200_time = elapsed
        else:
            stats.non_200_urls.append(
                CrawlResult(
                    url=outcome.url,
                    status_code=outcome.status_code,
                    time=elapsed,
                    linking_urls=tuple(outcome.linking_urls),
                )
            )
        stats.average_200_time = self._time_sum_200 / stats.count_200 if stats.count_200 else 0.0

    def fold_all(self, outcomes: Iterable[FetchOutcome]) -> CrawlStatistics:
        for outcome in outcomes:
            self.fold(outcome)
        return self.stats

    def result(self) -> CrawlStatistics:
        return self.stats


def merge_crawl_stats(stats_a: CrawlStatistics, stats_b: CrawlStatistics) -> CrawlStatistics:
    """Merge two sets of crawl statistics into a new record.

    The 200 average is weighted by each side's number of 200 responses, so an
    iteration with few URLs does not count as much as a large one.
    """
    status_codes = dict(stats_a.status_codes)
    for code, count in stats_b.status_codes.items():
        status_codes[code] = status_codes.get(code, 0) + count

    count_a = stats_a.count_200
    count_b = stats_b.count_200
    average = 0.0
    if count_a + count_b > 0:
        average = (stats_a.average_200_time * count_a + stats_b.average_200_time * count_b) / (count_a + count_b)

    return CrawlStatistics(
        total=stats_a.total + stats_b.total,
        status_codes=status_codes,
        average_200_time=average,
        max_200_time=max(stats_a.max_200_time, stats_b.max_200_time),
        non_200_urls=list(stats_a.non_200_urls) + list(stats_b.non_200_urls),
    )
