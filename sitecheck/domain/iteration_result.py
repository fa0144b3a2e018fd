"""Iteration result data model."""
from typing import NamedTuple, Optional

from sitecheck.domain.crawl_stats import CrawlStatistics
from sitecheck.exceptions import CrawlIterationError


class IterationResult(NamedTuple):
    """Outcome of one pass over the seed URLs.

    Lets callers merge statistics and distinguish success from cancellation.
    """
    stats: CrawlStatistics
    """Statistics of this iteration only"""

    stopped: bool
    """True if cancellation was observed during the iteration"""

    error: Optional[CrawlIterationError] = None
    """Aggregate error (nothing crawled, or some non-200), never raised"""
