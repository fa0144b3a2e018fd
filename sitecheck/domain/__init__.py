"""Domain objects for sitecheck - explicit re-exports to satisfy linters."""
from .link import Link as Link, LinkType as LinkType
from .fetch_outcome import FetchOutcome as FetchOutcome, PhaseTimings as PhaseTimings
from .crawl_result import CrawlResult as CrawlResult
from .crawl_stats import CrawlStatistics as CrawlStatistics
from .crawl_config import CrawlConfiguration as CrawlConfiguration, HttpConfig as HttpConfig, LinkFollowConfig as LinkFollowConfig
from .iteration_result import IterationResult as IterationResult

__all__ = [
    "Link",
    "LinkType",
    "FetchOutcome",
    "PhaseTimings",
    "CrawlResult",
    "CrawlStatistics",
    "CrawlConfiguration",
    "HttpConfig",
    "LinkFollowConfig",
    "IterationResult",
]
