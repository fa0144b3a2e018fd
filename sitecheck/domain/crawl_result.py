"""Crawl result data model."""
from typing import NamedTuple, Tuple


class CrawlResult(NamedTuple):
    """A single non-200 outcome kept in the crawl statistics.

    Lets the summary point at the failing URL and the pages that linked to it.
    """
    url: str
    """URL that was fetched"""

    status_code: int
    """HTTP status, or 0 when the fetch failed before a response"""

    time: float
    """Total fetch time in seconds"""

    linking_urls: Tuple[str, ...] = ()
    """Pages whose links led to this URL (empty for sitemap URLs)"""
