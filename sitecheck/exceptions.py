"""Custom exceptions for sitecheck services."""


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class LinkParseError(Exception):
    """Raised when a page body cannot be parsed to extract links."""

    def __init__(self, page_url: str, original: Exception):
        self.page_url = page_url
        self.original = original
        super().__init__(f"Could not parse links from {page_url}: {original}")


class SitemapFetchError(Exception):
    """Raised when the sitemap cannot be retrieved or parsed. Fatal to a run."""

    def __init__(self, sitemap_url: str, reason: str):
        self.sitemap_url = sitemap_url
        self.reason = reason
        super().__init__(f"Sitemap '{sitemap_url}' {reason}")


class CrawlIterationError(Exception):
    """Aggregate failure of one crawl iteration (no URL crawled, or non-200s seen).

    Returned alongside the iteration statistics, not raised.
    """


class HookExecutionError(Exception):
    """Raised when a pre/post command cannot be run or exits non-zero."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"Command '{command}' {reason}")
