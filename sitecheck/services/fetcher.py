from __future__ import annotations

from typing import Protocol

from sitecheck.domain import CrawlConfiguration, FetchOutcome


class Fetcher(Protocol):
    """Fetch one URL and report what happened as a FetchOutcome.

    Kept to a single method so the scheduler does not depend on the transport
    (e.g., the requests-based HttpService, or a test double).
    """

    def fetch(self, url: str, config: CrawlConfiguration) -> FetchOutcome: ...
