from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from sitecheck.domain.crawl_result import CrawlResult


@dataclass
class CrawlStatistics:
    """Status-code totals and 200-response timings for one or more iterations.

    Times are in seconds. `total` always equals the sum of `status_codes`.
    """

    total: int = 0
    status_codes: Dict[int, int] = field(default_factory=dict)
    average_200_time: float = 0.0
    max_200_time: float = 0.0
    non_200_urls: List[CrawlResult] = field(default_factory=list)

    @property
    def count_200(self) -> int:
        return self.status_codes.get(200, 0)

    @property
    def all_ok(self) -> bool:
        return self.total == self.count_200
