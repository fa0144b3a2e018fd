from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import NamedTuple, Optional, Tuple

from sitecheck.domain.link import Link


class PhaseTimings(NamedTuple):
    """Durations, in seconds, of each phase of one GET."""
    dns: float = 0.0
    connect: float = 0.0
    tls: float = 0.0
    server_processing: float = 0.0
    content_transfer: float = 0.0
    total: float = 0.0

    @classmethod
    def from_marks(cls, *, dns: float, connect: float, tls: float, headers_after: float, total: float) -> "PhaseTimings":
        """Build timings from connection phases plus the time headers arrived and the body finished.

        Server processing is the time to headers minus connection setup; content
        transfer is whatever is left of the total. Both are clamped non-negative.
        """
        setup = dns + connect + tls
        server = max(0.0, headers_after - setup)
        content = max(0.0, total - (setup + server))
        return cls(dns=dns, connect=connect, tls=tls, server_processing=server, content_transfer=content, total=total)


@dataclass(frozen=True)
class FetchOutcome:
    """Result of attempting to GET one URL.

    `status_code` is 0 when no response was received. `links` is None when link
    extraction did not run for this page.
    """

    url: str
    status_code: int
    timings: PhaseTimings = PhaseTimings()
    end_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    links: Optional[Tuple[Link, ...]] = None
    error: Optional[BaseException] = None
    linking_urls: Tuple[str, ...] = ()

    @property
    def total_time(self) -> float:
        return self.timings.total

    @classmethod
    def transport_failure(cls, url: str, error: BaseException, total: float = 0.0) -> "FetchOutcome":
        return cls(url=url, status_code=0, timings=PhaseTimings(total=total), error=error)
