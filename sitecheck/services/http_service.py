import logging
import time
from typing import Optional, Tuple

import requests

from sitecheck.domain import CrawlConfiguration, FetchOutcome, Link, PhaseTimings
from sitecheck.exceptions import HttpFetchError, LinkParseError
from sitecheck.services.link_extractor import LinkExtractor
from sitecheck.services.timed_adapter import take_connection_timings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class HttpService:
    """
    HTTP client used to check pages.

    Requires a requests-like `session` for dependency injection, so tests can
    pass a mock and the real client can record connection phase timings
    (see `timed_adapter.build_session`).
    """

    def __init__(
        self,
        session,
        user_agent: Optional[str] = None,
        link_extractor: Optional[LinkExtractor] = None,
        log: Optional[logging.Logger] = None,
        clock=time.perf_counter,
    ):
        self.session = session
        self.user_agent = user_agent
        self.link_extractor = link_extractor or LinkExtractor()
        self.logger = log or logger
        self.clock = clock

    def fetch(self, url: str, config: CrawlConfiguration) -> FetchOutcome:
        """GET `url`, drain the body and return status, timings and optional links."""
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        started = self.clock()
        try:
            resp = self.session.get(
                url,
                headers=headers,
                auth=config.http.auth,
                timeout=config.http.timeout,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            self.logger.error("Fetch failed for %s: %s", url, e)
            outcome = FetchOutcome.transport_failure(url, HttpFetchError(url, e), total=self.clock() - started)
            self._log_outcome(outcome)
            return outcome

        headers_after = self.clock() - started
        setup = take_connection_timings(resp)

        links: Optional[Tuple[Link, ...]] = None
        error = None
        try:
            if self._should_extract_links(resp, config):
                links = self._extract_links(resp.content, self._page_url(resp, url))
            else:
                # Drain so the connection can go back to the pool.
                for _ in resp.iter_content(chunk_size=CHUNK_SIZE):
                    pass
        except requests.exceptions.RequestException as e:
            self.logger.warning("Error reading body of %s: %s", url, e)
            error = HttpFetchError(url, e)
        finally:
            resp.close()

        timings = PhaseTimings.from_marks(
            dns=setup.dns,
            connect=setup.connect,
            tls=setup.tls,
            headers_after=headers_after,
            total=self.clock() - started,
        )
        outcome = FetchOutcome(url=url, status_code=resp.status_code, timings=timings, links=links, error=error)
        self._log_outcome(outcome)
        return outcome

    def _should_extract_links(self, resp, config: CrawlConfiguration) -> bool:
        if not config.http.parse_links or resp.status_code != 200:
            return False
        ct = None
        if hasattr(resp, "headers"):
            ct = resp.headers.get("Content-Type")
        if not isinstance(ct, str) or not ct:
            return True
        return "html" in ct.lower()

    def _page_url(self, resp, requested_url: str) -> str:
        # Redirects change the base that relative links resolve against.
        final_url = getattr(resp, "url", None)
        return final_url if isinstance(final_url, str) and final_url else requested_url

    def _extract_links(self, body, page_url: str) -> Optional[Tuple[Link, ...]]:
        try:
            return tuple(self.link_extractor.extract_links(body, page_url))
        except LinkParseError as e:
            self.logger.warning("Link extraction skipped for %s: %s", page_url, e)
            return None

    def _log_outcome(self, outcome: FetchOutcome) -> None:
        t = outcome.timings
        total_ms = _ms(t.total)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "url=%s status=%s dns=%dms tcpconn=%dms tls=%dms server=%dms content=%dms time=%dms close=%s",
                outcome.url,
                outcome.status_code,
                _ms(t.dns),
                _ms(t.connect),
                _ms(t.tls),
                _ms(t.server_processing),
                _ms(t.content_transfer),
                total_ms,
                outcome.end_time.isoformat(),
                extra={
                    "url": outcome.url,
                    "status": outcome.status_code,
                    "dns": _ms(t.dns),
                    "tcpconn": _ms(t.connect),
                    "tls": _ms(t.tls),
                    "server": _ms(t.server_processing),
                    "content": _ms(t.content_transfer),
                    "time": total_ms,
                },
            )
        else:
            self.logger.info(
                "url=%s status=%s total-time=%dms",
                outcome.url,
                outcome.status_code,
                total_ms,
                extra={"url": outcome.url, "status": outcome.status_code, "total_time": total_ms},
            )


def _ms(seconds: float) -> int:
    return int(round(seconds * 1000))
