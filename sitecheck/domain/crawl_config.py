from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE = 5
DEFAULT_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True)
class HttpConfig:
    """Settings used to GET pages via HTTP/S."""

    user: Optional[str] = None
    password: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    parse_links: bool = False

    @property
    def auth(self):
        if not self.user:
            return None
        return (self.user, self.password or "")


@dataclass(frozen=True)
class LinkFollowConfig:
    """Which links discovered on sitemap pages are fetched as well."""

    crawl_hyperlinks: bool = False
    crawl_images: bool = False
    crawl_external: bool = False

    @property
    def enabled(self) -> bool:
        return self.crawl_hyperlinks or self.crawl_images


@dataclass(frozen=True)
class CrawlConfiguration:
    """Crawl settings composed of concurrency + HTTP settings + link following.

    `throttle` is the maximum number of requests in flight at once.
    """

    throttle: int = DEFAULT_THROTTLE
    host: Optional[str] = None
    http: HttpConfig = field(default_factory=HttpConfig)
    links: LinkFollowConfig = field(default_factory=LinkFollowConfig)

    @classmethod
    def create(
        cls,
        *,
        throttle: int = DEFAULT_THROTTLE,
        host: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout_ms: int = int(DEFAULT_TIMEOUT_SECONDS * 1000),
        crawl_hyperlinks: bool = False,
        crawl_images: bool = False,
        crawl_external: bool = False,
    ) -> "CrawlConfiguration":
        links = LinkFollowConfig(
            crawl_hyperlinks=bool(crawl_hyperlinks),
            crawl_images=bool(crawl_images),
            crawl_external=bool(crawl_external),
        )
        http = HttpConfig(
            user=user or None,
            password=password or None,
            timeout=timeout_ms / 1000,
            parse_links=links.enabled,
        )
        return cls(throttle=int(throttle), host=host or None, http=http, links=links)

    def with_valid_throttle(self) -> "CrawlConfiguration":
        if self.throttle <= 0:
            logger.warning("Invalid throttle value %s, defaulting to 1.", self.throttle)
            return replace(self, throttle=1)
        return self

    def with_link_parsing(self, enabled: bool) -> "CrawlConfiguration":
        if self.http.parse_links == enabled:
            return self
        return replace(self, http=replace(self.http, parse_links=enabled))
