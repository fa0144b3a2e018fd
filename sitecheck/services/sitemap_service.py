import logging
from typing import List, Optional

import requests
from bs4 import BeautifulSoup

from sitecheck.exceptions import SitemapFetchError
from sitecheck.utils.url_utils import is_absolute

logger = logging.getLogger(__name__)


class SitemapService:
    """Read the page URLs declared in a sitemap.

    A sitemap index is followed one level deep: URLs of the sitemaps it lists
    are returned, but indexes nested inside those are not expanded.
    """

    def __init__(self, session, timeout: float = 20.0, log: Optional[logging.Logger] = None):
        self.session = session
        self.timeout = timeout
        self.logger = log or logger

    def get_urls(self, sitemap_url: str) -> List[str]:
        soup = self._fetch(sitemap_url)
        if soup.find("sitemapindex") is not None:
            urls: List[str] = []
            for child_url in self._locs(soup, "sitemap", sitemap_url):
                try:
                    urls.extend(self._locs(self._fetch(child_url), "url", child_url))
                except SitemapFetchError as e:
                    self.logger.error("Skipping sitemap: %s", e)
            return urls
        if soup.find("urlset") is None:
            raise SitemapFetchError(sitemap_url, "is not a sitemap document")
        return self._locs(soup, "url", sitemap_url)

    def _fetch(self, sitemap_url: str) -> BeautifulSoup:
        try:
            resp = self.session.get(sitemap_url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SitemapFetchError(sitemap_url, f"could not be fetched: {e}") from e
        if resp.status_code >= 400:
            raise SitemapFetchError(sitemap_url, f"returned status {resp.status_code}")
        return BeautifulSoup(resp.content, "xml")

    def _locs(self, soup: BeautifulSoup, entry_tag: str, source: str) -> List[str]:
        locs = []
        for entry in soup.find_all(entry_tag):
            loc = entry.find("loc")
            if loc is None:
                continue
            value = loc.get_text(strip=True)
            try:
                valid = is_absolute(value)
            except ValueError:
                valid = False
            if not valid:
                self.logger.error("Skipping invalid URL %r in %s", value, source)
                continue
            locs.append(value)
        return locs
