import logging
from typing import Callable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from sitecheck.domain import Link, LinkType
from sitecheck.exceptions import LinkParseError
from sitecheck.utils.url_utils import host_key, is_absolute

logger = logging.getLogger(__name__)


def _default_parser(html):
    return BeautifulSoup(html, "html.parser")


class LinkExtractor:
    """Find `<a href>` and `<img src>` targets in a page, resolved against the page URL."""

    def __init__(self, parser_fn: Optional[Callable] = None, log: Optional[logging.Logger] = None):
        self.parser_fn = parser_fn or _default_parser
        self.logger = log or logger

    def extract_links(self, html, page_url: str) -> List[Link]:
        try:
            soup = self.parser_fn(html)
        except Exception as e:
            self.logger.error("Could not parse %s: %s", page_url, e)
            raise LinkParseError(page_url, e) from e

        try:
            page_host = host_key(page_url)
        except ValueError:
            page_host = None

        links = []
        seen = set()
        candidates = [(LinkType.HYPERLINK, a.get("href")) for a in soup.find_all("a", href=True)]
        candidates += [(LinkType.IMAGE, img.get("src")) for img in soup.find_all("img", src=True)]
        for link_type, raw in candidates:
            link = self._build_link(link_type, raw, page_url, page_host)
            if link is None or link in seen:
                continue
            seen.add(link)
            links.append(link)
        return links

    def _build_link(self, link_type: LinkType, raw: str, page_url: str, page_host) -> Optional[Link]:
        target = (raw or "").strip()
        if not target:
            return None
        if link_type is LinkType.HYPERLINK and target.startswith("#"):
            return None
        if link_type is LinkType.IMAGE and target.lower().startswith("data:"):
            return None

        try:
            resolved = urljoin(page_url, target)
            external = is_absolute(resolved) and host_key(resolved) != page_host
        except ValueError as e:
            self.logger.error("Skipping malformed link %r on %s: %s", target, page_url, e)
            return None
        return Link(type=link_type, target_url=resolved, is_external=external)
