import logging
from typing import Dict, Iterable, List, Optional

from sitecheck.domain import FetchOutcome, Link, LinkFollowConfig, LinkType
from sitecheck.utils.url_utils import is_followable, strip_fragment

logger = logging.getLogger(__name__)


class LinkProcessor:
    """Turn links found on sitemap pages into the list of URLs to check next.

    Only one hop is followed: the returned targets are fetched without
    extracting their own links.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def should_follow(self, link: Link, links_config: LinkFollowConfig) -> bool:
        if link.type is LinkType.HYPERLINK and not links_config.crawl_hyperlinks:
            return False
        if link.type is LinkType.IMAGE and not links_config.crawl_images:
            return False
        if link.is_external and not links_config.crawl_external:
            self.logger.debug("Skipping (external) %s", link.target_url)
            return False
        if not is_followable(link.target_url):
            self.logger.debug("Skipping (not http) %s", link.target_url)
            return False
        return True

    def follow_up_targets(
        self,
        outcomes: Iterable[FetchOutcome],
        seed_urls: Iterable[str],
        links_config: LinkFollowConfig,
    ) -> Dict[str, List[str]]:
        """Return {target URL: [pages linking to it]} for links worth fetching.

        Seed URLs are never returned, since the iteration already fetched them.
        """
        already_fetched = {strip_fragment(u) for u in seed_urls}
        targets: Dict[str, List[str]] = {}
        for outcome in outcomes:
            if not outcome.links:
                continue
            for link in outcome.links:
                if not self.should_follow(link, links_config):
                    continue
                target = strip_fragment(link.target_url)
                if target in already_fetched:
                    continue
                referrers = targets.setdefault(target, [])
                if outcome.url not in referrers:
                    referrers.append(outcome.url)

        self.logger.info("Found %d link(s) to follow", len(targets))
        return targets
