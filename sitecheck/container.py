"""Dependency injection container for the application."""
from dependency_injector import containers, providers

from sitecheck import config as env
from sitecheck.services.crawl_executor import CrawlExecutor
from sitecheck.services.crawl_profile_parser import CrawlProfileParser
from sitecheck.services.fetch_scheduler import FetchScheduler
from sitecheck.services.hook_runner import HookRunner
from sitecheck.services.http_service import HttpService
from sitecheck.services.iteration_controller import IterationController
from sitecheck.services.link_extractor import LinkExtractor
from sitecheck.services.link_processor import LinkProcessor
from sitecheck.services.sitemap_service import SitemapService
from sitecheck.services.timed_adapter import build_session


# Environment variables used by the container (read via `sitecheck.config` helpers).
#
# USER_AGENT (str, default: "sitecheck/<version>")
#   User-Agent header for sitemap and page requests.
#
# CRAWL_THROTTLE (int, default: 5)
#   Number of requests in flight at once. Also sizes the HTTP connection pool.
#   The command line --throttle flag overrides it.
#
# CRAWL_TIMEOUT (int milliseconds, default: 20000)
#   Per-request timeout. Used here for the sitemap requests.
#
# CRAWL_WAIT_INTERVAL (int seconds, default: 0)
#   Pause between two iterations.
#
# CRAWL_HOST, CRAWL_HTTP_USER, CRAWL_HTTP_PASSWORD (str | optional)
#   Host override and basic auth credentials.
ENV = {
    "USER_AGENT": env.USER_AGENT,
    "CRAWL_THROTTLE": env.CRAWL_THROTTLE,
    "CRAWL_TIMEOUT": env.CRAWL_TIMEOUT_MS,
    "CRAWL_WAIT_INTERVAL": env.CRAWL_WAIT_INTERVAL,
    "CRAWL_HOST": env.CRAWL_HOST,
    "CRAWL_HTTP_USER": env.CRAWL_HTTP_USER,
    "CRAWL_HTTP_PASSWORD": env.CRAWL_HTTP_PASSWORD,
}


def pool_size_for(throttle: int) -> int:
    return max(10, throttle * 2)


class Container(containers.DeclarativeContainer):
    """Dependency injection container for the sitecheck application."""

    config = providers.Configuration(default=ENV)

    # Shared HTTP session - Singleton to reuse the connection pool
    http_session = providers.Singleton(
        build_session,
        pool_size=providers.Callable(pool_size_for, config.CRAWL_THROTTLE.as_(int)),
        user_agent=config.USER_AGENT.as_(str),
    )

    link_extractor = providers.Singleton(LinkExtractor)

    http_service = providers.Singleton(
        HttpService,
        session=http_session,
        link_extractor=link_extractor,
    )

    fetch_scheduler = providers.Factory(
        FetchScheduler,
        fetcher=http_service,
    )

    link_processor = providers.Singleton(LinkProcessor)

    crawl_executor = providers.Factory(
        CrawlExecutor,
        scheduler=fetch_scheduler,
        link_processor=link_processor,
    )

    iteration_controller = providers.Factory(
        IterationController,
        executor=crawl_executor,
    )

    sitemap_service = providers.Singleton(
        SitemapService,
        session=http_session,
        timeout=providers.Callable(lambda ms: ms / 1000, config.CRAWL_TIMEOUT.as_(int)),
    )

    hook_runner = providers.Singleton(HookRunner)

    profile_parser = providers.Singleton(CrawlProfileParser)
