from sitecheck.container import Container, pool_size_for
from sitecheck.services.crawl_executor import CrawlExecutor
from sitecheck.services.fetch_scheduler import FetchScheduler
from sitecheck.services.http_service import HttpService
from sitecheck.services.iteration_controller import IterationController
from sitecheck.services.sitemap_service import SitemapService
from sitecheck.services.timed_adapter import TimedHTTPAdapter


def test_container_creates_engine():
    container = Container()
    container.config.CRAWL_THROTTLE.from_value(3)

    controller = container.iteration_controller()

    assert isinstance(controller, IterationController)
    assert isinstance(controller.executor, CrawlExecutor)
    assert isinstance(controller.executor.scheduler, FetchScheduler)
    assert isinstance(controller.executor.scheduler.fetcher, HttpService)


def test_container_shares_one_session():
    container = Container()
    session = container.http_session()

    assert container.http_service().session is session
    assert container.sitemap_service().session is session
    assert isinstance(session.get_adapter("https://example.com/"), TimedHTTPAdapter)


def test_sitemap_timeout_follows_crawl_timeout():
    container = Container()
    container.config.CRAWL_TIMEOUT.from_value(2500)
    service = container.sitemap_service()
    assert isinstance(service, SitemapService)
    assert service.timeout == 2.5


def test_user_agent_from_config():
    container = Container()
    container.config.USER_AGENT.from_value("sitecheck-test/1.0")
    assert container.http_session().headers["User-Agent"] == "sitecheck-test/1.0"


def test_pool_size_for():
    assert pool_size_for(1) == 10
    assert pool_size_for(20) == 40
