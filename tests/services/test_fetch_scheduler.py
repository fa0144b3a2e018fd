import threading
import time

from sitecheck.domain import CrawlConfiguration, FetchOutcome, PhaseTimings
from sitecheck.services.cancellation import CancellationToken
from sitecheck.services.fetch_scheduler import FetchScheduler


class GatedFetcher:
    """Fetcher that blocks until `gate` is set and tracks how many calls run at once."""

    def __init__(self):
        self.gate = threading.Event()
        self.lock = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0
        self.fetched = []

    def fetch(self, url, config):
        with self.lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            self.fetched.append(url)
        self.gate.wait(5)
        with self.lock:
            self.in_flight -= 1
        return FetchOutcome(url=url, status_code=200, timings=PhaseTimings(total=0.01))


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_never_exceeds_ceiling():
    fetcher = GatedFetcher()
    urls = [f"http://a.com/{i}" for i in range(5)]

    outcomes = FetchScheduler(fetcher).schedule(urls, CrawlConfiguration.create(), 3)

    assert wait_until(lambda: fetcher.in_flight == 3)
    time.sleep(0.2)
    assert len(fetcher.fetched) == 3

    fetcher.gate.set()
    results = list(outcomes)

    assert sorted(o.url for o in results) == sorted(urls)
    assert fetcher.max_in_flight == 3


def test_exactly_one_outcome_per_url(function_fetcher):
    fetcher = function_fetcher(lambda url, config: FetchOutcome(url=url, status_code=200))
    urls = [f"http://a.com/{i}" for i in range(50)]

    results = list(FetchScheduler(fetcher).schedule(urls, CrawlConfiguration.create(), 7))

    assert sorted(o.url for o in results) == sorted(urls)


def test_empty_url_list_completes(function_fetcher):
    fetcher = function_fetcher(lambda url, config: FetchOutcome(url=url, status_code=200))
    assert list(FetchScheduler(fetcher).schedule([], CrawlConfiguration.create(), 3)) == []


def test_config_is_passed_to_fetcher(function_fetcher):
    seen = []
    cfg = CrawlConfiguration.create(user="bob")

    def fetch(url, config):
        seen.append(config)
        return FetchOutcome(url=url, status_code=200)

    list(FetchScheduler(function_fetcher(fetch)).schedule(["http://a.com/"], cfg, 1))
    assert seen == [cfg]


def test_cancellation_stops_admission_but_reports_in_flight(function_fetcher):
    token = CancellationToken()

    def fetch(url, config):
        token.cancel("test")
        return FetchOutcome(url=url, status_code=200)

    urls = [f"http://a.com/{i}" for i in range(10)]
    results = list(FetchScheduler(function_fetcher(fetch)).schedule(urls, CrawlConfiguration.create(), 1, token))

    assert [o.url for o in results] == ["http://a.com/0"]


def test_already_cancelled_admits_nothing():
    token = CancellationToken()
    token.cancel()
    fetcher = GatedFetcher()
    fetcher.gate.set()

    results = list(FetchScheduler(fetcher).schedule(["http://a.com/"], CrawlConfiguration.create(), 3, token))

    assert results == []
    assert fetcher.fetched == []


def test_cancel_while_saturated_terminates():
    token = CancellationToken()
    fetcher = GatedFetcher()
    urls = [f"http://a.com/{i}" for i in range(20)]

    outcomes = FetchScheduler(fetcher, slot_poll_seconds=0.01).schedule(urls, CrawlConfiguration.create(), 2, token)
    assert wait_until(lambda: fetcher.in_flight == 2)
    token.cancel()
    fetcher.gate.set()
    results = list(outcomes)

    assert len(results) == 2
    assert {o.url for o in results} <= set(urls)


def test_fetcher_exception_becomes_status_zero(function_fetcher, caplog):
    def fetch(url, config):
        if url.endswith("/boom"):
            raise RuntimeError("unexpected")
        return FetchOutcome(url=url, status_code=200)

    urls = ["http://a.com/ok", "http://a.com/boom", "http://a.com/ok2"]
    results = list(FetchScheduler(function_fetcher(fetch)).schedule(urls, CrawlConfiguration.create(), 2))

    by_url = {o.url: o for o in results}
    assert len(results) == 3
    assert by_url["http://a.com/boom"].status_code == 0
    assert isinstance(by_url["http://a.com/boom"].error, RuntimeError)
    assert "Fetcher raised for http://a.com/boom" in caplog.text


def test_non_positive_ceiling_is_coerced_to_one(caplog):
    fetcher = GatedFetcher()
    fetcher.gate.set()
    urls = ["http://a.com/1", "http://a.com/2"]

    results = list(FetchScheduler(fetcher).schedule(urls, CrawlConfiguration.create(), 0))

    assert len(results) == 2
    assert fetcher.max_in_flight == 1
    assert "Invalid throttle value 0, defaulting to 1." in caplog.text
