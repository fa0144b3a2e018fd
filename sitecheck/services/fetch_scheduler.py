import logging
import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, List, Optional

from sitecheck.domain import CrawlConfiguration, FetchOutcome
from sitecheck.services.cancellation import is_stopped
from sitecheck.services.fetcher import Fetcher

logger = logging.getLogger(__name__)

_DONE = object()


class FetchScheduler:
    """Runs a Fetcher over a list of URLs with at most `max_concurrent` requests in flight.

    Outcomes are yielded in completion order. Cancellation stops admission of
    new URLs; fetches already in flight finish and are still reported.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        slot_poll_seconds: float = 0.1,
        log: Optional[logging.Logger] = None,
    ):
        self.fetcher = fetcher
        self.slot_poll_seconds = slot_poll_seconds
        self.logger = log or logger

    def schedule(
        self,
        urls: Iterable[str],
        config: CrawlConfiguration,
        max_concurrent: int,
        stop_event=None,
    ) -> Iterator[FetchOutcome]:
        if max_concurrent <= 0:
            self.logger.warning("Invalid throttle value %s, defaulting to 1.", max_concurrent)
            max_concurrent = 1

        results: "queue.Queue" = queue.Queue()
        dispatcher = threading.Thread(
            target=self._dispatch,
            args=(list(urls), config, max_concurrent, stop_event, results),
            name="fetch-dispatcher",
            daemon=True,
        )
        dispatcher.start()
        return self._drain(results, dispatcher)

    def _drain(self, results: "queue.Queue", dispatcher: threading.Thread) -> Iterator[FetchOutcome]:
        while True:
            item = results.get()
            if item is _DONE:
                break
            yield item
        dispatcher.join()

    def _dispatch(
        self,
        urls: List[str],
        config: CrawlConfiguration,
        max_concurrent: int,
        stop_event,
        results: "queue.Queue",
    ) -> None:
        slots = threading.BoundedSemaphore(max_concurrent)
        admitted = 0
        try:
            with ThreadPoolExecutor(max_workers=max_concurrent, thread_name_prefix="fetch") as executor:
                for url in urls:
                    if not self._acquire_slot(slots, stop_event):
                        self.logger.info("Waiting for workers to finish...")
                        break
                    admitted += 1
                    executor.submit(self._fetch_one, url, config, slots, results)
        finally:
            self.logger.debug("Dispatched %d of %d URL(s)", admitted, len(urls))
            results.put(_DONE)

    def _acquire_slot(self, slots: threading.BoundedSemaphore, stop_event) -> bool:
        """Wait for a free slot; False if cancellation was observed instead."""
        while True:
            if is_stopped(stop_event):
                return False
            if slots.acquire(timeout=self.slot_poll_seconds):
                if is_stopped(stop_event):
                    slots.release()
                    return False
                return True

    def _fetch_one(self, url: str, config: CrawlConfiguration, slots: threading.BoundedSemaphore, results: "queue.Queue") -> None:
        try:
            outcome = self.fetcher.fetch(url, config)
        except Exception as e:
            self.logger.error("Fetcher raised for %s: %s", url, e, exc_info=True)
            outcome = FetchOutcome.transport_failure(url, e)
        try:
            results.put(outcome)
        finally:
            slots.release()
