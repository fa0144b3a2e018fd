from __future__ import annotations

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


def is_stopped(stop_event) -> bool:
    """Check if a cancellation token (or any object with `is_set`) was set."""
    return stop_event is not None and getattr(stop_event, "is_set", lambda: False)()


class CancellationToken:
    """One-shot broadcast signal meaning "stop accepting new work".

    Setting it more than once is a no-op, so two interrupts behave like one.
    """

    def __init__(self, *, event_factory=threading.Event):
        self._event = event_factory()
        self._lock = threading.RLock()
        self.reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Set the signal. Returns False if it was already set."""
        with self._lock:
            if self._event.is_set():
                logger.debug("Cancellation already requested (%s)", self.reason)
                return False
            self.reason = reason
            self._event.set()
        logger.warning("Cancellation requested%s", f": {reason}" if reason else "")
        return True

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block up to `timeout` seconds; returns True as soon as the signal is set."""
        return self._event.wait(timeout)
