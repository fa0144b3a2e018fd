"""requests transport that records DNS, TCP connect and TLS handshake durations.

Each new urllib3 connection stores a `ConnectionTimings` on itself; the fetcher
takes (and clears) it once the response headers arrive. A keep-alive
connection that is reused has no timings left, so its setup phases count as 0.
"""
import socket
import time
from typing import NamedTuple, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool
from urllib3.exceptions import NewConnectionError


class ConnectionTimings(NamedTuple):
    dns: float = 0.0
    connect: float = 0.0
    tls: float = 0.0


class _TimedConnectionMixin:
    phase_timings: Optional[ConnectionTimings] = None
    _is_tls = False
    _dns_seconds = 0.0
    _connect_seconds = 0.0

    def _new_conn(self):
        host = self._dns_host
        started = time.perf_counter()
        try:
            addresses = socket.getaddrinfo(host, self.port, 0, socket.SOCK_STREAM)
        except OSError:
            # urllib3 resolves again below and raises its own error
            addresses = []
        resolved = time.perf_counter()
        self._dns_seconds = resolved - started

        try:
            if addresses:
                self._dns_host = addresses[0][4][0]
            try:
                sock = super()._new_conn()
            except NewConnectionError:
                if len(addresses) <= 1:
                    raise
                self._dns_host = host
                sock = super()._new_conn()
        finally:
            self._dns_host = host
        self._connect_seconds = time.perf_counter() - resolved
        return sock

    def connect(self):
        self.phase_timings = None
        self._dns_seconds = 0.0
        self._connect_seconds = 0.0
        started = time.perf_counter()
        super().connect()
        elapsed = time.perf_counter() - started
        tls = 0.0
        if self._is_tls:
            tls = max(0.0, elapsed - self._dns_seconds - self._connect_seconds)
        self.phase_timings = ConnectionTimings(self._dns_seconds, self._connect_seconds, tls)


class TimedHTTPConnection(_TimedConnectionMixin, HTTPConnection):
    pass


class TimedHTTPSConnection(_TimedConnectionMixin, HTTPSConnection):
    _is_tls = True


class TimedHTTPConnectionPool(HTTPConnectionPool):
    ConnectionCls = TimedHTTPConnection


class TimedHTTPSConnectionPool(HTTPSConnectionPool):
    ConnectionCls = TimedHTTPSConnection


class TimedHTTPAdapter(HTTPAdapter):
    """HTTPAdapter whose pools open timed connections."""

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {
            "http": TimedHTTPConnectionPool,
            "https": TimedHTTPSConnectionPool,
        }


def take_connection_timings(response) -> ConnectionTimings:
    """Return and clear the setup timings of the connection that served `response`."""
    raw = getattr(response, "raw", None)
    conn = getattr(raw, "connection", None)
    timings = getattr(conn, "phase_timings", None)
    if not isinstance(timings, ConnectionTimings):
        return ConnectionTimings()
    conn.phase_timings = None
    return timings


def build_session(pool_size: int = 10, user_agent: Optional[str] = None) -> requests.Session:
    """Create a session with timed connections and no automatic retries."""
    session = requests.Session()
    adapter = TimedHTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    if user_agent:
        session.headers.update({"User-Agent": user_agent})
    return session
