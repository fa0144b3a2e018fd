import requests

from sitecheck.services.timed_adapter import (
    ConnectionTimings,
    TimedHTTPAdapter,
    build_session,
    take_connection_timings,
)


def ok_route(path, headers):
    return 200, "text/plain", f"ua={headers.get('User-Agent')}"


def test_build_session_mounts_timed_adapter():
    session = build_session(pool_size=4, user_agent="sitecheck/test")
    assert isinstance(session.get_adapter("http://example.com/"), TimedHTTPAdapter)
    assert isinstance(session.get_adapter("https://example.com/"), TimedHTTPAdapter)
    assert session.headers["User-Agent"] == "sitecheck/test"


def test_new_connection_records_timings(http_server):
    base = http_server(ok_route)
    session = build_session(user_agent="sitecheck/test")

    resp = session.get(base + "/page", stream=True, timeout=5)
    timings = take_connection_timings(resp)
    body = resp.text
    resp.close()

    assert resp.status_code == 200
    assert body == "ua=sitecheck/test"
    assert isinstance(timings, ConnectionTimings)
    assert timings.dns >= 0.0
    assert timings.connect >= 0.0
    # plain http has no handshake
    assert timings.tls == 0.0


def test_timings_are_taken_once(http_server):
    base = http_server(ok_route)
    session = build_session()

    resp = session.get(base + "/page", stream=True, timeout=5)
    take_connection_timings(resp)
    assert take_connection_timings(resp) == ConnectionTimings()
    resp.close()


def test_take_connection_timings_without_connection():
    resp = requests.Response()
    assert take_connection_timings(resp) == ConnectionTimings()


def test_connection_refused_raises_requests_error(http_server):
    base = http_server(ok_route)
    session = build_session()
    # nothing listens on port 1
    try:
        session.get("http://127.0.0.1:1/", timeout=2)
        assert False, "expected ConnectionError"
    except requests.exceptions.ConnectionError:
        pass
    # the session still works afterwards
    assert session.get(base + "/", timeout=5).status_code == 200
