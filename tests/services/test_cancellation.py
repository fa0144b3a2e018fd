import threading

from sitecheck.services.cancellation import CancellationToken, is_stopped


def test_is_stopped_handles_none_and_events():
    assert is_stopped(None) is False
    event = threading.Event()
    assert is_stopped(event) is False
    event.set()
    assert is_stopped(event) is True


def test_cancel_is_idempotent(caplog):
    token = CancellationToken()
    assert token.cancel("first interrupt") is True
    assert token.cancel("second interrupt") is False
    assert token.is_set()
    assert token.reason == "first interrupt"
    assert caplog.text.count("Cancellation requested") == 1


def test_wait_returns_when_cancelled_from_another_thread():
    token = CancellationToken()
    timer = threading.Timer(0.05, token.cancel)
    timer.start()
    try:
        assert token.wait(5) is True
    finally:
        timer.cancel()


def test_wait_times_out():
    assert CancellationToken().wait(0.01) is False
