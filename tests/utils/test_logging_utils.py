import io
import json
import logging

from sitecheck.utils.logging_utils import LOGGER_NAME, configure_logging


def test_configure_logging_text_output():
    stream = io.StringIO()
    log = configure_logging(logging.INFO, stream=stream)
    log.info("crawled %d", 3)
    log.debug("hidden")
    out = stream.getvalue()
    assert "INFO crawled 3" in out
    assert "hidden" not in out
    assert log.name == LOGGER_NAME


def test_configure_logging_json_includes_extra_fields():
    stream = io.StringIO()
    log = configure_logging(logging.INFO, json_output=True, stream=stream)
    log.info("url=%s", "http://a.com/", extra={"url": "http://a.com/", "status": 200})
    record = json.loads(stream.getvalue().strip())
    assert record["level"] == "info"
    assert record["msg"] == "url=http://a.com/"
    assert record["url"] == "http://a.com/"
    assert record["status"] == 200
    assert "time" in record


def test_configure_logging_replaces_previous_handler():
    configure_logging(logging.INFO, stream=io.StringIO())
    log = configure_logging(logging.DEBUG, stream=io.StringIO())
    assert len(log.handlers) == 1
    assert log.level == logging.DEBUG
