import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from sitecheck.utils.logging_utils import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_app_logger():
    """The CLI attaches a handler and a level to the app logger; undo it between tests."""
    yield
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def http_server():
    """Start a local server whose responses come from `route(path, headers) -> (status, content_type, body)`.

    Returns a function taking the route and returning the base URL.
    """
    servers = []

    def start(route):
        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                status, content_type, body = route(self.path, self.headers)
                if isinstance(body, str):
                    body = body.encode("utf-8")
                self.send_response(status)
                if content_type:
                    self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format, *args):
                pass

        server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        server.daemon_threads = True
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        servers.append((server, thread))
        host, port = server.server_address[:2]
        return f"http://{host}:{port}"

    yield start

    for server, thread in servers:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


class FunctionFetcher:
    def __init__(self, fetch_fn):
        self.fetch = fetch_fn


@pytest.fixture
def function_fetcher():
    """Wrap a plain `fn(url, config) -> FetchOutcome` so it can stand in for HttpService."""
    return FunctionFetcher
