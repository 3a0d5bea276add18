import json
import queue
import threading
from contextlib import contextmanager
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from wtracker import tracker
from wtracker.types import Breadcrumb, Config, ErrorPayload, Level, UserContext


class _Recorder(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        self.server.received.put(json.loads(self.rfile.read(length)))
        if self.server.delay:
            threading.Event().wait(self.server.delay)
        self.send_response(200)
        self.send_header("Content-Length", "0")
        self.end_headers()

    def log_message(self, format, *args):
        pass


class _IngestServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, delay=0.0):
        super().__init__(("127.0.0.1", 0), _Recorder)
        self.received = queue.Queue()
        self.delay = delay

    @property
    def url(self):
        host, port = self.server_address[:2]
        return f"http://{host}:{port}/errors/ingest"

    def wait(self):
        return ErrorPayload.from_dict(self.received.get(timeout=2))


@contextmanager
def _serving(delay=0.0):
    server = _IngestServer(delay)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def ingest():
    with _serving() as server:
        yield server


@pytest.fixture(autouse=True)
def _clean_global():
    tracker.reset()
    yield
    tracker.reset()


def test_capture_error_posts_correct_payload(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder", environment="test"), ingest.url)
    tracker.capture_error(RuntimeError("something broke"))
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.api_key == "placeholder"
    assert payload.error.message == "something broke"
    assert payload.source == "backend"
    assert payload.environment == "test"
    assert payload.session_id
    assert payload.id


def test_capture_error_includes_stack_trace(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    tracker.capture_error(RuntimeError("trace test"))
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.error.stack_trace
    assert "test_tracker.py" in payload.error.stack_trace[0].file


def test_capture_error_with_extra_context(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    tracker.capture_error(RuntimeError("ctx test"), {"method": "GET", "status": 500})
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.context.custom["method"] == "GET"
    assert payload.context.custom["status"] == 500


def test_capture_message_sets_type(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    tracker.capture_message("hello world", Level.WARN)
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.error.message == "hello world"
    assert payload.error.type == "Message[warn]"


def test_set_user_attaches_to_payload(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    tracker.set_user(UserContext(id="u1", email="alice@example.com", name="Alice"))
    tracker.capture_error(RuntimeError("user test"))
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.user is not None
    assert payload.user.id == "u1"
    assert payload.user.email == "alice@example.com"


def test_set_user_clears_with_none(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    tracker.set_user(UserContext(id="u1"))
    tracker.set_user(None)
    tracker.capture_error(RuntimeError("no user"))
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.user is None


def test_add_breadcrumb_attaches_to_payload(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    tracker.add_breadcrumb(Breadcrumb(message="clicked button", category="ui"))
    tracker.capture_error(RuntimeError("after click"))
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.breadcrumbs
    assert payload.breadcrumbs[0].message == "clicked button"
    assert payload.breadcrumbs[0].category == "ui"


def test_with_context_attaches_to_custom(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    tracker.with_context("requestId", "req-123")
    tracker.capture_error(RuntimeError("ctx test"))
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.context.custom["requestId"] == "req-123"


def test_recover_captures_and_reraises(ingest):
    tracker.init_with_endpoint(Config(api_key="placeholder"), ingest.url)
    with pytest.raises(RuntimeError, match="test panic value"):
        with tracker.recover():
            raise RuntimeError("test panic value")
    tracker.flush(2)
    payload = ingest.wait()
    assert payload.error.message == "test panic value"
    assert payload.error.type == "RuntimeError"


def test_flush_raises_on_timeout():
    with _serving(delay=1.0) as server:
        tracker.init_with_endpoint(Config(api_key="placeholder"), server.url)
        tracker.capture_error(RuntimeError("slow"))
        with pytest.raises(TimeoutError):
            tracker.flush(0.1)
        tracker.flush(3)


def test_init_replaces_client():
    tracker.init(Config(api_key="placeholder"))
    first = tracker.get_client()
    tracker.init(Config(api_key="placeholder", environment="staging"))
    second = tracker.get_client()
    assert first is not second
    assert second.environment == "staging"
    assert second.endpoint == first.endpoint


def test_noop_before_init():
    tracker.reset()
    tracker.capture_error(RuntimeError("no init"))
    tracker.capture_message("msg", Level.INFO)
    tracker.set_user(None)
    tracker.add_breadcrumb(Breadcrumb(message="x"))
    tracker.with_context("k", "v")
    with pytest.raises(ValueError):
        with tracker.recover():
            raise ValueError("still raised")
    assert tracker.flush(0.1) is None
    assert tracker.get_client() is None