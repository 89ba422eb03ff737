"""Pytest configuration for the Origins provenance backend."""
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from fakes import StubSession


@pytest.fixture
def unreachable_session():
    return StubSession(error=requests.exceptions.ConnectionError("connection refused"))


class _CookieSettingHandler(BaseHTTPRequestHandler):
    """Answers every GET with an empty result and a Set-Cookie header; records the Cookie it received."""

    def do_GET(self):
        self.server.received_cookies.append(self.headers.get("Cookie"))
        body = [] if self.path.startswith("/v1/assets") else {"events": []}
        payload = json.dumps(body).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.send_header("Set-Cookie", "caller=alice; Path=/")
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def cookie_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _CookieSettingHandler)
    server.received_cookies = []
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def cookie_server_url(cookie_server, monkeypatch):
    # Loopback traffic must not be routed through an ambient proxy
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    host, port = cookie_server.server_address[:2]
    return f"http://{host}:{port}"
