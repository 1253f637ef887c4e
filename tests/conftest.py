"""Pytest configuration and shared fixtures"""
import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from unittest.mock import MagicMock, patch

import pytest

from kairosdb import Client
from kairosdb.http_client import HttpResponse


class StubTransport:
    """Transport double: records requests and replays canned responses"""

    def __init__(self):
        self.requests = []
        self.responses = []

    def respond(self, status, body=b""):
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses.append(HttpResponse(status=status, body=body))
        return self

    def request(self, method, url, body=None, headers=None):
        self.requests.append({"method": method, "url": url, "body": body, "headers": headers})
        return self.responses.pop(0)

    @property
    def last(self):
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last["body"])


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def client(stub_transport):
    return Client("localhost", 8080, transport=stub_transport)


@pytest.fixture
def mock_opener():
    """Patch the urllib opener so no real connection is made"""
    with patch("urllib.request.OpenerDirector.open") as mocked:
        yield mocked


@pytest.fixture
def make_response():
    """Factory for context-manager responses like the ones the urllib opener returns"""
    def _make(status=200, body=b""):
        mock_response = MagicMock()
        mock_response.status = status
        mock_response.read.return_value = body
        mock_response.__enter__.return_value = mock_response
        return mock_response
    return _make


class LocalKairos:
    """Real HTTP server on 127.0.0.1 answering canned routes"""

    def __init__(self):
        self.routes = {}
        self.seen = []
        owner = self

        class Handler(BaseHTTPRequestHandler):
            def _answer(self):
                length = int(self.headers.get("Content-Length") or 0)
                if length:
                    self.rfile.read(length)
                owner.seen.append((self.command, self.path))
                status, headers, body = owner.routes.get((self.command, self.path), (404, {}, b""))
                self.send_response(status)
                for name, value in headers.items():
                    self.send_header(name, value)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            do_GET = do_POST = do_DELETE = _answer

            def log_message(self, format, *args):
                pass

        self.server = HTTPServer(("127.0.0.1", 0), Handler)
        self.port = self.server.server_address[1]
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def route(self, method, path, status, body=b"", headers=None):
        self.routes[(method, path)] = (status, headers or {}, body)


@pytest.fixture
def local_kairos():
    kairos = LocalKairos()
    kairos.thread.start()
    yield kairos
    kairos.server.shutdown()
    kairos.server.server_close()
