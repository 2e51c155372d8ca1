# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for SQL Query SDK tests.

Besides the usual mocks, this module provides ``mock_service``: a threaded
local HTTP server that stands in for the SQL Query API. Tests queue the
replies it should give and inspect the requests it recorded.
"""

import json
import threading
import time
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlsplit

import pytest
from azure.core.credentials import AccessToken

from IBMCloud.SqlQuery.client import SqlQueryClient
from IBMCloud.SqlQuery.core.auth import NoAuthAuthenticator
from IBMCloud.SqlQuery.core.config import SqlQueryConfig

from tests.fixtures.test_data import SAMPLE_INSTANCE_CRN


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: Dict[str, List[str]]
    headers: Dict[str, str]
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))


@dataclass
class Reply:
    status: int = 200
    body: Any = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    delay: float = 0.0

    def payload(self) -> bytes:
        if isinstance(self.body, bytes):
            return self.body
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return json.dumps(self.body).encode("utf-8")


class MockService:
    """Queue of replies plus the log of requests received."""

    def __init__(self) -> None:
        self.requests: List[RecordedRequest] = []
        self._replies: List[Reply] = []
        self._lock = threading.Lock()
        self.url = ""

    def respond(
        self,
        status: int = 200,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        delay: float = 0.0,
    ) -> "MockService":
        """Queue a reply. The last queued reply is repeated once the queue runs dry."""
        with self._lock:
            self._replies.append(Reply(status, {} if body is None else body, dict(headers or {}), delay))
        return self

    def next_reply(self) -> Reply:
        with self._lock:
            if not self._replies:
                return Reply()
            if len(self._replies) > 1:
                return self._replies.pop(0)
            return self._replies[0]

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]


class _Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def log_message(self, format, *args):
        pass

    def _handle(self):
        service: MockService = self.server.mock_service
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""
        parts = urlsplit(self.path)
        service.requests.append(
            RecordedRequest(
                method=self.command,
                path=parts.path,
                query=parse_qs(parts.query),
                headers=dict(self.headers.items()),
                body=body,
            )
        )
        reply = service.next_reply()
        if reply.delay:
            time.sleep(reply.delay)
        payload = reply.payload()
        try:
            self.send_response(reply.status)
            headers = {"Content-Type": "application/json", **reply.headers}
            for name, value in headers.items():
                self.send_header(name, value)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)
        except (BrokenPipeError, ConnectionResetError):
            # Client gave up (deadline tests)
            pass

    do_GET = _handle
    do_POST = _handle


@pytest.fixture
def mock_service():
    """Local HTTP server standing in for the SQL Query API."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    server.daemon_threads = True
    service = MockService()
    server.mock_service = service
    service.url = f"http://127.0.0.1:{server.server_address[1]}/v2"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield service
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def test_config():
    """Test configuration with safe defaults: no jitter, tiny backoff."""
    return SqlQueryConfig(
        http_retries=2,
        http_backoff=0.01,
        http_max_backoff=0.05,
        http_timeout=5,
        http_jitter=False,
    )


@pytest.fixture
def sample_instance_crn():
    return SAMPLE_INSTANCE_CRN


@pytest.fixture
def service_client(mock_service, test_config):
    """Client pointed at ``mock_service`` with no authentication."""
    client = SqlQueryClient(
        SAMPLE_INSTANCE_CRN,
        NoAuthAuthenticator(),
        service_url=mock_service.url,
        config=test_config,
    )
    yield client
    client.close()


@pytest.fixture
def dummy_credential():
    """Token credential returning a fixed token valid for one hour."""

    class DummyCredential:
        def __init__(self):
            self.calls = 0

        def get_token(self, *scopes, **kwargs):
            self.calls += 1
            return AccessToken(f"test_token_{self.calls}", int(time.time()) + 3600)

    return DummyCredential()

