"""Shared fixtures: a clean configuration and a stubbed upstream backend."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from chatfront.config import get_config
from chatfront.upstream.client import UpstreamClient, get_upstream_client

UPSTREAM_URL = "http://upstream.test"
CSRF_TOKEN = "csrf-token-1"

CONFIG_VARS = (
    "UPSTREAM_BASE_URL",
    "UPSTREAM_TIMEOUT_SECONDS",
    "SESSION_MAX_AGE_SECONDS",
    "COOKIE_SECURE",
    "APP_ENV",
    "LOG_LEVEL",
    "APP_URL",
)


class FakeUpstream:
    """Stand-in for the upstream backend, served through httpx.MockTransport.

    ``/csrf`` always answers with a token unless told otherwise. Other routes
    are registered with ``on``; unregistered routes answer 404.
    """

    def __init__(self):
        self.csrf_status = 200
        self.csrf_body = {"csrfToken": CSRF_TOKEN}
        self.routes = {}
        self.unreachable = set()
        self.requests = []

    def on(self, method, path, status=200, json=None, text=None, headers=None):
        self.routes[(method, path)] = (status, json, text, headers)

    def fail_connect(self, method, path):
        self.unreachable.add((method, path))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        if request.url.path == "/csrf":
            return httpx.Response(self.csrf_status, json=self.csrf_body)

        if key not in self.routes:
            return httpx.Response(404, text="Not Found")

        status, json_body, text, headers = self.routes[key]
        if json_body is not None:
            return httpx.Response(status, json=json_body, headers=headers)
        return httpx.Response(status, text=text or "", headers=headers)

    def calls(self):
        return [(r.method, r.url.path) for r in self.requests]

    def last(self, method, path) -> httpx.Request:
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return request
        raise AssertionError(f"No upstream {method} {path} request was made")

    def body(self, method, path):
        return json.loads(self.last(method, path).content)

    def client(self) -> UpstreamClient:
        return UpstreamClient(base_url=UPSTREAM_URL, transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Give every test the default configuration pointed at the fake upstream."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("UPSTREAM_BASE_URL", UPSTREAM_URL)
    monkeypatch.setenv("APP_ENV", "test")
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def client(upstream):
    """Test client for the app with the upstream client replaced by the fake."""
    from chatfront.main import app

    app.dependency_overrides[get_upstream_client] = upstream.client
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in(client, upstream):
    """Test client whose local session holds a signed-in principal."""
    upstream.on(
        "POST",
        "/login/chat",
        json={},
        headers=[("set-cookie", "SESSION=upstream-abc; Path=/; HttpOnly")],
    )
    response = client.post(
        "/login",
        data={"username": "alice", "password": "Secret1!"},
        follow_redirects=False,
    )
    assert response.status_code == 302
    upstream.requests.clear()
    return client
