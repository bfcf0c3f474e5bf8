"""Pytest shared fixtures."""
import json
import pathlib
import sys
from typing import Optional
from urllib.parse import urlparse

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from identity_admin.config import AppConfig
from identity_admin.flask_app import create_app

ADMIN_PASSWORD = "correct-horse-battery"
JWT_SECRET = "test-signing-secret-0123456789abcdef"
KRATOS_ADMIN_URL = "http://kratos-admin.test"
KRATOS_PUBLIC_URL = "http://kratos-public.test"


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code: int = 200, url: str = "", text: Optional[str] = None):
        self._payload = payload
        self.status_code = status_code
        self.url = url
        self.text = text if text is not None else ("" if payload is None else json.dumps(payload))

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(response=self)


class KratosStub:
    """Route table for stubbed upstream calls.

    Register responses with ``stub.on("GET", "/admin/identities", payload)``;
    every call is recorded in ``stub.calls`` as (method, path, kwargs).
    Unregistered calls fail the test.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method: str, path: str, payload=None, status_code: int = 200, text: Optional[str] = None):
        self.routes[(method, path)] = (payload, status_code, text)

    def fail(self, method: str, path: str, exc: Exception):
        self.routes[(method, path)] = exc

    def calls_to(self, method: str, path: str):
        return [c for c in self.calls if c[0] == method and c[1] == path]

    def _handler(self, method: str):
        def _call(url, *args, **kwargs):
            path = urlparse(url).path
            self.calls.append((method, path, kwargs))
            route = self.routes.get((method, path))
            if route is None:
                raise RuntimeError(f"Unexpected HTTP {method} in test: {url}")
            if isinstance(route, Exception):
                raise route
            payload, status_code, text = route
            return StubResponse(payload, status_code, url=url, text=text)
        return _call


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def kratos(monkeypatch):
    """Replace requests' HTTP verbs so no test reaches a live Kratos."""
    stub = KratosStub()
    for verb in ("get", "post", "put", "delete"):
        monkeypatch.setattr(requests, verb, stub._handler(verb.upper()))
    return stub


# ─────────────────────────────────────────────────────────────────────────────
# Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def app_config():
    return AppConfig(
        admin_password=ADMIN_PASSWORD,
        jwt_secret=JWT_SECRET,
        kratos_admin_url=KRATOS_ADMIN_URL,
        kratos_public_url=KRATOS_PUBLIC_URL,
        cors_origins=("http://localhost:5173",),
    )


@pytest.fixture()
def app(app_config):
    flask_app = create_app(app_config)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def auth_headers(app):
    """Authorization header carrying a freshly issued admin token."""
    issued = app.extensions["token_service"].issue(ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {issued.token}"}


def make_identity(identity_id: str, state: str = "active", **traits) -> dict:
    return {
        "id": identity_id,
        "schema_id": "default",
        "state": state,
        "traits": traits or {"email": f"{identity_id}@example.com"},
    }
