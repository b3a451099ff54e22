import os

# Must be set before the application modules read their settings
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["TRACING_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import asyncio
import json
from urllib.parse import parse_qs

import httpx
import pytest

from shared.clients.upstream import ApiClient
from shared.security import ActorRole, Session, create_session_token

BACKEND_URL = "http://backend.test/api"


def make_order(**overrides) -> dict:
    order = {
        "id": "abc12345def",
        "fullName": "Nimali Perera",
        "address": "12 Temple Road, Kandy",
        "mobile": "0771234567",
        "product": "herbal-cream",
        "quantity": 2,
        "status": "received",
        "createdAt": "2024-05-01T09:30:00.000Z",
    }
    order.update(overrides)
    return order


class FakeBackend:
    """Routes (method, path) to canned answers and records every request it sees."""

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.gates = {}

    def on(self, method: str, path: str, status: int = 200, body=None, handler=None):
        self.routes[(method, path)] = (status, body, handler)
        return self

    def gate(self, key) -> asyncio.Event:
        """Hold answers for `key` (see `gate_key`) until the returned event is set."""
        event = asyncio.Event()
        self.gates[key] = event
        return event

    @staticmethod
    def gate_key(request: httpx.Request):
        params = parse_qs(request.url.query.decode())
        return (request.method, request.url.path, params.get("page", [None])[0])

    def calls(self, method: str, path: str) -> list:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        gate = self.gates.get(self.gate_key(request))
        if gate is not None:
            await gate.wait()
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        status, body, handler = route
        if handler is not None:
            return handler(request)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


def json_body(request: httpx.Request):
    return json.loads(request.content.decode()) if request.content else None


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend):
    return ApiClient(base_url=BACKEND_URL, token="upstream-token", transport=httpx.MockTransport(backend.handle))


@pytest.fixture
def admin_session():
    return Session(user_id="admin-1", role=ActorRole.ADMIN, upstream_token="upstream-token")


@pytest.fixture
def courier_session():
    return Session(user_id="courier-7", role=ActorRole.COURIER, upstream_token="upstream-token")


@pytest.fixture
def admin_headers(admin_session):
    return {"Authorization": f"Bearer {create_session_token(admin_session)}"}


@pytest.fixture
def courier_headers(courier_session):
    return {"Authorization": f"Bearer {create_session_token(courier_session)}"}
