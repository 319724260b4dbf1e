"""
FastAPI endpoint tests for the bounded proxy endpoint.

Drives the app through httpx AsyncClient with lifespan management via
asgi-lifespan; the n8n schedule webhook is faked with httpx.MockTransport.
"""

from __future__ import annotations

import json
import os
from typing import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from tests.mock_data import CANDIDATES, INTERVIEWERS, SCHEDULE_URL, FakeN8n


os.environ.setdefault("N8N_SCHEDULE_EVENT_URL", SCHEDULE_URL)

PROXY_PATH = "/api/proxy-to-n8n"

BOOKING = {
    "candidate": CANDIDATES[0],
    "interviewers": INTERVIEWERS[:2],
    "datetime": "2025-05-06T22:00:00+03:00",
}


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def n8n() -> FakeN8n:
    return FakeN8n()


@pytest_asyncio.fixture
async def client(n8n: FakeN8n) -> AsyncIterator[AsyncClient]:
    """
    Create async test client with the upstream client swapped for a fake.

    LifespanManager runs the app lifespan so ``app.state.proxy`` exists.
    """
    from proxy_server import app

    async with LifespanManager(app) as manager:
        state = app.state.proxy
        original_client = state.upstream_client
        original_url = state.upstream_url
        original_timeout = state.timeout_seconds

        state.upstream_client = httpx.AsyncClient(transport=n8n.transport)
        state.upstream_url = SCHEDULE_URL
        transport = ASGITransport(app=manager.app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

        await state.upstream_client.aclose()
        state.upstream_client = original_client
        state.upstream_url = original_url
        state.timeout_seconds = original_timeout


def set_timeout(seconds: float) -> None:
    from proxy_server import app

    app.state.proxy.timeout_seconds = seconds


# =============================================================================
# Forwarding Tests
# =============================================================================


class TestProxyForwarding:
    """Tests for POST /api/proxy-to-n8n on the happy path."""

    @pytest.mark.asyncio
    async def test_relays_upstream_event_id(self, client: AsyncClient, n8n: FakeN8n) -> None:
        """Upstream eventID is relayed with the upstream status code."""
        n8n.json(SCHEDULE_URL, {"eventID": "evt_123"})

        response = await client.post(PROXY_PATH, json=BOOKING)

        assert response.status_code == 200
        assert response.json() == {"eventID": "evt_123"}

    @pytest.mark.asyncio
    async def test_forwards_body_unmodified(self, client: AsyncClient, n8n: FakeN8n) -> None:
        """Body reaches n8n byte-for-byte with a JSON content type."""
        n8n.json(SCHEDULE_URL, {"eventID": "evt_123"})
        raw = json.dumps(BOOKING, separators=(",", ":")).encode()

        await client.post(
            PROXY_PATH,
            content=raw,
            headers={"Content-Type": "application/json"},
        )

        calls = n8n.calls_to(SCHEDULE_URL)
        assert len(calls) == 1
        assert calls[0].method == "POST"
        assert calls[0].content == raw
        assert calls[0].headers["content-type"] == "application/json"

    @pytest.mark.asyncio
    async def test_relays_upstream_error_status(self, client: AsyncClient, n8n: FakeN8n) -> None:
        """Upstream application errors keep their exact status and body."""
        n8n.json(SCHEDULE_URL, {"error": "Calendar slot unavailable"}, status_code=409)

        response = await client.post(PROXY_PATH, json=BOOKING)

        assert response.status_code == 409
        assert response.json() == {"error": "Calendar slot unavailable"}

    @pytest.mark.asyncio
    async def test_relays_json_without_known_keys(
        self, client: AsyncClient, n8n: FakeN8n
    ) -> None:
        """Shape of the upstream body is the caller's concern, not the proxy's."""
        n8n.json(SCHEDULE_URL, {"status": "queued"}, status_code=202)

        response = await client.post(PROXY_PATH, json=BOOKING)

        assert response.status_code == 202
        assert response.json() == {"status": "queued"}


# =============================================================================
# Failure Tests
# =============================================================================


class TestProxyFailures:
    """Timeout and transport failure translation."""

    @pytest.mark.asyncio
    async def test_timeout_returns_504(self, client: AsyncClient, n8n: FakeN8n) -> None:
        """Deadline expiry is reported as a gateway timeout, not a generic error."""
        set_timeout(0.05)
        n8n.hang(SCHEDULE_URL, seconds=5.0)

        response = await client.post(PROXY_PATH, json=BOOKING)

        assert response.status_code == 504
        data = response.json()
        assert data["error_code"] == "UPSTREAM_TIMEOUT"
        assert "timed out" in data["error"]

    @pytest.mark.asyncio
    async def test_connection_failure_returns_500(
        self, client: AsyncClient, n8n: FakeN8n
    ) -> None:
        """Unreachable upstream yields the generic forwarding failure."""
        n8n.fail(SCHEDULE_URL)

        response = await client.post(PROXY_PATH, json=BOOKING)

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Failed to forward to n8n webhook."
        assert data["error_code"] == "FORWARDING_FAILED"

    @pytest.mark.asyncio
    async def test_non_json_upstream_returns_500(
        self, client: AsyncClient, n8n: FakeN8n
    ) -> None:
        """A non-JSON upstream body is a forwarding failure, not a crash."""
        n8n.text(SCHEDULE_URL, "<html>Bad Gateway</html>", status_code=200)

        response = await client.post(PROXY_PATH, json=BOOKING)

        assert response.status_code == 500
        assert response.json()["error_code"] == "FORWARDING_FAILED"

    @pytest.mark.asyncio
    async def test_timeout_and_failure_are_distinguishable(
        self, client: AsyncClient, n8n: FakeN8n
    ) -> None:
        """Callers can tell a timeout from an ordinary failure."""
        set_timeout(0.05)
        n8n.hang(SCHEDULE_URL)
        timed_out = await client.post(PROXY_PATH, json=BOOKING)

        n8n.fail(SCHEDULE_URL)
        failed = await client.post(PROXY_PATH, json=BOOKING)

        assert timed_out.status_code != failed.status_code
        assert timed_out.json()["error"] != failed.json()["error"]


# =============================================================================
# Validation Tests
# =============================================================================


class TestProxyValidation:
    """Requests rejected before any upstream call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method", ["GET", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]
    )
    async def test_non_post_is_method_not_allowed(
        self, client: AsyncClient, n8n: FakeN8n, method: str
    ) -> None:
        """Non-POST methods get 405 and never reach n8n."""
        n8n.json(SCHEDULE_URL, {"eventID": "evt_123"})

        response = await client.request(method, PROXY_PATH)

        assert response.status_code == 405
        assert response.json()["error"] == "Method not allowed"
        assert response.headers["allow"] == "POST"
        assert n8n.calls == []

    @pytest.mark.asyncio
    async def test_unknown_path_uses_error_envelope(self, client: AsyncClient) -> None:
        response = await client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {
            "ok": False,
            "error": "Not Found",
            "error_code": "HTTP_ERROR",
        }

    @pytest.mark.asyncio
    async def test_invalid_json_body_rejected(self, client: AsyncClient, n8n: FakeN8n) -> None:
        """Malformed body returns 400 without forwarding."""
        response = await client.post(
            PROXY_PATH,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_PAYLOAD"
        assert n8n.calls == []


# =============================================================================
# Health Tests
# =============================================================================


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "Interview Scheduler Proxy"
        assert data["version"] == "1.0.0"
        assert data["timeout_seconds"] > 0
        assert "timestamp" in data
