"""
Mock data generators for Interview Scheduler testing.

Builds realistic n8n payloads (people, events, transcripts) and an
``httpx.MockTransport``-backed fake of the n8n webhooks that records calls.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from scheduler_platform.settings import WebhookEndpoints


CANDIDATES_URL = "https://n8n.test/webhook/get-candidates"
INTERVIEWERS_URL = "https://n8n.test/webhook/get-interviewers"
EVENTS_URL = "https://n8n.test/webhook/get-events"
SIMULATE_URL = "https://n8n.test/webhook/simulate-ai"
SCHEDULE_URL = "https://n8n.test/webhook/schedule-event"
PROXY_ENDPOINT = "http://proxy.test/api/proxy-to-n8n"


# =============================================================================
# Payloads
# =============================================================================

CANDIDATES: list[dict[str, str]] = [
    {"name": "Charlie Adams", "email": "charlie@example.com"},
    {"name": "Dana Lee", "email": "dana@example.com"},
    {"name": "Evan Moss", "email": "evan@example.com"},
]

INTERVIEWERS: list[dict[str, str]] = [
    {"name": "Jane Doe", "email": "jane@example.com"},
    {"name": "Mark Smith", "email": "mark@example.com"},
    {"name": "Priya Raman", "email": "priya@example.com"},
]

TRANSCRIPTION: list[dict[str, str]] = [
    {
        "speaker": "Jane Doe",
        "timestamp": "00:05",
        "message": "Hello Charlie, can you introduce yourself?",
    },
    {
        "speaker": "Charlie Adams",
        "timestamp": "00:10",
        "message": "Sure, I'm a React developer with 5 years of experience.",
    },
    {
        "speaker": "Mark Smith",
        "timestamp": "01:42",
        "message": "How do you approach state management in large apps?",
    },
]


def generate_event_dict(
    event_id: str = "mock-event-id",
    record_id: str | None = "mock123",
    transcription: list[dict[str, str]] | None = None,
    start: str = "2025-05-06T22:00:00+03:00",
    end: str = "2025-05-06T22:30:00+03:00",
    **overrides: Any,
) -> dict[str, Any]:
    """Build an n8n event record as returned by the get-events webhook."""
    event: dict[str, Any] = {
        "eventID": event_id,
        "description": "Interview with Charlie Adams",
        "summary": "Charlie is a great candidate with React experience.",
        "conclusion": "Highly recommended for next round.",
        "startDateTime": {"dateTime": start, "timeZone": "America/Chicago"},
        "endDateTime": {"dateTime": end, "timeZone": "America/Chicago"},
        "candidate": CANDIDATES[0],
        "interviewers": INTERVIEWERS[:2],
    }
    if record_id is not None:
        event["_id"] = record_id
    if transcription is not None:
        event["transcription"] = transcription
    event.update(overrides)
    return event


# =============================================================================
# Fake n8n
# =============================================================================

Responder = Callable[[httpx.Request], Any]


@dataclass
class FakeN8n:
    """
    Route table of URL -> response for ``httpx.MockTransport``.

    A responder may return an ``httpx.Response``, a coroutine producing one,
    or raise (e.g. ``httpx.ConnectError``) to simulate transport failures.
    """

    routes: dict[str, Responder] = field(default_factory=dict)
    calls: list[httpx.Request] = field(default_factory=list)

    def json(self, url: str, payload: Any, status_code: int = 200) -> "FakeN8n":
        self.routes[url] = lambda request: httpx.Response(status_code, json=payload)
        return self

    def text(self, url: str, body: str, status_code: int = 200) -> "FakeN8n":
        self.routes[url] = lambda request: httpx.Response(status_code, text=body)
        return self

    def fail(self, url: str) -> "FakeN8n":
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self.routes[url] = _raise
        return self

    def raises(self, url: str, exc: Exception) -> "FakeN8n":
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self.routes[url] = _raise
        return self

    def hang(self, url: str, seconds: float = 5.0) -> "FakeN8n":
        async def _slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(seconds)
            return httpx.Response(200, json={"eventID": "too-late"})

        self.routes[url] = _slow
        return self

    def calls_to(self, url: str) -> list[httpx.Request]:
        return [call for call in self.calls if str(call.url) == url]

    def json_bodies(self, url: str) -> list[Any]:
        return [json.loads(call.content) for call in self.calls_to(url)]

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        responder = self.routes.get(str(request.url))
        if responder is None:
            return httpx.Response(404, json={"message": "webhook not registered"})
        response = responder(request)
        if asyncio.iscoroutine(response):
            response = await response
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


def webhook_endpoints() -> WebhookEndpoints:
    return WebhookEndpoints(
        candidates_url=CANDIDATES_URL,
        interviewers_url=INTERVIEWERS_URL,
        events_url=EVENTS_URL,
        simulate_url=SIMULATE_URL,
    )
