"""Client for the n8n webhooks the UI calls directly."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from scheduler_platform.models import Event, Person
from scheduler_platform.settings import WebhookEndpoints
from scheduler_platform.webhooks.base import WebhookDispatchResult, WebhookName


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate_item(
    model: type[ModelT], item: Any, webhook: WebhookName, index: int
) -> ModelT | None:
    try:
        return model.model_validate(item)
    except ValidationError as exc:
        logger.warning(
            "Skipping malformed %s item %d: %s",
            webhook.value,
            index,
            exc.errors(include_url=False),
        )
        return None


class WebhookGateway:
    """
    Issue outbound requests to the named n8n endpoints.

    The list endpoints are plain GETs with no auth. Reads are not bounded by a
    deadline: the proxy's ceiling is the only timeout in the system, so
    ``timeout_seconds`` defaults to ``None``.

    ``transport`` lets callers substitute an ``httpx`` transport, e.g.
    ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        endpoints: WebhookEndpoints,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoints = endpoints
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _url_for(self, webhook: WebhookName) -> str:
        urls = {
            WebhookName.GET_CANDIDATES: self.endpoints.candidates_url,
            WebhookName.GET_INTERVIEWERS: self.endpoints.interviewers_url,
            WebhookName.GET_EVENTS: self.endpoints.events_url,
            WebhookName.SIMULATE_AI: self.endpoints.simulate_url,
        }
        try:
            return urls[webhook]
        except KeyError as exc:
            raise ValueError(f"Webhook '{webhook.value}' is not called by the UI.") from exc

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_seconds),
            transport=self._transport,
        )

    async def get_json(self, webhook: WebhookName) -> Any:
        """GET a webhook and decode its JSON body. Raises on HTTP errors."""
        url = self._url_for(webhook)
        async with self._client() as client:
            response = await client.get(url)
        response.raise_for_status()
        return response.json()

    async def fetch_people(self, webhook: WebhookName) -> list[Person]:
        data = await self.get_json(webhook)
        if not isinstance(data, list):
            raise ValueError(
                f"Expected a list from '{webhook.value}', got {type(data).__name__}."
            )
        people = []
        for index, item in enumerate(data):
            person = _validate_item(Person, item, webhook, index)
            if person is None:
                continue
            if not person.email:
                logger.warning("Skipping %s item %d: missing email", webhook.value, index)
                continue
            people.append(person)
        return people

    async def fetch_candidates(self) -> list[Person]:
        return await self.fetch_people(WebhookName.GET_CANDIDATES)

    async def fetch_interviewers(self) -> list[Person]:
        return await self.fetch_people(WebhookName.GET_INTERVIEWERS)

    async def fetch_events(self) -> list[Event]:
        """
        Fetch interview events. A single JSON object is treated as one event.

        Records that cannot be read at all are logged and skipped so one bad
        record does not hide the rest.
        """
        webhook = WebhookName.GET_EVENTS
        data = await self.get_json(webhook)
        items = data if isinstance(data, list) else [data]
        events = []
        for index, item in enumerate(items):
            event = _validate_item(Event, item, webhook, index)
            if event is not None:
                events.append(event)
        return events

    async def trigger_simulation(self, event_id: str) -> WebhookDispatchResult:
        """
        Ask n8n to start AI processing for ``event_id``.

        Best-effort one-way command: the response body is ignored and no
        delivery guarantee is made. Never raises; failures are logged.
        """
        webhook = WebhookName.SIMULATE_AI
        try:
            async with self._client() as client:
                response = await client.post(
                    self._url_for(webhook),
                    json={"eventID": event_id},
                )
            if response.status_code >= 400:
                detail = f"HTTP {response.status_code}: {response.text[:160]}"
                logger.warning("Simulation trigger failed for %s: %s", event_id, detail)
                return WebhookDispatchResult(webhook=webhook, ok=False, detail=detail)
            return WebhookDispatchResult(webhook=webhook, ok=True)
        except Exception as exc:  # noqa: BLE001 - one-way command must never throw
            logger.warning("Simulation trigger failed for %s: %s", event_id, exc)
            return WebhookDispatchResult(webhook=webhook, ok=False, detail=str(exc))
