"""Client side of the bounded proxy endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from scheduler_platform.errors import TransportError, UpstreamTimeoutError
from scheduler_platform.models import ScheduleRequest
from scheduler_platform.settings import describe_timeout
from scheduler_platform.webhooks.base import UpstreamReply


logger = logging.getLogger(__name__)


class UnexpectedResponseError(TransportError):
    """Proxy answered, but not with JSON."""

    def __init__(self, message: str = "Unexpected response from the server.") -> None:
        super().__init__(message)


class ScheduleProxyClient:
    """
    POST bookings to ``/api/proxy-to-n8n``.

    Mirrors the server-side ceiling with its own abort so a hung upstream
    cannot block the user even if the proxy hop misbehaves.
    """

    def __init__(
        self,
        endpoint: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def schedule(self, request: ScheduleRequest) -> UpstreamReply:
        """
        Send one booking request.

        Raises:
            UpstreamTimeoutError: Local abort after ``timeout_seconds``.
            UnexpectedResponseError: Proxy body was not JSON.
            TransportError: Proxy unreachable.
        """
        payload: dict[str, Any] = request.model_dump(mode="json")
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(None), transport=self._transport
            ) as client:
                response = await asyncio.wait_for(
                    client.post(self.endpoint, json=payload),
                    timeout=self.timeout_seconds,
                )
        except asyncio.TimeoutError as exc:
            raise UpstreamTimeoutError(
                f"Request timed out after {describe_timeout(self.timeout_seconds)}."
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Scheduling request to %s failed: %s", self.endpoint, exc)
            raise TransportError("Unable to connect to the scheduling service.") from exc

        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.error("Proxy returned non-JSON body (HTTP %d)", response.status_code)
            raise UnexpectedResponseError() from exc

        return UpstreamReply(status_code=response.status_code, body=body)
