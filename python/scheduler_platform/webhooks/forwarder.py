"""Timeout-bounded JSON forwarding used by the proxy endpoint."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx

from scheduler_platform.errors import TransportError, UpstreamTimeoutError
from scheduler_platform.settings import describe_timeout
from scheduler_platform.webhooks.base import UpstreamReply


logger = logging.getLogger(__name__)


async def forward_json(
    client: httpx.AsyncClient,
    url: str,
    body: bytes,
    timeout_seconds: float,
) -> UpstreamReply:
    """
    POST ``body`` unmodified to ``url`` and decode the JSON reply.

    The call races a wall-clock deadline of ``timeout_seconds``; on expiry the
    in-flight request is cancelled.

    Raises:
        UpstreamTimeoutError: The deadline expired first.
        TransportError: Connection failure or a non-JSON upstream body.
    """
    try:
        response = await asyncio.wait_for(
            client.post(
                url,
                content=body,
                headers={"Content-Type": "application/json"},
            ),
            timeout=timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        logger.error("Upstream %s exceeded %.1fs deadline", url, timeout_seconds)
        raise UpstreamTimeoutError(
            f"Upstream request timed out after {describe_timeout(timeout_seconds)}."
        ) from exc
    except httpx.HTTPError as exc:
        logger.error("Proxy error forwarding to %s: %s", url, exc)
        raise TransportError() from exc

    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error(
            "Upstream %s returned non-JSON body (HTTP %d): %s",
            url,
            response.status_code,
            response.text[:160],
        )
        raise TransportError() from exc

    return UpstreamReply(status_code=response.status_code, body=data)
