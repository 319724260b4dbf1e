"""Webhook interfaces and shared types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class WebhookName(str, Enum):
    """Named n8n endpoints this service talks to."""

    SCHEDULE_EVENT = "schedule_event"
    GET_CANDIDATES = "get_candidates"
    GET_INTERVIEWERS = "get_interviewers"
    GET_EVENTS = "get_events"
    SIMULATE_AI = "simulate_ai"


@dataclass(frozen=True)
class WebhookDispatchResult:
    """Result of one best-effort, one-way webhook command."""

    webhook: WebhookName
    ok: bool
    detail: str | None = None


@dataclass(frozen=True)
class UpstreamReply:
    """Status code and decoded JSON body relayed from an upstream webhook."""

    status_code: int
    body: Any
