"""Outbound n8n webhook package."""

from scheduler_platform.webhooks.base import UpstreamReply, WebhookDispatchResult, WebhookName
from scheduler_platform.webhooks.forwarder import forward_json
from scheduler_platform.webhooks.gateway import WebhookGateway

__all__ = [
    "UpstreamReply",
    "WebhookDispatchResult",
    "WebhookGateway",
    "WebhookName",
    "forward_json",
]
