"""Interview scheduler platform package: config, models and n8n webhooks."""

from scheduler_platform.errors import (
    InvalidPayloadError,
    MethodNotAllowedError,
    MissingSelectionError,
    SchedulerError,
    SchedulingValidationError,
    TransportError,
    UpstreamTimeoutError,
)
from scheduler_platform.models import (
    Event,
    EventTime,
    Person,
    ScheduleRequest,
    TranscriptLine,
)
from scheduler_platform.settings import (
    DEFAULT_TIMEOUT_SECONDS,
    PLATFORM_NAME,
    ProxySettings,
    UiSettings,
    WebhookEndpoints,
    load_proxy_settings,
    load_ui_settings,
)

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "PLATFORM_NAME",
    "Event",
    "EventTime",
    "InvalidPayloadError",
    "MethodNotAllowedError",
    "MissingSelectionError",
    "Person",
    "ProxySettings",
    "ScheduleRequest",
    "SchedulerError",
    "SchedulingValidationError",
    "TranscriptLine",
    "TransportError",
    "UiSettings",
    "UpstreamTimeoutError",
    "WebhookEndpoints",
    "load_proxy_settings",
    "load_ui_settings",
]
