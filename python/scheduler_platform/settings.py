"""Environment-driven configuration for the proxy server and the UI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env file
_env_path = Path(__file__).parent.parent / ".env"
load_dotenv(_env_path)


PLATFORM_NAME = "Interview Scheduler"

# Ceiling shared by the proxy endpoint and the scheduling view's own abort.
DEFAULT_TIMEOUT_SECONDS = 180.0

DEFAULT_PROXY_URL = "http://127.0.0.1:8000"
PROXY_PATH = "/api/proxy-to-n8n"

DEFAULT_CORS_ORIGINS: tuple[str, ...] = (
    "http://localhost:8501",  # Streamlit default
    "http://localhost:3000",
)


@dataclass(frozen=True)
class ProxySettings:
    """Runtime config for the bounded proxy endpoint."""

    schedule_event_url: str
    timeout_seconds: float
    host: str
    port: int
    cors_origins: tuple[str, ...]


@dataclass(frozen=True)
class WebhookEndpoints:
    """Outbound n8n webhooks called directly from the UI."""

    candidates_url: str
    interviewers_url: str
    events_url: str
    simulate_url: str


@dataclass(frozen=True)
class UiSettings:
    """Runtime config for the Streamlit views."""

    endpoints: WebhookEndpoints
    proxy_url: str
    timeout_seconds: float

    @property
    def proxy_endpoint(self) -> str:
        return f"{self.proxy_url.rstrip('/')}{PROXY_PATH}"


def require_env(name: str) -> str:
    """Read a required variable. Webhook URLs have no defaults."""
    value = (os.environ.get(name) or "").strip()
    if not value:
        raise RuntimeError(f"{name} is required. Set it in the environment or .env file.")
    return value


def resolve_timeout_seconds() -> float:
    """Resolve UPSTREAM_TIMEOUT_SECONDS, falling back to the 3 minute ceiling."""
    raw = (os.environ.get("UPSTREAM_TIMEOUT_SECONDS") or "").strip()
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS

    try:
        timeout = float(raw)
    except ValueError as exc:
        raise RuntimeError(
            f"UPSTREAM_TIMEOUT_SECONDS must be a number. Got: {raw}"
        ) from exc

    if timeout <= 0:
        raise RuntimeError(f"UPSTREAM_TIMEOUT_SECONDS must be positive. Got: {timeout}.")
    return timeout


def describe_timeout(seconds: float) -> str:
    """Render a timeout for user-facing messages, e.g. ``3 minutes``."""
    if seconds >= 60 and seconds % 60 == 0:
        minutes = int(seconds // 60)
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    if float(seconds).is_integer():
        return f"{int(seconds)} seconds"
    return f"{seconds:g} seconds"


def load_proxy_settings() -> ProxySettings:
    """Load proxy config from environment with strict validation."""
    schedule_event_url = require_env("N8N_SCHEDULE_EVENT_URL")

    host = (os.environ.get("PROXY_HOST", "0.0.0.0") or "").strip()
    if not host:
        raise RuntimeError("PROXY_HOST resolved to empty value.")

    port_raw = (os.environ.get("PROXY_PORT", "8000") or "").strip()
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise RuntimeError(f"PROXY_PORT must be an integer. Got: {port_raw}") from exc

    if port < 1 or port > 65535:
        raise RuntimeError(f"PROXY_PORT must be in range 1-65535. Got: {port}.")

    origins_raw = os.environ.get("CORS_ORIGINS")
    if origins_raw:
        cors_origins = tuple(
            origin.strip() for origin in origins_raw.split(",") if origin.strip()
        )
    else:
        cors_origins = DEFAULT_CORS_ORIGINS

    return ProxySettings(
        schedule_event_url=schedule_event_url,
        timeout_seconds=resolve_timeout_seconds(),
        host=host,
        port=port,
        cors_origins=cors_origins,
    )


def load_ui_settings() -> UiSettings:
    """Load UI config. All four n8n webhooks must be configured."""
    endpoints = WebhookEndpoints(
        candidates_url=require_env("N8N_GET_CANDIDATES_URL"),
        interviewers_url=require_env("N8N_GET_INTERVIEWERS_URL"),
        events_url=require_env("N8N_GET_EVENTS_URL"),
        simulate_url=require_env("N8N_SIMULATE_AI_URL"),
    )

    proxy_url = (os.environ.get("PROXY_URL", DEFAULT_PROXY_URL) or "").strip()
    if not proxy_url:
        raise RuntimeError("PROXY_URL resolved to empty value.")

    return UiSettings(
        endpoints=endpoints,
        proxy_url=proxy_url,
        timeout_seconds=resolve_timeout_seconds(),
    )
