"""
Interview Scheduler Proxy Service

Shields the browser from the n8n schedule webhook: accepts one booking request,
forwards it unmodified and enforces a hard wall-clock ceiling on the upstream.

Endpoints:
    POST /api/proxy-to-n8n - Forward booking to N8N_SCHEDULE_EVENT_URL
    GET  /health           - Health check

Internal binding: configured by PROXY_HOST/PROXY_PORT (default 0.0.0.0:8000)
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, AsyncIterator

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from scheduler_platform import PLATFORM_NAME, load_proxy_settings
from scheduler_platform.errors import (
    InvalidPayloadError,
    MethodNotAllowedError,
    SchedulerError,
)
from scheduler_platform.settings import PROXY_PATH
from scheduler_platform.webhooks import forward_json

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

SETTINGS = load_proxy_settings()
SERVICE_NAME = f"{PLATFORM_NAME} Proxy"
SERVICE_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = Field(default=False)
    error: str = Field(..., description="Error description")
    error_code: str | None = Field(default=None, description="Machine-readable error code")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: str = Field(..., description="Current server timestamp")
    timeout_seconds: float = Field(..., description="Upstream wall-clock ceiling")


# =============================================================================
# Application State
# =============================================================================


class ProxyState:
    """Per-process resources. Holds nothing request-specific."""

    def __init__(
        self,
        upstream_client: httpx.AsyncClient,
        upstream_url: str,
        timeout_seconds: float,
    ) -> None:
        self.upstream_client = upstream_client
        self.upstream_url = upstream_url
        self.timeout_seconds = timeout_seconds


def get_proxy_state(request: Request) -> ProxyState:
    """
    Dependency to retrieve the proxy resources created by the lifespan.

    Raises:
        RuntimeError: If the lifespan has not run.
    """
    state = getattr(request.app.state, "proxy", None)
    if state is None:
        raise RuntimeError("Application state not initialized")
    return state


ProxyStateDep = Annotated[ProxyState, Depends(get_proxy_state)]


# =============================================================================
# Exception Handlers
# =============================================================================


async def scheduler_error_handler(request: Request, exc: SchedulerError) -> JSONResponse:
    """Translate SchedulerError subclasses into the JSON error envelope."""
    headers = {"Allow": "POST"} if isinstance(exc, MethodNotAllowedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            ok=False,
            error=exc.message,
            error_code=exc.error_code,
        ).model_dump(),
        headers=headers,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap routing errors (404, 405) in the same JSON error envelope."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        not_allowed = MethodNotAllowedError()
        error, error_code = not_allowed.message, not_allowed.error_code
    else:
        error, error_code = str(exc.detail), "HTTP_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(ok=False, error=error, error_code=error_code).model_dump(),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            ok=False,
            error="Internal server error",
            error_code="INTERNAL_ERROR",
        ).model_dump(),
    )


# =============================================================================
# FastAPI App Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the pooled upstream client on startup and close it on shutdown."""
    logger.info("Starting %s", SERVICE_NAME)
    logger.info(
        "Upstream: %s (timeout %.1fs)",
        SETTINGS.schedule_event_url,
        SETTINGS.timeout_seconds,
    )

    # Deadline is enforced by forward_json; the client itself never times out.
    upstream_client = httpx.AsyncClient(timeout=httpx.Timeout(None))
    app.state.proxy = ProxyState(
        upstream_client=upstream_client,
        upstream_url=SETTINGS.schedule_event_url,
        timeout_seconds=SETTINGS.timeout_seconds,
    )

    yield

    logger.info("Shutting down...")
    await upstream_client.aclose()


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title=SERVICE_NAME,
    version=SERVICE_VERSION,
    description="Forwards interview bookings to the n8n schedule webhook with a bounded timeout",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
    max_age=3600,
)

app.add_exception_handler(SchedulerError, scheduler_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


# =============================================================================
# Proxy Endpoint
# =============================================================================


@app.post(PROXY_PATH)
async def proxy_to_n8n(request: Request, state: ProxyStateDep) -> JSONResponse:
    """
    Forward the booking body to the n8n schedule webhook.

    Relays the upstream status and JSON body. Responds 504 when the ceiling
    expires and 500 on any other forwarding failure.
    """
    body = await request.body()
    try:
        json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidPayloadError() from exc

    reply = await forward_json(
        state.upstream_client,
        state.upstream_url,
        body,
        state.timeout_seconds,
    )
    logger.info("Relayed upstream response: HTTP %d", reply.status_code)
    return JSONResponse(status_code=reply.status_code, content=reply.body)


@app.api_route(
    PROXY_PATH,
    methods=["GET", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def proxy_method_not_allowed(request: Request) -> JSONResponse:
    """Reject every method except POST before any upstream call."""
    logger.warning("Rejected %s %s", request.method, PROXY_PATH)
    raise MethodNotAllowedError()


@app.get("/health", response_model=HealthResponse)
async def health(state: ProxyStateDep) -> HealthResponse:
    """Return service health."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        timeout_seconds=state.timeout_seconds,
    )


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    logger.info("=" * 60)
    logger.info(SERVICE_NAME)
    logger.info("=" * 60)
    logger.info("Binding to: http://%s:%d", SETTINGS.host, SETTINGS.port)
    logger.info("")
    logger.info("Endpoints:")
    logger.info("  POST %s - Forward booking to n8n", PROXY_PATH)
    logger.info("  GET  /health           - Health check")
    logger.info("=" * 60)

    uvicorn.run(
        app,
        host=SETTINGS.host,
        port=SETTINGS.port,
        log_level="info",
    )
