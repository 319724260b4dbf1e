#!/usr/bin/env python3
"""
Launch the proxy service with CLI overrides for bind address and upstream.
"""

from __future__ import annotations

import argparse
import os

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the Interview Scheduler proxy to the n8n schedule webhook.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Proxy bind host.")
    parser.add_argument("--port", type=int, default=8000, help="Proxy bind port.")
    parser.add_argument(
        "--schedule-url",
        default=None,
        help="Override N8N_SCHEDULE_EVENT_URL (required unless set in env).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Override UPSTREAM_TIMEOUT_SECONDS (default: 180).",
    )
    parser.add_argument("--log-level", default="info", help="Uvicorn log level.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    os.environ["PROXY_HOST"] = args.host
    os.environ["PROXY_PORT"] = str(args.port)
    if args.schedule_url:
        os.environ["N8N_SCHEDULE_EVENT_URL"] = args.schedule_url
    if args.timeout is not None:
        os.environ["UPSTREAM_TIMEOUT_SECONDS"] = str(args.timeout)

    from proxy_server import SETTINGS, app  # Import after env config

    print(
        f"Starting Interview Scheduler proxy bind=http://{args.host}:{args.port} "
        f"upstream={SETTINGS.schedule_event_url} timeout={SETTINGS.timeout_seconds:g}s"
    )
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
