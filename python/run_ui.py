#!/usr/bin/env python3
"""
Launch the Streamlit UI against a running proxy instance.
"""

from __future__ import annotations

import argparse
import os
import subprocess
from pathlib import Path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the Interview Scheduler Streamlit UI.",
    )
    parser.add_argument("--port", type=int, default=8501, help="Streamlit port.")
    parser.add_argument(
        "--proxy-url",
        default=None,
        help="Proxy base URL (e.g. http://127.0.0.1:8000). Default: PROXY_URL env.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Override UPSTREAM_TIMEOUT_SECONDS (default: 180).",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Streamlit bind host.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    env = os.environ.copy()
    if args.proxy_url:
        env["PROXY_URL"] = args.proxy_url
    if args.timeout is not None:
        env["UPSTREAM_TIMEOUT_SECONDS"] = str(args.timeout)

    cmd = [
        "streamlit",
        "run",
        "streamlit_ui.py",
        "--server.port",
        str(args.port),
        "--server.address",
        args.host,
    ]
    print(
        f"Starting Interview Scheduler UI bind=http://{args.host}:{args.port} "
        f"proxy={env.get('PROXY_URL', 'http://127.0.0.1:8000')}"
    )
    subprocess.run(cmd, check=True, cwd=Path(__file__).parent, env=env)


if __name__ == "__main__":
    main()
