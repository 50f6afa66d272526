from __future__ import annotations

import argparse
from typing import Optional

import uvicorn

from .app import create_app

APP_FACTORY = "bfcc.webui.app:create_app"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the bfcc HTTP API")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (default: info)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when sources change (development only)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    options = {"host": args.host, "port": args.port, "log_level": args.log_level}
    # uvicorn can only reload an app it imports itself.
    if args.reload:
        uvicorn.run(APP_FACTORY, factory=True, reload=True, **options)
    else:
        uvicorn.run(create_app(), **options)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
