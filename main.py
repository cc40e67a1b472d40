"""CLI entrypoint: fetch one ranked feed or serve the HTTP API."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from config import get_general_settings
from feed.service import fetch_feed
from utils.exceptions import ConfigurationError, FetchError
from utils.logger import setup_logger


def main() -> None:
    parser = argparse.ArgumentParser(description="Topic news feed CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch")
    fetch.add_argument("--topic", required=True)
    fetch.add_argument("--pretty", action="store_true")

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")

    args = parser.parse_args()
    setup_logger(level=get_general_settings().log_level)

    if args.command == "fetch":
        try:
            feed = asyncio.run(fetch_feed(args.topic))
        except (ConfigurationError, FetchError, ValueError) as exc:
            print(json.dumps({"ok": False, "error": str(exc)}, ensure_ascii=False))
            sys.exit(1)
        print(json.dumps(feed.to_wire(), ensure_ascii=False, indent=2 if args.pretty else None))
        return

    if args.command == "serve":
        import uvicorn

        uvicorn.run("webapp.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
