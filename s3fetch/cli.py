"""Command line entry point.

Usage:
  s3fetch                      # fetch the configured object and print it
  s3fetch fetch
  s3fetch serve --host 0.0.0.0 # serve it over HTTP on $PORT

Configuration is read from the environment (and ``.env`` when present).
Any configuration or fetch failure exits with status 1.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from s3fetch.common.config import ConfigError, Settings, load_config, load_env_file
from s3fetch.common.logging import setup_logging
from s3fetch.services.errors import FetchError
from s3fetch.services.fetch_service import FetchService

logger = logging.getLogger("s3fetch.cli")


def run_fetch(settings: Settings) -> int:
    service = FetchService(settings)
    try:
        content = asyncio.run(service.fetch_object())
    except FetchError as exc:
        logger.error(
            "fetch_failed kind=%s message=%s",
            exc.kind.value,
            exc.message,
            extra={"extra": {"kind": exc.kind.value, "detail": exc.message}},
        )
        return 1
    print(content)
    return 0


def run_server(settings: Settings, *, host: str) -> int:
    import uvicorn

    from s3fetch.main import create_app

    uvicorn.run(create_app(settings), host=host, port=settings.port, log_config=None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3fetch", description="Fetch a configured S3 object as text"
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("fetch", help="Print the object content (default)")
    serve = subparsers.add_parser("serve", help="Serve the object over HTTP")
    serve.add_argument(
        "--host",
        default="0.0.0.0",
        help="Interface to bind (port comes from PORT, default 8080)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    load_env_file()
    try:
        settings = load_config()
    except ConfigError as exc:
        setup_logging()
        logger.error("config_error message=%s", exc, extra={"extra": {"detail": str(exc)}})
        return 1

    setup_logging(settings.log_format)
    if args.command == "serve":
        return run_server(settings, host=args.host)
    return run_fetch(settings)


if __name__ == "__main__":
    sys.exit(main())
