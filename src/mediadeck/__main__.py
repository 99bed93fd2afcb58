"""Command line entrypoint for running the FastAPI application with uvicorn."""

from __future__ import annotations

import argparse
from typing import Sequence

import uvicorn

from mediadeck.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Run the mediadeck API with uvicorn")
    parser.add_argument(
        "--host",
        default=settings.host,
        help="Hostname or IP address to bind (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="TCP port to listen on (default: %(default)s)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload; useful during local development.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    uvicorn.run(
        "mediadeck.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=get_settings().log_level.lower(),
    )


if __name__ == "__main__":
    main()
