"""
Command line entry point for ad hoc Litmos queries.

Credentials are read from the Dynaconf settings (`config/.secrets.toml` or
`LITMOS_CLIENT__API_KEY` / `LITMOS_CLIENT__SOURCE`).

    python -m litmos_client users --path Users User --search smith
"""

import argparse
import asyncio
import json
import logging
import sys

from .application.exceptions import LitmosError
from .client import Litmos
from .settings import settings

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Litmos API query tool")

    parser.add_argument(
        "endpoint",
        help="Endpoint relative to the base URL, e.g. users or teams/abc/users",
    )

    parser.add_argument(
        "--method",
        default="GET",
        choices=["GET", "POST", "PUT", "DELETE"],
        help="HTTP method. Default: GET",
    )

    parser.add_argument(
        "--path",
        nargs="*",
        default=[],
        help="Keys leading to the records in the response, e.g. Users User",
    )

    parser.add_argument(
        "--body",
        help="Request body as a JSON object or raw XML string",
    )

    parser.add_argument("--search", help="Free-text search term")

    parser.add_argument(
        "--limit",
        type=int,
        help="Fetch a single page of this size instead of every page",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log outgoing requests, retries and rate limit waits.",
    )

    return parser


async def run_application(args: argparse.Namespace):
    """Runs one query and prints the decoded records as JSON."""

    setup_logging(level="INFO" if args.verbose else settings.get("logging.level", "WARNING"))

    params = {}
    if args.search:
        params["search"] = args.search
    if args.limit:
        params["limit"] = args.limit

    try:
        async with Litmos(verbose=args.verbose) as litmos:
            records = await litmos.api(
                args.endpoint, args.method, args.body, args.path, params
            )
    except LitmosError as e:
        logger.error(f"A Litmos client error occurred: {e}")
        sys.exit(1)

    json.dump(records, sys.stdout, indent=2)
    sys.stdout.write("\n")
    logger.info(f"Fetched {len(records)} records in {litmos.request_count} requests.")


if __name__ == "__main__":
    cli_args = build_parser().parse_args()

    asyncio.run(run_application(cli_args))
