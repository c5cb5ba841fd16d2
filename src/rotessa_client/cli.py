"""
Command-line interface for inspecting Rotessa data.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Iterable, Optional, Sequence, Tuple

from .api import create_rotessa_client
from .core.client import RotessaClient
from .core.config import load_client_config
from .core.errors import ConfigError, RotessaApiError, RotessaRequestError
from .core.transport import Transport
from .core.types import ReportStatusFilter, TransactionReportQuery


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rotessa",
        description="Query the Rotessa API and print the raw JSON response",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing ROTESSA_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    parser.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Per-request timeout in milliseconds (default: ROTESSA_TIMEOUT_MS or 15000)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    customers = commands.add_parser("customers", help="Customer lookups")
    customer_actions = customers.add_subparsers(dest="action", required=True)
    customer_actions.add_parser("list", help="List all customers")
    get_customer = customer_actions.add_parser("get", help="Show one customer by id")
    get_customer.add_argument("id", type=int)
    find_customer = customer_actions.add_parser(
        "find", help="Show one customer by custom identifier"
    )
    find_customer.add_argument("identifier")

    schedules = commands.add_parser("schedules", help="Transaction schedule operations")
    schedule_actions = schedules.add_subparsers(dest="action", required=True)
    get_schedule = schedule_actions.add_parser("get", help="Show one schedule by id")
    get_schedule.add_argument("id", type=int)
    delete_schedule = schedule_actions.add_parser("delete", help="Delete a schedule by id")
    delete_schedule.add_argument("id", type=int)

    report = commands.add_parser("report", help="List transaction report rows")
    report.add_argument("--start-date", required=True, help="YYYY-MM-DD")
    report.add_argument("--end-date", default=None, help="YYYY-MM-DD")
    report.add_argument(
        "--status",
        choices=[status.value for status in ReportStatusFilter],
        default=None,
    )
    report.add_argument("--page", type=int, default=None)
    return parser


async def _execute(client: RotessaClient, args: argparse.Namespace) -> Any:
    if args.command == "customers":
        if args.action == "list":
            return [item.raw for item in await client.customers.list()]
        if args.action == "get":
            return (await client.customers.get(args.id)).raw
        return (await client.customers.get_by_custom_identifier(args.identifier)).raw

    if args.command == "schedules":
        if args.action == "get":
            return (await client.transaction_schedules.get(args.id)).raw
        await client.transaction_schedules.delete(args.id)
        logging.info("Deleted transaction schedule %s", args.id)
        return None

    query = TransactionReportQuery(
        start_date=args.start_date,
        end_date=args.end_date,
        status=ReportStatusFilter(args.status) if args.status else None,
        page=args.page,
    )
    return [item.raw for item in await client.transaction_report.list(query)]


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    transport: Optional[Transport] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    overrides = _collect_overrides(args.set or ())

    try:
        config = load_client_config(
            env_file=args.env_file,
            overrides=overrides,
            timeout_ms=args.timeout_ms,
            transport=transport,
        )
    except (ConfigError, ValueError) as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    client = create_rotessa_client(config=config)

    try:
        result = asyncio.run(_execute(client, args))
    except RotessaApiError as exc:
        logging.error("Rotessa answered %s for %s %s: %s", exc.status, exc.method, exc.path, exc)
        return 1
    except RotessaRequestError as exc:
        logging.error("Request to %s %s failed: %s", exc.method, exc.path, exc)
        return 1

    if result is not None:
        json.dump(result, sys.stdout, indent=2, default=str)
        sys.stdout.write("\n")
    return 0


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
