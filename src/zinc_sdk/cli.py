"""
zinc - command-line access to the Zinc API

Examples:
    zinc details B00EXAMPLE --retailer amazon --max-age 3600
    zinc offers B00EXAMPLE --retailer walmart --newer-than 2024-01-01T00:00:00
    zinc info B00EXAMPLE
    zinc order order.json

Credentials come from ZINC_CLIENT_TOKEN (see zinc_sdk.config).
"""

from __future__ import annotations

import argparse
import datetime as dt
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from .client_base import ZincAPIError, ZincConfigError, ZincError
from .retailers import Retailer
from .schema import ProductOptions
from .zinc_api import ZincClient


logger = logging.getLogger("zinc_sdk.cli")


def setup_logging(log_level: str) -> None:
    root = logging.getLogger("zinc_sdk")
    root.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    root.handlers.clear()

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(fmt)
    root.addHandler(handler)


def _parse_timestamp(value: str) -> dt.datetime:
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(
            f"expected an ISO timestamp, got '{value}'"
        ) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zinc", description="Query products and place orders via the Zinc API."
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("details", "Fetch product details"),
        ("offers", "Fetch product offers"),
        ("info", "Fetch offers and details together"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("product_id")
        p.add_argument(
            "--retailer",
            default=Retailer.AMAZON.value,
            choices=[r.value for r in Retailer],
        )
        p.add_argument("--max-age", type=int, default=None)
        p.add_argument("--newer-than", type=_parse_timestamp, default=None)
        p.add_argument("--priority", type=int, default=None)
        p.add_argument("--timeout", type=float, default=None)

    order = sub.add_parser("order", help="Submit an order from a JSON file")
    order.add_argument("order_file", type=Path)

    return parser


def _options_from_args(
    args: argparse.Namespace, client: ZincClient
) -> ProductOptions:
    timeout = args.timeout
    if timeout is None:
        timeout = client.default_options.timeout
    return ProductOptions(
        max_age=args.max_age,
        newer_than=args.newer_than,
        priority=args.priority,
        timeout=timeout,
    )


def run(args: argparse.Namespace, client: ZincClient) -> Any:
    """Run one subcommand and return a JSON-serializable result."""
    if args.command == "order":
        order = json.loads(args.order_file.read_text(encoding="utf-8"))
        return client.send_order(order).model_dump(mode="json", by_alias=True)

    options = _options_from_args(args, client)
    logger.debug("Running %s for %s on %s", args.command, args.product_id, args.retailer)
    if args.command == "details":
        details = client.get_product_details(args.product_id, args.retailer, options)
        return details.model_dump(mode="json")
    if args.command == "offers":
        offers = client.get_product_offers(args.product_id, args.retailer, options)
        return offers.model_dump(mode="json")

    offers, details = client.get_product_info(args.product_id, args.retailer, options)
    return {
        "offers": offers.model_dump(mode="json"),
        "details": details.model_dump(mode="json"),
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        client = ZincClient.from_env()
        result = run(args, client)
    except ZincConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    except ZincAPIError as e:
        print(f"Zinc API error: {e}", file=sys.stderr)
        if e.variant_product_ids:
            print(
                "Try one of: " + ", ".join(e.variant_product_ids), file=sys.stderr
            )
        return 1
    except ZincError as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Invalid options: {e}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read order file: {e}", file=sys.stderr)
        return 1

    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
