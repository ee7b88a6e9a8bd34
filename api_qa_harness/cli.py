"""CLI entry point for seeding and cleaning the API under test."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from api_qa_harness.cleanup import ProductCleanupService, UserCleanupService
from api_qa_harness.clients.base import open_session
from api_qa_harness.clients.products import ProductClient
from api_qa_harness.clients.users import UserClient
from api_qa_harness.config import ApiConfig, ConfigError
from api_qa_harness.error_log import DEFAULT_ERROR_LOG, ErrorLog
from api_qa_harness.models.result import CleanupReport
from api_qa_harness.seeder import TestDataSeeder


def seed(config: ApiConfig, users: int, products: int) -> dict[str, Any]:
    """Seed users and products and return a summary."""
    with open_session(config) as session:
        seeder = TestDataSeeder(
            product_client=ProductClient.for_session(config, session),
            user_client=UserClient.for_session(config, session),
        )
        seeder.seed_all(users=users, products=products)

    return {
        "users": {"requested": users, "created": list(seeder.created_user_ids)},
        "products": {
            "requested": products,
            "created": list(seeder.created_product_ids),
        },
    }


def cleanup(
    config: ApiConfig,
    error_log_path: Path,
    *,
    products: bool = True,
    users: bool = True,
) -> dict[str, CleanupReport]:
    """Remove products and/or users and return a report per resource."""
    log = logging.getLogger("api_qa_harness")
    error_log = ErrorLog(path=error_log_path)
    reports: dict[str, CleanupReport] = {}

    with open_session(config) as session:
        if products:
            reports["products"] = ProductCleanupService(
                client=ProductClient.for_session(config, session),
                error_log=error_log,
            ).clean_up_all_products()
        if users:
            reports["users"] = UserCleanupService(
                client=UserClient.for_session(config, session),
                error_log=error_log,
            ).clean_up_all_users()

    if not reports:
        log.info("Nothing selected for cleanup")
    return reports


def format_cleanup_output(reports: dict[str, CleanupReport]) -> dict[str, Any]:
    """Format cleanup reports for JSON output."""
    return {
        resource: {
            "deleted": report.deleted,
            "failed": report.failed,
            "skipped": report.skipped,
        }
        for resource, report in reports.items()
    }


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with seed and cleanup subcommands."""
    parser = argparse.ArgumentParser(
        description="Seed and clean the product/user API used by the QA suites"
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="API base URL (default: $API_BASE_URL or http://localhost:31494)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed_parser = subparsers.add_parser("seed", help="Create generated records")
    seed_parser.add_argument("--users", type=int, default=5, help="Users to create")
    seed_parser.add_argument(
        "--products", type=int, default=10, help="Products to create"
    )

    cleanup_parser = subparsers.add_parser("cleanup", help="Delete all records")
    cleanup_parser.add_argument(
        "--products",
        action="store_true",
        help="Only clean products (default: products and users)",
    )
    cleanup_parser.add_argument(
        "--users",
        action="store_true",
        help="Only clean users (default: products and users)",
    )
    cleanup_parser.add_argument(
        "--error-log",
        type=Path,
        default=DEFAULT_ERROR_LOG,
        help="File receiving records that could not be cleaned",
    )
    return parser


def run(args: argparse.Namespace) -> int:
    """Run the selected command and return exit code."""
    log = logging.getLogger("api_qa_harness")

    try:
        config = ApiConfig.from_env()
    except ConfigError as e:
        log.error("%s", e)
        return 2
    if args.base_url:
        config = config.model_copy(update={"base_url": args.base_url})

    log.info("Using API at %s", config.base_url)

    if args.command == "seed":
        output = seed(config, users=args.users, products=args.products)
        print(json.dumps(output, indent=2))
        created = len(output["users"]["created"]) + len(output["products"]["created"])
        return 0 if created == args.users + args.products else 1

    select_all = not (args.products or args.users)
    reports = cleanup(
        config,
        args.error_log,
        products=select_all or args.products,
        users=select_all or args.users,
    )
    print(json.dumps(format_cleanup_output(reports), indent=2))
    return 0 if all(report.ok for report in reports.values()) else 1


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    sys.exit(run(args))


if __name__ == "__main__":  # pragma: no cover
    main()
