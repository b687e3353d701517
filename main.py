# main.py

"""Entry point for the catalog_browser command-line front end."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging

logger = logging.getLogger("catalog_browser.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="catalog_browser",
        description="Browse the product catalog, online or offline.",
    )
    parser.add_argument(
        "product_id",
        nargs="?",
        type=int,
        default=None,
        help="Product id to show. Omit to list the whole catalog.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        default=False,
        help="Skip the network and read from the local cache only.",
    )
    parser.add_argument(
        "--db",
        default=None,
        dest="db_path",
        help="Path to the SQLite cache (default: data/products.db).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check network connectivity and cache size.",
    )
    return parser


def _run_health_check(args: argparse.Namespace) -> None:
    """Run the connectivity health check."""
    from src.cli.runner import run_health_check

    sys.exit(run_health_check(args.db_path))


def _run_catalog(args: argparse.Namespace) -> None:
    """Load and print the full catalog."""
    from src.cli.runner import cli_catalog

    exit_code = asyncio.run(
        cli_catalog(
            output_format=args.output_format,
            offline=args.offline,
            db_path=args.db_path,
        )
    )
    sys.exit(exit_code)


def _run_item(args: argparse.Namespace) -> None:
    """Load and print a single product."""
    from src.cli.runner import cli_item

    exit_code = asyncio.run(
        cli_item(
            product_id=args.product_id,
            output_format=args.output_format,
            offline=args.offline,
            db_path=args.db_path,
        )
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to the health check, catalog listing or product detail."""
    log_file = setup_logging()
    logger.info("catalog_browser starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    try:
        if args.health:
            _run_health_check(args)
        elif args.product_id is None:
            _run_catalog(args)
        else:
            _run_item(args)
    except SystemExit:
        raise
    except Exception:
        logger.critical("Fatal error", exc_info=True)
        raise
    finally:
        logger.info("catalog_browser shutting down")


if __name__ == "__main__":
    main()
