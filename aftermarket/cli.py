"""Command line entry point.

Usage:
    # Create the after_market table and its indexes (safe to re-run)
    python -m aftermarket init-db

    # Print the DDL instead of executing it
    python -m aftermarket init-db --sql

    # Scrape AFTER_MARKET_URL and store the rows
    python -m aftermarket scrape

    # Scrape without writing to the database
    python -m aftermarket scrape --dry-run

    # Show stored rows for a symbol
    python -m aftermarket show AAPL --limit 5
"""

import argparse
import logging
import sys

from aftermarket import repository
from aftermarket.config import get_scrape_settings
from aftermarket.db import session as db_session
from aftermarket.db.schema import apply_schema, render_ddl
from aftermarket.errors import AfterMarketError
from aftermarket.scraper import scrape_after_market

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="aftermarket",
        description="Record after-hours percentage changes per symbol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    init_db = sub.add_parser(
        "init-db",
        help="Create the after_market table if it does not exist (alembic upgrade head still works afterwards)",
    )
    init_db.add_argument("--sql", action="store_true", help="Print the PostgreSQL DDL and exit")

    scrape = sub.add_parser("scrape", help="Scrape the after-hours page and store the results")
    scrape.add_argument("--dry-run", action="store_true", help="Log scraped rows without storing them")

    show = sub.add_parser("show", help="Print stored rows for a symbol")
    show.add_argument("symbol")
    show.add_argument("--limit", type=int, default=20, help="Maximum rows to print (default: 20)")

    return parser.parse_args(argv)


def cmd_init_db(args) -> None:
    if args.sql:
        for stmt in render_ddl("postgresql"):
            print(stmt)
        return

    created = apply_schema(db_session.get_engine())
    print("created after_market" if created else "after_market already exists")


def cmd_scrape(args) -> None:
    settings = get_scrape_settings()
    records = scrape_after_market(settings.after_market_url, timeout=settings.request_timeout)

    if args.dry_run:
        for r in records:
            logger.info(f"{r.symbol}: {r.percentage:+.2f}% at {r.date.isoformat()}")
        return

    db = db_session.SessionLocal()
    try:
        repository.add_records(db, records)
    finally:
        db.close()


def cmd_show(args) -> None:
    db = db_session.SessionLocal()
    try:
        rows = repository.records_for_symbol(db, args.symbol.strip().upper(), limit=args.limit)
    finally:
        db.close()

    if not rows:
        print(f"no rows for {args.symbol.upper()}")
        return
    for r in rows:
        print(f"{r.date.isoformat()}  {r.symbol:<10} {r.percentage:+.2f}%")


COMMANDS = {
    "init-db": cmd_init_db,
    "scrape": cmd_scrape,
    "show": cmd_show,
}


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        COMMANDS[args.command](args)
    except AfterMarketError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
