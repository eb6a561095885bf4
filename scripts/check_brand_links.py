#!/usr/bin/env python3
"""
Brand Catalog Link Check

Fetches every catalog store homepage and search page (with a test query)
and reports the ones that are down, redirect to an error page, or answer
with a "not found" page under HTTP 200. Also lists entries whose search
template points at a different domain than the homepage.

Usage:
    python3 scripts/check_brand_links.py
    python3 scripts/check_brand_links.py nike adidas
    python3 scripts/check_brand_links.py --homepage-only
    python3 scripts/check_brand_links.py --template-only --delay 1.0

Environment:
    NOPRIME_USER_AGENT  User-Agent header for requests (optional)

Exit codes:
    0 = every checked URL answered
    1 = broken links or invalid catalog
"""

import argparse
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from noprime.catalog import CatalogError, LinkChecker, find_domain_mismatches, load_brand_catalog
from noprime.common.log_config import setup_logging

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Check catalog store links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "brands",
        nargs="*",
        help="Catalog keys to check (default: all)",
    )
    parser.add_argument(
        "--homepage-only",
        action="store_true",
        help="Check homepages only",
    )
    parser.add_argument(
        "--template-only",
        action="store_true",
        help="Check search templates only",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=0.5,
        help="Seconds between requests (default: 0.5)",
    )
    parser.add_argument(
        "--log-file",
        help="Also write log records to this file",
    )
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    if args.homepage_only and args.template_only:
        logger.error("--homepage-only and --template-only are mutually exclusive")
        sys.exit(1)

    try:
        catalog = load_brand_catalog()
    except CatalogError as e:
        logger.error("%s", e)
        sys.exit(1)

    unknown = [b for b in args.brands if b.lower() not in catalog.stores
               and b.lower() not in catalog.alternate_retailers]
    if unknown:
        logger.warning("Not in catalog: %s", ", ".join(unknown))

    with LinkChecker(user_agent=os.getenv("NOPRIME_USER_AGENT"), delay=args.delay) as checker:
        results = checker.check_catalog(
            catalog,
            brands=args.brands or None,
            homepage_only=args.homepage_only,
            template_only=args.template_only,
        )

    failed = [r for r in results if not r.ok]

    print("\n" + "="*60)
    print(f"Checked: {len(results)}  OK: {len(results) - len(failed)}  Failed: {len(failed)}")
    print("="*60)

    if failed:
        print("\nBROKEN LINKS:")
        for result in failed:
            print(f"  - {result.brand} [{result.kind}] {result.describe()}")
            print(f"    {result.url}")

    mismatches = find_domain_mismatches(catalog)
    if mismatches:
        print("\nDOMAIN MISMATCHES:")
        for brand, home, search in mismatches:
            print(f"  - {brand}: homepage {home}, search {search}")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
