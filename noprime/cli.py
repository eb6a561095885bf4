#!/usr/bin/env python3
"""
NoPrime command line

Commands:
    inspect  - run detection on a saved product page and print a report
    catalog  - validate the brand catalog and print its counts
    toggle   - flip the durable enabled flag

Usage:
    noprime inspect --file page.html --url https://www.amazon.com/dp/B0C1234567
    noprime inspect --file page.html --url https://www.amazon.com/dp/B0C1234567 --json
    noprime catalog
    noprime toggle
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from .catalog import CatalogError, find_domain_mismatches, load_brand_catalog
from .common.config_loader import load_settings
from .common.log_config import setup_logging
from .host import JsonFileStorage, MemoryStorage, url_matches
from .models import DetectionPayload
from .session import BrowserSession

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = os.path.join(".noprime", "state.json")


def print_report(payload: Optional[DetectionPayload], url: str, banner_shown: bool):
    """Print the detection report for one page."""

    print("\n" + "="*80)
    print("DETECTION REPORT")
    print("="*80)

    print(f"\nPage URL: {url}")

    if payload is None:
        print("\nNot a product page (no title found). No banner.")
        print("\n" + "="*80)
        return

    product = payload.product
    title = product.title or ""
    print(f"Title: {title[:70]}..." if len(title) > 70 else f"Title: {title}")

    print("\n" + "-"*80)
    print("EXTRACTED DATA")
    print("-"*80)

    fields = [
        ("Brand", product.brand),
        ("Book", "yes" if product.is_book else ""),
        ("ISBN", product.isbn),
    ]
    for label, value in fields:
        status = "OK" if value else "MISSING"
        print(f"  [{status:7}] {label:20} {value or 'MISSING'}")

    print("\n" + "-"*80)
    print("REDIRECT")
    print("-"*80)

    print(f"\n  Match Type: {payload.match_type.value}")
    if payload.store_brand:
        print(f"  Store Brand: {payload.store_brand}")
    if payload.store_name:
        print(f"  Retailer: {payload.store_name}")
    print(f"  Redirect URL: {payload.redirect_url}")
    if payload.secondary_url:
        print(f"  Secondary URL: {payload.secondary_url}")
    print(f"  Banner: {'shown' if banner_shown else 'not shown'}")

    print("\n" + "="*80)


async def _inspect(url: str, html: str):
    session = BrowserSession(sync_storage=MemoryStorage())
    await session.start()
    tab = await session.open_tab(url, html)
    await session.settle()

    payload = await session.describe_tab(tab.id)
    controller = session.controllers.get(tab.id)
    banner_shown = controller.banner_shown if controller else False
    await session.close_tab(tab.id)
    return payload, banner_shown


async def _toggle(state_file: str) -> bool:
    session = BrowserSession(sync_storage=JsonFileStorage(state_file))
    await session.start()
    return await session.click_toolbar()


def cmd_inspect(args) -> int:
    try:
        with open(args.file, "r", encoding="utf-8") as f:
            html = f.read()
    except OSError as e:
        print(f"\nError: cannot read {args.file}: {e}")
        return 1

    url_patterns = load_settings().get("retailer", {}).get("url_patterns", [])
    if not url_matches(args.url, url_patterns):
        print(f"\nError: {args.url} is not a supported retailer address")
        return 1

    payload, banner_shown = asyncio.run(_inspect(args.url, html))

    if args.json:
        print(json.dumps(payload.to_dict() if payload else None, indent=2, ensure_ascii=False))
    else:
        print_report(payload, args.url, banner_shown)

    return 0 if payload is not None else 1


def cmd_catalog(args) -> int:
    try:
        catalog = load_brand_catalog()
    except CatalogError as e:
        print(f"\nError: {e}")
        return 1

    print(f"Brands: {len(catalog.stores)}")
    print(f"Aliases: {len(catalog.aliases)}")
    print(f"Alternate retailers: {len(catalog.alternate_retailers)}")
    print(f"Disreputable sellers: {len(catalog.disreputable)}")

    templated = sum(1 for entry in catalog.stores.values() if entry.search_template)
    print(f"Search templates: {templated}/{len(catalog.stores)}")

    mismatches = find_domain_mismatches(catalog)
    if mismatches:
        print(f"\nDOMAIN MISMATCHES ({len(mismatches)}):")
        for brand, home, search in mismatches:
            print(f"  - {brand}: homepage {home}, search {search}")
    else:
        print("\nNo issues found!")

    return 0


def cmd_toggle(args) -> int:
    load_dotenv()
    state_file = args.state_file or os.getenv("NOPRIME_STATE_FILE") or DEFAULT_STATE_FILE
    enabled = asyncio.run(_toggle(state_file))
    print(f"NoPrime {'enabled' if enabled else 'disabled'} ({state_file})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    # Logging flags, shared by every command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging"
    )
    common.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Warnings and errors only"
    )
    parser = argparse.ArgumentParser(
        prog="noprime",
        description="Redirect retailer product pages to the brand's own store"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect = subparsers.add_parser("inspect", parents=[common], help="Run detection on a saved product page")
    inspect.add_argument(
        "--file",
        required=True,
        help="Saved page HTML"
    )
    inspect.add_argument(
        "--url",
        required=True,
        help="Address the page was saved from"
    )
    inspect.add_argument(
        "--json",
        action="store_true",
        help="Print the detection payload as JSON"
    )
    inspect.set_defaults(func=cmd_inspect)

    catalog = subparsers.add_parser("catalog", parents=[common], help="Validate the brand catalog")
    catalog.set_defaults(func=cmd_catalog)

    toggle = subparsers.add_parser("toggle", parents=[common], help="Flip the enabled flag")
    toggle.add_argument(
        "--state-file",
        help=f"Durable state file (default: $NOPRIME_STATE_FILE or {DEFAULT_STATE_FILE})"
    )
    toggle.set_defaults(func=cmd_toggle)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
