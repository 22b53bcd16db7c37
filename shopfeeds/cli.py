"""
Command line entry points, one per marketplace.

    shopfeeds-google GR|all|list
    shopfeeds-meta [--validate]
    shopfeeds-glami [--validate]
    shopfeeds-bestprice [--validate]
    shopfeeds-local-inventory

Exit codes:
    0 = feed(s) written
    1 = missing SHOPIFY_ACCESS_TOKEN, unknown market or missing argument
    2 = store unreachable, or catalog could not be fetched or is empty
"""

import argparse
import logging
import os
import sys
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from dotenv import load_dotenv

from .common.config_loader import load_feed_settings, load_market_config, load_store_settings
from .common.log_config import setup_logging
from .feeds import (
    BestPriceFeed,
    FeedGenerator,
    FeedOutput,
    FeedPipeline,
    FeedWriter,
    GlamiFeed,
    LocalInventoryFeed,
    MetaFeed,
    load_markets,
)
from .models import Market
from .shopify import CatalogFetcher, CatalogFetchError, ShopifyAPIClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FETCH_FAILED = 2

TOKEN_ENV = "SHOPIFY_ACCESS_TOKEN"
SHOP_ENV = "SHOPIFY_SHOP"


def build_parser(description: str, validate: bool = False) -> argparse.ArgumentParser:
    """Parser with the options every feed command shares."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--shop", "-s",
        help=f"Shopify shop name (default: ${SHOP_ENV} or store.yaml)"
    )
    parser.add_argument(
        "--token", "-t",
        help=f"Shopify Admin API access token (default: ${TOKEN_ENV})"
    )
    parser.add_argument(
        "--output-dir", "-o",
        help="Directory for the feed files (default: store.yaml output_dir)"
    )
    if validate:
        parser.add_argument(
            "--validate", "-v",
            action="store_true",
            help="Print sample items to check against the marketplace"
        )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )
    return parser


def _print_header(title: str, lines: List[str]) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)
    for line in lines:
        print(f"   {line}")
    print()


def _print_output(output: FeedOutput) -> None:
    print(f"Feed saved: {output.stem}")
    for path in output.paths:
        print(f"   {path}")
    for line in output.stats.summary_lines():
        print(line)
    print()


def _open_pipeline(args, store: Dict) -> Optional[tuple]:
    """
    Resolve credentials and build client + pipeline.

    Returns:
        (client, pipeline), or None when no access token is available
    """
    token = args.token or os.environ.get(TOKEN_ENV)
    if not token:
        print(f"ERROR: {TOKEN_ENV} environment variable not set", file=sys.stderr)
        print(f"   Set it with: export {TOKEN_ENV}=your_token_here", file=sys.stderr)
        return None

    shop = args.shop or os.environ.get(SHOP_ENV) or store["shop"]
    client = ShopifyAPIClient(
        shop,
        token,
        api_version=store.get("api_version"),
        throttle=store.get("throttle"),
    )
    output_dir = args.output_dir or store.get("output_dir", "feeds")
    pipeline = FeedPipeline(CatalogFetcher(client, store), FeedWriter(output_dir))
    return client, pipeline


def _check_connection(client: ShopifyAPIClient) -> bool:
    """Confirm the token works before starting a long catalog fetch."""
    if client.test_connection():
        return True
    print(f"ERROR: Could not connect to {client.shop}.myshopify.com", file=sys.stderr)
    print(f"   Check {TOKEN_ENV} and the shop name", file=sys.stderr)
    return False


def run_feed(
    argv: Optional[List[str]],
    description: str,
    factory: Callable[[Dict], FeedGenerator],
    validate: bool = False,
) -> int:
    """Shared main for the single-feed commands."""
    parser = build_parser(description, validate=validate)
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    load_dotenv()

    store = load_store_settings()
    opened = _open_pipeline(args, store)
    if opened is None:
        return EXIT_USAGE
    client, pipeline = opened

    generator = factory(store)
    _print_header(description, [
        f"Store: {client.shop}",
        f"Domain: {store.get('domain', '')}",
        f"Output: {pipeline.writer.output_dir}",
    ])

    with client:
        if not _check_connection(client):
            return EXIT_FETCH_FAILED
        try:
            products = pipeline.fetch_products()
        except CatalogFetchError as e:
            logger.error("Catalog fetch failed: %s", e)
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_FETCH_FAILED

        output = pipeline.run(generator, products)

    _print_output(output)
    if getattr(args, "validate", False) and hasattr(generator, "validation_lines"):
        for line in generator.validation_lines(output.stats):
            print(line)
    return EXIT_OK


def print_markets(markets: Dict[str, Market], priority_names: Dict) -> None:
    """List markets grouped by priority."""
    by_priority = defaultdict(list)
    for market in markets.values():
        by_priority[market.priority].append(market)

    print(f"\nAVAILABLE MARKETS ({len(markets)} total)")
    for priority in sorted(by_priority):
        print(f"\n{priority_names.get(priority, f'Priority {priority}')}:")
        for m in by_priority[priority]:
            print(f"   {m.code:<4} {m.name:<20} {m.domain}{m.path}")

    print("\nUsage:")
    print("   shopfeeds-google GR     # Single market")
    print(f"   shopfeeds-google all    # All {len(markets)} markets")
    print("   shopfeeds-google list   # This list\n")


def main_google(argv: Optional[List[str]] = None) -> int:
    parser = build_parser("Google Shopping feeds (one per market)")
    parser.add_argument(
        "market",
        nargs="?",
        help="Market code (e.g. GR, DE), 'all' or 'list'"
    )
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet)
    load_dotenv()

    market_config = load_market_config()
    markets = load_markets(market_config)

    if not args.market:
        print('ERROR: Please specify a market code or "all" or "list"', file=sys.stderr)
        print("   Example: shopfeeds-google GR", file=sys.stderr)
        return EXIT_USAGE

    choice = args.market.strip()
    if choice.lower() == "list":
        print_markets(markets, market_config.get("priority_names") or {})
        return EXIT_OK

    if choice.lower() == "all":
        selected = list(markets.values())
    elif choice.upper() in markets:
        selected = [markets[choice.upper()]]
    else:
        print(f"ERROR: Unknown market: {choice}", file=sys.stderr)
        print('   Use "list" to see available markets', file=sys.stderr)
        return EXIT_USAGE

    store = load_store_settings()
    opened = _open_pipeline(args, store)
    if opened is None:
        return EXIT_USAGE
    client, pipeline = opened

    _print_header("Google Shopping feed generator", [
        f"Markets: {', '.join(m.code for m in selected)}",
        f"Output: {pipeline.writer.output_dir}",
    ])

    with client:
        if not _check_connection(client):
            return EXIT_FETCH_FAILED
        try:
            outputs = pipeline.run_google(
                selected,
                primary_locale=store.get("primary_locale", "el"),
                store=store,
                settings=load_feed_settings("google"),
                market_config=market_config,
            )
        except CatalogFetchError as e:
            logger.error("Catalog fetch failed: %s", e)
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_FETCH_FAILED

    if len(outputs) == 1:
        _print_output(outputs[0])
    else:
        _print_header("GENERATION COMPLETE - SUMMARY", [])
        with_shipping = 0
        for output in outputs:
            shipping = output.stats.counters["with_shipping"] > 0
            with_shipping += shipping
            print(f"   {output.stem}: {output.stats.in_stock} items "
                  f"[shipping: {'yes' if shipping else 'no'}] -> {output.paths[0]}")
        print(f"\nMarkets with shipping: {with_shipping}/{len(outputs)}")
        print(f"Total: {len(outputs)} feeds generated\n")
    return EXIT_OK


def main_meta(argv: Optional[List[str]] = None) -> int:
    return run_feed(argv, "Meta product feed (Greece)",
                    lambda store: MetaFeed(store=store), validate=True)


def main_glami(argv: Optional[List[str]] = None) -> int:
    return run_feed(argv, "GLAMI product feed (Greece)",
                    lambda store: GlamiFeed(store=store), validate=True)


def main_bestprice(argv: Optional[List[str]] = None) -> int:
    return run_feed(argv, "BestPrice.gr product feed",
                    lambda store: BestPriceFeed(store=store), validate=True)


def main_local_inventory(argv: Optional[List[str]] = None) -> int:
    return run_feed(argv, "Google local inventory feed",
                    lambda store: LocalInventoryFeed(store=store))
