"""
Feed pipeline: fetch -> map/render -> write.

One pipeline runs every marketplace; what differs per marketplace is the
FeedGenerator passed in. Google Shopping is the only multi-feed run: the
catalog and shipping rates are fetched once and translations once per
locale, then one feed is written per market.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..models import Market, Product, Translations
from ..shopify.catalog import CatalogFetcher, CatalogFetchError
from .base import FeedGenerator, FeedStats
from .google import GoogleShoppingFeed
from .writer import FeedWriter

logger = logging.getLogger(__name__)


class EmptyCatalogError(CatalogFetchError):
    """Raised when the catalog fetch succeeds but returns no products."""


@dataclass
class FeedOutput:
    """What one feed run produced."""
    stem: str
    paths: List[Path]
    stats: FeedStats
    generator: FeedGenerator


class FeedPipeline:
    """
    Usage:
        pipeline = FeedPipeline(CatalogFetcher(client, store), FeedWriter("feeds"))
        products = pipeline.fetch_products()
        output = pipeline.run(BestPriceFeed(), products)
    """

    def __init__(
        self,
        fetcher: CatalogFetcher,
        writer: FeedWriter,
        generated_at: Optional[datetime] = None,
    ):
        """
        Args:
            fetcher: Catalog fetcher
            writer: Feed file writer
            generated_at: Run timestamp (defaults to now); fixing it makes
                output reproducible
        """
        self.fetcher = fetcher
        self.writer = writer
        self.generated_at = generated_at or datetime.now()

    def fetch_products(self) -> List[Product]:
        """
        Raises:
            CatalogFetchError: If fetching fails
            EmptyCatalogError: If there are no active products
        """
        products = self.fetcher.fetch_products()
        if not products:
            raise EmptyCatalogError("No active products found")
        return products

    def run(self, generator: FeedGenerator, products: Iterable[Product]) -> FeedOutput:
        """Render one feed and write its files."""
        result = generator.generate(products, self.generated_at)
        paths = self.writer.write(generator.stem, result.xml, self.generated_at)
        return FeedOutput(stem=generator.stem, paths=paths, stats=result.stats, generator=generator)

    def run_google(
        self,
        markets: List[Market],
        primary_locale: str = "el",
        store: Optional[Dict[str, Any]] = None,
        settings: Optional[Dict[str, Any]] = None,
        market_config: Optional[Dict[str, Any]] = None,
    ) -> List[FeedOutput]:
        """
        Generate Google Shopping feeds for the given markets.

        Markets are processed grouped by locale, so translations are
        fetched once per locale. The primary locale needs none.
        """
        shipping_rates = self.fetcher.fetch_shipping_rates()
        products = self.fetch_products()

        by_locale: Dict[str, List[Market]] = {}
        for market in markets:
            by_locale.setdefault(market.locale, []).append(market)

        outputs = []
        for locale, locale_markets in by_locale.items():
            if locale == primary_locale:
                logger.info("Primary locale %s, no translations needed", locale)
                translations = Translations()
            else:
                translations = self.fetcher.fetch_translations(products, locale)

            for market in locale_markets:
                logger.info("Generating %s (%s)...", market.name, market.code)
                if not shipping_rates or market.country not in shipping_rates:
                    logger.warning("No shipping rate found for %s", market.country)
                generator = GoogleShoppingFeed(
                    market,
                    translations=translations,
                    shipping_rates=shipping_rates,
                    settings=settings,
                    store=store,
                    market_config=market_config,
                )
                outputs.append(self.run(generator, products))
        return outputs
