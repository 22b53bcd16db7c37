"""
Feed generator base class.

Every marketplace feed is the same loop: walk the products, apply the
feed's product-level skips, drop out-of-stock variants, render one item
per remaining variant, tally statistics. Subclasses provide the document
envelope and the per-variant item.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..common.config_loader import load_feed_settings, load_store_settings
from ..mapping.attributes import is_gift_card
from ..models import Product, Variant
from .xml_builder import XmlBuilder

logger = logging.getLogger(__name__)


@dataclass
class FeedStats:
    """
    Counters collected while generating one feed.

    `counters` holds the optional-field tallies (with_color, with_size,
    with_weight, ...) so each feed can count what it emits.
    """
    products: int = 0
    total_variants: int = 0
    in_stock: int = 0
    out_of_stock: int = 0
    no_image: int = 0
    gift_cards: int = 0
    counters: Counter = field(default_factory=Counter)
    category_breakdown: Counter = field(default_factory=Counter)
    unmapped_types: Counter = field(default_factory=Counter)
    samples: List[Dict[str, Any]] = field(default_factory=list)

    def count(self, name: str, condition: Any = True) -> None:
        """Increment counters[name] when condition is truthy."""
        if condition:
            self.counters[name] += 1

    def add_sample(self, record: Dict[str, Any], limit: int) -> None:
        if len(self.samples) < limit:
            self.samples.append(record)

    def summary_lines(self) -> List[str]:
        """Human-readable summary for the end-of-run report."""
        lines = [
            f"  Products:              {self.products}",
            f"  Variants:              {self.total_variants}",
            f"  In stock (included):   {self.in_stock}",
            f"  Out of stock (skip):   {self.out_of_stock}",
        ]
        if self.no_image:
            lines.append(f"  No image (skip):       {self.no_image}")
        if self.gift_cards:
            lines.append(f"  Gift cards (skip):     {self.gift_cards}")
        for name in sorted(self.counters):
            label = name.replace("_", " ").capitalize() + ":"
            lines.append(f"  {label:<22} {self.counters[name]}")
        if self.category_breakdown:
            lines.append("  Categories:")
            for category, count in self.category_breakdown.most_common():
                lines.append(f"    {category}: {count} products")
        if self.unmapped_types:
            lines.append("  Unmapped product types (default category used):")
            for product_type, count in self.unmapped_types.most_common():
                lines.append(f'    "{product_type}": {count} products')
        return lines


@dataclass
class FeedResult:
    """Generated document plus the statistics collected for it."""
    xml: str
    stats: FeedStats


class FeedGenerator:
    """
    Base class for marketplace feed generators.

    Subclasses set `feed_key` (their feeds.yaml section), the skip flags,
    and implement open_document / close_document / render_variant.
    prepare_product computes product-level values once per product.

    Invariant: variants with inventory_quantity <= 0 never reach
    render_variant.
    """

    feed_key: str = ""
    skip_gift_cards = False
    skip_products_without_image = True

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        store: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            settings: This feed's feeds.yaml section (loaded if None)
            store: store.yaml content (loaded if None)
        """
        self.settings = settings if settings is not None else load_feed_settings(self.feed_key)
        self.store = store if store is not None else load_store_settings()
        self.brand = self.settings.get("brand") or self.store.get("brand", "")
        self.domain = self.store.get("domain", "")
        self.sample_size = int(self.settings.get("sample_size", 10))

    @property
    def stem(self) -> str:
        """Output file name without extension."""
        return self.settings["stem"]

    def generate(self, products: Iterable[Product], generated_at: datetime) -> FeedResult:
        """
        Render the feed.

        Args:
            products: Catalog products
            generated_at: Timestamp written into feeds that carry one

        Returns:
            FeedResult with the XML document and statistics
        """
        stats = FeedStats()
        xml = XmlBuilder()
        self.open_document(xml, generated_at)

        for product in products:
            stats.products += 1
            if self.skip_gift_cards and is_gift_card(product.product_type):
                stats.gift_cards += 1
                continue
            if self.skip_products_without_image and not product.main_image:
                stats.no_image += 1
                continue

            context = self.prepare_product(product, stats)

            for variant in product.variants:
                stats.total_variants += 1
                if not variant.in_stock:
                    stats.out_of_stock += 1
                    continue
                if self.render_variant(xml, product, variant, context, stats):
                    stats.in_stock += 1

        self.close_document(xml)
        logger.info("%s: %d items (%d out of stock skipped)",
                    self.stem, stats.in_stock, stats.out_of_stock)
        return FeedResult(xml=xml.to_string(), stats=stats)

    def product_url(self, handle: str, variant_id: Optional[str] = None) -> str:
        url = f"https://{self.domain}/products/{handle}"
        return f"{url}?variant={variant_id}" if variant_id else url

    def prepare_product(self, product: Product, stats: FeedStats) -> Dict[str, Any]:
        return {}

    def open_document(self, xml: XmlBuilder, generated_at: datetime) -> None:
        raise NotImplementedError

    def close_document(self, xml: XmlBuilder) -> None:
        raise NotImplementedError

    def render_variant(
        self,
        xml: XmlBuilder,
        product: Product,
        variant: Variant,
        context: Dict[str, Any],
        stats: FeedStats,
    ) -> bool:
        """Append the item for an in-stock variant; False if it was skipped."""
        raise NotImplementedError
