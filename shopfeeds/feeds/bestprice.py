"""
BestPrice.gr price comparison feed.

BestPrice requires a color and an MPN on every product, so both have
fallbacks (ασημί, EMM-<variant id>). Ring products list every in-stock
size of the product.
"""

from datetime import datetime
from typing import Any, Dict, List

from ..common.text_utils import format_amount
from ..mapping.attributes import (
    collect_available_sizes,
    extract_variant_size,
    is_ring,
    is_size_option,
    translate_variant_name,
)
from ..mapping.categories import category_for, is_default_category
from ..mapping.colors import ColorMapper, extract_variant_color
from ..models import Product, Variant
from .base import FeedGenerator, FeedStats
from .xml_builder import XmlBuilder

DATE_FORMAT = "%Y-%m-%d %H:%M"


class BestPriceFeed(FeedGenerator):
    """BestPrice feed for Greece."""

    feed_key = "bestprice"
    skip_gift_cards = True
    # Only variants without any image are skipped
    skip_products_without_image = False

    def __init__(self, settings=None, store=None):
        super().__init__(settings, store)
        self.colors = ColorMapper.greek()
        self.default_color = self.settings.get("default_color", "ασημί")
        self.max_images = int(self.settings.get("max_images", 5))
        self.name_translations = self.settings.get("variant_name_translations") or {}

    def open_document(self, xml: XmlBuilder, generated_at: datetime) -> None:
        xml.declaration()
        xml.open("store")
        xml.element("date", generated_at.strftime(DATE_FORMAT))
        xml.open("products")

    def close_document(self, xml: XmlBuilder) -> None:
        xml.close("products")
        xml.close("store")

    def prepare_product(self, product: Product, stats: FeedStats) -> Dict[str, Any]:
        category = category_for("bestprice", product.product_type)
        stats.category_breakdown[category] += 1
        if is_default_category("bestprice", product.product_type):
            stats.unmapped_types[product.product_type] += 1

        sizes = collect_available_sizes(product.variants) if is_ring(product.product_type) else None
        return {"category": category, "sizes": sizes}

    def product_title(self, product: Product, variant: Variant) -> str:
        """
        Product title plus every option value, so each variant is unique.

        Foreign words are translated to Greek and sizes get a "Νο" prefix.
        """
        if len(product.variants) <= 1:
            return product.title

        parts: List[str] = []
        for opt in variant.selected_options:
            value = (opt.value or "").strip()
            if not value or value.lower() == "default title":
                continue
            translated = translate_variant_name(value, self.name_translations)
            parts.append(f"Νο {translated}" if is_size_option(opt.name) else translated)

        return f"{product.title} - {', '.join(parts)}" if parts else product.title

    def variant_color(self, product: Product, variant: Variant) -> str:
        """Variant color, then the color-pattern metafield, then the default."""
        raw = extract_variant_color(variant.selected_options, self.colors)
        return (self.colors.translate(raw)
                or self.colors.translate(product.metafields.color)
                or self.default_color)

    def image_urls(self, product: Product, variant_image: str) -> List[str]:
        """Variant image first, then the other product images, max_images total."""
        urls = [variant_image]
        urls.extend(img.src for img in product.images if img.src != variant_image)
        return urls[:self.max_images]

    def render_variant(self, xml, product, variant, context, stats) -> bool:
        variant_image = product.image_src(variant.image_id)
        if not variant_image:
            stats.no_image += 1
            return False

        title = self.product_title(product, variant)
        color = self.variant_color(product, variant)
        sizes = context["sizes"]
        mpn = variant.sku or f"{self.settings.get('mpn_prefix', 'EMM')}-{variant.id}"
        images = self.image_urls(product, variant_image)

        stats.count("with_color", color != self.default_color)
        stats.count("with_mpn", variant.sku)
        stats.count("with_size", sizes)
        stats.count("with_weight", variant.weight_grams)
        stats.add_sample({
            "product_id": variant.id,
            "title": title,
            "price": variant.price,
            "category": context["category"],
            "color": color,
            "sku": variant.sku or "(none)",
            "size": sizes or extract_variant_size(variant.selected_options) or "(none)",
        }, self.sample_size)

        with xml.block("product"):
            xml.element("productId", variant.id)
            xml.cdata_element("title", title)
            xml.element("productURL", self.product_url(product.handle, variant.id))
            xml.element("imageURL", images[0])
            if len(images) > 1:
                with xml.block("imagesURL"):
                    for i, src in enumerate(images, 1):
                        xml.element(f"img{i}", src)
            xml.element("price", format_amount(variant.price))
            xml.cdata_element("category_path", context["category"])
            xml.element("availability", self.settings.get("availability", ""))
            xml.element("stock", "Y")
            xml.cdata_element("brand", self.brand)
            xml.cdata_element("MPN", mpn)
            xml.element("color", color)
            if sizes:
                xml.element("size", sizes)
            if variant.weight_grams:
                xml.element("weight", variant.weight_grams)
            xml.element("shipping", self.settings.get("shipping_cost", 0))
        return True

    def validation_lines(self, stats: FeedStats) -> list:
        """Sample products for a manual check (--validate)."""
        lines = ["Sample items:"]
        for i, sample in enumerate(stats.samples, 1):
            lines.append(f"  [{i}] {sample['title']}")
            lines.append(f"      ID:       {sample['product_id']}")
            lines.append(f"      Price:    {sample['price']}")
            lines.append(f"      Category: {sample['category']}")
            lines.append(f"      Color:    {sample['color']}")
            lines.append(f"      SKU:      {sample['sku']}")
            lines.append(f"      Size:     {sample['size']}")
        return lines
