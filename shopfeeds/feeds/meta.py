"""
Meta (Facebook/Instagram) catalog feed for Greece.

g:id is the numeric variant id and must match the content_ids the Meta
Pixel sends from the storefront; g:item_group_id is the product id.
Custom labels segment campaigns by type, price band, collection and metal.
"""

from datetime import datetime
from typing import Any, Dict

from ..common.text_utils import strip_html, truncate
from ..mapping.attributes import (
    Gender,
    detect_gender,
    extract_variant_size,
    is_ring,
    price_tier,
)
from ..mapping.categories import category_for, product_type_label
from ..mapping.colors import ColorMapper, extract_variant_color
from ..mapping.materials import MaterialMapper
from ..models import Product
from .base import FeedGenerator, FeedStats
from .google import DEFAULT_VARIANT_TITLE, GOOGLE_NS, format_price, is_on_sale
from .xml_builder import XmlBuilder

CURRENCY = "EUR"


def metal_label(material: str) -> str:
    """custom_label_3: Gold if any gold material, else Silver."""
    return "Gold" if material and "Gold" in material else "Silver"


class MetaFeed(FeedGenerator):
    """Meta catalog feed (RSS 2.0 with the Google namespace)."""

    feed_key = "meta"

    def __init__(self, settings=None, store=None):
        super().__init__(settings, store)
        self.colors = ColorMapper.english()
        self.materials = MaterialMapper.for_feed("meta")
        self.default_gender = Gender(self.settings.get("default_gender", "female"))
        self.title_limit = int(self.settings.get("title_limit", 150))
        self.additional_images = int(self.settings.get("additional_images", 10))

    def open_document(self, xml: XmlBuilder, generated_at: datetime) -> None:
        xml.declaration()
        xml.open("rss", {"xmlns:g": GOOGLE_NS, "version": "2.0"})
        xml.open("channel")
        xml.element("title", self.settings["channel_title"])
        xml.element("link", f"https://{self.domain}")
        xml.element("description", self.settings["channel_description"])

    def close_document(self, xml: XmlBuilder) -> None:
        xml.close("channel")
        xml.close("rss")

    def prepare_product(self, product: Product, stats: FeedStats) -> Dict[str, Any]:
        category = category_for("google", product.product_type)
        stats.category_breakdown[category] += 1
        return {
            "description": strip_html(product.body_html),
            "gender": detect_gender(product.product_type, product.title, self.default_gender,
                                    product.metafields.gender),
            "material": self.materials.translate(product.metafields.material),
            "category": category,
            "type_label": product_type_label(product.product_type),
            "is_ring": is_ring(product.product_type),
            "additional_images": [img.src for img in product.images[1:1 + self.additional_images]],
        }

    def render_variant(self, xml, product, variant, context, stats) -> bool:
        suffix = ""
        ring_size = None
        if variant.title and variant.title != DEFAULT_VARIANT_TITLE:
            suffix = variant.title
            if context["is_ring"]:
                ring_size = extract_variant_size(variant.selected_options)

        title = f"{product.title} - {suffix}" if suffix else product.title
        color = self.colors.translate(extract_variant_color(variant.selected_options, self.colors))
        on_sale = is_on_sale(variant)
        material = context["material"]

        stats.count("with_color", color)
        stats.count("with_size", ring_size)
        stats.count("with_weight", variant.weight_grams)
        stats.count("with_sale_price", on_sale)
        stats.count("with_material", material)
        stats.add_sample({
            "variant_id": variant.id,
            "product_id": product.id,
            "title": title[:50],
        }, self.sample_size)

        with xml.block("item"):
            xml.element("g:id", variant.id)
            xml.element("g:item_group_id", product.id)
            xml.cdata_element("g:title", truncate(title, self.title_limit))
            xml.cdata_element("g:description", context["description"])
            xml.element("g:link", self.product_url(product.handle, variant.id))
            xml.element("g:image_link", product.image_src(variant.image_id))
            for src in context["additional_images"]:
                xml.element("g:additional_image_link", src)

            regular_price = variant.compare_at_price if on_sale else variant.price
            xml.element("g:price", format_price(regular_price, CURRENCY))
            xml.element("g:availability", "in stock")
            xml.element("g:condition", "new")
            if on_sale:
                xml.element("g:sale_price", format_price(variant.price, CURRENCY))

            xml.cdata_element("g:brand", self.brand)
            xml.element("g:google_product_category", context["category"])
            xml.cdata_element("g:product_type",
                              product.product_type or self.settings.get("default_product_type", "Jewelry"))
            xml.element("g:gender", context["gender"].value)
            xml.element("g:age_group", product.metafields.age_group or "adult")

            if material:
                xml.cdata_element("g:material", material)
            if color:
                xml.cdata_element("g:color", color)
            if ring_size:
                xml.cdata_element("g:size", ring_size)
            if variant.weight_grams:
                xml.element("g:shipping_weight", f"{variant.weight_grams} g")

            xml.element("g:custom_label_0", context["type_label"])
            xml.element("g:custom_label_1", price_tier(variant.price))
            xml.cdata_element("g:custom_label_2",
                              product.product_type or self.settings.get("default_collection", "General"))
            xml.element("g:custom_label_3", metal_label(material))

            if variant.sku:
                xml.cdata_element("g:mpn", variant.sku)
        return True

    def validation_lines(self, stats: FeedStats) -> list:
        """Sample ids to compare against Meta Commerce Manager (--validate)."""
        catalog_id = self.settings.get("catalog_id", "")
        lines = ["Sample content ids (g:id), these must match the Pixel content_ids:"]
        for i, sample in enumerate(stats.samples, 1):
            lines.append(f"  {i}. Variant ID: {sample['variant_id']}")
            lines.append(f"     Product ID: {sample['product_id']}")
            lines.append(f"     Title: {sample['title']}...")
        lines.append(f"Target catalog: {catalog_id}")
        lines.append(f"  https://business.facebook.com/commerce/catalogs/{catalog_id}/products/")
        return lines
