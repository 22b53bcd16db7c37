"""
GLAMI.gr fashion feed.

GLAMI's own <SHOP>/<SHOPITEM> format with upper-case tags. Prices are
plain numbers (VAT included, no currency), attributes go in PARAM blocks
with Greek names, and ITEM_ID must match the item_id the GLAMI piXel
reports from product pages.
"""

import re
from datetime import datetime
from typing import Any, Dict

from ..common.text_utils import format_number, strip_html, truncate
from ..mapping.attributes import extract_variant_size
from ..mapping.categories import category_for, is_default_category
from ..mapping.colors import ColorMapper, extract_variant_color
from ..mapping.materials import MaterialMapper
from ..models import Product
from .base import FeedGenerator, FeedStats
from .google import DEFAULT_VARIANT_TITLE
from .xml_builder import XmlBuilder

GTIN_RE = re.compile(r"^\d{8,18}$")


class GlamiFeed(FeedGenerator):
    """GLAMI feed for Greece."""

    feed_key = "glami"
    skip_gift_cards = True

    def __init__(self, settings=None, store=None):
        super().__init__(settings, store)
        self.colors = ColorMapper.greek()
        self.materials = MaterialMapper.for_feed("glami")
        self.name_limit = int(self.settings.get("name_limit", 200))
        self.description_limit = int(self.settings.get("description_limit", 65535))
        self.additional_images = int(self.settings.get("additional_images", 9))
        self.param_names = self.settings.get("param_names") or {}

    def open_document(self, xml: XmlBuilder, generated_at: datetime) -> None:
        xml.declaration(encoding="utf-8")
        xml.open("SHOP")

    def close_document(self, xml: XmlBuilder) -> None:
        xml.close("SHOP")

    def product_material(self, product: Product) -> str:
        """
        Readable material text: mm-google-shopping.material first, then the
        jewelry-material metafield (skipped when it holds metaobject GIDs),
        then the default.
        """
        material = None
        if product.metafields.material_gs:
            material = self.materials.translate(product.metafields.material_gs)
        if not material and product.metafields.material:
            material = self.materials.translate(product.metafields.material)
        return material or self.materials.default

    def prepare_product(self, product: Product, stats: FeedStats) -> Dict[str, Any]:
        category = category_for("glami", product.product_type)
        stats.category_breakdown[category] += 1
        if is_default_category("glami", product.product_type):
            stats.unmapped_types[product.product_type] += 1

        description = truncate(strip_html(product.body_html, limit=None), self.description_limit)
        return {
            "description": description,
            "category": category,
            "material": self.product_material(product),
            "alt_images": [img.src for img in product.images[1:1 + self.additional_images]],
        }

    def product_name(self, product: Product, variant, color_raw, color) -> str:
        """Title plus the raw color (never the size), when not already in it."""
        name = product.title
        if color and color_raw and variant.title != DEFAULT_VARIANT_TITLE:
            if color_raw.lower() not in name.lower():
                name = f"{name} - {color_raw}"
        return truncate(name, self.name_limit)

    def _param(self, xml: XmlBuilder, key: str, value, use_cdata: bool = False) -> None:
        with xml.block("PARAM"):
            xml.element("PARAM_NAME", self.param_names.get(key, key))
            if use_cdata:
                xml.cdata_element("VAL", value)
            else:
                xml.element("VAL", value)

    def render_variant(self, xml, product, variant, context, stats) -> bool:
        color_raw = extract_variant_color(variant.selected_options, self.colors)
        color = self.colors.translate(color_raw)
        size = extract_variant_size(variant.selected_options)
        name = self.product_name(product, variant, color_raw, color)
        barcode = (variant.barcode or "").strip()
        gtin = barcode if GTIN_RE.match(barcode) else None

        stats.count("with_color", color)
        stats.count("with_size", size)
        stats.count("with_description", context["description"])
        stats.count("with_barcode", gtin)
        stats.count("with_material", context["material"])
        stats.add_sample({
            "item_id": variant.id,
            "group_id": product.id,
            "name": name[:60],
            "category": context["category"],
            "price": format_number(variant.price),
        }, self.sample_size)

        with xml.block("SHOPITEM"):
            xml.element("ITEM_ID", variant.id)
            xml.cdata_element("PRODUCTNAME", name)
            xml.element("URL", self.product_url(product.handle))
            xml.element("IMGURL", product.image_src(variant.image_id))
            xml.element("PRICE_VAT", format_number(variant.price))
            xml.cdata_element("MANUFACTURER", self.brand)
            xml.cdata_element("CATEGORYTEXT", context["category"])
            if context["description"]:
                xml.cdata_element("DESCRIPTION", context["description"])
            xml.element("ITEMGROUP_ID", product.id)
            for src in context["alt_images"]:
                xml.element("IMGURL_ALTERNATIVE", src)
            if size:
                xml.element("URL_SIZE", self.product_url(product.handle, variant.id))

            if color:
                self._param(xml, "color", color)
            if size:
                self._param(xml, "size", size)
            if context["material"]:
                self._param(xml, "material", context["material"], use_cdata=True)
            self._param(xml, "style", self.settings.get("style", "χειροποίητο"))

            xml.element("DELIVERY_DATE", 0)
            if gtin:
                xml.element("GTIN", gtin)
        return True

    def validation_lines(self, stats: FeedStats) -> list:
        """Sample ITEM_IDs to compare against the GLAMI piXel (--validate)."""
        lines = ["Sample ITEM_IDs, these must match the GLAMI piXel item_ids:"]
        for i, sample in enumerate(stats.samples, 1):
            lines.append(f"  {i}. ITEM_ID: {sample['item_id']}")
            lines.append(f"     ITEMGROUP_ID: {sample['group_id']}")
            lines.append(f"     Name: {sample['name']}...")
            lines.append(f"     Category: {sample['category'].split(' | ')[-1]}")
            lines.append(f"     Price: {sample['price']} EUR")
        return lines
