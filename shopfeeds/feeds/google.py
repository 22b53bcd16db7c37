"""
Google Shopping feed (one RSS 2.0 feed per market).

Each market gets its own prices in the market currency, links on the
market's domain/path and, for non-Greek locales, translated titles,
descriptions, handles and option values. Shipping cost comes from the
store's delivery profiles; handling and transit times from markets.yaml.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from ..common.config_loader import load_market_config
from ..common.text_utils import format_amount, parse_amount, strip_html, truncate
from ..mapping.attributes import Gender, detect_gender, extract_variant_size, is_ring
from ..mapping.categories import category_for
from ..mapping.colors import ColorMapper, extract_variant_color
from ..mapping.materials import MaterialMapper
from ..models import Market, Product, ShippingRate, Translations, Variant
from .base import FeedGenerator, FeedStats
from .xml_builder import XmlBuilder

GOOGLE_NS = "http://base.google.com/ns/1.0"
DEFAULT_VARIANT_TITLE = "Default Title"


def load_markets(config: Optional[Dict[str, Any]] = None) -> Dict[str, Market]:
    """
    Markets from markets.yaml, keyed by upper-case code, in file order.
    """
    config = config if config is not None else load_market_config()
    return {
        str(code).upper(): Market.from_config(str(code).upper(), data)
        for code, data in (config.get("markets") or {}).items()
    }


def format_price(amount, currency: str) -> str:
    """'45.00 EUR'"""
    return f"{format_amount(amount)} {currency}"


def is_on_sale(variant: Variant) -> bool:
    """True if compare-at price is above the selling price."""
    price = parse_amount(variant.price)
    compare_at = parse_amount(variant.compare_at_price)
    return price is not None and compare_at is not None and compare_at > price


class GoogleShoppingFeed(FeedGenerator):
    """
    Google Shopping feed for one market.

    Usage:
        feed = GoogleShoppingFeed(markets['DE'], translations, shipping_rates)
        result = feed.generate(products, generated_at=datetime.now())
    """

    feed_key = "google"

    def __init__(
        self,
        market: Market,
        translations: Optional[Translations] = None,
        shipping_rates: Optional[Dict[str, ShippingRate]] = None,
        settings: Optional[Dict[str, Any]] = None,
        store: Optional[Dict[str, Any]] = None,
        market_config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(settings, store)
        self.market = market
        self.translations = translations or Translations()
        self.shipping_rates = shipping_rates or {}
        self.market_config = market_config if market_config is not None else load_market_config()
        self.colors = ColorMapper.english()
        self.materials = MaterialMapper.for_feed("google")
        self.default_gender = Gender(self.settings.get("default_gender", "unisex"))
        self.title_limit = int(self.settings.get("title_limit", 150))
        self.additional_images = int(self.settings.get("additional_images", 9))

    @property
    def stem(self) -> str:
        return self.settings["stem"].format(country=self.market.country.lower())

    @property
    def shipping_rate(self) -> Optional[ShippingRate]:
        return self.shipping_rates.get(self.market.country)

    def transit_time(self) -> Dict[str, int]:
        """Transit days for the market country (countries without a group use EU)."""
        groups = self.market_config.get("transit_groups") or {}
        times = self.market_config.get("transit_times") or {}
        group = groups.get(self.market.country, "EU")
        return times.get(group) or times.get("EU") or {"min": 2, "max": 3}

    def open_document(self, xml: XmlBuilder, generated_at: datetime) -> None:
        name = self.market.name
        xml.declaration()
        xml.open("rss", {"xmlns:g": GOOGLE_NS, "version": "2.0"})
        xml.open("channel")
        xml.element("title", self.settings["channel_title"].format(market=name))
        xml.element("link", self.market.base_url)
        xml.element("description", self.settings["channel_description"].format(market=name))

    def close_document(self, xml: XmlBuilder) -> None:
        xml.close("channel")
        xml.close("rss")

    def prepare_product(self, product: Product, stats: FeedStats) -> Dict[str, Any]:
        translated = self.translations.for_product(product.id)
        category = category_for("google", product.product_type)
        gender = detect_gender(product.product_type, product.title, self.default_gender,
                               product.metafields.gender)

        stats.category_breakdown[category] += 1
        stats.count("with_gender", gender != Gender.UNISEX)
        stats.count("with_material", product.metafields.material)

        return {
            "title": translated.get("title") or product.title,
            "description": strip_html(translated.get("body_html") or product.body_html),
            "handle": translated.get("handle") or product.handle,
            "category": category,
            "gender": gender,
            "material": self.materials.translate(product.metafields.material),
            "is_ring": is_ring(product.product_type),
            "additional_images": [img.src for img in product.images[1:1 + self.additional_images]],
        }

    def render_variant(self, xml, product, variant, context, stats) -> bool:
        currency = self.market.currency
        suffix = ""
        ring_size = None

        if variant.title and variant.title != DEFAULT_VARIANT_TITLE:
            originals = [opt.value for opt in variant.selected_options]
            translated = [self.translations.option_value(value) for value in originals]
            suffix = " / ".join(translated)
            stats.count("translated_variants", translated != originals)
            if context["is_ring"]:
                ring_size = extract_variant_size(variant.selected_options)

        title = f"{context['title']} - {suffix}" if suffix else context["title"]
        color = self.colors.translate(extract_variant_color(variant.selected_options, self.colors))
        on_sale = is_on_sale(variant)

        stats.count("with_color", color)
        stats.count("with_size", ring_size)
        stats.count("with_weight", variant.weight_grams)
        stats.count("with_sale_price", on_sale)

        with xml.block("item"):
            xml.element("g:id", variant.id)
            xml.element("g:item_group_id", product.id)
            xml.cdata_element("g:title", truncate(title, self.title_limit))
            xml.cdata_element("g:description", context["description"])
            xml.element("g:link", self.market.product_url(context["handle"], variant.id))
            xml.element("g:image_link", product.image_src(variant.image_id))
            for src in context["additional_images"]:
                xml.element("g:additional_image_link", src)

            regular_price = variant.compare_at_price if on_sale else variant.price
            xml.element("g:price", format_price(regular_price, currency))
            xml.element("g:availability", "in_stock")
            xml.cdata_element("g:brand", self.brand)
            xml.element("g:condition", "new")
            xml.element("g:identifier_exists", "false")
            xml.element("g:google_product_category", context["category"])
            xml.cdata_element("g:product_type",
                              product.product_type or self.settings.get("default_product_type", "Jewelry"))
            xml.element("g:age_group", product.metafields.age_group or "adult")
            xml.element("g:gender", context["gender"].value)
            if color:
                xml.cdata_element("g:color", color)
            if context["material"]:
                xml.cdata_element("g:material", context["material"])
            if variant.weight_grams:
                xml.element("g:shipping_weight", f"{variant.weight_grams} g")
            if ring_size:
                xml.cdata_element("g:size", ring_size)
            if variant.sku:
                xml.cdata_element("g:mpn", variant.sku)
            if on_sale:
                xml.element("g:sale_price", format_price(variant.price, currency))

            self._render_shipping(xml, stats)
            xml.element("g:ships_from_country", self.settings.get("ships_from_country", "GR"))
            xml.element("g:return_policy_label", self.settings.get("return_policy_label", "default"))
        return True

    def _render_shipping(self, xml: XmlBuilder, stats: FeedStats) -> None:
        rate = self.shipping_rate
        if rate is None:
            return
        handling = self.market_config.get("handling_time") or {"min": 1, "max": 2}
        transit = self.transit_time()
        stats.count("with_shipping")
        with xml.block("g:shipping"):
            xml.element("g:country", self.market.country)
            xml.element("g:price", format_price(rate.price, rate.currency))
            xml.element("g:min_handling_time", handling["min"])
            xml.element("g:max_handling_time", handling["max"])
            xml.element("g:min_transit_time", transit["min"])
            xml.element("g:max_transit_time", transit["max"])
