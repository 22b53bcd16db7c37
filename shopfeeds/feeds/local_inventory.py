"""
Google local inventory feed for the physical store.

Store-level stock for Local Inventory Ads, as an Atom feed. Only
in-stock variants are listed.
"""

from datetime import datetime, timezone

from ..common.text_utils import format_amount
from .base import FeedGenerator
from .google import GOOGLE_NS
from .xml_builder import XmlBuilder

ATOM_NS = "http://www.w3.org/2005/Atom"


def atom_timestamp(when: datetime) -> str:
    """UTC timestamp like 2026-02-05T10:30:00Z (naive datetimes are taken as UTC)."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class LocalInventoryFeed(FeedGenerator):
    """Local inventory feed (one entry per in-stock variant)."""

    feed_key = "local_inventory"
    skip_products_without_image = False

    def __init__(self, settings=None, store=None):
        super().__init__(settings, store)
        self.store_code = self.settings["store_code"]
        self.currency = self.settings.get("currency", "EUR")

    def open_document(self, xml: XmlBuilder, generated_at: datetime) -> None:
        xml.declaration()
        xml.open("feed", {"xmlns": ATOM_NS, "xmlns:g": GOOGLE_NS})
        xml.element("title", self.settings.get("title", ""))
        xml.empty("link", {"href": f"https://{self.domain}"})
        xml.element("updated", atom_timestamp(generated_at))

    def close_document(self, xml: XmlBuilder) -> None:
        xml.close("feed")

    def render_variant(self, xml, product, variant, context, stats) -> bool:
        with xml.block("entry"):
            xml.element("g:id", variant.id)
            xml.element("g:store_code", self.store_code)
            xml.element("g:quantity", variant.inventory_quantity)
            xml.element("g:price", f"{format_amount(variant.price)} {self.currency}")
            xml.element("g:availability", "in_stock")
        return True
