"""Tests for shopfeeds/feeds/bestprice.py"""

import pytest
from lxml import etree

from shopfeeds.feeds.bestprice import BestPriceFeed

from conftest import make_images, make_variant


def parse_products(xml):
    root = etree.fromstring(xml.encode("utf-8"))
    return {p.findtext("productId"): p for p in root.findall("./products/product")}


@pytest.fixture
def feed(store_settings):
    return BestPriceFeed(store=store_settings)


class TestBestPriceFeed:
    def test_document_date(self, feed, catalog, generated_at):
        root = etree.fromstring(feed.generate(catalog, generated_at).xml.encode("utf-8"))
        assert root.tag == "store"
        assert root.findtext("date") == "2026-02-05 10:30"

    def test_skips(self, feed, catalog, generated_at):
        result = feed.generate(catalog, generated_at)

        assert set(parse_products(result.xml)) == {"5001", "5003", "5101"}
        assert result.stats.gift_cards == 1
        assert result.stats.out_of_stock == 1
        # the imageless product reaches its variants and is skipped there
        assert result.stats.no_image == 1
        assert result.stats.total_variants == 5
        assert result.stats.in_stock == 3

    def test_ring_variant(self, feed, catalog, generated_at):
        product = parse_products(feed.generate(catalog, generated_at).xml)["5001"]

        assert product.findtext("title") == "Δαχτυλίδι Ελιά - Ασημένιο, Νο 52"
        assert product.findtext("productURL") == "https://emmanuela.gr/products/daxtylidi-elia?variant=5001"
        assert product.findtext("imageURL") == "https://cdn.example.com/9001-2.jpg"
        assert [img.text for img in product.find("imagesURL")] == [
            "https://cdn.example.com/9001-2.jpg",
            "https://cdn.example.com/9001-1.jpg",
            "https://cdn.example.com/9001-3.jpg",
        ]
        assert product.findtext("price") == "45.00"
        assert product.findtext("category_path") == "Κοσμήματα->Δαχτυλίδια->Γυναικεία δαχτυλίδια"
        assert product.findtext("availability") == "Παράδοση σε 1-3 ημέρες"
        assert product.findtext("stock") == "Y"
        assert product.findtext("MPN") == "EL-52"
        assert product.findtext("color") == "ασημί"
        assert product.findtext("size") == "52,56"
        assert product.findtext("weight") == "4"
        assert product.findtext("shipping") == "0"

    def test_single_variant_fallbacks(self, feed, catalog, generated_at):
        product = parse_products(feed.generate(catalog, generated_at).xml)["5101"]

        assert product.findtext("title") == "Σκουλαρίκια Κύμα"
        assert product.findtext("price") == "30.00"
        assert product.findtext("MPN") == "EMM-5101"
        assert product.findtext("color") == "χρυσό"
        assert product.find("imagesURL") is None
        assert product.findtext("size") is None
        assert product.findtext("weight") is None


class TestProductTitle:
    def test_translates_foreign_variant_names(self, feed, ring_product):
        variant = make_variant("1", options=[("Χρώμα", "Silber"), ("Μέγεθος", "54")])
        assert feed.product_title(ring_product, variant) == "Δαχτυλίδι Ελιά - ασημί, Νο 54"

    def test_default_title_ignored(self, feed, ring_product):
        variant = make_variant("1", options=[("Title", "Default Title")])
        assert feed.product_title(ring_product, variant) == "Δαχτυλίδι Ελιά"


class TestVariantColor:
    def test_default_color(self, feed, ring_product):
        variant = make_variant("1", options=[("Μέγεθος", "54")])
        assert feed.variant_color(ring_product, variant) == "ασημί"

    def test_image_urls_limit(self, feed, ring_product):
        ring_product.images = make_images("9001", 8)
        assert len(feed.image_urls(ring_product, ring_product.main_image)) == 5
