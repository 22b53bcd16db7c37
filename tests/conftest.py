"""Shared test fixtures."""

from datetime import datetime

import pytest

from shopfeeds.common.config_loader import load_store_settings
from shopfeeds.models import (
    Market,
    Product,
    ProductImage,
    ProductMetafields,
    SelectedOption,
    ShippingRate,
    Variant,
)


def make_variant(variant_id, price="45.00", quantity=3, options=None, **kwargs):
    """Variant with selected options given as (name, value) pairs."""
    return Variant(
        id=variant_id,
        gid=f"gid://shopify/ProductVariant/{variant_id}",
        price=price,
        inventory_quantity=quantity,
        selected_options=[SelectedOption(name, value) for name, value in (options or [])],
        **kwargs,
    )


def make_images(product_id, count):
    return [
        ProductImage(id=f"{product_id}{i}", src=f"https://cdn.example.com/{product_id}-{i}.jpg")
        for i in range(1, count + 1)
    ]


@pytest.fixture
def generated_at():
    """Fixed run timestamp so generated documents are reproducible."""
    return datetime(2026, 2, 5, 10, 30)


@pytest.fixture
def store_settings():
    return load_store_settings()


@pytest.fixture
def ring_product():
    """Silver ring, three sizes (54 out of stock), one sized and colored."""
    return Product(
        id="9001",
        gid="gid://shopify/Product/9001",
        title="Δαχτυλίδι Ελιά",
        handle="daxtylidi-elia",
        body_html="<p>Χειροποίητο δαχτυλίδι από <strong>ασήμι 925</strong></p><p>Ρυθμιζόμενο</p>",
        product_type="Γυναικεία Δαχτυλίδια",
        metafields=ProductMetafields(material="sterling-silver"),
        images=make_images("9001", 3),
        variants=[
            make_variant("5001", options=[("Χρώμα", "Ασημένιο"), ("Μέγεθος", "52")],
                         sku="EL-52", weight_grams=4, image_id="90012"),
            make_variant("5002", quantity=0,
                         options=[("Χρώμα", "Ασημένιο"), ("Μέγεθος", "54")], sku="EL-54"),
            make_variant("5003", options=[("Χρώμα", "Επιχρυσωμένο"), ("Μέγεθος", "56")],
                         sku="EL-56", barcode="5201234567890"),
        ],
    )


@pytest.fixture
def earring_product():
    """Single-variant earrings on sale, gold and pearl."""
    return Product(
        id="9002",
        gid="gid://shopify/Product/9002",
        title="Σκουλαρίκια Κύμα",
        handle="skoularikia-kyma",
        body_html="<p>Κρεμαστά σκουλαρίκια &amp; μαργαριτάρι</p>",
        product_type="Γυναικεία Σκουλαρίκια",
        metafields=ProductMetafields(material="gold-1; pearl", color="Χρυσό"),
        images=make_images("9002", 1),
        variants=[
            make_variant("5101", price="30.00", compare_at_price="40.00",
                         options=[("Title", "Default Title")]),
        ],
    )


@pytest.fixture
def gift_card_product():
    return Product(
        id="9003",
        gid="gid://shopify/Product/9003",
        title="Δωροκάρτα",
        handle="gift-card",
        product_type="Gift Card",
        images=make_images("9003", 1),
        variants=[make_variant("5201", price="50.00", options=[("Title", "Default Title")])],
    )


@pytest.fixture
def imageless_product():
    return Product(
        id="9004",
        gid="gid://shopify/Product/9004",
        title="Βραχιόλι",
        handle="vraxioli",
        product_type="Γυναικεία Βραχιόλια",
        variants=[make_variant("5301", options=[("Title", "Default Title")])],
    )


@pytest.fixture
def catalog(ring_product, earring_product, gift_card_product, imageless_product):
    return [ring_product, earring_product, gift_card_product, imageless_product]


@pytest.fixture
def greece():
    return Market(code="GR", country="GR", language="el", currency="EUR", locale="el",
                  domain="emmanuela.gr", path="", priority=0, name="Greece")


@pytest.fixture
def germany_path_market():
    return Market(code="AT", country="AT", language="de", currency="EUR", locale="de",
                  domain="emmanuela.jewelry", path="/de", priority=2, name="Austria")


@pytest.fixture
def shipping_rates():
    return {
        "GR": ShippingRate(0.0, "EUR"),
        "AT": ShippingRate(9.9, "EUR"),
    }
