"""Tests for shopfeeds/shopify/catalog.py"""

from unittest.mock import MagicMock, patch

import pytest

from shopfeeds.models import OptionValue, Product, ProductOption
from shopfeeds.shopify.catalog import (
    CatalogFetcher,
    CatalogFetchError,
    parse_product_node,
    parse_variant,
    strip_gid,
)

SETTINGS = {
    "fetch": {"page_size": 2, "page_delay": 0, "ci_warmup": 0, "translation_batch_delay": 0},
    "throttle": {"max_page_errors": 3, "page_error_wait": 0},
}


def product_node(num, **overrides):
    node = {
        "id": f"gid://shopify/Product/{num}",
        "title": f"Product {num}",
        "handle": f"product-{num}",
        "descriptionHtml": "<p>Text</p>",
        "productType": "Γυναικεία Δαχτυλίδια",
        "vendor": "Emmanuela",
        "tags": ["silver"],
        "images": {"edges": [{"node": {"id": "gid://shopify/ProductImage/77", "url": "https://cdn/a.jpg"}}]},
        "options": [{
            "id": "gid://shopify/ProductOption/1",
            "name": "Μέγεθος",
            "optionValues": [{"id": "gid://shopify/ProductOptionValue/11", "name": "52"}],
        }],
        "variants": {"edges": [{"node": {
            "id": f"gid://shopify/ProductVariant/{num}0",
            "sku": "SKU-1",
            "price": "45.00",
            "compareAtPrice": None,
            "inventoryQuantity": 2,
            "barcode": None,
            "image": {"id": "gid://shopify/ProductImage/77"},
            "selectedOptions": [{"name": "Μέγεθος", "value": "52"}],
            "inventoryItem": {"measurement": {"weight": {"value": 4.6, "unit": "GRAMS"}}},
        }}]},
        "gsGender": None,
        "gsAgeGroup": {"value": "adult"},
        "colorPattern": {"value": "Ασημένιο"},
        "material": {"value": "sterling-silver"},
        "materialGS": None,
        "targetGender": {"value": "female"},
    }
    node.update(overrides)
    return node


def products_page(nodes, has_next=False, cursor=None):
    return {"products": {
        "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
        "edges": [{"node": n} for n in nodes],
    }}


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def fetcher(client):
    return CatalogFetcher(client, SETTINGS)


class TestStripGid:
    def test_numeric_tail(self):
        assert strip_gid("gid://shopify/ProductVariant/123") == "123"

    def test_empty(self):
        assert strip_gid(None) == ""
        assert strip_gid("") == ""


class TestParseProductNode:
    def test_basic_fields(self):
        product = parse_product_node(product_node(1))
        assert product.id == "1"
        assert product.gid == "gid://shopify/Product/1"
        assert product.handle == "product-1"
        assert product.product_type == "Γυναικεία Δαχτυλίδια"
        assert product.main_image == "https://cdn/a.jpg"

    def test_metafields(self):
        metafields = parse_product_node(product_node(1)).metafields
        assert metafields.gender == "female"
        assert metafields.color == "Ασημένιο"
        assert metafields.material == "sterling-silver"
        assert metafields.material_gs is None

    def test_options_keep_value_gids(self):
        option = parse_product_node(product_node(1)).options[0]
        assert option.name == "Μέγεθος"
        assert option.values[0].gid == "gid://shopify/ProductOptionValue/11"

    def test_variant_fields(self):
        variant = parse_product_node(product_node(1)).variants[0]
        assert variant.id == "10"
        assert variant.image_id == "77"
        assert variant.barcode == ""
        assert variant.weight_grams == 5
        assert variant.in_stock

    def test_missing_optional_sections(self):
        node = product_node(2, images=None, variants=None, options=None, descriptionHtml=None)
        product = parse_product_node(node)
        assert product.images == []
        assert product.variants == []
        assert product.body_html == ""

    def test_variant_without_weight(self):
        variant = parse_variant({"id": "gid://shopify/ProductVariant/5", "price": "10.00"})
        assert variant.weight_grams is None
        assert variant.image_id is None
        assert variant.inventory_quantity == 0


class TestFetchProducts:
    def test_follows_pagination(self, fetcher, client):
        client.graphql_request.side_effect = [
            products_page([product_node(1), product_node(2)], has_next=True, cursor="c1"),
            products_page([product_node(3)]),
        ]

        products = fetcher.fetch_products()

        assert [p.id for p in products] == ["1", "2", "3"]
        second_call_vars = client.graphql_request.call_args_list[1].args[1]
        assert second_call_vars["cursor"] == "c1"
        assert second_call_vars["first"] == 2
        assert second_call_vars["query"] == "status:active"

    @patch("shopfeeds.shopify.catalog.time.sleep")
    def test_retries_failed_page(self, mock_sleep, fetcher, client):
        client.graphql_request.side_effect = [None, products_page([product_node(1)])]

        products = fetcher.fetch_products()

        assert len(products) == 1
        assert client.graphql_request.call_count == 2

    @patch("shopfeeds.shopify.catalog.time.sleep")
    def test_gives_up_after_consecutive_failures(self, mock_sleep, fetcher, client):
        client.graphql_request.return_value = None

        with pytest.raises(CatalogFetchError):
            fetcher.fetch_products()

        assert client.graphql_request.call_count == 3

    @patch("shopfeeds.shopify.catalog.time.sleep")
    def test_data_without_products_is_a_failure(self, mock_sleep, fetcher, client):
        client.graphql_request.return_value = {"shop": {}}

        with pytest.raises(CatalogFetchError):
            fetcher.fetch_products()

    def test_empty_catalog(self, fetcher, client):
        client.graphql_request.return_value = products_page([])
        assert fetcher.fetch_products() == []

    @patch("shopfeeds.shopify.catalog.time.sleep")
    def test_ci_warmup(self, mock_sleep, client, monkeypatch):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        settings = {"fetch": {"ci_warmup": 30}, "throttle": {}}
        client.graphql_request.return_value = products_page([])

        CatalogFetcher(client, settings).fetch_products()

        mock_sleep.assert_called_once_with(30.0)


class TestFetchShippingRates:
    @staticmethod
    def zone(countries, methods):
        return {
            "zone": {"name": "Zone", "countries": [{"code": {"countryCode": c}} for c in countries]},
            "methodDefinitions": {"nodes": methods},
        }

    @staticmethod
    def method(amount, currency="EUR", active=True):
        return {"name": "Standard", "active": active,
                "rateProvider": {"price": {"amount": amount, "currencyCode": currency}}}

    def test_cheapest_active_rate_per_country(self, fetcher, client):
        client.graphql_request.return_value = {"deliveryProfiles": {"nodes": [{
            "profileLocationGroups": [{"locationGroupZones": {"nodes": [
                self.zone(["GR"], [self.method("5.00"), self.method("0.00"),
                                   self.method("0.00", active=False)]),
                self.zone(["DE", "AT"], [self.method("9.90"), self.method("12.00")]),
                self.zone(["GB"], [{"name": "Carrier", "active": True, "rateProvider": {}}]),
            ]}}],
        }]}}

        rates = fetcher.fetch_shipping_rates()

        assert rates["GR"].price == 0.0
        assert rates["DE"].price == 9.9
        assert rates["AT"].currency == "EUR"
        assert "GB" not in rates

    def test_returns_none_on_failure(self, fetcher, client):
        client.graphql_request.return_value = None
        assert fetcher.fetch_shipping_rates() is None


class TestFetchTranslations:
    @pytest.fixture
    def products(self):
        return [Product(
            id="1",
            gid="gid://shopify/Product/1",
            title="Δαχτυλίδι",
            handle="daxtylidi",
            options=[ProductOption(id="5", gid="gid://shopify/ProductOption/5", name="Χρώμα", values=[
                OptionValue(id="51", gid="gid://shopify/ProductOptionValue/51", name="Ασημένιο"),
                OptionValue(id="52", gid="gid://shopify/ProductOptionValue/52", name="Επιχρυσωμένο"),
            ])],
        )]

    def test_products_and_option_values(self, fetcher, client, products):
        client.graphql_request.side_effect = [
            {"r0": {"translations": [
                {"key": "title", "value": "Ring"},
                {"key": "handle", "value": "ring"},
                {"key": "body_html", "value": ""},
            ]}},
            {"r0": {"translations": [{"key": "name", "value": "Silber"}]},
             "r1": {"translations": []}},
        ]

        translations = fetcher.fetch_translations(products, "de")

        assert translations.for_product("1") == {"title": "Ring", "handle": "ring"}
        assert translations.option_value("Ασημένιο") == "Silber"
        assert translations.option_value("Επιχρυσωμένο") == "Επιχρυσωμένο"

    def test_query_uses_locale_and_aliases(self, fetcher, client, products):
        client.graphql_request.return_value = {}

        fetcher.fetch_translations(products, "fr")

        query = client.graphql_request.call_args_list[0].args[0]
        assert 'r0: translatableResource(resourceId: "gid://shopify/Product/1")' in query
        assert 'translations(locale: "fr")' in query

    def test_failed_batch_keeps_originals(self, fetcher, client, products):
        client.graphql_request.return_value = None

        translations = fetcher.fetch_translations(products, "de")

        assert translations.products == {}
        assert translations.option_values == {}
