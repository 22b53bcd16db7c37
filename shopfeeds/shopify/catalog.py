"""
Shopify Catalog Fetcher

Reads everything the feeds need from the Admin GraphQL API:
- active products with images, options, variants and metafields
- the cheapest flat shipping rate per country
- storefront translations of products and option values for a locale
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional

from ..mapping.attributes import weight_to_grams
from ..models import (
    OptionValue,
    Product,
    ProductImage,
    ProductMetafields,
    ProductOption,
    SelectedOption,
    ShippingRate,
    Translations,
    Variant,
)
from .api_client import ShopifyAPIClient

logger = logging.getLogger(__name__)

PRODUCTS_QUERY = """
query Products($first: Int!, $cursor: String, $query: String, $images: Int!, $variants: Int!) {
  products(first: $first, after: $cursor, query: $query) {
    pageInfo { hasNextPage endCursor }
    edges {
      node {
        id title handle descriptionHtml productType vendor tags
        images(first: $images) { edges { node { id url } } }
        options { id name optionValues { id name } }
        variants(first: $variants) {
          edges {
            node {
              id sku price compareAtPrice inventoryQuantity barcode
              image { id }
              selectedOptions { name value }
              inventoryItem { measurement { weight { value unit } } }
            }
          }
        }
        gsGender: metafield(namespace: "google", key: "gender") { value }
        gsAgeGroup: metafield(namespace: "google", key: "age_group") { value }
        colorPattern: metafield(namespace: "shopify", key: "color-pattern") { value }
        material: metafield(namespace: "shopify", key: "jewelry-material") { value }
        materialGS: metafield(namespace: "mm-google-shopping", key: "material") { value }
        targetGender: metafield(namespace: "shopify", key: "target-gender") { value }
      }
    }
  }
}
"""

SHIPPING_RATES_QUERY = """
query ShippingRates {
  deliveryProfiles(first: 5) {
    nodes {
      id
      name
      default
      profileLocationGroups {
        locationGroupZones(first: 50) {
          nodes {
            zone {
              name
              countries { code { countryCode } }
            }
            methodDefinitions(first: 10, eligible: true) {
              nodes {
                name
                active
                rateProvider {
                  ... on DeliveryRateDefinition {
                    price { amount currencyCode }
                  }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""

TRANSLATABLE_RESOURCE_FRAGMENT = """
  {alias}: translatableResource(resourceId: "{gid}") {{
    translations(locale: "{locale}") {{ key value }}
  }}"""


class CatalogFetchError(Exception):
    """Raised when the product catalog cannot be fetched."""


def strip_gid(gid: Optional[str]) -> str:
    """
    Numeric id from a Shopify GID.

    Example:
        >>> strip_gid("gid://shopify/ProductVariant/123")
        '123'
    """
    if not gid:
        return ""
    return gid.rsplit("/", 1)[-1]


def _metafield_value(node: Dict, alias: str) -> Optional[str]:
    field = node.get(alias) or {}
    return field.get("value") or None


def _edges(node: Optional[Dict], key: str) -> List[Dict]:
    return [edge["node"] for edge in ((node or {}).get(key) or {}).get("edges") or []]


def parse_variant(node: Dict) -> Variant:
    """Build a Variant from a GraphQL variant node."""
    weight = (((node.get("inventoryItem") or {}).get("measurement") or {}).get("weight")) or {}
    image = node.get("image") or {}
    return Variant(
        id=strip_gid(node["id"]),
        gid=node["id"],
        sku=node.get("sku") or "",
        price=node.get("price") or "0.00",
        compare_at_price=node.get("compareAtPrice"),
        inventory_quantity=node.get("inventoryQuantity") or 0,
        barcode=node.get("barcode") or "",
        image_id=strip_gid(image.get("id")) or None,
        selected_options=[
            SelectedOption(name=opt.get("name") or "", value=opt.get("value") or "")
            for opt in node.get("selectedOptions") or []
        ],
        weight_grams=weight_to_grams(weight.get("value"), weight.get("unit")),
    )


def parse_product_node(node: Dict) -> Product:
    """Build a Product from a GraphQL product node."""
    metafields = ProductMetafields(
        gender=_metafield_value(node, "gsGender") or _metafield_value(node, "targetGender"),
        age_group=_metafield_value(node, "gsAgeGroup") or "adult",
        color=_metafield_value(node, "colorPattern"),
        material=_metafield_value(node, "material"),
        material_gs=_metafield_value(node, "materialGS"),
    )

    options = [
        ProductOption(
            id=strip_gid(opt["id"]),
            gid=opt["id"],
            name=opt.get("name") or "",
            values=[
                OptionValue(id=strip_gid(val["id"]), gid=val["id"], name=val.get("name") or "")
                for val in opt.get("optionValues") or []
            ],
        )
        for opt in node.get("options") or []
    ]

    return Product(
        id=strip_gid(node["id"]),
        gid=node["id"],
        title=node.get("title") or "",
        handle=node.get("handle") or "",
        body_html=node.get("descriptionHtml") or "",
        product_type=node.get("productType") or "",
        vendor=node.get("vendor") or "",
        tags=list(node.get("tags") or []),
        metafields=metafields,
        images=[
            ProductImage(id=strip_gid(img["id"]), src=img.get("url") or "")
            for img in _edges(node, "images")
        ],
        options=options,
        variants=[parse_variant(v) for v in _edges(node, "variants")],
    )


def running_in_ci() -> bool:
    return bool(os.environ.get("CI") or os.environ.get("GITHUB_ACTIONS"))


class CatalogFetcher:
    """
    Fetches the catalog through a ShopifyAPIClient.

    Usage:
        with ShopifyAPIClient(shop, token) as client:
            fetcher = CatalogFetcher(client, load_store_settings())
            products = fetcher.fetch_products()
            rates = fetcher.fetch_shipping_rates()
            translations = fetcher.fetch_translations(products, "de")
    """

    def __init__(self, client: ShopifyAPIClient, settings: Optional[Dict[str, Any]] = None):
        """
        Args:
            client: API client
            settings: store.yaml content (uses its 'fetch' and 'throttle' sections)
        """
        settings = settings or {}
        fetch = settings.get("fetch") or {}
        throttle = settings.get("throttle") or {}

        self.client = client
        self.page_size = int(fetch.get("page_size", 50))
        self.images_per_product = int(fetch.get("images_per_product", 10))
        self.variants_per_product = int(fetch.get("variants_per_product", 100))
        self.product_query = fetch.get("product_query", "status:active")
        self.page_delay = float(fetch.get("page_delay", 0.3))
        self.ci_warmup = float(fetch.get("ci_warmup", 30))
        self.translation_batch_size = int(fetch.get("translation_batch_size", 30))
        self.option_value_batch_size = int(fetch.get("option_value_batch_size", 50))
        self.translation_batch_delay = float(fetch.get("translation_batch_delay", 0.2))
        self.max_page_errors = int(throttle.get("max_page_errors", 3))
        self.page_error_wait = float(throttle.get("page_error_wait", 30))

    def fetch_products(self) -> List[Product]:
        """
        Fetch all active products, page by page.

        A failed page is retried after page_error_wait seconds; after
        max_page_errors consecutive failures the fetch is abandoned.

        Raises:
            CatalogFetchError: If a page keeps failing
        """
        if running_in_ci() and self.ci_warmup > 0:
            logger.info("Running in CI, waiting %gs for API rate limit recovery...", self.ci_warmup)
            time.sleep(self.ci_warmup)

        logger.info("Fetching active products from Shopify...")
        products: List[Product] = []
        cursor = None
        page = 1
        consecutive_errors = 0

        while True:
            variables = {
                "first": self.page_size,
                "cursor": cursor,
                "query": self.product_query,
                "images": self.images_per_product,
                "variants": self.variants_per_product,
            }
            data = self.client.graphql_request(PRODUCTS_QUERY, variables)

            if data is None or "products" not in data:
                consecutive_errors += 1
                logger.error("Failed to fetch page %d (attempt %d/%d)",
                             page, consecutive_errors, self.max_page_errors)
                if consecutive_errors >= self.max_page_errors:
                    raise CatalogFetchError(
                        f"Page {page} failed {consecutive_errors} times in a row, giving up"
                    )
                logger.info("Waiting %gs before retrying page %d...", self.page_error_wait, page)
                time.sleep(self.page_error_wait)
                continue

            consecutive_errors = 0
            connection = data["products"] or {}
            nodes = [edge["node"] for edge in connection.get("edges") or []]
            products.extend(parse_product_node(node) for node in nodes)
            logger.info("Page %d: %d products (total: %d)", page, len(nodes), len(products))

            page_info = connection.get("pageInfo") or {}
            if not page_info.get("hasNextPage"):
                break
            cursor = page_info.get("endCursor")
            page += 1
            time.sleep(self.page_delay)

        logger.info("Total products fetched: %d", len(products))
        return products

    def fetch_shipping_rates(self) -> Optional[Dict[str, ShippingRate]]:
        """
        Cheapest active flat rate per country from the delivery profiles.

        Carrier-calculated methods have no fixed price and are ignored.

        Returns:
            {'GR': ShippingRate(0.0, 'EUR'), 'GB': ShippingRate(9.9, 'GBP'), ...}
            or None if the rates could not be read
        """
        logger.info("Fetching shipping rates from Shopify...")
        data = self.client.graphql_request(SHIPPING_RATES_QUERY)
        if data is None:
            logger.warning("Shipping rates unavailable, feeds will have no shipping block")
            return None

        rates: Dict[str, ShippingRate] = {}
        profiles = (data.get("deliveryProfiles") or {}).get("nodes") or []
        for profile in profiles:
            for group in profile.get("profileLocationGroups") or []:
                for zone_data in (group.get("locationGroupZones") or {}).get("nodes") or []:
                    zone = zone_data.get("zone") or {}
                    countries = [
                        (c.get("code") or {}).get("countryCode")
                        for c in zone.get("countries") or []
                    ]
                    countries = [c for c in countries if c]

                    methods = (zone_data.get("methodDefinitions") or {}).get("nodes") or []
                    for method in methods:
                        if not method.get("active"):
                            continue
                        price = (method.get("rateProvider") or {}).get("price")
                        if not price:
                            continue
                        try:
                            amount = float(price["amount"])
                        except (KeyError, TypeError, ValueError):
                            continue
                        for country in countries:
                            current = rates.get(country)
                            if current is None or amount < current.price:
                                rates[country] = ShippingRate(amount, price.get("currencyCode", ""))

        free = sum(1 for r in rates.values() if r.price == 0)
        logger.info("Shipping rates for %d countries (%d free, %d paid)",
                    len(rates), free, len(rates) - free)
        return rates

    def _translation_batches(self, resources: List[tuple], batch_size: int, locale: str):
        """
        Yield (batch, data) for aliased translatableResource queries.

        resources are (key, gid) pairs; a batch whose request fails is
        skipped with a warning.
        """
        for start in range(0, len(resources), batch_size):
            batch = resources[start:start + batch_size]
            fragments = "".join(
                TRANSLATABLE_RESOURCE_FRAGMENT.format(alias=f"r{idx}", gid=gid, locale=locale)
                for idx, (_, gid) in enumerate(batch)
            )
            data = self.client.graphql_request(f"query {{{fragments}\n}}")
            if data is None:
                logger.warning("Translation batch %d-%d failed, keeping originals",
                               start + 1, start + len(batch))
            else:
                yield batch, data
            time.sleep(self.translation_batch_delay)

    def fetch_translations(self, products: List[Product], locale: str) -> Translations:
        """
        Fetch product and option value translations for a locale.

        Returns:
            Translations with products {product_id: {key: value}} and
            option_values {original name: translated name}
        """
        logger.info("Fetching translations for locale: %s", locale)
        translations = Translations()

        product_resources = [(p.id, p.gid) for p in products]
        for batch, data in self._translation_batches(
                product_resources, self.translation_batch_size, locale):
            for idx, (product_id, _) in enumerate(batch):
                result = data.get(f"r{idx}") or {}
                entries = result.get("translations")
                if entries:
                    translations.products[product_id] = {
                        t["key"]: t["value"] for t in entries if t.get("value")
                    }

        seen = set()
        value_resources = []
        for product in products:
            for option in product.options:
                for value in option.values:
                    if value.gid not in seen:
                        seen.add(value.gid)
                        value_resources.append((value.name, value.gid))
        logger.debug("%d unique option values to translate", len(value_resources))

        for batch, data in self._translation_batches(
                value_resources, self.option_value_batch_size, locale):
            for idx, (original, _) in enumerate(batch):
                result = data.get(f"r{idx}") or {}
                for entry in result.get("translations") or []:
                    if entry.get("key") == "name" and entry.get("value"):
                        translations.option_values[original] = entry["value"]

        logger.info("Translations: %d products, %d option values",
                    len(translations.products), len(translations.option_values))
        return translations
