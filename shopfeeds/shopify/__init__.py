"""
Shopify integration modules.

Modules:
    api_client - Shared GraphQL/REST client for Shopify Admin API
    catalog - Product, shipping rate and translation fetching
"""

from .api_client import ShopifyAPIClient
from .catalog import (
    CatalogFetcher,
    CatalogFetchError,
    parse_product_node,
    strip_gid,
)

__all__ = [
    # API Client
    'ShopifyAPIClient',
    # Catalog
    'CatalogFetcher',
    'CatalogFetchError',
    'parse_product_node',
    'strip_gid',
]
