"""
Shopify Marketplace Feed Generator

Modules:
    models   - Data models (Product, Variant, Market, ...)
    common   - Shared utilities (config loader, logging, text helpers)
    shopify  - Admin API client and catalog fetching
    mapping  - Category, color, material and attribute mapping
    feeds    - Marketplace XML generators, writer and pipeline
"""

__version__ = "1.0.0"
