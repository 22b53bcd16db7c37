"""
Data models for the feed pipeline.

This module contains pure data classes with no business logic.
"""

from .market import Market
from .product import (
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

__all__ = [
    'Market',
    'OptionValue',
    'Product',
    'ProductImage',
    'ProductMetafields',
    'ProductOption',
    'SelectedOption',
    'ShippingRate',
    'Translations',
    'Variant',
]
