"""
Source-to-marketplace vocabulary mapping.

Modules:
    keywords - ordered keyword matcher shared by every category table
    categories - Google / BestPrice / GLAMI categories, product type labels
    colors - variant color extraction and translation
    materials - jewelry-material metafield translation
    attributes - gender, size, weight, price tier, variant name helpers
"""

from .attributes import (
    Gender,
    collect_available_sizes,
    detect_gender,
    extract_variant_size,
    is_gift_card,
    is_ring,
    price_tier,
    translate_variant_name,
    weight_to_grams,
)
from .categories import category_for, is_default_category, product_type_label
from .colors import ColorMapper, extract_variant_color
from .keywords import KeywordMatcher, KeywordRule
from .materials import MaterialMapper

__all__ = [
    # Keyword matching
    'KeywordMatcher',
    'KeywordRule',
    # Categories
    'category_for',
    'is_default_category',
    'product_type_label',
    # Colors and materials
    'ColorMapper',
    'extract_variant_color',
    'MaterialMapper',
    # Attributes
    'Gender',
    'collect_available_sizes',
    'detect_gender',
    'extract_variant_size',
    'is_gift_card',
    'is_ring',
    'price_tier',
    'translate_variant_name',
    'weight_to_grams',
]
