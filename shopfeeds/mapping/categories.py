"""
Category lookups per marketplace.

Tables live in config/categories.yaml and are loaded once per process.
"""

from typing import Any, Dict, Optional

from ..common.config_loader import load_category_tables
from .keywords import KeywordMatcher

CATEGORY_FEEDS = ('google', 'bestprice', 'glami')

_matchers: Dict[str, KeywordMatcher] = {}


def get_matcher(name: str) -> KeywordMatcher:
    """
    Return the matcher for a categories.yaml table.

    Args:
        name: 'google', 'bestprice', 'glami' or 'product_type_labels'

    Raises:
        KeyError: If categories.yaml has no such table
    """
    if name not in _matchers:
        tables = load_category_tables()
        if name not in tables:
            raise KeyError(f"No category table '{name}' in categories.yaml")
        _matchers[name] = KeywordMatcher.from_config(tables[name])
    return _matchers[name]


def category_for(feed: str, product_type: Optional[str]) -> Any:
    """
    Map a Shopify productType to the feed's category.

    Google returns a numeric taxonomy id, BestPrice an arrow path
    ("Κοσμήματα->Δαχτυλίδια->..."), GLAMI a pipe path ("Glami.gr | ...").
    """
    if feed not in CATEGORY_FEEDS:
        raise ValueError(f"Unknown category feed: {feed}")
    return get_matcher(feed).match(product_type)


def is_default_category(feed: str, product_type: Optional[str]) -> bool:
    """True if a non-empty productType fell through to the feed default."""
    return bool(product_type) and not get_matcher(feed).is_mapped(product_type)


def product_type_label(product_type: Optional[str]) -> str:
    """Short English label (Ring, Earring, Necklace, ...), default Jewelry."""
    return get_matcher('product_type_labels').match(product_type)
