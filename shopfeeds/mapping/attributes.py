"""
Small per-variant attribute helpers: gender, size, weight, price tier,
gift card and ring detection, variant name translation.
"""

import math
import re
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..common.text_utils import parse_amount
from ..models import SelectedOption, Variant

SIZE_OPTION_NAMES = ('μέγεθος', 'size', 'νούμερο')

# Grams per unit, keyed by Shopify WeightUnit and the short forms
GRAMS_PER_UNIT = {
    'GRAMS': 1.0,
    'G': 1.0,
    'KILOGRAMS': 1000.0,
    'KG': 1000.0,
    'POUNDS': 453.592,
    'LB': 453.592,
    'OUNCES': 28.3495,
    'OZ': 28.3495,
}

# (tier, upper bound exclusive)
PRICE_TIERS = (
    ('Under30', 30),
    ('Under50', 50),
    ('Under100', 100),
)
TOP_PRICE_TIER = 'Premium'

_WOMEN_RE = re.compile(r"\bwomen\b")
_MEN_RE = re.compile(r"\bmen\b")


class Gender(str, Enum):
    """Gender values accepted by the Google/Meta/GLAMI feeds."""
    MALE = 'male'
    FEMALE = 'female'
    UNISEX = 'unisex'


_GENDER_VALUES = {g.value for g in Gender}


def detect_gender(
    product_type: Optional[str],
    title: Optional[str] = None,
    default: Gender = Gender.UNISEX,
    override: Optional[str] = None,
) -> Gender:
    """
    Detect the target gender from the product type and title.

    A gender metafield holding male/female/unisex wins over detection;
    any other value (e.g. a metaobject GID) is ignored.

    Greek markers (ανδρικ/γυναικ) are checked in type and title, English
    words (women/men) in the type only. "women" is tested before "men".
    """
    explicit = (override or "").strip().lower()
    if explicit in _GENDER_VALUES:
        return Gender(explicit)

    type_lc = (product_type or "").lower()
    title_lc = (title or "").lower()

    if 'ανδρικ' in type_lc or 'ανδρικ' in title_lc:
        return Gender.MALE
    if 'γυναικ' in type_lc or 'γυναικ' in title_lc:
        return Gender.FEMALE
    if _WOMEN_RE.search(type_lc):
        return Gender.FEMALE
    if _MEN_RE.search(type_lc):
        return Gender.MALE
    return Gender(default)


def is_ring(product_type: Optional[str]) -> bool:
    """True for ring product types (earrings excluded)."""
    type_lc = (product_type or "").lower()
    if 'δαχτυλίδ' in type_lc:
        return True
    return 'ring' in type_lc and 'earring' not in type_lc


def is_gift_card(product_type: Optional[str]) -> bool:
    type_lc = (product_type or "").lower()
    return 'gift card' in type_lc or 'δωροκάρτα' in type_lc


def is_size_option(option_name: Optional[str]) -> bool:
    name = (option_name or "").lower()
    return any(word in name for word in SIZE_OPTION_NAMES)


def extract_variant_size(selected_options: List[SelectedOption]) -> Optional[str]:
    """Return the value of the size option (μέγεθος/size/νούμερο), if any."""
    for opt in selected_options or []:
        if is_size_option(opt.name):
            return opt.value
    return None


def collect_available_sizes(variants: Iterable[Variant]) -> Optional[str]:
    """
    Comma-joined distinct sizes of the in-stock variants, in variant order.

    Returns:
        e.g. "52,54,56", or None when no in-stock variant has a size
    """
    sizes: List[str] = []
    for variant in variants:
        if not variant.in_stock:
            continue
        size = extract_variant_size(variant.selected_options)
        if size and size not in sizes:
            sizes.append(size)
    return ",".join(sizes) if sizes else None


def weight_to_grams(value, unit: Optional[str] = "GRAMS") -> Optional[int]:
    """
    Convert a Shopify weight measurement to whole grams.

    Unknown units are taken as grams. Rounds half up.

    Returns:
        Grams, or None for missing, invalid or non-positive weights
    """
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(amount) or amount <= 0:
        return None

    factor = GRAMS_PER_UNIT.get((unit or 'GRAMS').upper(), 1.0)
    return int(math.floor(amount * factor + 0.5))


def price_tier(price) -> str:
    """Meta custom label for the price band (Under30/Under50/Under100/Premium)."""
    amount = parse_amount(price)
    if amount is None:
        return TOP_PRICE_TIER
    for tier, upper in PRICE_TIERS:
        if amount < upper:
            return tier
    return TOP_PRICE_TIER


def translate_variant_name(name: Optional[str], translations: Dict[str, str]) -> Optional[str]:
    """
    Replace foreign whole words in a variant option value.

    Example:
        >>> translate_variant_name("3 Mehrfarbige Manschetten", {...})
        '3 πολύχρωμες μανσέτ'
    """
    if not name:
        return name
    result = name
    for foreign, local in translations.items():
        pattern = re.compile(rf"\b{re.escape(foreign)}\b", re.IGNORECASE)
        result = pattern.sub(local, result)
    return result
