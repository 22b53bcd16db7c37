"""
Variant color mapping.

Shopify variant colors are free text typed by the shop (mostly Greek,
sometimes German or English, occasionally a whole variant description).
ColorMapper turns them into marketplace color values:

1. Exact match in the color table
2. Values with digits, longer than 25 characters or carrying U+FFFD are
   descriptions or corrupted text, not colors: no color
3. Partial match in table order
4. Fallback: the original text (capitalized for the English table)
"""

import re
from typing import Dict, List, Optional

from ..common.config_loader import load_color_tables
from ..common.text_utils import REPLACEMENT_CHAR
from ..models import SelectedOption

MAX_COLOR_LENGTH = 25
COLOR_OPTION_NAMES = ('χρώμα', 'color', 'colour')

_DIGIT_RE = re.compile(r"\d")


class ColorMapper:
    """
    Maps raw variant color text through one color table.

    Usage:
        mapper = ColorMapper.english()
        mapper.translate("Επιχρυσωμένο")   # "Gold"
        mapper.translate("Ασημένιο με μπλε πέτρα")   # "Silver"
    """

    def __init__(self, table: Dict[str, str], capitalize_fallback: bool = False):
        """
        Args:
            table: Lower-case color text -> marketplace color, in match order
            capitalize_fallback: Capitalize unmapped values (English feeds)
        """
        self.table = {key.lower().strip(): value for key, value in table.items()}
        self.capitalize_fallback = capitalize_fallback

    @classmethod
    def english(cls) -> "ColorMapper":
        """Mapper for Google Shopping and Meta."""
        return cls(load_color_tables()['english'], capitalize_fallback=True)

    @classmethod
    def greek(cls) -> "ColorMapper":
        """Mapper for GLAMI and BestPrice."""
        return cls(load_color_tables()['greek'])

    def is_known(self, value: Optional[str]) -> bool:
        """True if value is an exact table entry."""
        return bool(value) and value.lower().strip() in self.table

    def translate(self, raw: Optional[str]) -> Optional[str]:
        """Map raw color text, or None when it is not a usable color."""
        if not raw:
            return None
        normalized = raw.lower().strip()
        if not normalized:
            return None

        if normalized in self.table:
            return self.table[normalized]

        if (_DIGIT_RE.search(normalized)
                or len(normalized) > MAX_COLOR_LENGTH
                or REPLACEMENT_CHAR in normalized):
            return None

        for key, value in self.table.items():
            if key in normalized:
                return value

        original = raw.strip()
        if self.capitalize_fallback:
            return original[:1].upper() + original[1:]
        return original


def extract_variant_color(
    selected_options: List[SelectedOption],
    mapper: Optional[ColorMapper] = None,
) -> Optional[str]:
    """
    Return the raw color value of a variant.

    The option whose name contains χρώμα/color/colour wins. Otherwise, if the
    variant has a single option and its value is an exact color in the
    mapper's table, that value is used.
    """
    if not selected_options:
        return None

    for opt in selected_options:
        name = (opt.name or "").lower()
        if any(word in name for word in COLOR_OPTION_NAMES):
            return opt.value

    if mapper is not None and len(selected_options) == 1:
        value = selected_options[0].value
        if mapper.is_known(value):
            return value

    return None
