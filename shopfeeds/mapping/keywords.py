"""
Ordered keyword matching.

Every category-style lookup in the feeds (Google taxonomy ids, BestPrice
and GLAMI category paths, product type labels) is the same routine:

1. Normalize the input (lower-case, trimmed)
2. Exact table lookup
3. Ordered rules: the first rule whose keywords are ALL substrings wins
4. Default

Rule order matters: "earring" contains "ring", so earring rules must come
before ring rules.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class KeywordRule:
    """Matches when every keyword is a substring of the normalized text."""
    keywords: Tuple[str, ...]
    value: Any

    def matches(self, text: str) -> bool:
        return all(kw in text for kw in self.keywords)


@dataclass
class KeywordMatcher:
    """
    Exact table + ordered keyword rules + default.

    Usage:
        matcher = KeywordMatcher.from_config(load_category_tables()['bestprice'])
        matcher.match("Γυναικεία Δαχτυλίδια")
        # Returns: "Κοσμήματα->Δαχτυλίδια->Γυναικεία δαχτυλίδια"
    """
    default: Any
    exact: Dict[str, Any] = field(default_factory=dict)
    rules: List[KeywordRule] = field(default_factory=list)

    @staticmethod
    def normalize(text: Optional[str]) -> str:
        return (text or "").lower().strip()

    def match(self, text: Optional[str]) -> Any:
        """Return the mapped value for text, or the default."""
        normalized = self.normalize(text)
        if not normalized:
            return self.default

        if normalized in self.exact:
            return self.exact[normalized]

        for rule in self.rules:
            if rule.matches(normalized):
                return rule.value

        return self.default

    def is_mapped(self, text: Optional[str]) -> bool:
        """True if text resolves through the exact table or a rule."""
        normalized = self.normalize(text)
        if not normalized:
            return False
        return normalized in self.exact or any(r.matches(normalized) for r in self.rules)

    @classmethod
    def from_config(cls, table: Dict[str, Any]) -> "KeywordMatcher":
        """
        Build a matcher from a categories.yaml table.

        Example table:
            {
                'default': 'Κοσμήματα',
                'exact': {'καρφίτσες': 'Κοσμήματα->Καρφίτσες'},
                'rules': [{'keywords': ['καρφίτσ'], 'category': 'Κοσμήματα->Καρφίτσες'}],
            }
        """
        exact = {
            cls.normalize(key): value
            for key, value in (table.get("exact") or {}).items()
        }
        rules = [
            KeywordRule(
                keywords=tuple(cls.normalize(kw) for kw in rule["keywords"]),
                value=rule["category"],
            )
            for rule in table.get("rules") or []
        ]
        return cls(default=table.get("default"), exact=exact, rules=rules)
