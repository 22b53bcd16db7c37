"""
Google Shopping market definitions.

A market is one country storefront: the domain (and optional path) the
product links point to, the currency prices are shown in and the locale
used for translated titles and descriptions.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Market:
    """A country storefront for the Google Shopping feeds."""
    code: str
    country: str
    language: str
    currency: str
    locale: str
    domain: str
    path: str = ""
    priority: int = 1
    name: str = ""

    @property
    def base_url(self) -> str:
        return f"https://{self.domain}{self.path}"

    def product_url(self, handle: str, variant_id: str) -> str:
        return f"{self.base_url}/products/{handle}?variant={variant_id}"

    @classmethod
    def from_config(cls, code: str, data: Dict[str, Any]) -> "Market":
        """Build a market from its markets.yaml entry."""
        return cls(
            code=code,
            country=data.get("country", code),
            language=data["language"],
            currency=data["currency"],
            locale=data["locale"],
            domain=data["domain"],
            path=data.get("path", "") or "",
            priority=int(data.get("priority", 1)),
            name=data.get("name", code),
        )
