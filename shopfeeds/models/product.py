"""
Catalog data models.

Pure data classes for the Shopify products, variants and images the feeds
are built from. No business logic beyond trivial derived properties.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ProductImage:
    """Product image (numeric id + CDN url)."""
    id: str
    src: str


@dataclass
class SelectedOption:
    """One option value chosen by a variant (e.g. Χρώμα = Ασημένιο)."""
    name: str
    value: str


@dataclass
class OptionValue:
    """A product option value; `gid` is needed for translation lookups."""
    id: str
    gid: str
    name: str


@dataclass
class ProductOption:
    """A product option (e.g. Μέγεθος) with its possible values."""
    id: str
    gid: str
    name: str
    values: List[OptionValue] = field(default_factory=list)


@dataclass
class Variant:
    """
    A purchasable SKU of a product.

    Prices are kept as the decimal strings the API returns; feeds format
    them per marketplace. Weight is normalized to whole grams.
    """
    id: str
    gid: str = ""
    sku: str = ""
    price: str = "0.00"
    compare_at_price: Optional[str] = None
    inventory_quantity: int = 0
    barcode: str = ""
    image_id: Optional[str] = None
    selected_options: List[SelectedOption] = field(default_factory=list)
    weight_grams: Optional[int] = None

    @property
    def title(self) -> str:
        """Option values joined like Shopify's variant title ("Ασημένιο / 54")."""
        return " / ".join(opt.value for opt in self.selected_options)

    @property
    def in_stock(self) -> bool:
        return self.inventory_quantity > 0


@dataclass
class ProductMetafields:
    """Metafields used for feed attributes (all optional)."""
    gender: Optional[str] = None
    age_group: str = "adult"
    color: Optional[str] = None
    material: Optional[str] = None
    material_gs: Optional[str] = None   # mm-google-shopping.material (plain text)


@dataclass
class Product:
    """
    An active Shopify product with its images, options and variants.

    `id` is the numeric tail of the GID; `gid` is kept for translation
    queries.
    """
    id: str
    gid: str
    title: str
    handle: str
    body_html: str = ""
    product_type: str = ""
    vendor: str = ""
    tags: List[str] = field(default_factory=list)
    metafields: ProductMetafields = field(default_factory=ProductMetafields)
    images: List[ProductImage] = field(default_factory=list)
    options: List[ProductOption] = field(default_factory=list)
    variants: List[Variant] = field(default_factory=list)

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.id:
            raise ValueError("Product id is required")

    @property
    def main_image(self) -> str:
        return self.images[0].src if self.images else ""

    def image_src(self, image_id: Optional[str]) -> str:
        """Return the url of the given image, falling back to the main image."""
        if image_id:
            for image in self.images:
                if image.id == image_id:
                    return image.src
        return self.main_image


@dataclass
class ShippingRate:
    """Cheapest active flat shipping rate for one country."""
    price: float
    currency: str


@dataclass
class Translations:
    """
    Storefront translations for one locale.

    products:      {product_id: {"title": ..., "body_html": ..., "handle": ...}}
    option_values: {original option value: translated value}
    """
    products: Dict[str, Dict[str, str]] = field(default_factory=dict)
    option_values: Dict[str, str] = field(default_factory=dict)

    def for_product(self, product_id: str) -> Dict[str, str]:
        return self.products.get(product_id, {})

    def option_value(self, value: str) -> str:
        return self.option_values.get(value, value)
