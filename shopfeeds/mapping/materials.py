"""
Jewelry material mapping.

The jewelry-material metafield holds semicolon separated handles
("sterling-silver; gold-1"). Each feed translates them through its own
table, de-duplicates, and joins with its own separator.
"""

from typing import Any, Dict, Optional

from ..common.config_loader import load_material_tables

GID_MARKER = "gid://shopify/"


class MaterialMapper:
    """
    Translates a material metafield value for one feed.

    Usage:
        mapper = MaterialMapper.for_feed('google')
        mapper.translate("sterling-silver; gold-1")   # "Sterling Silver/Gold"
        mapper.translate(None)                        # "Sterling Silver"
    """

    def __init__(
        self,
        translations: Dict[str, str],
        default: str,
        separator: str = "/",
        keep_unknown: bool = False,
    ):
        self.translations = {k.lower().strip(): v for k, v in translations.items()}
        self.default = default
        self.separator = separator
        self.keep_unknown = keep_unknown

    @classmethod
    def from_config(cls, table: Dict[str, Any]) -> "MaterialMapper":
        return cls(
            translations=table.get('translations') or {},
            default=table['default'],
            separator=table.get('separator', '/'),
            keep_unknown=bool(table.get('keep_unknown', False)),
        )

    @classmethod
    def for_feed(cls, feed: str) -> "MaterialMapper":
        """Load the mapper for 'google', 'meta' or 'glami' from materials.yaml."""
        tables = load_material_tables()
        if feed not in tables:
            raise KeyError(f"No material table '{feed}' in materials.yaml")
        return cls.from_config(tables[feed])

    def translate(self, value: Optional[str]) -> Optional[str]:
        """
        Translate a metafield value.

        Returns:
            The joined material names, the default when the value is empty
            or nothing maps, or None for metaobject references (GIDs) when
            unknown values are kept (they cannot be shown as text).
        """
        if not value:
            return self.default
        if self.keep_unknown and GID_MARKER in value:
            return None

        translated = []
        for part in value.split(';'):
            material = part.strip().lower()
            if not material:
                continue
            name = self.translations.get(material)
            if name is None and self.keep_unknown:
                name = material
            if name and name not in translated:
                translated.append(name)

        return self.separator.join(translated) if translated else self.default
