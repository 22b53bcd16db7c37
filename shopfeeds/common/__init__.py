# Common utilities
from .config_loader import (
    load_category_tables,
    load_color_tables,
    load_config,
    load_feed_settings,
    load_market_config,
    load_material_tables,
    load_store_settings,
)
from .log_config import setup_logging
from .text_utils import cdata, escape_xml, format_amount, format_number, strip_html
