"""
Marketplace feed generation.

Modules:
    xml_builder - indented XML line builder
    base - FeedGenerator loop, FeedStats, FeedResult
    google - Google Shopping (per market)
    meta - Meta catalog (Greece)
    glami - GLAMI (Greece)
    bestprice - BestPrice (Greece)
    local_inventory - Google local inventory (physical store)
    writer - canonical + dated file output
    pipeline - fetch -> render -> write orchestration
"""

from .base import FeedGenerator, FeedResult, FeedStats
from .bestprice import BestPriceFeed
from .glami import GlamiFeed
from .google import GoogleShoppingFeed, load_markets
from .local_inventory import LocalInventoryFeed
from .meta import MetaFeed
from .pipeline import EmptyCatalogError, FeedOutput, FeedPipeline
from .writer import FeedWriter
from .xml_builder import XmlBuilder

__all__ = [
    'FeedGenerator',
    'FeedResult',
    'FeedStats',
    'BestPriceFeed',
    'GlamiFeed',
    'GoogleShoppingFeed',
    'load_markets',
    'LocalInventoryFeed',
    'MetaFeed',
    'EmptyCatalogError',
    'FeedOutput',
    'FeedPipeline',
    'FeedWriter',
    'XmlBuilder',
]
